from webrequest.utils.url import build_query_url


def test_build_query_url_appends_params():
    assert build_query_url("https://api.example.com/search", {"q": "tea pot", "page": 2}) == (
        "https://api.example.com/search?q=tea+pot&page=2"
    )


def test_build_query_url_keeps_existing_query():
    url = build_query_url("https://api.example.com/search?lang=en", {"q": "x"})

    assert url == "https://api.example.com/search?lang=en&q=x"


def test_build_query_url_drops_none_and_formats_bools():
    url = build_query_url("https://api.example.com/items", {"archived": False, "owner": None})

    assert url == "https://api.example.com/items?archived=false"


def test_build_query_url_without_params():
    assert build_query_url("https://api.example.com/items") == "https://api.example.com/items"
