from typing import Mapping, Optional, Union

import httpx

QueryValue = Union[str, int, float, bool, None]


def build_query_url(endpoint: str, params: Optional[Mapping[str, QueryValue]] = None) -> str:
    """Returns ``endpoint`` with ``params`` appended to any query it already has.

    Parameters whose value is None are dropped.
    """
    url = httpx.URL(endpoint)
    if not params:
        return str(url)
    merged = url.params
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        merged = merged.add(key, str(value))
    return str(url.copy_with(params=merged))
