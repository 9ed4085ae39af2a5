from typing import Any, Callable, List, Optional

import httpx
import pytest
from webrequest.core.options import RequestOptions

WEBREQUEST_ENV_VARS = [
    "WEBREQUEST_DEFAULT_TIMEOUT",
    "WEBREQUEST_MAX_REDIRECTS",
    "WEBREQUEST_USER_AGENT",
    "WEBREQUEST_PROXY",
    "LOG_LEVEL",
]

TEST_URL = "https://api.test-backend.com/v1/items"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """AUTOUSE: Removes webrequest settings from the environment so every test sees the defaults."""
    for name in WEBREQUEST_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class RecordingTransport(httpx.MockTransport):
    """An httpx MockTransport that records every request and replies with a canned response.

    Pass ``handler`` to build the response yourself, or ``status_code`` plus any
    ``httpx.Response`` keyword arguments for a fixed reply.
    """

    def __init__(
        self,
        status_code: int = 200,
        handler: Optional[Callable[[httpx.Request], Any]] = None,
        **response_kwargs: Any,
    ) -> None:
        self.requests: List[httpx.Request] = []
        self.status_code = status_code
        self.response_kwargs = response_kwargs
        self.handler_override = handler
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request):
        self.requests.append(request)
        if self.handler_override is not None:
            return self.handler_override(request)
        return httpx.Response(self.status_code, **self.response_kwargs)

    @property
    def last_request(self) -> httpx.Request:
        assert self.requests, "No request was sent"
        return self.requests[-1]


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    """Provides a factory for RecordingTransport instances."""
    return RecordingTransport


@pytest.fixture
def make_options() -> Callable[..., RequestOptions]:
    """Provides a factory for RequestOptions bound to a mock transport."""

    def _make(transport: httpx.AsyncBaseTransport, **kwargs: Any) -> RequestOptions:
        return RequestOptions(transport=transport, **kwargs)

    return _make


@pytest.fixture
def test_url() -> str:
    return TEST_URL
