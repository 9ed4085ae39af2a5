"""A single outbound HTTP request and the transport resources it owns."""

import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
from uuid import UUID, uuid4

import httpx

from webrequest.core.certificate import CertificateValidator
from webrequest.core.download_handler import DownloadHandler, DownloadHandlerBuffer
from webrequest.core.multipart import MultipartFormSection, to_httpx_files
from webrequest.exceptions import CertificateRejectedError, ResourceReleasedError, WebRequestError
from webrequest.settings import Settings

logger = logging.getLogger(__name__)


class TransactionResult(str, Enum):
    """Terminal outcome of sending a WebRequest."""

    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    CONNECTION_ERROR = "connection_error"
    PROTOCOL_ERROR = "protocol_error"


class WebRequest:
    """An outbound request handle built on httpx.

    The ``httpx.Request`` is built at construction time, so headers generated from
    the body (Content-Type with a multipart boundary, Content-Length) can be read
    and adjusted before sending. Sending opens one ``httpx.AsyncClient`` for this
    request only; nothing is pooled or reused across requests.

    A WebRequest is sent at most once. All resources it holds (the client, the
    response stream, the upload body, the download handler and, if requested, the
    certificate validator) are released by ``aclose()``, which also runs on exit
    from ``async with``.

    Attributes:
        transaction_id: Correlation id used in log lines.
        download_handler: Sink receiving the response body.
        transport: Optional custom httpx transport.
        timeout: The explicitly applied timeout in seconds, or None for the transport default.
        result: Outcome of ``send()``.
        response_code: Received HTTP status, 0 after a connection-level fault.
        response_headers: Received response headers as ``(name, value)`` pairs.
        error: The transport exception behind a connection-level fault.
    """

    def __init__(
        self,
        method: str,
        url: str,
        *,
        content: Optional[bytes] = None,
        data: Optional[Mapping[str, str]] = None,
        files: Optional[List[Tuple[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None,
        download_handler: Optional[DownloadHandler] = None,
    ) -> None:
        self.transaction_id: UUID = uuid4()
        self._request: Optional[httpx.Request] = httpx.Request(
            method, url, content=content, data=data, files=files, headers=headers
        )
        self.download_handler: DownloadHandler = download_handler or DownloadHandlerBuffer()
        self.transport: Optional[httpx.AsyncBaseTransport] = None
        self.timeout: Optional[float] = None
        self.certificate_validator: Optional[CertificateValidator] = None
        self.dispose_certificate_validator: bool = False

        self.result = TransactionResult.IN_PROGRESS
        self.response_code: int = 0
        self.response_headers: List[Tuple[str, str]] = []
        self.error: Optional[Exception] = None

        self._client: Optional[httpx.AsyncClient] = None
        self._response: Optional[httpx.Response] = None
        self._sent = False
        self._released = False
        self._download_handler_detached = False

    # --- Factories ---

    @classmethod
    def get(cls, url: str, download_handler: Optional[DownloadHandler] = None) -> "WebRequest":
        return cls("GET", url, download_handler=download_handler)

    @classmethod
    def post(
        cls,
        url: str,
        *,
        content: Optional[bytes] = None,
        form: Optional[Mapping[str, str]] = None,
        sections: Optional[Sequence[MultipartFormSection]] = None,
    ) -> "WebRequest":
        """Builds a POST request from exactly one kind of body, or none."""
        if sum(body is not None for body in (content, form, sections)) > 1:
            raise ValueError("Only one of content, form or sections may be given")
        files = to_httpx_files(sections) if sections is not None else None
        return cls("POST", url, content=content, data=form, files=files)

    @classmethod
    def put(cls, url: str, content: bytes) -> "WebRequest":
        return cls("PUT", url, content=content)

    @classmethod
    def delete(cls, url: str) -> "WebRequest":
        return cls("DELETE", url)

    # --- Request configuration ---

    @property
    def request(self) -> httpx.Request:
        if self._released or self._request is None:
            raise ResourceReleasedError("WebRequest resources have already been released")
        return self._request

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def url(self) -> str:
        return str(self.request.url)

    @property
    def released(self) -> bool:
        return self._released

    @property
    def is_sent(self) -> bool:
        return self._sent

    def set_header(self, name: str, value: str) -> None:
        """Sets a request header, replacing any existing value case-insensitively."""
        self.request.headers[name] = value

    def get_header(self, name: str) -> Optional[str]:
        return self.request.headers.get(name)

    def header_items(self) -> List[Tuple[str, str]]:
        """Request headers as (name, value) pairs, with their original casing."""
        return _header_items(self.request.headers)

    def set_timeout(self, seconds: float) -> None:
        if seconds <= 0:
            raise ValueError("Timeout must be positive")
        self.timeout = seconds
        self.request.extensions["timeout"] = httpx.Timeout(seconds).as_dict()

    def set_certificate_validator(self, validator: Optional[CertificateValidator], dispose_on_close: bool) -> None:
        self.certificate_validator = validator
        self.dispose_certificate_validator = dispose_on_close

    def detach_download_handler(self) -> DownloadHandler:
        """Transfers ownership of the download handler to the caller; it survives ``aclose()``."""
        self._download_handler_detached = True
        return self.download_handler

    # --- Transaction ---

    async def send(self) -> TransactionResult:
        """Sends the request and receives the whole body into the download handler.

        Connection-level faults are recorded on the request rather than raised.
        Errors unrelated to the transport propagate.
        """
        request = self.request
        if self._sent:
            raise WebRequestError("WebRequest has already been sent")
        self._sent = True

        self._client = self._create_client()
        if "timeout" not in request.extensions:
            request.extensions["timeout"] = self._client.timeout.as_dict()

        try:
            self._response = await self._client.send(request, stream=True, follow_redirects=True)
            self.response_code = self._response.status_code
            self.response_headers = _header_items(self._response.headers)
            self._verify_peer_certificate(self._response)

            self.download_handler.prepare(self._response.charset_encoding)
            async for chunk in self._response.aiter_bytes():
                self.download_handler.receive_data(chunk)
            self.download_handler.complete()
        except (httpx.RequestError, CertificateRejectedError) as e:
            self.error = e
            self.result = TransactionResult.CONNECTION_ERROR
            self.response_code = 0
            self.download_handler.fail()
            return self.result

        self.result = TransactionResult.PROTOCOL_ERROR if self._response.is_error else TransactionResult.SUCCESS
        return self.result

    def _create_client(self) -> httpx.AsyncClient:
        settings = Settings()
        if "user-agent" not in self.request.headers:
            self.request.headers["User-Agent"] = settings.get_user_agent()

        client_kwargs: Dict[str, Any] = {
            "timeout": httpx.Timeout(settings.get_default_timeout()),
            "follow_redirects": True,
            "max_redirects": settings.get_max_redirects(),
        }
        if self.certificate_validator is not None:
            client_kwargs["verify"] = self.certificate_validator.create_ssl_context()
        if self.transport is not None:
            # A custom transport owns routing; environment proxies would bypass it.
            client_kwargs["transport"] = self.transport
            client_kwargs["trust_env"] = False
        else:
            proxy_url = settings.get_proxy_url()
            if proxy_url:
                client_kwargs["proxy"] = proxy_url
        return httpx.AsyncClient(**client_kwargs)

    def _verify_peer_certificate(self, response: httpx.Response) -> None:
        if self.certificate_validator is None:
            return
        network_stream = response.extensions.get("network_stream")
        if network_stream is None:
            return
        ssl_object = network_stream.get_extra_info("ssl_object")
        if ssl_object is None:
            return
        certificate = ssl_object.getpeercert(binary_form=True)
        if not certificate or not self.certificate_validator.check_certificate(certificate):
            raise CertificateRejectedError(f"Certificate for {response.url.host} was rejected by the validator")

    # --- Resource scope ---

    async def aclose(self) -> None:
        """Releases every resource owned by this request. Safe to call more than once."""
        if self._released:
            return
        self._released = True
        try:
            if self._response is not None:
                await self._response.aclose()
            if self._client is not None:
                await self._client.aclose()
        finally:
            if not self._download_handler_detached:
                self.download_handler.dispose()
            if self.certificate_validator is not None and self.dispose_certificate_validator:
                self.certificate_validator.dispose()
            self._response = None
            self._client = None
            self._request = None

    async def __aenter__(self) -> "WebRequest":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


def _header_items(headers: httpx.Headers) -> List[Tuple[str, str]]:
    return [(key.decode(headers.encoding), value.decode(headers.encoding)) for key, value in headers.raw]
