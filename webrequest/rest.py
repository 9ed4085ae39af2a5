"""REST entry points for CRUD transactions.

Each coroutine builds a WebRequest for its verb and body type, then hands it to
the response processor, which applies the shared options, sends it, and returns
a Response or raises TransactionError.
"""

from enum import Enum
from typing import Dict, Mapping, Optional, Sequence

from webrequest.core.download_handler import DownloadHandler
from webrequest.core.multipart import MultipartFormSection
from webrequest.core.options import RequestOptions
from webrequest.core.processor import process_request
from webrequest.core.response import Response
from webrequest.core.web_request import WebRequest


class BodyKind(str, Enum):
    """The shape of a request body."""

    NONE = "none"
    FORM = "form"
    JSON = "json"
    BINARY = "binary"
    MULTIPART = "multipart"


# Multipart is absent: its Content-Type carries a transport-generated boundary.
CONTENT_TYPES: Dict[BodyKind, str] = {
    BodyKind.FORM: "application/x-www-form-urlencoded",
    BodyKind.JSON: "application/json",
    BodyKind.BINARY: "application/octet-stream",
}


def _with_content_type(web_request: WebRequest, kind: BodyKind) -> WebRequest:
    web_request.set_header("Content-Type", CONTENT_TYPES[kind])
    return web_request


def _resolve(options: Optional[RequestOptions]) -> RequestOptions:
    return options if options is not None else RequestOptions()


# --- GET ---


async def get(
    url: str,
    options: Optional[RequestOptions] = None,
    download_handler: Optional[DownloadHandler] = None,
) -> Response:
    """Rest GET.

    Args:
        url: Finalized endpoint URL, including query parameters.
        options: Shared request options.
        download_handler: Alternative sink for the response body, for example a
            DownloadHandlerFile. Defaults to an in-memory buffer.
    """
    web_request = WebRequest.get(url, download_handler=download_handler)
    return await process_request(web_request, _resolve(options))


# --- POST ---


async def post(url: str, options: Optional[RequestOptions] = None) -> Response:
    """Rest POST with an empty URL-encoded form body."""
    web_request = _with_content_type(WebRequest.post(url, content=b""), BodyKind.FORM)
    return await process_request(web_request, _resolve(options))


async def post_form(url: str, form: Mapping[str, str], options: Optional[RequestOptions] = None) -> Response:
    """Rest POST with a URL-encoded form body."""
    if form:
        web_request = WebRequest.post(url, form=form)
    else:
        web_request = _with_content_type(WebRequest.post(url, content=b""), BodyKind.FORM)
    return await process_request(web_request, _resolve(options))


async def post_json(url: str, json_data: str, options: Optional[RequestOptions] = None) -> Response:
    """Rest POST with a JSON string body.

    The string is sent as UTF-8 with ``Content-Type`` and ``Accept`` set to
    ``application/json``.
    """
    web_request = _with_content_type(WebRequest.post(url, content=json_data.encode("utf-8")), BodyKind.JSON)
    web_request.set_header("Accept", CONTENT_TYPES[BodyKind.JSON])
    return await process_request(web_request, _resolve(options))


async def post_bytes(url: str, body: bytes, options: Optional[RequestOptions] = None) -> Response:
    """Rest POST with a raw byte payload sent as ``application/octet-stream``."""
    web_request = _with_content_type(WebRequest.post(url, content=bytes(body)), BodyKind.BINARY)
    return await process_request(web_request, _resolve(options))


async def post_multipart(
    url: str, sections: Sequence[MultipartFormSection], options: Optional[RequestOptions] = None
) -> Response:
    """Rest POST with a multipart/form-data body.

    The Content-Type, including its boundary, is generated by the transport.
    """
    web_request = WebRequest.post(url, sections=sections)
    return await process_request(web_request, _resolve(options))


# --- PUT ---


async def put_json(url: str, json_data: str, options: Optional[RequestOptions] = None) -> Response:
    """Rest PUT with a JSON string body sent as UTF-8 ``application/json``."""
    web_request = _with_content_type(WebRequest.put(url, json_data.encode("utf-8")), BodyKind.JSON)
    return await process_request(web_request, _resolve(options))


async def put_bytes(url: str, body: bytes, options: Optional[RequestOptions] = None) -> Response:
    """Rest PUT with a raw byte payload sent as ``application/octet-stream``."""
    web_request = _with_content_type(WebRequest.put(url, bytes(body)), BodyKind.BINARY)
    return await process_request(web_request, _resolve(options))


# --- DELETE ---


async def delete(url: str, options: Optional[RequestOptions] = None) -> Response:
    """Rest DELETE."""
    web_request = WebRequest.delete(url)
    return await process_request(web_request, _resolve(options))
