"""Client-side HTTP transaction layer built on httpx."""

__version__ = "0.1.0"

from webrequest.auth import basic_authentication, bearer_token
from webrequest.core.certificate import (
    AcceptAllCertificateValidator,
    CertificateValidator,
    PinnedCertificateValidator,
)
from webrequest.core.download_handler import DownloadHandler, DownloadHandlerBuffer, DownloadHandlerFile
from webrequest.core.logging import setup_logging
from webrequest.core.multipart import MultipartFormDataSection, MultipartFormFileSection, MultipartFormSection
from webrequest.core.options import MaterializationMode, RequestOptions
from webrequest.core.response import Response
from webrequest.exceptions import ResourceReleasedError, TransactionError, WebRequestError
from webrequest.rest import delete, get, post, post_bytes, post_form, post_json, post_multipart, put_bytes, put_json
from webrequest.utils.url import build_query_url

__all__ = [
    "AcceptAllCertificateValidator",
    "CertificateValidator",
    "DownloadHandler",
    "DownloadHandlerBuffer",
    "DownloadHandlerFile",
    "MaterializationMode",
    "MultipartFormDataSection",
    "MultipartFormFileSection",
    "MultipartFormSection",
    "PinnedCertificateValidator",
    "RequestOptions",
    "ResourceReleasedError",
    "Response",
    "TransactionError",
    "WebRequestError",
    "basic_authentication",
    "bearer_token",
    "build_query_url",
    "delete",
    "get",
    "post",
    "post_bytes",
    "post_form",
    "post_json",
    "post_multipart",
    "put_bytes",
    "put_json",
    "setup_logging",
]
