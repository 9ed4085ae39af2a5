# WebRequest Exceptions

from typing import List, Optional, Sequence, Tuple

ERROR_PREFIX = "REST Error"


class WebRequestError(Exception):
    """Base exception for all webrequest errors."""

    pass


class ResourceReleasedError(WebRequestError):
    """Raised when a request, download handler or certificate validator is used after release."""

    pass


class CertificateRejectedError(WebRequestError):
    """Raised internally when a certificate validator rejects the peer certificate."""

    pass


class TransactionError(WebRequestError):
    """Raised instead of returning a Response when a transaction fails.

    Covers both connection-level faults (no usable HTTP response) and
    protocol-level errors (4xx/5xx status).

    Attributes:
        response_code: The received HTTP status, or 0 if no response was received.
        body: The response body text, or the transport fault description for
            connection-level faults.
        headers: Every received response header as ``(name, value)`` pairs, in order.
        connection_error: True when the transaction failed at the connection level.
    """

    def __init__(
        self,
        response_code: int,
        body: Optional[str] = None,
        headers: Optional[Sequence[Tuple[str, str]]] = None,
        connection_error: bool = False,
    ):
        self.response_code = response_code
        self.body = body
        self.headers: List[Tuple[str, str]] = list(headers or [])
        self.connection_error = connection_error
        super().__init__(self.format_message(response_code, body, self.headers))

    @staticmethod
    def format_message(response_code: int, body: Optional[str], headers: Sequence[Tuple[str, str]]) -> str:
        """Builds the diagnostic message: prefix, status code, body text, then one line per header."""
        header_lines = "".join(f"\n{name}: {value}" for name, value in headers)
        return f"{ERROR_PREFIX}: {response_code}\n{body or ''}{header_lines}"
