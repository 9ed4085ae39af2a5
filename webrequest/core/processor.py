"""The request-processing pipeline shared by every verb."""

import logging

from webrequest.core.logging import log_transaction_state
from webrequest.core.options import MaterializationMode, RequestOptions
from webrequest.core.response import Response
from webrequest.core.web_request import TransactionResult, WebRequest
from webrequest.exceptions import TransactionError
from webrequest.utils.logging_utils import sanitize_headers

logger = logging.getLogger(__name__)

# Methods whose Content-Type gets quote characters stripped before sending.
CONTENT_TYPE_NORMALIZED_METHODS = frozenset({"POST", "PUT"})


def normalize_content_type(web_request: WebRequest) -> None:
    """Strips literal double quotes from a POST/PUT Content-Type header.

    Some form encoders wrap the multipart boundary in quotes, which servers
    reject. The header is rewritten even when the caller supplied it.
    """
    if web_request.method not in CONTENT_TYPE_NORMALIZED_METHODS:
        return
    content_type = web_request.get_header("Content-Type")
    if content_type is not None:
        web_request.set_header("Content-Type", content_type.replace('"', ""))


def build_transaction_error(web_request: WebRequest) -> TransactionError:
    """Builds the error for a failed transaction from whatever was received."""
    if web_request.result == TransactionResult.CONNECTION_ERROR:
        return TransactionError(
            web_request.response_code,
            body=str(web_request.error) or type(web_request.error).__name__,
            headers=web_request.response_headers,
            connection_error=True,
        )
    return TransactionError(
        web_request.response_code,
        body=web_request.download_handler.text,
        headers=web_request.response_headers,
    )


def materialize_response(web_request: WebRequest, mode: MaterializationMode) -> Response:
    """Builds the Response for a successful transaction according to ``mode``."""
    code = web_request.response_code
    handler = web_request.download_handler

    if mode == MaterializationMode.TEXT:
        return Response(success=True, response_code=code, text_body=handler.text)
    if mode == MaterializationMode.BINARY:
        return Response(success=True, response_code=code, binary_body=handler.data)
    if mode == MaterializationMode.BOTH:
        return Response(success=True, response_code=code, text_body=handler.text, binary_body=handler.data)

    # Lazy: the handler outlives the request and is read when a producer is invoked.
    handler = web_request.detach_download_handler()
    return Response(
        success=True,
        response_code=code,
        text_body=lambda: handler.text,
        binary_body=lambda: handler.data,
    )


async def process_request(web_request: WebRequest, options: RequestOptions) -> Response:
    """Applies the shared options, executes the request once and classifies the outcome.

    Args:
        web_request: A request built by the dispatcher, not yet sent.
        options: Caller-supplied options.

    Returns:
        The materialized Response for a successful transaction.

    Raises:
        TransactionError: If the transaction failed at the connection level or the
            server returned a 4xx/5xx status.
    """
    transaction_id = web_request.transaction_id
    try:
        async with web_request:
            if options.timeout_seconds > 0:
                web_request.set_timeout(options.timeout_seconds)

            for name, value in options.headers.items():
                web_request.set_header(name, value)

            normalize_content_type(web_request)

            web_request.set_certificate_validator(options.certificate_validator, options.dispose_validator_after_use)
            web_request.transport = options.transport

            log_transaction_state(
                transaction_id,
                "prepared",
                {
                    "method": web_request.method,
                    "url": web_request.url,
                    "headers": sanitize_headers(web_request.header_items()),
                    "timeout": web_request.timeout,
                },
            )
            logger.info(f"Sending {web_request.method} request to {web_request.url} ({transaction_id})")

            result = await web_request.send()
            log_transaction_state(
                transaction_id, "sent", {"result": result.value, "response_code": web_request.response_code}
            )

            if result != TransactionResult.SUCCESS:
                error = build_transaction_error(web_request)
                logger.warning(
                    f"{web_request.method} {web_request.url} failed with {result.value} "
                    f"(status {web_request.response_code}) ({transaction_id})"
                )
                log_transaction_state(transaction_id, "failed", {"response_code": error.response_code})
                raise error from web_request.error

            response = materialize_response(web_request, options.materialization)
            logger.info(
                f"Received response with status {response.response_code} for "
                f"{web_request.method} {web_request.url} ({transaction_id})"
            )
            log_transaction_state(
                transaction_id, "completed", {"materialization": options.materialization.value}
            )
            return response
    finally:
        log_transaction_state(transaction_id, "released", {})
