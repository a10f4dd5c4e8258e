"""
FastAPI exception handlers for the error core.

Every failure that escapes a route is translated into an `ErrorResponse`,
handed to the logging collaborator, and returned with the HTTP status bound
to the error code. Framework HTTP errors (unknown routes, disallowed methods,
raised `HTTPException`s) keep their own status and headers but use the same
envelope. No stack traces or internal details reach the client.
"""

from typing import Mapping, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from errorcore.api.schemas.responses import ErrorResponse
from errorcore.core.logging import get_logger, log_translated_error
from errorcore.errors.error_codes import CommonErrorCode, ErrorCode
from errorcore.errors.exceptions import FunctionalError, StructuredError, TechnicalError
from errorcore.errors.translator import ErrorTranslator, get_translator
from errorcore.errors.validation import ValidationFailure

logger = get_logger(__name__)

_HTTP_STATUS_CODES = {
    401: CommonErrorCode.UNAUTHORIZED,
    403: CommonErrorCode.FORBIDDEN,
    404: CommonErrorCode.NOT_FOUND,
}


def to_json_response(
    response: ErrorResponse, headers: Optional[Mapping[str, str]] = None
) -> JSONResponse:
    """Serializes an `ErrorResponse` with its resolved status code.

    Args:
        response: The translated failure.
        headers: Extra response headers, such as `Allow` on a 405.

    Returns:
        The JSON response to send.
    """
    headers = dict(headers or {})
    if response.status_code == 401:
        headers.setdefault("WWW-Authenticate", "Bearer")
    return JSONResponse(
        status_code=response.status_code,
        content=jsonable_encoder(response.to_payload()),
        headers=headers or None,
    )


def http_error_code(status_code: int) -> ErrorCode:
    """Returns the catalog code used for a framework HTTP error status."""
    if status_code >= 500:
        return CommonErrorCode.INTERNAL_ERROR
    return _HTTP_STATUS_CODES.get(status_code, CommonErrorCode.BAD_REQUEST)


def register_error_handlers(app: FastAPI, translator: Optional[ErrorTranslator] = None) -> None:
    """Register the error handlers on a FastAPI application.

    Args:
        app: The FastAPI application instance.
        translator: The translator to use. Defaults to the one configured from
            the application settings.
    """
    translator = translator or get_translator()

    def _respond(exc: BaseException) -> JSONResponse:
        response = translator.translate(exc)
        log_translated_error(logger, exc, response)
        return to_json_response(response)

    @app.exception_handler(StructuredError)
    async def handle_structured_error(_request: Request, exc: StructuredError) -> JSONResponse:
        """Handle errors raised through the error taxonomy."""
        return _respond(exc)

    @app.exception_handler(ValidationFailure)
    async def handle_validation_failure(
        _request: Request, exc: ValidationFailure
    ) -> JSONResponse:
        """Handle field-keyed validation failures raised by application code."""
        return _respond(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle request bodies and parameters rejected by FastAPI."""
        failure = ValidationFailure.from_errors(exc.errors())
        failure.__cause__ = exc
        return _respond(failure)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle unknown routes, disallowed methods and raised `HTTPException`s.

        The status of the exception is kept, while the body is the standard
        envelope with the closest catalog code.
        """
        if exc.status_code < 400:
            return await http_exception_handler(request, exc)
        error_code = http_error_code(exc.status_code)
        if exc.status_code >= 500:
            structured = TechnicalError(error_code, cause=exc)
        else:
            message = exc.detail if isinstance(exc.detail, str) else None
            structured = FunctionalError(error_code, message=message, cause=exc)
        response = translator.translate(structured).model_copy(
            update={"status_code": exc.status_code}
        )
        log_translated_error(logger, structured, response)
        return to_json_response(response, headers=exc.headers)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        return _respond(exc)
