"""
Translation of raised errors into the failure response envelope.

The translator is the single place where an error becomes a client-visible
shape. Whatever propagated to the system boundary is classified into exactly
one of three kinds, checked in fixed priority order:

1. `ErrorKind.STRUCTURED`: a `StructuredError`; its code, message, status and
   context are exposed as-is.
2. `ErrorKind.VALIDATION`: a `ValidationFailure`; rendered with the catalog's
   validation code and the per-field violation map.
3. `ErrorKind.OTHER`: anything else; rendered as a generic internal failure
   that reveals nothing about the original error.

Translation is a pure function of its input: it never logs, never mutates the
error, and keeps no state between calls.
"""

import uuid
from enum import Enum
from functools import lru_cache
from typing import Optional

from errorcore.api.schemas.responses import ErrorBody, ErrorResponse
from errorcore.core.config import get_settings
from errorcore.errors.error_codes import CommonErrorCode, ErrorCatalog, ErrorCode, get_catalog
from errorcore.errors.exceptions import StructuredError
from errorcore.errors.validation import ValidationFailure

VALIDATION_FAILED_MESSAGE = "Validation failed"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


class ErrorKind(str, Enum):
    """The three shapes a raised error can be translated from."""

    STRUCTURED = "structured"
    VALIDATION = "validation"
    OTHER = "other"


def classify(raised: BaseException) -> ErrorKind:
    """Determines how a raised error is translated.

    A `StructuredError` always wins, even when it carries the validation code.
    """
    if isinstance(raised, StructuredError):
        return ErrorKind.STRUCTURED
    if isinstance(raised, ValidationFailure):
        return ErrorKind.VALIDATION
    return ErrorKind.OTHER


class ErrorTranslator:
    """Maps any raised error onto an `ErrorResponse`.

    Attributes:
        include_error_id: Whether the correlation id is exposed in the envelope.
        validation_code: The code used for `ValidationFailure` bundles.
        internal_code: The code used for unrecognized errors.
    """

    def __init__(self, include_error_id: bool = True, catalog: Optional[ErrorCatalog] = None):
        """Initializes the translator.

        Args:
            include_error_id: Expose the correlation id as ``error.errorId``.
            catalog: The catalog providing the validation and internal failure
                codes. Defaults to the process-wide catalog.
        """
        if catalog is None:
            catalog = get_catalog()
        self.include_error_id = include_error_id
        self.validation_code: ErrorCode = catalog.lookup(CommonErrorCode.VALIDATION_ERROR.code)
        self.internal_code: ErrorCode = catalog.lookup(CommonErrorCode.INTERNAL_ERROR.code)

    def translate(self, raised: BaseException) -> ErrorResponse:
        """Translates a raised error into a failure response.

        Args:
            raised: The error that reached the boundary.

        Returns:
            A new `ErrorResponse`.
        """
        kind = classify(raised)
        if kind is ErrorKind.STRUCTURED:
            return self._from_structured(raised)
        if kind is ErrorKind.VALIDATION:
            return self._from_validation(raised)
        return self._from_unexpected()

    def _from_structured(self, error: StructuredError) -> ErrorResponse:
        return self._envelope(
            error.error_code,
            error.message,
            dict(error.context) or None,
            error.error_id,
        )

    def _from_validation(self, failure: ValidationFailure) -> ErrorResponse:
        return self._envelope(
            self.validation_code,
            VALIDATION_FAILED_MESSAGE,
            failure.field_errors(),
            _new_correlation_id(),
        )

    def _from_unexpected(self) -> ErrorResponse:
        return self._envelope(
            self.internal_code,
            UNEXPECTED_ERROR_MESSAGE,
            None,
            _new_correlation_id(),
        )

    def _envelope(
        self, error_code: ErrorCode, message: str, details: Optional[dict], correlation_id: str
    ) -> ErrorResponse:
        return ErrorResponse(
            error=ErrorBody(
                code=error_code.code,
                message=message,
                details=details,
                error_id=correlation_id if self.include_error_id else None,
            ),
            status_code=error_code.http_status,
            correlation_id=correlation_id,
        )


def _new_correlation_id() -> str:
    return str(uuid.uuid4())


@lru_cache(maxsize=None)
def get_translator() -> ErrorTranslator:
    """Returns the translator configured from the application settings."""
    return ErrorTranslator(include_error_id=get_settings().include_error_id)


def translate(raised: BaseException) -> ErrorResponse:
    """Translates a raised error with the configured translator."""
    return get_translator().translate(raised)
