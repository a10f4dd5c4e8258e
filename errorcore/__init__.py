"""
errorcore

Shared error taxonomy, structured exceptions and error-to-response
translation for service modules. Public names are exported lazily so that
importing the package does not pull in FastAPI or the logging setup.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Tuple

__version__ = "1.0.0"

_LAZY_IMPORTS: Dict[str, Tuple[str, str]] = {
    # Error codes
    "ErrorCode": ("errorcore.errors.error_codes", "ErrorCode"),
    "CommonErrorCode": ("errorcore.errors.error_codes", "CommonErrorCode"),
    "SecurityErrorCode": ("errorcore.errors.error_codes", "SecurityErrorCode"),
    "ErrorCatalog": ("errorcore.errors.error_codes", "ErrorCatalog"),
    "get_catalog": ("errorcore.errors.error_codes", "get_catalog"),
    "lookup": ("errorcore.errors.error_codes", "lookup"),
    "status_of": ("errorcore.errors.error_codes", "status_of"),
    # Exceptions
    "StructuredError": ("errorcore.errors.exceptions", "StructuredError"),
    "FunctionalError": ("errorcore.errors.exceptions", "FunctionalError"),
    "TechnicalError": ("errorcore.errors.exceptions", "TechnicalError"),
    "SecurityError": ("errorcore.errors.exceptions", "SecurityError"),
    "ErrorBuilder": ("errorcore.errors.exceptions", "ErrorBuilder"),
    # Validation
    "FieldViolation": ("errorcore.errors.validation", "FieldViolation"),
    "ValidationFailure": ("errorcore.errors.validation", "ValidationFailure"),
    # Translation
    "ErrorKind": ("errorcore.errors.translator", "ErrorKind"),
    "ErrorTranslator": ("errorcore.errors.translator", "ErrorTranslator"),
    "classify": ("errorcore.errors.translator", "classify"),
    "translate": ("errorcore.errors.translator", "translate"),
    # Responses
    "ErrorBody": ("errorcore.api.schemas.responses", "ErrorBody"),
    "ErrorResponse": ("errorcore.api.schemas.responses", "ErrorResponse"),
}

__all__ = sorted(_LAZY_IMPORTS)


def __getattr__(name: str) -> Any:
    """Dynamically import requested attributes on first access."""

    try:
        module_name, attr_name = _LAZY_IMPORTS[name]
    except KeyError as exc:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}") from exc

    module = import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    """Return sorted attributes for IDE support."""

    return sorted(__all__)
