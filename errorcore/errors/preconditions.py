"""
Guard helpers for validating arguments and state at the failure site.

Each helper raises a `FunctionalError` carrying the given error code when its
check fails, and otherwise returns the checked value so guards can be used
inline:

    user = require_found(repository.get(user_id), "User %s not found" % user_id)
"""

from typing import Callable, Optional, Sized, TypeVar, Union

from errorcore.errors.error_codes import CommonErrorCode, ErrorCode
from errorcore.errors.exceptions import FunctionalError

T = TypeVar("T")
S = TypeVar("S", bound=Sized)

Message = Union[str, Callable[[], str]]


def require_not_none(
    obj: Optional[T], message: str, error_code: ErrorCode = CommonErrorCode.VALIDATION_ERROR
) -> T:
    """Ensures that a value is not `None`."""
    if obj is None:
        raise FunctionalError(error_code, message)
    return obj


def require_not_blank(
    text: Optional[str], message: str, error_code: ErrorCode = CommonErrorCode.VALIDATION_ERROR
) -> str:
    """Ensures that a string is neither `None` nor whitespace only."""
    if text is None or not text.strip():
        raise FunctionalError(error_code, message)
    return text


def require_not_empty(
    collection: Optional[S], message: str, error_code: ErrorCode = CommonErrorCode.VALIDATION_ERROR
) -> S:
    """Ensures that a collection is neither `None` nor empty."""
    if collection is None or len(collection) == 0:
        raise FunctionalError(error_code, message)
    return collection


def require(
    condition: bool, message: Message, error_code: ErrorCode = CommonErrorCode.VALIDATION_ERROR
) -> None:
    """Ensures that a condition holds.

    Args:
        condition: The condition to check.
        message: The error message, or a zero-argument callable producing it.
            A callable is only invoked when the condition fails.
        error_code: The code of the raised error.

    Raises:
        FunctionalError: If the condition is false.
    """
    if not condition:
        raise FunctionalError(error_code, message() if callable(message) else message)


def require_found(
    obj: Optional[T], message: str, error_code: ErrorCode = CommonErrorCode.NOT_FOUND
) -> T:
    """Ensures that a looked-up resource exists."""
    if obj is None:
        raise FunctionalError(error_code, message)
    return obj
