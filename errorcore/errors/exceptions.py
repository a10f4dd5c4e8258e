"""
Structured exception hierarchy shared by every service module.

Every error raised on purpose by application code is a `StructuredError`
built from an `ErrorCode`. The exception carries the resolved message, an
optional cause, diagnostic context, and an identifier and timestamp stamped
at construction time so that a user-visible report can be correlated with
server logs. Built exceptions are read-only: their public attributes cannot
be reassigned.

Three families are provided:
- `FunctionalError`: business rule violations and bad client input.
- `TechnicalError`: infrastructure or unexpected failures.
- `SecurityError`: rejections raised by authentication/authorization layers.
"""

import uuid
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Callable, Dict, Generic, Iterator, Mapping, Optional, Type, TypeVar

from errorcore.errors.error_codes import CommonErrorCode, ErrorCode

E = TypeVar("E", bound="StructuredError")

_READ_ONLY_FIELDS = frozenset(
    {"error_code", "message", "cause", "context", "error_id", "timestamp"}
)


class StructuredError(Exception):
    """The base class for all exceptions built from the error taxonomy.

    Attributes:
        error_code: The `ErrorCode` categorizing this error.
        message: The resolved, human-readable message.
        cause: The earlier error this one was raised from, if any.
        context: Read-only diagnostic key/value pairs, in insertion order.
        error_id: A unique identifier generated at construction.
        timestamp: The UTC wall-clock time of construction.
    """

    def __init__(
        self,
        error_code: ErrorCode,
        message: Optional[str] = None,
        cause: Optional[BaseException] = None,
        context: Optional[Mapping[str, Any]] = None,
    ):
        """Initializes the StructuredError.

        Args:
            error_code: The taxonomy entry for this error.
            message: The message to expose. Defaults to the code's default message.
            cause: An optional earlier error.
            context: Optional diagnostic data. It is copied, so later changes to
                the caller's mapping are not seen.
        """
        resolved = error_code.default_message if message is None else message
        entries = dict(context or {})
        _check_context_keys(entries)
        super().__init__(resolved)
        _assign = super().__setattr__
        _assign("error_code", error_code)
        _assign("message", resolved)
        _assign("cause", cause)
        _assign("context", MappingProxyType(entries))
        _assign("error_id", str(uuid.uuid4()))
        _assign("timestamp", datetime.now(timezone.utc))
        if cause is not None:
            self.__cause__ = cause

    def __reduce__(self):
        # Pickled and copied errors keep their original error_id and timestamp.
        state = {k: v for k, v in self.__dict__.items() if k not in _READ_ONLY_FIELDS}
        return (
            _rebuild,
            (
                type(self),
                self.error_code,
                self.message,
                self.cause,
                dict(self.context),
                self.error_id,
                self.timestamp,
            ),
            state,
        )

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _READ_ONLY_FIELDS:
            raise AttributeError(f"{type(self).__name__}.{name} is read-only")
        super().__setattr__(name, value)

    def __delattr__(self, name: str) -> None:
        if name in _READ_ONLY_FIELDS:
            raise AttributeError(f"{type(self).__name__}.{name} is read-only")
        super().__delattr__(name)

    @classmethod
    def builder(cls: Type[E], error_code: ErrorCode) -> "ErrorBuilder[E]":
        """Creates a builder for fluent construction of this exception type."""
        return ErrorBuilder(cls, error_code)

    @property
    def http_status(self) -> int:
        """The HTTP status associated with this exception's error code."""
        return self.error_code.http_status

    @property
    def code(self) -> str:
        return self.error_code.code

    def iter_causes(self) -> Iterator[BaseException]:
        """Walks the cause chain, nearest cause first.

        The walk follows `cause` on structured errors, falling back to
        `__cause__` so that `raise ... from ...` chains are included. It stops
        at the first error already seen.
        """
        seen = {id(self)}
        current = _direct_cause(self)
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            yield current
            current = _direct_cause(current)

    def to_log_string(self) -> str:
        """Returns a single-line diagnostic string for logging."""
        line = (
            f"[{self.error_code.code}] {self.error_code.default_message} - "
            f"{self.message} (errorId={self.error_id})"
        )
        cause = _direct_cause(self)
        if cause is not None:
            line += f"; caused by {_summarize(cause)}"
        return line

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self.error_code.code!r}, "
            f"message={self.message!r}, error_id={self.error_id!r})"
        )


class FunctionalError(StructuredError):
    """Raised when a business rule is violated or client input is rejected."""


class TechnicalError(StructuredError):
    """Raised for infrastructure failures and unexpected internal errors."""

    @classmethod
    def wrap(
        cls,
        cause: BaseException,
        error_code: ErrorCode = CommonErrorCode.INTERNAL_ERROR,
    ) -> "TechnicalError":
        """Wraps any exception as a `TechnicalError`.

        An exception that already is a `TechnicalError` is returned unchanged.
        Otherwise the new error uses the code's default message; the original
        text stays reachable through `cause` only.

        Args:
            cause: The exception to wrap.
            error_code: The code to assign to the wrapper.

        Returns:
            A `TechnicalError` whose cause is the given exception.
        """
        if isinstance(cause, TechnicalError):
            return cause
        return cls(error_code, cause=cause)


class SecurityError(StructuredError):
    """Raised when an authentication or authorization check rejects a caller."""


class ErrorBuilder(Generic[E]):
    """Fluent builder assembling a `StructuredError` subclass.

    The builder is mutable construction state owned by a single caller; the
    exceptions it produces are not. Each call to `build` produces a new
    exception with a fresh identifier and timestamp.
    """

    def __init__(self, error_class: Type[E], error_code: ErrorCode):
        self._error_class = error_class
        self._error_code = error_code
        self._message: str = error_code.default_message
        self._message_supplier: Optional[Callable[[], str]] = None
        self._cause: Optional[BaseException] = None
        self._context: Dict[str, Any] = {}

    def message(self, text: str, *args: Any) -> "ErrorBuilder[E]":
        """Sets the message, applying printf-style `args` immediately.

        Example:
            ``builder.message("User with id %s not found", 123)``
        """
        self._message = text % args if args else text
        self._message_supplier = None
        return self

    def message_from(self, supplier: Callable[[], str]) -> "ErrorBuilder[E]":
        """Sets a deferred message, resolved once inside `build`."""
        self._message_supplier = supplier
        return self

    def cause(self, error: Optional[BaseException]) -> "ErrorBuilder[E]":
        self._cause = error
        return self

    def context(self, key: str, value: Any) -> "ErrorBuilder[E]":
        """Adds one diagnostic entry. A repeated key keeps the last value."""
        _check_context_keys((key,))
        self._context[key] = value
        return self

    def context_all(self, entries: Mapping[str, Any]) -> "ErrorBuilder[E]":
        _check_context_keys(entries)
        self._context.update(entries)
        return self

    def build(self) -> E:
        """Creates the exception from the current builder state."""
        if self._message_supplier is not None:
            message = self._message_supplier()
        else:
            message = self._message
        return self._error_class(
            self._error_code,
            message=message,
            cause=self._cause,
            context=self._context,
        )


def _check_context_keys(keys) -> None:
    for key in keys:
        if not isinstance(key, str):
            raise TypeError(f"context keys must be strings, got {type(key).__name__}: {key!r}")


def _rebuild(error_class, error_code, message, cause, context, error_id, timestamp):
    """Restores a pickled or copied `StructuredError` with its original identity."""
    error = error_class.__new__(error_class)
    Exception.__init__(error, message)
    _assign = Exception.__setattr__
    _assign(error, "error_code", error_code)
    _assign(error, "message", message)
    _assign(error, "cause", cause)
    _assign(error, "context", MappingProxyType(context))
    _assign(error, "error_id", error_id)
    _assign(error, "timestamp", timestamp)
    if cause is not None:
        error.__cause__ = cause
    return error


def _direct_cause(error: BaseException) -> Optional[BaseException]:
    if isinstance(error, StructuredError) and error.cause is not None:
        return error.cause
    return error.__cause__


def _summarize(error: BaseException) -> str:
    if isinstance(error, StructuredError):
        return f"{type(error).__name__}[{error.error_code.code}]: {error.message}"
    return f"{type(error).__name__}: {error}"
