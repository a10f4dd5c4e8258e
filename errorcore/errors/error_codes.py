"""
Standardized error codes shared by every service module.

This module holds the error taxonomy: each `ErrorCode` couples a stable
machine-readable identifier with a human-readable default message and the
HTTP status it always maps to. Codes are grouped into families (plain
namespace classes) and registered into an `ErrorCatalog`, which is the single
place where a code string is resolved back to its entry.

Code ranges:
- CORE-0xx: Generic validation, lookup, conflict, access and system errors
- SECU-0xx: Authentication and authorization errors raised by security layers
"""

import threading
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterator, List, Optional


@dataclass(frozen=True)
class ErrorCode:
    """A single, immutable entry of the error taxonomy.

    Attributes:
        code: Stable identifier, unique across the catalog (e.g. ``CORE-003``).
        default_message: Fallback text used when no message is supplied.
        http_status: The HTTP status this code always maps to.
    """

    code: str
    default_message: str
    http_status: int

    def __post_init__(self) -> None:
        if not self.code:
            raise ValueError("Error code identifier must not be empty")
        if not 400 <= self.http_status <= 599:
            raise ValueError(
                f"Error code {self.code!r} must map to a 4xx or 5xx status, got {self.http_status}"
            )

    def __str__(self) -> str:
        return self.code


class CommonErrorCode:
    """Generic error codes available to every service."""

    INTERNAL_ERROR = ErrorCode("CORE-001", "An internal error occurred", 500)
    VALIDATION_ERROR = ErrorCode("CORE-002", "Validation failed", 400)
    NOT_FOUND = ErrorCode("CORE-003", "Resource not found", 404)
    CONFLICT = ErrorCode("CORE-004", "Resource conflict", 409)
    FORBIDDEN = ErrorCode("CORE-005", "Access denied", 403)
    UNAUTHORIZED = ErrorCode("CORE-006", "Authentication required", 401)
    BAD_REQUEST = ErrorCode("CORE-007", "Bad request", 400)
    SERVICE_UNAVAILABLE = ErrorCode("CORE-008", "Service temporarily unavailable", 503)

    # External service errors
    EXTERNAL_SERVICE_ERROR = ErrorCode("CORE-010", "External service error", 502)
    EXTERNAL_SERVICE_TIMEOUT = ErrorCode("CORE-011", "External service timeout", 504)


class SecurityErrorCode:
    """Error codes raised by authentication and authorization layers."""

    BEARER_TOKEN_EXPIRED = ErrorCode("SECU-001", "Bearer token expired", 401)
    BEARER_TOKEN_NOT_VALID = ErrorCode("SECU-002", "Bearer token not valid", 401)
    ACCESS_DENIED = ErrorCode("SECU-003", "Access denied", 403)
    UNAUTHORIZED = ErrorCode("SECU-004", "Unauthorized", 403)


def family_members(family: type) -> List[ErrorCode]:
    """Returns the `ErrorCode` entries declared on a family class.

    Entries inherited from parent families are included, in declaration order.

    Args:
        family: A namespace class whose attributes are `ErrorCode` instances.

    Returns:
        The declared error codes.
    """
    members: Dict[str, ErrorCode] = {}
    for klass in reversed(family.__mro__):
        for name, value in vars(klass).items():
            if isinstance(value, ErrorCode):
                members[name] = value
    return list(members.values())


class ErrorCatalogError(Exception):
    """Base class for misuse of the error catalog."""


class UnknownErrorCodeError(ErrorCatalogError, LookupError):
    """Raised when a code string is not registered in the catalog."""

    def __init__(self, code: str):
        super().__init__(f"Unknown error code: {code!r}")
        self.code = code


class DuplicateErrorCodeError(ErrorCatalogError, ValueError):
    """Raised when a code string is registered twice with different meanings."""

    def __init__(self, existing: ErrorCode, candidate: ErrorCode):
        super().__init__(
            f"Error code {existing.code!r} is already registered as "
            f"({existing.default_message!r}, {existing.http_status}); "
            f"refusing ({candidate.default_message!r}, {candidate.http_status})"
        )
        self.existing = existing
        self.candidate = candidate


class ErrorCatalog:
    """Registry resolving code strings to their `ErrorCode` entries.

    The catalog is append-only: entries can be added but never replaced, so
    a code keeps the same status for the lifetime of the process. Writes are
    serialized by a lock; lookups are plain dictionary reads.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, ErrorCode] = {}
        self._lock = threading.Lock()

    def register(self, entry: ErrorCode) -> ErrorCode:
        """Adds an entry to the catalog.

        Registering an entry equal to the existing one is a no-op.

        Args:
            entry: The error code to register.

        Returns:
            The registered entry.

        Raises:
            DuplicateErrorCodeError: If the code is already registered with a
                different message or status.
        """
        with self._lock:
            existing = self._entries.get(entry.code)
            if existing is not None:
                if existing != entry:
                    raise DuplicateErrorCodeError(existing, entry)
                return existing
            self._entries[entry.code] = entry
            return entry

    def register_family(self, family: type) -> List[ErrorCode]:
        """Registers every `ErrorCode` declared on a family class."""
        return [self.register(entry) for entry in family_members(family)]

    def lookup(self, code: str) -> ErrorCode:
        """Resolves a code string.

        Raises:
            UnknownErrorCodeError: If the code is not registered.
        """
        try:
            return self._entries[code]
        except KeyError:
            raise UnknownErrorCodeError(code) from None

    def get(self, code: str) -> Optional[ErrorCode]:
        return self._entries.get(code)

    def status_of(self, code: str) -> int:
        """Returns the HTTP status bound to a code string."""
        return self.lookup(code).http_status

    def __contains__(self, item: object) -> bool:
        if isinstance(item, ErrorCode):
            return self._entries.get(item.code) == item
        return item in self._entries

    def __iter__(self) -> Iterator[ErrorCode]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)


@lru_cache(maxsize=None)
def get_catalog() -> ErrorCatalog:
    """Returns the process-wide catalog, preloaded with the built-in families."""
    catalog = ErrorCatalog()
    catalog.register_family(CommonErrorCode)
    catalog.register_family(SecurityErrorCode)
    return catalog


def lookup(code: str) -> ErrorCode:
    """Resolves a code string against the process-wide catalog."""
    return get_catalog().lookup(code)


def status_of(code: str) -> int:
    """Returns the HTTP status of a code in the process-wide catalog."""
    return get_catalog().status_of(code)
