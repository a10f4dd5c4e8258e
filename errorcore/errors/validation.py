"""
Field-keyed validation failures.

A `ValidationFailure` bundles one violation message per offending input
field. It is deliberately not a `StructuredError`: validation layers (pydantic
models, FastAPI request parsing, hand-written checks) raise it, and the
translator renders it with the violation map as the response details.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Sequence, Tuple

from pydantic import ValidationError as PydanticValidationError

ROOT_FIELD = "__root__"


@dataclass(frozen=True)
class FieldViolation:
    """A single constraint violation on one input field."""

    field: str
    message: str


class ValidationFailure(Exception):
    """Raised when one or more input fields fail validation.

    Attributes:
        violations: The violations, in the order they were reported.
    """

    def __init__(self, violations: Iterable[FieldViolation]):
        """Initializes the ValidationFailure.

        Args:
            violations: The reported violations. A field may appear more than
                once; the last report for a field wins in `field_errors`.

        Raises:
            ValueError: If no violation is given.
        """
        self.violations: Tuple[FieldViolation, ...] = tuple(violations)
        if not self.violations:
            raise ValueError("A validation failure needs at least one violation")
        super().__init__(f"Validation failed for {len(self.violations)} field(s)")

    @classmethod
    def of(cls, field_errors: Mapping[str, str]) -> "ValidationFailure":
        """Creates a failure from a ``{field: message}`` mapping."""
        return cls(FieldViolation(field, message) for field, message in field_errors.items())

    @classmethod
    def from_errors(cls, errors: Sequence[Mapping[str, Any]]) -> "ValidationFailure":
        """Creates a failure from pydantic-style error dictionaries.

        Each error is expected to carry a ``loc`` tuple and a ``msg`` string,
        as produced by `pydantic.ValidationError.errors()` and FastAPI's
        `RequestValidationError.errors()`. Nested locations are reduced to
        their leaf field name.

        Args:
            errors: The error dictionaries.

        Returns:
            A new `ValidationFailure`.
        """
        return cls(
            FieldViolation(_field_name(error.get("loc", ())), str(error.get("msg", "")))
            for error in errors
        )

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationFailure":
        failure = cls.from_errors(exc.errors())
        failure.__cause__ = exc
        return failure

    def field_errors(self) -> Dict[str, str]:
        """Maps each offending field to its violation message."""
        return {violation.field: violation.message for violation in self.violations}


def _field_name(loc: Sequence[Any]) -> str:
    # ("body", "user", "email") -> "email"; ("query", "items", 0) -> "items"
    for part in reversed(tuple(loc)):
        if isinstance(part, str) and part:
            return part
    return ROOT_FIELD
