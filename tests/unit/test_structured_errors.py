"""Unit tests for structured exceptions and their builder.

These tests verify message resolution, context accumulation, identity and
timestamp stamping, read-only attributes, cause chains and the single-line
log format.
"""

import copy
import pickle
import uuid
from datetime import datetime

import pytest

from errorcore.errors.error_codes import CommonErrorCode, SecurityErrorCode
from errorcore.errors.exceptions import (
    FunctionalError,
    SecurityError,
    StructuredError,
    TechnicalError,
)


@pytest.mark.unit
class TestConstruction:
    """Tests for direct construction."""

    def test_defaults_to_catalog_message(self):
        exception = FunctionalError(CommonErrorCode.NOT_FOUND)

        assert exception.error_code is CommonErrorCode.NOT_FOUND
        assert exception.message == "Resource not found"
        assert str(exception) == "Resource not found"
        assert exception.http_status == 404
        assert exception.code == "CORE-003"
        assert exception.cause is None
        assert dict(exception.context) == {}

    def test_stamps_identifier_and_timestamp(self):
        exception = TechnicalError(CommonErrorCode.SERVICE_UNAVAILABLE, "Database is down")

        assert uuid.UUID(exception.error_id)
        assert isinstance(exception.timestamp, datetime)
        assert exception.timestamp.tzinfo is not None

    def test_context_is_copied(self):
        context = {"userId": 1}
        exception = FunctionalError(CommonErrorCode.CONFLICT, context=context)

        context["userId"] = 2

        assert exception.context["userId"] == 1

    def test_rejects_non_string_context_keys(self):
        with pytest.raises(TypeError, match="context keys must be strings"):
            FunctionalError(CommonErrorCode.CONFLICT, context={1: "x"})

    def test_families_share_the_base_class(self):
        for exception_class in (FunctionalError, TechnicalError, SecurityError):
            assert issubclass(exception_class, StructuredError)
            assert issubclass(exception_class, Exception)


@pytest.mark.unit
class TestBuilder:
    """Tests for fluent construction."""

    def test_build_without_message_uses_default(self):
        exception = FunctionalError.builder(CommonErrorCode.VALIDATION_ERROR).build()

        assert isinstance(exception, FunctionalError)
        assert exception.message == "Validation failed"

    def test_custom_message(self):
        exception = (
            FunctionalError.builder(CommonErrorCode.VALIDATION_ERROR)
            .message("Email is invalid")
            .build()
        )

        assert exception.message == "Email is invalid"

    def test_formatted_message_is_resolved_immediately(self):
        builder = FunctionalError.builder(CommonErrorCode.NOT_FOUND)
        user_id = [123]

        builder.message("User with id %s not found", user_id[0])
        user_id[0] = 456

        assert builder.build().message == "User with id 123 not found"

    def test_message_supplier_is_resolved_once_per_build(self):
        calls = []

        def supplier():
            calls.append(1)
            return "Computed lazily"

        builder = TechnicalError.builder(CommonErrorCode.INTERNAL_ERROR).message_from(supplier)
        assert calls == []

        exception = builder.build()

        assert exception.message == "Computed lazily"
        assert len(calls) == 1

    def test_context_accumulates_with_last_write_wins(self):
        exception = (
            FunctionalError.builder(CommonErrorCode.CONFLICT)
            .context("userId", 456)
            .context("email", "test@example.com")
            .context("userId", 789)
            .build()
        )

        assert dict(exception.context) == {"userId": 789, "email": "test@example.com"}

    def test_context_all_merges_mapping(self):
        exception = (
            TechnicalError.builder(CommonErrorCode.SERVICE_UNAVAILABLE)
            .context("operation", "save")
            .context_all({"entity": "User", "attempt": 3})
            .build()
        )

        assert list(exception.context) == ["operation", "entity", "attempt"]

    def test_context_rejects_non_string_keys(self):
        builder = FunctionalError.builder(CommonErrorCode.CONFLICT)

        with pytest.raises(TypeError):
            builder.context(1, "x")
        with pytest.raises(TypeError):
            builder.context_all({"ok": 1, 2: "x"})

        assert dict(builder.build().context) == {}

    def test_all_fields(self):
        cause = RuntimeError("Original")

        exception = (
            SecurityError.builder(SecurityErrorCode.ACCESS_DENIED)
            .message("Access denied for user %s", "john")
            .cause(cause)
            .context("userId", "john")
            .context("resource", "/admin")
            .build()
        )

        assert isinstance(exception, SecurityError)
        assert exception.message == "Access denied for user john"
        assert exception.cause is cause
        assert exception.__cause__ is cause
        assert exception.http_status == 403
        assert len(exception.context) == 2

    def test_each_build_gets_a_new_identity(self):
        builder = (
            FunctionalError.builder(CommonErrorCode.NOT_FOUND)
            .message("X not found")
            .context("id", 1)
        )

        first = builder.build()
        second = builder.build()

        assert first is not second
        assert first.error_id != second.error_id
        assert first.message == second.message
        assert dict(first.context) == dict(second.context)

    def test_later_builder_changes_do_not_affect_built_error(self):
        builder = FunctionalError.builder(CommonErrorCode.CONFLICT).context("a", 1)
        exception = builder.build()

        builder.context("b", 2).message("changed")

        assert dict(exception.context) == {"a": 1}
        assert exception.message == "Resource conflict"


@pytest.mark.unit
class TestImmutability:
    """Tests that built exceptions are read-only."""

    @pytest.mark.parametrize(
        "attribute", ["error_code", "message", "cause", "context", "error_id", "timestamp"]
    )
    def test_public_attributes_cannot_be_reassigned(self, attribute):
        exception = FunctionalError(CommonErrorCode.NOT_FOUND)

        with pytest.raises(AttributeError):
            setattr(exception, attribute, None)

    def test_public_attributes_cannot_be_deleted(self):
        exception = FunctionalError(CommonErrorCode.NOT_FOUND)

        with pytest.raises(AttributeError):
            del exception.message

    def test_context_cannot_be_mutated(self):
        exception = FunctionalError.builder(CommonErrorCode.NOT_FOUND).context("a", 1).build()

        with pytest.raises(TypeError):
            exception.context["a"] = 2

    def test_can_still_be_raised_and_chained(self):
        original = ValueError("bad value")

        with pytest.raises(FunctionalError) as exc_info:
            try:
                raise original
            except ValueError as exc:
                raise FunctionalError(CommonErrorCode.BAD_REQUEST) from exc

        assert exc_info.value.__cause__ is original
        assert exc_info.value.__traceback__ is not None


@pytest.mark.unit
class TestCopying:
    """Tests that built exceptions survive pickling and copying unchanged."""

    def _build(self):
        return (
            FunctionalError.builder(CommonErrorCode.NOT_FOUND)
            .message("User %d not found", 7)
            .cause(ValueError("missing row"))
            .context("userId", 7)
            .build()
        )

    def test_pickle_round_trip_keeps_identity(self):
        original = self._build()

        restored = pickle.loads(pickle.dumps(original))

        assert type(restored) is FunctionalError
        assert restored.error_code == CommonErrorCode.NOT_FOUND
        assert restored.message == "User 7 not found"
        assert str(restored) == "User 7 not found"
        assert dict(restored.context) == {"userId": 7}
        assert restored.error_id == original.error_id
        assert restored.timestamp == original.timestamp
        assert isinstance(restored.cause, ValueError)
        assert restored.__cause__ is restored.cause

    def test_restored_error_stays_read_only(self):
        restored = pickle.loads(pickle.dumps(self._build()))

        with pytest.raises(AttributeError):
            restored.message = "changed"
        with pytest.raises(TypeError):
            restored.context["userId"] = 8

    def test_copy_and_deepcopy(self):
        original = self._build()

        for duplicate in (copy.copy(original), copy.deepcopy(original)):
            assert duplicate is not original
            assert duplicate.error_id == original.error_id
            assert duplicate.message == original.message
            assert dict(duplicate.context) == {"userId": 7}


@pytest.mark.unit
class TestCauseChain:
    """Tests for cause chain inspection."""

    def test_iter_causes_walks_nested_errors(self):
        root = OSError("connection refused")
        middle = TechnicalError(CommonErrorCode.EXTERNAL_SERVICE_ERROR, cause=root)
        top = FunctionalError(CommonErrorCode.CONFLICT, cause=middle)

        assert list(top.iter_causes()) == [middle, root]

    def test_iter_causes_follows_raise_from(self):
        root = KeyError("missing")
        try:
            try:
                raise root
            except KeyError as exc:
                raise FunctionalError(CommonErrorCode.NOT_FOUND) from exc
        except FunctionalError as exc:
            raised = exc

        assert list(raised.iter_causes()) == [root]

    def test_iter_causes_stops_on_cycles(self):
        first = ValueError("first")
        second = ValueError("second")
        first.__cause__ = second
        second.__cause__ = first
        top = TechnicalError(CommonErrorCode.INTERNAL_ERROR, cause=first)

        assert list(top.iter_causes()) == [first, second]


@pytest.mark.unit
class TestWrap:
    """Tests for wrapping foreign errors as technical errors."""

    def test_wraps_foreign_exception(self):
        original = RuntimeError("Original error")

        wrapped = TechnicalError.wrap(original)

        assert wrapped.error_code is CommonErrorCode.INTERNAL_ERROR
        assert wrapped.cause is original
        assert wrapped.http_status == 500
        assert "Original error" not in wrapped.message

    def test_returns_same_instance_if_already_technical(self):
        original = TechnicalError(CommonErrorCode.SERVICE_UNAVAILABLE, "Already technical")

        assert TechnicalError.wrap(original) is original

    def test_wraps_with_custom_code(self):
        wrapped = TechnicalError.wrap(TimeoutError(), CommonErrorCode.EXTERNAL_SERVICE_TIMEOUT)

        assert wrapped.http_status == 504


@pytest.mark.unit
class TestLogString:
    """Tests for the single-line diagnostic format."""

    def test_contains_code_messages_and_identifier(self):
        exception = FunctionalError(CommonErrorCode.VALIDATION_ERROR, "Invalid input")

        log_string = exception.to_log_string()

        assert "CORE-002" in log_string
        assert "Validation failed" in log_string
        assert "Invalid input" in log_string
        assert f"errorId={exception.error_id}" in log_string
        assert "\n" not in log_string

    def test_includes_cause_summary(self):
        exception = TechnicalError(
            CommonErrorCode.INTERNAL_ERROR, "System failure", cause=OSError("disk full")
        )

        assert exception.to_log_string().endswith("; caused by OSError: disk full")

    def test_structured_cause_summary_includes_its_code(self):
        cause = FunctionalError(CommonErrorCode.CONFLICT, "Version mismatch")
        exception = TechnicalError(CommonErrorCode.INTERNAL_ERROR, cause=cause)

        assert "caused by FunctionalError[CORE-004]: Version mismatch" in exception.to_log_string()
