"""
Domain error taxonomy tests.
"""

from src.core.errors import (
    ConcurrencyConflict,
    IncompleteDocuments,
    InvalidTransition,
    NotFound,
    PermissionDenied,
    ValidationError,
    VerificationError,
)


class TestVerificationError:

    def test_error_str(self):
        err = InvalidTransition("Cannot approve a draft")
        assert str(err) == "[INVALID_TRANSITION] Cannot approve a draft"

    def test_error_with_context(self):
        err = NotFound("missing", context={"application_id": "a1"})
        assert err.context == {"application_id": "a1"}
        assert err.message == "missing"

    def test_default_context_is_empty(self):
        assert ValidationError("bad").context == {}

    def test_only_conflicts_are_retryable(self):
        assert ConcurrencyConflict("stale").retryable is True
        for kind in (ValidationError, InvalidTransition, NotFound, PermissionDenied):
            assert kind("x").retryable is False

    def test_all_kinds_share_base(self):
        for kind in (ValidationError, InvalidTransition, ConcurrencyConflict, NotFound, PermissionDenied):
            assert issubclass(kind, VerificationError)


class TestIncompleteDocuments:

    def test_is_a_validation_error(self):
        err = IncompleteDocuments(["permit", "void_cheque"], {"application_id": "a1"})
        assert isinstance(err, ValidationError)
        assert err.code == "INCOMPLETE_DOCUMENTS"

    def test_carries_missing_types(self):
        err = IncompleteDocuments(["permit", "void_cheque"], {"application_id": "a1"})
        assert err.missing == ["permit", "void_cheque"]
        assert err.context == {"application_id": "a1", "missing": ["permit", "void_cheque"]}
        assert "permit, void_cheque" in err.message
