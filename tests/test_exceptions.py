import pytest

from ledger_book.exceptions import (
    APIError,
    AuthenticationError,
    GroupNotFoundError,
    InvalidAmountError,
    InvalidContinuationTokenError,
    LedgerClientError,
    PermissionDeniedError,
    UnboundEntityError,
    ValidationError,
)


class TestExceptionHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            APIError(500, "boom"),
            AuthenticationError(401, "expired"),
            PermissionDeniedError(403, "viewer"),
            UnboundEntityError("Account"),
            GroupNotFoundError("Fuel"),
            InvalidAmountError("abc", "not a number"),
            InvalidContinuationTokenError("x"),
        ],
    )
    def test_all_are_client_errors(self, error):
        assert isinstance(error, LedgerClientError)

    def test_http_errors_are_api_errors(self):
        assert issubclass(AuthenticationError, APIError)
        assert issubclass(PermissionDeniedError, APIError)

    def test_validation_errors(self):
        assert issubclass(InvalidAmountError, ValidationError)
        assert issubclass(InvalidContinuationTokenError, ValidationError)


class TestToDict:
    def test_api_error(self):
        error = PermissionDeniedError(403, "viewer cannot post")

        assert error.to_dict() == {
            "error": "PERMISSION_DENIED",
            "message": "APIError(403): viewer cannot post",
            "context": {"status_code": 403},
        }

    def test_custom_error_code(self):
        error = LedgerClientError("boom", error_code="CUSTOM", context={"a": 1})

        assert error.to_dict()["error"] == "CUSTOM"
        assert error.context == {"a": 1}

    def test_default_context(self):
        assert LedgerClientError("boom").to_dict() == {
            "error": "LEDGER_CLIENT_ERROR",
            "message": "boom",
            "context": {},
        }

    def test_group_not_found_message(self):
        error = GroupNotFoundError("Fuel")

        assert str(error) == "Group not found: Fuel"
        assert error.context == {"group": "Fuel"}
