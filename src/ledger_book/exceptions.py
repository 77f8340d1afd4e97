"""Exception hierarchy for the ledger book client.

All client exceptions inherit from LedgerClientError, so callers can catch
every client failure with one base class while still telling remote errors
apart from local validation errors.
"""

from typing import Any


class LedgerClientError(Exception):
    """Base exception for all ledger book client errors."""

    error_code: str = "LEDGER_CLIENT_ERROR"

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.error_code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Remote API Errors
# =============================================================================


class APIError(LedgerClientError):
    """Raised when the bookkeeping API answers with a non-2xx status."""

    error_code = "API_ERROR"

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(
            f"APIError({status_code}): {detail}",
            context={"status_code": status_code},
        )
        self.status_code = status_code
        self.detail = detail


class AuthenticationError(APIError):
    """Raised when the API rejects the credentials (HTTP 401)."""

    error_code = "AUTHENTICATION_ERROR"


class PermissionDeniedError(APIError):
    """Raised when the current user lacks permission on the book (HTTP 403)."""

    error_code = "PERMISSION_DENIED"


# =============================================================================
# Book Errors
# =============================================================================


class UnboundEntityError(LedgerClientError):
    """Raised when an account, group or transaction needs its book but has none."""

    error_code = "UNBOUND_ENTITY"

    def __init__(self, kind: str) -> None:
        super().__init__(
            f"{kind} is not bound to a book",
            context={"kind": kind},
        )


class GroupNotFoundError(LedgerClientError):
    """Raised when an account is assigned to a group the book does not have."""

    error_code = "GROUP_NOT_FOUND"

    def __init__(self, id_or_name: str) -> None:
        super().__init__(
            f"Group not found: {id_or_name}",
            context={"group": id_or_name},
        )


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(LedgerClientError):
    """Base exception for invalid client-side input."""

    error_code = "VALIDATION_ERROR"


class InvalidAmountError(ValidationError):
    """Raised when a transaction amount cannot be parsed."""

    error_code = "INVALID_AMOUNT"

    def __init__(self, amount: object, reason: str) -> None:
        super().__init__(
            f"Invalid amount '{amount}': {reason}",
            context={"amount": str(amount), "reason": reason},
        )


class InvalidDateError(ValidationError):
    """Raised when a transaction date cannot be parsed."""

    error_code = "INVALID_DATE"

    def __init__(self, value: object) -> None:
        super().__init__(
            f"Invalid date: {value!r}",
            context={"value": str(value)},
        )


class InvalidContinuationTokenError(ValidationError):
    """Raised when a transaction iterator cannot resume from a token."""

    error_code = "INVALID_CONTINUATION_TOKEN"

    def __init__(self, token: str) -> None:
        super().__init__(
            f"Invalid continuation token: {token!r}",
            context={"token": token},
        )


class InvalidAccountTypeError(ValidationError):
    """Raised when an account type is not one of the known types."""

    error_code = "INVALID_ACCOUNT_TYPE"

    def __init__(self, account_type: str) -> None:
        super().__init__(
            f"Invalid account type: {account_type}",
            context={"account_type": account_type},
        )
