from __future__ import annotations

from typing import Any

from coinhub.core.config import settings


class CoinLedgerError(Exception):
    """Base class for failures surfaced to API callers.

    Each subclass carries the HTTP status it maps to and a stable ``code``
    string. Extra keyword arguments are echoed in the error response.
    """

    status_code = 400
    code = "error"

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message, "code": self.code, **self.context}


class ValidationError(CoinLedgerError):
    status_code = 400
    code = "validation_error"


class Unauthenticated(CoinLedgerError):
    status_code = 401
    code = "unauthenticated"


class Unauthorized(CoinLedgerError):
    status_code = 403
    code = "unauthorized"


class NotFound(CoinLedgerError):
    status_code = 404
    code = "not_found"


class InvalidState(CoinLedgerError):
    status_code = 400
    code = "invalid_state"


class InsufficientBalance(CoinLedgerError):
    status_code = 400
    code = "insufficient_balance"

    def __init__(self, message: str, current_balance: int, requested: int):
        super().__init__(message, current_balance=current_balance, requested=requested)
        self.current_balance = current_balance
        self.requested = requested


class StorageFailure(CoinLedgerError):
    """The database is unreachable or rejected the write. Safe to retry."""

    status_code = 503
    code = "storage_failure"


def require_positive(amount: int, what: str = "amount") -> int:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError(f"{what} must be an integer")
    if amount <= 0:
        raise ValidationError(f"{what} must be greater than 0")
    if amount > settings.MAX_COIN_AMOUNT:
        raise ValidationError(
            f"{what} must not exceed {settings.MAX_COIN_AMOUNT:,}",
            max_amount=settings.MAX_COIN_AMOUNT,
        )
    return amount
