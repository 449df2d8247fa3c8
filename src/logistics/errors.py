"""Error taxonomy for the Logistics domain.

Every failure surfaced by the order engine carries a stable ``code`` from
``ErrorCode`` so callers can tell ``NOT_FOUND`` from ``FORBIDDEN`` from
``INVALID_TRANSITION`` without matching on message text. ``http_status`` is
what the API layer answers with.
"""

from enum import Enum


class ErrorCode(Enum):
    NOT_FOUND = "NOT_FOUND"
    MERCHANT_PROFILE_MISSING = "MERCHANT_PROFILE_MISSING"
    FORBIDDEN = "FORBIDDEN"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    LEDGER_TARGET_MISSING = "LEDGER_TARGET_MISSING"
    CONCURRENCY_CONFLICT = "CONCURRENCY_CONFLICT"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"


class LogisticsError(Exception):
    """Base class for all errors raised by the order engine."""

    code: ErrorCode
    http_status = 500
    retryable = False

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {
            "code": self.code.value,
            "message": self.message,
            "details": {key: str(value) for key, value in self.details.items()},
        }


class NotFound(LogisticsError):
    """Entity absent, or outside the caller's tenant scope.

    The two cases are deliberately indistinguishable.
    """

    code = ErrorCode.NOT_FOUND
    http_status = 404


class MerchantProfileMissing(LogisticsError):
    code = ErrorCode.MERCHANT_PROFILE_MISSING
    http_status = 404


class Forbidden(LogisticsError):
    """Role or tenant-boundary violation."""

    code = ErrorCode.FORBIDDEN
    http_status = 403


class InvalidTransition(LogisticsError):
    """The order's state machine does not allow the requested move."""

    code = ErrorCode.INVALID_TRANSITION
    http_status = 409


class InvalidAmount(LogisticsError):
    code = ErrorCode.INVALID_AMOUNT
    http_status = 400


class LedgerTargetMissing(LogisticsError):
    """A merchant or courier profile referenced by an order is gone."""

    code = ErrorCode.LEDGER_TARGET_MISSING
    http_status = 500


class ConcurrencyConflict(LogisticsError):
    code = ErrorCode.CONCURRENCY_CONFLICT
    http_status = 409
    retryable = True


class StorageUnavailable(LogisticsError):
    code = ErrorCode.STORAGE_UNAVAILABLE
    http_status = 503
    retryable = True
