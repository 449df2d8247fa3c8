import pytest
from logistics.errors import (
    ConcurrencyConflict,
    ErrorCode,
    Forbidden,
    InvalidAmount,
    InvalidTransition,
    LedgerTargetMissing,
    LogisticsError,
    MerchantProfileMissing,
    NotFound,
    StorageUnavailable,
)


@pytest.mark.parametrize(
    "error_cls, code, status",
    [
        (NotFound, ErrorCode.NOT_FOUND, 404),
        (MerchantProfileMissing, ErrorCode.MERCHANT_PROFILE_MISSING, 404),
        (Forbidden, ErrorCode.FORBIDDEN, 403),
        (InvalidTransition, ErrorCode.INVALID_TRANSITION, 409),
        (InvalidAmount, ErrorCode.INVALID_AMOUNT, 400),
        (LedgerTargetMissing, ErrorCode.LEDGER_TARGET_MISSING, 500),
        (ConcurrencyConflict, ErrorCode.CONCURRENCY_CONFLICT, 409),
        (StorageUnavailable, ErrorCode.STORAGE_UNAVAILABLE, 503),
    ],
)
def test_every_error_has_a_stable_code(error_cls, code, status):
    error = error_cls("boom")
    assert isinstance(error, LogisticsError)
    assert error.code == code
    assert error.http_status == status


def test_only_transient_errors_are_retryable():
    assert ConcurrencyConflict("x").retryable
    assert StorageUnavailable("x").retryable
    assert not InvalidTransition("x").retryable


def test_to_dict_stringifies_details():
    error = InvalidTransition("Cannot transition", current="CREATED", order_id=42)
    assert error.to_dict() == {
        "code": "INVALID_TRANSITION",
        "message": "Cannot transition",
        "details": {"current": "CREATED", "order_id": "42"},
    }
    assert str(error) == "Cannot transition"
