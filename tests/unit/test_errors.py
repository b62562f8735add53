"""Tests for pm_common.errors and pm_common.response."""
from datetime import UTC, datetime
from types import SimpleNamespace

from src.pm_common.errors import (
    AppError,
    ConfidenceOutOfRangeError,
    InsufficientBalanceError,
    InsufficientFeeError,
    InsufficientValueError,
    InvalidInputError,
    InvalidOutcomeIndexError,
    InvalidStateError,
    MarketNotFoundError,
    MarketNotOpenError,
    NotFoundError,
    TooEarlyError,
    TransferFailedError,
    UnauthorizedError,
)
from src.pm_common.response import (
    error_response,
    request_success_response,
    success_response,
)


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.http_status == 500
        assert isinstance(err, Exception)


class TestErrorKinds:
    def test_insufficient_fee(self) -> None:
        err = InsufficientFeeError(provided=50, required=100)
        assert isinstance(err, InsufficientValueError)
        assert err.code == 2003
        assert "50" in err.message and "100" in err.message

    def test_insufficient_balance(self) -> None:
        err = InsufficientBalanceError(required=6500, available=3000)
        assert isinstance(err, InsufficientValueError)
        assert err.http_status == 422

    def test_market_not_found(self) -> None:
        err = MarketNotFoundError(12)
        assert isinstance(err, NotFoundError)
        assert (err.code, err.http_status) == (3001, 404)

    def test_market_not_open_carries_status(self) -> None:
        err = MarketNotOpenError(1, "RESOLVED")
        assert isinstance(err, InvalidStateError)
        assert err.http_status == 409
        assert "RESOLVED" in err.message

    def test_too_early(self) -> None:
        now = datetime(2026, 1, 1, tzinfo=UTC)
        deadline = datetime(2026, 1, 2, tzinfo=UTC)
        err = TooEarlyError(now, deadline)
        assert isinstance(err, InvalidStateError)
        assert deadline.isoformat() in err.message

    def test_invalid_outcome_index(self) -> None:
        err = InvalidOutcomeIndexError(5, 2)
        assert isinstance(err, InvalidInputError)
        assert "5" in err.message and "2" in err.message

    def test_confidence_out_of_range(self) -> None:
        err = ConfidenceOutOfRangeError(2**63, 0, 2**63 - 1)
        assert isinstance(err, InvalidInputError)
        assert (err.code, err.http_status) == (3008, 422)
        assert err.value == 2**63

    def test_unauthorized_names_role(self) -> None:
        err = UnauthorizedError("bob", "creator_or_owner")
        assert (err.code, err.http_status) == (1006, 403)
        assert "creator_or_owner" in err.message

    def test_transfer_failed(self) -> None:
        err = TransferFailedError("treasury", 10)
        assert err.code == 2004


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"id": 1})
        assert resp.code == 0
        assert resp.data == {"id": 1}
        assert resp.request_id.startswith("req_")

    def test_error(self) -> None:
        resp = error_response(3001, "Market not found: 1")
        assert resp.code == 3001
        assert resp.data is None

    def test_request_id_from_middleware(self) -> None:
        request = SimpleNamespace(state=SimpleNamespace(request_id="req_fromheader"))
        resp = request_success_response(request, {"id": 1})
        assert resp.request_id == "req_fromheader"

    def test_request_without_middleware_state(self) -> None:
        request = SimpleNamespace(state=SimpleNamespace())
        assert request_success_response(request).request_id.startswith("req_")
