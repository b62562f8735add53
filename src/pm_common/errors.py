"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/Identity
  2xxx: Value (fees, balances, transfers)
  3xxx: Market
  6xxx: Registry administration
  9xxx: System

Every registry precondition failure is a subclass of one of the kind bases
(UnauthorizedError, NotFoundError, InvalidStateError, InvalidInputError,
InsufficientValueError, TransferFailedError) and carries the values that
made it fail.
"""

from datetime import datetime


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- Kind bases ---

class NotFoundError(AppError):
    pass


class InvalidStateError(AppError):
    pass


class InvalidInputError(AppError):
    pass


class InsufficientValueError(AppError):
    pass


# --- 1xxx: Auth/Identity ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired credentials", 401)


class UnauthorizedError(AppError):
    def __init__(self, caller: str, required_role: str) -> None:
        self.caller = caller
        self.required_role = required_role
        super().__init__(1006, f"Caller {caller} is not authorized: requires {required_role}", 403)


# --- 2xxx: Value ---

class InsufficientBalanceError(InsufficientValueError):
    def __init__(self, required: int, available: int) -> None:
        self.required = required
        self.available = available
        super().__init__(
            2001,
            f"Insufficient balance: required {required} cents, available {available} cents",
            422,
        )


class InsufficientFeeError(InsufficientValueError):
    def __init__(self, provided: int, required: int) -> None:
        self.provided = provided
        self.required = required
        super().__init__(
            2003,
            f"Insufficient fee: provided {provided} cents, required {required} cents",
            422,
        )


class TransferFailedError(AppError):
    def __init__(self, recipient: str, amount: int) -> None:
        self.recipient = recipient
        self.amount = amount
        super().__init__(2004, f"Transfer of {amount} cents to {recipient} was rejected", 422)


# --- 3xxx: Market ---

class MarketNotFoundError(NotFoundError):
    def __init__(self, market_id: int) -> None:
        self.market_id = market_id
        super().__init__(3001, f"Market not found: {market_id}", 404)


class MarketNotOpenError(InvalidStateError):
    def __init__(self, market_id: int, status: str) -> None:
        self.market_id = market_id
        self.status = status
        super().__init__(3002, f"Market {market_id} is not OPEN (status={status})", 409)


class QuestionRequiredError(InvalidInputError):
    def __init__(self) -> None:
        super().__init__(3003, "Question is required", 422)


class InsufficientOutcomesError(InvalidInputError):
    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(3004, f"At least 2 outcomes required, got {count}", 422)


class ResolutionNotFutureError(InvalidInputError):
    def __init__(self, deadline: datetime, now: datetime) -> None:
        self.deadline = deadline
        self.now = now
        super().__init__(
            3005,
            f"Resolution deadline {deadline.isoformat()} is not after {now.isoformat()}",
            422,
        )


class TooEarlyError(InvalidStateError):
    def __init__(self, now: datetime, deadline: datetime) -> None:
        self.now = now
        self.deadline = deadline
        super().__init__(
            3006,
            f"Too early to resolve: now {now.isoformat()}, deadline {deadline.isoformat()}",
            409,
        )


class InvalidOutcomeIndexError(InvalidInputError):
    def __init__(self, index: int, bound: int) -> None:
        self.index = index
        self.bound = bound
        super().__init__(3007, f"Invalid outcome index {index}: market has {bound} outcomes", 422)


class ConfidenceOutOfRangeError(InvalidInputError):
    def __init__(self, value: int, low: int, high: int) -> None:
        self.value = value
        self.low = low
        self.high = high
        super().__init__(3008, f"Confidence {value} is outside storable range [{low}, {high}]", 422)


# --- 6xxx: Registry administration ---

class InvalidIdentityError(InvalidInputError):
    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(6001, f"{field} must be a non-empty identity", 422)


class InvalidAmountError(InvalidInputError):
    def __init__(self, field: str, value: int) -> None:
        self.field = field
        self.value = value
        super().__init__(6002, f"Invalid {field}: {value}", 422)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
