"""AccountTransfer — concrete implementation of ValueTransferProtocol.

All balance-mutating operations use atomic PostgreSQL UPDATE ... RETURNING.
A result of 0 rows means a business constraint was violated
(insufficient funds, or no account to receive the transfer).

Transaction ownership: The CALLER (RegistryWriter) is responsible for
committing or rolling back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.errors import InsufficientBalanceError, TransferFailedError

_DEBIT_SQL = text("""
    UPDATE accounts
    SET available_balance = available_balance - :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE user_id = :user_id AND available_balance >= :amount
    RETURNING available_balance
""")

_CREDIT_SQL = text("""
    UPDATE accounts
    SET available_balance = available_balance + :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE user_id = :user_id
    RETURNING available_balance
""")

_GET_BALANCE_SQL = text("""
    SELECT available_balance
    FROM accounts
    WHERE user_id = :user_id
""")


class AccountTransfer:
    """Moves cents between `accounts` rows and the registry's custody balance."""

    async def collect(self, db: AsyncSession, payer: str, amount: int) -> None:
        if amount == 0:
            return
        result = await db.execute(_DEBIT_SQL, {"user_id": payer, "amount": amount})
        if result.fetchone() is None:
            available = (
                await db.execute(_GET_BALANCE_SQL, {"user_id": payer})
            ).scalar_one_or_none()
            raise InsufficientBalanceError(amount, available or 0)

    async def pay_out(self, db: AsyncSession, recipient: str, amount: int) -> None:
        result = await db.execute(_CREDIT_SQL, {"user_id": recipient, "amount": amount})
        if result.fetchone() is None:
            raise TransferFailedError(recipient, amount)
