"""Value-transfer Protocol — dependency inversion for testability.

Fees move between user accounts and the registry's custody balance
(registry_config.collected_balance). Both directions can fail and must
leave balances unchanged when they do.

Transaction ownership: the CALLER commits or rolls back.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession


class ValueTransferProtocol(Protocol):
    async def collect(self, db: AsyncSession, payer: str, amount: int) -> None:
        """Debit `amount` cents from payer. Raises InsufficientBalanceError."""
        ...

    async def pay_out(self, db: AsyncSession, recipient: str, amount: int) -> None:
        """Credit `amount` cents to recipient. Raises TransferFailedError."""
        ...
