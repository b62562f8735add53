# src/pm_admin/application/service.py
"""Registry administration: fee, resolver, ownership, fee withdrawal.

Every mutation is owner-gated and runs through the shared RegistryWriter,
so it is serialized with market create/resolve/cancel. None of these
operations touch market records.
"""
import logging

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_account.domain.repository import ValueTransferProtocol
from src.pm_common.cents import cents_to_display
from src.pm_common.enums import RequiredRole
from src.pm_common.errors import (
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidIdentityError,
    UnauthorizedError,
)
from src.pm_market.application.writer import RegistryWriter
from src.pm_market.domain.events import (
    FeesWithdrawn,
    FeeUpdated,
    OwnershipTransferred,
    ResolverUpdated,
)
from src.pm_market.domain.models import RegistryConfig
from src.pm_market.domain.repository import MarketRepositoryProtocol

logger = logging.getLogger(__name__)


class RegistryInfo(BaseModel):
    owner: str
    resolver: str
    creation_fee_cents: int
    creation_fee_display: str
    market_count: int
    collected_balance_cents: int
    collected_balance_display: str

    @classmethod
    def from_config(cls, c: RegistryConfig) -> "RegistryInfo":
        return cls(
            owner=c.owner,
            resolver=c.resolver,
            creation_fee_cents=c.creation_fee,
            creation_fee_display=cents_to_display(c.creation_fee),
            market_count=c.market_count,
            collected_balance_cents=c.collected_balance,
            collected_balance_display=cents_to_display(c.collected_balance),
        )


def _require_owner(config: RegistryConfig, caller: str) -> None:
    if caller != config.owner:
        raise UnauthorizedError(caller, RequiredRole.OWNER.value)


def _require_identity(value: str, field: str) -> None:
    if not value or not value.strip():
        raise InvalidIdentityError(field)


class RegistryAdminService:
    def __init__(
        self,
        repo: MarketRepositoryProtocol,
        writer: RegistryWriter,
        transfer: ValueTransferProtocol,
    ) -> None:
        self._repo = repo
        self._writer = writer
        self._transfer = transfer

    async def get_registry_info(self, db: AsyncSession) -> RegistryInfo:
        return RegistryInfo.from_config(await self._repo.get_config(db))

    async def set_fee(self, db: AsyncSession, caller: str, new_fee: int) -> RegistryInfo:
        async with self._writer.transaction(db) as events:
            config = await self._repo.get_config(db, for_update=True)
            _require_owner(config, caller)
            if new_fee < 0:
                raise InvalidAmountError("creation_fee", new_fee)

            old_fee = config.creation_fee
            config.creation_fee = new_fee
            await self._repo.save_config(db, config)
            events.append(FeeUpdated(old_fee=old_fee, new_fee=new_fee))

        logger.info("Creation fee updated: %d -> %d", old_fee, new_fee)
        return RegistryInfo.from_config(config)

    async def set_resolver(
        self, db: AsyncSession, caller: str, new_resolver: str
    ) -> RegistryInfo:
        async with self._writer.transaction(db) as events:
            config = await self._repo.get_config(db, for_update=True)
            _require_owner(config, caller)
            _require_identity(new_resolver, "resolver")

            old_resolver = config.resolver
            config.resolver = new_resolver
            await self._repo.save_config(db, config)
            events.append(ResolverUpdated(old_resolver=old_resolver, new_resolver=new_resolver))

        logger.info("Resolver updated: %s -> %s", old_resolver, new_resolver)
        return RegistryInfo.from_config(config)

    async def transfer_ownership(
        self, db: AsyncSession, caller: str, new_owner: str
    ) -> RegistryInfo:
        async with self._writer.transaction(db) as events:
            config = await self._repo.get_config(db, for_update=True)
            _require_owner(config, caller)
            _require_identity(new_owner, "owner")

            old_owner = config.owner
            config.owner = new_owner
            await self._repo.save_config(db, config)
            events.append(OwnershipTransferred(old_owner=old_owner, new_owner=new_owner))

        logger.info("Ownership transferred: %s -> %s", old_owner, new_owner)
        return RegistryInfo.from_config(config)

    async def withdraw(
        self, db: AsyncSession, caller: str, to: str, amount: int
    ) -> RegistryInfo:
        async with self._writer.transaction(db) as events:
            config = await self._repo.get_config(db, for_update=True)
            _require_owner(config, caller)
            _require_identity(to, "recipient")
            if amount <= 0:
                raise InvalidAmountError("amount", amount)
            if amount > config.collected_balance:
                raise InsufficientBalanceError(amount, config.collected_balance)

            # A rejected transfer raises here and the balance is never decremented.
            await self._transfer.pay_out(db, to, amount)
            config.collected_balance -= amount
            await self._repo.save_config(db, config)
            events.append(FeesWithdrawn(to=to, amount=amount))

        logger.info("Fees withdrawn: to=%s amount=%d", to, amount)
        return RegistryInfo.from_config(config)
