"""Service wiring shared by the market and admin routers.

Both services share one RegistryWriter so that market lifecycle and admin
mutations are serialized together. Tests swap the services through
`app.dependency_overrides`.
"""

from src.pm_account.infrastructure.persistence import AccountTransfer
from src.pm_admin.application.service import RegistryAdminService
from src.pm_common.datetime_utils import SystemClock
from src.pm_market.application.service import MarketRegistryService
from src.pm_market.application.writer import RegistryWriter
from src.pm_market.infrastructure.event_sink import RedisEventSink
from src.pm_market.infrastructure.persistence import MarketRepository

_repo = MarketRepository()
_transfer = AccountTransfer()
_writer = RegistryWriter(_repo, RedisEventSink())

_market_service = MarketRegistryService(
    repo=_repo, writer=_writer, transfer=_transfer, clock=SystemClock()
)
_admin_service = RegistryAdminService(repo=_repo, writer=_writer, transfer=_transfer)


def get_market_service() -> MarketRegistryService:
    return _market_service


def get_admin_service() -> RegistryAdminService:
    return _admin_service
