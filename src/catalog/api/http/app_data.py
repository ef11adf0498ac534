from dataclasses import dataclass

from src.catalog.core.services import AccountResolver, DbSessionService
from src.catalog.runtime.config.config_data import ConfigData


@dataclass
class ApplicationDependencies:
    config: ConfigData
    database_service: DbSessionService
    account_resolver: AccountResolver
