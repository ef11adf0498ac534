"""Caller identification and permission checks."""

from typing import Protocol

from fastapi import Request
from loguru import logger

from src.catalog.core.models import Account
from src.catalog.runtime.config.config_data import AuthorizationConfig

ANONYMOUS_ROLE = "anonymous"
AUTHENTICATED_ROLE = "authenticated"


class AuthorizationProvider(Protocol):
    """Answers whether the current caller holds a permission."""

    def check(self, permission: str) -> bool: ...


class AccountAuthorization:
    """Authorization provider backed by a resolved account."""

    def __init__(self, account: Account) -> None:
        self.account = account

    def check(self, permission: str) -> bool:
        return self.account.has_permission(permission)


class AccountResolver:
    """Builds the caller's account from the gateway header and role grants.

    The gateway in front of the service authenticates the caller and
    forwards the account id in a header; this service trusts that header.
    """

    def __init__(self, config: AuthorizationConfig) -> None:
        self._config = config

    def resolve(self, account_id: str | None) -> Account:
        account_id = (account_id or "").strip()
        if not account_id or account_id == self._config.anonymous_account_id:
            roles = {ANONYMOUS_ROLE}
            account_id = self._config.anonymous_account_id
            anonymous = True
        else:
            roles = {AUTHENTICATED_ROLE, *self._config.accounts.get(account_id, [])}
            anonymous = False

        permissions: set[str] = set()
        for role in roles:
            granted = self._config.roles.get(role)
            if granted is None:
                logger.warning("Account {} has unknown role '{}'", account_id, role)
                continue
            permissions.update(granted)

        return Account(
            id=account_id,
            roles=frozenset(roles),
            permissions=frozenset(permissions),
            anonymous=anonymous,
        )

    def from_request(self, request: Request) -> Account:
        return self.resolve(request.headers.get(self._config.account_header))
