"""Caller account model."""

from pydantic import BaseModel, Field


class Account(BaseModel):
    """The account a request is made on behalf of."""

    id: str = Field(description="Account identifier; the anonymous account is '0'")
    roles: frozenset[str] = Field(default_factory=frozenset, description="Granted roles")
    permissions: frozenset[str] = Field(
        default_factory=frozenset, description="Permissions resolved from the roles"
    )
    anonymous: bool = Field(default=False, description="No account header was sent")

    def has_permission(self, permission: str) -> bool:
        return permission in self.permissions
