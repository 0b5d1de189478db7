# This project was developed with assistance from AI tools.
"""Authentication and authorization schemas."""

from meras_db.enums import UserRole
from pydantic import BaseModel, ConfigDict, Field


class Identity(BaseModel):
    """Verified bearer-token claims."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str = ""
    role: UserRole


class Scope(BaseModel):
    """Resolved branch/account/ownership constraints for one actor.

    Rebuilt on every request from the stored user record; never cached
    across requests.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    role: UserRole
    branch_ids: frozenset[str] = Field(default_factory=frozenset)
    whatsapp_account_ids: frozenset[str] = Field(default_factory=frozenset)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class TokenPayload(BaseModel):
    """Decoded JWT claims."""

    sub: str
    email: str = ""
    role: str


class DeleteGrant(BaseModel):
    """Returned by the delete guard when the caller may proceed with the mutation."""

    model_config = ConfigDict(frozen=True)

    scope: Scope
