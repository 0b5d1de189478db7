# This project was developed with assistance from AI tools.
"""Identity & scope loader.

Turns a verified token identity into a Scope by reading the user's current
role, active branch memberships and WhatsApp-account assignments. Loaded
fresh for every request so role and assignment changes apply immediately.
"""

import asyncio
import logging

from meras_db import User
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.config import settings
from ..core.errors import StoreError, Unauthorized
from ..schemas.auth import Identity, Scope

logger = logging.getLogger(__name__)


async def find_user_by_id(session: AsyncSession, user_id: str) -> User | None:
    """Credential-store lookup with branches and accounts eagerly loaded."""
    stmt = (
        select(User)
        .options(selectinload(User.branches), selectinload(User.whatsapp_accounts))
        .where(User.id == user_id)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


def build_scope(user: User) -> Scope:
    """Build a Scope from a loaded user. Inactive branches are dropped."""
    return Scope(
        user_id=user.id,
        role=user.role,
        branch_ids=frozenset(b.id for b in user.branches or [] if b.is_active),
        whatsapp_account_ids=frozenset(a.id for a in user.whatsapp_accounts or []),
    )


async def resolve_scope(session: AsyncSession, identity: Identity) -> Scope:
    """Load the Scope for ``identity``.

    Raises:
        Unauthorized: the user no longer exists, is inactive, or the load
            exceeded ``SCOPE_LOAD_TIMEOUT_SECONDS``.
        StoreError: the credential store failed.
    """
    try:
        user = await asyncio.wait_for(
            find_user_by_id(session, identity.user_id),
            timeout=settings.SCOPE_LOAD_TIMEOUT_SECONDS,
        )
    except TimeoutError as exc:
        logger.warning("Scope load timed out for user=%s", identity.user_id)
        raise Unauthorized("Authentication timed out") from exc
    except SQLAlchemyError as exc:
        logger.error("Credential store lookup failed for user=%s: %s", identity.user_id, exc)
        raise StoreError() from exc

    if user is None:
        logger.info("Token for unknown user=%s rejected", identity.user_id)
        raise Unauthorized()
    if not user.is_active:
        logger.info("Token for inactive user=%s rejected", identity.user_id)
        raise Unauthorized("Account is inactive")

    # The stored role wins over the token claim.
    return build_scope(user)
