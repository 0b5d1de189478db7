# This project was developed with assistance from AI tools.
"""
Authorization gate: FastAPI dependencies for route-level auth.

Every dependency here runs the token verifier and then the scope loader
before any role or capability check. The resolved (identity, scope) pair is
memoised on ``request.state`` for the rest of that one request only.

The gate proves role and capability. Row-level checks ("is this booking
mine") are done by the handler with the entity scope predicates.
"""

import logging
from collections.abc import Iterable
from typing import Annotated, Any, TypeVar

from fastapi import Depends, Request
from meras_db import get_db
from meras_db.enums import EntityType, UserRole
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth import extract_bearer_token, verify_token
from ..core.errors import Forbidden
from ..core.permissions import Capability, has_permission
from ..schemas.auth import DeleteGrant, Identity, Scope
from ..services.audit import AuditSink, get_audit_sink
from ..services.delete_guard import guard_delete
from ..services.identity import resolve_scope

logger = logging.getLogger(__name__)

_Subject = TypeVar("_Subject", Identity, Scope)


async def authenticate(request: Request, session: AsyncSession) -> tuple[Identity, Scope]:
    """Verify the bearer token, then load the caller's scope.

    A missing or bad token raises ``Unauthorized`` before the store is touched.
    """
    cached = getattr(request.state, "auth", None)
    if cached is not None:
        return cached

    token = extract_bearer_token(request.headers.get("Authorization"))
    identity = verify_token(token)
    scope = await resolve_scope(session, identity)
    identity = identity.model_copy(update={"role": scope.role})

    request.state.auth = (identity, scope)
    return identity, scope


def require_role(subject: _Subject, allowed_roles: Iterable[UserRole]) -> _Subject:
    """Return ``subject`` unchanged if its role is allowed, else raise ``Forbidden``."""
    allowed = set(allowed_roles)
    if subject.role not in allowed:
        logger.warning(
            "RBAC denied: user=%s role=%s attempted route requiring %s",
            subject.user_id,
            subject.role.value,
            sorted(r.value for r in allowed),
        )
        raise Forbidden("You do not have permission to access this resource")
    return subject


def require_capability(scope: Scope, capability: Capability | str) -> None:
    """Raise ``Forbidden`` unless the permission table grants ``capability`` to the scope's role."""
    if not has_permission(scope.role, capability):
        logger.warning(
            "Capability denied: user=%s role=%s capability=%s",
            scope.user_id,
            scope.role.value,
            getattr(capability, "value", capability),
        )
        raise Forbidden("You do not have permission to perform this action")


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------


async def require_auth(request: Request, session: AsyncSession = Depends(get_db)) -> Identity:
    """FastAPI dependency: authenticated identity (role refreshed from the store)."""
    identity, _ = await authenticate(request, session)
    return identity


async def require_auth_with_scope(
    request: Request, session: AsyncSession = Depends(get_db)
) -> Scope:
    """FastAPI dependency: authenticated caller's scope."""
    _, scope = await authenticate(request, session)
    return scope


# Type aliases for use in route signatures
CurrentIdentity = Annotated[Identity, Depends(require_auth)]
CurrentScope = Annotated[Scope, Depends(require_auth_with_scope)]


def require_role_with_scope(*allowed_roles: UserRole):
    """Dependency factory: restrict a route to specific roles, yielding the scope.

    Usage:
        @router.get("/audit", dependencies=[Depends(require_role_with_scope(UserRole.ADMIN))])
    """

    async def _check(scope: CurrentScope) -> Scope:
        return require_role(scope, allowed_roles)

    return _check


def require_capability_with_scope(capability: Capability):
    """Dependency factory: restrict a route to roles granted ``capability``."""

    async def _check(scope: CurrentScope) -> Scope:
        require_capability(scope, capability)
        return scope

    return _check


async def require_delete_allowed(
    request: Request,
    session: AsyncSession,
    entity_type: EntityType,
    entity_id: str,
    prior_state: dict[str, Any] | None,
    sink: AuditSink | None = None,
) -> DeleteGrant:
    """Authenticate, audit and decide a delete attempt.

    ``prior_state`` must be captured by the caller before this call. The audit
    record is written before this returns, whichever way the decision goes.

    Raises:
        Unauthorized: no valid identity (nothing is audited).
        Forbidden: role may not delete ``entity_type`` (DENIED is audited).
    """
    _, scope = await authenticate(request, session)
    return await guard_delete(
        scope,
        entity_type,
        entity_id,
        prior_state,
        sink=sink or get_audit_sink(),
    )
