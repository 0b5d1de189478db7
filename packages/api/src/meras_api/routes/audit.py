# This project was developed with assistance from AI tools.
"""Delete audit trail query and chain verification endpoints (ADMIN only)."""

from fastapi import APIRouter, Depends, Query
from meras_db import get_db
from meras_db.enums import AuditOutcome, EntityType, UserRole
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import require_role_with_scope
from ..schemas.audit import AuditChainVerifyResponse, AuditListResponse, AuditRecordItem
from ..services.audit import get_audit_records, verify_audit_chain

router = APIRouter()


@router.get(
    "/",
    response_model=AuditListResponse,
    dependencies=[Depends(require_role_with_scope(UserRole.ADMIN))],
)
async def list_audit_records(
    session: AsyncSession = Depends(get_db),
    entity_type: EntityType | None = None,
    entity_id: str | None = None,
    actor_id: str | None = None,
    outcome: AuditOutcome | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
) -> AuditListResponse:
    """Search delete attempts, newest first."""
    records = await get_audit_records(
        session,
        entity_type=entity_type.value if entity_type else None,
        entity_id=entity_id,
        actor_id=actor_id,
        outcome=outcome,
        limit=limit,
    )
    return AuditListResponse(
        count=len(records),
        data=[AuditRecordItem.model_validate(r) for r in records],
    )


@router.get(
    "/verify",
    response_model=AuditChainVerifyResponse,
    dependencies=[Depends(require_role_with_scope(UserRole.ADMIN))],
)
async def verify_audit_trail(
    session: AsyncSession = Depends(get_db),
) -> AuditChainVerifyResponse:
    """Walk the hash chain and report the first broken link, if any."""
    result = await verify_audit_chain(session)
    return AuditChainVerifyResponse(**result)
