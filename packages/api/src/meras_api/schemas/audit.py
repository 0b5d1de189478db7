# This project was developed with assistance from AI tools.
"""Pydantic schemas for the delete audit trail."""

from datetime import datetime
from typing import Any

from meras_db.enums import AuditAction, AuditOutcome, EntityType, UserRole
from pydantic import BaseModel, ConfigDict


class AuditRecordCreate(BaseModel):
    """One delete attempt, as handed to the audit sink."""

    model_config = ConfigDict(frozen=True)

    actor_id: str
    actor_role: UserRole
    entity_type: EntityType
    entity_id: str
    action: AuditAction = AuditAction.DELETE
    outcome: AuditOutcome
    prior_state: dict[str, Any] | None = None


class AuditRecordItem(BaseModel):
    """Single audit record in a query response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    timestamp: datetime
    actor_id: str
    actor_role: str
    entity_type: str
    entity_id: str
    action: AuditAction
    outcome: AuditOutcome
    prior_state: dict | None = None


class AuditListResponse(BaseModel):
    success: bool = True
    count: int
    data: list[AuditRecordItem]


class AuditChainVerifyResponse(BaseModel):
    """Response for audit hash chain verification."""

    success: bool = True
    status: str
    records_checked: int
    first_break_id: int | None = None
