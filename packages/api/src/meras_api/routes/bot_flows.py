# This project was developed with assistance from AI tools.
"""Bot flow routes. Flows are anchored to a branch, an account, or both."""

import logging

from fastapi import APIRouter, Depends, Query, Request, status
from meras_db import BotFlow, get_db
from meras_db.enums import EntityType
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import Forbidden
from ..core.permissions import Capability
from ..core.predicates import matches
from ..middleware.auth import CurrentScope, require_capability
from ..schemas.entities import (
    BotFlowCreate,
    BotFlowItem,
    DeleteResponse,
    ItemResponse,
    ListResponse,
)
from ..services.audit import AuditSink, get_audit_sink
from ..services.scope import build_bot_flow_scope
from ..services.store import create_entity
from ._scoped_handler import EntityId, delete_entity, get_entity_or_404, list_entities

logger = logging.getLogger(__name__)

router = APIRouter()

_SNAPSHOT_FIELDS = ("name", "trigger", "is_active", "branch_id", "whatsapp_account_id")


@router.get("/", response_model=ListResponse[BotFlowItem])
async def list_bot_flows(
    scope: CurrentScope,
    session: AsyncSession = Depends(get_db),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    active_only: bool = Query(default=False),
) -> ListResponse[BotFlowItem]:
    where = (BotFlow.is_active.is_(True),) if active_only else ()
    return await list_entities(
        session,
        scope,
        model=BotFlow,
        entity_type=EntityType.BOT_FLOW,
        item_cls=BotFlowItem,
        offset=offset,
        limit=limit,
        where=where,
        order_by=BotFlow.created_at.desc(),
    )


@router.get("/{flow_id}", response_model=ItemResponse[BotFlowItem])
async def get_bot_flow(
    flow_id: EntityId,
    scope: CurrentScope,
    session: AsyncSession = Depends(get_db),
) -> ItemResponse[BotFlowItem]:
    flow = await get_entity_or_404(
        session, scope, model=BotFlow, entity_type=EntityType.BOT_FLOW, entity_id=flow_id
    )
    return ItemResponse(data=BotFlowItem.model_validate(flow))


@router.post("/", response_model=ItemResponse[BotFlowItem], status_code=status.HTTP_201_CREATED)
async def create_bot_flow(
    body: BotFlowCreate,
    scope: CurrentScope,
    session: AsyncSession = Depends(get_db),
) -> ItemResponse[BotFlowItem]:
    """Create a bot flow.

    Non-admins must anchor the new flow to one of their own branches or
    accounts; a flow with neither anchor is visible to ADMIN only.
    """
    require_capability(scope, Capability.CREATE_BOT_FLOW)
    if not matches(build_bot_flow_scope(scope), body):
        logger.warning(
            "Bot flow anchor outside scope: user=%s branch=%s account=%s",
            scope.user_id,
            body.branch_id,
            body.whatsapp_account_id,
        )
        raise Forbidden("Bot flow must belong to one of your branches or accounts")

    flow = await create_entity(session, BotFlow(**body.model_dump()))
    return ItemResponse(data=BotFlowItem.model_validate(flow))


@router.delete("/{flow_id}", response_model=DeleteResponse)
async def delete_bot_flow(
    flow_id: EntityId,
    request: Request,
    _scope: CurrentScope,
    session: AsyncSession = Depends(get_db),
    sink: AuditSink = Depends(get_audit_sink),
) -> DeleteResponse:
    return await delete_entity(
        request,
        session,
        model=BotFlow,
        entity_type=EntityType.BOT_FLOW,
        entity_id=flow_id,
        snapshot_fields=_SNAPSHOT_FIELDS,
        sink=sink,
    )
