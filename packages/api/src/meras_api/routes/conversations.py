# This project was developed with assistance from AI tools.
"""Conversation routes.

Supervisors see conversations of contacts in their branches or carried by
their WhatsApp accounts; agents see only conversations assigned to them.
"""

from fastapi import APIRouter, Depends, Query, Request
from meras_db import Conversation, get_db
from meras_db.enums import ConversationStatus, EntityType
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentScope
from ..schemas.entities import ConversationItem, DeleteResponse, ItemResponse, ListResponse
from ..services.audit import AuditSink, get_audit_sink
from ._scoped_handler import EntityId, delete_entity, get_entity_or_404, list_entities

router = APIRouter()

_SNAPSHOT_FIELDS = ("contact_id", "assigned_to_id", "status")


@router.get("/", response_model=ListResponse[ConversationItem])
async def list_conversations(
    scope: CurrentScope,
    session: AsyncSession = Depends(get_db),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    status: ConversationStatus | None = None,
) -> ListResponse[ConversationItem]:
    where = (Conversation.status == status,) if status else ()
    return await list_entities(
        session,
        scope,
        model=Conversation,
        entity_type=EntityType.CONVERSATION,
        item_cls=ConversationItem,
        offset=offset,
        limit=limit,
        where=where,
        order_by=Conversation.updated_at.desc(),
    )


@router.get("/{conversation_id}", response_model=ItemResponse[ConversationItem])
async def get_conversation(
    conversation_id: EntityId,
    scope: CurrentScope,
    session: AsyncSession = Depends(get_db),
) -> ItemResponse[ConversationItem]:
    conversation = await get_entity_or_404(
        session,
        scope,
        model=Conversation,
        entity_type=EntityType.CONVERSATION,
        entity_id=conversation_id,
    )
    return ItemResponse(data=ConversationItem.model_validate(conversation))


@router.delete("/{conversation_id}", response_model=DeleteResponse)
async def delete_conversation(
    conversation_id: EntityId,
    request: Request,
    _scope: CurrentScope,
    session: AsyncSession = Depends(get_db),
    sink: AuditSink = Depends(get_audit_sink),
) -> DeleteResponse:
    """Delete a conversation and its messages (ADMIN only)."""
    return await delete_entity(
        request,
        session,
        model=Conversation,
        entity_type=EntityType.CONVERSATION,
        entity_id=conversation_id,
        snapshot_fields=_SNAPSHOT_FIELDS,
        sink=sink,
    )
