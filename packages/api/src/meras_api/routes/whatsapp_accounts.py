# This project was developed with assistance from AI tools.
"""WhatsApp account lookup routes (read-only)."""

from fastapi import APIRouter, Depends, Query
from meras_db import WhatsAppAccount, get_db
from meras_db.enums import EntityType
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentScope
from ..schemas.entities import ItemResponse, ListResponse, WhatsAppAccountItem
from ._scoped_handler import EntityId, get_entity_or_404, list_entities

router = APIRouter()


@router.get("/", response_model=ListResponse[WhatsAppAccountItem])
async def list_whatsapp_accounts(
    scope: CurrentScope,
    session: AsyncSession = Depends(get_db),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
) -> ListResponse[WhatsAppAccountItem]:
    """Accounts the caller is assigned to, plus (for supervisors) their branches' accounts."""
    return await list_entities(
        session,
        scope,
        model=WhatsAppAccount,
        entity_type=EntityType.WHATSAPP_ACCOUNT,
        item_cls=WhatsAppAccountItem,
        offset=offset,
        limit=limit,
        order_by=WhatsAppAccount.name.asc(),
    )


@router.get("/{account_id}", response_model=ItemResponse[WhatsAppAccountItem])
async def get_whatsapp_account(
    account_id: EntityId,
    scope: CurrentScope,
    session: AsyncSession = Depends(get_db),
) -> ItemResponse[WhatsAppAccountItem]:
    account = await get_entity_or_404(
        session,
        scope,
        model=WhatsAppAccount,
        entity_type=EntityType.WHATSAPP_ACCOUNT,
        entity_id=account_id,
    )
    return ItemResponse(data=WhatsAppAccountItem.model_validate(account))
