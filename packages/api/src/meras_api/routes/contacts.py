# This project was developed with assistance from AI tools.
"""Contact routes, filtered by the caller's contact scope."""

from fastapi import APIRouter, Depends, Query, Request
from meras_db import Contact, get_db
from meras_db.enums import EntityType
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import NotFound
from ..core.permissions import Capability
from ..middleware.auth import CurrentScope, require_capability
from ..schemas.entities import (
    ContactItem,
    ContactUpdate,
    DeleteResponse,
    ItemResponse,
    ListResponse,
)
from ..services.audit import AuditSink, get_audit_sink
from ..services.scope import build_contact_scope
from ..services.store import update_scoped
from ._scoped_handler import EntityId, delete_entity, get_entity_or_404, list_entities

router = APIRouter()

_SNAPSHOT_FIELDS = ("name", "phone", "email", "branch_id")


@router.get("/", response_model=ListResponse[ContactItem])
async def list_contacts(
    scope: CurrentScope,
    session: AsyncSession = Depends(get_db),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    tag: str | None = None,
) -> ListResponse[ContactItem]:
    """List contacts in the caller's branches, accounts or own conversations."""
    where = (Contact.tags.contains([tag]),) if tag else ()
    return await list_entities(
        session,
        scope,
        model=Contact,
        entity_type=EntityType.CONTACT,
        item_cls=ContactItem,
        offset=offset,
        limit=limit,
        where=where,
        order_by=Contact.created_at.desc(),
    )


@router.get("/{contact_id}", response_model=ItemResponse[ContactItem])
async def get_contact(
    contact_id: EntityId,
    scope: CurrentScope,
    session: AsyncSession = Depends(get_db),
) -> ItemResponse[ContactItem]:
    contact = await get_entity_or_404(
        session, scope, model=Contact, entity_type=EntityType.CONTACT, entity_id=contact_id
    )
    return ItemResponse(data=ContactItem.model_validate(contact))


@router.patch("/{contact_id}", response_model=ItemResponse[ContactItem])
async def update_contact(
    contact_id: EntityId,
    body: ContactUpdate,
    scope: CurrentScope,
    session: AsyncSession = Depends(get_db),
) -> ItemResponse[ContactItem]:
    """Edit a contact the caller can see."""
    require_capability(scope, Capability.EDIT_CONTACT)
    contact = await update_scoped(
        session,
        Contact,
        contact_id,
        build_contact_scope(scope),
        body.model_dump(exclude_unset=True),
    )
    if contact is None:
        raise NotFound("Contact not found")
    return ItemResponse(data=ContactItem.model_validate(contact))


@router.delete("/{contact_id}", response_model=DeleteResponse)
async def delete_contact(
    contact_id: EntityId,
    request: Request,
    _scope: CurrentScope,
    session: AsyncSession = Depends(get_db),
    sink: AuditSink = Depends(get_audit_sink),
) -> DeleteResponse:
    return await delete_entity(
        request,
        session,
        model=Contact,
        entity_type=EntityType.CONTACT,
        entity_id=contact_id,
        snapshot_fields=_SNAPSHOT_FIELDS,
        sink=sink,
    )
