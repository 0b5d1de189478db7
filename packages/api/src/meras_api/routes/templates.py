# This project was developed with assistance from AI tools.
"""Message template routes, scoped by WhatsApp account."""

from fastapi import APIRouter, Depends, Query, Request
from meras_db import Template, get_db
from meras_db.enums import EntityType
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import NotFound
from ..core.permissions import Capability
from ..middleware.auth import CurrentScope, require_capability
from ..schemas.entities import (
    DeleteResponse,
    ItemResponse,
    ListResponse,
    TemplateItem,
    TemplateUpdate,
)
from ..services.audit import AuditSink, get_audit_sink
from ..services.scope import build_template_scope
from ..services.store import update_scoped
from ._scoped_handler import EntityId, delete_entity, get_entity_or_404, list_entities

router = APIRouter()

_SNAPSHOT_FIELDS = ("name", "category")


@router.get("/", response_model=ListResponse[TemplateItem])
async def list_templates(
    scope: CurrentScope,
    session: AsyncSession = Depends(get_db),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    category: str | None = None,
) -> ListResponse[TemplateItem]:
    where = (Template.category == category,) if category else ()
    return await list_entities(
        session,
        scope,
        model=Template,
        entity_type=EntityType.TEMPLATE,
        item_cls=TemplateItem,
        offset=offset,
        limit=limit,
        where=where,
        order_by=Template.name.asc(),
    )


@router.get("/{template_id}", response_model=ItemResponse[TemplateItem])
async def get_template(
    template_id: EntityId,
    scope: CurrentScope,
    session: AsyncSession = Depends(get_db),
) -> ItemResponse[TemplateItem]:
    template = await get_entity_or_404(
        session, scope, model=Template, entity_type=EntityType.TEMPLATE, entity_id=template_id
    )
    return ItemResponse(data=TemplateItem.model_validate(template))


@router.put("/{template_id}", response_model=ItemResponse[TemplateItem])
async def update_template(
    template_id: EntityId,
    body: TemplateUpdate,
    scope: CurrentScope,
    session: AsyncSession = Depends(get_db),
) -> ItemResponse[TemplateItem]:
    require_capability(scope, Capability.EDIT_TEMPLATE)
    template = await update_scoped(
        session, Template, template_id, build_template_scope(scope), body.model_dump()
    )
    if template is None:
        raise NotFound("Template not found")
    return ItemResponse(data=TemplateItem.model_validate(template))


@router.delete("/{template_id}", response_model=DeleteResponse)
async def delete_template(
    template_id: EntityId,
    request: Request,
    _scope: CurrentScope,
    session: AsyncSession = Depends(get_db),
    sink: AuditSink = Depends(get_audit_sink),
) -> DeleteResponse:
    """Delete a template. The audit record keeps its name and category."""
    return await delete_entity(
        request,
        session,
        model=Template,
        entity_type=EntityType.TEMPLATE,
        entity_id=template_id,
        snapshot_fields=_SNAPSHOT_FIELDS,
        sink=sink,
    )
