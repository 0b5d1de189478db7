# This project was developed with assistance from AI tools.
"""Shared list/get/delete handlers for the scoped entity routes.

Each entity router supplies its model, entity type and item schema; this
module applies the caller's scope predicate and shapes the responses.
"""

import logging
from collections.abc import Iterable
from typing import Annotated

from fastapi import Path, Request
from meras_db.enums import EntityType
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import NotFound
from ..middleware.auth import require_delete_allowed
from ..schemas import Pagination
from ..schemas.auth import Scope
from ..schemas.entities import DeleteResponse, ListResponse
from ..services.audit import AuditSink
from ..services.delete_guard import snapshot
from ..services.scope import build_scope_filter
from ..services.store import count_scoped, delete_scoped, find_scoped, get_scoped

logger = logging.getLogger(__name__)

# Primary keys are 36-character UUID strings.
EntityId = Annotated[str, Path(max_length=36)]


async def list_entities(
    session: AsyncSession,
    scope: Scope,
    *,
    model: type,
    entity_type: EntityType,
    item_cls: type[BaseModel],
    offset: int,
    limit: int,
    where: tuple = (),
    order_by=None,
) -> ListResponse:
    """List the rows of ``model`` visible to ``scope``.

    An empty scope yields ``data == []``, never an error.
    """
    predicate = build_scope_filter(entity_type, scope)
    rows = await find_scoped(
        session, model, predicate, where=where, order_by=order_by, offset=offset, limit=limit
    )
    total = await count_scoped(session, model, predicate, where=where)
    return ListResponse(
        data=[item_cls.model_validate(r) for r in rows],
        count=len(rows),
        pagination=Pagination(
            total=total,
            offset=offset,
            limit=limit,
            has_more=(offset + limit) < total,
        ),
    )


async def get_entity_or_404(
    session: AsyncSession,
    scope: Scope,
    *,
    model: type,
    entity_type: EntityType,
    entity_id: str,
):
    obj = await get_scoped(session, model, entity_id, build_scope_filter(entity_type, scope))
    if obj is None:
        raise NotFound(f"{entity_type.value} not found")
    return obj


async def delete_entity(
    request: Request,
    session: AsyncSession,
    *,
    model: type,
    entity_type: EntityType,
    entity_id: str,
    snapshot_fields: Iterable[str],
    sink: AuditSink,
) -> DeleteResponse:
    """Snapshot, guard, then delete one row.

    The prior state is read before the guard so the audit record carries it.
    A granted delete still honours the caller's scope: a row the caller
    cannot see is reported as 404.
    """
    target = await get_scoped(session, model, entity_id)
    prior_state = snapshot(target, snapshot_fields)

    grant = await require_delete_allowed(
        request, session, entity_type, entity_id, prior_state, sink=sink
    )

    deleted = await delete_scoped(
        session, model, entity_id, build_scope_filter(entity_type, grant.scope)
    )
    if not deleted:
        raise NotFound(f"{entity_type.value} not found")

    logger.info(
        "Deleted %s:%s by user=%s", entity_type.value, entity_id, grant.scope.user_id
    )
    return DeleteResponse()
