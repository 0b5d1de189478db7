# This project was developed with assistance from AI tools.
"""Booking routes with row-level ownership for agents."""

from fastapi import APIRouter, Depends, Query, Request
from meras_db import Booking, get_db
from meras_db.enums import BookingStatus, EntityType
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import NotFound
from ..core.permissions import Capability
from ..middleware.auth import CurrentScope, require_capability
from ..schemas.entities import (
    BookingItem,
    BookingUpdate,
    DeleteResponse,
    ItemResponse,
    ListResponse,
)
from ..services.audit import AuditSink, get_audit_sink
from ..services.scope import build_booking_scope
from ..services.store import update_scoped
from ._scoped_handler import EntityId, delete_entity, get_entity_or_404, list_entities

router = APIRouter()

_SNAPSHOT_FIELDS = ("booking_number", "contact_id", "agent_id", "date", "status")


@router.get("/", response_model=ListResponse[BookingItem])
async def list_bookings(
    scope: CurrentScope,
    session: AsyncSession = Depends(get_db),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    status: BookingStatus | None = None,
) -> ListResponse[BookingItem]:
    """List bookings: branch contacts for supervisors, own bookings for agents."""
    where = (Booking.status == status,) if status else ()
    return await list_entities(
        session,
        scope,
        model=Booking,
        entity_type=EntityType.BOOKING,
        item_cls=BookingItem,
        offset=offset,
        limit=limit,
        where=where,
        order_by=Booking.date.desc(),
    )


@router.get("/{booking_id}", response_model=ItemResponse[BookingItem])
async def get_booking(
    booking_id: EntityId,
    scope: CurrentScope,
    session: AsyncSession = Depends(get_db),
) -> ItemResponse[BookingItem]:
    booking = await get_entity_or_404(
        session, scope, model=Booking, entity_type=EntityType.BOOKING, entity_id=booking_id
    )
    return ItemResponse(data=BookingItem.model_validate(booking))


@router.patch("/{booking_id}", response_model=ItemResponse[BookingItem])
async def update_booking(
    booking_id: EntityId,
    body: BookingUpdate,
    scope: CurrentScope,
    session: AsyncSession = Depends(get_db),
) -> ItemResponse[BookingItem]:
    """Reschedule or change the status of a visible booking."""
    require_capability(scope, Capability.EDIT_BOOKING)
    booking = await update_scoped(
        session,
        Booking,
        booking_id,
        build_booking_scope(scope),
        body.model_dump(exclude_unset=True),
    )
    if booking is None:
        raise NotFound("Booking not found")
    return ItemResponse(data=BookingItem.model_validate(booking))


@router.delete("/{booking_id}", response_model=DeleteResponse)
async def delete_booking(
    booking_id: EntityId,
    request: Request,
    _scope: CurrentScope,
    session: AsyncSession = Depends(get_db),
    sink: AuditSink = Depends(get_audit_sink),
) -> DeleteResponse:
    return await delete_entity(
        request,
        session,
        model=Booking,
        entity_type=EntityType.BOOKING,
        entity_id=booking_id,
        snapshot_fields=_SNAPSHOT_FIELDS,
        sink=sink,
    )
