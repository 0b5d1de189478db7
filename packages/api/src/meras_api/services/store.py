# This project was developed with assistance from AI tools.
"""Generic scoped entity store.

Every read and write is filtered through a scope Predicate. Out-of-scope rows
behave exactly like missing rows: ``get_scoped`` returns None and
``delete_scoped`` returns False, which routes map to 404.
"""

import logging
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import StoreError
from ..core.predicates import MATCH_ALL, Predicate, is_match_nothing, to_sqlalchemy

logger = logging.getLogger(__name__)


async def _execute(session: AsyncSession, stmt):
    try:
        return await session.execute(stmt)
    except SQLAlchemyError as exc:
        logger.error("Entity store query failed: %s", exc)
        raise StoreError() from exc


async def find_scoped(
    session: AsyncSession,
    model: type,
    predicate: Predicate,
    *,
    where: tuple = (),
    order_by: Any = None,
    offset: int = 0,
    limit: int = 50,
    options: tuple = (),
) -> list:
    """Return rows of ``model`` matching ``predicate`` and any extra WHERE clauses."""
    if is_match_nothing(predicate):
        return []

    stmt = select(model).where(to_sqlalchemy(predicate, model), *where)
    if options:
        stmt = stmt.options(*options)
    if order_by is not None:
        stmt = stmt.order_by(order_by)
    stmt = stmt.offset(offset).limit(limit)
    result = await _execute(session, stmt)
    return list(result.scalars().all())


async def count_scoped(
    session: AsyncSession, model: type, predicate: Predicate, *, where: tuple = ()
) -> int:
    if is_match_nothing(predicate):
        return 0
    stmt = select(func.count()).select_from(model).where(to_sqlalchemy(predicate, model), *where)
    result = await _execute(session, stmt)
    return result.scalar() or 0


async def get_scoped(
    session: AsyncSession, model: type, entity_id: str, predicate: Predicate = MATCH_ALL
):
    """Return the row with ``entity_id`` if it exists and is in scope, else None."""
    if is_match_nothing(predicate):
        return None
    stmt = select(model).where(model.id == entity_id, to_sqlalchemy(predicate, model))
    result = await _execute(session, stmt)
    return result.scalar_one_or_none()


async def update_scoped(
    session: AsyncSession,
    model: type,
    entity_id: str,
    predicate: Predicate,
    values: dict[str, Any],
):
    """Apply ``values`` to an in-scope row and commit. Returns None when not visible."""
    obj = await get_scoped(session, model, entity_id, predicate)
    if obj is None:
        return None

    for field, value in values.items():
        setattr(obj, field, value)

    try:
        await session.commit()
        await session.refresh(obj)
    except SQLAlchemyError as exc:
        await session.rollback()
        raise StoreError() from exc
    return obj


async def delete_scoped(
    session: AsyncSession, model: type, entity_id: str, predicate: Predicate = MATCH_ALL
) -> bool:
    """Delete an in-scope row and commit.

    Returns False when no row was deleted (absent, out of scope, or removed
    concurrently by another request).
    """
    if is_match_nothing(predicate):
        return False
    stmt = (
        delete(model)
        .where(model.id == entity_id, to_sqlalchemy(predicate, model))
        .execution_options(synchronize_session=False)
    )
    result = await _execute(session, stmt)
    try:
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        raise StoreError() from exc
    return bool(result.rowcount)


async def create_entity(session: AsyncSession, obj):
    """Insert ``obj`` and commit. Scope checks on the new row are the caller's job."""
    session.add(obj)
    try:
        await session.commit()
        await session.refresh(obj)
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.error("Entity insert failed: %s", exc)
        raise StoreError() from exc
    return obj
