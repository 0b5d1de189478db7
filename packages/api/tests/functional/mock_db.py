# This project was developed with assistance from AI tools.
"""Mock database utilities for functional tests.

Provides an AsyncMock session that handles the result patterns used by the
entity store:
  1. ``.scalar()`` -- count queries
  2. ``.scalars().all()`` -- list queries
  3. ``.scalar_one_or_none()`` -- single-item queries
  4. ``.rowcount`` -- bulk deletes
"""

from unittest.mock import AsyncMock, MagicMock

from fastapi import Request
from meras_db import get_db
from sqlalchemy.sql import Executable

from meras_api.middleware.auth import require_auth, require_auth_with_scope
from meras_api.schemas.auth import Identity, Scope
from meras_api.services.audit import get_audit_sink


class RecordingSink:
    """Audit sink that keeps records in memory."""

    def __init__(self):
        self.records = []

    async def append(self, entry):
        self.records.append(entry)
        return entry


def make_mock_session(
    items: list | None = None,
    single: object | None = None,
    count: int | None = None,
    rowcount: int = 1,
) -> AsyncMock:
    """Build an AsyncMock session that returns predictable query results.

    When only ``items`` is provided, count and single are inferred:
    - count = len(items)
    - single = items[0] if items else None
    """
    if items is not None and count is None:
        count = len(items)
    if items is not None and single is None:
        single = items[0] if items else None

    session = AsyncMock()

    mock_result = MagicMock()
    mock_result.scalar.return_value = count or 0
    mock_result.scalars.return_value.all.return_value = items or []
    mock_result.scalar_one_or_none.return_value = single
    mock_result.rowcount = rowcount

    session.execute = AsyncMock(return_value=mock_result)

    # session.add() is synchronous in SQLAlchemy
    def track_add(obj):
        if getattr(obj, "id", None) is None:
            obj.id = "new-entity-001"

    session.add = MagicMock(side_effect=track_add)
    return session


def executed_sql(session: AsyncMock) -> list[str]:
    """Render every statement the session executed, with literal parameters."""
    rendered = []
    for call in session.execute.await_args_list:
        stmt = call.args[0]
        if isinstance(stmt, Executable):
            rendered.append(str(stmt.compile(compile_kwargs={"literal_binds": True})))
    return rendered


def configure_app_for_persona(
    app,
    persona: tuple[Identity, Scope],
    session: AsyncMock,
    sink: RecordingSink | None = None,
) -> RecordingSink:
    """Override authentication, get_db and the audit sink on the real app."""
    identity, scope = persona
    sink = sink or RecordingSink()

    async def fake_identity(request: Request):
        request.state.auth = (identity, scope)
        return identity

    async def fake_scope(request: Request):
        request.state.auth = (identity, scope)
        return scope

    async def fake_db():
        yield session

    app.dependency_overrides[require_auth] = fake_identity
    app.dependency_overrides[require_auth_with_scope] = fake_scope
    app.dependency_overrides[get_db] = fake_db
    app.dependency_overrides[get_audit_sink] = lambda: sink
    return sink
