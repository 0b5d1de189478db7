# This project was developed with assistance from AI tools.
"""Tests for the scoped entity store."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from meras_db import Booking, BotFlow, Template
from sqlalchemy.exc import OperationalError

from meras_api.core.errors import StoreError
from meras_api.core.predicates import MATCH_ALL, NOTHING, Eq, In
from meras_api.services.store import (
    count_scoped,
    create_entity,
    delete_scoped,
    find_scoped,
    get_scoped,
    update_scoped,
)


def _session(*, items=None, single=None, count=0, rowcount=1) -> AsyncMock:
    session = AsyncMock()
    result = MagicMock()
    result.scalars.return_value.all.return_value = items or []
    result.scalar_one_or_none.return_value = single
    result.scalar.return_value = count
    result.rowcount = rowcount
    session.execute = AsyncMock(return_value=result)
    session.add = MagicMock()
    return session


def _sql(session) -> str:
    stmt = session.execute.await_args.args[0]
    return str(stmt.compile(compile_kwargs={"literal_binds": True}))


async def test_find_with_nothing_skips_the_query():
    session = _session()
    assert await find_scoped(session, Booking, NOTHING) == []
    session.execute.assert_not_awaited()


async def test_count_with_nothing_skips_the_query():
    session = _session(count=5)
    assert await count_scoped(session, Booking, NOTHING) == 0
    session.execute.assert_not_awaited()


async def test_find_applies_predicate():
    rows = [SimpleNamespace(id="bk1")]
    session = _session(items=rows)
    assert await find_scoped(session, Booking, Eq("agent_id", "u1")) == rows
    sql = _sql(session)
    assert "bookings.agent_id = 'u1'" in sql
    assert "LIMIT 50" in sql


async def test_count_applies_predicate():
    session = _session(count=3)
    assert await count_scoped(session, Template, In("whatsapp_account_id", ("wa1",))) == 3
    assert "templates.whatsapp_account_id IN ('wa1')" in _sql(session)


async def test_get_out_of_scope_row_is_none():
    session = _session(single=None)
    assert await get_scoped(session, Template, "t1", In("whatsapp_account_id", ("wa1",))) is None
    sql = _sql(session)
    assert "templates.id = 't1'" in sql
    assert "templates.whatsapp_account_id IN ('wa1')" in sql


async def test_get_unscoped():
    template = SimpleNamespace(id="t1")
    session = _session(single=template)
    assert await get_scoped(session, Template, "t1") is template


async def test_store_failure_is_store_error():
    session = AsyncMock()
    session.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("down")))
    with pytest.raises(StoreError):
        await find_scoped(session, Booking, MATCH_ALL)


async def test_update_in_scope_row():
    booking = SimpleNamespace(id="bk1", notes=None)
    session = _session(single=booking)
    updated = await update_scoped(session, Booking, "bk1", Eq("agent_id", "u1"), {"notes": "late"})
    assert updated is booking
    assert booking.notes == "late"
    session.commit.assert_awaited_once()


async def test_update_out_of_scope_row_is_none():
    session = _session(single=None)
    assert await update_scoped(session, Booking, "bk1", Eq("agent_id", "u1"), {"notes": "x"}) is None
    session.commit.assert_not_awaited()


async def test_delete_reports_whether_a_row_went():
    session = _session(rowcount=1)
    assert await delete_scoped(session, Template, "t1") is True
    session.commit.assert_awaited_once()

    session = _session(rowcount=0)
    assert await delete_scoped(session, Template, "t1", In("whatsapp_account_id", ("wa1",))) is False


async def test_delete_with_nothing_skips_the_query():
    session = _session()
    assert await delete_scoped(session, Template, "t1", NOTHING) is False
    session.execute.assert_not_awaited()


async def test_create_commits_and_refreshes():
    session = _session()
    flow = BotFlow(name="Greeting", trigger="hi", steps=[])
    assert await create_entity(session, flow) is flow
    session.add.assert_called_once_with(flow)
    session.commit.assert_awaited_once()
    session.refresh.assert_awaited_once_with(flow)


async def test_create_failure_rolls_back():
    session = _session()
    session.commit = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("down")))
    with pytest.raises(StoreError):
        await create_entity(session, BotFlow(name="Greeting", trigger="hi", steps=[]))
    session.rollback.assert_awaited_once()
