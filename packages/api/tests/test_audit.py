# This project was developed with assistance from AI tools.
"""Tests for the delete audit trail: hash chain and sink."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from meras_db import AuditRecord
from meras_db.enums import AuditAction, AuditOutcome, EntityType, UserRole
from sqlalchemy.exc import OperationalError

from meras_api.core.errors import StoreError
from meras_api.schemas.audit import AuditRecordCreate
from meras_api.services.audit import (
    AUDIT_LOCK_KEY,
    AuditSink,
    _compute_hash,
    verify_audit_chain,
    write_audit_record,
)

ENTRY = AuditRecordCreate(
    actor_id="sup-1",
    actor_role=UserRole.SUPERVISOR,
    entity_type=EntityType.TEMPLATE,
    entity_id="t1",
    outcome=AuditOutcome.DENIED,
    prior_state={"name": "Welcome", "category": "greeting"},
)


def _record(record_id: int, prev_hash: str, entity_id: str = "t1") -> AuditRecord:
    return AuditRecord(
        id=record_id,
        timestamp=datetime(2026, 3, 1, 12, record_id, tzinfo=UTC),
        prev_hash=prev_hash,
        actor_id="admin-1",
        actor_role="ADMIN",
        entity_type="Template",
        entity_id=entity_id,
        action=AuditAction.DELETE,
        outcome=AuditOutcome.GRANTED,
        prior_state={"name": f"template-{record_id}"},
    )


def _chain(n: int) -> list[AuditRecord]:
    records = []
    for i in range(1, n + 1):
        prev = "genesis" if not records else _compute_hash(records[-1])
        records.append(_record(i, prev))
    return records


def _write_session(latest: AuditRecord | None) -> AsyncMock:
    session = AsyncMock()
    latest_result = MagicMock()
    latest_result.scalar_one_or_none.return_value = latest
    session.execute = AsyncMock(side_effect=[MagicMock(), latest_result])
    session.add = MagicMock()
    return session


def _list_session(records: list[AuditRecord]) -> AsyncMock:
    session = AsyncMock()
    result = MagicMock()
    result.scalars.return_value.all.return_value = records
    session.execute = AsyncMock(return_value=result)
    return session


# ---------------------------------------------------------------------------
# Hashing
# ---------------------------------------------------------------------------


def test_hash_is_deterministic():
    assert _compute_hash(_record(1, "genesis")) == _compute_hash(_record(1, "genesis"))


def test_hash_covers_prior_state():
    a = _record(1, "genesis")
    b = _record(1, "genesis")
    b.prior_state = {"name": "edited"}
    assert _compute_hash(a) != _compute_hash(b)


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


async def test_first_record_links_to_genesis():
    session = _write_session(latest=None)
    record = await write_audit_record(session, ENTRY)

    assert record.prev_hash == "genesis"
    assert record.actor_role == "SUPERVISOR"
    assert record.entity_type == "Template"
    assert record.outcome == AuditOutcome.DENIED
    assert record.prior_state == {"name": "Welcome", "category": "greeting"}
    session.add.assert_called_once_with(record)
    session.flush.assert_awaited_once()
    session.commit.assert_not_awaited()


async def test_record_links_to_latest():
    latest = _record(7, "abc")
    session = _write_session(latest=latest)
    record = await write_audit_record(session, ENTRY)
    assert record.prev_hash == _compute_hash(latest)


async def test_write_takes_advisory_lock_first():
    session = _write_session(latest=None)
    await write_audit_record(session, ENTRY)
    lock_stmt = session.execute.await_args_list[0].args[0]
    assert str(AUDIT_LOCK_KEY) in str(lock_stmt)


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------


async def test_verify_intact_chain():
    result = await verify_audit_chain(_list_session(_chain(4)))
    assert result == {"status": "OK", "records_checked": 4}


async def test_verify_empty_chain():
    result = await verify_audit_chain(_list_session([]))
    assert result == {"status": "OK", "records_checked": 0}


async def test_verify_detects_edited_record():
    records = _chain(4)
    records[1].prior_state = {"name": "rewritten"}
    result = await verify_audit_chain(_list_session(records))
    assert result["status"] == "TAMPERED"
    assert result["first_break_id"] == 3


async def test_verify_detects_removed_record():
    records = _chain(4)
    del records[1]
    result = await verify_audit_chain(_list_session(records))
    assert result["status"] == "TAMPERED"
    assert result["first_break_id"] == 3


# ---------------------------------------------------------------------------
# Sink
# ---------------------------------------------------------------------------


def _factory(session) -> MagicMock:
    factory = MagicMock()
    factory.return_value.__aenter__.return_value = session
    return factory


async def test_sink_commits_in_its_own_session():
    session = _write_session(latest=None)
    sink = AuditSink(session_factory=_factory(session))

    record = await sink.append(ENTRY)

    assert record.prev_hash == "genesis"
    session.commit.assert_awaited_once()


async def test_sink_store_failure_raises_store_error():
    session = AsyncMock()
    session.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("down")))
    sink = AuditSink(session_factory=_factory(session))

    with pytest.raises(StoreError, match="Audit write failed"):
        await sink.append(ENTRY)
