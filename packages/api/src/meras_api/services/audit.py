# This project was developed with assistance from AI tools.
"""Delete audit trail.

Writes append-only audit records with a SHA-256 hash chain for tamper
evidence, and a PostgreSQL advisory lock so concurrent writers compute the
chain serially. ``AuditSink`` writes each record in its own session and
transaction, independent of the request's session, so a record survives
even when the request's own work is rolled back.
"""

import hashlib
import json
import logging

from meras_db import AuditRecord, SessionLocal
from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..core.errors import StoreError
from ..schemas.audit import AuditRecordCreate

logger = logging.getLogger(__name__)

# Fixed advisory lock key for audit trail serialization.
# Only audit inserts are serialized; other DB operations are unaffected.
AUDIT_LOCK_KEY = 910_001


def _compute_hash(record: AuditRecord) -> str:
    """Compute SHA-256 hash of an audit record's key fields."""
    body = {
        "actor_id": record.actor_id,
        "actor_role": record.actor_role,
        "entity_type": record.entity_type,
        "entity_id": record.entity_id,
        "action": getattr(record.action, "value", record.action),
        "outcome": getattr(record.outcome, "value", record.outcome),
        "prior_state": record.prior_state,
    }
    payload = f"{record.id}|{record.timestamp}|{json.dumps(body, sort_keys=True, default=str)}"
    return hashlib.sha256(payload.encode()).hexdigest()


async def write_audit_record(session: AsyncSession, entry: AuditRecordCreate) -> AuditRecord:
    """Append one audit record with hash chain linkage.

    Acquires a transaction-scoped advisory lock, links to the most recent
    record, then adds and flushes. The caller commits.
    """
    await session.execute(text(f"SELECT pg_advisory_xact_lock({AUDIT_LOCK_KEY})"))

    latest_stmt = select(AuditRecord).order_by(AuditRecord.id.desc()).limit(1)
    result = await session.execute(latest_stmt)
    prev_record = result.scalar_one_or_none()

    prev_hash = _compute_hash(prev_record) if prev_record is not None else "genesis"

    record = AuditRecord(
        actor_id=entry.actor_id,
        actor_role=entry.actor_role.value,
        entity_type=entry.entity_type.value,
        entity_id=entry.entity_id,
        action=entry.action,
        outcome=entry.outcome,
        prior_state=entry.prior_state,
        prev_hash=prev_hash,
    )
    session.add(record)
    await session.flush()
    return record


async def verify_audit_chain(session: AsyncSession) -> dict:
    """Verify the integrity of the audit hash chain.

    Returns:
        {"status": "OK", "records_checked": N} on success, or
        {"status": "TAMPERED", "first_break_id": id, "records_checked": N}.
    """
    result = await session.execute(select(AuditRecord).order_by(AuditRecord.id.asc()))
    records = list(result.scalars().all())

    for i, record in enumerate(records):
        expected = "genesis" if i == 0 else _compute_hash(records[i - 1])
        if record.prev_hash != expected:
            return {
                "status": "TAMPERED",
                "first_break_id": record.id,
                "records_checked": i + 1,
            }

    return {"status": "OK", "records_checked": len(records)}


async def get_audit_records(
    session: AsyncSession,
    *,
    entity_type: str | None = None,
    entity_id: str | None = None,
    actor_id: str | None = None,
    outcome: str | None = None,
    limit: int = 100,
) -> list[AuditRecord]:
    """Return audit records, newest first, optionally filtered."""
    stmt = select(AuditRecord)
    if entity_type:
        stmt = stmt.where(AuditRecord.entity_type == entity_type)
    if entity_id:
        stmt = stmt.where(AuditRecord.entity_id == entity_id)
    if actor_id:
        stmt = stmt.where(AuditRecord.actor_id == actor_id)
    if outcome:
        stmt = stmt.where(AuditRecord.outcome == outcome)
    stmt = stmt.order_by(AuditRecord.id.desc()).limit(limit)
    result = await session.execute(stmt)
    return list(result.scalars().all())


class AuditSink:
    """Appends audit records, each in its own committed transaction."""

    def __init__(self, session_factory: async_sessionmaker | None = None):
        self._session_factory = session_factory or SessionLocal

    async def append(self, entry: AuditRecordCreate) -> AuditRecord:
        try:
            async with self._session_factory() as session:
                record = await write_audit_record(session, entry)
                await session.commit()
                return record
        except SQLAlchemyError as exc:
            raise StoreError("Audit write failed") from exc


_sink: AuditSink | None = None


def get_audit_sink() -> AuditSink:
    """FastAPI dependency / accessor for the process-wide audit sink."""
    global _sink  # noqa: PLW0603
    if _sink is None:
        _sink = AuditSink()
    return _sink
