# This project was developed with assistance from AI tools.
"""Delete guard and audit recorder.

Every delete attempt by an authenticated actor produces exactly one audit
record, granted or denied, written before the caller is allowed to mutate
anything. Deny-by-default: ADMIN may delete everything, other roles only the
entity types whose delete capability the permission table grants them.
"""

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

from meras_db.enums import AuditOutcome, EntityType
from pydantic_core import to_jsonable_python

from ..core.errors import Forbidden
from ..core.permissions import is_delete_allowed
from ..schemas.audit import AuditRecordCreate
from ..schemas.auth import DeleteGrant, Scope
from .audit import AuditSink

logger = logging.getLogger(__name__)


def snapshot(obj: Any, fields: Iterable[str]) -> dict[str, Any] | None:
    """Capture JSON-safe prior state of ``obj`` before it is mutated."""
    if obj is None:
        return None
    if isinstance(obj, dict):
        data = {f: obj.get(f) for f in fields}
    else:
        data = {f: getattr(obj, f, None) for f in fields}
    return to_jsonable_python(data)


async def _record_attempt(sink: AuditSink, entry: AuditRecordCreate) -> None:
    """Write the audit record; shielded from request cancellation, failures only logged."""
    try:
        await asyncio.shield(sink.append(entry))
    except asyncio.CancelledError:
        raise
    except Exception:
        logger.exception(
            "Audit write failed: actor=%s %s:%s outcome=%s",
            entry.actor_id,
            entry.entity_type.value,
            entry.entity_id,
            entry.outcome.value,
        )


async def guard_delete(
    scope: Scope,
    entity_type: EntityType,
    entity_id: str,
    prior_state: dict[str, Any] | None,
    *,
    sink: AuditSink,
) -> DeleteGrant:
    """Decide, audit, then allow or refuse a delete.

    Raises:
        Forbidden: the actor's role may not delete ``entity_type``. The
            DENIED audit record has already been written.
    """
    entity_type = EntityType(entity_type)
    allowed = is_delete_allowed(scope.role, entity_type)

    entry = AuditRecordCreate(
        actor_id=scope.user_id,
        actor_role=scope.role,
        entity_type=entity_type,
        entity_id=entity_id,
        outcome=AuditOutcome.GRANTED if allowed else AuditOutcome.DENIED,
        prior_state=to_jsonable_python(prior_state) if prior_state is not None else None,
    )
    await _record_attempt(sink, entry)

    if not allowed:
        logger.warning(
            "Delete denied: user=%s role=%s %s:%s",
            scope.user_id,
            scope.role.value,
            entity_type.value,
            entity_id,
        )
        raise Forbidden(f"You do not have permission to delete this {entity_type.value}")

    return DeleteGrant(scope=scope)
