# This project was developed with assistance from AI tools.
"""Schema-level checks on the ORM models (no database needed)."""

from meras_db import (
    AuditRecord,
    Base,
    Booking,
    BotFlow,
    Contact,
    Conversation,
    Template,
    User,
)
from meras_db.enums import EntityType, UserRole
from sqlalchemy.dialects.postgresql import JSONB


def test_all_tables_registered():
    assert {
        "users",
        "branches",
        "whatsapp_accounts",
        "user_branches",
        "user_whatsapp_accounts",
        "contacts",
        "conversations",
        "messages",
        "bookings",
        "templates",
        "bot_flows",
        "offers",
        "audit_records",
    } <= set(Base.metadata.tables)


def test_user_membership_relationships_are_many_to_many():
    rels = User.__mapper__.relationships
    assert rels["branches"].secondary is not None
    assert rels["whatsapp_accounts"].secondary is not None


def test_scope_paths_resolve_to_relationships():
    assert Conversation.__mapper__.relationships["contact"].uselist is False
    assert Conversation.__mapper__.relationships["messages"].uselist is True
    assert Contact.__mapper__.relationships["conversations"].uselist is True
    assert Booking.__mapper__.relationships["contact"].uselist is False


def test_anchor_columns_are_nullable():
    assert Template.__table__.c.whatsapp_account_id.nullable
    assert BotFlow.__table__.c.branch_id.nullable
    assert BotFlow.__table__.c.whatsapp_account_id.nullable


def test_audit_record_has_no_foreign_keys():
    """Audit rows outlive the entities and users they describe."""
    assert not AuditRecord.__table__.foreign_keys


def test_enum_values():
    assert {r.value for r in UserRole} == {"ADMIN", "SUPERVISOR", "AGENT"}
    assert EntityType("BotFlow") is EntityType.BOT_FLOW


def test_contact_tags_are_jsonb():
    """Tag filtering relies on the JSONB containment operator."""
    assert isinstance(Contact.__table__.c.tags.type, JSONB)


def test_audit_entity_id_fits_any_routed_id():
    assert AuditRecord.__table__.c.entity_id.type.length >= 255
