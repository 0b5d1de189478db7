# This project was developed with assistance from AI tools.
"""initial schema: users, branches, whatsapp accounts, scoped entities, audit

Revision ID: 3a1f0c2d9b10
Revises:
Create Date: 2026-10-12 09:14:22.418305

"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "3a1f0c2d9b10"
down_revision = None
branch_labels = None
depends_on = None


def _id() -> sa.Column:
    return sa.Column("id", sa.String(36), nullable=False)


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False,
    )


def _updated_at() -> sa.Column:
    return sa.Column(
        "updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "branches",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="AGENT"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_users_email", "users", ["email"])

    op.create_table(
        "whatsapp_accounts",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("branch_id", sa.String(36), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["branch_id"], ["branches.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_whatsapp_accounts_branch_id", "whatsapp_accounts", ["branch_id"])

    op.create_table(
        "user_branches",
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("branch_id", sa.String(36), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["branch_id"], ["branches.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id", "branch_id"),
    )

    op.create_table(
        "user_whatsapp_accounts",
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("whatsapp_account_id", sa.String(36), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["whatsapp_account_id"], ["whatsapp_accounts.id"], ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("user_id", "whatsapp_account_id"),
    )

    op.create_table(
        "contacts",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("tags", postgresql.JSONB(), nullable=True),
        sa.Column("branch_id", sa.String(36), nullable=True),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(["branch_id"], ["branches.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_contacts_phone", "contacts", ["phone"])
    op.create_index("ix_contacts_branch_id", "contacts", ["branch_id"])

    op.create_table(
        "conversations",
        _id(),
        sa.Column("contact_id", sa.String(36), nullable=False),
        sa.Column("assigned_to_id", sa.String(36), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="OPEN"),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(["contact_id"], ["contacts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["assigned_to_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_conversations_contact_id", "conversations", ["contact_id"])
    op.create_index("ix_conversations_assigned_to_id", "conversations", ["assigned_to_id"])

    op.create_table(
        "messages",
        _id(),
        sa.Column("conversation_id", sa.String(36), nullable=False),
        sa.Column("whatsapp_account_id", sa.String(36), nullable=True),
        sa.Column("body", sa.Text(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["conversation_id"], ["conversations.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["whatsapp_account_id"], ["whatsapp_accounts.id"], ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_messages_conversation_id", "messages", ["conversation_id"])
    op.create_index("ix_messages_whatsapp_account_id", "messages", ["whatsapp_account_id"])

    op.create_table(
        "bookings",
        _id(),
        sa.Column("booking_number", sa.String(50), nullable=False),
        sa.Column("contact_id", sa.String(36), nullable=False),
        sa.Column("agent_id", sa.String(36), nullable=True),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="CONFIRMED"),
        _created_at(),
        sa.ForeignKeyConstraint(["contact_id"], ["contacts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["agent_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("booking_number"),
    )
    op.create_index("ix_bookings_contact_id", "bookings", ["contact_id"])
    op.create_index("ix_bookings_agent_id", "bookings", ["agent_id"])

    op.create_table(
        "templates",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("language", sa.String(10), nullable=True),
        sa.Column("whatsapp_account_id", sa.String(36), nullable=True),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(
            ["whatsapp_account_id"], ["whatsapp_accounts.id"], ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_templates_whatsapp_account_id", "templates", ["whatsapp_account_id"])

    op.create_table(
        "bot_flows",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("trigger", sa.String(255), nullable=False),
        sa.Column("steps", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("branch_id", sa.String(36), nullable=True),
        sa.Column("whatsapp_account_id", sa.String(36), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["branch_id"], ["branches.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(
            ["whatsapp_account_id"], ["whatsapp_accounts.id"], ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_bot_flows_branch_id", "bot_flows", ["branch_id"])
    op.create_index("ix_bot_flows_whatsapp_account_id", "bot_flows", ["whatsapp_account_id"])

    op.create_table(
        "offers",
        _id(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("whatsapp_account_id", sa.String(36), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(
            ["whatsapp_account_id"], ["whatsapp_accounts.id"], ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_offers_whatsapp_account_id", "offers", ["whatsapp_account_id"])

    op.create_table(
        "audit_records",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "timestamp", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False,
        ),
        sa.Column("prev_hash", sa.String(64), nullable=True),
        sa.Column("actor_id", sa.String(36), nullable=False),
        sa.Column("actor_role", sa.String(50), nullable=False),
        sa.Column("entity_type", sa.String(50), nullable=False),
        sa.Column("entity_id", sa.String(255), nullable=False),
        sa.Column("action", sa.String(20), nullable=False, server_default="DELETE"),
        sa.Column("outcome", sa.String(20), nullable=False),
        sa.Column("prior_state", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_records_actor_id", "audit_records", ["actor_id"])
    op.create_index("ix_audit_records_entity_type", "audit_records", ["entity_type"])
    op.create_index("ix_audit_records_entity_id", "audit_records", ["entity_id"])


def downgrade() -> None:
    op.drop_table("audit_records")
    op.drop_table("offers")
    op.drop_table("bot_flows")
    op.drop_table("templates")
    op.drop_table("bookings")
    op.drop_table("messages")
    op.drop_table("conversations")
    op.drop_table("contacts")
    op.drop_table("user_whatsapp_accounts")
    op.drop_table("user_branches")
    op.drop_table("whatsapp_accounts")
    op.drop_table("users")
    op.drop_table("branches")
