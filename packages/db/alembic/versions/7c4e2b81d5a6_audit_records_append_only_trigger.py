# This project was developed with assistance from AI tools.
"""append-only trigger on audit_records

Revision ID: 7c4e2b81d5a6
Revises: 3a1f0c2d9b10
Create Date: 2026-10-12
"""

from alembic import op

revision = "7c4e2b81d5a6"
down_revision = "3a1f0c2d9b10"
branch_labels = None
depends_on = None

TRIGGER_FUNCTION = """
CREATE OR REPLACE FUNCTION audit_records_prevent_mutation()
RETURNS TRIGGER AS $$
BEGIN
    RAISE EXCEPTION 'audit_records is append-only: % denied for row %', TG_OP, OLD.id;
    RETURN NULL;
END;
$$ LANGUAGE plpgsql;
"""

TRIGGER_UPDATE = """
CREATE TRIGGER audit_records_no_update
    BEFORE UPDATE ON audit_records
    FOR EACH ROW
    EXECUTE FUNCTION audit_records_prevent_mutation();
"""

TRIGGER_DELETE = """
CREATE TRIGGER audit_records_no_delete
    BEFORE DELETE ON audit_records
    FOR EACH ROW
    EXECUTE FUNCTION audit_records_prevent_mutation();
"""


def upgrade() -> None:
    op.execute(TRIGGER_FUNCTION)
    op.execute(TRIGGER_UPDATE)
    op.execute(TRIGGER_DELETE)


def downgrade() -> None:
    op.execute("DROP TRIGGER IF EXISTS audit_records_no_delete ON audit_records")
    op.execute("DROP TRIGGER IF EXISTS audit_records_no_update ON audit_records")
    op.execute("DROP FUNCTION IF EXISTS audit_records_prevent_mutation()")
