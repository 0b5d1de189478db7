# This project was developed with assistance from AI tools.
"""Contact and conversation visibility across personas."""

from types import SimpleNamespace

from meras_db.enums import AuditOutcome, ConversationStatus
from sqlalchemy.dialects import postgresql

from .mock_db import executed_sql, make_mock_session
from .personas import AGENT_USER_ID, admin, agent, supervisor


def _contact(contact_id="contact-1"):
    return SimpleNamespace(
        id=contact_id,
        name="Aisha Al-Harbi",
        phone="+966500000001",
        email=None,
        tags=["vip"],
        branch_id="branch-riyadh",
        created_at=None,
    )


def test_supervisor_contacts_use_branch_or_account_activity(make_client):
    session = make_mock_session(items=[_contact()])
    client, _ = make_client(supervisor(), session)

    resp = client.get("/api/contacts/")

    assert resp.status_code == 200
    assert resp.json()["data"][0]["tags"] == ["vip"]
    sql = executed_sql(session)[0]
    assert "contacts.branch_id IN ('branch-riyadh')" in sql
    assert "messages.whatsapp_account_id IN ('wa-sales')" in sql
    assert " OR " in sql


def test_agent_contacts_are_those_in_assigned_conversations(make_client):
    session = make_mock_session(items=[])
    client, _ = make_client(agent(), session)

    client.get("/api/contacts/")

    sql = executed_sql(session)[0]
    assert f"conversations.assigned_to_id = '{AGENT_USER_ID}'" in sql
    assert "contacts.branch_id IN" not in sql


def test_agent_edits_visible_contact(make_client):
    contact = _contact()
    session = make_mock_session(single=contact)
    client, _ = make_client(agent(), session)

    resp = client.patch("/api/contacts/contact-1", json={"tags": ["vip", "returning"]})

    assert resp.status_code == 200
    assert contact.tags == ["vip", "returning"]


def test_supervisor_contact_delete_is_denied(make_client):
    session = make_mock_session(single=_contact())
    client, sink = make_client(supervisor(), session)

    resp = client.delete("/api/contacts/contact-1")

    assert resp.status_code == 403
    assert sink.records[0].outcome == AuditOutcome.DENIED
    assert sink.records[0].prior_state == {
        "name": "Aisha Al-Harbi",
        "phone": "+966500000001",
        "email": None,
        "branch_id": "branch-riyadh",
    }


def test_agent_conversations_are_assignment_only(make_client):
    conversation = SimpleNamespace(
        id="conv-1",
        contact_id="contact-1",
        assigned_to_id=AGENT_USER_ID,
        status=ConversationStatus.OPEN,
        updated_at=None,
    )
    session = make_mock_session(items=[conversation])
    client, _ = make_client(agent(), session)

    resp = client.get("/api/conversations/")

    assert resp.status_code == 200
    assert resp.json()["data"][0]["status"] == "OPEN"
    assert f"conversations.assigned_to_id = '{AGENT_USER_ID}'" in executed_sql(session)[0]


def test_admin_deletes_conversation(make_client):
    session = make_mock_session(single=None, rowcount=1)
    client, sink = make_client(admin(), session)

    resp = client.delete("/api/conversations/conv-1")

    assert resp.status_code == 200
    assert sink.records[0].outcome == AuditOutcome.GRANTED


def test_agent_accounts_are_own_assignments(make_client):
    session = make_mock_session(items=[])
    client, _ = make_client(agent(), session)

    resp = client.get("/api/whatsapp-accounts/")

    assert resp.status_code == 200
    sql = executed_sql(session)[0]
    assert "whatsapp_accounts.id IN ('wa-support')" in sql
    assert "whatsapp_accounts.branch_id IN" not in sql


def test_contact_tag_filter_uses_jsonb_containment(make_client):
    session = make_mock_session(items=[_contact()])
    client, _ = make_client(admin(), session)

    resp = client.get("/api/contacts/", params={"tag": "vip"})

    assert resp.status_code == 200
    stmt = session.execute.await_args_list[0].args[0]
    sql = str(stmt.compile(dialect=postgresql.dialect()))
    assert "contacts.tags @> " in sql
    assert "LIKE" not in sql
