# This project was developed with assistance from AI tools.
"""Booking endpoints across personas."""

from datetime import UTC, datetime
from types import SimpleNamespace

from meras_db.enums import AuditOutcome, BookingStatus

from .mock_db import executed_sql, make_mock_session
from .personas import AGENT_USER_ID, admin, agent, supervisor, unassigned_supervisor


def _booking(booking_id="bk1", agent_id=AGENT_USER_ID):
    return SimpleNamespace(
        id=booking_id,
        booking_number=f"BK-{booking_id}",
        contact_id="contact-1",
        agent_id=agent_id,
        date=datetime(2026, 11, 2, 9, 30, tzinfo=UTC),
        notes=None,
        status=BookingStatus.CONFIRMED,
    )


def test_unassigned_supervisor_gets_empty_list_not_error(make_client):
    session = make_mock_session(items=[_booking()])
    client, _ = make_client(unassigned_supervisor(), session)

    resp = client.get("/api/bookings/")

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["data"] == []
    assert body["count"] == 0
    assert body["pagination"]["total"] == 0
    session.execute.assert_not_awaited()


def test_agent_list_is_filtered_to_own_bookings(make_client):
    session = make_mock_session(items=[_booking()])
    client, _ = make_client(agent(), session)

    resp = client.get("/api/bookings/")

    assert resp.status_code == 200
    assert [b["id"] for b in resp.json()["data"]] == ["bk1"]
    list_sql = executed_sql(session)[0]
    assert f"bookings.agent_id = '{AGENT_USER_ID}'" in list_sql


def test_supervisor_list_is_filtered_by_contact_branch(make_client):
    session = make_mock_session(items=[])
    client, _ = make_client(supervisor(), session)

    resp = client.get("/api/bookings/", params={"status": "PENDING"})

    assert resp.status_code == 200
    list_sql = executed_sql(session)[0]
    assert "EXISTS" in list_sql
    assert "contacts.branch_id IN ('branch-riyadh')" in list_sql
    assert "bookings.status = 'PENDING'" in list_sql


def test_admin_list_is_unfiltered(make_client):
    session = make_mock_session(items=[_booking(), _booking("bk2", agent_id="someone-else")])
    client, _ = make_client(admin(), session)

    resp = client.get("/api/bookings/")

    assert resp.status_code == 200
    assert resp.json()["count"] == 2
    assert "agent_id =" not in executed_sql(session)[0]


def test_out_of_scope_booking_is_404(make_client):
    session = make_mock_session(single=None)
    client, _ = make_client(agent(), session)

    resp = client.get("/api/bookings/bk2")

    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Booking not found"}


def test_agent_can_update_own_booking(make_client):
    booking = _booking()
    session = make_mock_session(single=booking)
    client, _ = make_client(agent(), session)

    resp = client.patch("/api/bookings/bk1", json={"notes": "Customer asked for a window seat"})

    assert resp.status_code == 200
    assert resp.json()["data"]["notes"] == "Customer asked for a window seat"
    session.commit.assert_awaited_once()


def test_agent_cannot_delete_booking(make_client):
    session = make_mock_session(single=_booking())
    client, sink = make_client(agent(), session)

    resp = client.delete("/api/bookings/bk1")

    assert resp.status_code == 403
    [record] = sink.records
    assert record.outcome == AuditOutcome.DENIED
    assert record.prior_state["booking_number"] == "BK-bk1"
    assert record.prior_state["date"].startswith("2026-11-02T09:30:00")
    session.commit.assert_not_awaited()
