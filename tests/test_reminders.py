import threading
import time
from datetime import datetime

from fastapi.testclient import TestClient

from app.main import app
from app.models.reminder import ReminderCreate
from app.routes import reminders as reminders_route
from app.services.identity_service import get_identity_service
from app.services.reminder_service import ReminderService, get_reminder_service


def _session(token):
    return get_identity_service().current_session(token)


def test_reminders_are_listed_soonest_first(client, auth_headers):
    for title, date in [
        ("Final clearance", "2024-10-20T09:00:00"),
        ("Monthly clearance", "2024-05-20T09:00:00"),
        ("CDS meeting", "2024-05-02T14:30:00"),
    ]:
        resp = client.post("/reminders", json={"title": title, "date": date}, headers=auth_headers)
        assert resp.status_code == 201
        assert resp.json()["message"] == "Reminder added successfully"

    reminders = client.get("/reminders", headers=auth_headers).json()["reminders"]

    assert [r["title"] for r in reminders] == ["CDS meeting", "Monthly clearance", "Final clearance"]
    assert reminders[0]["description"] == ""


def test_reminders_are_scoped_to_their_owner(client, register):
    ada_headers, _, _ = register()
    bola_headers, _, _ = register(email="bola@example.com", state_code="OY/23A/0001")

    client.post("/reminders", json={"title": "Ada's", "date": "2024-05-20T09:00:00"}, headers=ada_headers)

    assert client.get("/reminders", headers=bola_headers).json()["reminders"] == []
    assert len(client.get("/reminders", headers=ada_headers).json()["reminders"]) == 1


def test_live_view_replaces_list_on_every_change(register):
    _, uid, token = register()
    session = _session(token)
    service = get_reminder_service()
    notifications = []

    view = service.open_view(uid, notifications.append)
    first = service.create_reminder(session, ReminderCreate(title="First", date=datetime(2024, 6, 1, 9)))
    second = service.create_reminder(session, ReminderCreate(title="Second", date=datetime(2024, 5, 1, 9)))

    assert [r.id for r in view.reminders] == [second, first]
    assert [len(batch) for batch in notifications] == [0, 1, 2]
    view.detach()


def test_delete_removes_exactly_that_reminder(register):
    _, uid, token = register()
    session = _session(token)
    service = get_reminder_service()
    keep_a = service.create_reminder(session, ReminderCreate(title="Keep A", date=datetime(2024, 5, 1)))
    doomed = service.create_reminder(session, ReminderCreate(title="Delete me", date=datetime(2024, 5, 2)))
    keep_b = service.create_reminder(session, ReminderCreate(title="Keep B", date=datetime(2024, 5, 3)))

    with service.open_view(uid) as view:
        assert len(view.reminders) == 3
        service.delete_reminder(session, doomed)
        assert [r.id for r in view.reminders] == [keep_a, keep_b]


def test_detached_view_stops_updating(register):
    _, uid, token = register()
    session = _session(token)
    service = get_reminder_service()

    view = service.open_view(uid)
    service.create_reminder(session, ReminderCreate(title="Seen", date=datetime(2024, 5, 1)))
    view.detach()
    service.create_reminder(session, ReminderCreate(title="Unseen", date=datetime(2024, 5, 2)))

    assert not view.attached
    assert [r.title for r in view.reminders] == ["Seen"]


def test_delete_endpoint(client, auth_headers):
    reminder_id = client.post(
        "/reminders", json={"title": "Clearance", "date": "2024-05-20T09:00:00"}, headers=auth_headers
    ).json()["id"]

    resp = client.delete(f"/reminders/{reminder_id}", headers=auth_headers)

    assert resp.status_code == 200
    assert resp.json()["message"] == "Reminder deleted successfully"
    assert client.get("/reminders", headers=auth_headers).json()["reminders"] == []
    assert client.delete(f"/reminders/{reminder_id}", headers=auth_headers).status_code == 404


def test_cannot_delete_someone_elses_reminder(client, register, db):
    ada_headers, _, _ = register()
    bola_headers, _, _ = register(email="bola@example.com")
    reminder_id = client.post(
        "/reminders", json={"title": "Ada's", "date": "2024-05-20T09:00:00"}, headers=ada_headers
    ).json()["id"]

    resp = client.delete(f"/reminders/{reminder_id}", headers=bola_headers)

    assert resp.status_code == 404
    assert db.collection("reminders").document(reminder_id).get().exists


def test_reminder_requires_title_and_date(client, auth_headers):
    assert client.post("/reminders", json={"title": "No date"}, headers=auth_headers).status_code == 422
    assert client.post("/reminders", json={"date": "2024-05-20T09:00:00"}, headers=auth_headers).status_code == 422


def test_stream_pushes_full_list_on_change(client, register):
    _, uid, token = register()
    session = _session(token)

    with client.websocket_connect(f"/reminders/stream?token={token}") as websocket:
        assert websocket.receive_json() == {"reminders": []}

        ReminderService().create_reminder(
            session, ReminderCreate(title="Clearance", date=datetime(2024, 5, 20, 9))
        )

        payload = websocket.receive_json()
        assert [r["title"] for r in payload["reminders"]] == ["Clearance"]
        assert payload["reminders"][0]["userId"] == uid


def test_stream_rejects_missing_token(client):
    with client.websocket_connect("/reminders/stream") as websocket:
        message = websocket.receive()
        assert message["type"] == "websocket.close"
        assert message["code"] == 1008


def test_closing_stream_detaches_its_subscription(client, register, db, monkeypatch):
    _, uid, token = register()
    session = _session(token)
    service = get_reminder_service()
    listeners_before = len(db._listeners)
    pushed = []
    open_view = service.open_view

    def recording_open_view(owner_id, on_change=None):
        def record(reminders):
            pushed.append(reminders)
            on_change(reminders)

        return open_view(owner_id, record)

    monkeypatch.setattr(service, "open_view", recording_open_view)

    with client.websocket_connect(f"/reminders/stream?token={token}") as websocket:
        assert websocket.receive_json() == {"reminders": []}
        assert len(db._listeners) == listeners_before + 1

    assert len(db._listeners) == listeners_before
    service.create_reminder(session, ReminderCreate(title="After close", date=datetime(2024, 5, 20, 9)))
    assert len(pushed) == 1


def test_stream_auth_does_not_block_other_requests(register, monkeypatch):
    _, _, token = register()
    verifying = threading.Event()
    resolve_session = reminders_route.resolve_session

    def slow_resolve_session(raw_token):
        verifying.set()
        time.sleep(1.0)
        return resolve_session(raw_token)

    monkeypatch.setattr(reminders_route, "resolve_session", slow_resolve_session)

    with TestClient(app) as shared:
        with shared.websocket_connect(f"/reminders/stream?token={token}") as websocket:
            assert verifying.wait(2)
            started = time.monotonic()
            assert shared.get("/health").status_code == 200
            elapsed = time.monotonic() - started
            assert websocket.receive_json() == {"reminders": []}

    assert elapsed < 0.5


def test_malformed_reminder_is_skipped(client, register, db):
    headers, uid, _ = register()
    client.post("/reminders", json={"title": "Clearance", "date": "2024-05-20T09:00:00"}, headers=headers)
    db.collection("reminders").document("legacy").set({"date": "2024-05-01T09:00:00", "userId": uid})

    resp = client.get("/reminders", headers=headers)

    assert resp.status_code == 200
    assert [r["title"] for r in resp.json()["reminders"]] == ["Clearance"]

    with get_reminder_service().open_view(uid) as view:
        assert [r.title for r in view.reminders] == ["Clearance"]
