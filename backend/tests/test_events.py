"""Tests for the event HTTP routes.

Covers:
- Event create (multipart form) and fetch round trip
- Required-field validation → 400, no row written
- Id validation → 400, unknown id → 404
- Upcoming / previous listing with ordering
- Accept / decline status updates
- Optional QR upload on create, including a failing store
"""
from tests.conftest import EVENT_FORM, create_test_event
from ticketbook.models.event import Event


class TestEventCreate:
    """Event creation and initial state."""

    def test_create_then_fetch_returns_submitted_fields(self, client):
        created = create_test_event(client)
        assert created["message"] == "Event created successfully"
        assert isinstance(created["id"], int)

        resp = client.get(f"/api/events/{created['id']}")
        assert resp.status_code == 200
        data = resp.json()
        assert data["title"] == "Concert"
        assert data["place"] == "Arena"
        assert data["gradient"] == "from-blue-200 to-blue-100"
        assert data["icon"] == "music"
        assert data["date"] == "2030-01-01"
        assert data["time"] == "20:00"
        assert data["status"] == "pending"
        assert data["qr_code_path"] is None
        assert data["photo_path"] is None

    def test_create_keeps_seconds_when_given(self, client):
        created = create_test_event(client, time="07:45:30")
        data = client.get(f"/api/events/{created['id']}").json()
        assert data["time"] == "07:45:30"

    def test_create_missing_field_rejected(self, client, db):
        for field in EVENT_FORM:
            form = {k: v for k, v in EVENT_FORM.items() if k != field}
            resp = client.post("/api/events", data=form)
            assert resp.status_code == 400, field
            assert field in resp.json()["detail"]
        assert db.query(Event).count() == 0

    def test_create_blank_field_rejected(self, client, db):
        resp = client.post("/api/events", data={**EVENT_FORM, "place": "   "})
        assert resp.status_code == 400
        assert db.query(Event).count() == 0

    def test_create_bad_date_rejected(self, client, db):
        resp = client.post("/api/events", data={**EVENT_FORM, "date": "01/02/2030"})
        assert resp.status_code == 400
        assert db.query(Event).count() == 0

    def test_create_with_qr_code(self, client, qr_storage):
        created = create_test_event(
            client, files={"qrCode": ("ticket.png", b"\x89PNG qr bytes", "image/png")}
        )
        data = client.get(f"/api/events/{created['id']}").json()
        assert data["qr_code_path"].startswith("/qr-codes/")
        assert data["qr_code_path"].endswith("-ticket.png")
        assert qr_storage.resolve(data["qr_code_path"]).read_bytes() == b"\x89PNG qr bytes"

    def test_create_survives_qr_store_failure(self, client, tmp_path):
        """A QR image that cannot be written leaves qr_code_path null."""
        from ticketbook.dependencies import get_qr_storage
        from ticketbook.main import app
        from ticketbook.services.storage import LocalStorage

        blocker = tmp_path / "not-a-dir"
        blocker.write_text("file in the way")
        app.dependency_overrides[get_qr_storage] = lambda: LocalStorage(blocker / "qr", "/qr-codes")

        created = create_test_event(
            client, files={"qrCode": ("ticket.png", b"qr", "image/png")}
        )
        data = client.get(f"/api/events/{created['id']}").json()
        assert data["qr_code_path"] is None


class TestEventFetch:

    def test_get_not_found(self, client):
        resp = client.get("/api/events/999")
        assert resp.status_code == 404

    def test_get_non_numeric_id(self, client):
        resp = client.get("/api/events/abc")
        assert resp.status_code == 400

    def test_get_zero_id(self, client):
        resp = client.get("/api/events/0")
        assert resp.status_code == 400

    def test_get_id_beyond_column_range(self, client):
        resp = client.get("/api/events/99999999999999999999")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Event not found"


class TestEventList:
    """Upcoming / previous split on calendar date."""

    def test_upcoming_ascending(self, client):
        create_test_event(client, title="Later", date="2099-05-01")
        create_test_event(client, title="Sooner", date="2098-01-01")
        create_test_event(client, title="Long ago", date="2000-01-01")

        resp = client.get("/api/events?filter=upcoming")
        assert resp.status_code == 200
        titles = [e["title"] for e in resp.json()]
        assert titles == ["Sooner", "Later"]

    def test_previous_descending(self, client):
        create_test_event(client, title="Oldest", date="1999-01-01")
        create_test_event(client, title="Newer", date="2001-06-30")
        create_test_event(client, title="Future", date="2099-01-01")

        resp = client.get("/api/events?filter=previous")
        assert resp.status_code == 200
        titles = [e["title"] for e in resp.json()]
        assert titles == ["Newer", "Oldest"]

    def test_invalid_filter(self, client):
        assert client.get("/api/events?filter=someday").status_code == 400
        assert client.get("/api/events").status_code == 400


class TestEventStatus:
    """Accept / decline."""

    def test_decline(self, client):
        event_id = create_test_event(client)["id"]
        resp = client.put(f"/api/events/{event_id}/status", json={"status": "declined"})
        assert resp.status_code == 200
        assert resp.json()["message"] == "Event status updated successfully"
        assert client.get(f"/api/events/{event_id}").json()["status"] == "declined"

    def test_accept(self, client):
        event_id = create_test_event(client)["id"]
        resp = client.put(f"/api/events/{event_id}/status", json={"status": "accepted"})
        assert resp.status_code == 200
        assert client.get(f"/api/events/{event_id}").json()["status"] == "accepted"

    def test_invalid_status_leaves_row_unchanged(self, client):
        event_id = create_test_event(client)["id"]
        for bad in ("pending", "maybe", "", None):
            resp = client.put(f"/api/events/{event_id}/status", json={"status": bad})
            assert resp.status_code == 400
        assert client.get(f"/api/events/{event_id}").json()["status"] == "pending"

    def test_missing_status_key(self, client):
        event_id = create_test_event(client)["id"]
        resp = client.put(f"/api/events/{event_id}/status", json={})
        assert resp.status_code == 400

    def test_unknown_id_is_silent_success(self, client):
        resp = client.put("/api/events/4242/status", json={"status": "accepted"})
        assert resp.status_code == 200

    def test_huge_id_is_silent_success(self, client):
        resp = client.put("/api/events/99999999999999999999/status", json={"status": "accepted"})
        assert resp.status_code == 200

    def test_bad_id(self, client):
        resp = client.put("/api/events/x1/status", json={"status": "accepted"})
        assert resp.status_code == 400
