"""Integration tests for event endpoints."""
import pytest

from tests.utils import auth_headers


def event_body(**overrides):
    body = {
        "name": "Hack Fest",
        "slug": "HackFest",
        "description": "24 hour hackathon",
        "type": "hackathon",
        "startDate": "2026-03-14T09:00:00Z",
        "endDate": "2026-03-15T09:00:00Z",
        "venue": "Main Hall",
        "registrationFeePerMember": 150,
        "minTeamSize": 2,
        "maxTeamSize": 4,
    }
    body.update(overrides)
    return body


@pytest.mark.integration
class TestCreateEvent:

    def test_organizer_creates_event(self, organizer_client):
        response = organizer_client.post("/api/v1/events", json=event_body())

        assert response.status_code == 201
        event = response.json()
        assert event["slug"] == "hackfest"
        assert event["registrationFeePerMember"] == 150.0
        assert event["minTeamSize"] == 2
        assert event["isActive"] is True
        assert event["registrationOpen"] is True

    @pytest.mark.parametrize("role_fixture", ["lead_user", "staff_user"])
    def test_lower_roles_forbidden(self, client, request, role_fixture):
        user = request.getfixturevalue(role_fixture)

        response = client.post("/api/v1/events", json=event_body(), headers=auth_headers(user))

        assert response.status_code == 403
        assert response.json() == {"success": False, "error": "Not authorized"}

    def test_duplicate_slug(self, organizer_client, event):
        response = organizer_client.post("/api/v1/events", json=event_body(slug="hackfest"))

        assert response.status_code == 409

    def test_end_before_start(self, organizer_client):
        response = organizer_client.post("/api/v1/events", json=event_body(endDate="2026-03-13T09:00:00Z"))

        assert response.status_code == 400
        assert response.json()["error"] == "End date must be after start date"

    @pytest.mark.parametrize("overrides", [
        {"slug": "hack fest!"},
        {"type": "concert"},
        {"registrationFeePerMember": -5},
        {"minTeamSize": 0},
    ])
    def test_invalid_payload(self, organizer_client, overrides):
        assert organizer_client.post("/api/v1/events", json=event_body(**overrides)).status_code == 422


@pytest.mark.integration
class TestReadEvents:

    def test_any_authenticated_user_lists_events(self, lead_client, event):
        response = lead_client.get("/api/v1/events")

        assert response.status_code == 200
        assert [e["slug"] for e in response.json()] == ["hackfest"]

    def test_filter_by_active(self, lead_client, event, make_event):
        make_event(slug="retired", is_active=False)

        response = lead_client.get("/api/v1/events", params={"active": "false"})

        assert [e["slug"] for e in response.json()] == ["retired"]

    def test_requires_authentication(self, client, event):
        assert client.get("/api/v1/events").status_code == 401

    def test_get_event(self, lead_client, event):
        response = lead_client.get(f"/api/v1/events/{event.id}")

        assert response.status_code == 200
        assert response.json()["id"] == event.id
        assert "canteenToken" not in response.json()

    def test_missing_event(self, lead_client):
        response = lead_client.get("/api/v1/events/999")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Event not found"}


@pytest.mark.integration
class TestUpdateEvent:

    def test_partial_update(self, organizer_client, event):
        response = organizer_client.patch(f"/api/v1/events/{event.id}", json={"registrationOpen": False})

        assert response.status_code == 200
        body = response.json()
        assert body["registrationOpen"] is False
        assert body["isActive"] is True

    def test_slug_is_not_updatable(self, organizer_client, event):
        response = organizer_client.patch(f"/api/v1/events/{event.id}", json={"slug": "renamed"})

        assert response.status_code == 200
        assert response.json()["slug"] == "hackfest"


@pytest.mark.integration
class TestCanteenQr:

    def test_organizer_gets_canteen_qr(self, organizer_client, event):
        response = organizer_client.get(f"/api/v1/events/{event.id}/canteen-qr")

        assert response.status_code == 200
        body = response.json()
        assert body["eventId"] == event.id
        assert body["canteenToken"] == event.canteen_token
        assert body["canteenToken"].startswith("EVENT:HACKFEST:CANTEEN:")
        assert "<svg" in body["qrSvg"]

    def test_staff_cannot_fetch_canteen_qr(self, client, staff_user, event):
        response = client.get(f"/api/v1/events/{event.id}/canteen-qr", headers=auth_headers(staff_user))

        assert response.status_code == 403
