"""Integration tests for admin account management endpoints."""
import pytest

from festgate.core.roles import Role
from festgate.core.security import create_access_token
from tests.utils import auth_headers

USERS_URL = "/api/v1/admin/users"


@pytest.fixture
def admin_user(make_user):
    return make_user(Role.ADMIN, name="Admin", email="admin@example.com")


@pytest.fixture
def admin_client(client, admin_user):
    """Test client authenticated as an admin via the auth cookie."""
    client.cookies.set("token", create_access_token({"sub": str(admin_user.id)}))
    return client


@pytest.mark.integration
class TestAdminAccess:

    @pytest.mark.parametrize("role", [Role.TEAM_LEAD, Role.STAFF, Role.ORGANIZER])
    def test_non_admins_are_refused(self, client, make_user, role):
        user = make_user(role)

        response = client.get(USERS_URL, headers=auth_headers(user))

        assert response.status_code == 403

    def test_unauthenticated(self, client):
        assert client.get(USERS_URL).status_code == 401


@pytest.mark.integration
class TestUserManagement:

    def test_list_users(self, admin_client, staff_user, lead_user):
        response = admin_client.get(USERS_URL, params={"role": "staff"})

        assert response.status_code == 200
        body = response.json()
        assert [u["email"] for u in body["data"]] == ["staff@example.com"]
        assert body["pagination"] == {"page": 1, "limit": 20, "total": 1, "totalPages": 1}
        assert "passwordHash" not in body["data"][0]

    def test_filter_by_active_flag(self, admin_client, make_user):
        make_user(Role.STAFF, email="gone@example.com", is_active=False)

        body = admin_client.get(USERS_URL, params={"isActive": "false"}).json()

        assert [u["email"] for u in body["data"]] == ["gone@example.com"]

    def test_change_role(self, admin_client, lead_user):
        response = admin_client.patch(f"{USERS_URL}/{lead_user.id}/role", json={"role": "organizer"})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "User role updated successfully"
        assert body["data"]["role"] == "organizer"

    def test_invalid_role(self, admin_client, lead_user):
        response = admin_client.patch(f"{USERS_URL}/{lead_user.id}/role", json={"role": "superuser"})

        assert response.status_code == 422
        assert response.json()["success"] is False

    def test_cannot_change_own_role(self, admin_client, admin_user):
        response = admin_client.patch(f"{USERS_URL}/{admin_user.id}/role", json={"role": "staff"})

        assert response.status_code == 403
        assert response.json() == {"success": False, "error": "You cannot change the role of your own account"}

    def test_activate_unknown_user(self, admin_client):
        response = admin_client.patch(f"{USERS_URL}/999/activate")

        assert response.status_code == 404

    def test_delete_refused_while_leading_teams(self, admin_client, team, lead_user):
        response = admin_client.delete(f"{USERS_URL}/{lead_user.id}")

        assert response.status_code == 400
        assert "leading 1 team" in response.json()["error"]

    def test_delete_user(self, admin_client, staff_user):
        response = admin_client.delete(f"{USERS_URL}/{staff_user.id}")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "User deleted successfully"}

    def test_platform_stats(self, admin_client, team):
        response = admin_client.get("/api/v1/admin/stats")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["users"]["byRole"]["admin"] == 1
        assert data["users"]["byRole"]["teamLead"] == 1
        assert data["events"] == {"total": 1, "active": 1}
        assert data["teams"] == {"total": 1, "totalMembers": 2}


@pytest.mark.integration
class TestDeactivatedStaff:
    """Deactivation takes effect on the very next request."""

    def test_deactivated_staff_cannot_scan(self, admin_client, staff_user, event, member):
        scan = {"qrToken": member.qr_token, "eventId": event.id}
        staff = auth_headers(staff_user)

        response = admin_client.patch(f"{USERS_URL}/{staff_user.id}/deactivate")
        assert response.status_code == 200
        assert response.json()["data"]["isActive"] is False

        # The admin cookie would win over the staff bearer token
        admin_client.cookies.clear()
        response = admin_client.post("/api/v1/checkin/scan", json=scan, headers=staff)

        assert response.status_code == 401
        assert response.json()["error"] == "User not found or inactive"

    def test_reactivated_staff_can_scan_again(self, admin_client, admin_user, staff_user, event, member):
        admin = auth_headers(admin_user)
        admin_client.patch(f"{USERS_URL}/{staff_user.id}/deactivate")
        admin_client.patch(f"{USERS_URL}/{staff_user.id}/activate")

        admin_client.cookies.clear()
        response = admin_client.post(
            "/api/v1/checkin/scan",
            json={"qrToken": member.qr_token, "eventId": event.id},
            headers=auth_headers(staff_user),
        )

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert admin_client.get(USERS_URL, headers=admin).status_code == 200

    def test_cannot_deactivate_self(self, admin_client, admin_user):
        response = admin_client.patch(f"{USERS_URL}/{admin_user.id}/deactivate")

        assert response.status_code == 403
