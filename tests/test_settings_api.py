import json

from conftest import ADMIN_PHONE, OTHER_ADMIN_PHONE, PASSWORD, STAFF_PHONE, login
from tiri.routers.settings import read_preferences
from tiri.schemas.settings import DEFAULT_NOTIFICATION_PREFERENCES

DEFAULTS = {
    "rsvpUpdates": True,
    "checkInAlerts": True,
    "draftReminders": True,
    "mediaUploads": True,
    "weeklySummary": False,
}


class TestRoleGate:
    def test_staff_cannot_remove_team_member(self, staff_client):
        response = staff_client.delete("/api/studio/settings/team/admin-id")

        assert response.status_code == 403
        assert response.json() == {"error": "Admin access required"}

    def test_admin_can_remove_team_member(self, admin_client):
        response = admin_client.delete("/api/studio/settings/team/staff-id")

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert login(admin_client, STAFF_PHONE).status_code == 401

    def test_admin_cannot_remove_self(self, admin_client):
        response = admin_client.delete("/api/studio/settings/team/admin-id")

        assert response.status_code == 400
        assert response.json() == {"error": "You cannot remove your own account"}


class TestTeam:
    def test_list_members(self, staff_client):
        members = staff_client.get("/api/studio/settings/team").json()["members"]

        assert {member["id"] for member in members} == {"admin-id", "staff-id"}
        assert all("passwordHash" not in member for member in members)

    def test_admin_adds_staff_member(self, admin_client, make_client):
        response = admin_client.post("/api/studio/settings/team", json={
            "phone": "5550003", "password": "crew-pass", "teamRole": "CUSTOMER_SERVICE",
        })

        assert response.status_code == 201
        member = response.json()["member"]
        assert member["role"] == "STAFF"
        assert member["teamRole"] == "CUSTOMER_SERVICE"
        assert member["studioId"] == "acme-id"

        assert login(make_client(), "5550003", "crew-pass").status_code == 200

    def test_duplicate_phone_rejected(self, admin_client):
        response = admin_client.post("/api/studio/settings/team", json={
            "phone": OTHER_ADMIN_PHONE, "password": "crew-pass", "teamRole": "EDITOR",
        })

        assert response.status_code == 400
        assert response.json() == {"error": "Phone is already in use"}

    def test_admin_updates_member(self, admin_client):
        response = admin_client.patch("/api/studio/settings/team/staff-id", json={"teamRole": "EDITOR"})

        assert response.status_code == 200
        assert response.json()["member"]["teamRole"] == "EDITOR"
        assert response.json()["member"]["role"] == "STAFF"


class TestAccount:
    def test_get_account(self, staff_client):
        account = staff_client.get("/api/studio/settings/account").json()

        assert account["user"] == {"id": "staff-id", "phone": STAFF_PHONE, "role": "STAFF"}
        assert account["studio"]["name"] == "Acme"

    def test_new_password_requires_current(self, staff_client):
        response = staff_client.patch("/api/studio/settings/account", json={"newPassword": "brand-new"})

        assert response.status_code == 400
        assert response.json() == {"error": "Current password is required to set a new password"}

    def test_wrong_current_password(self, staff_client):
        response = staff_client.patch("/api/studio/settings/account", json={
            "currentPassword": "wrong-one", "newPassword": "brand-new",
        })

        assert response.status_code == 400
        assert response.json() == {"error": "Current password is incorrect"}

    def test_change_password(self, staff_client, make_client):
        response = staff_client.patch("/api/studio/settings/account", json={
            "currentPassword": PASSWORD, "newPassword": "brand-new",
        })

        assert response.status_code == 200
        assert login(make_client(), STAFF_PHONE, "brand-new").status_code == 200
        assert login(make_client(), STAFF_PHONE, PASSWORD).status_code == 401

    def test_staff_cannot_edit_studio(self, staff_client):
        response = staff_client.patch("/api/studio/settings/account", json={"studioName": "Renamed"})

        assert response.status_code == 403
        assert response.json() == {"error": "Admin access required"}

    def test_admin_edits_studio(self, admin_client):
        response = admin_client.patch("/api/studio/settings/account", json={
            "studioName": "Acme Weddings",
            "studioEmail": "hello@acme.example.com",
            "studioPrimaryColor": "#aa3366",
        })

        assert response.status_code == 200
        studio = response.json()["studio"]
        assert studio["name"] == "Acme Weddings"
        assert studio["email"] == "hello@acme.example.com"
        assert studio["primaryColor"] == "#aa3366"

    def test_phone_taken(self, admin_client):
        response = admin_client.patch("/api/studio/settings/account", json={"phone": STAFF_PHONE})

        assert response.status_code == 400
        assert response.json() == {"error": "Phone is already in use"}
        assert login(admin_client, ADMIN_PHONE).status_code == 200


class TestNotifications:
    def test_defaults_without_cookie(self, staff_client):
        response = staff_client.get("/api/studio/settings/notifications")

        assert response.json() == {"preferences": DEFAULTS}

    def test_update_sets_cookie(self, staff_client):
        changed = dict(DEFAULTS, weeklySummary=True, rsvpUpdates=False)
        response = staff_client.patch("/api/studio/settings/notifications", json=changed)

        assert response.json() == {"preferences": changed}
        set_cookie = response.headers["set-cookie"].lower()
        assert set_cookie.startswith("studio_notifications=")
        assert f"max-age={60 * 60 * 24 * 365}" in set_cookie

    def test_update_requires_every_flag(self, staff_client):
        response = staff_client.patch("/api/studio/settings/notifications", json={"weeklySummary": True})

        assert response.status_code == 400

    def test_reads_stored_cookie(self, staff_client):
        staff_client.cookies.set("studio_notifications", json.dumps({"weeklySummary": True}, separators=(",", ":")))

        preferences = staff_client.get("/api/studio/settings/notifications").json()["preferences"]
        assert preferences == dict(DEFAULTS, weeklySummary=True)


class TestReadPreferences:
    def test_missing_or_corrupt_values_fall_back(self):
        assert read_preferences(None) == DEFAULT_NOTIFICATION_PREFERENCES
        assert read_preferences("{not json") == DEFAULT_NOTIFICATION_PREFERENCES
        assert read_preferences("[1, 2]") == DEFAULT_NOTIFICATION_PREFERENCES
        assert read_preferences('{"rsvpUpdates": "maybe"}') == DEFAULT_NOTIFICATION_PREFERENCES

    def test_partial_values_merge_with_defaults(self):
        preferences = read_preferences('{"mediaUploads": false, "unknown": true}')

        assert preferences.media_uploads is False
        assert preferences.rsvp_updates is True
