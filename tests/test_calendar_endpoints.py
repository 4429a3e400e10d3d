"""Tests for per-calendar settings, rendering and capture endpoints"""

import pytest

from booking_fields.auth.models import EDIT_CALENDARS, MANAGE_OPTIONS


@pytest.fixture
def global_phone(client, auth_headers):
    response = client.put(
        "/settings/user-fields",
        json={"fields": [{"label": "Phone", "required": True}]},
        headers=auth_headers([MANAGE_OPTIONS]),
    )
    assert response.status_code == 200


class TestCalendarSettingsEndpoints:
    """GET/PUT /calendars/{id}/user-fields/settings"""

    def test_defaults_without_override(self, client, auth_headers):
        response = client.get(
            "/calendars/5/user-fields/settings", headers=auth_headers([EDIT_CALENDARS])
        )

        assert response.status_code == 200
        assert response.json() == {
            "calendar_id": 5,
            "mode": "global",
            "position": "before",
            "custom_fields": [],
        }

    def test_requires_edit_calendars(self, client, auth_headers):
        response = client.put(
            "/calendars/5/user-fields/settings",
            json={"mode": "none"},
            headers=auth_headers([MANAGE_OPTIONS]),
        )
        assert response.status_code == 403

    def test_custom_override(self, client, auth_headers, global_phone):
        response = client.put(
            "/calendars/5/user-fields/settings",
            json={
                "mode": "custom",
                "position": "after",
                "custom_fields": [{"label": "Room", "type": "radio", "options": "A, B"}],
            },
            headers=auth_headers([EDIT_CALENDARS]),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["mode"] == "custom"
        assert data["position"] == "after"
        assert data["custom_fields"][0]["options"] == "A,B"

        resolved = client.get("/calendars/5/user-fields").json()
        assert resolved["position"] == "after"
        assert [f["name"] for f in resolved["fields"]] == ["room"]

    def test_invalid_mode_falls_back_to_global(self, client, auth_headers, global_phone):
        response = client.put(
            "/calendars/5/user-fields/settings",
            json={"mode": "weird", "position": "sideways"},
            headers=auth_headers([EDIT_CALENDARS]),
        )

        assert response.json()["mode"] == "global"
        assert response.json()["position"] == "before"
        resolved = client.get("/calendars/5/user-fields").json()
        assert [f["name"] for f in resolved["fields"]] == ["phone"]

    def test_custom_fields_only_keeps_mode_and_position(self, client, auth_headers):
        headers = auth_headers([EDIT_CALENDARS])
        client.put(
            "/calendars/5/user-fields/settings",
            json={"mode": "custom", "position": "after", "custom_fields": [{"label": "Room"}]},
            headers=headers,
        )

        response = client.put(
            "/calendars/5/user-fields/settings",
            json={"custom_fields": [{"label": "Desk"}]},
            headers=headers,
        )

        data = response.json()
        assert data["mode"] == "custom"
        assert data["position"] == "after"
        assert [f["name"] for f in data["custom_fields"]] == ["desk"]


class TestRenderEndpoint:
    """GET /calendars/{id}/user-fields/render"""

    def test_render_before_by_default(self, client, global_phone):
        before = client.get("/calendars/5/user-fields/render", params={"slot": "before"})
        after = client.get("/calendars/5/user-fields/render", params={"slot": "after"})

        assert before.status_code == 200
        assert "text/html" in before.headers["content-type"]
        assert 'name="codobuf_phone"' in before.text
        assert after.text == ""

    def test_render_after(self, client, auth_headers, global_phone):
        client.put(
            "/calendars/5/user-fields/settings",
            json={"position": "after"},
            headers=auth_headers([EDIT_CALENDARS]),
        )

        before = client.get("/calendars/5/user-fields/render", params={"slot": "before"})
        after = client.get("/calendars/5/user-fields/render", params={"slot": "after"})

        assert before.text == ""
        assert "codobuf-user-fields-wrapper" in after.text

    def test_mode_none_renders_nothing(self, client, auth_headers, global_phone):
        client.put(
            "/calendars/5/user-fields/settings",
            json={"mode": "none"},
            headers=auth_headers([EDIT_CALENDARS]),
        )

        response = client.get("/calendars/5/user-fields/render")
        assert response.text == ""


class TestCaptureEndpoint:
    """POST /calendars/{id}/user-fields/capture"""

    def test_required_field_rejected(self, client, global_phone):
        response = client.post(
            "/calendars/5/user-fields/capture", data={"codobuf_phone": ""}
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Phone is required."

    def test_capture_from_form(self, client, global_phone):
        response = client.post(
            "/calendars/5/user-fields/capture", data={"codobuf_phone": "555-1234"}
        )

        assert response.status_code == 200
        assert response.json() == {
            "calendar_id": 5,
            "user_fields_data": {"phone": "555-1234"},
        }

    def test_capture_from_query_string(self, client, global_phone):
        response = client.post(
            "/calendars/5/user-fields/capture",
            params={"codobuf_phone": "555-0000"},
            data={"unrelated": "x"},
        )

        assert response.status_code == 200
        assert response.json()["user_fields_data"] == {"phone": "555-0000"}

    def test_capture_without_fields(self, client):
        response = client.post("/calendars/5/user-fields/capture", data={"a": "b"})

        assert response.status_code == 200
        assert response.json()["user_fields_data"] == {}

    def test_capture_from_json_booking_data(self, client, global_phone):
        response = client.post(
            "/calendars/5/user-fields/capture",
            json={"calendar_id": 99, "codobuf_phone": "555", "slot": "10:00"},
            params={"codobuf_phone": "ignored"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["calendar_id"] == 5
        assert data["slot"] == "10:00"
        assert data["user_fields_data"] == {"phone": "555"}

    def test_capture_rejects_non_object_json(self, client, global_phone):
        response = client.post("/calendars/5/user-fields/capture", json=["x"])
        assert response.status_code == 400
