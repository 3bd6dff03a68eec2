"""
Profile, location, preferences and profile photo endpoints.
"""

import pytest

from conftest import API, TEST_JWT_SECRET, auth_headers
from lampy.security import create_access_token


async def get_profile(client, token):
    response = await client.get(f"{API}/users/profile", headers=auth_headers(token))
    assert response.status_code == 200
    return response.json()


class TestProfile:

    @pytest.mark.asyncio
    async def test_get_profile(self, client, register_user):
        token, user = await register_user("bo@example.com", name="Bo")
        profile = await get_profile(client, token)
        assert profile["id"] == user["id"]
        assert profile["email"] == "bo@example.com"
        assert profile["location"] == ""

    @pytest.mark.asyncio
    async def test_profile_of_deleted_user_is_404(self, client):
        token = create_access_token(9999, secret=TEST_JWT_SECRET)
        response = await client.get(f"{API}/users/profile", headers=auth_headers(token))
        assert response.status_code == 404
        assert response.json()["message"] == "User not found"

    @pytest.mark.asyncio
    async def test_partial_update(self, client, register_user):
        token, _ = await register_user(name="Bo")

        response = await client.put(
            f"{API}/users/profile",
            json={"location": "Pune", "consultation_preferences": ["Anxiety"]},
            headers=auth_headers(token),
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Profile updated successfully"}

        profile = await get_profile(client, token)
        assert profile["name"] == "Bo"
        assert profile["location"] == "Pune"
        assert profile["consultation_preferences"] == ["Anxiety"]

    @pytest.mark.asyncio
    async def test_update_rejects_fields_outside_allow_list(self, client, register_user):
        token, _ = await register_user("bo@example.com")

        response = await client.put(
            f"{API}/users/profile",
            json={"email": "evil@example.com", "photo_verified": True},
            headers=auth_headers(token),
        )
        assert response.status_code == 400

        profile = await get_profile(client, token)
        assert profile["email"] == "bo@example.com"
        assert profile["photo_verified"] is False

    @pytest.mark.asyncio
    async def test_empty_update_rejected(self, client, register_user):
        token, _ = await register_user()
        response = await client.put(f"{API}/users/profile", json={}, headers=auth_headers(token))
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["name", "location", "consultation_preferences"])
    async def test_explicit_null_names_the_field(self, client, register_user, field):
        token, _ = await register_user(name="Bo")

        response = await client.put(
            f"{API}/users/profile", json={field: None}, headers=auth_headers(token)
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["message"].startswith(f"{field}: ")
        assert f"{field} cannot be null" in body["message"]
        assert body["message"] != "No updatable fields supplied"
        assert (await get_profile(client, token))["name"] == "Bo"

    @pytest.mark.asyncio
    async def test_null_alongside_valid_field_changes_nothing(self, client, register_user):
        token, _ = await register_user(name="Bo")

        response = await client.put(
            f"{API}/users/profile",
            json={"name": None, "location": "Pune"},
            headers=auth_headers(token),
        )

        assert response.status_code == 400
        assert (await get_profile(client, token))["location"] == ""


class TestLocationAndPreferences:

    @pytest.mark.asyncio
    async def test_update_location(self, client, register_user):
        token, _ = await register_user()
        response = await client.post(
            f"{API}/users/location", json={"location": "Bengaluru"}, headers=auth_headers(token)
        )
        assert response.status_code == 200
        assert (await get_profile(client, token))["location"] == "Bengaluru"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{}, {"location": ""}, {"location": "   "}])
    async def test_location_required(self, client, register_user, payload):
        token, _ = await register_user()
        response = await client.post(f"{API}/users/location", json=payload, headers=auth_headers(token))
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_preferences_last_write_wins(self, client, register_user):
        token, _ = await register_user()
        for prefs in (["Anxiety", "Grief"], ["Career Guidance"]):
            response = await client.post(
                f"{API}/users/preferences", json={"preferences": prefs}, headers=auth_headers(token)
            )
            assert response.status_code == 200

        assert (await get_profile(client, token))["consultation_preferences"] == ["Career Guidance"]

    @pytest.mark.asyncio
    async def test_preferences_must_be_a_list(self, client, register_user):
        token, _ = await register_user()
        response = await client.post(
            f"{API}/users/preferences", json={"preferences": "Anxiety"}, headers=auth_headers(token)
        )
        assert response.status_code == 400


class TestProfilePhoto:

    @pytest.mark.asyncio
    async def test_upload_and_serve(self, client, register_user, sample_image_bytes):
        token, user = await register_user()

        response = await client.post(
            f"{API}/users/upload-photo",
            files={"photo": ("../../me.jpg", sample_image_bytes, "image/jpeg")},
            headers=auth_headers(token),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["upload_url"].startswith(f"uploads/profiles/profile_{user['id']}_")
        assert body["upload_url"].endswith("_me.jpg")
        assert body["image_url"] == "/" + body["upload_url"]

        assert (await get_profile(client, token))["profile_photo_url"] == body["upload_url"]

        served = await client.get(body["image_url"])
        assert served.status_code == 200
        assert served.content == sample_image_bytes

    @pytest.mark.asyncio
    async def test_empty_photo_rejected(self, client, register_user):
        token, _ = await register_user()
        response = await client.post(
            f"{API}/users/upload-photo",
            files={"photo": ("me.jpg", b"", "image/jpeg")},
            headers=auth_headers(token),
        )
        assert response.status_code == 400
        assert (await get_profile(client, token))["profile_photo_url"] == ""

    @pytest.mark.asyncio
    async def test_missing_photo_rejected(self, client, register_user):
        token, _ = await register_user()
        response = await client.post(
            f"{API}/users/upload-photo",
            data={"caption": "no file"},
            headers=auth_headers(token),
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Photo upload required"

    @pytest.mark.asyncio
    async def test_serving_missing_upload_is_404(self, client):
        response = await client.get("/uploads/profiles/does-not-exist.jpg")
        assert response.status_code == 404
