"""
Session booking, listing, scoped lookup and cancellation.
"""

from datetime import datetime, timezone

import pytest

from conftest import API, auth_headers
from lampy.exceptions import ValidationError
from lampy.services.session_service import parse_session_date


async def book(client, token, counsellor_id, session_date="2025-03-01T10:00:00Z", **extra):
    payload = {"counsellor_id": counsellor_id, "session_date": session_date, "duration": 60}
    payload.update(extra)
    return await client.post(f"{API}/sessions/book", json=payload, headers=auth_headers(token))


class TestParseSessionDate:

    def test_whole_seconds(self):
        assert parse_session_date("2025-03-01T10:00:00Z") == datetime(2025, 3, 1, 10, 0, tzinfo=timezone.utc)

    def test_fractional_seconds(self):
        parsed = parse_session_date("2025-03-01T10:00:00.250Z")
        assert parsed.microsecond == 250000
        assert parsed.tzinfo == timezone.utc

    @pytest.mark.parametrize(
        "value",
        [
            "2025-03-01",
            "2025-03-01 10:00:00",
            "2025-03-01T10:00:00",
            "2025-03-01T10:00:00+05:30",
            "01/03/2025 10:00",
            "tomorrow",
            "",
        ],
    )
    def test_rejects_anything_else(self, value):
        with pytest.raises(ValidationError):
            parse_session_date(value)


class TestBooking:

    @pytest.mark.asyncio
    async def test_book_creates_pending_session(self, client, register_user, create_counsellor):
        token, user = await register_user()
        counsellor = await create_counsellor()

        response = await book(client, token, counsellor["id"], notes="First visit")

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["user_id"] == user["id"]
        assert body["duration"] == 60
        assert body["notes"] == "First visit"
        assert body["counsellor"]["id"] == counsellor["id"]
        assert body["session_date"].startswith("2025-03-01T10:00:00")

    @pytest.mark.asyncio
    async def test_bad_date_is_400(self, client, register_user, create_counsellor):
        token, _ = await register_user()
        counsellor = await create_counsellor()
        response = await book(client, token, counsellor["id"], session_date="2025-03-01 10:00")
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_unknown_counsellor_is_404(self, client, register_user):
        token, _ = await register_user()
        response = await book(client, token, 4242)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unavailable_counsellor_creates_nothing(self, client, register_user, create_counsellor):
        token, _ = await register_user()
        away = await create_counsellor(available=False)

        response = await book(client, token, away["id"])

        assert response.status_code == 400
        assert response.json()["message"] == "Counsellor is not available"
        listed = await client.get(f"{API}/sessions/", headers=auth_headers(token))
        assert listed.json() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("duration", [0, -30])
    async def test_duration_must_be_positive(self, client, register_user, create_counsellor, duration):
        token, _ = await register_user()
        counsellor = await create_counsellor()
        response = await book(client, token, counsellor["id"], duration=duration)
        assert response.status_code == 400


class TestListingAndLookup:

    @pytest.mark.asyncio
    async def test_list_newest_session_first(self, client, register_user, create_counsellor):
        token, _ = await register_user()
        counsellor = await create_counsellor()
        early = (await book(client, token, counsellor["id"], "2025-01-10T09:00:00Z")).json()
        late = (await book(client, token, counsellor["id"], "2025-06-10T09:00:00Z")).json()
        middle = (await book(client, token, counsellor["id"], "2025-03-10T09:00:00Z")).json()

        response = await client.get(f"{API}/sessions/", headers=auth_headers(token))

        assert response.status_code == 200
        assert [s["id"] for s in response.json()] == [late["id"], middle["id"], early["id"]]
        assert all(s["counsellor"]["id"] == counsellor["id"] for s in response.json())

    @pytest.mark.asyncio
    async def test_dates_read_back_as_utc(self, client, register_user, create_counsellor):
        token, _ = await register_user()
        counsellor = await create_counsellor()
        booked = (await book(client, token, counsellor["id"], "2025-03-01T10:00:00Z")).json()

        fetched = (await client.get(f"{API}/sessions/{booked['id']}", headers=auth_headers(token))).json()
        listed = (await client.get(f"{API}/sessions/", headers=auth_headers(token))).json()[0]

        assert booked["session_date"] == "2025-03-01T10:00:00Z"
        assert fetched["session_date"] == booked["session_date"]
        assert listed["session_date"] == booked["session_date"]
        assert fetched["created_at"] == booked["created_at"]
        assert fetched["created_at"].endswith("Z")

    @pytest.mark.asyncio
    async def test_sessions_are_private(self, client, register_user, create_counsellor):
        ann_token, _ = await register_user("ann@example.com")
        bo_token, _ = await register_user("bo@example.com")
        counsellor = await create_counsellor()
        session = (await book(client, ann_token, counsellor["id"])).json()

        own = await client.get(f"{API}/sessions/{session['id']}", headers=auth_headers(ann_token))
        assert own.status_code == 200

        other = await client.get(f"{API}/sessions/{session['id']}", headers=auth_headers(bo_token))
        assert other.status_code == 404
        assert other.json()["message"] == "Session not found"

        assert (await client.get(f"{API}/sessions/", headers=auth_headers(bo_token))).json() == []


class TestCancel:

    @pytest.mark.asyncio
    async def test_cancel_twice_is_idempotent(self, client, register_user, create_counsellor):
        token, _ = await register_user()
        counsellor = await create_counsellor()
        session = (await book(client, token, counsellor["id"])).json()

        for _ in range(2):
            response = await client.put(
                f"{API}/sessions/{session['id']}/cancel", headers=auth_headers(token)
            )
            assert response.status_code == 200
            assert response.json() == {"message": "Session cancelled successfully"}

        fetched = await client.get(f"{API}/sessions/{session['id']}", headers=auth_headers(token))
        assert fetched.json()["status"] == "cancelled"

    @pytest.mark.asyncio
    async def test_cannot_cancel_someone_elses_session(self, client, register_user, create_counsellor):
        ann_token, _ = await register_user("ann@example.com")
        bo_token, _ = await register_user("bo@example.com")
        counsellor = await create_counsellor()
        session = (await book(client, ann_token, counsellor["id"])).json()

        response = await client.put(f"{API}/sessions/{session['id']}/cancel", headers=auth_headers(bo_token))
        assert response.status_code == 404

        fetched = await client.get(f"{API}/sessions/{session['id']}", headers=auth_headers(ann_token))
        assert fetched.json()["status"] == "pending"

    @pytest.mark.asyncio
    async def test_cancel_unknown_session(self, client, register_user):
        token, _ = await register_user()
        response = await client.put(f"{API}/sessions/999/cancel", headers=auth_headers(token))
        assert response.status_code == 404
