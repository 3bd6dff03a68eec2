"""
Counsellor directory: listing, specialty filter, lookup and recommendations.
"""

import pytest

from conftest import API, auth_headers
from lampy.services.counsellor_service import (
    MAX_RECOMMENDATIONS,
    has_all,
    has_any,
    parse_specialties,
)
from lampy.models.counsellor import Counsellor


class TestSpecialtyMatching:

    def test_parse_specialties(self):
        assert parse_specialties(None) == []
        assert parse_specialties("") == []
        assert parse_specialties(" Anxiety, Stress Management ,,") == ["Anxiety", "Stress Management"]

    def test_exact_entry_match(self):
        counsellor = Counsellor(specialties=["Stress Management", "Anxiety"])
        assert has_any(counsellor, ["Stress Management"])
        assert not has_any(counsellor, ["Stress"])
        assert has_all(counsellor, ["Anxiety", "Stress Management"])
        assert not has_all(counsellor, ["Anxiety", "Grief"])


class TestListing:

    @pytest.mark.asyncio
    async def test_lists_only_available_best_rated_first(self, client, register_user, create_counsellor):
        token, _ = await register_user()
        low = await create_counsellor(name="Low", rating=3.1)
        high = await create_counsellor(name="High", rating=4.9)
        await create_counsellor(name="Away", rating=5.0, available=False)

        response = await client.get(f"{API}/counsellors/", headers=auth_headers(token))

        assert response.status_code == 200
        assert [c["id"] for c in response.json()] == [high["id"], low["id"]]

    @pytest.mark.asyncio
    async def test_specialty_filter_requires_every_entry(self, client, register_user, create_counsellor):
        token, _ = await register_user()
        both = await create_counsellor(name="Both", specialties=["Anxiety", "Grief"])
        anxiety = await create_counsellor(name="Anxiety only", specialties=["Anxiety"])
        await create_counsellor(name="Stress", specialties=["Stress Management"])

        single = await client.get(
            f"{API}/counsellors/", params={"specialties": "Anxiety"}, headers=auth_headers(token)
        )
        assert {c["id"] for c in single.json()} == {both["id"], anxiety["id"]}

        combined = await client.get(
            f"{API}/counsellors/", params={"specialties": "Anxiety, Grief"}, headers=auth_headers(token)
        )
        assert [c["id"] for c in combined.json()] == [both["id"]]

    @pytest.mark.asyncio
    async def test_specialty_filter_does_not_match_substrings(self, client, register_user, create_counsellor):
        token, _ = await register_user()
        await create_counsellor(specialties=["Stress Management"])

        response = await client.get(
            f"{API}/counsellors/", params={"specialties": "Stress"}, headers=auth_headers(token)
        )
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_requires_token(self, client):
        response = await client.get(f"{API}/counsellors/")
        assert response.status_code == 401


class TestLookup:

    @pytest.mark.asyncio
    async def test_get_by_id_includes_unavailable(self, client, register_user, create_counsellor):
        token, _ = await register_user()
        away = await create_counsellor(name="Away", available=False)

        response = await client.get(f"{API}/counsellors/{away['id']}", headers=auth_headers(token))
        assert response.status_code == 200
        assert response.json()["name"] == "Away"
        assert response.json()["available"] is False

    @pytest.mark.asyncio
    async def test_unknown_id_is_404(self, client, register_user):
        token, _ = await register_user()
        response = await client.get(f"{API}/counsellors/12345", headers=auth_headers(token))
        assert response.status_code == 404
        assert response.json()["message"] == "Counsellor not found"


class TestRecommended:

    @pytest.mark.asyncio
    async def test_matches_preferences_sorted_by_rating(self, client, register_user, create_counsellor):
        token, _ = await register_user()
        await client.post(
            f"{API}/users/preferences",
            json={"preferences": ["Stress Management"]},
            headers=auth_headers(token),
        )
        good = await create_counsellor(name="Good", rating=4.2, specialties=["Stress Management"])
        best = await create_counsellor(name="Best", rating=4.8, specialties=["Anxiety", "Stress Management"])
        await create_counsellor(name="Unrelated", rating=5.0, specialties=["Career Guidance"])
        await create_counsellor(name="Substring", rating=4.9, specialties=["Stress"])
        await create_counsellor(name="Away", rating=4.7, specialties=["Stress Management"], available=False)

        response = await client.get(f"{API}/counsellors/recommended", headers=auth_headers(token))

        assert response.status_code == 200
        assert [c["id"] for c in response.json()] == [best["id"], good["id"]]

    @pytest.mark.asyncio
    async def test_capped_at_ten(self, client, register_user, create_counsellor):
        token, _ = await register_user()
        await client.post(
            f"{API}/users/preferences", json={"preferences": ["Anxiety"]}, headers=auth_headers(token)
        )
        for i in range(MAX_RECOMMENDATIONS + 2):
            await create_counsellor(name=f"C{i}", rating=round(3 + i * 0.1, 1), specialties=["Anxiety"])

        body = (await client.get(f"{API}/counsellors/recommended", headers=auth_headers(token))).json()

        assert len(body) == MAX_RECOMMENDATIONS
        ratings = [c["rating"] for c in body]
        assert ratings == sorted(ratings, reverse=True)

    @pytest.mark.asyncio
    async def test_no_preferences_returns_available_counsellors(self, client, register_user, create_counsellor):
        token, _ = await register_user()
        a = await create_counsellor(name="A", rating=3.5, specialties=["Grief"])
        b = await create_counsellor(name="B", rating=4.5, specialties=["Anxiety"])
        await create_counsellor(name="Away", available=False)

        body = (await client.get(f"{API}/counsellors/recommended", headers=auth_headers(token))).json()
        assert [c["id"] for c in body] == [b["id"], a["id"]]
