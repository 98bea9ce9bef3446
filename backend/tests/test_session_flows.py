"""
End-to-end flows through the HTTP API against a real test database.
"""
from datetime import timedelta

import httpx
import pytest
import pytest_asyncio

from backend.api.main import app
from backend.utils.datetime_utils import DATE_FORMAT, TIME_FORMAT, local_now


@pytest_asyncio.fixture
async def api(test_engine):
    """HTTP client bound to the app, sharing the test database."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


async def register(api, email, name, password="secret123"):
    response = await api.post(
        "/auth/register", json={"email": email, "password": password, "name": name}
    )
    assert response.status_code == 200, response.text
    body = response.json()
    return body["user"], {"Authorization": f"Bearer {body['token']}"}


def session_payload(hours_from_now=24, **overrides):
    start = local_now() + timedelta(hours=hours_from_now)
    end = start + timedelta(hours=2)
    payload = {
        "sport": "Badminton",
        "venue": "Clementi Sports Hall",
        "start_date": start.strftime(DATE_FORMAT),
        "start_time": start.strftime(TIME_FORMAT),
        "end_date": end.strftime(DATE_FORMAT),
        "end_time": end.strftime(TIME_FORMAT),
        "skill_level_start": "Mid Beginner",
        "skill_level_end": "Advanced",
        "max_players": 2,
        "fee": 4.5,
        "count_host_in": True,
    }
    payload.update(overrides)
    return payload


class TestAccountFlow:
    """Register, login and profile."""

    @pytest.mark.asyncio
    async def test_register_login_and_update_profile(self, api):
        user, headers = await register(api, "Mei@Example.com", "Mei Lin")
        assert user["email"] == "mei@example.com"
        assert "password_hash" not in user

        login = await api.post(
            "/auth/login", json={"email": "mei@example.com", "password": "secret123"}
        )
        assert login.status_code == 200
        assert login.json()["user"]["id"] == user["id"]

        bad_login = await api.post(
            "/auth/login", json={"email": "mei@example.com", "password": "wrong"}
        )
        assert bad_login.status_code == 401

        duplicate = await api.post(
            "/auth/register",
            json={"email": "mei@example.com", "password": "secret123", "name": "Again"},
        )
        assert duplicate.status_code == 409

        updated = await api.put("/users/profile", headers=headers, json={"name": "Mei L."})
        assert updated.status_code == 200
        assert updated.json()["name"] == "Mei L."

        profile = await api.get("/users/profile", headers=headers)
        assert profile.json()["name"] == "Mei L."

    @pytest.mark.asyncio
    async def test_google_login_creates_then_links(self, api):
        first = await api.post(
            "/auth/google",
            json={"email": "g@example.com", "name": "Goh", "google_id": "google-1"},
        )
        assert first.status_code == 200
        assert first.json()["user"]["auth_provider"] == "google"

        again = await api.post(
            "/auth/google",
            json={"email": "g@example.com", "name": "Goh", "google_id": "google-1"},
        )
        assert again.json()["user"]["id"] == first.json()["user"]["id"]

        password_user, _ = await register(api, "p@example.com", "Pei")
        linked = await api.post(
            "/auth/google",
            json={"email": "p@example.com", "name": "Pei", "google_id": "google-2"},
        )
        assert linked.status_code == 200
        assert linked.json()["user"]["id"] == password_user["id"]


class TestMembershipFlow:
    """Create, join, leave and cancel through the API."""

    @pytest.mark.asyncio
    async def test_capacity_two_with_host_counted_in(self, api):
        host, host_headers = await register(api, "host@example.com", "Host")
        bob, bob_headers = await register(api, "bob@example.com", "Bob")
        cat, cat_headers = await register(api, "cat@example.com", "Cat")

        created = await api.post("/sessions", headers=host_headers, json=session_payload())
        assert created.status_code == 200, created.text
        session_id = created.json()["id"]
        assert [p["id"] for p in created.json()["participants"]] == [host["id"]]

        joined = await api.post(f"/sessions/{session_id}/join", headers=bob_headers)
        assert joined.status_code == 200
        assert joined.json()["is_full"] is True

        full = await api.post(f"/sessions/{session_id}/join", headers=cat_headers)
        assert full.status_code == 409
        assert full.json()["detail"] == "Session is full"

        again = await api.post(f"/sessions/{session_id}/join", headers=bob_headers)
        assert again.status_code == 409
        assert again.json()["detail"] == "Already joined"

        left = await api.post(f"/sessions/{session_id}/leave", headers=bob_headers)
        assert left.status_code == 200
        assert [p["id"] for p in left.json()["participants"]] == [host["id"]]

        left_again = await api.post(f"/sessions/{session_id}/leave", headers=bob_headers)
        assert left_again.status_code == 400
        assert left_again.json()["detail"] == "Not a participant"

        cat_joins = await api.post(f"/sessions/{session_id}/join", headers=cat_headers)
        assert [p["id"] for p in cat_joins.json()["participants"]] == [host["id"], cat["id"]]

        listed = await api.get("/sessions")
        entry = next(s for s in listed.json() if s["id"] == session_id)
        assert entry["participants"] == [host["id"], cat["id"]]

    @pytest.mark.asyncio
    async def test_host_rules(self, api):
        host, host_headers = await register(api, "host@example.com", "Host")
        bob, bob_headers = await register(api, "bob@example.com", "Bob")

        created = await api.post(
            "/sessions", headers=host_headers, json=session_payload(count_host_in=False)
        )
        session_id = created.json()["id"]
        assert created.json()["participants"] == []

        self_join = await api.post(f"/sessions/{session_id}/join", headers=host_headers)
        assert self_join.status_code == 400
        assert self_join.json()["detail"] == "Host cannot join own session"

        counted = await api.post("/sessions", headers=host_headers, json=session_payload())
        counted_id = counted.json()["id"]
        sole_leave = await api.post(f"/sessions/{counted_id}/leave", headers=host_headers)
        assert sole_leave.status_code == 400

        forbidden = await api.delete(f"/sessions/{session_id}", headers=bob_headers)
        assert forbidden.status_code == 403
        assert (await api.get(f"/sessions/{session_id}")).status_code == 200

        cancelled = await api.delete(f"/sessions/{session_id}", headers=host_headers)
        assert cancelled.status_code == 200
        assert (await api.get(f"/sessions/{session_id}")).status_code == 404

        missing = await api.post(f"/sessions/{session_id}/join", headers=bob_headers)
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_listings_and_summary(self, api):
        host, host_headers = await register(api, "host@example.com", "Host")
        bob, bob_headers = await register(api, "bob@example.com", "Bob")

        soon = await api.post(
            "/sessions", headers=host_headers, json=session_payload(3, max_players=4)
        )
        later = await api.post(
            "/sessions", headers=host_headers, json=session_payload(48, max_players=4)
        )
        stale = await api.post(
            "/sessions", headers=host_headers, json=session_payload(-26, max_players=4)
        )
        bobs = await api.post("/sessions", headers=bob_headers, json=session_payload(5))
        assert stale.status_code == 200

        await api.post(f"/sessions/{soon.json()['id']}/join", headers=bob_headers)

        public = await api.get("/sessions")
        public_ids = [s["id"] for s in public.json()]
        assert public_ids == [soon.json()["id"], bobs.json()["id"], later.json()["id"]]
        assert stale.json()["id"] not in public_ids

        hosted = await api.get("/sessions/hosted", headers=host_headers)
        assert [s["id"] for s in hosted.json()] == [later.json()["id"], soon.json()["id"]]

        joined = await api.get("/sessions/joined", headers=bob_headers)
        assert [s["id"] for s in joined.json()] == [soon.json()["id"]]

        summary = await api.get("/users/me/sessions", headers=bob_headers)
        assert summary.json()["stats"] == {"hosted": 1, "joined": 1, "total": 2}

        search = await api.get("/sessions/search", params={"q": "clementi"})
        assert [s["id"] for s in search.json()] == [
            soon.json()["id"],
            bobs.json()["id"],
            later.json()["id"],
        ]

        venues = await api.get("/venues", params={"sport": "Badminton"})
        assert [v["name"] for v in venues.json()] == ["Clementi Sports Hall"]

    @pytest.mark.asyncio
    async def test_invalid_create_is_400_and_stores_nothing(self, api):
        _, headers = await register(api, "host@example.com", "Host")

        bad_tier = await api.post(
            "/sessions", headers=headers, json=session_payload(skill_level_start="Wizard")
        )
        assert bad_tier.status_code == 400

        reversed_range = await api.post(
            "/sessions",
            headers=headers,
            json=session_payload(skill_level_start="Expert", skill_level_end="Mid Beginner"),
        )
        assert reversed_range.status_code == 400

        assert (await api.get("/sessions")).json() == []
