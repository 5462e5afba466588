"""Google sign-in and session guard tests.

Tests cover:
1. First login creates a user; later logins refresh it in place
2. Bad Google tokens never touch the users table
3. The issued session token resolves to the same user id
4. Guard rules: no token → 401, bad/expired token → 403
"""

import pytest
from sqlalchemy import func, select

from toolboard.auth.google import GoogleIdentity
from toolboard.auth.jwt import create_session_token, verify_session_token
from toolboard.db.models import User


def _ada(name="Ada Lovelace", picture="https://example.com/ada.png"):
    return GoogleIdentity(
        subject="google-ada", email="ada@example.com", name=name, picture=picture
    )


async def _user_count(db_session) -> int:
    result = await db_session.execute(select(func.count()).select_from(User))
    return result.scalar_one()


# ═══════════════════════════════════════════════════════════
# Login
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_login_creates_user(client, google, db_session):
    google.register("good-token", _ada())

    r = await client.post("/api/auth/google", json={"token": "good-token"})
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Login successful"
    assert body["user"]["email"] == "ada@example.com"
    assert body["user"]["name"] == "Ada Lovelace"
    assert body["user"]["avatarUrl"] == "https://example.com/ada.png"
    assert isinstance(body["user"]["id"], int)

    user = (
        await db_session.execute(select(User).where(User.email == "ada@example.com"))
    ).scalar_one()
    assert user.id == body["user"]["id"]
    assert user.google_id == "google-ada"


@pytest.mark.asyncio
async def test_repeat_login_updates_same_user(client, google, db_session):
    google.register("first", _ada())
    google.register("second", _ada(name="Countess Lovelace", picture=None))

    r1 = await client.post("/api/auth/google", json={"token": "first"})
    r2 = await client.post("/api/auth/google", json={"token": "second"})
    assert r1.status_code == 200
    assert r2.status_code == 200
    assert r1.json()["user"]["id"] == r2.json()["user"]["id"]
    assert r2.json()["user"]["name"] == "Countess Lovelace"
    assert r2.json()["user"]["avatarUrl"] is None

    assert await _user_count(db_session) == 1


@pytest.mark.asyncio
async def test_invalid_google_token_creates_nothing(client, db_session):
    r = await client.post("/api/auth/google", json={"token": "forged"})
    assert r.status_code == 401
    assert r.json() == {"message": "Authentication failed"}
    assert await _user_count(db_session) == 0


@pytest.mark.asyncio
async def test_invalid_google_token_does_not_touch_existing_user(
    client, google, db_session
):
    google.register("good-token", _ada())
    await client.post("/api/auth/google", json={"token": "good-token"})

    r = await client.post("/api/auth/google", json={"token": "expired-token"})
    assert r.status_code == 401

    user = (
        await db_session.execute(select(User).where(User.email == "ada@example.com"))
    ).scalar_one()
    assert user.name == "Ada Lovelace"


@pytest.mark.asyncio
async def test_login_without_token_is_401(client, db_session):
    r = await client.post("/api/auth/google", json={})
    assert r.status_code == 401
    assert r.json() == {"message": "Authentication failed"}
    assert await _user_count(db_session) == 0


@pytest.mark.asyncio
async def test_login_with_empty_token_is_401(client):
    r = await client.post("/api/auth/google", json={"token": ""})
    assert r.status_code == 401
    assert r.json() == {"message": "Authentication failed"}


@pytest.mark.asyncio
async def test_login_without_body_is_401(client):
    r = await client.post("/api/auth/google")
    assert r.status_code == 401
    assert r.json() == {"message": "Authentication failed"}


@pytest.mark.asyncio
async def test_changed_google_email_updates_same_user(client, google, db_session):
    google.register(
        "before",
        GoogleIdentity(subject="g-1", email="old@example.com", name="Ada"),
    )
    google.register(
        "after",
        GoogleIdentity(subject="g-1", email="new@example.com", name="Ada"),
    )

    r1 = await client.post("/api/auth/google", json={"token": "before"})
    r2 = await client.post("/api/auth/google", json={"token": "after"})
    assert r1.status_code == 200
    assert r2.status_code == 200
    assert r2.json()["user"]["id"] == r1.json()["user"]["id"]
    assert r2.json()["user"]["email"] == "new@example.com"
    assert verify_session_token(r2.json()["token"])["email"] == "new@example.com"

    users = (await db_session.execute(select(User))).scalars().all()
    assert [(u.email, u.google_id) for u in users] == [("new@example.com", "g-1")]


@pytest.mark.asyncio
async def test_email_taken_over_by_other_google_account(client, google, db_session):
    """An address moving to a new Google account logs into the email's row."""
    google.register(
        "first-owner",
        GoogleIdentity(subject="g-1", email="shared@example.com", name="First"),
    )
    google.register(
        "first-owner-moved",
        GoogleIdentity(subject="g-1", email="moved@example.com", name="First"),
    )
    google.register(
        "second-owner",
        GoogleIdentity(subject="g-2", email="shared@example.com", name="Second"),
    )
    google.register(
        "first-owner-again",
        GoogleIdentity(subject="g-1", email="shared@example.com", name="First"),
    )

    await client.post("/api/auth/google", json={"token": "first-owner"})
    await client.post("/api/auth/google", json={"token": "first-owner-moved"})
    r = await client.post("/api/auth/google", json={"token": "second-owner"})
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "shared@example.com"

    r = await client.post("/api/auth/google", json={"token": "first-owner-again"})
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "shared@example.com"
    assert await _user_count(db_session) == 2


@pytest.mark.asyncio
async def test_session_token_resolves_to_user(client, google):
    google.register("good-token", _ada())
    r = await client.post("/api/auth/google", json={"token": "good-token"})
    token = r.json()["token"]
    user_id = r.json()["user"]["id"]

    assert verify_session_token(token)["sub"] == user_id

    r = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["id"] == user_id
    assert r.json()["email"] == "ada@example.com"


# ═══════════════════════════════════════════════════════════
# Session guard
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_missing_token_is_401(client):
    r = await client.get("/api/user/tools")
    assert r.status_code == 401
    assert r.headers["WWW-Authenticate"] == "Bearer"
    assert r.json()["message"] == "Authentication required"


@pytest.mark.asyncio
async def test_non_bearer_scheme_is_401(client):
    r = await client.get("/api/user/tools", headers={"Authorization": "Basic abc"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_invalid_token_is_403(client):
    r = await client.get(
        "/api/user/tools", headers={"Authorization": "Bearer invalid_token_here"}
    )
    assert r.status_code == 403
    assert r.json()["message"] == "Invalid or expired token"


@pytest.mark.asyncio
async def test_expired_token_is_403(client, make_user):
    user, _ = await make_user("old@example.com")
    token = create_session_token(user.id, user.email, expires_days=-1)
    r = await client.get("/api/user/tools", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_me_for_deleted_user_is_404(client):
    token = create_session_token(9999, "ghost@example.com")
    r = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 404
