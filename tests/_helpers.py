"""Small request helpers shared by the API tests."""

import uuid

from odyssey.config import settings

COOKIE = settings.token_cookie_name


def unique_email(prefix: str = "user") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}@example.com"


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def cookie(token: str) -> dict:
    return {"Cookie": f"{COOKIE}={token}"}


async def signup(client, prefix: str = "user", password: str = "password_123") -> dict:
    """Register a fresh account. Returns {"id", "email", "token"}.

    The client's cookie jar is cleared so later requests only carry the
    credentials a test passes explicitly.
    """
    email = unique_email(prefix)
    r = await client.post(
        "/api/auth/register",
        json={"email": email, "name": prefix.title(), "password": password},
    )
    assert r.status_code == 201, r.text
    client.cookies.clear()
    body = r.json()
    return {"id": body["user"]["id"], "email": email, "token": body["token"]}


async def create_journal(client, token: str, *, is_public: bool, **fields) -> dict:
    payload = {"title": "Trip", "content": "Notes", "is_public": is_public, **fields}
    r = await client.post("/api/journals", json=payload, headers=bearer(token))
    assert r.status_code == 201, r.text
    return r.json()
