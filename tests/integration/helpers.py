"""Shared helpers for integration tests."""

import uuid

from httpx import AsyncClient


def unique_user() -> dict[str, str]:
    uid = uuid.uuid4().hex[:8]
    return {
        "username": f"user_{uid}",
        "email": f"user_{uid}@example.com",
        "password": "TestPass1",
    }


async def register_and_login(client: AsyncClient) -> dict[str, str]:
    """Register a fresh user and return Authorization headers for it."""
    user = unique_user()
    await client.post("/api/v1/auth/register", json=user)
    resp = await client.post(
        "/api/v1/auth/login",
        json={"username": user["username"], "password": user["password"]},
    )
    return {"Authorization": f"Bearer {resp.json()['data']['access_token']}"}


async def open_account(client: AsyncClient, headers: dict[str, str], balance: int = 0) -> str:
    resp = await client.post(
        "/api/v1/accounts", json={"initial_balance_cents": balance}, headers=headers
    )
    return str(resp.json()["data"]["account_number"])
