"""
Follower endpoint tests: following, unfollowing and the edge lookups
that the feed depends on.
"""
import pytest
from httpx import AsyncClient

from helpers import as_user, random_id


async def _create_user(client: AsyncClient, username: str) -> str:
    resp = await client.post("/api/v1/users", json={
        "username": username,
        "email": f"{username}@example.com",
    })
    assert resp.status_code == 201
    return resp.json()["id"]


# ---------------------------------------------------------------------------
# Follow
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_follow_user(async_client: AsyncClient):
    alice = await _create_user(async_client, "alice")
    bob = await _create_user(async_client, "bob")

    resp = await async_client.post(f"/api/v1/followers/{bob}", headers=as_user(alice))

    assert resp.status_code == 201
    edge = resp.json()
    assert edge["follower_id"] == alice
    assert edge["followee_id"] == bob


@pytest.mark.asyncio
async def test_follow_twice_returns_same_edge(async_client: AsyncClient):
    alice = await _create_user(async_client, "alice")
    bob = await _create_user(async_client, "bob")

    first = await async_client.post(f"/api/v1/followers/{bob}", headers=as_user(alice))
    second = await async_client.post(f"/api/v1/followers/{bob}", headers=as_user(alice))

    assert second.status_code == 201
    assert second.json()["followee_id"] == first.json()["followee_id"] == bob
    resp = await async_client.get("/api/v1/followers/following", headers=as_user(alice))
    assert len(resp.json()) == 1


@pytest.mark.asyncio
async def test_follow_self_returns_400(async_client: AsyncClient):
    alice = await _create_user(async_client, "alice")

    resp = await async_client.post(f"/api/v1/followers/{alice}", headers=as_user(alice))

    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_follow_malformed_id_returns_400(async_client: AsyncClient):
    alice = await _create_user(async_client, "alice")

    resp = await async_client.post("/api/v1/followers/bob", headers=as_user(alice))

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid id."


@pytest.mark.asyncio
async def test_follow_unknown_user_returns_404(async_client: AsyncClient):
    alice = await _create_user(async_client, "alice")

    resp = await async_client.post(f"/api/v1/followers/{random_id()}", headers=as_user(alice))

    assert resp.status_code == 404
    assert resp.json()["detail"] == "User not found."


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_followers_and_following_lists(async_client: AsyncClient):
    alice = await _create_user(async_client, "alice")
    bob = await _create_user(async_client, "bob")
    carol = await _create_user(async_client, "carol")
    await async_client.post(f"/api/v1/followers/{alice}", headers=as_user(bob))
    await async_client.post(f"/api/v1/followers/{alice}", headers=as_user(carol))
    await async_client.post(f"/api/v1/followers/{carol}", headers=as_user(alice))

    followers = await async_client.get("/api/v1/followers", headers=as_user(alice))
    following = await async_client.get("/api/v1/followers/following", headers=as_user(alice))

    assert {e["follower_id"] for e in followers.json()} == {bob, carol}
    assert [e["followee_id"] for e in following.json()] == [carol]


@pytest.mark.asyncio
async def test_get_followee_and_follower(async_client: AsyncClient):
    alice = await _create_user(async_client, "alice")
    bob = await _create_user(async_client, "bob")
    await async_client.post(f"/api/v1/followers/{bob}", headers=as_user(alice))

    # alice follows bob
    resp = await async_client.get(f"/api/v1/followers/following/{bob}", headers=as_user(alice))
    assert resp.status_code == 200
    resp = await async_client.get(f"/api/v1/followers/{alice}", headers=as_user(bob))
    assert resp.status_code == 200

    # bob does not follow alice
    resp = await async_client.get(f"/api/v1/followers/following/{alice}", headers=as_user(bob))
    assert resp.status_code == 404
    resp = await async_client.get(f"/api/v1/followers/{bob}", headers=as_user(alice))
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Unfollow
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_unfollow(async_client: AsyncClient):
    alice = await _create_user(async_client, "alice")
    bob = await _create_user(async_client, "bob")
    await async_client.post(f"/api/v1/followers/{bob}", headers=as_user(alice))

    resp = await async_client.delete(f"/api/v1/followers/{bob}", headers=as_user(alice))
    assert resp.status_code == 204

    resp = await async_client.delete(f"/api/v1/followers/{bob}", headers=as_user(alice))
    assert resp.status_code == 404

    resp = await async_client.get("/api/v1/followers/following", headers=as_user(alice))
    assert resp.json() == []
