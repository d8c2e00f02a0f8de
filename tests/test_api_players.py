# tests/test_api_players.py

"""Tests for the Player API endpoints."""

import pytest
from conftest import auth, make_user
from httpx import AsyncClient
from picklerank.db.models import User
from sqlalchemy.ext.asyncio import AsyncSession

# =============================================================================
# Helper Functions
# =============================================================================


async def create_group(client: AsyncClient, user: User, name: str) -> str:
    """Helper to create a group (the caller becomes its admin)."""
    res = await client.post("/groups/", json={"name": name}, headers=auth(user))
    assert res.status_code == 201
    return str(res.json()["id"])


async def create_player(client: AsyncClient, user: User, **fields) -> dict:
    res = await client.post("/players/", json=fields, headers=auth(user))
    assert res.status_code == 201, res.text
    return res.json()


async def play(client: AsyncClient, user: User, winner: str, loser: str) -> None:
    res = await client.post(
        "/matches/",
        json={
            "type": "SINGLES",
            "team_a": [winner],
            "team_b": [loser],
            "score_a": 11,
            "score_b": 3,
        },
        headers=auth(user),
    )
    assert res.status_code == 201


# =============================================================================
# Create / Read
# =============================================================================


@pytest.mark.asyncio
async def test_create_player(async_client: AsyncClient, alice: User):
    """A new player reads back at the default rating with no groups."""
    response = await async_client.post(
        "/players/",
        json={"name": "Pat", "email": "pat@example.com", "contact_number": "555-0101"},
        headers=auth(alice),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Pat"
    assert data["email"] == "pat@example.com"
    assert data["contact_number"] == "555-0101"
    assert data["rating"] == 1200.0
    assert data["memberships"] == {}
    assert "id" in data


@pytest.mark.asyncio
async def test_create_player_requires_authentication(async_client: AsyncClient):
    response = await async_client.post("/players/", json={"name": "Nobody"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_player_duplicate_email(async_client: AsyncClient, alice: User):
    await create_player(async_client, alice, name="First", email="dup@example.com")

    response = await async_client.post(
        "/players/",
        json={"name": "Second", "email": "dup@example.com"},
        headers=auth(alice),
    )

    assert response.status_code == 409
    assert response.json()["error_type"] == "DuplicateEmailError"


@pytest.mark.asyncio
async def test_create_player_with_empty_name_is_rejected(
    async_client: AsyncClient, alice: User
):
    response = await async_client.post(
        "/players/", json={"name": ""}, headers=auth(alice)
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_read_player_not_found(async_client: AsyncClient):
    response = await async_client.get("/players/unknown-id")

    assert response.status_code == 404
    assert response.json()["error_type"] == "PlayerNotFoundError"


@pytest.mark.asyncio
async def test_read_player_by_email(async_client: AsyncClient, alice: User):
    created = await create_player(
        async_client, alice, name="Mail", email="mail@example.com"
    )

    found = await async_client.get(
        "/players/by-email", params={"email": "mail@example.com"}
    )
    missing = await async_client.get(
        "/players/by-email", params={"email": "nobody@example.com"}
    )

    assert found.status_code == 200
    assert found.json()["id"] == created["id"]
    assert missing.status_code == 404


# =============================================================================
# Group Placement
# =============================================================================


@pytest.mark.asyncio
async def test_group_placement_requires_group_admin(
    async_client: AsyncClient, alice: User, bob: User
):
    group_id = await create_group(async_client, alice, "Tuesday Club")

    refused = await async_client.post(
        "/players/", json={"name": "Sneaky", "group_id": group_id}, headers=auth(bob)
    )
    allowed = await async_client.post(
        "/players/", json={"name": "Invited", "group_id": group_id}, headers=auth(alice)
    )

    assert refused.status_code == 403
    assert allowed.status_code == 201
    assert allowed.json()["memberships"] == {group_id: "MEMBER"}


@pytest.mark.asyncio
async def test_group_placement_syncs_to_matching_user(
    async_client: AsyncClient, alice: User, bob: User
):
    """A player whose email matches a user links to it and mirrors roles."""
    group_id = await create_group(async_client, alice, "Sync Club")

    player = await create_player(
        async_client,
        alice,
        name="Bob",
        email="bob@example.com",
        group_id=group_id,
        role="GROUP_ADMIN",
    )
    me = await async_client.get("/users/me", headers=auth(bob))

    assert player["user_id"] == bob.id
    assert me.json()["memberships"] == {group_id: "GROUP_ADMIN"}


@pytest.mark.asyncio
async def test_sync_keeps_unrelated_user_memberships(
    async_client: AsyncClient, alice: User, bob: User
):
    """Mirroring one group's role leaves the user's other groups alone."""
    bobs_group = await create_group(async_client, bob, "Bob's Club")
    alices_group = await create_group(async_client, alice, "Alice's Club")

    await create_player(
        async_client, alice, name="Bob", email="bob@example.com", group_id=alices_group
    )
    me = await async_client.get("/users/me", headers=auth(bob))

    assert me.json()["memberships"] == {
        bobs_group: "GROUP_ADMIN",
        alices_group: "MEMBER",
    }


@pytest.mark.asyncio
async def test_add_and_remove_player_group_membership(
    async_client: AsyncClient, alice: User, bob: User
):
    group_id = await create_group(async_client, alice, "Roster Club")
    player = await create_player(async_client, alice, name="Roz")
    path = f"/players/{player['id']}/groups/{group_id}"

    refused = await async_client.put(path, json={"role": "MEMBER"}, headers=auth(bob))
    added = await async_client.put(path, json={"role": "MEMBER"}, headers=auth(alice))
    removed = await async_client.delete(path, headers=auth(alice))

    assert refused.status_code == 403
    assert added.status_code == 200
    assert added.json()["memberships"] == {group_id: "MEMBER"}
    assert removed.status_code == 200
    assert removed.json()["memberships"] == {}


# =============================================================================
# Update
# =============================================================================


@pytest.mark.asyncio
async def test_player_owner_can_update_profile(
    async_client: AsyncClient, db_session: AsyncSession, alice: User
):
    """The user whose email matches (any case) may edit the player."""
    carol = await make_user(db_session, "Carol", "carol@example.com")
    player = await create_player(
        async_client, alice, name="Carol", email="Carol@Example.com"
    )

    response = await async_client.put(
        f"/players/{player['id']}",
        json={"name": "Carol D.", "social_media": "@carold"},
        headers=auth(carol),
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Carol D."
    assert response.json()["social_media"] == "@carold"


@pytest.mark.asyncio
async def test_other_user_cannot_update_player(
    async_client: AsyncClient, alice: User, bob: User
):
    player = await create_player(
        async_client, alice, name="Alice", email="alice@example.com"
    )

    response = await async_client.put(
        f"/players/{player['id']}", json={"name": "Hijacked"}, headers=auth(bob)
    )

    assert response.status_code == 403
    check = await async_client.get(f"/players/{player['id']}")
    assert check.json()["name"] == "Alice"


@pytest.mark.asyncio
async def test_only_admin_changes_player_email(
    async_client: AsyncClient, alice: User, admin: User
):
    player = await create_player(
        async_client, alice, name="Alice", email="alice@example.com"
    )
    path = f"/players/{player['id']}"

    by_owner = await async_client.put(
        path,
        json={"name": "Alice", "email": "new@example.com"},
        headers=auth(alice),
    )
    assert by_owner.status_code == 200
    assert by_owner.json()["email"] == "alice@example.com"

    by_admin = await async_client.put(
        path,
        json={"name": "Alice", "email": "new@example.com"},
        headers=auth(admin),
    )
    assert by_admin.status_code == 200
    assert by_admin.json()["email"] == "new@example.com"


@pytest.mark.asyncio
async def test_admin_email_change_rejects_duplicate(
    async_client: AsyncClient, alice: User, admin: User
):
    await create_player(async_client, alice, name="Taken", email="taken@example.com")
    player = await create_player(async_client, alice, name="Other")

    response = await async_client.put(
        f"/players/{player['id']}",
        json={"name": "Other", "email": "taken@example.com"},
        headers=auth(admin),
    )

    assert response.status_code == 409


# =============================================================================
# Delete
# =============================================================================


@pytest.mark.asyncio
async def test_owner_can_delete_player(async_client: AsyncClient, alice: User):
    player = await create_player(
        async_client, alice, name="Alice", email="alice@example.com"
    )

    response = await async_client.delete(
        f"/players/{player['id']}", headers=auth(alice)
    )

    assert response.status_code == 204
    assert (await async_client.get(f"/players/{player['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_other_user_cannot_delete_player(
    async_client: AsyncClient, alice: User, bob: User
):
    player = await create_player(
        async_client, alice, name="Alice", email="alice@example.com"
    )

    response = await async_client.delete(
        f"/players/{player['id']}", headers=auth(bob)
    )

    assert response.status_code == 403
    assert response.json()["error_type"] == "AuthorizationError"
    assert (await async_client.get(f"/players/{player['id']}")).status_code == 200


@pytest.mark.asyncio
async def test_deleting_player_keeps_matches_and_ratings(
    async_client: AsyncClient, alice: User, admin: User
):
    """Rosters keep the raw id and the opponent keeps the rating earned."""
    gone = await create_player(async_client, alice, name="Gone")
    stays = await create_player(async_client, alice, name="Stays")
    res = await async_client.post(
        "/matches/",
        json={
            "type": "SINGLES",
            "team_a": [stays["id"]],
            "team_b": [gone["id"]],
            "score_a": 11,
            "score_b": 2,
        },
        headers=auth(alice),
    )
    match_id = res.json()["id"]

    response = await async_client.delete(
        f"/players/{gone['id']}", headers=auth(admin)
    )

    assert response.status_code == 204
    match = (await async_client.get(f"/matches/{match_id}")).json()
    assert match["team_b"] == [gone["id"]]
    assert match["team_b_names"] == [gone["id"]]
    assert match["team_a_names"] == ["Stays"]
    kept = await async_client.get(f"/players/{stays['id']}")
    assert kept.json()["rating"] == 1216.0


@pytest.mark.asyncio
async def test_delete_unknown_player_returns_404(
    async_client: AsyncClient, admin: User
):
    response = await async_client.delete("/players/missing", headers=auth(admin))

    assert response.status_code == 404


# =============================================================================
# Listing / Leaderboard
# =============================================================================


@pytest.mark.asyncio
async def test_leaderboard_ranks_unrated_players_at_default(
    async_client: AsyncClient, alice: User
):
    winner = await create_player(async_client, alice, name="Winner")
    loser = await create_player(async_client, alice, name="Loser")
    fresh = await create_player(async_client, alice, name="Fresh")
    await play(async_client, alice, winner["id"], loser["id"])

    response = await async_client.get("/players/leaderboard")

    assert response.status_code == 200
    board = response.json()
    assert [p["id"] for p in board] == [winner["id"], fresh["id"], loser["id"]]
    assert [p["rating"] for p in board] == [1216.0, 1200.0, 1184.0]


@pytest.mark.asyncio
async def test_leaderboard_filtered_by_group(async_client: AsyncClient, alice: User):
    group_id = await create_group(async_client, alice, "Board Club")
    member = await create_player(
        async_client, alice, name="Member", group_id=group_id
    )
    await create_player(async_client, alice, name="Outsider")

    response = await async_client.get(
        "/players/leaderboard", params={"group_id": group_id}
    )

    assert [p["id"] for p in response.json()] == [member["id"]]


@pytest.mark.asyncio
async def test_list_players_sorted_by_rating(async_client: AsyncClient, alice: User):
    high = await create_player(async_client, alice, name="High")
    low = await create_player(async_client, alice, name="Low")
    await play(async_client, alice, high["id"], low["id"])

    response = await async_client.get(
        "/players/",
        params={"sort_by": "rating", "sort_order": "desc", "limit": 1},
    )

    data = response.json()
    assert data["total"] == 2
    assert data["has_more"] is True
    assert [p["id"] for p in data["items"]] == [high["id"]]
