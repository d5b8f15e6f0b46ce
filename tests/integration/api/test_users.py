"""
Integration tests for user endpoints.

Tests POST /api/users and GET /api/users against the in-memory store.
"""

from unittest.mock import AsyncMock, patch

import pytest
from bson import ObjectId

from conftest import create_user


class TestCreateUserEndpoint:
    """Tests for POST /api/users endpoint."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_create_user_form(self, async_client, fake_database, username):
        """Test a form post creates a user and returns username and _id."""
        response = await async_client.post("/api/users", data={"username": username})

        assert response.status_code == 200
        data = response.json()
        assert list(data.keys()) == ["username", "_id"]
        assert data["username"] == username
        assert ObjectId.is_valid(data["_id"])
        assert len(fake_database["users"].documents) == 1

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_create_user_json(self, async_client, username):
        """Test a JSON body is accepted as well."""
        response = await async_client.post("/api/users", json={"username": username})

        assert response.status_code == 200
        assert response.json()["username"] == username

    @pytest.mark.api
    @pytest.mark.asyncio
    @pytest.mark.parametrize("data", [{}, {"username": ""}, {"username": "   "}])
    async def test_create_user_empty_username(self, async_client, fake_database, data):
        """Test an empty username yields a soft error and stores nothing."""
        response = await async_client.post("/api/users", data=data)

        assert response.status_code == 200
        assert response.json() == {"error": "Username is required"}
        assert fake_database["users"].documents == []

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_create_user_duplicate(self, async_client, fake_database, username):
        """Test a taken username yields a soft error."""
        await create_user(async_client, username)

        response = await async_client.post("/api/users", data={"username": username})

        assert response.status_code == 200
        assert response.json() == {"error": "Username already exists"}
        assert len(fake_database["users"].documents) == 1

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_create_user_malformed_json(self, async_client):
        response = await async_client.post(
            "/api/users",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 200
        assert response.json() == {"error": "Invalid JSON body"}

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_create_user_store_failure(self, async_client, fake_database, username):
        """Test an unexpected store failure returns a generic 500."""
        with patch.object(
            fake_database["users"],
            "insert_one",
            AsyncMock(side_effect=RuntimeError("connection reset")),
        ):
            response = await async_client.post(
                "/api/users", data={"username": username}
            )

        assert response.status_code == 500
        assert response.json() == {"error": "Error creating user"}


class TestListUsersEndpoint:
    """Tests for GET /api/users endpoint."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_list_users_empty(self, async_client):
        response = await async_client.get("/api/users")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_created_user_listed_once(self, async_client, username):
        """Test a created user appears exactly once with matching fields."""
        created = await create_user(async_client, username)
        await create_user(async_client, f"{username}_other")

        response = await async_client.get("/api/users")

        assert response.status_code == 200
        users = response.json()
        matches = [user for user in users if user["username"] == username]
        assert matches == [created]
        assert all(set(user.keys()) == {"username", "_id"} for user in users)

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_list_users_store_failure(self, async_client, fake_database):
        with patch.object(
            fake_database["users"], "find", side_effect=RuntimeError("boom")
        ):
            response = await async_client.get("/api/users")

        assert response.status_code == 500
        assert response.json() == {"error": "Error fetching users"}
