"""
Bookshelf Backend — Users API Tests
=====================================

What:  End-to-end behaviour of the /users routes over HTTP.
How:   httpx AsyncClient → FastAPI app → real SQLite database (conftest),
       with real bcrypt at the minimum work factor.
"""

from unittest.mock import AsyncMock, patch

import pytest

from bookshelf.exceptions import DatabaseError
from bookshelf.services.users_service import users_service


async def _register(client, **overrides):
    payload = {
        "email": "a@x.com",
        "password": "password1",
        "confirm_password": "password1",
        "full_name": "A",
    }
    payload.update(overrides)
    return await client.post("/users", json=payload)


async def _user_id(client, email):
    users = (await client.get("/users")).json()
    return next(user["id"] for user in users if user["email"] == email)


class TestRegistration:

    @pytest.mark.asyncio
    async def test_create_then_list(self, test_client):
        response = await _register(test_client)

        assert response.status_code == 201
        assert response.json() == {"message": "User created successfully"}

        users = (await test_client.get("/users")).json()
        assert len(users) == 1
        assert users[0]["email"] == "a@x.com"
        assert users[0]["full_name"] == "A"

    @pytest.mark.asyncio
    async def test_password_hash_never_leaves_the_server(self, test_client):
        await _register(test_client)

        listed = (await test_client.get("/users")).json()[0]
        single = (await test_client.get(f"/users/{listed['id']}")).json()

        for body in (listed, single):
            assert "password" not in body
            assert "password_hash" not in body

    @pytest.mark.asyncio
    async def test_duplicate_email(self, test_client):
        await _register(test_client)

        response = await _register(test_client, full_name="Someone Else")

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "EMAIL_ALREADY_TAKEN"
        assert body["message"] == "Email already exists"
        assert len((await test_client.get("/users")).json()) == 1

    @pytest.mark.asyncio
    async def test_missing_email_wins_over_missing_name(self, test_client):
        response = await test_client.post("/users", json={"password": "password1"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert body["message"] == "Email is required"
        assert body["details"] == {"field": "email"}

    @pytest.mark.asyncio
    async def test_short_password(self, test_client):
        response = await _register(test_client, password="short", confirm_password="short")

        assert response.status_code == 400
        assert response.json()["message"] == "Password must be at least 8 characters long"

    @pytest.mark.asyncio
    async def test_missing_full_name(self, test_client):
        response = await _register(test_client, full_name=None)

        assert response.status_code == 400
        assert response.json()["message"] == "Full name is required"

    @pytest.mark.asyncio
    async def test_password_over_72_bytes(self, test_client):
        long_password = "p" * 73
        response = await _register(
            test_client, password=long_password, confirm_password=long_password
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Password must be at most 72 bytes long"
        assert (await test_client.get("/users")).json() == []

    @pytest.mark.asyncio
    async def test_confirmation_mismatch(self, test_client):
        response = await _register(test_client, confirm_password="password2")

        assert response.status_code == 400
        assert response.json()["message"] == "Password and confirm password do not match"
        assert (await test_client.get("/users")).json() == []

    @pytest.mark.asyncio
    async def test_malformed_json_is_a_validation_error(self, test_client):
        response = await test_client.post(
            "/users",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"


class TestReadUpdateDelete:

    @pytest.mark.asyncio
    async def test_get_unknown_user(self, test_client):
        response = await test_client.get("/users/00000000-0000-0000-0000-000000000000")

        assert response.status_code == 422
        assert response.json()["message"] == "User not found"

    @pytest.mark.asyncio
    async def test_get_malformed_id(self, test_client):
        response = await test_client.get("/users/not-a-uuid")

        assert response.status_code == 422
        assert response.json()["message"] == "User not found"

    @pytest.mark.asyncio
    async def test_update_keeping_same_email(self, test_client):
        await _register(test_client)
        user_id = await _user_id(test_client, "a@x.com")

        response = await test_client.put(
            f"/users/{user_id}", json={"email": "a@x.com", "full_name": "Ada"}
        )

        assert response.status_code == 200
        assert response.json() == {"message": "User updated successfully"}
        assert (await test_client.get(f"/users/{user_id}")).json()["full_name"] == "Ada"

    @pytest.mark.asyncio
    async def test_update_to_another_users_email(self, test_client):
        await _register(test_client)
        await _register(test_client, email="b@x.com", full_name="B")
        user_id = await _user_id(test_client, "b@x.com")

        response = await test_client.put(
            f"/users/{user_id}", json={"email": "a@x.com", "full_name": "B"}
        )

        assert response.status_code == 422
        assert response.json()["error"] == "EMAIL_ALREADY_TAKEN"
        assert (await test_client.get(f"/users/{user_id}")).json()["email"] == "b@x.com"

    @pytest.mark.asyncio
    async def test_update_unknown_user(self, test_client):
        response = await test_client.put(
            "/users/00000000-0000-0000-0000-000000000000",
            json={"email": "a@x.com", "full_name": "A"},
        )

        assert response.status_code == 422
        assert response.json()["message"] == "User not found"

    @pytest.mark.asyncio
    async def test_delete(self, test_client):
        await _register(test_client)
        user_id = await _user_id(test_client, "a@x.com")

        response = await test_client.delete(f"/users/{user_id}")

        assert response.status_code == 200
        assert response.json() == {"message": "User deleted successfully"}
        assert (await test_client.get("/users")).json() == []

    @pytest.mark.asyncio
    async def test_delete_unknown_user(self, test_client):
        response = await test_client.delete("/users/00000000-0000-0000-0000-000000000000")

        assert response.status_code == 422
        assert response.json()["message"] == "Failed to delete user"


class TestLogin:

    @pytest.mark.asyncio
    async def test_success(self, test_client):
        await _register(test_client)

        response = await test_client.post(
            "/users/login", json={"email": "a@x.com", "password": "password1"}
        )

        assert response.status_code == 200
        assert response.json() == {"message": "User successfully logged in"}

    @pytest.mark.asyncio
    async def test_wrong_password(self, test_client):
        await _register(test_client)

        response = await test_client.post(
            "/users/login", json={"email": "a@x.com", "password": "wrong-password"}
        )

        assert response.status_code == 403
        assert response.json()["error"] == "INVALID_PASSWORD"

    @pytest.mark.asyncio
    async def test_unknown_email(self, test_client):
        response = await test_client.post(
            "/users/login", json={"email": "nobody@x.com", "password": "password1"}
        )

        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_missing_password(self, test_client):
        response = await test_client.post("/users/login", json={"email": "a@x.com"})

        assert response.status_code == 400
        assert response.json()["message"] == "Password is required"


class TestChangePassword:

    @pytest.mark.asyncio
    async def test_not_implemented_by_default(self, test_client):
        await _register(test_client)
        user_id = await _user_id(test_client, "a@x.com")

        response = await test_client.post(
            f"/users/{user_id}/password",
            json={
                "old_password": "password1",
                "new_password": "password2",
                "confirm_new_password": "password2",
            },
        )

        assert response.status_code == 501
        assert response.json()["error"] == "NOT_IMPLEMENTED"

    @pytest.mark.asyncio
    async def test_enabled_flow(self, test_client, enable_password_change):
        await _register(test_client)
        user_id = await _user_id(test_client, "a@x.com")

        wrong = await test_client.post(
            f"/users/{user_id}/password",
            json={
                "old_password": "not-my-password",
                "new_password": "password2",
                "confirm_new_password": "password2",
            },
        )
        assert wrong.status_code == 403
        assert wrong.json()["message"] == "Old password is incorrect"

        changed = await test_client.post(
            f"/users/{user_id}/password",
            json={
                "old_password": "password1",
                "new_password": "password2",
                "confirm_new_password": "password2",
            },
        )
        assert changed.status_code == 200
        assert changed.json() == {"message": "Password changed successfully"}

        old_login = await test_client.post(
            "/users/login", json={"email": "a@x.com", "password": "password1"}
        )
        new_login = await test_client.post(
            "/users/login", json={"email": "a@x.com", "password": "password2"}
        )
        assert old_login.status_code == 403
        assert new_login.status_code == 200


class TestUniqueIndex:
    """The email index still decides when the uniqueness lookup misses."""

    @pytest.mark.asyncio
    async def test_create_and_update_races_are_unprocessable(self, test_client):
        await _register(test_client)
        await _register(test_client, email="b@x.com", full_name="B")
        user_id = await _user_id(test_client, "b@x.com")

        with patch.object(users_service, "email_exists", AsyncMock(return_value=False)):
            created = await _register(test_client)
            updated = await test_client.put(
                f"/users/{user_id}", json={"email": "a@x.com", "full_name": "B"}
            )

        assert created.status_code == 422
        assert created.json()["message"] == "Failed to create user"
        assert updated.status_code == 422
        assert updated.json()["message"] == "Failed to update user"

        users = (await test_client.get("/users")).json()
        assert sorted(user["email"] for user in users) == ["a@x.com", "b@x.com"]


class TestServerErrors:

    @pytest.mark.asyncio
    async def test_database_error_is_masked(self, test_client):
        failing = AsyncMock(side_effect=DatabaseError("connection refused", context={"host": "db"}))

        with patch("bookshelf.controllers.users_controller.users_service.get_users", failing):
            response = await test_client.get("/users")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "DATABASE_ERROR"
        assert "connection refused" not in body["message"]
        assert body["details"] is None

    @pytest.mark.asyncio
    async def test_error_envelope_carries_request_id(self, test_client):
        response = await test_client.get("/users/not-a-uuid")

        assert response.json()["request_id"] == response.headers["X-Request-ID"]
