"""
Integration tests for Authentication API endpoints.
"""
from devfolio.core.security import create_access_token


class TestRegisterAndLogin:
    """Test cases for account creation and login."""

    async def test_register(self, unauth_client):
        response = await unauth_client.post(
            "/api/auth/register",
            json={"username": "newbie", "email": "Newbie@Example.com", "password": "hunter22"}
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["token"]
        assert data["user"]["username"] == "newbie"
        assert data["user"]["email"] == "newbie@example.com"
        assert data["user"]["message_permission"] == "everyone"
        assert "password_hash" not in data["user"]

        me = await unauth_client.get(
            "/api/auth/me",
            headers={"Authorization": f"Bearer {data['token']}"}
        )
        assert me.status_code == 200
        assert me.json()["data"]["username"] == "newbie"

    async def test_register_duplicate_email(self, unauth_client, test_user):
        response = await unauth_client.post(
            "/api/auth/register",
            json={"username": "another", "email": "alice@example.com", "password": "hunter22"}
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Email already registered"}

    async def test_register_short_password(self, unauth_client):
        response = await unauth_client.post(
            "/api/auth/register",
            json={"username": "shorty", "email": "shorty@example.com", "password": "123"}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"][0]["field"] == "body.password"

    async def test_login(self, unauth_client, test_user, test_password):
        response = await unauth_client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": test_password}
        )

        assert response.status_code == 200
        assert response.json()["data"]["user"]["id"] == test_user.id

    async def test_login_wrong_password(self, unauth_client, test_user):
        response = await unauth_client.post(
            "/api/auth/login",
            json={"email": "alice", "password": "wrong-password"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    async def test_login_is_rate_limited(self, unauth_client, test_user):
        for _ in range(10):
            await unauth_client.post(
                "/api/auth/login",
                json={"email": "alice", "password": "wrong-password"}
            )

        response = await unauth_client.post(
            "/api/auth/login",
            json={"email": "alice", "password": "wrong-password"}
        )

        assert response.status_code == 429
        assert response.json()["success"] is False


class TestAccountSettings:
    """Test cases for the caller's own account."""

    async def test_me(self, client, test_user):
        response = await client.get("/api/auth/me")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == test_user.id
        assert data["email"] == "alice@example.com"
        assert data["followers_count"] == 0
        assert data["created_at"].endswith("Z")

    async def test_me_with_unknown_subject(self, unauth_client):
        token = create_access_token("00000000-0000-0000-0000-000000000000")

        response = await unauth_client.get(
            "/api/auth/me",
            headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Not authorized, user not found"

    async def test_update_profile(self, client):
        response = await client.put(
            "/api/auth/profile",
            json={"bio": "Full-stack tinkerer", "github": "alice-dev"}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["bio"] == "Full-stack tinkerer"
        assert data["github"] == "alice-dev"
        assert data["username"] == "alice"

    async def test_update_profile_taken_username(self, client, test_user_2):
        response = await client.put("/api/auth/profile", json={"username": "bob"})

        assert response.status_code == 400
        assert response.json()["message"] == "Username already taken"

    async def test_change_password(self, client, test_password):
        response = await client.put(
            "/api/auth/password",
            json={"current_password": test_password, "new_password": "brand-new-pass"}
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Password updated successfully"}

        login = await client.post(
            "/api/auth/login",
            json={"email": "alice", "password": "brand-new-pass"}
        )
        assert login.status_code == 200

    async def test_change_password_wrong_current(self, client):
        response = await client.put(
            "/api/auth/password",
            json={"current_password": "nope", "new_password": "brand-new-pass"}
        )

        assert response.status_code == 401

    async def test_update_privacy(self, client):
        response = await client.put(
            "/api/auth/privacy",
            json={"message_permission": "followers", "show_email": True}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["message_permission"] == "followers"
        assert data["show_email"] is True
        assert data["allow_messages"] is True

    async def test_update_privacy_rejects_unknown_level(self, client):
        response = await client.put(
            "/api/auth/privacy",
            json={"message_permission": "friends-of-friends"}
        )

        assert response.status_code == 400
