"""
Integration tests for authentication endpoints.
Tests the full request/response cycle with database.
"""


class TestRegister:
    """Tests for POST /auth/register endpoint."""

    def test_register_success(self, client):
        response = client.post("/auth/register", json={
            "full_name": "New User",
            "email": "newuser@example.com",
            "password": "securepassword123"
        })

        assert response.status_code == 201
        data = response.json()
        assert "access_token" in data
        assert data["token_type"] == "Bearer"
        assert data["expires_in"] > 0

    def test_register_duplicate_email(self, client):
        payload = {"full_name": "First User", "email": "duplicate@example.com", "password": "password123"}
        client.post("/auth/register", json=payload)

        response = client.post("/auth/register", json={**payload, "full_name": "Second User"})

        assert response.status_code == 400
        assert "already registered" in response.json()["detail"]

    def test_register_short_password(self, client):
        response = client.post("/auth/register", json={
            "full_name": "Test User",
            "email": "test@example.com",
            "password": "short"
        })

        assert response.status_code == 422


class TestLogin:
    """Tests for POST /auth/login endpoint."""

    def test_login_success(self, client, registered_user):
        response = client.post("/auth/login", json={
            "email": registered_user["email"],
            "password": registered_user["password"]
        })

        assert response.status_code == 200
        assert "access_token" in response.json()

    def test_login_wrong_password(self, client, registered_user):
        response = client.post("/auth/login", json={
            "email": registered_user["email"],
            "password": "wrongpassword"
        })

        assert response.status_code == 401


class TestMe:
    def test_profile(self, client, registered_user):
        response = client.get("/auth/me", headers=registered_user["headers"])

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == registered_user["user_id"]
        assert data["saved_diseases"] == []
        assert "password_hash" not in data

    def test_saved_diseases_round_trip(self, client, registered_user):
        user_id = registered_user["user_id"]

        client.put(
            f"/users/{user_id}/saved-diseases",
            json={"diseases": ["Asthma", "Diabetes"]},
            headers=registered_user["headers"],
        )
        response = client.get(f"/users/{user_id}/saved-diseases", headers=registered_user["headers"])

        assert response.json() == {"diseases": ["Asthma", "Diabetes"]}


class TestAdminLogin:
    def test_non_admin_is_forbidden(self, client, registered_user):
        response = client.post("/admin/login", json={
            "email": registered_user["email"],
            "password": registered_user["password"]
        })

        assert response.status_code == 403

    def test_admin_login(self, client, admin_user):
        response = client.post("/admin/login", json={
            "email": admin_user["email"],
            "password": admin_user["password"]
        })

        assert response.status_code == 200
