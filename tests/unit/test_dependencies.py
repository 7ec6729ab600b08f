"""
Unit tests for authentication dependencies.
Tests JWT token creation and verification, user scoping and admin checks.
"""
import pytest
from datetime import timedelta
from unittest.mock import Mock
from fastapi import HTTPException
from jose import jwt

from healthdesk.dependencies import (
    ADMIN_COLLECTION,
    ALGORITHM,
    SECRET_KEY,
    create_access_token,
    is_admin,
    require_admin,
    verify_token,
    verify_user_access,
)


class TestCreateAccessToken:
    """Tests for JWT token creation."""

    def test_create_token_with_data(self):
        data = {"sub": "user123", "email": "test@example.com"}
        token = create_access_token(data)

        decoded = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        assert decoded["sub"] == "user123"
        assert decoded["email"] == "test@example.com"
        assert "exp" in decoded

    def test_create_token_with_custom_expiry(self):
        token = create_access_token({"sub": "user123"}, expires_delta=timedelta(minutes=60))

        decoded = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        assert decoded["sub"] == "user123"


class TestVerifyToken:
    """Tests for JWT token verification."""

    def test_verify_valid_token(self):
        token = create_access_token({"sub": "user123", "email": "test@example.com"})

        result = verify_token(token)

        assert result["sub"] == "user123"

    def test_verify_invalid_token(self):
        with pytest.raises(HTTPException) as exc:
            verify_token("invalid.token.here")

        assert exc.value.status_code == 401
        assert "Invalid authentication credentials" in exc.value.detail

    def test_verify_expired_token(self):
        token = create_access_token({"sub": "user123"}, expires_delta=timedelta(minutes=-1))

        with pytest.raises(HTTPException) as exc:
            verify_token(token)

        assert exc.value.status_code == 401


class TestVerifyUserAccess:
    @pytest.mark.asyncio
    async def test_own_data(self):
        assert await verify_user_access("user123", {"user_id": "user123"}) == "user123"

    @pytest.mark.asyncio
    async def test_other_users_data(self):
        with pytest.raises(HTTPException) as exc:
            await verify_user_access("user456", {"user_id": "user123"})

        assert exc.value.status_code == 403


class TestAdminChecks:
    """Admin membership comes from the admin_users collection."""

    def test_is_admin(self, mock_db):
        mock_db.collection.return_value.document.return_value.get.return_value = Mock(exists=True)

        assert is_admin(mock_db, "admin1") is True
        mock_db.collection.assert_called_with(ADMIN_COLLECTION)
        mock_db.collection.return_value.document.assert_called_with("admin1")

    @pytest.mark.asyncio
    async def test_require_admin_allows_members(self, mock_db):
        mock_db.collection.return_value.document.return_value.get.return_value = Mock(exists=True)

        user = await require_admin({"user_id": "admin1", "email": "a@example.com"}, mock_db)

        assert user["user_id"] == "admin1"

    @pytest.mark.asyncio
    async def test_require_admin_rejects_others(self, mock_db):
        mock_db.collection.return_value.document.return_value.get.return_value = Mock(exists=False)

        with pytest.raises(HTTPException) as exc:
            await require_admin({"user_id": "user123", "email": "u@example.com"}, mock_db)

        assert exc.value.status_code == 403
