"""Tests for broker registration and login"""
import pytest
from datetime import timedelta

from app.exceptions import AuthenticationError
from app.services.auth import AuthService, get_password_hash, verify_password


class TestPasswordHashing:
    """Password hash helpers"""

    def test_hash_and_verify(self):
        hashed = get_password_hash("Password123")
        assert hashed != "Password123"
        assert verify_password("Password123", hashed)
        assert not verify_password("password123", hashed)


class TestTokens:
    """Access token creation and decoding"""

    def test_round_trip(self, broker):
        payload = AuthService.decode_token(AuthService.create_access_token(broker))
        assert payload["sub"] == str(broker.id)
        assert payload["email"] == broker.email
        assert payload["type"] == "access"

    def test_expired_token_rejected(self, broker):
        token = AuthService.create_access_token(broker, expires_delta=timedelta(minutes=-1))
        with pytest.raises(AuthenticationError):
            AuthService.decode_token(token)

    def test_garbage_token_rejected(self):
        with pytest.raises(AuthenticationError):
            AuthService.decode_token("not-a-token")


class TestAuthEndpoints:
    """Register, login and profile endpoints"""

    @pytest.mark.asyncio
    async def test_register(self, client):
        response = await client.post("/api/auth/register", json={
            "name": "Priya Desai", "email": "priya@example.com", "password": "Password123"
        })

        assert response.status_code == 201
        data = response.json()
        assert data["broker"]["email"] == "priya@example.com"
        assert data["token_type"] == "bearer"

        me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
        assert me.status_code == 200
        assert me.json()["name"] == "Priya Desai"

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, client, broker):
        response = await client.post("/api/auth/register", json={
            "name": "Someone Else", "email": broker.email, "password": "Password123"
        })

        assert response.status_code == 409
        assert response.json()["error"] == "CONFLICT"

    @pytest.mark.asyncio
    async def test_register_short_password(self, client):
        response = await client.post("/api/auth/register", json={
            "name": "Priya Desai", "email": "priya@example.com", "password": "short"
        })

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_login(self, client, broker):
        response = await client.post("/api/auth/login", json={
            "email": broker.email, "password": "Password123"
        })

        assert response.status_code == 200
        assert response.json()["broker"]["id"] == broker.id

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client, broker):
        response = await client.post("/api/auth/login", json={
            "email": broker.email, "password": "WrongPassword"
        })

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password."

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, client):
        response = await client.post("/api/auth/login", json={
            "email": "nobody@example.com", "password": "Password123"
        })

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me_with_invalid_token(self, client):
        response = await client.get("/api/auth/me", headers={"Authorization": "Bearer invalid"})
        assert response.status_code == 401
