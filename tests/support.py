"""Shared builders for tests: settings on in-memory SQLite and a ready app/client."""

import uuid

from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import SecretStr

from app.core.config import Settings
from app.main import create_app
from app.models import RoleName
from app.services.seed import initialize_stores

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"
STRONG_PASSWORD = "P@ssw0rd1"


def make_settings(**overrides: object) -> Settings:
    """Settings backed by two separate in-memory SQLite stores, fast bcrypt, no default accounts."""
    values: dict[str, object] = {
        "APP_ENV": "dev",
        "DATABASE_URL": "sqlite://",
        "IDENTITY_DATABASE_URL": "sqlite://",
        "JWT_SECRET": SecretStr(TEST_SECRET),
        "JWT_ISSUER": "todo-api-tests",
        "JWT_AUDIENCE": "todo-api-tests-clients",
        "BCRYPT_ROUNDS": 4,
        "SEED_DEFAULT_USERS": False,
    }
    values.update(overrides)
    return Settings(**values)


def make_app(**overrides: object) -> FastAPI:
    """App with tables created and roles seeded (what the lifespan does at startup)."""
    app = create_app(make_settings(**overrides))
    assert initialize_stores(app.state.context)
    return app


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def token_for(app: FastAPI, *roles: RoleName, username: str = "tester") -> str:
    """Mint a token directly, bypassing registration."""
    return app.state.context.token_service.issue(
        uuid.uuid4(), username, [r.value for r in roles]
    )


def user_headers(app: FastAPI) -> dict[str, str]:
    return bearer(token_for(app, RoleName.USER))


def register(client: TestClient, email: str, username: str, password: str = STRONG_PASSWORD):
    return client.post(
        "/users/register",
        json={"email": email, "username": username, "password": password},
    )
