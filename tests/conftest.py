"""Pytest configuration and shared fixtures."""

import os

# Settings are read at import time; give them test values first.
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import datetime, timedelta
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from core.database import build_engine, create_db_and_tables, get_session
from core.security import create_access_token, hash_password
from core.store import Store
from services.workspace import Workspace


class Seeder:
    """Writes fixture rows straight through the store, bypassing the services."""

    def __init__(self, store: Store):
        self.store = store

    def user(
        self,
        email: str,
        role: str,
        company_id: Optional[str] = None,
        password: str = "secret123",
        full_name: Optional[str] = None,
        status: str = "active",
    ) -> str:
        account = self.store.insert("auth_users", {"email": email, "password_hash": hash_password(password)})
        self.store.insert(
            "profiles",
            {
                "id": account["id"],
                "email": email,
                "full_name": full_name,
                "role": role,
                "company_id": company_id,
                "status": status,
            },
        )
        return account["id"]

    def company(self, name: str = "Acme", **fields) -> str:
        row = {
            "name": name,
            "email": f"{name.lower()}@example.com",
            "status": "active",
            "subscription_plan": "trial",
            "subscription_status": "trial",
            "subscription_end_date": datetime.utcnow() + timedelta(days=30),
        }
        row.update(fields)
        return self.store.insert("companies", row)["id"]

    def member(self, company_id: str, name: str = "Dev One", user_id: Optional[str] = None, **fields) -> str:
        row = {
            "name": name,
            "email": f"{name.lower().replace(' ', '.')}@example.com",
            "role": "Developer",
            "company_id": company_id,
            "user_id": user_id,
        }
        row.update(fields)
        return self.store.insert("team_members", row)["id"]

    def project(self, company_id: str, name: str = "Portal", client_id: Optional[str] = None, **fields) -> str:
        row = {"name": name, "company_id": company_id, "client_id": client_id}
        row.update(fields)
        return self.store.insert("projects", row)["id"]


def token_for(user_id: str, email: str = "") -> str:
    return create_access_token({"sub": user_id, "email": email})


@pytest.fixture
def engine():
    """A fresh in-memory database per test."""
    engine = build_engine("sqlite://")
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def store(session) -> Store:
    return Store(session)


@pytest.fixture
def seed(store) -> Seeder:
    return Seeder(store)


@pytest.fixture
def company_id(seed) -> str:
    return seed.company("Acme")


@pytest.fixture
def admin_id(seed) -> str:
    return seed.user("admin@example.com", "admin", full_name="Ada Admin")


@pytest.fixture
def owner_id(seed, company_id) -> str:
    return seed.user("owner@acme.com", "company", company_id=company_id, full_name="Olga Owner")


@pytest.fixture
def client_id(seed, company_id) -> str:
    return seed.user("client@buyer.com", "client", company_id=company_id, full_name="Carl Client")


@pytest.fixture
def workspace_for(store):
    """Build a signed-in workspace for any user id."""
    def build(user_id: Optional[str]) -> Workspace:
        return Workspace(store, token_for(user_id) if user_id else None)
    return build


@pytest.fixture
def admin_ws(workspace_for, admin_id) -> Workspace:
    return workspace_for(admin_id)


@pytest.fixture
def owner_ws(workspace_for, owner_id) -> Workspace:
    return workspace_for(owner_id)


@pytest.fixture
def client_ws(workspace_for, client_id) -> Workspace:
    return workspace_for(client_id)


@pytest.fixture
def api(engine):
    """TestClient whose requests share the test database."""
    from main import app

    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth():
    """Bearer header for a user id."""
    def header(user_id: str) -> dict:
        return {"Authorization": f"Bearer {token_for(user_id)}"}
    return header
