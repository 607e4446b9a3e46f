# tests/conftest.py

import os
import tempfile
from dataclasses import dataclass

# must be set before settings is imported
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="hrdesk-uploads-"))
os.environ.setdefault("PAYOUT_MODE", "mock")

import pytest
from fastapi.testclient import TestClient

from app.payouts.batches import registry
from app.payouts.model import EmployeeDirectoryEntry
from app.providers.mock import MockPayoutGateway
from deps.payouts import get_sender
from main import create_app
from services import metrics
from settings import settings
from storage import reset_storage


@dataclass
class AuthedAdmin:
    email: str
    password: str
    token: str
    admin_id: str


# ---------------------------
# State reset
# ---------------------------

@pytest.fixture(autouse=True)
def store():
    s = reset_storage()
    registry.clear()
    metrics.reset()
    yield s
    registry.clear()


@pytest.fixture()
def sender() -> MockPayoutGateway:
    return MockPayoutGateway(succeed=True)


# ---------------------------
# Client + Auth Helpers
# ---------------------------

@pytest.fixture()
def app(sender):
    app = create_app()
    app.dependency_overrides[get_sender] = lambda: sender
    return app


@pytest.fixture()
def client(app) -> TestClient:
    # Needed so tests can assert 500s instead of pytest re-raising server exceptions
    return TestClient(app, raise_server_exceptions=False)


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def login(client: TestClient, email: str, password: str) -> AuthedAdmin:
    r = client.post("/api/v1/admin/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, f"Login failed for {email}: {r.status_code} {r.text}"
    data = r.json()
    return AuthedAdmin(
        email=email,
        password=password,
        token=data["access_token"],
        admin_id=data["admin"]["id"],
    )


@pytest.fixture()
def admin(client: TestClient) -> AuthedAdmin:
    return login(client, settings.DEFAULT_ADMIN_EMAIL, settings.DEFAULT_ADMIN_PASSWORD)


@pytest.fixture()
def headers(admin: AuthedAdmin) -> dict:
    return auth_headers(admin.token)


# ---------------------------
# Directory helpers
# ---------------------------

def entry(name: str, phone: str = "+237677000001") -> EmployeeDirectoryEntry:
    return EmployeeDirectoryEntry(
        phone=phone,
        email=f"{name.lower().replace(' ', '.')}@company.com",
        display_name=name,
    )


def add_employee(store, name: str = "Alice Ngono", phone: str = "+237677000001", **overrides):
    fields = dict(
        name=name,
        email=f"{name.lower().replace(' ', '.')}@company.com",
        phone=phone,
        position="Accountant",
        department="Finance",
        salary=250000,
    )
    fields.update(overrides)
    return store.create_employee(**fields)
