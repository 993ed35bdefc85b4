import os

# must be set before any application module reads the settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["LOG_DIR"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from auth_service.app.main import app as auth_app
from shared.core.database import SessionLocal
from shared.data.saas_admin_insert import ensure_saas_admin
from support_service.app.main import app as support_app
from tests.helpers import bearer_for, unique

SAAS_ADMIN_EMAIL = "root@supportdesk.io"
SAAS_ADMIN_PASSWORD = "Sup3r-Secret!"
TENANT_ADMIN_PASSWORD = "Tenant-Admin-1"
AGENT_PASSWORD = "Agent-Pass-1"


@pytest.fixture(scope="session")
def client():
    return TestClient(support_app)


@pytest.fixture(scope="session")
def auth_client():
    return TestClient(auth_app)


@pytest.fixture(scope="session")
def saas_admin():
    db = SessionLocal()
    try:
        admin = ensure_saas_admin(db, SAAS_ADMIN_EMAIL, SAAS_ADMIN_PASSWORD)
        return {"id": str(admin.id), "email": admin.email}
    finally:
        db.close()


@pytest.fixture(scope="session")
def saas_headers(saas_admin):
    return bearer_for(saas_admin["email"])


def _create_tenant(client, saas_headers, label: str) -> dict:
    subdomain = unique(label)
    admin_email = f"admin@{subdomain}.io"
    response = client.post("/api/tenant-admin/tenants", headers=saas_headers, json={
        "name": f"{label.title()} Support",
        "subdomain": subdomain,
        "admin_email": admin_email,
        "admin_first_name": "Ada",
        "admin_last_name": label.title(),
        "admin_password": TENANT_ADMIN_PASSWORD,
    })
    assert response.status_code == 200, response.text
    data = response.json()["data"]

    headers = bearer_for(admin_email)
    agent_email = f"agent@{subdomain}.io"
    agent = client.post("/api/tenant-admin/users", headers=headers, json={
        "email": agent_email,
        "first_name": "Grace",
        "last_name": "Agent",
        "role": "agent",
        "password": AGENT_PASSWORD,
    })
    assert agent.status_code == 200, agent.text

    return {
        "id": data["tenant"]["id"],
        "subdomain": subdomain,
        "tenant": data["tenant"],
        "admin": data["admin_user"],
        "admin_email": admin_email,
        "headers": headers,
        "agent": agent.json()["data"],
        "agent_email": agent_email,
        "agent_headers": bearer_for(agent_email),
        "admin_password": TENANT_ADMIN_PASSWORD,
        "agent_password": AGENT_PASSWORD,
    }


@pytest.fixture(scope="session")
def tenant_a(client, saas_headers):
    return _create_tenant(client, saas_headers, "alpha")


@pytest.fixture(scope="session")
def tenant_b(client, saas_headers):
    return _create_tenant(client, saas_headers, "beta")


@pytest.fixture
def headers(tenant_a):
    return tenant_a["headers"]
