import uuid

import pytest

from shared.core.database import SessionLocal
from shared.core.tenancy import tenant_schema_exists, tenant_schema_name
from shared.models.tenants import Tenant
from shared.models.users import Users
from support_service.app.crud.tenant_admin import tenants_crud
from tests.helpers import bearer_for, unique


# ---------------- Schema naming ----------------
def test_tenant_schema_name_from_uuid():
    tenant_id = uuid.UUID("0b6e2a4c-1f3d-4c5e-8a9b-123456789abc")
    assert tenant_schema_name(tenant_id) == "tenant_0b6e2a4c_1f3d_4c5e_8a9b_123456789abc"
    assert tenant_schema_name(str(tenant_id)) == tenant_schema_name(tenant_id)


@pytest.mark.parametrize("bad", ["public", "x; DROP SCHEMA public", "", None])
def test_tenant_schema_name_rejects_non_uuid(bad):
    with pytest.raises(ValueError):
        tenant_schema_name(bad)


# ---------------- Tenants ----------------
def test_created_tenant_is_provisioned(tenant_a):
    tenant = tenant_a["tenant"]

    assert tenant["schema_name"] == tenant_schema_name(tenant["id"])
    assert tenant["is_active"] is True
    assert tenant_schema_exists(tenant["id"])
    assert tenant_a["admin"]["role"] == "tenant_admin"
    assert tenant_a["admin"]["temporary_password"] is None


def test_new_tenant_gets_default_hierarchy(client, tenant_a):
    response = client.get("/api/ticket-hierarchy/tree", headers=tenant_a["headers"])

    assert response.status_code == 200
    names = [c["name"] for c in response.json()["data"]["categories"]]
    for expected in ("Technical Support", "Customer Service", "Billing", "Administrative"):
        assert expected in names


def test_list_and_get_tenants(client, saas_headers, tenant_a, tenant_b):
    response = client.get("/api/tenant-admin/tenants", headers=saas_headers)

    assert response.status_code == 200
    ids = [t["id"] for t in response.json()["data"]["tenants"]]
    assert tenant_a["id"] in ids
    assert tenant_b["id"] in ids

    single = client.get(f"/api/tenant-admin/tenants/{tenant_a['id']}", headers=saas_headers)
    assert single.status_code == 200
    assert single.json()["data"]["user_count"] >= 2


def test_get_unknown_tenant(client, saas_headers):
    response = client.get(f"/api/tenant-admin/tenants/{uuid.uuid4()}", headers=saas_headers)
    assert response.status_code == 404


def test_duplicate_subdomain_is_rejected(client, saas_headers, tenant_a):
    response = client.post("/api/tenant-admin/tenants", headers=saas_headers, json={
        "name": "Copycat",
        "subdomain": tenant_a["subdomain"],
        "admin_email": f"{unique('copy')}@copycat.io",
        "admin_first_name": "Copy",
    })

    assert response.status_code == 400
    assert response.json()["status_code"] == "3003"


def test_invalid_subdomain_fails_validation(client, saas_headers):
    response = client.post("/api/tenant-admin/tenants", headers=saas_headers, json={
        "name": "Bad Subdomain",
        "subdomain": "Not A Subdomain!",
        "admin_email": "someone@bad.io",
        "admin_first_name": "Bad",
    })

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation failed"
    assert any(err["field"] == "subdomain" for err in body["data"])


def test_tenant_admin_cannot_manage_tenants(client, tenant_a):
    response = client.get("/api/tenant-admin/tenants", headers=tenant_a["headers"])
    assert response.status_code == 403


def test_deactivated_tenant_loses_access(client, saas_headers):
    subdomain = unique("gamma")
    created = client.post("/api/tenant-admin/tenants", headers=saas_headers, json={
        "name": "Gamma Support",
        "subdomain": subdomain,
        "admin_email": f"admin@{subdomain}.io",
        "admin_first_name": "Gus",
        "seed_default_hierarchy": False,
    })
    assert created.status_code == 200
    data = created.json()["data"]
    # no password given, one is generated
    assert data["admin_user"]["temporary_password"]

    headers = bearer_for(f"admin@{subdomain}.io")
    tree = client.get("/api/ticket-hierarchy/tree", headers=headers)
    assert tree.status_code == 200
    assert tree.json()["data"]["total_categories"] == 0

    deleted = client.delete(f"/api/tenant-admin/tenants/{data['tenant']['id']}", headers=saas_headers)
    assert deleted.status_code == 200
    assert deleted.json()["data"]["deleted"] is True

    denied = client.get("/api/tickets/", headers=headers)
    assert denied.status_code == 403

    again = client.delete(f"/api/tenant-admin/tenants/{data['tenant']['id']}", headers=saas_headers)
    assert again.status_code == 404


def test_rename_tenant(client, saas_headers, tenant_b):
    response = client.put(f"/api/tenant-admin/tenants/{tenant_b['id']}", headers=saas_headers,
                          json={"name": "Beta Support Renamed"})

    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Beta Support Renamed"


# ---------------- Isolation ----------------
def test_tickets_do_not_leak_between_tenants(client, tenant_a, tenant_b):
    created = client.post("/api/tickets/", headers=tenant_a["headers"], json={"title": "Alpha only printer jam"})
    assert created.status_code == 200
    ticket_id = created.json()["data"]["id"]

    other = client.get(f"/api/tickets/{ticket_id}", headers=tenant_b["headers"])
    assert other.status_code == 404

    listed = client.get("/api/tickets/", headers=tenant_b["headers"], params={"search": "Alpha only"})
    assert listed.json()["data"]["total"] == 0


def test_platform_admin_has_no_tenant_context(client, saas_headers):
    response = client.get("/api/tickets/", headers=saas_headers)

    assert response.status_code == 401
    assert response.json()["status_code"] == "2006"


def test_missing_token_is_401(client):
    response = client.get("/api/tickets/")

    assert response.status_code == 401
    assert response.json()["success"] is False


# ---------------- Settings ----------------
def test_settings_are_merged(client, tenant_b):
    headers = tenant_b["headers"]

    first = client.put("/api/tenant-admin/settings", headers=headers, json={"settings": {"theme": "dark"}})
    assert first.status_code == 200

    second = client.put("/api/tenant-admin/settings", headers=headers, json={"settings": {"sla_hours": 8}})
    assert second.status_code == 200

    settings = client.get("/api/tenant-admin/settings", headers=headers).json()["data"]["settings"]
    assert settings["theme"] == "dark"
    assert settings["sla_hours"] == 8


def test_agent_cannot_read_settings(client, tenant_a):
    response = client.get("/api/tenant-admin/settings", headers=tenant_a["agent_headers"])
    assert response.status_code == 403


# ---------------- Users ----------------
def test_list_users_of_own_tenant_only(client, tenant_a, tenant_b):
    response = client.get("/api/tenant-admin/users", headers=tenant_a["headers"])

    assert response.status_code == 200
    emails = [u["email"] for u in response.json()["data"]["users"]]
    assert tenant_a["admin_email"] in emails
    assert tenant_a["agent_email"] in emails
    assert tenant_b["admin_email"] not in emails


def test_filter_users_by_role(client, tenant_a):
    response = client.get("/api/tenant-admin/users", headers=tenant_a["headers"], params={"role": "agent"})

    users = response.json()["data"]["users"]
    assert users
    assert all(u["role"] == "agent" for u in users)


def test_create_user_with_generated_password(client, tenant_a):
    email = f"{unique('client')}@alpha.io"
    response = client.post("/api/tenant-admin/users", headers=tenant_a["headers"], json={
        "email": email,
        "first_name": "Cliff",
        "role": "customer",
    })

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == email
    assert data["temporary_password"]


def test_duplicate_user_email(client, tenant_a):
    response = client.post("/api/tenant-admin/users", headers=tenant_a["headers"], json={
        "email": tenant_a["agent_email"],
        "first_name": "Again",
    })
    assert response.status_code == 400


def test_cannot_create_platform_admin_in_tenant(client, tenant_a):
    response = client.post("/api/tenant-admin/users", headers=tenant_a["headers"], json={
        "email": f"{unique('sneaky')}@alpha.io",
        "first_name": "Sneaky",
        "role": "saas_admin",
    })
    assert response.status_code == 403


def test_cannot_deactivate_self(client, tenant_a):
    response = client.put(f"/api/tenant-admin/users/{tenant_a['admin']['id']}", headers=tenant_a["headers"],
                          json={"is_active": False})
    assert response.status_code == 400


def test_cannot_update_user_of_other_tenant(client, tenant_a, tenant_b):
    response = client.put(f"/api/tenant-admin/users/{tenant_b['agent']['id']}", headers=tenant_a["headers"],
                          json={"first_name": "Hijacked"})
    assert response.status_code == 404


def test_update_user(client, tenant_a):
    email = f"{unique('temp')}@alpha.io"
    created = client.post("/api/tenant-admin/users", headers=tenant_a["headers"], json={
        "email": email,
        "first_name": "Temp",
        "role": "agent",
    }).json()["data"]

    response = client.put(f"/api/tenant-admin/users/{created['id']}", headers=tenant_a["headers"],
                          json={"last_name": "Worker", "role": "tenant_admin", "is_active": False})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["full_name"] == "Temp Worker"
    assert data["role"] == "tenant_admin"
    assert data["is_active"] is False


# ---------------- Analytics ----------------
def test_analytics_counts_tickets(client, tenant_b):
    headers = tenant_b["headers"]
    before = client.get("/api/tenant-admin/analytics", headers=headers).json()["data"]

    client.post("/api/tickets/", headers=headers, json={"title": "Analytics probe", "priority": "high"})

    after = client.get("/api/tenant-admin/analytics", headers=headers).json()["data"]
    assert after["tickets_total"] == before["tickets_total"] + 1
    assert after["tickets_open"] == before["tickets_open"] + 1
    assert after["tickets_by_priority"]["high"] == before["tickets_by_priority"]["high"] + 1
    assert after["active_users"] >= 2
    assert set(after["tickets_by_status"]) == {"open", "in_progress", "pending", "resolved", "closed", "cancelled"}


# ---------------- Provisioning failure ----------------
def test_failed_provisioning_is_rolled_back(client, saas_headers, monkeypatch):
    seen = {}

    def broken_seed(db, tenant_id):
        seen["tenant_id"] = tenant_id
        raise RuntimeError("seed failed")

    monkeypatch.setattr(tenants_crud, "seed_default_hierarchy", broken_seed)

    subdomain = unique("delta")
    response = client.post("/api/tenant-admin/tenants", headers=saas_headers, json={
        "name": "Delta Support",
        "subdomain": subdomain,
        "admin_email": f"admin@{subdomain}.io",
        "admin_first_name": "Dee",
        "admin_password": "Delta-Admin-1",
    })

    assert response.status_code == 500
    assert response.json()["message"] == "Tenant provisioning failed"

    tenant_id = seen["tenant_id"]
    assert not tenant_schema_exists(tenant_id)
    with SessionLocal() as db:
        assert db.query(Tenant).filter(Tenant.id == tenant_id).first() is None
        assert db.query(Users).filter(Users.email == f"admin@{subdomain}.io").first() is None

    listed = client.get("/api/tenant-admin/tenants", headers=saas_headers, params={"search": subdomain})
    assert listed.json()["data"]["total"] == 0
