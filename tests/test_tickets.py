import re
import uuid

from tests.helpers import data_of


def _create(client, headers, **fields):
    payload = {"title": "Printer on floor 3 is offline", **fields}
    return client.post("/api/tickets/", headers=headers, json=payload)


def _tree(client, headers):
    return data_of(client.get("/api/ticket-hierarchy/tree", headers=headers))


def _history(client, headers, ticket_id):
    return data_of(client.get(f"/api/tickets/{ticket_id}/history", headers=headers))["history"]


# ---------------- Create ----------------
def test_create_ticket_defaults(client, headers):
    ticket = data_of(_create(client, headers, description="Paper tray error"))

    assert re.fullmatch(r"TKT-\d{6}", ticket["ticket_number"])
    assert ticket["status"] == "open"
    assert ticket["priority"] == "medium"
    assert ticket["is_active"] is True
    assert ticket["resolution_date"] is None
    assert ticket["tags"] == []


def test_ticket_numbers_increase(client, headers):
    first = data_of(_create(client, headers))["ticket_number"]
    second = data_of(_create(client, headers))["ticket_number"]

    assert int(second.split("-")[1]) == int(first.split("-")[1]) + 1


def test_deleted_tickets_keep_their_number(client, headers):
    first = data_of(_create(client, headers))
    client.delete(f"/api/tickets/{first['id']}", headers=headers)

    second = data_of(_create(client, headers))
    assert second["ticket_number"] != first["ticket_number"]


def test_create_ticket_writes_created_history(client, headers):
    ticket = data_of(_create(client, headers, priority="high"))

    history = _history(client, headers, ticket["id"])
    assert len(history) == 1
    assert history[0]["action_type"] == "created"
    assert history[0]["context"] == {"status": "open", "priority": "high"}
    assert history[0]["performed_by_name"]


def test_create_ticket_with_hierarchy(client, headers):
    tree = _tree(client, headers)
    category = next(c for c in tree["categories"] if c["name"] == "Technical Support")
    subcategory = category["subcategories"][0]

    ticket = data_of(_create(client, headers, category_id=category["id"], subcategory_id=subcategory["id"]))

    assert ticket["category_name"] == "Technical Support"
    assert ticket["subcategory_name"] == subcategory["name"]


def test_subcategory_must_belong_to_category(client, headers):
    tree = _tree(client, headers)
    technical = next(c for c in tree["categories"] if c["name"] == "Technical Support")
    billing = next(c for c in tree["categories"] if c["name"] == "Billing")

    response = _create(client, headers, category_id=billing["id"],
                       subcategory_id=technical["subcategories"][0]["id"])

    assert response.status_code == 400
    assert response.json()["status_code"] == "3004"


def test_subcategory_without_category(client, headers):
    tree = _tree(client, headers)
    technical = next(c for c in tree["categories"] if c["name"] == "Technical Support")

    response = _create(client, headers, subcategory_id=technical["subcategories"][0]["id"])
    assert response.status_code == 400


def test_unknown_category(client, headers):
    response = _create(client, headers, category_id=str(uuid.uuid4()))
    assert response.status_code == 400


def test_title_too_short(client, headers):
    response = _create(client, headers, title="ab")

    assert response.status_code == 400
    assert response.json()["data"][0]["field"] == "title"


def test_assignee_from_other_tenant_is_rejected(client, headers, tenant_b):
    response = _create(client, headers, assigned_to_id=tenant_b["agent"]["id"])
    assert response.status_code == 400


def test_create_assigned_ticket(client, headers, tenant_a):
    ticket = data_of(_create(client, headers, assigned_to_id=tenant_a["agent"]["id"]))

    assert ticket["assigned_to_id"] == tenant_a["agent"]["id"]
    assert ticket["assigned_to_name"] == "Grace Agent"


# ---------------- Read ----------------
def test_get_unknown_ticket(client, headers):
    response = client.get(f"/api/tickets/{uuid.uuid4()}", headers=headers)

    assert response.status_code == 404
    assert response.json()["message"] == "Ticket not found"


def test_list_filters_by_status_and_search(client, headers):
    marker = uuid.uuid4().hex[:10]
    open_ticket = data_of(_create(client, headers, title=f"Search {marker} open"))
    pending = data_of(_create(client, headers, title=f"Search {marker} pending"))
    client.post(f"/api/tickets/{pending['id']}/status", headers=headers, json={"status": "pending"})

    everything = data_of(client.get("/api/tickets/", headers=headers, params={"search": marker}))
    assert everything["total"] == 2

    only_pending = data_of(client.get("/api/tickets/", headers=headers,
                                      params={"search": marker, "status": "pending"}))
    assert [t["id"] for t in only_pending["tickets"]] == [pending["id"]]

    all_status = data_of(client.get("/api/tickets/", headers=headers, params={"search": marker, "status": "all"}))
    assert {t["id"] for t in all_status["tickets"]} == {open_ticket["id"], pending["id"]}


def test_list_with_unknown_status(client, headers):
    response = client.get("/api/tickets/", headers=headers, params={"status": "sleeping"})
    assert response.status_code == 400


def test_urgent_tickets_only_open_high_priority(client, headers):
    critical = data_of(_create(client, headers, priority="critical"))
    low = data_of(_create(client, headers, priority="low"))
    closed = data_of(_create(client, headers, priority="high", status="closed"))

    urgent_ids = {t["id"] for t in data_of(client.get("/api/tickets/urgent", headers=headers))["tickets"]}

    assert critical["id"] in urgent_ids
    assert low["id"] not in urgent_ids
    assert closed["id"] not in urgent_ids


def test_lookups(client, headers):
    statuses = data_of(client.get("/api/tickets/status-lookup", headers=headers))
    priorities = data_of(client.get("/api/tickets/priority-lookup", headers=headers))

    assert {s["id"] for s in statuses} == {"open", "in_progress", "pending", "resolved", "closed", "cancelled"}
    assert {p["id"] for p in priorities} == {"low", "medium", "high", "critical"}


# ---------------- Update ----------------
def test_update_records_one_row_per_changed_field(client, headers):
    ticket = data_of(_create(client, headers, description="old text"))

    updated = data_of(client.put(f"/api/tickets/{ticket['id']}", headers=headers, json={
        "title": ticket["title"],
        "description": "new text",
        "priority": "high",
    }))
    assert updated["priority"] == "high"

    changes = [h for h in _history(client, headers, ticket["id"]) if h["action_type"] == "field_updated"]
    assert {h["field_name"] for h in changes} == {"description", "priority"}

    priority = next(h for h in changes if h["field_name"] == "priority")
    assert priority["old_value"] == "medium"
    assert priority["new_value"] == "high"
    assert priority["description"] == "Priority changed from 'medium' to 'high'"


def test_update_without_changes_adds_no_history(client, headers):
    ticket = data_of(_create(client, headers))

    response = client.put(f"/api/tickets/{ticket['id']}", headers=headers,
                          json={"title": ticket["title"], "description": ""})

    assert response.status_code == 200
    assert len(_history(client, headers, ticket["id"])) == 1


def test_update_cannot_clear_title(client, headers):
    ticket = data_of(_create(client, headers))

    response = client.put(f"/api/tickets/{ticket['id']}", headers=headers, json={"title": None})
    assert response.status_code == 400


def test_update_status_to_resolved_sets_resolution_date(client, headers):
    ticket = data_of(_create(client, headers))

    resolved = data_of(client.put(f"/api/tickets/{ticket['id']}", headers=headers, json={"status": "resolved"}))
    assert resolved["resolution_date"] is not None

    reopened = data_of(client.put(f"/api/tickets/{ticket['id']}", headers=headers, json={"status": "open"}))
    assert reopened["resolution_date"] is None


# ---------------- Status ----------------
def test_change_status(client, headers):
    ticket = data_of(_create(client, headers))

    closed = data_of(client.post(f"/api/tickets/{ticket['id']}/status", headers=headers,
                                 json={"status": "closed", "comment": "Fixed on site"}))
    assert closed["status"] == "closed"
    assert closed["resolution_date"] is not None

    entry = _history(client, headers, ticket["id"])[0]
    assert entry["action_type"] == "status_changed"
    assert entry["old_value"] == "open"
    assert entry["new_value"] == "closed"
    assert entry["context"] == {"comment": "Fixed on site"}


def test_change_status_to_same_value(client, headers):
    ticket = data_of(_create(client, headers))

    response = client.post(f"/api/tickets/{ticket['id']}/status", headers=headers, json={"status": "open"})
    assert response.status_code == 400


# ---------------- Assign ----------------
def test_assign_and_unassign(client, headers, tenant_a):
    ticket = data_of(_create(client, headers))
    agent_id = tenant_a["agent"]["id"]

    assigned = data_of(client.post(f"/api/tickets/{ticket['id']}/assign", headers=headers,
                                   json={"assigned_to_id": agent_id}))
    assert assigned["assigned_to_id"] == agent_id
    assert assigned["assigned_to_name"] == "Grace Agent"

    again = client.post(f"/api/tickets/{ticket['id']}/assign", headers=headers, json={"assigned_to_id": agent_id})
    assert again.status_code == 400

    unassigned = data_of(client.post(f"/api/tickets/{ticket['id']}/assign", headers=headers,
                                     json={"assigned_to_id": None}))
    assert unassigned["assigned_to_id"] is None

    assignments = [h for h in _history(client, headers, ticket["id"]) if h["action_type"] == "assigned"]
    assert len(assignments) == 2
    descriptions = {h["description"] for h in assignments}
    assert descriptions == {"Ticket assigned to Grace Agent", "Ticket unassigned"}


def test_assign_to_user_of_other_tenant(client, headers, tenant_b):
    ticket = data_of(_create(client, headers))

    response = client.post(f"/api/tickets/{ticket['id']}/assign", headers=headers,
                           json={"assigned_to_id": tenant_b["agent"]["id"]})
    assert response.status_code == 400


def test_agent_can_work_tickets(client, tenant_a):
    agent_headers = tenant_a["agent_headers"]
    ticket = data_of(_create(client, agent_headers))

    history = _history(client, agent_headers, ticket["id"])
    assert history[0]["performed_by"] == tenant_a["agent"]["id"]


# ---------------- Delete ----------------
def test_soft_delete_keeps_history(client, headers):
    ticket = data_of(_create(client, headers))

    deleted = data_of(client.delete(f"/api/tickets/{ticket['id']}", headers=headers))
    assert deleted == {"id": ticket["id"], "deleted": True}

    assert client.get(f"/api/tickets/{ticket['id']}", headers=headers).status_code == 404
    assert client.delete(f"/api/tickets/{ticket['id']}", headers=headers).status_code == 404

    history = _history(client, headers, ticket["id"])
    assert [h["action_type"] for h in history][0] == "deleted"
    assert len(history) == 2


def test_history_of_unknown_ticket(client, headers):
    response = client.get(f"/api/tickets/{uuid.uuid4()}/history", headers=headers)
    assert response.status_code == 404


def test_history_records_client_details(client, headers):
    ticket = data_of(client.post("/api/tickets/", headers={**headers, "User-Agent": "pytest-agent",
                                                           "X-Forwarded-For": "203.0.113.7, 10.0.0.1"},
                                 json={"title": "Audit trail check"}))

    entry = _history(client, headers, ticket["id"])[0]
    assert entry["ip_address"] == "203.0.113.7"
    assert entry["user_agent"] == "pytest-agent"
