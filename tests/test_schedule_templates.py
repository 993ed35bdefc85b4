import uuid

import pytest

from tests.helpers import data_of, unique

TEMPLATES = "/api/timecard/schedule-templates/"


def _payload(**overrides):
    payload = {
        "name": unique("Office hours"),
        "category": "fixed",
        "schedule_type": "5x2",
        "configuration": {
            "work_days": [1, 2, 3, 4, 5],
            "start_time": "09:00",
            "end_time": "18:00",
            "break_duration": 60,
        },
    }
    payload.update(overrides)
    return payload


def test_create_template_computes_work_time(client, headers):
    template = data_of(client.post(TEMPLATES, headers=headers, json=_payload()))

    assert template["work_days_per_week"] == 5
    assert template["daily_work_minutes"] == 8 * 60
    assert template["is_active"] is True
    assert template["configuration"]["break_duration"] == 60


def test_work_days_are_sorted_and_deduplicated(client, headers):
    payload = _payload(configuration={"work_days": [5, 1, 3, 1], "start_time": "08:00", "end_time": "12:00",
                                      "break_duration": 0})

    template = data_of(client.post(TEMPLATES, headers=headers, json=payload))

    assert template["configuration"]["work_days"] == [1, 3, 5]
    assert template["work_days_per_week"] == 3
    assert template["daily_work_minutes"] == 240


def test_overnight_shift(client, headers):
    payload = _payload(category="shift", schedule_type="12x36", configuration={
        "work_days": [0, 1, 2, 3, 4, 5, 6], "start_time": "19:00", "end_time": "07:00", "break_duration": 60,
    })

    template = data_of(client.post(TEMPLATES, headers=headers, json=payload))
    assert template["daily_work_minutes"] == 11 * 60


@pytest.mark.parametrize("overrides", [
    {"name": "ab"},
    {"configuration": {"work_days": [], "start_time": "09:00", "end_time": "17:00"}},
    {"configuration": {"work_days": [1, 7], "start_time": "09:00", "end_time": "17:00"}},
    {"configuration": {"work_days": [1], "start_time": "9am", "end_time": "17:00"}},
    {"configuration": {"work_days": [1], "start_time": "09:00", "end_time": "24:00"}},
    {"configuration": {"work_days": [1], "start_time": "09:00", "end_time": "17:00", "break_duration": -5}},
    {"category": "rotating"},
    {"category": "weekly"},
])
def test_invalid_templates(client, headers, overrides):
    response = client.post(TEMPLATES, headers=headers, json=_payload(**overrides))

    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"


def test_rotating_template_with_cycle(client, headers):
    template = data_of(client.post(TEMPLATES, headers=headers,
                                   json=_payload(category="rotating", rotation_cycle_days=14)))
    assert template["category"] == "rotating"
    assert template["rotation_cycle_days"] == 14


def test_duplicate_name(client, headers):
    template = data_of(client.post(TEMPLATES, headers=headers, json=_payload()))

    response = client.post(TEMPLATES, headers=headers, json=_payload(name=template["name"].upper()))
    assert response.status_code == 400
    assert response.json()["status_code"] == "3003"


def test_update_template(client, headers):
    template = data_of(client.post(TEMPLATES, headers=headers, json=_payload()))

    updated = data_of(client.put(f"{TEMPLATES}{template['id']}", headers=headers, json={
        "description": "Summer hours",
        "configuration": {"work_days": [1, 2, 3, 4], "start_time": "08:00", "end_time": "16:30",
                          "break_duration": 30},
        "name": None,
    }))

    assert updated["name"] == template["name"]
    assert updated["description"] == "Summer hours"
    assert updated["work_days_per_week"] == 4
    assert updated["daily_work_minutes"] == 8 * 60


def test_update_to_rotating_needs_cycle(client, headers):
    template = data_of(client.post(TEMPLATES, headers=headers, json=_payload()))

    refused = client.put(f"{TEMPLATES}{template['id']}", headers=headers, json={"category": "rotating"})
    assert refused.status_code == 400

    unchanged = data_of(client.get(f"{TEMPLATES}{template['id']}", headers=headers))
    assert unchanged["category"] == "fixed"

    accepted = data_of(client.put(f"{TEMPLATES}{template['id']}", headers=headers,
                                  json={"category": "rotating", "rotation_cycle_days": 28}))
    assert accepted["category"] == "rotating"


def test_list_filters_and_delete(client, headers):
    flexible = data_of(client.post(TEMPLATES, headers=headers, json=_payload(category="flexible")))

    listed = data_of(client.get(TEMPLATES, headers=headers, params={"category": "flexible"}))
    assert flexible["id"] in [t["id"] for t in listed["templates"]]
    assert all(t["category"] == "flexible" for t in listed["templates"])

    assert client.delete(f"{TEMPLATES}{flexible['id']}", headers=headers).status_code == 200

    listed = data_of(client.get(TEMPLATES, headers=headers, params={"category": "flexible"}))
    assert flexible["id"] not in [t["id"] for t in listed["templates"]]
    assert client.delete(f"{TEMPLATES}{flexible['id']}", headers=headers).status_code == 404

    # the name is free again once the template is gone
    reused = client.post(TEMPLATES, headers=headers, json=_payload(name=flexible["name"]))
    assert reused.status_code == 200


def test_unknown_template(client, headers):
    response = client.get(f"{TEMPLATES}{uuid.uuid4()}", headers=headers)
    assert response.status_code == 404


def test_reactivating_template_rechecks_name(client, headers):
    old = data_of(client.post(TEMPLATES, headers=headers, json=_payload()))
    client.delete(f"{TEMPLATES}{old['id']}", headers=headers)
    data_of(client.post(TEMPLATES, headers=headers, json=_payload(name=old["name"])))

    response = client.put(f"{TEMPLATES}{old['id']}", headers=headers, json={"is_active": True})
    assert response.status_code == 400
    assert response.json()["status_code"] == "3003"

    listed = data_of(client.get(TEMPLATES, headers=headers, params={"search": old["name"]}))
    assert listed["total"] == 1

    revived = data_of(client.put(f"{TEMPLATES}{old['id']}", headers=headers,
                                 json={"is_active": True, "name": f"{old['name']} v1"}))
    assert revived["is_active"] is True
