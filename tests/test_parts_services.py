import uuid

import pytest

from shared.core.config import settings
from tests.helpers import data_of, unique

BASE = "/api/parts-services"


def _item(client, headers, **fields):
    payload = {
        "name": "Copper pipe 15mm",
        "code": unique("MAT"),
        "type": "material",
        "measurement_unit": "M",
        "cost_price": "2.00",
        "sale_price": "3.50",
        **fields,
    }
    return data_of(client.post(f"{BASE}/items", headers=headers, json=payload))


def _warehouse(client, headers, **fields):
    payload = {"name": "Main depot", "code": unique("WH"), **fields}
    return data_of(client.post(f"{BASE}/warehouses", headers=headers, json=payload))


def _move(client, headers, **payload):
    return client.post(f"{BASE}/stock/movements", headers=headers, json=payload)


def _level(result, warehouse_id):
    return next(s for s in result["stock_levels"] if s["warehouse_id"] == warehouse_id)


# ---------------- Items ----------------
def test_create_and_get_item(client, headers):
    item = _item(client, headers, group_name="Plumbing")

    assert item["type"] == "material"
    assert item["status"] == "active"
    assert item["active"] is True
    assert item["total_stock"] == 0

    fetched = data_of(client.get(f"{BASE}/items/{item['id']}", headers=headers))
    assert fetched["code"] == item["code"]
    assert fetched["group_name"] == "Plumbing"


def test_service_item_has_no_stock_total(client, headers):
    service = _item(client, headers, type="service", name="Boiler inspection", measurement_unit="H")
    assert service["total_stock"] is None


def test_duplicate_item_code_is_case_insensitive(client, headers):
    item = _item(client, headers)

    response = client.post(f"{BASE}/items", headers=headers, json={
        "name": "Other", "code": item["code"].lower(), "type": "material",
    })
    assert response.status_code == 400
    assert response.json()["status_code"] == "3003"


def test_maximum_below_minimum_is_rejected(client, headers):
    response = client.post(f"{BASE}/items", headers=headers, json={
        "name": "Valve", "code": unique("VAL"), "type": "material",
        "minimum_stock": "10", "maximum_stock": "5",
    })
    assert response.status_code == 400

    item = _item(client, headers, minimum_stock="10")
    update = client.put(f"{BASE}/items/{item['id']}", headers=headers, json={"maximum_stock": "5"})
    assert update.status_code == 400


def test_update_item_ignores_nulls_for_required_fields(client, headers):
    item = _item(client, headers)

    updated = data_of(client.put(f"{BASE}/items/{item['id']}", headers=headers,
                                 json={"name": None, "sale_price": "4.25", "status": "under_review"}))

    assert updated["name"] == item["name"]
    assert updated["sale_price"] == 4.25
    assert updated["status"] == "under_review"


def test_list_items_filters(client, headers):
    marker = unique("Filter")
    material = _item(client, headers, name=f"{marker} material")
    service = _item(client, headers, name=f"{marker} service", type="service")

    materials = data_of(client.get(f"{BASE}/items", headers=headers, params={"search": marker, "type": "material"}))
    assert [i["id"] for i in materials["items"]] == [material["id"]]

    both = data_of(client.get(f"{BASE}/items", headers=headers, params={"search": marker}))
    assert both["total"] == 2

    lookup = data_of(client.get(f"{BASE}/items/lookup", headers=headers, params={"type": "service"}))
    assert service["id"] in [row["id"] for row in lookup]
    assert material["id"] not in [row["id"] for row in lookup]


def test_list_items_with_unknown_type(client, headers):
    response = client.get(f"{BASE}/items", headers=headers, params={"type": "gadget"})
    assert response.status_code == 400


def test_delete_item(client, headers):
    item = _item(client, headers)

    assert client.delete(f"{BASE}/items/{item['id']}", headers=headers).status_code == 200

    listed = data_of(client.get(f"{BASE}/items", headers=headers, params={"search": item["code"]}))
    assert listed["total"] == 0

    inactive = data_of(client.get(f"{BASE}/items", headers=headers,
                                  params={"search": item["code"], "active": "false"}))
    assert inactive["total"] == 1

    # codes stay reserved after deletion
    response = client.post(f"{BASE}/items", headers=headers,
                           json={"name": "Reuse", "code": item["code"], "type": "material"})
    assert response.status_code == 400


def test_measurement_units(client, headers):
    units = data_of(client.get(f"{BASE}/measurement-unit-lookup", headers=headers))
    assert {"UN", "M", "KG", "H"} <= {u["id"] for u in units}


# ---------------- Links ----------------
def test_item_links(client, headers):
    parent = _item(client, headers, name="Boiler kit")
    child = _item(client, headers, name="Gasket")

    link = data_of(client.post(f"{BASE}/items/{parent['id']}/links", headers=headers,
                               json={"linked_item_id": child["id"], "link_type": "component", "quantity": "2"}))
    assert link["linked_item_name"] == "Gasket"
    assert link["quantity"] == 2

    duplicate = client.post(f"{BASE}/items/{parent['id']}/links", headers=headers,
                            json={"linked_item_id": child["id"]})
    assert duplicate.status_code == 400

    self_link = client.post(f"{BASE}/items/{parent['id']}/links", headers=headers,
                            json={"linked_item_id": parent["id"]})
    assert self_link.status_code == 400
    assert self_link.json()["status_code"] == "3004"

    links = data_of(client.get(f"{BASE}/items/{parent['id']}/links", headers=headers))
    assert [entry["id"] for entry in links] == [link["id"]]

    assert client.delete(f"{BASE}/links/{link['id']}", headers=headers).status_code == 200
    assert data_of(client.get(f"{BASE}/items/{parent['id']}/links", headers=headers)) == []


def test_link_to_unknown_item(client, headers):
    parent = _item(client, headers)

    response = client.post(f"{BASE}/items/{parent['id']}/links", headers=headers,
                           json={"linked_item_id": str(uuid.uuid4())})
    assert response.status_code == 404


def test_customer_links(client, headers):
    item = _item(client, headers)
    customer_id = str(uuid.uuid4())

    link = data_of(client.post(f"{BASE}/items/{item['id']}/customer-links", headers=headers, json={
        "customer_id": customer_id,
        "customer_item_code": "CUST-77",
        "special_price": "9.90",
        "discount_percent": "5",
    }))
    assert link["customer_item_code"] == "CUST-77"

    duplicate = client.post(f"{BASE}/items/{item['id']}/customer-links", headers=headers,
                            json={"customer_id": customer_id})
    assert duplicate.status_code == 400

    too_much = client.post(f"{BASE}/items/{item['id']}/customer-links", headers=headers,
                           json={"customer_id": str(uuid.uuid4()), "discount_percent": "150"})
    assert too_much.status_code == 400

    updated = data_of(client.put(f"{BASE}/customer-links/{link['id']}", headers=headers,
                                 json={"special_price": "8.50"}))
    assert updated["special_price"] == 8.5

    assert client.delete(f"{BASE}/customer-links/{link['id']}", headers=headers).status_code == 200
    assert data_of(client.get(f"{BASE}/items/{item['id']}/customer-links", headers=headers)) == []


def test_only_one_preferred_supplier(client, headers):
    item = _item(client, headers)

    first = data_of(client.post(f"{BASE}/items/{item['id']}/supplier-links", headers=headers,
                                json={"supplier_id": str(uuid.uuid4()), "is_preferred": True, "unit_price": "1.80"}))
    second = data_of(client.post(f"{BASE}/items/{item['id']}/supplier-links", headers=headers,
                                 json={"supplier_id": str(uuid.uuid4()), "is_preferred": True}))

    links = data_of(client.get(f"{BASE}/items/{item['id']}/supplier-links", headers=headers))
    preferred = [link["id"] for link in links if link["is_preferred"]]
    assert preferred == [second["id"]]

    data_of(client.put(f"{BASE}/supplier-links/{first['id']}", headers=headers, json={"is_preferred": True}))
    links = data_of(client.get(f"{BASE}/items/{item['id']}/supplier-links", headers=headers))
    assert [link["id"] for link in links if link["is_preferred"]] == [first["id"]]
    # preferred supplier is listed first
    assert links[0]["id"] == first["id"]


# ---------------- Attachments ----------------
def test_attachment_upload_and_download(client, headers):
    item = _item(client, headers)

    uploaded = data_of(client.post(
        f"{BASE}/items/{item['id']}/attachments",
        headers=headers,
        files={"file": ("datasheet.txt", b"max pressure 10 bar", "text/plain")},
        data={"description": "Datasheet", "category": "manual"},
    ))
    assert uploaded["file_name"] == "datasheet.txt"
    assert uploaded["file_size"] == len(b"max pressure 10 bar")
    assert uploaded["category"] == "manual"

    listed = data_of(client.get(f"{BASE}/items/{item['id']}/attachments", headers=headers))
    assert [a["id"] for a in listed] == [uploaded["id"]]

    download = client.get(f"{BASE}/attachments/{uploaded['id']}/download", headers=headers)
    assert download.status_code == 200
    assert download.content == b"max pressure 10 bar"
    assert download.headers["content-type"].startswith("text/plain")
    assert 'filename="datasheet.txt"' in download.headers["content-disposition"]

    assert client.delete(f"{BASE}/attachments/{uploaded['id']}", headers=headers).status_code == 200
    assert client.get(f"{BASE}/attachments/{uploaded['id']}/download", headers=headers).status_code == 404


@pytest.mark.parametrize("name,content,content_type", [
    ("tool.exe", b"MZ", "application/x-msdownload"),
    ("empty.txt", b"", "text/plain"),
])
def test_attachment_rejected(client, headers, name, content, content_type):
    item = _item(client, headers)

    response = client.post(f"{BASE}/items/{item['id']}/attachments", headers=headers,
                           files={"file": (name, content, content_type)})
    assert response.status_code == 400


def test_attachment_size_limit(client, headers, monkeypatch):
    monkeypatch.setattr(settings, "MAX_ATTACHMENT_SIZE_MB", 0.001)
    limit = int(0.001 * 1024 * 1024)
    item = _item(client, headers)
    url = f"{BASE}/items/{item['id']}/attachments"

    at_limit = data_of(client.post(url, headers=headers, files={"file": ("fits.txt", b"x" * limit, "text/plain")}))
    assert at_limit["file_size"] == limit

    too_big = client.post(url, headers=headers, files={"file": ("big.txt", b"x" * (limit + 1), "text/plain")})
    assert too_big.status_code == 400
    assert too_big.json()["message"] == "File exceeds the 0.001 MB limit"


def test_attachments_are_tenant_scoped(client, tenant_a, tenant_b):
    item = _item(client, tenant_a["headers"])
    uploaded = data_of(client.post(f"{BASE}/items/{item['id']}/attachments", headers=tenant_a["headers"],
                                   files={"file": ("a.csv", b"a,b\n1,2\n", "text/csv")}))

    response = client.get(f"{BASE}/attachments/{uploaded['id']}/download", headers=tenant_b["headers"])
    assert response.status_code == 404


# ---------------- Warehouses ----------------
def test_warehouse_code_must_be_unique(client, headers):
    warehouse = _warehouse(client, headers)

    response = client.post(f"{BASE}/warehouses", headers=headers,
                           json={"name": "Copy", "code": warehouse["code"].lower()})
    assert response.status_code == 400


def test_warehouse_lookup_and_update(client, headers):
    warehouse = _warehouse(client, headers, location_type="vehicle")
    assert warehouse["location_type"] == "vehicle"

    updated = data_of(client.put(f"{BASE}/warehouses/{warehouse['id']}", headers=headers,
                                 json={"name": "Van 2", "allow_negative_stock": True}))
    assert updated["name"] == "Van 2"
    assert updated["allow_negative_stock"] is True

    lookup = data_of(client.get(f"{BASE}/warehouses/lookup", headers=headers))
    assert {"id": warehouse["id"], "name": "Van 2"} in lookup


# ---------------- Stock movements ----------------
def test_stock_in_uses_weighted_average_cost(client, headers):
    item = _item(client, headers)
    warehouse = _warehouse(client, headers)

    first = data_of(_move(client, headers, movement_type="in", item_id=item["id"],
                          to_warehouse_id=warehouse["id"], quantity="10", unit_cost="2.00"))
    assert first["movement"]["movement_number"].startswith("MOV-")
    assert first["movement"]["total_cost"] == 20
    assert _level(first, warehouse["id"])["current_quantity"] == 10

    second = data_of(_move(client, headers, movement_type="in", item_id=item["id"],
                           to_warehouse_id=warehouse["id"], quantity="10", unit_cost="4.00"))
    level = _level(second, warehouse["id"])
    assert level["current_quantity"] == 20
    assert level["average_cost"] == pytest.approx(3.0)

    fetched = data_of(client.get(f"{BASE}/items/{item['id']}", headers=headers))
    assert fetched["total_stock"] == 20


def test_stock_out_and_insufficient_stock(client, headers):
    item = _item(client, headers)
    warehouse = _warehouse(client, headers)
    _move(client, headers, movement_type="in", item_id=item["id"], to_warehouse_id=warehouse["id"], quantity="5")

    out = data_of(_move(client, headers, movement_type="out", item_id=item["id"],
                        from_warehouse_id=warehouse["id"], quantity="3", reference_number="WO-1"))
    assert _level(out, warehouse["id"])["current_quantity"] == 2
    assert out["movement"]["from_warehouse_id"] == warehouse["id"]
    assert out["movement"]["to_warehouse_id"] is None

    refused = _move(client, headers, movement_type="out", item_id=item["id"],
                    from_warehouse_id=warehouse["id"], quantity="3")
    assert refused.status_code == 400
    assert refused.json()["status_code"] == "4006"

    # nothing was written by the refused movement
    stock = data_of(client.get(f"{BASE}/stock", headers=headers, params={"item_id": item["id"]}))
    assert stock["stock"][0]["current_quantity"] == 2


def test_negative_stock_allowed_by_warehouse(client, headers):
    item = _item(client, headers)
    warehouse = _warehouse(client, headers, allow_negative_stock=True)

    out = data_of(_move(client, headers, movement_type="out", item_id=item["id"],
                        from_warehouse_id=warehouse["id"], quantity="4"))
    assert _level(out, warehouse["id"])["current_quantity"] == -4


def test_transfer_moves_quantity_between_warehouses(client, headers):
    item = _item(client, headers)
    source = _warehouse(client, headers, name="Depot")
    target = _warehouse(client, headers, name="Van")
    _move(client, headers, movement_type="in", item_id=item["id"], to_warehouse_id=source["id"],
          quantity="8", unit_cost="5")

    result = data_of(_move(client, headers, movement_type="transfer", item_id=item["id"],
                           from_warehouse_id=source["id"], to_warehouse_id=target["id"], quantity="3"))

    assert _level(result, source["id"])["current_quantity"] == 5
    assert _level(result, target["id"])["current_quantity"] == 3
    assert _level(result, target["id"])["average_cost"] == pytest.approx(5.0)


def test_transfer_rules(client, headers):
    item = _item(client, headers)
    warehouse = _warehouse(client, headers)

    same = _move(client, headers, movement_type="transfer", item_id=item["id"],
                 from_warehouse_id=warehouse["id"], to_warehouse_id=warehouse["id"], quantity="1")
    assert same.status_code == 400

    missing_target = _move(client, headers, movement_type="transfer", item_id=item["id"],
                           from_warehouse_id=warehouse["id"], quantity="1")
    assert missing_target.status_code == 400
    assert missing_target.json()["status_code"] == "3002"

    unknown = _move(client, headers, movement_type="in", item_id=item["id"],
                    to_warehouse_id=str(uuid.uuid4()), quantity="1")
    assert unknown.status_code == 404


def test_adjustment_sets_quantity(client, headers):
    item = _item(client, headers)
    warehouse = _warehouse(client, headers)
    _move(client, headers, movement_type="in", item_id=item["id"], to_warehouse_id=warehouse["id"], quantity="7")

    adjusted = data_of(_move(client, headers, movement_type="adjustment", item_id=item["id"],
                             to_warehouse_id=warehouse["id"], quantity="4", reason="Cycle count"))
    assert _level(adjusted, warehouse["id"])["current_quantity"] == 4

    zero = data_of(_move(client, headers, movement_type="adjustment", item_id=item["id"],
                         to_warehouse_id=warehouse["id"], quantity="0"))
    assert _level(zero, warehouse["id"])["current_quantity"] == 0


def test_movement_validation(client, headers):
    item = _item(client, headers)
    service = _item(client, headers, type="service")
    warehouse = _warehouse(client, headers)

    zero = _move(client, headers, movement_type="in", item_id=item["id"], to_warehouse_id=warehouse["id"],
                 quantity="0")
    assert zero.status_code == 400

    for_service = _move(client, headers, movement_type="in", item_id=service["id"],
                        to_warehouse_id=warehouse["id"], quantity="1")
    assert for_service.status_code == 400

    unknown_item = _move(client, headers, movement_type="in", item_id=str(uuid.uuid4()),
                         to_warehouse_id=warehouse["id"], quantity="1")
    assert unknown_item.status_code == 404

    bad_type = _move(client, headers, movement_type="teleport", item_id=item["id"], quantity="1")
    assert bad_type.status_code == 400


def test_movement_history_filters(client, headers):
    item = _item(client, headers)
    warehouse = _warehouse(client, headers)
    _move(client, headers, movement_type="in", item_id=item["id"], to_warehouse_id=warehouse["id"], quantity="2")
    _move(client, headers, movement_type="out", item_id=item["id"], from_warehouse_id=warehouse["id"], quantity="1")

    all_moves = data_of(client.get(f"{BASE}/stock/movements", headers=headers, params={"item_id": item["id"]}))
    assert all_moves["total"] == 2
    assert all(m["item_name"] == item["name"] for m in all_moves["movements"])

    outs = data_of(client.get(f"{BASE}/stock/movements", headers=headers,
                              params={"item_id": item["id"], "movement_type": "out"}))
    assert [m["movement_type"] for m in outs["movements"]] == ["out"]

    by_warehouse = data_of(client.get(f"{BASE}/stock/movements", headers=headers,
                                      params={"warehouse_id": warehouse["id"]}))
    assert by_warehouse["total"] == 2


def test_low_stock_and_reservation(client, headers):
    item = _item(client, headers)
    warehouse = _warehouse(client, headers)
    result = data_of(_move(client, headers, movement_type="in", item_id=item["id"],
                           to_warehouse_id=warehouse["id"], quantity="3"))
    stock_id = _level(result, warehouse["id"])["id"]

    updated = data_of(client.put(f"{BASE}/stock/{stock_id}", headers=headers,
                                 json={"reorder_point": "5", "reserved_quantity": "1"}))
    assert updated["is_low_stock"] is True
    assert updated["available_quantity"] == 2

    low = data_of(client.get(f"{BASE}/stock", headers=headers,
                             params={"warehouse_id": warehouse["id"], "low_stock": True}))
    assert [s["id"] for s in low["stock"]] == [stock_id]

    too_many = client.put(f"{BASE}/stock/{stock_id}", headers=headers, json={"reserved_quantity": "10"})
    assert too_many.status_code == 400


def test_warehouse_with_stock_cannot_be_deleted(client, headers):
    item = _item(client, headers)
    warehouse = _warehouse(client, headers)
    _move(client, headers, movement_type="in", item_id=item["id"], to_warehouse_id=warehouse["id"], quantity="1")

    refused = client.delete(f"{BASE}/warehouses/{warehouse['id']}", headers=headers)
    assert refused.status_code == 400
    assert refused.json()["status_code"] == "4005"

    item_refused = client.delete(f"{BASE}/items/{item['id']}", headers=headers)
    assert item_refused.status_code == 400

    _move(client, headers, movement_type="out", item_id=item["id"], from_warehouse_id=warehouse["id"], quantity="1")
    assert client.delete(f"{BASE}/warehouses/{warehouse['id']}", headers=headers).status_code == 200

    listed = data_of(client.get(f"{BASE}/warehouses", headers=headers))
    assert warehouse["id"] not in [w["id"] for w in listed["warehouses"]]


def test_dashboard_counts(client, tenant_b):
    headers = tenant_b["headers"]
    before = data_of(client.get(f"{BASE}/dashboard", headers=headers))

    item = _item(client, headers)
    _item(client, headers, type="service")
    warehouse = _warehouse(client, headers)
    _move(client, headers, movement_type="in", item_id=item["id"], to_warehouse_id=warehouse["id"],
          quantity="4", unit_cost="2.50")

    after = data_of(client.get(f"{BASE}/dashboard", headers=headers))
    assert after["materials"] == before["materials"] + 1
    assert after["services"] == before["services"] + 1
    assert after["total_items"] == before["total_items"] + 2
    assert after["warehouses"] == before["warehouses"] + 1
    assert after["stock_value"] == pytest.approx(before["stock_value"] + 10.0)
    assert after["movements_today"] >= before["movements_today"] + 1


# ---------------- Service kits ----------------
KITS = f"{BASE}/service-kits/"


def test_service_kit_material_cost(client, headers):
    filter_item = _item(client, headers, name="Air filter", cost_price="12.50")
    belt = _item(client, headers, name="Fan belt", cost_price="7.00")
    labour = _item(client, headers, name="Technician hour", type="service", cost_price="40.00")

    kit = data_of(client.post(KITS, headers=headers, json={
        "code": unique("KIT"),
        "name": "HVAC quarterly service",
        "service_type": "preventive",
        "maintenance_interval_days": 90,
        "items": [
            {"item_id": filter_item["id"], "quantity": "2"},
            {"item_id": labour["id"], "quantity": "1.5"},
            {"item_id": belt["id"], "quantity": "1", "is_optional": True},
        ],
    }))

    assert kit["item_count"] == 3
    # optional components are left out of the estimate
    assert kit["estimated_material_cost"] == pytest.approx(2 * 12.5 + 1.5 * 40)

    fetched = data_of(client.get(f"{KITS}{kit['id']}", headers=headers))
    assert {i["item_name"] for i in fetched["items"]} == {"Air filter", "Fan belt", "Technician hour"}


def test_service_kit_component_rules(client, headers):
    part = _item(client, headers)

    duplicate_component = client.post(KITS, headers=headers, json={
        "code": unique("KIT"), "name": "Twice",
        "items": [{"item_id": part["id"]}, {"item_id": part["id"]}],
    })
    assert duplicate_component.status_code == 400

    unknown_component = client.post(KITS, headers=headers, json={
        "code": unique("KIT"), "name": "Ghost", "items": [{"item_id": str(uuid.uuid4())}],
    })
    assert unknown_component.status_code == 400

    kit = data_of(client.post(KITS, headers=headers, json={"code": unique("KIT"), "name": "Empty kit"}))
    assert kit["items"] == []

    duplicate_code = client.post(KITS, headers=headers, json={"code": kit["code"], "name": "Clash"})
    assert duplicate_code.status_code == 400

    with_part = data_of(client.post(f"{KITS}{kit['id']}/items", headers=headers,
                                    json={"item_id": part["id"], "quantity": "3"}))
    assert with_part["estimated_material_cost"] == pytest.approx(3 * 2.0)

    again = client.post(f"{KITS}{kit['id']}/items", headers=headers, json={"item_id": part["id"]})
    assert again.status_code == 400

    kit_item_id = with_part["items"][0]["id"]
    emptied = data_of(client.delete(f"{KITS}{kit['id']}/items/{kit_item_id}", headers=headers))
    assert emptied["items"] == []
    assert emptied["estimated_material_cost"] == 0


def test_service_kit_update_list_and_delete(client, headers):
    kit = data_of(client.post(KITS, headers=headers, json={
        "code": unique("KIT"), "name": "Pump overhaul", "service_type": "corrective",
    }))

    updated = data_of(client.put(f"{KITS}{kit['id']}", headers=headers,
                                 json={"estimated_time_minutes": 180, "name": None}))
    assert updated["estimated_time_minutes"] == 180
    assert updated["name"] == "Pump overhaul"

    listed = data_of(client.get(KITS, headers=headers, params={"service_type": "corrective"}))
    assert kit["id"] in [k["id"] for k in listed["service_kits"]]

    assert client.delete(f"{KITS}{kit['id']}", headers=headers).status_code == 200
    assert data_of(client.get(f"{KITS}{kit['id']}", headers=headers))["is_active"] is False

    listed = data_of(client.get(KITS, headers=headers, params={"service_type": "corrective"}))
    assert kit["id"] not in [k["id"] for k in listed["service_kits"]]
    assert client.delete(f"{KITS}{kit['id']}", headers=headers).status_code == 404
