def test_success_envelope(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "data": {"status": "healthy"},
        "status": "Success",
        "status_code": "200",
        "message": "Data retrieved successfully",
    }


def test_unknown_route_is_wrapped(client):
    response = client.get("/api/does-not-exist")
    body = response.json()

    assert response.status_code == 404
    assert body["success"] is False
    assert body["status"] == "Failure"
    assert body["data"] is None


def test_error_response_envelope(client, headers):
    response = client.get("/api/tickets/00000000-0000-0000-0000-000000000000", headers=headers)
    body = response.json()

    assert response.status_code == 404
    assert body["success"] is False
    assert body["status_code"] == "4004"
    assert body["message"] == "Ticket not found"


def test_validation_errors_are_listed_per_field(client, headers):
    response = client.post("/api/tickets/", headers=headers, json={"priority": "sometime"})
    body = response.json()

    assert response.status_code == 400
    assert body["status_code"] == "3001"
    assert body["message"] == "Validation failed"

    fields = {error["field"] for error in body["data"]}
    assert {"title", "priority"} <= fields
    assert all(error["message"] and error["type"] for error in body["data"])


def test_query_validation_keeps_location(client, headers):
    response = client.get("/api/contracts/upcoming-renewals", headers=headers, params={"days": 999})

    assert response.status_code == 400
    assert response.json()["data"][0]["field"] == "query.days"
