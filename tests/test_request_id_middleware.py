from __future__ import annotations


def test_preserves_incoming_request_id_header(client):
    incoming_id = "test-request-id-123"
    resp = client.get("/health", headers={"X-Request-ID": incoming_id})

    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert resp.headers.get("X-Request-ID") == incoming_id


def test_generates_request_id_when_missing(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID")
    assert resp.headers.get("X-Request-Duration-ms") is not None


def test_openapi_marks_only_user_routes_as_protected(client):
    schema = client.get("/openapi.json").json()

    login_op = schema["paths"]["/v1/authentication/login"]["post"]
    list_op = schema["paths"]["/v1/users"]["get"]
    assert "security" not in login_op
    assert list_op["security"] == [{"AdminApiKey": []}]
    assert "AdminApiKey" in schema["components"]["securitySchemes"]
