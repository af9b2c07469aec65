import time

from fastapi.testclient import TestClient

from app.main import create_app
from app.services.jobs import JobStore
from app.services.scan_service import ScanService
from conftest import wait_for

JOB_KEYS = {"id", "target", "options", "status", "progress", "results",
            "createdAt", "completedAt"}


def completed_body(client, scan_id):
    body = client.get(f"/api/scans/{scan_id}").json()
    return body if body["status"] == "completed" else None


def test_create_scan_returns_running_job(client):
    r = client.post("/api/scans", json={"target": "example.com",
                                        "options": {"ports": "top100", "aggressive": False}})
    assert r.status_code == 201
    body = r.json()
    assert set(body) == JOB_KEYS
    assert body["id"].startswith("scan_")
    assert body["target"] == "example.com"
    assert body["options"] == {"ports": "top100", "aggressive": False}
    assert body["status"] == "running"
    assert body["progress"] == 0
    assert body["results"] is None
    assert body["completedAt"] is None
    assert "T" in body["createdAt"]


def test_create_scan_defaults_options(client):
    r = client.post("/api/scans", json={"target": "example.com"})
    assert r.status_code == 201
    assert r.json()["options"] == {}


def test_create_scan_without_target_is_400(client):
    for payload in ({}, {"target": ""}, {"options": {"a": 1}}):
        r = client.post("/api/scans", json=payload)
        assert r.status_code == 400
        assert r.json() == {"error": "Target is required"}


def test_create_scan_with_malformed_body_is_400(client):
    r = client.post("/api/scans", json={"target": "example.com", "options": "nope"})
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid request body"


def test_get_unknown_scan_is_404(client):
    r = client.get("/api/scans/nonexistent")
    assert r.status_code == 404
    assert r.json() == {"error": "Scan not found"}


def test_scan_progresses_to_completion(client):
    scan_id = client.post("/api/scans", json={"target": "example.com"}).json()["id"]

    seen = []

    def completed():
        body = client.get(f"/api/scans/{scan_id}").json()
        seen.append(body["progress"])
        if body["status"] == "running":
            assert body["results"] is None
        return body if body["status"] == "completed" else None

    body = wait_for(completed, timeout=5)
    assert seen == sorted(seen)
    assert set(body) == JOB_KEYS
    assert body["progress"] == 100
    assert body["completedAt"] is not None
    summary = body["results"]["summary"]
    assert set(summary) == {"riskScore", "riskLevel", "target", "scanDuration"}
    assert summary["target"] == "example.com"
    assert summary["riskLevel"] in {"LOW", "MEDIUM", "HIGH", "CRITICAL"}
    assert set(body["results"]["vulnerabilities"]) == {"critical", "high", "medium", "low"}
    assert body["results"]["openPorts"] >= 1


def test_list_scans_newest_first(client):
    assert client.get("/api/scans").json() == []

    ids = [client.post("/api/scans", json={"target": f"h{i}.example"}).json()["id"]
           for i in range(3)]
    r = client.get("/api/scans")
    assert r.status_code == 200
    assert [j["id"] for j in r.json()] == list(reversed(ids))


def test_delete_scan(client):
    scan_id = client.post("/api/scans", json={"target": "example.com"}).json()["id"]

    r = client.delete(f"/api/scans/{scan_id}")
    assert r.status_code == 204
    assert r.content == b""

    assert client.get(f"/api/scans/{scan_id}").status_code == 404
    assert client.get("/api/scans").json() == []
    # the driver would have finished by now; it must not bring the scan back
    time.sleep(0.25)
    assert client.get(f"/api/scans/{scan_id}").status_code == 404

    r = client.delete(f"/api/scans/{scan_id}")
    assert r.status_code == 404
    assert r.json() == {"error": "Scan not found"}


def test_report_unknown_scan_is_404(client):
    r = client.get("/api/scans/nonexistent/report")
    assert r.status_code == 404


def test_report_before_completion_is_400(slow_client):
    scan_id = slow_client.post("/api/scans", json={"target": "example.com"}).json()["id"]
    r = slow_client.get(f"/api/scans/{scan_id}/report")
    assert r.status_code == 400
    assert r.json() == {"error": "Scan not completed yet"}


def test_report_after_completion(client):
    scan_id = client.post("/api/scans", json={"target": "example.com"}).json()["id"]
    done = wait_for(lambda: completed_body(client, scan_id))

    r = client.get(f"/api/scans/{scan_id}/report")
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "PDF report available"
    assert body["scanId"] == scan_id
    assert body["results"] == done["results"]


def test_end_to_end_example_com(slow_client):
    created = slow_client.post("/api/scans", json={"target": "example.com"}).json()
    scan_id = created["id"]
    assert slow_client.get(f"/api/scans/{scan_id}").json()["progress"] == 0

    last = None
    deadline = time.monotonic() + 8
    while time.monotonic() < deadline:
        time.sleep(0.5)
        last = slow_client.get(f"/api/scans/{scan_id}").json()
        if last["status"] == "completed":
            break

    assert last["progress"] == 100
    assert last["status"] == "completed"
    assert last["results"]["summary"]["target"] == "example.com"


def test_create_scan_with_empty_body_is_400(client):
    r = client.post("/api/scans")
    assert r.status_code == 400
    assert r.json() == {"error": "Target is required"}


def test_create_scan_keeps_target_and_null_options(client):
    r = client.post("/api/scans", json={"target": "  example.com ", "options": None})
    assert r.status_code == 201
    body = r.json()
    assert body["target"] == "  example.com "
    assert body["options"] is None
    assert client.get(f"/api/scans/{body['id']}").json()["options"] is None


def test_unhandled_error_is_500_with_request_id(fast_settings):
    app = create_app(fast_settings)
    app.state.scan_service = ScanService(JobStore(), fast_settings,
                                         id_factory=lambda: "scan_same")
    with TestClient(app) as c:
        assert c.post("/api/scans", json={"target": "a.example"}).status_code == 201

        r = c.post("/api/scans", json={"target": "b.example"},
                   headers={"X-Request-ID": "req-500"})
        assert r.status_code == 500
        assert r.json() == {"error": "Internal server error"}
        assert r.headers["X-Request-ID"] == "req-500"
        assert r.headers["X-Content-Type-Options"] == "nosniff"
