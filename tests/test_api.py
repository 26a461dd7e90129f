import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from alertstore.api import create_app
from alertstore.snapshot import SnapshotWriter
from alertstore.store import AlertStore

ALERT = {
    "alert_id": "b950482e9911ec7e41f7ca5e5d9a424f",
    "service_id": "my_test_service_id",
    "service_name": "my_test_service",
    "model": "TestModel",
    "alert_type": "Critical",
    "alert_ts": "2024-01-01T12:00:00Z",
    "severity": "High",
    "team_slack": "testteam",
}

WINDOW = {"start_ts": "2024-01-01T11:00:00Z", "end_ts": "2024-01-01T13:00:00Z"}


@pytest.fixture
def snapshot_path(tmp_path: Path) -> Path:
    return tmp_path / "data.json"


@pytest.fixture
def client(snapshot_path: Path) -> TestClient:
    store = AlertStore(SnapshotWriter(snapshot_path))
    return TestClient(create_app(store))


def test_home(client: TestClient) -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == "Hello from home"


def test_write_alert(client: TestClient, snapshot_path: Path) -> None:
    response = client.post("/alerts", json=ALERT)

    assert response.status_code == 200
    assert response.json() == {"alert_id": ALERT["alert_id"], "error": None}
    data = json.loads(snapshot_path.read_text())
    assert data["data"]["my_test_service_id"]["service_name"] == "my_test_service"


def test_write_alert_rejects_bad_payload(client: TestClient) -> None:
    response = client.post("/alerts", content=b"not json", headers={"content-type": "application/json"})
    assert response.status_code == 400

    response = client.post("/alerts", json={**ALERT, "alert_ts": "yesterday"})
    assert response.status_code == 400


def test_write_alert_snapshot_failure_returns_500(tmp_path: Path) -> None:
    target = tmp_path / "occupied"
    target.mkdir()
    store = AlertStore(SnapshotWriter(target))
    client = TestClient(create_app(store))

    response = client.post("/alerts", json=ALERT)

    assert response.status_code == 500
    assert store.alert_count == 1


def test_read_alerts(client: TestClient) -> None:
    client.post("/alerts", json=ALERT)
    client.post("/alerts", json={**ALERT, "alert_id": "second", "alert_ts": "2024-01-01T12:30:00Z"})

    response = client.get("/alerts", params={"service_id": ALERT["service_id"], **WINDOW})

    assert response.status_code == 200
    body = response.json()
    assert body["alert_id"] == ALERT["alert_id"]
    assert [alert["alert_id"] for alert in body["alerts"]] == [ALERT["alert_id"], "second"]
    assert "service_name" not in body["alerts"][0]


def test_read_alerts_legacy_path(client: TestClient) -> None:
    client.post("/alerts", json=ALERT)

    url = (
        f"/alerts/service_id={ALERT['service_id']}"
        f"&start_ts={WINDOW['start_ts']}&end_ts={WINDOW['end_ts']}"
    )
    response = client.get(url)

    assert response.status_code == 200
    assert response.json()["alert_id"] == ALERT["alert_id"]


def test_read_alerts_unknown_service(client: TestClient) -> None:
    response = client.get("/alerts", params={"service_id": "svc2", **WINDOW})
    assert response.status_code == 404
    assert response.json()["detail"] == "Service not found"


def test_read_alerts_empty_range(client: TestClient) -> None:
    client.post("/alerts", json=ALERT)
    response = client.get(
        "/alerts",
        params={
            "service_id": ALERT["service_id"],
            "start_ts": "2024-02-01T00:00:00Z",
            "end_ts": "2024-03-01T00:00:00Z",
        },
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "No alerts found in the specified time range"


def test_read_alerts_validates_parameters(client: TestClient) -> None:
    response = client.get("/alerts", params={"service_id": "svc1"})
    assert response.status_code == 400

    response = client.get(
        "/alerts", params={"service_id": "svc1", "start_ts": "now", "end_ts": WINDOW["end_ts"]}
    )
    assert response.status_code == 400


def test_health_reports_counts(client: TestClient) -> None:
    client.post("/alerts", json=ALERT)
    client.post("/alerts", json={**ALERT, "service_id": "other"})

    assert client.get("/health").json() == {"status": "healthy", "services": 2, "alerts": 2}


def test_read_alerts_rejects_timestamp_with_trailing_newline(client: TestClient) -> None:
    client.post("/alerts", json=ALERT)
    response = client.get(
        "/alerts",
        params={
            "service_id": ALERT["service_id"],
            "start_ts": WINDOW["start_ts"],
            "end_ts": "2024-01-01T13:00:00Z\n",
        },
    )
    assert response.status_code == 400
