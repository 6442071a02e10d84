"""Health probe, metrics scrape, unknown paths and storage failures."""

from sqlalchemy.exc import OperationalError

from tests.utils.clock import future_day


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"] == "ok"
    assert body["service"] == "fitclub-api"
    assert body["timestamp"].endswith("Z")


def test_metrics_exposes_booking_counters(client, trainer):
    client.get(f"/api/v1/trainers/{trainer.id}/availability", params={"date": "2030-01-08"})

    response = client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "fitclub_service_operations_total" in response.text
    assert "fitclub_prometheus_scrapes_total" in response.text


def test_unknown_path_is_problem_json(client):
    response = client.get("/api/v1/nothing-here")

    assert response.status_code == 404
    assert response.headers["content-type"].startswith("application/problem+json")
    assert response.json()["instance"] == "/api/v1/nothing-here"


def test_storage_failure_is_generic_500(
    client, db, make_class, member, auth_headers, monkeypatch
):
    day = future_day()
    group_class = make_class(day=day)

    def _fail():
        raise OperationalError(
            "UPDATE group_classes SET capacity=1", {}, Exception("disk I/O error at /var/lib/pg")
        )

    monkeypatch.setattr(db, "commit", _fail)
    response = client.post(
        f"/api/v1/classes/{group_class.id}/book",
        json={"class_date": day.isoformat()},
        headers=auth_headers(member),
    )

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("application/problem+json")
    body = response.json()
    assert body["code"] == "internal_server_error"
    assert body["detail"] == "Database operation failed"
    assert "group_classes" not in response.text
    assert "/var/lib/pg" not in response.text
