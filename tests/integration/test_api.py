"""Integration tests for API endpoints"""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def cycle_payload():
    """50/30/20 cycle snapshot as sent by the persistence layer"""
    return {
        "id": "cycle_1",
        "user_id": "user_1",
        "start_date": "2026-01-25",
        "end_date": "2026-02-24",
        "payday_day": 25,
        "needs_pct": 0.5,
        "wants_pct": 0.3,
        "savings_pct": 0.2,
    }


def transactions_payload(needs: float, wants: float, savings: float, cycle_id: str = "cycle_1"):
    return [
        {
            "id": f"tx_{bucket}",
            "cycle_id": cycle_id,
            "bucket": bucket,
            "amount": amount,
            "occurred_at": "2026-02-01T12:00:00",
        }
        for bucket, amount in (("needs", needs), ("wants", wants), ("savings", savings))
    ]


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "cediwise-budget"}


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "cediwise_allocation_total" in response.text
    assert "cediwise_reallocation_total" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"

    generated = client.get("/health")
    assert len(generated.headers["X-Request-ID"]) == 36


def test_request_latency_is_labelled_by_route_template(client: TestClient):
    client.get("/v1/strategy/balanced")
    client.get("/v1/strategy/aggressive")

    metrics = client.get("/metrics").text
    assert 'endpoint="/v1/strategy/{name}"' in metrics
    assert 'endpoint="/v1/strategy/balanced"' not in metrics


def test_allocation_endpoint_survival(client: TestClient):
    """Test POST /v1/allocation with fixed costs above 85% of income"""
    response = client.post(
        "/v1/allocation",
        json={
            "stable_salary": 3000,
            "rent": 2000,
            "tithe_remittance": 200,
            "debt_obligations": 300,
            "utilities_total": 400,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["strategy"] == "survival"
    assert data["allocation"]["needs_pct"] == pytest.approx(0.92)
    assert data["allocation"]["savings_pct"] == 0
    assert data["fixed_costs"] == 3500
    assert data["reasoning"]


def test_allocation_endpoint_with_enums(client: TestClient):
    response = client.post(
        "/v1/allocation",
        json={
            "stable_salary": 4000,
            "rent": 1200,
            "tithe_remittance": 100,
            "utilities_total": 150,
            "life_stage": "family",
            "financial_priority": "savings_growth",
            "spending_style": "conservative",
            "dependents_count": 2,
        },
    )

    assert response.status_code == 200
    allocation = response.json()["allocation"]
    assert sum(allocation.values()) == pytest.approx(1)


def test_allocation_endpoint_applies_tax(client: TestClient):
    response = client.post("/v1/allocation", json={"stable_salary": 3000, "apply_tax": True})

    assert response.status_code == 200
    assert response.json()["net_income"] == pytest.approx(2685.325)


@pytest.mark.parametrize(
    "payload",
    [
        {"stable_salary": -1},
        {"stable_salary": 3000, "rent": -50},
        {"stable_salary": 3000, "life_stage": "pensioner"},
        {"stable_salary": 3000, "dependents_count": -2},
        {"rent": 100},
    ],
)
def test_allocation_endpoint_rejects_invalid_profile(client: TestClient, payload):
    response = client.post("/v1/allocation", json=payload)
    assert response.status_code == 422


def test_strategy_endpoint(client: TestClient):
    response = client.get("/v1/strategy/aggressive")

    assert response.status_code == 200
    assert response.json() == {"needs_pct": 0.4, "wants_pct": 0.2, "savings_pct": 0.4}


@pytest.mark.parametrize("name", ["custom", "unknown"])
def test_strategy_endpoint_not_found(client: TestClient, name):
    response = client.get(f"/v1/strategy/{name}")
    assert response.status_code == 404


def test_cycle_window_endpoint(client: TestClient):
    response = client.post("/v1/cycle/window", json={"reference_date": "2026-02-10", "payday_day": 31})

    assert response.status_code == 200
    assert response.json() == {"start": "2026-01-31", "end": "2026-02-27", "payday_day": 31}


def test_cycle_window_endpoint_default_payday(client: TestClient):
    response = client.post("/v1/cycle/window", json={"reference_date": "2026-03-10"})

    assert response.status_code == 200
    data = response.json()
    assert data["payday_day"] == 25
    assert data["start"] == "2026-02-25"


def test_cycle_window_rejects_out_of_range_payday(client: TestClient):
    response = client.post("/v1/cycle/window", json={"reference_date": "2026-03-10", "payday_day": 32})
    assert response.status_code == 422


def test_spending_endpoint(client: TestClient, cycle_payload):
    transactions = transactions_payload(2800, 1000, 900)
    transactions[0]["category_id"] = "rent"

    response = client.post(
        "/v1/cycle/spending",
        json={"cycle": cycle_payload, "transactions": transactions, "monthly_net_income": 5000},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["by_bucket"] == {"needs": 2800, "wants": 1000, "savings": 900}
    assert data["by_category"] == {"rent": 2800}
    assert data["uncategorized"] == 1900
    assert data["total"] == 4700


def test_reallocation_endpoint_suggests_shift(client: TestClient, cycle_payload):
    """Needs 12% over, wants 33% under -> shift 5 pp from wants to needs"""
    response = client.post(
        "/v1/cycle/reallocation",
        json={
            "cycle": cycle_payload,
            "transactions": transactions_payload(2800, 1000, 900),
            "monthly_net_income": 5000,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["should_reallocate"] is True
    assert data["changes"] == {"needs_pct": 0.55, "wants_pct": 0.25, "savings_pct": 0.2}
    assert data["overspent_buckets"][0]["bucket"] == "needs"
    assert data["underspent_buckets"][0]["bucket"] == "wants"
    assert data["summary"] == "Overspent: needs by 12%\nUnderspent: wants by 33%"


def test_reallocation_endpoint_on_budget(client: TestClient, cycle_payload):
    response = client.post(
        "/v1/cycle/reallocation",
        json={
            "cycle": cycle_payload,
            "transactions": transactions_payload(2500, 1450, 1000),
            "monthly_net_income": 5000,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["should_reallocate"] is False
    assert data["changes"] is None
    assert data["summary"] == ""


def test_reallocation_endpoint_rejects_negative_amount(client: TestClient, cycle_payload):
    transactions = transactions_payload(2500, 1450, 1000)
    transactions[1]["amount"] = -10

    response = client.post(
        "/v1/cycle/reallocation",
        json={"cycle": cycle_payload, "transactions": transactions, "monthly_net_income": 5000},
    )
    assert response.status_code == 422


def test_rollover_endpoint(client: TestClient, cycle_payload):
    response = client.post(
        "/v1/cycle/rollover",
        json={
            "cycle": cycle_payload,
            "transactions": transactions_payload(3000, 1000, 1000),
            "monthly_net_income": 5000,
        },
    )

    assert response.status_code == 200
    assert response.json() == {"needs": 0, "wants": 500, "savings": 0, "total": 500}


def test_rollover_endpoint_zero_income(client: TestClient, cycle_payload):
    response = client.post(
        "/v1/cycle/rollover",
        json={"cycle": cycle_payload, "transactions": [], "monthly_net_income": 0},
    )

    assert response.status_code == 200
    assert response.json()["total"] == 0


def test_category_impact_endpoint_suggests_borrowing(client: TestClient, cycle_payload):
    response = client.post(
        "/v1/cycle/category-impact",
        json={
            "cycle": cycle_payload,
            "categories": [
                {"id": "fun", "cycle_id": "cycle_1", "bucket": "wants", "name": "Fun", "limit_amount": 1400},
            ],
            "monthly_net_income": 5000,
            "bucket": "wants",
            "new_limit": 1700,
            "category_id": "fun",
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["exceeds_bucket"] is True
    assert data["exceeds_income"] is False
    assert data["suggested_allocation"] == {"needs_pct": 0.46, "wants_pct": 0.34, "savings_pct": 0.2}
    assert data["message"] == "Budget exceeds allocation for this bucket."


def test_category_impact_endpoint_reports_debt(client: TestClient, cycle_payload):
    response = client.post(
        "/v1/cycle/category-impact",
        json={"cycle": cycle_payload, "monthly_net_income": 1000, "bucket": "needs", "new_limit": 1200},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["exceeds_income"] is True
    assert data["debt_amount"] == 200
    assert data["suggested_allocation"] is None
