"""Integration tests for API endpoints"""

import pytest
from fastapi.testclient import TestClient

USER = "user_anita"


@pytest.fixture
def rent_expense_body():
    """February room rent at $200/week, paid on March 1"""
    return {
        "user_id": USER,
        "amount": 800,
        "category": "Housing",
        "subcategory": "Rent",
        "description": "Room rent",
        "date": "2025-03-01T09:00:00",
        "payment_details": {
            "payment_date": "2025-03-01",
            "rent_period": {"start_date": "2025-02-01", "end_date": "2025-02-28"},
            "weekly_rate": 200,
            "landlord_name": "Mr. Shrestha",
        },
    }


def post_expense(client: TestClient, **overrides) -> dict:
    body = {
        "user_id": USER,
        "amount": 25.0,
        "category": "Food",
        "description": "Groceries",
        "date": "2025-03-10T18:00:00",
    }
    body.update(overrides)
    response = client.post("/v1/expenses", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "homefin_anomalies_total" in response.text
    assert "exchange_rate_fetch_total" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_expense_crud(client: TestClient):
    """Test POST, GET, PUT and DELETE /v1/expenses"""
    created = post_expense(client, tags=["weekly"])
    expense = created["expense"]
    assert expense["category"] == "Food"
    assert expense["tags"] == ["weekly"]
    assert created["anomalies"] == []
    assert created["category_suggestion"] is None

    fetched = client.get(f"/v1/expenses/{expense['id']}", params={"user_id": USER})
    assert fetched.status_code == 200
    assert fetched.json()["description"] == "Groceries"

    updated = client.put(f"/v1/expenses/{expense['id']}", params={"user_id": USER}, json={"amount": 30.0})
    assert updated.status_code == 200
    assert updated.json()["amount"] == 30.0

    listed = client.get("/v1/expenses", params={"user_id": USER})
    assert [e["id"] for e in listed.json()["expenses"]] == [expense["id"]]

    deleted = client.delete(f"/v1/expenses/{expense['id']}", params={"user_id": USER})
    assert deleted.status_code == 204
    assert client.get(f"/v1/expenses/{expense['id']}", params={"user_id": USER}).status_code == 404


def test_expense_is_scoped_to_user(client: TestClient):
    expense = post_expense(client)["expense"]

    response = client.get(f"/v1/expenses/{expense['id']}", params={"user_id": "someone_else"})

    assert response.status_code == 404


def test_get_expense_not_found(client: TestClient):
    fake_uuid = "00000000-0000-0000-0000-000000000000"
    response = client.get(f"/v1/expenses/{fake_uuid}", params={"user_id": USER})
    assert response.status_code == 404


def test_get_expense_invalid_id(client: TestClient):
    response = client.get("/v1/expenses/not-a-uuid", params={"user_id": USER})
    assert response.status_code == 400


def test_update_expense_requires_fields(client: TestClient):
    expense = post_expense(client)["expense"]

    response = client.put(f"/v1/expenses/{expense['id']}", params={"user_id": USER}, json={})

    assert response.status_code == 400


def test_expense_auto_categorized_when_category_missing(client: TestClient):
    created = post_expense(client, category=None, description="Netflix", amount=15.99)

    assert created["expense"]["category"] == "Entertainment"
    assert created["expense"]["subcategory"] == "Subscriptions"
    assert created["category_suggestion"]["confidence"] == pytest.approx(0.95)


def test_duplicate_expense_flagged(client: TestClient):
    post_expense(client, description="Coffee", amount=4.5, date="2025-03-10T08:00:00")

    second = post_expense(client, description="Coffee", amount=4.5, date="2025-03-10T08:10:00")

    assert "duplicate" in [a["type"] for a in second["anomalies"]]


def test_saved_expense_anomaly_recheck(client: TestClient):
    first = post_expense(client, description="Coffee", amount=4.5, date="2025-03-10T08:00:00")
    post_expense(client, description="Coffee", amount=4.5, date="2025-03-10T08:10:00")

    response = client.get(f"/v1/expenses/{first['expense']['id']}/anomalies", params={"user_id": USER})

    assert response.status_code == 200
    assert [a["type"] for a in response.json()["anomalies"]] == ["duplicate"]


def test_categorize_endpoint(client: TestClient):
    response = client.post("/v1/expenses/categorize", json={"description": "Uber trip", "amount": 18})

    assert response.status_code == 200
    assert response.json()["category"] == "Transportation"


def test_category_correction_endpoint(client: TestClient):
    response = client.post(
        "/v1/expenses/categorize/correction",
        json={"description": "Corner shop", "original_category": "Other", "corrected_category": "Food"},
    )
    assert response.status_code == 204


def test_rent_expense_derives_period_and_amount(client: TestClient, rent_expense_body: dict):
    response = client.post("/v1/expenses", json=rent_expense_body)

    assert response.status_code == 201
    details = response.json()["expense"]["payment_details"]
    assert details["rent_period"]["total_days"] == 28
    assert details["rent_period"]["total_weeks"] == 4.0
    assert details["calculated_amount"] == 800.0
    assert details["status"] == "paid"
    assert response.json()["rent_warnings"] == []


def test_rent_expense_invalid_period_rejected(client: TestClient, rent_expense_body: dict):
    rent_expense_body["payment_details"]["rent_period"] = {"start_date": "2025-02-28", "end_date": "2025-02-01"}

    response = client.post("/v1/expenses", json=rent_expense_body)

    assert response.status_code == 422
    assert "End date must be after start date" in response.json()["detail"]
    assert client.get("/v1/expenses", params={"user_id": USER}).json()["expenses"] == []


def test_rent_expense_without_rate_rejected(client: TestClient, rent_expense_body: dict):
    rent_expense_body["payment_details"]["weekly_rate"] = None

    response = client.post("/v1/expenses", json=rent_expense_body)

    assert response.status_code == 422
    assert response.json()["detail"] == ["Weekly rate must be greater than 0"]


def test_rent_suggest_continues_from_last_payment(client: TestClient, rent_expense_body: dict):
    client.post("/v1/expenses", json=rent_expense_body)

    response = client.post("/v1/rent/suggest", json={"user_id": USER, "payment_date": "2025-03-29"})

    assert response.status_code == 200
    data = response.json()
    assert data["start_date"] == "2025-03-01"
    assert data["end_date"] == "2025-03-28"
    assert data["is_sequential"] is True
    assert data["formatted_period"] == "Mar 1 - Mar 28, 2025"


def test_rent_calculate(client: TestClient):
    response = client.post(
        "/v1/rent/calculate",
        json={
            "payment_date": "2025-01-08",
            "start_date": "2025-01-01",
            "end_date": "2025-01-07",
            "weekly_rate": 150,
        },
    )

    assert response.status_code == 200
    assert response.json() == {
        "total_days": 7,
        "total_weeks": 1.0,
        "is_extended": False,
        "amount": 150.0,
        "formatted_period": "Jan 1 - Jan 7, 2025",
    }


def test_rent_validate(client: TestClient):
    response = client.post(
        "/v1/rent/validate",
        json={
            "payment_date": "2025-01-08",
            "start_date": "2025-01-01",
            "end_date": "2025-01-07",
            "weekly_rate": 500,
            "saved_rate": 200,
        },
    )

    data = response.json()
    assert data["is_valid"] is True
    assert len(data["warnings"]) == 1


def test_rent_insights(client: TestClient, rent_expense_body: dict):
    client.post("/v1/expenses", json=rent_expense_body)

    response = client.get("/v1/rent/insights", params={"user_id": USER, "monthly_income": 4000})

    data = response.json()
    assert data["has_data"] is True
    assert data["stats"]["payments_count"] == 1
    assert "Your rent is 20% of income - within recommended 30% range" in data["insights"]


def test_budgets_and_insights(client: TestClient):
    created = client.post(
        "/v1/budgets", json={"user_id": USER, "category": "Food", "amount": 400, "spent": 380}
    )
    assert created.status_code == 201
    budget = created.json()
    assert budget["percentage"] == 95.0
    assert budget["remaining"] == 20.0
    assert budget["is_warning"] is True
    assert budget["is_over_budget"] is False

    response = client.get("/v1/insights", params={"user_id": USER})

    assert response.status_code == 200
    assert "Food Budget Alert" in [i["title"] for i in response.json()["insights"]]


def test_forecast_without_history(client: TestClient):
    response = client.get("/v1/forecast", params={"user_id": USER})

    assert response.json() == {"predicted": 0.0, "confidence": 0.0, "trend": "stable"}


def test_summary(client: TestClient):
    client.post(
        "/v1/income",
        json={"user_id": USER, "amount": 2000, "source": "Employer", "type": "salary", "date": "2025-03-01T09:00:00"},
    )
    post_expense(client, amount=500)

    response = client.get(
        "/v1/summary",
        params={"user_id": USER, "start": "2025-03-01T00:00:00", "end": "2025-03-31T23:59:59"},
    )

    data = response.json()
    assert data["period"] == "2025-03-01 - 2025-03-31"
    assert data["net_savings"] == 1500.0
    assert data["savings_rate"] == 75.0
    assert data["expenses_by_category"] == {"Food": 500.0}


def test_summary_rejects_inverted_period(client: TestClient):
    response = client.get(
        "/v1/summary",
        params={"user_id": USER, "start": "2025-03-31T00:00:00", "end": "2025-03-01T00:00:00"},
    )
    assert response.status_code == 400


def test_exchange_rate_is_cached(client: TestClient, forex_calls: list):
    first = client.get("/v1/remittance/rate")
    second = client.get("/v1/remittance/rate")

    assert first.status_code == 200
    assert first.json()["sell"] == 134.05
    assert first.json()["is_fallback"] is False
    assert second.json()["sell"] == 134.05
    assert len(forex_calls) == 1


def test_remittance_quote(client: TestClient):
    response = client.post("/v1/remittance/quote", json={"amount": 200, "transfer_method": "western-union"})

    assert response.status_code == 200
    data = response.json()
    assert data["exchange_rate"] == 134.05
    assert data["transfer_fee"] == 10.0
    assert data["total_cost"] == 210.0
    assert data["local_amount"] == 26810.0
    assert data["formatted_local_amount"] == "₨26,810.00"
    assert data["formatted_total_cost"] == "$210.00"


def test_remittance_quote_rejects_unknown_method(client: TestClient):
    response = client.post("/v1/remittance/quote", json={"amount": 200, "transfer_method": "pigeon"})
    assert response.status_code == 422


def test_send_remittance(client: TestClient):
    recipient = client.post(
        "/v1/remittance/recipients",
        json={"user_id": USER, "name": "Aama", "relationship": "mother", "preferred_method": "western-union"},
    )
    assert recipient.status_code == 201
    recipient_id = recipient.json()["id"]

    response = client.post(
        "/v1/remittances",
        json={
            "user_id": USER,
            "recipient_id": recipient_id,
            "amount": 200,
            "transfer_method": "western-union",
            "purpose": "medical",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["recipient_name"] == "Aama"
    assert data["local_amount"] == 26810.0
    assert data["total_cost"] == 210.0
    assert data["status"] == "pending"
    assert data["expected_delivery"] is not None

    history = client.get("/v1/remittances", params={"user_id": USER}).json()
    assert [r["id"] for r in history["remittances"]] == [data["id"]]

    recipients = client.get("/v1/remittance/recipients", params={"user_id": USER}).json()
    assert recipients["recipients"][0]["name"] == "Aama"


def test_send_remittance_unknown_recipient(client: TestClient):
    body = {"user_id": USER, "amount": 50, "transfer_method": "moneygram"}

    not_found = client.post(
        "/v1/remittances", json={**body, "recipient_id": "00000000-0000-0000-0000-000000000000"}
    )
    invalid = client.post("/v1/remittances", json={**body, "recipient_id": "aama"})

    assert not_found.status_code == 404
    assert invalid.status_code == 400


def test_expenses_csv_report(client: TestClient):
    post_expense(client, description="Lunch, with team", amount=12.5)

    response = client.get("/v1/reports/expenses.csv", params={"user_id": USER})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="expenses-' in response.headers["content-disposition"]
    lines = response.text.split("\n")
    assert lines[0] == "date,category,subcategory,description,amount,paymentMethod,location,tags"
    assert lines[1] == '2025-03-10,Food,,"Lunch, with team",12.5,,,'


def test_budgets_csv_report(client: TestClient):
    client.post("/v1/budgets", json={"user_id": USER, "category": "Food", "amount": 400, "spent": 150})

    response = client.get("/v1/reports/budgets.csv", params={"user_id": USER})

    assert response.text.split("\n")[1] == "Food,400.0,150.0,250.0,monthly,No"


def test_duplicate_expense_flagged_with_utc_timestamps(client: TestClient):
    post_expense(client, description="Coffee", amount=4.5, date="2025-03-10T10:00:00Z")

    second = post_expense(client, description="Coffee", amount=4.5, date="2025-03-10T10:30:00Z")

    assert "duplicate" in [a["type"] for a in second["anomalies"]]


def test_offset_timestamp_stored_as_utc(client: TestClient):
    created = post_expense(client, date="2025-03-10T15:45:00+05:45")

    assert created["expense"]["date"] == "2025-03-10T10:00:00"


def test_offset_and_naive_timestamps_compare(client: TestClient):
    """Test an offset timestamp and a naive UTC one 20 minutes apart are duplicates"""
    post_expense(client, description="Coffee", amount=4.5, date="2025-03-10T10:00:00")

    second = post_expense(client, description="Coffee", amount=4.5, date="2025-03-10T16:05:00+05:45")

    assert "duplicate" in [a["type"] for a in second["anomalies"]]


def test_summary_with_utc_timestamps(client: TestClient):
    post_expense(client, amount=500, date="2025-03-10T18:00:00Z")

    response = client.get(
        "/v1/summary",
        params={"user_id": USER, "start": "2025-03-01T00:00:00Z", "end": "2025-03-31T00:00:00Z"},
    )

    assert response.status_code == 200
    assert response.json()["total_expenses"] == 500.0


def test_update_expense_rejects_null_required_field(client: TestClient):
    expense = post_expense(client)["expense"]

    response = client.put(f"/v1/expenses/{expense['id']}", params={"user_id": USER}, json={"amount": None})

    assert response.status_code == 422
    fetched = client.get(f"/v1/expenses/{expense['id']}", params={"user_id": USER})
    assert fetched.json()["amount"] == 25.0


def test_update_expense_clears_optional_field(client: TestClient):
    expense = post_expense(client, location="Kathmandu")["expense"]

    response = client.put(f"/v1/expenses/{expense['id']}", params={"user_id": USER}, json={"location": None})

    assert response.status_code == 200
    assert response.json()["location"] is None


def test_update_budget_rejects_null(client: TestClient):
    budget = client.post(
        "/v1/budgets", json={"user_id": USER, "category": "Food", "amount": 400, "spent": 150}
    ).json()

    response = client.put(f"/v1/budgets/{budget['id']}", params={"user_id": USER}, json={"spent": None})

    assert response.status_code == 422
    listed = client.get("/v1/budgets", params={"user_id": USER}).json()
    assert listed["budgets"][0]["spent"] == 150.0
