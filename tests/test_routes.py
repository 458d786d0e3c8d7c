import pytest


HEADERS = {"X-Scope-Key": "group-a"}


def _cells(body):
    return {cell["date"]: cell for row in body["matrix"] for cell in row}


def test_get_month_returns_grid(client):
    response = client.get("/api/calendar", params={"year": 2024, "month": 2}, headers=HEADERS)

    assert response.status_code == 200
    body = response.json()
    assert (body["year"], body["month"]) == (2024, 2)
    assert len(body["matrix"]) == 6
    assert all(len(row) == 7 for row in body["matrix"])
    feb = [c for c in _cells(body).values() if c["is_current_month"]]
    assert len(feb) == 29
    assert all(c["bills"] == [] and c["paydays"] == [] for c in feb)


def test_get_month_rejects_bad_month(client):
    response = client.get("/api/calendar", params={"year": 2024, "month": 13})
    assert response.status_code == 400


@pytest.mark.parametrize("year,month", [(1, 1), (9999, 12), (10000, 1)])
def test_get_month_rejects_years_outside_the_date_range(client, year, month):
    response = client.get("/api/calendar", params={"year": year, "month": month})
    assert response.status_code == 400
    assert response.json()["detail"] == "Year is out of range"

    response = client.get("/api/calendar/summary", params={"year": year, "month": month})
    assert response.status_code == 400


def test_get_month_edge_of_supported_range(client):
    assert client.get("/api/calendar", params={"year": 9998, "month": 12}).status_code == 200
    assert client.get("/api/calendar", params={"year": 2, "month": 1}).status_code == 200


def test_day_and_recurring_flow(client):
    response = client.post("/api/calendar/day", headers=HEADERS, json={
        "date": "2024-03-05",
        "bills": [{"name": "Power", "amount": 50}],
    })
    assert response.status_code == 200
    assert response.json() == {"message": "Day updated", "date": "2024-03-05"}

    response = client.post("/api/calendar/recurring", headers=HEADERS, json={
        "date": "2024-03-01",
        "type": "payday",
        "name": "Salary",
        "amount": 1000,
        "cadence": "biweekly",
        "forever": True,
    })
    assert response.status_code == 200
    rule = response.json()["rule"]
    assert rule["id"].startswith("rec_")
    assert rule["exceptions"] == []

    cells = _cells(client.get("/api/calendar", params={"year": 2024, "month": 3}, headers=HEADERS).json())
    assert cells["2024-03-05"]["bills"] == [{"name": "Power", "amount": 50.0}]
    assert cells["2024-03-15"]["paydays"] == [{"name": "Salary", "amount": 1000.0, "recurring_id": rule["id"]}]

    response = client.get("/api/forecast/balance", headers=HEADERS,
                          params={"date": "2024-03-10", "base_funds": "0", "base_savings": "0"})
    assert response.status_code == 200
    assert response.json() == {"date": "2024-03-10", "funds": 950.0, "savings": 0.0}

    response = client.post("/api/calendar/recurring/delete", headers=HEADERS, json={
        "recurring_id": rule["id"], "date": "2024-03-15", "scope": "one",
    })
    assert response.status_code == 200
    cells = _cells(client.get("/api/calendar", params={"year": 2024, "month": 3}, headers=HEADERS).json())
    assert cells["2024-03-15"]["paydays"] == []
    assert cells["2024-03-29"]["paydays"][0]["recurring_id"] == rule["id"]


def test_create_recurring_validation(client):
    base = {"date": "2024-03-01", "type": "bill", "name": "Rent", "amount": 900, "cadence": "monthly"}

    response = client.post("/api/calendar/recurring", json={**base, "cadence": "daily", "forever": True})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid cadence"

    response = client.post("/api/calendar/recurring", json={**base, "months_count": 0})
    assert response.status_code == 400

    response = client.post("/api/calendar/recurring", json={**base, "date": "tomorrow", "forever": True})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid date format"

    response = client.post("/api/calendar/recurring", json={**base, "amount": "99999999999", "forever": True})
    assert response.status_code == 400
    assert response.json()["detail"] == "Amount is out of range"


def test_delete_unknown_rule_is_404(client):
    response = client.post("/api/calendar/recurring/delete", json={
        "recurring_id": "rec_nope", "date": "2024-03-15", "scope": "all",
    })
    assert response.status_code == 404


def test_delete_requires_valid_scope(client):
    response = client.post("/api/calendar/recurring/delete", json={
        "recurring_id": "rec_nope", "date": "2024-03-15", "scope": "some",
    })
    assert response.status_code == 400


def test_balance_rejects_bad_inputs(client):
    assert client.get("/api/forecast/balance", params={"date": "03/10/2024"}).status_code == 400
    assert client.get("/api/forecast/balance",
                      params={"date": "2024-03-10", "base_funds": "lots"}).status_code == 400


def test_between_paydays_endpoint(client):
    client.post("/api/calendar/recurring", headers=HEADERS, json={
        "date": "2024-03-01", "type": "payday", "name": "Salary", "amount": 1000,
        "cadence": "biweekly", "forever": True,
    })

    body = client.get("/api/forecast/between-paydays", headers=HEADERS,
                      params={"date": "2024-03-05", "base_funds": "0"}).json()
    assert body["available"] is True
    assert body["next_payday_date"] == "2024-03-15"
    assert body["projected_balance"] == 2000.0

    body = client.get("/api/forecast/between-paydays", params={"date": "2024-03-05"}).json()
    assert body == {
        "available": False,
        "reference_date": "2024-03-05",
        "next_payday_date": None,
        "next_payday_amount": None,
        "current_funds": None,
        "bills_until_next": None,
        "purchases_until_next": None,
        "savings_until_next": None,
        "projected_balance": None,
    }


def test_month_summary_endpoint(client):
    client.post("/api/calendar/day", headers=HEADERS, json={
        "date": "2024-03-05", "bills": [{"name": "Power", "amount": 50}],
    })
    body = client.get("/api/calendar/summary", headers=HEADERS,
                      params={"year": 2024, "month": 3, "initial_funds": "$100"}).json()
    assert body["total_bills"] == 50.0
    assert body["leftover_before_purchases"] == 50.0
    assert body["end_of_month_funds"] == 50.0


def test_between_paydays_on_last_day_of_calendar(client):
    body = client.get("/api/forecast/between-paydays", params={"date": "9999-12-31"}).json()
    assert body["available"] is False
    assert body["reference_date"] == "9999-12-31"
