from datetime import date, timedelta


def _create_account(client, name="Checking", balance=0, currency="TND", account_type="Bank"):
    response = client.post("/accounts", json={
        "name": name, "account_type": account_type, "currency": currency, "balance": balance,
    })
    assert response.status_code == 200
    return response.json()["id"]


def _balances(client):
    return {a["id"]: a["balance"] for a in client.get("/accounts").json()["accounts"]}


def test_session_start_catches_up_once(client):
    account_id = _create_account(client)
    start = (date.today() - timedelta(days=70)).isoformat()
    created = client.post("/recurring", json={
        "account_id": account_id, "tx_type": "income", "amount": "100",
        "frequency": "monthly", "start_date": start, "description": "Salary",
    })
    assert created.status_code == 200

    first = client.post("/session/start").json()
    second = client.post("/session/start").json()

    assert first["processed"] is True
    assert first["created"] >= 2
    assert second == {"processed": True, "created": 0, "deactivated": 0}
    assert _balances(client)[account_id] == 100.0 * first["created"]

    transactions = client.get("/transactions", params={"account_id": account_id}).json()["transactions"]
    assert len(transactions) == first["created"]
    assert all(t["is_recurring"] for t in transactions)


def test_forecast_projects_future_recurring(client):
    account_id = _create_account(client, balance=1000)
    client.post("/recurring", json={
        "account_id": account_id, "tx_type": "expense", "amount": "50",
        "frequency": "monthly", "start_date": (date.today() + timedelta(days=5)).isoformat(),
    })

    present = client.get("/forecast").json()
    future = client.get("/forecast", params={"as_of": (date.today() + timedelta(days=20)).isoformat()}).json()

    assert present["accounts"][0]["predicted_balance"] == 1000.0
    assert future["accounts"][0]["predicted_balance"] == 950.0
    assert future["base_currency"] == "TND"
    assert future["total_predicted_net_worth"] == 950.0


def test_forecast_rejects_bad_date(client):
    assert client.get("/forecast", params={"as_of": "next week"}).status_code == 400


def test_budgets_are_allocated_in_target_date_order(client):
    account_id = _create_account(client, balance=1500)
    today = date.today()
    for name, days in (("Car", 40), ("Trip", 10)):
        response = client.post("/budgets", json={
            "name": name, "target_amount": "2000",
            "target_date": (today + timedelta(days=days)).isoformat(),
            "account_ids": [account_id],
        })
        assert response.status_code == 200

    budgets = client.get("/budgets").json()["budgets"]

    assert [b["name"] for b in budgets] == ["Trip", "Car"]
    assert budgets[0]["available_for_this_goal"] == 1500.0
    assert budgets[0]["suggested_saving"] == 50.0
    assert budgets[0]["saving_period"] == "day"
    assert budgets[1]["available_for_this_goal"] == 0.0
    assert budgets[1]["remaining_needed"] == 2000.0


def test_mark_budget_achieved(client):
    account_id = _create_account(client)
    budget_id = client.post("/budgets", json={
        "name": "Laptop", "target_amount": "800",
        "target_date": (date.today() + timedelta(days=90)).isoformat(),
        "account_ids": [account_id],
    }).json()["id"]

    assert client.post(f"/budgets/{budget_id}/achieved").json()["current_amount"] == 800.0
    [budget] = client.get("/budgets").json()["budgets"]
    assert budget["progress"] == 100.0
    assert client.post("/budgets/missing/achieved").status_code == 404


def test_budget_validation(client):
    payload = {"name": "Empty", "target_amount": "100", "target_date": date.today().isoformat()}

    assert client.post("/budgets", json={**payload, "account_ids": []}).status_code == 400
    assert client.post("/budgets", json={**payload, "account_ids": ["ghost"]}).status_code == 404


def test_transfer_and_delete_round_trip(client):
    checking = _create_account(client, "Checking", balance=500)
    wallet = _create_account(client, "Wallet", balance=0, account_type="Cash")

    transfer = client.post("/transfers", json={
        "from_account_id": checking, "to_account_id": wallet,
        "amount": "120", "date": date.today().isoformat(),
    }).json()
    assert _balances(client) == {checking: 380.0, wallet: 120.0}

    leg_id = transfer["legs"][1]["id"]
    assert len(client.delete(f"/transactions/{leg_id}").json()["deleted"]) == 2
    assert _balances(client) == {checking: 500.0, wallet: 0.0}
    assert client.delete(f"/transactions/{leg_id}").status_code == 404


def test_transaction_edit_adjusts_balance(client):
    account_id = _create_account(client, balance=100)
    body = {"account_id": account_id, "tx_type": "expense", "amount": "30",
            "date": date.today().isoformat(), "description": "Books"}
    tx_id = client.post("/transactions", json=body).json()["transaction"]["id"]

    client.put(f"/transactions/{tx_id}", json={**body, "amount": "10"})

    assert _balances(client)[account_id] == 90.0
    assert client.post("/transactions", json={**body, "amount": "0"}).status_code == 400


def test_report_for_current_month(client):
    account_id = _create_account(client, balance=100)
    client.post("/transactions", json={
        "account_id": account_id, "tx_type": "expense", "amount": "40",
        "date": date.today().isoformat(), "description": "Groceries",
    })

    report = client.get("/reports", params={"period": "month"}).json()

    assert report["total_expenses"] == 40.0
    assert report["expense_by_category"] == {"Uncategorized": 40.0}
    assert report["base_currency"] == "TND"


def test_report_rejects_unknown_period(client):
    assert client.get("/reports", params={"period": "decade"}).status_code == 400
