import pytest


def add_expense(client, budget_id, **overrides):
    payload = {
        "budgetId": budget_id,
        "name": "Groceries",
        "category": "Food & Dining",
        "amount": 1200,
        "date": "2024-05-06",
    }
    payload.update(overrides)
    response = client.post("/api/expenses", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["expense"]


class TestExpenses:
    def test_create_expense(self, auth_client, budget):
        expense = add_expense(auth_client, budget["id"], notes="  weekly run  ")
        assert expense["budgetId"] == budget["id"]
        assert expense["budget"]["monthName"] == "May"
        assert expense["amount"] == 1200
        assert expense["notes"] == "weekly run"

    def test_create_requires_owned_budget(self, auth_client):
        response = auth_client.post("/api/expenses", json={
            "budgetId": 999, "name": "Tea", "category": "Other", "amount": 20, "date": "2024-05-06",
        })
        assert response.status_code == 404
        assert response.json()["message"] == "Budget not found"

    @pytest.mark.parametrize("overrides", [
        {"amount": 0},
        {"amount": -50},
        {"category": "Gambling"},
        {"name": ""},
        {"name": "x" * 101},
        {"notes": "n" * 501},
        {"date": "yesterday"},
    ])
    def test_create_validation(self, auth_client, budget, overrides):
        payload = {
            "budgetId": budget["id"], "name": "Groceries", "category": "Food & Dining",
            "amount": 1200, "date": "2024-05-06",
        }
        payload.update(overrides)
        response = auth_client.post("/api/expenses", json=payload)
        assert response.status_code == 400
        assert response.json()["message"] == "Validation failed"

    def test_list_filters(self, auth_client, budget):
        add_expense(auth_client, budget["id"], name="Early", date="2024-05-01")
        add_expense(auth_client, budget["id"], name="Bus", category="Transportation", date="2024-05-10")
        add_expense(auth_client, budget["id"], name="Late", date="2024-05-20")

        names = [e["name"] for e in auth_client.get("/api/expenses").json()["expenses"]]
        assert names == ["Late", "Bus", "Early"]

        response = auth_client.get("/api/expenses", params={"category": "Food & Dining"})
        assert [e["name"] for e in response.json()["expenses"]] == ["Late", "Early"]

        response = auth_client.get("/api/expenses", params={"startDate": "2024-05-10", "endDate": "2024-05-20"})
        assert [e["name"] for e in response.json()["expenses"]] == ["Late", "Bus"]

        response = auth_client.get("/api/expenses", params={"budgetId": budget["id"]})
        assert len(response.json()["expenses"]) == 3

    def test_list_unknown_budget(self, auth_client):
        assert auth_client.get("/api/expenses", params={"budgetId": 4242}).status_code == 404

    def test_partial_update(self, auth_client, budget):
        expense = add_expense(auth_client, budget["id"], notes="first")
        response = auth_client.put(f"/api/expenses/{expense['id']}", json={"amount": 999.99, "notes": None})
        assert response.status_code == 200
        updated = response.json()["expense"]
        assert updated["amount"] == 999.99
        assert updated["name"] == "Groceries"
        assert updated["notes"] is None

    def test_update_rejects_zero_amount(self, auth_client, budget):
        expense = add_expense(auth_client, budget["id"])
        response = auth_client.put(f"/api/expenses/{expense['id']}", json={"amount": 0})
        assert response.status_code == 400

    def test_get_and_delete(self, auth_client, budget):
        expense = add_expense(auth_client, budget["id"])
        assert auth_client.get(f"/api/expenses/{expense['id']}").status_code == 200
        assert auth_client.delete(f"/api/expenses/{expense['id']}").status_code == 200
        assert auth_client.get(f"/api/expenses/{expense['id']}").status_code == 404
        assert auth_client.delete(f"/api/expenses/{expense['id']}").status_code == 404

    def test_export_csv(self, auth_client, budget):
        add_expense(auth_client, budget["id"], name="Rent", category="Bills & Utilities", amount=15000)
        response = auth_client.get("/api/expenses/export")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        lines = response.text.strip().splitlines()
        assert lines[0] == "Date,Name,Category,Amount,Budget,Notes"
        assert lines[1] == "2024-05-06,Rent,Bills & Utilities,15000.0,May 2024,"


class TestExpenseOwnership:
    def test_other_users_expense_is_not_found(self, auth_client, other_client, budget):
        expense = add_expense(auth_client, budget["id"])
        path = f"/api/expenses/{expense['id']}"

        assert other_client.get(path).status_code == 404
        assert other_client.put(path, json={"amount": 1}).status_code == 404
        assert other_client.delete(path).status_code == 404
        assert other_client.get("/api/expenses").json()["expenses"] == []

        # untouched for the owner
        assert auth_client.get(path).json()["expense"]["amount"] == 1200

    def test_cannot_add_to_other_users_budget(self, auth_client, other_client, budget):
        response = other_client.post("/api/expenses", json={
            "budgetId": budget["id"], "name": "Tea", "category": "Other", "amount": 20, "date": "2024-05-06",
        })
        assert response.status_code == 404
        assert response.json()["message"] == "Budget not found"
        assert other_client.get("/api/expenses", params={"budgetId": budget["id"]}).status_code == 404
        assert auth_client.get("/api/expenses").json()["expenses"] == []
