"""
API tests for transaction endpoints.

Tests cover:
- Create BUY/SELL/DEPOSIT/WITHDRAWAL with cash adjustment
- List per account
- Update (cash unchanged) and delete (cash restored)
- Validation and not-found errors
"""

from decimal import Decimal

from fastapi.testclient import TestClient


def _active_account(client: TestClient) -> dict:
    data = client.get("/accounts").json()
    return next(a for a in data["accounts"] if a["id"] == data["active_account_id"])


def _buy(client: TestClient, ticker: str = "aapl", shares: str = "10", price: str = "150"):
    return client.post("/transactions", json={
        "kind": "BUY",
        "ticker": ticker,
        "shares": shares,
        "price": price,
        "date": "2024-01-15",
    })


# =============================================================================
# CREATE TESTS
# =============================================================================


class TestCreateTransactionAPI:
    """Tests for POST /transactions."""

    def test_buy_debits_cash(self, client: TestClient):
        """
        GIVEN the default account with 10000 cash
        WHEN I POST a BUY of 10 AAPL @ 150
        THEN response is 201 and cash is 8500
        """
        response = _buy(client)

        assert response.status_code == 201
        data = response.json()
        assert data["ticker"] == "AAPL"
        assert data["kind"] == "BUY"
        assert Decimal(data["amount"]) == Decimal("1500")
        assert data["id"]
        assert Decimal(_active_account(client)["cash_balance"]) == Decimal("8500")

    def test_deposit_with_amount(self, client: TestClient):
        response = client.post("/transactions", json={"kind": "DEPOSIT", "amount": "500"})

        assert response.status_code == 201
        data = response.json()
        assert data["ticker"] == ""
        assert Decimal(data["shares"]) == Decimal("1")
        assert Decimal(_active_account(client)["cash_balance"]) == Decimal("10500")

    def test_withdrawal_can_overdraw(self, client: TestClient):
        response = client.post("/transactions", json={"kind": "WITHDRAWAL", "amount": "12000"})

        assert response.status_code == 201
        assert Decimal(_active_account(client)["cash_balance"]) == Decimal("-2000")

    def test_buy_without_ticker_returns_400(self, client: TestClient):
        response = client.post("/transactions", json={"kind": "BUY", "shares": "1", "price": "1"})

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_buy_without_shares_returns_400(self, client: TestClient):
        response = client.post("/transactions", json={"kind": "BUY", "ticker": "AAPL", "price": "1"})

        assert response.status_code == 400

    def test_unknown_kind_returns_422(self, client: TestClient):
        response = client.post("/transactions", json={"kind": "DIVIDEND", "amount": "5"})

        assert response.status_code == 422

    def test_unknown_account_returns_404(self, client: TestClient):
        response = client.post("/transactions", json={
            "account_id": "missing",
            "kind": "DEPOSIT",
            "amount": "5",
        })

        assert response.status_code == 404


# =============================================================================
# LIST TESTS
# =============================================================================


class TestListTransactionsAPI:
    """Tests for GET /transactions."""

    def test_list_defaults_to_active_account(self, client: TestClient):
        _buy(client)
        _buy(client, ticker="MSFT", shares="1", price="300")

        response = client.get("/transactions")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert data["account_id"] == _active_account(client)["id"]
        assert [t["ticker"] for t in data["transactions"]] == ["AAPL", "MSFT"]

    def test_list_other_account(self, client: TestClient):
        first_id = _active_account(client)["id"]
        _buy(client)
        client.post("/accounts", json={"name": "Second"})

        assert client.get("/transactions").json()["count"] == 0
        assert client.get("/transactions", params={"account_id": first_id}).json()["count"] == 1


# =============================================================================
# UPDATE / DELETE TESTS
# =============================================================================


class TestModifyTransactionAPI:
    """Tests for PATCH and DELETE /transactions/{id}."""

    def test_update_does_not_change_cash(self, client: TestClient):
        """
        GIVEN a BUY of 10 AAPL @ 150 (cash 8500)
        WHEN the price is edited to 100
        THEN the transaction changes and cash stays 8500
        """
        txn_id = _buy(client).json()["id"]

        response = client.patch(f"/transactions/{txn_id}", json={"price": "100", "notes": "typo"})

        assert response.status_code == 200
        assert Decimal(response.json()["price"]) == Decimal("100")
        assert response.json()["notes"] == "typo"
        assert Decimal(_active_account(client)["cash_balance"]) == Decimal("8500")

    def test_update_negative_shares_returns_422(self, client: TestClient):
        txn_id = _buy(client).json()["id"]

        response = client.patch(f"/transactions/{txn_id}", json={"shares": "-1"})

        assert response.status_code == 422

    def test_delete_restores_cash(self, client: TestClient):
        txn_id = _buy(client).json()["id"]

        response = client.delete(f"/transactions/{txn_id}")

        assert response.status_code == 204
        assert Decimal(_active_account(client)["cash_balance"]) == Decimal("10000")
        assert client.get("/transactions").json()["count"] == 0

    def test_delete_unknown_returns_404(self, client: TestClient):
        response = client.delete("/transactions/missing")

        assert response.status_code == 404
