"""
API tests for account endpoints.

Tests cover:
- Owner header handling (422 missing, 400 blank)
- Bootstrap of the default account on first request
- Create, rename, activate, delete
- Cash edits outside the ledger
- Error responses (400, 404, 422)
"""

from decimal import Decimal

from fastapi.testclient import TestClient


def _accounts(client: TestClient) -> dict:
    response = client.get("/accounts")
    assert response.status_code == 200
    return response.json()


# =============================================================================
# OWNER HEADER TESTS
# =============================================================================


class TestOwnerHeader:
    """Tests for the X-Owner-Id header."""

    def test_missing_owner_header_returns_422(self, client: TestClient):
        client.headers.pop("X-Owner-Id")

        response = client.get("/accounts")

        assert response.status_code == 422

    def test_blank_owner_header_returns_400(self, client: TestClient):
        response = client.get("/accounts", headers={"X-Owner-Id": ""})

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_owners_are_isolated(self, client: TestClient):
        client.post("/accounts", json={"name": "Mine"})

        response = client.get("/accounts", headers={"X-Owner-Id": "owner-2"})

        assert [a["name"] for a in response.json()["accounts"]] == ["My First Account"]


# =============================================================================
# LIST / CREATE TESTS
# =============================================================================


class TestListAndCreateAPI:
    """Tests for GET and POST /accounts."""

    def test_first_request_bootstraps_default_account(self, client: TestClient):
        """
        GIVEN a new owner
        WHEN I GET /accounts
        THEN exactly one active "My First Account" with 10000 cash is returned
        """
        data = _accounts(client)

        assert data["count"] == 1
        account = data["accounts"][0]
        assert account["name"] == "My First Account"
        assert Decimal(account["cash_balance"]) == Decimal("10000")
        assert account["is_active"] is True
        assert data["active_account_id"] == account["id"]

    def test_create_account_success(self, client: TestClient):
        """
        GIVEN the default account
        WHEN I POST /accounts with a name and starting cash
        THEN response is 201 and the new account is active
        """
        response = client.post("/accounts", json={"name": "Roth IRA", "cash_balance": "2500"})

        assert response.status_code == 201
        created = response.json()
        assert created["name"] == "Roth IRA"
        assert created["is_active"] is True
        assert created["transaction_count"] == 0
        assert _accounts(client)["active_account_id"] == created["id"]

    def test_create_account_empty_name_returns_422(self, client: TestClient):
        response = client.post("/accounts", json={"name": ""})

        assert response.status_code == 422

    def test_create_account_negative_cash_returns_422(self, client: TestClient):
        response = client.post("/accounts", json={"name": "X", "cash_balance": "-1"})

        assert response.status_code == 422


# =============================================================================
# RENAME / ACTIVATE / DELETE TESTS
# =============================================================================


class TestModifyAccountAPI:
    """Tests for rename, activate and delete."""

    def test_rename_account(self, client: TestClient):
        account_id = _accounts(client)["active_account_id"]

        response = client.patch(f"/accounts/{account_id}", json={"name": "Taxable"})

        assert response.status_code == 200
        assert response.json()["name"] == "Taxable"

    def test_rename_unknown_account_returns_404(self, client: TestClient):
        _accounts(client)

        response = client.patch("/accounts/missing", json={"name": "X"})

        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

    def test_activate_account(self, client: TestClient):
        first_id = _accounts(client)["active_account_id"]
        client.post("/accounts", json={"name": "Second"})

        response = client.post(f"/accounts/{first_id}/activate")

        assert response.status_code == 200
        assert response.json()["is_active"] is True
        assert _accounts(client)["active_account_id"] == first_id

    def test_delete_only_account_returns_400(self, client: TestClient):
        """
        GIVEN an owner with exactly one account
        WHEN I DELETE it
        THEN response is 400 with LAST_ACCOUNT and the account remains
        """
        account_id = _accounts(client)["active_account_id"]

        response = client.delete(f"/accounts/{account_id}")

        assert response.status_code == 400
        assert response.json()["error"] == "LAST_ACCOUNT"
        assert _accounts(client)["count"] == 1

    def test_delete_active_account_selects_first(self, client: TestClient):
        first_id = _accounts(client)["active_account_id"]
        second_id = client.post("/accounts", json={"name": "Second"}).json()["id"]

        response = client.delete(f"/accounts/{second_id}")

        assert response.status_code == 204
        data = _accounts(client)
        assert data["count"] == 1
        assert data["active_account_id"] == first_id

    def test_delete_unknown_account_returns_404(self, client: TestClient):
        _accounts(client)

        response = client.delete("/accounts/missing")

        assert response.status_code == 404


# =============================================================================
# CASH TESTS
# =============================================================================


class TestCashAPI:
    """Tests for cash edits that bypass the ledger."""

    def test_set_deposit_withdraw(self, client: TestClient):
        """
        GIVEN the default account
        WHEN cash is set to 1000, then 250 deposited and 100 withdrawn
        THEN cash is 1150 and no transaction was recorded
        """
        account_id = _accounts(client)["active_account_id"]

        client.put(f"/accounts/{account_id}/cash", json={"cash_balance": "1000"})
        client.post(f"/accounts/{account_id}/deposit", json={"amount": "250"})
        response = client.post(f"/accounts/{account_id}/withdraw", json={"amount": "100"})

        assert response.status_code == 200
        assert Decimal(response.json()["cash_balance"]) == Decimal("1150")
        assert response.json()["transaction_count"] == 0

    def test_non_positive_deposit_returns_422(self, client: TestClient):
        account_id = _accounts(client)["active_account_id"]

        response = client.post(f"/accounts/{account_id}/deposit", json={"amount": "0"})

        assert response.status_code == 422
