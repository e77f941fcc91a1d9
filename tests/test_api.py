"""End-to-end tests of the HTTP routes."""

from datetime import datetime, timedelta, timezone

import pytest


def iso(value: datetime) -> str:
    return value.isoformat()


def past() -> str:
    return iso(datetime.now(timezone.utc) - timedelta(days=2))


@pytest.fixture
def person_json(client):
    response = client.post("/api/persons", json={"idNumber": "9001", "name": "Sipho", "surname": "Mokoena"})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def account_json(client, person_json):
    response = client.post("/api/accounts", json={"personCode": person_json["code"], "accountNumber": "CHQ-1"})
    assert response.status_code == 201
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


class TestPersons:
    def test_create_and_get(self, client, person_json, account_json):
        response = client.get(f"/api/persons/{person_json['code']}")

        assert response.status_code == 200
        body = response.json()
        assert body["idNumber"] == "9001"
        assert body["accounts"][0]["accountNumber"] == "CHQ-1"
        assert body["accounts"][0]["isClosed"] is False

    def test_missing_person_is_empty_404(self, client):
        response = client.get("/api/persons/999")

        assert response.status_code == 404
        assert response.content == b""

    def test_duplicate_is_400_with_message(self, client, person_json):
        response = client.post("/api/persons", json={"idNumber": "9001"})

        assert response.status_code == 400
        assert response.json() == {
            "statusCode": 400,
            "message": "A person with the same ID number already exists.",
        }

    def test_missing_id_number_is_400(self, client):
        response = client.post("/api/persons", json={"name": "No ID"})

        assert response.status_code == 400
        assert "idNumber" in response.json()["message"]

    def test_update_route_code_must_match_body(self, client, person_json):
        response = client.put(
            f"/api/persons/{person_json['code']}",
            json={"code": person_json["code"] + 1, "idNumber": "9001"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "The route code and body code must match."

    def test_update(self, client, person_json):
        code = person_json["code"]
        response = client.put(f"/api/persons/{code}", json={"code": code, "idNumber": "9001", "surname": "Dlamini"})

        assert response.status_code == 200
        assert response.json()["surname"] == "Dlamini"

    def test_update_missing_is_404(self, client):
        response = client.put("/api/persons/999", json={"code": 999, "idNumber": "1"})

        assert response.status_code == 404

    def test_delete(self, client, person_json):
        assert client.delete(f"/api/persons/{person_json['code']}").status_code == 204
        assert client.delete(f"/api/persons/{person_json['code']}").status_code == 404

    def test_delete_with_open_account_is_400(self, client, person_json, account_json):
        response = client.delete(f"/api/persons/{person_json['code']}")

        assert response.status_code == 400

    def test_search(self, client):
        for i in range(25):
            client.post("/api/persons", json={"idNumber": f"S{i}", "surname": "Naidoo"})

        response = client.get("/api/persons", params={"surname": "naid", "pageNumber": 1, "pageSize": 50})

        body = response.json()
        assert response.status_code == 200
        assert body["pageSize"] == 10
        assert body["totalCount"] == 25
        assert body["totalPages"] == 3
        assert len(body["items"]) == 10

    def test_search_page_zero_is_400(self, client):
        response = client.get("/api/persons", params={"pageNumber": 0})

        assert response.status_code == 400

    def test_search_page_beyond_storage_range_is_400(self, client):
        response = client.get("/api/persons", params={"pageNumber": 10**18})

        assert response.status_code == 400
        assert response.json() == {"statusCode": 400, "message": "The page number is too large."}

    def test_list_all(self, client, person_json):
        assert [p["code"] for p in client.get("/api/persons/all").json()] == [person_json["code"]]


class TestAccounts:
    def test_lookups(self, client, person_json, account_json):
        code = account_json["code"]

        assert client.get(f"/api/accounts/{code}").json()["outstandingBalance"] == "0"
        assert client.get("/api/accounts/by-number/CHQ-1").json()["code"] == code
        assert client.get("/api/accounts/by-number/NOPE").status_code == 404
        assert [a["code"] for a in client.get(f"/api/accounts/by-person/{person_json['code']}").json()] == [code]

    def test_unknown_person_is_400(self, client):
        response = client.post("/api/accounts", json={"personCode": 999, "accountNumber": "X"})

        assert response.status_code == 400
        assert response.json()["message"] == "The person does not exist."

    def test_update(self, client, person_json, account_json):
        code = account_json["code"]
        response = client.put(
            f"/api/accounts/{code}",
            json={"code": code, "personCode": person_json["code"], "accountNumber": "CHQ-2"},
        )

        assert response.status_code == 200
        assert response.json()["accountNumber"] == "CHQ-2"

    def test_update_route_code_must_match_body(self, client, person_json, account_json):
        response = client.put(
            f"/api/accounts/{account_json['code']}",
            json={"code": 0, "personCode": person_json["code"], "accountNumber": "CHQ-2"},
        )

        assert response.status_code == 400

    def test_close_and_reopen(self, client, account_json):
        code = account_json["code"]

        assert client.post(f"/api/accounts/{code}/close").json()["isClosed"] is True
        assert client.post(f"/api/accounts/{code}/close").status_code == 400
        assert client.post(f"/api/accounts/{code}/reopen").json()["isClosed"] is False
        assert client.post(f"/api/accounts/{code}/reopen").status_code == 400
        assert client.post("/api/accounts/999/close").status_code == 404


class TestTransactions:
    def test_post_update_and_balance(self, client, account_json):
        account_code = account_json["code"]
        response = client.post(
            "/api/transactions",
            json={"accountCode": account_code, "transactionDate": past(), "amount": 150, "description": "Deposit"},
        )
        assert response.status_code == 201
        created = response.json()
        assert created["captureDate"]

        response = client.put(
            f"/api/transactions/{created['code']}",
            json={**created, "amount": 200},
        )
        assert response.status_code == 200

        account = client.get(f"/api/accounts/{account_code}").json()
        assert account["outstandingBalance"] == "200"
        assert [t["amount"] for t in account["transactions"]] == ["200"]
        assert len(client.get(f"/api/transactions/by-account/{account_code}").json()) == 1

    def test_large_amount_is_exact_on_the_wire(self, client, account_json):
        account_code = account_json["code"]
        amount = "123456789012345.6789"
        response = client.post(
            "/api/transactions",
            json={"accountCode": account_code, "transactionDate": past(), "amount": amount, "description": "Bulk"},
        )
        assert response.status_code == 201
        assert response.json()["amount"] == amount

        account = client.get(f"/api/accounts/{account_code}").json()
        assert account["outstandingBalance"] == amount
        assert [t["amount"] for t in account["transactions"]] == [amount]

    def test_amount_beyond_four_decimal_places_is_400(self, client, account_json):
        response = client.post(
            "/api/transactions",
            json={"accountCode": account_json["code"], "transactionDate": past(), "amount": "1.23456", "description": "x"},
        )

        assert response.status_code == 400
        assert client.get(f"/api/transactions/by-account/{account_json['code']}").json() == []

    def test_zero_amount_is_400(self, client, account_json):
        response = client.post(
            "/api/transactions",
            json={"accountCode": account_json["code"], "transactionDate": past(), "amount": 0, "description": "x"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "The transaction amount cannot be zero."

    def test_future_date_is_400(self, client, account_json):
        tomorrow = iso(datetime.now(timezone.utc) + timedelta(days=1))
        response = client.post(
            "/api/transactions",
            json={"accountCode": account_json["code"], "transactionDate": tomorrow, "amount": 5, "description": "x"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "The transaction date cannot be in the future."

    def test_closed_account_is_400(self, client, account_json):
        client.post(f"/api/accounts/{account_json['code']}/close")

        response = client.post(
            "/api/transactions",
            json={"accountCode": account_json["code"], "transactionDate": past(), "amount": 5, "description": "x"},
        )

        assert response.status_code == 400
        assert client.get(f"/api/transactions/by-account/{account_json['code']}").json() == []

    def test_missing_transaction_is_404(self, client, account_json):
        assert client.get("/api/transactions/999").status_code == 404
        response = client.put(
            "/api/transactions/999",
            json={"code": 999, "accountCode": account_json["code"], "transactionDate": past(), "amount": 1, "description": "x"},
        )
        assert response.status_code == 404

    def test_update_route_code_must_match_body(self, client, account_json):
        response = client.put(
            "/api/transactions/1",
            json={"code": 2, "accountCode": account_json["code"], "transactionDate": past(), "amount": 1, "description": "x"},
        )

        assert response.status_code == 400
