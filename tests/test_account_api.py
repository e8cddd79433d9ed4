def _seed(client, headers):
    client.post(
        "/transactions",
        json={
            "prompt": "Sold laptops",
            "analysis": {"category": "sales", "description": "Laptops", "amount": 1000, "party_name": None},
        },
        headers=headers,
    )
    client.post(
        "/invoices",
        json={
            "customer_name": "ABC Corp",
            "invoice_date": "2024-04-15",
            "items": [{"description": "Laptop", "amount": 1000}],
        },
        headers=headers,
    )
    client.put("/settings", json={"currency": "USD"}, headers=headers)


def test_delete_account_data(client, auth_headers, other_auth_headers):
    _seed(client, auth_headers)
    _seed(client, other_auth_headers)

    assert client.delete("/account", headers=auth_headers).status_code == 204

    assert client.get("/transactions", headers=auth_headers).json()["transactions"] == []
    assert client.get("/invoices", headers=auth_headers).json()["invoices"] == []
    assert client.get("/settings", headers=auth_headers).json()["currency"] == "INR"

    assert len(client.get("/transactions", headers=other_auth_headers).json()["transactions"]) == 1
    assert len(client.get("/invoices", headers=other_auth_headers).json()["invoices"]) == 1
    assert client.get("/settings", headers=other_auth_headers).json()["currency"] == "USD"


def test_delete_account_with_no_data(client, auth_headers):
    assert client.delete("/account", headers=auth_headers).status_code == 204


def test_delete_account_requires_auth(client):
    assert client.delete("/account").status_code == 401
