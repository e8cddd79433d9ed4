def _invoice_body(**overrides):
    body = {
        "customer_name": "ABC Corp",
        "customer_email": "accounts@abc.example",
        "invoice_date": "2024-04-15",
        "due_date": "2024-05-15",
        "tax_rate": 18,
        "notes": "Thanks for your business",
        "items": [
            {"description": "Laptop", "quantity": 2, "unit_price": 40000, "amount": 80000},
            {"description": "Setup", "quantity": 1, "unit_price": 2000, "amount": 2000},
        ],
    }
    body.update(overrides)
    return body


def _create(client, headers, **overrides):
    response = client.post("/invoices", json=_invoice_body(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_requires_auth(client):
    assert client.get("/invoices").status_code == 401


def test_first_invoice_number(client, auth_headers):
    response = client.get("/invoices/next-number", headers=auth_headers)
    assert response.json() == {"invoice_number": "INV-001"}


def test_create_invoice_computes_totals(client, auth_headers, user_id):
    invoice = _create(client, auth_headers)

    assert invoice["user_id"] == user_id
    assert invoice["invoice_number"] == "INV-001"
    assert invoice["status"] == "draft"
    assert invoice["subtotal"] == 82000
    assert invoice["tax_rate"] == 18
    assert invoice["tax_amount"] == 14760
    assert invoice["total"] == 96760
    assert [item["description"] for item in invoice["items"]] == ["Laptop", "Setup"]
    assert all(item["invoice_id"] == invoice["id"] for item in invoice["items"])


def test_numbers_increment_per_user(client, auth_headers, other_auth_headers):
    _create(client, auth_headers)
    second = _create(client, auth_headers)
    assert second["invoice_number"] == "INV-002"
    assert client.get("/invoices/next-number", headers=auth_headers).json()["invoice_number"] == "INV-003"
    assert client.get("/invoices/next-number", headers=other_auth_headers).json()["invoice_number"] == "INV-001"


def test_invalid_items_rejected(client, auth_headers):
    body = _invoice_body(items=[{"description": "", "quantity": 0, "amount": -1}])
    assert client.post("/invoices", json=body, headers=auth_headers).status_code == 422


def test_get_list_and_filter(client, auth_headers, other_auth_headers):
    first = _create(client, auth_headers)
    second = _create(client, auth_headers, customer_name="XYZ Traders")

    response = client.get(f"/invoices/{first['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert len(response.json()["items"]) == 2

    listed = client.get("/invoices", headers=auth_headers).json()["invoices"]
    assert {inv["id"] for inv in listed} == {first["id"], second["id"]}

    client.patch(f"/invoices/{second['id']}/status", json={"status": "sent"}, headers=auth_headers)
    sent = client.get("/invoices", params={"status": "sent"}, headers=auth_headers).json()["invoices"]
    assert [inv["id"] for inv in sent] == [second["id"]]
    assert len(client.get("/invoices", params={"status": "all"}, headers=auth_headers).json()["invoices"]) == 2

    assert client.get(f"/invoices/{first['id']}", headers=other_auth_headers).status_code == 404
    assert client.get("/invoices", headers=other_auth_headers).json()["invoices"] == []


def test_update_status(client, auth_headers):
    invoice = _create(client, auth_headers)

    response = client.patch(f"/invoices/{invoice['id']}/status", json={"status": "paid"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "paid"

    bad = client.patch(f"/invoices/{invoice['id']}/status", json={"status": "lost"}, headers=auth_headers)
    assert bad.status_code == 422

    missing = client.patch("/invoices/does-not-exist/status", json={"status": "paid"}, headers=auth_headers)
    assert missing.status_code == 404


def test_delete_invoice(client, auth_headers, other_auth_headers):
    invoice = _create(client, auth_headers)

    assert client.delete(f"/invoices/{invoice['id']}", headers=other_auth_headers).status_code == 404
    assert client.delete(f"/invoices/{invoice['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"/invoices/{invoice['id']}", headers=auth_headers).status_code == 404


def test_prefill_from_sales_transaction(client, auth_headers):
    sale = client.post(
        "/transactions",
        json={
            "prompt": "Sold 10 laptops to ABC Corp",
            "analysis": {"category": "sales", "description": "Laptops", "amount": 500000, "party_name": "ABC Corp"},
        },
        headers=auth_headers,
    ).json()
    expense = client.post(
        "/transactions",
        json={
            "prompt": "Rent",
            "analysis": {"category": "expense", "description": "Rent", "amount": 5000, "party_name": None},
        },
        headers=auth_headers,
    ).json()

    response = client.get(f"/invoices/transactions/{sale['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["party_name"] == "ABC Corp"
    assert response.json()["amount"] == 500000

    assert client.get(f"/invoices/transactions/{expense['id']}", headers=auth_headers).status_code == 404

    invoice = _create(client, auth_headers, transaction_id=sale["id"])
    assert invoice["transaction_id"] == sale["id"]
