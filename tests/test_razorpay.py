import asyncio
import json
from datetime import datetime

import httpx
import pytest

from business.subscription import PLANS, add_months, get_plan, subscription_end_for
from integrations.razorpay import (
    RazorpayAPIError,
    RazorpayClient,
    RazorpayConfigurationError,
    build_receipt,
    compute_signature,
    verify_payment_signature,
)

KEY_ID = "rzp_test_key"
KEY_SECRET = "rzp_test_secret"


def test_signature_round_trip():
    signature = compute_signature("order_123", "pay_456", KEY_SECRET)
    assert len(signature) == 64
    assert verify_payment_signature("order_123", "pay_456", signature, KEY_SECRET)


@pytest.mark.parametrize(
    "order_id, payment_id, secret",
    [
        ("order_999", "pay_456", KEY_SECRET),
        ("order_123", "pay_999", KEY_SECRET),
        ("order_123", "pay_456", "another-secret"),
    ],
)
def test_signature_mismatch(order_id, payment_id, secret):
    signature = compute_signature("order_123", "pay_456", KEY_SECRET)
    assert not verify_payment_signature(order_id, payment_id, signature, secret)


def test_empty_signature_rejected():
    assert not verify_payment_signature("order_123", "pay_456", "", KEY_SECRET)


def test_receipt_format():
    user_id = "4f1c2a9e-0b7d-4e21-9c3f-1234abcd5678"
    assert build_receipt(user_id, now_ms=36**3 + 35) == "prem_abcd5678_100z"
    assert build_receipt(user_id, now_ms=1700000000000) == "prem_abcd5678_loyw3v28"
    assert len(build_receipt(user_id)) <= 40


def test_client_requires_keys():
    with pytest.raises(RazorpayConfigurationError):
        RazorpayClient()


def test_create_order_posts_to_orders_endpoint():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "order_abc", "amount": 39900, "currency": "INR"})

    client = RazorpayClient(KEY_ID, KEY_SECRET, transport=httpx.MockTransport(handler))
    order = asyncio.run(client.create_order(39900, "INR", "prem_x_y", {"plan_type": "monthly"}))

    assert order["id"] == "order_abc"
    assert seen["url"] == "https://api.razorpay.com/v1/orders"
    assert seen["auth"].startswith("Basic ")
    assert seen["body"] == {
        "amount": 39900,
        "currency": "INR",
        "receipt": "prem_x_y",
        "notes": {"plan_type": "monthly"},
    }


def test_create_order_error_carries_description():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": {"description": "The amount must be atleast INR 1.00"}})

    client = RazorpayClient(KEY_ID, KEY_SECRET, transport=httpx.MockTransport(handler))
    with pytest.raises(RazorpayAPIError) as exc_info:
        asyncio.run(client.create_order(10, "INR", "r"))

    assert exc_info.value.status_code == 400
    assert exc_info.value.description == "The amount must be atleast INR 1.00"


def test_create_order_transport_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    client = RazorpayClient(KEY_ID, KEY_SECRET, transport=httpx.MockTransport(handler))
    with pytest.raises(RazorpayAPIError):
        asyncio.run(client.create_order(39900, "INR", "r"))


def test_fetch_order_returns_notes():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        return httpx.Response(200, json={"id": "order_abc", "notes": {"plan_type": "yearly"}})

    client = RazorpayClient(KEY_ID, KEY_SECRET, transport=httpx.MockTransport(handler))
    order = asyncio.run(client.fetch_order("order_abc"))

    assert order["notes"] == {"plan_type": "yearly"}
    assert seen == {"method": "GET", "url": "https://api.razorpay.com/v1/orders/order_abc"}


def test_fetch_order_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": {"description": "The id provided does not exist"}})

    client = RazorpayClient(KEY_ID, KEY_SECRET, transport=httpx.MockTransport(handler))
    with pytest.raises(RazorpayAPIError) as exc_info:
        asyncio.run(client.fetch_order("order_missing"))

    assert str(exc_info.value) == "Failed to fetch order"
    assert exc_info.value.description == "The id provided does not exist"


def test_plans():
    assert get_plan("monthly") is PLANS["monthly"]
    assert PLANS["monthly"].amount == 39900
    assert PLANS["yearly"].amount == 199900
    assert get_plan("weekly") is None
    assert get_plan(None) is None


@pytest.mark.parametrize(
    "start, months, expected",
    [
        (datetime(2024, 1, 15, 8, 30), 1, datetime(2024, 2, 15, 8, 30)),
        (datetime(2024, 1, 31), 1, datetime(2024, 2, 29)),
        (datetime(2023, 1, 31), 1, datetime(2023, 2, 28)),
        (datetime(2024, 12, 10), 1, datetime(2025, 1, 10)),
        (datetime(2024, 2, 29), 12, datetime(2025, 2, 28)),
    ],
)
def test_add_months(start, months, expected):
    assert add_months(start, months) == expected


def test_subscription_end():
    start = datetime(2024, 3, 5)
    assert subscription_end_for("monthly", start) == datetime(2024, 4, 5)
    assert subscription_end_for("yearly", start) == datetime(2025, 3, 5)
    assert subscription_end_for(None, start) == datetime(2024, 4, 5)
