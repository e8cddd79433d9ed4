import hashlib
import hmac
import logging
import time
from typing import Any, Dict, Optional

import httpx

from utils.constants import RAZORPAY_API_URL, RAZORPAY_TIMEOUT_SECONDS, get_razorpay_credentials

logger = logging.getLogger(__name__)


class RazorpayError(Exception):
    """Base exception for Razorpay integration errors"""

    pass


class RazorpayConfigurationError(RazorpayError):
    """Raised when Razorpay keys are missing"""

    pass


class RazorpayAPIError(RazorpayError):
    """Raised when a Razorpay API call fails"""

    def __init__(self, message: str, status_code: Optional[int] = None, description: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.description = description


def _base36(number: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if number == 0:
        return "0"
    out = []
    while number:
        number, remainder = divmod(number, 36)
        out.append(digits[remainder])
    return "".join(reversed(out))


def build_receipt(user_id: str, now_ms: Optional[int] = None) -> str:
    """Receipt ids must stay under Razorpay's 40 character limit."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"prem_{user_id[-8:]}_{_base36(now_ms)}"


def compute_signature(order_id: str, payment_id: str, key_secret: str) -> str:
    body = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(key_secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def verify_payment_signature(
    order_id: str, payment_id: str, signature: str, key_secret: str
) -> bool:
    """Check the checkout callback signature: HMAC-SHA256(order_id|payment_id)."""
    expected = compute_signature(order_id, payment_id, key_secret)
    return hmac.compare_digest(expected, signature or "")


class RazorpayClient:
    """Minimal Razorpay REST client: order creation and signature checks."""

    def __init__(
        self,
        key_id: Optional[str] = None,
        key_secret: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        env_key_id, env_key_secret = get_razorpay_credentials()
        self.key_id = key_id or env_key_id
        self.key_secret = key_secret or env_key_secret
        if not all([self.key_id, self.key_secret]):
            raise RazorpayConfigurationError("Payment gateway not configured")
        self._transport = transport

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=RAZORPAY_API_URL,
            auth=(self.key_id, self.key_secret),
            timeout=RAZORPAY_TIMEOUT_SECONDS,
            transport=self._transport,
        )

    @staticmethod
    def _raise_for_error(response: httpx.Response, message: str) -> None:
        if response.status_code < 400:
            return
        description = ""
        try:
            description = response.json().get("error", {}).get("description", "")
        except ValueError:
            pass
        logger.error(f"Razorpay API status code: {response.status_code}, error: {description}")
        raise RazorpayAPIError(message, status_code=response.status_code, description=description)

    async def fetch_order(self, order_id: str) -> Dict[str, Any]:
        """Fetch an order as stored by Razorpay, including the notes set at creation."""
        try:
            async with self._http_client() as client:
                response = await client.get(f"/orders/{order_id}")
        except httpx.HTTPError as e:
            raise RazorpayAPIError(f"Failed to reach Razorpay: {e}") from e

        self._raise_for_error(response, "Failed to fetch order")
        return response.json()

    async def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        payload = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": notes or {},
        }

        try:
            async with self._http_client() as client:
                response = await client.post("/orders", json=payload)
        except httpx.HTTPError as e:
            raise RazorpayAPIError(f"Failed to reach Razorpay: {e}") from e

        self._raise_for_error(response, "Failed to create order")
        order = response.json()
        logger.info(f"Razorpay order {order.get('id')} created for receipt {receipt}")
        return order

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        return verify_payment_signature(order_id, payment_id, signature, self.key_secret)
