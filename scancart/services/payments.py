"""
Razorpay integration.

Two concerns live here:

* ``verify_payment`` checks the signature the checkout widget hands back after
  a payment. It is a pure function of (order id, payment id, secret); no order
  state is stored or consulted.
* ``RazorpayClient.create_order`` asks Razorpay for an order id before the
  widget opens. It is a thin httpx call with no retries.
"""
from __future__ import annotations

import hashlib
import hmac
import logging
import time
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional

import httpx

from scancart.constants import RECEIPT_PREFIX
from scancart.errors import SignatureMismatch, UpstreamOrderFailure
from scancart.utils.validators import require_positive_number

logger = logging.getLogger(__name__)


def compute_signature(order_id: str, payment_id: str, secret: str) -> str:
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def verify_payment(order_id: str, payment_id: str, signature: str, secret: str) -> str:
    """
    Return ``payment_id`` if ``signature`` is the HMAC-SHA256 of
    ``"{order_id}|{payment_id}"`` under ``secret``; raise SignatureMismatch otherwise.
    """
    if not secret:
        raise SignatureMismatch()
    expected = compute_signature(order_id, payment_id, secret)
    if not hmac.compare_digest(expected.encode("utf-8"), (signature or "").encode("utf-8")):
        logger.warning("payment signature mismatch for order %s", order_id)
        raise SignatureMismatch()
    logger.info("payment %s verified for order %s", payment_id, order_id)
    return payment_id


@dataclass(frozen=True)
class OrderHandle:
    order_id: str
    amount: int  # minor units (paise)


def to_minor_units(amount: Decimal | float | int) -> int:
    value = Decimal(str(amount))
    require_positive_number(value, name="amount")
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _error_detail(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text[:200] or f"HTTP {response.status_code}"
    err = data.get("error") if isinstance(data, dict) else None
    if isinstance(err, dict):
        return err.get("description") or err.get("code") or str(err)
    return str(data)


class RazorpayClient:
    """Order creation against the Razorpay REST API."""

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        api_url: str = "https://api.razorpay.com/v1",
        currency: str = "INR",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.key_id = key_id
        self._key_secret = key_secret
        self.api_url = api_url.rstrip("/")
        self.currency = currency
        self._transport = transport
        self._http_client: Optional[httpx.AsyncClient] = None

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                auth=(self.key_id, self._key_secret),
                timeout=httpx.Timeout(10.0, connect=5.0),
                transport=self._transport,
            )
        return self._http_client

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def create_order(self, amount: Decimal | float | int) -> OrderHandle:
        payload: Dict[str, Any] = {
            "amount": to_minor_units(amount),
            "currency": self.currency,
            "receipt": f"{RECEIPT_PREFIX}{int(time.time() * 1000)}",
        }
        client = self._get_http_client()
        try:
            response = await client.post(f"{self.api_url}/orders", json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = _error_detail(e.response)
            logger.error("Razorpay order creation failed (%s): %s", e.response.status_code, detail)
            raise UpstreamOrderFailure(detail, status_code=e.response.status_code) from e
        except httpx.RequestError as e:
            logger.error("Razorpay network error: %s", e)
            raise UpstreamOrderFailure(f"Failed to connect to Razorpay: {e}") from e

        try:
            data = response.json()
            order = OrderHandle(order_id=str(data["id"]), amount=int(data["amount"]))
        except (ValueError, KeyError, TypeError) as e:
            logger.error("Razorpay returned an unreadable order: %s", response.text[:200])
            raise UpstreamOrderFailure(f"Unexpected response from Razorpay: {e}") from e
        logger.info("created order %s for %d %s", order.order_id, order.amount, self.currency)
        return order
