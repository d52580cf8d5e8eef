# decorbook/services/midtrans.py
# Midtrans Snap client: creates Snap transactions and verifies notification signatures.

import base64
import hashlib
import hmac
import logging
from typing import Any, Dict, Optional

import httpx

from decorbook.core.errors import GatewayError

logger = logging.getLogger(__name__)


def compute_signature(order_id: str, status_code: str, gross_amount: str, server_key: str) -> str:
    """SHA512 of order_id + status_code + gross_amount + server_key, hex encoded"""
    raw = f"{order_id}{status_code}{gross_amount}{server_key}".encode("utf-8")
    return hashlib.sha512(raw).hexdigest()


def verify_notification_signature(payload: Dict[str, Any], server_key: str) -> bool:
    """
    Check the signature_key of a notification payload.
    Uses hmac.compare_digest so the comparison runs in constant time.
    """
    signature = payload.get("signature_key")
    if not signature or not server_key:
        return False
    expected = compute_signature(
        str(payload.get("order_id", "")),
        str(payload.get("status_code", "")),
        str(payload.get("gross_amount", "")),
        server_key,
    )
    return hmac.compare_digest(expected, str(signature))


class MidtransClient:
    """Thin wrapper over the Snap transactions endpoint"""

    def __init__(
        self,
        server_key: str,
        snap_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.server_key = server_key
        self.snap_url = snap_url.rstrip("/")
        self._http = httpx.Client(timeout=timeout, transport=transport)

    def close(self) -> None:
        self._http.close()

    def _auth_header(self) -> str:
        encoded = base64.b64encode(f"{self.server_key}:".encode("utf-8")).decode("ascii")
        return f"Basic {encoded}"

    def create_transaction(
        self,
        order_id: str,
        gross_amount: int,
        item_id: str,
        item_name: str,
        email: str,
        first_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create a Snap transaction.

        Args:
            order_id: Gateway-facing order id (with the _dp / _final suffix)
            gross_amount: Amount to charge, in whole currency units
            item_id: Catalog id shown on the checkout page
            item_name: Line item label
            email: Customer email
            first_name: Customer name, "Customer" when empty

        Returns:
            The decoded Snap response (token, redirect_url, maybe transaction_id)
        """
        if not self.server_key:
            raise GatewayError("Midtrans server key is not configured", status_code=500)

        payload = {
            "transaction_details": {
                "order_id": order_id,
                "gross_amount": gross_amount,
            },
            "item_details": [
                {
                    "id": item_id,
                    "price": gross_amount,
                    "quantity": 1,
                    "name": item_name,
                }
            ],
            "customer_details": {
                "email": email,
                "first_name": first_name or "Customer",
            },
        }

        try:
            response = self._http.post(
                f"{self.snap_url}/transactions",
                json=payload,
                headers={
                    "Accept": "application/json",
                    "Authorization": self._auth_header(),
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"Midtrans request failed for {order_id}: {e}")
            raise GatewayError("Could not reach the payment gateway", status_code=502) from e

        if response.is_error:
            logger.error(f"Midtrans API error for {order_id}: {response.status_code} {response.text}")
            raise GatewayError(
                "Failed to create the payment at Midtrans",
                status_code=response.status_code,
                body=response.text,
            )

        data = response.json()
        logger.info(f"Midtrans transaction created for {order_id}")
        return data
