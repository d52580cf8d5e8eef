import hashlib
import json

import httpx
import pytest

from decorbook.core.errors import GatewayError
from decorbook.services.midtrans import MidtransClient, compute_signature, verify_notification_signature


def test_compute_signature_matches_midtrans_formula():
    raw = "order-1_dp" + "200" + "3000000.00" + "server-key"
    assert compute_signature("order-1_dp", "200", "3000000.00", "server-key") == hashlib.sha512(
        raw.encode()
    ).hexdigest()


def test_verify_notification_signature():
    payload = {"order_id": "order-1_dp", "status_code": "200", "gross_amount": "3000000.00"}
    payload["signature_key"] = compute_signature("order-1_dp", "200", "3000000.00", "server-key")
    assert verify_notification_signature(payload, "server-key")
    assert not verify_notification_signature(payload, "another-key")
    assert not verify_notification_signature({**payload, "gross_amount": "1.00"}, "server-key")
    assert not verify_notification_signature({**payload, "signature_key": ""}, "server-key")
    assert not verify_notification_signature(payload, "")


def test_create_transaction_posts_snap_payload():
    seen = {}

    def handler(request):
        seen["request"] = request
        return httpx.Response(201, json={"token": "tok", "redirect_url": "https://snap/redirect"})

    client = MidtransClient("key", "https://snap.example/v1/", transport=httpx.MockTransport(handler))
    data = client.create_transaction("o1_final", 7_000_000, "3", "Gold - Pelunasan", "a@b.c", None)
    client.close()

    assert data == {"token": "tok", "redirect_url": "https://snap/redirect"}
    request = seen["request"]
    assert request.method == "POST"
    assert str(request.url) == "https://snap.example/v1/transactions"
    assert request.headers["Accept"] == "application/json"
    assert json.loads(request.content)["customer_details"] == {"email": "a@b.c", "first_name": "Customer"}


def test_create_transaction_error_status():
    transport = httpx.MockTransport(lambda request: httpx.Response(400, text="bad order id"))
    client = MidtransClient("key", "https://snap.example/v1", transport=transport)
    with pytest.raises(GatewayError) as info:
        client.create_transaction("o1_dp", 100, "1", "x", "a@b.c", "A")
    assert info.value.status_code == 400
    assert info.value.body == "bad order id"


def test_create_transaction_transport_failure():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    client = MidtransClient("key", "https://snap.example/v1", transport=httpx.MockTransport(handler))
    with pytest.raises(GatewayError) as info:
        client.create_transaction("o1_dp", 100, "1", "x", "a@b.c", "A")
    assert info.value.status_code == 502


def test_missing_server_key():
    client = MidtransClient("", "https://snap.example/v1", transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    with pytest.raises(GatewayError) as info:
        client.create_transaction("o1_dp", 100, "1", "x", "a@b.c", "A")
    assert info.value.status_code == 500
