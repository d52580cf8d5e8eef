import json

import httpx
import pytest
from fastapi.testclient import TestClient

from decorbook.core.config import Settings
from decorbook.core.security import get_password_hash
from decorbook.main import create_app
from decorbook.models.package import Package, PackageItem
from decorbook.models.user import RoleEnum, User
from decorbook.services.midtrans import MidtransClient, compute_signature

SERVER_KEY = "SB-Mid-server-test"
SNAP_URL = "https://snap.test/snap/v1"


class FakeSnap:
    """Stands in for the Snap API behind an httpx.MockTransport."""

    def __init__(self):
        self.requests = []
        self.fail_with = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            status, body = self.fail_with
            return httpx.Response(status, text=body)
        body = json.loads(request.content)
        n = len(self.requests)
        return httpx.Response(
            201,
            json={
                "token": f"snap-token-{n}",
                "redirect_url": f"https://snap.test/v2/vtweb/snap-token-{n}",
                "transaction_id": f"trx-{body['transaction_details']['order_id']}-{n}",
            },
        )

    @property
    def last_payload(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture
def settings():
    s = Settings()
    s.DATABASE_URL = "sqlite://"
    s.ENVIRONMENT = "test"
    s.SECRET_KEY = "test-secret"
    s.MIDTRANS_SERVER_KEY = SERVER_KEY
    s.MIDTRANS_SNAP_URL = SNAP_URL
    s.MIDTRANS_VERIFY_SIGNATURE = True
    return s


@pytest.fixture
def snap():
    return FakeSnap()


@pytest.fixture
def client(settings, snap):
    gateway = MidtransClient(SERVER_KEY, SNAP_URL, transport=httpx.MockTransport(snap))
    app = create_app(settings, gateway=gateway)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(client):
    session = client.app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


def make_user(db, email, name="Dewi", password="secret123", role=RoleEnum.user):
    user = User(name=name, email=email, hashed_password=get_password_hash(password), role=role)
    db.add(user)
    db.commit()
    return user


def login_headers(client, email, password="secret123"):
    """Log in and return a bearer header; the cookie jar is cleared so several users can share a client."""
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    client.cookies.clear()
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
def user_headers(client, db):
    make_user(db, "dewi@example.com")
    return login_headers(client, "dewi@example.com")


@pytest.fixture
def admin_headers(client, db):
    make_user(db, "admin@example.com", name="Admin", role=RoleEnum.admin)
    return login_headers(client, "admin@example.com")


@pytest.fixture
def package(db):
    pkg = Package(name="Paket Melati", description="Dekorasi pelaminan", price=10_000_000)
    pkg.package_items = [
        PackageItem(name="Pelaminan 6m", price=6_000_000),
        PackageItem(name="Bunga segar", price=4_000_000),
    ]
    db.add(pkg)
    db.commit()
    return pkg


def book(client, headers, package_id, date="2026-12-12"):
    return client.post(
        "/api/orders/create",
        json={
            "packageId": package_id,
            "scheduleDate": date,
            "customerName": "Dewi Lestari",
            "customerEmail": "dewi@example.com",
            "customerPhone": "08123456789",
            "customerAddress": "Jl. Merdeka 1, Bandung",
        },
        headers=headers,
    )


def notify(client, gateway_order_id, transaction_status, gross_amount="3000000.00", status_code="200",
           signature=None, **extra):
    payload = {
        "order_id": gateway_order_id,
        "transaction_status": transaction_status,
        "fraud_status": "accept",
        "transaction_id": "midtrans-trx",
        "gross_amount": gross_amount,
        "payment_type": "bank_transfer",
        "status_code": status_code,
    }
    payload.update(extra)
    payload["signature_key"] = signature or compute_signature(
        gateway_order_id, status_code, gross_amount, SERVER_KEY
    )
    return client.post("/api/midtrans/notification", json=payload)
