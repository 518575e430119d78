import os
from datetime import date, timedelta
from types import SimpleNamespace

import pytest
import stripe
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECURITY_HEADERS_ENABLED", "true")

from dumpster_rental import cache, config, rate_limiter  # noqa: E402
from dumpster_rental.auth import get_current_user  # noqa: E402
from dumpster_rental.database import Base, get_db  # noqa: E402
from dumpster_rental.domain.distance import service as distance_service  # noqa: E402
from dumpster_rental.domain.payments.stripe_gateway import get_stripe_gateway  # noqa: E402
from dumpster_rental.main import app  # noqa: E402
from dumpster_rental.models import (  # noqa: E402
    Booking,
    BookingStatus,
    ContainerType,
    PaymentStatus,
    User,
)

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeStripeGateway:
    """In-memory stand-in for StripeGateway"""

    def __init__(self):
        self.customers = {}
        self.payment_methods = {}
        self.intents = {}
        self.defaults = {}
        self.created_intents = []
        self.intent_status = "succeeded"
        self.decline_message = None
        self.api_error = None

    def create_customer(self, email, name=None, phone=None, metadata=None):
        customer = SimpleNamespace(
            id=f"cus_{len(self.customers) + 1}", email=email, name=name, phone=phone, metadata=metadata or {}
        )
        self.customers[customer.id] = customer
        return customer

    def find_customer_by_email(self, email):
        return next((c for c in self.customers.values() if c.email == email), None)

    def set_default_payment_method(self, customer_id, payment_method_id):
        self.defaults[customer_id] = payment_method_id

    def add_card(self, payment_method_id, customer=None, last4="4242"):
        payment_method = SimpleNamespace(
            id=payment_method_id,
            customer=customer,
            card=SimpleNamespace(brand="visa", last4=last4, exp_month=12, exp_year=2030),
        )
        self.payment_methods[payment_method_id] = payment_method
        return payment_method

    def retrieve_payment_method(self, payment_method_id):
        if payment_method_id not in self.payment_methods:
            raise stripe.InvalidRequestError("No such PaymentMethod", "payment_method")
        return self.payment_methods[payment_method_id]

    def list_card_methods(self, customer_id):
        return [pm for pm in self.payment_methods.values() if pm.customer == customer_id]

    def attach_payment_method(self, payment_method_id, customer_id):
        payment_method = self.payment_methods.get(payment_method_id) or self.add_card(payment_method_id)
        payment_method.customer = customer_id
        return payment_method

    def detach_payment_method(self, payment_method_id):
        if self.api_error:
            raise stripe.APIError(self.api_error)
        payment_method = self.payment_methods[payment_method_id]
        payment_method.customer = None
        return payment_method

    def create_payment_intent(self, **params):
        if self.api_error:
            raise stripe.APIError(self.api_error)
        if self.decline_message:
            raise stripe.CardError(self.decline_message, None, "card_declined")
        self.created_intents.append(params)
        intent = SimpleNamespace(
            id=f"pi_{len(self.intents) + 1}",
            status=self.intent_status,
            amount=params["amount"],
            client_secret=f"pi_{len(self.intents) + 1}_secret",
            metadata=params.get("metadata", {}),
        )
        self.intents[intent.id] = intent
        return intent

    def retrieve_payment_intent(self, payment_intent_id):
        if payment_intent_id not in self.intents:
            raise stripe.InvalidRequestError("No such PaymentIntent", "intent")
        return self.intents[payment_intent_id]

    def create_setup_intent(self, customer_id):
        return SimpleNamespace(id="seti_1", client_secret="seti_1_secret", customer=customer_id)


@pytest.fixture(autouse=True)
def _isolate_services(monkeypatch):
    """No Redis, no email transport, no Google calls"""
    monkeypatch.setattr(rate_limiter, "get_redis_client", lambda: None)
    monkeypatch.setattr(cache, "get_redis_client", lambda: None)
    rate_limiter.reset_rate_limits()

    for name in ("SMTP_HOST", "SMTP_USER", "SMTP_PASS", "RESEND_API_KEY", "CONTACT_EMAIL", "CRON_SECRET"):
        monkeypatch.setattr(config, name, None)
    monkeypatch.setattr(config, "GOOGLE_MAPS_API_KEY", "test-maps-key")
    monkeypatch.setattr(config, "STRIPE_TEST_CHARGE_MODE", False)

    async def no_network(params):
        raise AssertionError(f"unexpected Distance Matrix call: {params}")

    monkeypatch.setattr(distance_service, "fetch_distance_matrix", no_network)
    yield
    rate_limiter.reset_rate_limits()


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def gateway():
    return FakeStripeGateway()


@pytest.fixture()
def client(db, gateway):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_stripe_gateway] = lambda: gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def login():
    """login(user) makes the following requests authenticate as ``user``"""

    def _login(user):
        app.dependency_overrides[get_current_user] = lambda: user
        return user

    return _login


@pytest.fixture()
def customer(db):
    user = User(firebase_uid="uid-customer", email="jane@example.com", full_name="Jane Doe")
    db.add(user)
    db.commit()
    return user


@pytest.fixture()
def other_customer(db):
    user = User(firebase_uid="uid-other", email="bob@example.com", full_name="Bob Roe")
    db.add(user)
    db.commit()
    return user


@pytest.fixture()
def admin(db):
    user = User(firebase_uid="uid-admin", email="admin@example.com", full_name="Ada Admin", role="admin")
    db.add(user)
    db.commit()
    return user


@pytest.fixture()
def container(db):
    container_type = ContainerType(
        name="20 Yard", size="22' x 8' x 4'", price_per_day=450.0, available_quantity=2
    )
    db.add(container_type)
    db.commit()
    return container_type


@pytest.fixture()
def make_booking(db, container):
    def _make(user, start=None, days=3, **fields):
        start = start or date.today() + timedelta(days=7)
        booking = Booking(
            user_id=user.id,
            container_type_id=fields.pop("container_type_id", container.id),
            start_date=start,
            end_date=start + timedelta(days=days - 1),
            service_type=fields.pop("service_type", "delivery"),
            total_amount=fields.pop("total_amount", 450.0),
            status=fields.pop("status", BookingStatus.PENDING),
            payment_status=fields.pop("payment_status", PaymentStatus.PENDING),
            **fields,
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    return _make


def distance_matrix_response(meters, status="OK"):
    element = {"status": status}
    if status == "OK":
        element["distance"] = {"value": meters, "text": f"{meters / 1609.34:.1f} mi"}
        element["duration"] = {"value": 1800, "text": "30 mins"}
    return {
        "status": "OK",
        "origin_addresses": ["Valley Center, CA 92082, USA"],
        "destination_addresses": ["Somewhere, CA, USA"],
        "rows": [{"elements": [element]}],
    }


@pytest.fixture()
def distance_matrix(monkeypatch):
    """distance_matrix(meters) answers every Distance Matrix call with that distance"""
    calls = []

    def _install(meters, status="OK"):
        async def fake_fetch(params):
            calls.append(params)
            return distance_matrix_response(meters, status)

        monkeypatch.setattr(distance_service, "fetch_distance_matrix", fake_fetch)
        return calls

    return _install
