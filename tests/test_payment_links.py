from datetime import datetime, timedelta

import pytest

from dumpster_rental import config
from dumpster_rental.domain.payment_links.service import EXPIRED_BOOKING_NOTE, expire_old_links
from dumpster_rental.models import BookingStatus, PaymentLink, PaymentStatus


@pytest.fixture()
def make_link(db, make_booking, customer):
    def _make(booking=None, expires_in=timedelta(hours=48), **fields):
        booking = booking or make_booking(customer, status=BookingStatus.AWAITING_CARD)
        link = PaymentLink(
            booking_id=booking.id,
            customer_email=fields.pop("customer_email", "jane@example.com"),
            customer_name=fields.pop("customer_name", "Jane Doe"),
            customer_phone=fields.pop("customer_phone", "7605550100"),
            expires_at=datetime.utcnow() + expires_in,
            **fields,
        )
        db.add(link)
        db.commit()
        db.refresh(link)
        return link

    return _make


def complete_body(link, **overrides):
    body = {"token": link.token, "paymentMethodId": "pm_new", "signatureUrl": "https://cdn.example.com/sig.png"}
    body.update(overrides)
    return body


def test_get_link_is_public_and_shows_booking(client, make_link):
    link = make_link()

    resp = client.get(f"/api/payment-link/{link.token}")

    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "pending"
    assert data["customerName"] == "Jane Doe"
    assert data["booking"]["containerType"] == "20 Yard"
    assert data["booking"]["status"] == "awaiting_card"


def test_get_link_reports_overdue_link_as_expired(client, make_link):
    link = make_link(expires_in=timedelta(hours=-1))

    assert client.get(f"/api/payment-link/{link.token}").json()["status"] == "expired"


def test_get_unknown_link(client, db):
    resp = client.get("/api/payment-link/not-a-token")

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Invalid payment link"


def test_complete_link_saves_card_and_releases_booking(client, make_link, gateway, customer, db):
    link = make_link()

    resp = client.post("/api/payment-link/complete", json=complete_body(link))

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "bookingId": link.booking_id}
    db.refresh(link)
    booking = link.booking
    db.refresh(booking)
    assert link.status == "completed"
    assert link.completed_at is not None
    assert booking.status == BookingStatus.PENDING
    assert booking.payment_status == PaymentStatus.PENDING
    assert booking.payment_method_id == "pm_new"
    assert booking.signature_img_url == "https://cdn.example.com/sig.png"
    assert gateway.payment_methods["pm_new"].customer == "cus_1"
    assert gateway.defaults == {"cus_1": "pm_new"}
    assert gateway.customers["cus_1"].metadata == {"booking_id": link.booking_id}
    db.refresh(customer)
    assert customer.stripe_customer_id == "cus_1"


def test_complete_link_reuses_customer_with_same_email(client, make_link, gateway):
    existing = gateway.create_customer(email="jane@example.com")
    link = make_link()

    client.post("/api/payment-link/complete", json=complete_body(link))

    assert len(gateway.customers) == 1
    assert gateway.payment_methods["pm_new"].customer == existing.id


def test_complete_link_twice(client, make_link):
    link = make_link()
    client.post("/api/payment-link/complete", json=complete_body(link))

    resp = client.post("/api/payment-link/complete", json=complete_body(link))

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Payment link already completed"


def test_complete_expired_link(client, make_link, gateway):
    link = make_link(expires_in=timedelta(minutes=-5))

    resp = client.post("/api/payment-link/complete", json=complete_body(link))

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Payment link expired"
    assert gateway.payment_methods == {}


def test_complete_link_for_cancelled_booking(client, make_link, make_booking, customer):
    link = make_link(booking=make_booking(customer, status=BookingStatus.CANCELLED))

    resp = client.post("/api/payment-link/complete", json=complete_body(link))

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Booking is cancelled"


def test_complete_link_requires_all_fields(client, make_link):
    link = make_link()

    resp = client.post("/api/payment-link/complete", json=complete_body(link, signatureUrl=None))

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Missing required fields"


def test_expire_sweep_cancels_bookings_still_awaiting_card(db, make_link, make_booking, customer):
    waiting = make_link(expires_in=timedelta(hours=-1))
    waiting.booking.notes = "[PHONE BOOKING]"
    db.commit()
    already_carded = make_link(
        booking=make_booking(customer, status=BookingStatus.CONFIRMED, payment_status=PaymentStatus.PAID),
        expires_in=timedelta(hours=-1),
    )
    fresh = make_link()

    result = expire_old_links(db)

    assert result.expiredCount == 2
    assert result.message == "Expired 2 payment links"
    assert {link.token for link in result.expiredLinks} == {waiting.token, already_carded.token}
    db.refresh(waiting)
    db.refresh(already_carded)
    db.refresh(fresh)
    assert waiting.status == already_carded.status == "expired"
    assert fresh.status == "pending"
    assert waiting.booking.status == BookingStatus.CANCELLED
    assert waiting.booking.payment_status == PaymentStatus.FAILED
    assert waiting.booking.notes == f"[PHONE BOOKING]\n{EXPIRED_BOOKING_NOTE}"
    assert already_carded.booking.status == BookingStatus.CONFIRMED


def test_expire_sweep_with_nothing_to_do(client, make_link):
    make_link()

    resp = client.post("/api/payment-link/expire-old")

    assert resp.json() == {
        "success": True,
        "message": "No expired links found",
        "expiredCount": 0,
        "expiredLinks": [],
    }


def test_expire_endpoint_checks_cron_secret(client, make_link, monkeypatch):
    monkeypatch.setattr(config, "CRON_SECRET", "s3cret")
    make_link(expires_in=timedelta(hours=-1))

    assert client.get("/api/payment-link/expire-old").status_code == 401
    assert (
        client.get("/api/payment-link/expire-old", headers={"Authorization": "Bearer wrong"}).status_code
        == 401
    )

    resp = client.get("/api/payment-link/expire-old", headers={"Authorization": "Bearer s3cret"})
    assert resp.status_code == 200
    assert resp.json()["expiredCount"] == 1
