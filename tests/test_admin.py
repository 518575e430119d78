from datetime import date, datetime, timedelta

import pytest
from sqlalchemy.exc import SQLAlchemyError

from dumpster_rental import config
from dumpster_rental.domain.admin import service as admin_service
from dumpster_rental.domain.pricing.calculator import calculate_pricing
from dumpster_rental.models import (
    Booking,
    BookingStatus,
    Payment,
    PaymentLink,
    PaymentStatus,
    PhoneBookingGuest,
    User,
)
from dumpster_rental.shared.validators import format_short_date


@pytest.fixture()
def as_admin(login, admin):
    return login(admin)


def phone_booking_body(container, **overrides):
    start = date.today() + timedelta(days=7)
    body = {
        "customerName": "Pat Caller",
        "customerEmail": "Pat@Example.com",
        "customerPhone": "(760) 555-0100",
        "containerTypeId": container.id,
        "startDate": start.isoformat(),
        "endDate": (start + timedelta(days=4)).isoformat(),
        "serviceType": "pickup",
        "customerAddress": "12 Oak St, Escondido, CA 92025",
        "extraTonnage": 1,
        "travelFee": 20,
        "priceAdjustment": -25,
        "adjustmentReason": "Loyal customer",
        "notes": "Gate code 1234",
    }
    body.update(overrides)
    return body


def test_phone_booking_for_new_customer_uses_guest_profile(client, as_admin, container, db):
    resp = client.post("/api/admin/create-phone-booking", json=phone_booking_body(container))

    assert resp.status_code == 200
    data = resp.json()
    # 450 base + 2 extra days + 1 ton + travel fee - discount
    assert data["totalAmount"] == 620
    booking = db.get(Booking, data["bookingId"])
    assert booking.status == BookingStatus.AWAITING_CARD
    assert booking.payment_status == PaymentStatus.PENDING
    assert booking.user.email == config.GUEST_USER_EMAIL
    assert booking.notes == (
        "Gate code 1234\n\n[Travel Fee: $20]\n\n[Discount: $25 - Loyal customer]\n\n"
        "[PHONE BOOKING - Awaiting card]"
    )
    guest = db.query(PhoneBookingGuest).filter_by(booking_id=booking.id).one()
    assert guest.customer_email == "pat@example.com"
    assert guest.customer_phone == "7605550100"

    link = db.query(PaymentLink).filter_by(booking_id=booking.id).one()
    assert link.status == "pending"
    assert data["paymentLink"] == f"{config.APP_URL}/payment/{link.token}"
    ttl = timedelta(days=config.PAYMENT_LINK_TTL_DAYS)
    assert datetime.utcnow() + ttl - timedelta(minutes=1) < link.expires_at <= datetime.utcnow() + ttl


def test_second_guest_booking_reuses_guest_profile(client, as_admin, container, db):
    client.post("/api/admin/create-phone-booking", json=phone_booking_body(container))
    client.post(
        "/api/admin/create-phone-booking",
        json=phone_booking_body(container, customerEmail="other@example.com"),
    )

    assert db.query(User).filter_by(email=config.GUEST_USER_EMAIL).count() == 1
    assert db.query(PhoneBookingGuest).count() == 2


def test_phone_booking_for_existing_customer_updates_profile(client, as_admin, container, customer, db):
    body = phone_booking_body(container, customerEmail="JANE@example.com", customerName="Jane Q. Doe")

    resp = client.post("/api/admin/create-phone-booking", json=body)

    booking = db.get(Booking, resp.json()["bookingId"])
    db.refresh(customer)
    assert booking.user_id == customer.id
    assert customer.full_name == "Jane Q. Doe"
    assert customer.phone == "7605550100"
    assert db.query(PhoneBookingGuest).count() == 0


def test_phone_booking_delivery_adds_distance_fee(client, as_admin, container, db, distance_matrix):
    calls = distance_matrix(48280)
    body = phone_booking_body(
        container, serviceType="delivery", deliveryAddress="99 Elm St, Ramona, CA 92065", travelFee=0, priceAdjustment=0
    )

    resp = client.post("/api/admin/create-phone-booking", json=body)

    # 30 miles, 10 past the free range at $1.50
    assert resp.json()["totalAmount"] == 450 + 50 + 125 + 15
    assert len(calls) == 1
    booking = db.get(Booking, resp.json()["bookingId"])
    assert booking.distance_fee == 15
    assert booking.notes == "Gate code 1234\n\n[PHONE BOOKING - Awaiting card]"


def test_phone_booking_validation(client, as_admin, container):
    missing = client.post("/api/admin/create-phone-booking", json=phone_booking_body(container, customerPhone=""))
    assert missing.status_code == 400
    assert missing.json()["detail"] == "Missing required fields"

    bad_email = client.post("/api/admin/create-phone-booking", json=phone_booking_body(container, customerEmail="nope"))
    assert bad_email.status_code == 400

    bad_service = client.post("/api/admin/create-phone-booking", json=phone_booking_body(container, serviceType="drop"))
    assert bad_service.status_code == 400

    no_container = client.post("/api/admin/create-phone-booking", json=phone_booking_body(container, containerTypeId=999))
    assert no_container.status_code == 404


def test_phone_booking_rolls_back_when_link_insert_fails(client, as_admin, container, db, monkeypatch):
    def broken_create(db, **link_data):
        raise SQLAlchemyError("insert failed")

    monkeypatch.setattr(admin_service.PaymentLinkRepository, "create", staticmethod(broken_create))

    resp = client.post("/api/admin/create-phone-booking", json=phone_booking_body(container))

    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to create booking"
    assert db.query(Booking).count() == 0
    assert db.query(PhoneBookingGuest).count() == 0
    assert db.query(User).filter_by(email=config.GUEST_USER_EMAIL).first() is None


def test_admin_routes_reject_customers(client, login, customer, container):
    login(customer)

    assert client.post("/api/admin/create-phone-booking", json=phone_booking_body(container)).status_code == 403
    assert client.get("/admin/stats").status_code == 403


def test_cancel_booking(client, as_admin, customer, make_booking, db):
    booking = make_booking(customer, notes="Left side of driveway")

    resp = client.post("/api/admin/cancel-booking", json={"bookingId": booking.id, "reason": "Customer request"})

    assert resp.status_code == 200
    # no email transport configured in tests
    assert resp.json()["emailSent"] is False
    db.refresh(booking)
    assert booking.status == BookingStatus.CANCELLED
    assert booking.notes == "Left side of driveway\n\n[CANCELLED - Customer request]"

    again = client.post("/api/admin/cancel-booking", json={"bookingId": booking.id})
    assert again.status_code == 400
    assert again.json()["detail"] == "Booking is already cancelled"


def test_cancel_booking_reports_sent_email(client, as_admin, customer, make_booking, monkeypatch):
    sent = []

    async def fake_send(**kwargs):
        sent.append(kwargs)
        return {"id": "email_1"}

    monkeypatch.setattr(admin_service, "send_cancellation_email", fake_send)
    booking = make_booking(customer)

    resp = client.post("/api/admin/cancel-booking", json={"bookingId": booking.id})

    assert resp.json()["emailSent"] is True
    assert sent[0]["customer_email"] == "jane@example.com"
    assert sent[0]["reason"] is None


def test_cancel_unknown_booking(client, as_admin, db):
    assert client.post("/api/admin/cancel-booking", json={}).status_code == 400
    assert client.post("/api/admin/cancel-booking", json={"bookingId": "missing"}).status_code == 404


def test_extend_booking_without_breakdown(client, as_admin, customer, make_booking, db):
    booking = make_booking(customer)
    old_end = booking.end_date
    new_end = old_end + timedelta(days=3)

    resp = client.post("/api/admin/extend-booking", json={"bookingId": booking.id, "newEndDate": new_end.isoformat()})

    assert resp.status_code == 200
    data = resp.json()
    assert data["additionalDays"] == 3
    assert data["additionalCost"] == 75
    assert data["newTotalAmount"] == 525
    assert data["newEndDate"] == new_end.isoformat()
    db.refresh(booking)
    assert booking.end_date == new_end
    assert booking.notes == (
        f"[EXTENDED - End date changed from {format_short_date(old_end)} to "
        f"{format_short_date(new_end)} (+3 days, +$75)]"
    )


def test_extend_booking_reprices_breakdown(client, as_admin, customer, make_booking, db):
    start = date.today() + timedelta(days=7)
    breakdown = calculate_pricing("20 Yard", 450, start, start + timedelta(days=2), appliance_count=1)
    booking = make_booking(customer, start=start, total_amount=breakdown.total, pricing_breakdown=breakdown.model_dump())
    new_end = start + timedelta(days=5)

    resp = client.post("/api/admin/extend-booking", json={"bookingId": booking.id, "newEndDate": new_end.isoformat()})

    assert resp.json()["newTotalAmount"] == 550
    db.refresh(booking)
    assert booking.total_amount == 550
    assert booking.pricing_breakdown["totalDays"] == 6
    assert booking.pricing_breakdown["extraDays"] == 3
    assert booking.pricing_breakdown["applianceAmount"] == 25


def test_extend_booking_rejections(client, as_admin, customer, make_booking):
    booking = make_booking(customer)
    same_end = {"bookingId": booking.id, "newEndDate": booking.end_date.isoformat()}
    assert client.post("/api/admin/extend-booking", json=same_end).status_code == 400

    cancelled = make_booking(customer, status=BookingStatus.CANCELLED)
    later = (cancelled.end_date + timedelta(days=2)).isoformat()
    resp = client.post("/api/admin/extend-booking", json={"bookingId": cancelled.id, "newEndDate": later})
    assert resp.json()["detail"] == "Cannot extend a cancelled booking"

    completed = make_booking(customer, status=BookingStatus.COMPLETED)
    resp = client.post("/api/admin/extend-booking", json={"bookingId": completed.id, "newEndDate": later})
    assert resp.json()["detail"] == "Cannot extend a completed booking"


def test_migrate_phone_numbers(client, as_admin, customer, other_customer, make_booking, db):
    other_customer.phone = "6195550000"
    db.commit()
    booking = make_booking(customer)
    for email, phone in (
        ("jane@example.com", "(760) 555-0100"),
        ("bob@example.com", "858-555-1111"),
        ("nobody@example.com", "619 555 2222"),
    ):
        db.add(
            PaymentLink(
                booking_id=booking.id,
                customer_email=email,
                customer_name="x",
                customer_phone=phone,
                expires_at=datetime.utcnow(),
            )
        )
    db.commit()

    resp = client.post("/api/admin/migrate-phone-numbers")

    assert resp.json() == {"success": True, "updatedCount": 1, "totalChecked": 3, "errors": None}
    db.refresh(customer)
    db.refresh(other_customer)
    assert customer.phone == "7605550100"
    assert other_customer.phone == "6195550000"


def test_stats(client, as_admin, customer, make_booking, db):
    paid = make_booking(customer, status=BookingStatus.CONFIRMED, payment_status=PaymentStatus.PAID)
    make_booking(customer)
    db.add_all(
        [
            Payment(booking_id=paid.id, amount=450, status="completed"),
            Payment(booking_id=paid.id, amount=99, status="failed"),
        ]
    )
    db.commit()

    data = client.get("/admin/stats").json()

    assert data["totalBookings"] == 2
    assert data["pendingBookings"] == 1
    assert data["totalUsers"] == 2
    assert data["totalRevenue"] == 450
    assert len(data["recentBookings"]) == 2
    assert data["recentBookings"][0]["customer_name"] == "Jane Doe"


def test_booking_list_filters_and_guest_contact(client, as_admin, customer, make_booking, db):
    make_booking(customer, status=BookingStatus.CONFIRMED, payment_status=PaymentStatus.PAID)
    phone = make_booking(customer, status=BookingStatus.AWAITING_CARD)
    db.add(PhoneBookingGuest(booking_id=phone.id, customer_name="Pat", customer_email="pat@example.com"))
    db.commit()

    rows = client.get("/admin/bookings", params={"status": "awaiting_card"}).json()

    assert [row["id"] for row in rows] == [phone.id]
    assert rows[0]["customer_email"] == "pat@example.com"
    assert rows[0]["is_phone_booking"] is True
    assert len(client.get("/admin/bookings", params={"payment_status": "paid"}).json()) == 1


def test_calendar_shows_active_overlapping_bookings(client, as_admin, customer, make_booking):
    start = date.today() + timedelta(days=10)
    inside = make_booking(customer, start=start)
    make_booking(customer, start=start, status=BookingStatus.CANCELLED)
    make_booking(customer, start=start + timedelta(days=30))

    rows = client.get(
        "/admin/calendar",
        params={"start": (start + timedelta(days=1)).isoformat(), "end": (start + timedelta(days=7)).isoformat()},
    ).json()

    assert [row["id"] for row in rows] == [inside.id]
    assert client.get("/admin/calendar", params={"start": "2025-03-10", "end": "2025-03-01"}).status_code == 400


def test_users_and_role_update(client, as_admin, admin, customer, make_booking, db):
    make_booking(customer)

    users = {row["email"]: row for row in client.get("/admin/users").json()}
    assert users["jane@example.com"]["booking_count"] == 1
    assert users["admin@example.com"]["is_admin"] is True

    promoted = client.patch(f"/admin/users/{customer.id}/role", json={"role": "admin"})
    assert promoted.status_code == 200
    assert promoted.json()["is_admin"] is True
    db.refresh(customer)
    assert customer.role == "admin"

    assert client.patch(f"/admin/users/{customer.id}/role", json={"role": "owner"}).status_code == 422
    assert client.patch(f"/admin/users/{admin.id}/role", json={"role": "client"}).status_code == 400
    assert client.patch("/admin/users/999/role", json={"role": "client"}).status_code == 404


def test_payments_list(client, as_admin, customer, make_booking, db):
    booking = make_booking(customer)
    db.add(Payment(booking_id=booking.id, amount=450, status="completed", transaction_id="pi_1"))
    db.commit()

    rows = client.get("/admin/payments").json()

    assert rows[0]["transaction_id"] == "pi_1"
    assert rows[0]["customer_email"] == "jane@example.com"
    assert rows[0]["container_type_name"] == "20 Yard"
