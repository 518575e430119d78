from datetime import date, timedelta

from dumpster_rental.models import PhoneBookingGuest

MILE = 1609.34


def future(days):
    return (date.today() + timedelta(days=days)).isoformat()


def test_create_booking_prices_and_stores_breakdown(client, login, customer, container, distance_matrix, db):
    distance_matrix(int(30 * MILE))
    login(customer)

    resp = client.post(
        "/bookings",
        json={
            "containerTypeId": container.id,
            "startDate": future(10),
            "endDate": future(14),
            "serviceType": "delivery",
            "deliveryAddress": "123 Main St, San Diego, CA 92101",
            "applianceCount": 1,
            "phone": "(760) 555-1234",
        },
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "pending"
    assert body["payment_status"] == "pending"
    assert body["container_type_name"] == "20 Yard"
    assert body["distance_fee"] == 15
    # 5 days: 2 extra days, 1 appliance, 10 miles past the free range
    assert body["total_amount"] == 450 + 50 + 25 + 15
    assert body["pricing_breakdown"]["total"] == body["total_amount"]

    db.refresh(customer)
    assert customer.phone == "7605551234"


def test_pickup_booking_skips_distance_lookup(client, login, customer, container):
    login(customer)

    resp = client.post(
        "/bookings",
        json={
            "containerTypeId": container.id,
            "startDate": future(3),
            "endDate": future(4),
            "serviceType": "pickup",
            "zipCode": "92101",
        },
    )

    assert resp.status_code == 201
    assert resp.json()["total_amount"] == 450


def test_failed_distance_lookup_does_not_block_booking(client, login, customer, container, distance_matrix):
    distance_matrix(0, status="NOT_FOUND")
    login(customer)

    resp = client.post(
        "/bookings",
        json={
            "containerTypeId": container.id,
            "startDate": future(3),
            "endDate": future(4),
            "zipCode": "92101",
        },
    )

    assert resp.status_code == 201
    assert resp.json()["distance_fee"] == 0


def test_booking_in_the_past_is_rejected(client, login, customer, container):
    login(customer)

    resp = client.post(
        "/bookings",
        json={"containerTypeId": container.id, "startDate": future(-2), "endDate": future(1), "serviceType": "pickup"},
    )

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Start date cannot be in the past"


def test_booking_rejected_when_sold_out(client, login, customer, other_customer, container, make_booking):
    start = date.today() + timedelta(days=5)
    make_booking(other_customer, start=start)
    make_booking(other_customer, start=start)
    login(customer)

    resp = client.post(
        "/bookings",
        json={
            "containerTypeId": container.id,
            "startDate": start.isoformat(),
            "endDate": (start + timedelta(days=1)).isoformat(),
            "serviceType": "pickup",
        },
    )

    assert resp.status_code == 409


def test_booking_allowed_around_disjoint_bookings(client, login, customer, other_customer, container, make_booking):
    today = date.today()
    make_booking(other_customer, start=today + timedelta(days=5), days=2)
    make_booking(other_customer, start=today + timedelta(days=9), days=2)
    login(customer)

    resp = client.post(
        "/bookings",
        json={
            "containerTypeId": container.id,
            "startDate": future(5),
            "endDate": future(11),
            "serviceType": "pickup",
        },
    )

    assert resp.status_code == 201


def test_invalid_service_type(client, login, customer, container):
    login(customer)

    resp = client.post(
        "/bookings",
        json={"containerTypeId": container.id, "startDate": future(3), "endDate": future(4), "serviceType": "drone"},
    )

    assert resp.status_code == 422


def test_customers_only_see_their_own_bookings(client, login, customer, other_customer, make_booking):
    mine = make_booking(customer)
    theirs = make_booking(other_customer)
    login(customer)

    listed = client.get("/bookings").json()

    assert [b["id"] for b in listed] == [mine.id]
    assert client.get(f"/bookings/{theirs.id}").status_code == 404
    assert client.get(f"/bookings/{mine.id}").status_code == 200


def test_admins_can_read_any_booking(client, login, admin, customer, make_booking):
    booking = make_booking(customer)
    login(admin)

    assert client.get(f"/bookings/{booking.id}").status_code == 200


def test_save_guest_info_is_insert_only(client, customer, make_booking, db):
    booking = make_booking(customer)

    first = client.post("/api/save-guest-info", json={"bookingId": booking.id, "customerName": "Sam"})
    second = client.post(
        "/api/save-guest-info",
        json={"bookingId": booking.id, "customerName": "Mallory", "customerEmail": "mallory@example.com"},
    )

    assert first.status_code == 200
    assert second.status_code == 409
    rows = db.query(PhoneBookingGuest).filter_by(booking_id=booking.id).all()
    assert len(rows) == 1
    assert rows[0].customer_name == "Sam"
    assert rows[0].customer_email == ""
    assert rows[0].customer_phone == ""


def test_save_guest_info_validation(client, db):
    assert client.post("/api/save-guest-info", json={}).status_code == 400
    assert client.post("/api/save-guest-info", json={"bookingId": "missing"}).status_code == 404


def test_guest_inquiry_requires_fields(client, container):
    resp = client.post("/api/guest-inquiry", json={"customerName": "Sam"})

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Missing required fields"


def test_guest_inquiry_without_email_transport_is_skipped(client, container):
    resp = client.post(
        "/api/guest-inquiry",
        json={
            "customerName": "Sam",
            "customerEmail": "sam@example.com",
            "containerTypeId": container.id,
            "startDate": "2030-01-01",
            "endDate": "2030-01-03",
        },
    )

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "skipped": True}


def test_send_booking_email_uses_booking_details(client, login, customer, make_booking, monkeypatch):
    from dumpster_rental.domain.bookings import service as booking_service

    sent = {}

    async def fake_send(**kwargs):
        sent.update(kwargs)
        return {"id": "email_1"}

    monkeypatch.setattr(booking_service, "send_booking_emails", fake_send)
    booking = make_booking(customer, start=date(2030, 3, 5))
    login(customer)

    resp = client.post(
        "/api/send-booking-email",
        json={"bookingId": booking.id, "customerName": "Jane Doe", "customerEmail": "jane@example.com"},
    )

    assert resp.status_code == 200
    assert resp.json()["skipped"] is False
    assert sent["container_type"] == "20 Yard"
    assert sent["start_date"] == "March 5, 2030"
    assert sent["total_amount"] == 450


def test_send_booking_email_failure(client, login, customer, make_booking, monkeypatch):
    from dumpster_rental.domain.bookings import service as booking_service

    async def broken_send(**kwargs):
        raise Exception("Failed to send email: smtp down")

    monkeypatch.setattr(booking_service, "send_booking_emails", broken_send)
    booking = make_booking(customer)
    login(customer)

    resp = client.post(
        "/api/send-booking-email",
        json={"bookingId": booking.id, "customerName": "Jane", "customerEmail": "jane@example.com"},
    )

    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to send emails"


def test_booking_routes_require_authentication(client):
    resp = client.get("/bookings")

    assert resp.status_code in (401, 403)
