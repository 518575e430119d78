from datetime import date

import pytest

from dumpster_rental.domain.pricing.calculator import (
    calculate_pricing,
    extension_cost,
    extra_tonnage_fee,
    recalculate_for_days,
    rental_days,
)


def test_three_day_rental_costs_base_price_only():
    breakdown = calculate_pricing("10 Yard", 350, date(2025, 3, 1), date(2025, 3, 3))

    assert breakdown.totalDays == 3
    assert breakdown.extraDays == 0
    assert breakdown.extraDaysAmount == 0
    assert breakdown.total == 350


def test_line_items_are_added_to_base_price():
    breakdown = calculate_pricing(
        "20 Yard",
        450,
        date(2025, 3, 1),
        date(2025, 3, 7),
        extra_tonnage=1.5,
        appliance_count=2,
        distance_miles=30,
        distance_fee=15,
        travel_fee=40,
    )

    assert breakdown.totalDays == 7
    assert breakdown.extraDays == 4
    assert breakdown.extraDaysAmount == 100
    assert breakdown.extraTonnageAmount == 187.5
    assert breakdown.applianceAmount == 50
    assert breakdown.total == 450 + 100 + 187.5 + 50 + 15 + 40


def test_discount_never_drives_total_below_zero():
    breakdown = calculate_pricing(
        "10 Yard", 350, date(2025, 3, 1), date(2025, 3, 2), price_adjustment=-500, adjustment_reason="Promo"
    )

    assert breakdown.priceAdjustment == -500
    assert breakdown.adjustmentReason == "Promo"
    assert breakdown.total == 0


def test_reversed_dates_are_rejected():
    with pytest.raises(ValueError):
        rental_days(date(2025, 3, 5), date(2025, 3, 4))


def test_single_day_rental_counts_one_day():
    assert rental_days(date(2025, 3, 5), date(2025, 3, 5)) == 1


def test_recalculate_for_days_keeps_other_line_items():
    original = calculate_pricing(
        "20 Yard", 450, date(2025, 3, 1), date(2025, 3, 3), appliance_count=1, travel_fee=25
    ).model_dump()

    updated = recalculate_for_days(original, 6)

    assert updated["totalDays"] == 6
    assert updated["extraDays"] == 3
    assert updated["extraDaysAmount"] == 75
    assert updated["applianceAmount"] == 25
    assert updated["travelFee"] == 25
    assert updated["total"] == 450 + 75 + 25 + 25
    assert original["total"] == 500


def test_extension_cost_and_tonnage_fee_line():
    assert extension_cost(4) == 100
    assert extra_tonnage_fee(2) == {"description": "Extra tonnage (2 tons @ $125/ton)", "amount": 250}
    assert extra_tonnage_fee(0.5)["description"] == "Extra tonnage (0.5 tons @ $125/ton)"


def test_quote_endpoint_includes_distance_fee(client, container, distance_matrix):
    distance_matrix(int(30 * 1609.34))

    resp = client.post(
        "/pricing/quote",
        json={
            "containerTypeId": container.id,
            "startDate": "2025-06-01",
            "endDate": "2025-06-05",
            "zipCode": "92101",
        },
    )

    assert resp.status_code == 200
    breakdown = resp.json()["breakdown"]
    assert breakdown["extraDays"] == 2
    assert breakdown["distanceMiles"] == 30
    assert breakdown["distanceFee"] == 15
    assert breakdown["total"] == 450 + 50 + 15
    assert resp.json()["distanceError"] is None


def test_quote_rejects_reversed_dates(client, container):
    resp = client.post(
        "/pricing/quote",
        json={"containerTypeId": container.id, "startDate": "2025-06-05", "endDate": "2025-06-01"},
    )

    assert resp.status_code == 400


def test_quote_unknown_container_type(client, db):
    resp = client.post(
        "/pricing/quote",
        json={"containerTypeId": 999, "startDate": "2025-06-01", "endDate": "2025-06-02"},
    )

    assert resp.status_code == 404


def test_extra_tonnage_fee_endpoint(client):
    resp = client.get("/pricing/extra-tonnage-fee", params={"tons": 3})

    assert resp.status_code == 200
    assert resp.json()["amount"] == 375
