import asyncio

import pytest
from fastapi import HTTPException

from dumpster_rental import config
from dumpster_rental.domain.distance.service import (
    calculate_distance_fee,
    distance_fee_for_miles,
    lookup_distance,
)

MILE = 1609.34


def test_first_twenty_miles_are_free():
    fee = distance_fee_for_miles(18.2)

    assert fee["distanceFee"] == 0
    assert fee["extraMiles"] == 0
    assert fee["isWithinFreeRange"] is True


def test_miles_beyond_free_range_cost_per_mile():
    fee = distance_fee_for_miles(32)

    assert fee["extraMiles"] == 12
    assert fee["distanceFee"] == 18
    assert fee["isWithinFreeRange"] is False


def test_lookup_distance_converts_meters_to_miles(distance_matrix):
    calls = distance_matrix(int(25 * MILE))

    result = asyncio.run(lookup_distance("92082", "92101"))

    assert result["distanceMiles"] == 25
    assert result["durationText"] == "30 mins"
    assert calls[0]["origins"] == "92082, USA"
    assert calls[0]["units"] == "imperial"


def test_lookup_distance_requires_both_zip_codes():
    with pytest.raises(HTTPException) as exc:
        asyncio.run(lookup_distance("92082", None))

    assert exc.value.status_code == 400


def test_lookup_distance_without_api_key(monkeypatch):
    monkeypatch.setattr(config, "GOOGLE_MAPS_API_KEY", None)

    with pytest.raises(HTTPException) as exc:
        asyncio.run(lookup_distance("92082", "92101"))

    assert exc.value.status_code == 500
    assert exc.value.detail == "Distance calculation service not configured"


def test_unroutable_destination_is_a_client_error(distance_matrix):
    distance_matrix(0, status="NOT_FOUND")

    with pytest.raises(HTTPException) as exc:
        asyncio.run(lookup_distance("92082", "00000"))

    assert exc.value.status_code == 400
    assert exc.value.detail == "Could not calculate distance for this location"


def test_distance_fee_never_raises_for_bad_zip():
    fee = asyncio.run(calculate_distance_fee("abc"))

    assert fee["distanceFee"] == 0
    assert fee["error"] == "Invalid zip code"


def test_distance_fee_reports_lookup_errors(distance_matrix):
    distance_matrix(0, status="ZERO_RESULTS")

    fee = asyncio.run(calculate_distance_fee("92101"))

    assert fee["distanceFee"] == 0
    assert fee["error"] == "Could not calculate distance for this location"


def test_calculate_distance_endpoint(client, distance_matrix):
    distance_matrix(int(12 * MILE))

    resp = client.post("/api/calculate-distance", json={"originZip": "92082", "destinationZip": "92025"})

    assert resp.status_code == 200
    assert resp.json()["distanceMiles"] == 12


def test_distance_fee_endpoint(client, distance_matrix):
    distance_matrix(int(40 * MILE))

    resp = client.get("/api/distance-fee/92101")

    assert resp.status_code == 200
    assert resp.json()["distanceFee"] == 30
    assert resp.json()["error"] is None


def test_distance_endpoint_is_rate_limited(client, distance_matrix):
    distance_matrix(int(5 * MILE))

    statuses = [client.get("/api/distance-fee/92082").status_code for _ in range(31)]

    assert statuses[:30] == [200] * 30
    assert statuses[30] == 429
