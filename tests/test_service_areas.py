from dumpster_rental.domain.service_areas.data import CITIES
from dumpster_rental.domain.service_areas.router import get_city_by_zip


def test_every_zip_code_belongs_to_one_city():
    all_zips = [zipcode for city in CITIES for zipcode in city["zip_codes"]]

    assert len(all_zips) == len(set(all_zips))
    assert len({city["slug"] for city in CITIES}) == len(CITIES)


def test_zip_lookup_helper():
    assert get_city_by_zip("92101")["slug"] == "san-diego"
    assert get_city_by_zip("10001") is None


def test_list_service_areas(client):
    resp = client.get("/service-areas")

    assert resp.status_code == 200
    assert len(resp.json()) == len(CITIES)


def test_get_service_area_by_slug(client):
    resp = client.get("/service-areas/chula-vista")

    assert resp.status_code == 200
    assert resp.json()["name"] == "Chula Vista"
    assert "91910" in resp.json()["zip_codes"]


def test_unknown_service_area(client):
    assert client.get("/service-areas/atlantis").status_code == 404


def test_lookup_served_zip_with_plus_four(client):
    resp = client.get("/service-areas/lookup/91910-1234")

    assert resp.status_code == 200
    body = resp.json()
    assert body["zipcode"] == "91910"
    assert body["served"] is True
    assert body["city"]["slug"] == "chula-vista"


def test_lookup_unserved_and_invalid_zip(client):
    unserved = client.get("/service-areas/lookup/10001")
    assert unserved.status_code == 200
    assert unserved.json()["served"] is False
    assert unserved.json()["city"] is None

    assert client.get("/service-areas/lookup/12ab").status_code == 400
