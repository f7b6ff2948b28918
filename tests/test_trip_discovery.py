from __future__ import annotations

import pytest
from bson import ObjectId

from config import KM_PER_DEGREE
from core.exceptions import ValidationException
from factories import auth_headers, make_trip, make_user
from trips.pipeline import build_discovery_pipeline, radius_to_degrees
from trips.services import TripDiscoveryService


def test_radius_is_converted_at_flat_km_per_degree() -> None:
    assert radius_to_degrees(50) == pytest.approx(50 / KM_PER_DEGREE)
    assert radius_to_degrees(111) == pytest.approx(1.0)


def test_pipeline_stage_order_and_filters() -> None:
    requester = ObjectId()
    pipeline = build_discovery_pipeline(requester, 10.0, 20.0, 0.5)

    stages = [next(iter(stage)) for stage in pipeline]
    assert stages == [
        "$lookup",
        "$unwind",
        "$match",
        "$addFields",
        "$match",
        "$project",
        "$sort",
    ]

    creator_match = pipeline[2]["$match"]
    assert creator_match["creator.role"] == "traveller"
    assert creator_match["creator._id"] == {"$ne": requester}
    assert pipeline[4]["$match"] == {"distance": {"$lte": 0.5}}
    assert pipeline[5]["$project"]["createdBy"] == "$creator"
    assert pipeline[6]["$sort"] == {"distance": 1}


@pytest.mark.asyncio
async def test_discovery_returns_nearby_traveller_trips_nearest_first(
    beanie_db,
) -> None:
    requester = await make_user("Req", lat=10.0, lng=10.0)
    near = await make_user("Near", lat=10.1, lng=10.1)
    nearer = await make_user("Nearer", lat=10.0, lng=10.05)
    far = await make_user("Far", lat=11.0, lng=11.0)

    await make_trip(near, title="near")
    await make_trip(nearer, title="nearer")
    await make_trip(far, title="far")

    trips = await TripDiscoveryService.discover_trips(requester)

    assert [t["title"] for t in trips] == ["nearer", "near"]
    first = trips[0]
    assert first["createdBy"]["firstname"] == "Nearer"
    assert first["createdBy"]["id"] == str(nearer.id)
    assert "_id" not in first["createdBy"]
    assert first["distance"] == pytest.approx(0.05)
    assert isinstance(first["id"], str)


@pytest.mark.asyncio
async def test_discovery_excludes_own_non_traveller_and_unlocated_creators(
    beanie_db,
) -> None:
    requester = await make_user("Req", lat=10.0, lng=10.0)
    guide = await make_user("Guide", lat=10.0, lng=10.0, role="guide")
    nowhere = await make_user("Nowhere")
    half = await make_user("Half", lat=10.0)

    await make_trip(requester, title="mine")
    await make_trip(guide, title="guided")
    await make_trip(nowhere, title="unlocated")
    await make_trip(half, title="half located")

    assert await TripDiscoveryService.discover_trips(requester) == []


@pytest.mark.asyncio
async def test_discovery_radius_widens_the_search(beanie_db) -> None:
    requester = await make_user("Req", lat=0.0, lng=0.0)
    creator = await make_user("Away", lat=1.0, lng=0.0)
    await make_trip(creator, title="a degree away")

    assert await TripDiscoveryService.discover_trips(requester, 50) == []

    wide = await TripDiscoveryService.discover_trips(requester, 120)
    assert [t["title"] for t in wide] == ["a degree away"]


@pytest.mark.asyncio
@pytest.mark.parametrize(("lat", "lng"), [(None, None), (10.0, None), (None, 10.0)])
async def test_discovery_requires_complete_location(beanie_db, lat, lng) -> None:
    requester = await make_user("Req", lat=lat, lng=lng)

    with pytest.raises(ValidationException) as raised:
        await TripDiscoveryService.discover_trips(requester)

    assert raised.value.message == "User location not available"


@pytest.mark.asyncio
async def test_discovery_endpoint(beanie_db, api_client) -> None:
    requester = await make_user("Req", lat=10.0, lng=10.0)
    creator = await make_user("Near", lat=10.1, lng=10.0)
    await make_trip(creator, title="coast walk")

    resp = api_client.get("/api/trips", headers=auth_headers(requester))

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "success"
    assert [t["title"] for t in body["trips"]] == ["coast walk"]


@pytest.mark.asyncio
async def test_discovery_endpoint_without_location_is_bad_request(
    beanie_db,
    api_client,
) -> None:
    requester = await make_user("Req")

    resp = api_client.get("/api/trips", headers=auth_headers(requester))

    assert resp.status_code == 400
    assert resp.json()["detail"] == "User location not available"


@pytest.mark.asyncio
async def test_discovery_endpoint_requires_authentication(
    beanie_db,
    api_client,
) -> None:
    assert api_client.get("/api/trips").status_code == 401
    assert (
        api_client.get(
            "/api/trips",
            headers={"X-User-Id": str(ObjectId())},
        ).status_code
        == 401
    )
