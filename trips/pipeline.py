"""Aggregation pipeline for nearby-trip discovery.

Distances are Euclidean in degree space: ``sqrt(dlat^2 + dlng^2)``, with the
search radius converted at a flat 111 km per degree. This is only reasonable
for short radii away from the poles and the date line. Switching to a
geodesic formula would change which trips are returned.
"""

from __future__ import annotations

from typing import Any

from bson import ObjectId

from config import KM_PER_DEGREE, TRAVELLER_ROLE

# Trip fields returned alongside the creator profile and distance.
DISCOVERY_TRIP_FIELDS: tuple[str, ...] = (
    "title",
    "description",
    "when",
    "where",
    "slots",
    "status",
    "requests",
    "participants",
    "createdAt",
    "updatedAt",
)


def radius_to_degrees(radius_km: float) -> float:
    """Convert a search radius in km to the equivalent degree threshold."""
    return radius_km / KM_PER_DEGREE


def degree_distance_expr(lat: float, lng: float) -> dict[str, Any]:
    """Expression for the degree distance from ``(lat, lng)`` to the creator."""
    return {
        "$sqrt": {
            "$add": [
                {"$pow": [{"$subtract": ["$creator.location.lat", lat]}, 2]},
                {"$pow": [{"$subtract": ["$creator.location.lng", lng]}, 2]},
            ],
        },
    }


def build_discovery_pipeline(
    requester_id: ObjectId,
    lat: float,
    lng: float,
    max_degree_distance: float,
) -> list[dict[str, Any]]:
    """Build the nearby-trips pipeline for a requester at ``(lat, lng)``.

    Stages: join each trip to its creator, keep travellers other than the
    requester who have a usable location, compute the degree distance, keep
    trips within the threshold, project the trip with the creator profile in
    place of the raw ``createdBy`` reference, nearest first.
    """
    projection: dict[str, Any] = {field: 1 for field in DISCOVERY_TRIP_FIELDS}
    projection["createdBy"] = "$creator"
    projection["distance"] = 1

    return [
        {
            "$lookup": {
                "from": "users",
                "localField": "createdBy",
                "foreignField": "_id",
                "as": "creator",
            },
        },
        {"$unwind": "$creator"},
        {
            "$match": {
                "creator.role": TRAVELLER_ROLE,
                "creator._id": {"$ne": requester_id},
                "creator.location.lat": {"$ne": None},
                "creator.location.lng": {"$ne": None},
            },
        },
        {"$addFields": {"distance": degree_distance_expr(lat, lng)}},
        {"$match": {"distance": {"$lte": max_degree_distance}}},
        {"$project": projection},
        {"$sort": {"distance": 1}},
    ]
