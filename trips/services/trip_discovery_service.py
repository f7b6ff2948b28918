"""Nearby-trip discovery for the authenticated user."""

import logging
from typing import Any

from config import DEFAULT_SEARCH_RADIUS_KM
from core.exceptions import ValidationException
from db.models import Trip, User
from db.operations import aggregate_to_list
from db.serializers import serialize_document
from trips.pipeline import build_discovery_pipeline, radius_to_degrees

logger = logging.getLogger(__name__)


def _serialize_discovered(doc: dict[str, Any]) -> dict[str, Any]:
    """Serialize a result, giving the embedded creator the same ``id`` key."""
    payload = serialize_document(doc)
    creator = payload.get("createdBy")
    if isinstance(creator, dict) and "_id" in creator:
        creator["id"] = creator.pop("_id")
    return payload


class TripDiscoveryService:
    """Finds trips created by traveller users near the requester."""

    @staticmethod
    async def discover_trips(
        user: User,
        radius_km: float | None = None,
    ) -> list[dict[str, Any]]:
        """
        Return trips whose creator lies within ``radius_km`` of ``user``.

        Args:
            user: Authenticated requester; must carry a complete location
            radius_km: Search radius in kilometers (default 50)

        Returns:
            Trip dicts with ``createdBy`` replaced by the creator profile and
            a ``distance`` field in degrees. May be empty.

        Raises:
            ValidationException: If the requester's coordinate is missing
        """
        location = user.location
        if location is None or not location.is_complete:
            msg = "User location not available"
            raise ValidationException(msg)

        if radius_km is None:
            radius_km = DEFAULT_SEARCH_RADIUS_KM
        threshold = radius_to_degrees(radius_km)

        pipeline = build_discovery_pipeline(
            user.id,
            location.lat,
            location.lng,
            threshold,
        )
        results = await aggregate_to_list(Trip, pipeline)

        logger.info(
            "Discovered %d trips within %.1f km of user %s",
            len(results),
            radius_km,
            user.id,
        )
        return [_serialize_discovered(doc) for doc in results]
