"""Business logic for trip create, read, update and delete operations."""

import logging
from datetime import UTC, datetime
from typing import Any

from beanie import PydanticObjectId

from core.auth import parse_object_id
from core.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from db.models import TRIP_CLOSED, TRIP_STATUSES, Trip, User
from db.operations import conditional_update
from trips.services.profiles import populate_trips

logger = logging.getLogger(__name__)


async def load_trip(trip_id: str) -> Trip:
    """Fetch a trip by id.

    Raises:
        ResourceNotFoundException: If the id is malformed or unknown
    """
    oid = parse_object_id(trip_id, "trip id")
    trip = await Trip.get(oid) if oid is not None else None
    if trip is None:
        msg = "Trip not found"
        raise ResourceNotFoundException(msg)
    return trip


def ensure_creator(trip: Trip, user: User, message: str = "Not authorized") -> None:
    if trip.createdBy != user.id:
        raise AuthorizationException(message)


def validate_status(value: str | None) -> str:
    if value not in TRIP_STATUSES:
        msg = "Invalid status value"
        raise ValidationException(msg)
    return value


async def close_if_full(trip_id: PydanticObjectId, slots: int) -> bool:
    """Mark the trip closed once its participants fill every slot.

    The check runs server-side against the stored participant list.
    """
    closed = await conditional_update(
        Trip,
        {
            "_id": trip_id,
            "slots": slots,
            f"participants.{slots - 1}": {"$exists": True},
            "status": {"$ne": TRIP_CLOSED},
        },
        {"$set": {"status": TRIP_CLOSED, "updatedAt": datetime.now(UTC)}},
    )
    if closed:
        logger.info("Trip %s is full and now closed", trip_id)
    return closed


class TripCrudService:
    """Service class for trip create, read, update and delete operations."""

    @staticmethod
    async def create_trip(user: User, trip_data: dict[str, Any]) -> Trip:
        """Create a trip owned by ``user``. Status starts as ``active``."""
        trip = Trip(**trip_data, createdBy=user.id)
        await trip.insert()
        logger.info("User %s created trip %s", user.id, trip.id)
        return trip

    @staticmethod
    async def get_trip(trip_id: str) -> dict[str, Any]:
        """Get a single trip with creator and participants resolved."""
        trip = await load_trip(trip_id)
        payloads = await populate_trips([trip], include_creator=True)
        return payloads[0]

    @staticmethod
    async def get_my_trips(user: User) -> list[dict[str, Any]]:
        """All trips created by ``user`` with requesters and participants resolved."""
        trips = (
            await Trip.find(Trip.createdBy == user.id).sort(-Trip.createdAt).to_list()
        )
        return await populate_trips(trips)

    @staticmethod
    async def update_trip(
        trip_id: str,
        user: User,
        changes: dict[str, Any],
    ) -> Trip:
        """
        Apply a partial update to a trip owned by ``user``.

        Args:
            trip_id: Trip id
            user: Caller, must be the creator
            changes: Fields to set; anything absent keeps its value

        Returns:
            The updated Trip

        Raises:
            ResourceNotFoundException: If the trip does not exist
            AuthorizationException: If the caller is not the creator
            ValidationException: On a bad status or slots below participants
        """
        trip = await load_trip(trip_id)
        ensure_creator(trip, user)

        if "status" in changes:
            validate_status(changes["status"])
        if not changes:
            return trip

        guard: dict[str, Any] = {"_id": trip.id, "createdBy": user.id}
        new_slots = changes.get("slots")
        if new_slots is not None:
            # No participant may sit at index >= new_slots
            guard[f"participants.{new_slots}"] = {"$exists": False}

        updated = await conditional_update(
            Trip,
            guard,
            {"$set": {**changes, "updatedAt": datetime.now(UTC)}},
        )
        if not updated:
            if new_slots is not None:
                msg = "Slots cannot be lower than the number of participants"
                raise ValidationException(msg)
            msg = "Trip not found"
            raise ResourceNotFoundException(msg)

        if new_slots is not None:
            await close_if_full(trip.id, new_slots)

        logger.info("Trip %s updated fields %s", trip.id, sorted(changes))
        return await load_trip(trip_id)

    @staticmethod
    async def delete_trip(trip_id: str, user: User) -> dict[str, str]:
        """Delete a trip owned by ``user``."""
        trip = await load_trip(trip_id)
        ensure_creator(trip, user)
        await trip.delete()
        logger.info("Trip %s deleted by %s", trip.id, user.id)
        return {"status": "success", "message": "Trip deleted successfully"}

    @staticmethod
    async def update_status(trip_id: str, user: User, status: str | None) -> str:
        """Set the trip status. Any status may follow any other."""
        trip = await load_trip(trip_id)
        ensure_creator(trip, user)
        new_status = validate_status(status)

        await conditional_update(
            Trip,
            {"_id": trip.id},
            {"$set": {"status": new_status, "updatedAt": datetime.now(UTC)}},
        )
        logger.info("Trip %s status %s -> %s", trip.id, trip.status, new_status)
        return new_status
