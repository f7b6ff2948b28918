"""Join-request workflow: users ask to join, creators accept or reject.

Every write here is a single conditional update, so the slot invariant
``len(participants) <= slots`` holds even when several decisions for the same
trip are processed concurrently.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from bson import ObjectId

from core.auth import parse_object_id
from core.exceptions import (
    DuplicateResourceException,
    ResourceNotFoundException,
    ValidationException,
)
from db.models import JOIN_DECISIONS, JoinRequest, Trip, User
from db.operations import conditional_update
from trips.services.trip_crud_service import close_if_full, ensure_creator, load_trip

logger = logging.getLogger(__name__)

ALREADY_REQUESTED = "You have already requested to join this trip"
ALREADY_PARTICIPANT = "User already a participant"
TRIP_FULL = "Trip is already full"
REQUEST_NOT_FOUND = "Join request not found"


def _encode_request(request: JoinRequest) -> dict[str, Any]:
    return {
        "id": ObjectId(request.id),
        "user": ObjectId(request.user),
        "createdAt": request.createdAt,
    }


class JoinRequestService:
    """Service class for sending and deciding join requests."""

    @staticmethod
    async def send_request(trip_id: str, user: User) -> JoinRequest:
        """
        Append a pending request from ``user`` to the trip.

        Raises:
            ResourceNotFoundException: If the trip does not exist
            DuplicateResourceException: If ``user`` already has a request
        """
        trip = await load_trip(trip_id)
        if trip.has_request_from(user.id):
            raise DuplicateResourceException(ALREADY_REQUESTED)

        request = JoinRequest(user=user.id)
        pushed = await conditional_update(
            Trip,
            {"_id": trip.id, "requests.user": {"$ne": user.id}},
            {
                "$push": {"requests": _encode_request(request)},
                "$set": {"updatedAt": datetime.now(UTC)},
            },
        )
        if not pushed:
            # Either deleted or a concurrent request from the same user won
            await load_trip(trip_id)
            raise DuplicateResourceException(ALREADY_REQUESTED)

        logger.info("User %s requested to join trip %s", user.id, trip.id)
        return request

    @staticmethod
    async def manage_request(
        trip_id: str,
        request_id: str,
        user: User,
        status: str | None,
    ) -> str:
        """
        Accept or reject a pending request. Either decision consumes it.

        Args:
            trip_id: Trip id
            request_id: Embedded request id
            user: Caller, must be the trip creator
            status: ``accepted`` or ``rejected``

        Returns:
            The applied decision

        Raises:
            ValidationException: If ``status`` is not a valid decision
            ResourceNotFoundException: If the trip or request does not exist
            AuthorizationException: If the caller is not the creator
            DuplicateResourceException: If the requester already participates
                or the trip is full
        """
        if status not in JOIN_DECISIONS:
            msg = "Invalid status provided"
            raise ValidationException(msg)

        trip = await load_trip(trip_id)
        ensure_creator(trip, user, "Not authorized to manage requests")

        request_oid = parse_object_id(request_id, "request id")
        request = trip.find_request(request_oid) if request_oid else None
        if request is None:
            raise ResourceNotFoundException(REQUEST_NOT_FOUND)

        now = datetime.now(UTC)
        pull_request = {"$pull": {"requests": {"id": ObjectId(request.id)}}}

        if status == "accepted":
            if request.user in trip.participants:
                raise DuplicateResourceException(ALREADY_PARTICIPANT)
            if trip.is_full:
                raise DuplicateResourceException(TRIP_FULL)

            accepted = await conditional_update(
                Trip,
                {
                    "_id": trip.id,
                    "slots": trip.slots,
                    "requests.id": ObjectId(request.id),
                    "participants": {"$ne": request.user},
                    f"participants.{trip.slots - 1}": {"$exists": False},
                },
                {
                    **pull_request,
                    "$push": {"participants": ObjectId(request.user)},
                    "$set": {"updatedAt": now},
                },
            )
            if not accepted:
                await JoinRequestService._raise_stale_accept(trip_id, request)
        else:
            rejected = await conditional_update(
                Trip,
                {"_id": trip.id, "requests.id": ObjectId(request.id)},
                {**pull_request, "$set": {"updatedAt": now}},
            )
            if not rejected:
                raise ResourceNotFoundException(REQUEST_NOT_FOUND)

        await close_if_full(trip.id, trip.slots)
        logger.info(
            "Join request %s on trip %s %s by %s",
            request.id,
            trip.id,
            status,
            user.id,
        )
        return status

    @staticmethod
    async def _raise_stale_accept(trip_id: str, request: JoinRequest) -> None:
        """Explain why the guarded accept matched nothing.

        The trip changed between the read and the write, so re-read it and
        report the first precondition that no longer holds.
        """
        trip = await load_trip(trip_id)
        if trip.find_request(request.id) is None:
            raise ResourceNotFoundException(REQUEST_NOT_FOUND)
        if request.user in trip.participants:
            raise DuplicateResourceException(ALREADY_PARTICIPANT)
        if trip.is_full:
            raise DuplicateResourceException(TRIP_FULL)
        msg = "Trip changed while the request was being processed"
        raise DuplicateResourceException(msg)
