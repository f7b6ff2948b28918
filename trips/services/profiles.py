"""Resolution of user references to display fields."""

from __future__ import annotations

from typing import Any

from beanie import PydanticObjectId
from beanie.operators import In

from db.models import Trip, User
from db.serializers import serialize_model

DISPLAY_FIELDS: tuple[str, ...] = ("firstname", "lastname", "email")


def _display(user_id: PydanticObjectId, users: dict[PydanticObjectId, User]) -> dict:
    user = users.get(user_id)
    profile: dict[str, Any] = {"id": str(user_id)}
    for field in DISPLAY_FIELDS:
        profile[field] = getattr(user, field, None) if user else None
    return profile


async def load_users(ids: set[PydanticObjectId]) -> dict[PydanticObjectId, User]:
    if not ids:
        return {}
    users = await User.find(In(User.id, list(ids))).to_list()
    return {u.id: u for u in users}


async def populate_trips(
    trips: list[Trip],
    *,
    include_creator: bool = False,
) -> list[dict[str, Any]]:
    """Serialize trips with requesters and participants as display profiles.

    All referenced users are fetched in one query.
    """
    ids: set[PydanticObjectId] = set()
    for trip in trips:
        ids.update(trip.participants)
        ids.update(r.user for r in trip.requests)
        if include_creator:
            ids.add(trip.createdBy)
    users = await load_users(ids)

    payloads = []
    for trip in trips:
        payload = serialize_model(trip)
        payload["participants"] = [_display(p, users) for p in trip.participants]
        payload["requests"] = [
            {
                "id": str(r.id),
                "user": _display(r.user, users),
                "createdAt": r.createdAt.isoformat(),
            }
            for r in trip.requests
        ]
        if include_creator:
            payload["createdBy"] = _display(trip.createdBy, users)
        payloads.append(payload)
    return payloads
