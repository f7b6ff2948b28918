"""Beanie ODM document models for MongoDB collections.

Usage:
    from db.models import Trip, User, Conversation

    trip = await Trip.get(trip_id)
    mine = await Trip.find(Trip.createdBy == user.id).to_list()

    trip.title = "Weekend hike"
    await trip.save()
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from beanie import Document, Indexed, PydanticObjectId
from pydantic import BaseModel, Field, field_validator
from pymongo import ASCENDING, DESCENDING, IndexModel

TripStatus = Literal["active", "on hold", "closed"]
TRIP_STATUSES: tuple[str, ...] = ("active", "on hold", "closed")
TRIP_CLOSED = "closed"

JoinDecision = Literal["accepted", "rejected"]
JOIN_DECISIONS: tuple[str, ...] = ("accepted", "rejected")


def _utcnow() -> datetime:
    return datetime.now(UTC)


class GeoCoordinate(BaseModel):
    """A user's last known position. Either part may be missing."""

    lat: float | None = None
    lng: float | None = None

    @property
    def is_complete(self) -> bool:
        return self.lat is not None and self.lng is not None


class User(Document):
    """User profile, owned by the auth service and only read here."""

    firstname: str | None = None
    lastname: str | None = None
    email: str | None = None
    role: str = "traveller"
    location: GeoCoordinate | None = None

    class Settings:
        name = "users"

    class Config:
        extra = "allow"


class ScheduleWindow(BaseModel):
    start: datetime | None = None
    end: datetime | None = None


class JoinRequest(BaseModel):
    """Pending request embedded in a trip. Its presence means pending."""

    id: PydanticObjectId = Field(default_factory=PydanticObjectId)
    user: PydanticObjectId
    createdAt: datetime = Field(default_factory=_utcnow)


class Trip(Document):
    """A planned shared trip with a capacity of ``slots`` participants."""

    title: str
    description: str | None = None
    when: ScheduleWindow | None = None
    where: str | None = None
    slots: int = Field(ge=1)
    status: TripStatus = "active"
    createdBy: Indexed(PydanticObjectId)
    requests: list[JoinRequest] = Field(default_factory=list)
    participants: list[PydanticObjectId] = Field(default_factory=list)
    createdAt: datetime = Field(default_factory=_utcnow)
    updatedAt: datetime = Field(default_factory=_utcnow)

    class Settings:
        name = "trips"
        indexes = [
            IndexModel(
                [("requests.user", ASCENDING)],
                name="trips_request_user_idx",
            ),
            IndexModel(
                [("createdAt", DESCENDING)],
                name="trips_created_at_idx",
            ),
        ]

    def find_request(self, request_id: PydanticObjectId) -> JoinRequest | None:
        return next((r for r in self.requests if r.id == request_id), None)

    def has_request_from(self, user_id: PydanticObjectId) -> bool:
        return any(r.user == user_id for r in self.requests)

    @property
    def is_full(self) -> bool:
        return len(self.participants) >= self.slots


class ChatMessage(BaseModel):
    senderId: str
    text: str
    createdAt: datetime = Field(default_factory=_utcnow)


class Conversation(Document):
    """Message history between exactly two users.

    ``participants`` is stored sorted and ``pairKey`` joins them, so the pair
    has one canonical form and at most one document.
    """

    pairKey: Indexed(str, unique=True)
    participants: list[str]
    messages: list[ChatMessage] = Field(default_factory=list)
    createdAt: datetime = Field(default_factory=_utcnow)
    updatedAt: datetime = Field(default_factory=_utcnow)

    class Settings:
        name = "chats"
        indexes = [
            IndexModel(
                [("participants", ASCENDING)],
                name="chats_participants_idx",
            ),
        ]

    @field_validator("participants")
    @classmethod
    def validate_pair(cls, v: list[str]) -> list[str]:
        if len(v) != 2:
            msg = "A conversation has exactly two participants"
            raise ValueError(msg)
        return sorted(v)


class ServerLog(Document):
    """Application log record persisted by the MongoDB logging handler."""

    timestamp: datetime = Field(default_factory=_utcnow)
    level: str
    logger: str
    message: str
    module: str | None = None
    function: str | None = None
    line: int | None = None
    exception: str | None = None
    extra: dict[str, Any] | None = None

    class Settings:
        name = "server_logs"
        indexes = [
            IndexModel([("timestamp", DESCENDING)], name="server_logs_timestamp_idx"),
            IndexModel([("level", ASCENDING)], name="server_logs_level_idx"),
        ]


# List of all document models for Beanie initialization
ALL_DOCUMENT_MODELS = [
    User,
    Trip,
    Conversation,
    ServerLog,
]
