"""Pydantic models for trip API requests."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from db.models import ScheduleWindow


class TripCreateRequest(BaseModel):
    title: str = Field(min_length=1)
    description: str | None = None
    when: ScheduleWindow | None = None
    where: str | None = None
    slots: int = Field(ge=1)

    model_config = ConfigDict(extra="ignore")


class TripUpdateRequest(BaseModel):
    """Partial update; fields left out keep their stored value."""

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    when: ScheduleWindow | None = None
    where: str | None = None
    slots: int | None = Field(default=None, ge=1)
    # Checked by the service so a bad value is a 400, not a 422
    status: str | None = None

    model_config = ConfigDict(extra="ignore")

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class StatusRequest(BaseModel):
    """Body of the join-request decision and trip status endpoints."""

    status: str | None = None
