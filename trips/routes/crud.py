"""API routes for trip create, update and delete operations."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from core.api import api_route
from core.auth import get_current_user
from db.models import User
from db.serializers import serialize_model
from trips.models import StatusRequest, TripCreateRequest, TripUpdateRequest
from trips.services import TripCrudService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/api/trips",
    status_code=status.HTTP_201_CREATED,
    tags=["Trips API"],
)
@api_route(logger)
async def create_trip(
    trip_data: TripCreateRequest,
    user: Annotated[User, Depends(get_current_user)],
):
    """Create a trip owned by the caller."""
    trip = await TripCrudService.create_trip(user, trip_data.model_dump())
    return {"status": "success", "trip": serialize_model(trip)}


@router.put("/api/trips/{trip_id}", tags=["Trips API"])
@api_route(logger)
async def update_trip(
    trip_id: str,
    update_data: TripUpdateRequest,
    user: Annotated[User, Depends(get_current_user)],
):
    """Partially update a trip. Creator only."""
    trip = await TripCrudService.update_trip(trip_id, user, update_data.changes())
    return {"status": "success", "trip": serialize_model(trip)}


@router.delete("/api/trips/{trip_id}", tags=["Trips API"])
@api_route(logger)
async def delete_trip(
    trip_id: str,
    user: Annotated[User, Depends(get_current_user)],
):
    return await TripCrudService.delete_trip(trip_id, user)


@router.patch("/api/trips/{trip_id}/status", tags=["Trips API"])
@api_route(logger)
async def update_trip_status(
    trip_id: str,
    body: StatusRequest,
    user: Annotated[User, Depends(get_current_user)],
):
    """Set the trip status to active, on hold or closed. Creator only."""
    new_status = await TripCrudService.update_status(trip_id, user, body.status)
    return {
        "status": "success",
        "message": f"Trip status updated to {new_status}",
    }
