"""API routes for trip discovery and reads."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from core.api import api_route
from core.auth import get_current_user
from db.models import User
from trips.services import TripCrudService, TripDiscoveryService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/trips", tags=["Trips API"])
@api_route(logger)
async def discover_trips(
    user: Annotated[User, Depends(get_current_user)],
    radius: Annotated[
        float | None,
        Query(gt=0, description="Search radius in km (default 50)"),
    ] = None,
):
    """List trips by nearby travellers, nearest first."""
    trips = await TripDiscoveryService.discover_trips(user, radius)
    return {
        "status": "success",
        "trips": trips,
        "message": "Trips fetched successfully",
    }


@router.get("/api/trips/mine", tags=["Trips API"])
@api_route(logger)
async def get_my_trips(user: Annotated[User, Depends(get_current_user)]):
    """Trips created by the caller, with requesters and participants."""
    trips = await TripCrudService.get_my_trips(user)
    return {
        "status": "success",
        "trips": trips,
        "message": "Trips fetched successfully",
    }


@router.get("/api/trips/{trip_id}", tags=["Trips API"])
@api_route(logger)
async def get_single_trip(
    trip_id: str,
    user: Annotated[User, Depends(get_current_user)],
):
    trip = await TripCrudService.get_trip(trip_id)
    return {"status": "success", "trip": trip}
