"""API routes for the join-request workflow."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from core.api import api_route
from core.auth import get_current_user
from db.models import User
from trips.models import StatusRequest
from trips.services import JoinRequestService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/api/trips/{trip_id}/requests", tags=["Trips API"])
@api_route(logger)
async def send_join_request(
    trip_id: str,
    user: Annotated[User, Depends(get_current_user)],
):
    """Ask to join a trip."""
    request = await JoinRequestService.send_request(trip_id, user)
    return {
        "status": "success",
        "requestId": str(request.id),
        "message": "Join request sent successfully",
    }


@router.patch("/api/trips/{trip_id}/requests/{request_id}", tags=["Trips API"])
@api_route(logger)
async def manage_join_request(
    trip_id: str,
    request_id: str,
    body: StatusRequest,
    user: Annotated[User, Depends(get_current_user)],
):
    """Accept or reject a pending join request. Creator only."""
    decision = await JoinRequestService.manage_request(
        trip_id,
        request_id,
        user,
        body.status,
    )
    return {
        "status": "success",
        "message": f"Join request {decision} successfully",
    }
