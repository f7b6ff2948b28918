"""
Trip planning package.

The package is organized into:
- routes/: API endpoint handlers (discovery and reads, CRUD, join requests)
- services/: Business logic, including the join-request state machine
- pipeline.py: Aggregation pipeline for nearby-trip discovery
- models.py: Request bodies
"""

from fastapi import APIRouter

from trips.routes import crud, query, requests

router = APIRouter()

# query first so /api/trips/mine is matched before /api/trips/{trip_id}
router.include_router(query.router, tags=["trips-query"])
router.include_router(crud.router, tags=["trips-crud"])
router.include_router(requests.router, tags=["trips-requests"])

__all__ = ["router"]
