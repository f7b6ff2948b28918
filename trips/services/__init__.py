"""Trip services module."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from trips.services.join_request_service import JoinRequestService
    from trips.services.trip_crud_service import TripCrudService
    from trips.services.trip_discovery_service import TripDiscoveryService

__all__ = ("JoinRequestService", "TripCrudService", "TripDiscoveryService")


def __getattr__(name: str):
    if name == "JoinRequestService":
        from trips.services.join_request_service import JoinRequestService

        return JoinRequestService
    if name == "TripCrudService":
        from trips.services.trip_crud_service import TripCrudService

        return TripCrudService
    if name == "TripDiscoveryService":
        from trips.services.trip_discovery_service import TripDiscoveryService

        return TripDiscoveryService
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
