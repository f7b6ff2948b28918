"""Trip API routes."""

from trips.routes import crud, query, requests

__all__ = ["crud", "query", "requests"]
