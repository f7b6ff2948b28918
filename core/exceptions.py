"""
Centralized exception hierarchy for domain-specific errors.

Services raise these instead of HTTP errors so that the same logic can be
driven from REST routes and from the realtime chat coordinator. The
``api_route`` decorator in :mod:`core.api` maps each class onto a status code.
"""


class TravelBuddyError(Exception):
    """Base exception for all application-specific errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(TravelBuddyError):
    """Missing or malformed input (absent coordinate, bad status value)."""


class AuthenticationError(TravelBuddyError):
    """The caller could not be identified."""


class AuthorizationError(TravelBuddyError):
    """The caller is authenticated but does not own the resource."""


class ResourceNotFoundError(TravelBuddyError):
    """A trip, join request or user id does not resolve."""


class DuplicateResourceError(TravelBuddyError):
    """The operation conflicts with current state (duplicate request, trip full)."""


TravelBuddyException = TravelBuddyError
ValidationException = ValidationError
AuthenticationException = AuthenticationError
AuthorizationException = AuthorizationError
ResourceNotFoundException = ResourceNotFoundError
DuplicateResourceException = DuplicateResourceError
