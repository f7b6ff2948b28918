"""Translation of domain errors into HTTP responses for FastAPI routes."""

import functools
import logging
from collections.abc import Callable

from fastapi import HTTPException, status

from core.exceptions import (
    AuthenticationException,
    AuthorizationException,
    DuplicateResourceException,
    ResourceNotFoundException,
    TravelBuddyException,
    ValidationException,
)

# Checked in order; the first matching class wins.
ERROR_STATUS_MAP: tuple[tuple[type[TravelBuddyException], int, int], ...] = (
    (ValidationException, status.HTTP_400_BAD_REQUEST, logging.WARNING),
    (AuthenticationException, status.HTTP_401_UNAUTHORIZED, logging.WARNING),
    (AuthorizationException, status.HTTP_403_FORBIDDEN, logging.WARNING),
    (ResourceNotFoundException, status.HTTP_404_NOT_FOUND, logging.INFO),
    (DuplicateResourceException, status.HTTP_409_CONFLICT, logging.WARNING),
)


def http_error_for(
    exc: TravelBuddyException,
    logger: logging.Logger,
    where: str,
) -> HTTPException:
    """Build the HTTPException for a domain error and log it once."""
    for exc_type, status_code, level in ERROR_STATUS_MAP:
        if isinstance(exc, exc_type):
            logger.log(
                level,
                "%s in %s: %s",
                exc_type.__name__,
                where,
                exc.message,
            )
            return HTTPException(status_code=status_code, detail=exc.message)

    logger.error(
        "Application error in %s: %s",
        where,
        exc.message,
        exc_info=exc,
    )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=exc.message,
    )


def api_route(logger: logging.Logger):
    """
    Decorator giving trip and chat endpoints a uniform error contract.

    - HTTPException passes through untouched
    - Domain errors become 400/401/403/404/409 per ``ERROR_STATUS_MAP``
    - Anything else is logged with its traceback and becomes a 500

    Usage:
        @router.get("/api/trips/{trip_id}")
        @api_route(logger)
        async def get_single_trip(trip_id: str):
            ...
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except HTTPException:
                raise
            except TravelBuddyException as e:
                raise http_error_for(e, logger, func.__name__) from e
            except Exception as e:
                logger.exception("Unexpected error in %s", func.__name__)
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail=str(e),
                ) from e

        return wrapper

    return decorator
