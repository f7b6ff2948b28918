"""Authenticated-user resolution for trip and chat routes.

Token verification belongs to the upstream auth gateway. By the time a request
reaches this service the caller's id has been placed in the ``X-User-Id``
header; this module only resolves it to a ``User`` profile.
"""

from __future__ import annotations

import logging

from beanie import PydanticObjectId
from bson.errors import InvalidId
from fastapi import Request

from core.api import http_error_for
from core.exceptions import AuthenticationException
from db.models import User

logger = logging.getLogger(__name__)

USER_ID_HEADER = "X-User-Id"


def parse_object_id(value: str, label: str = "id") -> PydanticObjectId | None:
    """Parse a hex ObjectId string, returning None when malformed."""
    try:
        return PydanticObjectId(value)
    except (InvalidId, TypeError):
        logger.debug("Malformed %s: %r", label, value)
        return None


async def resolve_user(raw_id: str | None) -> User:
    """Look up the caller's profile.

    Raises:
        AuthenticationException: If the id is missing, malformed or unknown
    """
    raw_id = (raw_id or "").strip()
    user_id = parse_object_id(raw_id, "user id") if raw_id else None
    if user_id is None:
        msg = "Authentication required"
        raise AuthenticationException(msg)

    user = await User.get(user_id)
    if user is None:
        msg = "Unknown user"
        raise AuthenticationException(msg, {"userId": raw_id})
    return user


async def get_current_user(request: Request) -> User:
    """FastAPI dependency returning the authenticated caller.

    Dependencies run outside ``api_route``, so the error is mapped here.
    """
    try:
        return await resolve_user(request.headers.get(USER_ID_HEADER))
    except AuthenticationException as e:
        raise http_error_for(e, logger, "get_current_user") from e

