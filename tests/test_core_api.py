import logging

import pytest
from bson import ObjectId
from fastapi import HTTPException, status

from core.api import api_route, http_error_for
from core.auth import resolve_user
from core.exceptions import (
    AuthenticationException,
    AuthorizationException,
    DuplicateResourceException,
    ResourceNotFoundException,
    TravelBuddyException,
    ValidationException,
)
from factories import make_user

logger = logging.getLogger("tests.core_api")


@pytest.mark.parametrize(
    ("exc", "expected_status"),
    [
        (ValidationException("User location not available"), 400),
        (AuthenticationException("Authentication required"), 401),
        (AuthorizationException("Not authorized"), 403),
        (ResourceNotFoundException("Trip not found"), 404),
        (DuplicateResourceException("Trip is already full"), 409),
        (TravelBuddyException("store unavailable"), 500),
    ],
)
def test_http_error_for_maps_each_domain_error(exc, expected_status) -> None:
    error = http_error_for(exc, logger, "handler")

    assert error.status_code == expected_status
    assert error.detail == exc.message


def test_not_found_is_logged_at_info(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="tests.core_api"):
        http_error_for(ResourceNotFoundException("Trip not found"), logger, "get_trip")

    assert [r.levelno for r in caplog.records] == [logging.INFO]
    assert "get_trip" in caplog.records[0].getMessage()


@pytest.mark.asyncio
async def test_api_route_converts_domain_error() -> None:
    @api_route(logger)
    async def handler():
        raise DuplicateResourceException("You have already requested to join this trip")

    with pytest.raises(HTTPException) as raised:
        await handler()

    assert raised.value.status_code == status.HTTP_409_CONFLICT
    assert raised.value.detail == "You have already requested to join this trip"


@pytest.mark.asyncio
async def test_api_route_allows_http_exception_passthrough() -> None:
    @api_route(logger)
    async def handler():
        raise HTTPException(status_code=418, detail="nope")

    with pytest.raises(HTTPException) as raised:
        await handler()

    assert raised.value.status_code == 418
    assert raised.value.detail == "nope"


@pytest.mark.asyncio
async def test_api_route_wraps_unexpected_exception() -> None:
    @api_route(logger)
    async def handler():
        raise ValueError("boom")

    with pytest.raises(HTTPException) as raised:
        await handler()

    assert raised.value.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert raised.value.detail == "boom"


@pytest.mark.asyncio
@pytest.mark.parametrize("raw_id", [None, "", "  ", "not-an-object-id"])
async def test_resolve_user_requires_well_formed_id(beanie_db, raw_id) -> None:
    with pytest.raises(AuthenticationException) as raised:
        await resolve_user(raw_id)

    assert raised.value.message == "Authentication required"


@pytest.mark.asyncio
async def test_resolve_user_rejects_unknown_and_finds_known(beanie_db) -> None:
    with pytest.raises(AuthenticationException) as raised:
        await resolve_user(str(ObjectId()))
    assert raised.value.message == "Unknown user"

    user = await make_user("Ada")
    resolved = await resolve_user(f" {user.id} ")
    assert resolved.id == user.id
