"""Raw collection operations for Beanie document models.

Beanie covers whole-document CRUD. The conditional writes and aggregation
pipelines used by the trip and chat services go straight to the underlying
collection through these helpers, which work with both Motor and PyMongo
async collections.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


def collection_for(model: Any) -> Any:
    """Return the driver-level collection behind a Beanie document class."""
    return model.get_pymongo_collection()


async def aggregate_to_list(
    model: Any,
    pipeline: Iterable[dict[str, Any]],
    *,
    length: int | None = None,
    **kwargs: Any,
) -> list[dict[str, Any]]:
    """
    Run an aggregation pipeline and return results as a list.

    Motor returns the cursor directly while PyMongo async returns it via
    await; both are handled.
    """
    cursor = collection_for(model).aggregate(list(pipeline), **kwargs)
    if inspect.isawaitable(cursor):
        cursor = await cursor
    return await cursor.to_list(length=length)


async def conditional_update(
    model: Any,
    filter_dict: dict[str, Any],
    update: dict[str, Any],
) -> bool:
    """Apply ``update`` to one document only if it matches ``filter_dict``.

    The match and the write happen in a single server-side operation, so a
    guard placed in the filter cannot be invalidated between check and write.

    Returns:
        True if a document matched and was updated.
    """
    result = await collection_for(model).update_one(filter_dict, update)
    logger.debug(
        "Conditional update on %s matched=%d modified=%d",
        model.__name__,
        result.matched_count,
        result.modified_count,
    )
    return result.matched_count > 0


async def upsert_one(
    model: Any,
    filter_dict: dict[str, Any],
    update: dict[str, Any],
) -> Any:
    """Update one document, inserting it from the filter if none matches."""
    return await collection_for(model).update_one(filter_dict, update, upsert=True)
