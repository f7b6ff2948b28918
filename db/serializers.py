"""Serialization utilities for MongoDB documents.

Aggregation results come back as raw BSON-derived dicts; these helpers turn
them into JSON-compatible structures.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from bson import ObjectId


def serialize_for_json(data: Any) -> Any:
    """Recursively serialize MongoDB types for JSON compatibility.

    Converts ObjectId to string and datetime to ISO format.
    Handles nested dicts and lists.
    """
    if isinstance(data, dict):
        return {k: serialize_for_json(v) for k, v in data.items()}
    if isinstance(data, list):
        return [serialize_for_json(item) for item in data]
    if isinstance(data, ObjectId):
        return str(data)
    if isinstance(data, datetime):
        return data.isoformat()
    return data


def serialize_document(doc: dict[str, Any] | None) -> dict[str, Any]:
    """Serialize a single raw document, renaming ``_id`` to ``id``."""
    if not doc:
        return {}
    payload = serialize_for_json(doc)
    if "_id" in payload:
        payload["id"] = payload.pop("_id")
    return payload


def serialize_model(document: Any) -> dict[str, Any]:
    """Dump a Beanie document or Pydantic model into a JSON-ready dict."""
    payload = document.model_dump(mode="json", exclude={"revision_id"})
    payload.pop("_id", None)
    if getattr(document, "id", None) is not None:
        payload["id"] = str(document.id)
    return payload
