"""Database package for MongoDB operations using Beanie ODM.

Modules:
    manager: DatabaseManager singleton for connection handling
    models: Beanie Document models for all collections
    operations: aggregation and conditional-write helpers
    serializers: JSON conversion of raw documents
"""

from db.manager import DatabaseManager, db_manager
from db.models import (
    ALL_DOCUMENT_MODELS,
    ChatMessage,
    Conversation,
    GeoCoordinate,
    JoinRequest,
    ScheduleWindow,
    ServerLog,
    Trip,
    User,
)
from db.operations import aggregate_to_list, conditional_update, upsert_one
from db.serializers import serialize_document, serialize_for_json, serialize_model

__all__ = [
    "ALL_DOCUMENT_MODELS",
    "ChatMessage",
    "Conversation",
    "DatabaseManager",
    "GeoCoordinate",
    "JoinRequest",
    "ScheduleWindow",
    "ServerLog",
    "Trip",
    "User",
    "aggregate_to_list",
    "conditional_update",
    "db_manager",
    "init_database",
    "serialize_document",
    "serialize_for_json",
    "serialize_model",
    "upsert_one",
]


async def init_database() -> None:
    """Connect and register all document models with Beanie."""
    await db_manager.init_beanie()
