"""Persistence of two-user conversations."""

import logging
from datetime import UTC, datetime

from chat.rooms import canonical_pair, pair_key
from db.models import ChatMessage, Conversation
from db.operations import upsert_one

logger = logging.getLogger(__name__)


class ConversationService:
    """Service class for reading and appending to pair conversations."""

    @staticmethod
    async def find_conversation(user_id: str, other_user_id: str) -> Conversation | None:
        """Find the conversation whose participants are exactly the two users.

        Matches regardless of which id is given first.
        """
        return await Conversation.find_one(
            {
                "participants": {
                    "$all": [str(user_id), str(other_user_id)],
                    "$size": 2,
                },
            },
        )

    @staticmethod
    async def append_message(
        sender_id: str,
        target_user_id: str,
        text: str,
    ) -> ChatMessage:
        """
        Append a message to the pair's conversation, creating it if needed.

        The create and the append are one upsert keyed on the pair, so two
        first messages racing each other still end up in a single document
        and neither is lost.

        Returns:
            The stored message
        """
        message = ChatMessage(senderId=str(sender_id), text=text)
        now = datetime.now(UTC)

        result = await upsert_one(
            Conversation,
            {"pairKey": pair_key(sender_id, target_user_id)},
            {
                "$push": {"messages": message.model_dump()},
                "$set": {"updatedAt": now},
                "$setOnInsert": {
                    "participants": canonical_pair(sender_id, target_user_id),
                    "createdAt": now,
                },
            },
        )
        if result.upserted_id is not None:
            logger.info(
                "Started conversation %s between %s and %s",
                result.upserted_id,
                sender_id,
                target_user_id,
            )
        return message
