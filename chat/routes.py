"""Chat history API."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from chat.services import ConversationService
from core.api import api_route
from core.auth import get_current_user, parse_object_id
from core.exceptions import ValidationException
from db.models import User
from db.serializers import serialize_for_json

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/chat/{target_user_id}", tags=["Chat"])
@api_route(logger)
async def get_chat_history(
    target_user_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Return the messages exchanged with another user, oldest first."""
    if parse_object_id(target_user_id) is None:
        msg = "Invalid user id"
        raise ValidationException(msg)

    conversation = await ConversationService.find_conversation(
        str(current_user.id),
        target_user_id,
    )
    if conversation is None:
        return {"status": "success", "messages": []}

    return {
        "status": "success",
        "conversationId": str(conversation.id),
        "messages": [
            serialize_for_json(message.model_dump())
            for message in conversation.messages
        ],
    }
