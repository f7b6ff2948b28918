"""Chat services module."""

from chat.services.conversation_service import ConversationService

__all__ = ["ConversationService"]
