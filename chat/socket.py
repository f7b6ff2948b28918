"""
Realtime chat coordinator.

Clients join the room of a user pair and broadcast messages into it. Every
message is persisted to the pair's conversation before it is broadcast; if
the write fails the sender alone is told and nothing is delivered to the room.

Events (client -> server):
    joinChat     {userId, targetUserId, senderName?}
    sendMessage  {userId, targetUserId, senderFirstName?, senderLastName?, text}

Events (server -> client):
    messageReceived  {senderFirstName, senderLastName, text}   to the room
    messageFailed    {roomId, text, error}                      to the sender
    chatError        {event, error}                             to the sender
"""

import logging
from typing import Any

import socketio
from pydantic import ValidationError

from chat.models import JoinChatPayload, MessageReceivedEvent, SendMessagePayload
from chat.rooms import room_id_for
from chat.services import ConversationService
from config import get_cors_origins

logger = logging.getLogger(__name__)


def create_socket_server() -> socketio.AsyncServer:
    return socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins=get_cors_origins(),
    )


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first['msg']}" if location else first["msg"]


class ChatCoordinator:
    """Binds the chat event handlers to a Socket.IO server."""

    def __init__(self, server: socketio.AsyncServer):
        self.server = server
        server.on("connect", self.on_connect)
        server.on("disconnect", self.on_disconnect)
        server.on("joinChat", self.join_chat)
        server.on("sendMessage", self.send_message)

    async def on_connect(self, sid: str, environ: dict, auth: Any = None) -> None:
        logger.info("Chat client connected: %s", sid)

    async def on_disconnect(self, sid: str, reason: Any = None) -> None:
        # Socket.IO drops the sid from its rooms on its own.
        logger.info("Chat client disconnected: %s", sid)

    async def _reject(self, sid: str, event: str, error: str) -> None:
        logger.warning("Rejected %s from %s: %s", event, sid, error)
        await self.server.emit(
            "chatError",
            {"event": event, "error": error},
            to=sid,
        )

    async def join_chat(self, sid: str, data: Any = None) -> dict | None:
        try:
            payload = JoinChatPayload.model_validate(data or {})
        except ValidationError as e:
            await self._reject(sid, "joinChat", _validation_message(e))
            return None

        room_id = room_id_for(payload.userId, payload.targetUserId)
        await self.server.enter_room(sid, room_id)
        logger.info(
            "%s joined room %s",
            payload.senderName or payload.userId,
            room_id,
        )
        return {"status": "joined", "roomId": room_id}

    async def send_message(self, sid: str, data: Any = None) -> None:
        try:
            payload = SendMessagePayload.model_validate(data or {})
        except ValidationError as e:
            await self._reject(sid, "sendMessage", _validation_message(e))
            return

        room_id = room_id_for(payload.userId, payload.targetUserId)
        try:
            await ConversationService.append_message(
                payload.userId,
                payload.targetUserId,
                payload.text,
            )
        except Exception:
            logger.exception("Failed to persist message in room %s", room_id)
            await self.server.emit(
                "messageFailed",
                {
                    "roomId": room_id,
                    "text": payload.text,
                    "error": "Message could not be saved",
                },
                to=sid,
            )
            return

        event = MessageReceivedEvent(
            senderFirstName=payload.senderFirstName,
            senderLastName=payload.senderLastName,
            text=payload.text,
        )
        await self.server.emit("messageReceived", event.model_dump(), to=room_id)
