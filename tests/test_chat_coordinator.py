from __future__ import annotations

import asyncio

import pytest
import socketio
from bson import ObjectId

from chat import ChatCoordinator, create_socket_server
from chat.rooms import room_id_for
from chat.services import ConversationService
from db.models import Conversation
from socket_fakes import FakeSocketServer


@pytest.fixture
def server() -> FakeSocketServer:
    return FakeSocketServer()


@pytest.fixture
def coordinator(server: FakeSocketServer) -> ChatCoordinator:
    return ChatCoordinator(server)


def test_handlers_registered_on_real_server() -> None:
    server = create_socket_server()
    ChatCoordinator(server)

    assert isinstance(server, socketio.AsyncServer)
    assert {"connect", "disconnect", "joinChat", "sendMessage"} <= set(
        server.handlers["/"],
    )


@pytest.mark.asyncio
async def test_join_chat_enters_pair_room(server, coordinator) -> None:
    ack = await coordinator.join_chat(
        "sid-a",
        {"userId": "a", "targetUserId": "b", "senderName": "Alice"},
    )

    room = room_id_for("a", "b")
    assert ack == {"status": "joined", "roomId": room}
    assert server.rooms[room] == {"sid-a"}


@pytest.mark.asyncio
async def test_hello_is_persisted_and_broadcast(beanie_db, server, coordinator) -> None:
    alice, bob = str(ObjectId()), str(ObjectId())
    await coordinator.join_chat("sid-a", {"userId": alice, "targetUserId": bob})
    await coordinator.join_chat("sid-b", {"userId": bob, "targetUserId": alice})

    await coordinator.send_message(
        "sid-a",
        {
            "userId": alice,
            "targetUserId": bob,
            "senderFirstName": "Alice",
            "senderLastName": "Liddell",
            "text": "hello",
        },
    )

    conversation = await Conversation.find_one(
        {"participants": {"$all": [alice, bob], "$size": 2}},
    )
    assert conversation is not None
    assert conversation.participants == sorted([alice, bob])
    assert [(m.senderId, m.text) for m in conversation.messages] == [(alice, "hello")]

    received = server.received_by("sid-b")
    assert [(e.event, e.data) for e in received] == [
        (
            "messageReceived",
            {"senderFirstName": "Alice", "senderLastName": "Liddell", "text": "hello"},
        ),
    ]
    # The sender is in the room too and gets its own message back
    assert [e.event for e in server.received_by("sid-a")] == ["messageReceived"]


@pytest.mark.asyncio
async def test_replies_share_one_conversation(beanie_db, server, coordinator) -> None:
    alice, bob = str(ObjectId()), str(ObjectId())

    await coordinator.send_message(
        "sid-a",
        {"userId": alice, "targetUserId": bob, "text": "hello"},
    )
    await coordinator.send_message(
        "sid-b",
        {"userId": bob, "targetUserId": alice, "text": "hi back"},
    )

    conversations = await Conversation.find_all().to_list()
    assert len(conversations) == 1
    assert [m.text for m in conversations[0].messages] == ["hello", "hi back"]


@pytest.mark.asyncio
async def test_interleaved_sends_from_both_users(beanie_db, server, coordinator) -> None:
    alice, bob = str(ObjectId()), str(ObjectId())
    await coordinator.join_chat("sid-a", {"userId": alice, "targetUserId": bob})
    await coordinator.join_chat("sid-b", {"userId": bob, "targetUserId": alice})

    await asyncio.gather(
        coordinator.send_message(
            "sid-a",
            {"userId": alice, "targetUserId": bob, "text": "from alice"},
        ),
        coordinator.send_message(
            "sid-b",
            {"userId": bob, "targetUserId": alice, "text": "from bob"},
        ),
    )

    conversations = await Conversation.find_all().to_list()
    assert len(conversations) == 1
    assert sorted((m.senderId, m.text) for m in conversations[0].messages) == sorted(
        [(alice, "from alice"), (bob, "from bob")],
    )

    broadcasts = [e for e in server.emitted if e.event == "messageReceived"]
    assert len(broadcasts) == 2
    assert {e.to for e in broadcasts} == {room_id_for(alice, bob)}
    assert sorted(e.data["text"] for e in broadcasts) == ["from alice", "from bob"]


@pytest.mark.asyncio
async def test_persistence_failure_notifies_sender_only(
    beanie_db,
    server,
    coordinator,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    async def _failing_append(*args, **kwargs):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(ConversationService, "append_message", _failing_append)

    await coordinator.join_chat("sid-a", {"userId": "a", "targetUserId": "b"})
    await coordinator.join_chat("sid-b", {"userId": "b", "targetUserId": "a"})
    await coordinator.send_message(
        "sid-a",
        {"userId": "a", "targetUserId": "b", "text": "lost?"},
    )

    assert server.received_by("sid-b") == []
    failed = server.received_by("sid-a")
    assert [e.event for e in failed] == ["messageFailed"]
    assert failed[0].to == "sid-a"
    assert failed[0].data["text"] == "lost?"
    assert failed[0].data["roomId"] == room_id_for("a", "b")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"userId": "a", "targetUserId": "b"},
        {"userId": "a", "targetUserId": "b", "text": ""},
        {"userId": "a", "targetUserId": "a", "text": "me"},
        {"text": "who am I"},
        None,
    ],
)
async def test_malformed_message_gets_chat_error(
    beanie_db,
    server,
    coordinator,
    payload,
) -> None:
    await coordinator.send_message("sid-a", payload)

    assert [e.event for e in server.emitted] == ["chatError"]
    assert server.emitted[0].to == "sid-a"
    assert server.emitted[0].data["event"] == "sendMessage"
    assert await Conversation.find_all().count() == 0


@pytest.mark.asyncio
async def test_malformed_join_gets_chat_error(server, coordinator) -> None:
    ack = await coordinator.join_chat("sid-a", {"userId": "a"})

    assert ack is None
    assert [e.event for e in server.emitted] == ["chatError"]
    assert dict(server.rooms) == {}
