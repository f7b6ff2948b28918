"""Payloads of the realtime chat events."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class _PairPayload(BaseModel):
    userId: str = Field(min_length=1)
    targetUserId: str = Field(min_length=1)

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="after")
    def check_distinct_users(self):
        if self.userId == self.targetUserId:
            msg = "userId and targetUserId must differ"
            raise ValueError(msg)
        return self


class JoinChatPayload(_PairPayload):
    """``joinChat`` event. ``firstname`` is accepted from older clients."""

    senderName: str | None = Field(
        default=None,
        validation_alias=AliasChoices("senderName", "firstname"),
    )


class SendMessagePayload(_PairPayload):
    """``sendMessage`` event."""

    senderFirstName: str | None = Field(
        default=None,
        validation_alias=AliasChoices("senderFirstName", "firstname"),
    )
    senderLastName: str | None = Field(
        default=None,
        validation_alias=AliasChoices("senderLastName", "lastname"),
    )
    text: str = Field(min_length=1)


class MessageReceivedEvent(BaseModel):
    """``messageReceived`` broadcast to every member of the pair's room."""

    senderFirstName: str | None = None
    senderLastName: str | None = None
    text: str
