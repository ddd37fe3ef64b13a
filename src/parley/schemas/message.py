"""Message serialization schemas.

The payload is a discriminated union keyed on ``type``, whose values are the
stable variant wire tags.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from parley.models import (
    DirectMessage,
    Edit,
    Join,
    Leave,
    Message,
    MessageData,
    MessageID,
    PlainMessage,
    RoomID,
    Timestamp,
    UserID,
)
from parley.models.ids import MAX_ID
from parley.models.timestamp import MAX_SECONDS

_Id = Annotated[int, Field(ge=1, le=MAX_ID)]


class PlainMessagePayload(BaseModel):
    """Payload of a normal room message."""

    type: Literal["message"] = "message"
    message: str

    model_config = ConfigDict(frozen=True, extra="forbid")


class DirectMessagePayload(BaseModel):
    """Payload of a direct message."""

    type: Literal["direct_message"] = "direct_message"
    message: str
    recipient: _Id

    model_config = ConfigDict(frozen=True, extra="forbid")


class EditPayload(BaseModel):
    """Payload replacing the text of an earlier message."""

    type: Literal["edit"] = "edit"
    new_message: str
    edit_id: _Id

    model_config = ConfigDict(frozen=True, extra="forbid")


class JoinPayload(BaseModel):
    """Join notification."""

    type: Literal["join"] = "join"

    model_config = ConfigDict(frozen=True, extra="forbid")


class LeavePayload(BaseModel):
    """Leave notification."""

    type: Literal["leave"] = "leave"

    model_config = ConfigDict(frozen=True, extra="forbid")


MessagePayload = Annotated[
    PlainMessagePayload | DirectMessagePayload | EditPayload | JoinPayload | LeavePayload,
    Field(discriminator="type"),
]


class MessageRecord(BaseModel):
    """Self-describing record of a message."""

    id: _Id = Field(..., description="Message identifier")
    date: int = Field(..., ge=0, le=MAX_SECONDS, description="Seconds since the Unix epoch")
    user_id: _Id = Field(..., description="Author")
    room_id: _Id = Field(..., description="Room")
    data: MessagePayload

    model_config = ConfigDict(frozen=True, extra="forbid")


def payload_from_data(data: MessageData) -> MessagePayload:
    """Encode a payload variant."""
    if isinstance(data, PlainMessage):
        return PlainMessagePayload(message=data.message)
    if isinstance(data, DirectMessage):
        return DirectMessagePayload(message=data.message, recipient=data.recipient.value)
    if isinstance(data, Edit):
        return EditPayload(new_message=data.new_message, edit_id=data.edit_id.value)
    if isinstance(data, Join):
        return JoinPayload()
    if isinstance(data, Leave):
        return LeavePayload()
    raise TypeError(f"Unknown message variant: {type(data).__name__}")


def data_from_payload(payload: MessagePayload) -> MessageData:
    """Decode a payload variant."""
    if isinstance(payload, PlainMessagePayload):
        return PlainMessage(message=payload.message)
    if isinstance(payload, DirectMessagePayload):
        return DirectMessage(message=payload.message, recipient=UserID(payload.recipient))
    if isinstance(payload, EditPayload):
        return Edit(new_message=payload.new_message, edit_id=MessageID(payload.edit_id))
    if isinstance(payload, JoinPayload):
        return Join()
    return Leave()


def message_to_record(message: Message) -> MessageRecord:
    """Encode a message for storage or transmission."""
    return MessageRecord(
        id=message.id.value,
        date=message.date.seconds,
        user_id=message.user_id.value,
        room_id=message.room_id.value,
        data=payload_from_data(message.data),
    )


def message_from_record(record: MessageRecord) -> Message:
    """Decode a message record.

    Only structure is checked here; pass the result through
    ``parley.services.message_service.restore_message`` to validate it
    against a store.
    """
    return Message(
        id=MessageID(record.id),
        date=Timestamp(record.date),
        user_id=UserID(record.user_id),
        room_id=RoomID(record.room_id),
        data=data_from_payload(record.data),
    )
