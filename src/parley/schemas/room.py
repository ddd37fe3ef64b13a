"""Room serialization schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from parley.models import Room, RoomID, RoomVisibility
from parley.models.ids import MAX_ID
from parley.services.validation import validate_name


class RoomRecord(BaseModel):
    """Self-describing record of a room."""

    id: int = Field(..., ge=1, le=MAX_ID, description="Room identifier")
    name: str = Field(..., description="Room name")
    visibility: Literal["public", "private"] = Field(..., description="Room visibility")

    model_config = ConfigDict(frozen=True, extra="forbid")


def room_to_record(room: Room) -> RoomRecord:
    """Encode a room for storage or transmission."""
    return RoomRecord(id=room.id.value, name=room.name, visibility=room.visibility.value)


def room_from_record(record: RoomRecord) -> Room:
    """Decode a room record, re-checking the room name."""
    validate_name(record.name)
    return Room(id=RoomID(record.id), name=record.name, visibility=RoomVisibility(record.visibility))
