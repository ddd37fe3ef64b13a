# src/parley/models/message_data.py
"""Message payload variants.

``MessageData`` is a closed union of five frozen dataclasses. Each carries a
stable ``tag`` used as its wire discriminator. Adding a variant is a breaking
change for every consumer that dispatches on the union.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, TypeAlias

from .ids import MessageID, UserID


@dataclass(frozen=True)
class PlainMessage:
    """A normal message visible to the room."""

    message: str

    tag: ClassVar[str] = "message"


@dataclass(frozen=True)
class DirectMessage:
    """A private message addressed to one user."""

    message: str
    recipient: UserID

    tag: ClassVar[str] = "direct_message"

    def __post_init__(self) -> None:
        if not isinstance(self.recipient, UserID):
            raise TypeError("DirectMessage recipient must be a UserID")


@dataclass(frozen=True)
class Edit:
    """Replacement text for an earlier message."""

    new_message: str
    edit_id: MessageID

    tag: ClassVar[str] = "edit"

    def __post_init__(self) -> None:
        if not isinstance(self.edit_id, MessageID):
            raise TypeError("Edit edit_id must be a MessageID")


@dataclass(frozen=True)
class Join:
    """User joined the room."""

    tag: ClassVar[str] = "join"


@dataclass(frozen=True)
class Leave:
    """User left the room."""

    tag: ClassVar[str] = "leave"


MessageData: TypeAlias = PlainMessage | DirectMessage | Edit | Join | Leave

VARIANTS: dict[str, type[MessageData]] = {
    variant.tag: variant for variant in (PlainMessage, DirectMessage, Edit, Join, Leave)
}

# Only these variants may be the target of an Edit.
EDITABLE = (PlainMessage, DirectMessage)


def body(data: MessageData) -> str | None:
    """Return the text carried by a variant, if any."""
    if isinstance(data, PlainMessage | DirectMessage):
        return data.message
    if isinstance(data, Edit):
        return data.new_message
    return None


def targets(data: MessageData) -> UserID | None:
    """Return the recipient of a direct message."""
    if isinstance(data, DirectMessage):
        return data.recipient
    return None


def references(data: MessageData) -> MessageID | None:
    """Return the message an edit replaces."""
    if isinstance(data, Edit):
        return data.edit_id
    return None
