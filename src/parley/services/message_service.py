"""Service-level helpers for creating messages."""
from __future__ import annotations

import logging
from threading import Lock

from parley.models import Message, MessageData, MessageID, RoomID, UserID
from parley.repositories.base import Store
from parley.services.clock import MonotonicClock, get_clock
from parley.services.identifiers import IdentifierService, get_identifier_service
from parley.services.validation import ensure_edit_prior, validate_message

__all__ = ["create_message", "post_message", "restore_message"]

logger = logging.getLogger(__name__)

# Held while minting an id and reading the clock, so dates never decrease
# as ids increase.
_STAMP_LOCK = Lock()


def create_message(
    store: Store,
    user_id: UserID,
    room_id: RoomID,
    data: MessageData,
    *,
    ids: IdentifierService | None = None,
    clock: MonotonicClock | None = None,
) -> Message:
    """Validate a new message, then assign its id and date.

    Args:
        store: Lookup for the author, room, recipient and edit target.
        user_id: Author of the message.
        room_id: Room the message belongs to.
        data: Payload variant.
        ids: Identifier service; defaults to the process-wide one.
        clock: Clock; defaults to the process-wide one.

    Returns:
        The new message. It is not persisted.

    Raises:
        ValidationError: If any message invariant is violated.

    Notes:
        Ids are minted only after validation succeeds, except for the final
        edit ordering check which needs the new id. A failed ordering check
        leaves a gap in the id sequence; ids are never reused.
    """
    validate_message(store, user_id, room_id, data)
    ids = ids or get_identifier_service()
    clock = clock or get_clock()
    with _STAMP_LOCK:
        message_id = ids.next(MessageID)
        date = clock.now()
    ensure_edit_prior(data, message_id)
    logger.debug("Created %s message %d in room %d", data.tag, message_id.value, room_id.value)
    return Message(id=message_id, date=date, user_id=user_id, room_id=room_id, data=data)


def post_message(
    store: Store,
    user_id: UserID,
    room_id: RoomID,
    data: MessageData,
    *,
    ids: IdentifierService | None = None,
    clock: MonotonicClock | None = None,
) -> Message:
    """Create a message and persist it."""
    message = create_message(store, user_id, room_id, data, ids=ids, clock=clock)
    store.put_message(message)
    return message


def restore_message(store: Store, message: Message) -> Message:
    """Re-validate a message that already carries its id and date.

    Used for messages read back from storage or received over the wire.

    Raises:
        ValidationError: If the message violates an invariant, including an
            edit that does not reference an earlier message.
    """
    validate_message(store, message.user_id, message.room_id, message.data, message_id=message.id)
    return message
