"""Helpers for creating rooms."""
from __future__ import annotations

import logging

from parley.models import Room, RoomID, RoomVisibility
from parley.repositories.base import Store
from parley.services.identifiers import IdentifierService, get_identifier_service
from parley.services.validation import validate_name

__all__ = ["create_room", "register_room"]

logger = logging.getLogger(__name__)


def create_room(
    name: str,
    visibility: RoomVisibility,
    *,
    ids: IdentifierService | None = None,
) -> Room:
    """Build a new room. Its visibility cannot be changed afterwards."""
    validate_name(name)
    visibility = RoomVisibility(visibility)
    room_id = (ids or get_identifier_service()).next(RoomID)
    logger.debug("Created %s room %d", visibility.value, room_id.value)
    return Room(id=room_id, name=name, visibility=visibility)


def register_room(
    store: Store,
    name: str,
    visibility: RoomVisibility,
    *,
    ids: IdentifierService | None = None,
) -> Room:
    """Create a room and persist it."""
    room = create_room(name, visibility, ids=ids)
    store.put_room(room)
    return room
