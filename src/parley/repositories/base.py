"""Persistence contract the core relies on."""
from __future__ import annotations

from typing import Protocol

from parley.models import Message, MessageID, Room, RoomID, User, UserID

__all__ = ["Store"]


class Store(Protocol):
    """Storage for users, rooms and messages.

    Implementations must keep entities byte-for-byte; in particular
    ``credential`` and ``salt`` are never re-encoded or mutated.
    """

    def put_user(self, user: User) -> None: ...

    def put_room(self, room: Room) -> None: ...

    def put_message(self, message: Message) -> None: ...

    def get_user_by_id(self, user_id: UserID) -> User | None: ...

    def get_user_by_email(self, email: str) -> User | None: ...

    def get_room_by_id(self, room_id: RoomID) -> Room | None: ...

    def get_message_by_id(self, message_id: MessageID) -> Message | None: ...

    def scan_messages(
        self,
        room_id: RoomID,
        *,
        after: MessageID | None = None,
        before: MessageID | None = None,
        limit: int | None = None,
    ) -> list[Message]:
        """Return a room's messages with ids in (after, before), ascending by id."""
        ...
