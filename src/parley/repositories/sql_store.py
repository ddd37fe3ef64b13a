"""SQLAlchemy-backed implementation of the persistence contract."""
from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from parley.core.errors import DuplicateEmail
from parley.db.records import MessageRow, RoomRow, UserRow
from parley.models import (
    DirectMessage,
    Edit,
    Message,
    MessageData,
    MessageID,
    OpaqueID,
    PlainMessage,
    Room,
    RoomID,
    RoomVisibility,
    Timestamp,
    User,
    UserID,
    body,
    references,
    targets,
)
from parley.models.message_data import VARIANTS
from parley.services.identifiers import IdentifierService

__all__ = ["SqlStore"]

logger = logging.getLogger(__name__)


def _user_from_row(row: UserRow) -> User:
    return User(
        id=UserID(row.id),
        email=row.email,
        credential=bytes(row.credential),
        salt=bytes(row.salt),
        name=row.name,
    )


def _room_from_row(row: RoomRow) -> Room:
    return Room(id=RoomID(row.id), name=row.name, visibility=RoomVisibility(row.visibility))


def _data_from_row(row: MessageRow) -> MessageData:
    variant = VARIANTS.get(row.kind)
    if variant is None:
        raise ValueError(f"Unknown message kind in storage: {row.kind!r}")
    if variant is PlainMessage:
        return PlainMessage(message=row.text or "")
    if variant is DirectMessage:
        return DirectMessage(message=row.text or "", recipient=UserID(row.recipient_id))
    if variant is Edit:
        return Edit(new_message=row.text or "", edit_id=MessageID(row.edit_id))
    # Join and Leave carry no fields.
    return variant()


def _message_from_row(row: MessageRow) -> Message:
    return Message(
        id=MessageID(row.id),
        date=Timestamp(row.date),
        user_id=UserID(row.user_id),
        room_id=RoomID(row.room_id),
        data=_data_from_row(row),
    )


class SqlStore:
    """Store users, rooms and messages through a SQLAlchemy session.

    Writes are flushed but not committed; transaction control stays with the
    owner of the session.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the store with a SQLAlchemy session."""
        self.session = session

    def _email_taken(self, email: str) -> bool:
        return self.session.scalars(select(UserRow.id).where(UserRow.email == email)).first() is not None

    def put_user(self, user: User) -> None:
        """Insert a user.

        The insert runs in a savepoint, so a concurrent registration of the
        same email leaves the caller's transaction usable.

        Raises:
            DuplicateEmail: If another user already has this email.
        """
        if self._email_taken(user.email):
            raise DuplicateEmail("email already registered")
        row = UserRow(
            id=user.id.value,
            email=user.email,
            credential=user.credential,
            salt=user.salt,
            name=user.name,
        )
        conflict: IntegrityError | None = None
        try:
            with self.session.begin_nested():
                self.session.add(row)
        except IntegrityError as err:
            conflict = err
        # The driver error quotes the email in its parameters; keep it off
        # anything raised for a duplicate.
        if conflict is not None:
            if self._email_taken(user.email):
                logger.warning("Concurrent registration rejected for user %d", user.id.value)
                raise DuplicateEmail("email already registered")
            raise conflict
        logger.debug("Stored user %d", user.id.value)

    def put_room(self, room: Room) -> None:
        """Insert a room."""
        self.session.add(RoomRow(id=room.id.value, name=room.name, visibility=room.visibility.value))
        self.session.flush()
        logger.debug("Stored room %d", room.id.value)

    def put_message(self, message: Message) -> None:
        """Insert a message."""
        recipient = targets(message.data)
        edit_id = references(message.data)
        self.session.add(
            MessageRow(
                id=message.id.value,
                date=message.date.seconds,
                user_id=message.user_id.value,
                room_id=message.room_id.value,
                kind=message.data.tag,
                text=body(message.data),
                recipient_id=recipient.value if recipient is not None else None,
                edit_id=edit_id.value if edit_id is not None else None,
            )
        )
        self.session.flush()
        logger.debug("Stored message %d", message.id.value)

    def get_user_by_id(self, user_id: UserID) -> User | None:
        """Return a user by identifier."""
        row = self.session.get(UserRow, user_id.value)
        return _user_from_row(row) if row is not None else None

    def get_user_by_email(self, email: str) -> User | None:
        """Return the user registered with ``email``."""
        row = self.session.scalars(select(UserRow).where(UserRow.email == email)).first()
        return _user_from_row(row) if row is not None else None

    def get_room_by_id(self, room_id: RoomID) -> Room | None:
        """Return a room by identifier."""
        row = self.session.get(RoomRow, room_id.value)
        return _room_from_row(row) if row is not None else None

    def get_message_by_id(self, message_id: MessageID) -> Message | None:
        """Return a message by identifier."""
        row = self.session.get(MessageRow, message_id.value)
        return _message_from_row(row) if row is not None else None

    def scan_messages(
        self,
        room_id: RoomID,
        *,
        after: MessageID | None = None,
        before: MessageID | None = None,
        limit: int | None = None,
    ) -> list[Message]:
        """Return a room's messages with ids in (after, before), ascending by id."""
        stmt = select(MessageRow).where(MessageRow.room_id == room_id.value)
        if after is not None:
            stmt = stmt.where(MessageRow.id > after.value)
        if before is not None:
            stmt = stmt.where(MessageRow.id < before.value)
        stmt = stmt.order_by(MessageRow.id.asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return [_message_from_row(row) for row in self.session.scalars(stmt)]

    def max_ids(self) -> dict[type[OpaqueID], int | None]:
        """Return the highest stored id per kind, or None for empty tables."""
        return {
            UserID: self.session.scalar(select(func.max(UserRow.id))),
            RoomID: self.session.scalar(select(func.max(RoomRow.id))),
            MessageID: self.session.scalar(select(func.max(MessageRow.id))),
        }

    def seed_identifiers(self, ids: IdentifierService) -> None:
        """Advance ``ids`` past every id already stored."""
        for id_type, last in self.max_ids().items():
            if last is not None:
                ids.seed(id_type, last)
