# src/parley/db/records.py
"""SQLAlchemy records backing the SQL store."""

from __future__ import annotations

from typing import Any

from sqlalchemy import BigInteger, ForeignKey, Index, LargeBinary, Text
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from parley.core.security import CREDENTIAL_LEN, SALT_LEN
from parley.db.session import Base

_UNSIGNED_OFFSET = 2**63


class Unsigned64(TypeDecorator[int]):
    """Unsigned 64-bit integer kept in a signed BIGINT column.

    Values are shifted down by 2**63 on the way in, which keeps the full
    unsigned range representable and preserves ordering for range queries.
    """

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value: int | None, dialect: Dialect) -> int | None:
        if value is None:
            return None
        return int(value) - _UNSIGNED_OFFSET

    def process_result_value(self, value: Any | None, dialect: Dialect) -> int | None:
        if value is None:
            return None
        return int(value) + _UNSIGNED_OFFSET


class UserRow(Base):
    """Stored user account. Credential and salt are raw bytes."""

    __tablename__ = "user_account"

    id: Mapped[int] = mapped_column(Unsigned64, primary_key=True, autoincrement=False)
    email: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    credential: Mapped[bytes] = mapped_column(LargeBinary(CREDENTIAL_LEN), nullable=False)
    salt: Mapped[bytes] = mapped_column(LargeBinary(SALT_LEN), nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)


class RoomRow(Base):
    """Stored room."""

    __tablename__ = "room"

    id: Mapped[int] = mapped_column(Unsigned64, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    # "public" or "private"
    visibility: Mapped[str] = mapped_column(Text, nullable=False)


class MessageRow(Base):
    """Stored message.

    The payload variant is flattened: ``kind`` holds the wire tag and only the
    columns that variant uses are populated.
    """

    __tablename__ = "message"

    id: Mapped[int] = mapped_column(Unsigned64, primary_key=True, autoincrement=False)
    date: Mapped[int] = mapped_column(Unsigned64, nullable=False)
    user_id: Mapped[int] = mapped_column(
        Unsigned64, ForeignKey("user_account.id"), nullable=False
    )
    room_id: Mapped[int] = mapped_column(Unsigned64, ForeignKey("room.id"), nullable=False)

    kind: Mapped[str] = mapped_column(Text, nullable=False)
    text: Mapped[str | None] = mapped_column(Text, nullable=True)
    recipient_id: Mapped[int | None] = mapped_column(
        Unsigned64, ForeignKey("user_account.id"), nullable=True
    )
    edit_id: Mapped[int | None] = mapped_column(
        Unsigned64, ForeignKey("message.id"), nullable=True
    )

    __table_args__ = (Index("ix_message_room_id_id", "room_id", "id"),)
