"""
Pydantic records for serializing Parley entities.

Bytes fields are hex strings, identifiers and dates are integers, and message
payloads are tagged with their variant wire name.
"""

from .message import MessageRecord, message_from_record, message_to_record
from .room import RoomRecord, room_from_record, room_to_record
from .user import UserRecord, user_from_record, user_to_record

__all__ = [
    "UserRecord", "user_to_record", "user_from_record",
    "RoomRecord", "room_to_record", "room_from_record",
    "MessageRecord", "message_to_record", "message_from_record",
]
