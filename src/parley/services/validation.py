"""Invariant checks shared by the entity constructors.

Every check raises ``ValidationError`` with a kind and nothing else; input
values never appear in the exception.
"""
from __future__ import annotations

from parley.core.errors import ValidationError, ValidationErrorKind
from parley.core.security import CREDENTIAL_LEN, SALT_LEN
from parley.models import (
    DirectMessage,
    Edit,
    Join,
    Leave,
    MessageData,
    MessageID,
    PlainMessage,
    RoomID,
    UserID,
)
from parley.models.message_data import EDITABLE
from parley.repositories.base import Store

__all__ = [
    "validate_email",
    "validate_name",
    "validate_text",
    "validate_secrets",
    "validate_message",
    "ensure_edit_prior",
]


def validate_email(email: str) -> None:
    """Require exactly one ``@`` with non-empty text on both sides."""
    if not email:
        raise ValidationError(ValidationErrorKind.EMPTY_EMAIL)
    local, _, domain = email.partition("@")
    if email.count("@") != 1 or not local or not domain:
        raise ValidationError(ValidationErrorKind.MALFORMED_EMAIL)


def validate_name(name: str) -> None:
    """Reject empty and whitespace-only user or room names."""
    if not name or not name.strip():
        raise ValidationError(ValidationErrorKind.EMPTY_NAME)


def validate_text(text: str) -> None:
    """Reject empty and whitespace-only message text."""
    if not text or not text.strip():
        raise ValidationError(ValidationErrorKind.EMPTY_MESSAGE)


def validate_secrets(credential: bytes, salt: bytes) -> None:
    """Check credential and salt lengths on values loaded from outside."""
    if len(credential) != CREDENTIAL_LEN:
        raise ValidationError(ValidationErrorKind.INVALID_CREDENTIAL_LENGTH)
    if len(salt) != SALT_LEN:
        raise ValidationError(ValidationErrorKind.INVALID_SALT_LENGTH)


def ensure_edit_prior(data: MessageData, message_id: MessageID) -> None:
    """An edit must reference a message with a smaller id than its own."""
    if isinstance(data, Edit) and not data.edit_id < message_id:
        raise ValidationError(ValidationErrorKind.EDIT_NOT_PRIOR)


def _validate_edit(
    store: Store,
    data: Edit,
    user_id: UserID,
    room_id: RoomID,
    message_id: MessageID | None,
) -> None:
    target = store.get_message_by_id(data.edit_id)
    if target is None:
        raise ValidationError(ValidationErrorKind.EDIT_TARGET_MISSING)
    if message_id is not None:
        ensure_edit_prior(data, message_id)
    if not isinstance(target.data, EDITABLE):
        raise ValidationError(ValidationErrorKind.EDIT_OF_UNEDITABLE)
    if target.user_id != user_id:
        raise ValidationError(ValidationErrorKind.EDIT_CROSS_USER)
    if target.room_id != room_id:
        raise ValidationError(ValidationErrorKind.EDIT_CROSS_ROOM)


def validate_message(
    store: Store,
    user_id: UserID,
    room_id: RoomID,
    data: MessageData,
    *,
    message_id: MessageID | None = None,
) -> None:
    """Validate a message against its author, room and payload rules.

    Args:
        store: Lookup for users, rooms and earlier messages.
        user_id: Author of the message.
        room_id: Room the message is posted to.
        data: Payload variant.
        message_id: The message's own id when already assigned. When omitted
            the edit ordering check is left to the caller (see
            ``ensure_edit_prior``).

    Raises:
        ValidationError: On the first violated invariant.
    """
    if store.get_user_by_id(user_id) is None:
        raise ValidationError(ValidationErrorKind.UNKNOWN_USER)
    if store.get_room_by_id(room_id) is None:
        raise ValidationError(ValidationErrorKind.UNKNOWN_ROOM)

    if isinstance(data, PlainMessage):
        validate_text(data.message)
    elif isinstance(data, DirectMessage):
        validate_text(data.message)
        if data.recipient == user_id:
            raise ValidationError(ValidationErrorKind.SELF_DIRECT_MESSAGE)
        if store.get_user_by_id(data.recipient) is None:
            raise ValidationError(ValidationErrorKind.UNKNOWN_RECIPIENT)
    elif isinstance(data, Edit):
        validate_text(data.new_message)
        _validate_edit(store, data, user_id, room_id, message_id)
    elif not isinstance(data, Join | Leave):
        raise TypeError(f"Unknown message variant: {type(data).__name__}")
