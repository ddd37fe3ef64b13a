"""Exception types raised by the Parley core.

Validation failures carry a ``ValidationErrorKind`` and never echo the input
that caused them, so they are safe to log or return to a client.
"""

from __future__ import annotations

from enum import Enum


class ParleyError(RuntimeError):
    """Base exception for all Parley failures."""


class ValidationErrorKind(Enum):
    """Reasons an entity constructor refuses its input."""

    EMPTY_NAME = "empty_name"
    EMPTY_EMAIL = "empty_email"
    MALFORMED_EMAIL = "malformed_email"
    EMPTY_MESSAGE = "empty_message"
    SELF_DIRECT_MESSAGE = "self_direct_message"
    EDIT_OF_UNEDITABLE = "edit_of_uneditable"
    EDIT_CROSS_USER = "edit_cross_user"
    EDIT_CROSS_ROOM = "edit_cross_room"
    EDIT_TARGET_MISSING = "edit_target_missing"
    EDIT_NOT_PRIOR = "edit_not_prior"
    # Existence checks delegated to the store
    UNKNOWN_USER = "unknown_user"
    UNKNOWN_ROOM = "unknown_room"
    UNKNOWN_RECIPIENT = "unknown_recipient"
    # Byte fields decoded from storage or the wire
    INVALID_CREDENTIAL_LENGTH = "invalid_credential_length"
    INVALID_SALT_LENGTH = "invalid_salt_length"
    # Passwords containing lone surrogates
    INVALID_PASSWORD_ENCODING = "invalid_password_encoding"


class ValidationError(ParleyError, ValueError):
    """Raised when input would produce an entity violating its invariants."""

    def __init__(self, kind: ValidationErrorKind) -> None:
        super().__init__(f"validation failed: {kind.value}")
        self.kind = kind


class IncorrectPassword(ParleyError):
    """Raised for every failed password verification, whatever the cause."""

    def __init__(self) -> None:
        super().__init__("incorrect password")


class AuthenticationFailed(ParleyError):
    """Raised when an email/password pair does not authenticate.

    Unknown email and wrong password are deliberately indistinguishable.
    """

    def __init__(self) -> None:
        super().__init__("authentication failed")


class DuplicateEmail(ParleyError):
    """Raised by a store when a second user claims an existing email."""


class FatalError(ParleyError):
    """Base for failures that indicate a broken host.

    The core never catches these; terminating is left to the host process.
    """


class IdentifierExhausted(FatalError):
    """Raised when a 64-bit identifier counter would overflow."""


class RngFailure(FatalError):
    """Raised when the operating system CSPRNG refuses to produce bytes."""
