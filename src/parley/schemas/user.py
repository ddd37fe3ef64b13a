"""User serialization schemas."""

from pydantic import BaseModel, ConfigDict, Field

from parley.models import User, UserID
from parley.models.ids import MAX_ID
from parley.services.validation import validate_email, validate_name, validate_secrets

_HEX_32_BYTES = r"^[0-9a-fA-F]{64}$"


class UserRecord(BaseModel):
    """Self-describing record of a stored user.

    Carries the derived credential and salt only; there is no password field.
    """

    id: int = Field(..., ge=1, le=MAX_ID, description="User identifier")
    email: str = Field(..., description="Login email address")
    credential: str = Field(..., pattern=_HEX_32_BYTES, description="Hex-encoded PBKDF2 output")
    salt: str = Field(..., pattern=_HEX_32_BYTES, description="Hex-encoded per-user salt")
    name: str = Field(..., description="Display name")

    model_config = ConfigDict(frozen=True, extra="forbid")


def user_to_record(user: User) -> UserRecord:
    """Encode a user for storage or transmission."""
    return UserRecord(
        id=user.id.value,
        email=user.email,
        credential=user.credential.hex(),
        salt=user.salt.hex(),
        name=user.name,
    )


def user_from_record(record: UserRecord) -> User:
    """Decode a user record, re-checking the user invariants.

    Raises:
        ValidationError: If the record describes an invalid user.
    """
    validate_email(record.email)
    validate_name(record.name)
    credential = bytes.fromhex(record.credential)
    salt = bytes.fromhex(record.salt)
    validate_secrets(credential, salt)
    return User(id=UserID(record.id), email=record.email, credential=credential, salt=salt, name=record.name)
