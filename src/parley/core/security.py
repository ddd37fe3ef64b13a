"""Password credential engine built on PBKDF2-HMAC-SHA256.

The parameters below are pinned. Every stored credential was derived with
them, so changing any of them invalidates all existing users.
"""
from __future__ import annotations

import logging
import secrets

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from parley.core.errors import (
    IncorrectPassword,
    RngFailure,
    ValidationError,
    ValidationErrorKind,
)

logger = logging.getLogger(__name__)

HASH_ITERATIONS = 100_000
# SHA-256 output length
CREDENTIAL_LEN = 32
SALT_LEN = CREDENTIAL_LEN

# A password hash produced by ``derive_credential``.
Credential = bytes
# Random per-user bytes mixed into the derivation.
Salt = bytes


def _kdf(salt: Salt) -> PBKDF2HMAC:
    # PBKDF2HMAC instances are single-use.
    return PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=CREDENTIAL_LEN,
        salt=salt,
        iterations=HASH_ITERATIONS,
    )


def _utf8(password: str) -> bytes | None:
    # Lone surrogates cannot be encoded. The encoder's error holds the whole
    # password, so it must not be chained onto anything raised here.
    try:
        return password.encode("utf-8")
    except UnicodeEncodeError:
        return None


def derive_credential(password: str, salt: Salt) -> Credential:
    """Derive the stored credential for a password.

    Args:
        password: Plaintext password; hashed as its UTF-8 encoding.
        salt: The user's 32-byte salt.

    Returns:
        The 32-byte PBKDF2 output. Deterministic for a fixed (password, salt).

    Raises:
        ValidationError: If the password has no UTF-8 encoding.
    """
    encoded = _utf8(password)
    if encoded is None:
        raise ValidationError(ValidationErrorKind.INVALID_PASSWORD_ENCODING)
    return _kdf(salt).derive(encoded)


def verify_password(credential: Credential, salt: Salt, password: str) -> None:
    """Check a password against a stored credential.

    The comparison is constant time with respect to the credential bytes.

    Raises:
        IncorrectPassword: On any mismatch or derivation failure. No cause or
            context is attached so callers cannot tell failures apart.
    """
    encoded = _utf8(password)
    matched = encoded is not None
    try:
        _kdf(salt).verify(encoded or b"", credential)
    except (InvalidKey, TypeError, ValueError):
        matched = False
    if not matched:
        raise IncorrectPassword()


def fresh_salt() -> Salt:
    """Sample a new 32-byte salt from the operating system CSPRNG.

    Raises:
        RngFailure: If the CSPRNG cannot produce bytes.
    """
    try:
        return secrets.token_bytes(SALT_LEN)
    except (OSError, NotImplementedError) as err:
        logger.critical("Operating system CSPRNG refused to produce %d bytes", SALT_LEN)
        raise RngFailure("CSPRNG unavailable") from err
