"""Helpers for creating and authenticating users."""
from __future__ import annotations

import contextlib
import logging

from parley.core.errors import AuthenticationFailed, IncorrectPassword
from parley.core.security import (
    CREDENTIAL_LEN,
    SALT_LEN,
    derive_credential,
    fresh_salt,
    verify_password,
)
from parley.models import User, UserID
from parley.repositories.base import Store
from parley.services.identifiers import IdentifierService, get_identifier_service
from parley.services.validation import validate_email, validate_name

__all__ = [
    "create_user",
    "register_user",
    "authenticate",
]

logger = logging.getLogger(__name__)

# Stand-ins verified against when an email is unknown, so that both failure
# paths pay for one key derivation.
_DUMMY_CREDENTIAL = bytes(CREDENTIAL_LEN)
_DUMMY_SALT = bytes(SALT_LEN)


def create_user(
    email: str,
    name: str,
    password: str,
    *,
    ids: IdentifierService | None = None,
) -> User:
    """Build a new user with a freshly salted credential.

    The password is only used to derive the credential and is not kept.

    Raises:
        ValidationError: If the email or name is malformed, or the password
            cannot be encoded as UTF-8.
        RngFailure: If no salt could be sampled.
    """
    validate_email(email)
    validate_name(name)
    salt = fresh_salt()
    credential = derive_credential(password, salt)
    user_id = (ids or get_identifier_service()).next(UserID)
    logger.debug("Created user %d", user_id.value)
    return User(id=user_id, email=email, credential=credential, salt=salt, name=name)


def register_user(
    store: Store,
    email: str,
    name: str,
    password: str,
    *,
    ids: IdentifierService | None = None,
) -> User:
    """Create a user and persist it."""
    user = create_user(email, name, password, ids=ids)
    store.put_user(user)
    return user


def authenticate(store: Store, email: str, password: str) -> User:
    """Return the user owning ``email`` if ``password`` matches.

    Raises:
        AuthenticationFailed: For an unknown email or a wrong password alike.
    """
    user = store.get_user_by_email(email)
    if user is None:
        with contextlib.suppress(IncorrectPassword):
            verify_password(_DUMMY_CREDENTIAL, _DUMMY_SALT, password)
        logger.warning("Authentication failed")
        raise AuthenticationFailed()

    try:
        user.verify_password(password)
    except IncorrectPassword:
        logger.warning("Authentication failed for user %d", user.id.value)
        raise AuthenticationFailed() from None
    return user
