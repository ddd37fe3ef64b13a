# src/parley/models/user.py
"""User accounts."""

from __future__ import annotations

from dataclasses import dataclass, field

from parley.core.security import Credential, Salt, verify_password

from .ids import UserID


@dataclass(frozen=True)
class User:
    """A registered user.

    Only the derived credential and its salt are kept; the plaintext password
    never reaches this object. Both byte fields are left out of ``repr``.
    Build instances through ``parley.services.user_service.create_user``.
    """

    id: UserID
    email: str
    credential: Credential = field(repr=False)
    salt: Salt = field(repr=False)
    name: str

    def verify_password(self, password: str) -> None:
        """Raise ``IncorrectPassword`` unless ``password`` matches."""
        verify_password(self.credential, self.salt, password)
