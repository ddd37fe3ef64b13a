"""Monotonic identifier generator helpers."""

from __future__ import annotations

import logging
from threading import Lock
from typing import TypeVar

from parley.core.errors import IdentifierExhausted
from parley.models.ids import MAX_ID, NO_ID, MessageID, OpaqueID

logger = logging.getLogger(__name__)

IdT = TypeVar("IdT", bound=OpaqueID)


class IdentifierService:
    """Mint strictly increasing identifiers, one counter per ID kind.

    All counters share one lock, so concurrent callers observe a single
    linearizable sequence per kind. Counters start at 1; 0 is reserved.
    """

    def __init__(self) -> None:
        self._last: dict[type[OpaqueID], int] = {}
        self._lock = Lock()

    @staticmethod
    def _check_kind(id_type: type[OpaqueID]) -> None:
        if id_type is OpaqueID or not issubclass(id_type, OpaqueID):
            raise TypeError("id_type must be a kind-specific OpaqueID subclass")

    def next(self, id_type: type[IdT]) -> IdT:
        """Return an ID greater than every ID previously minted for ``id_type``.

        Raises:
            IdentifierExhausted: If the 64-bit counter would overflow.
        """
        self._check_kind(id_type)
        with self._lock:
            last = self._last.get(id_type, NO_ID)
            if last >= MAX_ID:
                logger.error("Identifier space exhausted for kind %s", id_type.kind)
                raise IdentifierExhausted(f"{id_type.__name__} counter overflow")
            value = last + 1
            self._last[id_type] = value
        return id_type(value)

    def seed(self, id_type: type[OpaqueID], last_id: int) -> None:
        """Advance a counter past an ID already in use, e.g. after a restart.

        Seeding never moves a counter backwards.
        """
        self._check_kind(id_type)
        if not NO_ID <= last_id <= MAX_ID:
            raise ValueError("last_id out of 64-bit unsigned range")
        with self._lock:
            if last_id > self._last.get(id_type, NO_ID):
                self._last[id_type] = last_id
                logger.debug("Seeded %s identifiers at %d", id_type.kind, last_id)

    def last(self, id_type: type[IdT]) -> IdT | None:
        """Return the most recently minted ID for a kind, if any."""
        self._check_kind(id_type)
        with self._lock:
            value = self._last.get(id_type, NO_ID)
        return id_type(value) if value != NO_ID else None


_IDENTIFIER_SERVICE = IdentifierService()


def get_identifier_service() -> IdentifierService:
    """Return the process-wide identifier service."""
    return _IDENTIFIER_SERVICE


def next_id(id_type: type[IdT]) -> IdT:
    """Mint the next ID of ``id_type`` from the process-wide service.

    Message ids are refused: they must be minted by ``create_message``, which
    stamps the date under the same lock so dates never decrease as ids grow.
    """
    if id_type is MessageID:
        raise TypeError("MessageID is minted by create_message")
    return _IDENTIFIER_SERVICE.next(id_type)
