# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable, Generator, Iterator

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from parley.db.session import create_tables, drop_tables
from parley.models import (
    Message,
    MessageID,
    Room,
    RoomID,
    RoomVisibility,
    User,
    UserID,
)
from parley.repositories.sql_store import SqlStore
from parley.services.clock import MonotonicClock
from parley.services.identifiers import IdentifierService
from parley.services.room_service import register_room
from parley.services.user_service import register_user

TEST_DB_URL = "sqlite://"

ALICE_PASSWORD = "correct horse battery staple"
BOB_PASSWORD = "hunter2 but longer"


class InMemoryStore:
    """Dict-backed store for tests that do not need a database."""

    def __init__(self) -> None:
        self.users: dict[UserID, User] = {}
        self.rooms: dict[RoomID, Room] = {}
        self.messages: dict[MessageID, Message] = {}

    def put_user(self, user: User) -> None:
        self.users[user.id] = user

    def put_room(self, room: Room) -> None:
        self.rooms[room.id] = room

    def put_message(self, message: Message) -> None:
        self.messages[message.id] = message

    def get_user_by_id(self, user_id: UserID) -> User | None:
        return self.users.get(user_id)

    def get_user_by_email(self, email: str) -> User | None:
        return next((user for user in self.users.values() if user.email == email), None)

    def get_room_by_id(self, room_id: RoomID) -> Room | None:
        return self.rooms.get(room_id)

    def get_message_by_id(self, message_id: MessageID) -> Message | None:
        return self.messages.get(message_id)

    def scan_messages(
        self,
        room_id: RoomID,
        *,
        after: MessageID | None = None,
        before: MessageID | None = None,
        limit: int | None = None,
    ) -> list[Message]:
        found = sorted(
            (
                message
                for message in self.messages.values()
                if message.room_id == room_id
                and (after is None or message.id > after)
                and (before is None or message.id < before)
            ),
            key=lambda message: message.id,
        )
        return found[:limit] if limit is not None else found


class FakeTime:
    """Settable time source for ``MonotonicClock``."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.value = start

    def __call__(self) -> float:
        return self.value


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite defers BEGIN on its own, so SAVEPOINT/RELEASE would commit and
    # the per-test rollback would not isolate tests. Let SQLAlchemy emit BEGIN.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN")

    create_tables(engine)
    try:
        yield engine
    finally:
        drop_tables(engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    session = Session(bind=connection, autoflush=False, expire_on_commit=False)
    try:
        yield session
    finally:
        session.close()
        if transaction.is_active:
            transaction.rollback()
        connection.close()


@pytest.fixture()
def sql_store(db_session: Session) -> SqlStore:
    return SqlStore(db_session)


@pytest.fixture()
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture()
def ids() -> IdentifierService:
    """Fresh identifier counters for each test."""
    return IdentifierService()


@pytest.fixture()
def fake_time() -> FakeTime:
    return FakeTime()


@pytest.fixture()
def clock(fake_time: FakeTime) -> MonotonicClock:
    return MonotonicClock(fake_time, max_backward_seconds=60)


@pytest.fixture()
def alice(store: InMemoryStore, ids: IdentifierService) -> User:
    """Create and store the primary test user."""
    return register_user(store, "alice@example.com", "Alice", ALICE_PASSWORD, ids=ids)


@pytest.fixture()
def bob(store: InMemoryStore, ids: IdentifierService) -> User:
    """Create and store a second user."""
    return register_user(store, "bob@example.com", "Bob", BOB_PASSWORD, ids=ids)


@pytest.fixture()
def lobby(store: InMemoryStore, ids: IdentifierService) -> Room:
    return register_room(store, "lobby", RoomVisibility.PUBLIC, ids=ids)


@pytest.fixture()
def backroom(store: InMemoryStore, ids: IdentifierService) -> Room:
    return register_room(store, "backroom", RoomVisibility.PRIVATE, ids=ids)


@pytest.fixture()
def make_store_user(
    sql_store: SqlStore, ids: IdentifierService
) -> Callable[[str, str, str], User]:
    """Return a factory that registers users in the SQL store."""

    def _make(email: str, name: str, password: str) -> User:
        return register_user(sql_store, email, name, password, ids=ids)

    return _make
