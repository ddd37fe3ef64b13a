# tests/test_message_service.py
"""Tests for message construction and variant validation."""

from __future__ import annotations

import random
import threading

import pytest

from parley.core.errors import ValidationError, ValidationErrorKind
from parley.models import (
    DirectMessage,
    Edit,
    Join,
    Leave,
    Message,
    MessageID,
    PlainMessage,
    RoomID,
    Timestamp,
    UserID,
)
from parley.services.clock import MonotonicClock
from parley.services.identifiers import IdentifierService
from parley.services.message_service import create_message, post_message, restore_message


def _kind(excinfo: pytest.ExceptionInfo[ValidationError]) -> ValidationErrorKind:
    return excinfo.value.kind


def test_plain_message_gets_id_and_date(store, alice, lobby, ids, clock, fake_time) -> None:
    fake_time.value = 1_700_000_500.4
    message = create_message(store, alice.id, lobby.id, PlainMessage("hi"), ids=ids, clock=clock)
    assert message.id == MessageID(1)
    assert message.date == Timestamp(1_700_000_500)
    assert message.user_id == alice.id
    assert message.room_id == lobby.id
    assert message.data == PlainMessage("hi")
    # create_message does not persist
    assert store.get_message_by_id(message.id) is None


def test_post_message_persists(store, alice, lobby, ids, clock) -> None:
    message = post_message(store, alice.id, lobby.id, Join(), ids=ids, clock=clock)
    assert store.get_message_by_id(message.id) == message


def test_ids_increase_across_messages(store, alice, lobby, ids, clock) -> None:
    first = post_message(store, alice.id, lobby.id, Join(), ids=ids, clock=clock)
    second = post_message(store, alice.id, lobby.id, PlainMessage("x"), ids=ids, clock=clock)
    third = post_message(store, alice.id, lobby.id, Leave(), ids=ids, clock=clock)
    assert first.id < second.id < third.id


@pytest.mark.parametrize(
    "data",
    [
        PlainMessage(""),
        PlainMessage("  \n"),
        DirectMessage("", UserID(99)),
        Edit("", MessageID(1)),
    ],
)
def test_empty_text_rejected(store, alice, lobby, ids, clock, data) -> None:
    with pytest.raises(ValidationError) as excinfo:
        create_message(store, alice.id, lobby.id, data, ids=ids, clock=clock)
    assert _kind(excinfo) is ValidationErrorKind.EMPTY_MESSAGE
    assert ids.last(MessageID) is None


def test_unknown_author_and_room(store, alice, lobby, ids, clock) -> None:
    with pytest.raises(ValidationError) as excinfo:
        create_message(store, UserID(999), lobby.id, PlainMessage("x"), ids=ids, clock=clock)
    assert _kind(excinfo) is ValidationErrorKind.UNKNOWN_USER

    with pytest.raises(ValidationError) as excinfo:
        create_message(store, alice.id, RoomID(999), PlainMessage("x"), ids=ids, clock=clock)
    assert _kind(excinfo) is ValidationErrorKind.UNKNOWN_ROOM


def test_direct_message_to_self_rejected(store, alice, lobby, ids, clock) -> None:
    """S2: a user cannot direct-message themselves."""
    data = DirectMessage(message="hi", recipient=alice.id)
    with pytest.raises(ValidationError) as excinfo:
        create_message(store, alice.id, lobby.id, data, ids=ids, clock=clock)
    assert _kind(excinfo) is ValidationErrorKind.SELF_DIRECT_MESSAGE


def test_direct_message_recipient_must_exist(store, alice, lobby, ids, clock) -> None:
    data = DirectMessage(message="hi", recipient=UserID(12345))
    with pytest.raises(ValidationError) as excinfo:
        create_message(store, alice.id, lobby.id, data, ids=ids, clock=clock)
    assert _kind(excinfo) is ValidationErrorKind.UNKNOWN_RECIPIENT


def test_direct_message_accepted(store, alice, bob, lobby, ids, clock) -> None:
    data = DirectMessage(message="hi bob", recipient=bob.id)
    message = create_message(store, alice.id, lobby.id, data, ids=ids, clock=clock)
    assert message.data.recipient == bob.id


def test_edit_of_own_message(store, alice, lobby, ids, clock) -> None:
    original = post_message(store, alice.id, lobby.id, PlainMessage("helo"), ids=ids, clock=clock)
    edit = post_message(
        store, alice.id, lobby.id, Edit(new_message="hello", edit_id=original.id), ids=ids, clock=clock
    )
    assert original.id < edit.id
    assert store.get_message_by_id(original.id).data == PlainMessage("helo")


def test_edit_of_direct_message(store, alice, bob, lobby, ids, clock) -> None:
    dm = post_message(store, alice.id, lobby.id, DirectMessage("hi", bob.id), ids=ids, clock=clock)
    edit = create_message(store, alice.id, lobby.id, Edit("hi!", dm.id), ids=ids, clock=clock)
    assert edit.data.edit_id == dm.id


def test_edit_of_non_prior_message_rejected(store, alice, lobby, ids, clock) -> None:
    """S3: an edit whose own id is not above its target fails."""
    m1 = post_message(store, alice.id, lobby.id, PlainMessage("one"), ids=ids, clock=clock)
    m2 = post_message(store, alice.id, lobby.id, PlainMessage("two"), ids=ids, clock=clock)
    assert m1.id < m2.id

    for own_id in (m2.id, m1.id):
        candidate = Message(
            id=own_id,
            date=clock.now(),
            user_id=alice.id,
            room_id=lobby.id,
            data=Edit(new_message="x", edit_id=m2.id),
        )
        with pytest.raises(ValidationError) as excinfo:
            restore_message(store, candidate)
        assert _kind(excinfo) is ValidationErrorKind.EDIT_NOT_PRIOR


def test_unseeded_counter_cannot_produce_prior_edit(store, alice, lobby, ids, clock) -> None:
    """A counter that lags behind stored ids yields EDIT_NOT_PRIOR until seeded."""
    post_message(store, alice.id, lobby.id, PlainMessage("one"), ids=ids, clock=clock)
    target = post_message(store, alice.id, lobby.id, PlainMessage("two"), ids=ids, clock=clock)

    lagging = IdentifierService()
    with pytest.raises(ValidationError) as excinfo:
        create_message(store, alice.id, lobby.id, Edit("x", target.id), ids=lagging, clock=clock)
    assert _kind(excinfo) is ValidationErrorKind.EDIT_NOT_PRIOR

    lagging.seed(MessageID, target.id.value)
    edit = create_message(store, alice.id, lobby.id, Edit("x", target.id), ids=lagging, clock=clock)
    assert edit.id > target.id


def test_edit_across_rooms_rejected(store, alice, lobby, backroom, ids, clock) -> None:
    """S4: an edit must stay in the room of the message it edits."""
    original = post_message(store, alice.id, backroom.id, PlainMessage("x"), ids=ids, clock=clock)
    with pytest.raises(ValidationError) as excinfo:
        create_message(store, alice.id, lobby.id, Edit("y", original.id), ids=ids, clock=clock)
    assert _kind(excinfo) is ValidationErrorKind.EDIT_CROSS_ROOM


def test_edit_across_users_rejected(store, alice, bob, lobby, ids, clock) -> None:
    original = post_message(store, bob.id, lobby.id, PlainMessage("bob's"), ids=ids, clock=clock)
    with pytest.raises(ValidationError) as excinfo:
        create_message(store, alice.id, lobby.id, Edit("mine now", original.id), ids=ids, clock=clock)
    assert _kind(excinfo) is ValidationErrorKind.EDIT_CROSS_USER


def test_edit_target_missing(store, alice, lobby, ids, clock) -> None:
    with pytest.raises(ValidationError) as excinfo:
        create_message(store, alice.id, lobby.id, Edit("x", MessageID(404)), ids=ids, clock=clock)
    assert _kind(excinfo) is ValidationErrorKind.EDIT_TARGET_MISSING


@pytest.mark.parametrize("uneditable", ["edit", "join", "leave"])
def test_edit_of_uneditable_variant(store, alice, lobby, ids, clock, uneditable) -> None:
    original = post_message(store, alice.id, lobby.id, PlainMessage("x"), ids=ids, clock=clock)
    targets = {
        "edit": Edit("y", original.id),
        "join": Join(),
        "leave": Leave(),
    }
    target = post_message(store, alice.id, lobby.id, targets[uneditable], ids=ids, clock=clock)
    with pytest.raises(ValidationError) as excinfo:
        create_message(store, alice.id, lobby.id, Edit("z", target.id), ids=ids, clock=clock)
    assert _kind(excinfo) is ValidationErrorKind.EDIT_OF_UNEDITABLE


def test_restore_accepts_valid_message(store, alice, lobby, ids, clock) -> None:
    original = post_message(store, alice.id, lobby.id, PlainMessage("x"), ids=ids, clock=clock)
    assert restore_message(store, original) is original


def test_unknown_variant_rejected(store, alice, lobby, ids, clock) -> None:
    with pytest.raises(TypeError):
        create_message(store, alice.id, lobby.id, "not a variant", ids=ids, clock=clock)  # type: ignore[arg-type]


def test_dates_never_decrease_with_ids(store, alice, lobby) -> None:
    """Concurrent creators on a jittery wall clock still get ordered dates."""
    ids = IdentifierService()
    jitter = random.Random(1234)
    clock = MonotonicClock(lambda: 1_700_000_000 + jitter.randint(-5, 5), max_backward_seconds=10)
    created: list[Message] = []
    lock = threading.Lock()

    def worker() -> None:
        for _ in range(200):
            message = create_message(store, alice.id, lobby.id, PlainMessage("x"), ids=ids, clock=clock)
            with lock:
                created.append(message)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    ordered = sorted(created, key=lambda message: message.id)
    dates = [message.date for message in ordered]
    assert dates == sorted(dates)
    assert len({message.id for message in created}) == 800
