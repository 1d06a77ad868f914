"""Tests for the append-only Response Store."""

from datetime import datetime, timezone

import pytest
from saysomething.store import ResponseStore


def test_append_assigns_unique_ids():
    store = ResponseStore()
    first = store.append({"q_0": "a"})
    second = store.append({"q_0": "b"})

    assert first.id != second.id
    assert first.id.startswith("response_")
    assert len(store) == 2


def test_submission_order_preserved():
    store = ResponseStore()
    for value in ["x", "y", "z"]:
        store.append({"q": value})
    assert [r.data["q"] for r in store] == ["x", "y", "z"]


def test_timestamp_defaults_to_utc_now():
    before = datetime.now(timezone.utc)
    response = ResponseStore().append({})
    assert response.submitted_at.tzinfo is not None
    assert response.submitted_at >= before


def test_explicit_timestamp():
    when = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    assert ResponseStore().append({}, submitted_at=when).submitted_at == when


def test_data_is_copied():
    """Later changes to the caller's dict must not leak into the store."""
    answers = {"q": "before"}
    store = ResponseStore()
    store.append(answers)
    answers["q"] = "after"
    assert store.snapshot()[0].data == {"q": "before"}


def test_snapshot_is_stable():
    store = ResponseStore()
    store.append({"q": 1})
    snap = store.snapshot()
    store.append({"q": 2})
    assert len(snap) == 1
    assert len(store.snapshot()) == 2


def test_nested_answers_are_copied():
    """A list the caller keeps mutating must not change the stored answer."""
    topics = ["testing"]
    store = ResponseStore()
    store.append({"topics": topics})
    topics.append("bogus")
    assert store.snapshot()[0].data["topics"] == ("testing",)


def test_stored_answers_are_read_only():
    store = ResponseStore()
    response = store.append({"name": "Ada"})
    with pytest.raises(TypeError):
        response.data["name"] = ""
    assert store.snapshot()[0].data == {"name": "Ada"}
