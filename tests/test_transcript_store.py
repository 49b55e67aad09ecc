"""Unit tests for TranscriptStore."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

from models.conversation import Sender, Turn, TurnStatus
from services.transcript_store import TranscriptStore


class TestTranscriptStore:
    """Test suite for TranscriptStore."""

    def test_starts_empty(self):
        store = TranscriptStore()
        assert len(store) == 0
        assert store.all() == ()

    def test_append_preserves_arrival_order(self):
        """Test that turns come back in the order they were appended."""
        store = TranscriptStore()
        first = Turn.user("What is ibuprofen?")
        second = Turn.assistant("Ibuprofen is an NSAID.")
        third = Turn.user("What is ibuprofen?")  # duplicates are allowed

        store.append(first)
        store.append(second)
        store.append(third)

        assert store.all() == (first, second, third)
        assert len(store) == 3

    def test_all_returns_snapshot(self):
        """Test that a snapshot does not change when more turns arrive."""
        store = TranscriptStore()
        store.append(Turn.user("one"))
        snapshot = store.all()

        store.append(Turn.assistant("two"))

        assert len(snapshot) == 1
        assert len(store.all()) == 2

    def test_append_notifies_listeners(self):
        """Test that every append emits a changed signal with the new turn."""
        store = TranscriptStore()
        seen = []
        store.subscribe(seen.append)

        error_turn = Turn.assistant("Sorry", error=True)
        store.append(Turn.user("hi"))
        store.append(error_turn)

        assert [t.text for t in seen] == ["hi", "Sorry"]
        assert seen[1].status is TurnStatus.ERROR
        assert seen[1].sender is Sender.ASSISTANT

    def test_unsubscribe_stops_notifications(self):
        store = TranscriptStore()
        seen = []
        unsubscribe = store.subscribe(seen.append)

        store.append(Turn.user("first"))
        unsubscribe()
        store.append(Turn.user("second"))
        unsubscribe()  # second call is harmless

        assert len(seen) == 1

    def test_clear_drops_turns_and_listeners(self):
        store = TranscriptStore()
        seen = []
        store.subscribe(seen.append)
        store.append(Turn.user("hi"))

        store.clear()
        store.append(Turn.user("after teardown"))

        assert len(seen) == 1
        assert len(store) == 1
