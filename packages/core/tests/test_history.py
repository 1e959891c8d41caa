"""Tests for the bounded conversation history."""

import pytest

from codemedic_core.history import MAX_TURNS, ConversationHistory, Turn


def test_default_bound_is_twice_max_turns():
    history = ConversationHistory()
    assert history.max_entries == 2 * MAX_TURNS == 12


def test_exchange_appends_user_then_assistant():
    history = ConversationHistory()
    history.add_exchange("hi", "hello")
    assert history.turns == [Turn("user", "hi"), Turn("assistant", "hello")]


def test_never_exceeds_bound():
    history = ConversationHistory()
    for i in range(20):
        history.add_exchange(f"q{i}", f"a{i}")
        assert len(history) <= 12


def test_oldest_pairs_dropped_first():
    history = ConversationHistory(max_turns=2)
    for i in range(3):
        history.add_exchange(f"q{i}", f"a{i}")
    assert [t.text for t in history] == ["q1", "a1", "q2", "a2"]
    assert history.turns[0].role == "user"


def test_with_pending_does_not_record():
    history = ConversationHistory()
    history.add_exchange("q0", "a0")
    turns = history.with_pending("q1")
    assert turns[-1] == Turn("user", "q1")
    assert len(turns) == 3
    assert len(history) == 2


def test_clear_empties_history():
    history = ConversationHistory()
    history.add_exchange("q", "a")
    history.clear()
    assert len(history) == 0


def test_turns_are_immutable():
    turn = Turn("user", "hi")
    with pytest.raises(AttributeError):
        turn.text = "changed"


def test_rejects_non_positive_bound():
    with pytest.raises(ValueError):
        ConversationHistory(max_turns=0)
