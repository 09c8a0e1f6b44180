"""Tests for the session reducer."""

import random

import pytest

from tests.conftest import make_card, make_cards
from vocabdeck.domain.common.value_objects import FlashcardId
from vocabdeck.domain.study.session_state import (
    AddCard,
    ClearError,
    FlipCard,
    RemoveCard,
    ReplaceCard,
    SessionState,
    SetCards,
    SetCurrentIndex,
    SetError,
    SetLoading,
    SetMode,
    StudyMode,
    clamp_index,
    reduce,
)


def _state(count: int, **overrides: object) -> SessionState:
    return SessionState(cards=tuple(make_cards(count)), **overrides)  # type: ignore[arg-type]


class TestReduce:
    """Test suite for each session action."""

    def test_set_cards_clamps_index_and_unflips(self) -> None:
        state = _state(5, current_index=4, is_flipped=True)
        new_state = reduce(state, SetCards(tuple(make_cards(2))))
        assert len(new_state.cards) == 2
        assert new_state.current_index == 1
        assert not new_state.is_flipped

    def test_add_card_appends_and_clears_error(self) -> None:
        card = make_card("new")
        new_state = reduce(_state(2, error="Failed to add card"), AddCard(card))
        assert new_state.cards[-1] == card
        assert new_state.error is None

    def test_replace_card_keeps_position(self) -> None:
        state = _state(3)
        replacement = make_card("card-1", word="changed")
        new_state = reduce(state, ReplaceCard(replacement))
        assert new_state.cards[1].word == "changed"
        assert [c.id for c in new_state.cards] == [c.id for c in state.cards]

    def test_remove_last_card_clamps_index(self) -> None:
        state = _state(3, current_index=2)
        new_state = reduce(state, RemoveCard(FlashcardId("card-2")))
        assert len(new_state.cards) == 2
        assert new_state.current_index == 1

    def test_remove_only_card_leaves_index_zero(self) -> None:
        new_state = reduce(_state(1), RemoveCard(FlashcardId("card-0")))
        assert new_state.cards == ()
        assert new_state.current_index == 0
        assert new_state.current_card is None

    def test_set_current_index_clamps_and_unflips(self) -> None:
        state = _state(3, is_flipped=True)
        assert reduce(state, SetCurrentIndex(10)).current_index == 2
        assert reduce(state, SetCurrentIndex(-4)).current_index == 0
        assert not reduce(state, SetCurrentIndex(1)).is_flipped

    def test_set_mode_unflips_and_clears_error(self) -> None:
        state = _state(1, is_flipped=True, error="boom")
        new_state = reduce(state, SetMode(StudyMode.STUDY))
        assert new_state.mode == StudyMode.STUDY
        assert not new_state.is_flipped
        assert new_state.error is None

    def test_flip_toggles(self) -> None:
        state = reduce(_state(1), FlipCard())
        assert state.is_flipped
        assert not reduce(state, FlipCard()).is_flipped

    def test_set_error_clears_loading(self) -> None:
        state = reduce(SessionState(), SetLoading(True))
        assert state.is_loading
        state = reduce(state, SetError("Failed to load flashcards"))
        assert state.error == "Failed to load flashcards"
        assert not state.is_loading
        assert reduce(state, ClearError()).error is None

    def test_unknown_action_raises(self) -> None:
        with pytest.raises(TypeError):
            reduce(SessionState(), object())  # type: ignore[arg-type]


class TestClamping:
    """The current index stays in range through any sequence of adds and removes."""

    def test_clamp_index(self) -> None:
        assert clamp_index(3, 0) == 0
        assert clamp_index(3, 2) == 1
        assert clamp_index(-1, 2) == 0

    def test_index_in_range_after_random_adds_and_removes(self) -> None:
        rng = random.Random(7)
        state = SessionState()
        next_id = 0
        for _ in range(300):
            if state.cards and rng.random() < 0.45:
                victim = rng.choice(state.cards)
                state = reduce(state, RemoveCard(victim.id))
            else:
                state = reduce(state, AddCard(make_card(f"c{next_id}")))
                next_id += 1
            if state.cards and rng.random() < 0.3:
                state = reduce(state, SetCurrentIndex(rng.randrange(len(state.cards))))

            assert 0 <= state.current_index < max(1, len(state.cards))
