"""
Review sequencer for study mode.

Cards are drawn at random without repeats until every card has been shown
once (a "pass"), then the pass starts over. Independently of the draws, the
sequencer keeps a browser-style history of what was actually displayed so
that "previous" retraces exactly what the user saw while "next" at the
forward edge draws a new card.

All functions are pure: they take the cards and a ``ReviewHistory`` and
return a ``ReviewStep`` with the new history and the index to display.
"""

import random
from collections.abc import Sequence
from dataclasses import dataclass, replace

from vocabdeck.domain.common.value_objects import FlashcardId
from vocabdeck.domain.learning.entities.flashcard import Flashcard

NOT_POSITIONED = -1


@dataclass(frozen=True)
class ReviewHistory:
    """
    Navigation state of a study session.

    Invariant: ``history_index`` is ``NOT_POSITIONED`` or a valid index
    into ``viewed_history``.
    """

    viewed_card_ids: frozenset[FlashcardId] = frozenset()
    viewed_history: tuple[FlashcardId, ...] = ()
    history_index: int = NOT_POSITIONED

    def __post_init__(self) -> None:
        if self.history_index != NOT_POSITIONED and not (
            0 <= self.history_index < len(self.viewed_history)
        ):
            raise ValueError(
                f"history_index {self.history_index} out of range for "
                f"{len(self.viewed_history)} entries"
            )

    @property
    def can_go_back(self) -> bool:
        return self.history_index > 0


@dataclass(frozen=True)
class ReviewStep:
    """Result of a navigation: the new history and the card index to show (None = no move)."""

    history: ReviewHistory
    card_index: int | None = None


def _index_by_id(cards: Sequence[Flashcard]) -> dict[FlashcardId, int]:
    return {card.id: index for index, card in enumerate(cards)}


def append_to_history(history: ReviewHistory, flashcard_id: FlashcardId) -> ReviewHistory:
    """Drop any earlier occurrence of the id, append it, and point at it."""
    entries = (*(i for i in history.viewed_history if i != flashcard_id), flashcard_id)
    return replace(history, viewed_history=entries, history_index=len(entries) - 1)


def go_to_random_card(
    cards: Sequence[Flashcard],
    history: ReviewHistory,
    rng: random.Random | None = None,
) -> ReviewStep:
    """
    Draw a card not yet seen in the current pass.

    When every card has been seen the pass resets and the draw is made
    from the whole collection.
    """
    if not cards:
        return ReviewStep(history=history)

    rng = rng or random.Random()
    viewed = history.viewed_card_ids
    unviewed = [card for card in cards if card.id not in viewed]
    if not unviewed:
        viewed = frozenset()
        unviewed = list(cards)

    drawn = rng.choice(unviewed)
    history = append_to_history(replace(history, viewed_card_ids=viewed | {drawn.id}), drawn.id)
    return ReviewStep(history=history, card_index=_index_by_id(cards)[drawn.id])


def go_to_previous_card(cards: Sequence[Flashcard], history: ReviewHistory) -> ReviewStep:
    """
    Step back one entry in the viewing history.

    Entries for cards that no longer exist are skipped. The history itself
    and the current pass are left untouched.
    """
    positions = _index_by_id(cards)
    target = history.history_index - 1
    while target >= 0:
        flashcard_id = history.viewed_history[target]
        if flashcard_id in positions:
            return ReviewStep(
                history=replace(history, history_index=target),
                card_index=positions[flashcard_id],
            )
        target -= 1
    return ReviewStep(history=history)


def go_to_next_in_history(
    cards: Sequence[Flashcard],
    history: ReviewHistory,
    rng: random.Random | None = None,
) -> ReviewStep:
    """Step forward through history, or draw a new card at the forward edge."""
    if history.history_index == NOT_POSITIONED:
        return go_to_random_card(cards, history, rng)
    positions = _index_by_id(cards)
    target = history.history_index + 1
    while target < len(history.viewed_history):
        flashcard_id = history.viewed_history[target]
        if flashcard_id in positions:
            return ReviewStep(
                history=replace(history, history_index=target),
                card_index=positions[flashcard_id],
            )
        target += 1
    return go_to_random_card(cards, history, rng)


def prune(history: ReviewHistory, cards: Sequence[Flashcard]) -> ReviewHistory:
    """
    Forget ids of cards that are no longer in the collection.

    The pointer stays on the same entry when it survives, otherwise it
    moves to the closest earlier surviving entry.
    """
    live = {card.id for card in cards}
    if all(i in live for i in history.viewed_history) and history.viewed_card_ids <= live:
        return history

    entries = tuple(i for i in history.viewed_history if i in live)
    if history.history_index == NOT_POSITIONED or not entries:
        index = NOT_POSITIONED
    else:
        kept_before = sum(
            1 for i in history.viewed_history[: history.history_index + 1] if i in live
        )
        index = max(0, kept_before - 1)

    return ReviewHistory(
        viewed_card_ids=frozenset(i for i in history.viewed_card_ids if i in live),
        viewed_history=entries,
        history_index=index,
    )
