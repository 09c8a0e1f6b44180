"""
Study session state and its reducer.

``reduce`` is the only way a ``SessionState`` changes. It is pure and
synchronous: every I/O-bound step lives in the study session use case,
which dispatches one of the actions below once the I/O has settled.
"""

from dataclasses import dataclass, replace
from enum import StrEnum

from vocabdeck.domain.common.value_objects import FlashcardId
from vocabdeck.domain.learning.entities.flashcard import Flashcard


class StudyMode(StrEnum):
    STUDY = "study"
    MANAGEMENT = "management"


@dataclass(frozen=True)
class SessionState:
    """Authoritative in-memory view of the active card collection."""

    cards: tuple[Flashcard, ...] = ()
    current_index: int = 0
    mode: StudyMode = StudyMode.MANAGEMENT
    is_flipped: bool = False
    is_loading: bool = False
    error: str | None = None

    @property
    def current_card(self) -> Flashcard | None:
        if 0 <= self.current_index < len(self.cards):
            return self.cards[self.current_index]
        return None

    @property
    def has_cards(self) -> bool:
        return len(self.cards) > 0

    def index_of(self, flashcard_id: FlashcardId) -> int:
        """Position of the card with this id, or -1."""
        for index, card in enumerate(self.cards):
            if card.id == flashcard_id:
                return index
        return -1


# Actions -------------------------------------------------------------------


@dataclass(frozen=True)
class SetCards:
    cards: tuple[Flashcard, ...]


@dataclass(frozen=True)
class AddCard:
    card: Flashcard


@dataclass(frozen=True)
class ReplaceCard:
    card: Flashcard


@dataclass(frozen=True)
class RemoveCard:
    flashcard_id: FlashcardId


@dataclass(frozen=True)
class SetCurrentIndex:
    index: int


@dataclass(frozen=True)
class SetMode:
    mode: StudyMode


@dataclass(frozen=True)
class FlipCard:
    pass


@dataclass(frozen=True)
class SetLoading:
    is_loading: bool


@dataclass(frozen=True)
class SetError:
    error: str | None


@dataclass(frozen=True)
class ClearError:
    pass


SessionAction = (
    SetCards
    | AddCard
    | ReplaceCard
    | RemoveCard
    | SetCurrentIndex
    | SetMode
    | FlipCard
    | SetLoading
    | SetError
    | ClearError
)


def clamp_index(index: int, card_count: int) -> int:
    """Clamp ``index`` into ``[0, max(1, card_count))``."""
    return max(0, min(index, card_count - 1))


def reduce(state: SessionState, action: SessionAction) -> SessionState:
    """Apply one action to the state and return the new state."""
    match action:
        case SetCards(cards=cards):
            return replace(
                state,
                cards=tuple(cards),
                current_index=clamp_index(state.current_index, len(cards)),
                is_flipped=False,
            )
        case AddCard(card=card):
            return replace(state, cards=(*state.cards, card), error=None)
        case ReplaceCard(card=card):
            cards = tuple(card if c.id == card.id else c for c in state.cards)
            return replace(state, cards=cards, error=None)
        case RemoveCard(flashcard_id=flashcard_id):
            cards = tuple(c for c in state.cards if c.id != flashcard_id)
            return replace(
                state,
                cards=cards,
                current_index=clamp_index(state.current_index, len(cards)),
                error=None,
            )
        case SetCurrentIndex(index=index):
            return replace(
                state,
                current_index=clamp_index(index, len(state.cards)),
                is_flipped=False,
            )
        case SetMode(mode=mode):
            return replace(state, mode=mode, is_flipped=False, error=None)
        case FlipCard():
            return replace(state, is_flipped=not state.is_flipped)
        case SetLoading(is_loading=is_loading):
            return replace(state, is_loading=is_loading)
        case SetError(error=error):
            return replace(state, error=error, is_loading=False)
        case ClearError():
            return replace(state, error=None)
    raise TypeError(f"Unknown session action: {action!r}")
