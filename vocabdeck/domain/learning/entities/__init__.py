from .flashcard import (
    MEANING_MAX_LENGTH,
    WORD_MAX_LENGTH,
    Flashcard,
    FlashcardDraft,
    FlashcardPatch,
)

__all__ = [
    "MEANING_MAX_LENGTH",
    "WORD_MAX_LENGTH",
    "Flashcard",
    "FlashcardDraft",
    "FlashcardPatch",
]
