"""Use case for auto-populating card drafts with word metadata."""

import re
from dataclasses import replace

import structlog

from vocabdeck.application.learning.protocols.word_lookup import (
    AIWordLookupProtocol,
    WordData,
    WordLookupProtocol,
)
from vocabdeck.domain.common.exceptions import ValidationError
from vocabdeck.domain.learning.entities.flashcard import WORD_MAX_LENGTH, FlashcardDraft
from vocabdeck.exceptions import WordLookupError

logger = structlog.get_logger(__name__)

BASIC_MEANING = "Definition not available. Please add manually."

_WORD_PATTERN = re.compile(r"^[a-zA-Z\-']+$")
_SUFFIXES = ("ing", "ed", "er", "est", "ly", "s")
_PREFIXES = ("un", "re", "pre", "dis")
_MIN_BASE_LENGTH = 3
_MAX_SUGGESTIONS = 3


def normalize_word(word: str) -> str:
    return word.strip().lower()


def is_valid_word(word: str) -> bool:
    """Whether the text looks like a single word: letters, hyphens and apostrophes."""
    candidate = word.strip()
    if not candidate or len(candidate) > WORD_MAX_LENGTH:
        return False
    return _WORD_PATTERN.match(candidate) is not None


def get_suggestions(word: str) -> list[str]:
    """Base forms worth looking up instead, from stripping common affixes."""
    normalized = normalize_word(word)
    suggestions: list[str] = []
    for suffix in _SUFFIXES:
        if normalized.endswith(suffix):
            base = normalized[: -len(suffix)]
            if len(base) >= _MIN_BASE_LENGTH:
                suggestions.append(base)
    for prefix in _PREFIXES:
        if normalized.startswith(prefix):
            base = normalized[len(prefix) :]
            if len(base) >= _MIN_BASE_LENGTH:
                suggestions.append(base)
    return list(dict.fromkeys(suggestions))[:_MAX_SUGGESTIONS]


def prefill_draft(draft: FlashcardDraft, word_data: WordData) -> FlashcardDraft:
    """Fill the draft from looked-up data; empty looked-up values keep the draft's own."""
    return replace(
        draft,
        meaning=word_data.meaning or draft.meaning,
        pronunciation=word_data.pronunciation or draft.pronunciation,
        part_of_speech=word_data.part_of_speech or draft.part_of_speech,
        examples=word_data.examples or draft.examples,
        synonyms=word_data.synonyms or draft.synonyms,
        antonyms=word_data.antonyms or draft.antonyms,
        audio_url=word_data.audio_url or draft.audio_url,
    )


class WordLookupUseCase:
    """
    Looks words up in the dictionary first, then the AI source, then gives
    back a placeholder so the user can fill the card in by hand.

    Successful dictionary and AI answers are cached per normalized word for
    the life of the use case; placeholders are not.
    """

    def __init__(
        self,
        dictionary: WordLookupProtocol,
        ai_lookup: AIWordLookupProtocol | None = None,
    ) -> None:
        """Initialize use case with lookup sources."""
        self.dictionary = dictionary
        self.ai_lookup = ai_lookup
        self._cache: dict[str, WordData] = {}

    async def fetch_word_data(self, word: str) -> WordData:
        """
        Get metadata for a word.

        Args:
            word: Word as typed by the user

        Returns:
            WordData from the first source that answered, or a placeholder

        Raises:
            ValidationError: If the word is empty
        """
        normalized = normalize_word(word)
        if not normalized:
            raise ValidationError("Word cannot be empty", field="word")

        cached = self._cache.get(normalized)
        if cached is not None:
            return cached

        try:
            word_data = await self.dictionary.fetch_word_data(normalized)
        except WordLookupError as dictionary_error:
            logger.warning(
                "dictionary_lookup_unavailable", word=normalized, error=dictionary_error.message
            )
            if self.ai_lookup is None or not self.ai_lookup.is_configured():
                logger.info("ai_lookup_not_configured", word=normalized)
                return self._basic_word_data(normalized)
            try:
                word_data = await self.ai_lookup.fetch_word_data(normalized)
            except WordLookupError as ai_error:
                logger.warning("ai_lookup_unavailable", word=normalized, error=ai_error.message)
                return self._basic_word_data(normalized)

        self._cache[normalized] = word_data
        return word_data

    def clear_cache(self) -> None:
        self._cache.clear()

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    async def prefill(self, draft: FlashcardDraft) -> FlashcardDraft:
        """Look up the draft's word and merge the result into the draft."""
        word_data = await self.fetch_word_data(draft.word)
        return prefill_draft(draft, word_data)

    @staticmethod
    def _basic_word_data(word: str) -> WordData:
        return WordData(word=word, meaning=BASIC_MEANING)

    def is_valid_word(self, word: str) -> bool:
        return is_valid_word(word)

    def get_suggestions(self, word: str) -> list[str]:
        return get_suggestions(word)
