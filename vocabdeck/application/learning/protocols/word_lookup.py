"""Protocols for word metadata lookup."""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class WordData:
    """Metadata used to prefill a card draft."""

    word: str
    meaning: str = ""
    pronunciation: str | None = None
    part_of_speech: str | None = None
    examples: list[str] | None = None
    synonyms: list[str] | None = None
    antonyms: list[str] | None = None
    audio_url: str | None = None


class WordLookupProtocol(Protocol):
    async def fetch_word_data(self, word: str) -> WordData:
        """
        Look up a normalized word.

        Raises:
            WordLookupError: If the source has no usable entry or cannot be reached
        """
        ...


class AIWordLookupProtocol(WordLookupProtocol, Protocol):
    def is_configured(self) -> bool: ...
