"""Client for the free dictionary API (dictionaryapi.dev)."""

from urllib.parse import quote

import httpx
import structlog
from pydantic import BaseModel, Field, ValidationError

from vocabdeck.application.learning.protocols.word_lookup import WordData
from vocabdeck.exceptions import WordLookupError

logger = structlog.get_logger(__name__)

_SOURCE = "Dictionary"
_MAX_EXAMPLES = 3
_MAX_RELATED_WORDS = 5
# Only the first few definitions of each meaning contribute examples
_EXAMPLE_DEFINITIONS_PER_MEANING = 2


class Phonetic(BaseModel):
    text: str | None = None
    audio: str | None = None


class Definition(BaseModel):
    definition: str = ""
    example: str | None = None
    synonyms: list[str] = Field(default_factory=list)
    antonyms: list[str] = Field(default_factory=list)


class Meaning(BaseModel):
    part_of_speech: str = Field(default="", alias="partOfSpeech")
    definitions: list[Definition] = Field(default_factory=list)


class DictionaryEntry(BaseModel):
    word: str
    phonetics: list[Phonetic] = Field(default_factory=list)
    meanings: list[Meaning] = Field(default_factory=list)


def _unique(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


def entry_to_word_data(entry: DictionaryEntry) -> WordData:
    """Reduce a dictionary entry to the fields a card uses."""
    first_meaning = entry.meanings[0] if entry.meanings else None
    first_definition = (
        first_meaning.definitions[0] if first_meaning and first_meaning.definitions else None
    )

    pronunciation = next((p.text for p in entry.phonetics if p.text), None)
    audio_url = next((p.audio for p in entry.phonetics if p.audio), None)

    examples: list[str] = []
    if first_definition and first_definition.example:
        examples.append(first_definition.example)
    synonyms: list[str] = []
    antonyms: list[str] = []
    for meaning in entry.meanings:
        for definition in meaning.definitions[:_EXAMPLE_DEFINITIONS_PER_MEANING]:
            if definition.example and definition.example not in examples:
                examples.append(definition.example)
        for definition in meaning.definitions:
            synonyms.extend(definition.synonyms)
            antonyms.extend(definition.antonyms)

    return WordData(
        word=entry.word,
        meaning=first_definition.definition if first_definition else "",
        pronunciation=pronunciation,
        part_of_speech=(first_meaning.part_of_speech or None) if first_meaning else None,
        examples=examples[:_MAX_EXAMPLES] or None,
        synonyms=_unique(synonyms)[:_MAX_RELATED_WORDS] or None,
        antonyms=_unique(antonyms)[:_MAX_RELATED_WORDS] or None,
        audio_url=audio_url,
    )


class DictionaryApiClient:
    """Primary word lookup source."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def fetch_word_data(self, word: str) -> WordData:
        """
        Look up a normalized word.

        Raises:
            WordLookupError: If the word is unknown, the response is malformed,
                or the API cannot be reached
        """
        url = f"{self.base_url}/{quote(word, safe='')}"
        try:
            response = await self._client.get(url)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as err:
            raise WordLookupError(
                word, _SOURCE, f"Dictionary API error: {err.response.status_code}"
            ) from err
        except (httpx.HTTPError, ValueError) as err:
            logger.warning("dictionary_lookup_failed", word=word, error=str(err))
            raise WordLookupError(word, _SOURCE, str(err)) from err

        try:
            entries = [DictionaryEntry.model_validate(item) for item in payload]
        except (ValidationError, TypeError) as err:
            raise WordLookupError(word, _SOURCE, "Malformed dictionary response") from err
        if not entries:
            raise WordLookupError(word, _SOURCE, "No entries returned")

        logger.debug("dictionary_lookup_succeeded", word=word)
        return entry_to_word_data(entries[0])
