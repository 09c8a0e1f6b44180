"""
Flashcard entity for vocabulary study.
"""

from dataclasses import dataclass, fields, replace
from datetime import datetime

from vocabdeck.domain.common.entity import Entity
from vocabdeck.domain.common.exceptions import (
    DomainError,
    InvariantViolationError,
    ValidationError,
)
from vocabdeck.domain.common.value_objects import ContentHash, FlashcardId

WORD_MAX_LENGTH = 100
MEANING_MAX_LENGTH = 500

_OPTIONAL_TEXT_FIELDS = ("pronunciation", "part_of_speech", "personal_notes", "audio_url")
_OPTIONAL_LIST_FIELDS = ("examples", "synonyms", "antonyms")


def _required_text_errors(label: str, value: str | None, max_length: int) -> list[str]:
    if not value or not value.strip():
        return [f"{label} is required"]
    if len(value) > max_length:
        return [f"{label} is too long (max {max_length} characters)"]
    return []


def validate_word_and_meaning(word: str | None, meaning: str | None) -> list[str]:
    """Return every problem with a word/meaning pair, in display order."""
    return _required_text_errors("Word", word, WORD_MAX_LENGTH) + _required_text_errors(
        "Meaning", meaning, MEANING_MAX_LENGTH
    )


def _clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _clean_list(values: list[str] | None) -> list[str] | None:
    if values is None:
        return None
    cleaned = [v.strip() for v in values if v and v.strip()]
    return cleaned or None


@dataclass(frozen=True)
class FlashcardDraft:
    """A card as entered by the user, before it has an id or timestamps."""

    word: str
    meaning: str
    pronunciation: str | None = None
    part_of_speech: str | None = None
    examples: list[str] | None = None
    synonyms: list[str] | None = None
    antonyms: list[str] | None = None
    personal_notes: str | None = None
    audio_url: str | None = None

    def validate(self) -> list[str]:
        """List validation problems; empty when the draft can be saved."""
        return validate_word_and_meaning(self.word, self.meaning)

    def ensure_valid(self) -> None:
        """
        Raise if the draft cannot be saved.

        Raises:
            ValidationError: If word or meaning is missing or too long
        """
        errors = self.validate()
        if errors:
            field = "word" if any(e.startswith("Word") for e in errors) else "meaning"
            raise ValidationError("; ".join(errors), field=field, errors=errors)

    def normalized(self) -> "FlashcardDraft":
        """Copy with whitespace trimmed and blank optional fields dropped."""
        return FlashcardDraft(
            word=self.word.strip(),
            meaning=self.meaning.strip(),
            pronunciation=_clean_text(self.pronunciation),
            part_of_speech=_clean_text(self.part_of_speech),
            examples=_clean_list(self.examples),
            synonyms=_clean_list(self.synonyms),
            antonyms=_clean_list(self.antonyms),
            personal_notes=_clean_text(self.personal_notes),
            audio_url=_clean_text(self.audio_url),
        )

    @property
    def content_hash(self) -> ContentHash:
        return ContentHash.for_word(self.word, self.meaning)


@dataclass(frozen=True)
class FlashcardPatch:
    """
    Partial update of a flashcard.

    Only fields that are not ``None`` are changed. An empty string or an
    empty list clears an optional field.
    """

    word: str | None = None
    meaning: str | None = None
    pronunciation: str | None = None
    part_of_speech: str | None = None
    examples: list[str] | None = None
    synonyms: list[str] | None = None
    antonyms: list[str] | None = None
    personal_notes: str | None = None
    audio_url: str | None = None

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def validate(self) -> list[str]:
        errors: list[str] = []
        if self.word is not None:
            errors += _required_text_errors("Word", self.word, WORD_MAX_LENGTH)
        if self.meaning is not None:
            errors += _required_text_errors("Meaning", self.meaning, MEANING_MAX_LENGTH)
        return errors

    def ensure_valid(self) -> None:
        """
        Raise if the patch cannot be applied.

        Raises:
            ValidationError: If nothing is supplied, or word/meaning is invalid
        """
        if self.is_empty:
            raise ValidationError("At least one field must be provided")
        errors = self.validate()
        if errors:
            raise ValidationError("; ".join(errors), errors=errors)

    def changes(self) -> dict[str, object]:
        """Supplied fields, normalized, keyed by entity attribute name."""
        result: dict[str, object] = {}
        if self.word is not None:
            result["word"] = self.word.strip()
        if self.meaning is not None:
            result["meaning"] = self.meaning.strip()
        for name in _OPTIONAL_TEXT_FIELDS:
            value = getattr(self, name)
            if value is not None:
                result[name] = _clean_text(value)
        for name in _OPTIONAL_LIST_FIELDS:
            value = getattr(self, name)
            if value is not None:
                result[name] = _clean_list(value)
        return result


@dataclass(frozen=True)
class Flashcard(Entity[FlashcardId]):
    """
    Vocabulary flashcard.

    Cards are immutable snapshots; every change produces a new card with a
    fresh ``updated_at``.

    Business Rules:
    - Word and meaning cannot be empty
    - updated_at is never earlier than created_at
    """

    id: FlashcardId
    word: str
    meaning: str
    created_at: datetime
    updated_at: datetime
    pronunciation: str | None = None
    part_of_speech: str | None = None
    examples: list[str] | None = None
    synonyms: list[str] | None = None
    antonyms: list[str] | None = None
    personal_notes: str | None = None
    audio_url: str | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.word or not self.word.strip():
            raise DomainError("Word cannot be empty")
        if not self.meaning or not self.meaning.strip():
            raise DomainError("Meaning cannot be empty")
        if self.updated_at < self.created_at:
            raise InvariantViolationError("Flashcard", "updated_at must not precede created_at")

    def apply_patch(self, patch: FlashcardPatch, now: datetime) -> "Flashcard":
        """
        Return a copy with the patch applied and ``updated_at`` refreshed.

        Raises:
            ValidationError: If the patch is empty or invalid
        """
        patch.ensure_valid()
        updated_at = max(now, self.updated_at)
        return replace(self, **patch.changes(), updated_at=updated_at)  # type: ignore[arg-type]

    def to_draft(self) -> FlashcardDraft:
        """Content of this card without identity or timestamps."""
        return FlashcardDraft(
            word=self.word,
            meaning=self.meaning,
            pronunciation=self.pronunciation,
            part_of_speech=self.part_of_speech,
            examples=list(self.examples) if self.examples is not None else None,
            synonyms=list(self.synonyms) if self.synonyms is not None else None,
            antonyms=list(self.antonyms) if self.antonyms is not None else None,
            personal_notes=self.personal_notes,
            audio_url=self.audio_url,
        )

    @property
    def content_hash(self) -> ContentHash:
        return ContentHash.for_word(self.word, self.meaning)

    @classmethod
    def create(cls, id: FlashcardId, draft: FlashcardDraft, now: datetime) -> "Flashcard":
        """
        Create a new card from a draft.

        Args:
            id: Identifier assigned by the owning store
            draft: Card content
            now: Creation time, used for both timestamps

        Raises:
            ValidationError: If the draft is invalid
        """
        draft.ensure_valid()
        clean = draft.normalized()
        return cls(
            id=id,
            word=clean.word,
            meaning=clean.meaning,
            created_at=now,
            updated_at=now,
            pronunciation=clean.pronunciation,
            part_of_speech=clean.part_of_speech,
            examples=clean.examples,
            synonyms=clean.synonyms,
            antonyms=clean.antonyms,
            personal_notes=clean.personal_notes,
            audio_url=clean.audio_url,
        )

    @classmethod
    def create_with_id(
        cls,
        id: FlashcardId,
        word: str,
        meaning: str,
        created_at: datetime,
        updated_at: datetime,
        pronunciation: str | None = None,
        part_of_speech: str | None = None,
        examples: list[str] | None = None,
        synonyms: list[str] | None = None,
        antonyms: list[str] | None = None,
        personal_notes: str | None = None,
        audio_url: str | None = None,
    ) -> "Flashcard":
        """Reconstitute a flashcard from persistence."""
        return cls(
            id=id,
            word=word,
            meaning=meaning,
            created_at=created_at,
            updated_at=updated_at,
            pronunciation=pronunciation,
            part_of_speech=part_of_speech,
            examples=examples,
            synonyms=synonyms,
            antonyms=antonyms,
            personal_notes=personal_notes,
            audio_url=audio_url,
        )
