"""Mapper for device storage record ↔ Domain conversion."""

from datetime import UTC, datetime
from typing import Any

from vocabdeck.domain.common.value_objects import FlashcardId
from vocabdeck.domain.learning.entities.flashcard import Flashcard


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z``; naive values are UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def format_timestamp(value: datetime) -> str:
    """Serialize a timestamp as ISO-8601 UTC with a ``Z`` suffix."""
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


class FlashcardRecordMapper:
    """
    Mapper for the camelCase JSON records kept in the device slot.

    The record layout is the one the browser app used for local storage.
    """

    def to_domain(self, record: dict[str, Any]) -> Flashcard:
        """
        Convert a stored record to a domain entity.

        Raises:
            KeyError, TypeError, ValueError, DomainError: If the record is malformed
        """
        return Flashcard.create_with_id(
            id=FlashcardId(record["id"]),
            word=record["word"],
            meaning=record["meaning"],
            created_at=parse_timestamp(record["createdAt"]),
            updated_at=parse_timestamp(record["updatedAt"]),
            pronunciation=record.get("pronunciation") or None,
            part_of_speech=record.get("partOfSpeech") or None,
            examples=record.get("examples") or None,
            synonyms=record.get("synonyms") or None,
            antonyms=record.get("antonyms") or None,
            personal_notes=record.get("personalNotes") or None,
            audio_url=record.get("audioUrl") or None,
        )

    def to_record(self, card: Flashcard) -> dict[str, Any]:
        """Convert a domain entity to a stored record, omitting empty optional fields."""
        record: dict[str, Any] = {
            "id": card.id.value,
            "word": card.word,
            "meaning": card.meaning,
            "pronunciation": card.pronunciation,
            "partOfSpeech": card.part_of_speech,
            "examples": card.examples,
            "synonyms": card.synonyms,
            "antonyms": card.antonyms,
            "personalNotes": card.personal_notes,
            "audioUrl": card.audio_url,
            "createdAt": format_timestamp(card.created_at),
            "updatedAt": format_timestamp(card.updated_at),
        }
        return {k: v for k, v in record.items() if v is not None}
