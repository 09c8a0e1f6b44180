"""Mapper for cloud table row ↔ Domain conversion."""

from typing import Any

from vocabdeck.domain.common.value_objects import FlashcardId, UserId
from vocabdeck.domain.learning.entities.flashcard import Flashcard, FlashcardDraft, FlashcardPatch
from vocabdeck.infrastructure.storage.flashcard_record_mapper import parse_timestamp


class FlashcardRowMapper:
    """Mapper for snake_case rows of the cloud ``flashcards`` table."""

    def to_domain(self, row: dict[str, Any]) -> Flashcard:
        """Convert a table row to a domain entity."""
        created_at = parse_timestamp(row["created_at"])
        # updated_at is written from the client clock, which may lag the server
        updated_at = max(parse_timestamp(row["updated_at"]), created_at)
        return Flashcard.create_with_id(
            id=FlashcardId(str(row["id"])),
            word=row["word"],
            meaning=row["meaning"],
            created_at=created_at,
            updated_at=updated_at,
            pronunciation=row.get("pronunciation") or None,
            part_of_speech=row.get("part_of_speech") or None,
            examples=row.get("examples") or None,
            synonyms=row.get("synonyms") or None,
            antonyms=row.get("antonyms") or None,
            personal_notes=row.get("personal_notes") or None,
            audio_url=row.get("audio_url") or None,
        )

    def to_insert_row(self, user_id: UserId, draft: FlashcardDraft) -> dict[str, Any]:
        """Row for a new card; id and timestamps are left to the server."""
        clean = draft.normalized()
        return {
            "user_id": user_id.value,
            "word": clean.word,
            "meaning": clean.meaning,
            "pronunciation": clean.pronunciation,
            "part_of_speech": clean.part_of_speech,
            "examples": clean.examples,
            "synonyms": clean.synonyms,
            "antonyms": clean.antonyms,
            "personal_notes": clean.personal_notes,
            "audio_url": clean.audio_url,
        }

    def to_update_row(self, patch: FlashcardPatch) -> dict[str, Any]:
        """Columns to change; cleared optional fields become nulls."""
        # Entity attribute names are the column names
        return dict(patch.changes())
