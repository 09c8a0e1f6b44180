"""
Domain service for flashcard deduplication logic.

This is a pure domain service with no infrastructure dependencies.
"""

from vocabdeck.domain.common.value_objects import ContentHash
from vocabdeck.domain.learning.entities.flashcard import Flashcard


class FlashcardDeduplicationService:
    """
    Domain service for identifying duplicate flashcards.

    Deduplication is based on the content hash of word and meaning:
    cards with the same hash are considered the same card.
    """

    def find_duplicates(
        self,
        new_cards: list[Flashcard],
        existing_hashes: set[ContentHash],
    ) -> tuple[list[Flashcard], list[Flashcard]]:
        """
        Separate cards into unique ones and duplicates.

        Args:
            new_cards: Cards to check, in order
            existing_hashes: Content hashes that already exist in the target

        Returns:
            Tuple of (unique_cards, duplicate_cards)
        """
        unique: list[Flashcard] = []
        duplicates: list[Flashcard] = []

        # Track hashes we've seen in this batch
        seen: set[ContentHash] = set(existing_hashes)

        for card in new_cards:
            if card.content_hash in seen:
                duplicates.append(card)
            else:
                unique.append(card)
                seen.add(card.content_hash)

        return unique, duplicates
