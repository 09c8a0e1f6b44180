"""Domain services for the learning context."""

from .deduplication_service import FlashcardDeduplicationService

__all__ = ["FlashcardDeduplicationService"]
