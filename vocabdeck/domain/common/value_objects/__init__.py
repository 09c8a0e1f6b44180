"""Common value objects shared across all domain modules."""

from .content_hash import ContentHash
from .ids import LOCAL_ID_PREFIX, FlashcardId, UserId

__all__ = [
    "LOCAL_ID_PREFIX",
    "ContentHash",
    "FlashcardId",
    "UserId",
]
