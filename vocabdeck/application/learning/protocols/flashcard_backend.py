"""Protocol for the backend a study session reads and writes through."""

from typing import Protocol

from vocabdeck.domain.common.value_objects import FlashcardId
from vocabdeck.domain.learning.entities.flashcard import Flashcard, FlashcardDraft, FlashcardPatch


class FlashcardBackendProtocol(Protocol):
    """
    Uniform CRUD surface over either the device store or the cloud store.

    Implementations raise subclasses of ``VocabDeckError`` on failure.
    """

    name: str

    async def list_cards(self) -> list[Flashcard]: ...

    async def create(self, draft: FlashcardDraft) -> Flashcard: ...

    async def update(self, flashcard_id: FlashcardId, patch: FlashcardPatch) -> Flashcard: ...

    async def delete(self, flashcard_id: FlashcardId) -> None: ...
