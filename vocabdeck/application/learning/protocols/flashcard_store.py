"""Protocols for flashcard stores in the learning context."""

from typing import Protocol

from vocabdeck.domain.common.value_objects import FlashcardId, UserId
from vocabdeck.domain.learning.entities.flashcard import Flashcard, FlashcardDraft, FlashcardPatch


class LocalFlashcardStoreProtocol(Protocol):
    """Whole-collection storage of the device's cards."""

    def load(self) -> list[Flashcard]:
        """
        Load every card stored on the device.

        Returns:
            Stored cards, or an empty list when nothing (readable) is stored
        """
        ...

    def save(self, cards: list[Flashcard]) -> None:
        """
        Replace the stored collection.

        Raises:
            StorageWriteFailureError: If the collection could not be written
        """
        ...

    def clear(self) -> None:
        """Replace the stored collection with an empty one."""
        ...


class MigrationFlagProtocol(Protocol):
    """Per-device marker that device cards were moved to the cloud."""

    def is_set(self) -> bool: ...

    def mark_complete(self) -> None: ...


class RemoteFlashcardStoreProtocol(Protocol):
    """Cloud storage of a user's cards; every call is scoped by user id."""

    async def list_cards(
        self, user_id: UserId, credential: str | None = None
    ) -> list[Flashcard]:
        """
        Get all cards owned by the user.

        Returns:
            Cards ordered by created_at ascending; empty if the table is missing

        Raises:
            RemoteUnavailableError: On transport failure
        """
        ...

    async def insert(
        self, user_id: UserId, draft: FlashcardDraft, credential: str | None = None
    ) -> Flashcard:
        """
        Create a card; the server assigns id and timestamps.

        Raises:
            RemoteUnavailableError: On transport failure
            SchemaMissingError: If the table does not exist
        """
        ...

    async def update(
        self,
        user_id: UserId,
        flashcard_id: FlashcardId,
        patch: FlashcardPatch,
        credential: str | None = None,
    ) -> Flashcard:
        """
        Change the supplied fields of a card and refresh its updated_at.

        Raises:
            FlashcardNotFoundError: If the card does not belong to the user
            RemoteUnavailableError: On transport failure
            SchemaMissingError: If the table does not exist
        """
        ...

    async def delete(
        self, user_id: UserId, flashcard_id: FlashcardId, credential: str | None = None
    ) -> None:
        """
        Delete a card. Deleting an absent card is not an error.

        Raises:
            RemoteUnavailableError: On transport failure
            SchemaMissingError: If the table does not exist
        """
        ...
