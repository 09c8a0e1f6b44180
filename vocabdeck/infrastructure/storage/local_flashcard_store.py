"""Device-local flashcard store and migration flag."""

import structlog

from vocabdeck.application.learning.protocols.key_value_storage import KeyValueStorageProtocol
from vocabdeck.constants import FLASHCARDS_STORAGE_KEY, MIGRATION_FLAG_STORAGE_KEY
from vocabdeck.domain.common.exceptions import DomainError
from vocabdeck.domain.learning.entities.flashcard import Flashcard
from vocabdeck.exceptions import StorageReadError, StorageWriteFailureError
from vocabdeck.infrastructure.storage.flashcard_record_mapper import FlashcardRecordMapper

logger = structlog.get_logger(__name__)


class LocalFlashcardStore:
    """Whole collection of device cards kept as one JSON array in the storage slot."""

    def __init__(
        self, storage: KeyValueStorageProtocol, key: str = FLASHCARDS_STORAGE_KEY
    ) -> None:
        self.storage = storage
        self.key = key
        self.mapper = FlashcardRecordMapper()

    def load(self) -> list[Flashcard]:
        """
        Load every card stored on the device.

        Missing, unreadable or non-list data loads as an empty collection.
        Individual records that fail to map are skipped and logged.

        Returns:
            Stored cards in stored order
        """
        try:
            records = self.storage.get(self.key, [])
        except StorageReadError as err:
            logger.warning("local_flashcards_unreadable", key=self.key, error=err.message)
            return []

        if not isinstance(records, list):
            logger.warning(
                "local_flashcards_malformed", key=self.key, found=type(records).__name__
            )
            return []

        cards = []
        for position, record in enumerate(records):
            try:
                cards.append(self.mapper.to_domain(record))
            except (DomainError, KeyError, TypeError, ValueError, AttributeError) as err:
                logger.warning(
                    "local_flashcard_record_skipped",
                    key=self.key,
                    position=position,
                    error=str(err),
                )
        return cards

    def save(self, cards: list[Flashcard]) -> None:
        """
        Replace the stored collection in a single write.

        Raises:
            StorageWriteFailureError: If the slot could not be written
        """
        self.storage.set(self.key, [self.mapper.to_record(card) for card in cards])
        logger.debug("local_flashcards_saved", count=len(cards))

    def clear(self) -> None:
        """Replace the stored collection with an empty one."""
        self.save([])


class MigrationFlag:
    """Boolean marker in the storage slot, set once device cards reach the cloud."""

    def __init__(
        self, storage: KeyValueStorageProtocol, key: str = MIGRATION_FLAG_STORAGE_KEY
    ) -> None:
        self.storage = storage
        self.key = key

    def is_set(self) -> bool:
        """Whether migration completed on this device; unreadable counts as not set."""
        try:
            return self.storage.get(self.key, False) is True
        except StorageReadError as err:
            logger.warning("migration_flag_unreadable", key=self.key, error=err.message)
            return False

    def mark_complete(self) -> None:
        """
        Persist the flag.

        Raises:
            StorageWriteFailureError: If the slot could not be written
        """
        try:
            self.storage.set(self.key, True)
        except StorageWriteFailureError:
            logger.error("migration_flag_write_failed", key=self.key)
            raise
