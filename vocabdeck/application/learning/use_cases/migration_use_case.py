"""Use case for moving device cards into the cloud store on first sign-in."""

from dataclasses import dataclass

import structlog

from vocabdeck.application.learning.protocols.flashcard_store import (
    LocalFlashcardStoreProtocol,
    MigrationFlagProtocol,
    RemoteFlashcardStoreProtocol,
)
from vocabdeck.domain.common.exceptions import DomainError
from vocabdeck.domain.common.value_objects import UserId
from vocabdeck.domain.learning.services.deduplication_service import (
    FlashcardDeduplicationService,
)
from vocabdeck.exceptions import MigrationPartialFailureError, VocabDeckError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class MigrationResult:
    """Outcome of one migration attempt."""

    migrated: int = 0
    skipped: int = 0
    already_done: bool = False


class MigrationUseCase:
    """
    Copies device cards to the signed-in user's cloud collection, once per device.

    Cards whose word and meaning already exist in the cloud are skipped.
    Inserts run one at a time so a failure leaves a clear count behind.
    """

    def __init__(
        self,
        local_store: LocalFlashcardStoreProtocol,
        remote_store: RemoteFlashcardStoreProtocol,
        migration_flag: MigrationFlagProtocol,
    ) -> None:
        """Initialize use case with store protocols."""
        self.local_store = local_store
        self.remote_store = remote_store
        self.migration_flag = migration_flag
        self.deduplication_service = FlashcardDeduplicationService()

    async def migrate_if_needed(
        self, user_id: UserId, credential: str | None = None
    ) -> MigrationResult:
        """
        Migrate device cards unless this device already did.

        Args:
            user_id: Owner of the cloud collection
            credential: Bearer credential forwarded to the cloud store

        Returns:
            MigrationResult with migrated and skipped counts

        Raises:
            MigrationPartialFailureError: If any insert failed; the flag stays
                unset and device cards are kept
            RemoteStoreError: If the cloud collection could not be listed
            StorageWriteFailureError: If the flag could not be persisted
        """
        if self.migration_flag.is_set():
            return MigrationResult(already_done=True)

        local_cards = self.local_store.load()
        if not local_cards:
            self.migration_flag.mark_complete()
            logger.info("migration_nothing_to_migrate", user_id=user_id.value)
            return MigrationResult()

        remote_cards = await self.remote_store.list_cards(user_id, credential)
        existing_hashes = {card.content_hash for card in remote_cards}
        to_insert, duplicates = self.deduplication_service.find_duplicates(
            local_cards, existing_hashes
        )

        migrated = 0
        failures: list[str] = []
        for card in to_insert:
            try:
                await self.remote_store.insert(user_id, card.to_draft(), credential)
                migrated += 1
            except (VocabDeckError, DomainError) as err:
                logger.warning(
                    "migration_card_failed",
                    user_id=user_id.value,
                    flashcard_id=card.id.value,
                    error=err.message,
                )
                failures.append(err.message)

        if failures:
            logger.error(
                "migration_partial_failure",
                user_id=user_id.value,
                migrated=migrated,
                failed=len(failures),
            )
            raise MigrationPartialFailureError(migrated, len(failures), failures[0])

        self.local_store.clear()
        self.migration_flag.mark_complete()
        logger.info(
            "migration_completed",
            user_id=user_id.value,
            migrated=migrated,
            skipped=len(duplicates),
        )
        return MigrationResult(migrated=migrated, skipped=len(duplicates))
