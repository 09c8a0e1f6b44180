"""Flashcard backend over the device store, used while no one is signed in."""

import structlog

from vocabdeck.application.learning.protocols.flashcard_store import LocalFlashcardStoreProtocol
from vocabdeck.domain.common.value_objects import FlashcardId
from vocabdeck.domain.learning.entities.flashcard import Flashcard, FlashcardDraft, FlashcardPatch
from vocabdeck.exceptions import FlashcardNotFoundError, StorageWriteFailureError
from vocabdeck.utils import Clock, utc_now

logger = structlog.get_logger(__name__)


class LocalFlashcardBackend:
    """
    Trial-mode backend.

    Cards live in memory and every mutation writes the whole collection back
    to the device store. A failed write is logged and the in-memory
    collection stays authoritative until the next successful write.
    """

    name = "local"

    def __init__(self, store: LocalFlashcardStoreProtocol, clock: Clock = utc_now) -> None:
        self.store = store
        self.clock = clock
        self._cards: list[Flashcard] | None = None
        self._unsaved = False

    def _loaded(self) -> list[Flashcard]:
        if self._cards is None:
            self._cards = self.store.load()
        return self._cards

    def _persist(self) -> None:
        try:
            self.store.save(list(self._loaded()))
        except StorageWriteFailureError as err:
            self._unsaved = True
            logger.error("local_flashcards_persist_failed", error=err.message)
        else:
            self._unsaved = False

    def _position(self, flashcard_id: FlashcardId) -> int:
        for position, card in enumerate(self._loaded()):
            if card.id == flashcard_id:
                return position
        raise FlashcardNotFoundError(flashcard_id.value)

    async def list_cards(self) -> list[Flashcard]:
        """Cards on the device; unsaved in-memory changes win over the stored copy."""
        if not self._unsaved:
            self._cards = None
        return list(self._loaded())

    async def create(self, draft: FlashcardDraft) -> Flashcard:
        card = Flashcard.create(id=FlashcardId.generate_local(), draft=draft, now=self.clock())
        self._loaded().append(card)
        self._persist()
        logger.info("local_flashcard_created", flashcard_id=card.id.value)
        return card

    async def update(self, flashcard_id: FlashcardId, patch: FlashcardPatch) -> Flashcard:
        """
        Apply a patch to a stored card.

        Raises:
            ValidationError: If the patch is empty or invalid
            FlashcardNotFoundError: If no card has that id
        """
        patch.ensure_valid()
        position = self._position(flashcard_id)
        cards = self._loaded()
        updated = cards[position].apply_patch(patch, now=self.clock())
        cards[position] = updated
        self._persist()
        logger.info("local_flashcard_updated", flashcard_id=flashcard_id.value)
        return updated

    async def delete(self, flashcard_id: FlashcardId) -> None:
        cards = self._loaded()
        remaining = [card for card in cards if card.id != flashcard_id]
        if len(remaining) == len(cards):
            return
        self._cards = remaining
        self._persist()
        logger.info("local_flashcard_deleted", flashcard_id=flashcard_id.value)
