"""
Study session: the effect layer around the session reducer.

Every method that talks to a backend follows the same shape: validate the
input (raising before any I/O), raise the loading flag, await the backend,
then dispatch either the mutation or a user-facing error. Results are
applied to whatever state is current when the call settles, so two
overlapping actions resolve last-settled-wins.
"""

import random

import structlog

from vocabdeck.application.identity.protocols.identity_provider import IdentityProviderProtocol
from vocabdeck.application.learning.protocols.flashcard_backend import FlashcardBackendProtocol
from vocabdeck.application.learning.use_cases.migration_use_case import MigrationUseCase
from vocabdeck.application.learning.use_cases.word_lookup_use_case import WordLookupUseCase
from vocabdeck.domain.common.exceptions import DomainError
from vocabdeck.domain.common.value_objects import FlashcardId
from vocabdeck.domain.learning.entities.flashcard import Flashcard, FlashcardDraft, FlashcardPatch
from vocabdeck.domain.study.review_sequencer import (
    ReviewHistory,
    ReviewStep,
    go_to_next_in_history,
    go_to_previous_card,
    prune,
)
from vocabdeck.domain.study.session_state import (
    AddCard,
    ClearError,
    FlipCard,
    RemoveCard,
    ReplaceCard,
    SessionAction,
    SessionState,
    SetCards,
    SetCurrentIndex,
    SetError,
    SetLoading,
    SetMode,
    StudyMode,
    reduce,
)
from vocabdeck.exceptions import VocabDeckError

logger = structlog.get_logger(__name__)

LOAD_FAILED = "Failed to load flashcards"
ADD_FAILED = "Failed to add card"
UPDATE_FAILED = "Failed to update card"
DELETE_FAILED = "Failed to delete card"
MIGRATION_FAILED = "Failed to migrate local data"


class StudySession:
    """
    One user's study session over whichever backend matches their sign-in state.

    The backend is picked at the start of each action: the remote backend
    while the identity provider reports a signed-in user, the local one
    otherwise.
    """

    def __init__(
        self,
        local_backend: FlashcardBackendProtocol,
        remote_backend: FlashcardBackendProtocol,
        identity_provider: IdentityProviderProtocol,
        migration_use_case: MigrationUseCase,
        word_lookup: WordLookupUseCase | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize session with backends and collaborators."""
        self.local_backend = local_backend
        self.remote_backend = remote_backend
        self.identity_provider = identity_provider
        self.migration_use_case = migration_use_case
        self.word_lookup = word_lookup
        self.rng = rng or random.Random()
        self._state = SessionState()
        self._history = ReviewHistory()

    # State ---------------------------------------------------------------

    def dispatch(self, action: SessionAction) -> SessionState:
        self._state = reduce(self._state, action)
        return self._state

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def cards(self) -> tuple[Flashcard, ...]:
        return self._state.cards

    @property
    def current_card(self) -> Flashcard | None:
        return self._state.current_card

    @property
    def has_cards(self) -> bool:
        return self._state.has_cards

    @property
    def can_go_next(self) -> bool:
        return self.has_cards

    @property
    def can_go_previous(self) -> bool:
        return self.has_cards and self._history.can_go_back

    @property
    def review_history(self) -> ReviewHistory:
        return self._history

    @property
    def viewed_history(self) -> tuple[FlashcardId, ...]:
        return self._history.viewed_history

    @property
    def history_index(self) -> int:
        return self._history.history_index

    @property
    def active_backend(self) -> FlashcardBackendProtocol:
        if self.identity_provider.is_signed_in:
            return self.remote_backend
        return self.local_backend

    def _set_cards(self, cards: list[Flashcard]) -> None:
        self.dispatch(SetCards(tuple(cards)))
        self._history = prune(self._history, self._state.cards)

    # Loading ---------------------------------------------------------------

    async def start(self) -> None:
        """
        Initial load.

        When signed in, device cards are migrated first; a failed migration
        is reported but the cloud cards are still loaded. Lands in
        management mode positioned on a random card.
        """
        self.dispatch(SetMode(StudyMode.MANAGEMENT))
        if self.identity_provider.is_signed_in:
            await self.migrate_local_data()
        await self.load_cards()
        if self.has_cards:
            self.dispatch(SetCurrentIndex(self.rng.randrange(len(self._state.cards))))

    async def migrate_local_data(self) -> None:
        user_id = self.identity_provider.user_id
        if user_id is None:
            return

        self.dispatch(SetLoading(True))
        try:
            credential = await self.identity_provider.get_credential()
            result = await self.migration_use_case.migrate_if_needed(user_id, credential)
            if result.migrated:
                logger.info("study_session_migrated", user_id=user_id.value, count=result.migrated)
        except (VocabDeckError, DomainError) as err:
            logger.error("study_session_migration_failed", user_id=user_id.value, error=err.message)
            self.dispatch(SetError(MIGRATION_FAILED))
        finally:
            self.dispatch(SetLoading(False))

    async def load_cards(self) -> None:
        backend = self.active_backend
        self.dispatch(SetLoading(True))
        try:
            cards = await backend.list_cards()
            self._set_cards(cards)
            logger.debug("study_session_loaded", backend=backend.name, count=len(cards))
        except VocabDeckError as err:
            logger.error("study_session_load_failed", backend=backend.name, error=err.message)
            self.dispatch(SetError(LOAD_FAILED))
        finally:
            self.dispatch(SetLoading(False))

    # Mutations -------------------------------------------------------------

    async def add_card(self, draft: FlashcardDraft) -> Flashcard | None:
        """
        Create a card in the active backend and append it to the session.

        Returns:
            The created card, or None if the backend failed (see ``error``)

        Raises:
            ValidationError: If the draft is invalid; nothing is written
        """
        draft.ensure_valid()
        backend = self.active_backend
        self.dispatch(SetLoading(True))
        try:
            card = await backend.create(draft)
        except VocabDeckError as err:
            logger.error("study_session_add_failed", backend=backend.name, error=err.message)
            self.dispatch(SetError(ADD_FAILED))
            return None
        finally:
            self.dispatch(SetLoading(False))

        self.dispatch(AddCard(card))
        return card

    async def update_card(
        self, flashcard_id: FlashcardId, patch: FlashcardPatch
    ) -> Flashcard | None:
        """
        Apply a partial update through the active backend.

        Returns:
            The updated card, or None if the card is unknown or the backend
            failed (see ``error``)

        Raises:
            ValidationError: If the patch is empty or invalid; nothing is written
        """
        patch.ensure_valid()
        if self._state.index_of(flashcard_id) == -1:
            logger.warning("study_session_update_unknown_card", flashcard_id=flashcard_id.value)
            self.dispatch(SetError(UPDATE_FAILED))
            return None

        backend = self.active_backend
        self.dispatch(SetLoading(True))
        try:
            card = await backend.update(flashcard_id, patch)
        except VocabDeckError as err:
            logger.error(
                "study_session_update_failed",
                backend=backend.name,
                flashcard_id=flashcard_id.value,
                error=err.message,
            )
            self.dispatch(SetError(UPDATE_FAILED))
            return None
        finally:
            self.dispatch(SetLoading(False))

        self.dispatch(ReplaceCard(card))
        return card

    async def delete_card(self, flashcard_id: FlashcardId) -> bool:
        """
        Delete a card through the active backend.

        Returns:
            True if the card was deleted
        """
        if self._state.index_of(flashcard_id) == -1:
            logger.warning("study_session_delete_unknown_card", flashcard_id=flashcard_id.value)
            self.dispatch(SetError(DELETE_FAILED))
            return False

        backend = self.active_backend
        self.dispatch(SetLoading(True))
        try:
            await backend.delete(flashcard_id)
        except VocabDeckError as err:
            logger.error(
                "study_session_delete_failed",
                backend=backend.name,
                flashcard_id=flashcard_id.value,
                error=err.message,
            )
            self.dispatch(SetError(DELETE_FAILED))
            return False
        finally:
            self.dispatch(SetLoading(False))

        self.dispatch(RemoveCard(flashcard_id))
        self._history = prune(self._history, self._state.cards)
        return True

    async def prefill(self, draft: FlashcardDraft) -> FlashcardDraft:
        """
        Fill empty draft fields from a word lookup.

        On failure the draft comes back unchanged and the reason is put in
        ``error``.
        """
        if self.word_lookup is None:
            return draft
        try:
            return await self.word_lookup.prefill(draft)
        except (VocabDeckError, DomainError) as err:
            self.dispatch(SetError(err.message))
            return draft

    # Navigation ------------------------------------------------------------

    def set_mode(self, mode: StudyMode) -> None:
        self.dispatch(SetMode(mode))

    def flip_card(self) -> None:
        self.dispatch(FlipCard())

    def _apply_step(self, step: ReviewStep) -> None:
        self._history = step.history
        if step.card_index is not None:
            self.dispatch(SetCurrentIndex(step.card_index))

    def next_card(self) -> None:
        """Go forward in the viewing history, or to an unseen random card at its end."""
        self._apply_step(go_to_next_in_history(self._state.cards, self._history, self.rng))

    def previous_card(self) -> None:
        self._apply_step(go_to_previous_card(self._state.cards, self._history))

    def set_current_index(self, index: int) -> None:
        self.dispatch(SetCurrentIndex(index))

    def reset_review(self) -> None:
        """Start a fresh review pass with an empty history."""
        self._history = ReviewHistory()

    # Flags -----------------------------------------------------------------

    def set_loading(self, is_loading: bool) -> None:
        self.dispatch(SetLoading(is_loading))

    def set_error(self, error: str | None) -> None:
        self.dispatch(SetError(error))

    def clear_error(self) -> None:
        self.dispatch(ClearError())
