"""Flashcard backend over the cloud store, scoped to the signed-in user."""

from vocabdeck.application.identity.protocols.identity_provider import IdentityProviderProtocol
from vocabdeck.application.learning.protocols.flashcard_store import RemoteFlashcardStoreProtocol
from vocabdeck.domain.common.value_objects import FlashcardId, UserId
from vocabdeck.domain.learning.entities.flashcard import Flashcard, FlashcardDraft, FlashcardPatch
from vocabdeck.exceptions import CredentialExpiredError


class RemoteFlashcardBackend:
    """Adapts the user-scoped cloud store to the session's CRUD surface."""

    name = "remote"

    def __init__(
        self,
        store: RemoteFlashcardStoreProtocol,
        identity_provider: IdentityProviderProtocol,
    ) -> None:
        self.store = store
        self.identity_provider = identity_provider

    async def _scope(self) -> tuple[UserId, str | None]:
        user_id = self.identity_provider.user_id
        if user_id is None:
            raise CredentialExpiredError("Not signed in")
        credential = await self.identity_provider.get_credential()
        return user_id, credential

    async def list_cards(self) -> list[Flashcard]:
        user_id, credential = await self._scope()
        return await self.store.list_cards(user_id, credential)

    async def create(self, draft: FlashcardDraft) -> Flashcard:
        user_id, credential = await self._scope()
        return await self.store.insert(user_id, draft, credential)

    async def update(self, flashcard_id: FlashcardId, patch: FlashcardPatch) -> Flashcard:
        user_id, credential = await self._scope()
        return await self.store.update(user_id, flashcard_id, patch, credential)

    async def delete(self, flashcard_id: FlashcardId) -> None:
        user_id, credential = await self._scope()
        await self.store.delete(user_id, flashcard_id, credential)
