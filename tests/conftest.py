"""Pytest configuration and fixtures."""

from collections.abc import Generator
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.orm import Session, sessionmaker

from vocabdeck.database import Base, create_storage_engine
from vocabdeck.domain.common.value_objects import FlashcardId, UserId
from vocabdeck.domain.learning.entities.flashcard import Flashcard, FlashcardDraft, FlashcardPatch
from vocabdeck.exceptions import (
    FlashcardNotFoundError,
    RemoteUnavailableError,
    SchemaMissingError,
)
from vocabdeck.infrastructure.storage import LocalFlashcardStore, MigrationFlag, SqlKeyValueStorage

# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


class FakeClock:
    """Clock that moves one second forward on every reading."""

    def __init__(self, start: datetime = BASE_TIME) -> None:
        self.now = start

    def __call__(self) -> datetime:
        self.now = self.now + timedelta(seconds=1)
        return self.now


class FakeIdentityProvider:
    def __init__(self, user_id: str | None = None, credential: str | None = "token-123") -> None:
        self._user_id = UserId(user_id) if user_id else None
        self.credential = credential

    @property
    def user_id(self) -> UserId | None:
        return self._user_id

    @property
    def is_signed_in(self) -> bool:
        return self._user_id is not None

    @property
    def is_loaded(self) -> bool:
        return True

    def sign_in(self, user_id: str) -> None:
        self._user_id = UserId(user_id)

    def sign_out(self) -> None:
        self._user_id = None

    async def get_credential(self) -> str | None:
        return self.credential if self._user_id else None


class FakeRemoteStore:
    """In-memory cloud store with failure switches."""

    def __init__(self) -> None:
        self.rows: dict[str, list[Flashcard]] = {}
        self.clock = FakeClock()
        self.unavailable = False
        self.schema_missing = False
        self.fail_words: set[str] = set()
        self.writes = 0
        self.list_calls = 0
        self._next_id = 1

    def seed(self, user_id: str, card: Flashcard) -> None:
        self.rows.setdefault(user_id, []).append(card)

    def _check(self) -> None:
        if self.unavailable:
            raise RemoteUnavailableError("Cloud store unreachable: connection refused")
        if self.schema_missing:
            raise SchemaMissingError("Table 'flashcards' is missing")

    async def list_cards(self, user_id: UserId, credential: str | None = None) -> list[Flashcard]:
        self.list_calls += 1
        if self.unavailable:
            raise RemoteUnavailableError("Cloud store unreachable: connection refused")
        if self.schema_missing:
            return []
        return list(self.rows.get(user_id.value, []))

    async def insert(
        self, user_id: UserId, draft: FlashcardDraft, credential: str | None = None
    ) -> Flashcard:
        self._check()
        self.writes += 1
        if draft.word in self.fail_words:
            raise RemoteUnavailableError(f"Insert of '{draft.word}' timed out")
        card = Flashcard.create(
            id=FlashcardId(f"00000000-0000-0000-0000-{self._next_id:012d}"),
            draft=draft,
            now=self.clock(),
        )
        self._next_id += 1
        self.rows.setdefault(user_id.value, []).append(card)
        return card

    async def update(
        self,
        user_id: UserId,
        flashcard_id: FlashcardId,
        patch: FlashcardPatch,
        credential: str | None = None,
    ) -> Flashcard:
        self._check()
        self.writes += 1
        cards = self.rows.get(user_id.value, [])
        for position, card in enumerate(cards):
            if card.id == flashcard_id:
                cards[position] = card.apply_patch(patch, now=self.clock())
                return cards[position]
        raise FlashcardNotFoundError(flashcard_id.value)

    async def delete(
        self, user_id: UserId, flashcard_id: FlashcardId, credential: str | None = None
    ) -> None:
        self._check()
        self.writes += 1
        cards = self.rows.get(user_id.value, [])
        self.rows[user_id.value] = [card for card in cards if card.id != flashcard_id]


def make_card(
    id: str,
    word: str = "serendipity",
    meaning: str = "Finding something good without looking for it",
    created_at: datetime = BASE_TIME,
    **optional: object,
) -> Flashcard:
    return Flashcard.create_with_id(
        id=FlashcardId(id),
        word=word,
        meaning=meaning,
        created_at=created_at,
        updated_at=created_at,
        **optional,  # type: ignore[arg-type]
    )


def make_cards(count: int) -> list[Flashcard]:
    return [make_card(f"card-{i}", word=f"word{i}", meaning=f"meaning {i}") for i in range(count)]


@pytest.fixture
def session_factory() -> Generator[sessionmaker[Session], None, None]:
    """Create a fresh in-memory device storage database for each test."""
    engine = create_storage_engine(TEST_DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def storage(session_factory: sessionmaker[Session]) -> SqlKeyValueStorage:
    return SqlKeyValueStorage(session_factory)


@pytest.fixture
def local_store(storage: SqlKeyValueStorage) -> LocalFlashcardStore:
    return LocalFlashcardStore(storage)


@pytest.fixture
def migration_flag(storage: SqlKeyValueStorage) -> MigrationFlag:
    return MigrationFlag(storage)


@pytest.fixture
def remote_store() -> FakeRemoteStore:
    return FakeRemoteStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
