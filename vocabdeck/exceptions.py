"""Custom exception hierarchy for the vocabdeck application."""


class VocabDeckError(Exception):
    """Base exception for all vocabdeck errors."""

    def __init__(self, message: str) -> None:
        """Initialize exception with message."""
        self.message = message
        super().__init__(self.message)


class NotFoundError(VocabDeckError):
    """Resource not found error."""


class FlashcardNotFoundError(NotFoundError):
    """Flashcard not found, or not owned by the requesting user."""

    def __init__(self, flashcard_id: str | None = None, *, message: str | None = None) -> None:
        """Initialize with flashcard ID or custom message."""
        self.flashcard_id = flashcard_id
        if message:
            super().__init__(message)
        elif flashcard_id is not None:
            super().__init__(f"Flashcard with id {flashcard_id} not found")
        else:
            super().__init__("Flashcard not found")


class StoreError(VocabDeckError):
    """Any failure reading or writing a card store."""


class RemoteStoreError(StoreError):
    """The cloud store rejected a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize with message and the HTTP status, if any."""
        self.status_code = status_code
        super().__init__(message)


class RemoteUnavailableError(RemoteStoreError):
    """The cloud store could not be reached."""


class SchemaMissingError(RemoteStoreError):
    """The cloud flashcards table does not exist."""


class CredentialExpiredError(RemoteStoreError):
    """The bearer credential was rejected by the cloud store."""

    def __init__(self, message: str = "Could not validate credentials") -> None:
        """Initialize with message and 401 status."""
        super().__init__(message, status_code=401)


class StorageReadError(StoreError):
    """The device persistence slot could not be read."""

    def __init__(self, key: str, reason: str) -> None:
        """Initialize with the slot key and reason for failure."""
        self.key = key
        self.reason = reason
        super().__init__(f"Cannot read storage key '{key}': {reason}")


class StorageWriteFailureError(StoreError):
    """The device persistence slot could not be written (e.g. quota exceeded)."""

    def __init__(self, key: str, reason: str) -> None:
        """Initialize with the slot key and reason for failure."""
        self.key = key
        self.reason = reason
        super().__init__(f"Cannot write storage key '{key}': {reason}")


class MigrationPartialFailureError(VocabDeckError):
    """Some device cards could not be copied to the cloud store."""

    def __init__(self, migrated: int, failed: int, reason: str) -> None:
        """Initialize with per-card counts and the first failure reason."""
        self.migrated = migrated
        self.failed = failed
        self.reason = reason
        super().__init__(
            f"Migrated {migrated} card(s), {failed} failed: {reason}",
        )


class WordLookupError(VocabDeckError):
    """A word metadata source had no usable entry or could not be reached."""

    def __init__(self, word: str, source: str, reason: str) -> None:
        """Initialize with the looked-up word, the source name and reason."""
        self.word = word
        self.source = source
        self.reason = reason
        super().__init__(f"{source} lookup failed for '{word}': {reason}")


class ServiceError(VocabDeckError):
    """Service layer error."""
