from .key_value_storage import SqlKeyValueStorage, StorageUsage
from .local_flashcard_store import LocalFlashcardStore, MigrationFlag

__all__ = [
    "LocalFlashcardStore",
    "MigrationFlag",
    "SqlKeyValueStorage",
    "StorageUsage",
]
