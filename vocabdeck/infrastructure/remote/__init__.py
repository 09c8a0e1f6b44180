from .flashcard_remote_store import FlashcardRemoteStore

__all__ = ["FlashcardRemoteStore"]
