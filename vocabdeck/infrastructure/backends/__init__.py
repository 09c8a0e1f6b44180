from .local_backend import LocalFlashcardBackend
from .remote_backend import RemoteFlashcardBackend

__all__ = ["LocalFlashcardBackend", "RemoteFlashcardBackend"]
