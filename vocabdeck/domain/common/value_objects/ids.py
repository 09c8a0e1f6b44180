import secrets
import time
from dataclasses import dataclass

from ..entity import EntityId

_BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
_LOCAL_SUFFIX_LENGTH = 9
LOCAL_ID_PREFIX = "local_"


@dataclass(frozen=True)
class UserId(EntityId):
    """Strongly-typed identifier of an authenticated user."""


@dataclass(frozen=True)
class FlashcardId(EntityId):
    """Strongly-typed flashcard identifier."""

    @classmethod
    def generate_local(cls) -> "FlashcardId":
        """Generate a device-scoped id of the form ``local_<millis>_<suffix>``."""
        millis = time.time_ns() // 1_000_000
        suffix = "".join(secrets.choice(_BASE36_ALPHABET) for _ in range(_LOCAL_SUFFIX_LENGTH))
        return cls(f"{LOCAL_ID_PREFIX}{millis}_{suffix}")

    @property
    def is_local(self) -> bool:
        return self.value.startswith(LOCAL_ID_PREFIX)
