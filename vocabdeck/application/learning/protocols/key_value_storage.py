"""Protocol for the durable on-device key-value slot."""

from typing import Any, Protocol


class KeyValueStorageProtocol(Protocol):
    """Device persistence slot holding JSON-serializable values under string keys."""

    def get(self, key: str, default: Any = None) -> Any:
        """
        Read the value stored under ``key``.

        Args:
            key: Slot key
            default: Returned when nothing is stored under the key

        Raises:
            StorageReadError: If the stored value cannot be read or decoded
        """
        ...

    def set(self, key: str, value: Any) -> None:
        """
        Store ``value`` under ``key``, replacing any previous value.

        Raises:
            StorageWriteFailureError: If the value cannot be written
        """
        ...

    def remove(self, key: str) -> None:
        """Remove ``key``; removing an absent key is not an error."""
        ...
