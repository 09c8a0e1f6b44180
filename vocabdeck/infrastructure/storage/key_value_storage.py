"""Device persistence slot backed by a SQLAlchemy table."""

import json
from dataclasses import dataclass
from typing import Any

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from vocabdeck.constants import DEVICE_STORAGE_QUOTA_BYTES
from vocabdeck.database import session_scope
from vocabdeck.exceptions import StorageReadError, StorageWriteFailureError
from vocabdeck.models import StorageEntry

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StorageUsage:
    """How much of the device storage quota is in use."""

    used: int
    total: int
    percentage: int


class SqlKeyValueStorage:
    """
    JSON documents under string keys, one row per key.

    Each ``set`` replaces the whole document in a single transaction, so
    readers never observe a partially written value.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        quota_bytes: int = DEVICE_STORAGE_QUOTA_BYTES,
    ) -> None:
        self.session_factory = session_factory
        self.quota_bytes = quota_bytes

    def get(self, key: str, default: Any = None) -> Any:
        """
        Read and decode the value stored under ``key``.

        Raises:
            StorageReadError: If the row cannot be read or holds invalid JSON
        """
        try:
            with session_scope(self.session_factory) as db:
                raw = db.execute(
                    select(StorageEntry.value).where(StorageEntry.key == key)
                ).scalar_one_or_none()
        except SQLAlchemyError as err:
            raise StorageReadError(key, str(err)) from err

        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError as err:
            raise StorageReadError(key, f"invalid JSON: {err}") from err

    def set(self, key: str, value: Any) -> None:
        """
        Encode and store ``value`` under ``key``.

        Raises:
            StorageWriteFailureError: If the value is not JSON-serializable,
                exceeds the quota, or the write fails
        """
        try:
            raw = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as err:
            raise StorageWriteFailureError(key, f"value is not JSON-serializable: {err}") from err

        projected = self._used_bytes(exclude_key=key) + len(key) + len(raw)
        if projected > self.quota_bytes:
            raise StorageWriteFailureError(
                key, f"quota exceeded ({projected} of {self.quota_bytes} bytes)"
            )

        try:
            with session_scope(self.session_factory) as db:
                entry = db.get(StorageEntry, key)
                if entry is None:
                    db.add(StorageEntry(key=key, value=raw))
                else:
                    entry.value = raw
        except SQLAlchemyError as err:
            raise StorageWriteFailureError(key, str(err)) from err

        logger.debug("storage_key_written", key=key, size=len(raw))

    def remove(self, key: str) -> None:
        """
        Delete ``key`` if present.

        Raises:
            StorageWriteFailureError: If the delete fails
        """
        try:
            with session_scope(self.session_factory) as db:
                db.execute(delete(StorageEntry).where(StorageEntry.key == key))
        except SQLAlchemyError as err:
            raise StorageWriteFailureError(key, str(err)) from err

    def usage(self) -> StorageUsage:
        """Report used bytes (keys plus values) against the storage quota."""
        used = self._used_bytes()
        return StorageUsage(
            used=used,
            total=self.quota_bytes,
            percentage=round(used / self.quota_bytes * 100),
        )

    def _used_bytes(self, exclude_key: str | None = None) -> int:
        try:
            with session_scope(self.session_factory) as db:
                rows = db.execute(select(StorageEntry.key, StorageEntry.value)).all()
        except SQLAlchemyError as err:
            logger.warning("storage_usage_unavailable", error=str(err))
            return 0
        return sum(len(k) + len(v) for k, v in rows if k != exclude_key)
