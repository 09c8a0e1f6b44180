"""Database models."""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from vocabdeck.database import Base


class StorageEntry(Base):
    """One key of the device persistence slot, holding a JSON document."""

    __tablename__ = "device_storage"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation of StorageEntry."""
        return f"<StorageEntry(key='{self.key}', size={len(self.value)})>"
