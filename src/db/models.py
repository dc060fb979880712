"""SQLAlchemy database models for EcoBrowse."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StorageEntry(Base):
    """
    A single named persistent entry.

    The score history lives in one row whose `value` is a JSON array of
    `{timestamp, websiteUrl, carbonScore}` objects. The payload is stored as
    text and validated when read, so a corrupted value never breaks the table.
    """

    __tablename__ = "storage_entries"

    # Well-known name of the entry, e.g. "ecoBrowseReports"
    key: Mapped[str] = mapped_column(String(255), primary_key=True)

    # Raw JSON payload
    value: Mapped[str] = mapped_column(Text, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )
