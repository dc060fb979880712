"""Repository pattern for database operations."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import StorageEntry


class StorageEntryRepository:
    """Handles reads and writes of named storage entries."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, key: str) -> str | None:
        """Return the raw payload stored under `key`, if any."""
        result = await self.session.execute(
            select(StorageEntry.value).where(StorageEntry.key == key)
        )
        return result.scalar_one_or_none()

    async def put(self, key: str, value: str) -> None:
        """Insert or replace the payload stored under `key`."""
        entry = await self.session.get(StorageEntry, key)
        if entry is None:
            self.session.add(StorageEntry(key=key, value=value))
        else:
            entry.value = value
        await self.session.flush()

    async def delete(self, key: str) -> None:
        """Remove the entry stored under `key`. Missing keys are ignored."""
        await self.session.execute(delete(StorageEntry).where(StorageEntry.key == key))
        await self.session.flush()
