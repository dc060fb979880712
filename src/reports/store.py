"""Persistent score history."""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from db.repositories import StorageEntryRepository
from exceptions import StoreError
from reports.notifier import ChangeEvent, ChangeKind, ChangeNotifier
from reports.records import (
    MalformedPayloadError,
    ScoreRecord,
    decode_records,
    encode_records,
    sort_newest_first,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadResult:
    """Records read from the store, plus the error that emptied them, if any."""

    records: list[ScoreRecord]
    error: StoreError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ScoreRecordStore:
    """
    Append-only history of score records kept under one storage key.

    Every successful `append` or `clear` publishes exactly one event on the
    notifier. Writers from different processes are not coordinated: each
    write replaces the whole collection and the last one wins.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        notifier: ChangeNotifier,
        key: str,
    ):
        self.session_factory = session_factory
        self.notifier = notifier
        self.key = key

    async def load(self) -> LoadResult:
        """
        Read the full history, newest first.

        Never raises: a missing entry is an empty history, and an unreadable
        or malformed one is an empty history with `error` set.
        """
        try:
            async with self.session_factory() as session:
                payload = await StorageEntryRepository(session).get(self.key)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read {self.key}: {e}")
            return LoadResult([], StoreError(f"Could not read report data: {e}"))

        if payload is None:
            return LoadResult([])

        try:
            records = decode_records(payload)
        except MalformedPayloadError as e:
            logger.error(f"Stored data under {self.key} is malformed, treating as empty: {e}")
            return LoadResult([], StoreError(f"Stored report data is malformed: {e}"))

        return LoadResult(sort_newest_first(records))

    async def append(self, record: ScoreRecord) -> None:
        """
        Add one record and write the full history back.

        Raises:
            StoreError: if the history could not be written
        """
        try:
            async with self.session_factory() as session:
                repo = StorageEntryRepository(session)
                records = self._decode_for_write(await repo.get(self.key))
                records.append(record)
                await repo.put(self.key, encode_records(records))
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to save record for {record.website_url}: {e}")
            raise StoreError(f"Could not save report data: {e}") from e

        logger.info(f"Stored score {record.score:.3f} for {record.website_url}")
        await self._publish(
            ChangeEvent(self.key, ChangeKind.UPDATED, tuple(sort_newest_first(records)))
        )

    async def clear(self) -> None:
        """
        Remove every record.

        Raises:
            StoreError: if the history could not be removed
        """
        try:
            async with self.session_factory() as session:
                await StorageEntryRepository(session).delete(self.key)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to clear {self.key}: {e}")
            raise StoreError(f"Could not remove report data: {e}") from e

        logger.info(f"Cleared all records under {self.key}")
        await self._publish(ChangeEvent(self.key, ChangeKind.CLEARED))

    def _decode_for_write(self, payload: str | None) -> list[ScoreRecord]:
        if payload is None:
            return []
        try:
            return decode_records(payload)
        except MalformedPayloadError as e:
            # The corrupt payload is replaced by this write
            logger.warning(f"Overwriting malformed data under {self.key}: {e}")
            return []

    async def _publish(self, event: ChangeEvent) -> None:
        # The write has already committed at this point
        try:
            await self.notifier.publish(event)
        except Exception as e:
            logger.exception(f"Failed to publish {event.kind.value} for {self.key}: {e}")
