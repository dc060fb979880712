"""A live, self-refreshing view over the score history."""

import logging
from datetime import datetime

from exceptions import StoreError
from reports.aggregator import PeriodSummary, aggregate
from reports.exporter import ReportDocument, export_report
from reports.notifier import ChangeEvent, ChangeKind, ChangeNotifier, Subscription
from reports.periods import Timeframe
from reports.records import ScoreRecord
from reports.store import ScoreRecordStore

logger = logging.getLogger(__name__)


class ReportView:
    """
    Keeps an in-memory copy of the history consistent with the store.

    The view subscribes to change events and also loads explicitly when
    opened, so events published before it subscribed are not missed. When a
    load fails, the last good records stay in place and `last_error` is set.
    """

    def __init__(
        self,
        store: ScoreRecordStore,
        notifier: ChangeNotifier,
        timeframe: Timeframe = Timeframe.WEEKLY,
    ):
        self.store = store
        self.notifier = notifier
        self.timeframe = Timeframe(timeframe)
        self.last_error: StoreError | None = None
        self._records: list[ScoreRecord] = []
        self._subscription: Subscription | None = None

    @property
    def records(self) -> list[ScoreRecord]:
        return list(self._records)

    @property
    def is_open(self) -> bool:
        return self._subscription is not None

    async def open(self) -> None:
        if self._subscription is None:
            self._subscription = self.notifier.subscribe(self._on_change)
        await self.refresh()

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    async def refresh(self) -> list[ScoreRecord]:
        """Reload from the store, keeping the current records if that fails."""
        result = await self.store.load()
        if result.ok:
            self._records = result.records
            self.last_error = None
        else:
            logger.warning(f"Keeping last good report data: {result.error}")
            self.last_error = result.error
        return self.records

    async def _on_change(self, event: ChangeEvent) -> None:
        if event.key != self.store.key:
            return

        if event.kind == ChangeKind.CLEARED:
            logger.debug("History cleared, emptying view")
            self._records = []
            self.last_error = None
        elif event.snapshot is not None:
            self._records = list(event.snapshot)
            self.last_error = None
        else:
            await self.refresh()

    def set_timeframe(self, timeframe: Timeframe) -> None:
        self.timeframe = Timeframe(timeframe)

    def summaries(self, timeframe: Timeframe | None = None) -> list[PeriodSummary]:
        return aggregate(self._records, timeframe or self.timeframe)

    async def clear_all(self) -> None:
        """
        Remove the whole history.

        Raises:
            StoreError: if the store could not be cleared; the view is unchanged
        """
        await self.store.clear()
        self._records = []

    def export(
        self,
        timeframe: Timeframe | None = None,
        generated_at: datetime | None = None,
    ) -> ReportDocument:
        timeframe = Timeframe(timeframe or self.timeframe)
        return export_report(self.summaries(timeframe), timeframe, generated_at)
