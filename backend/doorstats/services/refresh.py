"""Rebuilding and publishing launch statistics.

A refresh reads every matching log file into a brand-new snapshot off to the
side and only then swaps it in, so readers always see the complete result of
one finished refresh.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple

from doorstats.config import Settings
from doorstats.models import LibraryGame, RefreshInfo, StatsSnapshot
from doorstats.services.aggregator import StatsAggregator
from doorstats.services.log_scanner import event_period, parse_timestamp, scan_log_file
from doorstats.services.metadata import MetadataTable, load_metadata

logger = logging.getLogger(__name__)


class RefreshError(Exception):
    """The log directory could not be enumerated."""


@dataclass(frozen=True)
class PublishedStats:
    snapshot: StatsSnapshot = field(default_factory=StatsSnapshot)
    library: Tuple[LibraryGame, ...] = ()
    info: Optional[RefreshInfo] = None


class SnapshotStore:
    """Holds the currently published stats.

    The lock only guards the reference swap; a published snapshot is never
    mutated, so readers can keep using the one they fetched.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._current = PublishedStats()

    def read(self) -> PublishedStats:
        with self._lock:
            return self._current

    def publish(self, published: PublishedStats) -> None:
        with self._lock:
            self._current = published


def list_log_files(log_dir: str, pattern: str) -> List[Path]:
    directory = Path(log_dir)
    try:
        if not directory.is_dir():
            raise RefreshError(f"Log directory {log_dir} does not exist or is not a directory")
        return sorted(path for path in directory.glob(pattern) if path.is_file())
    except OSError as e:
        raise RefreshError(f"Error reading log files in {log_dir}: {e}") from e


def build_stats(settings: Settings) -> PublishedStats:
    """Scan the log directory into a new, unpublished set of stats."""
    files = list_log_files(settings.log_dir, settings.log_glob)

    if settings.resolve_metadata:
        metadata = load_metadata(settings.xtrn_config, settings.sysop_category)
        aggregator = StatsAggregator(settings.sysop_category)
    else:
        metadata = MetadataTable()
        aggregator = StatsAggregator()

    for path in files:
        for line, game_name in scan_log_file(path):
            if game_name == settings.excluded_game:
                continue

            timestamp = parse_timestamp(line)
            if timestamp is None:
                continue
            year, month = event_period(timestamp)

            details = metadata.resolve(game_name)
            aggregator.record_launch(year, month, game_name, details.door_code, details.category)

    return PublishedStats(
        snapshot=aggregator.snapshot,
        library=tuple(metadata.library),
        info=RefreshInfo(
            refreshed_at=datetime.now(timezone.utc),
            files_scanned=len(files),
            events_counted=aggregator.events_counted
        )
    )


class RefreshScheduler:
    """Runs a refresh at startup and then once per interval.

    ``trigger()`` wakes the loop early, which lets shutdown paths and tests
    force a refresh instead of waiting out the interval.
    """

    def __init__(self, store: SnapshotStore, settings: Settings):
        self.store = store
        self.settings = settings
        self._refresh_lock = threading.Lock()
        self._wakeup = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    def refresh_now(self) -> bool:
        """Rebuild and publish synchronously. Returns False if aborted."""
        with self._refresh_lock:
            logger.info(f"Refreshing data from {self.settings.log_dir}...")
            try:
                published = build_stats(self.settings)
            except RefreshError as e:
                logger.error(f"Refresh aborted, keeping previous stats: {e}")
                return False

            self.store.publish(published)
            logger.info(
                f"Data refresh complete: {published.info.files_scanned} files, "
                f"{published.info.events_counted} launches"
            )
            return True

    async def start(self) -> None:
        await asyncio.to_thread(self.refresh_now)
        self._task = asyncio.create_task(self._run())

    def trigger(self) -> None:
        self._wakeup.set()

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self) -> None:
        interval = self.settings.refresh_interval_seconds
        while True:
            try:
                await asyncio.wait_for(self._wakeup.wait(), timeout=interval)
            except asyncio.TimeoutError:
                pass
            self._wakeup.clear()

            try:
                await asyncio.to_thread(self.refresh_now)
            except Exception as e:
                logger.exception(f"Scheduled refresh failed: {type(e).__name__}: {e}")
