"""Periodic re-download and re-ingest of the annotation source."""

from ifad.refresh.dataset import DatasetStore, DatasetUnavailableError
from ifad.refresh.fetch import SourceFetcher
from ifad.refresh.scheduler import (
    PeriodicCaller,
    SchedulerState,
    next_midnight,
    start_periodically_calling,
)

__all__ = [
    "DatasetStore",
    "DatasetUnavailableError",
    "SourceFetcher",
    "PeriodicCaller",
    "SchedulerState",
    "next_midnight",
    "start_periodically_calling",
]
