"""The published dataset and the refresh cycle that replaces it."""

import threading
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import structlog

from ifad.config.schema import EvidenceCodes
from ifad.ingest.parser import DEFAULT_EVIDENCE_CODES
from ifad.ingest.snapshot import RawText, Snapshot, ingest_data
from ifad.refresh.scheduler import (
    DEFAULT_INTERVAL,
    PeriodicCaller,
    start_periodically_calling,
)

logger = structlog.get_logger()


class DatasetUnavailableError(RuntimeError):
    """Raised when no snapshot has been published yet."""


class DatasetStore:
    """
    Holds the currently published Snapshot.

    A refresh cycle fetches raw text, ingests it into a brand-new Snapshot,
    and only then swaps the published reference. Readers calling
    get_dataset() therefore see either the old or the new dataset in full,
    never a mix, and a query keeps the one reference it took for its whole
    duration.
    """

    def __init__(
        self,
        fetch_source: Callable[[], RawText],
        evidence_codes: EvidenceCodes = DEFAULT_EVIDENCE_CODES,
    ):
        """
        Args:
            fetch_source: Collaborator returning fresh gene and annotation text
            evidence_codes: Evidence-code tables used during ingest
        """
        self.fetch_source = fetch_source
        self.evidence_codes = evidence_codes
        self.published_at: datetime | None = None

        self._snapshot: Snapshot | None = None
        self._cycle_lock = threading.Lock()
        self._publish_lock = threading.Lock()

    def get_dataset(self) -> Snapshot:
        """Return the latest fully built snapshot.

        Raises:
            DatasetUnavailableError: If nothing has been published yet
        """
        snapshot = self._snapshot
        if snapshot is None:
            raise DatasetUnavailableError("No dataset has been loaded yet")
        return snapshot

    def _build(self) -> Snapshot:
        raw = self.fetch_source()
        return ingest_data(raw.genes_text, raw.annotations_text, self.evidence_codes)

    def _publish(self, snapshot: Snapshot) -> None:
        with self._publish_lock:
            self._snapshot = snapshot
            self.published_at = datetime.now(timezone.utc)
        logger.info(
            "dataset_published",
            genes=len(snapshot.genes.index),
            annotations=len(snapshot.annotations.records),
        )

    def load(self) -> Snapshot:
        """Fetch, ingest and publish, propagating any failure.

        Meant for startup, where having no dataset to serve is fatal.
        """
        with self._cycle_lock:
            snapshot = self._build()
            self._publish(snapshot)
        return snapshot

    def refresh(self) -> bool:
        """Run one refresh cycle.

        Failures are logged and leave the previous snapshot published. A
        cycle requested while another is still running is skipped.

        Returns:
            True if a new snapshot was published
        """
        if not self._cycle_lock.acquire(blocking=False):
            logger.warning("refresh_skipped", reason="previous cycle still running")
            return False

        try:
            logger.info("refresh_start")
            try:
                snapshot = self._build()
            except Exception as e:
                logger.error(
                    "refresh_failed",
                    error=str(e),
                    error_type=type(e).__name__,
                    keeping_previous=self._snapshot is not None,
                )
                return False
            self._publish(snapshot)
            return True
        finally:
            self._cycle_lock.release()

    def start_periodic_refresh(
        self,
        interval: timedelta = DEFAULT_INTERVAL,
        start_date: datetime | None = None,
        lifetime: timedelta | None = None,
        align_to_midnight: bool = False,
    ) -> PeriodicCaller:
        """Schedule refresh() on a background thread."""
        return start_periodically_calling(
            self.refresh,
            interval=interval,
            start_date=start_date,
            lifetime=lifetime,
            align_to_midnight=align_to_midnight,
        )
