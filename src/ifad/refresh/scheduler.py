"""Call a function periodically on a background thread.

Lifecycle of a PeriodicCaller:

    IDLE -> ARMED (waiting for start_date) -> RUNNING -> EXPIRED
                                                      \\-> STOPPED (stop())

The first call happens at the transition to RUNNING, then once per
interval. Calls never overlap: they run one at a time on the caller's
thread, and ticks that pass while a call is still running are skipped.
"""

import threading
import time
from collections.abc import Callable
from datetime import datetime, timedelta
from enum import Enum

import structlog

logger = structlog.get_logger()

DEFAULT_INTERVAL = timedelta(hours=24)


class SchedulerState(str, Enum):
    IDLE = "idle"
    ARMED = "armed"
    RUNNING = "running"
    EXPIRED = "expired"
    STOPPED = "stopped"


def next_midnight(now: datetime | None = None) -> datetime:
    """The local midnight that starts the day after ``now``."""
    now = now or datetime.now()
    tomorrow = now + timedelta(days=1)
    return tomorrow.replace(hour=0, minute=0, second=0, microsecond=0)


class PeriodicCaller:
    """Runs ``fn`` every ``interval`` starting at ``start_date``.

    Args:
        fn: Zero-argument callable. Exceptions it raises are logged and
            do not end the schedule.
        interval: Time between calls
        start_date: When the first call happens; now or past starts
            immediately. Defaults to now. Timezone-aware values are
            converted to local time.
        lifetime: Stop scheduling calls this long after the first call.
            An in-flight call is never interrupted.
    """

    def __init__(
        self,
        fn: Callable[[], object],
        interval: timedelta = DEFAULT_INTERVAL,
        start_date: datetime | None = None,
        lifetime: timedelta | None = None,
    ):
        if interval.total_seconds() <= 0:
            raise ValueError(f"interval must be positive, got {interval}")

        self.fn = fn
        self.interval = interval
        if start_date is not None and start_date.tzinfo is not None:
            # Compared against naive local time on the worker thread
            start_date = start_date.astimezone().replace(tzinfo=None)
        self.start_date = start_date or datetime.now()
        self.lifetime = lifetime
        self.call_count = 0
        self.state = SchedulerState.IDLE

        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> "PeriodicCaller":
        """Arm the schedule and start the background thread."""
        if self._thread is not None:
            raise RuntimeError("PeriodicCaller already started")

        self.state = SchedulerState.ARMED
        self._thread = threading.Thread(
            target=self._run,
            name="ifad-periodic-caller",
            daemon=True,
        )
        self._thread.start()
        return self

    def stop(self) -> None:
        """Cancel future calls. A call in progress runs to completion."""
        self._stop_event.set()
        if self.state in (SchedulerState.IDLE, SchedulerState.ARMED, SchedulerState.RUNNING):
            self.state = SchedulerState.STOPPED

    def join(self, timeout: float | None = None) -> None:
        """Wait for the background thread to finish."""
        if self._thread is not None:
            self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _call(self) -> None:
        self.call_count += 1
        try:
            self.fn()
        except Exception:
            logger.exception("periodic_call_failed", call_number=self.call_count)

    def _run(self) -> None:
        delay = (self.start_date - datetime.now()).total_seconds()
        if delay > 0:
            logger.info("periodic_caller_armed", start_date=self.start_date.isoformat(), delay_seconds=round(delay, 3))
            if self._stop_event.wait(delay):
                return

        if self._stop_event.is_set():
            return

        self.state = SchedulerState.RUNNING
        interval = self.interval.total_seconds()
        started = time.monotonic()
        expires_at = None if self.lifetime is None else started + self.lifetime.total_seconds()
        next_fire = started

        logger.info(
            "periodic_caller_running",
            interval_seconds=interval,
            lifetime_seconds=None if self.lifetime is None else self.lifetime.total_seconds(),
        )

        while True:
            self._call()

            next_fire += interval
            now = time.monotonic()
            if next_fire <= now:
                missed = int((now - next_fire) // interval) + 1
                next_fire += missed * interval
                logger.warning("periodic_tick_skipped", missed_ticks=missed)

            if expires_at is not None and next_fire >= expires_at:
                if not self._stop_event.wait(max(0.0, expires_at - time.monotonic())):
                    self.state = SchedulerState.EXPIRED
                    logger.info("periodic_caller_expired", call_count=self.call_count)
                return

            if self._stop_event.wait(max(0.0, next_fire - time.monotonic())):
                return


def start_periodically_calling(
    fn: Callable[[], object],
    interval: timedelta = DEFAULT_INTERVAL,
    start_date: datetime | None = None,
    lifetime: timedelta | None = None,
    align_to_midnight: bool = False,
) -> PeriodicCaller:
    """Start calling ``fn`` periodically and return the running caller.

    When ``start_date`` is not given it defaults to the next local midnight
    if ``align_to_midnight`` is set, otherwise to now.
    """
    if start_date is None and align_to_midnight:
        start_date = next_midnight()
    return PeriodicCaller(fn, interval=interval, start_date=start_date, lifetime=lifetime).start()
