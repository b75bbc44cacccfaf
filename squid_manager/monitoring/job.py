"""
Periodic job driver for the squid monitor.

A single daemon thread runs the job on a fixed-rate schedule. Runs are
single-flight: `run_once` takes a non-blocking lock, so a trigger that arrives
while a run is still in flight is skipped and logged instead of overlapping.
When a run overruns its period the missed ticks are dropped, not queued.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

LOGGER = logging.getLogger("monitoring.job")


class PeriodicJob:
    def __init__(
        self,
        *,
        name: str,
        func: Callable[[], None],
        interval_seconds: float,
        startup_delay_seconds: float = 0.0,
        on_error: Callable[[BaseException], None] | None = None,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than 0.")
        self.name = name
        self.func = func
        self.interval_seconds = interval_seconds
        self.startup_delay_seconds = startup_delay_seconds
        self.on_error = on_error
        self._monotonic = monotonic
        self._run_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._run_lock.locked()

    @property
    def is_started(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_started:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name=f"job-{self.name}", daemon=True)
        self._thread.start()
        LOGGER.info("started job=%s interval=%ss", self.name, self.interval_seconds)

    def stop(self, timeout: float | None = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        LOGGER.info("stopped job=%s", self.name)

    def run_once(self) -> bool:
        """Run the job unless a run is already in flight; return whether it ran."""

        if not self._run_lock.acquire(blocking=False):
            LOGGER.warning("job=%s still running; skipping overlapping run", self.name)
            return False
        try:
            self.func()
        except Exception as exc:
            if self.on_error is not None:
                self.on_error(exc)
            else:
                LOGGER.exception("job=%s failed", self.name)
        finally:
            self._run_lock.release()
        return True

    def _loop(self) -> None:
        if self.startup_delay_seconds > 0 and self._stop_event.wait(self.startup_delay_seconds):
            return

        next_run = self._monotonic()
        while not self._stop_event.is_set():
            self.run_once()
            next_run += self.interval_seconds
            now = self._monotonic()
            if now > next_run:
                skipped = int((now - next_run) // self.interval_seconds) + 1
                LOGGER.warning("job=%s overran its period; dropping %s tick(s)", self.name, skipped)
                next_run += skipped * self.interval_seconds
            if self._stop_event.wait(next_run - now):
                return
