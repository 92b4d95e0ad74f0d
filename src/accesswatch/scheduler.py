"""Background execution: the periodic reconciliation tick and supervised workers."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from logging import getLogger

from accesswatch.common.errors import AccessWatchError

log = getLogger(__name__)

type Cycle = Callable[[], object]
type WorkerTarget = Callable[[threading.Event], None]


class ReconciliationScheduler:
    """Run ``cycle`` every ``interval_seconds``, never two at a time.

    A tick that finds the previous cycle still running is dropped, not queued.
    Failures are logged and contained so one bad cycle never stops the timer.
    """

    def __init__(self, cycle: Cycle, *, interval_seconds: float = 5.0) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.cycle = cycle
        self.interval_seconds = interval_seconds
        self._running = threading.Lock()
        self._stop = threading.Event()
        self._timer: threading.Thread | None = None
        self._executor: ThreadPoolExecutor | None = None

    @property
    def is_running(self) -> bool:
        return self._timer is not None and self._timer.is_alive()

    def tick(self) -> bool:
        """Run one cycle unless another is in flight; return whether it ran."""

        if not self._running.acquire(blocking=False):
            log.debug("Previous reconciliation still running; skipping tick")
            return False
        try:
            self.cycle()
        except AccessWatchError as exc:
            log.error(f"Reconciliation cycle failed: {exc}")
        except Exception:
            log.exception("Unexpected error in reconciliation cycle")
        finally:
            self._running.release()
        return True

    def start(self) -> None:
        if self.is_running:
            return
        self._stop.clear()
        self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="reconcile")
        self._timer = threading.Thread(target=self._run, name="reconcile-timer", daemon=True)
        self._timer.start()
        log.info(f"Reconciliation scheduler started (every {self.interval_seconds}s)")

    def stop(self, *, timeout: float | None = None) -> None:
        """Stop ticking and wait for an in-flight cycle to finish."""

        self._stop.set()
        if self._timer is not None:
            self._timer.join(timeout)
            self._timer = None
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        log.info("Reconciliation scheduler stopped")

    def _run(self) -> None:
        executor = self._executor
        assert executor is not None
        while not self._stop.wait(self.interval_seconds):
            executor.submit(self.tick)


@dataclass(frozen=True, slots=True)
class Backoff:
    base_seconds: float = 1.0
    max_seconds: float = 60.0

    def delay(self, failures: int) -> float:
        if failures <= 0:
            return 0.0
        return min(self.base_seconds * (2 ** (failures - 1)), self.max_seconds)


class SupervisedWorker:
    """Keep ``target`` running in a daemon thread, restarting it after a crash.

    ``target`` receives the stop event and is expected to loop until it is set.
    Returning normally ends the worker. Consecutive crashes back off
    exponentially; a run that outlived the backoff cap resets the count.
    """

    def __init__(self, name: str, target: WorkerTarget, *, backoff: Backoff | None = None) -> None:
        self.name = name
        self.target = target
        self.backoff = backoff or Backoff()
        self.restarts = 0
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self.run, name=self.name, daemon=True)
        self._thread.start()

    def stop(self, *, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def run(self) -> None:
        failures = 0
        while not self._stop.is_set():
            started = time.monotonic()
            try:
                self.target(self._stop)
            except Exception:
                if time.monotonic() - started > self.backoff.max_seconds:
                    failures = 0
                failures += 1
                delay = self.backoff.delay(failures)
                log.exception(f"Worker {self.name} crashed; restarting in {delay:.1f}s")
                self.restarts += 1
                self._stop.wait(delay)
            else:
                log.debug(f"Worker {self.name} finished")
                return
