"""Recurring pipeline trigger on a background thread."""

import logging
import threading
import time

from config import PIPELINE_INTERVAL_MINUTES, PIPELINE_START_DELAY_SECONDS
from pipeline.orchestrator import PipelineRunner, get_runner

logger = logging.getLogger(__name__)


class PipelineScheduler:
    """Fires a run shortly after start, then on a fixed interval.

    Ticks are on a fixed grid, independent of run duration. Each tick runs
    on its own thread, so a tick that lands during a long run hits the
    runner's single-flight guard and does nothing.
    """

    def __init__(self, runner: PipelineRunner, start_delay: float = PIPELINE_START_DELAY_SECONDS) -> None:
        self.runner = runner
        self.start_delay = start_delay
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _tick(self) -> None:
        try:
            self.runner.run()
        except Exception:
            logger.exception("Scheduled pipeline run failed")

    def _loop(self, interval: float, stop: threading.Event) -> None:
        next_tick = time.monotonic() + self.start_delay
        while not stop.wait(max(0.0, next_tick - time.monotonic())):
            threading.Thread(target=self._tick, name="pipeline-run", daemon=True).start()
            next_tick += interval

    def start(self, interval_minutes: float = PIPELINE_INTERVAL_MINUTES) -> None:
        """Start ticking. Calling start again replaces the previous timer."""
        if interval_minutes <= 0:
            raise ValueError("interval_minutes must be positive")
        with self._lock:
            self._halt()
            self._stop = threading.Event()
            self._thread = threading.Thread(
                target=self._loop,
                args=(interval_minutes * 60, self._stop),
                name="pipeline-scheduler",
                daemon=True,
            )
            self._thread.start()
        logger.info("Auto-refresh scheduled every %s minutes", interval_minutes)

    def _halt(self) -> bool:
        if self._thread is None:
            return False
        self._stop.set()
        self._thread.join(timeout=5)
        self._thread = None
        return True

    def stop(self) -> None:
        """Stop ticking. An in-flight run is left to finish."""
        with self._lock:
            if self._halt():
                logger.info("Auto-refresh stopped")


_scheduler: PipelineScheduler | None = None
_scheduler_lock = threading.Lock()


def start_scheduler(
    interval_minutes: float = PIPELINE_INTERVAL_MINUTES,
    start_delay: float = PIPELINE_START_DELAY_SECONDS,
) -> PipelineScheduler:
    """Start the process-wide scheduler on the shared runner, replacing any running timer."""
    global _scheduler
    with _scheduler_lock:
        if _scheduler is None:
            _scheduler = PipelineScheduler(get_runner(), start_delay)
        else:
            _scheduler.runner = get_runner()
            _scheduler.start_delay = start_delay
        scheduler = _scheduler
    scheduler.start(interval_minutes)
    return scheduler


def stop_scheduler() -> None:
    if _scheduler is not None:
        _scheduler.stop()
