import threading
import time
from typing import Callable, Optional


def start_thread(target, *args):
    thread = threading.Thread(target=target, args=args, daemon=True)
    thread.start()
    return thread


class _Run:
    """Cancel flag for one countdown run."""

    def __init__(self, seconds: int):
        self.seconds = seconds
        self.cancelled = False


class Countdown:
    """Single repeating timer that ticks down to zero.

    - Starting always cancels the run in progress first, so at most one
      run ever ticks
    - Ticks go ``seconds - 1`` down to ``0``; the zero tick is emitted after
      the run has released itself
    - ``stop`` is idempotent
    """

    def __init__(
        self,
        seconds: int = 300,
        interval: float = 1.0,
        start_background_task: Callable = start_thread,
        sleep: Callable[[float], None] = time.sleep,
        logger=None,
    ):
        self.seconds = seconds
        self.interval = interval
        self._start_background_task = start_background_task
        self._sleep = sleep
        self._logger = logger
        self._run: Optional[_Run] = None
        # Held while checking for cancellation and ticking, so no tick follows a stop
        self._lock = threading.RLock()

    @property
    def active(self) -> bool:
        return self._run is not None

    def start(self, on_tick: Callable[[int], None]) -> None:
        run = _Run(self.seconds)
        with self._lock:
            self.stop()
            self._run = run
        self._log(f"[countdown-start] seconds={self.seconds} interval={self.interval}s")
        self._start_background_task(self._worker, run, on_tick)

    def stop(self) -> None:
        with self._lock:
            run, self._run = self._run, None
            if run is not None:
                run.cancelled = True
        if run is not None:
            self._log("[countdown-stop]")

    def _release(self, run: _Run) -> None:
        if self._run is run:
            self._run = None
            self._log("[countdown-done]")

    def _worker(self, run: _Run, on_tick: Callable[[int], None]) -> None:
        remaining = run.seconds
        while not run.cancelled:
            self._sleep(self.interval)
            with self._lock:
                if run.cancelled:
                    return
                remaining -= 1
                if remaining <= 0:
                    self._release(run)
                    on_tick(0)
                    return
                on_tick(remaining)

    def _log(self, message: str) -> None:
        if self._logger is not None:
            self._logger.info(message)
