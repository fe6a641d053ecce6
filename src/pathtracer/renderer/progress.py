# renderer/progress.py
import logging
import multiprocessing
import threading
import time
from typing import Optional

from tqdm import tqdm

logger = logging.getLogger(__name__)


class ProgressCounter:
    """
    Count of finished pixels, shared by every render worker.

    Backed by a lock-protected ``multiprocessing.Value`` so that threads and
    worker processes can both increment it. The count only ever grows
    between ``start()`` calls.

    Also carries the abort flag: once ``abort()`` is called every worker
    stops before its next pixel.
    """
    def __init__(self, total: int, ctx=None):
        ctx = ctx or multiprocessing.get_context()
        self.total = total
        self._completed = ctx.Value("Q", 0)
        self._aborted = ctx.Event()
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None

    def start(self):
        with self._completed.get_lock():
            self._completed.value = 0
        self._aborted.clear()
        self.start_time = time.monotonic()
        self.end_time = None

    def finish(self):
        self.end_time = time.monotonic()

    def abort(self):
        self._aborted.set()

    def increment(self, n: int = 1):
        with self._completed.get_lock():
            self._completed.value += n

    @property
    def completed(self) -> int:
        return self._completed.value

    @property
    def aborted(self) -> bool:
        return self._aborted.is_set()

    @property
    def fraction(self) -> float:
        return self.completed / self.total if self.total else 1.0

    @property
    def done(self) -> bool:
        return self.completed >= self.total

    @property
    def elapsed(self) -> float:
        """Seconds since start(), frozen once the render finishes."""
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else time.monotonic()
        return end - self.start_time

    def __getstate__(self):
        # Workers only need the shared values; timing stays with the owner.
        return {"total": self.total, "_completed": self._completed, "_aborted": self._aborted,
                "start_time": None, "end_time": None}

    def __setstate__(self, state):
        self.__dict__.update(state)

    def __repr__(self) -> str:
        return f"ProgressCounter({self.completed}/{self.total}, elapsed={self.elapsed:.2f}s)"


class ProgressMonitor(threading.Thread):
    """
    Polls a ProgressCounter at a fixed interval and mirrors it on a tqdm bar.

    Usage:
        with ProgressMonitor(renderer.progress):
            image = renderer.render(camera, world)
    """
    def __init__(self, counter: ProgressCounter, interval: float = 0.1,
                 disable: bool = False, desc: str = "Rendering"):
        super().__init__(name="progress-monitor", daemon=True)
        self.counter = counter
        self.interval = interval
        self._stop_event = threading.Event()
        self._bar = tqdm(total=counter.total, unit="px", unit_scale=True,
                         desc=desc, disable=disable, dynamic_ncols=True)
        self._shown = 0

    def run(self):
        while not self._stop_event.wait(self.interval):
            self._refresh()

    def _refresh(self):
        completed = self.counter.completed
        if completed > self._shown:
            self._bar.update(completed - self._shown)
            self._shown = completed

    def stop(self):
        self._stop_event.set()
        if self.is_alive():
            self.join()
        self._refresh()
        self._bar.close()

    def __enter__(self) -> "ProgressMonitor":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        if exc_type is None:
            logger.debug("Progress monitor saw %d/%d pixels", self._shown, self.counter.total)
