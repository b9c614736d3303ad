"""Timer scheduling with cancellable tasks.

Two implementations share one interface:

* ``ManualScheduler`` runs tasks on virtual time when ``advance`` is called.
  Tests and deterministic runs use it to step through countdowns without
  waiting.
* ``ThreadingScheduler`` runs tasks in real time on a single dispatcher
  thread, so callbacks never run concurrently with each other.
"""

import heapq
import itertools
import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple

from .clock import Clock, ManualClock, SystemClock

logger = logging.getLogger(__name__)


class ScheduledTask:
    """Cancellation token for a scheduled callback."""

    def __init__(self, callback: Callable[[], None], due: float, interval: Optional[float] = None):
        self.callback = callback
        self.due = due
        self.interval = interval
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def periodic(self) -> bool:
        return self.interval is not None

    def cancel(self) -> None:
        self._cancelled = True

    def __repr__(self) -> str:
        name = getattr(self.callback, '__qualname__', repr(self.callback))
        return f"ScheduledTask({name}, due={self.due:.3f}, interval={self.interval}, cancelled={self._cancelled})"


class Scheduler(ABC):
    """Registers one-shot and periodic callbacks."""

    def __init__(self, clock: Clock):
        self.clock = clock
        self._sequence = itertools.count()
        self._heap: List[Tuple[float, int, ScheduledTask]] = []

    @abstractmethod
    def _time(self) -> float:
        """Current time in the scheduler's own timebase (seconds)."""
        pass

    def _push(self, task: ScheduledTask) -> None:
        heapq.heappush(self._heap, (task.due, next(self._sequence), task))

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        """Run callback once after delay seconds."""
        if delay < 0:
            raise ValueError(f"delay must not be negative, got {delay}")
        task = ScheduledTask(callback, self._time() + delay)
        self._add(task)
        return task

    def call_every(self, interval: float, callback: Callable[[], None]) -> ScheduledTask:
        """Run callback every interval seconds, first run one interval from now."""
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        task = ScheduledTask(callback, self._time() + interval, interval)
        self._add(task)
        return task

    def pending_count(self) -> int:
        """Number of registered tasks that have not been cancelled."""
        return sum(1 for _, _, task in self._heap if not task.cancelled)

    def _add(self, task: ScheduledTask) -> None:
        self._push(task)

    @staticmethod
    def _run(task: ScheduledTask) -> None:
        try:
            task.callback()
        except Exception as e:
            logger.error(f"Unhandled exception in scheduled task {task!r}: {e}", exc_info=True)


class ManualScheduler(Scheduler):
    """Scheduler driven by explicit calls to ``advance``."""

    def __init__(self, clock: Optional[ManualClock] = None):
        super().__init__(clock or ManualClock())
        self._elapsed = 0.0

    def _time(self) -> float:
        return self._elapsed

    def advance(self, seconds: float) -> int:
        """Move virtual time forward, running every task that falls due.

        The clock is moved to each task's due time before the task runs.

        Returns:
            Number of callbacks run
        """
        if seconds < 0:
            raise ValueError("cannot advance backwards")
        target = self._elapsed + seconds
        ran = 0

        while self._heap and self._heap[0][0] <= target:
            due, _, task = heapq.heappop(self._heap)
            if task.cancelled:
                continue
            self._move_to(due)
            if task.periodic:
                task.due = due + task.interval
                self._push(task)
            self._run(task)
            ran += 1

        self._move_to(target)
        return ran

    def _move_to(self, point: float) -> None:
        delta = point - self._elapsed
        if delta > 0:
            self.clock.advance(delta)
            self._elapsed = point


class ThreadingScheduler(Scheduler):
    """Real-time scheduler with a single dispatcher thread."""

    def __init__(self, clock: Optional[Clock] = None, name: str = "scheduler"):
        super().__init__(clock or SystemClock())
        self.name = name
        self._condition = threading.Condition()
        self._shutdown = False
        self._thread: Optional[threading.Thread] = None

    def _time(self) -> float:
        return time.monotonic()

    def _add(self, task: ScheduledTask) -> None:
        with self._condition:
            self._push(task)
            self._condition.notify()

    def start(self) -> None:
        """Start the dispatcher thread."""
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._dispatch_loop, name=f"{self.name}_dispatcher")
        self._thread.daemon = True
        self._thread.start()
        logger.info(f"Started {self.name} dispatcher thread")

    def _next_task(self) -> Optional[ScheduledTask]:
        """Block until a task is due or shutdown is requested."""
        with self._condition:
            while not self._shutdown:
                while self._heap and self._heap[0][2].cancelled:
                    heapq.heappop(self._heap)
                if not self._heap:
                    self._condition.wait()
                    continue
                due, _, task = self._heap[0]
                delay = due - self._time()
                if delay > 0:
                    self._condition.wait(delay)
                    continue
                heapq.heappop(self._heap)
                if task.periodic:
                    task.due = due + task.interval
                    self._push(task)
                return task
            return None

    def _dispatch_loop(self) -> None:
        logger.debug(f"Dispatcher thread {threading.current_thread().name} starting")
        while True:
            task = self._next_task()
            if task is None:
                break
            # Cancelled between pop and run
            if task.cancelled:
                continue
            self._run(task)
        logger.debug(f"Dispatcher thread {threading.current_thread().name} exiting")

    def shutdown(self, timeout: float = 5.0) -> bool:
        """Stop the dispatcher thread. Pending tasks are dropped.

        Returns:
            True if the thread terminated within timeout
        """
        logger.info(f"Shutting down {self.name} scheduler...")
        with self._condition:
            self._shutdown = True
            self._heap.clear()
            self._condition.notify_all()

        if self._thread is None:
            return True

        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning(f"Dispatcher thread {self._thread.name} did not terminate cleanly.")
            return False

        logger.info(f"{self.name} scheduler shutdown complete.")
        return True
