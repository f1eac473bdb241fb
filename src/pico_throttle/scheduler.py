"""Bounded-concurrency task scheduler.

``TaskScheduler`` admits at most ``capacity`` asynchronous tasks at a time
and queues the rest in submission order, preventing resource exhaustion
(e.g. ``EMFILE: too many open files``) when many file scans or parses are
triggered at once.  ``ParseScheduler`` is the container-managed instance
sized from ``MAX_CONCURRENT_PARSES``.
"""

import asyncio
import threading
from collections import deque
from dataclasses import asdict, dataclass
from functools import partial
from typing import Any, Awaitable, Callable, Deque, Dict, TypeVar

from pico_ioc import cleanup, component

from .config import load_settings
from .exceptions import InvalidConfiguration
from .logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class SchedulerStatus:
    """Point-in-time snapshot of a ``TaskScheduler``.

    Attributes:
        running: Tasks currently holding a slot.
        queued: Tasks waiting for a slot.
        max_concurrent: The scheduler's fixed capacity.
        total: ``running + queued``.
    """

    running: int
    queued: int
    max_concurrent: int
    total: int

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)

    def __str__(self) -> str:
        return f"{self.running} running, {self.queued} queued (max {self.max_concurrent})"


class _PendingTask:
    __slots__ = ("task", "future")

    def __init__(self, task: Callable[[], Awaitable[Any]], future: asyncio.Future):
        self.task = task
        self.future = future


class TaskScheduler:
    """Runs asynchronous tasks with a fixed upper bound on concurrency.

    Tasks submitted while a slot is free start immediately; the rest wait
    in a FIFO queue.  When a task finishes its slot is handed to the head
    of the queue, which is started on the next event loop iteration rather
    than inline, so long chains of completions never deepen the stack.

    Task failures are delivered to the task's own handle and never affect
    other tasks.

    Example:
        >>> scheduler = TaskScheduler(20)
        >>> handle = scheduler.submit(lambda: parse_file(path))
        >>> tree = await handle
    """

    def __init__(self, capacity: int, name: str = "default"):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
            raise InvalidConfiguration("capacity", capacity)
        self.name = name
        self._capacity = capacity
        self._running = 0
        self._queue: Deque[_PendingTask] = deque()
        self._lock = threading.Lock()
        logger.info("Scheduler '%s' initialized with max %d concurrent tasks", name, capacity)

    @property
    def capacity(self) -> int:
        """The maximum number of tasks allowed to run at once."""
        return self._capacity

    def submit(self, task: Callable[[], Awaitable[T]]) -> "asyncio.Future[T]":
        """Submit a task for execution.

        Must be called from a running event loop.  Never blocks: the task
        either starts now or is queued.

        Args:
            task: Zero-argument callable returning an awaitable, usually an
                ``async def`` function.

        Returns:
            A future settled with the task's result or exception.
        """
        loop = asyncio.get_running_loop()
        pending = _PendingTask(task, loop.create_future())

        with self._lock:
            admitted = self._running < self._capacity
            if admitted:
                self._running += 1
            else:
                self._queue.append(pending)
                queued = len(self._queue)

        if admitted:
            self._launch(pending)
        else:
            logger.debug("Scheduler '%s' at capacity, queued task (%d waiting)", self.name, queued)
        return pending.future

    async def run(self, task: Callable[[], Awaitable[T]]) -> T:
        """Submit *task* and wait for its result."""
        return await self.submit(task)

    def get_status(self) -> SchedulerStatus:
        """Return a consistent snapshot of running and queued counts."""
        with self._lock:
            running = self._running
            queued = len(self._queue)
        return SchedulerStatus(running=running, queued=queued, max_concurrent=self._capacity, total=running + queued)

    def _launch(self, pending: _PendingTask) -> None:
        try:
            inner = asyncio.ensure_future(pending.task())
        except asyncio.CancelledError:
            pending.future.cancel()
            self._release()
            return
        except Exception as exc:
            if not pending.future.done():
                pending.future.set_exception(exc)
            self._release()
            return
        except BaseException:
            pending.future.cancel()
            self._release()
            raise
        inner.add_done_callback(partial(self._on_task_done, pending.future))

    def _on_task_done(self, future: asyncio.Future, inner: asyncio.Future) -> None:
        # Read the outcome even when the caller already cancelled the handle.
        exc = None if inner.cancelled() else inner.exception()
        if not future.done():
            if inner.cancelled():
                future.cancel()
            elif exc is not None:
                future.set_exception(exc)
            else:
                future.set_result(inner.result())
        self._release()

    def _release(self) -> None:
        with self._lock:
            if self._queue:
                successor = self._queue.popleft()
                waiting = len(self._queue)
            else:
                successor = None
                self._running -= 1
                assert self._running >= 0, "running count went negative"

        if successor is not None:
            logger.debug("Scheduler '%s' dispatching queued task (%d waiting)", self.name, waiting)
            successor.future.get_loop().call_soon(self._launch, successor)


@component(scope="singleton")
class ParseScheduler(TaskScheduler):
    """Process-wide scheduler guarding file parsing.

    The concurrency limit is read from the ``MAX_CONCURRENT_PARSES``
    environment variable (default: ``20``).  Outstanding work is left
    untouched on container shutdown; only the final status is logged.
    """

    def __init__(self):
        super().__init__(load_settings().max_concurrent_parses, name="parse")

    @cleanup
    def _on_shutdown(self):
        status = self.get_status()
        if status.total:
            logger.warning("Scheduler '%s' shutting down with %s", self.name, status)
        else:
            logger.debug("Scheduler '%s' shutting down idle", self.name)
