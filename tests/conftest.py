import asyncio

import pytest

from pico_throttle.scheduler import TaskScheduler


async def _drain(iterations: int = 20):
    for _ in range(iterations):
        await asyncio.sleep(0)


class GatedTasks:
    """Factory for tasks that block until explicitly released.

    Each task records its id in ``started`` when it begins running, waits
    for its gate, then returns its id (or raises the configured error).
    """

    def __init__(self):
        self.started = []
        self.gates = {}
        self.errors = {}

    def make(self, task_id, error: Exception = None):
        self.gates[task_id] = asyncio.Event()
        if error is not None:
            self.errors[task_id] = error

        async def task():
            self.started.append(task_id)
            await self.gates[task_id].wait()
            if task_id in self.errors:
                raise self.errors[task_id]
            return task_id

        return task

    def release(self, task_id):
        self.gates[task_id].set()


@pytest.fixture
def drain():
    """Coroutine function that lets the event loop run pending callbacks."""
    return _drain


@pytest.fixture
def gated():
    """Create a GatedTasks factory bound to the running test loop."""
    return GatedTasks()


@pytest.fixture
def scheduler_factory():
    """Build TaskScheduler instances with a given capacity."""
    def _factory(capacity: int, name: str = "test") -> TaskScheduler:
        return TaskScheduler(capacity, name=name)
    return _factory
