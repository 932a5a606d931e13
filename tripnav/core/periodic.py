"""
Periodic refresh scheduling.

Replaces free-running interval timers with named tasks that expose an
idempotent ``tick()`` and a deterministic start/stop lifecycle. The sleep
function is injectable so the loop can be driven without wall-clock waits.
"""

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, Dict, Optional

TickCallback = Callable[[], Awaitable[None]]
SleepFunction = Callable[[float], Awaitable[None]]


class PeriodicTask:
    """A named callback run every ``interval_seconds`` until stopped."""

    def __init__(
        self,
        name: str,
        interval_seconds: float,
        callback: TickCallback,
        sleep: SleepFunction = asyncio.sleep,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.name = name
        self.interval_seconds = interval_seconds
        self._callback = callback
        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None
        self._running = False
        self._logger = logging.getLogger(__name__)
        self.tick_count = 0
        self.failure_count = 0
        self.last_tick: Optional[datetime] = None

    @property
    def is_running(self) -> bool:
        return self._running and self._task is not None and not self._task.done()

    async def tick(self) -> None:
        """
        Run the callback once.

        Failures are logged and counted; a failing refresh never stops the loop.
        """
        try:
            await self._callback()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.failure_count += 1
            self._logger.warning(f"Periodic task '{self.name}' failed: {e}")
        finally:
            self.tick_count += 1
            self.last_tick = datetime.now()

    def start(self) -> None:
        if self._running:
            self._logger.warning(f"Periodic task '{self.name}' already running")
            return
        self._running = True
        self._task = asyncio.create_task(self._loop(), name=f"periodic:{self.name}")
        self._logger.info(f"Started periodic task '{self.name}' with {self.interval_seconds}s interval")

    async def stop(self) -> None:
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self._logger.info(f"Stopped periodic task '{self.name}'")

    async def _loop(self) -> None:
        while self._running:
            await self._sleep(self.interval_seconds)
            if not self._running:
                break
            await self.tick()


class RefreshScheduler:
    """Owns a session's periodic tasks so they can be started and torn down together."""

    def __init__(self, sleep: SleepFunction = asyncio.sleep):
        self._sleep = sleep
        self._tasks: Dict[str, PeriodicTask] = {}

    def register(self, name: str, interval_seconds: float, callback: TickCallback) -> PeriodicTask:
        if name in self._tasks:
            raise ValueError(f"Periodic task '{name}' already registered")
        task = PeriodicTask(name, interval_seconds, callback, sleep=self._sleep)
        self._tasks[name] = task
        return task

    def get(self, name: str) -> PeriodicTask:
        return self._tasks[name]

    @property
    def names(self) -> list[str]:
        return list(self._tasks)

    async def tick(self, name: str) -> None:
        await self._tasks[name].tick()

    def start_all(self) -> None:
        for task in self._tasks.values():
            task.start()

    async def stop_all(self) -> None:
        for task in self._tasks.values():
            await task.stop()

    def status(self) -> Dict[str, dict]:
        return {
            name: {
                "running": task.is_running,
                "interval_seconds": task.interval_seconds,
                "ticks": task.tick_count,
                "failures": task.failure_count,
                "last_tick": task.last_tick.isoformat() if task.last_tick else None,
            }
            for name, task in self._tasks.items()
        }
