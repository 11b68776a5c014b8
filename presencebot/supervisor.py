from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Dict, List, Protocol, Set

from .config import logger
from .state import SupervisorPhase


class Watcher(Protocol):
    name: str

    async def run(self, stop_event: asyncio.Event) -> None: ...


@dataclass
class WatcherHandle:
    task: asyncio.Task
    stop_event: asyncio.Event

    def stop(self) -> None:
        self.stop_event.set()


class WatcherSupervisor:
    """Keeps exactly one live instance of each polling loop.

    ``restart`` is called on every gateway ready/resume. Old loops are asked
    to stop through their event and left to finish on their own; they are
    never cancelled mid-request.
    """

    def __init__(self, watchers: List[Watcher]) -> None:
        self.watchers = watchers
        self.phase = SupervisorPhase.IDLE
        self._handles: Dict[str, WatcherHandle] = {}
        self._retiring: Set[asyncio.Task] = set()
        self._lock = asyncio.Lock()

    @property
    def running(self) -> List[str]:
        return [name for name, h in self._handles.items() if not h.task.done()]

    def _spawn(self, watcher: Watcher) -> WatcherHandle:
        stop_event = asyncio.Event()

        async def runner():
            await watcher.run(stop_event)

        task = asyncio.create_task(runner(), name=f"watcher:{watcher.name}")
        return WatcherHandle(task=task, stop_event=stop_event)

    def _retire(self, handle: WatcherHandle) -> None:
        handle.stop()
        if not handle.task.done():
            self._retiring.add(handle.task)
            handle.task.add_done_callback(self._retiring.discard)

    async def restart(self) -> None:
        async with self._lock:
            self.phase = SupervisorPhase.RESTARTING if self._handles else SupervisorPhase.STARTING
            logger.info(f"🔄 Supervisor {self.phase.value}: {len(self.watchers)} watchers")

            for handle in self._handles.values():
                self._retire(handle)
            self._handles = {}

            for watcher in self.watchers:
                try:
                    self._handles[watcher.name] = self._spawn(watcher)
                except Exception as e:
                    logger.error(f"❌ Failed to start {watcher.name} watcher: {e}")

            self.phase = SupervisorPhase.RUNNING
            logger.info(f"✅ Supervisor running: {', '.join(self._handles) or 'no watchers'}")

    async def stop(self) -> None:
        """Stop every loop and wait for them to exit."""
        async with self._lock:
            for handle in self._handles.values():
                self._retire(handle)
            self._handles = {}
            pending = list(self._retiring)
            self.phase = SupervisorPhase.IDLE

        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        logger.info("Supervisor stopped")
