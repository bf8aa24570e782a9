# app/service_layer/dispatcher.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine

log = logging.getLogger(__name__)


class BackgroundDispatcher:
    """
    Owns post-ack work. Each spawned coroutine is a detached asyncio.Task: nobody
    awaits it on the request path, and whatever it raises ends in the log here.

    Strong references are kept until a task finishes (the event loop only holds weak ones).
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], *, name: str | None = None) -> asyncio.Task[Any]:
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            log.warning("background task cancelled name=%s", task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            log.error("background task crashed name=%s", task.get_name(), exc_info=exc)

    async def drain(self) -> None:
        """Wait for everything in flight (shutdown, tests). Errors were already logged."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
