# --------------------------------------------------------------------
# utils/event_bus.py
# --------------------------------------------------------------------
"""A light asyncio-based pub/sub for engine lifecycle events.

Each engine owns its own bus. Inside a running loop, events are queued and
delivered by a background worker in publish order; without a loop they are
delivered inline. Handler failures are logged and never reach the publisher."""
from __future__ import annotations
import asyncio
import logging
from collections import defaultdict
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Union[Awaitable[None], None]]


def _key(topic) -> str:
    return topic.value if isinstance(topic, Enum) else str(topic)


class EventBus:
    def __init__(self) -> None:
        self._subs: Dict[str, List[Handler]] = defaultdict(list)
        self._q: Optional[asyncio.Queue] = None
        # background task started lazily on first publish inside a loop
        self._task: Optional[asyncio.Task] = None

    # -------------------------------------------------------------- #
    def subscribe(self, topic: str, fn: Handler) -> None:
        self._subs[_key(topic)].append(fn)

    def unsubscribe(self, topic: str, fn: Handler) -> None:
        handlers = self._subs.get(_key(topic), [])
        if fn in handlers:
            handlers.remove(fn)

    def publish(self, topic: str, payload: Any = None) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._deliver_inline(_key(topic), payload)
            return
        if self._task is None or self._task.done() or self._task.get_loop() is not loop:
            self._q = asyncio.Queue()
            self._task = loop.create_task(self._worker(self._q))
        self._q.put_nowait((_key(topic), payload))

    async def join(self) -> None:
        """Wait until every queued event has been handled."""
        if self._q is not None and self._task is not None and not self._task.done():
            await self._q.join()

    async def aclose(self) -> None:
        await self.join()
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    # -------------------------------------------------------------- #
    def _deliver_inline(self, topic: str, payload: Any) -> None:
        for fn in list(self._subs.get(topic, [])):
            try:
                res = fn(payload)
                if asyncio.iscoroutine(res):
                    # no loop to await it on; run it to completion here
                    asyncio.run(res)
            except Exception:
                logger.exception("[event_bus] handler error on %s", topic)

    async def _worker(self, q: asyncio.Queue) -> None:
        while True:
            topic, payload = await q.get()
            try:
                for fn in list(self._subs.get(topic, [])):
                    try:
                        res = fn(payload)
                        if asyncio.iscoroutine(res):
                            await res
                    except Exception:  # keep bus alive
                        logger.exception("[event_bus] handler error on %s", topic)
            finally:
                q.task_done()
