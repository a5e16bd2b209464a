"""
Hot update handling

An instantiated wasm module cannot be partially re-initialized, so any change
to a "use golang" module asks the host for a full reload.
"""

import asyncio
import inspect
import logging
import re
from pathlib import Path
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional, Set, Union

from .detector import detect_go_directive

logger = logging.getLogger(__name__)

SCRIPT_PATTERN = re.compile(r"\.[jt]sx?$")
FULL_RELOAD = {"type": "full-reload", "path": "*"}

ReloadSender = Callable[[Dict[str, Any]], Union[None, Awaitable[None]]]


async def handle_go_hot_update(file: Union[str, Path], send: ReloadSender) -> Optional[List[Any]]:
    """
    React to a changed file

    Args:
        file: Changed file path
        send: Host reload primitive, called with the full-reload payload

    Returns:
        An empty module list when a reload was requested (the host must not
        run its own update), otherwise None
    """
    file = Path(file)
    if not SCRIPT_PATTERN.search(file.name):
        return None

    content = await asyncio.to_thread(file.read_text, encoding="utf-8")
    if not detect_go_directive(content):
        return None

    logger.info(f"[use-golang] Hot reloading {file}")

    outcome = send(dict(FULL_RELOAD))
    if inspect.isawaitable(outcome):
        await outcome

    return []


class ReloadChannel:
    """Fans reload payloads out to every connected dev-server client"""

    def __init__(self):
        self._subscribers: Set[asyncio.Queue] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers.discard(queue)

    async def send(self, payload: Dict[str, Any]) -> None:
        for queue in list(self._subscribers):
            queue.put_nowait(payload)

    async def stream(self, queue: asyncio.Queue) -> AsyncIterator[Dict[str, Any]]:
        try:
            while True:
                yield await queue.get()
        finally:
            self.unsubscribe(queue)
