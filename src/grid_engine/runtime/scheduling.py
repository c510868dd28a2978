"""Deferred execution used to release restore guards after observers settle."""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Callable, Deque

Callback = Callable[[], None]
Scheduler = Callable[[Callback], None]


def call_soon(callback: Callback) -> None:
    """Run ``callback`` on the next loop iteration, or right away without a loop."""

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        callback()
        return
    loop.call_soon(callback)


class DeferredQueue:
    """Manual scheduler: callbacks wait until the host calls ``flush``."""

    def __init__(self) -> None:
        self._pending: Deque[Callback] = deque()

    def __call__(self, callback: Callback) -> None:
        self._pending.append(callback)

    def __len__(self) -> int:
        return len(self._pending)

    def flush(self) -> int:
        ran = 0
        while self._pending:
            self._pending.popleft()()
            ran += 1
        return ran


__all__ = ["Callback", "Scheduler", "call_soon", "DeferredQueue"]
