"""Фоновый поток с циклом asyncio для ядра приложения.

Tk владеет главным потоком, поэтому ядро (контроллер сессии, адаптер
удаления фона) живёт в отдельном однопоточном цикле событий. UI передаёт
туда вызовы через `call`, а обратно результаты возвращаются через `after`.
"""
from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class LoopThread:
    def __init__(self, name: str = "bgremove-core") -> None:
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def start(self) -> None:
        self._thread.start()
        logger.debug("Core loop started in thread %s", self._thread.name)

    def call(self, fn: Callable[..., Any], *args: Any) -> None:
        """Планирует `fn(*args)` в цикле ядра. Безопасно из любого потока."""
        self._loop.call_soon_threadsafe(fn, *args)

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        if not self._thread.is_alive():
            return
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout)
        if not self._loop.is_running():
            self._loop.close()
        logger.debug("Core loop stopped")

    def _run(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()
