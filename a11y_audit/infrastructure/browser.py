"""
Пул headless Chromium для Lighthouse.

Каждый браузер запускается через Playwright с открытым remote-debugging портом,
Lighthouse подключается к нему через --port. Один аудит на браузер за раз.

Жизненный цикл: start() один раз при старте сервиса, close() один раз
при остановке. Повторной инициализации нет.

Использование:
    pool = BrowserPool(size=2)
    await pool.start()
    async with pool.acquire() as handle:
        ...  # handle.port
    await pool.close()
"""

import asyncio
import logging
import socket
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, List, Optional, Sequence

from playwright.async_api import Browser, Playwright, async_playwright

logger = logging.getLogger(__name__)


def find_free_port(host: str = "127.0.0.1") -> int:
    """Свободный TCP порт для remote debugging."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind((host, 0))
        return sock.getsockname()[1]


@dataclass
class BrowserHandle:
    browser: Browser
    port: int

    @property
    def connected(self) -> bool:
        return self.browser.is_connected()


class BrowserPoolClosedError(Exception):
    """Пул не запущен или уже закрыт."""
    pass


class BrowserPool:
    """Набор запущенных браузеров, которые выдаются по одному на аудит."""

    def __init__(
        self,
        size: int = 1,
        chrome_flags: Optional[Sequence[str]] = None,
        channel: Optional[str] = None,
    ):
        if size < 1:
            raise ValueError("Browser pool size must be >= 1")
        self.size = size
        self.chrome_flags = list(chrome_flags or [])
        self.channel = channel

        self._playwright: Optional[Playwright] = None
        self._handles: List[BrowserHandle] = []
        self._idle: Optional[asyncio.Queue] = None

    @property
    def started(self) -> bool:
        return self._playwright is not None

    @property
    def handles(self) -> List[BrowserHandle]:
        return list(self._handles)

    async def start(self) -> None:
        """Запустить все браузеры пула."""
        if self.started:
            return

        self._playwright = await async_playwright().start()
        self._idle = asyncio.Queue()
        try:
            for _ in range(self.size):
                port = find_free_port()
                browser = await self._playwright.chromium.launch(
                    headless=True,
                    channel=self.channel,
                    args=[*self.chrome_flags, f"--remote-debugging-port={port}"],
                )
                handle = BrowserHandle(browser=browser, port=port)
                self._handles.append(handle)
                self._idle.put_nowait(handle)
                logger.info(f"Browser started on debugging port {port}")
        except Exception:
            await self.close()
            raise

    async def close(self) -> None:
        """Закрыть браузеры и Playwright."""
        for handle in self._handles:
            try:
                await handle.browser.close()
            except Exception as e:
                logger.warning(f"Failed to close browser on port {handle.port}: {e}")
        self._handles.clear()
        self._idle = None

        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
            logger.info("Browser pool closed")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[BrowserHandle]:
        """Взять свободный браузер; ждёт, если все заняты."""
        if self._idle is None:
            raise BrowserPoolClosedError("Browser pool is not started")

        idle = self._idle
        handle = await idle.get()
        try:
            yield handle
        finally:
            idle.put_nowait(handle)

    def get_state(self) -> dict:
        """Состояние для /health."""
        return {
            "started": self.started,
            "size": self.size,
            "connected": sum(1 for h in self._handles if h.connected),
            "idle": self._idle.qsize() if self._idle is not None else 0,
        }
