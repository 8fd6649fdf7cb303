import asyncio
import threading
from typing import Generator

import pytest

from wsrest import WS, NetworkActivityIndicator


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clean environment variables before each test."""
    monkeypatch.delenv("WS_BASE_URL", raising=False)
    monkeypatch.delenv("WS_LOG_LEVEL", raising=False)


@pytest.fixture
def base_url() -> str:
    return "https://api.example.com"


@pytest.fixture
def indicator() -> NetworkActivityIndicator:
    return NetworkActivityIndicator()


@pytest.fixture
def ws(base_url: str, indicator: NetworkActivityIndicator) -> WS:
    return WS(base_url, network_activity_indicator=indicator)


@pytest.fixture
def background_loop() -> Generator[asyncio.AbstractEventLoop, None, None]:
    """An event loop running in its own thread, standing in for an I/O thread."""
    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()
    yield loop
    loop.call_soon_threadsafe(loop.stop)
    thread.join(timeout=5)
    loop.close()
