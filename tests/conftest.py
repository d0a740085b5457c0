"""Shared pytest fixtures."""

import json
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

API_URL = "https://api.test.swapkit"
USER = "0x1111111111111111111111111111111111111111"
SPENDER = "0x216b4b4ba9f3e719726886d34a177484278bfcae"
DAI = "0x6b175474e89094c44da98b954eedeac495271d0f"
USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"


@pytest.fixture(autouse=True)
def reset_settings_singleton():
    """Reset settings singleton before each test."""
    import swapkit.config

    swapkit.config._settings_instance = None
    yield
    swapkit.config._settings_instance = None


@pytest.fixture
def make_http_client() -> Callable[..., httpx.AsyncClient]:
    """Build an httpx client whose requests are answered by `handler`."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def json_response() -> Callable[..., httpx.Response]:
    def _response(status: int, payload: Any) -> httpx.Response:
        return httpx.Response(status, json=payload)

    return _response


class FakeFetchResponse:
    """Fetch-style response: `status` plus an async json()."""

    def __init__(self, status: int, payload: Any):
        self.status = status
        self._payload = payload

    async def json(self) -> Any:
        if isinstance(self._payload, str):
            return json.loads(self._payload)
        return self._payload


@pytest.fixture
def fake_fetch_response():
    return FakeFetchResponse


@pytest.fixture
def mock_fetcher() -> AsyncMock:
    """Fetcher double returning whatever the test configures."""
    return AsyncMock()


@pytest.fixture
def mock_web3() -> MagicMock:
    """web3.Web3 double with a contract factory and default account."""
    web3 = MagicMock()
    web3.eth.default_account = USER
    return web3
