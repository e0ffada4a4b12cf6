from typing import Any, Callable
from unittest.mock import MagicMock

import pytest

from nearjsonrpc.client import NearClient
from nearjsonrpc.configs.rpc_config import RPCConfig
from nearjsonrpc.provider import CLIENT_ID


@pytest.fixture
def url() -> str:
    """Shared RPC URL for all transport tests."""
    return "https://rpc.mock.near"


@pytest.fixture
def config(url: str) -> RPCConfig:
    return RPCConfig(endpoint=url, retry_count=3, initial_backoff=0.5)


@pytest.fixture
def transport() -> MagicMock:
    """Stands in for the HTTP layer; returns an empty result unless told otherwise."""
    return MagicMock(return_value={"jsonrpc": "2.0", "id": CLIENT_ID, "result": {}})


@pytest.fixture
def client(transport: MagicMock) -> NearClient:
    return NearClient(transport=transport)


@pytest.fixture
def respond(transport: MagicMock) -> Callable[[Any], None]:
    """Sets the JSON-RPC result the fake transport hands back."""
    def _respond(result: Any) -> None:
        transport.return_value = {"jsonrpc": "2.0", "id": CLIENT_ID, "result": result}
    return _respond
