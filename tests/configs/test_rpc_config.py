import pytest

from nearjsonrpc.configs.rpc_config import RPCConfig, load_config
from nearjsonrpc.errors import ValidationError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in ("NEAR_RPC_ENDPOINT", "NEAR_RPC_TIMEOUT", "NEAR_RPC_RETRIES", "NEAR_RPC_BACKOFF", "NEAR_RPC_API_KEY"):
        monkeypatch.delenv(name, raising=False)


def test_rpc_config_defaults():
    config = RPCConfig()

    assert config.endpoint == "https://rpc.testnet.near.org"
    assert config.timeout == 30.0
    assert config.retry_count == 3
    assert config.user_agent == "nearjsonrpc"


def test_rpc_config_resolves_shortcut():
    assert RPCConfig(endpoint="mainnet").endpoint == "https://rpc.mainnet.near.org"


def test_rpc_config_api_key_substitution(monkeypatch: pytest.MonkeyPatch):
    """Verifies that ${NEAR_RPC_API_KEY} is correctly replaced."""
    monkeypatch.setenv("NEAR_RPC_API_KEY", "test_secret_key")

    config = RPCConfig(endpoint="https://near-mainnet.example.com/v1/${NEAR_RPC_API_KEY}")

    assert config.endpoint == "https://near-mainnet.example.com/v1/test_secret_key"


def test_rpc_config_missing_api_key():
    config = RPCConfig(endpoint="https://near-mainnet.example.com/v1/${NEAR_RPC_API_KEY}")

    assert "missing_key" in config.endpoint


@pytest.mark.parametrize(
    "kwargs",
    [
        {"endpoint": "ftp://rpc.near.org"},
        {"timeout": 0},
        {"retry_count": 0},
        {"initial_backoff": -1.0},
    ],
)
def test_rpc_config_rejects_invalid_values(kwargs: dict):
    with pytest.raises(ValidationError):
        RPCConfig(**kwargs)


def test_load_config_from_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("NEAR_RPC_ENDPOINT", "betanet")
    monkeypatch.setenv("NEAR_RPC_TIMEOUT", "5")
    monkeypatch.setenv("NEAR_RPC_RETRIES", "1")

    config = load_config()

    assert config.endpoint == "https://rpc.betanet.near.org"
    assert config.timeout == 5.0
    assert config.retry_count == 1
    assert config.initial_backoff == 0.5


def test_load_config_bad_number(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("NEAR_RPC_RETRIES", "three")

    with pytest.raises(ValidationError, match="NEAR_RPC_"):
        load_config()
