import os

import msgspec
from dotenv import load_dotenv

from nearjsonrpc.configs.endpoints import DEFAULT_NETWORK, resolve_endpoint
from nearjsonrpc.errors import ValidationError

API_KEY_PLACEHOLDER = "${NEAR_RPC_API_KEY}"


class RPCConfig(msgspec.Struct):
    endpoint: str = DEFAULT_NETWORK
    timeout: float = 30.0
    retry_count: int = 3
    initial_backoff: float = 0.5
    user_agent: str = "nearjsonrpc"

    def __post_init__(self):
        if API_KEY_PLACEHOLDER in self.endpoint:
            key = os.getenv("NEAR_RPC_API_KEY", "missing_key")
            self.endpoint = self.endpoint.replace(API_KEY_PLACEHOLDER, key)

        self.endpoint = resolve_endpoint(self.endpoint)

        if self.timeout <= 0:
            raise ValidationError("`timeout` must be strictly positive")
        if self.retry_count < 1:
            raise ValidationError("`retry_count` must be at least 1")
        if self.initial_backoff < 0:
            raise ValidationError("`initial_backoff` must not be negative")


def load_config() -> RPCConfig:
    """Builds an RPCConfig from NEAR_RPC_* environment variables (.env aware)."""
    load_dotenv()

    try:
        timeout = float(os.getenv("NEAR_RPC_TIMEOUT", "30"))
        retry_count = int(os.getenv("NEAR_RPC_RETRIES", "3"))
        initial_backoff = float(os.getenv("NEAR_RPC_BACKOFF", "0.5"))
    except ValueError as e:
        raise ValidationError(f"Invalid NEAR_RPC_* environment value: {e}") from e

    return RPCConfig(
        endpoint=os.getenv("NEAR_RPC_ENDPOINT", DEFAULT_NETWORK),
        timeout=timeout,
        retry_count=retry_count,
        initial_backoff=initial_backoff,
    )
