import logging
from typing import Any, Dict, Optional

from nearjsonrpc.errors import ValidationError

logger = logging.getLogger(__name__)

KNOWN_ENDPOINTS: Dict[str, str] = {
    "mainnet": "https://rpc.mainnet.near.org",
    "testnet": "https://rpc.testnet.near.org",
    "betanet": "https://rpc.betanet.near.org",
}
DEFAULT_NETWORK = "testnet"


def resolve_endpoint(value: Any) -> str:
    """
    Turns a network shortcut or an http(s) URL into the URL to POST to.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("`endpoint` must be a single non-empty string")

    candidate = value.strip()
    if candidate in KNOWN_ENDPOINTS:
        return KNOWN_ENDPOINTS[candidate]

    if not candidate.startswith(("http://", "https://")):
        raise ValidationError(
            f"Invalid endpoint {candidate!r}: use one of {sorted(KNOWN_ENDPOINTS)} "
            "or a URL starting with http:// or https://"
        )
    return candidate


class EndpointRegistry:
    """
    Holds the active RPC URL for one provider.
    Falls back to testnet until an endpoint is set.
    """

    def __init__(self, endpoint: Optional[str] = None):
        self._endpoint: Optional[str] = None
        if endpoint is not None:
            self._endpoint = resolve_endpoint(endpoint)

    def set_endpoint(self, value: Any) -> str:
        endpoint = resolve_endpoint(value)
        self._endpoint = endpoint
        logger.info("NEAR RPC endpoint set to %s", endpoint)
        return endpoint

    def get_endpoint(self) -> str:
        if self._endpoint is None:
            self._endpoint = KNOWN_ENDPOINTS[DEFAULT_NETWORK]
        return self._endpoint
