import logging
import time
from http import HTTPStatus
from typing import Any, List, Mapping, Optional, Protocol, Tuple, Union

import httpx
import msgspec

from nearjsonrpc.configs.endpoints import EndpointRegistry
from nearjsonrpc.configs.rpc_config import RPCConfig
from nearjsonrpc.errors import ResponseFormatError, RPCError, TransportError, ValidationError

logger = logging.getLogger(__name__)

CLIENT_ID = "nearjsonrpc"

# Sending these twice can submit the same transaction twice.
NON_IDEMPOTENT_METHODS = frozenset({"send_tx", "broadcast_tx_async", "broadcast_tx_commit"})

# Methods whose params are contractually a positional array.
POSITIONAL_METHODS = frozenset({"validators"})

Params = Union[Mapping[str, Any], List[Any]]


class RPCRequest(msgspec.Struct):
    """
    Standard JSON-RPC request schema.
    """
    method: str
    params: Any
    id: str = CLIENT_ID
    jsonrpc: str = "2.0"


class RPCErrorBody(msgspec.Struct):
    """
    NEAR JSON-RPC error object. Unknown fields are ignored.
    """
    code: Optional[int] = None
    message: Optional[str] = None
    name: Optional[str] = None
    data: Any = None
    cause: Any = None


class Transport(Protocol):
    """Anything that takes (method, params, timeout) and returns the decoded body."""

    def __call__(self, method: str, params: Params, timeout: float) -> Any: ...


def _is_error_envelope(body: Any) -> bool:
    return isinstance(body, dict) and body.get("error") is not None


def _is_retryable_status(status_code: int) -> bool:
    return status_code == HTTPStatus.TOO_MANY_REQUESTS or status_code >= HTTPStatus.INTERNAL_SERVER_ERROR


class HttpTransport:
    """
    Sends one JSON-RPC request per call over a persistent httpx client,
    retrying connection failures, 429 and 5xx with exponential backoff.
    """

    def __init__(
        self,
        registry: EndpointRegistry,
        config: RPCConfig,
        client: Optional[httpx.Client] = None,
    ):
        self.registry = registry
        self.config = config
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=config.timeout)

    def __call__(self, method: str, params: Params, timeout: float) -> Any:
        endpoint = self.registry.get_endpoint()
        content = msgspec.json.encode(RPCRequest(method=method, params=params))
        headers = {"Content-Type": "application/json", "User-Agent": self.config.user_agent}

        attempts = 1 if method in NON_IDEMPOTENT_METHODS else self.config.retry_count
        last_error: Optional[TransportError] = None

        for attempt in range(attempts):
            try:
                resp = self.client.post(endpoint, content=content, headers=headers, timeout=timeout)
            except httpx.RequestError as e:
                last_error = TransportError(
                    f"HTTP request for '{method}' to {endpoint} failed: {e}",
                    method=method,
                    endpoint=endpoint,
                )
                self._backoff(method, attempt, attempts, str(e))
                continue

            body, decode_error = self._try_decode(resp)

            # the node answered; a JSON-RPC error is final whatever the status
            if _is_error_envelope(body):
                return body

            if _is_retryable_status(resp.status_code):
                last_error = TransportError(
                    f"NEAR RPC HTTP error {resp.status_code} for '{method}': {resp.text[:200]}",
                    method=method,
                    endpoint=endpoint,
                    status_code=resp.status_code,
                )
                self._backoff(method, attempt, attempts, f"HTTP {resp.status_code}")
                continue

            if not resp.is_success:
                raise TransportError(
                    f"NEAR RPC HTTP error {resp.status_code} for '{method}': {resp.text[:200]}",
                    method=method,
                    endpoint=endpoint,
                    status_code=resp.status_code,
                )

            if decode_error is not None:
                raise ResponseFormatError(
                    f"Failed to parse JSON from RPC response for '{method}': {decode_error}",
                    method=method,
                ) from decode_error

            return body

        logger.error("Giving up on '%s' after %d attempt(s)", method, attempts)
        if last_error is None:
            last_error = TransportError(f"No attempt made for '{method}'", method=method, endpoint=endpoint)
        raise last_error

    def _backoff(self, method: str, attempt: int, attempts: int, reason: str) -> None:
        logger.warning("Attempt %d/%d for '%s' failed: %s", attempt + 1, attempts, method, reason)
        if attempt < attempts - 1:
            wait_time = (2**attempt) * self.config.initial_backoff
            time.sleep(wait_time)

    @staticmethod
    def _try_decode(resp: httpx.Response) -> Tuple[Any, Optional[msgspec.DecodeError]]:
        try:
            return msgspec.json.decode(resp.content), None
        except msgspec.DecodeError as e:
            return None, e

    def close(self) -> None:
        if self._owns_client:
            self.client.close()


def _to_rpc_error(method: str, error: Any) -> RPCError:
    parsed = RPCErrorBody()
    if isinstance(error, dict):
        try:
            parsed = msgspec.convert(error, RPCErrorBody)
        except msgspec.ValidationError:
            logger.debug("Non-standard error object from '%s': %r", method, error)

    message = parsed.message
    if not message:
        message = error if isinstance(error, str) else msgspec.json.encode(error).decode()

    return RPCError(
        message,
        method=method,
        code=parsed.code,
        data=parsed.data,
        name=parsed.name,
        cause=parsed.cause,
    )


def unwrap_response(method: str, body: Any) -> Any:
    """
    Returns the ``result`` of a JSON-RPC envelope, raising RPCError when the
    envelope carries an error. Bodies without an envelope are returned as is.
    """
    if isinstance(body, (bytes, bytearray)):
        try:
            body = msgspec.json.decode(body)
        except msgspec.DecodeError as e:
            raise ResponseFormatError(
                f"Failed to parse JSON from RPC response for '{method}': {e}", method=method
            ) from e

    if not isinstance(body, dict):
        return body

    if body.get("error") is not None:
        raise _to_rpc_error(method, body["error"])

    if "result" in body:
        return body["result"]
    return body


class NodeProvider:
    """
    Validates and sends JSON-RPC calls through a pluggable transport.

    Each provider owns its endpoint registry, so two providers can talk to
    different networks in the same process. Pass ``transport`` to substitute
    the HTTP layer (e.g. with a fake in tests).
    """

    def __init__(
        self,
        config: Optional[RPCConfig] = None,
        transport: Optional[Transport] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.config = config or RPCConfig()
        self.registry = EndpointRegistry(self.config.endpoint)
        self._owns_transport = transport is None
        self.transport: Transport = transport or HttpTransport(self.registry, self.config, client=client)

    def set_endpoint(self, value: Any) -> str:
        return self.registry.set_endpoint(value)

    def get_endpoint(self) -> str:
        return self.registry.get_endpoint()

    def call(self, method: str, params: Optional[Params] = None, timeout: Optional[float] = None) -> Any:
        """
        Performs one JSON-RPC call and returns its unwrapped result.

        Raises ValidationError before any request when the arguments are
        malformed, TransportError when the HTTP exchange fails, and RPCError
        when the node reports an error.
        """
        if not isinstance(method, str) or not method:
            raise ValidationError("`method` must be a non-empty string")

        if params is None:
            params = {}
        if isinstance(params, (list, tuple)):
            if method not in POSITIONAL_METHODS:
                raise ValidationError(f"`params` for '{method}' must be an object, not an array")
            params = list(params)
        elif isinstance(params, Mapping):
            params = dict(params)
        else:
            raise ValidationError("`params` must be a mapping")

        if timeout is None:
            timeout = self.config.timeout
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ValidationError("`timeout` must be a strictly positive number of seconds")

        logger.debug("Calling '%s' with params %s", method, params)
        body = self.transport(method, params, float(timeout))
        return unwrap_response(method, body)

    def close(self) -> None:
        if self._owns_transport and isinstance(self.transport, HttpTransport):
            self.transport.close()

    def __enter__(self) -> "NodeProvider":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
