from typing import Any, Optional


class NearRPCError(Exception):
    """Base class for every error raised by nearjsonrpc."""


class ValidationError(NearRPCError, ValueError):
    """
    Caller supplied malformed, missing or conflicting arguments.
    Raised before any request is sent.
    """


class TransportError(NearRPCError):
    """
    The HTTP exchange failed: connection errors, timeouts, or a non-2xx
    status once the retry budget is spent.
    """

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.method = method
        self.endpoint = endpoint
        self.status_code = status_code


class RPCError(NearRPCError):
    """
    The node answered with a JSON-RPC ``error`` envelope.
    """

    def __init__(
        self,
        message: str,
        method: str,
        code: Optional[int] = None,
        data: Any = None,
        name: Optional[str] = None,
        cause: Any = None,
    ):
        super().__init__(f"NEAR RPC error in '{method}': {message}")
        self.rpc_message = message
        self.method = method
        self.code = code
        self.data = data
        self.name = name
        self.cause = cause


class ResponseFormatError(NearRPCError):
    """The response parsed but does not have the shape the method requires."""

    def __init__(self, message: str, method: Optional[str] = None):
        super().__init__(message)
        self.method = method
