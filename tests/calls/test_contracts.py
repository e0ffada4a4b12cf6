import base64
from typing import Any, Callable, Dict
from unittest.mock import MagicMock

import msgspec
import pandas as pd
import pytest

from nearjsonrpc.calls.contracts import encode_args
from nearjsonrpc.client import NearClient
from nearjsonrpc.errors import ResponseFormatError, RPCError, ValidationError


def _view_result(result: Any) -> Dict[str, Any]:
    return {"result": result, "logs": ["log1"], "block_height": 17817336, "block_hash": "4qkA4sUUG8opjH5Q9bL5mWJTnfR4ech879Db1BZXbx6P"}


def test_encode_args():
    encoded = encode_args({"account_id": "alice.near"})

    assert msgspec.json.decode(base64.b64decode(encoded)) == {"account_id": "alice.near"}
    assert base64.b64decode(encode_args(None)) == b"{}"


def test_view_call_decodes_json_bytes(client: NearClient, transport: MagicMock, respond: Callable[[Any], None]):
    respond(_view_result(list(b'{"value":1}')))

    df = client.call_view_function("contract.testnet", "get_value", args={"key": "k"})

    assert df.loc[0, "result_text"] == '{"value":1}'
    assert df.loc[0, "result_json"] == {"value": 1}
    assert df.loc[0, "result_raw"] == b'{"value":1}'
    assert df.loc[0, "logs"] == ["log1"]
    assert df.loc[0, "block_height"] == 17817336

    method, params, _ = transport.call_args.args
    assert method == "query"
    assert params["request_type"] == "call_function"
    assert params["method_name"] == "get_value"
    assert params["finality"] == "final"
    assert msgspec.json.decode(base64.b64decode(params["args_base64"])) == {"key": "k"}


def test_view_call_base64_result(client: NearClient, respond: Callable[[Any], None]):
    respond(_view_result(base64.b64encode(b"42").decode()))

    df = client.call_view_function("counter.testnet", "get_num", block_id=17817336)

    assert df.loc[0, "result_text"] == "42"
    assert df.loc[0, "result_json"] == 42


def test_view_call_plain_text(client: NearClient, respond: Callable[[Any], None]):
    respond(_view_result(list(b"hello")))

    df = client.call_view_function("contract.testnet", "greet")

    assert df.loc[0, "result_text"] == "hello"
    assert pd.isna(df.loc[0, "result_json"])


def test_view_call_binary_result(client: NearClient, respond: Callable[[Any], None]):
    respond(_view_result([0xFF, 0xFE]))

    df = client.call_view_function("contract.testnet", "blob")

    assert df.loc[0, "result_raw"] == b"\xff\xfe"
    assert pd.isna(df.loc[0, "result_text"])
    assert pd.isna(df.loc[0, "result_json"])


def test_view_call_contract_error(client: NearClient, respond: Callable[[Any], None]):
    respond({"error": "wasm execution failed with error: MethodNotFound", "logs": []})

    with pytest.raises(RPCError, match="MethodNotFound"):
        client.call_view_function("contract.testnet", "missing")


def test_view_call_non_object_result(client: NearClient, respond: Callable[[Any], None]):
    respond([1, 2, 3])

    with pytest.raises(ResponseFormatError):
        client.call_view_function("contract.testnet", "get_value")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"account_id": None, "method_name": "m"},
        {"account_id": "c.testnet", "method_name": ""},
        {"account_id": "c.testnet", "method_name": "m", "args": ["not", "a", "mapping"]},
        {"account_id": "c.testnet", "method_name": "m", "args": {"when": object()}},
        {"account_id": "c.testnet", "method_name": "m", "finality": "final", "block_id": 10},
    ],
)
def test_view_call_validates_inputs(client: NearClient, transport: MagicMock, kwargs: Dict[str, Any]):
    with pytest.raises(ValidationError):
        client.call_view_function(**kwargs)

    transport.assert_not_called()
