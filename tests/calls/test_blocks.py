from typing import Any, Callable, Dict
from unittest.mock import MagicMock

import pandas as pd
import pytest

from nearjsonrpc.calls.blocks import block_params
from nearjsonrpc.client import NearClient
from nearjsonrpc.data.normalizer import get_field
from nearjsonrpc.errors import ResponseFormatError, ValidationError

BLOCK_RESULT: Dict[str, Any] = {
    "author": "node1.pool.near",
    "header": {
        "height": 100,
        "hash": "abc",
        "prev_hash": "abb",
        "epoch_id": "epoch1",
        "timestamp": 1_700_000_000_000_000_000,
        "timestamp_nanosec": "1700000000000000000",
        "chunks_included": 4,
        "gas_price": "100000000",
        "total_supply": "1189036129489497219402296134286302",
        "latest_protocol_version": 73,
    },
    "chunks": [{"chunk_hash": "c1"}],
}


@pytest.mark.parametrize(
    "block_id, expected",
    [
        ("final", {"finality": "final"}),
        ("optimistic", {"finality": "optimistic"}),
        (176259877, {"block_id": 176259877}),
        ("CanDKa6nYDQ89iv5U7sE1YDFteBRkBG6qBJjiM5YwGtY", {"block_id": "CanDKa6nYDQ89iv5U7sE1YDFteBRkBG6qBJjiM5YwGtY"}),
    ],
)
def test_block_params(block_id: Any, expected: Dict[str, Any]):
    assert block_params(block_id) == expected


def test_get_block_summary(client: NearClient, transport: MagicMock, respond: Callable[[Any], None]):
    respond(BLOCK_RESULT)

    df = client.get_block()

    assert len(df) == 1
    assert df.loc[0, "height"] == 100
    assert df.loc[0, "hash"] == "abc"
    assert df.loc[0, "author"] == "node1.pool.near"
    assert df.loc[0, "total_supply"] == "1189036129489497219402296134286302"
    assert df.loc[0, "timestamp"] == pd.Timestamp("2023-11-14 22:13:20", tz="UTC")
    assert str(df["timestamp"].dtype) == "datetime64[ns, UTC]"
    assert df.loc[0, "header"]["hash"] == "abc"
    assert df.loc[0, "chunks"] == [{"chunk_hash": "c1"}]

    transport.assert_called_once_with("block", {"finality": "final"}, 30.0)


def test_get_block_missing_header(client: NearClient, respond: Callable[[Any], None]):
    respond({"chunks": []})

    df = client.get_block(12345)

    assert pd.isna(df.loc[0, "height"])
    assert pd.isna(df.loc[0, "timestamp"])
    assert pd.isna(df.loc[0, "author"])
    assert df.loc[0, "header"] == {}


@pytest.mark.parametrize("block_id", [None, 1.5, True, -1, ""])
def test_get_block_invalid_locator(client: NearClient, transport: MagicMock, block_id: Any):
    with pytest.raises(ValidationError):
        client.get_block(block_id)

    transport.assert_not_called()


def test_get_block_non_object_result(client: NearClient, respond: Callable[[Any], None]):
    respond("abc")

    with pytest.raises(ResponseFormatError):
        client.get_block()


def test_block_raw_response_round_trips_header_columns(client: NearClient, respond: Callable[[Any], None]):
    respond(BLOCK_RESULT)

    df = client.get_block()
    raw = df.loc[0, "raw_response"]

    for column in ("height", "hash", "prev_hash", "epoch_id", "chunks_included", "gas_price", "total_supply"):
        assert get_field(raw, "header", column) == df.loc[0, column]
    assert get_field(raw, "author") == df.loc[0, "author"]
    assert get_field(raw, "header") == df.loc[0, "header"]
