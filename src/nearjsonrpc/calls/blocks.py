from typing import Any, Dict, Union

import pandas as pd

from nearjsonrpc.calls.common import FINALITY_VALUES, validate_block_id
from nearjsonrpc.data.normalizer import (
    build_frame,
    get_dict,
    get_field,
    get_int,
    get_list,
    get_str,
    require_mapping,
    to_utc_timestamp,
)
from nearjsonrpc.data.schema import BlockSchema
from nearjsonrpc.provider import NodeProvider


def block_params(block_id: Union[int, str]) -> Dict[str, Any]:
    """A finality keyword, a height, or a hash, as `block` params."""
    if isinstance(block_id, str) and block_id in FINALITY_VALUES:
        return {"finality": block_id}
    return {"block_id": validate_block_id(block_id)}


def get_block(provider: NodeProvider, block_id: Union[int, str] = "final") -> pd.DataFrame:
    """
    Block header summary. ``block_id`` is "final"/"optimistic"/"near-final",
    a height, or a block hash. ``timestamp`` is converted from nanoseconds
    to a UTC datetime.
    """
    params = block_params(block_id)
    res = require_mapping("block", provider.call("block", params))

    header = get_dict(res, "header")
    row = {
        "height": get_int(header, "height"),
        "hash": get_str(header, "hash"),
        "prev_hash": get_str(header, "prev_hash"),
        "timestamp": to_utc_timestamp(get_field(header, "timestamp")),
        "timestamp_nanosec": get_str(header, "timestamp_nanosec"),
        "author": get_str(res, "author"),
        "epoch_id": get_str(header, "epoch_id"),
        "chunks_included": get_int(header, "chunks_included"),
        "gas_price": get_str(header, "gas_price"),
        "total_supply": get_str(header, "total_supply"),
        "latest_protocol_version": get_int(header, "latest_protocol_version"),
        "header": header,
        "chunks": get_list(res, "chunks"),
        "raw_response": res,
    }
    return build_frame([row], BlockSchema.TYPES)
