import base64
from typing import Any, Dict, Mapping, Optional

import msgspec
import pandas as pd

from nearjsonrpc.calls.common import BlockId, block_reference, require_string
from nearjsonrpc.data.normalizer import (
    build_frame,
    decode_view_result,
    get_field,
    get_int,
    get_list,
    get_str,
    require_mapping,
)
from nearjsonrpc.data.schema import ViewCallSchema
from nearjsonrpc.errors import RPCError, ValidationError
from nearjsonrpc.provider import NodeProvider


def encode_args(args: Optional[Mapping[str, Any]]) -> str:
    """JSON-encodes view-call arguments and wraps them in base64."""
    if args is None:
        args = {}
    if not isinstance(args, Mapping):
        raise ValidationError("`args` must be a mapping")
    try:
        payload = msgspec.json.encode(dict(args))
    except (TypeError, msgspec.EncodeError) as e:
        raise ValidationError(f"`args` is not JSON serializable: {e}") from e
    return base64.b64encode(payload).decode("ascii")


def call_view_function(
    provider: NodeProvider,
    account_id: str,
    method_name: str,
    args: Optional[Mapping[str, Any]] = None,
    finality: Optional[str] = None,
    block_id: Optional[BlockId] = None,
) -> pd.DataFrame:
    """
    Calls a read-only contract method through ``query``/``call_function``.

    The returned bytes are exposed at three stages: ``result_raw`` (bytes),
    ``result_text`` (UTF-8, missing when the bytes are not text) and
    ``result_json`` (parsed value, None when the text is not JSON).
    """
    require_string("account_id", account_id)
    require_string("method_name", method_name)

    params: Dict[str, Any] = {
        "request_type": "call_function",
        "account_id": account_id,
        "method_name": method_name,
        "args_base64": encode_args(args),
    }
    params.update(block_reference(finality, block_id))

    res = require_mapping("query", provider.call("query", params))

    # older nodes report contract panics inside the result object
    contract_error = get_str(res, "error")
    if "result" not in res and contract_error:
        raise RPCError(contract_error, method="query")

    decoded = decode_view_result(get_field(res, "result"))

    row = {
        "account_id": account_id,
        "method_name": method_name,
        "result_raw": decoded.raw,
        "result_text": decoded.text,
        "result_json": decoded.json,
        "logs": get_list(res, "logs"),
        "block_height": get_int(res, "block_height"),
        "block_hash": get_str(res, "block_hash"),
        "raw_response": res,
    }
    return build_frame([row], ViewCallSchema.TYPES)
