import logging
from typing import Any, Dict, List, Optional

import pandas as pd

from nearjsonrpc.calls.common import BlockId, block_reference, require_string
from nearjsonrpc.data.normalizer import (
    build_frame,
    get_amount,
    get_dict,
    get_field,
    get_int,
    get_list,
    get_str,
    require_mapping,
)
from nearjsonrpc.data.schema import AccessKeySchema, AccountSchema
from nearjsonrpc.provider import NodeProvider

logger = logging.getLogger(__name__)


def query_account(
    provider: NodeProvider,
    account_id: str,
    finality: Optional[str] = None,
    block_id: Optional[BlockId] = None,
) -> pd.DataFrame:
    """
    Account state (balance, storage, code hash) as a one-row table.
    ``amount`` and ``locked`` are yoctoNEAR decimal strings.
    """
    require_string("account_id", account_id)
    params: Dict[str, Any] = {"request_type": "view_account", "account_id": account_id}
    params.update(block_reference(finality, block_id))

    res = require_mapping("query", provider.call("query", params))

    row = {
        "account_id": get_str(res, "account_id", default=account_id),
        "amount": get_amount(res, "amount"),
        "locked": get_amount(res, "locked"),
        "storage_usage": get_int(res, "storage_usage"),
        "storage_paid_at": get_int(res, "storage_paid_at"),
        "code_hash": get_str(res, "code_hash"),
        "global_contract_hash": get_str(res, "global_contract_hash"),
        "global_contract_account_id": get_str(res, "global_contract_account_id"),
        "block_height": get_int(res, "block_height"),
        "block_hash": get_str(res, "block_hash"),
        "raw_response": res,
    }
    return build_frame([row], AccountSchema.TYPES)


def _permission(key: Dict[str, Any]) -> Any:
    permission = get_field(key, "access_key", "permission")
    if isinstance(permission, (str, dict)):
        return permission
    return None


def get_access_keys(
    provider: NodeProvider,
    account_id: str,
    finality: Optional[str] = None,
    block_id: Optional[BlockId] = None,
) -> pd.DataFrame:
    """
    One row per access key on the account. An account without keys gives
    an empty table.
    """
    require_string("account_id", account_id)
    params: Dict[str, Any] = {"request_type": "view_access_key_list", "account_id": account_id}
    params.update(block_reference(finality, block_id))

    res = require_mapping("query", provider.call("query", params))

    keys = get_list(res, "keys")
    rows: List[Dict[str, Any]] = []
    for key in keys:
        rows.append({
            "public_key": get_str(key, "public_key"),
            "nonce": get_int(key, "access_key", "nonce"),
            "permission": _permission(key),
            "access_key": get_dict(key, "access_key"),
            "block_height": get_int(res, "block_height"),
            "block_hash": get_str(res, "block_hash"),
            "raw_response": res,
        })

    if not rows:
        logger.info("No access keys found for %s", account_id)
    return build_frame(rows, AccessKeySchema.TYPES)
