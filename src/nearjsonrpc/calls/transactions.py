import base64
import binascii
import logging
from typing import Any, Dict, Union

import pandas as pd

from nearjsonrpc.calls.common import require_string, validate_wait_until
from nearjsonrpc.data.normalizer import build_frame, get_dict, get_field, get_list, get_str, require_mapping
from nearjsonrpc.data.schema import BroadcastHashSchema, BroadcastSchema, TransactionStatusSchema, WaitUntil
from nearjsonrpc.errors import ValidationError
from nearjsonrpc.provider import NodeProvider

logger = logging.getLogger(__name__)


def _validate_signed_tx(signed_tx_base64: Any) -> str:
    require_string("signed_tx_base64", signed_tx_base64)
    try:
        base64.b64decode(signed_tx_base64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("`signed_tx_base64` is not valid base64") from e
    return signed_tx_base64


def _outcome_row(res: Dict[str, Any]) -> Dict[str, Any]:
    receipts = get_list(res, "receipts_outcome") or get_list(res, "receipts")
    return {
        "hash": get_str(res, "transaction", "hash") or get_str(res, "transaction_hash"),
        "final_execution_status": get_str(res, "final_execution_status"),
        "status": get_field(res, "status", default={}),
        "transaction": get_dict(res, "transaction"),
        "transaction_outcome": get_dict(res, "transaction_outcome"),
        "receipts": receipts,
        "raw_response": res,
    }


def broadcast_tx(
    provider: NodeProvider,
    signed_tx_base64: str,
    wait_until: Union[str, WaitUntil] = WaitUntil.EXECUTED_OPTIMISTIC,
) -> pd.DataFrame:
    """
    Submits a pre-signed transaction with `send_tx`.

    A node answering with a bare hash string (``wait_until="NONE"``) yields a
    hash-only table; otherwise the execution outcome is returned. The call is
    sent once and never retried.
    """
    params = {
        "signed_tx_base64": _validate_signed_tx(signed_tx_base64),
        "wait_until": validate_wait_until(wait_until),
    }
    result = provider.call("send_tx", params)

    if isinstance(result, str):
        return build_frame([{"hash": result, "raw_response": result}], BroadcastHashSchema.TYPES)

    res = require_mapping("send_tx", result)
    logger.info("Broadcast transaction %s", get_str(res, "transaction", "hash"))
    return build_frame([_outcome_row(res)], BroadcastSchema.TYPES)


def get_transaction_status(
    provider: NodeProvider,
    tx_hash: str,
    sender_account_id: str,
    wait_until: Union[str, WaitUntil] = WaitUntil.EXECUTED_OPTIMISTIC,
) -> pd.DataFrame:
    """Status and receipts outcome of a previously submitted transaction."""
    params = {
        "tx_hash": require_string("tx_hash", tx_hash),
        "sender_account_id": require_string("sender_account_id", sender_account_id),
        "wait_until": validate_wait_until(wait_until),
    }
    res = require_mapping("tx", provider.call("tx", params))

    row = {
        "hash": get_str(res, "transaction", "hash", default=tx_hash),
        "sender_account_id": get_str(res, "transaction", "signer_id", default=sender_account_id),
        "final_execution_status": get_str(res, "final_execution_status"),
        "status": get_field(res, "status", default={}),
        "transaction": get_dict(res, "transaction"),
        "transaction_outcome": get_dict(res, "transaction_outcome"),
        "receipts_outcome": get_list(res, "receipts_outcome"),
        "raw_response": res,
    }
    return build_frame([row], TransactionStatusSchema.TYPES)
