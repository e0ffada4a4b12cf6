import logging
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from nearjsonrpc.calls.common import BlockId, block_reference, require_string, validate_block_id
from nearjsonrpc.data.normalizer import (
    build_frame,
    get_amount,
    get_bool,
    get_dict,
    get_field,
    get_int,
    get_list,
    get_str,
    require_mapping,
    to_decimal,
    to_utc_timestamp,
)
from nearjsonrpc.data.schema import (
    UPTIME_EPSILON,
    YOCTO_PER_NEAR,
    NetworkStatusSchema,
    ProtocolConfigSchema,
    ValidatorSchema,
)
from nearjsonrpc.errors import ValidationError
from nearjsonrpc.provider import NodeProvider

logger = logging.getLogger(__name__)


def network_status(provider: NodeProvider) -> pd.DataFrame:
    """Node status: chain id, sync state, current validators and node version."""
    res = require_mapping("status", provider.call("status", {}))

    row = {
        "chain_id": get_str(res, "chain_id"),
        "protocol_version": get_int(res, "protocol_version"),
        "latest_protocol_version": get_int(res, "latest_protocol_version"),
        "latest_block_height": get_int(res, "sync_info", "latest_block_height"),
        "latest_block_hash": get_str(res, "sync_info", "latest_block_hash"),
        "latest_block_time": to_utc_timestamp(get_field(res, "sync_info", "latest_block_time")),
        "syncing": get_bool(res, "sync_info", "syncing"),
        "sync_info": get_dict(res, "sync_info"),
        "validators": get_list(res, "validators"),
        "version": get_dict(res, "version"),
        "raw_response": res,
    }
    return build_frame([row], NetworkStatusSchema.TYPES)


def get_protocol_config(
    provider: NodeProvider,
    finality: Optional[str] = None,
    block_id: Optional[BlockId] = None,
) -> pd.DataFrame:
    """
    The full protocol config (fees, limits, runtime parameters) kept as one
    nested ``config`` value alongside the block reference it was read at.
    """
    params = block_reference(finality, block_id)
    res = require_mapping(
        "EXPERIMENTAL_protocol_config",
        provider.call("EXPERIMENTAL_protocol_config", params),
    )

    row = {
        "finality": params.get("finality"),
        "block_id": get_str(params, "block_id"),
        "protocol_version": get_int(res, "protocol_version"),
        "config": res,
        "raw_response": res,
    }
    return build_frame([row], ProtocolConfigSchema.TYPES)


def validator_params(
    epoch_id: Optional[str] = None,
    block_id: Optional[BlockId] = None,
) -> Union[Dict[str, Any], List[Any]]:
    if epoch_id is not None and block_id is not None:
        raise ValidationError("Specify either epoch_id or block_id, not both")
    if epoch_id is not None:
        return {"epoch_id": require_string("epoch_id", epoch_id)}
    if block_id is not None:
        return {"block_id": validate_block_id(block_id)}
    # current epoch
    return [None]


def _validator_row(validator: Dict[str, Any], res: Dict[str, Any]) -> Dict[str, Any]:
    stake_yocto = get_amount(validator, "stake")
    blocks_produced = get_int(validator, "num_produced_blocks") or 0
    blocks_expected = get_int(validator, "num_expected_blocks") or 0
    chunks_produced = get_int(validator, "num_produced_chunks") or 0
    chunks_expected = get_int(validator, "num_expected_chunks") or 0

    produced = blocks_produced + chunks_produced
    expected = blocks_expected + chunks_expected

    return {
        "account_id": get_str(validator, "account_id"),
        "public_key": get_str(validator, "public_key"),
        "stake_yocto": stake_yocto,
        "stake_near": float(to_decimal(stake_yocto) / YOCTO_PER_NEAR),
        "is_slashed": bool(get_bool(validator, "is_slashed")),
        "blocks_produced": blocks_produced,
        "blocks_expected": blocks_expected,
        "chunks_produced": chunks_produced,
        "chunks_expected": chunks_expected,
        "uptime_pct": produced / (expected + UPTIME_EPSILON) * 100,
        "raw_response": res,
    }


def get_validators(
    provider: NodeProvider,
    epoch_id: Optional[str] = None,
    block_id: Optional[BlockId] = None,
) -> pd.DataFrame:
    """
    Current (or historical) epoch validators with stake in NEAR and uptime,
    sorted by stake, largest first.
    """
    params = validator_params(epoch_id, block_id)
    res = require_mapping("validators", provider.call("validators", params))

    current_validators = get_list(res, "current_validators")
    if not current_validators:
        logger.warning("Node returned no current validators for params %s", params)

    rows = [_validator_row(v, res) for v in current_validators if isinstance(v, dict)]
    df = build_frame(rows, ValidatorSchema.TYPES)
    return df.sort_values("stake_near", ascending=False, kind="stable").reset_index(drop=True)
