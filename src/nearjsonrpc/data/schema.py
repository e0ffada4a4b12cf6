from enum import Enum


class Finality(str, Enum):
    FINAL = "final"
    NEAR_FINAL = "near-final"
    OPTIMISTIC = "optimistic"


class WaitUntil(str, Enum):
    NONE = "NONE"
    INCLUDED = "INCLUDED"
    INCLUDED_FINAL = "INCLUDED_FINAL"
    EXECUTED_OPTIMISTIC = "EXECUTED_OPTIMISTIC"
    FINAL = "FINAL"


YOCTO_PER_NEAR = 10**24
UPTIME_EPSILON = 1e-9

RAW_RESPONSE = "raw_response"
BLOCK_HEIGHT = "block_height"
BLOCK_HASH = "block_hash"
UTC_TIMESTAMP = "datetime64[ns, UTC]"


class AccountSchema:
    TYPES = {
        "account_id": "string",
        "amount": "string",  # yoctoNEAR, exceeds int64
        "locked": "string",
        "storage_usage": "Int64",
        "storage_paid_at": "Int64",
        "code_hash": "string",
        "global_contract_hash": "string",
        "global_contract_account_id": "string",
        BLOCK_HEIGHT: "Int64",
        BLOCK_HASH: "string",
        RAW_RESPONSE: "object",
    }


class BlockSchema:
    TYPES = {
        "height": "Int64",
        "hash": "string",
        "prev_hash": "string",
        "timestamp": UTC_TIMESTAMP,
        "timestamp_nanosec": "string",
        "author": "string",
        "epoch_id": "string",
        "chunks_included": "Int64",
        "gas_price": "string",
        "total_supply": "string",
        "latest_protocol_version": "Int64",
        "header": "object",
        "chunks": "object",
        RAW_RESPONSE: "object",
    }


class NetworkStatusSchema:
    TYPES = {
        "chain_id": "string",
        "protocol_version": "Int64",
        "latest_protocol_version": "Int64",
        "latest_block_height": "Int64",
        "latest_block_hash": "string",
        "latest_block_time": UTC_TIMESTAMP,
        "syncing": "boolean",
        "sync_info": "object",
        "validators": "object",
        "version": "object",
        RAW_RESPONSE: "object",
    }


class BroadcastHashSchema:
    TYPES = {
        "hash": "string",
        RAW_RESPONSE: "object",
    }


class BroadcastSchema:
    TYPES = {
        "hash": "string",
        "final_execution_status": "string",
        "status": "object",
        "transaction": "object",
        "transaction_outcome": "object",
        "receipts": "object",
        RAW_RESPONSE: "object",
    }


class TransactionStatusSchema:
    TYPES = {
        "hash": "string",
        "sender_account_id": "string",
        "final_execution_status": "string",
        "status": "object",
        "transaction": "object",
        "transaction_outcome": "object",
        "receipts_outcome": "object",
        RAW_RESPONSE: "object",
    }


class ViewCallSchema:
    TYPES = {
        "account_id": "string",
        "method_name": "string",
        "result_raw": "object",
        "result_text": "string",
        "result_json": "object",
        "logs": "object",
        BLOCK_HEIGHT: "Int64",
        BLOCK_HASH: "string",
        RAW_RESPONSE: "object",
    }


class AccessKeySchema:
    TYPES = {
        "public_key": "string",
        "nonce": "Int64",
        "permission": "object",  # "FullAccess" or a FunctionCall dict
        "access_key": "object",
        BLOCK_HEIGHT: "Int64",
        BLOCK_HASH: "string",
        RAW_RESPONSE: "object",
    }


class ProtocolConfigSchema:
    TYPES = {
        "finality": "string",
        "block_id": "string",
        "protocol_version": "Int64",
        "config": "object",
        RAW_RESPONSE: "object",
    }


class ValidatorSchema:
    TYPES = {
        "account_id": "string",
        "public_key": "string",
        "stake_yocto": "string",
        "stake_near": "float64",
        "is_slashed": "boolean",
        "blocks_produced": "Int64",
        "blocks_expected": "Int64",
        "chunks_produced": "Int64",
        "chunks_expected": "Int64",
        "uptime_pct": "float64",
        RAW_RESPONSE: "object",
    }
