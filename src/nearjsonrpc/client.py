from typing import Any, Mapping, Optional, Union

import pandas as pd

from nearjsonrpc.calls.accounts import get_access_keys, query_account
from nearjsonrpc.calls.blocks import get_block
from nearjsonrpc.calls.common import BlockId
from nearjsonrpc.calls.contracts import call_view_function
from nearjsonrpc.calls.network import get_protocol_config, get_validators, network_status
from nearjsonrpc.calls.transactions import broadcast_tx, get_transaction_status
from nearjsonrpc.data.schema import WaitUntil
from nearjsonrpc.provider import NodeProvider


class NearClient(NodeProvider):
    """
    NEAR JSON-RPC client returning pandas tables.

        client = NearClient(RPCConfig(endpoint="mainnet"))
        client.query_account("near")
    """

    def query_account(
        self, account_id: str, finality: Optional[str] = None, block_id: Optional[BlockId] = None
    ) -> pd.DataFrame:
        return query_account(self, account_id, finality=finality, block_id=block_id)

    def get_block(self, block_id: Union[int, str] = "final") -> pd.DataFrame:
        return get_block(self, block_id)

    def network_status(self) -> pd.DataFrame:
        return network_status(self)

    def broadcast_tx(
        self, signed_tx_base64: str, wait_until: Union[str, WaitUntil] = WaitUntil.EXECUTED_OPTIMISTIC
    ) -> pd.DataFrame:
        return broadcast_tx(self, signed_tx_base64, wait_until=wait_until)

    def get_transaction_status(
        self,
        tx_hash: str,
        sender_account_id: str,
        wait_until: Union[str, WaitUntil] = WaitUntil.EXECUTED_OPTIMISTIC,
    ) -> pd.DataFrame:
        return get_transaction_status(self, tx_hash, sender_account_id, wait_until=wait_until)

    def call_view_function(
        self,
        account_id: str,
        method_name: str,
        args: Optional[Mapping[str, Any]] = None,
        finality: Optional[str] = None,
        block_id: Optional[BlockId] = None,
    ) -> pd.DataFrame:
        return call_view_function(self, account_id, method_name, args=args, finality=finality, block_id=block_id)

    def get_access_keys(
        self, account_id: str, finality: Optional[str] = None, block_id: Optional[BlockId] = None
    ) -> pd.DataFrame:
        return get_access_keys(self, account_id, finality=finality, block_id=block_id)

    def get_protocol_config(
        self, finality: Optional[str] = None, block_id: Optional[BlockId] = None
    ) -> pd.DataFrame:
        return get_protocol_config(self, finality=finality, block_id=block_id)

    def get_validators(
        self, epoch_id: Optional[str] = None, block_id: Optional[BlockId] = None
    ) -> pd.DataFrame:
        return get_validators(self, epoch_id=epoch_id, block_id=block_id)

    def __enter__(self) -> "NearClient":
        return self
