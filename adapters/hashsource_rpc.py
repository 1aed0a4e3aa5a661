from __future__ import annotations

from typing import Optional, Sequence

from bsc_rpc import resolve_block_hash
from config import RPC_TIMEOUT
from core.interfaces import BlockHashSource
from core.types import Network


class RpcBlockHashSource(BlockHashSource):
    """
    BlockHashSource backed by the public BSC JSON-RPC endpoints in bsc_rpc.py.

    `endpoints` pins an explicit list (used for both networks); by default each
    network uses its own configured list.
    """

    def __init__(self, endpoints: Optional[Sequence[str]] = None, timeout: float = RPC_TIMEOUT) -> None:
        self.endpoints = list(endpoints) if endpoints is not None else None
        self.timeout = timeout

    def block_hash(self, block_number: int, network: Network) -> str:
        return resolve_block_hash(block_number, network, endpoints=self.endpoints, timeout=self.timeout)
