"""
BSC JSON-RPC client: resolve a block number to its hash with ordered endpoint failover.
"""
import json
import logging
import re
from typing import Any, List, Optional, Sequence

import requests

from config import MAINNET_RPC_ENDPOINTS, RPC_TIMEOUT, TESTNET_RPC_ENDPOINTS
from core.types import Network

logger = logging.getLogger(__name__)

# Canonical block hash: 0x + 64 hex digits
BLOCK_HASH_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")
# Fallback for bodies that are not valid JSON
HASH_FIELD_PATTERN = re.compile(r'"hash"\s*:\s*"(0x[a-fA-F0-9]*)"')


class ResolutionFailed(RuntimeError):
    """No endpoint returned a usable hash for the requested block."""

    def __init__(self, block_number: int, network: Network, endpoints: Sequence[str]):
        self.block_number = block_number
        self.network = network
        self.endpoints = list(endpoints)
        super().__init__(
            f"Could not retrieve block hash for block #{block_number} "
            f"from any RPC endpoint ({len(self.endpoints)} tried on BSC {network.value})"
        )


def endpoints_for(network: Network) -> List[str]:
    """Endpoint list for a network, in priority order."""
    if network is Network.TESTNET:
        return list(TESTNET_RPC_ENDPOINTS)
    return list(MAINNET_RPC_ENDPOINTS)


def block_hex(block_number: int) -> str:
    """500000 -> "0x7a120"."""
    if block_number < 0:
        raise ValueError(f"Block number must be non-negative: {block_number}")
    return hex(block_number)


def rpc_payload(method: str, params: List[Any], request_id: int = 1) -> dict:
    return {"jsonrpc": "2.0", "method": method, "params": params, "id": request_id}


def extract_block_hash(body: str) -> Optional[str]:
    """
    Pull the block hash out of an eth_getBlockByNumber response body.
    Returns None for empty bodies, null results, RPC errors and malformed hashes.
    """
    if not body or not body.strip():
        return None
    try:
        payload = json.loads(body)
    except ValueError:
        m = HASH_FIELD_PATTERN.search(body)
        candidate = m.group(1) if m else None
    else:
        if not isinstance(payload, dict):
            return None
        if payload.get("error"):
            logger.debug("RPC error payload: %s", payload["error"])
            return None
        result = payload.get("result")
        candidate = result.get("hash") if isinstance(result, dict) else None

    if not isinstance(candidate, str) or candidate == "null":
        return None
    if not BLOCK_HASH_PATTERN.match(candidate):
        return None
    return candidate.lower()


def fetch_block_hash(rpc_url: str, block_number: int, timeout: float = RPC_TIMEOUT) -> Optional[str]:
    """Ask a single endpoint for the hash of `block_number`. None on any failure."""
    payload = rpc_payload("eth_getBlockByNumber", [block_hex(block_number), False])
    try:
        r = requests.post(
            rpc_url,
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )
        r.raise_for_status()
    except requests.RequestException as e:
        logger.warning("RPC request to %s failed: %s", rpc_url, e)
        return None
    return extract_block_hash(r.text)


def resolve_block_hash(
    block_number: int,
    network: Network,
    endpoints: Optional[Sequence[str]] = None,
    timeout: float = RPC_TIMEOUT,
) -> str:
    """
    Query endpoints strictly in order; first valid hash wins and no further
    endpoint is contacted. Raises ResolutionFailed once the list is exhausted.
    """
    urls = list(endpoints) if endpoints is not None else endpoints_for(network)
    logger.info(
        "Querying BSC %s for block #%s (%s)...",
        network.chain, block_number, block_hex(block_number),
    )
    for rpc_url in urls:
        logger.info("Trying RPC endpoint: %s", rpc_url)
        block_hash = fetch_block_hash(rpc_url, block_number, timeout=timeout)
        if block_hash:
            logger.info("Successfully retrieved block hash: %s", block_hash)
            return block_hash
        logger.warning("Failed to get response from %s, trying next...", rpc_url)
    raise ResolutionFailed(block_number, network, urls)
