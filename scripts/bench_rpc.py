"""
Benchmark BSC RPC endpoints (median and p95 latency) for one network.

Run from repo root:
  python -m scripts.bench_rpc [-c bsc|bsc-testnet] [--pings 15]

Then put the fastest ones first in BSC_RPC_ENDPOINTS / BSC_TESTNET_RPC_ENDPOINTS in .env.
"""
from __future__ import annotations

import argparse
import statistics
import time

import requests

from bsc_rpc import endpoints_for, rpc_payload
from config import DEFAULT_CHAIN, RPC_TIMEOUT, SUPPORTED_CHAINS
from core.types import Network


def ping(rpc: str, n: int = 15, timeout: float = RPC_TIMEOUT) -> tuple[list[float], int]:
    """Latencies in ms for n eth_blockNumber calls, plus the number of failed calls."""
    times_ms: list[float] = []
    failures = 0
    for _ in range(n):
        t0 = time.perf_counter()
        try:
            r = requests.post(rpc, json=rpc_payload("eth_blockNumber", []), timeout=timeout)
            r.raise_for_status()
        except requests.RequestException:
            failures += 1
        times_ms.append((time.perf_counter() - t0) * 1000)
    return times_ms, failures


def summarize(times_ms: list[float]) -> tuple[float, float]:
    """(median_ms, p95_ms), rounded to 0.1 ms."""
    median_ms = round(statistics.median(times_ms), 1)
    p95_idx = max(0, int(len(times_ms) * 0.95) - 1)
    p95_ms = round(sorted(times_ms)[p95_idx], 1)
    return median_ms, p95_ms


def main() -> None:
    parser = argparse.ArgumentParser(description="Latency probe for BSC JSON-RPC endpoints.")
    parser.add_argument("-c", "--chain", choices=SUPPORTED_CHAINS, default=DEFAULT_CHAIN)
    parser.add_argument("--pings", type=int, default=15)
    args = parser.parse_args()

    for rpc in endpoints_for(Network.from_chain(args.chain)):
        t, failures = ping(rpc, n=args.pings)
        median_ms, p95_ms = summarize(t)
        print(rpc)
        print("  median_ms:", median_ms)
        print("  p95_ms   :", p95_ms)
        print("  failures :", failures)
        print()


if __name__ == "__main__":
    main()
