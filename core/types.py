from __future__ import annotations

"""
Core domain types for the BSC sync benchmark.

Plain data containers shared across:
1) tip resolution (notation parsing, RPC lookup)
2) the build / run pipeline
3) report generation
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List


class Network(str, Enum):
    """BSC networks the benchmark can target. Value is the report label."""

    MAINNET = "mainnet"
    TESTNET = "testnet"

    @classmethod
    def from_chain(cls, chain: str) -> "Network":
        """Map a node `--chain` name (bsc / bsc-testnet) to a Network."""
        if chain == "bsc":
            return cls.MAINNET
        if chain == "bsc-testnet":
            return cls.TESTNET
        raise ValueError(f"Invalid chain '{chain}'. Supported chains: bsc, bsc-testnet")

    @property
    def chain(self) -> str:
        return "bsc" if self is Network.MAINNET else "bsc-testnet"

    @property
    def data_dir(self) -> str:
        return f"fullnode_bsc_{self.value}"


@dataclass
class GitInfo:
    """Source-control metadata of the node checkout. Fields default to "Unknown"."""

    remote_url: str = "Unknown"
    branch: str = "Unknown"
    commit: str = "Unknown"


@dataclass
class RunContext:
    """
    Host / process metadata read once at startup and passed down,
    so nothing below the CLI reads cwd, hostname or git directly.
    """

    hostname: str
    short_hostname: str
    os_name: str
    cwd: str
    git: GitInfo = field(default_factory=GitInfo)


@dataclass
class BenchmarkTarget:
    """Resolved sync target: what the user asked for and what it maps to."""

    network: Network
    notation: str  # as typed on the command line, e.g. "0.5M"
    block_number: int
    block_hash: str


@dataclass
class NodeRun:
    """Result of one node execution."""

    command: List[str]
    returncode: int
    duration_seconds: int
    started_at: datetime
    finished_at: datetime
