from __future__ import annotations

"""
Abstract interfaces for the services the benchmark depends on:

1) BlockHashSource – block number -> block hash on a given network
2) CommandRunner   – runs external commands (cargo, the node binary)

Pure interfaces (no logic) so the driver can run against:
- the public BSC JSON-RPC endpoints and real subprocesses
- fakes in tests, without network access or a Rust toolchain
"""

from abc import ABC, abstractmethod
from typing import Mapping, Optional, Sequence

from .types import Network


class BlockHashSource(ABC):
    """Source of canonical block hashes for a BSC network."""

    @abstractmethod
    def block_hash(self, block_number: int, network: Network) -> str:
        """
        Return the 0x-prefixed lowercase hash of `block_number` on `network`.
        Raise when no hash can be obtained.
        """


class CommandRunner(ABC):
    """Blocking execution of external commands."""

    @abstractmethod
    def run(
        self,
        cmd: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[str] = None,
    ) -> int:
        """
        Run `cmd` to completion with `env` merged over the current environment.
        Output goes straight to the console. Return the exit code.
        """
