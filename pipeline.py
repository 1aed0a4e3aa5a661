"""
Build-then-run pipeline for the node under test:
reset datadir -> cargo clean -> cargo update -> cargo build -> run node to the tip.
Every step has its own failure type so the driver can tell them apart.
"""
from __future__ import annotations

import logging
import os
import shutil
import time
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from config import (
    HTTP_API,
    LINUX_RUSTFLAGS,
    LOG_FILE_MAX_FILES,
    LOG_FILE_MAX_SIZE,
    METRICS_ADDR,
    NODE_BIN_NAME,
    NODE_BINARY,
    NODE_RUST_LOG,
    TRUSTED_PEERS,
)
from core.interfaces import CommandRunner
from core.types import Network, NodeRun

logger = logging.getLogger(__name__)


class StepFailed(RuntimeError):
    """A pipeline step failed. `step` names it, `returncode` is set for command steps."""

    step = "unknown"

    def __init__(self, message: str, returncode: Optional[int] = None):
        self.returncode = returncode
        super().__init__(message)


class ResetFailed(StepFailed):
    step = "reset_datadir"


class CleanFailed(StepFailed):
    step = "clean"


class UpdateFailed(StepFailed):
    step = "update"


class BuildFailed(StepFailed):
    step = "build"


class RunFailed(StepFailed):
    step = "run_node"

    def __init__(self, message: str, returncode: Optional[int] = None, run: Optional[NodeRun] = None):
        self.run = run
        super().__init__(message, returncode)


def build_node_command(
    chain: str,
    data_dir: str,
    tip_hash: str,
    binary: str = NODE_BINARY,
    http_api: str = HTTP_API,
    trusted_peers: Sequence[str] = tuple(TRUSTED_PEERS),
    metrics_addr: str = METRICS_ADDR,
    log_max_size: int = LOG_FILE_MAX_SIZE,
    log_max_files: int = LOG_FILE_MAX_FILES,
) -> List[str]:
    """Argument list for `<binary> node ...` syncing `chain` up to `tip_hash`, then exiting."""
    cmd = [
        binary,
        "node",
        f"--chain={chain}",
        "--http",
        f"--http.api={http_api}",
        "--datadir", f"./{data_dir}/data",
        "--log.file.directory", f"./{data_dir}/logs",
    ]
    if trusted_peers:
        cmd.append("--trusted-peers=" + ",".join(trusted_peers))
    cmd += [
        "--metrics", metrics_addr,
        "--debug.tip", tip_hash,
        "--debug.terminate",
        "--log.file.max-size", str(log_max_size),
        "--log.file.max-files", str(log_max_files),
    ]
    return cmd


def build_env(os_name: str, rustflags: str = LINUX_RUSTFLAGS) -> Dict[str, str]:
    """Extra env for `cargo build`: RUSTFLAGS on everything but macOS."""
    if os_name == "Darwin" or not rustflags:
        return {}
    return {"RUSTFLAGS": rustflags}


class SyncPipeline:
    """
    Steps of one benchmark run against a single network.

    Commands go through `runner`; paths are relative to `workdir`
    (the node's source checkout).
    """

    def __init__(
        self,
        runner: CommandRunner,
        network: Network,
        tip_hash: str,
        os_name: str,
        workdir: str = ".",
        bin_name: str = NODE_BIN_NAME,
        binary: str = NODE_BINARY,
        rust_log: str = NODE_RUST_LOG,
    ) -> None:
        self.runner = runner
        self.network = network
        self.tip_hash = tip_hash
        self.os_name = os_name
        self.workdir = workdir
        self.bin_name = bin_name
        self.binary = binary
        self.rust_log = rust_log

    @property
    def data_dir_path(self) -> str:
        return os.path.join(self.workdir, self.network.data_dir)

    # ------------- steps -------------

    def reset_datadir(self) -> None:
        """Delete and recreate the data directory (no backup)."""
        path = self.data_dir_path
        logger.info("Using data directory: ./%s", self.network.data_dir)
        try:
            if os.path.exists(path):
                shutil.rmtree(path)
            os.makedirs(path, exist_ok=True)
        except OSError as e:
            raise ResetFailed(f"Could not reset data directory {path}: {e}") from e

    def _cargo(self, args: List[str], error_cls: type, env: Optional[Dict[str, str]] = None) -> None:
        cmd = ["cargo", *args]
        rc = self.runner.run(cmd, env=env, cwd=self.workdir)
        if rc != 0:
            raise error_cls(f"`{' '.join(cmd)}` exited with code {rc}", returncode=rc)

    def clean(self) -> None:
        self._cargo(["clean"], CleanFailed)

    def update(self) -> None:
        self._cargo(["update"], UpdateFailed)

    def build(self) -> None:
        logger.info("Building for %s", self.os_name)
        self._cargo(
            ["build", "--bin", self.bin_name, "--release"],
            BuildFailed,
            env=build_env(self.os_name),
        )

    def prepare(self) -> None:
        """All steps up to a fresh release binary."""
        self.reset_datadir()
        self.clean()
        self.update()
        self.build()

    def node_command(self) -> List[str]:
        return build_node_command(
            chain=self.network.chain,
            data_dir=self.network.data_dir,
            tip_hash=self.tip_hash,
            binary=self.binary,
        )

    def run_node(self) -> NodeRun:
        """Run the node until it terminates at the tip; wall-clock duration in whole seconds."""
        cmd = self.node_command()
        env = {"RUST_LOG": self.rust_log}
        logger.info("Starting node: %s", " ".join(cmd[:3]) + " ...")
        started_at = datetime.now().astimezone()
        t0 = time.monotonic()
        rc = self.runner.run(cmd, env=env, cwd=self.workdir)
        duration = int(time.monotonic() - t0)
        finished_at = datetime.now().astimezone()
        run = NodeRun(
            command=cmd,
            returncode=rc,
            duration_seconds=duration,
            started_at=started_at,
            finished_at=finished_at,
        )
        logger.info("Node exited with code %s after %ss", rc, duration)
        if rc != 0:
            raise RunFailed(f"Node exited with code {rc}", returncode=rc, run=run)
        return run
