"""
Plain-text run report: header written before the build, summary appended after the node exits.
"""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from config import REPORT_PREFIX, RESULTS_DIR
from core.types import BenchmarkTarget, NodeRun, RunContext

logger = logging.getLogger(__name__)

RULE = "================================================"
HEADER_RULE = "========================"
SUMMARY_RULE = "====================="


def format_timestamp(dt: datetime) -> str:
    """Render like date(1): "Fri Oct 17 15:09:00 UTC 2026"."""
    return dt.strftime("%a %b %d %H:%M:%S %Z %Y").replace("  ", " ")


def format_duration(seconds: int) -> str:
    minutes, secs = divmod(int(seconds), 60)
    if minutes > 0:
        return f"{minutes} mins {secs} secs"
    return f"{secs} secs"


def report_path(
    target: BenchmarkTarget,
    context: RunContext,
    started_at: datetime,
    results_dir: str = RESULTS_DIR,
    prefix: str = REPORT_PREFIX,
) -> Path:
    """./test_results/bsc_<network>_test_<notation>_<YYYYmmdd_HHMMSS>_<host>.log"""
    stamp = started_at.strftime("%Y%m%d_%H%M%S")
    name = f"{prefix}_{target.network.value}_test_{target.notation}_{stamp}_{context.short_hostname}.log"
    return Path(results_dir) / name


def render_summary(
    target: BenchmarkTarget,
    duration_seconds: int,
    cwd: str,
    finished_at: datetime,
) -> str:
    lines = [
        RULE,
        f"Test block-syncing for BSC {target.network.value} for the first {target.notation} blocks",
        f"Chain: {target.network.chain}",
        f"It takes {format_duration(duration_seconds)}",
        f"The current directory is {cwd}",
        f"Test completed at: {format_timestamp(finished_at)}",
        RULE,
    ]
    return "\n".join(lines)


class RunReport:
    """
    Append-only report file for one benchmark run.

    Created once by write_header(); extended once by append_summary()
    or append_failure(). Never deleted here.
    """

    def __init__(
        self,
        target: BenchmarkTarget,
        context: RunContext,
        started_at: datetime,
        results_dir: str = RESULTS_DIR,
        prefix: str = REPORT_PREFIX,
    ) -> None:
        self.target = target
        self.context = context
        self.started_at = started_at
        self.path = report_path(target, context, started_at, results_dir=results_dir, prefix=prefix)

    def header_lines(self) -> list[str]:
        t = self.target
        git = self.context.git
        return [
            f"BSC {t.network.value.capitalize()} Test Results",
            HEADER_RULE,
            f"Test started at: {format_timestamp(self.started_at)}",
            f"Network: BSC {t.network.value}",
            f"Chain parameter: {t.network.chain}",
            f"Data directory: ./{t.network.data_dir}",
            f"Block number: {t.notation}",
            f"Tip block hash: {t.block_hash}",
            f"Hostname: {self.context.hostname}",
            f"OS: {self.context.os_name}",
            f"Working directory: {self.context.cwd}",
            "",
            "Git Repository Information:",
            f"Remote URL: {git.remote_url}",
            f"Current branch: {git.branch}",
            f"Commit hash: {git.commit}",
            HEADER_RULE,
            "",
        ]

    def write_header(self) -> Path:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            f.write("\n".join(self.header_lines()) + "\n")
        logger.debug("Report header written: %s", self.path)
        return self.path

    def append_summary(self, run: NodeRun) -> str:
        """Append duration + summary block; returns the summary for console output."""
        summary = render_summary(self.target, run.duration_seconds, self.context.cwd, run.finished_at)
        lines = [
            "Test Execution Summary",
            SUMMARY_RULE,
            f"Duration: {run.duration_seconds} seconds",
            f"Formatted time: {format_duration(run.duration_seconds)}",
            f"Test completed at: {format_timestamp(run.finished_at)}",
        ]
        if run.returncode != 0:
            lines.append(f"Node exit code: {run.returncode}")
        lines += ["", summary]
        with open(self.path, "a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
        return summary

    def append_failure(self, step: str, detail: str, at: Optional[datetime] = None) -> None:
        at = at or datetime.now().astimezone()
        lines = [
            "Test Execution Summary",
            SUMMARY_RULE,
            f"FAILED at step: {step}",
            f"Error: {detail}",
            f"Test aborted at: {format_timestamp(at)}",
        ]
        with open(self.path, "a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
