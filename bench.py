"""
BSC full-node sync benchmark: resolve tip hash, build the node, time the sync, write a report.
Run: python bench.py [-n <block_number>] [-c <chain>]
"""
import argparse
import logging
import os
import sys
from datetime import datetime
from typing import List, Optional

from adapters.hashsource_rpc import RpcBlockHashSource
from adapters.runner_subprocess import SubprocessRunner
from bsc_rpc import ResolutionFailed
from config import DEFAULT_BLOCK_NOTATION, DEFAULT_CHAIN, LOG_LEVEL, RESULTS_DIR, SUPPORTED_CHAINS
from context import collect_context
from core.interfaces import BlockHashSource, CommandRunner
from core.types import BenchmarkTarget, Network, RunContext
from notation import InvalidNotation, parse_block_number
from pipeline import RunFailed, StepFailed, SyncPipeline
from report import RunReport, format_timestamp

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1

EPILOG = """\
  -n examples: 500000, 0.5M, 1M, 5M, 10M, 100K, 2.5M
     supports exact numbers, K/k for thousands, M/m for millions
  -c options: bsc (mainnet), bsc-testnet

Examples:
  %(prog)s                          # Test BSC mainnet with 5M blocks
  %(prog)s -n 1M                    # Test BSC mainnet with 1M blocks
  %(prog)s -c bsc-testnet           # Test BSC testnet with 5M blocks
  %(prog)s -n 2M -c bsc-testnet     # Test BSC testnet with 2M blocks
"""


class _UsageParser(argparse.ArgumentParser):
    """Usage errors exit 1, like -h."""

    def error(self, message: str) -> None:
        sys.stderr.write(f"Error: {message}\n")
        self.print_help(sys.stderr)
        sys.exit(EXIT_FAILURE)


def build_parser() -> argparse.ArgumentParser:
    parser = _UsageParser(
        description="Benchmark BSC full-node block syncing up to a tip block.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument(
        "-n", dest="block_number", default=DEFAULT_BLOCK_NOTATION,
        help=f"Tip block number (default: {DEFAULT_BLOCK_NOTATION})",
    )
    parser.add_argument(
        "-c", dest="chain", default=DEFAULT_CHAIN,
        help=f"Blockchain network (default: {DEFAULT_CHAIN})",
    )
    parser.add_argument("-h", dest="help", action="store_true", help="Show this help and exit")
    return parser


def _print_start(target: BenchmarkTarget, context: RunContext, report: RunReport) -> None:
    git = context.git
    print(f"## Testing BSC {target.network.value} block syncing for the first {target.notation} blocks")
    print(f"Chain: {target.network.chain}")
    print(f"Using tip block: {target.block_hash}")
    print(f"Starting at: {format_timestamp(report.started_at)}")
    print(f"Results will be saved to: {report.path}")
    print()
    print("Git Repository Information:")
    print(f"Remote URL: {git.remote_url}")
    print(f"Current branch: {git.branch}")
    print(f"Commit hash: {git.commit}")
    print()


def run_benchmark(
    target: BenchmarkTarget,
    context: RunContext,
    runner: CommandRunner,
    started_at: Optional[datetime] = None,
    results_dir: str = RESULTS_DIR,
) -> int:
    """Report header -> build pipeline -> timed node run -> report summary."""
    report = RunReport(
        target,
        context,
        started_at or datetime.now().astimezone(),
        results_dir=os.path.normpath(os.path.join(context.cwd, results_dir)),
    )
    _print_start(target, context, report)
    report.write_header()

    pipeline = SyncPipeline(
        runner=runner,
        network=target.network,
        tip_hash=target.block_hash,
        os_name=context.os_name,
        workdir=context.cwd,
    )
    try:
        pipeline.prepare()
        run = pipeline.run_node()
    except RunFailed as e:
        logger.error("Node run failed: %s", e)
        if e.run is None:
            report.append_failure(e.step, str(e))
        else:
            print()
            print(report.append_summary(e.run))
        print(f"\nTest results have been saved to: {report.path}")
        return EXIT_FAILURE
    except StepFailed as e:
        logger.error("Step '%s' failed: %s", e.step, e)
        report.append_failure(e.step, str(e))
        print(f"\nTest results have been saved to: {report.path}")
        return EXIT_FAILURE

    summary = report.append_summary(run)
    print()
    print(summary)
    print(f"\nTest results have been saved to: {report.path}")
    return EXIT_OK


def main(
    argv: Optional[List[str]] = None,
    source: Optional[BlockHashSource] = None,
    runner: Optional[CommandRunner] = None,
    context: Optional[RunContext] = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.help:
        parser.print_help()
        return EXIT_FAILURE

    if args.chain not in SUPPORTED_CHAINS:
        print(f"Error: Invalid chain '{args.chain}'. Supported chains: {', '.join(SUPPORTED_CHAINS)}")
        parser.print_help()
        return EXIT_FAILURE
    network = Network.from_chain(args.chain)

    try:
        block_number = parse_block_number(args.block_number)
    except InvalidNotation as e:
        print(f"Error: {e}")
        parser.print_help()
        return EXIT_FAILURE

    source = source or RpcBlockHashSource()
    try:
        block_hash = source.block_hash(block_number, network)
    except ResolutionFailed as e:
        print(f"Error: {e}")
        print("Please check your internet connection and try again.")
        return EXIT_FAILURE

    target = BenchmarkTarget(
        network=network,
        notation=args.block_number.strip(),
        block_number=block_number,
        block_hash=block_hash,
    )
    return run_benchmark(
        target,
        context or collect_context(),
        runner or SubprocessRunner(),
    )


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
