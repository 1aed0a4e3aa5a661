"""Unit tests: CLI driver end to end with fake hash source, runner and context."""
import contextlib
import glob
import io
import os
import tempfile
import unittest

from bench import main
from bsc_rpc import ResolutionFailed
from core.interfaces import BlockHashSource, CommandRunner
from core.types import GitInfo, Network, RunContext

HASH = "0x" + "ab" * 32


class FakeSource(BlockHashSource):
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def block_hash(self, block_number, network):
        self.calls.append((block_number, network))
        if self.fail:
            raise ResolutionFailed(block_number, network, ["https://rpc.invalid/"])
        return HASH


class FakeRunner(CommandRunner):
    def __init__(self, fail_on=None, code=101):
        self.fail_on = fail_on
        self.code = code
        self.calls = []

    def run(self, cmd, env=None, cwd=None):
        self.calls.append(list(cmd))
        if self.fail_on and self.fail_on in cmd:
            return self.code
        return 0


class TestBenchCli(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.cwd = self._tmp.name
        self.context = RunContext(
            hostname="bench-01.example.internal",
            short_hostname="bench-01",
            os_name="Linux",
            cwd=self.cwd,
            git=GitInfo(),
        )

    def tearDown(self):
        self._tmp.cleanup()

    def _main(self, argv, source=None, runner=None):
        out = io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(io.StringIO()):
            code = main(argv, source=source or FakeSource(), runner=runner or FakeRunner(), context=self.context)
        return code, out.getvalue()

    def _reports(self):
        return glob.glob(os.path.join(self.cwd, "test_results", "*.log"))

    def test_help_exits_non_zero(self):
        code, out = self._main(["-h"])
        self.assertEqual(code, 1)
        self.assertIn("-n", out)
        self.assertIn("bsc-testnet", out)

    def test_invalid_chain(self):
        source = FakeSource()
        code, out = self._main(["-c", "eth"], source=source)
        self.assertEqual(code, 1)
        self.assertIn("Invalid chain 'eth'", out)
        self.assertEqual(source.calls, [])

    def test_invalid_notation(self):
        source = FakeSource()
        code, out = self._main(["-n", "lots"], source=source)
        self.assertEqual(code, 1)
        self.assertEqual(source.calls, [])

    def test_unknown_flag_exits_one(self):
        with self.assertRaises(SystemExit) as ctx:
            self._main(["-x"])
        self.assertEqual(ctx.exception.code, 1)

    def test_resolution_failure_writes_no_report(self):
        runner = FakeRunner()
        code, out = self._main(["-n", "1M"], source=FakeSource(fail=True), runner=runner)
        self.assertEqual(code, 1)
        self.assertIn("Please check your internet connection", out)
        self.assertEqual(self._reports(), [])
        self.assertEqual(runner.calls, [])

    def test_defaults_resolve_5m_on_mainnet(self):
        source = FakeSource()
        code, out = self._main([], source=source)
        self.assertEqual(code, 0)
        self.assertEqual(source.calls, [(5_000_000, Network.MAINNET)])

    def test_successful_run(self):
        runner = FakeRunner()
        code, out = self._main(["-n", "0.5M", "-c", "bsc-testnet"], runner=runner)
        self.assertEqual(code, 0)
        reports = self._reports()
        self.assertEqual(len(reports), 1)
        name = os.path.basename(reports[0])
        self.assertTrue(name.startswith("bsc_testnet_test_0.5M_"))
        self.assertTrue(name.endswith("_bench-01.log"))
        with open(reports[0], encoding="utf-8") as f:
            text = f.read()
        self.assertIn(f"Tip block hash: {HASH}\n", text)
        self.assertIn("Test Execution Summary\n", text)
        self.assertIn("Test block-syncing for BSC testnet for the first 0.5M blocks", out)
        self.assertEqual(runner.calls[0], ["cargo", "clean"])
        node_cmd = runner.calls[-1]
        self.assertIn("--chain=bsc-testnet", node_cmd)
        self.assertEqual(node_cmd[node_cmd.index("--debug.tip") + 1], HASH)

    def test_build_failure_recorded(self):
        runner = FakeRunner(fail_on="build")
        code, _ = self._main(["-n", "100K"], runner=runner)
        self.assertEqual(code, 1)
        with open(self._reports()[0], encoding="utf-8") as f:
            text = f.read()
        self.assertIn("FAILED at step: build\n", text)
        self.assertFalse(any("node" in c for c in runner.calls))

    def test_node_failure_still_summarized(self):
        runner = FakeRunner(fail_on="--debug.terminate", code=2)
        code, out = self._main(["-n", "100K"], runner=runner)
        self.assertEqual(code, 1)
        with open(self._reports()[0], encoding="utf-8") as f:
            text = f.read()
        self.assertIn("Node exit code: 2\n", text)
        self.assertIn("It takes", out)


if __name__ == "__main__":
    unittest.main()
