"""Unit tests: build / run pipeline with a fake command runner."""
import os
import tempfile
import unittest
from unittest.mock import patch

from core.interfaces import CommandRunner
from core.types import Network
from pipeline import (
    BuildFailed,
    CleanFailed,
    ResetFailed,
    RunFailed,
    SyncPipeline,
    UpdateFailed,
    build_env,
    build_node_command,
)

HASH = "0x" + "ab" * 32


class FakeRunner(CommandRunner):
    """Records commands; exit codes keyed by the command's first two words."""

    def __init__(self, codes=None):
        self.codes = codes or {}
        self.calls = []

    def run(self, cmd, env=None, cwd=None):
        self.calls.append((list(cmd), dict(env or {}), cwd))
        return self.codes.get(" ".join(cmd[:2]), 0)


class TestBuildNodeCommand(unittest.TestCase):
    def test_contract(self):
        cmd = build_node_command(
            chain="bsc-testnet",
            data_dir="fullnode_bsc_testnet",
            tip_hash=HASH,
            binary="./target/release/reth-bsc",
            trusted_peers=["enode://a@1.2.3.4:30311", "enode://b@5.6.7.8:30311"],
            metrics_addr="0.0.0.0:6060",
            log_max_size=1000,
            log_max_files=1000,
        )
        self.assertEqual(cmd[:3], ["./target/release/reth-bsc", "node", "--chain=bsc-testnet"])
        self.assertIn("--http", cmd)
        self.assertEqual(cmd[cmd.index("--datadir") + 1], "./fullnode_bsc_testnet/data")
        self.assertEqual(cmd[cmd.index("--log.file.directory") + 1], "./fullnode_bsc_testnet/logs")
        self.assertIn("--trusted-peers=enode://a@1.2.3.4:30311,enode://b@5.6.7.8:30311", cmd)
        self.assertEqual(cmd[cmd.index("--debug.tip") + 1], HASH)
        self.assertIn("--debug.terminate", cmd)
        self.assertEqual(cmd[cmd.index("--metrics") + 1], "0.0.0.0:6060")
        self.assertEqual(cmd[cmd.index("--log.file.max-files") + 1], "1000")

    def test_no_trusted_peers(self):
        cmd = build_node_command("bsc", "fullnode_bsc_mainnet", HASH, trusted_peers=[])
        self.assertFalse(any(a.startswith("--trusted-peers") for a in cmd))


class TestBuildEnv(unittest.TestCase):
    def test_linux_gets_rustflags(self):
        self.assertEqual(build_env("Linux", "-C link-arg=-lgcc"), {"RUSTFLAGS": "-C link-arg=-lgcc"})

    def test_darwin_plain(self):
        self.assertEqual(build_env("Darwin", "-C link-arg=-lgcc"), {})


class TestSyncPipeline(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.workdir = self._tmp.name

    def tearDown(self):
        self._tmp.cleanup()

    def _pipeline(self, runner, network=Network.MAINNET, os_name="Linux"):
        return SyncPipeline(runner, network, HASH, os_name, workdir=self.workdir)

    def test_prepare_runs_steps_in_order(self):
        runner = FakeRunner()
        self._pipeline(runner).prepare()
        cmds = [c[0] for c in runner.calls]
        self.assertEqual(cmds[0], ["cargo", "clean"])
        self.assertEqual(cmds[1], ["cargo", "update"])
        self.assertEqual(cmds[2][:2], ["cargo", "build"])
        self.assertIn("--release", cmds[2])
        self.assertIn("RUSTFLAGS", runner.calls[2][1])
        self.assertTrue(all(c[2] == self.workdir for c in runner.calls))

    def test_darwin_build_without_rustflags(self):
        runner = FakeRunner()
        self._pipeline(runner, os_name="Darwin").build()
        self.assertNotIn("RUSTFLAGS", runner.calls[0][1])

    def test_reset_wipes_datadir(self):
        stale = os.path.join(self.workdir, "fullnode_bsc_testnet", "data", "stale.db")
        os.makedirs(os.path.dirname(stale))
        open(stale, "w").close()
        self._pipeline(FakeRunner(), network=Network.TESTNET).reset_datadir()
        self.assertTrue(os.path.isdir(os.path.join(self.workdir, "fullnode_bsc_testnet")))
        self.assertFalse(os.path.exists(stale))

    def test_reset_error(self):
        with patch("pipeline.shutil.rmtree", side_effect=PermissionError("denied")):
            os.makedirs(os.path.join(self.workdir, "fullnode_bsc_mainnet"))
            with self.assertRaises(ResetFailed):
                self._pipeline(FakeRunner()).reset_datadir()

    def test_distinct_failures(self):
        cases = [
            ("cargo clean", CleanFailed, "clean"),
            ("cargo update", UpdateFailed, "update"),
            ("cargo build", BuildFailed, "build"),
        ]
        for key, exc, step in cases:
            with self.subTest(step=step):
                runner = FakeRunner({key: 101})
                with self.assertRaises(exc) as ctx:
                    self._pipeline(runner).prepare()
                self.assertEqual(ctx.exception.step, step)
                self.assertEqual(ctx.exception.returncode, 101)
                # nothing after the failing step runs
                self.assertEqual(" ".join(runner.calls[-1][0][:2]), key)

    @patch("pipeline.time.monotonic", side_effect=[100.0, 165.7])
    def test_run_node_times_and_sets_rust_log(self, _mono):
        runner = FakeRunner()
        run = self._pipeline(runner).run_node()
        self.assertEqual(run.duration_seconds, 65)
        self.assertEqual(run.returncode, 0)
        cmd, env, _ = runner.calls[0]
        self.assertEqual(cmd[1:3], ["node", "--chain=bsc"])
        self.assertEqual(env["RUST_LOG"], "INFO")
        self.assertEqual(cmd[cmd.index("--debug.tip") + 1], HASH)

    def test_run_node_failure_keeps_measurement(self):
        runner = FakeRunner()
        pipeline = self._pipeline(runner)
        runner.codes[" ".join(pipeline.node_command()[:2])] = 1
        with self.assertRaises(RunFailed) as ctx:
            pipeline.run_node()
        self.assertEqual(ctx.exception.step, "run_node")
        self.assertIsNotNone(ctx.exception.run)
        self.assertEqual(ctx.exception.run.returncode, 1)


if __name__ == "__main__":
    unittest.main()
