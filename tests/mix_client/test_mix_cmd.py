import contextlib
import io
import os
import tempfile
import unittest
from unittest import mock

from common.config.config import Config
from mix_client.__main__ import CmdExecutor
from mix_client.connector import read_stored_node_url


class TestSetNodeCmd(unittest.TestCase):
    def setUp(self):
        tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(tmp_dir.cleanup)
        self._path = os.path.join(tmp_dir.name, "node-uri")

        env_patcher = mock.patch.dict(os.environ, {"NODE_URI_PATH": self._path})
        env_patcher.start()
        self.addCleanup(env_patcher.stop)

    def _run(self, *arg_list: str) -> tuple[int, str]:
        output = io.StringIO()
        with contextlib.redirect_stdout(output):
            exit_code = CmdExecutor(Config()).run(list(arg_list))
        return exit_code, output.getvalue()

    def test_set_node(self):
        exit_code, _ = self._run("set-node", "http://127.0.0.1:8545")
        self.assertEqual(exit_code, 0)
        self.assertEqual(read_stored_node_url(self._path), "http://127.0.0.1:8545")

        exit_code, output = self._run("set-node")
        self.assertEqual(exit_code, 0)
        self.assertEqual(output.strip(), "http://127.0.0.1:8545")

        exit_code, _ = self._run("set-node", "--clear")
        self.assertEqual(exit_code, 0)
        self.assertIsNone(read_stored_node_url(self._path))

    def test_bad_node_url(self):
        exit_code, _ = self._run("set-node", "node:8545")
        self.assertEqual(exit_code, 1)
        self.assertIsNone(read_stored_node_url(self._path))

    def test_no_node(self):
        with mock.patch.dict(os.environ, {"NODE_URL": ""}):
            exit_code, _ = self._run("network")
        self.assertEqual(exit_code, 1)

    def test_stats_show_by_default(self):
        with mock.patch.dict(os.environ, {"NODE_URL": ""}):
            with self.assertLogs("mix_client.cmd.cmd_handler", level="ERROR") as logs:
                exit_code, _ = self._run("stats")
        self.assertEqual(exit_code, 1)
        self.assertIn("stats failed", logs.output[0])


if __name__ == "__main__":
    unittest.main()
