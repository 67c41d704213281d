import tempfile
import unittest
from pathlib import Path

from typer.testing import CliRunner

from contractor.cli import app


NETWORK = """\
home: home
hosts:
  home:
    neighbors: [n00dles]
  n00dles:
    neighbors: [zer0]
    contracts:
      contract-1.cct: {type: Find Largest Prime Factor, data: 13195, answer: 29, reward: Gained 250 rep}
      contract-2.cct: {type: Shortest Path in a Grid, data: [[0, 1], [0, 0]]}
  zer0:
    contracts:
      contract-3.cct: {type: Unique Paths in a Grid I, data: [3, 7], answer: 27}
"""


class CliTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        base = Path(self.tmp.name)
        (base / "network.yaml").write_text(NETWORK, encoding="utf-8")
        (base / "contractor.yaml").write_text(
            "network:\n  snapshot: network.yaml\naudit:\n  path: audit.jsonl\nrun:\n  submit_delay_ms: 0\n",
            encoding="utf-8",
        )
        self.config = str(base / "contractor.yaml")
        self.audit = base / "audit.jsonl"
        self.runner = CliRunner()

    def tearDown(self):
        self.tmp.cleanup()

    def invoke(self, *args):
        return self.runner.invoke(app, [*args, "--config", self.config])

    def test_version(self):
        result = self.runner.invoke(app, ["--version"])
        self.assertEqual(result.exit_code, 0)
        self.assertTrue(result.output.strip())

    def test_dry_run_is_default(self):
        result = self.invoke("solve")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Mode=DRY", result.output)
        self.assertIn("Solved=0", result.output)
        self.assertIn("Found=3", result.output)
        self.assertFalse(self.audit.exists() and "contract_submit" in self.audit.read_text(encoding="utf-8"))

    def test_submit_reports_wrong_answers(self):
        result = self.invoke("solve", "--submit")
        self.assertEqual(result.exit_code, 5, result.output)
        self.assertIn("Solved=1", result.output)
        self.assertIn("Skipped=1", result.output)
        self.assertIn("contract_submit", self.audit.read_text(encoding="utf-8"))

    def test_submit_single_type(self):
        result = self.invoke("solve", "--submit", "--type", "Find Largest Prime Factor")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Solved=1", result.output)
        self.assertIn("Found=1", result.output)

    def test_target_without_contracts(self):
        result = self.invoke("solve", "--target", "home")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("No coding contracts found.", result.output)

    def test_find_and_hosts(self):
        result = self.invoke("find", "--type", "Unique Paths in a Grid I")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("zer0", result.output)
        self.assertNotIn("n00dles", result.output)

        result = self.invoke("find", "--type", "Nope")
        self.assertIn("No matching contracts found.", result.output)

        result = self.invoke("hosts")
        self.assertIn("3 host(s) reachable from home.", result.output)

    def test_solvers_list(self):
        result = self.invoke("solvers", "list")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Spiralize Matrix", result.output)

    def test_missing_config(self):
        result = self.runner.invoke(app, ["solve", "--config", str(Path(self.tmp.name) / "missing.yaml")])
        self.assertEqual(result.exit_code, 2)

    def test_invalid_network(self):
        bad = Path(self.tmp.name) / "bad.yaml"
        bad.write_text("home: nowhere\nhosts:\n  home: {}\n", encoding="utf-8")
        result = self.invoke("solve", "--network", str(bad))
        self.assertEqual(result.exit_code, 2)
        self.assertIn("Invalid network snapshot", result.output)

        for text in ("home: a\nhosts:\n  a: oops\n", "hosts: [unclosed\n", "- just\n- a list\n"):
            bad.write_text(text, encoding="utf-8")
            result = self.invoke("solve", "--network", str(bad))
            self.assertEqual(result.exit_code, 2, text)
            self.assertIn("Invalid network snapshot", result.output)


if __name__ == "__main__":
    unittest.main()
