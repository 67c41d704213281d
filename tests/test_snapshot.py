import json
import unittest
from pathlib import Path

from contractor.core.network import scan_all
from contractor.core.registry import default_registry
from contractor.core.runner import RunMode, RunOptions, run
from contractor.core.snapshot import answers_match, build_snapshot, load_snapshot, validate_snapshot


SNAPSHOT_PATH = Path(__file__).resolve().parent.parent / "network.yaml"


def base_snapshot():
    return {
        "home": "home",
        "hosts": {
            "home": {"neighbors": ["n00dles"]},
            "n00dles": {
                "neighbors": ["CSEC"],
                "contracts": {
                    "contract-1.cct": {"type": "Total Ways to Sum", "data": 5, "answer": 6, "reward": "rep"},
                    "contract-2.cct": {"type": "Total Ways to Sum", "data": 6},
                },
            },
            "CSEC": {},
        },
    }


class SnapshotTests(unittest.TestCase):
    def test_adjacency_is_symmetric(self):
        env = build_snapshot(base_snapshot())
        self.assertEqual(env.list_adjacent("CSEC"), ["n00dles"])
        self.assertEqual(set(scan_all(env, "CSEC")), {"home", "n00dles", "CSEC"})

    def test_submit_consumes_contract(self):
        env = build_snapshot(base_snapshot())
        self.assertEqual(env.classify("contract-1.cct", "n00dles"), "Total Ways to Sum")
        self.assertEqual(env.fetch_payload("contract-1.cct", "n00dles"), 5)

        self.assertEqual(env.submit(6, "contract-1.cct", "n00dles"), "rep")
        self.assertNotIn("contract-1.cct", env.list_instances("n00dles"))
        self.assertIsNone(env.submit(6, "contract-1.cct", "n00dles"))

    def test_wrong_answer_destroys_contract(self):
        data = base_snapshot()
        env = build_snapshot(data)
        self.assertIsNone(env.submit(99, "contract-1.cct", "n00dles"))
        self.assertEqual(env.list_instances("n00dles"), ["contract-2.cct"])

    def test_contract_without_answer_is_rejected(self):
        env = build_snapshot(base_snapshot())
        self.assertIsNone(env.submit(10, "contract-2.cct", "n00dles"))

    def test_unknown_contract_lookup(self):
        env = build_snapshot(base_snapshot())
        with self.assertRaises(KeyError):
            env.classify("nope.cct", "n00dles")

    def test_answers_match(self):
        self.assertTrue(answers_match(["1.1.1.2", "1.1.2.1"], ["1.1.2.1", "1.1.1.2"]))
        self.assertFalse(answers_match([1, 2, 3], [3, 2, 1]))
        self.assertTrue(answers_match([1, 2, 3], (1, 2, 3)))
        self.assertFalse(answers_match(7, "7"))

    def test_validation_errors(self):
        bad = json.loads(json.dumps(base_snapshot()))
        bad["home"] = "nope"
        with self.assertRaises(ValueError):
            validate_snapshot(bad)

        bad = json.loads(json.dumps(base_snapshot()))
        bad["hosts"]["home"]["neighbors"].append("nope")
        with self.assertRaises(ValueError):
            validate_snapshot(bad)

        bad = json.loads(json.dumps(base_snapshot()))
        del bad["hosts"]["n00dles"]["contracts"]["contract-1.cct"]["type"]
        with self.assertRaises(ValueError):
            validate_snapshot(bad)

        bad = json.loads(json.dumps(base_snapshot()))
        del bad["hosts"]["n00dles"]["contracts"]["contract-2.cct"]["data"]
        with self.assertRaises(ValueError):
            validate_snapshot(bad)

        with self.assertRaises(ValueError):
            validate_snapshot({"hosts": {}})

        for broken in (
            ["not", "a", "mapping"],
            {"hosts": {"home": "oops"}},
            {"hosts": {"home": {"neighbors": "n00dles"}}},
            {"hosts": {"home": {"neighbors": [["n00dles"]]}}},
            {"hosts": {"home": {"contracts": ["c.cct"]}}},
        ):
            with self.assertRaises(ValueError):
                validate_snapshot(broken)

    def test_sample_network_end_to_end(self):
        env = load_snapshot(SNAPSHOT_PATH)
        outcome = run(env, default_registry(), RunOptions(mode=RunMode.SUBMIT, submit_delay=0), sleep=lambda _: None)
        self.assertEqual(outcome.found, 6)
        self.assertEqual(outcome.skipped, 1)
        self.assertEqual(outcome.solved, 5)
        self.assertEqual(outcome.wrong, 0)
        # only the skipped contract and the non-contract file are left
        self.assertEqual(env.list_instances("CSEC"), ["contract-51.cct", "notes.txt"])
        self.assertEqual(env.list_instances("foodnstuff"), [])


if __name__ == "__main__":
    unittest.main()
