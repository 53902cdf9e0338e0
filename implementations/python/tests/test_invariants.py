"""Short seeded run of tools/invariants_runner.py."""

from __future__ import annotations

import contextlib
import importlib.util
import io
import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import bson

_RUNNER = os.path.join(os.path.dirname(__file__), "..", "..", "..", "tools",
                       "invariants_runner.py")


def load_runner():
    spec = importlib.util.spec_from_file_location("invariants_runner", _RUNNER)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)  # seeds random from EXTJSON_SEED
    return module


class TestInvariantsRunner(unittest.TestCase):
    def test_generated_code_encodes(self):
        runner = load_runner()
        for _ in range(500):
            doc = {"c": runner.Code(runner.rand_code(), runner.gen_doc(1)),
                   "r": runner.Regex(runner.rand_code(), "i")}
            self.assertNotIn("\x00", str(doc["c"]))
            bson.encode(doc)

    def test_default_seed_passes(self):
        runner = load_runner()
        runner.TRIALS = 200
        with contextlib.redirect_stdout(io.StringIO()) as out:
            self.assertEqual(runner.main(), 0)
        self.assertIn("OK: invariants passed", out.getvalue())


if __name__ == "__main__":
    unittest.main()
