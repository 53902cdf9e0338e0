"""Tests for the extjson command-line interface."""

from __future__ import annotations

import contextlib
import io
import os
import sys
import tempfile
import unittest
from unittest import mock

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import bson

from extjson import __version__
from extjson._cli import main


def run_cli(argv):
    """Run main() and return (exit_code, stdout, stderr)."""
    out, err = io.StringIO(), io.StringIO()
    code = 0
    with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
        try:
            main(argv)
        except SystemExit as e:
            code = e.code
    return code, out.getvalue(), err.getvalue()


class TestCli(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)

    def _write(self, name: str, data: bytes) -> str:
        path = os.path.join(self._tmp.name, name)
        with open(path, "wb") as f:
            f.write(data)
        return path

    def test_version(self):
        code, out, _ = run_cli(["version"])
        self.assertEqual(code, 0)
        self.assertTrue(out.startswith("extjson {}".format(__version__)))

    def test_no_command(self):
        code, _, _ = run_cli([])
        self.assertEqual(code, 1)

    def test_canon_stream(self):
        path = self._write("dump.bson",
                           bson.encode({"a": 1}) + bson.encode({"b": [True]}))
        code, out, _ = run_cli(["canon", "--input", path])
        self.assertEqual(code, 0)
        self.assertEqual(out.splitlines(),
                         ['{"a":{"$numberInt":"1"}}', '{"b":[true]}'])

    def test_canon_hex(self):
        path = self._write("doc.hex", b"0C000000106100F9FFFFFF00\n")
        code, out, _ = run_cli(["canon", "--hex", "--input", path])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), '{"a":{"$numberInt":"-7"}}')

    def test_bad_hex(self):
        path = self._write("doc.hex", b"zz")
        code, _, err = run_cli(["canon", "--hex", "--input", path])
        self.assertEqual(code, 2)
        self.assertIn("bad hex input", err)

    def test_non_ascii_hex(self):
        path = self._write("doc.hex", "0C\u00e9".encode("utf-8"))
        code, _, err = run_cli(["canon", "--hex", "--input", path])
        self.assertEqual(code, 2)
        self.assertIn("bad hex input", err)

    def test_other_value_errors_are_not_hex_errors(self):
        path = self._write("doc.hex", b"0C000000106100F9FFFFFF00")
        with mock.patch("extjson._cli.bson_to_canonical", side_effect=ValueError("boom")):
            with self.assertRaises(ValueError):
                run_cli(["canon", "--hex", "--input", path])

    def test_invalid_bson(self):
        path = self._write("bad.bson", b"\x05\x00\x00\x00\x01")
        code, _, err = run_cli(["canon", "--input", path])
        self.assertEqual(code, 2)
        self.assertIn("[ERR_BSON]", err)

    def test_max_depth(self):
        path = self._write("deep.bson", bson.encode({"a": {"b": {"c": 1}}}))
        code, _, err = run_cli(["canon", "--max-depth", "1", "--input", path])
        self.assertEqual(code, 2)
        self.assertIn("[ERR_LIMIT_DEPTH]", err)


if __name__ == "__main__":
    unittest.main()
