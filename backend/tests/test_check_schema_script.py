"""Tests for the schema check command line script."""

from __future__ import annotations

import contextlib
import importlib.util
import io
import json
import tempfile
import unittest
from pathlib import Path

SCRIPT_PATH = Path(__file__).resolve().parents[1] / "scripts" / "check_schema.py"


def _load_script():
    loader_spec = importlib.util.spec_from_file_location("check_schema", SCRIPT_PATH)
    module = importlib.util.module_from_spec(loader_spec)
    loader_spec.loader.exec_module(module)
    return module


class CheckSchemaScriptTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.script = _load_script()

    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def _write(self, payload: object) -> str:
        path = Path(self.tmp.name) / "schema.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        return str(path)

    def _run(self, *argv: str) -> tuple[int, str]:
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = self.script.main(list(argv))
        return code, out.getvalue()

    def test_incomplete_schema_exits_with_one(self) -> None:
        code, output = self._run(self._write({"name": "Cities"}))

        self.assertEqual(code, 1)
        self.assertIn("status: incomplete", output)
        self.assertIn("missing: schema.wikibase", output)

    def test_complete_schema_in_request_envelope_exits_with_zero(self) -> None:
        path = self._write(
            {
                "mapping": {
                    "name": "Cities",
                    "wikibase": "https://www.wikidata.org",
                    "item": {"terms": {"labels": {"en": {"columnName": "city", "dataType": "VARCHAR"}}}},
                }
            }
        )

        code, output = self._run(path, "--json")

        self.assertEqual(code, 0)
        report = json.loads(output)
        self.assertEqual(report["status"], "complete")
        self.assertEqual(report["missingPaths"], [])

    def test_unreadable_file_exits_with_two(self) -> None:
        code, _ = self._run(str(Path(self.tmp.name) / "missing.json"))

        self.assertEqual(code, 2)


if __name__ == "__main__":
    unittest.main()
