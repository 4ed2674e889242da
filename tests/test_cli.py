"""
Tests for CLI entry points.

These tests use a temporary store file (--data) so they never touch the
default schedule inside the package.
"""

import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

from unitime.cli import main
from unitime.storage import load_records


PAGE_A = """<html><body><h1>Orario delle lezioni di Analisi (2025/2026)</h1>
<table id="elenco"><tbody>
<tr><td>lunedì 16 febbraio 2026</td><td>09:00 - 11:00</td><td>Room A-101</td></tr>
<tr><td>domenica 22 febbraio 2026</td><td>10:00 - 11:00</td><td>Room A-101</td></tr>
<tr><td>lunedì 2 marzo 2026</td><td>TBD</td><td>Room A-101</td></tr>
</tbody></table></body></html>"""

PAGE_B = """<html><body><h1>Lesson schedule for Fisica</h1>
<table id="elenco"><tbody>
<tr><td>martedì 17 febbraio 2026</td><td>14:00 - 15:30</td><td>Aula 2</td></tr>
</tbody></table></body></html>"""


class TestCLI(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)
        self.data = self.dir / "schedule.json"
        (self.dir / "a.html").write_text(PAGE_A, encoding="utf-8")
        (self.dir / "b.html").write_text(PAGE_B, encoding="utf-8")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _main(self, *args: str) -> int:
        with redirect_stdout(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                main(["--data", str(self.data), *args])
        return ctx.exception.code

    def test_import_then_views(self) -> None:
        code = self._main("import", str(self.dir / "a.html"), str(self.dir / "b.html"))
        self.assertEqual(code, 0)

        records = load_records(self.data)
        self.assertEqual(len(records), 3)
        self.assertEqual({r.course_name: r.color_index for r in records}, {"Analisi": 0, "Fisica": 1})

        for command in (["courses"], ["weeks"], ["week", "1"], ["list"], ["stats"]):
            self.assertEqual(self._main(*command), 0, command)

    def test_second_import_continues_colors(self) -> None:
        self._main("import", str(self.dir / "a.html"))
        self._main("import", str(self.dir / "b.html"))
        records = load_records(self.data)
        self.assertEqual({r.course_name: r.color_index for r in records}, {"Analisi": 0, "Fisica": 1})

    def test_week_out_of_range(self) -> None:
        self._main("import", str(self.dir / "a.html"))
        self.assertEqual(self._main("week", "9"), 1)

    def test_remove_and_clear(self) -> None:
        self._main("import", str(self.dir / "a.html"), str(self.dir / "b.html"))

        self.assertEqual(self._main("remove", "Analisi"), 0)
        self.assertEqual({r.course_name for r in load_records(self.data)}, {"Fisica"})

        self.assertEqual(self._main("remove", ""), 1)

        self.assertEqual(self._main("clear"), 0)
        self.assertFalse(self.data.exists())

    def test_import_missing_file(self) -> None:
        self.assertEqual(self._main("import", str(self.dir / "nope.html")), 1)
        self.assertFalse(self.data.exists())

    def test_week_view_ignores_stored_entry_with_bad_time(self) -> None:
        self._main("import", str(self.dir / "a.html"))
        data = json.loads(self.data.read_text(encoding="utf-8"))
        data[0]["startTime"] = "9.00"
        self.data.write_text(json.dumps(data), encoding="utf-8")

        with self.assertLogs("unitime.storage", level="WARNING"):
            self.assertEqual(self._main("week", "1"), 0)

    def test_reimport_keeps_color_and_replaces_sessions(self) -> None:
        self._main("import", str(self.dir / "a.html"), str(self.dir / "b.html"))
        self._main("import", str(self.dir / "a.html"))

        records = load_records(self.data)
        self.assertEqual(len(records), 3)
        self.assertEqual({r.course_name: r.color_index for r in records}, {"Analisi": 0, "Fisica": 1})
        self.assertEqual(len({r.id for r in records}), 3)

    def test_remove_unknown_course(self) -> None:
        self._main("import", str(self.dir / "a.html"))
        self.assertEqual(self._main("remove", "Chimica"), 0)
        self.assertEqual(len(load_records(self.data)), 2)

    def test_views_on_empty_store(self) -> None:
        for command in (["courses"], ["weeks"], ["week"], ["list"], ["stats"]):
            self.assertEqual(self._main(*command), 0, command)


if __name__ == "__main__":
    unittest.main()
