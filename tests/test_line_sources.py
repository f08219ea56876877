from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from line_sources import LineSourceError, read_line_group, read_line_groups, read_line_groups_under


class TestLineSources(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, relpath: str, text: str) -> Path:
        p = self.root / relpath
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
        return p

    def test_reads_every_line_including_blank_ones(self) -> None:
        p = self._write("standalone.xml", "a\nb\n\n   \na\r\nc")
        g = read_line_group(p)
        self.assertEqual(g.name, "standalone.xml")
        self.assertEqual(g.lines, frozenset({"a", "b", "", "   ", "c"}))
        self.assertFalse(g.has_nested_groups())

    def test_non_utf8_file_is_a_line_source_error(self) -> None:
        p = self.root / "latin1.txt"
        p.write_bytes(b"ok\n\xff\xfe bad\n")
        with self.assertRaises(LineSourceError) as ctx:
            read_line_group(p)
        self.assertIn("not readable", str(ctx.exception))
        self.assertIsInstance(ctx.exception.__cause__, UnicodeDecodeError)

    def test_explicit_name_and_multiple_files(self) -> None:
        p1 = self._write("one.txt", "x\n")
        p2 = self._write("two.txt", "y\n")
        self.assertEqual(read_line_group(p1, name="core").name, "core")
        self.assertEqual([g.name for g in read_line_groups([p1, p2])], ["one.txt", "two.txt"])

    def test_missing_file(self) -> None:
        with self.assertRaises(LineSourceError):
            read_line_group(self.root / "nope.txt")

    def test_under_data_root_uses_relpath_as_name(self) -> None:
        self._write("profiles/full.txt", "x\ny\n")
        groups = read_line_groups_under(data_root=self.root, relpaths=["profiles/full.txt"])
        self.assertEqual(groups[0].name, "profiles/full.txt")
        self.assertEqual(groups[0].lines, frozenset({"x", "y"}))

    def test_under_data_root_refuses_escapes(self) -> None:
        self._write("inside.txt", "x\n")
        with self.assertRaises(LineSourceError):
            read_line_groups_under(data_root=self.root, relpaths=["/etc/passwd"])
        with self.assertRaises(LineSourceError):
            read_line_groups_under(data_root=self.root / "sub", relpaths=["../inside.txt"])


if __name__ == "__main__":
    unittest.main()
