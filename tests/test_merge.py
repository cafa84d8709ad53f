"""Tests for merging result files."""

import csv
import tempfile
import unittest
from pathlib import Path

from stream_audit.core.sink import ResultSink
from stream_audit.errors import NotFoundError
from stream_audit.merge import merge_csv_files
from stream_audit.models import MatchRecord


class TestMergeCsvFiles(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.folder = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def _write(self, name, text):
        (self.folder / name).write_text(text, encoding="utf-8")

    def test_header_once_then_rows_in_filename_order(self):
        self._write("b.csv", "H1;H2\nb1;b2\n")
        self._write("a.csv", "H1;H2\na1;a2\n")
        out = merge_csv_files(self.folder, self.folder / "merged.csv")
        self.assertEqual(
            out.read_text(encoding="utf-8").splitlines(),
            ["H1;H2", "a1;a2", "b1;b2"],
        )

    def test_default_output_name(self):
        self._write("a.csv", "H\n1\n")
        out = merge_csv_files(self.folder)
        self.assertEqual(out.parent, self.folder)
        self.assertTrue(out.name.startswith("merged-"))
        self.assertEqual(out.suffix, ".csv")

    def test_missing_trailing_newline(self):
        self._write("a.csv", "H\n1")
        self._write("b.csv", "H\n2")
        out = merge_csv_files(self.folder, self.folder / "m.csv")
        self.assertEqual(out.read_text(encoding="utf-8"), "H\n1\n2\n")

    def test_other_extensions_ignored(self):
        self._write("a.csv", "H\n1\n")
        self._write("notes.txt", "H\nnot data\n")
        out = merge_csv_files(self.folder, self.folder / "m.csv")
        self.assertEqual(out.read_text(encoding="utf-8").splitlines(), ["H", "1"])

    def test_existing_output_is_refused(self):
        self._write("a.csv", "H\n1\n")
        self._write("m.csv", "old\n")
        with self.assertRaises(NotFoundError):
            merge_csv_files(self.folder, self.folder / "m.csv")

    def test_no_inputs(self):
        with self.assertRaises(NotFoundError):
            merge_csv_files(self.folder)


def _record(site_id, embed):
    return MatchRecord(
        site_name="Team; A",
        site_url="https://t/a",
        site_id=site_id,
        site_owner="ann@contoso.com, Bob",
        page_name="Home.aspx",
        page_id="p1",
        webpart_title='Say "hi"',
        embed_code=embed,
    )


class TestMergeSinkOutput(unittest.TestCase):
    """Files written by ResultSink must come out of the merge field-for-field."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.folder = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def _sink_file(self, run_ts, *records):
        sink = ResultSink(self.folder, run_ts, write_header=True)
        for record in records:
            sink.accept(record)
        return sink.rollover()

    def _read(self, path):
        with path.open(encoding="utf-8", newline="") as fh:
            return list(csv.reader(fh, delimiter=";"))

    def test_line_breaks_inside_quoted_fields_survive(self):
        crlf = "<iframe\r\nsrc='https://web.microsoftstream.com/video/x'>"
        para = "<iframe title='a\u2028b' src='https://web.microsoftstream.com/video/y'>"
        other = "<iframe title='a\x0cb\x85c\rd' src='https://web.microsoftstream.com/video/z'>"
        self._sink_file("20261019120000", _record("s1", crlf), _record("s2", para))
        self._sink_file("20261019130000", _record("s3", other))

        out = merge_csv_files(self.folder, self.folder / "merged.csv")
        rows = self._read(out)

        self.assertEqual(rows[0], list(MatchRecord.HEADER))
        self.assertEqual(rows[1:], [
            list(_record("s1", crlf).as_row()),
            list(_record("s2", para).as_row()),
            list(_record("s3", other).as_row()),
        ])

    def test_crlf_row_terminators_preserved(self):
        self._sink_file("20261019120000", _record("s1", "<iframe>"))
        self._sink_file("20261019130000", _record("s2", "<iframe>"))
        out = merge_csv_files(self.folder, self.folder / "merged.csv")
        raw = out.read_bytes()
        self.assertEqual(raw.count(b"\r\n"), 3)
        self.assertNotIn(b"\n\n", raw)


if __name__ == "__main__":
    unittest.main()
