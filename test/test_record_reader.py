"""Tests for reading records from files and URLs."""

from __future__ import annotations

import json
import sys
import tempfile
import unittest
from pathlib import Path

import requests

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from ConceptSearch.sources.reader import RecordSourceError, detect_format, is_url, read_records


class _FakeResponse:
    def __init__(self, body: str, content_type: str = "application/json") -> None:
        self._body = body
        self.headers = {"Content-Type": content_type}
        self.closed = False

    @property
    def text(self) -> str:
        return self._body

    def iter_lines(self, decode_unicode: bool = False):
        yield from self._body.splitlines()

    def close(self) -> None:
        self.closed = True


class _FakeClient:
    def __init__(self, response: _FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.urls: list[str] = []

    def get(self, url: str) -> _FakeResponse:
        self.urls.append(url)
        if self.error:
            raise self.error
        assert self.response is not None
        return self.response

    def close(self) -> None:
        return


class TestReadRecordsFromFile(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_ndjson_skips_blank_lines(self) -> None:
        path = self.tmp / "concepts.ndjson"
        path.write_text('{"uri": "a"}\n\n  \n{"uri": "b"}\n', encoding="utf-8")

        self.assertEqual(list(read_records(str(path))), [{"uri": "a"}, {"uri": "b"}])

    def test_json_array(self) -> None:
        path = self.tmp / "concepts.json"
        path.write_text(json.dumps([{"uri": "a"}, {"uri": "b"}]), encoding="utf-8")

        self.assertEqual(list(read_records(str(path))), [{"uri": "a"}, {"uri": "b"}])

    def test_json_single_object(self) -> None:
        path = self.tmp / "concept.json"
        path.write_text(json.dumps({"uri": "a"}), encoding="utf-8")

        self.assertEqual(list(read_records(str(path))), [{"uri": "a"}])

    def test_explicit_format_overrides_extension(self) -> None:
        path = self.tmp / "concepts.txt"
        path.write_text('{"uri": "a"}\n{"uri": "b"}\n', encoding="utf-8")

        self.assertEqual(len(list(read_records(str(path), fmt="ndjson"))), 2)

    def test_records_are_read_lazily(self) -> None:
        path = self.tmp / "concepts.ndjson"
        path.write_text('{"uri": "a"}\nnot json\n', encoding="utf-8")
        records = read_records(str(path))

        self.assertEqual(next(records), {"uri": "a"})
        with self.assertRaisesRegex(RecordSourceError, "line 2"):
            next(records)

    def test_invalid_json_document(self) -> None:
        path = self.tmp / "concepts.json"
        path.write_text("[{", encoding="utf-8")

        with self.assertRaises(RecordSourceError):
            list(read_records(str(path)))

    def test_missing_file(self) -> None:
        with self.assertRaisesRegex(RecordSourceError, "Cannot read"):
            list(read_records(str(self.tmp / "missing.ndjson")))


class TestReadRecordsFromUrl(unittest.TestCase):
    def test_ndjson_content_type(self) -> None:
        response = _FakeResponse('{"uri": "a"}\n{"uri": "b"}\n', content_type="application/x-ndjson; charset=utf-8")
        client = _FakeClient(response)

        records = list(read_records("https://example.org/export", client=client))

        self.assertEqual(records, [{"uri": "a"}, {"uri": "b"}])
        self.assertEqual(client.urls, ["https://example.org/export"])
        self.assertTrue(response.closed)

    def test_json_by_extension(self) -> None:
        client = _FakeClient(_FakeResponse(json.dumps([{"uri": "a"}]), content_type="text/plain"))

        self.assertEqual(list(read_records("http://example.org/concepts.json", client=client)), [{"uri": "a"}])

    def test_http_error_becomes_source_error(self) -> None:
        client = _FakeClient(error=requests.exceptions.HTTPError("404 Client Error"))

        with self.assertRaisesRegex(RecordSourceError, "Cannot fetch"):
            list(read_records("http://example.org/concepts.ndjson", client=client))


class TestFormatDetection(unittest.TestCase):
    def test_detect_format(self) -> None:
        self.assertEqual(detect_format("concepts.ndjson"), "ndjson")
        self.assertEqual(detect_format("concepts.jsonl"), "ndjson")
        self.assertEqual(detect_format("concepts.json"), "json")
        self.assertEqual(detect_format("https://example.org/api?x=1", "application/x-ndjson"), "ndjson")
        self.assertEqual(detect_format("https://example.org/api"), "json")

    def test_is_url(self) -> None:
        self.assertTrue(is_url("https://example.org/a.ndjson"))
        self.assertFalse(is_url("/tmp/a.ndjson"))
        self.assertFalse(is_url("C:/data/a.ndjson"))


if __name__ == "__main__":
    unittest.main()
