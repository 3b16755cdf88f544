"""End-to-end tests for the file-backed lunr index."""

from __future__ import annotations

import json
import sys
import tempfile
import time
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from ConceptSearch.backends.base import BackendError
from ConceptSearch.backends.local import LocalIndexBackend
from ConceptSearch.config.local import LocalIndexConfig
from ConceptSearch.services.importer import BatchImporter
from ConceptSearch.services.query import QueryRunner
from ConceptSearch.sources.reader import read_records

CONCEPTS = [
    {
        "uri": "http://example.org/concept/zirkulation",
        "notation": ["AN 73000"],
        "prefLabel": {"de": "Zirkulation", "en": "Circulation"},
        "altLabel": {"de": ["Ausleihe"]},
    },
    {
        "notation": ["AN 10000"],
        "prefLabel": {"de": "Bibliothekswesen"},
    },
    {
        "uri": "http://example.org/concept/erwerbung",
        "notation": ["AN 50000"],
        "prefLabel": {"de": "Erwerbung", "en": "Acquisition"},
    },
]


def _config(index_path: Path, **overrides) -> LocalIndexConfig:
    values = {
        "index_path": str(index_path),
        "batch_size": 2,
        "language": "de",
        "fields": ("notation", "prefLabel", "searchKeys"),
        "store_fields": ("notation", "prefLabel"),
        "boost": {"notation": 5.0},
    }
    values.update(overrides)
    return LocalIndexConfig(**values)


class TestLocalIndexBackend(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.index_path = self.tmp / "index" / "concepts.json"
        self.source = self.tmp / "concepts.ndjson"
        self.source.write_text("\n".join(json.dumps(c) for c in CONCEPTS) + "\n", encoding="utf-8")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _import(self, **overrides):
        backend = LocalIndexBackend(_config(self.index_path, **overrides))
        return BatchImporter(backend=backend, batch_size=backend.batch_size).run(read_records(str(self.source)))

    def test_record_without_uri_is_not_indexed(self) -> None:
        stats = self._import()

        self.assertEqual(stats.read, 3)
        self.assertEqual(stats.submitted, 2)
        self.assertEqual(stats.skipped, 1)
        payload = json.loads(self.index_path.read_text(encoding="utf-8"))
        self.assertEqual(
            sorted(payload["store"]),
            ["http://example.org/concept/erwerbung", "http://example.org/concept/zirkulation"],
        )

    def test_search_distinctive_label(self) -> None:
        self._import()
        backend = LocalIndexBackend(_config(self.index_path))

        result = backend.search("Zirkulation", limit=10)

        self.assertEqual(result.total, 1)
        self.assertEqual(result.hits[0].id, "http://example.org/concept/zirkulation")
        self.assertEqual(result.hits[0].label, "Zirkulation")
        self.assertEqual(result.hits[0].notation, "AN 73000")

    def test_prefix_search(self) -> None:
        self._import()
        result = LocalIndexBackend(_config(self.index_path)).search("Erwerb", limit=10)

        self.assertEqual([hit.id for hit in result.hits], ["http://example.org/concept/erwerbung"])

    def test_infix_search_through_suffix_keys(self) -> None:
        self._import()
        result = LocalIndexBackend(_config(self.index_path)).search("kulation", limit=10)

        self.assertEqual(result.total, 1)
        self.assertEqual(result.hits[0].id, "http://example.org/concept/zirkulation")

    def test_no_match_returns_empty_result(self) -> None:
        self._import()
        result = LocalIndexBackend(_config(self.index_path)).search("Quantenphysik", limit=10)

        self.assertEqual(result.hits, ())
        self.assertEqual(result.total, 0)

    def test_runner_on_imported_index(self) -> None:
        self._import()
        runner = QueryRunner(backend=LocalIndexBackend(_config(self.index_path)), display_limit=3)

        report = runner.run("Zirkulation")

        self.assertIn("http://example.org/concept/zirkulation", [hit.id for hit in report.shown])
        self.assertEqual(report.result.total, 1)

    def test_empty_import_writes_searchable_index(self) -> None:
        self.source.write_text(json.dumps(CONCEPTS[1]) + "\n", encoding="utf-8")
        stats = self._import()

        self.assertEqual(stats.submitted, 0)
        result = LocalIndexBackend(_config(self.index_path)).search("Bibliothekswesen", limit=10)
        self.assertEqual(result.hits, ())
        self.assertEqual(result.total, 0)

    def test_duplicate_uri_is_rejected(self) -> None:
        self.source.write_text(
            "\n".join(json.dumps(c) for c in [CONCEPTS[0], CONCEPTS[0]]) + "\n",
            encoding="utf-8",
        )
        stats = self._import()

        self.assertEqual(stats.submitted, 1)
        self.assertEqual(stats.failed, 1)

    def test_recreate_removes_previous_snapshot(self) -> None:
        self._import()
        backend = LocalIndexBackend(_config(self.index_path))

        backend.recreate()

        self.assertFalse(self.index_path.exists())

    def test_search_without_index_file_fails(self) -> None:
        with self.assertRaisesRegex(BackendError, "run create first"):
            LocalIndexBackend(_config(self.index_path)).search("Zirkulation", limit=3)

    def test_submit_before_recreate_fails(self) -> None:
        backend = LocalIndexBackend(_config(self.index_path))
        with self.assertRaises(BackendError):
            backend.submit([{"uri": "http://example.org/x"}])

    def test_single_typo_still_matches(self) -> None:
        self._import()
        backend = LocalIndexBackend(_config(self.index_path))

        for query in ("Zirkulaton", "Zirkulatoin"):
            with self.subTest(query=query):
                result = backend.search(query, limit=10)
                self.assertEqual(result.total, 1)
                self.assertEqual(result.hits[0].id, "http://example.org/concept/zirkulation")

    def test_and_requires_every_term(self) -> None:
        self._import()

        both = LocalIndexBackend(_config(self.index_path)).search("Zirkulation Erwerbung", limit=10)
        self.assertEqual(both.total, 0)

        narrowed = LocalIndexBackend(_config(self.index_path)).search("Zirkulation AN", limit=10)
        self.assertEqual([hit.id for hit in narrowed.hits], ["http://example.org/concept/zirkulation"])

    def test_or_accepts_any_term(self) -> None:
        self._import(combine_with="OR")
        backend = LocalIndexBackend(_config(self.index_path, combine_with="OR"))

        result = backend.search("Zirkulation Erwerbung", limit=10)

        self.assertEqual(
            sorted(hit.id for hit in result.hits),
            ["http://example.org/concept/erwerbung", "http://example.org/concept/zirkulation"],
        )

    def test_long_compound_term_finishes_quickly(self) -> None:
        records = [
            {
                "uri": f"http://example.org/concept/forschung/{i}",
                "notation": [f"AN {i}"],
                "prefLabel": {"de": f"Zirkulationsforschung {i}"},
            }
            for i in range(5)
        ]
        self.source.write_text("\n".join(json.dumps(r) for r in records) + "\n", encoding="utf-8")
        self._import()
        backend = LocalIndexBackend(_config(self.index_path))

        started = time.perf_counter()
        result = backend.search("Zirkulationsforschungsgemeinschaft", limit=10)
        elapsed = time.perf_counter() - started

        self.assertLess(elapsed, 5.0)
        self.assertEqual(result.total, 0)

    def test_edit_distance(self) -> None:
        backend = LocalIndexBackend(_config(self.index_path))
        self.assertEqual(backend.edit_distance("zirkulation"), 2)
        self.assertEqual(backend.edit_distance("ab"), 0)
        self.assertEqual(backend.edit_distance("abc"), 1)
        self.assertEqual(backend.edit_distance("zirkulationsforschungsgemeinschaft"), 2)

        absolute = LocalIndexBackend(_config(self.index_path, fuzzy=3.0, max_fuzzy=2))
        self.assertEqual(absolute.edit_distance("zirkulation"), 2)

        unchecked = LocalIndexBackend(_config(self.index_path, max_fuzzy=6))
        self.assertEqual(unchecked.edit_distance("zirkulationsforschungsgemeinschaft"), 2)


if __name__ == "__main__":
    unittest.main()
