"""Tests for layered config parsing and validation."""

import os
import sys
import tempfile
import unittest
from copy import deepcopy
from pathlib import Path
from unittest.mock import patch

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from ConceptSearch.config import load_config, load_config_with_defaults, parse_config_dict, with_backend, with_display_limit


def _base_raw_config() -> dict:
    return {
        "log": {"level": "INFO", "to_file": False, "dir": "log"},
        "backend": {"name": "local", "display_limit": 3},
        "local": {
            "index_path": "index/concepts.json",
            "batch_size": 1000,
            "language": "de",
            "fields": ["notation", "prefLabel", "searchKeys"],
            "store_fields": ["notation", "prefLabel"],
            "boost": {"notation": 5},
        },
        "typesense": {"api_key_env": "TYPESENSE_API_KEY", "collection": "test"},
    }


class TestConfigLayering(unittest.TestCase):
    def test_parse_success_nested_access(self) -> None:
        cfg = parse_config_dict(_base_raw_config())

        self.assertEqual(cfg.runtime.level, "INFO")
        self.assertEqual(cfg.backend.name, "local")
        self.assertEqual(cfg.backend.display_limit, 3)
        self.assertEqual(cfg.local.fields, ("notation", "prefLabel", "searchKeys"))
        self.assertEqual(cfg.local.boost, {"notation": 5.0})
        self.assertEqual(cfg.source.format, "auto")
        self.assertEqual(cfg.typesense.batch_size, 10000)
        self.assertEqual(cfg.meilisearch.batch_size, 1000)

    def test_repository_default_config_parses(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            cfg = load_config(REPO_ROOT / "config" / "default.yml")
        self.assertEqual(cfg.backend.name, "local")
        self.assertEqual(cfg.local.batch_size, 1000)

    def test_backend_name_is_normalized(self) -> None:
        raw = _base_raw_config()
        raw["backend"]["name"] = " Local "
        self.assertEqual(parse_config_dict(raw).backend.name, "local")

    def test_unknown_backend_error_contains_key(self) -> None:
        raw = _base_raw_config()
        raw["backend"]["name"] = "solr"
        with self.assertRaisesRegex(ValueError, "backend\\.name"):
            parse_config_dict(raw)

    def test_missing_backend_section(self) -> None:
        raw = _base_raw_config()
        del raw["backend"]
        with self.assertRaisesRegex(ValueError, "backend"):
            parse_config_dict(raw)

    def test_typesense_selected_requires_api_key(self) -> None:
        raw = with_backend(_base_raw_config(), "typesense")
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaisesRegex(ValueError, "TYPESENSE_API_KEY environment variable not set"):
                parse_config_dict(raw)

    def test_typesense_api_key_from_env(self) -> None:
        raw = with_backend(_base_raw_config(), "typesense")
        with patch.dict(os.environ, {"TYPESENSE_API_KEY": "xyz"}, clear=False):
            cfg = parse_config_dict(raw)
        self.assertEqual(cfg.backend.name, "typesense")
        self.assertEqual(cfg.typesense.api_key, "xyz")

    def test_typesense_key_not_required_when_not_selected(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            cfg = parse_config_dict(_base_raw_config())
        self.assertEqual(cfg.typesense.api_key, "")

    def test_local_batch_size_type_error_contains_key(self) -> None:
        raw = _base_raw_config()
        raw["local"]["batch_size"] = "1000"
        with self.assertRaisesRegex(TypeError, "local\\.batch_size"):
            parse_config_dict(raw)

    def test_local_unknown_field(self) -> None:
        raw = _base_raw_config()
        raw["local"]["fields"] = ["notation", "scopeNote"]
        with self.assertRaisesRegex(ValueError, "local\\.fields"):
            parse_config_dict(raw)

    def test_local_boost_must_refer_to_indexed_field(self) -> None:
        raw = _base_raw_config()
        raw["local"]["boost"] = {"altLabel": 2}
        with self.assertRaisesRegex(ValueError, "local\\.boost\\.altLabel"):
            parse_config_dict(raw)

    def test_local_max_fuzzy_is_capped_at_two(self) -> None:
        raw = _base_raw_config()
        raw["local"]["max_fuzzy"] = 6
        with self.assertRaisesRegex(ValueError, "local\\.max_fuzzy"):
            parse_config_dict(raw)

    def test_local_max_fuzzy_defaults_to_two(self) -> None:
        cfg = parse_config_dict(_base_raw_config())
        self.assertEqual(cfg.local.max_fuzzy, 2)

    def test_source_format_validation(self) -> None:
        raw = deepcopy(_base_raw_config())
        raw["source"] = {"format": "xml"}
        with self.assertRaisesRegex(ValueError, "source\\.format"):
            parse_config_dict(raw)

    def test_with_display_limit(self) -> None:
        cfg = with_display_limit(parse_config_dict(_base_raw_config()), 10)
        self.assertEqual(cfg.backend.display_limit, 10)
        with self.assertRaisesRegex(ValueError, "backend\\.display_limit"):
            with_display_limit(cfg, 0)

    def test_override_file_is_merged_over_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            override = Path(tmp) / "override.yml"
            override.write_text("local:\n  language: en\nbackend:\n  display_limit: 5\n", encoding="utf-8")
            with patch.dict(os.environ, {}, clear=True):
                cfg = load_config_with_defaults(override, default_path=REPO_ROOT / "config" / "default.yml")

        self.assertEqual(cfg.local.language, "en")
        self.assertEqual(cfg.local.batch_size, 1000)
        self.assertEqual(cfg.backend.display_limit, 5)
        self.assertEqual(cfg.backend.name, "local")


if __name__ == "__main__":
    unittest.main()
