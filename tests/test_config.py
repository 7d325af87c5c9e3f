import os
import tempfile
import unittest
from pathlib import Path

from pydantic import ValidationError

from subsidy_links.config import MatchingSettings, Settings, find_config, load_settings


class TestSettings(unittest.TestCase):
    def test_defaults(self) -> None:
        settings = Settings()
        self.assertEqual(settings.matching.min_confidence, 0.6)
        self.assertEqual(settings.matching.organization_min_confidence, 0.75)
        self.assertEqual(settings.matching.min_key_length, 3)
        self.assertEqual(settings.matching.max_contexts, 5)
        self.assertEqual(settings.data.years, [])

    def test_load_yaml(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            tmp = Path(tmpdir)
            path = tmp / "config.yaml"
            path.write_text(
                "data:\n"
                f"  snapshot_dir: {tmp / 'snapshots'}\n"
                "  years: [2022, 2023]\n"
                "matching:\n"
                "  min_confidence: 0.7\n",
                encoding="utf-8",
            )
            settings = Settings.load(path)

            self.assertEqual(settings.data.snapshot_dir, (tmp / "snapshots").resolve())
        self.assertEqual(settings.data.years, ["2022", "2023"])
        self.assertEqual(settings.matching.min_confidence, 0.7)
        self.assertEqual(settings.matching.max_contexts, 5)

    def test_empty_yaml(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yaml"
            path.write_text("", encoding="utf-8")
            settings = Settings.load(path)
        self.assertEqual(settings.matching.min_confidence, 0.6)

    def test_rejects_out_of_range_confidence(self) -> None:
        with self.assertRaises(ValidationError):
            MatchingSettings(min_confidence=1.5)
        with self.assertRaises(ValidationError):
            MatchingSettings(min_key_length=0)


class TestFindConfig(unittest.TestCase):
    def test_explicit_missing_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            with self.assertRaises(FileNotFoundError):
                find_config(Path(tmpdir) / "nope.yaml")

    def test_cwd_lookup(self) -> None:
        previous = os.getcwd()
        with tempfile.TemporaryDirectory() as tmpdir:
            try:
                os.chdir(tmpdir)
                self.assertIsNone(find_config(None))
                self.assertEqual(load_settings().matching.min_confidence, 0.6)

                Path(tmpdir, "config.yml").write_text(
                    "matching:\n  min_key_length: 4\n", encoding="utf-8"
                )
                self.assertEqual(find_config(None).name, "config.yml")
                self.assertEqual(load_settings().matching.min_key_length, 4)
            finally:
                os.chdir(previous)


if __name__ == "__main__":
    unittest.main()
