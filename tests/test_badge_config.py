from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from profile_readme.badge_config import load_badge_spec, parse_badge_spec
from profile_readme.config import ConfigError
from profile_readme.models import BadgeElement, BadgeSection


class BadgeConfigTests(unittest.TestCase):
    def test_load_yaml_document(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "badges.yaml"
            path.write_text(
                """
                languages:
                  message: Languages
                  color: "2b3137"
                  elements:
                    python:
                      label: Python
                      logo: python
                      labelColor: "000"
                      logoColor: white
                      topic: python
                    rust:
                      label: Rust
                      message: learning
                """,
                encoding="utf-8",
            )
            spec = load_badge_spec(path)

        self.assertEqual(
            spec,
            (
                BadgeSection(
                    name="languages",
                    message="Languages",
                    color="2b3137",
                    elements=(
                        BadgeElement(
                            key="python",
                            label="Python",
                            logo="python",
                            label_color="000",
                            logo_color="white",
                            topic="python",
                        ),
                        BadgeElement(key="rust", label="Rust", message="learning"),
                    ),
                ),
            ),
        )

    def test_json_documents_load_too(self) -> None:
        document = {"tools": {"message": "Tools", "elements": {"git": {"label": "Git", "topic": "git"}}}}
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "badges.json"
            path.write_text(json.dumps(document), encoding="utf-8")
            spec = load_badge_spec(path)
        self.assertEqual(spec[0].elements[0].topic, "git")

    def test_section_order_is_preserved(self) -> None:
        raw = {name: {"message": name, "elements": {}} for name in ("zeta", "alpha", "mid")}
        self.assertEqual([section.name for section in parse_badge_spec(raw)], ["zeta", "alpha", "mid"])

    def test_missing_file_is_fatal(self) -> None:
        with self.assertRaises(ConfigError):
            load_badge_spec(Path("/nonexistent/badges.yaml"))

    def test_malformed_documents_are_fatal(self) -> None:
        for raw in (
            ["not", "a", "mapping"],
            {"section": "not a mapping"},
            {"section": {"message": "S"}},
            {"section": {"message": "S", "elements": {"a": {"message": "no label"}}}},
        ):
            with self.subTest(raw=raw):
                with self.assertRaises(ConfigError):
                    parse_badge_spec(raw)

    def test_names_that_leave_the_output_directory_are_fatal(self) -> None:
        element = {"label": "X"}
        for raw in (
            {"../escaped": {"message": "S", "elements": {}}},
            {"..": {"message": "S", "elements": {}}},
            {".": {"message": "S", "elements": {}}},
            {"": {"message": "S", "elements": {}}},
            {"a\\b": {"message": "S", "elements": {}}},
            {"section": {"message": "S", "elements": {"../../etc/x": element}}},
            {"section": {"message": "S", "elements": {"nested/key": element}}},
            {"section": {"message": "S", "elements": {"..": element}}},
            {"section": {"message": "S", "elements": {"": element}}},
        ):
            with self.subTest(raw=raw):
                with self.assertRaises(ConfigError):
                    parse_badge_spec(raw)

    def test_colliding_badge_file_names_are_fatal(self) -> None:
        raw = {
            "a": {"message": "A", "elements": {"b_c": {"label": "One"}}},
            "a_b": {"message": "AB", "elements": {"c": {"label": "Two"}}},
        }
        with self.assertRaises(ConfigError) as ctx:
            parse_badge_spec(raw)
        self.assertIn("a_b_c.svg", str(ctx.exception))

    def test_section_file_colliding_with_element_file_is_fatal(self) -> None:
        raw = {
            "a": {"message": "A", "elements": {"b": {"label": "B"}}},
            "a_b": {"message": "AB", "elements": {}},
        }
        with self.assertRaises(ConfigError):
            parse_badge_spec(raw)

    def test_numeric_keys_become_strings(self) -> None:
        spec = parse_badge_spec({2024: {"message": "Year", "elements": {1: {"label": "One"}}}})
        self.assertEqual(spec[0].name, "2024")
        self.assertEqual(spec[0].elements[0].key, "1")

    def test_invalid_yaml_is_fatal(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "badges.yaml"
            path.write_text("a: [unclosed\n", encoding="utf-8")
            with self.assertRaises(ConfigError):
                load_badge_spec(path)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
