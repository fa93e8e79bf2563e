"""Stylesheet resolution and loading tests."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from splashmd.styles import StyleSheet, load_stylesheet


class TestBodyAfterSelector:
    def test_next_line_spaces_stripped(self) -> None:
        s = StyleSheet(("pre code .keyword {", "  color:#fff;  ", "}"))
        assert s.body_after_selector("keyword") == "color:#fff;"

    def test_missing_class(self, sheet: StyleSheet) -> None:
        assert sheet.body_after_selector("missing") == ""

    def test_from_fixture(self, sheet: StyleSheet) -> None:
        assert sheet.body_after_selector("string") == "color:red;"

    def test_only_first_body_line(self) -> None:
        s = StyleSheet.from_text("pre code .call {\n  color: blue;\n  font-weight: bold;\n}\n")
        assert s.body_after_selector("call") == "color:blue;"

    def test_selector_on_last_line(self) -> None:
        s = StyleSheet(("pre code .keyword {",))
        assert s.body_after_selector("keyword") == ""

    def test_selector_matched_as_substring(self) -> None:
        s = StyleSheet(("  pre code .type { /* types */", "color: green;"))
        assert s.body_after_selector("type") == "color:green;"

    def test_prefix_of_other_class_does_not_match(self, sheet: StyleSheet) -> None:
        assert sheet.body_after_selector("key") == ""

    def test_blank_lines_skipped(self) -> None:
        s = StyleSheet.from_text("pre code .number {\n\n  color: orange;\n}")
        assert s.body_after_selector("number") == "color:orange;"

    def test_empty_sheet(self) -> None:
        assert StyleSheet.empty().body_after_selector("keyword") == ""


class TestDefaultBlockStyle:
    def test_first_rule_body(self) -> None:
        s = StyleSheet(("pre code {", "background:#000;", "}"))
        assert s.default_block_style() == "background:#000;"

    def test_multiline_body_joined(self) -> None:
        s = StyleSheet.from_text("pre code {\n  color: #fff;\n  padding: 4px;\n}\n")
        assert s.default_block_style() == "color:#fff;padding:4px;"

    def test_only_first_block(self, sheet: StyleSheet) -> None:
        assert sheet.default_block_style() == "background:#000;"

    def test_unterminated(self) -> None:
        s = StyleSheet(("pre code {", "background:#000;"))
        assert s.default_block_style() is None

    def test_no_rules(self) -> None:
        assert StyleSheet(("/* nothing */",)).default_block_style() is None

    def test_empty_sheet(self) -> None:
        assert StyleSheet.empty().default_block_style() is None

    def test_lines_before_first_rule_ignored(self) -> None:
        s = StyleSheet(("/* header */", "pre code {", "color: red;", "}"))
        assert s.default_block_style() == "color:red;"


class TestLoadStylesheet:
    def test_bundled(self) -> None:
        s = load_stylesheet()
        assert s.default_block_style() is not None
        assert "background:#1a1a1a;" in s.default_block_style()
        assert s.body_after_selector("keyword") == "color:#e73289;"
        assert s.body_after_selector("dotAccess") != ""

    def test_from_file(self, tmp_path: Path) -> None:
        css = tmp_path / "theme.css"
        css.write_text("pre code .keyword {\n  color: pink;\n}\n")
        assert load_stylesheet(css).body_after_selector("keyword") == "color:pink;"

    def test_missing_file_degrades(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="splashmd.styles"):
            s = load_stylesheet(tmp_path / "nope.css")
        assert s == StyleSheet.empty()
        assert s.body_after_selector("keyword") == ""
        assert s.default_block_style() is None
        assert "nope.css" in caplog.text

    def test_undecodable_file_degrades(self, tmp_path: Path) -> None:
        css = tmp_path / "bad.css"
        css.write_bytes(b"\xff\xfe\xfa")
        assert load_stylesheet(css) == StyleSheet.empty()
