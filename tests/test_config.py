"""Tests for TOML config file loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from splashmd.cli import build_parser, load_config, resolve_options
from splashmd.errors import UnknownLanguageError


def _options(tmp_path: Path, *flags: str):
    doc = tmp_path / "doc.md"
    doc.write_text("")
    ns = build_parser().parse_args([str(doc), *flags])
    return resolve_options(ns)


class TestLoadConfig:
    def test_missing_config_returns_empty(self, tmp_path: Path) -> None:
        assert load_config(None, tmp_path) == {}

    def test_explicit_path(self, tmp_path: Path) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text('[render]\nclass_prefix = "x-"\n')
        result = load_config(cfg, tmp_path)
        assert result["render"] == {"class_prefix": "x-"}

    def test_auto_discover_splashmd_toml(self, tmp_path: Path) -> None:
        cfg = tmp_path / "splashmd.toml"
        cfg.write_text('[render]\nlanguage = "kotlin"\n')
        result = load_config(None, tmp_path)
        assert result["render"] == {"language": "kotlin"}


class TestDefaults:
    def test_without_config(self, tmp_path: Path) -> None:
        opts = _options(tmp_path)
        assert opts.class_prefix == ""
        assert opts.language == "swift"
        assert opts.inline is True
        assert opts.stylesheet is None
        assert opts.strip_language_tag is False
        assert opts.highlight is None


class TestConfigMerge:
    def test_config_values(self, tmp_path: Path) -> None:
        (tmp_path / "splashmd.toml").write_text(
            "[render]\n"
            'class_prefix = "hl-"\n'
            'language = "JS"\n'
            "inline = false\n"
            'stylesheet = "theme.css"\n'
            "strip_language_tag = true\n"
        )
        opts = _options(tmp_path)
        assert opts.class_prefix == "hl-"
        assert opts.language == "javascript"
        assert opts.inline is False
        assert opts.stylesheet == tmp_path / "theme.css"
        assert opts.strip_language_tag is True

    def test_cli_overrides_config(self, tmp_path: Path) -> None:
        (tmp_path / "splashmd.toml").write_text(
            '[render]\nclass_prefix = "hl-"\nlanguage = "dart"\nstylesheet = "a.css"\n'
        )
        opts = _options(tmp_path, "--prefix", "", "-l", "yml", "--stylesheet", "b.css")
        assert opts.class_prefix == ""
        assert opts.language == "yaml"
        assert opts.stylesheet == Path("b.css")

    def test_class_mode_flag_overrides_inline(self, tmp_path: Path) -> None:
        (tmp_path / "splashmd.toml").write_text("[render]\ninline = true\n")
        assert _options(tmp_path, "--class-mode").inline is False

    def test_wrong_types_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "splashmd.toml").write_text('[render]\ninline = "no"\nclass_prefix = 3\n')
        opts = _options(tmp_path)
        assert opts.inline is True
        assert opts.class_prefix == ""

    def test_unknown_config_language(self, tmp_path: Path) -> None:
        (tmp_path / "splashmd.toml").write_text('[render]\nlanguage = "cobol"\n')
        with pytest.raises(UnknownLanguageError):
            _options(tmp_path)

    def test_explicit_config_flag(self, tmp_path: Path) -> None:
        cfg = tmp_path / "alt.toml"
        cfg.write_text('[render]\nclass_prefix = "alt-"\n')
        opts = _options(tmp_path, "--config", str(cfg))
        assert opts.class_prefix == "alt-"
