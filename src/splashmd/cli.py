"""Command-line interface for splashmd."""

from __future__ import annotations

import argparse
import logging
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from splashmd.errors import UnbalancedFenceError, UnknownLanguageError

CONFIG_NAME = "splashmd.toml"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    class_prefix: str
    language: str
    inline: bool
    stylesheet: Path | None
    strip_language_tag: bool
    highlight: str | None
    strict: bool
    watch: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="splashmd",
        description="Highlight fenced code blocks in Markdown as HTML",
    )
    p.add_argument("input", help="Input Markdown file (or source file with --highlight)")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument("--prefix", default=None, metavar="PREFIX", help="CSS class prefix")
    p.add_argument(
        "-l",
        "--language",
        default=None,
        metavar="LANG",
        help="Grammar for blocks with no language tag (default: swift)",
    )
    p.add_argument(
        "--class-mode",
        action="store_true",
        help="Emit CSS classes instead of inline styles",
    )
    p.add_argument("--stylesheet", metavar="FILE", help="Stylesheet for inline styles")
    p.add_argument(
        "--strip-language-tag",
        action="store_true",
        help="Drop a leading language tag line from highlighted blocks",
    )
    p.add_argument(
        "--highlight",
        metavar="LANG",
        help="Treat input as raw source code in LANG instead of Markdown",
    )
    p.add_argument("--strict", action="store_true", help="Fail on an unclosed code fence")
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument("--watch", action="store_true", help="Watch for changes and re-render")
    p.add_argument("--debug", action="store_true", help="Dump token streams to stderr")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags. Raises UnknownLanguageError for a
    language no grammar answers to.
    """
    from splashmd.grammar import grammar_for_name

    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)
    cfg = config.get("render")
    if not isinstance(cfg, dict):
        cfg = {}

    class_prefix = ""
    if isinstance(cfg.get("class_prefix"), str):
        class_prefix = cfg["class_prefix"]
    if args.prefix is not None:
        class_prefix = args.prefix

    language = "swift"
    if isinstance(cfg.get("language"), str):
        language = cfg["language"]
    if args.language is not None:
        language = args.language
    language = grammar_for_name(language).name

    inline = True
    if isinstance(cfg.get("inline"), bool):
        inline = cfg["inline"]
    if args.class_mode:
        inline = False

    # Config stylesheets are relative to the document
    stylesheet: Path | None = None
    if isinstance(cfg.get("stylesheet"), str):
        stylesheet = input_dir / cfg["stylesheet"]
    if args.stylesheet:
        stylesheet = Path(args.stylesheet)

    strip_language_tag = False
    if isinstance(cfg.get("strip_language_tag"), bool):
        strip_language_tag = cfg["strip_language_tag"]
    if args.strip_language_tag:
        strip_language_tag = True

    highlight = grammar_for_name(args.highlight).name if args.highlight else None

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        class_prefix=class_prefix,
        language=language,
        inline=inline,
        stylesheet=stylesheet,
        strip_language_tag=strip_language_tag,
        highlight=highlight,
        strict=args.strict,
        watch=args.watch,
        debug=args.debug,
    )


def render_file(options: CliOptions) -> str:
    """Read the input file and render it to HTML."""
    from splashmd.debug import dump_blocks, dump_fragments
    from splashmd.grammar import grammar_for_name
    from splashmd.highlighter import SyntaxHighlighter
    from splashmd.markdown import MarkdownDecorator, find_unbalanced_fence
    from splashmd.render import HTMLOutputFormat
    from splashmd.styles import load_stylesheet

    source = options.input_file.read_text(encoding="utf-8")
    stylesheet = load_stylesheet(options.stylesheet)

    if options.highlight is not None:
        grammar = grammar_for_name(options.highlight)
        fmt = HTMLOutputFormat(options.class_prefix, stylesheet, options.inline)
        highlighter = SyntaxHighlighter(fmt, grammar)
        if options.debug:
            dump_fragments(highlighter.fragments(source), file=sys.stderr)
        return highlighter.highlight(source)

    if options.strict:
        position = find_unbalanced_fence(source)
        if position is not None:
            raise UnbalancedFenceError("unclosed code fence", position, source)

    decorator = MarkdownDecorator(
        options.class_prefix,
        options.language,
        stylesheet,
        inline=options.inline,
        strip_language_tag=options.strip_language_tag,
    )
    if options.debug:
        dump_blocks(source, decorator.grammar, file=sys.stderr)
    return decorator.decorate(source)


def watch_loop(options: CliOptions) -> None:
    """Poll input file for changes, re-render on each modification."""
    last_mtime = 0.0
    print(f"Watching {options.input_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = options.input_file.stat().st_mtime
            except OSError:
                time.sleep(0.5)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                try:
                    html = render_file(options)
                    if options.output_file:
                        options.output_file.write_text(html, encoding="utf-8")
                    else:
                        sys.stdout.write(html)
                        sys.stdout.flush()
                    print(f"Rendered {options.input_file}", file=sys.stderr)
                except UnbalancedFenceError as exc:
                    print(exc.format(str(options.input_file)), file=sys.stderr)
                except (OSError, UnicodeDecodeError) as exc:
                    print(f"error: {exc}", file=sys.stderr)
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        options = resolve_options(args)
    except UnknownLanguageError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.watch:
        watch_loop(options)
        return 0

    try:
        html = render_file(options)
    except UnbalancedFenceError as exc:
        print(exc.format(str(options.input_file)), file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.output_file:
        options.output_file.write_text(html, encoding="utf-8")
    else:
        sys.stdout.write(html)

    return 0
