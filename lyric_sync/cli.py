"""Command-line interface for the lyrics converter.

WHY: Users need a simple way to convert lyrics files from the terminal,
for example turning a word-synced TTML into enhanced LRC with duet tags,
or a plain text file into a JSON project to sync later. The CLI wires
together source detection, author loading, parsing, formatting and file
saving behind a single command.

HOW: Uses argparse to accept an input file, the singer list, the import
mode, output format selection, and the LRC/TTML export switches.
Status messages go to stderr; output files are saved next to the source
(or to --output-dir).

RULES:
- Positional argument: input lyrics file path
- Source format comes from --source-format, else from the extension
- Authors: --authors "A, B" or --authors-file; otherwise auto-discovers
  the companion file {stem}-authors.txt
- --formats: comma-separated formatter keys (default: all registered)
- Output naming: {stem}{suffix}, numeric suffix for conflicts (song-2.lrc)
- Status output goes to stderr (not stdout)
- Unknown formats, missing files and unparsable sources exit with 1
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from lyric_sync.config import (
    DEFAULT_WORD_BY_WORD,
    LOG_FORMAT,
    LOG_LEVEL,
    SOURCE_FORMAT_KEYS,
    detect_source_format,
)
from lyric_sync.core.authors import AuthorRegistry
from lyric_sync.core.companions import load_authors, parse_author_list, resolve_companion_files
from lyric_sync.formatters import (
    FORMATTERS,
    LRCExportOptions,
    TTMLExportOptions,
    create_formatter,
    resolve_format_keys,
)
from lyric_sync.formatters.base import FormatterOutput
from lyric_sync.parsers import load_document


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _resolve_output_path(
    stem: str,
    suffix: str,
    output_dir: Path,
) -> Path:
    """Resolve the output file path, adding numeric suffix on conflict.

    WHY: Users may run the converter multiple times on the same file.
    Overwriting previous output would lose work. Numeric suffixes
    (song-Synced-2.json) prevent data loss.

    HOW: Check if {stem}{suffix} exists. If so, increment a counter
    and insert it before the file extension until a free name is found.

    RULES:
    - First attempt: {stem}{suffix} (e.g. song.lrc)
    - Conflict: split suffix at last dot, insert counter before extension
      (e.g. song-2.lrc, song-Synced-2.json)
    - Counter starts at 2 and increments
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx >= 0:
        suffix_name = suffix[:dot_idx]
        suffix_ext = suffix[dot_idx:]
    else:
        suffix_name = suffix
        suffix_ext = ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(
    output: FormatterOutput,
    stem: str,
    output_dir: Path,
) -> Path:
    """Write one formatter output as UTF-8 and return its path."""
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _load_registry(input_path: Path, args: argparse.Namespace) -> AuthorRegistry:
    """Build the author registry from flags or the companion file.

    RULES:
    - --authors wins over --authors-file
    - --authors-file wins over the auto-discovered {stem}-authors.txt
    - No authors at all gives an empty registry
    """
    if args.authors:
        names = parse_author_list(args.authors)
        _status("  Authors: {} (explicit)".format(", ".join(names)))
    elif args.authors_file:
        names = load_authors(args.authors_file)
        _status("  Authors: {} (explicit file)".format(args.authors_file))
    else:
        companion = resolve_companion_files(input_path)
        names = load_authors(companion.authors_path) if companion.authors_path else []
        if companion.authors_path:
            _status("  Authors: {} (auto-discovered)".format(companion.authors_path))
    return AuthorRegistry.from_names(names)


def _lrc_options(args: argparse.Namespace) -> LRCExportOptions:
    return LRCExportOptions(
        keep_seconds=args.keep_seconds,
        keep_authors=args.lrc_authors,
        keep_word_by_word=args.lrc_word_by_word,
        put_background_in_new_line=args.background_new_line,
        add_paragraph_name=args.paragraph_names,
        walaoke=args.walaoke,
        walaoke_is_male_first=args.walaoke_male_first,
    )


def _ttml_options(args: argparse.Namespace) -> TTMLExportOptions:
    return TTMLExportOptions(
        paragraph_author=args.ttml_paragraph_author,
        word_author=args.ttml_word_author,
        add_space=args.ttml_add_space,
        word_by_word=args.ttml_word_by_word,
        duration=args.duration,
    )


def run(args: argparse.Namespace) -> List[Path]:
    """Convert one lyrics file; returns the saved paths."""
    input_path = Path(args.input_file).resolve()
    if not input_path.is_file():
        _fail("File not found: {}".format(input_path))

    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    if not output_dir.is_dir():
        _fail("Output directory does not exist: {}".format(output_dir))

    try:
        format_keys = resolve_format_keys(args.formats)
    except ValueError as e:
        _fail(str(e))

    source_format = args.source_format or detect_source_format(input_path.name)
    try:
        content = input_path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError:
        _fail("{} is not UTF-8 text".format(input_path.name))

    _status("Loading {} ({})...".format(input_path.name, source_format))
    registry = _load_registry(input_path, args)
    stem = input_path.stem

    document = load_document(
        content,
        source_format,
        authors=registry,
        word_by_word=args.word_by_word,
        source_name=stem,
    )
    if document is None:
        _fail("Could not parse {} as {}".format(input_path.name, source_format))
    _status("  {} verse(s), {} author(s)".format(len(document.verses), len(document.authors)))

    _status("Formatting output...")
    lrc_options = _lrc_options(args)
    ttml_options = _ttml_options(args)
    saved_files: List[Path] = []
    for key in format_keys:
        formatter = create_formatter(key, lrc_options, ttml_options)
        _status("  Running {} formatter...".format(formatter.name))
        for output in formatter.format(document):
            saved_path = _save_output(output, stem, output_dir)
            saved_files.append(saved_path)
            _status("  Saved: {}".format(saved_path.name))

    _status("")
    _status("Done! Saved {} file(s) to {}".format(len(saved_files), output_dir))
    return saved_files


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable: tests can inspect the parser without converting anything.
    """
    parser = argparse.ArgumentParser(
        prog="lyric_sync",
        description="Convert synchronized lyrics between plain text, LRC, TTML "
                    "and JSON, keeping word timing and singer attribution.",
    )

    parser.add_argument(
        "input_file",
        help="Path to the lyrics file to convert.",
    )
    parser.add_argument(
        "--source-format",
        choices=sorted(SOURCE_FORMAT_KEYS),
        default=None,
        help="Source format (default: detected from the file extension).",
    )
    parser.add_argument(
        "--authors",
        default=None,
        help="Comma-separated singer names, in v1/v2 order.",
    )
    parser.add_argument(
        "--authors-file",
        default=None,
        help="Path to a singer list (one per line). "
             "Defaults to {stem}-authors.txt next to the input if it exists.",
    )
    parser.add_argument(
        "--word-by-word",
        action=argparse.BooleanOptionalAction,
        default=DEFAULT_WORD_BY_WORD,
        help="Import with word-by-word timing (default: %(default)s).",
    )
    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(FORMATTERS.keys()))),
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as input file).",
    )
    parser.add_argument(
        "--log-level",
        default=LOG_LEVEL,
        help="Logging level (default: %(default)s).",
    )

    lrc = parser.add_argument_group("LRC export")
    lrc.add_argument(
        "--lrc-authors",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Add v1:/v2:/v3: singer tags (default: %(default)s).",
    )
    lrc.add_argument(
        "--lrc-word-by-word",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Add <mm:ss.hh> before every word (default: %(default)s).",
    )
    lrc.add_argument(
        "--keep-seconds",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Write raw seconds instead of mm:ss.hh; saved as .txt (default: %(default)s).",
    )
    lrc.add_argument(
        "--background-new-line",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Start a new line where background vocals begin or end (default: %(default)s).",
    )
    lrc.add_argument(
        "--paragraph-names",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Write [Chorus]-style stanza lines (default: %(default)s).",
    )
    lrc.add_argument(
        "--walaoke",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Use M:/F:/D: singer tags (default: %(default)s).",
    )
    lrc.add_argument(
        "--walaoke-male-first",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="With Walaoke tags the first singer is M: (default: %(default)s).",
    )

    ttml = parser.add_argument_group("TTML export")
    ttml.add_argument(
        "--ttml-paragraph-author",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Add ttm:agent to every line (default: %(default)s).",
    )
    ttml.add_argument(
        "--ttml-word-author",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Add ttm:agent to every word (default: %(default)s).",
    )
    ttml.add_argument(
        "--ttml-add-space",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="End word spans with a space (default: %(default)s).",
    )
    ttml.add_argument(
        "--ttml-word-by-word",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Write one span per word (default: %(default)s).",
    )
    ttml.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Song length in seconds, used for the body and stanza ends.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format=LOG_FORMAT)
    run(args)


if __name__ == "__main__":
    main()
