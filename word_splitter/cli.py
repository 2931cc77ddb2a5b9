"""Command-line interface for the Word Splitter.

WHY: Users need a simple way to split the text objects of a document from
the terminal. The CLI wires together the full pipeline — document loading
and selection, output layer lookup, Pillow-backed measurement, layout, and
pluggable formatter output — behind a single command.

HOW: Uses argparse to accept an input document (JSON) or plain text file,
selection overrides, layout overrides, output format selection, and output
directory. Fatal preconditions (no document, nothing selected, no text in
the selection) are reported before anything is written. Status messages go
to stderr; output files are saved next to the source (or to --output-dir).

RULES:
- Positional argument: input .json document or .txt file
- .txt input becomes one run styled by --font / --font-size / --leading
- --select (repeatable) overrides the document's own selection
- --formats: comma-separated formatter keys (default: all registered)
- Unknown formats and missing output directories fail before any work
- Output naming: {stem}{suffix}, numeric suffix for conflicts (-words-2.json)
- Exactly one summary line: "Created N word blocks on layer: <name>"
- Exit codes: 0 = success, 1 = error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from word_splitter.config import (
    ARTBOARD_MARGIN_X,
    ARTBOARD_MARGIN_Y,
    DEFAULT_FONT_SIZE,
    FONT_DIRS,
    OUTPUT_LAYER_NAME,
    LayoutConfig,
)
from word_splitter.core.document import (
    Document,
    DocumentModel,
    anchor_for,
    collect_source_runs,
    get_or_create_layer,
    load_document,
    run_from_text,
)
from word_splitter.core.ir import SourceTextRun, StyleAttributes
from word_splitter.core.measure import PillowTextHost
from word_splitter.core.splitter import split_runs, summary_message
from word_splitter.exceptions import DocumentError, NoDocumentError
from word_splitter.formatters import FORMATTERS
from word_splitter.formatters.base import FormatterOutput

SUPPORTED_INPUTS = {".json", ".txt"}


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

    WHY: Users may run the splitter multiple times on the same file.
    Overwriting previous output would lose work. Numeric suffixes
    (-words-2.json) prevent data loss.

    RULES:
    - First attempt: {stem}{suffix} (e.g. poster-words.json)
    - Conflict: split suffix at last dot, insert counter before extension
      (e.g. poster-words-2.json)
    - Counter starts at 2 and increments
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx > 0:
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
    """Save a single formatter output to disk and return its path."""
    path = _resolve_output_path(stem, output.suffix, output_dir)

    if isinstance(output.content, bytes):
        path.write_bytes(output.content)
    else:
        path.write_text(output.content, encoding="utf-8")

    return path


def _parse_formats(raw: Optional[str]) -> List[str]:
    if not raw:
        return list(FORMATTERS.keys())
    format_keys = [f.strip() for f in raw.split(",") if f.strip()]
    for key in format_keys:
        if key not in FORMATTERS:
            available = ", ".join(sorted(FORMATTERS.keys()))
            _fail("Unknown format '{}'. Available formats: {}".format(key, available))
    return format_keys


def _load_input(args: argparse.Namespace, input_path: Path) -> tuple:
    """Load the document and its source runs.

    Returns:
        Tuple of (document, runs). Plain-text input gets an empty document
        with no artboards, so the anchor falls back to the margins.

    Raises:
        DocumentError: On any fatal precondition.
    """
    if input_path.suffix.lower() == ".txt":
        try:
            text = input_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise NoDocumentError("No document open: cannot read {}: {}".format(input_path, e)) from e
        style = StyleAttributes(
            font=args.font,
            size=args.font_size,
            leading=args.leading,
        )
        runs: List[SourceTextRun] = [run_from_text(text, style=style, name=input_path.stem)]
        return Document(model=DocumentModel(name=input_path.name)), runs

    document = load_document(input_path)
    runs = collect_source_runs(document, selection=args.select)
    return document, runs


def _run_pipeline(args: argparse.Namespace) -> None:
    """Execute the full split pipeline.

    RULES:
    - Validate input type, formats, and output directory before loading
    - DocumentError → message to stderr, exit 1, nothing written
    - Save each formatter's output files with conflict avoidance
    """
    input_path = Path(args.input_file).resolve()

    if not input_path.is_file():
        _fail("No document open: file not found: {}".format(input_path))

    ext = input_path.suffix.lower()
    if ext not in SUPPORTED_INPUTS:
        _fail("Unsupported input type '{}'. Supported: {}".format(
            ext, ", ".join(sorted(SUPPORTED_INPUTS))
        ))

    format_keys = _parse_formats(args.formats)

    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    if not output_dir.is_dir():
        _fail("Output directory does not exist: {}".format(output_dir))

    try:
        config = LayoutConfig(
            layer_name=args.layer_name,
            margin_x=args.margin_x,
            margin_y=args.margin_y,
            default_font_size=args.font_size or DEFAULT_FONT_SIZE,
            font_dirs=list(FONT_DIRS) + [Path(d) for d in (args.font_dir or [])],
        )
    except ValueError as e:
        _fail(str(e))

    _status("Loading {}...".format(input_path.name))
    try:
        document, runs = _load_input(args, input_path)
    except DocumentError as e:
        _fail(str(e))
    _status("  {} text run(s) selected".format(len(runs)))

    container = get_or_create_layer(document, config.layer_name)
    anchor = anchor_for(document, config.margin_x, config.margin_y)
    host = PillowTextHost(font_dirs=config.font_dirs, default_size=config.default_font_size)

    _status("Splitting...")
    result = split_runs(runs, host, container, anchor, config)
    if result.skipped_runs:
        _status("  Skipped {} empty run(s)".format(result.skipped_runs))

    _status("Formatting output...")
    stem = input_path.stem
    for key in format_keys:
        formatter = FORMATTERS[key]()
        for output in formatter.format(result):
            saved_path = _save_output(output, stem, output_dir)
            _status("  Saved: {}".format(saved_path.name))

    _status(summary_message(result))


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable — tests can inspect the parser without running the pipeline.
    """
    parser = argparse.ArgumentParser(
        prog="word_splitter",
        description="Split the selected text objects of a document into "
                    "individually positioned words, keeping the authored spacing.",
    )

    parser.add_argument(
        "input_file",
        help="Path to a document JSON file, or a plain .txt file.",
    )

    parser.add_argument(
        "--select",
        action="append",
        default=None,
        metavar="ID",
        help="Node id to split. Can be specified multiple times. "
             "Default: the document's own selection.",
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
        "--layer-name",
        default=OUTPUT_LAYER_NAME,
        help="Name of the output layer (default: %(default)s).",
    )

    parser.add_argument(
        "--margin-x",
        type=float,
        default=ARTBOARD_MARGIN_X,
        help="Horizontal offset from the artboard's left edge (default: %(default)s).",
    )

    parser.add_argument(
        "--margin-y",
        type=float,
        default=ARTBOARD_MARGIN_Y,
        help="Vertical offset from the artboard's top edge (default: %(default)s).",
    )

    parser.add_argument(
        "--font",
        default=None,
        help="Font name for .txt input.",
    )

    parser.add_argument(
        "--font-size",
        type=float,
        default=None,
        help="Font size for .txt input, and the fallback size for unsized text "
             "(default: {}).".format(DEFAULT_FONT_SIZE),
    )

    parser.add_argument(
        "--leading",
        type=float,
        default=None,
        help="Leading for .txt input (default: font size × 1.2).",
    )

    parser.add_argument(
        "--font-dir",
        action="append",
        default=None,
        help="Directory to search for font files. Can be specified multiple times.",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log measurement fallbacks and skipped runs.",
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
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )
    _run_pipeline(args)


if __name__ == "__main__":
    main()
