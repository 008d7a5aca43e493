"""Command-line interface for tidier.

Usage::

    tidier page.html                     # formatted page on stdout
    tidier page.html -o page.out.html    # explicit output path
    cat feed.xml | tidier -x -s 2        # XML from stdin, 2-space indent
    tidier --list-presets                # list available presets
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from tidier import __version__
from tidier.diagnostics import summarize
from tidier.document import Doc
from tidier.errors import ParseError, TidierError
from tidier.log import setup_logging
from tidier.options import PRESETS, FormatOptions

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tidier",
        description="Format HTML or XML documents.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="The input document, - for stdin (default: %(default)s).",
    )
    parser.add_argument(
        "-o", "--out",
        default="-",
        help="Write output to a file, - for stdout (default: %(default)s).",
    )
    parser.add_argument(
        "-p", "--preset",
        default="tabbed",
        choices=PRESETS,
        help="Option preset (default: %(default)s).",
    )
    parser.add_argument(
        "-s", "--spaces",
        type=int,
        metavar="N",
        help="Indent with N spaces instead of tabs.",
    )
    parser.add_argument(
        "-w", "--wrap",
        type=int,
        metavar="N",
        help="Maximum line width, 0 disables wrapping (default: from preset).",
    )
    parser.add_argument(
        "-x", "--xml",
        action="store_true",
        help="Parse input as XML (inferred from a .xml input extension otherwise).",
    )
    parser.add_argument(
        "--list-presets",
        action="store_true",
        help="List available option presets and exit.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print diagnostics to stderr.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def _options_from_args(args: argparse.Namespace) -> FormatOptions:
    options = FormatOptions.preset(args.preset)
    if args.spaces is not None:
        options = options.with_tabs(False).with_indent_size(args.spaces)
    if args.wrap is not None:
        options = options.with_line_width(args.wrap)
    return options


def _read_input(name: str) -> str:
    if name == "-":
        return sys.stdin.read()
    return Path(name).read_text(encoding="utf-8")


def _write_output(name: str, data: bytes) -> None:
    if name == "-":
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    else:
        output_path = Path(name)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(data)


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.INFO if args.verbose else None)

    if args.list_presets:
        print("Available presets:")
        for preset in PRESETS:
            print(f"  - {preset}")
        return 0

    xml = args.xml or Path(args.input).suffix.lower() == ".xml"

    try:
        options = _options_from_args(args)
        source = _read_input(args.input)
        with Doc(source, xml) as doc:
            logger.info("Formatting %s as %s", args.input, "XML" if xml else "HTML")
            try:
                out = doc.format_to_bytes(options)
            finally:
                if args.verbose and doc.has_issues():
                    print(f"diagnostics: {summarize(doc.diagnostics())}", file=sys.stderr)
                    for d in doc.diagnostics():
                        print(d, file=sys.stderr)
        _write_output(args.out, out)
    except (TidierError, OSError, UnicodeDecodeError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        if args.verbose and isinstance(exc, ParseError) and exc.diagnostics:
            print(f"diagnostics: {summarize(exc.diagnostics)}", file=sys.stderr)
            for d in exc.diagnostics:
                print(d, file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
