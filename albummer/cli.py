"""Command-line interface for Albummer.

WHY: Users build albums from the terminal in two steps: generate a
starter album description from a media folder, edit it, then compile
it into a single HTML file. The CLI exposes both steps as subcommands.

HOW: argparse with two subcommands:
  make-template MEDIA_FOLDER OUTPUT_ALB  → template.make_template()
  generate ALBUM_FILE                    → compiler.compile_album()
Status messages go to stderr. Progress counters overwrite themselves
in place when stderr is a terminal. Degraded conditions (missing media,
unreadable stylesheet) are reported through logging warnings.

RULES:
- Fatal errors print "Error: ..." to stderr and exit with status 1
- Ctrl-C exits with status 130
- Output of generate is the album path with its extension replaced by .html
- --verbose switches logging to DEBUG
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from albummer import __version__
from albummer.compiler import compile_album
from albummer.config import DEFAULT_CSS, DEFAULT_NUM_COLS, DEFAULT_ORDER
from albummer.errors import AlbummerError
from albummer.template import make_template


def _status(msg: str) -> None:
    """Print a status message to stderr.

    RULES:
    - All status messages go to stderr
    - Always flush after writing
    """
    print(msg, file=sys.stderr, flush=True)


def _progress(msg: str) -> None:
    """Overwrite the current stderr line with a progress counter.

    Skipped when stderr is not a terminal so logs and pipes stay clean.
    """
    if sys.stderr.isatty():
        print("\r" + msg, end="", file=sys.stderr, flush=True)


def _end_progress() -> None:
    if sys.stderr.isatty():
        print(file=sys.stderr, flush=True)


def _run_generate(args: argparse.Namespace) -> None:
    _status("The Albummer is processing {}".format(args.album_file))
    try:
        out_path = compile_album(args.album_file, on_status=_progress)
    finally:
        _end_progress()
    _status("Generated {}".format(out_path))


def _run_make_template(args: argparse.Namespace) -> None:
    try:
        out_path = make_template(
            args.media_folder,
            args.output_alb,
            num_cols=args.num_cols,
            order=args.order,
            css=args.css,
        )
    except OSError as e:
        raise AlbummerError("Cannot write template {}: {}".format(args.output_alb, e)) from e
    _status("Generated {}".format(out_path))


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable; tests can inspect the parser without running a command.
    """
    parser = argparse.ArgumentParser(
        prog="albummer",
        description="Compile a plain-text album description and a folder of "
                    "images, clips, and audio into a single self-contained HTML file.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s {}".format(__version__),
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True

    template = subparsers.add_parser(
        "make-template",
        help="Create a starter album file from a media folder.",
        description="Create the album file, ready for editing, as the first "
                    "step of creating an HTML album.",
    )
    template.add_argument("media_folder", help="Folder containing images, videos, and audio.")
    template.add_argument("output_alb", help="Album file to create.")
    template.add_argument(
        "--num-cols",
        type=int,
        default=DEFAULT_NUM_COLS,
        help="Images per line; videos and audio always get their own line "
             "(default: %(default)s).",
    )
    template.add_argument(
        "--order",
        default=DEFAULT_ORDER,
        help="Sort by file timestamp: 'asc' for oldest first, anything else "
             "for newest first (default: %(default)s).",
    )
    template.add_argument(
        "--css",
        default=DEFAULT_CSS,
        help="Stylesheet referenced by the album's :use line (default: packaged default.css).",
    )
    template.set_defaults(func=_run_make_template)

    generate = subparsers.add_parser(
        "generate",
        help="Compile an album file into a single HTML file.",
        description="Generate the single-file HTML from an album file. If the "
                    "album file is my_fotos.alb, the output is my_fotos.html.",
    )
    generate.add_argument("album_file", help="The album file to convert.")
    generate.set_defaults(func=_run_generate)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        args.func(args)
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    except AlbummerError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
