"""Command-line interface for json2docx.

Usage::

    json2docx offer.docx data.json                  # writes offer.filled.docx
    json2docx offer.docx data.json -o out.docx      # explicit output path
    json2docx offer.docx data.json --show-errors    # list errors in the document
    json2docx offer.docx data.json --strict         # exit 1 on template errors
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from json2docx import __version__
from json2docx.config import PopulateOptions
from json2docx.exceptions import Json2DocxError
from json2docx.populator import TemplatePopulator

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure the ``json2docx`` logger from the CLI flags.

    Args:
        verbose: Show DEBUG messages.
        quiet: Show errors only.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    package_logger = logging.getLogger("json2docx")
    package_logger.setLevel(level)
    package_logger.handlers = [handler]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="json2docx",
        description="Fill the content controls of a Word template with JSON data.",
    )
    parser.add_argument(
        "template",
        help="Path to the .docx template.",
    )
    parser.add_argument(
        "data",
        help="Path to the JSON data file.",
    )
    parser.add_argument(
        "-o", "--output",
        help="Output .docx path. Defaults to <template>.filled.docx.",
    )
    parser.add_argument(
        "--show-errors",
        action="store_true",
        help="Prepend a linked list of template errors to the output document.",
    )
    parser.add_argument(
        "--line-breaks",
        action="store_true",
        help="Write line breaks in plain-text values as Word line breaks.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 if any placeholder could not be populated.",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print debug information.",
    )
    verbosity.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Print errors only.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.quiet)

    template_path = Path(args.template)
    data_path = Path(args.data)
    for path in (template_path, data_path):
        if not path.is_file():
            logger.error("File not found: %s", path)
            return 1

    if args.output:
        output_path = Path(args.output)
    else:
        output_path = template_path.with_suffix(".filled.docx")

    options = PopulateOptions(
        replace_line_breaks=args.line_breaks,
        show_errors_in_document=args.show_errors,
    )
    logger.debug("Template: %s", template_path)
    logger.debug("Data:     %s", data_path)
    logger.debug("Output:   %s", output_path)

    try:
        result = TemplatePopulator(options).populate_file(template_path, data_path, output_path)
    except Json2DocxError as exc:
        logger.error("%s", exc)
        return 1

    if not args.quiet:
        print(f"Populated: {output_path}")

    if args.strict and not result.success:
        logger.error("%d placeholder error(s)", len(result.errors))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
