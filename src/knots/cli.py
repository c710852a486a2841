"""Command line interface: convert a knots file to HTML and/or PDF."""

from __future__ import annotations

import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Sequence

from knots.config import KNOTS_LOG_LEVEL
from knots.exceptions import KnotsError
from knots.parser import parse_file
from knots.pdf import render_pdf
from knots.transpiler import TranspileOptions, transpile

logger = logging.getLogger(__name__)


def _package_version() -> str:
    try:
        return version("knots")
    except PackageNotFoundError:
        return "unknown"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="knots", description="Convert a knots document to HTML or PDF.")
    parser.add_argument("input", help="the knots file to convert")
    parser.add_argument(
        "-o",
        "--output",
        help="the output file (a .pdf extension writes a PDF, anything else writes HTML)",
    )
    parser.add_argument("--no-summary", action="store_true", help="don't create a summary")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug messages")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")
    return parser


def output_paths(input_path: Path, output: str | None) -> tuple[Path | None, Path | None]:
    """Decide which files to write.

    Returns:
        Tuple of (html path, pdf path); either may be None. Without an explicit
        output both are written next to the working directory, named after
        the input file.
    """
    if output:
        target = Path(output)
        if target.suffix.lower() == ".pdf":
            return None, target
        return target, None
    stem = input_path.stem
    return Path(f"{stem}.html"), Path(f"{stem}.pdf")


def run(args: argparse.Namespace) -> None:
    """Convert ``args.input`` as requested.

    Raises:
        KnotsError: On read, grammar, image or PDF engine failures.
    """
    input_path = Path(args.input)
    html_path, pdf_path = output_paths(input_path, args.output)

    document = parse_file(input_path)
    html = transpile(
        document,
        options=TranspileOptions(summary=not args.no_summary),
        base_dir=input_path.resolve().parent,
    )

    if html_path is not None:
        try:
            html_path.write_text(html, encoding="utf-8")
        except OSError as exc:
            raise KnotsError(f"Unable to write to html file {html_path}: {exc}") from exc
        logger.info("Wrote %s", html_path)

    if pdf_path is not None:
        pdf = render_pdf(html, title=document.metadata.title, base_url=str(input_path.resolve().parent))
        try:
            pdf_path.write_bytes(pdf)
        except OSError as exc:
            raise KnotsError(f"Failed to save the pdf {pdf_path}: {exc}") from exc
        logger.info("Wrote %s", pdf_path)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else KNOTS_LOG_LEVEL,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        run(args)
    except KnotsError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
