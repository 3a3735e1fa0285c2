"""Chat message and session renderer to HTML."""

import argparse
import logging
from pathlib import Path
from typing import Optional

from chat2html.batch import export_sessions
from chat2html.exporters.utils.markdown import markdown_to_html

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIXES = (".md", ".markdown", ".txt")


def main(argv: Optional[list[str]] = None) -> int:
    """
    main entry point for chat2html CLI.

    Args:
        argv: command line arguments (defaults to sys.argv[1:])

    Returns:
        exit code (0 success, 1 partial failure, 2 fatal error)
    """
    parser = argparse.ArgumentParser(
        description="Render chat messages and exported chat sessions to HTML"
    )
    parser.add_argument(
        "source",
        help="markdown file, session JSON file, directory of JSON files, or ZIP archive",
    )
    parser.add_argument(
        "destination",
        nargs="?",
        help="output directory for sessions (default: chat-html), "
        "or output file for a markdown source (default: stdout)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="process files but don't write any HTML",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="replace existing HTML files",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="show a progress bar",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="only print errors",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="enable debug logging",
    )

    args = parser.parse_args(argv)

    # configures logging
    level = logging.DEBUG if args.verbose else logging.INFO
    if args.quiet:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="[%(levelname)s] %(message)s",
    )

    # validates source path exists
    source_path = Path(args.source)
    if not source_path.exists():
        logger.error("Source not found: %s", args.source)
        return 2

    try:
        if source_path.is_file() and source_path.suffix.lower() in MARKDOWN_SUFFIXES:
            return _render_markdown_file(source_path, args.destination, args.dry_run)

        return export_sessions(
            source=source_path,
            destination=Path(args.destination or "chat-html"),
            dry_run=args.dry_run,
            overwrite=args.overwrite,
            quiet=args.quiet,
            progress=args.progress,
        )
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.error("Fatal error: %s", e)
        return 2


def _render_markdown_file(
    source: Path, destination: Optional[str], dry_run: bool
) -> int:
    """renders one markdown file to an HTML fragment."""
    html = markdown_to_html(source.read_text(encoding="utf-8"))

    if destination is None:
        print(html, end="")
        return 0

    if dry_run:
        logger.info("Would write to: %s", destination)
        return 0

    Path(destination).write_text(html, encoding="utf-8")
    logger.debug("Wrote %s", destination)
    return 0
