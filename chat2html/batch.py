"""Batch module for exporting many chat sessions."""

import json
import logging
import tempfile
import zipfile
from collections.abc import Iterator
from pathlib import Path
from typing import Any, Optional

import ijson

from chat2html.core.parser import process_session
from chat2html.exporters.html import HTMLExporter
from chat2html.exporters.utils.markdown import RenderContext
from chat2html.progress import ProgressHandler

logger = logging.getLogger(__name__)

# (file path, position in a list file or -1 for a single-session file, title)
IndexEntry = tuple[Path, int, str]


def discover_files(source: Path, extract_dir: Optional[Path] = None) -> list[Path]:
    """
    discovers JSON files from source path.

    Args:
        source: path to JSON file, directory, or ZIP archive
        extract_dir: where ZIP members are extracted (defaults to a new temp dir)

    Returns:
        list of paths to JSON files

    Raises:
        FileNotFoundError: if source doesn't exist
    """
    if not source.exists():
        raise FileNotFoundError(f"Source not found: {source}")

    if source.is_file():
        if source.suffix == ".zip":
            if extract_dir is None:
                extract_dir = Path(tempfile.mkdtemp(prefix="chat2html_"))
            return _extract_zip(source, extract_dir)
        if source.suffix == ".json":
            return [source]
        return []

    if source.is_dir():
        return sorted(source.glob("*.json"))

    return []


def _extract_zip(zip_path: Path, target_dir: Path) -> list[Path]:
    """extracts JSON files from ZIP archive into target_dir."""
    with zipfile.ZipFile(zip_path, "r") as zf:
        for name in zf.namelist():
            if name.endswith(".json"):
                # keeps only the file name, preventing path traversal
                safe_name = Path(name).name
                (target_dir / safe_name).write_bytes(zf.read(name))

    return sorted(target_dir.glob("*.json"))


def build_session_index(files: list[Path]) -> list[IndexEntry]:
    """
    stream-parses files to build an index of sessions without loading them.

    Args:
        files: list of JSON file paths to index

    Returns:
        list of (path, index, title) tuples where index is -1 for dict
        files, >= 0 for list files
    """
    index: list[IndexEntry] = []

    for file_path in files:
        try:
            with open(file_path, "rb") as f:
                first_char = _peek_first_char(f)
                f.seek(0)

                if first_char == ord("{"):
                    entries = [(file_path, -1, _extract_title_from_dict(f))]
                elif first_char == ord("["):
                    entries = [
                        (file_path, i, title)
                        for i, title in _extract_titles_from_list(f)
                    ]
                else:
                    entries = []
        except (OSError, ValueError, ijson.JSONError) as e:
            logger.debug("Skipping %s: %s", file_path, e)
            continue

        index.extend(entries)

    return index


def _peek_first_char(f: Any) -> int:
    """returns first non-whitespace byte from file."""
    while True:
        char = f.read(1)
        if not char:
            return 0
        if not char.isspace():
            return int(char[0])


def _extract_title_from_dict(f: Any) -> str:
    """reads the title of a single session dict, consuming the whole file."""
    title = "Untitled"
    for prefix, event, value in ijson.parse(f):
        if prefix == "title" and event == "string" and value:
            title = value
    return title


def _extract_titles_from_list(f: Any) -> Iterator[tuple[int, str]]:
    """
    yields (index, title) tuples from a list of sessions using streaming.

    tracks array position via start_map events so sessions without a title
    keep their position.
    """
    current_index = -1
    title = ""
    for prefix, event, value in ijson.parse(f):
        if prefix == "item" and event == "start_map":
            current_index += 1
            title = "Untitled"
        elif prefix == "item.title" and event == "string" and value:
            title = value
        elif prefix == "item" and event == "end_map":
            yield (current_index, title)


def export_sessions(
    source: Path,
    destination: Path,
    dry_run: bool = False,
    overwrite: bool = False,
    quiet: bool = False,
    progress: bool = False,
    ctx: Optional[RenderContext] = None,
) -> int:
    """
    exports chat sessions from source to HTML files.

    Args:
        source: path to JSON file, directory, or ZIP archive
        destination: output directory for HTML files
        dry_run: if True, don't write any files
        overwrite: if True, replace existing HTML files
        quiet: if True, suppress non-error output
        progress: if True, show progress bar
        ctx: presentation options for message rendering

    Returns:
        exit code (0 success, 1 partial failure, 2 fatal error)
    """
    with ProgressHandler(
        quiet=quiet, show_progress=progress
    ) as handler, tempfile.TemporaryDirectory(prefix="chat2html_") as tmp:
        handler.start_discovery()

        files = discover_files(source, extract_dir=Path(tmp))
        if not files:
            handler.log_info(f"No JSON files found in {source}")
            return 0

        index = build_session_index(files)
        handler.log_info(f"Found {len(index)} session(s) to process")
        handler.set_total(len(index))

        exporter = HTMLExporter(ctx)

        exported = 0
        skipped = 0
        failed = 0

        for file_path, session_index, title in index:
            handler.update(title)
            try:
                written = _export_indexed_session(
                    file_path, session_index, exporter, destination, dry_run, overwrite
                )
            except Exception as e:  # pylint: disable=broad-exception-caught
                handler.log_error(f"Failed: {file_path.name} - {title}: {e}")
                failed += 1
                continue

            if written:
                exported += 1
            else:
                skipped += 1

        handler.finish(exported, skipped, failed)

        if failed > 0:
            return 1
        return 0


def _export_indexed_session(
    file_path: Path,
    session_index: int,
    exporter: HTMLExporter,
    destination: Path,
    dry_run: bool,
    overwrite: bool,
) -> bool:
    """
    exports a single session by file path and index.

    Args:
        file_path: path to JSON file
        session_index: index within list file, or -1 for dict file
        exporter: the HTMLExporter instance
        destination: output directory
        dry_run: if True, don't write files
        overwrite: if True, replace existing files

    Returns:
        True if an HTML file was written
    """
    with open(file_path, encoding="utf-8") as f:
        json_data = json.load(f)

    # dict file uses data directly, list file indexes
    session_data = json_data if session_index == -1 else json_data[session_index]

    session = process_session(session_data)
    return exporter.export(
        session=session,
        destination=str(destination),
        dry_run=dry_run,
        overwrite=overwrite,
    )
