"""console output for batch exports: spinner, progress bar and summary."""

from typing import Any, Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    ProgressColumn,
    SpinnerColumn,
    TaskID,
    TextColumn,
)

DESCRIPTION_COLUMN = "[progress.description]{task.description}"


class ProgressHandler:
    """
    reports batch export progress on stderr.

    With show_progress a transient spinner runs while sources are indexed and
    is replaced by a bar once the session count is known; plain info lines are
    suppressed then, since they would tear the live display. Errors are always
    printed.
    """

    def __init__(self, quiet: bool = False, show_progress: bool = False) -> None:
        self.quiet = quiet
        self.show_progress = show_progress
        self._console = Console(stderr=True)
        self._progress: Optional[Progress] = None
        self._task_id: Optional[TaskID] = None

    def __enter__(self) -> "ProgressHandler":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._close_display()

    def _open_display(
        self, description: str, total: Optional[int], *columns: ProgressColumn
    ) -> None:
        """replaces any running display with a new single-task one."""
        self._close_display()
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn(DESCRIPTION_COLUMN),
            *columns,
            console=self._console,
            transient=True,
        )
        self._progress.start()
        self._task_id = self._progress.add_task(description, total=total, title="")

    def _close_display(self) -> None:
        if self._progress is None:
            return
        self._progress.stop()
        self._progress = None
        self._task_id = None

    def start_discovery(self) -> None:
        """shows an indeterminate spinner while session files are indexed."""
        if self.show_progress:
            self._open_display("Indexing sessions...", None)

    def set_total(self, total: int) -> None:
        """switches to a bar counting exported sessions out of total."""
        if self.show_progress:
            self._open_display(
                "Rendering",
                total,
                BarColumn(),
                MofNCompleteColumn(),
                TextColumn("{task.fields[title]}"),
            )

    def update(self, title: str) -> None:
        """counts one session and shows its title next to the bar."""
        if self._progress is not None and self._task_id is not None:
            self._progress.update(self._task_id, advance=1, title=title)

    def log_error(self, message: str) -> None:
        self._console.print(f"[red]ERROR:[/red] {message}")

    def log_info(self, message: str) -> None:
        if not (self.quiet or self.show_progress):
            self._console.print(message)

    def finish(self, exported: int, skipped: int, failed: int) -> None:
        """closes the display and prints per-outcome counts unless quiet."""
        self._close_display()
        if self.quiet:
            return

        total = exported + skipped + failed
        failures = f"[red]{failed} failed[/red]" if failed else "0 failed"
        self._console.print(
            f"Processed {total} session(s): {exported} exported, "
            f"{skipped} skipped, {failures}"
        )
