"""Console rendering and progress helpers for the uploader CLI."""
from __future__ import annotations

import time
from typing import Any, Dict, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)
from rich.table import Table

from .orchestrator.models import UploadRun, UploadTask


PERCENT_STEP = 5

console = Console()


def _human_size(value: int) -> str:
    size = float(max(value, 0))
    units = ["B", "KB", "MB", "GB", "TB"]
    unit_idx = 0
    while size >= 1024.0 and unit_idx < len(units) - 1:
        size /= 1024.0
        unit_idx += 1
    if unit_idx == 0:
        return f"{int(size)} {units[unit_idx]}"
    return f"{size:.2f} {units[unit_idx]}"


def render_configuration_summary(config: Dict[str, Any], out: Optional[Console] = None) -> None:
    """Render startup configuration summary."""
    out = out or console
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column(style="white")

    for key, value in config.items():
        rendered = "-" if value is None else str(value)
        table.add_row(key, escape(rendered))

    panel = Panel(
        table,
        title="[bold green]r2-uploader[/bold green]",
        border_style="blue",
    )
    out.print(panel)


class UploadProgressDisplay:
    """
    Per-file transfer progress.

    On a terminal each upload gets a live bar. Elsewhere progress is printed
    as plain lines, one every PERCENT_STEP percent.
    """

    def __init__(self, out: Optional[Console] = None, live: Optional[bool] = None):
        self._console = out or console
        self._live = self._console.is_terminal if live is None else live
        self._active_tasks: Dict[str, TaskID] = {}
        self._last_percent: Dict[str, int] = {}
        self._started_at: Dict[str, float] = {}
        self._running = False
        self._progress: Optional[Progress] = None
        if self._live:
            self._progress = Progress(
                SpinnerColumn(),
                TextColumn("[bold green]{task.fields[label]}", justify="left"),
                BarColumn(bar_width=42),
                TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
                DownloadColumn(),
                TransferSpeedColumn(),
                TimeRemainingColumn(),
                expand=False,
                console=self._console,
            )

    def _start(self) -> None:
        if self._progress is None or self._running:
            return
        self._progress.start()
        self._running = True

    def _stop(self) -> None:
        if self._progress is None or not self._running:
            return
        self._progress.stop()
        self._running = False

    def on_file_start(self, task: UploadTask, index: int) -> None:
        self._started_at[task.remote_key] = time.monotonic()
        if self._progress is not None:
            self._start()
            self._active_tasks[task.remote_key] = self._progress.add_task(
                "upload",
                label=escape(task.remote_key[-60:]),
                total=max(task.size_bytes, 1),
            )

    def on_progress(self, task: UploadTask, read: int, total: int) -> None:
        task_id = self._active_tasks.get(task.remote_key)
        if self._progress is not None and task_id is not None:
            self._progress.update(task_id, completed=read, total=max(total, 1))
            return

        percent = int(read * 100 / total) if total > 0 else 100
        prev = self._last_percent.get(task.remote_key, -PERCENT_STEP)
        if percent >= 100 and prev >= 100:
            return
        if percent >= 100 or percent - prev >= PERCENT_STEP:
            pct = 100 * read / total if total > 0 else 100.0
            self._console.print(
                f"Uploaded {read} out of {total} bytes ({pct:.2f}%)",
                markup=False,
                highlight=False,
            )
            self._last_percent[task.remote_key] = percent

    def on_file_complete(self, task: UploadTask) -> None:
        task_id = self._active_tasks.pop(task.remote_key, None)
        if self._progress is not None and task_id is not None:
            self._progress.remove_task(task_id)
        self._last_percent.pop(task.remote_key, None)
        started = self._started_at.pop(task.remote_key, None)
        elapsed = f" in {time.monotonic() - started:.1f}s" if started is not None else ""
        self._console.print(
            f"[green]DONE[/green] {escape(task.remote_key)} {_human_size(task.size_bytes)}{elapsed}"
        )

    def on_error(self, error: BaseException) -> None:
        self._stop()
        self._console.print(f"[red]Error:[/red] {escape(str(error))}")

    def on_finish(self, run: UploadRun) -> None:
        self._stop()
        self._console.print(
            f"[bold]Finished[/bold] uploaded={run.uploaded_count} skipped={run.skipped_count}"
        )
