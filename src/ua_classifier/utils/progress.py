"""Logging and progress tracking utilities.

Rich-based progress display and logging setup for batch classification.
The progress bar is drawn on stderr so classified records can be streamed to
stdout; logs scroll above it.
"""

from __future__ import annotations

import sys

from loguru import logger
from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

LOG_FORMAT = (
    "<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | <level>{message}</level>"
)


def configure_logging(verbose: bool) -> None:
    """Route ``ua_classifier`` logs to stderr."""
    logger.remove()
    logger.add(sys.stderr, level="INFO" if verbose else "WARNING", format=LOG_FORMAT)
    logger.enable("ua_classifier")


class ProgressTracker:
    """Batch progress tracker using Rich Progress.

    Manages a progress bar at the bottom while allowing logs to scroll above it.
    Uses loguru for logging, redirected to the Rich console while active.

    Parameters
    ----------
    total : int | None
        Number of User-Agents to classify; None when unknown (stdin).
    enabled : bool
        Whether to enable the progress display.
    verbose : bool, optional
        Whether to output INFO level logs. Defaults to False.
    description : str, optional
        Description shown next to the progress bar.
    """

    def __init__(
        self,
        total: int | None,
        enabled: bool,
        verbose: bool = False,
        description: str = "Classifying user agents",
    ):
        self.enabled = enabled
        self.verbose = verbose
        self.total = total
        self.completed = 0
        self.description = description

        self.console = Console(stderr=True)
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(complete_style="green", finished_style="bold green"),
            MofNCompleteColumn(),
            TextColumn("•"),
            TimeElapsedColumn(),
            console=self.console,
            transient=False,
        )
        self.task_id: TaskID | None = None

    @staticmethod
    def _format_duration(seconds: float) -> str:
        """Format seconds into HH:MM:SS."""
        total = int(seconds)
        hours, rem = divmod(total, 3600)
        minutes, secs = divmod(rem, 60)
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"

    def __enter__(self) -> ProgressTracker:
        """Start the progress display and configure logging."""
        if self.enabled:
            self.progress.start()
            self.task_id = self.progress.add_task(self.description, total=self.total)

        logger.remove()
        level = "INFO" if self.verbose else "WARNING"

        if self.enabled:
            logger.add(
                lambda msg: self.console.print(msg.rstrip()),
                level=level,
                format=LOG_FORMAT,
                colorize=True,
            )
        else:
            logger.add(sys.stderr, level=level, format=LOG_FORMAT)
        logger.enable("ua_classifier")

        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> bool:
        """Stop the progress display and print summary."""
        if self.enabled:
            duration = "00:00:00"
            if self.task_id is not None:
                task = self.progress.tasks[self.task_id]
                duration = self._format_duration(task.elapsed or 0.0)

            self.progress.stop()

            if not exc_type:
                self.console.print(
                    f"[dim]Classified: {self.completed} | Elapsed Time: {duration}[/dim]"
                )
        return False

    def log(self, message: str, style: str = "") -> None:
        """Log a message to the Rich console."""
        if self.enabled:
            self.console.log(f"[{style}]{message}[/{style}]" if style else message)
        else:
            logger.info(message)

    def success(self, message: str) -> None:
        """Log a success message."""
        self.log(message, style="bold green")

    def advance(self, count: int = 1) -> None:
        """Record ``count`` classified User-Agents."""
        self.completed += count
        if self.enabled and self.task_id is not None:
            self.progress.update(self.task_id, advance=count)
