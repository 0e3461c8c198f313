"""Live progress reporting for search runs."""

import json
import sys
from typing import Any, Protocol

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TaskID, TextColumn, TimeElapsedColumn

from jirascan.aggregation.models import PageProgress


class ProgressTracker(Protocol):
    """Receives progress from one search run.

    ``on_page`` is called from the aggregator thread and can be passed
    directly as ``aggregate(observer=tracker.on_page)``.
    """

    def start(self, query: str) -> None: ...

    def on_page(self, progress: PageProgress) -> None: ...

    def finish(self, issue_count: int) -> None: ...

    def fail(self, error: str) -> None: ...


class RichProgressTracker:
    """Spinner with a running issue count, rendered on stderr.

    The result size of a search is unknown until the last lane closes, so
    there is no bar or ETA.
    """

    def __init__(self, disable: bool = False, console: Console | None = None):
        """Initialize tracker.

        Args:
            disable: If True, render nothing
            console: Console to render on (stderr by default)
        """
        self.console = console or Console(stderr=True)
        self.disable = disable
        self._progress: Progress | None = None
        self._task: TaskID | None = None

    def __enter__(self):
        if not self.disable:
            self._progress = Progress(
                SpinnerColumn(),
                TextColumn("[bold blue]{task.description}"),
                TextColumn("{task.completed} issues"),
                TimeElapsedColumn(),
                console=self.console,
                transient=True,
            )
            self._progress.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._progress:
            self._progress.__exit__(exc_type, exc_val, exc_tb)
            self._progress = None
        return False

    def start(self, query: str) -> None:
        if self._progress:
            self._task = self._progress.add_task(f"Searching {query}", total=None)

    def on_page(self, progress: PageProgress) -> None:
        if self._progress and self._task is not None:
            self._progress.update(self._task, completed=progress.total_records)

    def finish(self, issue_count: int) -> None:
        if self._progress and self._task is not None:
            self._progress.update(self._task, completed=issue_count)
            self._progress.stop_task(self._task)

    def fail(self, error: str) -> None:
        # The display is transient; the CLI prints the error itself
        if self._progress and self._task is not None:
            self._progress.update(self._task, description="[red]Search failed")
            self._progress.stop_task(self._task)


class JsonProgressTracker:
    """Writes one JSON object per event to stderr.

    stdout stays reserved for the result document. Events:
    ``search_started``, ``page``, ``search_complete``, ``search_failed``.
    """

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.fail(str(exc_val))
        return False

    def start(self, query: str) -> None:
        self.emit_event("search_started", query=query)

    def on_page(self, progress: PageProgress) -> None:
        self.emit_event(
            "page",
            lane=progress.lane_id,
            offset=progress.offset,
            records=progress.page_records,
            total=progress.total_records,
        )

    def finish(self, issue_count: int) -> None:
        self.emit_event("search_complete", issues=issue_count)

    def fail(self, error: str) -> None:
        self.emit_event("search_failed", error=error)

    def emit_event(self, event: str, **data: Any) -> None:
        print(json.dumps({"event": event, **data}), file=sys.stderr, flush=True)
