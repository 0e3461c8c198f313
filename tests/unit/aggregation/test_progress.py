"""Unit tests for progress trackers."""

import io
import json
from unittest.mock import Mock

import pytest
from rich.console import Console

from jirascan.aggregation.models import PageProgress
from jirascan.aggregation.progress import JsonProgressTracker, RichProgressTracker


def page(lane_id: int, offset: int, records: int, total: int, pages: int) -> PageProgress:
    return PageProgress(
        lane_id=lane_id, offset=offset, page_records=records, total_records=total, pages=pages
    )


class TestJsonProgressTracker:
    """Tests for JSON progress events."""

    def test_events_written_to_stderr(self, capsys):
        with JsonProgressTracker() as tracker:
            tracker.start("project=ABC")
            tracker.on_page(page(0, 0, 25, 25, 1))
            tracker.on_page(page(1, 25, 22, 47, 2))
            tracker.finish(47)

        captured = capsys.readouterr()
        assert captured.out == ""
        events = [json.loads(line) for line in captured.err.splitlines()]
        assert events == [
            {"event": "search_started", "query": "project=ABC"},
            {"event": "page", "lane": 0, "offset": 0, "records": 25, "total": 25},
            {"event": "page", "lane": 1, "offset": 25, "records": 22, "total": 47},
            {"event": "search_complete", "issues": 47},
        ]

    def test_fail_emits_failure_event(self, capsys):
        tracker = JsonProgressTracker()
        tracker.start("q")
        tracker.fail("All 3 lanes failed")

        last = json.loads(capsys.readouterr().err.splitlines()[-1])
        assert last == {"event": "search_failed", "error": "All 3 lanes failed"}

    def test_failure_event_on_exception(self, capsys):
        with pytest.raises(RuntimeError):
            with JsonProgressTracker():
                raise RuntimeError("lost connection")

        last = json.loads(capsys.readouterr().err.splitlines()[-1])
        assert last == {"event": "search_failed", "error": "lost connection"}

    def test_on_page_usable_as_observer(self):
        tracker = JsonProgressTracker()
        tracker.emit_event = Mock()

        observer = tracker.on_page
        observer(page(2, 50, 10, 60, 3))

        tracker.emit_event.assert_called_once_with(
            "page", lane=2, offset=50, records=10, total=60
        )


class TestRichProgressTracker:
    """Tests for the terminal tracker."""

    def test_disabled_tracker_is_silent(self):
        console = Mock()
        with RichProgressTracker(disable=True, console=console) as tracker:
            tracker.start("q")
            tracker.on_page(page(0, 0, 10, 10, 1))
            tracker.finish(10)
            tracker.fail("boom")
        console.print.assert_not_called()

    def test_counts_total_records(self):
        console = Console(file=io.StringIO())
        with RichProgressTracker(console=console) as tracker:
            tracker.start("project=ABC")
            tracker.on_page(page(0, 0, 25, 25, 1))
            tracker.on_page(page(1, 25, 22, 47, 2))

            task = tracker._progress.tasks[0]
            assert task.description == "Searching project=ABC"
            assert task.completed == 47

            tracker.finish(47)
            assert task.stop_time is not None

    def test_fail_marks_task_failed(self):
        console = Console(file=io.StringIO())
        with RichProgressTracker(console=console) as tracker:
            tracker.start("q")
            tracker.fail("All 2 lanes failed")

            assert tracker._progress.tasks[0].description == "[red]Search failed"
