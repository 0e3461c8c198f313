"""Search and scan command implementation."""

import json
import logging
from pathlib import Path

import typer
from pydantic import ValidationError

from jirascan.aggregation.engine import aggregate
from jirascan.aggregation.models import AggregateResult
from jirascan.aggregation.progress import JsonProgressTracker, RichProgressTracker
from jirascan.aggregation.query import build_project_query
from jirascan.cli.output import format_search_result_table, search_result_to_dict
from jirascan.cli.rich_logging import configure_rich_logging, print_error, print_warning
from jirascan.config.loader import load_config
from jirascan.config.models import ScanConfig
from jirascan.exceptions import ConfigError, InvalidConfiguration, PartialResultError
from jirascan.jira.connection import build_client
from jirascan.jira.fetcher import JiraPageFetcher

logger = logging.getLogger(__name__)


def run(
    query: str | None = None,
    project: str | None = None,
    minutes: int | None = None,
    config: Path | None = None,
    output: str | None = None,
    workers: int | None = None,
    page_size: int | None = None,
    limit: int = 20,
    deadline: float | None = None,
    strict: bool = False,
    debug: bool = False,
) -> None:
    """Run a concurrent JQL search and print the matching issue keys.

    Exactly one of ``query`` and ``project`` is expected.

    Args:
        query: JQL query to run
        project: Project key to scan instead of a raw query
        minutes: With ``project``, only issues updated in the last N minutes
        config: Optional path to config file
        output: Output format ("table" or "json"), config default if None
        workers: Number of lanes (config default if None)
        page_size: Issues per page (config default if None)
        limit: Number of keys to preview in table output (0 = all)
        deadline: Cancel the run after this many seconds
        strict: Exit non-zero when any lane failed or the run was cancelled
        debug: Enable debug logging
    """
    configure_rich_logging(
        level=logging.DEBUG if debug else logging.WARNING,
        show_time=debug,
        show_path=debug,
    )

    try:
        cfg = load_config(config)
        client = build_client(cfg)
        output = output or cfg.output.default_format

        jql = query if query is not None else build_project_query(project or "", minutes)
        scan = _scan_settings(cfg.scan, workers, page_size, deadline)
        fetcher = JiraPageFetcher(client, timeout=scan.fetch_timeout)

        tracker = JsonProgressTracker() if output == "json" else RichProgressTracker()
        with client, tracker:
            tracker.start(jql)
            result = aggregate(
                fetcher,
                jql,
                worker_count=scan.workers,
                page_size=scan.page_size,
                observer=tracker.on_page,
                deadline=scan.deadline,
            )
            if isinstance(result.error, PartialResultError):
                tracker.fail(str(result.error))
            else:
                tracker.finish(len(result))

        _report(jql, result, output, limit)
        _exit_for(result, strict)

    except typer.Exit:
        raise
    except (ConfigError, InvalidConfiguration) as e:
        print_error(f"Configuration error: {e}")
        raise typer.Exit(2) from None
    except KeyboardInterrupt:
        print_error("Interrupted by user")
        raise typer.Exit(130) from None
    except Exception as e:
        logger.debug("Search failed", exc_info=True)
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(1) from None


def _scan_settings(
    base: ScanConfig, workers: int | None, page_size: int | None, deadline: float | None
) -> ScanConfig:
    """Merge command-line overrides into the configured scan settings.

    Raises:
        InvalidConfiguration: If the merged settings fail ScanConfig validation
    """
    overrides = {
        name: value
        for name, value in (("workers", workers), ("page_size", page_size), ("deadline", deadline))
        if value is not None
    }
    try:
        return ScanConfig.model_validate({**base.model_dump(), **overrides})
    except ValidationError as e:
        raise InvalidConfiguration(f"Invalid scan options: {e}") from e


def _report(jql: str, result: AggregateResult, output: str, limit: int) -> None:
    if output == "json":
        print(json.dumps(search_result_to_dict(jql, result), indent=2))
    else:
        format_search_result_table(jql, result, limit=limit)


def _exit_for(result: AggregateResult, strict: bool) -> None:
    error = result.error
    if error is None:
        raise typer.Exit(0)
    if isinstance(error, PartialResultError):
        print_error(str(error))
        raise typer.Exit(1)
    print_warning(str(error))
    raise typer.Exit(1 if strict else 0)
