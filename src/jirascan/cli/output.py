"""Output formatting utilities for CLI commands."""

import json
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from jirascan.aggregation.models import AggregateResult
from jirascan.config.models import ConnectionStatus
from jirascan.constants import PREVIEW_LIMIT_DEFAULT


def format_json(data: Any) -> str:
    """
    Format data as JSON string.

    Args:
        data: Data to format (must be JSON-serializable)

    Returns:
        Pretty-printed JSON string
    """
    if hasattr(data, "model_dump"):
        data = data.model_dump(mode="json")
    return json.dumps(data, indent=2, default=str)


def format_connection_table(status: ConnectionStatus) -> None:
    """
    Print Jira instance information as a table.

    Args:
        status: ConnectionStatus with instance info
    """
    console = Console()

    if not (status.connected and status.authenticated):
        console.print("\n[bold red]Error: Failed to connect to Jira instance[/bold red]\n")
        console.print(f"Reason: {status.error_message}\n")
        console.print("[bold]Troubleshooting:[/bold]")
        console.print("  - Verify JIRASCAN_USERNAME and JIRASCAN_API_TOKEN are set")
        console.print("  - Check that the API token has not been revoked")
        console.print("  - Ensure base_url is the Jira root URL, without /rest/api\n")
        return

    console.print("\n[bold]Jira Instance Information[/bold]")
    console.print("━" * 50)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Property", style="bold")
    table.add_column("Value")

    table.add_row("Instance URL", status.instance_url or "")
    table.add_row("Jira Version", status.jira_version or "")
    table.add_row("Deployment", status.deployment_type or "")
    table.add_row("User", status.user or "")
    table.add_row("Status", "[green]Connected[/green]")

    console.print(table)
    console.print()


def search_result_to_dict(query: str, result: AggregateResult) -> dict[str, Any]:
    """Convert a search result into a JSON-serializable dict."""
    error = result.error
    return {
        "query": query,
        "count": len(result),
        "issues": list(result.issue_keys),
        "fetches": result.fetch_count,
        "duration_seconds": round(result.duration_seconds, 3),
        "cancelled": result.cancelled,
        "lanes": {str(lane_id): status.value for lane_id, status in result.lanes.items()},
        "failures": [
            {"lane": f.lane_id, "offset": f.offset, "error": str(f.error)}
            for f in result.failures
        ],
        "error": str(error) if error else None,
    }


def format_search_result_table(
    query: str, result: AggregateResult, limit: int = PREVIEW_LIMIT_DEFAULT
) -> None:
    """
    Print a search result summary and a preview of the issue keys.

    Args:
        query: JQL that was run
        result: AggregateResult to summarise
        limit: Maximum number of keys to list (0 lists all)
    """
    console = Console()

    console.print(f"\n[bold]{len(result)} issues[/bold] matching [cyan]{escape(query)}[/cyan]")
    console.print(
        f"{result.fetch_count} fetches across {len(result.lanes)} lanes "
        f"in {result.duration_seconds:.1f}s",
        style="dim",
    )

    keys = result.issue_keys if limit == 0 else result.issue_keys[:limit]
    if keys:
        table = Table(show_header=True, header_style="bold")
        table.add_column("#", justify="right")
        table.add_column("Issue")
        for index, key in enumerate(keys, start=1):
            table.add_row(str(index), key)
        console.print(table)
        if len(keys) < len(result):
            console.print(f"... and {len(result) - len(keys)} more (use --limit 0)", style="dim")

    for failure in result.failures:
        console.print(f"[yellow]⚠ {escape(str(failure))}[/yellow]")
    if result.cancelled:
        console.print("[yellow]⚠ Run cancelled before all lanes finished[/yellow]")
    console.print()
