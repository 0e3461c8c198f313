"""Main Typer application for the jirascan CLI."""

from pathlib import Path
from typing import Annotated

import typer

from jirascan import __version__
from jirascan.constants import MAX_PAGE_SIZE, MAX_WORKERS

app = typer.Typer(
    help="jirascan - Concurrent JQL search for Jira",
    add_completion=False,
    no_args_is_help=True,
)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to configuration file"),
]
OutputOption = Annotated[
    str | None,
    typer.Option("--output", "-o", help='Output format: "table" or "json" (default: from config)'),
]
WorkersOption = Annotated[
    int | None,
    typer.Option(
        "--workers",
        "-w",
        min=1,
        max=MAX_WORKERS,
        help="Number of concurrent worker lanes (default: from config, 8)",
    ),
]
PageSizeOption = Annotated[
    int | None,
    typer.Option(
        "--page-size",
        "-p",
        min=1,
        max=MAX_PAGE_SIZE,
        help="Issues per page (default: from config, 25; Jira Cloud allows at most 100)",
    ),
]
LimitOption = Annotated[
    int,
    typer.Option("--limit", "-l", min=0, help="Issue keys to preview in table output (0 = all)"),
]
DeadlineOption = Annotated[
    float | None,
    typer.Option("--deadline", help="Cancel the search after this many seconds (> 0)"),
]
StrictOption = Annotated[
    bool,
    typer.Option("--strict", help="Exit with status 1 if any lane failed or the run was cancelled"),
]
DebugOption = Annotated[
    bool,
    typer.Option("--debug", help="Enable debug logging"),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"jirascan version {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """jirascan CLI main callback."""
    pass


@app.command()
def check(config: ConfigOption = None, output: OutputOption = None) -> None:
    """Check the connection to the Jira instance."""
    from .commands import check as check_module

    check_module.run(config, output)


@app.command()
def search(
    jql: Annotated[str, typer.Argument(help="JQL query to run")],
    config: ConfigOption = None,
    output: OutputOption = None,
    workers: WorkersOption = None,
    page_size: PageSizeOption = None,
    limit: LimitOption = 20,
    deadline: DeadlineOption = None,
    strict: StrictOption = False,
    debug: DebugOption = False,
) -> None:
    """Run a JQL query concurrently and list the matching issue keys."""
    from .commands import search as search_module

    search_module.run(
        query=jql,
        config=config,
        output=output,
        workers=workers,
        page_size=page_size,
        limit=limit,
        deadline=deadline,
        strict=strict,
        debug=debug,
    )


@app.command()
def scan(
    project: Annotated[str, typer.Argument(help="Project key to scan")],
    minutes: Annotated[
        int | None,
        typer.Option("--minutes", "-m", help="Only issues updated in the last N minutes"),
    ] = None,
    config: ConfigOption = None,
    output: OutputOption = None,
    workers: WorkersOption = None,
    page_size: PageSizeOption = None,
    limit: LimitOption = 20,
    deadline: DeadlineOption = None,
    strict: StrictOption = False,
    debug: DebugOption = False,
) -> None:
    """List every issue key in a project."""
    from .commands import search as search_module

    search_module.run(
        project=project,
        minutes=minutes,
        config=config,
        output=output,
        workers=workers,
        page_size=page_size,
        limit=limit,
        deadline=deadline,
        strict=strict,
        debug=debug,
    )


@app.command()
def issue(
    key: Annotated[str, typer.Argument(help="Issue key, e.g. ABC-123")],
    field: Annotated[
        str,
        typer.Option("--field", "-f", help='What to print: "summary", "id" or "fields"'),
    ] = "summary",
    config: ConfigOption = None,
) -> None:
    """Show the summary, id or raw fields of one issue."""
    from .commands import issue as issue_module

    issue_module.show(key, field, config)


@app.command()
def save(
    draft: Annotated[
        Path,
        typer.Argument(help="JSON file with the issue fields", exists=True, dir_okay=False),
    ],
    key: Annotated[
        str | None,
        typer.Option("--update", "-u", help="Update this issue instead of creating one"),
    ] = None,
    config: ConfigOption = None,
) -> None:
    """Create an issue (or update one with --update) from a JSON draft."""
    from .commands import issue as issue_module

    issue_module.save(draft, key, config)


if __name__ == "__main__":
    app()
