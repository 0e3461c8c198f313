"""Check command implementation for connection checks."""

from pathlib import Path

import typer

from jirascan.cli.output import format_connection_table, format_json
from jirascan.cli.rich_logging import console, print_error
from jirascan.config.loader import load_config
from jirascan.exceptions import ConfigError
from jirascan.jira.connection import connect_and_get_info


def run(config: Path | None, output: str | None) -> None:
    """
    Connect to the Jira instance and display its status.

    Args:
        config: Optional path to config file
        output: Output format ("table" or "json"), config default if None
    """
    try:
        try:
            cfg = load_config(config)
        except ConfigError as e:
            print_error(f"Configuration error: {e}")
            console.print("\n[bold]Troubleshooting:[/bold]")
            console.print("  - Check that config file exists and is valid TOML")
            console.print("  - Ensure jira.base_url is a valid URL")
            raise typer.Exit(2) from None

        output = output or cfg.output.default_format
        status = connect_and_get_info(cfg)

        if output == "json":
            # Use print() for JSON to ensure it goes to stdout
            print(format_json(status))
        else:
            format_connection_table(status)

        if status.connected and status.authenticated:
            raise typer.Exit(0)
        raise typer.Exit(3)

    except typer.Exit:
        raise
    except KeyboardInterrupt:
        print_error("Interrupted by user")
        raise typer.Exit(130) from None
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(1) from None
