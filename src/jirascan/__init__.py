"""jirascan - Concurrent JQL search and aggregation for Jira."""

__version__ = "0.1.0"


def main() -> None:
    """Main entry point for the CLI."""
    from jirascan.cli.main import app

    app()
