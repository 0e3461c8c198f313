"""Rich logging utilities for CLI output."""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.theme import Theme

JIRASCAN_THEME = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
        "dim": "dim",
    }
)

# Global stderr console; stdout is reserved for command results
console = Console(theme=JIRASCAN_THEME, stderr=True)


def configure_rich_logging(
    level: int = logging.INFO,
    show_time: bool = True,
    show_path: bool = False,
) -> None:
    """Configure rich logging handler for log output.

    Args:
        level: Logging level (logging.DEBUG, logging.INFO, etc.)
        show_time: Show timestamp in log output
        show_path: Show file path in log output
    """
    rich_handler = RichHandler(
        console=console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=True,
        markup=False,
    )
    rich_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logging.basicConfig(
        level=level,
        handlers=[rich_handler],
        force=True,
    )

    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def print_error(message: str, console_obj: Console | None = None) -> None:
    """Print error message in red."""
    c = console_obj or console
    c.print(f"[error]✗ {escape(message)}[/error]")


def print_success(message: str, console_obj: Console | None = None) -> None:
    """Print success message in green."""
    c = console_obj or console
    c.print(f"[success]✓ {escape(message)}[/success]")


def print_warning(message: str, console_obj: Console | None = None) -> None:
    """Print warning message in yellow."""
    c = console_obj or console
    c.print(f"[warning]⚠ {escape(message)}[/warning]")
