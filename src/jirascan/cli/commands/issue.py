"""Issue command implementation for single-issue lookups and edits."""

import json
from pathlib import Path

import msgspec
import typer

from jirascan.cli.rich_logging import print_error, print_success
from jirascan.config.loader import load_config
from jirascan.exceptions import ConfigError, NotFoundError, TransportError
from jirascan.jira.connection import build_client
from jirascan.jira.issues import JiraIssueService
from jirascan.jira.models import IssueDraft

VALID_FIELDS = ("summary", "id", "fields")


def show(key: str, field: str, config: Path | None) -> None:
    """
    Print one attribute of an issue.

    Args:
        key: Issue key (e.g. ABC-123)
        field: "summary", "id" or "fields" (raw JSON of all fields)
        config: Optional path to config file
    """
    if field not in VALID_FIELDS:
        print_error(f"Invalid field: {field} (must be one of {', '.join(VALID_FIELDS)})")
        raise typer.Exit(2)

    try:
        with build_client(load_config(config)) as client:
            service = JiraIssueService(client)
            if field == "summary":
                print(service.get_summary(key))
            elif field == "id":
                print(service.get_issue_id(key))
            else:
                print(json.dumps(json.loads(service.get_fields_raw(key)), indent=2))

    except ConfigError as e:
        print_error(f"Configuration error: {e}")
        raise typer.Exit(2) from None
    except NotFoundError as e:
        print_error(f"Issue not found: {e}")
        raise typer.Exit(1) from None
    except TransportError as e:
        print_error(f"Jira request failed: {e}")
        raise typer.Exit(3) from None
    except KeyboardInterrupt:
        print_error("Interrupted by user")
        raise typer.Exit(130) from None


def save(draft_file: Path, key: str | None, config: Path | None) -> None:
    """
    Create an issue, or update ``key``, from a JSON draft file.

    The file holds IssueDraft fields, e.g.
    ``{"project_key": "ABC", "summary": "...", "issue_type": "Story"}``.

    Args:
        draft_file: Path to the JSON draft
        key: Existing issue to update; a new issue is created if None
        config: Optional path to config file
    """
    try:
        draft = msgspec.json.decode(draft_file.read_bytes(), type=IssueDraft)
    except (OSError, msgspec.DecodeError) as e:
        print_error(f"Cannot read issue draft {draft_file}: {e}")
        raise typer.Exit(2) from None

    try:
        with build_client(load_config(config)) as client:
            service = JiraIssueService(client)
            if key:
                print_success(f"Updated {service.update_issue(key, draft)}")
            else:
                new_key = service.create_issue(draft)
                print_success(f"Created {new_key}")
                # Bare key on stdout for scripting
                print(new_key)

    except ConfigError as e:
        print_error(f"Configuration error: {e}")
        raise typer.Exit(2) from None
    except NotFoundError as e:
        print_error(f"Issue not found: {e}")
        raise typer.Exit(1) from None
    except TransportError as e:
        print_error(f"Jira request failed: {e}")
        raise typer.Exit(3) from None
    except KeyboardInterrupt:
        print_error("Interrupted by user")
        raise typer.Exit(130) from None
