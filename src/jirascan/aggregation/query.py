"""JQL construction for project scans."""

import re

from jirascan.exceptions import InvalidConfiguration

_BARE_PROJECT_KEY = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


def build_project_query(project_key: str, updated_within_minutes: int | None = None) -> str:
    """Build the JQL for a project scan.

    Args:
        project_key: Project key or name. Keys are used as-is; names with
            spaces or punctuation are quoted.
        updated_within_minutes: Only match issues updated in the last N
            minutes. ``None`` or 0 disables the filter. The sign is ignored,
            so both ``30`` and Jira's relative notation ``-30`` mean "the
            last 30 minutes".

    Returns:
        JQL query string, e.g. ``project=ABC AND updatedDate >= -30m``

    Raises:
        InvalidConfiguration: If project_key is empty
    """
    if not isinstance(project_key, str) or not project_key.strip():
        raise InvalidConfiguration("project key is required")

    project = project_key.strip()
    if not _BARE_PROJECT_KEY.match(project):
        escaped = project.replace("\\", "\\\\").replace('"', '\\"')
        project = f'"{escaped}"'

    jql = f"project={project}"
    if updated_within_minutes:
        jql += f" AND updatedDate >= -{abs(int(updated_within_minutes))}m"
    return jql
