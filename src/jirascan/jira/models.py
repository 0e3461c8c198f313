"""Typed views of Jira REST payloads, decoded with msgspec."""

from typing import Any

import msgspec


class IssueRef(msgspec.Struct):
    """Issue entry in a search response; only the identifiers are needed."""

    key: str
    id: str = ""


class SearchPage(msgspec.Struct, rename="camel"):
    """One page of ``/search`` results."""

    issues: list[IssueRef] = []
    start_at: int = 0
    max_results: int = 0
    total: int | None = None


class Issue(msgspec.Struct):
    """Single issue with its ``fields`` object kept as raw JSON."""

    id: str
    key: str
    fields: msgspec.Raw


class IssueSummaryFields(msgspec.Struct):
    summary: str = ""


class CreatedIssue(msgspec.Struct):
    id: str
    key: str


class ErrorCollection(msgspec.Struct, rename="camel"):
    """Error body Jira returns alongside 4xx responses."""

    error_messages: list[str] = []
    errors: dict[str, str] = {}

    def describe(self) -> str:
        parts = list(self.error_messages)
        parts.extend(f"{field}: {message}" for field, message in self.errors.items())
        return "; ".join(parts)


class ServerInfo(msgspec.Struct, rename="camel"):
    version: str = ""
    base_url: str = ""
    deployment_type: str = ""


class CurrentUser(msgspec.Struct, rename="camel"):
    name: str | None = None
    account_id: str | None = None
    email_address: str | None = None
    display_name: str | None = None


class IssueDraft(msgspec.Struct, kw_only=True):
    """Fields for creating or updating an issue.

    Only the fields that are set end up in the request payload, so a draft
    with just ``summary`` performs a partial update.

    Example:
        draft = IssueDraft(
            project_key="SSDFW",
            summary="[Protocol] Test issue",
            issue_type="Story",
            components=["Protocol_Team"],
            custom_fields={"customfield_10062": 1},
        )
    """

    project_key: str | None = None
    summary: str | None = None
    description: str | None = None
    issue_type: str | None = None
    assignee: str | None = None
    fix_versions: list[str] = []
    components: list[str] = []
    custom_fields: dict[str, Any] = {}

    def to_payload(self) -> dict[str, Any]:
        """Build the ``{"fields": {...}}`` request body."""
        fields: dict[str, Any] = {}
        if self.project_key:
            fields["project"] = {"key": self.project_key}
        if self.summary is not None:
            fields["summary"] = self.summary
        if self.description is not None:
            fields["description"] = self.description
        if self.issue_type:
            fields["issuetype"] = {"name": self.issue_type}
        if self.assignee:
            fields["assignee"] = {"name": self.assignee}
        if self.fix_versions:
            fields["fixVersions"] = [{"name": name} for name in self.fix_versions]
        if self.components:
            fields["components"] = [{"name": name} for name in self.components]
        fields.update(self.custom_fields)
        return {"fields": fields}
