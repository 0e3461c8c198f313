"""Tests for JiraIssueService single-issue operations."""

import msgspec
import pytest

from jirascan.exceptions import NotFoundError, SerializationError, TransportError
from jirascan.jira.issues import JiraIssueService
from jirascan.jira.models import IssueDraft

ISSUE_BODY = (
    b'{"id": "10042", "key": "ABC-42", "self": "https://jira.example.com/rest/api/2/issue/10042",'
    b' "fields": {"summary": "Fix login timeout", "priority": {"name": "High"}, "labels": ["auth"]}}'
)


class Priority(msgspec.Struct):
    name: str


class Fields(msgspec.Struct):
    summary: str
    priority: Priority
    labels: list[str] = []


@pytest.fixture
def service(jira_client):
    return JiraIssueService(jira_client)


class TestReadOperations:
    """Tests for fetching issue attributes."""

    def test_get_issue_id(self, service, mock_session, response):
        mock_session.request.return_value = response(200, ISSUE_BODY)

        assert service.get_issue_id("ABC-42") == "10042"
        assert mock_session.request.call_args.args == (
            "GET",
            "https://jira.example.com/rest/api/2/issue/ABC-42",
        )

    def test_get_summary(self, service, mock_session, response):
        mock_session.request.return_value = response(200, ISSUE_BODY)
        assert service.get_summary("ABC-42") == "Fix login timeout"

    def test_get_fields_raw(self, service, mock_session, response):
        mock_session.request.return_value = response(200, ISSUE_BODY)

        raw = service.get_fields_raw("ABC-42")

        assert isinstance(raw, bytes)
        assert msgspec.json.decode(raw)["labels"] == ["auth"]

    def test_decode_fields_into_struct(self, service, mock_session, response):
        mock_session.request.return_value = response(200, ISSUE_BODY)

        fields = service.decode_fields("ABC-42", Fields)

        assert fields.priority.name == "High"
        assert fields.labels == ["auth"]

    def test_decode_fields_type_mismatch(self, service, mock_session, response):
        mock_session.request.return_value = response(200, ISSUE_BODY)

        with pytest.raises(SerializationError, match="ABC-42"):
            service.decode_fields("ABC-42", list[int])

    def test_missing_issue(self, service, mock_session, response, no_retry_sleep):
        mock_session.request.return_value = response(404, b'{"errorMessages": ["Issue Does Not Exist"]}')

        with pytest.raises(NotFoundError):
            service.get_summary("ABC-999")

        assert mock_session.request.call_count == 1


class TestWriteOperations:
    """Tests for creating and updating issues."""

    def test_create_issue(self, service, mock_session, response):
        mock_session.request.return_value = response(201, b'{"id": "10100", "key": "ABC-100"}')
        draft = IssueDraft(
            project_key="ABC",
            summary="[Protocol] Test issue",
            issue_type="Story",
            components=["Protocol_Team"],
            custom_fields={"customfield_10062": 1},
        )

        assert service.create_issue(draft) == "ABC-100"

        args, kwargs = mock_session.request.call_args
        assert args[0] == "POST"
        assert msgspec.json.decode(kwargs["data"]) == {
            "fields": {
                "project": {"key": "ABC"},
                "summary": "[Protocol] Test issue",
                "issuetype": {"name": "Story"},
                "components": [{"name": "Protocol_Team"}],
                "customfield_10062": 1,
            }
        }

    def test_create_issue_rejected(self, service, mock_session, response):
        mock_session.request.return_value = response(
            400, b'{"errorMessages": [], "errors": {"issuetype": "valid issue type is required"}}'
        )

        with pytest.raises(TransportError, match="issuetype: valid issue type is required"):
            service.create_issue(IssueDraft(project_key="ABC", summary="x"))

    def test_create_issue_not_retried_on_server_error(
        self, service, mock_session, response, no_retry_sleep
    ):
        mock_session.request.return_value = response(500, b"")

        with pytest.raises(TransportError):
            service.create_issue(IssueDraft(project_key="ABC", summary="x", issue_type="Bug"))

        assert mock_session.request.call_count == 1

    def test_update_issue(self, service, mock_session, response):
        mock_session.request.return_value = response(204, b"")

        key = service.update_issue("ABC-7", IssueDraft(summary="New title", fix_versions=["1.2"]))

        assert key == "ABC-7"
        args, kwargs = mock_session.request.call_args
        assert args == ("PUT", "https://jira.example.com/rest/api/2/issue/ABC-7")
        assert msgspec.json.decode(kwargs["data"]) == {
            "fields": {"summary": "New title", "fixVersions": [{"name": "1.2"}]}
        }


class TestIssueDraft:
    """Tests for IssueDraft payload construction."""

    def test_empty_draft(self):
        assert IssueDraft().to_payload() == {"fields": {}}

    def test_assignee_and_description(self):
        payload = IssueDraft(assignee="jdoe", description="").to_payload()
        assert payload == {"fields": {"assignee": {"name": "jdoe"}, "description": ""}}

    def test_decoded_from_json(self):
        draft = msgspec.json.decode(
            b'{"project_key": "ABC", "summary": "From file", "issue_type": "Task"}',
            type=IssueDraft,
        )
        assert draft.to_payload()["fields"]["issuetype"] == {"name": "Task"}
