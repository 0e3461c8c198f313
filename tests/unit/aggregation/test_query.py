"""Unit tests for project scan JQL construction."""

import pytest

from jirascan.aggregation.query import build_project_query
from jirascan.exceptions import InvalidConfiguration


class TestBuildProjectQuery:
    """Tests for build_project_query()."""

    def test_project_only(self):
        assert build_project_query("ABC") == "project=ABC"

    @pytest.mark.parametrize("minutes", [None, 0])
    def test_no_recency_filter(self, minutes):
        assert build_project_query("ABC", minutes) == "project=ABC"

    def test_recency_filter(self):
        assert build_project_query("ABC", 30) == "project=ABC AND updatedDate >= -30m"

    def test_negative_minutes_mean_the_same_window(self):
        """Test Jira-style relative values are accepted."""
        assert build_project_query("ABC", -30) == build_project_query("ABC", 30)

    def test_surrounding_whitespace_stripped(self):
        assert build_project_query("  ABC ") == "project=ABC"

    def test_project_name_with_spaces_is_quoted(self):
        assert build_project_query("My Project") == 'project="My Project"'

    def test_quotes_are_escaped(self):
        assert build_project_query('Say "hi"') == 'project="Say \\"hi\\""'

    @pytest.mark.parametrize("key", ["", "   ", None])
    def test_missing_project_key(self, key):
        with pytest.raises(InvalidConfiguration, match="project key is required"):
            build_project_query(key)
