"""Client construction and Jira instance information retrieval."""

from jirascan.config.models import Configuration, ConnectionStatus
from jirascan.exceptions import ConfigError
from jirascan.jira.client import JiraClient


def build_client(config: Configuration) -> JiraClient:
    """
    Create a Jira client from configuration.

    Args:
        config: Configuration with Jira connection details

    Returns:
        Unconnected JiraClient (the session is created on first request)

    Raises:
        ConfigError: If credentials are missing
    """
    if not config.jira.username or not config.jira.api_token:
        raise ConfigError(
            "Missing credentials - set JIRASCAN_USERNAME and JIRASCAN_API_TOKEN"
        )

    return JiraClient(
        base_url=str(config.jira.base_url),
        username=config.jira.username,
        api_token=config.jira.api_token,
        timeout=config.jira.timeout,
        verify_ssl=config.jira.verify_ssl,
    )


def connect_and_get_info(config: Configuration) -> ConnectionStatus:
    """
    Connect to the Jira instance and retrieve information.

    Args:
        config: Configuration with Jira connection details

    Returns:
        ConnectionStatus with instance info or error details
    """
    try:
        client = build_client(config)
    except ConfigError as e:
        return ConnectionStatus(connected=False, authenticated=False, error_message=str(e))

    with client:
        return client.test_connection()
