import asyncio
from typing import Any

import pytest

from jira_mcp.adapters.inbound.mcp.commands import build_commands
from jira_mcp.configuration.container import create_container
from jira_mcp.configuration.settings import Settings
from jira_mcp.domain.inputs import CreateIssueInput
from jira_mcp.domain.jira import JiraApiError, JiraConfigurationError

BASE_URL = "https://example.atlassian.net"


class FakeJiraPort:
    """호출을 기록하는 JiraPort 대역"""

    def __init__(self, base_url: str = BASE_URL):
        self.base_url = base_url
        self.calls: list[tuple[str, Any]] = []
        self.issue: dict[str, Any] = {"key": "PROJ-123", "fields": {}}
        self.search_result: dict[str, Any] = {"issues": []}
        self.failing_summaries: set[str] = set()
        self.error: Exception | None = None
        self.in_flight = 0
        self.max_in_flight = 0
        self._next_id = 0

    def _record(self, name: str, args: Any) -> None:
        self.calls.append((name, args))
        if self.error is not None:
            raise self.error

    async def get_issue(self, issue_id_or_key: str) -> dict[str, Any]:
        self._record("get_issue", issue_id_or_key)
        return self.issue

    async def create_issue(self, issue: CreateIssueInput) -> dict[str, Any]:
        self._record("create_issue", issue)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if issue.summary in self.failing_summaries:
                raise JiraApiError(400, f"cannot create {issue.summary}")
            self._next_id += 1
            return {"key": f"{issue.project_key}-{self._next_id}"}
        finally:
            self.in_flight -= 1

    async def add_worklog(self, issue_key: str, time_spent: str, comment: str | None = None) -> dict[str, Any]:
        self._record("add_worklog", (issue_key, time_spent, comment))
        return {"id": "10000"}

    async def update_issue(self, issue_id_or_key: str, fields: dict[str, Any]) -> None:
        self._record("update_issue", (issue_id_or_key, fields))

    async def delete_issue(self, issue_id_or_key: str) -> None:
        self._record("delete_issue", issue_id_or_key)

    async def search_issues(self, jql: str | None = None, max_results: int | None = None) -> dict[str, Any]:
        self._record("search_issues", (jql, max_results))
        return self.search_result

    def browse_url(self, key: str) -> str:
        if not self.base_url:
            raise JiraConfigurationError("Missing required Jira configuration.")
        return f"{self.base_url}/browse/{key}"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        app_env="test",
        server_name="jira-mcp-test",
        jira_base_url=BASE_URL,
        jira_email="bot@example.com",
        jira_api_token="secret-token",
        jira_timeout=5.0,
        log_dir=str(tmp_path / "logs"),
        log_level="INFO",
    )


@pytest.fixture
def fake_port():
    return FakeJiraPort()


@pytest.fixture
def container(settings, fake_port):
    return create_container(settings, jira_port=fake_port)


@pytest.fixture
def commands(container):
    return build_commands(container)
