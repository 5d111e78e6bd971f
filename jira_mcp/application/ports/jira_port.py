from typing import Any, Protocol

from jira_mcp.domain.inputs import CreateIssueInput


class JiraPort(Protocol):
    """Jira 서비스와의 계약을 정의하는 Port"""

    async def get_issue(self, issue_id_or_key: str) -> dict[str, Any]:
        """이슈 하나를 key 또는 ID로 조회합니다."""
        ...

    async def create_issue(self, issue: CreateIssueInput) -> dict[str, Any]:
        """이슈를 생성하고 Jira 응답(key, id, self)을 반환합니다."""
        ...

    async def add_worklog(self, issue_key: str, time_spent: str, comment: str | None = None) -> dict[str, Any]:
        """이슈에 작업 시간을 기록합니다."""
        ...

    async def update_issue(self, issue_id_or_key: str, fields: dict[str, Any]) -> dict[str, Any] | None:
        """이슈 필드를 수정합니다."""
        ...

    async def delete_issue(self, issue_id_or_key: str) -> dict[str, Any] | None:
        """이슈를 삭제합니다."""
        ...

    async def search_issues(self, jql: str | None = None, max_results: int | None = None) -> dict[str, Any]:
        """JQL 로 이슈를 검색합니다."""
        ...

    def browse_url(self, key: str) -> str:
        """브라우저에서 열 수 있는 이슈 URL 을 반환합니다."""
        ...
