import logging

from jira_mcp.application.ports.jira_port import JiraPort
from jira_mcp.domain.inputs import ListTasksInput

logger = logging.getLogger(__name__)


class ListIssuesUseCase:
    """JQL 로 Jira 이슈 목록을 조회하는 Use Case"""

    def __init__(self, jira_port: JiraPort):
        self.jira_port = jira_port

    async def execute(self, request: ListTasksInput) -> list[dict]:
        """
        Args:
            request: jql 과 maxResults (둘 다 생략 가능)

        Returns:
            Jira 검색 응답의 issues 배열 (가공하지 않음)
        """
        logger.info("📋 ListIssuesUseCase 실행: jql=%s", request.jql)

        data = await self.jira_port.search_issues(request.jql, request.max_results)
        issues = data.get("issues") or []

        logger.info("✅ Use Case 실행 완료: %d건", len(issues))
        return issues
