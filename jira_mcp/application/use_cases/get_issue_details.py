import logging

from jira_mcp.application.ports.jira_port import JiraPort
from jira_mcp.domain.jira import JiraIssueDetails, parse_issue_details

logger = logging.getLogger(__name__)


class GetIssueDetailsUseCase:
    """특정 Jira 이슈를 key(ID)로 조회해 필요한 필드만 추려내는 Use Case"""

    def __init__(self, jira_port: JiraPort):
        self.jira_port = jira_port

    async def execute(self, issue_id_or_key: str) -> JiraIssueDetails:
        """
        Jira 이슈를 조회합니다.

        Args:
            issue_id_or_key: Jira 이슈 키 또는 ID (예: "PROJ-123")

        Returns:
            key, summary, status, assignee, 평문 description, epic link, 하위 작업 목록
        """
        logger.info("🔍 GetIssueDetailsUseCase 실행: %s", issue_id_or_key)

        data = await self.jira_port.get_issue(issue_id_or_key)
        details = parse_issue_details(data)

        logger.info("✅ 이슈 조회 완료: %s - %s (하위 작업 %d건)", details.key, details.summary, len(details.subtasks))
        return details
