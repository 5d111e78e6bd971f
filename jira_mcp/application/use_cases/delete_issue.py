import logging

from jira_mcp.application.ports.jira_port import JiraPort

logger = logging.getLogger(__name__)


class DeleteIssueUseCase:
    """Jira 이슈를 삭제하는 Use Case"""

    def __init__(self, jira_port: JiraPort):
        self.jira_port = jira_port

    async def execute(self, issue_id_or_key: str) -> None:
        logger.info("DeleteIssueUseCase 실행: %s", issue_id_or_key)
        await self.jira_port.delete_issue(issue_id_or_key)
