import logging
from typing import Any

from jira_mcp.application.ports.jira_port import JiraPort

logger = logging.getLogger(__name__)


class UpdateIssueUseCase:
    """Jira 이슈 필드를 수정하는 Use Case"""

    def __init__(self, jira_port: JiraPort):
        self.jira_port = jira_port

    async def execute(self, issue_id_or_key: str, fields: dict[str, Any]) -> None:
        logger.info("UpdateIssueUseCase 실행: %s", issue_id_or_key)
        await self.jira_port.update_issue(issue_id_or_key, fields)
