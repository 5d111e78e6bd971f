import logging

from jira_mcp.application.ports.jira_port import JiraPort
from jira_mcp.domain.inputs import LogWorkInput

logger = logging.getLogger(__name__)


class LogWorkUseCase:
    """Jira 이슈에 작업 시간(worklog)을 기록하는 Use Case"""

    def __init__(self, jira_port: JiraPort):
        self.jira_port = jira_port

    async def execute(self, request: LogWorkInput) -> dict:
        logger.info("⏱️ LogWorkUseCase 실행: %s, %s", request.issue_key, request.time_spent)

        await self.jira_port.add_worklog(request.issue_key, request.time_spent, request.comment)

        return {"success": True, "message": f"Worklog added to {request.issue_key}"}
