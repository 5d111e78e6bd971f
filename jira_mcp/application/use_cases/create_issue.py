import logging

from jira_mcp.application.ports.jira_port import JiraPort
from jira_mcp.domain.inputs import CreateIssueInput
from jira_mcp.domain.jira import JiraCreatedIssue, JiraResponseError

logger = logging.getLogger(__name__)


class CreateIssueUseCase:
    """Jira 이슈를 생성하고 브라우저 URL 을 붙여 반환하는 Use Case"""

    def __init__(self, jira_port: JiraPort):
        self.jira_port = jira_port

    async def execute(self, issue: CreateIssueInput) -> JiraCreatedIssue:
        logger.info("📝 CreateIssueUseCase 실행: project=%s, summary=%s", issue.project_key, issue.summary)

        created = await self.jira_port.create_issue(issue)
        key = created.get("key") if isinstance(created, dict) else None
        if not key:
            raise JiraResponseError("Jira create response did not include an issue key")
        # URL 생성 단계에서도 설정 누락 오류가 날 수 있음
        url = self.jira_port.browse_url(key)

        logger.info("✅ Use Case 실행 완료: %s", url)
        return JiraCreatedIssue(key=key, url=url)
