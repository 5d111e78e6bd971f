import asyncio
import logging

from jira_mcp.application.use_cases.create_issue import CreateIssueUseCase
from jira_mcp.domain.command import error_result
from jira_mcp.domain.inputs import BatchCreateIssuesInput, BatchIssueItem, CreateIssueInput
from jira_mcp.domain.jira import JiraError

logger = logging.getLogger(__name__)


class BatchCreateIssuesUseCase:
    """여러 Jira 이슈를 동시에 생성하는 Use Case"""

    def __init__(self, create_issue_use_case: CreateIssueUseCase):
        self.create_issue_use_case = create_issue_use_case

    async def execute(self, request: BatchCreateIssuesInput) -> list[dict]:
        """
        모든 항목을 동시에 생성하고, 입력 순서대로 항목별 결과를 반환합니다.

        한 항목의 실패는 다른 항목에 영향을 주지 않으며 전체 호출은 예외를 던지지 않습니다.

        Returns:
            성공 항목: {key, url, success: True}
            실패 항목: {error: True, message, summary}
        """
        logger.info("📦 BatchCreateIssuesUseCase 실행: project=%s, %d건", request.project_key, len(request.issues))

        results = await asyncio.gather(
            *(self._create_one(request.project_key, item) for item in request.issues)
        )

        failed = sum(1 for r in results if r.get("error"))
        logger.info("✅ 일괄 생성 완료: 성공 %d건, 실패 %d건", len(results) - failed, failed)
        return list(results)

    async def _create_one(self, project_key: str, item: BatchIssueItem) -> dict:
        try:
            created = await self.create_issue_use_case.execute(
                CreateIssueInput(
                    project_key=project_key,
                    summary=item.summary,
                    issue_type=item.issue_type,
                    description=item.description,
                    assignee=item.assignee,
                )
            )
        except JiraError as e:
            logger.warning("❌ 항목 생성 실패: %s (%s)", item.summary, e)
            return error_result(str(e), summary=item.summary)
        return {"key": created.key, "url": created.url, "success": True}
