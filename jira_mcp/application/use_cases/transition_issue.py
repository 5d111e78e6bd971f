import logging

from jira_mcp.domain.inputs import TransitionIssueInput

logger = logging.getLogger(__name__)


class TransitionIssueUseCase:
    """
    Jira 이슈 상태 전환 Use Case (placeholder).

    Jira transitions API 를 호출하지 않고 항상 성공 메시지를 반환합니다.
    이슈나 트랜지션의 실제 존재 여부는 확인하지 않습니다.
    """

    async def execute(self, request: TransitionIssueInput) -> dict:
        logger.info(
            "TransitionIssueUseCase 실행 (placeholder): key=%s, transition=%s",
            request.issue_id_or_key,
            request.transition_id,
        )
        return {
            "success": True,
            "message": (
                f"Transitioned issue {request.issue_id_or_key} "
                f"to transition {request.transition_id} (placeholder)"
            ),
        }
