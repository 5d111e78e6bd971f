from dataclasses import dataclass, field
from typing import Any

# Epic Link 커스텀 필드 (Jira Cloud 기본 스키마)
EPIC_LINK_FIELD = "customfield_10008"


class JiraError(RuntimeError):
    """Jira 연동 중 발생하는 모든 오류의 기반 클래스"""


class JiraConfigurationError(JiraError):
    """필수 Jira 설정값(base URL, 계정, 토큰)이 누락된 경우"""


class JiraApiError(JiraError):
    """Jira API가 2xx 이외의 상태 코드를 반환한 경우"""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Jira API error: {status_code} {body}")


class JiraTransportError(JiraError):
    """Jira 서버와의 네트워크 통신 실패"""


class JiraResponseError(JiraError):
    """2xx 응답 본문을 해석할 수 없는 경우 (JSON 아님, 예상과 다른 형태)"""


@dataclass(frozen=True)
class JiraSubtask:
    """하위 작업 참조 (key + summary)"""
    key: str
    summary: str | None

    def to_dict(self) -> dict:
        return {"key": self.key, "summary": self.summary}


@dataclass(frozen=True)
class JiraIssueDetails:
    """getIssueDetails 응답용 이슈 projection"""
    key: str
    summary: str | None
    status: str | None
    assignee: str | None
    description: str | None
    epic_link: str | None
    subtasks: list[JiraSubtask] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "summary": self.summary,
            "status": self.status,
            "assignee": self.assignee,
            "description": self.description,
            "epicLink": self.epic_link,
            "subtasks": [s.to_dict() for s in self.subtasks],
        }


@dataclass(frozen=True)
class JiraCreatedIssue:
    """이슈 생성 결과 (key + 브라우저 URL)"""
    key: str
    url: str

    def to_dict(self) -> dict:
        return {"key": self.key, "url": self.url}


def flatten_document(document: Any) -> str | None:
    """
    Atlassian Document Format(ADF) 본문을 평문으로 변환합니다.

    블록 내부 텍스트 노드는 공백 한 칸으로, 블록끼리는 줄바꿈으로 이어 붙입니다.
    본문이 없거나 content 가 비어 있으면 None 을 반환합니다.
    """
    if not isinstance(document, dict) or not document.get("content"):
        return None

    lines = []
    for block in document["content"]:
        nodes = block.get("content") or []
        lines.append(" ".join(node.get("text") or "" for node in nodes))
    return "\n".join(lines)


def parse_issue_details(data: dict[str, Any]) -> JiraIssueDetails:
    """GET /issue/{key} 응답을 JiraIssueDetails 로 변환합니다."""
    fields = data.get("fields") or {}
    status = fields.get("status") or {}
    assignee = fields.get("assignee") or {}

    subtasks = [
        JiraSubtask(
            key=s.get("key", ""),
            summary=(s.get("fields") or {}).get("summary"),
        )
        for s in fields.get("subtasks") or []
    ]

    return JiraIssueDetails(
        key=data.get("key", ""),
        summary=fields.get("summary"),
        status=status.get("name"),
        assignee=assignee.get("displayName") or None,
        description=flatten_document(fields.get("description")),
        epic_link=fields.get(EPIC_LINK_FIELD) or None,
        subtasks=subtasks,
    )
