"""
커맨드별 입력 레코드.

각 레코드는 REQUIRED 에 필수 필드를 선언하고, from_arguments() 로 MCP 인자 dict 를
변환합니다. 값이 없거나 falsy(빈 문자열, 빈 리스트/dict)이면 누락으로 간주합니다.
"""
from dataclasses import dataclass, field
from typing import Any, ClassVar


class MissingFieldsError(ValueError):
    """필수 입력 누락 (네트워크 호출 전에 발생)"""


def missing_fields(arguments: dict[str, Any], required: tuple[str, ...]) -> list[str]:
    return [name for name in required if not arguments.get(name)]


def _require(arguments: dict[str, Any], required: tuple[str, ...], message: str) -> None:
    if missing_fields(arguments, required):
        raise MissingFieldsError(message)


@dataclass(frozen=True)
class IssueKeyInput:
    """issueIdOrKey 하나만 받는 커맨드 입력 (getIssueDetails, getTask, deleteTask)"""
    issue_id_or_key: str

    REQUIRED: ClassVar[tuple[str, ...]] = ("issueIdOrKey",)

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> "IssueKeyInput":
        _require(arguments, cls.REQUIRED, "Missing required fields: issueIdOrKey")
        return cls(issue_id_or_key=arguments["issueIdOrKey"])


@dataclass(frozen=True)
class CreateIssueInput:
    project_key: str
    summary: str
    issue_type: str
    description: str | None = None
    assignee: str | None = None
    priority: str | None = None
    epic_link: str | None = None
    parent: str | None = None

    REQUIRED: ClassVar[tuple[str, ...]] = ("projectKey", "summary", "issueType")

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> "CreateIssueInput":
        _require(arguments, cls.REQUIRED, "Missing required fields: projectKey, summary, or issueType")
        return cls(
            project_key=arguments["projectKey"],
            summary=arguments["summary"],
            issue_type=arguments["issueType"],
            description=arguments.get("description"),
            assignee=arguments.get("assignee"),
            priority=arguments.get("priority"),
            epic_link=arguments.get("epicLink"),
            parent=arguments.get("parent"),
        )


@dataclass(frozen=True)
class TransitionIssueInput:
    issue_id_or_key: str | None
    transition_id: str | None

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> "TransitionIssueInput":
        # placeholder 커맨드라 검증하지 않음
        return cls(
            issue_id_or_key=arguments.get("issueIdOrKey"),
            transition_id=arguments.get("transitionId"),
        )


@dataclass(frozen=True)
class BatchIssueItem:
    summary: str | None
    issue_type: str | None
    description: str | None = None
    assignee: str | None = None


@dataclass(frozen=True)
class BatchCreateIssuesInput:
    project_key: str
    issues: list[BatchIssueItem] = field(default_factory=list)

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> "BatchCreateIssuesInput":
        issues = arguments.get("issues")
        if not arguments.get("projectKey") or not isinstance(issues, list) or not issues:
            raise MissingFieldsError("Missing projectKey or issues array is empty")
        if not all(isinstance(item, dict) for item in issues):
            raise MissingFieldsError("Each item in issues must be an object with summary and issueType")
        return cls(
            project_key=arguments["projectKey"],
            issues=[
                BatchIssueItem(
                    summary=item.get("summary"),
                    issue_type=item.get("issueType"),
                    description=item.get("description"),
                    assignee=item.get("assignee"),
                )
                for item in issues
            ],
        )


@dataclass(frozen=True)
class LogWorkInput:
    issue_key: str
    time_spent: str
    comment: str | None = None

    REQUIRED: ClassVar[tuple[str, ...]] = ("issueKey", "timeSpent")

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> "LogWorkInput":
        _require(arguments, cls.REQUIRED, "Missing required fields: issueKey or timeSpent")
        return cls(
            issue_key=arguments["issueKey"],
            time_spent=arguments["timeSpent"],
            comment=arguments.get("comment"),
        )


@dataclass(frozen=True)
class UpdateTaskInput:
    issue_id_or_key: str
    fields: dict[str, Any]

    REQUIRED: ClassVar[tuple[str, ...]] = ("issueIdOrKey", "fields")

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> "UpdateTaskInput":
        _require(arguments, cls.REQUIRED, "Missing required fields: issueIdOrKey or fields")
        return cls(issue_id_or_key=arguments["issueIdOrKey"], fields=arguments["fields"])


@dataclass(frozen=True)
class ListTasksInput:
    jql: str | None = None
    max_results: int | None = None

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> "ListTasksInput":
        return cls(jql=arguments.get("jql"), max_results=arguments.get("maxResults"))
