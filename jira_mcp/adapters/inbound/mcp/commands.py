"""
커맨드 레지스트리.

커맨드 이름 → CommandDescriptor(파라미터 선언 + run) 매핑을 만듭니다.
run 은 입력 검증 → Use Case 호출 → 응답 가공 순서로 동작하며,
검증 실패와 JiraError 는 모두 {error: True, message} 로 변환해 반환합니다.
"""
import functools
import logging
from dataclasses import replace
from typing import Any

from jira_mcp.configuration.container import Container
from jira_mcp.domain.command import CommandDescriptor, CommandRunner, ParameterSpec, error_result
from jira_mcp.domain.inputs import (
    BatchCreateIssuesInput,
    CreateIssueInput,
    IssueKeyInput,
    ListTasksInput,
    LogWorkInput,
    MissingFieldsError,
    TransitionIssueInput,
    UpdateTaskInput,
)
from jira_mcp.domain.jira import JiraError

logger = logging.getLogger(__name__)


def _string(description: str, required: bool = False) -> ParameterSpec:
    return ParameterSpec(type="string", required=required, description=description)


ISSUE_ID_OR_KEY = _string("Jira issue ID or key", required=True)
PROJECT_KEY = _string("Jira project key", required=True)
ISSUE_TYPE = _string("Jira issue type", required=True)

BATCH_ITEM_SCHEMA = {
    "type": "object",
    "properties": {
        "summary": {"type": "string", "description": "Issue summary"},
        "description": {"type": "string", "description": "Issue description"},
        "issueType": {"type": "string", "description": "Jira issue type"},
        "assignee": {"type": "string", "description": "Assignee username or accountId"},
    },
    "required": ["summary", "issueType"],
}


def _normalize_errors(name: str, handler: CommandRunner) -> CommandRunner:
    """검증 오류와 JiraError 를 커맨드 공통 실패 응답으로 변환합니다."""

    @functools.wraps(handler)
    async def run(arguments: dict[str, Any]) -> Any:
        try:
            return await handler(arguments or {})
        except MissingFieldsError as e:
            logger.info("⚠️ %s 입력값 누락: %s", name, e)
            return error_result(str(e))
        except JiraError as e:
            logger.error("❌ %s 실패: %s", name, e)
            return error_result(str(e))

    return run


def build_commands(container: Container) -> dict[str, CommandDescriptor]:
    """Container 의 Use Case 들로 커맨드 레지스트리를 구성합니다."""

    async def get_issue_details(arguments: dict[str, Any]) -> dict:
        request = IssueKeyInput.from_arguments(arguments)
        details = await container.get_issue_details_use_case.execute(request.issue_id_or_key)
        return details.to_dict()

    async def create_issue(arguments: dict[str, Any]) -> dict:
        request = CreateIssueInput.from_arguments(arguments)
        created = await container.create_issue_use_case.execute(request)
        return created.to_dict()

    async def transition_issue(arguments: dict[str, Any]) -> dict:
        request = TransitionIssueInput.from_arguments(arguments)
        return await container.transition_issue_use_case.execute(request)

    async def batch_create_issues(arguments: dict[str, Any]) -> list[dict]:
        request = BatchCreateIssuesInput.from_arguments(arguments)
        return await container.batch_create_issues_use_case.execute(request)

    async def log_work(arguments: dict[str, Any]) -> dict:
        request = LogWorkInput.from_arguments(arguments)
        return await container.log_work_use_case.execute(request)

    async def create_task(arguments: dict[str, Any]) -> dict:
        # createIssue 의 일부 필드만 전달
        return await commands["createIssue"].run({
            "projectKey": arguments.get("projectKey"),
            "summary": arguments.get("summary"),
            "description": arguments.get("description"),
            "issueType": arguments.get("issueType"),
        })

    async def get_task(arguments: dict[str, Any]) -> dict:
        return await commands["getIssueDetails"].run({"issueIdOrKey": arguments.get("issueIdOrKey")})

    async def update_task(arguments: dict[str, Any]) -> dict:
        request = UpdateTaskInput.from_arguments(arguments)
        await container.update_issue_use_case.execute(request.issue_id_or_key, request.fields)
        return {"success": True, "message": "Task updated", "input": arguments}

    async def delete_task(arguments: dict[str, Any]) -> dict:
        request = IssueKeyInput.from_arguments(arguments)
        await container.delete_issue_use_case.execute(request.issue_id_or_key)
        return {"success": True, "message": "Task deleted", "input": arguments}

    async def list_tasks(arguments: dict[str, Any]) -> dict:
        request = ListTasksInput.from_arguments(arguments)
        issues = await container.list_issues_use_case.execute(request)
        return {"success": True, "issues": issues}

    descriptors = [
        CommandDescriptor(
            name="getIssueDetails",
            description="Fetch details for a specific Jira issue by key or ID.",
            parameters={"issueIdOrKey": ISSUE_ID_OR_KEY},
            run=get_issue_details,
        ),
        CommandDescriptor(
            name="createIssue",
            description="Create a new Jira issue in a project.",
            parameters={
                "projectKey": PROJECT_KEY,
                "summary": _string("Issue summary", required=True),
                "description": _string("Issue description"),
                "issueType": ISSUE_TYPE,
                "assignee": _string("Assignee username or accountId"),
                "priority": _string("Priority name or ID"),
                "epicLink": _string("Epic issue key (for Epic Link)"),
                "parent": _string("Parent issue key (for sub-tasks)"),
            },
            run=create_issue,
        ),
        CommandDescriptor(
            name="transitionIssue",
            description="Transition a Jira issue to a new workflow state.",
            parameters={
                "issueIdOrKey": ISSUE_ID_OR_KEY,
                "transitionId": _string("Transition ID to apply", required=True),
            },
            run=transition_issue,
        ),
        CommandDescriptor(
            name="batchCreateIssues",
            description="Create multiple Jira issues in a project in batch.",
            parameters={
                "projectKey": PROJECT_KEY,
                "issues": ParameterSpec(
                    type="array",
                    required=True,
                    description="Array of issues to create",
                    items=BATCH_ITEM_SCHEMA,
                ),
            },
            run=batch_create_issues,
        ),
        CommandDescriptor(
            name="logWork",
            description="Log work time to a Jira issue.",
            parameters={
                "issueKey": _string("Jira issue key", required=True),
                "timeSpent": _string("Time spent (e.g. '2h', '30m')", required=True),
                "comment": _string("Optional worklog comment"),
            },
            run=log_work,
        ),
        CommandDescriptor(
            name="createTask",
            description="Create a new Jira task.",
            parameters={
                "summary": _string("Task summary", required=True),
                "description": _string("Task description"),
                "projectKey": PROJECT_KEY,
                "issueType": ISSUE_TYPE,
            },
            run=create_task,
        ),
        CommandDescriptor(
            name="getTask",
            description="Get details of a Jira task by issue ID or key.",
            parameters={"issueIdOrKey": ISSUE_ID_OR_KEY},
            run=get_task,
        ),
        CommandDescriptor(
            name="updateTask",
            description="Update fields of a Jira task.",
            parameters={
                "issueIdOrKey": ISSUE_ID_OR_KEY,
                "fields": ParameterSpec(type="object", required=True, description="Fields to update"),
            },
            run=update_task,
        ),
        CommandDescriptor(
            name="deleteTask",
            description="Delete a Jira task by issue ID or key.",
            parameters={"issueIdOrKey": ISSUE_ID_OR_KEY},
            run=delete_task,
        ),
        CommandDescriptor(
            name="listTasks",
            description="List Jira tasks using JQL.",
            parameters={
                "jql": _string("Jira Query Language string"),
                "maxResults": ParameterSpec(type="number", required=False, description="Maximum number of results"),
            },
            run=list_tasks,
        ),
    ]

    commands: dict[str, CommandDescriptor] = {}
    for descriptor in descriptors:
        # transitionIssue 는 실패하지 않는 placeholder
        if descriptor.name != "transitionIssue":
            descriptor = replace(descriptor, run=_normalize_errors(descriptor.name, descriptor.run))
        commands[descriptor.name] = descriptor
    return commands
