"""
커맨드 레이어 테스트.

FakeJiraPort 로 원격 호출을 기록하며 입력 검증, 응답 가공,
오류 정규화, 일괄 생성의 동시성/순서를 검증합니다.
"""
import json

import httpx
import pytest

from jira_mcp.adapters.inbound.mcp.commands import build_commands
from jira_mcp.adapters.outbound.jira_adapter import JiraAdapter
from jira_mcp.configuration.container import create_container
from jira_mcp.domain.jira import JiraApiError, JiraTransportError

BASE_URL = "https://example.atlassian.net"


class TestRegistry:
    def test_registry_names_in_order(self, commands):
        assert list(commands) == [
            "getIssueDetails",
            "createIssue",
            "transitionIssue",
            "batchCreateIssues",
            "logWork",
            "createTask",
            "getTask",
            "updateTask",
            "deleteTask",
            "listTasks",
        ]

    def test_create_issue_schema_required_fields(self, commands):
        schema = commands["createIssue"].input_schema()
        assert schema["required"] == ["projectKey", "summary", "issueType"]
        assert "epicLink" in schema["properties"]


class TestMissingFields:
    """필수 입력 누락 시 네트워크 호출 없이 오류 반환"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "name,arguments,message",
        [
            ("getIssueDetails", {}, "Missing required fields: issueIdOrKey"),
            ("createIssue", {"projectKey": "PROJ", "summary": "x"}, "Missing required fields: projectKey, summary, or issueType"),
            ("createIssue", {"summary": "x", "issueType": "Task"}, "Missing required fields: projectKey, summary, or issueType"),
            ("batchCreateIssues", {"projectKey": "PROJ", "issues": []}, "Missing projectKey or issues array is empty"),
            ("batchCreateIssues", {"issues": [{"summary": "a", "issueType": "Task"}]}, "Missing projectKey or issues array is empty"),
            ("logWork", {"issueKey": "PROJ-1"}, "Missing required fields: issueKey or timeSpent"),
            ("createTask", {"projectKey": "PROJ", "issueType": "Task"}, "Missing required fields: projectKey, summary, or issueType"),
            ("getTask", {"issueIdOrKey": ""}, "Missing required fields: issueIdOrKey"),
            ("updateTask", {"issueIdOrKey": "PROJ-1"}, "Missing required fields: issueIdOrKey or fields"),
            ("deleteTask", {}, "Missing required fields: issueIdOrKey"),
        ],
    )
    async def test_returns_error_without_calls(self, commands, fake_port, name, arguments, message):
        result = await commands[name].run(arguments)

        assert result == {"error": True, "message": message}
        assert fake_port.calls == []


class TestGetIssueDetails:
    @pytest.mark.asyncio
    async def test_projects_issue_fields(self, commands, fake_port):
        fake_port.issue = {
            "key": "PROJ-123",
            "fields": {
                "summary": "Login fails",
                "status": {"name": "In Progress"},
                "assignee": {"displayName": "Kim Dev"},
                "description": {
                    "type": "doc",
                    "content": [
                        {"type": "paragraph", "content": [{"type": "text", "text": "a"}, {"type": "text", "text": "b"}]},
                        {"type": "paragraph", "content": [{"type": "text", "text": "c"}]},
                    ],
                },
                "customfield_10008": "PROJ-1",
                "subtasks": [{"key": "PROJ-124", "fields": {"summary": "Fix form"}}],
            },
        }

        result = await commands["getIssueDetails"].run({"issueIdOrKey": "PROJ-123"})

        assert result == {
            "key": "PROJ-123",
            "summary": "Login fails",
            "status": "In Progress",
            "assignee": "Kim Dev",
            "description": "a b\nc",
            "epicLink": "PROJ-1",
            "subtasks": [{"key": "PROJ-124", "summary": "Fix form"}],
        }
        assert fake_port.calls == [("get_issue", "PROJ-123")]

    @pytest.mark.asyncio
    async def test_absent_optional_fields_are_none(self, commands, fake_port):
        fake_port.issue = {"key": "PROJ-9", "fields": {"summary": "Bare", "status": {"name": "To Do"}}}

        result = await commands["getIssueDetails"].run({"issueIdOrKey": "PROJ-9"})

        assert result["assignee"] is None
        assert result["description"] is None
        assert result["epicLink"] is None
        assert result["subtasks"] == []

    @pytest.mark.asyncio
    async def test_api_failure_is_normalized(self, commands, fake_port):
        fake_port.error = JiraApiError(404, "Issue does not exist")

        result = await commands["getIssueDetails"].run({"issueIdOrKey": "PROJ-404"})

        assert result == {"error": True, "message": "Jira API error: 404 Issue does not exist"}

    @pytest.mark.asyncio
    async def test_repeated_calls_issue_identical_requests(self, commands, fake_port):
        await commands["getIssueDetails"].run({"issueIdOrKey": "PROJ-1"})
        await commands["getIssueDetails"].run({"issueIdOrKey": "PROJ-1"})

        assert fake_port.calls == [("get_issue", "PROJ-1"), ("get_issue", "PROJ-1")]


class TestCreateIssue:
    @pytest.mark.asyncio
    async def test_returns_key_and_browse_url(self, commands, fake_port):
        result = await commands["createIssue"].run(
            {"projectKey": "PROJ", "summary": "Test Ticket", "issueType": "Task"}
        )

        assert result == {"key": "PROJ-1", "url": f"{BASE_URL}/browse/PROJ-1"}
        name, issue = fake_port.calls[0]
        assert name == "create_issue"
        assert (issue.project_key, issue.summary, issue.issue_type) == ("PROJ", "Test Ticket", "Task")

    @pytest.mark.asyncio
    async def test_optional_fields_reach_port(self, commands, fake_port):
        await commands["createIssue"].run({
            "projectKey": "PROJ",
            "summary": "Test Ticket",
            "issueType": "Task",
            "description": "Sample Desc",
            "assignee": "user1",
            "priority": "High",
            "epicLink": "EPIC-1",
            "parent": "PROJ-100",
        })

        issue = fake_port.calls[0][1]
        assert issue.epic_link == "EPIC-1"
        assert issue.parent == "PROJ-100"
        assert issue.priority == "High"

    @pytest.mark.asyncio
    async def test_transport_failure_is_normalized(self, commands, fake_port):
        fake_port.error = JiraTransportError("Jira server connection failed")

        result = await commands["createIssue"].run(
            {"projectKey": "PROJ", "summary": "Test Ticket", "issueType": "Task"}
        )

        assert result == {"error": True, "message": "Jira server connection failed"}

    @pytest.mark.asyncio
    async def test_missing_base_url_fails_after_create(self, commands, fake_port):
        fake_port.base_url = ""

        result = await commands["createIssue"].run(
            {"projectKey": "PROJ", "summary": "Test Ticket", "issueType": "Task"}
        )

        assert result["error"] is True
        assert len(fake_port.calls) == 1


class TestTransitionIssue:
    @pytest.mark.asyncio
    async def test_placeholder_success_without_network(self, commands, fake_port):
        result = await commands["transitionIssue"].run({"issueIdOrKey": "PROJ-123", "transitionId": "31"})

        assert result["success"] is True
        assert "PROJ-123" in result["message"]
        assert "31" in result["message"]
        assert fake_port.calls == []

    @pytest.mark.asyncio
    async def test_never_fails_even_without_input(self, commands, fake_port):
        fake_port.error = JiraApiError(500, "down")

        result = await commands["transitionIssue"].run({})

        assert result["success"] is True
        assert fake_port.calls == []


class TestBatchCreateIssues:
    @pytest.mark.asyncio
    async def test_partial_failure_keeps_input_order(self, commands, fake_port):
        fake_port.failing_summaries = {"Task 2"}

        result = await commands["batchCreateIssues"].run({
            "projectKey": "PROJ",
            "issues": [
                {"summary": "Task 1", "issueType": "Task"},
                {"summary": "Task 2", "description": "Desc 2", "issueType": "Bug", "assignee": "user2"},
                {"summary": "Task 3", "issueType": "Task"},
            ],
        })

        assert len(result) == 3
        assert result[0]["success"] is True
        assert result[0]["url"] == f"{BASE_URL}/browse/{result[0]['key']}"
        assert result[1] == {
            "error": True,
            "message": "Jira API error: 400 cannot create Task 2",
            "summary": "Task 2",
        }
        assert result[2]["success"] is True
        assert {result[0]["key"], result[2]["key"]} == {"PROJ-1", "PROJ-2"}

    @pytest.mark.asyncio
    async def test_items_are_dispatched_concurrently(self, commands, fake_port):
        await commands["batchCreateIssues"].run({
            "projectKey": "PROJ",
            "issues": [{"summary": f"Task {i}", "issueType": "Task"} for i in range(3)],
        })

        assert fake_port.max_in_flight == 3

    @pytest.mark.asyncio
    async def test_items_inherit_project_key(self, commands, fake_port):
        await commands["batchCreateIssues"].run({
            "projectKey": "PROJ",
            "issues": [{"summary": "Task 1", "issueType": "Task", "assignee": "user2"}],
        })

        issue = fake_port.calls[0][1]
        assert issue.project_key == "PROJ"
        assert issue.assignee == "user2"


class TestLogWork:
    @pytest.mark.asyncio
    async def test_without_comment(self, commands, fake_port):
        result = await commands["logWork"].run({"issueKey": "PROJ-123", "timeSpent": "2h"})

        assert result == {"success": True, "message": "Worklog added to PROJ-123"}
        assert fake_port.calls == [("add_worklog", ("PROJ-123", "2h", None))]

    @pytest.mark.asyncio
    async def test_with_comment(self, commands, fake_port):
        await commands["logWork"].run({"issueKey": "PROJ-123", "timeSpent": "30m", "comment": "Worked on bugfix"})

        assert fake_port.calls == [("add_worklog", ("PROJ-123", "30m", "Worked on bugfix"))]

    @pytest.mark.asyncio
    async def test_api_failure_is_normalized(self, commands, fake_port):
        fake_port.error = JiraApiError(403, "Forbidden")

        result = await commands["logWork"].run({"issueKey": "PROJ-123", "timeSpent": "2h"})

        assert result == {"error": True, "message": "Jira API error: 403 Forbidden"}


class TestTaskCommands:
    @pytest.mark.asyncio
    async def test_create_task_forwards_only_task_fields(self, commands, fake_port):
        result = await commands["createTask"].run({
            "summary": "Task summary",
            "projectKey": "PROJ",
            "issueType": "Task",
            "priority": "High",
        })

        assert result == {"key": "PROJ-1", "url": f"{BASE_URL}/browse/PROJ-1"}
        assert fake_port.calls[0][1].priority is None

    @pytest.mark.asyncio
    async def test_get_task_delegates_to_issue_details(self, commands, fake_port):
        fake_port.issue = {"key": "PROJ-123", "fields": {"summary": "Hello"}}

        result = await commands["getTask"].run({"issueIdOrKey": "PROJ-123"})

        assert result["key"] == "PROJ-123"
        assert result["summary"] == "Hello"

    @pytest.mark.asyncio
    async def test_update_task(self, commands, fake_port):
        arguments = {"issueIdOrKey": "PROJ-123", "fields": {"summary": "Updated"}}

        result = await commands["updateTask"].run(arguments)

        assert result == {"success": True, "message": "Task updated", "input": arguments}
        assert fake_port.calls == [("update_issue", ("PROJ-123", {"summary": "Updated"}))]

    @pytest.mark.asyncio
    async def test_delete_task(self, commands, fake_port):
        result = await commands["deleteTask"].run({"issueIdOrKey": "PROJ-123"})

        assert result["success"] is True
        assert result["message"] == "Task deleted"
        assert fake_port.calls == [("delete_issue", "PROJ-123")]

    @pytest.mark.asyncio
    async def test_delete_task_failure(self, commands, fake_port):
        fake_port.error = JiraApiError(404, "not found")

        result = await commands["deleteTask"].run({"issueIdOrKey": "PROJ-404"})

        assert result["error"] is True

    @pytest.mark.asyncio
    async def test_list_tasks_without_params(self, commands, fake_port):
        fake_port.search_result = {"issues": [{"key": "PROJ-1"}]}

        result = await commands["listTasks"].run({})

        assert result == {"success": True, "issues": [{"key": "PROJ-1"}]}
        assert fake_port.calls == [("search_issues", (None, None))]

    @pytest.mark.asyncio
    async def test_list_tasks_with_params(self, commands, fake_port):
        await commands["listTasks"].run({"jql": "project=PROJ", "maxResults": 5})
        await commands["listTasks"].run({"jql": "project=PROJ", "maxResults": 5})

        assert fake_port.calls == [
            ("search_issues", ("project=PROJ", 5)),
            ("search_issues", ("project=PROJ", 5)),
        ]


def _adapter_commands(settings, handler):
    """MockTransport 위의 실제 JiraAdapter 로 커맨드 레지스트리를 구성합니다."""
    adapter = JiraAdapter(
        base_url=settings.jira_base_url,
        email=settings.jira_email,
        api_token=settings.jira_api_token,
        transport=httpx.MockTransport(handler),
    )
    return build_commands(create_container(settings, jira_port=adapter))


class TestMalformedRemoteResponses:
    """2xx 이지만 형태가 잘못된 응답도 커맨드 경계를 넘지 않음"""

    @pytest.mark.asyncio
    async def test_batch_isolates_non_json_item(self, settings):
        def handler(request):
            summary = json.loads(request.content)["fields"]["summary"]
            if summary == "Task 2":
                return httpx.Response(201, text="not json")
            return httpx.Response(201, json={"key": "PROJ-7"})

        commands = _adapter_commands(settings, handler)

        result = await commands["batchCreateIssues"].run({
            "projectKey": "PROJ",
            "issues": [
                {"summary": "Task 1", "issueType": "Task"},
                {"summary": "Task 2", "issueType": "Task"},
            ],
        })

        assert result[0] == {"key": "PROJ-7", "url": f"{BASE_URL}/browse/PROJ-7", "success": True}
        assert result[1]["error"] is True
        assert result[1]["summary"] == "Task 2"
        assert "non-JSON" in result[1]["message"]

    @pytest.mark.asyncio
    async def test_batch_isolates_response_without_key(self, settings):
        def handler(request):
            summary = json.loads(request.content)["fields"]["summary"]
            if summary == "Task 1":
                return httpx.Response(201, json={"id": "10001"})
            return httpx.Response(201, json={"key": "PROJ-8"})

        commands = _adapter_commands(settings, handler)

        result = await commands["batchCreateIssues"].run({
            "projectKey": "PROJ",
            "issues": [
                {"summary": "Task 1", "issueType": "Task"},
                {"summary": "Task 2", "issueType": "Task"},
            ],
        })

        assert result[0] == {
            "error": True,
            "message": "Jira create response did not include an issue key",
            "summary": "Task 1",
        }
        assert result[1]["key"] == "PROJ-8"

    @pytest.mark.asyncio
    async def test_get_issue_details_with_html_body(self, settings):
        commands = _adapter_commands(settings, lambda request: httpx.Response(200, text="<html>proxy</html>"))

        result = await commands["getIssueDetails"].run({"issueIdOrKey": "PROJ-1"})

        assert result["error"] is True
        assert "non-JSON" in result["message"]

    @pytest.mark.asyncio
    async def test_list_tasks_with_html_body(self, settings):
        commands = _adapter_commands(settings, lambda request: httpx.Response(200, text="<html>proxy</html>"))

        result = await commands["listTasks"].run({})

        assert result["error"] is True

    @pytest.mark.asyncio
    async def test_batch_rejects_non_object_items(self, commands, fake_port):
        result = await commands["batchCreateIssues"].run({
            "projectKey": "PROJ",
            "issues": [{"summary": "Task 1", "issueType": "Task"}, "Task 2"],
        })

        assert result == {
            "error": True,
            "message": "Each item in issues must be an object with summary and issueType",
        }
        assert fake_port.calls == []
