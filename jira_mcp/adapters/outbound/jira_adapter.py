import json
import logging
from typing import Any

import httpx

from jira_mcp.domain.inputs import CreateIssueInput
from jira_mcp.domain.jira import (
    EPIC_LINK_FIELD,
    JiraApiError,
    JiraConfigurationError,
    JiraResponseError,
    JiraTransportError,
)

logger = logging.getLogger(__name__)

_API_PREFIX = "/rest/api/3"
_DEFAULT_TIMEOUT = 30.0
_ERROR_TEXT_LIMIT = 500


class JiraAdapter:
    """Jira Cloud REST API(v3)와 통신하는 Outbound Adapter"""

    def __init__(
        self,
        base_url: str,
        email: str,
        api_token: str,
        timeout: float = _DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.email = email or ""
        self.api_token = api_token or ""
        self.timeout = timeout
        self._transport = transport

    # ------------------------------------------------------------------
    # Public methods
    # ------------------------------------------------------------------

    async def get_issue(self, issue_id_or_key: str) -> dict[str, Any]:
        logger.info("🌐 Jira 이슈 조회: %s", issue_id_or_key)
        return await self._request_object("GET", f"/issue/{issue_id_or_key}")

    async def create_issue(self, issue: CreateIssueInput) -> dict[str, Any]:
        """
        이슈를 생성합니다.

        선택 필드는 값이 있을 때만 Jira 필드 이름으로 매핑합니다.
        (epic link → customfield_10008, parent → parent.key)
        """
        fields: dict[str, Any] = {
            "project": {"key": issue.project_key},
            "summary": issue.summary,
            "issuetype": {"name": issue.issue_type},
        }
        if issue.description:
            fields["description"] = issue.description
        if issue.assignee:
            fields["assignee"] = {"name": issue.assignee}
        if issue.priority:
            fields["priority"] = {"name": issue.priority}
        if issue.epic_link:
            fields[EPIC_LINK_FIELD] = issue.epic_link
        if issue.parent:
            fields["parent"] = {"key": issue.parent}

        logger.info("🌐 Jira 이슈 생성: project=%s, type=%s", issue.project_key, issue.issue_type)
        data = await self._request_object("POST", "/issue", body=json.dumps({"fields": fields}))
        logger.info("✅ 이슈 생성 완료: %s", data.get("key"))
        return data

    async def add_worklog(self, issue_key: str, time_spent: str, comment: str | None = None) -> dict[str, Any]:
        body: dict[str, Any] = {"timeSpent": time_spent}
        if comment:
            body["comment"] = comment

        logger.info("🌐 작업 시간 기록: %s (%s)", issue_key, time_spent)
        return await self._request("POST", f"/issue/{issue_key}/worklog", body=json.dumps(body))

    async def update_issue(self, issue_id_or_key: str, fields: dict[str, Any]) -> dict[str, Any] | None:
        logger.info("🌐 Jira 이슈 수정: %s (필드: %s)", issue_id_or_key, list(fields))
        return await self._request("PUT", f"/issue/{issue_id_or_key}", body=json.dumps({"fields": fields}))

    async def delete_issue(self, issue_id_or_key: str) -> dict[str, Any] | None:
        logger.info("🌐 Jira 이슈 삭제: %s", issue_id_or_key)
        return await self._request("DELETE", f"/issue/{issue_id_or_key}")

    async def search_issues(self, jql: str | None = None, max_results: int | None = None) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if jql:
            body["jql"] = jql
        if max_results:
            body["maxResults"] = max_results

        logger.info("🌐 Jira 이슈 검색: jql=%s, maxResults=%s", jql, max_results)
        data = await self._request_object("POST", "/search", body=json.dumps(body))
        logger.info("✅ 검색 완료: %d건", len(data.get("issues") or []))
        return data

    def browse_url(self, key: str) -> str:
        self._ensure_configured()
        return f"{self.base_url}/browse/{key}"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _ensure_configured(self) -> None:
        if not self.base_url or not self.email or not self.api_token:
            raise JiraConfigurationError(
                "Missing required Jira configuration. "
                "Please set JIRA_BASE_URL, JIRA_EMAIL, and JIRA_API_TOKEN."
            )

    def _client(self) -> httpx.AsyncClient:
        """Basic auth 와 timeout 이 설정된 httpx.AsyncClient 를 반환합니다."""
        return httpx.AsyncClient(
            auth=(self.email, self.api_token),
            headers={"Accept": "application/json"},
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _request(self, method: str, path: str, *, body: Any = None) -> Any:
        """
        공통 HTTP 요청.

        body 는 str/bytes 일 때만 전송하며, 그 외 타입은 버리고 body 없이 요청합니다.
        body 를 전송하면 Content-Type: application/json 을 붙입니다.
        2xx 응답은 JSON 으로 파싱해 반환하고, 본문이 비어 있으면 None 을 반환합니다.
        """
        self._ensure_configured()
        url = f"{self.base_url}{_API_PREFIX}{path}"

        kwargs: dict[str, Any] = {}
        if isinstance(body, (str, bytes, bytearray)):
            kwargs["content"] = body
            kwargs["headers"] = {"Content-Type": "application/json"}
        elif body is not None:
            logger.warning("⚠️ 전송할 수 없는 body 타입(%s) → body 없이 요청합니다", type(body).__name__)

        logger.info("%s %s", method, url)
        try:
            async with self._client() as client:
                response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("❌ 네트워크 오류: %s", str(e))
            raise JiraTransportError(f"Jira server connection failed: {self.base_url} ({e})") from e

        logger.info("HTTP Status: %d", response.status_code)
        if not response.is_success:
            logger.error("❌ HTTP 오류 발생: %d", response.status_code)
            logger.error("응답 본문: %s", response.text[:_ERROR_TEXT_LIMIT])
            raise JiraApiError(response.status_code, response.text)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error("❌ JSON 이 아닌 응답: %s", response.text[:_ERROR_TEXT_LIMIT])
            raise JiraResponseError(
                f"Jira API returned a non-JSON response: {response.status_code} {response.text[:200]}"
            ) from e

    async def _request_object(self, method: str, path: str, *, body: Any = None) -> dict[str, Any]:
        """JSON 객체(dict) 응답이 필요한 요청. 그 외 형태는 JiraResponseError."""
        data = await self._request(method, path, body=body)
        if not isinstance(data, dict):
            raise JiraResponseError(
                f"Jira API returned an unexpected response for {method} {path}: {type(data).__name__}"
            )
        return data
