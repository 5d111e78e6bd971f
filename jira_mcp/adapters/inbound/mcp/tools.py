import json
import logging
import sys
import traceback
from functools import lru_cache
from typing import Any

from mcp.server import Server
from mcp.types import TextContent, Tool

from jira_mcp.adapters.inbound.mcp.commands import build_commands
from jira_mcp.configuration.container import build_container
from jira_mcp.domain.command import CommandDescriptor, error_result

logger = logging.getLogger(__name__)

# 로그에서 축약할 필드 (긴 자유 텍스트)
_SENSITIVE_FIELDS = {"description", "comment", "jql", "fields"}


def _mask_arguments(arguments: dict) -> dict:
    """로깅용으로 긴 텍스트 필드를 축약합니다."""
    masked = {}
    for key, value in arguments.items():
        if key in _SENSITIVE_FIELDS:
            text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
            masked[key] = f"{text[:20]}... ({len(text)}자)" if len(text) > 20 else text
        else:
            masked[key] = value
    return masked


def _to_text(result: Any) -> list[TextContent]:
    return [TextContent(type="text", text=json.dumps(result, ensure_ascii=False, indent=2))]


@lru_cache(maxsize=1)
def get_commands() -> dict[str, CommandDescriptor]:
    return build_commands(build_container())


def list_tool_definitions(commands: dict[str, CommandDescriptor]) -> list[Tool]:
    return [
        Tool(
            name=command.name,
            description=command.description,
            inputSchema=command.input_schema(),
        )
        for command in commands.values()
    ]


async def dispatch_tool(
    commands: dict[str, CommandDescriptor],
    name: str,
    arguments: dict | None,
) -> list[TextContent]:
    """
    커맨드를 실행하고 결과를 JSON TextContent 로 반환합니다.

    커맨드 내부에서 정규화되지 않은 예외(알 수 없는 tool 포함)도
    {error: True, message} 형태로 변환합니다.
    """
    arguments = arguments or {}
    try:
        logger.info("=" * 60)
        logger.info("🔧 Tool 호출: %s", name)
        logger.info("인자: %s", _mask_arguments(arguments))
        logger.info("=" * 60)

        command = commands.get(name)
        if command is None:
            raise ValueError(f"Unknown tool: {name}")

        result = await command.run(arguments)

        if isinstance(result, dict) and result.get("error"):
            logger.info("⚠️ Tool 실행 결과 오류: %s", result["message"])
        else:
            logger.info("✅ Tool 실행 완료: %s", name)
        return _to_text(result)

    except Exception as e:
        logger.error("=" * 60)
        logger.error("❌ Tool 실행 실패!")
        logger.error("Tool: %s", name)
        logger.error("오류 타입: %s", type(e).__name__)
        logger.error("오류 메시지: %s", str(e))
        logger.error("=" * 60)
        traceback.print_exc(file=sys.stderr)
        return _to_text(error_result(str(e)))


def register_tools(app: Server) -> None:
    """MCP Tool 핸들러를 서버에 등록합니다."""

    # 파라미터 스키마는 문서화 용도이며 검증은 각 커맨드가 직접 수행
    @app.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict):
        return await dispatch_tool(get_commands(), name, arguments)

    @app.list_tools()
    async def list_tools():
        return list_tool_definitions(get_commands())
