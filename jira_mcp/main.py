import asyncio
import logging
import sys
import traceback
from importlib.metadata import PackageNotFoundError, version
from logging.handlers import RotatingFileHandler
from pathlib import Path

from mcp.server import Server
from mcp.server.stdio import stdio_server

from jira_mcp.adapters.inbound.mcp.tools import get_commands, register_tools
from jira_mcp.configuration.container import build_container, clear_container

logger = logging.getLogger(__name__)

SERVER_META = {
    "id": "jira-mcp",
    "name": "Jira MCP",
    "description": "Manage Jira issues, projects, epics, sprints, time logs, and Confluence pages",
}


def _package_version() -> str:
    try:
        return version("jira-mcp")
    except PackageNotFoundError:
        return "1.0.0"


def setup_logging(log_dir: str | Path, level: str = "INFO") -> logging.Logger:
    """로깅 설정: stderr와 파일 두 곳에 로그 출력"""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / "mcp-server.log"

    formatter = logging.Formatter(
        '%(asctime)s [%(name)s] %(levelname)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # 1. stderr 핸들러 (stdout 은 MCP stdio 프로토콜 전용)
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    root_logger.addHandler(stderr_handler)

    # 2. 파일 핸들러 (최대 10MB, 5개 백업)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    return logging.getLogger(__name__)


async def main() -> None:
    try:
        container = build_container()
        setup_logging(container.settings.log_dir, container.settings.log_level)

        logger.info("=" * 60)
        logger.info("MCP 서버 초기화 시작")
        logger.info("✅ Container 빌드 완료")
        logger.info("서버 이름: %s", container.settings.server_name)
        logger.info("환경: %s", container.settings.app_env)
        logger.info("Jira URL: %s", container.settings.jira_base_url)
        logger.info("Jira User: %s", container.settings.jira_email)

        app = Server(
            container.settings.server_name,
            version=_package_version(),
            instructions=SERVER_META["description"],
        )
        register_tools(app)
        logger.info("✅ MCP Tools 등록 완료: %s", ", ".join(get_commands()))

        logger.info("MCP 서버 시작 중...")
        logger.info("=" * 60)

        try:
            async with stdio_server() as (read_stream, write_stream):
                await app.run(read_stream, write_stream, app.create_initialization_options())
        finally:
            if container.settings.app_env == "local":
                clear_container()
                get_commands.cache_clear()
            logger.info("MCP 서버 종료")

    except Exception as e:
        logger.error("=" * 60)
        logger.error("MCP 서버 시작 실패!")
        logger.error("오류 타입: %s", type(e).__name__)
        logger.error("오류 메시지: %s", str(e))
        logger.error("=" * 60)
        traceback.print_exc(file=sys.stderr)
        raise


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
