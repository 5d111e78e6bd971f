import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from jira_mcp.domain.jira import JiraConfigurationError

# 프로젝트 루트 디렉토리 (jira_mcp/configuration/settings.py -> ../../)
PROJECT_ROOT = Path(__file__).parent.parent.parent

REQUIRED_VARS = ("JIRA_BASE_URL", "JIRA_EMAIL", "JIRA_API_TOKEN")


def _load_env() -> None:
    app_env = os.getenv("APP_ENV", "local")
    load_dotenv(PROJECT_ROOT / f".env.{app_env}")


@dataclass(frozen=True)
class Settings:
    app_env: str
    server_name: str
    jira_base_url: str
    jira_email: str
    jira_api_token: str
    jira_timeout: float
    log_dir: str
    log_level: str


def build_settings() -> Settings:
    """환경 변수(.env.{APP_ENV} 포함)에서 설정을 읽고 필수값을 즉시 검증합니다."""
    _load_env()

    missing = [k for k in REQUIRED_VARS if not os.getenv(k)]
    if missing:
        raise JiraConfigurationError(
            f"Missing required Jira environment variables: {', '.join(missing)}. "
            "Please set JIRA_BASE_URL, JIRA_EMAIL, and JIRA_API_TOKEN."
        )

    return Settings(
        app_env=os.getenv("APP_ENV", "local"),
        server_name=os.getenv("SERVER_NAME", "jira-mcp"),
        jira_base_url=os.environ["JIRA_BASE_URL"].rstrip("/"),
        jira_email=os.environ["JIRA_EMAIL"],
        jira_api_token=os.environ["JIRA_API_TOKEN"],
        jira_timeout=float(os.getenv("JIRA_TIMEOUT", "30")),
        log_dir=os.getenv("LOG_DIR", str(PROJECT_ROOT / "logs")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
