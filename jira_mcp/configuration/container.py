from dataclasses import dataclass
from functools import lru_cache

from jira_mcp.adapters.outbound.jira_adapter import JiraAdapter
from jira_mcp.application.ports.jira_port import JiraPort
from jira_mcp.application.use_cases.batch_create_issues import BatchCreateIssuesUseCase
from jira_mcp.application.use_cases.create_issue import CreateIssueUseCase
from jira_mcp.application.use_cases.delete_issue import DeleteIssueUseCase
from jira_mcp.application.use_cases.get_issue_details import GetIssueDetailsUseCase
from jira_mcp.application.use_cases.list_issues import ListIssuesUseCase
from jira_mcp.application.use_cases.log_work import LogWorkUseCase
from jira_mcp.application.use_cases.transition_issue import TransitionIssueUseCase
from jira_mcp.application.use_cases.update_issue import UpdateIssueUseCase
from jira_mcp.configuration.settings import Settings, build_settings


@dataclass(frozen=True)
class Container:
    settings: Settings
    get_issue_details_use_case: GetIssueDetailsUseCase
    create_issue_use_case: CreateIssueUseCase
    transition_issue_use_case: TransitionIssueUseCase
    batch_create_issues_use_case: BatchCreateIssuesUseCase
    log_work_use_case: LogWorkUseCase
    update_issue_use_case: UpdateIssueUseCase
    delete_issue_use_case: DeleteIssueUseCase
    list_issues_use_case: ListIssuesUseCase


def create_container(settings: Settings, jira_port: JiraPort | None = None) -> Container:
    if jira_port is None:
        jira_port = JiraAdapter(
            base_url=settings.jira_base_url,
            email=settings.jira_email,
            api_token=settings.jira_api_token,
            timeout=settings.jira_timeout,
        )

    create_issue_use_case = CreateIssueUseCase(jira_port=jira_port)

    return Container(
        settings=settings,
        get_issue_details_use_case=GetIssueDetailsUseCase(jira_port=jira_port),
        create_issue_use_case=create_issue_use_case,
        transition_issue_use_case=TransitionIssueUseCase(),
        batch_create_issues_use_case=BatchCreateIssuesUseCase(
            create_issue_use_case=create_issue_use_case,
        ),
        log_work_use_case=LogWorkUseCase(jira_port=jira_port),
        update_issue_use_case=UpdateIssueUseCase(jira_port=jira_port),
        delete_issue_use_case=DeleteIssueUseCase(jira_port=jira_port),
        list_issues_use_case=ListIssuesUseCase(jira_port=jira_port),
    )


@lru_cache(maxsize=1)
def build_container() -> Container:
    return create_container(build_settings())


def clear_container() -> None:
    build_container.cache_clear()
