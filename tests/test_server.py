import pytest

from spec_planner_git.config import RepositoryServiceConfig
from spec_planner_git.server import create_server, session_lifespan
from spec_planner_git.session import RepositorySession

EXPECTED_TOOLS = {
    "initialize_repo",
    "connect_repo",
    "is_repository",
    "get_repo_status",
    "stage_files",
    "stage_all_changes",
    "unstage_files",
    "commit_changes",
    "get_diff",
    "list_commits",
    "set_auto_commit",
    "notify_file_changed",
}


@pytest.mark.asyncio
async def test_all_tools_registered():
    mcp = create_server()

    tools = await mcp.list_tools()

    assert {tool.name for tool in tools} == EXPECTED_TOOLS


def test_create_server_can_bind_configured_repository(project_dir):
    session = RepositorySession()
    config = RepositoryServiceConfig(cwd=project_dir)

    create_server(config, session=session, connect=True)

    assert session.current is not None
    assert session.current.cwd == project_dir


def test_create_server_does_not_bind_by_default(project_dir):
    session = RepositorySession()

    create_server(RepositoryServiceConfig(cwd=project_dir), session=session)

    assert session.current is None


@pytest.mark.asyncio
async def test_lifespan_closes_session_on_shutdown(project_dir):
    session = RepositorySession()
    mcp = create_server(session=session)
    service = session.connect(project_dir, auto_commit=True, auto_commit_delay=60)
    service.trigger_auto_commit("spec.md")

    async with session_lifespan(session)(mcp) as served:
        assert served is session
        assert session.current is service

    assert session.current is None
    assert service.has_pending_auto_commit is False
    assert service.pending_changes == frozenset()


@pytest.mark.asyncio
async def test_get_diff_exposes_strict_option():
    mcp = create_server()

    tools = {tool.name: tool for tool in await mcp.list_tools()}

    properties = tools["get_diff"].inputSchema["properties"]
    assert properties["strict"]["default"] is False
