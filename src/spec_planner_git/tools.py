"""MCP tool implementations for the repository session."""

import json

from mcp.server.fastmcp import FastMCP
from pydantic import TypeAdapter

from .models import CommitInfo, DiffOptions, FileDiff
from .session import RepositorySession

_diff_list = TypeAdapter(list[FileDiff])
_commit_list = TypeAdapter(list[CommitInfo])


def register_tools(mcp: FastMCP, session: RepositorySession):
    """Register all MCP tools on the server.

    Args:
        mcp: MCP server instance
        session: Session that owns the bound repository service
    """

    @mcp.tool()
    async def initialize_repo(
        repo_path: str,
        auto_commit: bool | None = None,
        commit_message_template: str | None = None,
    ) -> str:
        """Initialize a git repository and make it the active repository.

        Runs `git init` in `repo_path` (safe on an existing repository) and
        writes a default `.gitignore` only if the directory has none. Any
        previously connected repository is released first, cancelling its
        pending auto-commit.

        Args:
            repo_path: Absolute path of the project root.
            auto_commit: Enable debounced automatic commits for this repository.
            commit_message_template: Prefix used for automatic commit messages.

        Returns:
            JSON object: {"success": true}
        """
        await session.initialize(
            repo_path,
            auto_commit=auto_commit,
            commit_message_template=commit_message_template,
        )
        return json.dumps({"success": True})

    @mcp.tool()
    async def connect_repo(
        repo_path: str,
        auto_commit: bool | None = None,
        commit_message_template: str | None = None,
    ) -> str:
        """Make an existing directory the active repository without modifying it.

        Args:
            repo_path: Absolute path of the project root.
            auto_commit: Enable debounced automatic commits for this repository.
            commit_message_template: Prefix used for automatic commit messages.

        Returns:
            JSON object: {"is_repo": bool}
        """
        service = session.connect(
            repo_path,
            auto_commit=auto_commit,
            commit_message_template=commit_message_template,
        )
        return json.dumps({"is_repo": await service.is_repo()})

    @mcp.tool()
    async def is_repository(repo_path: str | None = None) -> bool:
        """Check whether a directory is inside a git work tree.

        Args:
            repo_path: Directory to check. Defaults to the active repository;
                       false when nothing is connected.
        """
        return await session.probe(repo_path)

    @mcp.tool()
    async def get_repo_status() -> str:
        """Get the status of the active repository.

        Returns:
            JSON object with is_repo, branch, staged, modified, untracked and
            is_dirty. A file that is partially staged appears in both staged
            and modified.
        """
        status = await session.require().get_status()
        return status.model_dump_json(indent=2)

    @mcp.tool()
    async def stage_files(paths: list[str]) -> str:
        """Stage the given paths (`git add -- <paths>`). An empty list does nothing."""
        await session.require().stage(paths)
        return f"Staged {len(paths)} path(s)"

    @mcp.tool()
    async def stage_all_changes() -> str:
        """Stage every change in the working tree, including new files (`git add -A`)."""
        await session.require().stage_all()
        return "Staged all changes"

    @mcp.tool()
    async def unstage_files(paths: list[str]) -> str:
        """Remove the given paths from the index (`git reset HEAD -- <paths>`)."""
        await session.require().unstage(paths)
        return f"Unstaged {len(paths)} path(s)"

    @mcp.tool()
    async def commit_changes(message: str) -> str:
        """Commit what is currently staged.

        Args:
            message: Commit message.

        Returns:
            JSON object describing the new commit.
        """
        info = await session.require().commit(message)
        return info.model_dump_json(indent=2)

    @mcp.tool()
    async def get_diff(
        staged: bool = False,
        commit: str | None = None,
        context_lines: int | None = None,
        files: list[str] | None = None,
        strict: bool = False,
    ) -> str:
        """Get a structured diff of the active repository.

        Args:
            staged: Diff the index against HEAD instead of the worktree against the index.
            commit: Compare against this commit.
            context_lines: Number of context lines around each change.
            files: Restrict the diff to these paths.
            strict: Fail on a file section with an unreadable header instead of skipping it.

        Returns:
            JSON list of file diffs with hunks and numbered lines.
        """
        options = DiffOptions(
            staged=staged,
            commit=commit,
            context_lines=context_lines,
            files=files or [],
        )
        diffs = await session.require().diff(options, strict=strict)
        return _diff_list.dump_json(diffs, indent=2).decode()

    @mcp.tool()
    async def list_commits(limit: int = 10) -> str:
        """List recent commits of the active repository, newest first.

        Returns:
            JSON list of commits; empty when the repository has no commits yet.
        """
        commits = await session.require().log(limit)
        return _commit_list.dump_json(commits, indent=2).decode()

    @mcp.tool()
    async def set_auto_commit(enabled: bool) -> str:
        """Enable or disable automatic commits. Disabling cancels a pending auto-commit."""
        session.require().set_auto_commit(enabled)
        return json.dumps({"success": True})

    @mcp.tool()
    async def notify_file_changed(path: str | None = None) -> str:
        """Report a file-system change to the auto-commit scheduler.

        Each call restarts the debounce delay; the commit happens once the
        project has been quiet for the configured delay. Does nothing while
        auto-commit is disabled.

        Args:
            path: Changed path, if known.
        """
        session.require().trigger_auto_commit(path)
        return json.dumps({"success": True})
