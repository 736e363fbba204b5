"""Repository service: the public git operation surface plus auto-commit."""

import asyncio
import logging
from pathlib import Path
from typing import Sequence

from . import commands
from .config import RepositoryServiceConfig
from .diff_parser import parse_diff
from .errors import RepositoryServiceError
from .executor import GitExecutor
from .models import CommitInfo, DiffOptions, FileDiff, RepositoryStatus
from .status_parser import parse_status

logger = logging.getLogger(__name__)

GITIGNORE_NAME = ".gitignore"

DEFAULT_GITIGNORE = """\
# Dependencies
node_modules/

# Build output
dist/
build/

# Environment
.env
.env.local

# IDE
.idea/
.vscode/
*.swp

# OS
.DS_Store
Thumbs.db
"""


def seed_gitignore(path: Path) -> bool:
    """Write the default ignore rules to ``path`` unless it already exists."""
    if path.exists():
        return False
    path.write_text(DEFAULT_GITIGNORE, encoding="utf-8")
    return True


# Change sets up to this size are listed by name in auto-commit messages.
INLINE_SUMMARY_LIMIT = 3


def build_auto_commit_message(template: str, status: RepositoryStatus) -> str:
    """Append a short change summary to ``template``.

    Small change sets are listed by file name, larger ones by count, e.g.
    ``"Update specs: a.md, b.md, new: c.md"`` or ``"Update specs: 7 files"``.
    """
    changed = list(dict.fromkeys(f.path for f in [*status.staged, *status.modified]))

    parts = []
    if changed:
        if len(changed) <= INLINE_SUMMARY_LIMIT:
            parts.append(", ".join(changed))
        else:
            parts.append(f"{len(changed)} files")

    if status.untracked:
        if len(status.untracked) <= INLINE_SUMMARY_LIMIT:
            parts.append(f"new: {', '.join(status.untracked)}")
        else:
            parts.append(f"{len(status.untracked)} new files")

    if parts:
        return f"{template}: {', '.join(parts)}"
    return template


class RepositoryService:
    """Git operations for one working directory.

    Operations are not serialized against each other unless the config
    asks for it: two concurrent calls spawn two git processes and rely on
    git's own index lock.
    """

    def __init__(self, config: RepositoryServiceConfig):
        """Initialize the service.

        Args:
            config: Service settings; ``config.cwd`` is the initial
                working directory
        """
        self.config = config
        self.executor = GitExecutor(
            git_path=config.git_path,
            cwd=config.cwd,
            debug=config.debug,
            serialize=config.serialize_operations,
        )
        self._auto_commit_enabled = config.auto_commit
        self._timer: asyncio.TimerHandle | None = None
        self._pending_changes: set[str] = set()
        self._auto_commit_tasks: set[asyncio.Task] = set()

    @property
    def cwd(self) -> Path:
        return self.executor.cwd

    def set_cwd(self, cwd: str | Path) -> None:
        """Point the service at a different working directory."""
        self.executor.set_cwd(cwd)

    @property
    def auto_commit_enabled(self) -> bool:
        return self._auto_commit_enabled

    @property
    def has_pending_auto_commit(self) -> bool:
        """Whether a debounce timer is armed."""
        return self._timer is not None

    @property
    def pending_changes(self) -> frozenset[str]:
        return frozenset(self._pending_changes)

    async def init(self) -> None:
        """Run ``git init`` and seed a .gitignore if there is none."""
        await self.executor.run(commands.init_args())
        await asyncio.to_thread(seed_gitignore, self.cwd / GITIGNORE_NAME)

    async def is_repo(self) -> bool:
        result = await self.executor.run_silent(commands.is_inside_work_tree_args())
        return result is not None and result.strip() == "true"

    async def get_status(self) -> RepositoryStatus:
        """Get the current repository status.

        Returns an empty snapshot with ``is_repo=False`` when the working
        directory is not inside a git work tree.
        """
        if not await self.is_repo():
            return RepositoryStatus.not_a_repository()

        branch = await self._current_branch()
        output = await self.executor.run(commands.status_args())
        parsed = parse_status(output)

        return RepositoryStatus(
            is_repo=True,
            branch=branch,
            staged=parsed.staged,
            modified=parsed.modified,
            untracked=parsed.untracked,
        )

    async def stage(self, paths: Sequence[str]) -> None:
        if not paths:
            return
        await self.executor.run(commands.stage_args(paths))

    async def stage_all(self) -> None:
        await self.executor.run(commands.stage_all_args())

    async def unstage(self, paths: Sequence[str]) -> None:
        if not paths:
            return
        await self.executor.run(commands.unstage_args(paths))

    async def commit(self, message: str) -> CommitInfo:
        """Create a commit from the index.

        Args:
            message: Commit message

        Returns:
            Info about the commit just created

        Raises:
            ExecutionError: git refused the commit
            RepositoryServiceError: the new commit could not be read back
        """
        await self.executor.run(commands.commit_args(message))

        log = await self.log(1)
        if not log:
            raise RepositoryServiceError("Failed to retrieve commit info after commit")
        return log[0]

    async def diff(
        self, options: DiffOptions | None = None, strict: bool = False
    ) -> list[FileDiff]:
        """Diff the repository and parse the result.

        With ``strict`` a file section whose header cannot be read raises
        DiffParseError instead of being left out.
        """
        output = await self.executor.run(commands.diff_args(options))
        return parse_diff(output, strict=strict)

    async def log(self, limit: int = 10) -> list[CommitInfo]:
        """Get up to ``limit`` recent commits, newest first."""
        if await self.executor.run_silent(commands.head_args()) is None:
            return []

        output = await self.executor.run(commands.log_args(limit))
        return commands.parse_log(output)

    def set_auto_commit(self, enabled: bool) -> None:
        self._auto_commit_enabled = enabled
        if not enabled:
            self._cancel_timer()
            self._pending_changes.clear()

    def trigger_auto_commit(self, path: str | None = None) -> None:
        """Note a change and (re)arm the auto-commit debounce timer.

        Must be called from a running event loop. Each call pushes the
        commit back to ``auto_commit_delay`` seconds from now. An
        auto-commit that already started is not affected.

        Args:
            path: Changed path reported by the file watcher, if known
        """
        if not self._auto_commit_enabled:
            return

        if path:
            self._pending_changes.add(path)

        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.config.auto_commit_delay, self._on_timer_expired)
        logger.debug("Auto-commit armed for %ss in %s", self.config.auto_commit_delay, self.cwd)

    async def wait_for_auto_commit(self) -> None:
        """Wait until every auto-commit that already started has finished."""
        while True:
            running = [task for task in self._auto_commit_tasks if not task.done()]
            if not running:
                return
            await asyncio.gather(*running, return_exceptions=True)

    def dispose(self) -> None:
        self._cancel_timer()
        self._pending_changes.clear()

    async def _current_branch(self) -> str | None:
        result = await self.executor.run_silent(commands.current_branch_args())
        if result is None:
            return None
        return result.strip() or None

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer_expired(self) -> None:
        self._timer = None
        task = asyncio.get_running_loop().create_task(self._perform_auto_commit())
        self._auto_commit_tasks.add(task)
        task.add_done_callback(self._auto_commit_tasks.discard)

    async def _perform_auto_commit(self) -> None:
        try:
            status = await self.get_status()
            if not status.is_dirty:
                logger.debug("Auto-commit skipped, working tree clean: %s", self.cwd)
                return

            await self.stage_all()
            message = build_auto_commit_message(self.config.commit_message_template, status)
            info = await self.commit(message)

            logger.info(
                "Auto-committed %s (%d reported paths): %s",
                info.short_hash,
                len(self._pending_changes),
                info.message,
            )
            self._pending_changes.clear()
        except Exception:
            logger.exception("Auto-commit failed in %s", self.cwd)
