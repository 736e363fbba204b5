"""Explicit owner of the repository service used by the tool layer."""

import logging
from pathlib import Path
from typing import Any

from .config import RepositoryServiceConfig
from .errors import RepositoryServiceError
from .service import RepositoryService

logger = logging.getLogger(__name__)


class RepositorySession:
    """Holds at most one bound RepositoryService.

    Connecting to a new directory disposes the previous service first, so
    a stale auto-commit timer never fires against an old project root.
    """

    def __init__(self, defaults: RepositoryServiceConfig | None = None):
        """Initialize the session.

        Args:
            defaults: Settings applied to every service the session creates;
                per-connect overrides take precedence
        """
        self.defaults = defaults
        self._service: RepositoryService | None = None

    @property
    def current(self) -> RepositoryService | None:
        return self._service

    def _config_for(self, cwd: str | Path, overrides: dict[str, Any]) -> RepositoryServiceConfig:
        if self.defaults is None:
            base = RepositoryServiceConfig(cwd=Path(cwd))
        else:
            base = self.defaults.with_overrides(cwd=Path(cwd))
        return base.with_overrides(**overrides)

    def connect(self, cwd: str | Path, **overrides: Any) -> RepositoryService:
        """Bind a fresh service to ``cwd``, disposing the previous one."""
        if self._service is not None:
            self._service.dispose()

        self._service = RepositoryService(self._config_for(cwd, overrides))
        logger.info("Connected repository session to %s", self._service.cwd)
        return self._service

    async def initialize(self, cwd: str | Path, **overrides: Any) -> RepositoryService:
        """Bind a service to ``cwd`` and run ``git init`` there."""
        service = self.connect(cwd, **overrides)
        await service.init()
        return service

    def require(self) -> RepositoryService:
        """Return the bound service or raise if nothing is connected."""
        if self._service is None:
            raise RepositoryServiceError(
                "No repository connected. Call connect_repo or initialize_repo first."
            )
        return self._service

    async def probe(self, cwd: str | Path | None = None) -> bool:
        """Check whether ``cwd`` (or the bound directory) is a git work tree.

        An explicit ``cwd`` is probed with a throwaway service so the bound
        one is left untouched.
        """
        if cwd is not None:
            temp = RepositoryService(self._config_for(cwd, {"auto_commit": False}))
            try:
                return await temp.is_repo()
            finally:
                temp.dispose()

        if self._service is None:
            return False
        return await self._service.is_repo()

    async def close(self) -> None:
        """Dispose the bound service and let a running auto-commit finish."""
        if self._service is None:
            return

        service, self._service = self._service, None
        service.dispose()
        await service.wait_for_auto_commit()
        logger.info("Closed repository session for %s", service.cwd)
