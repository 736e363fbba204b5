"""Configuration for a repository service instance."""

import os
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_COMMIT_MESSAGE_TEMPLATE = "Update specs"
DEFAULT_AUTO_COMMIT_DELAY = 5.0

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(value: str | None, default: bool = False) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUTHY


class RepositoryServiceConfig(BaseModel):
    """Settings for one RepositoryService.

    The model is frozen: the only mutable piece of service state is the
    working directory, which is changed through ``RepositoryService.set_cwd``.
    """

    model_config = ConfigDict(frozen=True)

    cwd: Path = Field(description="Repository root directory")
    git_path: str = Field(default="git", description="Git executable, resolved via PATH if bare")
    auto_commit: bool = Field(default=False, description="Enable automatic commits")
    auto_commit_delay: float = Field(
        default=DEFAULT_AUTO_COMMIT_DELAY, ge=0, description="Auto-commit debounce delay in seconds"
    )
    commit_message_template: str = Field(
        default=DEFAULT_COMMIT_MESSAGE_TEMPLATE, description="Prefix for auto-commit messages"
    )
    debug: bool = Field(default=False, description="Trace git invocations")
    serialize_operations: bool = Field(
        default=False, description="Run at most one git process at a time per service"
    )

    def with_overrides(self, **overrides: Any) -> "RepositoryServiceConfig":
        """Return a copy with the given non-None fields replaced."""
        updates = {key: value for key, value in overrides.items() if value is not None}
        if not updates:
            return self
        return self.model_validate({**self.model_dump(), **updates})

    @classmethod
    def from_env(
        cls,
        cwd: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "RepositoryServiceConfig":
        """Build a config from environment variables.

        Args:
            cwd: Working directory; falls back to ``REPO_PATH`` and then
                the process working directory.
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            Validated configuration
        """
        env = os.environ if environ is None else environ
        data: dict[str, Any] = {
            "cwd": cwd or env.get("REPO_PATH") or os.getcwd(),
            "auto_commit": _env_flag(env.get("GIT_AUTO_COMMIT")),
            "debug": _env_flag(env.get("GIT_DEBUG")),
            "serialize_operations": _env_flag(env.get("GIT_SERIALIZE")),
        }
        if env.get("GIT_PATH"):
            data["git_path"] = env["GIT_PATH"]
        if env.get("GIT_AUTO_COMMIT_DELAY"):
            data["auto_commit_delay"] = env["GIT_AUTO_COMMIT_DELAY"]
        if env.get("GIT_COMMIT_MESSAGE_TEMPLATE"):
            data["commit_message_template"] = env["GIT_COMMIT_MESSAGE_TEMPLATE"]
        return cls.model_validate(data)
