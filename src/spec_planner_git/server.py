"""MCP server exposing the spec planner's git integration.

The server owns a single RepositorySession and hands it to every tool, so
the active repository is an explicit object rather than module state.
"""

import os
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from mcp.server.fastmcp import FastMCP

from .config import RepositoryServiceConfig
from .session import RepositorySession
from .tools import register_tools

logger = logging.getLogger(__name__)


def session_lifespan(session: RepositorySession):
    """Build a server lifespan that closes ``session`` on shutdown.

    Closing cancels a pending auto-commit timer and waits for one that is
    already running, so a commit is never cut off halfway.
    """

    @asynccontextmanager
    async def lifespan(server: FastMCP) -> AsyncIterator[RepositorySession]:
        try:
            yield session
        finally:
            await session.close()

    return lifespan


def create_server(
    config: RepositoryServiceConfig | None = None,
    session: RepositorySession | None = None,
    connect: bool = False,
) -> FastMCP:
    """Create and configure the MCP server.

    Args:
        config: Defaults for every repository the session connects to
        session: Session to serve; a new one is created from ``config``
            when omitted
        connect: Bind the session to ``config.cwd`` right away

    Returns:
        Configured FastMCP Server instance
    """
    if session is None:
        session = RepositorySession(defaults=config)
    mcp = FastMCP("spec-planner-git", lifespan=session_lifespan(session))

    if connect and config is not None:
        session.connect(config.cwd)

    register_tools(mcp, session)

    logger.info("spec-planner-git server initialized")
    if session.current is not None:
        logger.info(f"Default repo path: {session.current.cwd}")

    return mcp


def run_server():
    """Run the MCP server with stdio transport."""
    config = RepositoryServiceConfig.from_env()
    logging.basicConfig(level=logging.DEBUG if config.debug else logging.INFO)

    # Bind at startup only when a repository was named explicitly
    mcp = create_server(config, connect=bool(os.environ.get("REPO_PATH")))

    logger.info("Starting spec-planner-git server (stdio transport)...")
    mcp.run()


def main():
    """Main entry point for the MCP server."""
    run_server()


if __name__ == "__main__":
    main()
