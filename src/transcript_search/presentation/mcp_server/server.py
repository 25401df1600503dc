"""
Transcript Search MCP Server

Exposes the query-intelligence layer (suggestions, enhancement, result
insights, history) as Model Context Protocol tools.

Architecture:
- instructions.py: SERVER_INSTRUCTIONS for AI agents
- tools/: tool implementations by category
- container: DI container (dependency-injector) for service lifecycle
"""

from __future__ import annotations

import logging
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import TYPE_CHECKING, Any, cast

from mcp.server.fastmcp import FastMCP

from transcript_search.config import SearchSettings
from transcript_search.container import ApplicationContainer, shutdown

from .instructions import SERVER_INSTRUCTIONS
from .tools import register_all_tools

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from transcript_search.application.intelligence import SearchIntelligence

logger = logging.getLogger(__name__)

# ── Module-level DI container ──────────────────────────────────────────────
_container: ApplicationContainer | None = None


def get_container() -> ApplicationContainer:
    """Get the application DI container.

    Raises:
        RuntimeError: If ``create_server()`` has not been called yet.
    """
    if _container is None:
        msg = "Container not initialized. Call create_server() first."
        raise RuntimeError(msg)
    return _container


def _make_lifespan(
    container: ApplicationContainer,
) -> Callable[[FastMCP[Any]], AbstractAsyncContextManager[ApplicationContainer]]:
    """Create a FastMCP lifespan handler bound to *container*."""

    @asynccontextmanager
    async def _lifespan(server: FastMCP[Any]) -> AsyncIterator[ApplicationContainer]:
        intelligence = cast("SearchIntelligence", container.intelligence())
        await intelligence.start()
        logger.info("Lifecycle: startup - history loaded")
        try:
            yield container
        finally:
            await shutdown(container)
            logger.info("Lifecycle: shutdown - analytics flushed, clients closed")

    return _lifespan


def create_server(
    settings: SearchSettings | None = None,
    name: str = "transcript-search",
) -> FastMCP:
    """
    Create and configure the Transcript Search MCP server.

    Args:
        settings: Runtime settings. Default: ``SearchSettings.from_env()``.
        name: Server name.

    Returns:
        Configured FastMCP server instance.

    Raises:
        ConfigurationError: If the settings or lexicon file are invalid.
    """
    global _container
    logger.info("Initializing Transcript Search MCP Server...")

    settings = settings or SearchSettings.from_env()
    _container = ApplicationContainer()
    _container.config.from_dict(settings.to_dict())

    intelligence = cast("SearchIntelligence", _container.intelligence())
    logger.info(f"History data directory: {_container.config.data_dir()}")

    mcp = FastMCP(
        name,
        instructions=SERVER_INSTRUCTIONS,
        lifespan=_make_lifespan(_container),
    )

    count = register_all_tools(mcp, intelligence)
    logger.info(f"Tool registration complete: {count} tools")

    from transcript_search.shared.profiling import install_profiling, install_remote_profiling

    if install_profiling(mcp):
        install_remote_profiling()

    logger.info("Transcript Search MCP Server initialized successfully")
    return mcp


def main() -> None:
    """Run the MCP server over stdio."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    server = create_server()
    server.run()


if __name__ == "__main__":
    main()
