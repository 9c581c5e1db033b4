"""
Deep Search MCP Server

Exposes the deep research pipeline as Model Context Protocol tools.

Configuration comes from the environment (see deep_search.config); the
server itself keeps no state between tool calls.
"""

from __future__ import annotations

import logging
import sys

from mcp.server.fastmcp import FastMCP

from deep_search.config import DeepSearchSettings

from .instructions import SERVER_INSTRUCTIONS
from .tools import register_deep_search_tools

logger = logging.getLogger(__name__)


def create_server(
    settings: DeepSearchSettings | None = None,
    name: str = "deep-search",
) -> FastMCP:
    """
    Create and configure the Deep Search MCP server.

    Args:
        settings: Source client settings. Default: DeepSearchSettings.from_env()
        name: Server name.

    Returns:
        Configured FastMCP server instance.
    """
    settings = settings or DeepSearchSettings.from_env()
    logger.info("Initializing Deep Search MCP Server...")

    mcp = FastMCP(name, instructions=SERVER_INSTRUCTIONS)
    tools = register_deep_search_tools(mcp, settings)
    logger.info("Tool registration complete: %s", ", ".join(tools))

    return mcp


def main():
    """Run the MCP server over stdio."""

    # stdout carries the MCP protocol; logs go to stderr
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    server = create_server()
    server.run()


if __name__ == "__main__":
    main()
