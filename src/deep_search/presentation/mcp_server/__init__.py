"""
Deep Search MCP Server - presentation layer.
"""

from .server import create_server, main

__all__ = ["create_server", "main"]
