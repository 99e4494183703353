"""Scaffold Dockerized MCP servers for the Docker MCP Gateway."""

from .server import mcp

__all__ = ["mcp"]
