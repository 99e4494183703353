from mcp.server.fastmcp import FastMCP

mcp = FastMCP("docker-mcp-scaffold")

from .tools import env_specs, templates, write_project, registration, guide, check_project  # noqa: F401,E402
