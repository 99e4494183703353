from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional

from ..core.catalog import desktop_config as build_desktop_config
from ..core.catalog import installation_steps as build_installation_steps
from ..core.catalog import merge_catalog, registry_entry
from ..core.config import load_settings
from ..core.errors import ScaffoldError
from ..core.models import build_server_spec
from ..server import mcp

DESKTOP_CONFIG_PATHS = {
    "macos": "~/Library/Application Support/Claude/claude_desktop_config.json",
    "windows": "%APPDATA%\\Claude\\claude_desktop_config.json",
    "linux": "~/.config/Claude/claude_desktop_config.json",
}


@mcp.tool()
def catalog_entry(
    name: str,
    tools: List[Any],
    description: str = "",
    runtime: str = "python",
    secrets: Optional[List[Any]] = None,
    title: str = "",
    category: str = "integration",
    tags: Optional[List[str]] = None,
    license: str = "MIT",
    owner: str = "local",
    existing_catalog: str = "",
) -> dict:
    """
    Build the custom catalog YAML (merged into existing_catalog when given) and the registry entry.
    """
    try:
        spec = build_server_spec(
            name,
            description=description,
            runtime=runtime,
            tools=tools,
            secrets=secrets,
            title=title,
            category=category,
            tags=tags,
            license=license,
            owner=owner,
        )
        catalog_yaml = merge_catalog(existing_catalog, spec)
    except ScaffoldError as e:
        return {"ok": False, "error": str(e)}

    return {
        "ok": True,
        "server": spec.slug,
        "catalog_path": "~/.docker/mcp/catalogs/custom.yaml",
        "catalog_yaml": catalog_yaml,
        "registry_path": "~/.docker/mcp/registry.yaml",
        "registry_yaml": registry_entry(spec),
    }


@mcp.tool()
def desktop_config(home: str = "", existing_config: str = "") -> dict:
    """
    Build the Claude Desktop config that runs the Docker MCP Gateway with the custom catalog.
    """
    try:
        home_path = Path(home).expanduser() if home.strip() else load_settings().home
        config_json = build_desktop_config(home_path, existing_config or None)
    except ScaffoldError as e:
        return {"ok": False, "error": str(e)}

    return {"ok": True, "config_json": config_json, "paths": dict(DESKTOP_CONFIG_PATHS)}


@mcp.tool()
def installation_steps(
    name: str,
    tools: List[Any],
    runtime: str = "python",
    secrets: Optional[List[Any]] = None,
) -> dict:
    """
    Ordered manual steps to build, register and test the server.
    """
    try:
        spec = build_server_spec(name, runtime=runtime, tools=tools, secrets=secrets)
    except ScaffoldError as e:
        return {"ok": False, "error": str(e)}

    return {"ok": True, "server": spec.slug, "steps": build_installation_steps(spec)}
