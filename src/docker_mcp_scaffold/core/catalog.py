from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import CatalogError
from .log import get_logger
from .models import ServerSpec
from .naming import secret_id

logger = get_logger("catalog")

CATALOG_NAME = "custom"
CATALOG_DISPLAY_NAME = "Custom MCP Servers"
GATEWAY_KEY = "mcp-toolkit-gateway"
GATEWAY_IMAGE = "docker/mcp-gateway"


def _date_added(spec: ServerSpec) -> str:
    if spec.date_added:
        return spec.date_added
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def server_entry(spec: ServerSpec) -> Dict[str, Any]:
    """The registry entry for one server, in catalog key order."""
    entry: Dict[str, Any] = {
        "description": spec.description,
        "title": spec.title,
        "type": "server",
        "dateAdded": _date_added(spec),
        "image": f"{spec.image}:latest",
        "ref": "",
        "readme": "",
        "toolsUrl": "",
        "source": "",
        "upstream": "",
        "icon": "",
        "tools": [{"name": t.name} for t in spec.tools],
    }
    if spec.secrets:
        entry["secrets"] = [
            {"name": secret_id(spec.slug, s.env), "env": s.env, "example": s.example}
            for s in spec.secrets
        ]
    entry["metadata"] = {
        "category": spec.category,
        "tags": list(spec.tags),
        "license": spec.license,
        "owner": spec.owner,
    }
    return entry


def dump_yaml(doc: Any) -> str:
    return yaml.safe_dump(doc, sort_keys=False, allow_unicode=True, default_flow_style=False)


def catalog_document(spec: ServerSpec) -> Dict[str, Any]:
    return {
        "version": 2,
        "name": CATALOG_NAME,
        "displayName": CATALOG_DISPLAY_NAME,
        "registry": {spec.slug: server_entry(spec)},
    }


def catalog_entry(spec: ServerSpec) -> str:
    return dump_yaml(catalog_document(spec))


def merge_catalog(existing_yaml: str, spec: ServerSpec) -> str:
    """
    Add (or replace) this server in an existing catalog text.
    Other entries and top-level keys are preserved in their order.
    """
    if not (existing_yaml or "").strip():
        return catalog_entry(spec)

    try:
        doc = yaml.safe_load(existing_yaml)
    except yaml.YAMLError as e:
        raise CatalogError(f"existing catalog is not valid YAML: {e}") from e

    if doc is None:
        return catalog_entry(spec)
    if not isinstance(doc, dict):
        raise CatalogError("existing catalog must be a mapping at the top level")

    registry = doc.get("registry")
    if registry is None:
        registry = {}
    if not isinstance(registry, dict):
        raise CatalogError("existing catalog 'registry' must be a mapping")

    if spec.slug in registry:
        logger.info("catalog: replacing existing entry %s", spec.slug)
    registry[spec.slug] = server_entry(spec)
    doc["registry"] = registry
    doc.setdefault("version", 2)
    doc.setdefault("name", CATALOG_NAME)
    return dump_yaml(doc)


def registry_entry(spec: ServerSpec) -> str:
    return dump_yaml({"registry": {spec.slug: {"ref": ""}}})


def gateway_args(home: Path) -> List[str]:
    mcp_dir = f"{Path(home).as_posix().rstrip('/')}/.docker/mcp"
    return [
        "run",
        "-i",
        "--rm",
        "-v",
        "/var/run/docker.sock:/var/run/docker.sock",
        "-v",
        f"{mcp_dir}:/mcp",
        GATEWAY_IMAGE,
        "--catalog=/mcp/catalogs/docker-mcp.yaml",
        f"--catalog=/mcp/catalogs/{CATALOG_NAME}.yaml",
        "--config=/mcp/config.yaml",
        "--registry=/mcp/registry.yaml",
        "--tools-config=/mcp/tools.yaml",
        "--transport=stdio",
    ]


def desktop_config(home: Path, existing_json: Optional[str] = None) -> str:
    """
    Claude Desktop config that launches the MCP gateway with the custom
    catalog. Servers already present in `existing_json` are kept.
    """
    config: Dict[str, Any] = {}
    if existing_json and existing_json.strip():
        try:
            config = json.loads(existing_json)
        except json.JSONDecodeError as e:
            raise CatalogError(f"existing desktop config is not valid JSON: {e}") from e
        if not isinstance(config, dict):
            raise CatalogError("existing desktop config must be a JSON object")

    servers = config.get("mcpServers")
    if servers is None:
        servers = {}
    if not isinstance(servers, dict):
        raise CatalogError("existing desktop config 'mcpServers' must be an object")

    servers[GATEWAY_KEY] = {"command": "docker", "args": gateway_args(home)}
    config["mcpServers"] = servers
    return json.dumps(config, indent=2, ensure_ascii=False) + "\n"


def installation_steps(spec: ServerSpec) -> List[Dict[str, Any]]:
    """Ordered manual steps to build, register and use the server."""
    steps: List[Dict[str, Any]] = [
        {
            "title": "Save the files",
            "commands": [
                f"mkdir {spec.image}",
                f"cd {spec.image}",
                f"# save Dockerfile, {spec.manifest_file}, {spec.source_file}, readme.txt and CLAUDE.md here",
            ],
        },
        {
            "title": "Build the Docker image",
            "commands": [f"docker build -t {spec.image} ."],
        },
    ]

    if spec.secrets:
        steps.append(
            {
                "title": "Set up secrets",
                "commands": [
                    f'docker mcp secret set {secret_id(spec.slug, s.env)}="{s.example}"'
                    for s in spec.secrets
                ] + ["docker mcp secret list"],
            }
        )

    steps.extend(
        [
            {
                "title": "Create the custom catalog",
                "commands": [
                    "mkdir -p ~/.docker/mcp/catalogs",
                    f"# add the catalog entry to ~/.docker/mcp/catalogs/{CATALOG_NAME}.yaml",
                ],
            },
            {
                "title": "Update the registry",
                "commands": [f"# add '{spec.slug}' under 'registry:' in ~/.docker/mcp/registry.yaml"],
            },
            {
                "title": "Configure Claude Desktop",
                "commands": [
                    "# macOS: ~/Library/Application Support/Claude/claude_desktop_config.json",
                    "# Windows: %APPDATA%\\Claude\\claude_desktop_config.json",
                    "# Linux: ~/.config/Claude/claude_desktop_config.json",
                    f"# add the '{GATEWAY_KEY}' server with the custom catalog argument",
                ],
            },
            {
                "title": "Restart Claude Desktop",
                "commands": ["# quit and reopen Claude Desktop so the gateway reloads"],
            },
            {
                "title": "Test the server",
                "commands": ["docker mcp server list"],
            },
        ]
    )

    for i, step in enumerate(steps, start=1):
        step["step"] = i
    return steps


def format_steps(steps: List[Dict[str, Any]]) -> str:
    blocks: List[str] = []
    for step in steps:
        cmds = "\n".join(step["commands"])
        blocks.append(f"### Step {step['step']}: {step['title']}\n\n```bash\n{cmds}\n```")
    return "\n\n".join(blocks)
