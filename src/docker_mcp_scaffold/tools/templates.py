from __future__ import annotations

from typing import Any, List, Optional

from ..core.config import load_settings
from ..core.errors import ScaffoldError
from ..core.models import build_server_spec
from ..core.render import render_files
from ..core.templates import describe_templates
from ..server import mcp


@mcp.tool()
def list_templates(runtime: str = "python") -> dict:
    """
    List the templates for a runtime and the placeholder tokens each one uses.
    """
    try:
        return {"ok": True, "runtime": runtime, "templates": describe_templates(runtime)}
    except ScaffoldError as e:
        return {"ok": False, "error": str(e)}


@mcp.tool()
def render_project(
    name: str,
    tools: List[Any],
    description: str = "",
    runtime: str = "python",
    secrets: Optional[List[Any]] = None,
    extra_dependencies: Optional[List[str]] = None,
    title: str = "",
    max_chars: Optional[int] = None,
) -> dict:
    """
    Render every file of a Dockerized MCP server project without writing to disk.

    tools: names, or objects with name / description / params.
    secrets: env var names, or objects with env / example.
    """
    try:
        spec = build_server_spec(
            name,
            description=description,
            runtime=runtime,
            tools=tools,
            secrets=secrets,
            extra_dependencies=extra_dependencies,
            title=title,
        )
        files = render_files(spec)
        if max_chars is None:
            max_chars = load_settings().preview_chars
    except ScaffoldError as e:
        return {"ok": False, "error": str(e)}

    out = []
    total = 0
    for path, content in files.items():
        remaining = max_chars - total
        chunk = content[:max(remaining, 0)]
        total += len(chunk)
        out.append({"path": path, "content": chunk, "truncated": len(chunk) < len(content)})

    return {
        "ok": True,
        "server": spec.slug,
        "image": spec.image,
        "runtime": spec.runtime,
        "files": out,
        "max_chars": max_chars,
    }
