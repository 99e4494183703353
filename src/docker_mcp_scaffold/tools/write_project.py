from __future__ import annotations

import functools
from pathlib import Path
from typing import Any, List, Optional

import anyio

from ..core.config import load_settings
from ..core.errors import ScaffoldError
from ..core.fs import ensure_within, write_files
from ..core.log import get_logger
from ..core.models import build_server_spec
from ..core.render import render_files
from ..server import mcp

logger = get_logger("tools.write_project")


@mcp.tool()
async def write_project(
    output_dir: str,
    name: str,
    tools: List[Any],
    description: str = "",
    runtime: str = "python",
    secrets: Optional[List[Any]] = None,
    extra_dependencies: Optional[List[str]] = None,
    title: str = "",
    create_subdir: bool = True,
    overwrite: bool = False,
) -> dict:
    """
    Render the project and write it to disk under the allowed root.
    A relative output_dir is taken relative to the allowed root.

    With create_subdir the files go to <output_dir>/<slug>-mcp-server.
    Existing files are never replaced unless overwrite is set.
    """
    try:
        settings = load_settings()
        spec = build_server_spec(
            name,
            description=description,
            runtime=runtime,
            tools=tools,
            secrets=secrets,
            extra_dependencies=extra_dependencies,
            title=title,
        )
        target = Path(output_dir).expanduser()
        if not target.is_absolute():
            target = settings.allowed_root / target
        target = ensure_within(settings.allowed_root, target)
        if create_subdir:
            target = target / spec.image

        files = render_files(spec)
        written = await anyio.to_thread.run_sync(
            functools.partial(write_files, target, files, overwrite=overwrite)
        )
    except ScaffoldError as e:
        logger.warning("write_project refused: %s", e)
        return {"ok": False, "error": str(e)}
    except OSError as e:
        logger.error("write_project failed: %s", e)
        return {"ok": False, "error": f"file write failed: {e}"}

    return {
        "ok": True,
        "root": str(target),
        "server": spec.slug,
        "written": [p.relative_to(target).as_posix() for p in written],
    }
