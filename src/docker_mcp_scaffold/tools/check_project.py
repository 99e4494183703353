from __future__ import annotations

from pathlib import Path

from ..core.project_check import inspect_project
from ..server import mcp


@mcp.tool()
def check_project(root: str = ".") -> dict:
    """
    Inspect a scaffolded server directory for missing files and rule violations.
    """
    root_path = Path(root).resolve()
    if not root_path.is_dir():
        return {"ok": False, "root": str(root_path), "error": "not a directory"}
    return inspect_project(root_path)
