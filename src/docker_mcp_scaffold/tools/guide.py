from __future__ import annotations

from ..core.errors import ScaffoldError
from ..core.guide import checklist, render_guide
from ..core.lint import lint_markdown
from ..server import mcp


@mcp.tool()
def skill_guide(runtime: str = "python") -> dict:
    """
    Return the step-by-step guide for building a Dockerized MCP server by hand.
    """
    try:
        markdown = render_guide(runtime)
    except ScaffoldError as e:
        return {"ok": False, "error": str(e)}
    return {"ok": True, "runtime": runtime, "markdown": markdown, "checklist": checklist(runtime)}


@mcp.tool()
def lint_guide(markdown: str) -> dict:
    """
    Check a markdown guide for undefined checklist references, empty sections and duplicate headings.
    """
    issues = lint_markdown(markdown)
    return {"ok": not issues, "issues": issues}
