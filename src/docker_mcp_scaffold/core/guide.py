"""
The skill guides: markdown documents that walk an assistant through
building a Dockerized MCP server by hand, one per runtime.

The embedded templates are the same text `render` fills in, shown with
their placeholders intact.
"""
from __future__ import annotations

from typing import Dict, List

from .catalog import CATALOG_NAME, GATEWAY_KEY
from .errors import InvalidServerSpec
from .models import RUNTIMES
from .templates import get_templates

RUNTIME_LABELS = {"python": "Python", "node": "Node.js"}

CLARIFYING_QUESTIONS = [
    "Which service or API should the server wrap, and where is its documentation?",
    "Which tools should the server expose, and which parameters does each take?",
    "Does the service need authentication (API key, token, username and password)?",
    "What should tool results look like (plain text, lists, tables)?",
    "Are there rate limits, timeouts or other constraints to respect?",
]

_COMMON_RULES = [
    "Log to **stderr** only; stdout carries the MCP protocol.",
    "Keep every tool description to a **single line**.",
    "Every tool returns a **formatted string**, including errors (`❌ Error: ...`).",
    "Declare tool parameters as strings that default to an **empty string**, and check them with `.strip()`/`.trim()`.",
    "Read credentials from **environment variables** at startup; never hardcode them.",
    "Run the container as a **non-root user**.",
    "Never bake **secrets** into the Docker image.",
]

_RUNTIME_RULES = {
    "python": [
        "Create the server with `FastMCP(\"name\")` and **no prompt parameter**.",
        "Do not use `@mcp.prompt` decorators.",
        "Do not use `Optional` or `None` parameter types; the gateway passes strings.",
        "Make every tool an `async def` that returns `str`.",
    ],
    "node": [
        "Create the server with `McpServer` and connect a `StdioServerTransport`.",
        "Describe tool parameters with `zod` schemas: `z.string().default(\"\")`.",
        "Log with `console.error`; never `console.log`.",
    ],
}


def _check_runtime(runtime: str) -> str:
    runtime = (runtime or "").strip().lower()
    if runtime not in RUNTIMES:
        raise InvalidServerSpec([f"runtime must be one of {', '.join(RUNTIMES)} (got {runtime!r})"])
    return runtime


def implementation_rules(runtime: str) -> List[str]:
    runtime = _check_runtime(runtime)
    return _COMMON_RULES + _RUNTIME_RULES[runtime]


def output_files(runtime: str) -> Dict[str, str]:
    runtime = _check_runtime(runtime)
    source = "[SERVER_MODULE]_server.py" if runtime == "python" else "server.js"
    manifest = "requirements.txt" if runtime == "python" else "package.json"
    return {
        "Dockerfile": "container build recipe",
        manifest: "dependency manifest",
        source: "the server source with every tool",
        "readme.txt": "user documentation and installation steps",
        "CLAUDE.md": "implementation notes for later changes",
    }


def checklist(runtime: str) -> List[str]:
    runtime = _check_runtime(runtime)
    manifest = "requirements.txt" if runtime == "python" else "package.json"
    items = [
        "All five files are generated: `Dockerfile`, "
        f"`{manifest}`, the server source, `readme.txt` and `CLAUDE.md`.",
        "No placeholder tokens such as `[SERVER_NAME]` remain in the output.",
        "Every tool has a **single line** description.",
        "Tool parameters default to an **empty string**.",
        "Every tool returns a **formatted string** on success and on error.",
        "Logging goes to **stderr**.",
        "The Dockerfile switches to a **non-root user**.",
        "No **secrets** appear in the Dockerfile or the source.",
        f"The **catalog entry** is added to `{CATALOG_NAME}.yaml` and lists every tool.",
        "The server name is added to the **registry**.",
        f"The **Claude Desktop config** runs `{GATEWAY_KEY}` with the custom catalog.",
    ]
    if runtime == "python":
        items.append("There is **no prompt parameter** and no `@mcp.prompt` decorator.")
    else:
        items.append("Parameters use `zod` string schemas.")
    return items


def _fence(text: str, lang: str = "", ticks: int = 3) -> str:
    marker = "`" * ticks
    return f"{marker}{lang}\n{text.rstrip()}\n{marker}"


def render_guide(runtime: str) -> str:
    runtime = _check_runtime(runtime)
    label = RUNTIME_LABELS[runtime]
    templates = get_templates(runtime)
    source_key = "server.py" if runtime == "python" else "server.js"
    tool_key = "tool.py" if runtime == "python" else "tool.js"
    manifest_key = "requirements.txt" if runtime == "python" else "package.json"
    lang = "python" if runtime == "python" else "javascript"

    parts: List[str] = [
        f"# Docker MCP Server Builder ({label})",
        "",
        "## Purpose",
        "",
        f"Use this guide to build a **Model Context Protocol** server in {label} that runs in a "
        "Docker container behind the **Docker MCP Gateway**. The result is a set of files the "
        "user saves and builds by hand, plus the **catalog entry**, the **registry** line and "
        "the **Claude Desktop config** that make the gateway load the server.",
        "",
        "## Clarifying Questions",
        "",
        "Ask these before writing anything:",
        "",
    ]
    parts.extend(f"{i}. {q}" for i, q in enumerate(CLARIFYING_QUESTIONS, start=1))

    parts.extend(["", "## Output Files", "", "Produce exactly these files:", ""])
    parts.extend(f"- `{name}`: {desc}" for name, desc in output_files(runtime).items())

    parts.extend(["", "## Implementation Rules", ""])
    parts.extend(f"- {rule}" for rule in implementation_rules(runtime))

    parts.extend(
        [
            "",
            "## Templates",
            "",
            "Replace every placeholder token such as `[SERVER_NAME]` before handing files to the user.",
            "",
            "### Dockerfile",
            "",
            _fence(templates["Dockerfile"], "dockerfile"),
            "",
            f"### {manifest_key}",
            "",
            _fence(templates[manifest_key], "json" if runtime == "node" else "text"),
            "",
            "### Server Source",
            "",
            _fence(templates[source_key], lang),
            "",
            "### Tool Function",
            "",
            "Repeat this block once per tool:",
            "",
            _fence(templates[tool_key], lang),
            "",
            "### readme.txt",
            "",
            _fence(templates["readme.txt"], "markdown", ticks=4),
            "",
            "## Installation",
            "",
            "Walk the user through these steps after the files are saved:",
            "",
            "1. Build the image with `docker build`.",
            "2. Store credentials with `docker mcp secret set`.",
            f"3. Add the catalog entry to `~/.docker/mcp/catalogs/{CATALOG_NAME}.yaml`.",
            "4. Add the server name to `~/.docker/mcp/registry.yaml`.",
            f"5. Point the Claude Desktop config at the gateway (`{GATEWAY_KEY}`) with "
            "`--catalog=/mcp/catalogs/custom.yaml`.",
            "6. Restart Claude Desktop and check `docker mcp server list`.",
            "",
            "## Final Checklist",
            "",
        ]
    )
    parts.extend(f"- [ ] {item}" for item in checklist(runtime))
    return "\n".join(parts) + "\n"
