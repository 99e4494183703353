from __future__ import annotations

import json
from typing import Dict, List

from .catalog import format_steps, installation_steps
from .guide import RUNTIME_LABELS, implementation_rules
from .log import get_logger
from .models import ServerSpec, ToolSpec
from .naming import secret_id
from .placeholders import fill
from .templates import get_templates

logger = get_logger("render")

NODE_BASE_DEPENDENCIES = {
    "@modelcontextprotocol/sdk": "^1.0.0",
    "zod": "^3.23.8",
}


def _py_docstring(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', "'")


def _string_body(text: str) -> str:
    # JSON string escapes are valid inside Python and JavaScript double-quoted literals
    return json.dumps(text, ensure_ascii=False)[1:-1]


def _python_tool(tool: ToolSpec, fragment: str) -> str:
    signature = ", ".join(f'{p}: str = ""' for p in tool.param_names)
    checks = "".join(
        f'\n    if not {p}.strip():\n        return "❌ Error: {p} is required"' for p in tool.param_names
    )
    return fill(
        fragment,
        {
            "TOOL_NAME": tool.name,
            "TOOL_SIGNATURE": signature,
            "TOOL_DESCRIPTION": _py_docstring(tool.description),
            "TOOL_CHECKS": checks,
        },
    )


def _node_tool(tool: ToolSpec, fragment: str) -> str:
    if tool.params:
        schema = "{ " + ", ".join(f'{p}: z.string().default("")' for p in tool.param_names) + " }"
        args = "{ " + ", ".join(tool.param_names) + " }"
    else:
        schema, args = "{}", ""
    checks = "".join(
        f'\n    if (!{p}.trim()) return text("❌ Error: {p} is required");' for p in tool.param_names
    )
    return fill(
        fragment,
        {
            "TOOL_NAME": tool.name,
            "TOOL_DESCRIPTION_JSON": json.dumps(tool.description, ensure_ascii=False),
            "TOOL_SCHEMA": schema,
            "TOOL_ARGS": args,
            "TOOL_CHECKS": checks,
        },
    )


def _secret_blocks(spec: ServerSpec) -> Dict[str, str]:
    if spec.runtime == "python":
        if not spec.secrets:
            return {"SECRET_CONFIG": "# No secrets required", "SECRET_WARNINGS": ""}
        config = "\n".join(f'{s.env} = os.environ.get("{s.env}", "")' for s in spec.secrets)
        warnings = "".join(
            f'\n    if not {s.env}:\n        logger.warning("{s.env} not set")' for s in spec.secrets
        )
    else:
        if not spec.secrets:
            return {"SECRET_CONFIG": "// No secrets required", "SECRET_WARNINGS": ""}
        config = "\n".join(f'const {s.env} = process.env.{s.env} ?? "";' for s in spec.secrets)
        warnings = "".join(f'\n  if (!{s.env}) log("{s.env} not set");' for s in spec.secrets)
    return {"SECRET_CONFIG": config, "SECRET_WARNINGS": warnings}


def _node_dependencies(spec: ServerSpec) -> str:
    deps = dict(NODE_BASE_DEPENDENCIES)
    for raw in spec.extra_dependencies:
        # "name@range", including scoped "@scope/name@range"
        at = raw.rfind("@")
        if at > 0:
            deps[raw[:at]] = raw[at + 1:] or "latest"
        else:
            deps[raw] = "latest"
    return ",\n".join(f"    {json.dumps(k)}: {json.dumps(v)}" for k, v in deps.items())


def _tool_list(spec: ServerSpec) -> str:
    lines = []
    for t in spec.tools:
        params = f" (params: {', '.join(t.param_names)})" if t.params else ""
        lines.append(f"- **`{t.name}`** - {t.description}{params}")
    return "\n".join(lines)


def _usage_examples(spec: ServerSpec) -> str:
    return "\n".join(f'- "Use {t.name} to ..." ({t.description})' for t in spec.tools)


def placeholder_values(spec: ServerSpec) -> Dict[str, str]:
    templates = get_templates(spec.runtime)
    if spec.runtime == "python":
        tools = [_python_tool(t, templates["tool.py"]) for t in spec.tools]
        tool_functions = "\n\n".join(tools)
        extra = "".join(f"\n{d}" for d in spec.extra_dependencies)
    else:
        tools = [_node_tool(t, templates["tool.js"]) for t in spec.tools]
        tool_functions = "\n\n".join(tools)
        extra = ""

    if spec.secrets:
        secret_list = "\n".join(
            f"- `{s.env}` (Docker secret `{secret_id(spec.slug, s.env)}`)" for s in spec.secrets
        )
        prerequisites = "- Credentials for: " + ", ".join(s.env for s in spec.secrets)
    else:
        secret_list = "No environment variables are required."
        prerequisites = ""

    values = {
        "SERVER_NAME": spec.name,
        "SLUG": spec.slug,
        "TITLE": spec.title,
        "TITLE_STR": _string_body(spec.title),
        "DOC_TITLE": _py_docstring(spec.title),
        "DESCRIPTION": spec.description,
        "DOC_DESCRIPTION": _py_docstring(spec.description),
        "DESCRIPTION_JSON": json.dumps(spec.description, ensure_ascii=False),
        "IMAGE": spec.image,
        "SOURCE_FILE": spec.source_file,
        "RUNTIME_LABEL": RUNTIME_LABELS[spec.runtime],
        "LICENSE": spec.license,
        "TOOL_FUNCTIONS": tool_functions,
        "TOOL_LIST": _tool_list(spec),
        "USAGE_EXAMPLES": _usage_examples(spec),
        "EXTRA_REQUIREMENTS": extra,
        "NODE_DEPENDENCIES": _node_dependencies(spec),
        "INSTALL_STEPS": format_steps(installation_steps(spec)),
        "RULES": "\n".join(f"- {r}" for r in implementation_rules(spec.runtime)),
        "SECRET_LIST": secret_list,
        "SECRET_PREREQUISITES": prerequisites,
    }
    values.update(_secret_blocks(spec))
    return values


def render_files(spec: ServerSpec) -> Dict[str, str]:
    """
    Render every project file for the spec's runtime.
    Returns {relative path: content} in a stable order.
    """
    templates = get_templates(spec.runtime)
    values = placeholder_values(spec)

    if spec.runtime == "python":
        layout: List[tuple] = [
            ("Dockerfile", "Dockerfile"),
            ("requirements.txt", "requirements.txt"),
            (spec.source_file, "server.py"),
            ("readme.txt", "readme.txt"),
            ("CLAUDE.md", "CLAUDE.md"),
        ]
    else:
        layout = [
            ("Dockerfile", "Dockerfile"),
            ("package.json", "package.json"),
            (spec.source_file, "server.js"),
            ("readme.txt", "readme.txt"),
            ("CLAUDE.md", "CLAUDE.md"),
        ]

    files = {path: fill(templates[name], values) for path, name in layout}
    logger.debug("rendered %d files for %s (%s)", len(files), spec.slug, spec.runtime)
    return files
