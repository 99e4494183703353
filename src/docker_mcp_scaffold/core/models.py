from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple

from .errors import InvalidServerSpec
from .naming import image_name, is_env_name, is_identifier, module_name, slugify, title_from

RUNTIMES = ("python", "node")

# Names the generated module already binds. A tool or parameter reusing one
# would shadow it and break the server at runtime.
RESERVED_PYTHON = frozenset(
    {"os", "sys", "logging", "datetime", "timezone", "httpx", "mcp", "logger", "utc_now", "str", "e"}
)
# Node tool names are plain strings, so only destructured parameters matter.
RESERVED_NODE_PARAMS = frozenset(
    {
        "log", "text", "server", "main", "z", "err", "process", "console",
        "arguments", "await", "case", "catch", "class", "const", "debugger", "default",
        "delete", "do", "enum", "eval", "export", "extends", "function", "implements",
        "instanceof", "interface", "let", "new", "null", "package", "private", "protected",
        "public", "static", "super", "switch", "this", "throw", "typeof", "var", "void",
        "yield",
    }
)


@dataclass(frozen=True)
class ToolParam:
    name: str


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    params: Tuple[ToolParam, ...] = ()

    @property
    def param_names(self) -> Tuple[str, ...]:
        return tuple(p.name for p in self.params)


@dataclass(frozen=True)
class SecretSpec:
    env: str
    example: str = ""


@dataclass(frozen=True)
class ServerSpec:
    name: str
    slug: str
    title: str
    description: str
    runtime: str
    tools: Tuple[ToolSpec, ...]
    secrets: Tuple[SecretSpec, ...] = ()
    extra_dependencies: Tuple[str, ...] = ()
    category: str = "integration"
    tags: Tuple[str, ...] = ()
    license: str = "MIT"
    owner: str = "local"
    date_added: Optional[str] = None

    @property
    def module(self) -> str:
        return module_name(self.slug)

    @property
    def image(self) -> str:
        return image_name(self.slug)

    @property
    def source_file(self) -> str:
        return f"{self.module}.py" if self.runtime == "python" else "server.js"

    @property
    def manifest_file(self) -> str:
        return "requirements.txt" if self.runtime == "python" else "package.json"


def _one_line(text: str) -> str:
    return " ".join((text or "").split())


def _reserved_problem(name: str, runtime: str, is_param: bool) -> Optional[str]:
    if runtime == "python" and (name in RESERVED_PYTHON or name.startswith("__")):
        return f"{name!r} is already defined in generated Python servers"
    if runtime == "node" and is_param and name in RESERVED_NODE_PARAMS:
        return f"{name!r} is reserved in generated Node servers"
    return None


def _coerce_tool(raw: Any, index: int, runtime: str, problems: List[str]) -> Optional[ToolSpec]:
    if isinstance(raw, str):
        raw = {"name": raw}
    if not isinstance(raw, dict):
        problems.append(f"tool #{index + 1} must be a name or an object")
        return None

    name = str(raw.get("name") or "").strip()
    if not is_identifier(name):
        problems.append(f"tool name {name!r} must be a snake_case identifier")
        return None
    clash = _reserved_problem(name, runtime, is_param=False)
    if clash:
        problems.append(f"tool name {clash}")
        return None

    params_raw = raw.get("params") or []
    if isinstance(params_raw, str):
        params_raw = [p for p in params_raw.replace(",", " ").split() if p]

    params: List[ToolParam] = []
    for p in params_raw:
        p = str(p).strip()
        clash = _reserved_problem(p, runtime, is_param=True)
        if not is_identifier(p):
            problems.append(f"tool {name!r}: parameter {p!r} must be a snake_case identifier")
        elif clash:
            problems.append(f"tool {name!r}: parameter {clash}")
        elif ToolParam(p) in params:
            problems.append(f"tool {name!r}: duplicate parameter {p!r}")
        else:
            params.append(ToolParam(p))

    description = _one_line(str(raw.get("description") or ""))
    if not description:
        description = f"{title_from(name)} tool."

    return ToolSpec(name=name, description=description, params=tuple(params))


def _coerce_secret(raw: Any, index: int, problems: List[str]) -> Optional[SecretSpec]:
    if isinstance(raw, str):
        raw = {"env": raw}
    if not isinstance(raw, dict):
        problems.append(f"secret #{index + 1} must be an env var name or an object")
        return None

    env = str(raw.get("env") or "").strip()
    if not is_env_name(env):
        problems.append(f"secret env {env!r} must be UPPER_SNAKE_CASE")
        return None

    example = str(raw.get("example") or "").strip() or f"<{env}>"
    return SecretSpec(env=env, example=example)


def _dedupe_names(names: Iterable[str], kind: str, problems: List[str]) -> None:
    seen: set[str] = set()
    for n in names:
        if n in seen:
            problems.append(f"duplicate {kind} {n!r}")
        seen.add(n)


def build_server_spec(
    name: str,
    description: str = "",
    runtime: str = "python",
    tools: Optional[List[Any]] = None,
    secrets: Optional[List[Any]] = None,
    extra_dependencies: Optional[List[str]] = None,
    title: str = "",
    category: str = "integration",
    tags: Optional[List[str]] = None,
    license: str = "MIT",
    owner: str = "local",
    date_added: Optional[str] = None,
) -> ServerSpec:
    """
    Validate loose input (names, dicts, comma strings) into a ServerSpec.
    Collects every problem before raising.
    """
    problems: List[str] = []

    try:
        slug = slugify(name)
    except InvalidServerSpec as e:
        problems.extend(e.problems)
        slug = ""

    runtime = (runtime or "").strip().lower()
    if runtime not in RUNTIMES:
        problems.append(f"runtime must be one of {', '.join(RUNTIMES)} (got {runtime!r})")

    tool_specs: List[ToolSpec] = []
    for i, raw in enumerate(tools or []):
        tool = _coerce_tool(raw, i, runtime, problems)
        if tool is not None:
            tool_specs.append(tool)
    if not tools:
        problems.append("at least one tool is required")
    _dedupe_names((t.name for t in tool_specs), "tool", problems)

    secret_specs: List[SecretSpec] = []
    for i, raw in enumerate(secrets or []):
        secret = _coerce_secret(raw, i, problems)
        if secret is not None:
            secret_specs.append(secret)
    _dedupe_names((s.env for s in secret_specs), "secret", problems)

    if problems:
        raise InvalidServerSpec(problems)

    shown_title = _one_line(title) or title_from(name)
    description = _one_line(description) or f"Exposes {shown_title} tools to AI assistants."
    tag_list = tuple(t.strip() for t in (tags or [slug]) if t and t.strip())

    return ServerSpec(
        name=name.strip(),
        slug=slug,
        title=shown_title,
        description=description,
        runtime=runtime,
        tools=tuple(tool_specs),
        secrets=tuple(secret_specs),
        extra_dependencies=tuple(d.strip() for d in (extra_dependencies or []) if d and d.strip()),
        category=category or "integration",
        tags=tag_list,
        license=license or "MIT",
        owner=owner or "local",
        date_added=date_added,
    )
