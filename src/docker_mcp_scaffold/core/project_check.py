from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Optional

from .fs import iter_text_files, read_file_safe
from .placeholders import find_placeholders

_PY_PRINT = re.compile(r"^\s*print\(", re.MULTILINE)
_CONSOLE_LOG = re.compile(r"\bconsole\.log\(")
_USER = re.compile(r"^\s*USER\s+(\S+)", re.MULTILINE)


def detect_runtime(root: Path) -> Optional[str]:
    if (root / "package.json").is_file():
        return "node"
    if (root / "requirements.txt").is_file():
        return "python"
    return None


def _python_source(root: Path) -> Optional[Path]:
    candidates = sorted(root.glob("*_server.py")) or sorted(root.glob("server.py"))
    return candidates[0] if candidates else None


def _finding(path: str, kind: str, message: str) -> Dict[str, str]:
    return {"path": path, "kind": kind, "message": message}


def inspect_project(root: Path) -> dict:
    """
    Check a scaffolded directory against the guide's rules:
    expected files, leftover placeholders, root containers, prompts and
    stdout writes in the server source.
    """
    root = root.resolve()
    runtime = detect_runtime(root)
    findings: List[Dict[str, str]] = []

    if runtime is None:
        return {
            "ok": False,
            "root": str(root),
            "runtime": None,
            "files": {},
            "findings": [_finding(".", "missing-manifest", "neither requirements.txt nor package.json found")],
        }

    if runtime == "python":
        source = _python_source(root)
        source_name = source.name if source else "*_server.py"
        expected = ["Dockerfile", "requirements.txt", source_name, "readme.txt", "CLAUDE.md"]
    else:
        source = root / "server.js"
        expected = ["Dockerfile", "package.json", "server.js", "readme.txt", "CLAUDE.md"]

    files = {name: (root / name).is_file() for name in expected}
    for name, present in files.items():
        if not present:
            findings.append(_finding(name, "missing-file", f"{name} is missing"))

    for path, text in iter_text_files(root):
        rel = path.relative_to(root).as_posix()
        leftover = find_placeholders(text)
        if leftover:
            findings.append(
                _finding(rel, "leftover-placeholder", "unfilled: " + ", ".join(f"[{t}]" for t in leftover))
            )

    dockerfile = read_file_safe(root / "Dockerfile")
    if dockerfile is not None:
        users = _USER.findall(dockerfile)
        if not users or users[-1] in ("root", "0"):
            findings.append(_finding("Dockerfile", "runs-as-root", "container does not switch to a non-root user"))

    source_text = read_file_safe(source) if source is not None else None
    if source_text is not None:
        rel = source.relative_to(root).as_posix()
        if runtime == "python":
            if "@mcp.prompt" in source_text:
                findings.append(_finding(rel, "prompt-decorator", "@mcp.prompt is not supported by the gateway"))
            if _PY_PRINT.search(source_text):
                findings.append(_finding(rel, "stdout-write", "print() writes to stdout; log to stderr instead"))
        elif _CONSOLE_LOG.search(source_text):
            findings.append(_finding(rel, "stdout-write", "console.log writes to stdout; use console.error"))

    return {
        "ok": not findings,
        "root": str(root),
        "runtime": runtime,
        "files": files,
        "findings": findings,
    }
