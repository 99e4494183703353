from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import FileConflictError, PathOutsideRootError
from .log import get_logger

logger = get_logger("fs")

DEFAULT_IGNORES = {
    ".git", ".venv", "venv", "__pycache__", ".pytest_cache", ".mypy_cache",
    "node_modules", "dist", "build"
}

TEXT_EXTS = {
    ".py", ".md", ".txt", ".toml", ".yaml", ".yml", ".json", ".js", ".mjs", ".ts",
}

TEXT_NAMES = {"Dockerfile"}


def iter_text_files(root: Path, file_globs: Optional[List[str]] = None) -> Iterator[Tuple[Path, str]]:
    root = root.resolve()
    for p in sorted(root.rglob("*")):
        if any(part in DEFAULT_IGNORES for part in p.relative_to(root).parts):
            continue
        if not p.is_file():
            continue

        if file_globs:
            if not any(p.match(g) for g in file_globs):
                continue
        elif p.suffix.lower() not in TEXT_EXTS and p.name not in TEXT_NAMES:
            continue

        try:
            text = p.read_text(encoding="utf-8", errors="ignore")
        except OSError:
            continue

        yield p, text


def read_file_safe(path: Path) -> Optional[str]:
    try:
        if not path.exists() or not path.is_file():
            return None
        return path.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return None


def safe_in_root(root: Path, candidate: Path) -> bool:
    """Prevent path traversal: candidate must be within root."""
    try:
        candidate.resolve().relative_to(root.resolve())
        return True
    except ValueError:
        return False


def ensure_within(allowed_root: Path, target: Path) -> Path:
    target = target.expanduser().resolve()
    if not safe_in_root(allowed_root, target):
        raise PathOutsideRootError(target, allowed_root)
    return target


def write_files(root: Path, files: Dict[str, str], overwrite: bool = False) -> List[Path]:
    """
    Write {relative path: content} beneath root.
    All paths and conflicts are checked before the first write.
    """
    root = root.expanduser().resolve()
    targets: List[Tuple[Path, str]] = []
    conflicts: List[str] = []

    for rel, content in files.items():
        target = (root / rel).resolve()
        if not safe_in_root(root, target):
            raise PathOutsideRootError(target, root)
        if target.exists() and not overwrite:
            conflicts.append(rel)
        targets.append((target, content))

    if conflicts:
        raise FileConflictError(conflicts)

    written: List[Path] = []
    for target, content in targets:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8", newline="\n")
        written.append(target)
        logger.info("wrote %s (%d bytes)", target, len(content.encode("utf-8")))

    return written
