from __future__ import annotations

from typing import List


class ScaffoldError(Exception):
    """Base error for everything this package raises on purpose."""


class InvalidServerSpec(ScaffoldError, ValueError):
    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__("invalid server spec: " + "; ".join(self.problems))


class UnresolvedPlaceholderError(ScaffoldError):
    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        tokens = ", ".join(f"[{m}]" for m in self.missing)
        super().__init__(f"unresolved placeholders: {tokens}")


class PathOutsideRootError(ScaffoldError):
    def __init__(self, path, root):
        self.path = path
        self.root = root
        super().__init__(f"refusing path outside allowed root: path={str(path)!r} root={str(root)!r}")


class FileConflictError(ScaffoldError):
    def __init__(self, paths: List[str]):
        self.paths = list(paths)
        super().__init__("refusing to overwrite existing files: " + ", ".join(self.paths))


class CatalogError(ScaffoldError):
    """Existing catalog or desktop config text could not be merged."""


class ConfigError(ScaffoldError):
    """The environment holds a setting that cannot be used."""
