from __future__ import annotations

import re
from typing import Dict, List

from .errors import UnresolvedPlaceholderError

PLACEHOLDER = re.compile(r"\[([A-Z][A-Z0-9_]*)\]")


def find_placeholders(text: str) -> List[str]:
    """Placeholder names in order of first appearance, without duplicates."""
    seen: set[str] = set()
    out: List[str] = []
    for m in PLACEHOLDER.finditer(text):
        name = m.group(1)
        if name not in seen:
            seen.add(name)
            out.append(name)
    return out


def fill(text: str, values: Dict[str, str], strict: bool = True) -> str:
    """
    Substitute [TOKEN] placeholders in a single pass.
    Substituted values are not scanned again.
    """
    if strict:
        missing = [n for n in find_placeholders(text) if n not in values]
        if missing:
            raise UnresolvedPlaceholderError(missing)

    def _sub(m: re.Match) -> str:
        name = m.group(1)
        if name in values:
            return str(values[name])
        return m.group(0)

    return PLACEHOLDER.sub(_sub, text)
