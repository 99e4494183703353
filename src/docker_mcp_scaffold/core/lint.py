from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

_HEADING = re.compile(r"^(#{1,6})\s+(.*?)\s*#*\s*$")
_CHECKLIST = re.compile(r"^\s*[-*]\s+\[( |x|X)\]\s+(.*)$")
_BACKTICK = re.compile(r"`([^`]+)`")
_BOLD = re.compile(r"\*\*([^*]+)\*\*")
_FENCE = re.compile(r"^\s*(`{3,}|~{3,})(.*)$")


def _issue(line: int, kind: str, message: str) -> Dict[str, object]:
    return {"line": line, "kind": kind, "message": message}


def checklist_references(item: str) -> List[str]:
    """Backticked and bold terms in a checklist item."""
    refs = _BACKTICK.findall(item) + _BOLD.findall(item)
    return [r.strip() for r in refs if r.strip()]


def lint_markdown(text: str) -> List[Dict[str, object]]:
    """
    Documentation completeness checks for a markdown guide.

    - undefined-reference: a checklist item names a term (backticked or
      bold) that no earlier non-checklist line mentions
    - empty-section: a heading with no content before the next heading of
      the same or higher level, or before the end of the document
    - duplicate-heading: the same heading text twice at the same level

    Lines inside fenced code blocks never count as headings or checklist
    items, but they do count as earlier text.
    """
    issues: List[Dict[str, object]] = []
    seen_text: List[str] = []
    seen_headings: Dict[Tuple[int, str], int] = {}

    # (level, title, line number, has content)
    open_heading: Optional[List] = None
    fence: Optional[str] = None

    for lineno, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()

        f = _FENCE.match(line)
        if f:
            marker = f.group(1)
            if fence is None:
                fence = marker
            elif marker[0] == fence[0] and len(marker) >= len(fence) and not f.group(2).strip():
                fence = None
            if open_heading is not None:
                open_heading[3] = True
            seen_text.append(line.lower())
            continue

        if fence is not None:
            if open_heading is not None and stripped:
                open_heading[3] = True
            seen_text.append(line.lower())
            continue

        m = _HEADING.match(line)
        if m:
            level, title = len(m.group(1)), m.group(2).strip()
            if open_heading is not None and not open_heading[3] and level <= open_heading[0]:
                issues.append(_issue(open_heading[2], "empty-section", f"section {open_heading[1]!r} has no content"))

            key = (level, title.lower())
            if key in seen_headings:
                issues.append(
                    _issue(lineno, "duplicate-heading", f"heading {title!r} already used on line {seen_headings[key]}")
                )
            else:
                seen_headings[key] = lineno

            open_heading = [level, title, lineno, False]
            seen_text.append(line.lower())
            continue

        if stripped and open_heading is not None:
            open_heading[3] = True

        c = _CHECKLIST.match(line)
        if c:
            earlier = "\n".join(seen_text)
            for ref in checklist_references(c.group(2)):
                if ref.lower() not in earlier:
                    issues.append(
                        _issue(lineno, "undefined-reference", f"checklist item references {ref!r} before it is introduced")
                    )
            continue

        seen_text.append(line.lower())

    if open_heading is not None and not open_heading[3]:
        issues.append(_issue(open_heading[2], "empty-section", f"section {open_heading[1]!r} has no content"))

    return issues
