from __future__ import annotations

import keyword
import re

from .errors import InvalidServerSpec

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")
_ENV_NAME = re.compile(r"^[A-Z][A-Z0-9_]*$")


def slugify(name: str) -> str:
    slug = _NON_ALNUM.sub("-", (name or "").strip().lower()).strip("-")
    if not slug:
        raise InvalidServerSpec([f"server name {name!r} has no letters or digits"])
    if not slug[0].isalpha():
        raise InvalidServerSpec([f"server name {name!r} must start with a letter"])
    return slug


def module_name(slug: str) -> str:
    return slug.replace("-", "_") + "_server"


def image_name(slug: str) -> str:
    return f"{slug}-mcp-server"


def title_from(name: str) -> str:
    words = [w for w in re.split(r"[\s_\-]+", (name or "").strip()) if w]
    return " ".join(w[:1].upper() + w[1:] for w in words)


def secret_id(slug: str, env: str) -> str:
    return f"{slug}.{env.lower()}"


def is_identifier(name: str) -> bool:
    return bool(_IDENTIFIER.match(name or "")) and not keyword.iskeyword(name)


def is_env_name(name: str) -> bool:
    return bool(_ENV_NAME.match(name or ""))
