from ..core.config import load_settings
from ..core.errors import ScaffoldError
from ..core.models import RUNTIMES
from ..server import mcp


@mcp.tool()
def env_specs() -> dict:
    """
    Provide environment + operational constraints for scaffolding requests.
    """
    try:
        settings = load_settings()
    except ScaffoldError as e:
        return {"ok": False, "error": str(e)}
    return {
        "ok": True,
        "server": "docker-mcp-scaffold",
        "runtimes": list(RUNTIMES),
        "allowed_root": str(settings.allowed_root),
        "preview_chars": settings.preview_chars,
        "transport": settings.transport,
        "notes": [
            "Renders files only; never builds images or stores secrets",
            "Writes are limited to the allowed root",
            "Generated servers log to stderr and return formatted strings",
        ],
    }
