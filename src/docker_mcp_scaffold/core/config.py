from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError
from .log import get_logger

logger = get_logger("config")

ENV_PREFIX = "DOCKER_MCP_SCAFFOLD_"
DEFAULT_PREVIEW_CHARS = 6000
TRANSPORT_ENV = "MCP_TRANSPORT"

Transport = Literal["stdio", "sse", "streamable-http"]


class Settings(BaseSettings):
    """Configuration read from DOCKER_MCP_SCAFFOLD_* and MCP_TRANSPORT."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    allowed_root: Path = Field(
        default_factory=Path.cwd,
        validate_default=True,
        description="write_project only writes beneath this directory",
    )
    log_level: str = Field(default="INFO", validate_default=True)
    preview_chars: int = Field(
        default=DEFAULT_PREVIEW_CHARS,
        ge=0,
        description="Character budget for render_project previews",
    )
    home: Path = Field(default_factory=Path.home, validate_default=True)
    transport: Transport = Field(default="stdio", validation_alias=TRANSPORT_ENV)

    @field_validator("allowed_root")
    @classmethod
    def _resolve_root(cls, v: Path) -> Path:
        return v.expanduser().resolve()

    @field_validator("home")
    @classmethod
    def _expand_home(cls, v: Path) -> Path:
        return v.expanduser()

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("preview_chars", mode="before")
    @classmethod
    def _lenient_int(cls, v: Any) -> Any:
        if not isinstance(v, str):
            return v
        try:
            return int(v.strip())
        except ValueError:
            logger.warning(
                "ignoring %sPREVIEW_CHARS=%r (not an integer), using %d", ENV_PREFIX, v, DEFAULT_PREVIEW_CHARS
            )
            return DEFAULT_PREVIEW_CHARS


def _env_name(loc) -> str:
    field = str(loc[0]) if loc else ""
    if field.lower() in ("transport", TRANSPORT_ENV.lower()):
        return TRANSPORT_ENV
    return ENV_PREFIX + field.upper()


def load_settings() -> Settings:
    """
    Read configuration from the environment. Called per operation so that
    changes to the environment (and monkeypatched tests) take effect.
    """
    try:
        return Settings()
    except ValidationError as e:
        problems = "; ".join(f"{_env_name(err['loc'])}: {err['msg']}" for err in e.errors())
        raise ConfigError(f"invalid configuration: {problems}") from e
