import json
from pathlib import Path

import pytest
import yaml

from docker_mcp_scaffold.core.catalog import (
    desktop_config,
    installation_steps,
    merge_catalog,
    registry_entry,
)
from docker_mcp_scaffold.core.errors import CatalogError
from docker_mcp_scaffold.core.models import build_server_spec
from docker_mcp_scaffold.tools.registration import catalog_entry
from docker_mcp_scaffold.tools.registration import desktop_config as desktop_config_tool
from docker_mcp_scaffold.tools.registration import installation_steps as installation_steps_tool


def _spec(**kw):
    kw.setdefault("tools", ["current_weather", "forecast"])
    return build_server_spec("weather", date_added="2025-01-01T00:00:00Z", **kw)


def test_catalog_entry_shape():
    out = catalog_entry("weather", tools=["current_weather", "forecast"], secrets=["API_KEY"], tags=["weather", "api"])

    assert out["ok"] is True
    doc = yaml.safe_load(out["catalog_yaml"])
    assert doc["version"] == 2
    assert doc["name"] == "custom"
    entry = doc["registry"]["weather"]
    assert list(entry)[:4] == ["description", "title", "type", "dateAdded"]
    assert entry["image"] == "weather-mcp-server:latest"
    assert entry["tools"] == [{"name": "current_weather"}, {"name": "forecast"}]
    assert entry["secrets"] == [{"name": "weather.api_key", "env": "API_KEY", "example": "<API_KEY>"}]
    assert entry["metadata"]["tags"] == ["weather", "api"]
    assert yaml.safe_load(out["registry_yaml"]) == {"registry": {"weather": {"ref": ""}}}


def test_catalog_entry_without_secrets_omits_key():
    doc = yaml.safe_load(merge_catalog("", _spec()))
    assert "secrets" not in doc["registry"]["weather"]


def test_merge_catalog_keeps_other_servers():
    existing = yaml.safe_dump(
        {
            "version": 2,
            "name": "custom",
            "displayName": "Mine",
            "registry": {"dice": {"title": "Dice"}, "weather": {"title": "Old"}},
        },
        sort_keys=False,
    )

    doc = yaml.safe_load(merge_catalog(existing, _spec()))

    assert doc["displayName"] == "Mine"
    assert list(doc["registry"]) == ["dice", "weather"]
    assert doc["registry"]["dice"] == {"title": "Dice"}
    assert doc["registry"]["weather"]["title"] == "Weather"


@pytest.mark.parametrize("bad", ["registry: [1, 2]", "- just\n- a list", "key: [unclosed"])
def test_merge_catalog_rejects_malformed(bad):
    with pytest.raises(CatalogError):
        merge_catalog(bad, _spec())


def test_catalog_tool_reports_merge_errors():
    out = catalog_entry("weather", tools=["ping"], existing_catalog="registry: 3")
    assert out["ok"] is False


def test_registry_entry():
    assert registry_entry(_spec()) == "registry:\n  weather:\n    ref: ''\n"


def test_desktop_config_mounts_home_and_keeps_servers():
    existing = json.dumps({"mcpServers": {"other": {"command": "x"}}, "theme": "dark"})

    config = json.loads(desktop_config(Path("/home/alex"), existing))

    assert config["theme"] == "dark"
    assert config["mcpServers"]["other"] == {"command": "x"}
    gateway = config["mcpServers"]["mcp-toolkit-gateway"]
    assert gateway["command"] == "docker"
    assert "/home/alex/.docker/mcp:/mcp" in gateway["args"]
    assert "--catalog=/mcp/catalogs/custom.yaml" in gateway["args"]
    assert gateway["args"][-1] == "--transport=stdio"


def test_desktop_config_rejects_bad_json():
    with pytest.raises(CatalogError):
        desktop_config(Path("/home/alex"), "{not json")


def test_desktop_config_tool_uses_configured_home(monkeypatch, tmp_path):
    monkeypatch.setenv("DOCKER_MCP_SCAFFOLD_HOME", str(tmp_path))

    out = desktop_config_tool()

    assert out["ok"] is True
    assert f"{tmp_path.as_posix()}/.docker/mcp:/mcp" in out["config_json"]
    assert set(out["paths"]) == {"macos", "windows", "linux"}


def test_installation_steps_order():
    steps = installation_steps(_spec(secrets=["API_KEY"]))

    titles = [s["title"] for s in steps]
    assert titles[0] == "Save the files"
    assert titles.index("Build the Docker image") < titles.index("Set up secrets") < titles.index(
        "Create the custom catalog"
    )
    assert titles[-1] == "Test the server"
    assert [s["step"] for s in steps] == list(range(1, len(steps) + 1))


def test_installation_steps_tool_skips_secrets_when_none():
    out = installation_steps_tool("weather", tools=["ping"])

    assert out["ok"] is True
    assert "Set up secrets" not in [s["title"] for s in out["steps"]]
