import json
import shutil
import subprocess

import pytest

from docker_mcp_scaffold.core.models import build_server_spec
from docker_mcp_scaffold.core.placeholders import find_placeholders
from docker_mcp_scaffold.core.fs import write_files
from docker_mcp_scaffold.core.render import render_files
from docker_mcp_scaffold.tools.templates import list_templates, render_project

WEATHER_TOOLS = [
    {"name": "current_weather", "params": ["city"], "description": "Current weather for a city."},
    {"name": "forecast", "params": ["city", "days"], "description": 'Forecast with "quotes".'},
    "ping",
]


def _python_files():
    spec = build_server_spec("weather", tools=WEATHER_TOOLS, secrets=["API_KEY"], extra_dependencies=["requests"])
    return render_files(spec)


def test_python_layout_and_no_leftover_placeholders():
    files = _python_files()

    assert list(files) == ["Dockerfile", "requirements.txt", "weather_server.py", "readme.txt", "CLAUDE.md"]
    for path, content in files.items():
        assert find_placeholders(content) == [], path


def test_python_server_follows_gateway_rules():
    src = _python_files()["weather_server.py"]

    compile(src, "weather_server.py", "exec")
    assert 'mcp = FastMCP("weather")' in src
    assert "@mcp.prompt" not in src
    assert 'async def forecast(city: str = "", days: str = "") -> str:' in src
    assert "async def ping() -> str:" in src
    assert 'if not days.strip():' in src
    assert '"""Forecast with \'quotes\'."""' in src
    assert 'API_KEY = os.environ.get("API_KEY", "")' in src
    assert 'logger.warning("API_KEY not set")' in src
    assert "stream=sys.stderr" in src


def test_python_dockerfile_and_requirements():
    files = _python_files()

    assert "COPY weather_server.py ." in files["Dockerfile"]
    assert "USER mcpuser" in files["Dockerfile"]
    assert "API_KEY" not in files["Dockerfile"]
    assert files["requirements.txt"].splitlines() == ["mcp[cli]>=1.2.0", "httpx", "requests"]


def test_readme_lists_tools_and_install_steps():
    readme = _python_files()["readme.txt"]

    assert readme.startswith("# Weather MCP Server")
    assert "**`forecast`**" in readme
    assert "docker build -t weather-mcp-server ." in readme
    assert 'docker mcp secret set weather.api_key="<API_KEY>"' in readme


def test_node_project_renders_valid_manifest():
    spec = build_server_spec(
        "weather",
        runtime="node",
        tools=WEATHER_TOOLS,
        extra_dependencies=["axios@^1.7.0", "@scope/pkg"],
    )
    files = render_files(spec)

    assert list(files) == ["Dockerfile", "package.json", "server.js", "readme.txt", "CLAUDE.md"]
    manifest = json.loads(files["package.json"])
    assert manifest["name"] == "weather-mcp-server"
    assert manifest["dependencies"]["zod"]
    assert manifest["dependencies"]["axios"] == "^1.7.0"
    assert manifest["dependencies"]["@scope/pkg"] == "latest"

    src = files["server.js"]
    assert '{ city: z.string().default(""), days: z.string().default("") }' in src
    assert "async ({ city, days }) =>" in src
    assert "async () =>" in src
    assert "console.log" not in src
    assert "// No secrets required" in src
    for content in files.values():
        assert find_placeholders(content) == []


def test_list_templates_reports_placeholders():
    out = list_templates("python")

    assert out["ok"] is True
    by_name = {t["name"]: t for t in out["templates"]}
    assert "SOURCE_FILE" in by_name["Dockerfile"]["placeholders"]
    assert by_name["tool.py"]["fragment"] is True


def test_list_templates_unknown_runtime():
    out = list_templates("ruby")
    assert out["ok"] is False


def test_render_project_truncates_to_budget():
    out = render_project("weather", tools=["ping"], max_chars=100)

    assert out["ok"] is True
    assert out["image"] == "weather-mcp-server"
    assert sum(len(f["content"]) for f in out["files"]) == 100
    assert out["files"][0]["truncated"] is True
    assert out["files"][-1]["content"] == ""


def test_render_project_reports_invalid_spec():
    out = render_project("", tools=[])
    assert out["ok"] is False
    assert "at least one tool" in out["error"]


QUOTED_NAME = 'Joe\'s "Best" API'
QUOTED_DESCRIPTION = 'Reads C:\\Users\\data and """quoted""" text'


def _quoted_spec(runtime):
    return build_server_spec(
        QUOTED_NAME,
        description=QUOTED_DESCRIPTION,
        runtime=runtime,
        tools=[{"name": "lookup", "params": ["query"], "description": 'Find "things" in C:\\temp'}],
    )


def test_python_server_compiles_with_quotes_and_backslashes_in_text():
    spec = _quoted_spec("python")
    files = render_files(spec)
    src = files[spec.source_file]

    compile(src, spec.source_file, "exec")
    assert 'logger.info("Starting Joe\'s \\"Best\\" API MCP server...")' in src
    assert "C:\\\\Users\\\\data" in src
    assert files["readme.txt"].startswith('# Joe\'s "Best" API MCP Server')
    assert QUOTED_DESCRIPTION in files["readme.txt"]


def test_readme_intro_with_default_description():
    readme = render_files(build_server_spec("weather", tools=["now"]))["readme.txt"]

    assert "server that" not in readme
    assert "A Model Context Protocol (MCP) server for Weather." in readme
    assert "Exposes Weather tools to AI assistants." in readme


def test_node_server_log_line_escapes_title():
    src = render_files(_quoted_spec("node"))["server.js"]
    assert 'log("Starting Joe\'s \\"Best\\" API MCP server...");' in src


@pytest.mark.skipif(shutil.which("node") is None, reason="node is not installed")
def test_node_server_passes_syntax_check(tmp_path):
    write_files(tmp_path, render_files(_quoted_spec("node")))
    result = subprocess.run(
        ["node", "--check", str(tmp_path / "server.js")],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0, result.stderr
