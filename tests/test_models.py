import pytest

from docker_mcp_scaffold.core.errors import InvalidServerSpec
from docker_mcp_scaffold.core.models import ToolParam, build_server_spec


def test_build_server_spec_accepts_loose_input():
    spec = build_server_spec(
        "Weather",
        tools=["current_weather", {"name": "forecast", "params": "city, days", "description": "Multi\nline"}],
        secrets=["API_KEY", {"env": "API_HOST", "example": "api.example.com"}],
    )

    assert spec.slug == "weather"
    assert spec.title == "Weather"
    assert spec.runtime == "python"
    assert spec.tools[0].description == "Current Weather tool."
    assert spec.tools[1].params == (ToolParam("city"), ToolParam("days"))
    assert spec.tools[1].param_names == ("city", "days")
    assert spec.tools[1].description == "Multi line"
    assert spec.secrets[0].example == "<API_KEY>"
    assert spec.secrets[1].example == "api.example.com"
    assert spec.source_file == "weather_server.py"
    assert spec.tags == ("weather",)


def test_build_server_spec_collects_every_problem():
    with pytest.raises(InvalidServerSpec) as exc:
        build_server_spec(
            "weather",
            runtime="ruby",
            tools=["ok_tool", "ok_tool", "Bad-Name", {"name": "t", "params": ["x", "x"]}],
            secrets=["lower", "API_KEY", "API_KEY"],
        )

    problems = " | ".join(exc.value.problems)
    assert "runtime" in problems
    assert "duplicate tool 'ok_tool'" in problems
    assert "'Bad-Name'" in problems
    assert "duplicate parameter 'x'" in problems
    assert "'lower'" in problems
    assert "duplicate secret 'API_KEY'" in problems


def test_build_server_spec_requires_tools():
    with pytest.raises(InvalidServerSpec):
        build_server_spec("weather", tools=[])


def test_node_spec_files():
    spec = build_server_spec("weather", runtime="NODE", tools=["now"])
    assert spec.runtime == "node"
    assert spec.source_file == "server.js"
    assert spec.manifest_file == "package.json"


def test_default_description_reads_as_a_sentence():
    spec = build_server_spec("weather", tools=["now"])
    assert spec.description == "Exposes Weather tools to AI assistants."


@pytest.mark.parametrize(
    "tools",
    [
        ["mcp"],
        ["logger"],
        ["utc_now"],
        [{"name": "lookup", "params": ["str"]}],
        [{"name": "lookup", "params": ["os"]}],
        ["__init__"],
    ],
)
def test_python_rejects_names_bound_by_the_generated_module(tools):
    with pytest.raises(InvalidServerSpec) as exc:
        build_server_spec("weather", tools=tools)
    assert "already defined in generated Python servers" in " | ".join(exc.value.problems)


@pytest.mark.parametrize("param", ["text", "log", "server", "default", "new"])
def test_node_rejects_parameters_that_shadow_helpers_or_keywords(param):
    with pytest.raises(InvalidServerSpec) as exc:
        build_server_spec("weather", runtime="node", tools=[{"name": "lookup", "params": [param]}])
    assert f"parameter {param!r} is reserved" in " | ".join(exc.value.problems)


def test_node_allows_tool_names_reserved_in_python():
    spec = build_server_spec("weather", runtime="node", tools=["logger", {"name": "lookup", "params": ["os"]}])
    assert [t.name for t in spec.tools] == ["logger", "lookup"]
