import pytest

from docker_mcp_scaffold.core.errors import FileConflictError, PathOutsideRootError
from docker_mcp_scaffold.core.fs import write_files
from docker_mcp_scaffold.tools.write_project import write_project


@pytest.mark.asyncio
async def test_write_project_creates_subdir(tmp_path, monkeypatch):
    monkeypatch.setenv("DOCKER_MCP_SCAFFOLD_ALLOWED_ROOT", str(tmp_path))

    out = await write_project(str(tmp_path), "weather", tools=["ping"], secrets=["API_KEY"])

    assert out["ok"] is True
    root = tmp_path / "weather-mcp-server"
    assert out["root"] == str(root.resolve())
    assert sorted(out["written"]) == sorted(
        ["Dockerfile", "requirements.txt", "weather_server.py", "readme.txt", "CLAUDE.md"]
    )
    assert (root / "weather_server.py").read_text(encoding="utf-8").startswith("#!/usr/bin/env python3")


@pytest.mark.asyncio
async def test_write_project_refuses_outside_allowed_root(tmp_path, monkeypatch):
    allowed = tmp_path / "allowed"
    allowed.mkdir()
    monkeypatch.setenv("DOCKER_MCP_SCAFFOLD_ALLOWED_ROOT", str(allowed))

    out = await write_project(str(tmp_path / "elsewhere"), "weather", tools=["ping"])

    assert out["ok"] is False
    assert "outside allowed root" in out["error"]
    assert not (tmp_path / "elsewhere").exists()


@pytest.mark.asyncio
async def test_write_project_does_not_overwrite(tmp_path, monkeypatch):
    monkeypatch.setenv("DOCKER_MCP_SCAFFOLD_ALLOWED_ROOT", str(tmp_path))
    (tmp_path / "Dockerfile").write_text("FROM scratch\n")

    out = await write_project(str(tmp_path), "weather", tools=["ping"], create_subdir=False)

    assert out["ok"] is False
    assert "Dockerfile" in out["error"]
    assert (tmp_path / "Dockerfile").read_text() == "FROM scratch\n"
    assert not (tmp_path / "requirements.txt").exists()

    out = await write_project(str(tmp_path), "weather", tools=["ping"], create_subdir=False, overwrite=True)
    assert out["ok"] is True
    assert "python:3.11-slim" in (tmp_path / "Dockerfile").read_text()


@pytest.mark.asyncio
async def test_write_project_relative_dir_lands_under_allowed_root(tmp_path, monkeypatch):
    allowed = tmp_path / "allowed"
    allowed.mkdir()
    monkeypatch.setenv("DOCKER_MCP_SCAFFOLD_ALLOWED_ROOT", str(allowed))
    monkeypatch.chdir(tmp_path)

    out = await write_project("projects", "weather", tools=["ping"])

    assert out["ok"] is True
    root = allowed / "projects" / "weather-mcp-server"
    assert out["root"] == str(root.resolve())
    assert (root / "Dockerfile").is_file()
    assert not (tmp_path / "projects").exists()


@pytest.mark.asyncio
async def test_write_project_relative_dir_cannot_climb_out(tmp_path, monkeypatch):
    allowed = tmp_path / "allowed"
    allowed.mkdir()
    monkeypatch.setenv("DOCKER_MCP_SCAFFOLD_ALLOWED_ROOT", str(allowed))

    out = await write_project("../elsewhere", "weather", tools=["ping"])

    assert out["ok"] is False
    assert "outside allowed root" in out["error"]
    assert not (tmp_path / "elsewhere").exists()

def test_write_files_rejects_traversal(tmp_path):
    with pytest.raises(PathOutsideRootError):
        write_files(tmp_path / "out", {"../escape.txt": "x"})
    assert not (tmp_path / "escape.txt").exists()


def test_write_files_conflict_lists_paths(tmp_path):
    (tmp_path / "a.txt").write_text("old")
    with pytest.raises(FileConflictError) as exc:
        write_files(tmp_path, {"a.txt": "new", "b/c.txt": "x"})
    assert exc.value.paths == ["a.txt"]
    assert not (tmp_path / "b").exists()
