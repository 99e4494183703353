from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .core.catalog import desktop_config, merge_catalog, registry_entry
from .core.config import load_settings
from .core.errors import ScaffoldError
from .core.fs import read_file_safe, write_files
from .core.guide import render_guide
from .core.lint import lint_markdown
from .core.log import configure_logging, get_logger
from .core.models import RUNTIMES, build_server_spec
from .core.project_check import inspect_project
from .core.render import render_files

logger = get_logger("cli")


def parse_tool_arg(raw: str) -> dict:
    """
    "name[:param,param][=description]" -> tool dict.
    """
    head, _, description = raw.partition("=")
    name, _, params = head.partition(":")
    return {
        "name": name.strip(),
        "params": [p.strip() for p in params.split(",") if p.strip()],
        "description": description.strip(),
    }


def _add_spec_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("name", help="Server name, e.g. 'weather' or 'Dice Roller'.")
    p.add_argument(
        "--tool",
        dest="tools",
        action="append",
        default=[],
        metavar="NAME[:P1,P2][=DESCRIPTION]",
        help="Tool to generate (repeatable).",
    )
    p.add_argument("--secret", dest="secrets", action="append", default=[], metavar="ENV", help="Secret env var (repeatable).")
    p.add_argument("--runtime", choices=RUNTIMES, default="python")
    p.add_argument("--description", default="")
    p.add_argument("--title", default="")


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="docker-mcp-scaffold",
        description="Scaffold Dockerized MCP servers for the Docker MCP Gateway",
    )
    sub = p.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the scaffolding MCP server.")
    serve.add_argument(
        "--transport",
        default=None,
        choices=["stdio", "sse", "streamable-http"],
        help="Transport to run (default: MCP_TRANSPORT or stdio).",
    )

    new = sub.add_parser("new", help="Render a server project and write it to disk.")
    _add_spec_args(new)
    new.add_argument("--dependency", dest="extra_dependencies", action="append", default=[])
    new.add_argument("--output-dir", default=".")
    new.add_argument("--no-subdir", action="store_true", help="Write directly into --output-dir.")
    new.add_argument("--overwrite", action="store_true")
    new.add_argument("--dry-run", action="store_true", help="Print the files instead of writing them.")

    catalog = sub.add_parser("catalog", help="Print the catalog and registry entries.")
    _add_spec_args(catalog)
    catalog.add_argument("--existing", type=Path, default=None, help="Existing catalog YAML to merge into.")

    desktop = sub.add_parser("desktop-config", help="Print the Claude Desktop config.")
    desktop.add_argument("--home", type=Path, default=None)
    desktop.add_argument("--existing", type=Path, default=None, help="Existing config JSON to merge into.")

    guide = sub.add_parser("guide", help="Print the skill guide.")
    guide.add_argument("--runtime", choices=RUNTIMES, default="python")

    lint = sub.add_parser("lint", help="Lint a markdown guide.")
    lint.add_argument("path", type=Path)

    check = sub.add_parser("check", help="Inspect a scaffolded project directory.")
    check.add_argument("root", type=Path, nargs="?", default=Path("."))

    return p


def _spec_from_args(args: argparse.Namespace):
    return build_server_spec(
        args.name,
        description=args.description,
        runtime=args.runtime,
        tools=[parse_tool_arg(t) for t in args.tools],
        secrets=args.secrets,
        extra_dependencies=getattr(args, "extra_dependencies", None),
        title=args.title,
    )


def _cmd_new(args: argparse.Namespace) -> int:
    spec = _spec_from_args(args)
    files = render_files(spec)

    if args.dry_run:
        for path, content in files.items():
            sys.stdout.write(f"==> {path} <==\n{content}\n")
        return 0

    target = Path(args.output_dir)
    if not args.no_subdir:
        target = target / spec.image
    written = write_files(target, files, overwrite=args.overwrite)
    for p in written:
        sys.stdout.write(f"{p}\n")
    return 0


def _cmd_catalog(args: argparse.Namespace) -> int:
    spec = _spec_from_args(args)
    existing = ""
    if args.existing:
        existing = read_file_safe(args.existing)
        if existing is None:
            logger.error("cannot read %s", args.existing)
            return 1
    sys.stdout.write(merge_catalog(existing, spec))
    sys.stdout.write("---\n")
    sys.stdout.write(registry_entry(spec))
    return 0


def _cmd_desktop_config(args: argparse.Namespace) -> int:
    home = args.home or load_settings().home
    existing = None
    if args.existing:
        existing = read_file_safe(args.existing)
        if existing is None:
            logger.error("cannot read %s", args.existing)
            return 1
    sys.stdout.write(desktop_config(home, existing))
    return 0


def _cmd_guide(args: argparse.Namespace) -> int:
    sys.stdout.write(render_guide(args.runtime))
    return 0


def _cmd_lint(args: argparse.Namespace) -> int:
    text = read_file_safe(args.path)
    if text is None:
        logger.error("cannot read %s", args.path)
        return 1
    issues = lint_markdown(text)
    for issue in issues:
        sys.stdout.write(f"{args.path}:{issue['line']}: {issue['kind']}: {issue['message']}\n")
    return 1 if issues else 0


def _cmd_check(args: argparse.Namespace) -> int:
    if not args.root.is_dir():
        logger.error("not a directory: %s", args.root)
        return 1
    report = inspect_project(args.root)
    sys.stdout.write(json.dumps(report, indent=2) + "\n")
    return 0 if report["ok"] else 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    try:
        settings = load_settings()
    except ScaffoldError as e:
        sys.stderr.write(f"error: {e}\n")
        return 1
    configure_logging(settings.log_level)

    if args.command == "serve":
        from .server import mcp

        transport = args.transport or settings.transport
        logger.info("serving docker-mcp-scaffold over %s", transport)
        mcp.run(transport=transport)
        return 0

    handlers = {
        "new": _cmd_new,
        "catalog": _cmd_catalog,
        "desktop-config": _cmd_desktop_config,
        "guide": _cmd_guide,
        "lint": _cmd_lint,
        "check": _cmd_check,
    }
    try:
        return handlers[args.command](args)
    except ScaffoldError as e:
        sys.stderr.write(f"error: {e}\n")
        return 1
    except OSError as e:
        sys.stderr.write(f"error: file write failed: {e}\n")
        return 1


if __name__ == "__main__":
    sys.exit(main())
