"""Typer CLI for regionfs."""

from __future__ import annotations

import asyncio
import json
import logging

import typer
from rich.console import Console

from regionfs.app.main import build_gateway, resolve_roots, run_app
from regionfs.core.log import configure_logging
from regionfs.core.settings import Settings, load_settings
from regionfs.fs.sandbox import AllowedRoots
from regionfs.tools.schemas import ToolCall

app = typer.Typer(help="Sandboxed text-editing MCP server")
console = Console(soft_wrap=True, highlight=False)
err_console = Console(stderr=True, soft_wrap=True, highlight=False)

logger = logging.getLogger(__name__)

tools_app = typer.Typer(help="Tools operations")
config_app = typer.Typer(help="Configuration")


@app.command()
def serve(
    dirs: list[str] | None = typer.Argument(None, help="Allowed root directories"),
) -> None:
    """Run the MCP server on stdio."""
    settings = load_settings()
    configure_logging(settings)
    run_app(settings, _roots(settings, dirs))


@app.command()
def roots(
    dirs: list[str] | None = typer.Argument(None, help="Allowed root directories"),
) -> None:
    """Print the canonical allowed roots."""
    settings = load_settings()
    configure_logging(settings)
    for root in _roots(settings, dirs):
        console.print(root, markup=False)


@tools_app.command("list")
def tools_list() -> None:
    registry, _gateway = build_gateway(load_settings(), AllowedRoots(directories=()))
    for spec in registry.list_specs():
        console.print(f"{spec.name} ({spec.risk_level.value})", markup=False)


@tools_app.command("call")
def tools_call(
    name: str,
    args_json: str = typer.Argument("{}", help="Tool arguments as a JSON object"),
    root: list[str] | None = typer.Option(None, "--root", "-r", help="Allowed root"),
) -> None:
    """Run one tool locally and print its result."""
    settings = load_settings()
    configure_logging(settings)
    try:
        args = json.loads(args_json)
    except json.JSONDecodeError as exc:
        err_console.print(f"Error: invalid JSON arguments: {exc}", markup=False)
        raise typer.Exit(code=1) from exc
    _registry, gateway = build_gateway(settings, _roots(settings, root))
    result = asyncio.run(gateway.execute(ToolCall(tool=name, args=args)))
    if result.is_error:
        err_console.print(result.text, markup=False)
        raise typer.Exit(code=1)
    console.print(result.text, markup=False)


@config_app.command("show")
def config_show() -> None:
    settings = load_settings()
    console.print(f"allowed_dirs={settings.allowed_dirs}", markup=False)
    console.print(f"data_dir={settings.data_dir}", markup=False)
    console.print(f"log_level={settings.log_level}")
    console.print(f"log_file={settings.log_file}", markup=False)
    console.print(f"read_only={settings.read_only}")
    console.print(f"deny_tools={sorted(settings.deny_tools)}", markup=False)
    console.print(f"server_name={settings.server_name}", markup=False)


app.add_typer(tools_app, name="tools")
app.add_typer(config_app, name="config")


def _roots(settings: Settings, dirs: list[str] | None) -> AllowedRoots:
    try:
        return resolve_roots(settings, dirs)
    except (OSError, ValueError) as exc:
        logger.error("Refusing to start: %s", exc)
        err_console.print(f"Error: {exc}", markup=False)
        raise typer.Exit(code=1) from exc
