"""Compose settings, sandbox, tools and the MCP server."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from regionfs.core.policy import ToolPolicy
from regionfs.core.settings import Settings
from regionfs.fs.sandbox import AllowedRoots, load_allowed_roots
from regionfs.mcp.server import build_server, serve_stdio
from regionfs.tools.gateway import ToolGateway
from regionfs.tools.registry import ToolRegistry, register_local_tools

logger = logging.getLogger(__name__)


def resolve_roots(settings: Settings, dirs: Sequence[str] | None) -> AllowedRoots:
    """Roots from the command line win over ``REGIONFS_ALLOWED_DIRS``."""
    return load_allowed_roots(list(dirs) if dirs else settings.allowed_dirs)


def build_gateway(
    settings: Settings, roots: AllowedRoots
) -> tuple[ToolRegistry, ToolGateway]:
    registry = ToolRegistry()
    register_local_tools(registry, roots)
    policy = ToolPolicy(deny_tools=settings.deny_tools, read_only=settings.read_only)
    return registry, ToolGateway(registry, policy)


def run_app(settings: Settings, roots: AllowedRoots) -> None:
    registry, gateway = build_gateway(settings, roots)
    server = build_server(settings.server_name, registry, gateway)
    logger.info("Allowed directories: %s", ", ".join(roots))
    asyncio.run(serve_stdio(server))
