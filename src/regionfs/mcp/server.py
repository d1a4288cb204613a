"""MCP stdio server exposing the tool registry."""

from __future__ import annotations

import logging
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from regionfs.tools.gateway import ToolGateway
from regionfs.tools.registry import ToolRegistry, ToolSpec
from regionfs.tools.schemas import ToolCall, ToolResult

logger = logging.getLogger(__name__)

SERVER_VERSION = "0.2.0"


def build_server(name: str, registry: ToolRegistry, gateway: ToolGateway) -> Server:
    server: Server = Server(name, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [to_mcp_tool(spec) for spec in registry.list_specs()]

    # Arguments are validated by the gateway so failures share its error format.
    @server.call_tool(validate_input=False)
    async def call_tool(
        name: str, arguments: dict[str, Any] | None
    ) -> types.CallToolResult:
        result = await gateway.execute(ToolCall(tool=name, args=arguments or {}))
        return to_call_tool_result(result)

    return server


def to_mcp_tool(spec: ToolSpec) -> types.Tool:
    return types.Tool(
        name=spec.name,
        description=spec.description,
        inputSchema=dict(spec.args_schema),
    )


def to_call_tool_result(result: ToolResult) -> types.CallToolResult:
    return types.CallToolResult(
        content=[
            types.TextContent(type="text", text=block.text) for block in result.content
        ],
        isError=result.is_error,
    )


async def serve_stdio(server: Server) -> None:
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Secure MCP filesystem server running on stdio")
        await server.run(
            read_stream, write_stream, server.create_initialization_options()
        )
