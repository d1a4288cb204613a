"""Tool call and result shapes shared by the gateway and the transports."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Literal


def new_call_id() -> str:
    return f"call_{uuid.uuid4().hex}"


@dataclass(frozen=True)
class ContentBlock:
    text: str
    type: Literal["text"] = "text"


@dataclass(frozen=True)
class ToolCall:
    tool: str
    args: dict[str, Any]
    call_id: str = field(default_factory=new_call_id)


@dataclass(frozen=True)
class ToolResult:
    call_id: str
    content: list[ContentBlock]
    is_error: bool = False
    elapsed_ms: int = 0

    @property
    def text(self) -> str:
        return "\n".join(block.text for block in self.content)


def text_result(call_id: str, text: str, elapsed_ms: int = 0) -> ToolResult:
    return ToolResult(
        call_id=call_id, content=[ContentBlock(text=text)], elapsed_ms=elapsed_ms
    )


def error_result(call_id: str, message: str, elapsed_ms: int = 0) -> ToolResult:
    return ToolResult(
        call_id=call_id,
        content=[ContentBlock(text=f"Error: {message}")],
        is_error=True,
        elapsed_ms=elapsed_ms,
    )
