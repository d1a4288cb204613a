"""Tool registry and specifications."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from regionfs.core.policy import RiskLevel
from regionfs.fs.ranges import TextRange
from regionfs.fs.sandbox import AllowedRoots
from regionfs.tools.local import fs_ops, regions

ToolHandler = Callable[..., Awaitable[str]]


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    args_schema: dict[str, object]
    risk_level: RiskLevel
    caps: set[str] = field(default_factory=set)


class ToolRegistry:
    def __init__(self) -> None:
        self._specs: dict[str, ToolSpec] = {}
        self._handlers: dict[str, ToolHandler] = {}

    def register(self, spec: ToolSpec, handler: ToolHandler) -> None:
        if spec.name in self._specs:
            raise ValueError(f"Tool already registered: {spec.name}")
        self._specs[spec.name] = spec
        self._handlers[spec.name] = handler

    def get(self, name: str) -> ToolSpec:
        if name not in self._specs:
            raise KeyError(f"Unknown tool: {name}")
        return self._specs[name]

    def handler(self, name: str) -> ToolHandler:
        if name not in self._handlers:
            raise KeyError(f"Handler not registered: {name}")
        return self._handlers[name]

    def list_specs(self) -> list[ToolSpec]:
        return list(self._specs.values())


def _object_schema(
    properties: dict[str, Any], required: list[str] | None = None
) -> dict[str, object]:
    return {
        "type": "object",
        "properties": properties,
        "required": required if required is not None else list(properties),
        "additionalProperties": False,
    }


def _string(description: str) -> dict[str, str]:
    return {"type": "string", "description": description}


TEXT_RANGE_SCHEMA = _object_schema(
    {
        "beforeText": _string("Text that appears before the target range"),
        "afterText": _string("Text that appears after the target range"),
    }
)

ONLY_ALLOWED = "Only works within allowed directories."


def register_local_tools(registry: ToolRegistry, roots: AllowedRoots) -> None:
    """Register every filesystem tool, bound to ``roots``."""

    def _run(func: Callable[..., str], *args: Any) -> Awaitable[str]:
        return asyncio.to_thread(func, roots, *args)

    async def read_file(path: str) -> str:
        return await _run(fs_ops.read_file, path)

    async def read_multiple_files(paths: list[str]) -> str:
        return await _run(fs_ops.read_multiple_files, paths)

    async def write_file(path: str, content: str) -> str:
        return await _run(fs_ops.write_file, path, content)

    async def create_directory(path: str) -> str:
        return await _run(fs_ops.create_directory, path)

    async def list_directory(path: str) -> str:
        return await _run(fs_ops.list_directory, path)

    async def move_file(source: str, destination: str) -> str:
        return await _run(fs_ops.move_file, source, destination)

    async def search_files(path: str, pattern: str) -> str:
        return await _run(fs_ops.search_files, path, pattern)

    async def get_file_info(path: str) -> str:
        return await _run(fs_ops.get_file_info, path)

    async def list_allowed_directories() -> str:
        return fs_ops.list_allowed_directories(roots)

    async def copy_to_new_file(
        sourcePath: str, range: dict[str, str], targetPath: str
    ) -> str:
        return await _run(
            regions.copy_to_new_file, sourcePath, TextRange.from_args(range), targetPath
        )

    async def cut_to_new_file(
        sourcePath: str, range: dict[str, str], targetPath: str
    ) -> str:
        return await _run(
            regions.cut_to_new_file, sourcePath, TextRange.from_args(range), targetPath
        )

    async def append_to_file(
        sourcePath: str, range: dict[str, str], targetPath: str
    ) -> str:
        return await _run(
            regions.append_to_file, sourcePath, TextRange.from_args(range), targetPath
        )

    async def insert_at_position(
        path: str, position: dict[str, str], content: str
    ) -> str:
        return await _run(
            regions.insert_at_position, path, TextRange.from_args(position), content
        )

    async def delete_range(path: str, range: dict[str, str]) -> str:
        return await _run(regions.delete_range, path, TextRange.from_args(range))

    async def replace_block(path: str, range: dict[str, str], content: str) -> str:
        return await _run(
            regions.replace_block, path, TextRange.from_args(range), content
        )

    async def replace_by_pattern(
        path: str, pattern: str, replacement: str, flags: str | None = None
    ) -> str:
        return await _run(regions.replace_by_pattern, path, pattern, replacement, flags)

    registry.register(
        ToolSpec(
            name="read_file",
            description=(
                "Read the complete contents of a UTF-8 text file. Use this tool "
                f"to examine the contents of a single file. {ONLY_ALLOWED}"
            ),
            args_schema=_object_schema({"path": _string("Path of the file to read")}),
            risk_level=RiskLevel.SAFE,
            caps={"fs_read"},
        ),
        read_file,
    )
    registry.register(
        ToolSpec(
            name="read_multiple_files",
            description=(
                "Read the contents of multiple files at once. Each file's content "
                "is returned with its path as a reference. Failed reads for "
                f"individual files won't stop the entire operation. {ONLY_ALLOWED}"
            ),
            args_schema=_object_schema(
                {"paths": {"type": "array", "items": {"type": "string"}}}
            ),
            risk_level=RiskLevel.SAFE,
            caps={"fs_read"},
        ),
        read_multiple_files,
    )
    registry.register(
        ToolSpec(
            name="write_file",
            description=(
                "Create a new file or completely overwrite an existing file with "
                f"new content. {ONLY_ALLOWED}"
            ),
            args_schema=_object_schema(
                {
                    "path": _string("Path of the file to write"),
                    "content": _string("Text content of the file"),
                }
            ),
            risk_level=RiskLevel.CONFIRM,
            caps={"fs_write"},
        ),
        write_file,
    )
    registry.register(
        ToolSpec(
            name="create_directory",
            description=(
                "Create a directory, including missing nested directories. "
                f"Succeeds silently if it already exists. {ONLY_ALLOWED}"
            ),
            args_schema=_object_schema({"path": _string("Directory to create")}),
            risk_level=RiskLevel.CONFIRM,
            caps={"fs_write"},
        ),
        create_directory,
    )
    registry.register(
        ToolSpec(
            name="list_directory",
            description=(
                "List the entries of a directory, prefixed with [FILE] or [DIR]. "
                f"{ONLY_ALLOWED}"
            ),
            args_schema=_object_schema({"path": _string("Directory to list")}),
            risk_level=RiskLevel.SAFE,
            caps={"fs_read"},
        ),
        list_directory,
    )
    registry.register(
        ToolSpec(
            name="move_file",
            description=(
                "Move or rename a file or directory. Fails if the destination "
                "exists. Both source and destination must be within allowed "
                "directories."
            ),
            args_schema=_object_schema(
                {
                    "source": _string("Path to move"),
                    "destination": _string("New path"),
                }
            ),
            risk_level=RiskLevel.CONFIRM,
            caps={"fs_write"},
        ),
        move_file,
    )
    registry.register(
        ToolSpec(
            name="search_files",
            description=(
                "Recursively search for files and directories whose name contains "
                "a pattern, case-insensitively. Returns full paths of all matches. "
                f"{ONLY_ALLOWED}"
            ),
            args_schema=_object_schema(
                {
                    "path": _string("Directory to search from"),
                    "pattern": _string("Substring to look for in names"),
                }
            ),
            risk_level=RiskLevel.SAFE,
            caps={"fs_read"},
        ),
        search_files,
    )
    registry.register(
        ToolSpec(
            name="get_file_info",
            description=(
                "Retrieve metadata about a file or directory: size, creation, "
                f"modification and access times, type and permissions. {ONLY_ALLOWED}"
            ),
            args_schema=_object_schema({"path": _string("Path to inspect")}),
            risk_level=RiskLevel.SAFE,
            caps={"fs_read"},
        ),
        get_file_info,
    )
    registry.register(
        ToolSpec(
            name="list_allowed_directories",
            description="Return the directories this server is allowed to access.",
            args_schema=_object_schema({}),
            risk_level=RiskLevel.SAFE,
        ),
        list_allowed_directories,
    )
    registry.register(
        ToolSpec(
            name="copy_to_new_file",
            description=(
                "Copy the text between beforeText and afterText in the source file "
                "into the target file, overwriting it. The source is left untouched "
                f"and line endings are preserved exactly. {ONLY_ALLOWED}"
            ),
            args_schema=_object_schema(
                {
                    "sourcePath": _string("File containing the text to copy"),
                    "range": TEXT_RANGE_SCHEMA,
                    "targetPath": _string("File to write the copied text to"),
                }
            ),
            risk_level=RiskLevel.CONFIRM,
            caps={"fs_read", "fs_write"},
        ),
        copy_to_new_file,
    )
    registry.register(
        ToolSpec(
            name="cut_to_new_file",
            description=(
                "Move the text between beforeText and afterText from the source file "
                "into the target file. The target is written first, then the source "
                "is rewritten without the text; the two writes are not atomic. "
                f"{ONLY_ALLOWED}"
            ),
            args_schema=_object_schema(
                {
                    "sourcePath": _string("File containing the text to move"),
                    "range": TEXT_RANGE_SCHEMA,
                    "targetPath": _string("File to write the moved text to"),
                }
            ),
            risk_level=RiskLevel.CONFIRM,
            caps={"fs_read", "fs_write"},
        ),
        cut_to_new_file,
    )
    registry.register(
        ToolSpec(
            name="append_to_file",
            description=(
                "Append the text between beforeText and afterText in the source "
                "file to the end of the target file, creating it if needed. "
                f"{ONLY_ALLOWED}"
            ),
            args_schema=_object_schema(
                {
                    "sourcePath": _string("File containing the text to append"),
                    "range": TEXT_RANGE_SCHEMA,
                    "targetPath": _string("File the text is appended to"),
                }
            ),
            risk_level=RiskLevel.CONFIRM,
            caps={"fs_read", "fs_write"},
        ),
        append_to_file,
    )
    registry.register(
        ToolSpec(
            name="insert_at_position",
            description=(
                "Insert content right after the first beforeText that is followed "
                "by afterText. The surrounding text is kept. The first matching "
                f"pair is used, so markers should be specific. {ONLY_ALLOWED}"
            ),
            args_schema=_object_schema(
                {
                    "path": _string("File to insert into"),
                    "position": TEXT_RANGE_SCHEMA,
                    "content": _string("Text content to insert"),
                }
            ),
            risk_level=RiskLevel.CONFIRM,
            caps={"fs_read", "fs_write"},
        ),
        insert_at_position,
    )
    registry.register(
        ToolSpec(
            name="delete_range",
            description=(
                "Remove the text between beforeText and afterText; the markers "
                "themselves stay. The first matching pair is used. "
                f"{ONLY_ALLOWED}"
            ),
            args_schema=_object_schema(
                {"path": _string("File to edit"), "range": TEXT_RANGE_SCHEMA}
            ),
            risk_level=RiskLevel.CONFIRM,
            caps={"fs_read", "fs_write"},
        ),
        delete_range,
    )
    registry.register(
        ToolSpec(
            name="replace_block",
            description=(
                "Replace the text between beforeText and afterText with new "
                "content; the markers themselves stay. The first matching pair is "
                f"used. {ONLY_ALLOWED}"
            ),
            args_schema=_object_schema(
                {
                    "path": _string("File to edit"),
                    "range": TEXT_RANGE_SCHEMA,
                    "content": _string("New text content for the matched range"),
                }
            ),
            risk_level=RiskLevel.CONFIRM,
            caps={"fs_read", "fs_write"},
        ),
        replace_block,
    )
    registry.register(
        ToolSpec(
            name="replace_by_pattern",
            description=(
                "Replace text matching a regular expression. Flags: g (all "
                "matches), i, m, s, u. The replacement may use $1, $<name>, $& "
                "and $$. Patterns use Python syntax, so named groups are "
                f"written (?P<name>...). {ONLY_ALLOWED}"
            ),
            args_schema=_object_schema(
                {
                    "path": _string("File to edit"),
                    "pattern": _string("Regular expression pattern to match"),
                    "flags": _string("Regular expression flags"),
                    "replacement": _string(
                        "Replacement text (can include capture group references)"
                    ),
                },
                required=["path", "pattern", "replacement"],
            ),
            risk_level=RiskLevel.CONFIRM,
            caps={"fs_read", "fs_write"},
        ),
        replace_by_pattern,
    )
