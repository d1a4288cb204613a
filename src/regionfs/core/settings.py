"""Settings loader for regionfs."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import find_dotenv, load_dotenv


@dataclass(frozen=True)
class Settings:
    allowed_dirs: list[str]
    data_dir: Path
    log_level: str
    log_file: Path
    read_only: bool
    server_name: str
    deny_tools: set[str] = field(default_factory=set)


def load_settings() -> Settings:
    load_dotenv(find_dotenv(usecwd=True))
    allowed_dirs = _parse_list(os.environ.get("REGIONFS_ALLOWED_DIRS", ""), os.pathsep)
    data_dir = Path(os.environ.get("REGIONFS_DATA_DIR", "~/.regionfs")).expanduser()
    log_level = _parse_log_level(
        os.environ.get("REGIONFS_LOG_LEVEL", "INFO"), "REGIONFS_LOG_LEVEL"
    )
    default_log = str(data_dir / "logs" / "regionfs.log")
    log_file = Path(os.environ.get("REGIONFS_LOG_FILE", default_log)).expanduser()
    read_only = _parse_bool(
        os.environ.get("REGIONFS_READ_ONLY", "false"), "REGIONFS_READ_ONLY"
    )
    deny_tools = set(_parse_list(os.environ.get("REGIONFS_DENY_TOOLS", ""), ","))
    server_name = os.environ.get("REGIONFS_SERVER_NAME", "regionfs")

    return Settings(
        allowed_dirs=allowed_dirs,
        data_dir=data_dir,
        log_level=log_level,
        log_file=log_file,
        read_only=read_only,
        server_name=server_name,
        deny_tools=deny_tools,
    )


def _parse_list(value: str, sep: str) -> list[str]:
    return [item.strip() for item in value.split(sep) if item.strip()]


def _parse_log_level(value: str, name: str) -> str:
    normalized = value.strip().upper()
    if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ValueError(f"Invalid log level for {name}: {value}")
    return normalized


def _parse_bool(value: str, name: str) -> bool:
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    raise ValueError(f"Invalid boolean for {name}: {value}")
