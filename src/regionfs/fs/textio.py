"""Whole-file UTF-8 text I/O that keeps line endings byte for byte."""

from __future__ import annotations

from pathlib import Path


def read_text(path: Path) -> str:
    with open(path, encoding="utf-8", newline="") as handle:
        return handle.read()


def write_text(path: Path, content: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as handle:
        handle.write(content)


def append_text(path: Path, content: str) -> None:
    with open(path, "a", encoding="utf-8", newline="") as handle:
        handle.write(content)
