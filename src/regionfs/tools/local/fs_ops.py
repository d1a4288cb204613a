"""Filesystem operations confined to the allowed roots."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from regionfs.core.errors import RegionFSError
from regionfs.fs import textio
from regionfs.fs.sandbox import AllowedRoots, validate_path
from regionfs.fs.stats import get_file_stats

logger = logging.getLogger(__name__)


def read_file(roots: AllowedRoots, path: str) -> str:
    valid_path = validate_path(path, roots)
    content = textio.read_text(valid_path)
    logger.info("Successfully read file: %s", valid_path)
    return content


def read_multiple_files(roots: AllowedRoots, paths: list[str]) -> str:
    """Read every path, reporting failures inline instead of aborting."""
    results: list[str] = []
    for path in paths:
        try:
            content = read_file(roots, path)
        except (OSError, UnicodeDecodeError, RegionFSError) as exc:
            logger.warning("Error reading file %s: %s", path, exc)
            results.append(f"{path}: Error - {exc}")
            continue
        results.append(f"{path}:\n{content}\n")
    return "\n---\n".join(results)


def write_file(roots: AllowedRoots, path: str, content: str) -> str:
    valid_path = validate_path(path, roots)
    textio.write_text(valid_path, content)
    logger.info("Successfully wrote to file: %s", valid_path)
    return f"Successfully wrote to {path}"


def create_directory(roots: AllowedRoots, path: str) -> str:
    valid_path = validate_path(path, roots)
    valid_path.mkdir(parents=True, exist_ok=True)
    logger.info("Successfully created directory: %s", valid_path)
    return f"Successfully created directory {path}"


def list_directory(roots: AllowedRoots, path: str) -> str:
    valid_path = validate_path(path, roots)
    entries = sorted(valid_path.iterdir(), key=lambda entry: entry.name)
    logger.info("Successfully listed directory: %s", valid_path)
    return "\n".join(
        f"{'[DIR]' if entry.is_dir() else '[FILE]'} {entry.name}" for entry in entries
    )


def move_file(roots: AllowedRoots, source: str, destination: str) -> str:
    valid_source = validate_path(source, roots)
    valid_destination = validate_path(destination, roots)
    if valid_destination.exists():
        raise FileExistsError(f"Destination already exists: {destination}")
    valid_source.rename(valid_destination)
    logger.info(
        "Successfully moved file from %s to %s", valid_source, valid_destination
    )
    return f"Successfully moved {source} to {destination}"


def search_files(roots: AllowedRoots, path: str, pattern: str) -> str:
    valid_path = validate_path(path, roots)
    results = _search(valid_path, pattern.lower(), roots)
    logger.info(
        "Searched %s for pattern %r: %d matches", valid_path, pattern, len(results)
    )
    return "\n".join(results) if results else "No matches found"


def get_file_info(roots: AllowedRoots, path: str) -> str:
    valid_path = validate_path(path, roots)
    info = get_file_stats(valid_path)
    logger.info("Successfully got file info for: %s", valid_path)
    return info.to_lines()


def list_allowed_directories(roots: AllowedRoots) -> str:
    return "Allowed directories:\n" + "\n".join(roots)


def _search(root: Path, needle: str, roots: AllowedRoots) -> list[str]:
    results: list[str] = []
    try:
        entries = sorted(os.scandir(root), key=lambda entry: entry.name)
    except OSError as exc:
        logger.warning("Skipping unreadable directory %s: %s", root, exc)
        return results
    for entry in entries:
        full_path = os.path.join(root, entry.name)
        try:
            validate_path(full_path, roots)
        except (OSError, RegionFSError) as exc:
            logger.warning("Skipping %s during search: %s", full_path, exc)
            continue
        if needle in entry.name.lower():
            results.append(full_path)
        # Symlinked directories are not descended into, avoiding cycles
        if entry.is_dir(follow_symlinks=False):
            results.extend(_search(Path(full_path), needle, roots))
    return results
