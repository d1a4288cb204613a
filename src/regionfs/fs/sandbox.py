"""Path containment checks against the allowed root directories."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from regionfs.core.errors import AccessDenied, ParentNotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AllowedRoots:
    """Canonical root directories, fixed for the lifetime of the process.

    ``directories`` holds the case-folded real paths of the roots. ``aliases``
    holds the case-folded absolute spellings the roots were configured with,
    which differ from the real paths when a root is reached through a symlink.
    Literal request paths are accepted under either form. Resolved real paths
    are checked against ``real_directories``, which keep the letter case the
    filesystem reports.
    """

    directories: tuple[str, ...]
    aliases: tuple[str, ...] = ()
    real_directories: tuple[str, ...] = ()

    def contains(self, canonical: str) -> bool:
        return any(_is_within(canonical, root) for root in self.directories)

    def contains_literal(self, canonical: str) -> bool:
        return self.contains(canonical) or any(
            _is_within(canonical, root) for root in self.aliases
        )

    def contains_real(self, real: str) -> bool:
        exact = os.path.normcase(os.path.normpath(real))
        return any(_is_within(exact, root) for root in self.real_directories)

    def __iter__(self):
        return iter(self.directories)

    def __len__(self) -> int:
        return len(self.directories)


def expand_home(path: str) -> str:
    if path == "~" or path.startswith("~/"):
        return str(Path.home()) + path[1:]
    return path


def normalize_path(path: str) -> str:
    return os.path.normpath(path).casefold()


def absolute_path(path: str) -> str:
    expanded = expand_home(path)
    if os.path.isabs(expanded):
        return os.path.normpath(expanded)
    return os.path.normpath(os.path.join(os.getcwd(), expanded))


def load_allowed_roots(dirs: Iterable[str]) -> AllowedRoots:
    """Build the allowed roots, failing if any entry is not an existing directory."""
    directories: list[str] = []
    aliases: list[str] = []
    real_directories: list[str] = []
    for raw in dirs:
        absolute = absolute_path(raw)
        if not os.path.exists(absolute):
            raise NotADirectoryError(f"Error accessing directory {raw}: not found")
        if not os.path.isdir(absolute):
            raise NotADirectoryError(f"Error: {raw} is not a directory")
        exact = os.path.normcase(os.path.realpath(absolute))
        real = normalize_path(exact)
        alias = normalize_path(absolute)
        if real not in directories:
            directories.append(real)
        if exact not in real_directories:
            real_directories.append(exact)
        if alias != real and alias not in aliases:
            aliases.append(alias)
        logger.info("Directory %s is accessible", raw)
    if not directories:
        raise ValueError("At least one allowed directory is required")
    return AllowedRoots(
        directories=tuple(directories),
        aliases=tuple(aliases),
        real_directories=tuple(real_directories),
    )


def validate_path(requested: str, roots: AllowedRoots) -> Path:
    """Resolve ``requested`` and prove it lies inside ``roots``.

    Existing paths are returned as their real path. Paths that do not exist
    yet are accepted when their parent's real path is inside a root, and are
    returned in absolute (unresolved) form.
    """
    absolute = absolute_path(requested)
    if not roots.contains_literal(normalize_path(absolute)):
        message = (
            "Access denied - path outside allowed directories: "
            f"{absolute} not in {', '.join(roots)}"
        )
        logger.error(message)
        raise AccessDenied(message)

    try:
        real = Path(absolute).resolve(strict=True)
    except (OSError, RuntimeError):
        real = None

    if real is not None:
        if not roots.contains_real(str(real)):
            logger.error("Access denied - symlink target outside allowed directories")
            raise AccessDenied(
                "Access denied - symlink target outside allowed directories"
            )
        logger.debug("Validated path: %s", real)
        return real

    # A dangling symlink would let a later write land on its target.
    if os.path.islink(absolute) and not roots.contains_real(
        os.path.realpath(absolute)
    ):
        logger.error("Access denied - symlink target outside allowed directories")
        raise AccessDenied("Access denied - symlink target outside allowed directories")

    parent = os.path.dirname(absolute)
    try:
        real_parent = Path(parent).resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        logger.error("Parent directory does not exist: %s", parent)
        raise ParentNotFound(f"Parent directory does not exist: {parent}") from exc
    if not roots.contains_real(str(real_parent)):
        logger.error("Access denied - parent directory outside allowed directories")
        raise AccessDenied(
            "Access denied - parent directory outside allowed directories"
        )
    logger.debug("Validated parent directory: %s", real_parent)
    return Path(absolute)


def _is_within(canonical: str, root: str) -> bool:
    if canonical == root:
        return True
    prefix = root if root.endswith(os.sep) else root + os.sep
    return canonical.startswith(prefix)
