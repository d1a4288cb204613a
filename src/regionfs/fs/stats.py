"""File metadata snapshots."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from regionfs.utils.time import iso_from_ts


@dataclass(frozen=True)
class FileInfo:
    size: int
    created: str
    modified: str
    accessed: str
    is_directory: bool
    is_file: bool
    permissions: str

    def to_lines(self) -> str:
        return "\n".join(
            [
                f"size: {self.size}",
                f"created: {self.created}",
                f"modified: {self.modified}",
                f"accessed: {self.accessed}",
                f"isDirectory: {str(self.is_directory).lower()}",
                f"isFile: {str(self.is_file).lower()}",
                f"permissions: {self.permissions}",
            ]
        )


def get_file_stats(path: Path) -> FileInfo:
    stats = os.stat(path)
    # st_birthtime is missing on most Linux filesystems
    created = getattr(stats, "st_birthtime", stats.st_ctime)
    return FileInfo(
        size=stats.st_size,
        created=iso_from_ts(created),
        modified=iso_from_ts(stats.st_mtime),
        accessed=iso_from_ts(stats.st_atime),
        is_directory=path.is_dir(),
        is_file=path.is_file(),
        permissions=oct(stats.st_mode)[-3:],
    )
