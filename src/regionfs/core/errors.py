"""Error taxonomy for sandboxed file operations."""

from __future__ import annotations


class RegionFSError(Exception):
    """Base class for errors reported back to the caller as tool errors."""


class SchemaInvalid(RegionFSError):
    pass


class AccessDenied(RegionFSError):
    pass


class ParentNotFound(RegionFSError):
    pass


class RangeNotFound(RegionFSError):
    pass


class ToolDenied(RegionFSError):
    pass
