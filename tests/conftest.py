from __future__ import annotations

from pathlib import Path

import pytest

from regionfs.fs.sandbox import AllowedRoots, load_allowed_roots


@pytest.fixture()
def root(tmp_path: Path) -> Path:
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    return workspace


@pytest.fixture()
def outside(tmp_path: Path) -> Path:
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    return elsewhere


@pytest.fixture()
def roots(root: Path) -> AllowedRoots:
    return load_allowed_roots([str(root)])
