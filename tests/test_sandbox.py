from __future__ import annotations

import os

import pytest

from regionfs.core.errors import AccessDenied, ParentNotFound
from regionfs.fs.sandbox import (
    expand_home,
    load_allowed_roots,
    normalize_path,
    validate_path,
)


def test_existing_file_resolves_to_real_path(root, roots) -> None:
    target = root / "notes.txt"
    target.write_text("hello")
    assert validate_path(str(target), roots) == target.resolve()


def test_relative_path_uses_working_directory(root, roots, monkeypatch) -> None:
    (root / "a.txt").write_text("a")
    monkeypatch.chdir(root)
    assert validate_path("a.txt", roots) == (root / "a.txt").resolve()


def test_home_shorthand_is_expanded(root, roots, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(root))
    (root / "b.txt").write_text("b")
    assert expand_home("~") == str(root)
    assert validate_path("~/b.txt", roots) == (root / "b.txt").resolve()


def test_path_outside_roots_is_denied(roots, outside) -> None:
    secret = outside / "secret.txt"
    secret.write_text("secret")
    with pytest.raises(AccessDenied, match="path outside allowed directories"):
        validate_path(str(secret), roots)


def test_dot_dot_escape_is_denied(root, roots, outside) -> None:
    (outside / "secret.txt").write_text("secret")
    with pytest.raises(AccessDenied):
        validate_path(str(root / ".." / "elsewhere" / "secret.txt"), roots)


def test_sibling_with_shared_prefix_is_denied(root, roots) -> None:
    sibling = root.parent / (root.name + "-evil")
    sibling.mkdir()
    (sibling / "x.txt").write_text("x")
    with pytest.raises(AccessDenied):
        validate_path(str(sibling / "x.txt"), roots)


def test_case_variant_of_outside_path_is_denied(roots, outside) -> None:
    variant = str(outside / "secret.txt").upper()
    with pytest.raises(AccessDenied):
        validate_path(variant, roots)


def test_case_sibling_directory_is_denied(root, roots) -> None:
    sibling = root.parent / root.name.upper()
    try:
        sibling.mkdir()
    except FileExistsError:
        pytest.skip("filesystem is case-insensitive")
    (sibling / "secret.txt").write_text("secret")
    with pytest.raises(AccessDenied, match="symlink target"):
        validate_path(str(sibling / "secret.txt"), roots)
    with pytest.raises(AccessDenied, match="parent directory"):
        validate_path(str(sibling / "new.txt"), roots)


def test_root_itself_is_allowed(root, roots) -> None:
    assert validate_path(str(root), roots) == root.resolve()


def test_symlink_escaping_roots_is_denied(root, roots, outside) -> None:
    (outside / "secret.txt").write_text("secret")
    link = root / "link.txt"
    os.symlink(outside / "secret.txt", link)
    with pytest.raises(AccessDenied, match="symlink target"):
        validate_path(str(link), roots)


def test_symlink_inside_roots_resolves_to_target(root, roots) -> None:
    real = root / "real.txt"
    real.write_text("real")
    link = root / "alias.txt"
    os.symlink(real, link)
    assert validate_path(str(link), roots) == real.resolve()


def test_dangling_symlink_to_outside_is_denied(root, roots, outside) -> None:
    link = root / "dangling.txt"
    os.symlink(outside / "missing.txt", link)
    with pytest.raises(AccessDenied, match="symlink target"):
        validate_path(str(link), roots)


def test_new_file_returns_absolute_path(root, roots) -> None:
    target = root / "new.txt"
    result = validate_path(str(target), roots)
    assert str(result) == os.path.normpath(str(target))
    assert not result.exists()


def test_new_file_with_missing_parent_fails(root, roots) -> None:
    with pytest.raises(ParentNotFound, match="Parent directory does not exist"):
        validate_path(str(root / "missing" / "new.txt"), roots)


def test_new_file_under_escaping_directory_link_is_denied(
    root, roots, outside
) -> None:
    os.symlink(outside, root / "linked_dir")
    with pytest.raises(AccessDenied, match="parent directory"):
        validate_path(str(root / "linked_dir" / "new.txt"), roots)


def test_roots_are_canonical_and_case_folded(root) -> None:
    roots = load_allowed_roots([str(root), str(root)])
    assert list(roots) == [normalize_path(os.path.realpath(root))]


def test_root_given_through_symlink_accepts_literal_paths(tmp_path, root) -> None:
    link_root = tmp_path / "root-link"
    os.symlink(root, link_root)
    (root / "a.txt").write_text("a")
    roots = load_allowed_roots([str(link_root)])
    assert validate_path(str(link_root / "a.txt"), roots) == (root / "a.txt").resolve()


def test_missing_root_is_rejected(tmp_path) -> None:
    with pytest.raises(NotADirectoryError):
        load_allowed_roots([str(tmp_path / "nope")])


def test_file_root_is_rejected(tmp_path) -> None:
    not_dir = tmp_path / "file.txt"
    not_dir.write_text("x")
    with pytest.raises(NotADirectoryError, match="is not a directory"):
        load_allowed_roots([str(not_dir)])


def test_empty_roots_are_rejected() -> None:
    with pytest.raises(ValueError):
        load_allowed_roots([])
