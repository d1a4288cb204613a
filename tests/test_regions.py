from __future__ import annotations

import pytest

from regionfs.core.errors import AccessDenied, RangeNotFound, SchemaInvalid
from regionfs.fs.ranges import TextRange
from regionfs.tools.local import regions

BLOCK = TextRange("<<", ">>")


def test_copy_to_new_file(root, roots) -> None:
    source = root / "source.txt"
    source.write_text("head <<body>> tail")
    target = root / "copy.txt"
    target.write_text("stale content")

    message = regions.copy_to_new_file(roots, str(source), BLOCK, str(target))

    assert message == f"Successfully copied content to {target}"
    assert target.read_text() == "body"
    assert source.read_text() == "head <<body>> tail"


def test_copy_missing_range_leaves_target_alone(root, roots) -> None:
    source = root / "source.txt"
    source.write_text("no markers")
    target = root / "copy.txt"
    with pytest.raises(RangeNotFound, match="Range not found in source file"):
        regions.copy_to_new_file(roots, str(source), BLOCK, str(target))
    assert not target.exists()


def test_cut_to_new_file_conserves_content(root, roots) -> None:
    original = "alpha\n<<\nmoved line\n>>\nomega\n"
    source = root / "source.txt"
    source.write_text(original)
    target = root / "cut.txt"

    message = regions.cut_to_new_file(roots, str(source), BLOCK, str(target))

    assert message == f"Successfully moved content to {target}"
    extracted = target.read_text()
    remaining = source.read_text()
    assert extracted == "\nmoved line\n"
    assert remaining == "alpha\n<<>>\nomega\n"
    offset = remaining.index("<<") + 2
    assert remaining[:offset] + extracted + remaining[offset:] == original


def test_append_to_existing_target(root, roots) -> None:
    source = root / "source.txt"
    source.write_text("[<<extra>>]")
    target = root / "log.txt"
    target.write_text("first\n")

    regions.append_to_file(roots, str(source), BLOCK, str(target))

    assert target.read_text() == "first\nextra"
    assert source.read_text() == "[<<extra>>]"


def test_append_creates_missing_target(root, roots) -> None:
    source = root / "source.txt"
    source.write_text("<<new>>")
    target = root / "created.txt"

    message = regions.append_to_file(roots, str(source), BLOCK, str(target))

    assert message == f"Successfully appended content to {target}"
    assert target.read_text() == "new"


def test_insert_keeps_bracketed_text(root, roots) -> None:
    path = root / "list.txt"
    path.write_text("items: [one, two]")

    message = regions.insert_at_position(
        roots, str(path), TextRange("[", "]"), "zero, "
    )

    assert message == f"Successfully inserted content in {path}"
    assert path.read_text() == "items: [zero, one, two]"


def test_insert_missing_position(root, roots) -> None:
    path = root / "list.txt"
    path.write_text("items")
    with pytest.raises(RangeNotFound, match="Insert position not found"):
        regions.insert_at_position(roots, str(path), TextRange("[", "]"), "x")


def test_delete_range(root, roots) -> None:
    path = root / "doc.html"
    path.write_text("keep<del>remove me</del>keep")

    message = regions.delete_range(roots, str(path), TextRange("<del>", "</del>"))

    assert message == f"Successfully deleted content from {path}"
    assert path.read_text() == "keep<del></del>keep"


def test_delete_missing_marker_leaves_file_unmodified(root, roots) -> None:
    path = root / "doc.txt"
    path.write_bytes(b"line one\r\nline two\r\n")
    before = path.read_bytes()

    with pytest.raises(RangeNotFound, match="Range not found"):
        regions.delete_range(roots, str(path), TextRange("absent", "two"))

    assert path.read_bytes() == before


def test_replace_block_preserves_crlf(root, roots) -> None:
    path = root / "config.ini"
    original = "[main]\r\nBEGIN\r\nold = 1\r\nEND\r\ntail\r\n"
    path.write_bytes(original.encode("utf-8"))
    text_range = TextRange("BEGIN\r\n", "END")
    start = original.index("BEGIN\r\n") + len("BEGIN\r\n")
    end = original.index("END", start)

    regions.replace_block(roots, str(path), text_range, "new = 2\r\n")

    expected = original[:start] + "new = 2\r\n" + original[end:]
    assert path.read_bytes() == expected.encode("utf-8")


def test_replace_block_uses_first_matching_pair(root, roots) -> None:
    path = root / "dup.txt"
    path.write_text("X123Y456Y")
    regions.replace_block(roots, str(path), TextRange("X", "Y"), "-")
    assert path.read_text() == "X-Y456Y"


def test_replace_block_outside_roots_is_denied(roots, outside) -> None:
    path = outside / "secret.txt"
    path.write_text("<<secret>>")
    with pytest.raises(AccessDenied):
        regions.replace_block(roots, str(path), BLOCK, "pwned")
    assert path.read_text() == "<<secret>>"


def test_cut_with_target_outside_roots_touches_nothing(root, roots, outside) -> None:
    source = root / "source.txt"
    source.write_text("<<keep>>")
    with pytest.raises(AccessDenied):
        regions.cut_to_new_file(roots, str(source), BLOCK, str(outside / "t.txt"))
    assert source.read_text() == "<<keep>>"
    assert not (outside / "t.txt").exists()


@pytest.mark.parametrize(
    ("flags", "expected"),
    [("g", "bbb"), (None, "baa"), ("", "baa")],
)
def test_replace_by_pattern_global_flag(root, roots, flags, expected) -> None:
    path = root / "a.txt"
    path.write_text("aaa")
    regions.replace_by_pattern(roots, str(path), "a", "b", flags)
    assert path.read_text() == expected


def test_replace_by_pattern_with_group_references(root, roots) -> None:
    path = root / "emails.txt"
    path.write_text("ann@example bob@test")
    message = regions.replace_by_pattern(
        roots, str(path), r"(\w+)@(\w+)", "$2 <- $1", "g"
    )
    assert message == f"Successfully replaced content in {path}"
    assert path.read_text() == "example <- ann test <- bob"


def test_replace_by_pattern_ignore_case_and_named_group(root, roots) -> None:
    path = root / "version.txt"
    path.write_text("VERSION=1.2")
    regions.replace_by_pattern(
        roots, str(path), r"version=(?P<num>[\d.]+)", "version=[$<num>]", "i"
    )
    assert path.read_text() == "version=[1.2]"


def test_replace_by_pattern_multiline(root, roots) -> None:
    path = root / "lines.txt"
    path.write_text("one\ntwo")
    regions.replace_by_pattern(roots, str(path), "^", "> ", "gm")
    assert path.read_text() == "> one\n> two"


def test_invalid_flags_are_rejected(root, roots) -> None:
    path = root / "a.txt"
    path.write_text("aaa")
    with pytest.raises(SchemaInvalid, match="flags"):
        regions.replace_by_pattern(roots, str(path), "a", "b", "gx")
    assert path.read_text() == "aaa"


def test_invalid_pattern_is_rejected(root, roots) -> None:
    path = root / "a.txt"
    path.write_text("aaa")
    with pytest.raises(SchemaInvalid, match="Invalid regular expression"):
        regions.replace_by_pattern(roots, str(path), "(", "b")


def test_expand_template_special_tokens() -> None:
    match = regions.compile_pattern("(b)", None)[0].search("abc")
    assert regions.expand_template("$$-$&-$`-$'", match) == "$-b-a-c"
    assert regions.expand_template("$1$10$3", match) == "bb0$3"
    assert regions.expand_template("$<missing>", match) == "$<missing>"


def test_expand_template_unknown_name_with_named_groups() -> None:
    match = regions.compile_pattern("(?P<word>b)", None)[0].search("abc")
    assert regions.expand_template("[$<zz>]", match) == "[]"
    assert regions.expand_template("[$<word>]", match) == "[b]"


def test_named_group_uses_python_syntax(root, roots) -> None:
    path = root / "a.txt"
    path.write_text("abc")
    with pytest.raises(SchemaInvalid, match="Invalid regular expression"):
        regions.replace_by_pattern(roots, str(path), "(?<word>b)", "$<word>")
    assert path.read_text() == "abc"
