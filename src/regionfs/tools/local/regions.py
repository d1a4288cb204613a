"""Region edits addressed by surrounding text markers.

Every operation validates its paths first, reads whole files, resolves the
marker pair against that exact snapshot and splices new content around the
resolved span. Operations touching two files stage both contents in memory
and write the target before the source; there is no rollback if the second
write fails.
"""

from __future__ import annotations

import logging
import re

from regionfs.core.errors import RangeNotFound, SchemaInvalid
from regionfs.fs import textio
from regionfs.fs.ranges import Span, TextRange, find_range
from regionfs.fs.sandbox import AllowedRoots, validate_path

logger = logging.getLogger(__name__)

PATTERN_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "u": 0,
}

# $$, $&, $`, $', $<name>, $n / $nn
TEMPLATE_RE = re.compile(r"\$(?:(\$)|(&)|(`)|(')|<([^>]*)>|(\d{1,2}))")

SOURCE_RANGE_MISSING = "Range not found in source file"


def copy_to_new_file(
    roots: AllowedRoots, source_path: str, text_range: TextRange, target_path: str
) -> str:
    valid_source = validate_path(source_path, roots)
    valid_target = validate_path(target_path, roots)
    content = textio.read_text(valid_source)
    start, end = _require_span(content, text_range, SOURCE_RANGE_MISSING)
    textio.write_text(valid_target, content[start:end])
    logger.info("Copied content from %s to %s", valid_source, valid_target)
    return f"Successfully copied content to {target_path}"


def cut_to_new_file(
    roots: AllowedRoots, source_path: str, text_range: TextRange, target_path: str
) -> str:
    valid_source = validate_path(source_path, roots)
    valid_target = validate_path(target_path, roots)
    content = textio.read_text(valid_source)
    start, end = _require_span(content, text_range, SOURCE_RANGE_MISSING)
    extracted = content[start:end]
    remaining = content[:start] + content[end:]
    textio.write_text(valid_target, extracted)
    textio.write_text(valid_source, remaining)
    logger.info("Moved content from %s to %s", valid_source, valid_target)
    return f"Successfully moved content to {target_path}"


def append_to_file(
    roots: AllowedRoots, source_path: str, text_range: TextRange, target_path: str
) -> str:
    valid_source = validate_path(source_path, roots)
    valid_target = validate_path(target_path, roots)
    content = textio.read_text(valid_source)
    start, end = _require_span(content, text_range, SOURCE_RANGE_MISSING)
    textio.append_text(valid_target, content[start:end])
    logger.info("Appended content from %s to %s", valid_source, valid_target)
    return f"Successfully appended content to {target_path}"


def insert_at_position(
    roots: AllowedRoots, path: str, position: TextRange, content: str
) -> str:
    valid_path = validate_path(path, roots)
    original = textio.read_text(valid_path)
    start, _end = _require_span(original, position, "Insert position not found")
    textio.write_text(valid_path, original[:start] + content + original[start:])
    logger.info("Inserted content in %s at offset %d", valid_path, start)
    return f"Successfully inserted content in {path}"


def delete_range(roots: AllowedRoots, path: str, text_range: TextRange) -> str:
    valid_path = validate_path(path, roots)
    original = textio.read_text(valid_path)
    start, end = _require_span(original, text_range, "Range not found")
    textio.write_text(valid_path, original[:start] + original[end:])
    logger.info("Deleted %d characters from %s", end - start, valid_path)
    return f"Successfully deleted content from {path}"


def replace_block(
    roots: AllowedRoots, path: str, text_range: TextRange, content: str
) -> str:
    valid_path = validate_path(path, roots)
    original = textio.read_text(valid_path)
    start, end = _require_span(original, text_range, "Range not found")
    textio.write_text(valid_path, original[:start] + content + original[end:])
    logger.info("Replaced content in %s", valid_path)
    return f"Successfully replaced content in {path}"


def replace_by_pattern(
    roots: AllowedRoots,
    path: str,
    pattern: str,
    replacement: str,
    flags: str | None = None,
) -> str:
    """Substitute ``pattern`` over the whole file.

    ``flags`` uses the familiar one-letter regex flags (``g`` replaces every
    match instead of the first). ``replacement`` may reference groups as
    ``$1``, ``$<name>`` or ``$&``. Named groups are written ``(?P<name>...)``.
    """
    regex, replace_all = compile_pattern(pattern, flags)
    valid_path = validate_path(path, roots)
    original = textio.read_text(valid_path)
    updated = regex.sub(
        lambda match: expand_template(replacement, match),
        original,
        count=0 if replace_all else 1,
    )
    textio.write_text(valid_path, updated)
    logger.info("Replaced pattern %r in %s", pattern, valid_path)
    return f"Successfully replaced content in {path}"


def compile_pattern(pattern: str, flags: str | None) -> tuple[re.Pattern[str], bool]:
    replace_all = False
    re_flags = 0
    seen: set[str] = set()
    for flag in flags or "":
        if flag in seen or (flag != "g" and flag not in PATTERN_FLAGS):
            raise SchemaInvalid(f"Invalid regular expression flags: {flags}")
        seen.add(flag)
        if flag == "g":
            replace_all = True
        else:
            re_flags |= PATTERN_FLAGS[flag]
    try:
        return re.compile(pattern, re_flags), replace_all
    except re.error as exc:
        raise SchemaInvalid(f"Invalid regular expression: /{pattern}/: {exc}") from exc


def expand_template(template: str, match: re.Match[str]) -> str:
    def _expand(token: re.Match[str]) -> str:
        dollar, whole, prefix, suffix, name, number = token.groups()
        if dollar:
            return "$"
        if whole:
            return match.group(0)
        if prefix:
            return match.string[: match.start()]
        if suffix:
            return match.string[match.end() :]
        if name is not None:
            # literal only when the pattern defines no named groups at all
            if not match.re.groupindex:
                return token.group(0)
            if name in match.re.groupindex:
                return match.group(name) or ""
            return ""
        return _expand_number(number, match)

    return TEMPLATE_RE.sub(_expand, template)


def _expand_number(digits: str, match: re.Match[str]) -> str:
    groups = match.re.groups
    if len(digits) == 2 and 0 < int(digits) <= groups:
        return match.group(int(digits)) or ""
    first = int(digits[0])
    if 0 < first <= groups:
        return (match.group(first) or "") + digits[1:]
    return "$" + digits


def _require_span(content: str, text_range: TextRange, message: str) -> Span:
    span = find_range(content, text_range)
    if span is None:
        logger.error(message)
        raise RangeNotFound(message)
    return span
