"""Locate text regions by the markers that surround them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

Span = tuple[int, int]


@dataclass(frozen=True)
class TextRange:
    before_text: str
    after_text: str

    @classmethod
    def from_args(cls, value: dict[str, Any]) -> TextRange:
        return cls(before_text=value["beforeText"], after_text=value["afterText"])


def find_range(content: str, text_range: TextRange) -> Span | None:
    """Return the span between the first ``before_text`` and the nearest
    ``after_text`` following it, excluding both markers.

    Matches the leftmost-shortest semantics of a non-greedy
    ``before(.*?)after`` search: if the first ``before_text`` has no
    ``after_text`` after it, no later occurrence can have one either.
    The returned offsets are only valid for ``content`` itself.
    """
    before_at = content.find(text_range.before_text)
    if before_at < 0:
        return None
    start = before_at + len(text_range.before_text)
    end = content.find(text_range.after_text, start)
    if end < 0:
        return None
    return start, end
