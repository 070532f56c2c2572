"""Formatting detection: is a difference purely whitespace / serialization?

Two checks with different inputs:

- ``equal_ignoring_whitespace`` compares node values with every whitespace
  character removed.  The classifier uses it for DiffNodes.
- ``formatting_only`` compares two raw lines of serialized text, also
  ignoring spaces next to tag delimiters.  Each DiffLine uses it on its own,
  independently of any linked DiffNode.
"""

from __future__ import annotations

import re

__all__ = ["equal_ignoring_whitespace", "formatting_only", "is_blank"]

_WS = re.compile(r"\s+")
_SPACE_BEFORE_CLOSE = re.compile(r"\s+(/?>)")
_SPACE_AFTER_OPEN = re.compile(r"(</?)\s+")


def is_blank(text: str | None) -> bool:
    """True for None, the empty string, or whitespace only."""
    return text is None or not text.strip()


def equal_ignoring_whitespace(a: str | None, b: str | None) -> bool:
    """Equality after removing all whitespace; None counts as empty."""
    return _WS.sub("", a or "") == _WS.sub("", b or "")


def _normalize_line(line: str) -> str:
    collapsed = _WS.sub(" ", line).strip()
    collapsed = _SPACE_BEFORE_CLOSE.sub(r"\1", collapsed)
    return _SPACE_AFTER_OPEN.sub(r"\1", collapsed)


def formatting_only(line1: str | None, line2: str | None) -> bool:
    """Whether two serialized lines differ only in formatting.

    A blank line against anything is never a formatting-only change, and
    two blank lines are not a change at all.
    """
    if line1 is None or line2 is None or is_blank(line1) or is_blank(line2):
        return False
    if line1 == line2:
        return False
    return _normalize_line(line1) == _normalize_line(line2)
