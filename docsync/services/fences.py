"""Fenced code block detection shared by link extraction and markdownize."""

import re
from typing import List, Set

_FENCE_RE = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})")


def fenced_lines(lines: List[str]) -> Set[int]:
    """Return the 0-based indexes of *lines* inside fenced code blocks.

    Opening and closing fence lines are included.  An unclosed fence runs to
    the end of the text, as in CommonMark.
    """
    inside: Set[int] = set()
    opener = ""
    for index, line in enumerate(lines):
        match = _FENCE_RE.match(line)
        if not opener:
            if match:
                opener = match.group("fence")
                inside.add(index)
            continue

        inside.add(index)
        if match:
            fence = match.group("fence")
            if fence[0] == opener[0] and len(fence) >= len(opener) and line.strip() == fence:
                opener = ""
    return inside


def line_number_at(text: str, offset: int) -> int:
    """Return the 1-based line number of character *offset* in *text*."""
    return text.count("\n", 0, offset) + 1
