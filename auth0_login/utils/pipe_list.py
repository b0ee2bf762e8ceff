"""
Parse and serialise the ``left|right`` mapping lists used in configuration.
"""

import re
from typing import Iterable, List, Tuple

MappingPair = Tuple[str, str]

_LINE_SPLIT = re.compile(r"[\n\r]+")


def parse_pipe_list(text: str, lowercase_left: bool = False) -> List[MappingPair]:
    """
    Parse a block of ``left|right`` lines into ordered pairs.

    Whitespace around each side is trimmed. Lines that do not contain exactly
    one pipe (blank lines, ``badline``, ``a|b|c``) are skipped.

    Args:
        text: Configuration text, one mapping per line
        lowercase_left: Lowercase the left-hand side of each pair

    Returns:
        List of (left, right) tuples in the order they appear
    """
    pairs: List[MappingPair] = []
    if not text:
        return pairs
    for line in _LINE_SPLIT.split(text):
        parts = line.strip().split("|")
        if len(parts) != 2:
            continue
        left = parts[0].strip()
        if lowercase_left:
            left = left.lower()
        pairs.append((left, parts[1].strip()))
    return pairs


def to_pipe_list(pairs: Iterable[MappingPair]) -> str:
    """Serialise pairs back to ``left|right`` lines."""
    return "\n".join(f"{left}|{right}" for left, right in pairs)
