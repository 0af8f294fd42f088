"""Expansion of ``rept``/``endr`` blocks into a flat instruction stream."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple


logger = logging.getLogger(__name__)

REPEAT_OPENERS = frozenset({"rept", "repeat"})
REPEAT_CLOSERS = frozenset({"endr", "endrepeat", "end-repeat"})


def expand_repeats(lines: Sequence[str], start_index: int = 0) -> Tuple[List[str], int]:
    """Unroll nested ``rept N`` ... ``endr`` blocks starting at ``start_index``.

    Returns the flattened lines together with the index just past the last
    line consumed.  An ``endr`` ends the current nesting level and hands
    control back to the caller, which then repeats the collected body.

    A ``rept`` whose count is not a positive integer is not an opener: the
    line is kept verbatim and the following lines are processed once.  Its
    ``endr`` then closes whatever level is current.  A block left open at the
    end of the input is repeated as if it had been closed there.
    """

    result, index, _ = _expand(lines, start_index)
    return result, index


def expand_source(lines: Sequence[str]) -> List[str]:
    """Expand a whole listing.

    An ``endr`` that closes no block is dropped with a warning and expansion
    resumes on the line after it.
    """

    flat: List[str] = []
    index = 0
    while index < len(lines):
        body, index, closed = _expand(lines, index)
        flat.extend(body)
        if closed:
            logger.warning(
                "line %d: %r closes no repeat block; ignoring it", index, lines[index - 1]
            )
    return flat


def is_repeat_directive(line: str) -> bool:
    keyword, _ = _directive(line)
    return keyword in REPEAT_OPENERS or keyword in REPEAT_CLOSERS


def _expand(lines: Sequence[str], start_index: int) -> Tuple[List[str], int, bool]:
    result: List[str] = []
    index = start_index
    while index < len(lines):
        line = lines[index]
        keyword, argument = _directive(line)
        if keyword in REPEAT_OPENERS:
            count = _parse_count(argument)
            if count is not None:
                body, index, _ = _expand(lines, index + 1)
                for _ in range(count):
                    result.extend(body)
                continue
            result.append(line)
        elif keyword in REPEAT_CLOSERS:
            return result, index + 1, True
        else:
            result.append(line)
        index += 1
    return result, index, False


def _directive(line: str) -> Tuple[str, Optional[str]]:
    parts = line.split(";", 1)[0].split()
    if not parts:
        return "", None
    keyword = parts[0].lower()
    argument = parts[1] if len(parts) > 1 else None
    return keyword, argument


def _parse_count(argument: Optional[str]) -> Optional[int]:
    if argument is None or not argument.isdigit():
        return None
    count = int(argument)
    if count <= 0:
        return None
    return count
