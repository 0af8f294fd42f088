"""Helpers for classifying raw 68000 assembly source lines."""

from __future__ import annotations

import re
from typing import Optional, Tuple


__all__ = [
    "COMMENT_DELIMITER",
    "comment_label",
    "extract_override",
    "is_blank",
    "is_comment",
    "is_equ_directive",
    "is_label_only",
    "is_non_code",
    "is_set_directive",
    "split_comment",
    "split_label",
]


COMMENT_DELIMITER = ";"

_FULL_COMMENT_PREFIXES = (";", "*")

# ``name:`` or ``.local:`` at the start of the line.
_LABEL_PATTERN = re.compile(r"^\s*(\.?[A-Za-z_][A-Za-z0-9_]*):\s*")

# ``(12)`` or ``( 4)`` preceded by whitespace or the start of the comment.
_OVERRIDE_PATTERN = re.compile(r"(?:^|\s)\(\s*(\d+)\s*\)")

_SET_PATTERN = re.compile(r"^\s*\S+:?\s+set(?:\s|$)", re.IGNORECASE)
_ASSIGN_PATTERN = re.compile(r"^\s*[A-Za-z_.][A-Za-z0-9_]*\s*=")
_EQU_PATTERN = re.compile(r"^\s*\S+:?\s+equ(?:\s|$)", re.IGNORECASE)


def split_comment(line: str) -> Tuple[str, Optional[str]]:
    """Return ``(code, comment)``; ``comment`` is ``None`` when absent."""

    idx = line.find(COMMENT_DELIMITER)
    if idx < 0:
        return line, None
    return line[:idx], line[idx + 1 :]


def is_blank(line: str) -> bool:
    return not line.strip()


def is_comment(line: str) -> bool:
    return line.lstrip().startswith(_FULL_COMMENT_PREFIXES)


def is_set_directive(line: str) -> bool:
    code, _ = split_comment(line)
    return bool(_SET_PATTERN.match(code) or _ASSIGN_PATTERN.match(code))


def is_equ_directive(line: str) -> bool:
    code, _ = split_comment(line)
    return bool(_EQU_PATTERN.match(code))


def split_label(line: str) -> Tuple[Optional[str], str]:
    """Split a leading ``label:`` token from the rest of the line."""

    match = _LABEL_PATTERN.match(line)
    if match is None:
        return None, line.strip()
    return match.group(1), line[match.end() :].strip()


def is_label_only(line: str) -> bool:
    code, _ = split_comment(line)
    label, rest = split_label(code)
    return label is not None and not rest


def is_non_code(line: str) -> bool:
    """Lines that never carry a cycle cost in the instruction stream."""

    return (
        is_blank(line)
        or is_comment(line)
        or is_equ_directive(line)
        or is_set_directive(line)
        or is_label_only(line)
    )


def extract_override(line: str) -> Optional[int]:
    """Return the ``(N)`` cycle override from the inline comment, if any."""

    _, comment = split_comment(line)
    if comment is None:
        return None
    match = _OVERRIDE_PATTERN.search(comment)
    if match is None:
        return None
    return int(match.group(1))


def comment_label(line: str) -> Optional[str]:
    """Inline comment text usable as a section label."""

    _, comment = split_comment(line)
    if comment is None:
        return None
    text = _OVERRIDE_PATTERN.sub(" ", comment)
    text = " ".join(text.split())
    return text or None
