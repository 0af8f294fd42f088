"""Canonicalise 68000 instruction lines into cycle table keys.

A key is built from the mnemonic (with a normalised size suffix) followed by
the operand pattern where every concrete register, displacement, immediate
and absolute address has been replaced by a placeholder::

    lea     230*140(a5),a5        ->  lea.l d(an),an
    move.b  d7,$ffff8260.w        ->  move.b dn,xxx.w
    movem.l d0-d7/a0-a6,-(sp)     ->  movem.l reglist,-(an)
    bne.s   .loop                 ->  bne.b xxx.l

The operand passes run in a fixed order.  Later passes must never re-match
placeholders produced by earlier ones (``d(an)`` contains a ``d`` that must
not become an absolute address, ``reglist`` must not become ``xxx.l``), so
reordering them changes the resulting keys.

Register lists are folded into a single ``reglist`` placeholder; the number
of registers they name is reported separately because it only affects the
cost, not the lookup key.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from .line_utils import split_comment, split_label


__all__ = [
    "NormalizedInstruction",
    "REGISTER_LIST_PLACEHOLDER",
    "count_registers",
    "normalize_line",
]


REGISTER_LIST_PLACEHOLDER = "reglist"

# Mnemonics that always operate on a long word whatever the source says.
LONG_ONLY_MNEMONICS = frozenset({"lea", "pea", "moveq", "exg"})

BRANCH_CONDITIONS = (
    "ra", "sr", "hi", "ls", "cc", "cs", "hs", "lo", "ne",
    "eq", "vc", "vs", "pl", "mi", "ge", "lt", "gt", "le",
)

# Tokens the absolute address pass must leave alone.
RESERVED_TOKENS = frozenset(
    {"dn", "an", "d", "xn", "pc", "sr", "ccr", "usp", "xxx", REGISTER_LIST_PLACEHOLDER}
)

_REG = r"(?:[ad][0-7]|sp)"

_BRANCH_PATTERN = re.compile(
    r"^(b(?:" + "|".join(BRANCH_CONDITIONS) + r"))(?:\.([sbwl]))?(.*)$"
)

# ``d(a0,d1.w)`` / ``(a0,d1)`` / ``label(pc,a2.l)``
_INDEXED_PATTERN = re.compile(
    r"([^\s,()]*)\((" + _REG + r"|pc),\s*" + _REG + r"(?:\.[wl])?\)"
)

# ``12(a0)`` / ``-(sp)`` / ``table(pc)``
_DISPLACEMENT_PATTERN = re.compile(r"([^\s,()]+)\((" + _REG + r"|pc)\)")

_IMMEDIATE_PATTERN = re.compile(r"#[^,\s]+")

_REGISTER_LIST_PATTERN = re.compile(
    r"(?<![\w.$])(" + _REG + r"(?:-" + _REG + r")?(?:/" + _REG + r"(?:-" + _REG + r")?)*)(?![\w(.])"
)

_DATA_REGISTER_PATTERN = re.compile(r"\bd[0-7]\b")

_ADDRESS_REGISTER_PATTERN = re.compile(r"\b(?:a[0-7]|sp)\b")

_ABSOLUTE_PATTERN = re.compile(
    r"(?P<before>^|[ \t,(\[])"
    r"(?P<token>\.?[a-z_][a-z0-9_]*)"
    r"(?P<expr>(?:[-+*/][\w$]+)*)"
    r"(?P<suffix>\.[lw])?\b"
)

_HEX_PATTERN = re.compile(r"\$\w+(?P<suffix>\.[lw])?")

_WHITESPACE_PATTERN = re.compile(r"[ \t]+")
_COMMA_SPACING_PATTERN = re.compile(r"\s*,\s*")

_TRAILING_DIGITS = re.compile(r"(\d+)$")


@dataclass(frozen=True)
class NormalizedInstruction:
    """Lookup key for an instruction plus the size of its register list."""

    key: str
    register_count: int = 0

    @property
    def has_register_list(self) -> bool:
        return REGISTER_LIST_PLACEHOLDER in self.key


def normalize_line(line: str) -> NormalizedInstruction:
    """Return the canonical cycle table key for ``line``.

    Every input yields a key; whether that key exists in a cycle table is the
    caller's concern.
    """

    code, _ = split_comment(line)
    _, code = split_label(code)
    text = _WHITESPACE_PATTERN.sub(" ", code.strip().lower())

    parts = text.split(" ", 1)
    mnemonic = _normalize_mnemonic(parts[0])
    operands = parts[1] if len(parts) > 1 else ""

    registers: List[int] = []
    operands = _normalize_operands(operands, registers)

    key = f"{mnemonic} {operands}" if operands else mnemonic
    return NormalizedInstruction(key, sum(registers))


def count_registers(text: str) -> int:
    """Count the registers named by a register list expression.

    ``d0-d3`` names four registers, ``d0/d2/d5`` three; combinations such as
    ``d0-d7/a0-a6`` add up each ``/`` separated segment.  Ranges are expanded
    from the trailing digits of both ends; a range that cannot be expanded
    counts as a single register.
    """

    total = 0
    for segment in text.split("/"):
        segment = segment.strip()
        if not segment:
            continue
        if "-" not in segment:
            total += 1
            continue
        first, _, last = segment.partition("-")
        start = _register_number(first)
        end = _register_number(last)
        if start is None or end is None or end < start:
            total += 1
            continue
        total += end - start + 1
    return total


def _register_number(token: str) -> Optional[int]:
    token = token.strip().lower()
    if token == "sp":
        token = "a7"
    match = _TRAILING_DIGITS.search(token)
    if match is None:
        return None
    return int(match.group(1))


def _normalize_mnemonic(mnemonic: str) -> str:
    if mnemonic in LONG_ONLY_MNEMONICS:
        return f"{mnemonic}.l"

    match = _BRANCH_PATTERN.match(mnemonic)
    if match is not None:
        base, size, trailing = match.groups()
        if size in ("s", "b"):
            return f"{base}.b{trailing}"
        if size is not None or not trailing:
            return f"{base}.w{trailing}"

    if "." not in mnemonic:
        return f"{mnemonic}.w"
    return mnemonic


def _normalize_operands(operands: str, registers: List[int]) -> str:
    if not operands:
        return ""

    # a. displacement and indexed addressing
    operands = _INDEXED_PATTERN.sub(_replace_indexed, operands)
    operands = _DISPLACEMENT_PATTERN.sub(_replace_displacement, operands)
    # b. immediates
    operands = _IMMEDIATE_PATTERN.sub("#xxx", operands)
    # c. register lists
    operands = _REGISTER_LIST_PATTERN.sub(
        lambda match: _replace_register_list(match, registers), operands
    )
    # d. data registers
    operands = _DATA_REGISTER_PATTERN.sub("dn", operands)
    # e. address registers
    operands = _ADDRESS_REGISTER_PATTERN.sub("an", operands)
    # f. absolute addresses given as symbols
    operands = _ABSOLUTE_PATTERN.sub(_replace_absolute, operands)
    # g. whitespace
    operands = _WHITESPACE_PATTERN.sub(" ", operands)
    operands = _COMMA_SPACING_PATTERN.sub(",", operands).strip()
    # h. absolute addresses given as hexadecimal literals
    operands = _HEX_PATTERN.sub(_replace_hex, operands)
    return operands


def _replace_indexed(match: re.Match[str]) -> str:
    return f"d({match.group(2)},xn)"


def _replace_displacement(match: re.Match[str]) -> str:
    displacement, register = match.groups()
    if displacement == "-":
        return f"-({register})"
    return f"d({register})"


def _replace_register_list(match: re.Match[str], registers: List[int]) -> str:
    text = match.group(1)
    if "-" not in text and "/" not in text:
        return text
    registers.append(count_registers(text))
    return REGISTER_LIST_PLACEHOLDER


def _replace_absolute(match: re.Match[str]) -> str:
    token = match.group("token")
    if token in RESERVED_TOKENS:
        return match.group(0)
    size = "w" if match.group("suffix") == ".w" else "l"
    return f"{match.group('before')}xxx.{size}"


def _replace_hex(match: re.Match[str]) -> str:
    size = "w" if match.group("suffix") == ".w" else "l"
    return f"xxx.{size}"
