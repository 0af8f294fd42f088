"""Annotated output lines produced by the layout pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .resolver import CycleCount


FILLER_MNEMONIC = "nop"
FILLER_CYCLES = 4
FILLER_OPCODE = "$4e71"


class LineKind(Enum):
    PASSTHROUGH = "passthrough"
    DIRECTIVE = "directive"
    INSTRUCTION = "instruction"
    FILLER = "filler"
    INJECTION = "injection"
    MARKER = "marker"
    PADDING = "padding"


@dataclass(frozen=True)
class AnnotatedLine:
    """A single output line plus the accounting data attached to it.

    ``offset`` is the running cycle position at which the line starts inside
    its scanline; ``cycles`` is only set for costed lines.
    """

    text: str
    kind: LineKind
    cycles: Optional[CycleCount] = None
    offset: Optional[int] = None

    @classmethod
    def filler(cls, offset: int) -> "AnnotatedLine":
        return cls(FILLER_MNEMONIC, LineKind.FILLER, offset=offset)

    @classmethod
    def marker(cls, text: str) -> "AnnotatedLine":
        return cls(text, LineKind.MARKER)

    @property
    def cost(self) -> int:
        if self.kind is LineKind.FILLER:
            return FILLER_CYCLES
        return self.cycles.cycles if self.cycles is not None else 0

    def render(self) -> str:
        if self.kind is LineKind.FILLER:
            return f"{FILLER_MNEMONIC}\t; {FILLER_CYCLES} cycles\t[{self.offset}]"
        if self.kind is LineKind.INSTRUCTION and self.cycles is not None:
            return format_accumulated_instruction(self.text, self.cycles, self.offset or 0)
        if self.kind is LineKind.INJECTION and self.cycles is not None:
            return format_template_instruction(self.text, self.cycles, self.offset or 0)
        return self.text


def format_accumulated_instruction(line: str, cycles: CycleCount, offset: int) -> str:
    text = f"{line}\t;\t({cycles.describe()})\t{cycles.key}"
    if offset > 0:
        text += f"\t[{offset}]"
    return text


def format_template_instruction(line: str, cycles: CycleCount, offset: int) -> str:
    annotation = f"{cycles.key} ({cycles.cycles}) [{offset}]"
    if ";" in line:
        return f"{line} {annotation}"
    return f"{line}\t; {annotation}"


def filler_directive(count: int) -> str:
    """``dcb.w`` line emitting ``count`` filler instructions."""

    return f"dcb.w\t{count},{FILLER_OPCODE}"
