"""Parsing of the per-scanline template into injection sections."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .line_utils import comment_label, is_comment, is_equ_directive, is_set_directive
from .models import FILLER_CYCLES
from .resolver import CycleCount, CycleResolver


# ``dcb.w 89,$4e71`` reserves room for 89 filler instructions.
FILLER_DIRECTIVE_PATTERN = re.compile(r"dcb\.w\s*(\d+)\s*,\s*\$4e71", re.IGNORECASE)


@dataclass(frozen=True)
class TemplateInstruction:
    """One injected template line with its cost and position in the section."""

    text: str
    cycles: CycleCount
    offset: int = 0
    directive: bool = False

    @property
    def cost(self) -> int:
        return self.cycles.cycles


@dataclass(frozen=True)
class TemplateSection:
    """Fixed injection code followed by a budget of filler cycles.

    The budget is the space the template reserved with its ``dcb.w``
    directive; the layout fills it with code from the instruction stream.
    """

    injection_code: Tuple[TemplateInstruction, ...] = field(default_factory=tuple)
    nop_cycles: int = 0
    label: str = ""

    @property
    def injection_cycles(self) -> int:
        return sum(entry.cost for entry in self.injection_code)

    @property
    def total_cycles(self) -> int:
        return self.injection_cycles + self.nop_cycles


def is_template_non_code(line: str) -> bool:
    return (
        is_comment(line)
        or is_equ_directive(line)
        or is_set_directive(line)
        or FILLER_DIRECTIVE_PATTERN.search(line) is not None
    )


def parse_template(content: str, resolver: CycleResolver) -> List[TemplateSection]:
    """Split ``content`` into sections closed by filler directives."""

    sections: List[TemplateSection] = []
    builder = _SectionBuilder()

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or is_comment(line):
            continue

        match = FILLER_DIRECTIVE_PATTERN.search(line)
        if match is not None:
            count = int(match.group(1))
            if builder.entries or count > 0:
                sections.append(builder.build(count * FILLER_CYCLES, len(sections) + 1))
            builder = _SectionBuilder()
            continue

        if is_set_directive(line):
            builder.add(line, CycleCount((0,), "set"), directive=True)
            continue

        cycles = resolver.resolve(line, is_template_non_code)
        if cycles is None:
            continue
        builder.add(line, cycles)

    if builder.entries:
        sections.append(builder.build(0, len(sections) + 1))
    return sections


class _SectionBuilder:
    def __init__(self) -> None:
        self.entries: List[TemplateInstruction] = []
        self.label: Optional[str] = None
        self.offset = 0

    def add(self, line: str, cycles: CycleCount, *, directive: bool = False) -> None:
        if self.label is None:
            self.label = comment_label(line)
        self.entries.append(TemplateInstruction(line, cycles, self.offset, directive))
        self.offset += cycles.cycles

    def build(self, nop_cycles: int, ordinal: int) -> TemplateSection:
        label = self.label or f"Section {ordinal}"
        return TemplateSection(tuple(self.entries), nop_cycles, label)
