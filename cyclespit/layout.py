"""Scanline layout: interleave template sections with the instruction stream."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .accumulator import accumulate_chunk
from .block import expand_source
from .models import FILLER_CYCLES, AnnotatedLine, LineKind, filler_directive
from .resolver import CycleResolver
from .template import TemplateSection


logger = logging.getLogger(__name__)

DEFAULT_TARGET_CYCLES = 512
DEFAULT_SCANLINE_LABEL = "SCANLINES_CONSUMED"


class LayoutError(RuntimeError):
    """Raised when the instruction stream cannot be laid out at all."""


@dataclass(frozen=True)
class LayoutConfig:
    target_cycles: int = DEFAULT_TARGET_CYCLES
    scanline_label: str = DEFAULT_SCANLINE_LABEL
    template_name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.target_cycles <= 0 or self.target_cycles % FILLER_CYCLES:
            raise ValueError(
                f"target cycles must be a positive multiple of {FILLER_CYCLES}, "
                f"got {self.target_cycles}"
            )


@dataclass
class Scanline:
    index: int
    lines: List[AnnotatedLine] = field(default_factory=list)
    cycles: int = 0


@dataclass
class LayoutProgram:
    scanlines: List[Scanline] = field(default_factory=list)

    @property
    def scanline_count(self) -> int:
        return len(self.scanlines)

    def iter_lines(self):
        for scanline in self.scanlines:
            yield from scanline.lines


class ScanlineLayout:
    """Lay out a source listing as a sequence of fixed-length scanlines.

    Each scanline replays the template sections in order: the section's
    injection code is emitted first, then its filler budget is filled from
    the expanded instruction stream.  Once the stream runs dry the remaining
    budgets are emitted as ``dcb.w`` filler so the template timing is kept.
    Without a usable template the whole scanline is a single budget.
    """

    def __init__(
        self,
        resolver: CycleResolver,
        sections: Sequence[TemplateSection] = (),
        config: Optional[LayoutConfig] = None,
    ) -> None:
        self.resolver = resolver
        self.config = config or LayoutConfig()
        self.sections = self._effective_sections(sections)

    def generate(self, source_lines: Sequence[str]) -> LayoutProgram:
        flat = expand_source([line.strip() for line in source_lines])
        program = LayoutProgram()
        index = 0
        while index < len(flat):
            scanline = Scanline(len(program.scanlines))
            next_index = self._fill_scanline(scanline, flat, index)
            if next_index == index:
                raise LayoutError(
                    f"line {index + 1} of the expanded source ({flat[index]!r}) does not fit "
                    f"into any template section"
                )
            index = next_index
            program.scanlines.append(scanline)
        return program

    def _fill_scanline(self, scanline: Scanline, flat: Sequence[str], index: int) -> int:
        target = self.config.target_cycles
        offset = 0
        for section in self.sections:
            for entry in section.injection_code:
                kind = LineKind.DIRECTIVE if entry.directive else LineKind.INJECTION
                scanline.lines.append(
                    AnnotatedLine(entry.text, kind, entry.cycles, offset + entry.offset)
                )
            offset += section.injection_cycles
            scanline.lines.append(AnnotatedLine.marker(f"; --- {section.label} section ---"))

            if section.nop_cycles > 0:
                if index < len(flat):
                    chunk, index, offset = accumulate_chunk(
                        flat, index, section.nop_cycles, offset, self.resolver
                    )
                    scanline.lines.extend(chunk)
                else:
                    count = section.nop_cycles // FILLER_CYCLES
                    scanline.lines.append(
                        AnnotatedLine(
                            f"{filler_directive(count)}\t; filler ({section.nop_cycles} cycles)",
                            LineKind.PADDING,
                        )
                    )
                    offset += count * FILLER_CYCLES
            scanline.lines.append(AnnotatedLine.marker(f"; Calculated cycles: {offset}"))

        if offset < target:
            remaining = target - offset
            count = remaining // FILLER_CYCLES
            if count > 0:
                scanline.lines.append(
                    AnnotatedLine(
                        f"{filler_directive(count)}\t; Pad to {target} cycles ({remaining} cycles)",
                        LineKind.PADDING,
                    )
                )
            offset += count * FILLER_CYCLES
        elif offset > target:
            logger.warning(
                "scanline %d overflows by %d cycles", scanline.index, offset - target
            )

        scanline.cycles = offset
        scanline.lines.append(AnnotatedLine.marker(f"; Total cycles for scanline: {offset}"))
        return index

    def _effective_sections(
        self, sections: Sequence[TemplateSection]
    ) -> List[TemplateSection]:
        selected = list(sections)
        if any(section.nop_cycles > 0 for section in selected):
            return selected
        if selected:
            logger.warning("template has no filler budget; using the whole scanline instead")
        injected = sum(section.injection_cycles for section in selected)
        budget = self.config.target_cycles - injected
        budget -= budget % FILLER_CYCLES
        if budget <= 0:
            return selected
        return selected + [TemplateSection((), budget, "Scanline")]
