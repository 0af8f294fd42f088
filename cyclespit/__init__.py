"""Public package exports for the scanline cycle layout generator."""

from .accumulator import accumulate_chunk
from .block import expand_repeats, expand_source
from .cycle_table import CycleTable
from .layout import LayoutConfig, LayoutError, LayoutProgram, Scanline, ScanlineLayout
from .models import AnnotatedLine, LineKind
from .normalizer import NormalizedInstruction, count_registers, normalize_line
from .renderer import DocumentRenderer
from .resolver import CycleCount, CycleResolver
from .template import TemplateInstruction, TemplateSection, parse_template

__all__ = [
    "AnnotatedLine",
    "CycleCount",
    "CycleResolver",
    "CycleTable",
    "DocumentRenderer",
    "LayoutConfig",
    "LayoutError",
    "LayoutProgram",
    "LineKind",
    "NormalizedInstruction",
    "Scanline",
    "ScanlineLayout",
    "TemplateInstruction",
    "TemplateSection",
    "accumulate_chunk",
    "count_registers",
    "expand_repeats",
    "expand_source",
    "normalize_line",
    "parse_template",
]
