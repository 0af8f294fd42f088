"""Greedy packing of the instruction stream into fixed cycle budgets."""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from .block import is_repeat_directive
from .line_utils import is_blank, is_comment, is_equ_directive, is_label_only, is_set_directive
from .models import FILLER_CYCLES, AnnotatedLine, LineKind
from .resolver import CycleResolver


logger = logging.getLogger(__name__)


def is_stream_non_code(line: str) -> bool:
    """Skip predicate used when costing lines of the instruction stream."""

    return is_comment(line) or is_equ_directive(line) or is_label_only(line)


def accumulate_chunk(
    lines: Sequence[str],
    start_index: int,
    target: int,
    initial_offset: int,
    resolver: CycleResolver,
) -> Tuple[List[AnnotatedLine], int, int]:
    """Consume ``lines`` from ``start_index`` until exactly ``target`` cycles.

    Every costed instruction is annotated with its cost, lookup key and the
    running offset at which it starts.  When the next instruction would
    overrun the budget it is left for the next call and the remaining cycles
    are filled with ``nop`` lines; the same filler closes a budget left short
    when the input runs out.

    Returns ``(chunk, next_index, final_offset)`` where ``next_index`` points
    at the first line not consumed.  A result that does not add up to
    ``target`` (a residue that is not a multiple of four) is reported but
    returned as produced.
    """

    offset = initial_offset
    chunk: List[AnnotatedLine] = []
    index = start_index

    while index < len(lines) and offset - initial_offset < target:
        line = lines[index]
        if is_blank(line) or is_comment(line):
            chunk.append(AnnotatedLine(line, LineKind.PASSTHROUGH))
            index += 1
            continue
        if is_set_directive(line) or is_repeat_directive(line):
            chunk.append(AnnotatedLine(line, LineKind.DIRECTIVE))
            index += 1
            continue

        cycles = resolver.resolve(line, is_stream_non_code)
        if cycles is None:
            chunk.append(AnnotatedLine(line, LineKind.PASSTHROUGH))
            index += 1
            continue

        consumed = offset - initial_offset
        if consumed + cycles.cycles > target:
            offset = _pad(chunk, offset, target - consumed)
            break

        chunk.append(AnnotatedLine(line, LineKind.INSTRUCTION, cycles, offset))
        offset += cycles.cycles
        index += 1

    consumed = offset - initial_offset
    if consumed < target:
        offset = _pad(chunk, offset, target - consumed)

    if offset - initial_offset != target:
        logger.warning(
            "accumulated cycles %d do not equal target %d starting at index %d",
            offset - initial_offset,
            target,
            start_index,
        )
    return chunk, index, offset


def _pad(chunk: List[AnnotatedLine], offset: int, residual: int) -> int:
    for _ in range(residual // FILLER_CYCLES):
        chunk.append(AnnotatedLine.filler(offset))
        offset += FILLER_CYCLES
    return offset
