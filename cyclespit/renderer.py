"""Render a :class:`LayoutProgram` as an assembler source document."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from .layout import LayoutConfig, LayoutProgram
from .line_utils import is_blank, is_comment, is_equ_directive, is_set_directive, split_label


BANNER_RULE = "; " + "-" * 42


class DocumentRenderer:
    """Render generated scanlines into a stable textual form."""

    def render(self, program: LayoutProgram, config: LayoutConfig) -> str:
        lines: List[str] = []
        lines.extend(self._render_header(program, config))
        for line in program.iter_lines():
            lines.append(self.format_line(line.render()))
        return "\n".join(lines) + "\n"

    def write(self, program: LayoutProgram, config: LayoutConfig, output_path: Path) -> None:
        output_path.write_text(self.render(program, config), "utf-8")

    @staticmethod
    def format_line(text: str) -> str:
        """Indent instructions by one tab; comments and directives stay put."""

        if is_blank(text):
            return ""
        if is_comment(text) or is_set_directive(text) or is_equ_directive(text):
            return text
        label, rest = split_label(text)
        if label is not None:
            return f"{label}:\t{rest}" if rest else f"{label}:"
        return f"\t{text}"

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _render_header(self, program: LayoutProgram, config: LayoutConfig) -> Iterable[str]:
        yield BANNER_RULE
        yield "; This file is generated using cyclespit"
        yield f"; Total scanlines created: {program.scanline_count}"
        yield f"; Cycles per scanline: {config.target_cycles}"
        if config.template_name:
            yield f"; Template used: {config.template_name}"
        yield BANNER_RULE
        yield f"{config.scanline_label}\tequ {program.scanline_count}"
