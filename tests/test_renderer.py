from pathlib import Path

import pytest

from cyclespit import (
    CycleResolver,
    CycleTable,
    DocumentRenderer,
    LayoutConfig,
    ScanlineLayout,
    parse_template,
)


def build_program(config: LayoutConfig):
    resolver = CycleResolver(CycleTable.default())
    sections = parse_template("move.b d7,$ffff8260.w ; Left border\ndcb.w 2,$4e71", resolver)
    layout = ScanlineLayout(resolver, sections, config)
    return layout.generate(["move.w d0,d1", "move.w d1,d2", "move.w d2,d3"])


@pytest.mark.parametrize(
    "line, expected",
    [
        ("", ""),
        ("   ", ""),
        ("; comment", "; comment"),
        ("add set 224", "add set 224"),
        ("WIDTH equ 230", "WIDTH equ 230"),
        ("loop: tst.w d0", "loop:\ttst.w d0"),
        (".loop:", ".loop:"),
        ("move.w d0,d1", "\tmove.w d0,d1"),
        ("nop\t; 4 cycles\t[8]", "\tnop\t; 4 cycles\t[8]"),
    ],
)
def test_format_line(line, expected):
    assert DocumentRenderer.format_line(line) == expected


def test_header_reports_scanline_count():
    config = LayoutConfig(target_cycles=20, template_name="template.s")
    program = build_program(config)

    text = DocumentRenderer().render(program, config)
    lines = text.splitlines()

    assert lines[0] == lines[5]
    assert lines[1] == "; This file is generated using cyclespit"
    assert lines[2] == "; Total scanlines created: 2"
    assert lines[3] == "; Cycles per scanline: 20"
    assert lines[4] == "; Template used: template.s"
    assert lines[6] == "SCANLINES_CONSUMED\tequ 2"
    assert text.endswith("; Total cycles for scanline: 20\n")


def test_body_is_annotated():
    config = LayoutConfig(target_cycles=20, scanline_label="LINES")
    program = build_program(config)

    text = DocumentRenderer().render(program, config)

    assert "LINES\tequ 2" in text
    assert "Template used" not in text
    assert (
        "\tmove.b d7,$ffff8260.w ; Left border move.b dn,xxx.w (12) [0]" in text
    )
    assert "\tmove.w d0,d1\t;\t(4)\tmove.w dn,dn\t[12]" in text
    assert "\tnop\t; 4 cycles\t[16]" in text


def test_write(tmp_path: Path):
    config = LayoutConfig(target_cycles=20)
    program = build_program(config)
    output = tmp_path / "generated.s"

    renderer = DocumentRenderer()
    renderer.write(program, config, output)

    assert output.read_text("utf-8") == renderer.render(program, config)
