import json
import logging
from pathlib import Path

from cyclespit import CycleTable


def _write_table(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload, indent=2), "utf-8")
    return path


def test_load_table_from_file(tmp_path: Path) -> None:
    table_path = _write_table(
        tmp_path / "custom.json",
        {"nop.w": [4], "bne.b xxx.l": [8, 12]},
    )
    table = CycleTable.load(table_path)

    assert len(table) == 2
    assert table.lookup("nop.w") == (4,)
    assert table.lookup("bne.b xxx.l") == (8, 12)
    assert "nop.w" in table
    assert table.lookup("rts.w") is None


def test_directory_resolves_to_cycles_json(tmp_path: Path) -> None:
    _write_table(tmp_path / "cycles.json", {"rts.w": [16]})

    table = CycleTable.load(tmp_path)

    assert table.lookup("rts.w") == (16,)


def test_missing_table_is_empty(tmp_path: Path, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="cyclespit.cycle_table"):
        table = CycleTable.load(tmp_path / "absent.json")

    assert len(table) == 0
    assert "not found" in caplog.text


def test_malformed_entries_are_skipped(tmp_path: Path, caplog) -> None:
    table_path = _write_table(
        tmp_path / "cycles.json",
        {"ok": 4, "empty": [], "text": ["x"], "flag": True, "pair": [8, 4]},
    )
    with caplog.at_level(logging.WARNING, logger="cyclespit.cycle_table"):
        table = CycleTable.load(table_path)

    assert sorted(table) == ["ok", "pair"]
    assert table.lookup("ok") == (4,)
    assert "malformed" in caplog.text


def test_bundled_table_covers_common_instructions() -> None:
    table = CycleTable.default()

    assert table is CycleTable.default()
    assert table.lookup("moveq.l #xxx,dn") == (4,)
    assert table.lookup("nop.w") == (4,)
    assert table.lookup("move.b dn,xxx.w") == (12,)
    assert table.lookup("move.l (an)+,d(an)") == (24,)
    assert table.lookup("lea.l d(an),an") == (8,)
    assert table.lookup("movem.l reglist,-(an)") == (8, 8)
    assert table.lookup("movem.w (an)+,reglist") == (12, 4)
    assert table.lookup("bne.b xxx.l") == (8, 12)


def test_bundled_timings_sit_on_the_bus_grid() -> None:
    table = CycleTable.default()

    for key in table:
        assert all(value % 4 == 0 for value in table.lookup(key)), key
