import logging

from cyclespit import CycleCount, CycleResolver, CycleTable


def build_resolver() -> CycleResolver:
    table = CycleTable(
        {
            "move.w dn,dn": [4],
            "movem.l reglist,-(an)": [8, 8],
            "bne.b xxx.l": [8, 12],
        }
    )
    return CycleResolver(table)


def _is_comment(line: str) -> bool:
    return line.lstrip().startswith(";")


def test_inline_override_skips_lookup():
    resolver = build_resolver()

    cycles = resolver.resolve("unknown_op d0 ; (12)")

    assert cycles == CycleCount((12,), "n/a")
    assert cycles.cycles == 12


def test_override_wins_over_skip_predicate():
    resolver = build_resolver()

    cycles = resolver.resolve("move.w d0,d1 ; ( 8)", lambda line: True)

    assert cycles is not None
    assert cycles.cycles == 8


def test_skipped_lines_resolve_to_nothing():
    resolver = build_resolver()

    assert resolver.resolve("; plain comment", _is_comment) is None


def test_table_lookup():
    resolver = build_resolver()

    cycles = resolver.resolve("move.w d0,d1", _is_comment)

    assert cycles.key == "move.w dn,dn"
    assert cycles.cycles == 4
    assert cycles.describe() == "4"


def test_missing_key_costs_zero_and_warns(caplog):
    resolver = build_resolver()

    with caplog.at_level(logging.WARNING, logger="cyclespit.resolver"):
        cycles = resolver.resolve("unknown_op #42,d1")

    assert cycles.cycles == 0
    assert cycles.key == "unknown_op.w #xxx,dn"
    assert "no cycle count found" in caplog.text


def test_register_list_cost_scales_with_register_count():
    resolver = build_resolver()

    cycles = resolver.resolve("movem.l d0-d7/a0-a6,-(sp)")

    assert cycles.register_count == 15
    assert cycles.is_register_list
    assert cycles.cycles == 8 + 8 * 15
    assert cycles.describe() == "128 -> [base (8) + (reg count (15) * reg (8))]"


def test_branch_pair_uses_not_taken_cost():
    resolver = build_resolver()

    cycles = resolver.resolve("bne.s .loop")

    assert cycles.cycles == 8
    assert cycles.extra == 12
    assert cycles.describe() == "8/12"


def test_single_register_list_uses_base_cost():
    cycles = CycleCount((8, 8), "movem.l reglist,-(an)", 1)

    assert cycles.cycles == 8


def test_default_table_resolves_template_code():
    resolver = CycleResolver(CycleTable.default())

    assert resolver.lookup("move.b d7,$ffff8260.w").cycles == 12
    assert resolver.lookup("move.w d7,$ffff820a.w").cycles == 12
    assert resolver.lookup("movem.l d0-d7/a1-a3,-(sp)").cycles == 96
