import logging

from cyclespit import expand_repeats, expand_source


def test_simple_block_is_repeated():
    lines = ["move.w d0,d1", "rept 3", "nop", "endr", "rts"]

    flat, next_index = expand_repeats(lines)

    assert flat == ["move.w d0,d1", "nop", "nop", "nop", "rts"]
    assert next_index == len(lines)


def test_nested_blocks_multiply():
    lines = ["rept 2", "rept 2", "x", "endr", "endr"]

    flat, _ = expand_repeats(lines)

    assert flat == ["x"] * 4


def test_nested_body_keeps_order():
    lines = ["rept 2", "a", "rept 2", "b", "endr", "c", "endr"]

    flat, _ = expand_repeats(lines)

    assert flat == ["a", "b", "b", "c", "a", "b", "b", "c"]


def test_directives_are_case_insensitive_and_may_carry_comments():
    lines = ["REPT 2 ; twice", "x", "ENDR ; done"]

    flat, _ = expand_repeats(lines)

    assert flat == ["x", "x"]


def test_repeat_aliases():
    flat, _ = expand_repeats(["repeat 2", "x", "endrepeat"])

    assert flat == ["x", "x"]


def test_invalid_count_keeps_the_line():
    lines = ["a", "rept x", "b", "endr"]

    flat, next_index = expand_repeats(lines)

    assert flat == ["a", "rept x", "b"]
    assert next_index == 4


def test_zero_count_is_not_an_opener():
    flat, _ = expand_repeats(["rept 0", "x"])

    assert flat == ["rept 0", "x"]


def test_missing_count_is_not_an_opener():
    flat, _ = expand_repeats(["rept", "x"])

    assert flat == ["rept", "x"]


def test_unterminated_block_is_repeated():
    flat, next_index = expand_repeats(["line1", "rept 2", "line2"])

    assert flat == ["line1", "line2", "line2"]
    assert next_index == 3


def test_expansion_from_an_inner_index_stops_at_endr():
    flat, next_index = expand_repeats(["a", "b", "endr", "c"], 1)

    assert flat == ["b"]
    assert next_index == 3


def test_empty_input():
    assert expand_repeats([]) == ([], 0)


def test_source_expansion_continues_after_unmatched_endr(caplog):
    with caplog.at_level(logging.WARNING, logger="cyclespit.block"):
        flat = expand_source(["a", "rept x", "b", "endr", "c", "endr", "d"])

    assert flat == ["a", "rept x", "b", "c", "d"]
    assert caplog.text.count("closes no repeat block") == 2


def test_source_expansion_of_balanced_blocks_is_quiet(caplog):
    with caplog.at_level(logging.WARNING, logger="cyclespit.block"):
        flat = expand_source(["rept 2", "x", "endr"])

    assert flat == ["x", "x"]
    assert caplog.text == ""
