"""Algebraic properties of the flag set functions."""

from hypothesis import assume, given
from hypothesis import strategies as st

from bc_utils import bit_flags

targets = st.integers(min_value=0, max_value=2**128)
flags = st.integers(min_value=0, max_value=127).map(lambda n: 1 << n)
any_flags = st.integers(min_value=1, max_value=2**128)
flag_lists = st.lists(flags, max_size=12)


@given(targets, any_flags)
def test_set_is_idempotent(target, flag):
    once = bit_flags.set(target, flag)
    assert bit_flags.set(once, flag) == once


@given(targets, any_flags)
def test_unset_is_idempotent(target, flag):
    once = bit_flags.unset(target, flag)
    assert bit_flags.unset(once, flag) == once


@given(targets, flags)
def test_unset_undoes_set(target, flag):
    assume(bit_flags.has_not(target, flag))
    assert bit_flags.unset(bit_flags.set(target, flag), flag) == target


@given(targets, any_flags)
def test_set_then_has(target, flag):
    assert bit_flags.has(bit_flags.set(target, flag), flag)
    assert bit_flags.has_not(bit_flags.unset(target, flag), flag)


@given(targets)
def test_decompose_sums_to_target(target):
    parts = bit_flags.decompose(target)
    assert sum(parts) == target
    assert all(bit_flags.is_flag(part) for part in parts)
    assert parts == sorted(parts)
    assert len(parts) == len(frozenset(parts))
    assert len(parts) == bin(target).count("1")


@given(targets, flag_lists.flatmap(lambda fs: st.tuples(st.just(fs), st.permutations(fs))))
def test_set_all_ignores_order(target, pair):
    first, second = pair
    assert bit_flags.set_all(target, first) == bit_flags.set_all(target, second)
    assert bit_flags.unset_all(target, first) == bit_flags.unset_all(target, second)


@given(targets, flag_lists)
def test_set_all_matches_or(target, fs):
    expected = target
    for flag in fs:
        expected |= flag
    assert bit_flags.set_all(target, fs) == expected
    assert bit_flags.has_all(bit_flags.set_all(target, fs), fs)


@given(targets, st.lists(flags, min_size=1, max_size=12))
def test_has_all_implies_has_any(target, fs):
    if bit_flags.has_all(target, fs):
        assert bit_flags.has_any(target, fs)


@given(targets, st.sets(st.integers(min_value=0, max_value=127), max_size=16))
def test_to_list_labels_each_mapped_bit_in_key_order(target, positions):
    flag_map = {1 << position: f"bit {position}" for position in positions}
    labels = bit_flags.to_list(target, flag_map)

    mapped_and_set = [position for position in sorted(positions) if target >> position & 1]
    assert labels == [f"bit {position}" for position in mapped_and_set]
    assert len(labels) == len(frozenset(labels))
    assert bit_flags.to_string(target, flag_map).split(", ") == (labels or [""])
