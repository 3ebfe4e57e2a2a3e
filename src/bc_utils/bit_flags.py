"""Integer-backed sets of named boolean states.

A flag set is a non-negative ``int`` whose bits each stand for one named
condition. Flags are positive integers, normally powers of two. Every
function here is pure: "mutations" return a new integer.

Labels come from a flag map, a ``{flag: label}`` mapping supplied by the
caller on each call::

    FLAGS = {1: "Ready", 2: "In Progress", 4: "Completed", 32: "Archived", 64: "Ready to Archive"}

    state = bit_flags.set(36, 64)          # 100
    bit_flags.decompose(state)             # [4, 32, 64]
    bit_flags.highest(state, FLAGS)        # "Ready to Archive"
    bit_flags.to_string(state, FLAGS)      # "Completed, Archived, Ready to Archive"

Bits that have no entry in the flag map are skipped by ``to_list`` and
``to_string``; ``highest`` and ``lowest`` raise ``FlagLookupError`` instead.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from bc_utils.errors import FlagLookupError, InvalidArgument

FlagMap = Mapping[int, str]

SEPARATOR = ", "


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_target(target: int) -> int:
    if not _is_int(target) or target < 0:
        raise InvalidArgument(f"target must be a non-negative integer, got {target!r}", received=target)
    return int(target)


def _check_flag(flag: int) -> int:
    if not _is_int(flag) or flag <= 0:
        raise InvalidArgument(f"flag must be a positive integer, got {flag!r}", received=flag)
    return int(flag)


def _check_flags(flags: Iterable[int]) -> list[int]:
    return [_check_flag(flag) for flag in flags]


def is_flag(value: object) -> bool:
    """Return True if ``value`` is a positive power of two."""
    return _is_int(value) and value > 0 and value & (value - 1) == 0  # type: ignore[operator]


def set(target: int, flag: int) -> int:  # noqa: A001
    """
    Turn on the bits of ``flag`` in ``target``.

    Examples:
        set(36, 64) -> 100    (0b00100100 | 0b01000000 == 0b01100100)
        set(100, 64) -> 100

    Raises:
        InvalidArgument: If ``target`` is negative or ``flag`` is not positive
    """
    return _check_target(target) | _check_flag(flag)


def unset(target: int, flag: int) -> int:
    """
    Turn off the bits of ``flag`` in ``target``.

    Examples:
        unset(100, 64) -> 36
        unset(36, 64) -> 36
    """
    return _check_target(target) & ~_check_flag(flag)


def set_all(target: int, flags: Iterable[int]) -> int:
    """Set every flag in ``flags``. The order of ``flags`` does not matter."""
    result = _check_target(target)
    for flag in _check_flags(flags):
        result |= flag
    return result


def unset_all(target: int, flags: Iterable[int]) -> int:
    """Unset every flag in ``flags``. The order of ``flags`` does not matter."""
    result = _check_target(target)
    for flag in _check_flags(flags):
        result &= ~flag
    return result


def has(target: int, flag: int) -> bool:
    """True if every bit of ``flag`` is on in ``target``."""
    flag = _check_flag(flag)
    return _check_target(target) & flag == flag


def has_not(target: int, flag: int) -> bool:
    return not has(target, flag)


def has_all(target: int, flags: Iterable[int]) -> bool:
    """True if ``target`` has each of ``flags``. An empty ``flags`` is True."""
    target = _check_target(target)
    return all(has(target, flag) for flag in _check_flags(flags))


def has_any(target: int, flags: Iterable[int]) -> bool:
    """True if ``target`` has at least one of ``flags``. An empty ``flags`` is False."""
    target = _check_target(target)
    return any(has(target, flag) for flag in _check_flags(flags))


def decompose(target: int) -> list[int]:
    """
    Split ``target`` into the powers of two that sum to it, ascending.

    Examples:
        decompose(100) -> [4, 32, 64]
        decompose(15) -> [1, 2, 4, 8]
        decompose(0) -> []
    """
    remaining = _check_target(target)
    bits: list[int] = []
    while remaining:
        lowest_bit = remaining & -remaining
        bits.append(lowest_bit)
        remaining ^= lowest_bit
    return bits


def _label(target: int, flag: int, flag_map: FlagMap) -> str:
    try:
        return flag_map[flag]
    except KeyError:
        raise FlagLookupError(f"flag {flag} of {target} has no label", target=target, flag=flag) from None


def highest(target: int, flag_map: FlagMap) -> str:
    """
    Label of the highest bit set in ``target``.

    Raises:
        FlagLookupError: If ``target`` is 0 or its highest bit is not in ``flag_map``
    """
    target = _check_target(target)
    if target == 0:
        raise FlagLookupError("no flags are set", target=target)
    return _label(target, 1 << (target.bit_length() - 1), flag_map)


def lowest(target: int, flag_map: FlagMap) -> str:
    """
    Label of the lowest bit set in ``target``.

    Raises:
        FlagLookupError: If ``target`` is 0 or its lowest bit is not in ``flag_map``
    """
    target = _check_target(target)
    if target == 0:
        raise FlagLookupError("no flags are set", target=target)
    return _label(target, target & -target, flag_map)


def to_list(target: int, flag_map: FlagMap) -> list[str]:
    """Labels of the bits set in ``target``, lowest bit first. Unmapped bits are skipped."""
    return [flag_map[bit] for bit in decompose(target) if bit in flag_map]


def to_string(target: int, flag_map: FlagMap) -> str:
    """
    Comma separated labels of ``target``.

    Examples:
        to_string(100, {4: "Completed", 64: "Ready to Archive"}) -> "Completed, Ready to Archive"
        to_string(0, {1: "Ready"}) -> ""
    """
    return SEPARATOR.join(to_list(target, flag_map))


def from_list(labels: Iterable[str], flag_map: FlagMap) -> int:
    """
    Combine the flags whose labels appear in ``labels``.

    Raises:
        FlagLookupError: If a label is not in ``flag_map``
    """
    result = 0
    for label in labels:
        matches = [flag for flag, name in flag_map.items() if name == label]
        if not matches:
            raise FlagLookupError(f"unknown flag label {label!r}", flag=label)
        for flag in matches:
            result |= _check_flag(flag)
    return result
