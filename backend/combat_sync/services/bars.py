"""Relative and absolute edits to a resource bar (HP/MP/PE).

A raw value is either an absolute literal (``"20"``) that replaces the
targeted number, or a signed delta (``"+5"``, ``"-3"``) applied to it.
"""

import re

from combat_sync.errors import InvalidInput
from combat_sync.models import MAX_BAR_VALUE, Bar

VALUE_CURRENT = 'current'
VALUE_MAX = 'max'
VALUE_TYPES = (VALUE_CURRENT, VALUE_MAX)

# Digit count is capped so int() never sees an absurdly long literal
_BAR_VALUE = re.compile(r'[+-]?[0-9]{1,9}')


def is_bar_value_legit(raw_value) -> bool:
    return isinstance(raw_value, str) and _BAR_VALUE.fullmatch(raw_value) is not None


def compute_new_bar(bar: Bar, value_type: str, raw_value: str) -> Bar:
    """Return the bar that results from applying ``raw_value`` to ``bar``.

    Raises InvalidInput when ``raw_value`` is not a number or signed delta,
    when ``value_type`` is neither ``current`` nor ``max``, or when the
    result would exceed MAX_BAR_VALUE.
    """
    if value_type not in VALUE_TYPES:
        raise InvalidInput(f"unknown value type {value_type!r}")
    if not is_bar_value_legit(raw_value):
        raise InvalidInput(f"{raw_value!r} is not a valid bar value")

    target = bar.current_value if value_type == VALUE_CURRENT else bar.max_value
    sign = raw_value[0]
    if sign == '+':
        computed = target + int(raw_value[1:])
    elif sign == '-':
        computed = target - int(raw_value[1:])
    else:
        computed = int(raw_value)
    new_value = max(computed, 0)
    if new_value > MAX_BAR_VALUE:
        raise InvalidInput(f"bar value {new_value} exceeds {MAX_BAR_VALUE}")

    if value_type == VALUE_MAX:
        # Shrinking max drags current down with it, never up
        return Bar(current_value=min(bar.current_value, new_value), max_value=new_value)
    return Bar(current_value=min(new_value, bar.max_value), max_value=bar.max_value)
