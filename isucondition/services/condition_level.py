"""Condition string parsing and level classification.

A condition string carries three boolean sensor flags in a fixed layout::

    is_broken=false,is_dirty=true,is_overweight=false

``classify_condition`` deliberately does not parse it: it only counts the
``=true`` occurrences, so it also answers for strings that would fail
``is_valid_condition_format``.
"""

from __future__ import annotations

import re

from isucondition.core.errors import InvalidConditionFormatError, UnexpectedCountError
from isucondition.models.enums import ConditionLevel

CONDITION_KEYS: tuple[str, ...] = ("is_broken", "is_dirty", "is_overweight")

_CONDITION_PATTERN = re.compile(
    ",".join(rf"{key}=(true|false)" for key in CONDITION_KEYS)
)

_LEVEL_BY_COUNT: dict[int, ConditionLevel] = {
    0: ConditionLevel.INFO,
    1: ConditionLevel.WARNING,
    2: ConditionLevel.WARNING,
    3: ConditionLevel.CRITICAL,
}


def classify_condition(condition: str) -> ConditionLevel:
    """Map a condition string to its level by counting ``=true`` flags.

    Raises ``UnexpectedCountError`` when the count falls outside 0-3.
    """
    count = condition.count("=true")
    try:
        return _LEVEL_BY_COUNT[count]
    except KeyError:
        raise UnexpectedCountError(condition, count) from None


def is_valid_condition_format(condition: str) -> bool:
    return _CONDITION_PATTERN.fullmatch(condition) is not None


def parse_condition(condition: str) -> dict[str, bool]:
    """Return the three flags keyed by name, in their fixed order."""
    match = _CONDITION_PATTERN.fullmatch(condition)
    if match is None:
        raise InvalidConditionFormatError(condition)
    return {key: value == "true" for key, value in zip(CONDITION_KEYS, match.groups())}
