from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from isucondition.core.errors import UnexpectedCountError
from isucondition.models.entities import Isu, IsuCondition
from isucondition.models.enums import ConditionLevel
from isucondition.services.condition_level import classify_condition
from isucondition.services.timestamps import to_unix

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnnotatedCondition:
    jia_isu_uuid: str
    isu_name: str
    timestamp: int
    is_sitting: bool
    condition: str
    condition_level: ConditionLevel
    message: str


def parse_condition_levels(raw: str) -> set[ConditionLevel]:
    """Turn ``info,critical`` into levels; unknown names are ignored."""
    known = {level.value: level for level in ConditionLevel}
    return {known[name] for name in raw.split(",") if name in known}


def annotate(row: IsuCondition, isu_name: str, level: ConditionLevel) -> AnnotatedCondition:
    return AnnotatedCondition(
        jia_isu_uuid=row.jia_isu_uuid,
        isu_name=isu_name,
        timestamp=to_unix(row.timestamp),
        is_sitting=bool(row.is_sitting),
        condition=row.condition,
        condition_level=level,
        message=row.message,
    )


def annotate_conditions(
    rows: Iterable[IsuCondition],
    isu_name: str,
    levels: set[ConditionLevel],
    limit: int,
) -> list[AnnotatedCondition]:
    """Tag rows with their level, keep the requested levels, cap at ``limit``.

    Best effort: a row whose level cannot be computed is skipped instead of
    failing the whole listing.
    """
    annotated: list[AnnotatedCondition] = []
    for row in rows:
        try:
            level = classify_condition(row.condition)
        except UnexpectedCountError as exc:
            log.warning("Skipping condition %s of isu %s: %s", row.id, row.jia_isu_uuid, exc)
            continue
        if level in levels:
            annotated.append(annotate(row, isu_name, level))
    return annotated[:limit]


@dataclass(frozen=True)
class TrendCondition:
    isu_id: int
    timestamp: int


@dataclass
class CharacterTrend:
    character: str
    info: list[TrendCondition]
    warning: list[TrendCondition]
    critical: list[TrendCondition]


def build_character_trend(
    character: str,
    latest: Iterable[tuple[Isu, IsuCondition]],
) -> CharacterTrend:
    """Bucket each Isu's latest condition by level, newest first.

    Raises ``UnexpectedCountError`` on the first unclassifiable condition.
    """
    by_level: dict[ConditionLevel, list[TrendCondition]] = {level: [] for level in ConditionLevel}
    for isu, condition in latest:
        level = classify_condition(condition.condition)
        by_level[level].append(TrendCondition(isu_id=isu.id, timestamp=to_unix(condition.timestamp)))
    for items in by_level.values():
        items.sort(key=lambda item: item.timestamp, reverse=True)
    return CharacterTrend(
        character=character,
        info=by_level[ConditionLevel.INFO],
        warning=by_level[ConditionLevel.WARNING],
        critical=by_level[ConditionLevel.CRITICAL],
    )
