"""Hourly condition graph aggregation.

Condition rows for one Isu are grouped into clock-hour buckets, each bucket is
scored, and the buckets are laid out over a 24-hour window with one entry per
hour. Hours without rows still get an entry, with no data point.

Bucketing only merges *consecutive* rows that share an hour. Rows are expected
in ascending timestamp order; a row that returns to an hour whose bucket has
already been closed opens a second bucket for that hour rather than joining
the first one.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from isucondition.services.condition_level import CONDITION_KEYS, parse_condition
from isucondition.services.timestamps import SECONDS_PER_HOUR, to_unix, truncate_hour

log = logging.getLogger(__name__)

GRAPH_WINDOW_HOURS = 24


@dataclass(frozen=True)
class ConditionScoreWeights:
    """Raw score added per row, by how many of its flags are set."""

    info: int = 2
    warning: int = 1
    critical: int = 3

    def for_bad_count(self, bad_count: int) -> int:
        if bad_count >= 3:
            return self.critical
        if bad_count >= 1:
            return self.warning
        return self.info


DEFAULT_WEIGHTS = ConditionScoreWeights()


@dataclass(frozen=True)
class ConditionRecord:
    jia_isu_uuid: str
    timestamp: int
    is_sitting: bool
    condition: str
    message: str = ""

    @classmethod
    def from_entity(cls, row: Any) -> "ConditionRecord":
        return cls(
            jia_isu_uuid=row.jia_isu_uuid,
            timestamp=to_unix(row.timestamp),
            is_sitting=bool(row.is_sitting),
            condition=row.condition,
            message=row.message,
        )


@dataclass(frozen=True)
class ConditionsPercentage:
    sitting: int
    is_broken: int
    is_dirty: int
    is_overweight: int


@dataclass(frozen=True)
class GraphDataPoint:
    score: int
    percentage: ConditionsPercentage


@dataclass(frozen=True)
class HourBucket:
    start_at: int
    data: GraphDataPoint
    condition_timestamps: tuple[int, ...]


@dataclass(frozen=True)
class GraphEntry:
    start_at: int
    end_at: int
    data: GraphDataPoint | None
    condition_timestamps: tuple[int, ...]


def calculate_data_point(
    records: Sequence[ConditionRecord],
    weights: ConditionScoreWeights = DEFAULT_WEIGHTS,
) -> GraphDataPoint:
    """Score one bucket of rows.

    Raises ``InvalidConditionFormatError`` on the first malformed condition.
    """
    flag_counts = dict.fromkeys(CONDITION_KEYS, 0)
    raw_score = 0
    sitting_count = 0
    for record in records:
        flags = parse_condition(record.condition)
        bad_count = 0
        for key, value in flags.items():
            if value:
                flag_counts[key] += 1
                bad_count += 1
        raw_score += weights.for_bad_count(bad_count)
        if record.is_sitting:
            sitting_count += 1

    total = len(records)
    return GraphDataPoint(
        score=raw_score * 100 // 3 // total,
        percentage=ConditionsPercentage(
            sitting=sitting_count * 100 // total,
            is_broken=flag_counts["is_broken"] * 100 // total,
            is_dirty=flag_counts["is_dirty"] * 100 // total,
            is_overweight=flag_counts["is_overweight"] * 100 // total,
        ),
    )


def build_hour_buckets(
    records: Iterable[ConditionRecord],
    weights: ConditionScoreWeights = DEFAULT_WEIGHTS,
) -> list[HourBucket]:
    buckets: list[HourBucket] = []
    for start_at, run in itertools.groupby(records, key=lambda r: truncate_hour(r.timestamp)):
        rows = tuple(run)
        buckets.append(
            HourBucket(
                start_at=start_at,
                data=calculate_data_point(rows, weights),
                condition_timestamps=tuple(r.timestamp for r in rows),
            )
        )
    return buckets


def select_window(buckets: Sequence[HourBucket], window_start: int, window_end: int) -> Sequence[HourBucket]:
    """Slice the buckets starting inside ``[window_start, window_end)``."""
    start_index = next((i for i, b in enumerate(buckets) if b.start_at >= window_start), len(buckets))
    end_index = next((i for i, b in enumerate(buckets) if b.start_at >= window_end), len(buckets))
    return buckets[start_index:end_index]


def fill_window(windowed: Sequence[HourBucket], window_start: int, hours: int = GRAPH_WINDOW_HOURS) -> list[GraphEntry]:
    entries: list[GraphEntry] = []
    index = 0
    for hour in range(hours):
        start_at = window_start + hour * SECONDS_PER_HOUR
        data = None
        timestamps: tuple[int, ...] = ()
        if index < len(windowed) and windowed[index].start_at == start_at:
            data = windowed[index].data
            timestamps = windowed[index].condition_timestamps
            index += 1
        entries.append(
            GraphEntry(
                start_at=start_at,
                end_at=start_at + SECONDS_PER_HOUR,
                data=data,
                condition_timestamps=timestamps,
            )
        )
    return entries


def generate_graph(
    records: Iterable[ConditionRecord],
    window_start: int,
    weights: ConditionScoreWeights = DEFAULT_WEIGHTS,
) -> list[GraphEntry]:
    """Build the 24 hourly graph entries starting at ``window_start``.

    ``records`` must be ordered by timestamp ascending and ``window_start``
    must already sit on an hour boundary. A malformed condition anywhere in
    ``records`` raises ``InvalidConditionFormatError`` and nothing is returned.
    """
    buckets = build_hour_buckets(records, weights)
    window_end = window_start + GRAPH_WINDOW_HOURS * SECONDS_PER_HOUR
    windowed = select_window(buckets, window_start, window_end)
    log.debug(
        "graph window %d: %d of %d buckets in range", window_start, len(windowed), len(buckets)
    )
    return fill_window(windowed, window_start)
