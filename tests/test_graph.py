"""Tests for hourly graph aggregation."""
from datetime import datetime, timezone

import pytest

from isucondition.core.errors import InvalidConditionFormatError
from isucondition.models.entities import IsuCondition
from isucondition.services.graph import (
    ConditionRecord,
    ConditionScoreWeights,
    ConditionsPercentage,
    GraphDataPoint,
    build_hour_buckets,
    calculate_data_point,
    generate_graph,
)

HOUR = 3600
DAY = 24 * HOUR
WINDOW_START = 1_699_999_200  # 2023-11-14 22:00:00 UTC

INFO = "is_broken=false,is_dirty=false,is_overweight=false"
BROKEN = "is_broken=true,is_dirty=false,is_overweight=false"
DIRTY = "is_broken=false,is_dirty=true,is_overweight=false"
CRITICAL = "is_broken=true,is_dirty=true,is_overweight=true"


def record(timestamp: int, condition: str = INFO, is_sitting: bool = False) -> ConditionRecord:
    return ConditionRecord(
        jia_isu_uuid="isu-1",
        timestamp=timestamp,
        is_sitting=is_sitting,
        condition=condition,
        message="",
    )


def test_empty_input_yields_24_empty_hours():
    entries = generate_graph([], WINDOW_START)

    assert len(entries) == 24
    assert all(entry.data is None for entry in entries)
    assert all(entry.condition_timestamps == () for entry in entries)
    assert entries[0].start_at == WINDOW_START
    assert entries[-1].end_at == WINDOW_START + DAY


def test_entries_are_contiguous_hours():
    records = [record(WINDOW_START + 5 * HOUR + 30), record(WINDOW_START + 17 * HOUR + 59 * 60)]
    entries = generate_graph(records, WINDOW_START)

    assert len(entries) == 24
    for entry in entries:
        assert entry.end_at == entry.start_at + HOUR
    for current, following in zip(entries, entries[1:]):
        assert current.end_at == following.start_at
    assert [i for i, e in enumerate(entries) if e.data is not None] == [5, 17]


def test_single_warning_record_scores_33():
    entries = generate_graph([record(WINDOW_START + 60, BROKEN)], WINDOW_START)

    assert entries[0].data == GraphDataPoint(
        score=33,
        percentage=ConditionsPercentage(sitting=0, is_broken=100, is_dirty=0, is_overweight=0),
    )
    assert entries[0].condition_timestamps == (WINDOW_START + 60,)


def test_weights_are_not_monotonic_in_severity():
    assert calculate_data_point([record(0, INFO)]).score == 66
    assert calculate_data_point([record(0, BROKEN)]).score == 33
    assert calculate_data_point([record(0, CRITICAL)]).score == 100


def test_bucket_score_and_percentages_truncate():
    rows = [
        record(WINDOW_START + 10, INFO, is_sitting=True),
        record(WINDOW_START + 20, DIRTY),
        record(WINDOW_START + 30, CRITICAL, is_sitting=True),
    ]
    data = calculate_data_point(rows)

    # raw score 2 + 1 + 3 = 6 -> 6 * 100 / 3 / 3 = 66.6
    assert data.score == 66
    assert data.percentage == ConditionsPercentage(sitting=66, is_broken=33, is_dirty=66, is_overweight=33)


def test_custom_weights():
    weights = ConditionScoreWeights(info=3, warning=2, critical=1)
    assert calculate_data_point([record(0, INFO)], weights).score == 100
    assert calculate_data_point([record(0, DIRTY)], weights).score == 66
    assert calculate_data_point([record(0, CRITICAL)], weights).score == 33


def test_records_in_same_hour_share_a_bucket():
    rows = [record(WINDOW_START + HOUR + s) for s in (0, 1200, 3599)]
    entries = generate_graph(rows, WINDOW_START)

    assert entries[0].data is None
    assert entries[1].condition_timestamps == tuple(r.timestamp for r in rows)
    assert entries[2].data is None


def test_only_consecutive_rows_are_merged():
    rows = [record(WINDOW_START + 10), record(WINDOW_START + HOUR + 10), record(WINDOW_START + 20)]
    buckets = build_hour_buckets(rows)

    assert [b.start_at for b in buckets] == [WINDOW_START, WINDOW_START + HOUR, WINDOW_START]
    assert buckets[0].condition_timestamps == (WINDOW_START + 10,)
    assert buckets[2].condition_timestamps == (WINDOW_START + 20,)

    entries = generate_graph(rows, WINDOW_START)
    assert entries[0].condition_timestamps == (WINDOW_START + 10,)
    assert entries[1].condition_timestamps == (WINDOW_START + HOUR + 10,)


def test_window_is_half_open():
    rows = [
        record(WINDOW_START - 1),
        record(WINDOW_START),
        record(WINDOW_START + DAY - 1),
        record(WINDOW_START + DAY),
    ]
    entries = generate_graph(rows, WINDOW_START)

    assert len(entries) == 24
    all_timestamps = [ts for entry in entries for ts in entry.condition_timestamps]
    assert all_timestamps == [WINDOW_START, WINDOW_START + DAY - 1]


def test_malformed_condition_aborts_whole_graph():
    rows = [
        record(WINDOW_START + 10, INFO),
        record(WINDOW_START + 20, "is_dirty=false,is_broken=false,is_overweight=false"),
    ]
    with pytest.raises(InvalidConditionFormatError):
        generate_graph(rows, WINDOW_START)


def test_malformed_condition_outside_window_still_aborts():
    rows = [
        record(WINDOW_START - 5 * DAY, "is_broken=maybe,is_dirty=false,is_overweight=false"),
        record(WINDOW_START + 10, INFO),
    ]
    with pytest.raises(InvalidConditionFormatError):
        generate_graph(rows, WINDOW_START)


def test_generate_graph_is_idempotent():
    rows = [record(WINDOW_START + i * 1500, (INFO, BROKEN, CRITICAL)[i % 3], i % 2 == 0) for i in range(60)]
    assert generate_graph(rows, WINDOW_START) == generate_graph(rows, WINDOW_START)


def test_record_from_naive_entity_is_read_as_utc():
    row = IsuCondition(
        jia_isu_uuid="isu-1",
        timestamp=datetime(2023, 11, 14, 22, 30, 0),
        is_sitting=True,
        condition=INFO,
        message="hello",
    )
    converted = ConditionRecord.from_entity(row)

    assert converted.timestamp == int(datetime(2023, 11, 14, 22, 30, tzinfo=timezone.utc).timestamp())
    assert converted.is_sitting is True
    assert converted.message == "hello"
