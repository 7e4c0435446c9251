from __future__ import annotations

from datetime import date, timedelta

import pytest

from reprotrack.application.services.cycle_length import (
    blend_history,
    estimate_cycle_length,
    recent_gaps,
)
from reprotrack.application.services.species_biology import default_biology_table
from reprotrack.domain.value_objects.reproduction import CycleLengthSource

DOG = default_biology_table.get("DOG")


def starts_with_gaps(*gaps: int, first: date = date(2024, 1, 1)) -> list[date]:
    dates = [first]
    for gap in gaps:
        dates.append(dates[-1] + timedelta(days=gap))
    return dates


def test_no_history_uses_species_default():
    estimate = estimate_cycle_length(DOG, [])
    assert estimate.cycle_length_days == 180
    assert estimate.source is CycleLengthSource.BIOLOGY
    assert estimate.gaps_used_days == []
    assert estimate.warning_conflict is False


def test_single_start_has_no_gap_and_falls_back_to_biology():
    estimate = estimate_cycle_length(DOG, [date(2026, 1, 10)])
    assert estimate.source is CycleLengthSource.BIOLOGY
    assert estimate.cycle_length_days == 180


@pytest.mark.parametrize(
    ("gaps", "expected"),
    [
        ((160,), 170),
        ((150, 150), 160),
        ((165, 165, 165), 165),
        ((100, 150, 160, 170), 160),
    ],
)
def test_history_is_blended_with_species_default(gaps, expected):
    estimate = estimate_cycle_length(DOG, starts_with_gaps(*gaps))
    assert estimate.source is CycleLengthSource.HISTORY
    assert estimate.cycle_length_days == expected


def test_only_three_most_recent_gaps_are_used():
    estimate = estimate_cycle_length(DOG, starts_with_gaps(100, 150, 160, 170))
    assert estimate.gaps_used_days == [150, 160, 170]


def test_half_values_round_up():
    # 161 * 0.5 + 180 * 0.5 = 170.5
    assert blend_history([161], 180) == 171


def test_override_wins_over_history():
    estimate = estimate_cycle_length(DOG, starts_with_gaps(180, 180, 180), override_days=200)
    assert estimate.cycle_length_days == 200
    assert estimate.source is CycleLengthSource.OVERRIDE
    assert estimate.gaps_used_days == [180, 180, 180]


def test_non_positive_override_is_ignored():
    estimate = estimate_cycle_length(DOG, starts_with_gaps(180, 180, 180), override_days=0)
    assert estimate.source is CycleLengthSource.HISTORY
    assert estimate.cycle_length_days == 180


def test_override_conflict_flagged_above_ratio():
    history = starts_with_gaps(160, 160, 160)
    assert estimate_cycle_length(DOG, history, override_days=200).warning_conflict is True


def test_override_conflict_threshold_is_strict():
    # 192 is exactly 20% above 160
    history = starts_with_gaps(160, 160, 160)
    assert estimate_cycle_length(DOG, history, override_days=192).warning_conflict is False


def test_override_without_history_never_conflicts():
    estimate = estimate_cycle_length(DOG, [], override_days=365)
    assert estimate.warning_conflict is False
    assert estimate.cycle_length_days == 365


def test_recent_gaps_limit():
    starts = starts_with_gaps(10, 20, 30, 40, 50)
    assert recent_gaps(starts) == [30, 40, 50]
    assert recent_gaps(starts, limit=2) == [40, 50]
