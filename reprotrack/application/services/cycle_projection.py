from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from reprotrack.domain.models.species_profile import SpeciesProfile
from reprotrack.domain.value_objects.reproduction import ProjectionSource
from reprotrack.utils.datetime_tz import add_days, add_months

DEFAULT_WINDOW_HALF_WIDTH_DAYS = 2
DEFAULT_TESTING_LEAD_DAYS = 3


@dataclass(slots=True)
class OvulationWindow:
    earliest: date
    most_likely: date
    latest: date


@dataclass(slots=True)
class NextCycleProjection:
    projected_heat_start: date
    projected_ovulation_window: OvulationWindow
    recommended_testing_start: date
    source: ProjectionSource


@dataclass(slots=True)
class ProjectedCycleStart:
    cycle_start: date
    source: ProjectionSource
    explain: dict = field(default_factory=dict)


def ovulation_window(most_likely: date, half_width_days: int) -> OvulationWindow:
    return OvulationWindow(
        earliest=add_days(most_likely, -half_width_days),
        most_likely=most_likely,
        latest=add_days(most_likely, half_width_days),
    )


def _is_juvenile(profile: SpeciesProfile, birth_date: date | None, today: date) -> bool:
    if birth_date is None:
        return False
    return today < add_days(birth_date, profile.juvenile_first_cycle_max_days)


def project_next_cycle(
    profile: SpeciesProfile,
    last_cycle_start: date | None,
    cycle_length_days: int,
    today: date,
    *,
    birth_date: date | None = None,
    window_half_width_days: int = DEFAULT_WINDOW_HALF_WIDTH_DAYS,
    testing_lead_days: int = DEFAULT_TESTING_LEAD_DAYS,
) -> NextCycleProjection:
    """Project the next heat and the ovulation window.

    With a recorded cycle start, the heat is ``last + cycle length`` and the
    most likely ovulation is ``last + ovulation offset``. Without history the
    projection is still produced, anchored on today (BIOLOGY) or on the
    expected first heat for young animals (JUVENILE).
    """
    if last_cycle_start is not None:
        source = ProjectionSource.HISTORY
        heat_start = add_days(last_cycle_start, cycle_length_days)
        most_likely = add_days(last_cycle_start, profile.ovulation_offset_days)
    elif _is_juvenile(profile, birth_date, today):
        source = ProjectionSource.JUVENILE
        expected_first_heat = add_days(birth_date, profile.juvenile_first_cycle_likely_days)
        heat_start = max(today, expected_first_heat)
        most_likely = add_days(heat_start, profile.ovulation_offset_days)
    else:
        source = ProjectionSource.BIOLOGY
        heat_start = add_days(today, cycle_length_days)
        most_likely = add_days(today, profile.ovulation_offset_days)

    window = ovulation_window(most_likely, window_half_width_days)
    return NextCycleProjection(
        projected_heat_start=heat_start,
        projected_ovulation_window=window,
        recommended_testing_start=add_days(window.earliest, -testing_lead_days),
        source=source,
    )


def project_upcoming_cycle_starts(
    profile: SpeciesProfile,
    first_projected: date,
    cycle_length_days: int,
    today: date,
    source: ProjectionSource,
    *,
    horizon_months: int = 12,
    max_count: int = 6,
) -> list[ProjectedCycleStart]:
    """Evenly spaced future cycle starts within the horizon.

    Starts already behind ``today`` are rolled forward by whole cycles.
    """
    if cycle_length_days <= 0 or max_count <= 0:
        return []
    horizon_end = add_months(today, horizon_months)
    current = first_projected
    if current < today:
        behind = (today - current).days
        cycles_behind = -(-behind // cycle_length_days)
        current = add_days(current, cycles_behind * cycle_length_days)

    projected: list[ProjectedCycleStart] = []
    while current <= horizon_end and len(projected) < max_count:
        projected.append(
            ProjectedCycleStart(
                cycle_start=current,
                source=source,
                explain={"species": profile.code, "cycleLengthDays": cycle_length_days},
            )
        )
        current = add_days(current, cycle_length_days)
    return projected
