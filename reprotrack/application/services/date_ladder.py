from __future__ import annotations

from datetime import date

from reprotrack.domain.models.breeding_plan import (
    ANCHOR_FIELD_BY_MODE,
    BreedingPlan,
    CalculatedDates,
)
from reprotrack.domain.models.species_profile import SpeciesProfile
from reprotrack.domain.value_objects.reproduction import AnchorMode, ConfidenceLevel
from reprotrack.utils.datetime_tz import add_days

ANCHOR_CONFIDENCE: dict[AnchorMode, ConfidenceLevel] = {
    AnchorMode.CYCLE_START: ConfidenceLevel.MEDIUM,
    AnchorMode.OVULATION: ConfidenceLevel.HIGH,
    AnchorMode.BREEDING_DATE: ConfidenceLevel.MEDIUM,
}


def ladder_from_due_date(
    profile: SpeciesProfile,
    due_date: date,
    *,
    cycle_start: date | None,
    ovulation: date | None,
) -> CalculatedDates:
    placement_start = add_days(due_date, profile.placement_start_weeks_default * 7)
    return CalculatedDates(
        cycle_start=cycle_start,
        ovulation=ovulation,
        due_date=due_date,
        weaned_date=add_days(due_date, profile.care_duration_weeks * 7),
        placement_start=placement_start,
        placement_completed=add_days(placement_start, profile.placement_extended_weeks * 7),
    )


def compute_ladder(profile: SpeciesProfile, mode: AnchorMode, anchor_date: date) -> CalculatedDates:
    """Expected dates from cycle start through placement for one anchor."""
    offset = profile.ovulation_offset_days
    if mode is AnchorMode.CYCLE_START:
        cycle_start = anchor_date
        ovulation = add_days(anchor_date, offset)
    elif mode is AnchorMode.OVULATION:
        # Back-calculated estimate
        cycle_start = add_days(anchor_date, -offset)
        ovulation = anchor_date
    else:
        # Induced ovulators: breeding and ovulation coincide
        cycle_start = None
        ovulation = anchor_date
    due_date = add_days(ovulation, profile.gestation_days)
    return ladder_from_due_date(profile, due_date, cycle_start=cycle_start, ovulation=ovulation)


def ladder_for_plan(profile: SpeciesProfile, plan: BreedingPlan) -> CalculatedDates | None:
    """Recompute a plan's ladder from whatever anchor it currently holds."""
    mode = plan.repro_anchor_mode
    if mode is None:
        return None
    anchor_date = getattr(plan, ANCHOR_FIELD_BY_MODE[mode])
    if anchor_date is None:
        return None
    ladder = compute_ladder(profile, mode, anchor_date)
    if mode is AnchorMode.OVULATION and plan.cycle_start_observed is not None:
        ladder.cycle_start = plan.cycle_start_observed
    return ladder
