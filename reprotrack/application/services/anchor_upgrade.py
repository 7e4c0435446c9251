from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from reprotrack.application.errors import (
    ConfirmationMethodRequired,
    OvulationBeforeCycleStart,
    PlanNotCommitted,
    UpgradeNotSupported,
)
from reprotrack.application.services.anchor_lock import parse_confirmation_method
from reprotrack.application.services.date_ladder import compute_ladder
from reprotrack.application.services.dates import parse_calendar_date
from reprotrack.domain.models.breeding_plan import BreedingPlan, CalculatedDates
from reprotrack.domain.models.species_profile import SpeciesProfile
from reprotrack.domain.value_objects.plan_status import PlanStatus
from reprotrack.domain.value_objects.reproduction import (
    AnchorMode,
    ConfidenceLevel,
    OvulationMethod,
)
from reprotrack.utils.datetime_tz import days_between


@dataclass(slots=True)
class OvulationVariance:
    variance: int
    analysis: str
    actual_offset: int
    expected_offset: int


@dataclass(slots=True)
class UpgradeResult:
    from_mode: AnchorMode
    to_mode: AnchorMode
    variance: OvulationVariance
    calculated_dates: CalculatedDates
    placement_shift_days: int


def analyse_variance(actual_offset: int, expected_offset: int) -> OvulationVariance:
    variance = actual_offset - expected_offset
    if variance == 0:
        analysis = "on-time"
    elif variance > 0:
        analysis = "late"
    else:
        analysis = "early"
    return OvulationVariance(
        variance=variance,
        analysis=analysis,
        actual_offset=actual_offset,
        expected_offset=expected_offset,
    )


def _upgrade_notes(ovulation_date: date, method: OvulationMethod, variance: OvulationVariance) -> str:
    text = (
        f"Ovulation confirmed by {method.label} on {ovulation_date.isoformat()} "
        f"(day {variance.actual_offset} of cycle"
    )
    if variance.variance == 0:
        return text + ", as expected)"
    return text + f", {abs(variance.variance)} days {variance.analysis})"


def upgrade_to_ovulation(
    plan: BreedingPlan,
    profile: SpeciesProfile,
    ovulation_date: object,
    confirmation_method: OvulationMethod | str | None,
    *,
    notes: str | None = None,
    test_result_id: str | None = None,
) -> UpgradeResult:
    """Move a CYCLE_START-anchored plan onto a confirmed ovulation date.

    Recomputes the ladder from the ovulation and reports how far the observed
    ovulation fell from the species' expected offset.
    """
    if plan.status is not PlanStatus.COMMITTED:
        raise PlanNotCommitted(
            f"Only COMMITTED plans can be upgraded (current: {plan.status.value})",
            field="status",
        )
    if plan.repro_anchor_mode is not AnchorMode.CYCLE_START:
        current = plan.repro_anchor_mode.value if plan.repro_anchor_mode else None
        raise UpgradeNotSupported(
            f"Only CYCLE_START anchors can be upgraded (current: {current})",
            field="reproAnchorMode",
        )
    if not profile.supports_anchor_upgrade:
        raise UpgradeNotSupported(
            f"{profile.code} does not support ovulation upgrades", field="species"
        )

    parsed_date = parse_calendar_date(ovulation_date, "ovulationDate")
    cycle_start = plan.cycle_start_observed
    if cycle_start is None:
        raise UpgradeNotSupported(
            "Plan has no observed cycle start to upgrade from", field="cycleStartObserved"
        )
    if parsed_date < cycle_start:
        raise OvulationBeforeCycleStart(
            f"Ovulation date {parsed_date.isoformat()} is before the cycle start "
            f"{cycle_start.isoformat()}",
            field="ovulationDate",
        )

    method = parse_confirmation_method(confirmation_method)
    if method is None:
        raise ConfirmationMethodRequired(
            "Ovulation upgrades need the confirmation method", field="confirmationMethod"
        )

    variance = analyse_variance(
        days_between(cycle_start, parsed_date), profile.ovulation_offset_days
    )
    previous = plan.calculated_dates() or compute_ladder(
        profile, AnchorMode.CYCLE_START, cycle_start
    )
    ladder = compute_ladder(profile, AnchorMode.OVULATION, parsed_date)
    # The observed cycle start stays authoritative over the back-calculated one
    ladder.cycle_start = cycle_start

    plan.repro_anchor_mode = AnchorMode.OVULATION
    plan.ovulation_confirmed = parsed_date
    plan.committed_ovulation = parsed_date
    plan.ovulation_confirmed_method = method.value
    plan.ovulation_test_result_id = test_result_id
    plan.ovulation_confidence = ConfidenceLevel.HIGH.value
    plan.expected_ovulation_offset = variance.expected_offset
    plan.actual_ovulation_offset = variance.actual_offset
    plan.variance_from_expected = variance.variance
    plan.apply_calculated_dates(ladder)
    plan.date_source_notes = notes or _upgrade_notes(parsed_date, method, variance)

    return UpgradeResult(
        from_mode=AnchorMode.CYCLE_START,
        to_mode=AnchorMode.OVULATION,
        variance=variance,
        calculated_dates=ladder,
        placement_shift_days=days_between(previous.placement_start, ladder.placement_start),
    )
