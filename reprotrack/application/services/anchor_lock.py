from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone

from reprotrack.application.errors import (
    AnchorModeNotSupported,
    ConfirmationMethodRequired,
    MissingParty,
    PlanAlreadyCommitted,
)
from reprotrack.application.services.date_ladder import ANCHOR_CONFIDENCE, compute_ladder
from reprotrack.application.services.dates import parse_calendar_date
from reprotrack.domain.models.breeding_plan import BreedingPlan, CalculatedDates
from reprotrack.domain.models.species_profile import SpeciesProfile
from reprotrack.domain.value_objects.plan_status import PlanStatus
from reprotrack.domain.value_objects.reproduction import (
    AnchorMode,
    ConfidenceLevel,
    OvulationMethod,
)


@dataclass(slots=True)
class LockResult:
    anchor_mode: AnchorMode
    confidence: ConfidenceLevel
    calculated_dates: CalculatedDates


def _parse_anchor_mode(value: AnchorMode | str) -> AnchorMode:
    if isinstance(value, AnchorMode):
        return value
    try:
        return AnchorMode(str(value).strip().upper())
    except ValueError as exc:
        raise AnchorModeNotSupported(
            f"Unknown anchor mode: {value}", field="anchorMode"
        ) from exc


def parse_confirmation_method(value: OvulationMethod | str | None) -> OvulationMethod | None:
    if value is None or isinstance(value, OvulationMethod):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return OvulationMethod(text.upper())
    except ValueError as exc:
        raise ConfirmationMethodRequired(
            f"Unknown confirmation method: {value}", field="confirmationMethod"
        ) from exc


def default_lock_notes(mode: AnchorMode, anchor_date: date, method: OvulationMethod | None) -> str:
    if mode is AnchorMode.OVULATION and method is not None:
        return f"Ovulation confirmed by {method.label} on {anchor_date.isoformat()}"
    if mode is AnchorMode.BREEDING_DATE:
        return f"Anchored on breeding date {anchor_date.isoformat()}"
    return f"Anchored on observed cycle start {anchor_date.isoformat()}"


def lock_anchor(
    plan: BreedingPlan,
    profile: SpeciesProfile,
    anchor_mode: AnchorMode | str,
    anchor_date: object,
    confirmation_method: OvulationMethod | str | None = None,
    *,
    notes: str | None = None,
    test_result_id: str | None = None,
    now: datetime | None = None,
) -> LockResult:
    """Commit ``plan`` to a reproductive anchor and compute its date ladder.

    Every check runs before the plan is touched, so a failure leaves it
    unchanged. On success the plan moves PLANNING -> COMMITTED.
    """
    if plan.status is not PlanStatus.PLANNING:
        raise PlanAlreadyCommitted(
            f"Plan is already {plan.status.value}; the anchor can only be locked once",
            field="status",
        )
    if plan.dam_id is None:
        raise MissingParty("A dam is required before locking the plan", field="damId")
    if plan.sire_id is None:
        raise MissingParty("A sire is required before locking the plan", field="sireId")

    parsed_date = parse_calendar_date(anchor_date, "anchorDate")
    mode = _parse_anchor_mode(anchor_mode)
    if not profile.supports(mode):
        allowed = ", ".join(sorted(m.value for m in profile.available_anchor_modes))
        raise AnchorModeNotSupported(
            f"{profile.code} does not support the {mode.value} anchor (allowed: {allowed})",
            field="anchorMode",
        )

    method = parse_confirmation_method(confirmation_method)
    if mode is AnchorMode.OVULATION and method is None:
        raise ConfirmationMethodRequired(
            "Ovulation anchors need the confirmation method", field="confirmationMethod"
        )

    ladder = compute_ladder(profile, mode, parsed_date)
    confidence = ANCHOR_CONFIDENCE[mode]

    plan.repro_anchor_mode = mode
    if mode is AnchorMode.CYCLE_START:
        plan.cycle_start_observed = parsed_date
        plan.committed_cycle_start = parsed_date
        plan.cycle_start_confidence = confidence.value
        plan.ovulation_confidence = ConfidenceLevel.MEDIUM.value
        plan.expected_ovulation_offset = profile.ovulation_offset_days
    elif mode is AnchorMode.OVULATION:
        plan.ovulation_confirmed = parsed_date
        plan.ovulation_confirmed_method = method.value
        plan.ovulation_test_result_id = test_result_id
        plan.ovulation_confidence = confidence.value
        plan.committed_ovulation = parsed_date
        # The back-calculated cycle start is only an estimate
        plan.cycle_start_confidence = ConfidenceLevel.LOW.value
        plan.expected_ovulation_offset = profile.ovulation_offset_days
    else:
        plan.breed_date_actual = parsed_date
        plan.ovulation_confidence = confidence.value

    plan.apply_calculated_dates(ladder)
    plan.date_source_notes = notes or default_lock_notes(mode, parsed_date, method)
    plan.status = PlanStatus.COMMITTED
    plan.committed_at = now or datetime.now(timezone.utc)

    return LockResult(anchor_mode=mode, confidence=confidence, calculated_dates=ladder)
