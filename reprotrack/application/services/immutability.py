from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from reprotrack.application.errors import (
    DateSequenceViolation,
    DownstreamDependency,
    GestationRangeViolation,
    ImmutableField,
    InvalidStatusTransition,
    PlanCanceled,
)
from reprotrack.application.services.species_biology import SpeciesBiologyTable
from reprotrack.domain.models.breeding_plan import (
    ACTUAL_DATE_FIELDS,
    DATE_FIELDS,
    TOLERANCE_BASELINES,
    BreedingPlan,
)
from reprotrack.domain.value_objects.plan_status import PlanStatus
from reprotrack.utils.datetime_tz import days_between

GESTATION_REJECT = "reject"
GESTATION_WARN = "warn"

# Fields that stay editable only while the plan is still being planned
PLANNING_ONLY_FIELDS = frozenset({"dam_id", "sire_id"})

# Fields whose value must be cleared before the key field can be cleared
DOWNSTREAM: dict[str, tuple[str, ...]] = {
    "cycle_start_observed": ("ovulation_confirmed",) + ACTUAL_DATE_FIELDS[1:],
    "ovulation_confirmed": ACTUAL_DATE_FIELDS[1:],
    **{name: ACTUAL_DATE_FIELDS[i + 1 :] for i, name in enumerate(ACTUAL_DATE_FIELDS)},
}

_BRED_FROZEN = frozenset({"cycle_start_observed", "ovulation_confirmed", "cycle_start_date_actual"})
_BIRTHED_FROZEN = _BRED_FROZEN | {"breed_date_actual", "birth_date_actual"}

FROZEN_BY_STATUS: dict[PlanStatus, frozenset[str]] = {
    PlanStatus.PLANNING: frozenset(),
    PlanStatus.COMMITTED: frozenset(),
    PlanStatus.BRED: _BRED_FROZEN,
    PlanStatus.BIRTHED: _BIRTHED_FROZEN,
    PlanStatus.WEANED: _BIRTHED_FROZEN,
    PlanStatus.PLACEMENT: _BIRTHED_FROZEN | {"weaned_date_actual"},
    PlanStatus.COMPLETE: frozenset(DATE_FIELDS),
}

# Maximum shift in days from the field's recorded baseline
TOLERANCE_BY_STATUS: dict[PlanStatus, dict[str, int]] = {
    PlanStatus.COMMITTED: {"cycle_start_observed": 3, "ovulation_confirmed": 2},
    PlanStatus.BRED: {"breed_date_actual": 2},
    PlanStatus.WEANED: {"weaned_date_actual": 7},
}


def camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def capture_baselines(plan: BreedingPlan, before: BreedingPlan) -> None:
    """Record the tolerance baseline of every field the plan's statuses limit.

    A baseline is written once: from the value held before the update, or
    from the new value when the field was empty until now.
    """
    for status in (before.status, plan.status):
        for name in TOLERANCE_BY_STATUS.get(status, {}):
            baseline = TOLERANCE_BASELINES[name]
            if getattr(plan, baseline) is not None:
                continue
            value = getattr(before, name)
            setattr(plan, baseline, value if value is not None else getattr(plan, name))


class ImmutabilityGuard:
    """Phase-scoped rules for field updates on a breeding plan.

    ``evaluate`` raises on the first violated rule and otherwise returns the
    warnings to surface to the caller. It never mutates the plan.

    When the same update also moves the status, date fields must satisfy the
    rules of both the current and the target status: a field frozen by either
    is frozen, and the narrower tolerance window applies. Tolerances are
    measured from the field's baseline (see ``capture_baselines``) so a run of
    small edits cannot walk a date past its window.
    """

    def __init__(self, biology: SpeciesBiologyTable, *, gestation_policy: str = GESTATION_REJECT) -> None:
        if gestation_policy not in (GESTATION_REJECT, GESTATION_WARN):
            raise ValueError(f"Unknown gestation policy: {gestation_policy}")
        self.biology = biology
        self.gestation_policy = gestation_policy

    def evaluate(self, plan: BreedingPlan, changes: Mapping[str, Any]) -> list[str]:
        if plan.status is PlanStatus.CANCELED:
            field = next(iter(changes), None)
            raise PlanCanceled(
                "Plan is canceled and can no longer be changed",
                field=camel(field) if field else None,
            )
        if "repro_anchor_mode" in changes and changes["repro_anchor_mode"] != plan.repro_anchor_mode:
            raise ImmutableField(
                "The anchor mode can only change through the lock or upgrade operations",
                field="reproAnchorMode",
            )
        if "status" in changes:
            self._check_status(plan.status, changes["status"])

        merged = {name: changes.get(name, getattr(plan, name)) for name in DATE_FIELDS}
        self._check_clearing(plan, changes, merged)
        self._check_phase(plan, changes)
        self._check_sequence(changes, merged)
        return self._check_gestation(plan, changes, merged)

    def _check_status(self, current: PlanStatus, target: PlanStatus) -> None:
        if target is current:
            return
        if not current.can_move_to(target):
            raise InvalidStatusTransition(
                f"Cannot move plan from {current.value} to {target.value}", field="status"
            )
        if current is PlanStatus.PLANNING and target is not PlanStatus.CANCELED:
            raise InvalidStatusTransition(
                "Lock the plan anchor to leave PLANNING", field="status"
            )

    def _check_clearing(
        self, plan: BreedingPlan, changes: Mapping[str, Any], merged: Mapping[str, date | None]
    ) -> None:
        for name in DATE_FIELDS:
            if name not in changes or changes[name] is not None or getattr(plan, name) is None:
                continue
            if name == plan.anchor_field:
                raise DownstreamDependency(
                    f"{camel(name)} anchors the plan timeline and cannot be cleared",
                    field=camel(name),
                )
            blocking = [dep for dep in DOWNSTREAM.get(name, ()) if merged[dep] is not None]
            if blocking:
                raise DownstreamDependency(
                    f"Cannot clear {camel(name)} while {camel(blocking[0])} is set",
                    field=camel(name),
                    dependents=[camel(dep) for dep in blocking],
                )

    def _check_phase(self, plan: BreedingPlan, changes: Mapping[str, Any]) -> None:
        if plan.status is not PlanStatus.PLANNING:
            for name in PLANNING_ONLY_FIELDS & changes.keys():
                if changes[name] != getattr(plan, name):
                    raise ImmutableField(
                        f"{camel(name)} can only change while the plan is PLANNING",
                        field=camel(name),
                    )

        statuses = [plan.status]
        target = changes.get("status")
        if target is not None and target is not plan.status:
            statuses.append(target)

        for name in DATE_FIELDS:
            if name not in changes:
                continue
            stored = getattr(plan, name)
            proposed = changes[name]
            if proposed == stored:
                continue
            if stored is not None:
                for status in statuses:
                    if name in FROZEN_BY_STATUS.get(status, frozenset()):
                        raise ImmutableField(
                            f"{camel(name)} is frozen once the plan is {status.value}",
                            field=camel(name),
                            status=status.value,
                        )
            limits = [
                (TOLERANCE_BY_STATUS[status][name], status)
                for status in statuses
                if name in TOLERANCE_BY_STATUS.get(status, {})
            ]
            if not limits or proposed is None:
                continue
            tolerance, status = min(limits, key=lambda limit: limit[0])
            reference = getattr(plan, TOLERANCE_BASELINES[name]) or stored
            if reference is not None:
                shift = days_between(reference, proposed)
                if abs(shift) > tolerance:
                    raise ImmutableField(
                        f"{camel(name)} can move at most {tolerance} days once the plan is "
                        f"{status.value} (requested {shift:+d})",
                        field=camel(name),
                        toleranceDays=tolerance,
                        status=status.value,
                    )

    def _check_sequence(self, changes: Mapping[str, Any], merged: Mapping[str, date | None]) -> None:
        pairs = [("cycle_start_observed", "ovulation_confirmed")]
        populated = [name for name in ACTUAL_DATE_FIELDS if merged[name] is not None]
        pairs.extend(zip(populated, populated[1:]))
        for earlier, later in pairs:
            if earlier not in changes and later not in changes:
                continue
            if merged[earlier] is None or merged[later] is None:
                continue
            if merged[later] < merged[earlier]:
                offending = later if later in changes else earlier
                raise DateSequenceViolation(
                    f"{camel(later)} ({merged[later].isoformat()}) cannot precede "
                    f"{camel(earlier)} ({merged[earlier].isoformat()})",
                    field=camel(offending),
                )

    def _check_gestation(
        self, plan: BreedingPlan, changes: Mapping[str, Any], merged: Mapping[str, date | None]
    ) -> list[str]:
        bred, born = merged["breed_date_actual"], merged["birth_date_actual"]
        if bred is None or born is None:
            return []
        if "breed_date_actual" not in changes and "birth_date_actual" not in changes:
            return []
        profile = self.biology.get(plan.species)
        gestation = days_between(bred, born)
        if profile.gestation_min_days <= gestation <= profile.gestation_max_days:
            return []
        message = (
            f"Gestation of {gestation} days is outside the {profile.code} range "
            f"{profile.gestation_min_days}-{profile.gestation_max_days}"
        )
        if self.gestation_policy == GESTATION_REJECT:
            raise GestationRangeViolation(
                message,
                field="birthDateActual",
                gestationDays=gestation,
            )
        return [message]
