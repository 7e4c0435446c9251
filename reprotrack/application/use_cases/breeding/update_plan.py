from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any
from uuid import UUID

from reprotrack.application.errors import ConflictError, ValidationError
from reprotrack.application.interfaces.unit_of_work import UnitOfWork
from reprotrack.application.services.anchor_upgrade import analyse_variance
from reprotrack.application.services.date_ladder import ladder_for_plan
from reprotrack.application.services.dates import parse_optional_date
from reprotrack.application.services.immutability import (
    ImmutabilityGuard,
    camel,
    capture_baselines,
)
from reprotrack.application.services.species_biology import SpeciesBiologyTable
from reprotrack.application.use_cases.breeding.create_plan import ensure_party
from reprotrack.application.use_cases.breeding.plan_writes import load_for_update, persist_changes
from reprotrack.domain.models.breeding_plan import DATE_FIELDS, BreedingPlan
from reprotrack.domain.value_objects.plan_status import PlanStatus
from reprotrack.domain.value_objects.reproduction import AnchorMode
from reprotrack.utils.datetime_tz import days_between

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset(
    {"name", "dam_id", "sire_id", "status", "repro_anchor_mode", "date_source_notes"}
    | set(DATE_FIELDS)
)


@dataclass(slots=True)
class UpdatePlanInput:
    # Only the keys present are applied; an explicit None clears the field
    changes: dict[str, Any] = field(default_factory=dict)
    version: int | None = None


@dataclass(slots=True)
class UpdatePlanOutput:
    plan: BreedingPlan
    warnings: list[str] = field(default_factory=list)


def _parse_changes(raw: dict[str, Any]) -> dict[str, Any]:
    unknown = set(raw) - UPDATABLE_FIELDS
    if unknown:
        names = sorted(camel(name) for name in unknown)
        raise ValidationError(
            f"Fields cannot be updated: {', '.join(names)}", details={"fields": names}
        )
    changes: dict[str, Any] = {}
    for name, value in raw.items():
        if name in DATE_FIELDS:
            value = parse_optional_date(value, camel(name))
        elif name == "status":
            try:
                value = PlanStatus(str(value).strip().upper())
            except ValueError as exc:
                raise ValidationError(
                    f"Unknown status: {value}", details={"field": "status"}
                ) from exc
        elif name == "repro_anchor_mode" and value is not None:
            try:
                value = AnchorMode(str(value).strip().upper())
            except ValueError as exc:
                raise ValidationError(
                    f"Unknown anchor mode: {value}", details={"field": "reproAnchorMode"}
                ) from exc
        elif name == "name" and not value:
            raise ValidationError("Name cannot be empty", details={"field": "name"})
        changes[name] = value
    return changes


def _refresh_derived(plan: BreedingPlan, changes: dict[str, Any], biology: SpeciesBiologyTable) -> None:
    """Keep the expected ladder and variance in step with edited anchor dates."""
    if plan.repro_anchor_mode is None:
        return
    touched = set(changes)
    profile = biology.get(plan.species)
    if plan.anchor_field in touched or (
        plan.repro_anchor_mode is AnchorMode.OVULATION and "cycle_start_observed" in touched
    ):
        ladder = ladder_for_plan(profile, plan)
        if ladder is not None:
            plan.apply_calculated_dates(ladder)
    if (
        plan.actual_ovulation_offset is not None
        and touched & {"cycle_start_observed", "ovulation_confirmed"}
        and plan.cycle_start_observed is not None
        and plan.ovulation_confirmed is not None
    ):
        variance = analyse_variance(
            days_between(plan.cycle_start_observed, plan.ovulation_confirmed),
            profile.ovulation_offset_days,
        )
        plan.actual_ovulation_offset = variance.actual_offset
        plan.variance_from_expected = variance.variance


async def execute(
    uow: UnitOfWork,
    tenant_id: UUID,
    plan_id: UUID,
    payload: UpdatePlanInput,
    *,
    biology: SpeciesBiologyTable,
    gestation_policy: str = "reject",
) -> UpdatePlanOutput:
    if payload.version is not None and payload.version < 1:
        raise ValidationError("Invalid version value")
    changes = _parse_changes(payload.changes)
    plan = await load_for_update(uow, tenant_id, plan_id)
    if not changes:
        return UpdatePlanOutput(plan=plan)
    if payload.version is not None and payload.version != plan.version:
        raise ConflictError(
            "Plan was modified by someone else; reload and retry",
            details={"field": "version", "current": plan.version},
        )

    guard = ImmutabilityGuard(biology, gestation_policy=gestation_policy)
    warnings = guard.evaluate(plan, changes)
    for party, field_name in (("dam", "dam_id"), ("sire", "sire_id")):
        value = changes.get(field_name)
        if value is not None and value != getattr(plan, field_name):
            await ensure_party(
                uow, tenant_id, value, species=plan.species, role=party, field=camel(field_name)
            )

    before = replace(plan)
    for name, value in changes.items():
        setattr(plan, name, value)
    _refresh_derived(plan, changes, biology)
    capture_baselines(plan, before)

    updated = await persist_changes(uow, tenant_id, plan, before)
    await uow.commit()
    for message in warnings:
        logger.warning("Plan %s: %s", plan_id, message)
    logger.info(
        "Updated plan %s (%s)", plan_id, ", ".join(sorted(camel(name) for name in changes))
    )
    return UpdatePlanOutput(plan=updated, warnings=warnings)
