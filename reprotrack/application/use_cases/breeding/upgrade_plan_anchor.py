from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from uuid import UUID

from reprotrack.application.interfaces.unit_of_work import UnitOfWork
from reprotrack.application.services.anchor_upgrade import UpgradeResult, upgrade_to_ovulation
from reprotrack.application.services.species_biology import SpeciesBiologyTable
from reprotrack.application.use_cases.breeding.plan_writes import load_for_update, persist_changes
from reprotrack.domain.models.breeding_plan import BreedingPlan

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UpgradePlanAnchorInput:
    ovulation_date: object
    confirmation_method: str | None = None
    test_result_id: str | None = None
    notes: str | None = None


@dataclass(slots=True)
class UpgradePlanAnchorOutput:
    plan: BreedingPlan
    result: UpgradeResult


async def execute(
    uow: UnitOfWork,
    tenant_id: UUID,
    plan_id: UUID,
    payload: UpgradePlanAnchorInput,
    *,
    biology: SpeciesBiologyTable,
) -> UpgradePlanAnchorOutput:
    plan = await load_for_update(uow, tenant_id, plan_id)
    profile = biology.get(plan.species)
    before = replace(plan)
    result = upgrade_to_ovulation(
        plan,
        profile,
        payload.ovulation_date,
        payload.confirmation_method,
        notes=payload.notes,
        test_result_id=payload.test_result_id,
    )
    updated = await persist_changes(uow, tenant_id, plan, before)
    await uow.commit()
    logger.info(
        "Upgraded plan %s to OVULATION anchor (variance %+d days, %s)",
        plan_id,
        result.variance.variance,
        result.variance.analysis,
    )
    return UpgradePlanAnchorOutput(plan=updated, result=result)
