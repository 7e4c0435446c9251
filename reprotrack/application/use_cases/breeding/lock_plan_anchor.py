from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from uuid import UUID

from reprotrack.application.interfaces.unit_of_work import UnitOfWork
from reprotrack.application.services.anchor_lock import LockResult, lock_anchor
from reprotrack.application.services.species_biology import SpeciesBiologyTable
from reprotrack.application.use_cases.breeding.plan_writes import load_for_update, persist_changes
from reprotrack.domain.models.breeding_plan import BreedingPlan

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LockPlanAnchorInput:
    anchor_mode: str
    anchor_date: object
    confirmation_method: str | None = None
    test_result_id: str | None = None
    notes: str | None = None


@dataclass(slots=True)
class LockPlanAnchorOutput:
    plan: BreedingPlan
    result: LockResult


async def execute(
    uow: UnitOfWork,
    tenant_id: UUID,
    plan_id: UUID,
    payload: LockPlanAnchorInput,
    *,
    biology: SpeciesBiologyTable,
) -> LockPlanAnchorOutput:
    plan = await load_for_update(uow, tenant_id, plan_id)
    profile = biology.get(plan.species)
    before = replace(plan)
    result = lock_anchor(
        plan,
        profile,
        payload.anchor_mode,
        payload.anchor_date,
        payload.confirmation_method,
        notes=payload.notes,
        test_result_id=payload.test_result_id,
    )
    updated = await persist_changes(uow, tenant_id, plan, before)
    await uow.commit()
    logger.info(
        "Locked plan %s on %s anchor (due %s)",
        plan_id,
        result.anchor_mode.value,
        result.calculated_dates.due_date.isoformat(),
    )
    return LockPlanAnchorOutput(plan=updated, result=result)
