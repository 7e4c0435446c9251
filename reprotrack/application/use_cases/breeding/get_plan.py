from __future__ import annotations

from uuid import UUID

from reprotrack.application.errors import NotFound
from reprotrack.application.interfaces.unit_of_work import UnitOfWork
from reprotrack.domain.models.breeding_plan import BreedingPlan


async def execute(uow: UnitOfWork, tenant_id: UUID, plan_id: UUID) -> BreedingPlan:
    plan = await uow.breeding_plans.get(tenant_id, plan_id)
    if not plan:
        raise NotFound("Breeding plan not found", details={"field": "planId"})
    return plan

