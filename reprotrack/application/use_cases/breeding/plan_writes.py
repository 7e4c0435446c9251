from __future__ import annotations

from uuid import UUID

from reprotrack.application.errors import ConflictError, NotFound
from reprotrack.application.interfaces.unit_of_work import UnitOfWork
from reprotrack.domain.models.breeding_plan import BreedingPlan


async def load_for_update(uow: UnitOfWork, tenant_id: UUID, plan_id: UUID) -> BreedingPlan:
    plan = await uow.breeding_plans.get_for_update(tenant_id, plan_id)
    if not plan:
        raise NotFound("Breeding plan not found", details={"field": "planId"})
    return plan


async def persist_changes(
    uow: UnitOfWork,
    tenant_id: UUID,
    plan: BreedingPlan,
    before: BreedingPlan,
) -> BreedingPlan:
    """Write the fields that differ from ``before``, guarded by its version."""
    data = plan.changes_from(before)
    if not data:
        return before
    updated = await uow.breeding_plans.update(
        tenant_id, plan.id, data=data, expected_version=before.version
    )
    if not updated:
        raise ConflictError("Version mismatch while updating breeding plan")
    return updated
