from __future__ import annotations

from uuid import UUID

from reprotrack.application.errors import ValidationError
from reprotrack.application.interfaces.unit_of_work import UnitOfWork
from reprotrack.domain.models.breeding_plan import BreedingPlan
from reprotrack.domain.value_objects.plan_status import PlanStatus


async def execute(
    uow: UnitOfWork,
    tenant_id: UUID,
    *,
    status: str | None = None,
    dam_id: UUID | None = None,
    limit: int | None = None,
    offset: int | None = None,
) -> list[BreedingPlan]:
    status_filter = None
    if status:
        try:
            status_filter = PlanStatus(status.strip().upper())
        except ValueError as exc:
            raise ValidationError(f"Unknown status: {status}", details={"field": "status"}) from exc
    return await uow.breeding_plans.list(
        tenant_id, status=status_filter, dam_id=dam_id, limit=limit, offset=offset
    )
