from __future__ import annotations

from typing import Protocol
from uuid import UUID

from reprotrack.domain.models.breeding_plan import BreedingPlan
from reprotrack.domain.value_objects.plan_status import PlanStatus


class BreedingPlanRepository(Protocol):
    async def add(self, plan: BreedingPlan) -> BreedingPlan: ...

    async def get(self, tenant_id: UUID, plan_id: UUID) -> BreedingPlan | None: ...

    # Row-locking read for write paths (lock, upgrade, guarded update)
    async def get_for_update(self, tenant_id: UUID, plan_id: UUID) -> BreedingPlan | None: ...

    async def list(
        self,
        tenant_id: UUID,
        *,
        status: PlanStatus | None = None,
        dam_id: UUID | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[BreedingPlan]: ...

    async def update(
        self,
        tenant_id: UUID,
        plan_id: UUID,
        data: dict,
        expected_version: int,
    ) -> BreedingPlan | None: ...
