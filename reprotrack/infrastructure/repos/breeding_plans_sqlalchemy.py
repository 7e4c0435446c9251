from __future__ import annotations

from enum import Enum
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from reprotrack.application.errors import ConflictError
from reprotrack.application.interfaces.repositories.breeding_plans import BreedingPlanRepository
from reprotrack.domain.models.breeding_plan import BreedingPlan
from reprotrack.domain.value_objects.plan_status import PlanStatus
from reprotrack.domain.value_objects.reproduction import AnchorMode
from reprotrack.infrastructure.db.orm.breeding_plan import BreedingPlanORM

# Domain attributes stored one-to-one in breeding_plans columns
_COLUMNS = (
    "name",
    "species",
    "dam_id",
    "sire_id",
    "status",
    "repro_anchor_mode",
    "cycle_start_confidence",
    "ovulation_confidence",
    "cycle_start_observed",
    "ovulation_confirmed",
    "ovulation_confirmed_method",
    "ovulation_test_result_id",
    "cycle_start_date_actual",
    "breed_date_actual",
    "birth_date_actual",
    "weaned_date_actual",
    "placement_start_date_actual",
    "placement_completed_date_actual",
    "expected_ovulation_offset",
    "actual_ovulation_offset",
    "variance_from_expected",
    "committed_cycle_start",
    "committed_ovulation",
    "committed_breed_date",
    "committed_weaned_date",
    "expected_cycle_start",
    "expected_ovulation",
    "expected_due_date",
    "expected_weaned",
    "expected_placement_start",
    "expected_placement_completed",
    "date_source_notes",
    "committed_at",
)


def _to_row(data: dict) -> dict:
    return {key: value.value if isinstance(value, Enum) else value for key, value in data.items()}


class BreedingPlansSQLAlchemyRepository(BreedingPlanRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(self, orm: BreedingPlanORM) -> BreedingPlan:
        values = {name: getattr(orm, name) for name in _COLUMNS}
        values["status"] = PlanStatus(orm.status)
        values["repro_anchor_mode"] = (
            AnchorMode(orm.repro_anchor_mode) if orm.repro_anchor_mode else None
        )
        return BreedingPlan(
            id=orm.id,
            tenant_id=orm.tenant_id,
            deleted_at=orm.deleted_at,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
            version=orm.version,
            **values,
        )

    def _base_query(self, tenant_id: UUID, plan_id: UUID):
        return (
            select(BreedingPlanORM)
            .where(BreedingPlanORM.tenant_id == tenant_id)
            .where(BreedingPlanORM.id == plan_id)
            .where(BreedingPlanORM.deleted_at.is_(None))
        )

    async def add(self, plan: BreedingPlan) -> BreedingPlan:
        row = _to_row({name: getattr(plan, name) for name in _COLUMNS})
        orm = BreedingPlanORM(
            id=plan.id,
            tenant_id=plan.tenant_id,
            locked_cycle_start=plan.locked_cycle_start,
            deleted_at=plan.deleted_at,
            created_at=plan.created_at,
            updated_at=plan.updated_at,
            version=plan.version,
            **row,
        )
        self.session.add(orm)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConflictError("Breeding plan references unknown animals") from exc
        return self._to_domain(orm)

    async def get(self, tenant_id: UUID, plan_id: UUID) -> BreedingPlan | None:
        result = await self.session.execute(self._base_query(tenant_id, plan_id))
        orm = result.scalar_one_or_none()
        return self._to_domain(orm) if orm else None

    async def get_for_update(self, tenant_id: UUID, plan_id: UUID) -> BreedingPlan | None:
        # SQLite ignores FOR UPDATE; its single writer serializes instead
        stmt = self._base_query(tenant_id, plan_id).with_for_update()
        result = await self.session.execute(stmt.execution_options(populate_existing=True))
        orm = result.scalar_one_or_none()
        return self._to_domain(orm) if orm else None

    async def list(
        self,
        tenant_id: UUID,
        *,
        status: PlanStatus | None = None,
        dam_id: UUID | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[BreedingPlan]:
        stmt = select(BreedingPlanORM).where(BreedingPlanORM.tenant_id == tenant_id)
        stmt = stmt.where(BreedingPlanORM.deleted_at.is_(None))
        if status is not None:
            stmt = stmt.where(BreedingPlanORM.status == status.value)
        if dam_id is not None:
            stmt = stmt.where(BreedingPlanORM.dam_id == dam_id)
        stmt = stmt.order_by(BreedingPlanORM.created_at, BreedingPlanORM.id)
        if offset is not None:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return [self._to_domain(item) for item in result.scalars().all()]

    async def update(
        self,
        tenant_id: UUID,
        plan_id: UUID,
        data: dict,
        expected_version: int,
    ) -> BreedingPlan | None:
        values = {**_to_row(data), "version": expected_version + 1}
        stmt = (
            update(BreedingPlanORM)
            .where(BreedingPlanORM.tenant_id == tenant_id, BreedingPlanORM.id == plan_id)
            .where(BreedingPlanORM.version == expected_version)
            .where(BreedingPlanORM.deleted_at.is_(None))
            .values(**values)
            .returning(BreedingPlanORM)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.session.execute(stmt)
        except IntegrityError as exc:
            raise ConflictError("Failed to update breeding plan due to constraint violation") from exc
        orm = result.scalar_one_or_none()
        if not orm:
            return None
        return self._to_domain(orm)
