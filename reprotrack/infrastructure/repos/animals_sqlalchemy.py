from __future__ import annotations

from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from reprotrack.application.errors import ConflictError
from reprotrack.application.interfaces.repositories.animals import AnimalRepository
from reprotrack.domain.models.animal import Animal
from reprotrack.infrastructure.db.orm.animal import AnimalORM


class AnimalsSQLAlchemyRepository(AnimalRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(self, orm: AnimalORM) -> Animal:
        return Animal(
            id=orm.id,
            tenant_id=orm.tenant_id,
            name=orm.name,
            species=orm.species,
            sex=orm.sex,
            birth_date=orm.birth_date,
            female_cycle_len_override_days=orm.female_cycle_len_override_days,
            cycle_start_dates=list(orm.cycle_start_dates or []),
            deleted_at=orm.deleted_at,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
            version=orm.version,
        )

    async def add(self, animal: Animal) -> Animal:
        orm = AnimalORM(
            id=animal.id,
            tenant_id=animal.tenant_id,
            name=animal.name,
            species=animal.species,
            sex=animal.sex,
            birth_date=animal.birth_date,
            female_cycle_len_override_days=animal.female_cycle_len_override_days,
            cycle_start_dates=list(animal.cycle_start_dates),
            deleted_at=animal.deleted_at,
            created_at=animal.created_at,
            updated_at=animal.updated_at,
            version=animal.version,
        )
        self.session.add(orm)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConflictError("Animal already exists for tenant") from exc
        return self._to_domain(orm)

    async def get(self, tenant_id: UUID, animal_id: UUID) -> Animal | None:
        stmt = (
            select(AnimalORM)
            .where(AnimalORM.tenant_id == tenant_id)
            .where(AnimalORM.id == animal_id)
            .where(AnimalORM.deleted_at.is_(None))
        )
        result = await self.session.execute(stmt)
        orm = result.scalar_one_or_none()
        return self._to_domain(orm) if orm else None

    async def list(
        self,
        tenant_id: UUID,
        *,
        species: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[Animal]:
        stmt = select(AnimalORM).where(AnimalORM.tenant_id == tenant_id)
        stmt = stmt.where(AnimalORM.deleted_at.is_(None))
        if species is not None:
            stmt = stmt.where(AnimalORM.species == species)
        stmt = stmt.order_by(AnimalORM.created_at, AnimalORM.id)
        if offset is not None:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return [self._to_domain(item) for item in result.scalars().all()]

    async def update(
        self,
        tenant_id: UUID,
        animal_id: UUID,
        data: dict,
        expected_version: int,
    ) -> Animal | None:
        values = {**data, "version": expected_version + 1}
        stmt = (
            update(AnimalORM)
            .where(AnimalORM.tenant_id == tenant_id, AnimalORM.id == animal_id)
            .where(AnimalORM.version == expected_version)
            .where(AnimalORM.deleted_at.is_(None))
            .values(**values)
            .returning(AnimalORM)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.session.execute(stmt)
        except IntegrityError as exc:
            raise ConflictError("Failed to update animal due to constraint violation") from exc
        orm = result.scalar_one_or_none()
        if not orm:
            return None
        return self._to_domain(orm)
