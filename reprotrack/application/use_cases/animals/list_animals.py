from __future__ import annotations

from uuid import UUID

from reprotrack.application.interfaces.unit_of_work import UnitOfWork
from reprotrack.domain.models.animal import Animal


async def execute(
    uow: UnitOfWork,
    tenant_id: UUID,
    *,
    species: str | None = None,
    limit: int | None = None,
    offset: int | None = None,
) -> list[Animal]:
    return await uow.animals.list(
        tenant_id,
        species=species.strip().upper() if species else None,
        limit=limit,
        offset=offset,
    )
