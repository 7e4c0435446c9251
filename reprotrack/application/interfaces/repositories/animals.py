from __future__ import annotations

from typing import Protocol
from uuid import UUID

from reprotrack.domain.models.animal import Animal


class AnimalRepository(Protocol):
    async def add(self, animal: Animal) -> Animal: ...

    async def get(self, tenant_id: UUID, animal_id: UUID) -> Animal | None: ...

    async def list(
        self,
        tenant_id: UUID,
        *,
        species: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[Animal]: ...

    async def update(
        self,
        tenant_id: UUID,
        animal_id: UUID,
        data: dict,
        expected_version: int,
    ) -> Animal | None: ...
