from __future__ import annotations

from typing import Protocol

from reprotrack.application.interfaces.repositories.animals import AnimalRepository
from reprotrack.application.interfaces.repositories.breeding_plans import (
    BreedingPlanRepository,
)


class UnitOfWork(Protocol):
    animals: AnimalRepository
    breeding_plans: BreedingPlanRepository

    async def __aenter__(self) -> UnitOfWork: ...

    async def __aexit__(self, exc_type, exc, tb) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...
