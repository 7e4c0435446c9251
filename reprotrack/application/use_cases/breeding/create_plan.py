from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from reprotrack.application.errors import NotFound, ValidationError
from reprotrack.application.interfaces.unit_of_work import UnitOfWork
from reprotrack.application.services.species_biology import SpeciesBiologyTable
from reprotrack.domain.models.breeding_plan import BreedingPlan
from reprotrack.domain.value_objects.reproduction import Sex


@dataclass(slots=True)
class CreatePlanInput:
    name: str
    species: str
    dam_id: UUID | None = None
    sire_id: UUID | None = None


async def ensure_party(
    uow: UnitOfWork,
    tenant_id: UUID,
    animal_id: UUID,
    *,
    species: str,
    role: str,
    field: str,
) -> None:
    animal = await uow.animals.get(tenant_id, animal_id)
    if not animal:
        raise NotFound(f"{role.capitalize()} {animal_id} not found", details={"field": field})
    if animal.species != species:
        raise ValidationError(
            f"{role.capitalize()} is a {animal.species}, plan is for {species}",
            details={"field": field},
        )
    expected_sex = Sex.FEMALE.value if role == "dam" else Sex.MALE.value
    if animal.sex is not None and animal.sex != expected_sex:
        raise ValidationError(
            f"{role.capitalize()} must be {expected_sex.lower()}", details={"field": field}
        )


async def execute(
    uow: UnitOfWork,
    tenant_id: UUID,
    payload: CreatePlanInput,
    *,
    biology: SpeciesBiologyTable,
) -> BreedingPlan:
    profile = biology.get(payload.species)
    if payload.dam_id is not None:
        await ensure_party(
            uow, tenant_id, payload.dam_id, species=profile.code, role="dam", field="damId"
        )
    if payload.sire_id is not None:
        await ensure_party(
            uow, tenant_id, payload.sire_id, species=profile.code, role="sire", field="sireId"
        )
    plan = BreedingPlan.create(
        tenant_id=tenant_id,
        name=payload.name,
        species=profile.code,
        dam_id=payload.dam_id,
        sire_id=payload.sire_id,
    )
    created = await uow.breeding_plans.add(plan)
    await uow.commit()
    return created
