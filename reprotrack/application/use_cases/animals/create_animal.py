from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

from reprotrack.application.errors import ValidationError
from reprotrack.application.interfaces.unit_of_work import UnitOfWork
from reprotrack.application.services.dates import parse_calendar_date
from reprotrack.application.services.species_biology import SpeciesBiologyTable
from reprotrack.domain.models.animal import Animal
from reprotrack.domain.value_objects.reproduction import Sex


@dataclass(slots=True)
class CreateAnimalInput:
    name: str
    species: str
    sex: str | None = None
    birth_date: date | None = None
    female_cycle_len_override_days: int | None = None
    cycle_start_dates: list = field(default_factory=list)


def normalize_sex(value: str | None) -> str | None:
    if value is None:
        return None
    try:
        return Sex(value.strip().upper()).value
    except ValueError as exc:
        raise ValidationError(
            f"Invalid sex: {value}", details={"field": "sex"}
        ) from exc


def ensure_valid_override(value: int | None) -> None:
    if value is not None and value <= 0:
        raise ValidationError(
            "Cycle length override must be a positive number of days",
            details={"field": "femaleCycleLenOverrideDays"},
        )


async def execute(
    uow: UnitOfWork,
    tenant_id: UUID,
    payload: CreateAnimalInput,
    *,
    biology: SpeciesBiologyTable,
) -> Animal:
    profile = biology.get(payload.species)
    ensure_valid_override(payload.female_cycle_len_override_days)
    animal = Animal.create(
        tenant_id=tenant_id,
        name=payload.name,
        species=profile.code,
        sex=normalize_sex(payload.sex),
        birth_date=payload.birth_date,
        female_cycle_len_override_days=payload.female_cycle_len_override_days,
    )
    if payload.cycle_start_dates:
        animal.replace_cycle_start_dates(
            [
                parse_calendar_date(value, f"cycleStartDates[{i}]")
                for i, value in enumerate(payload.cycle_start_dates)
            ]
        )
    created = await uow.animals.add(animal)
    await uow.commit()
    return created
