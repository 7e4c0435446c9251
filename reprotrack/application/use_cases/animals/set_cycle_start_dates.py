from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from reprotrack.application.errors import ConflictError, NotFound, ValidationError
from reprotrack.application.interfaces.unit_of_work import UnitOfWork
from reprotrack.application.services.dates import parse_calendar_date
from reprotrack.domain.models.animal import Animal
from reprotrack.domain.value_objects.reproduction import Sex


@dataclass(slots=True)
class SetCycleStartDatesInput:
    dates: list = field(default_factory=list)


async def execute(
    uow: UnitOfWork,
    tenant_id: UUID,
    animal_id: UUID,
    payload: SetCycleStartDatesInput,
) -> Animal:
    """Replace the animal's recorded cycle starts with a sorted, distinct list."""
    parsed = [parse_calendar_date(value, f"dates[{i}]") for i, value in enumerate(payload.dates)]
    animal = await uow.animals.get(tenant_id, animal_id)
    if not animal:
        raise NotFound("Animal not found", details={"field": "animalId"})
    if animal.sex == Sex.MALE.value and parsed:
        raise ValidationError(
            "Cycle start dates can only be recorded for females", details={"field": "dates"}
        )

    expected_version = animal.version
    animal.replace_cycle_start_dates(parsed)
    updated = await uow.animals.update(
        tenant_id,
        animal_id,
        data={"cycle_start_dates": animal.cycle_start_dates},
        expected_version=expected_version,
    )
    if not updated:
        raise ConflictError("Version mismatch while updating cycle start dates")
    await uow.commit()
    return updated
