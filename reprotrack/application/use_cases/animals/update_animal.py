from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from reprotrack.application.errors import ConflictError, NotFound, ValidationError
from reprotrack.application.interfaces.unit_of_work import UnitOfWork
from reprotrack.application.services.dates import parse_optional_date
from reprotrack.application.use_cases.animals.create_animal import (
    ensure_valid_override,
    normalize_sex,
)
from reprotrack.domain.models.animal import Animal

UPDATABLE_FIELDS = ("name", "sex", "birth_date", "female_cycle_len_override_days")


@dataclass(slots=True)
class UpdateAnimalInput:
    # Only the keys present are applied; an explicit None clears the field
    changes: dict[str, Any] = field(default_factory=dict)
    version: int | None = None


async def execute(
    uow: UnitOfWork,
    tenant_id: UUID,
    animal_id: UUID,
    payload: UpdateAnimalInput,
) -> Animal:
    unknown = set(payload.changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(
            f"Fields cannot be updated here: {', '.join(sorted(unknown))}",
            details={"fields": sorted(unknown)},
        )
    if payload.version is not None and payload.version < 1:
        raise ValidationError("Invalid version value")
    existing = await uow.animals.get(tenant_id, animal_id)
    if not existing:
        raise NotFound("Animal not found", details={"field": "animalId"})

    data: dict[str, Any] = {}
    for name, value in payload.changes.items():
        if name == "name":
            if not value:
                raise ValidationError("Name cannot be empty", details={"field": "name"})
        elif name == "sex":
            value = normalize_sex(value)
        elif name == "birth_date":
            value = parse_optional_date(value, "birthDate")
        elif name == "female_cycle_len_override_days":
            ensure_valid_override(value)
        if value != getattr(existing, name):
            data[name] = value
    if not data:
        return existing

    updated = await uow.animals.update(
        tenant_id,
        animal_id,
        data=data,
        expected_version=payload.version or existing.version,
    )
    if not updated:
        raise ConflictError("Version mismatch while updating animal")
    await uow.commit()
    return updated
