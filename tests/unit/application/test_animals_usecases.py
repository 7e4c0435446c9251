from __future__ import annotations

from datetime import date
from uuid import uuid4

import pytest

from reprotrack.application.errors import (
    ConflictError,
    InvalidDate,
    NotFound,
    UnknownSpecies,
    ValidationError,
)
from reprotrack.application.services.species_biology import default_biology_table
from reprotrack.application.use_cases.animals import (
    create_animal,
    get_cycle_analysis,
    list_animals,
    set_cycle_start_dates,
    update_animal,
)
from reprotrack.domain.models.animal import Animal
from reprotrack.domain.value_objects.reproduction import CycleLengthSource, ProjectionSource


TODAY = date(2026, 3, 1)


def female_dog(tenant_id, **values) -> Animal:
    animal = Animal.create(tenant_id=tenant_id, name="Maple", species="DOG", sex="FEMALE")
    for name, value in values.items():
        setattr(animal, name, value)
    return animal


@pytest.mark.asyncio
async def test_create_animal_normalizes_species_and_dates(stub_repo, uow_factory):
    repo = stub_repo()
    uow = uow_factory(animals=repo)
    result = await create_animal.execute(
        uow,
        uuid4(),
        create_animal.CreateAnimalInput(
            name="Maple",
            species="dog",
            sex="female",
            cycle_start_dates=["2025-12-27", "2025-06-30", "2025-06-30"],
        ),
        biology=default_biology_table,
    )
    assert repo.add_called
    assert result.species == "DOG"
    assert result.sex == "FEMALE"
    assert result.cycle_start_dates == [date(2025, 6, 30), date(2025, 12, 27)]
    assert uow.commits


@pytest.mark.asyncio
async def test_create_animal_rejects_unknown_species(stub_repo, uow_factory):
    repo = stub_repo()
    with pytest.raises(UnknownSpecies):
        await create_animal.execute(
            uow_factory(animals=repo),
            uuid4(),
            create_animal.CreateAnimalInput(name="Nibbles", species="FERRET"),
            biology=default_biology_table,
        )
    assert not repo.add_called


@pytest.mark.asyncio
async def test_create_animal_rejects_non_positive_override(stub_repo, uow_factory):
    with pytest.raises(ValidationError):
        await create_animal.execute(
            uow_factory(),
            uuid4(),
            create_animal.CreateAnimalInput(
                name="Maple", species="DOG", female_cycle_len_override_days=0
            ),
            biology=default_biology_table,
        )


@pytest.mark.asyncio
async def test_list_animals_normalizes_species_filter(stub_repo, uow_factory):
    tenant_id = uuid4()
    repo = stub_repo(female_dog(tenant_id))
    animals = await list_animals.execute(uow_factory(animals=repo), tenant_id, species=" dog ")
    assert len(animals) == 1
    assert repo.last_filters["species"] == "DOG"


@pytest.mark.asyncio
async def test_set_cycle_start_dates_sorts_and_dedupes(stub_repo, uow_factory):
    tenant_id = uuid4()
    animal = female_dog(tenant_id)
    repo = stub_repo(animal)
    updated = await set_cycle_start_dates.execute(
        uow_factory(animals=repo),
        tenant_id,
        animal.id,
        set_cycle_start_dates.SetCycleStartDatesInput(
            dates=["2026-01-10", "2025-07-14", "2026-01-10"]
        ),
    )
    assert updated.cycle_start_dates == [date(2025, 7, 14), date(2026, 1, 10)]
    assert updated.version == 2


@pytest.mark.asyncio
async def test_set_cycle_start_dates_reports_bad_index(stub_repo, uow_factory):
    tenant_id = uuid4()
    animal = female_dog(tenant_id)
    with pytest.raises(InvalidDate) as exc:
        await set_cycle_start_dates.execute(
            uow_factory(animals=stub_repo(animal)),
            tenant_id,
            animal.id,
            set_cycle_start_dates.SetCycleStartDatesInput(dates=["2026-01-10", "yesterday"]),
        )
    assert exc.value.details["field"] == "dates[1]"


@pytest.mark.asyncio
async def test_set_cycle_start_dates_missing_animal(stub_repo, uow_factory):
    with pytest.raises(NotFound):
        await set_cycle_start_dates.execute(
            uow_factory(),
            uuid4(),
            uuid4(),
            set_cycle_start_dates.SetCycleStartDatesInput(dates=["2026-01-10"]),
        )


@pytest.mark.asyncio
async def test_update_animal_clears_override(stub_repo, uow_factory):
    tenant_id = uuid4()
    animal = female_dog(tenant_id, female_cycle_len_override_days=200)
    repo = stub_repo(animal)
    updated = await update_animal.execute(
        uow_factory(animals=repo),
        tenant_id,
        animal.id,
        update_animal.UpdateAnimalInput(changes={"female_cycle_len_override_days": None}),
    )
    assert updated.female_cycle_len_override_days is None
    assert repo.updates == [{"female_cycle_len_override_days": None}]


@pytest.mark.asyncio
async def test_update_animal_version_conflict(stub_repo, uow_factory):
    tenant_id = uuid4()
    animal = female_dog(tenant_id)
    with pytest.raises(ConflictError):
        await update_animal.execute(
            uow_factory(animals=stub_repo(animal)),
            tenant_id,
            animal.id,
            update_animal.UpdateAnimalInput(changes={"name": "Willow"}, version=7),
        )


@pytest.mark.asyncio
async def test_cycle_analysis_uses_history(stub_repo, uow_factory):
    tenant_id = uuid4()
    animal = female_dog(
        tenant_id,
        cycle_start_dates=[date(2025, 1, 1), date(2025, 6, 30), date(2025, 12, 27)],
    )
    analysis = await get_cycle_analysis.execute(
        uow_factory(animals=stub_repo(animal)),
        tenant_id,
        animal.id,
        biology=default_biology_table,
        today=TODAY,
    )
    assert analysis.estimate.cycle_length_days == 180
    assert analysis.estimate.source is CycleLengthSource.HISTORY
    assert analysis.estimate.gaps_used_days == [180, 180]
    assert analysis.next_cycle.source is ProjectionSource.HISTORY
    assert analysis.next_cycle.projected_heat_start == date(2026, 6, 25)
    assert analysis.upcoming_cycle_starts[0].cycle_start == date(2026, 6, 25)


@pytest.mark.asyncio
async def test_cycle_analysis_override_wins(stub_repo, uow_factory):
    tenant_id = uuid4()
    animal = female_dog(
        tenant_id,
        female_cycle_len_override_days=200,
        cycle_start_dates=[date(2025, 1, 1), date(2025, 6, 30), date(2025, 12, 27)],
    )
    analysis = await get_cycle_analysis.execute(
        uow_factory(animals=stub_repo(animal)),
        tenant_id,
        animal.id,
        biology=default_biology_table,
        today=TODAY,
    )
    assert analysis.estimate.cycle_length_days == 200
    assert analysis.estimate.source is CycleLengthSource.OVERRIDE
    assert analysis.estimate.warning_conflict is False


@pytest.mark.asyncio
async def test_cycle_analysis_for_male_has_no_projection(stub_repo, uow_factory):
    tenant_id = uuid4()
    male = Animal.create(tenant_id=tenant_id, name="Rex", species="DOG", sex="MALE")
    analysis = await get_cycle_analysis.execute(
        uow_factory(animals=stub_repo(male)),
        tenant_id,
        male.id,
        biology=default_biology_table,
        today=TODAY,
    )
    assert analysis.next_cycle is None
    assert analysis.upcoming_cycle_starts == []


@pytest.mark.asyncio
async def test_cycle_analysis_missing_animal(stub_repo, uow_factory):
    with pytest.raises(NotFound):
        await get_cycle_analysis.execute(
            uow_factory(), uuid4(), uuid4(), biology=default_biology_table, today=TODAY
        )
