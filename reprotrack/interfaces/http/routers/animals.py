from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from reprotrack.application.services.species_biology import SpeciesBiologyTable
from reprotrack.application.use_cases.animals import (
    create_animal,
    get_animal,
    get_cycle_analysis,
    list_animals,
    set_cycle_start_dates,
    update_animal,
)
from reprotrack.config.settings import Settings
from reprotrack.interfaces.http.deps import (
    get_app_settings,
    get_species_biology,
    get_tenant_context,
    get_today,
    get_uow,
)
from reprotrack.interfaces.http.schemas.animals import (
    AnimalCreate,
    AnimalResponse,
    AnimalUpdate,
    CycleAnalysisResponse,
    CycleStartDatesUpdate,
)
from reprotrack.interfaces.middleware.tenant_middleware import TenantContext

router = APIRouter(prefix="/animals", tags=["animals"])


@router.post("/", response_model=AnimalResponse, status_code=status.HTTP_201_CREATED)
async def create_animal_endpoint(
    payload: AnimalCreate,
    context: TenantContext = Depends(get_tenant_context),
    biology: SpeciesBiologyTable = Depends(get_species_biology),
    uow=Depends(get_uow),
) -> AnimalResponse:
    animal = await create_animal.execute(
        uow,
        context.tenant_id,
        create_animal.CreateAnimalInput(
            name=payload.name,
            species=payload.species,
            sex=payload.sex,
            birth_date=payload.birth_date,
            female_cycle_len_override_days=payload.female_cycle_len_override_days,
            cycle_start_dates=list(payload.cycle_start_dates),
        ),
        biology=biology,
    )
    return AnimalResponse.model_validate(animal)


@router.get("/", response_model=list[AnimalResponse])
async def list_animals_endpoint(
    species: str | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    context: TenantContext = Depends(get_tenant_context),
    uow=Depends(get_uow),
) -> list[AnimalResponse]:
    animals = await list_animals.execute(
        uow, context.tenant_id, species=species, limit=limit, offset=offset
    )
    return [AnimalResponse.model_validate(animal) for animal in animals]


@router.get("/{animal_id}", response_model=AnimalResponse)
async def get_animal_endpoint(
    animal_id: UUID,
    context: TenantContext = Depends(get_tenant_context),
    uow=Depends(get_uow),
) -> AnimalResponse:
    animal = await get_animal.execute(uow, context.tenant_id, animal_id)
    return AnimalResponse.model_validate(animal)


@router.patch("/{animal_id}", response_model=AnimalResponse)
async def update_animal_endpoint(
    animal_id: UUID,
    payload: AnimalUpdate,
    context: TenantContext = Depends(get_tenant_context),
    uow=Depends(get_uow),
) -> AnimalResponse:
    changes = payload.model_dump(exclude_unset=True)
    version = changes.pop("version", None)
    animal = await update_animal.execute(
        uow,
        context.tenant_id,
        animal_id,
        update_animal.UpdateAnimalInput(changes=changes, version=version),
    )
    return AnimalResponse.model_validate(animal)


@router.put("/{animal_id}/cycle-start-dates", response_model=AnimalResponse)
async def set_cycle_start_dates_endpoint(
    animal_id: UUID,
    payload: CycleStartDatesUpdate,
    context: TenantContext = Depends(get_tenant_context),
    uow=Depends(get_uow),
) -> AnimalResponse:
    animal = await set_cycle_start_dates.execute(
        uow,
        context.tenant_id,
        animal_id,
        set_cycle_start_dates.SetCycleStartDatesInput(dates=list(payload.dates)),
    )
    return AnimalResponse.model_validate(animal)


@router.get("/{animal_id}/cycle-analysis", response_model=CycleAnalysisResponse)
async def get_cycle_analysis_endpoint(
    animal_id: UUID,
    context: TenantContext = Depends(get_tenant_context),
    biology: SpeciesBiologyTable = Depends(get_species_biology),
    settings: Settings = Depends(get_app_settings),
    today: date = Depends(get_today),
    uow=Depends(get_uow),
) -> CycleAnalysisResponse:
    analysis = await get_cycle_analysis.execute(
        uow,
        context.tenant_id,
        animal_id,
        biology=biology,
        today=today,
        options=get_cycle_analysis.CycleAnalysisOptions.from_settings(settings),
    )
    return CycleAnalysisResponse.from_analysis(analysis)
