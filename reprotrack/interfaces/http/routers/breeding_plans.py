from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from reprotrack.application.services.species_biology import SpeciesBiologyTable
from reprotrack.application.use_cases.breeding import (
    create_plan,
    get_plan,
    list_plans,
    lock_plan_anchor,
    update_plan,
    upgrade_plan_anchor,
)
from reprotrack.config.settings import Settings
from reprotrack.interfaces.http.deps import (
    get_app_settings,
    get_species_biology,
    get_tenant_context,
    get_uow,
)
from reprotrack.interfaces.http.schemas.breeding_plans import (
    LockRequest,
    LockResponse,
    PlanCreate,
    PlanResponse,
    PlanUpdate,
    UpgradeRequest,
    UpgradeResponse,
)
from reprotrack.interfaces.middleware.tenant_middleware import TenantContext

router = APIRouter(prefix="/breeding/plans", tags=["breeding"])


@router.post("/", response_model=PlanResponse, status_code=status.HTTP_201_CREATED)
async def create_plan_endpoint(
    payload: PlanCreate,
    context: TenantContext = Depends(get_tenant_context),
    biology: SpeciesBiologyTable = Depends(get_species_biology),
    uow=Depends(get_uow),
) -> PlanResponse:
    plan = await create_plan.execute(
        uow,
        context.tenant_id,
        create_plan.CreatePlanInput(
            name=payload.name,
            species=payload.species,
            dam_id=payload.dam_id,
            sire_id=payload.sire_id,
        ),
        biology=biology,
    )
    return PlanResponse.from_domain(plan)


@router.get("/", response_model=list[PlanResponse])
async def list_plans_endpoint(
    plan_status: str | None = Query(None, alias="status"),
    dam_id: UUID | None = Query(None, alias="damId"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    context: TenantContext = Depends(get_tenant_context),
    uow=Depends(get_uow),
) -> list[PlanResponse]:
    plans = await list_plans.execute(
        uow, context.tenant_id, status=plan_status, dam_id=dam_id, limit=limit, offset=offset
    )
    return [PlanResponse.from_domain(plan) for plan in plans]


@router.get("/{plan_id}", response_model=PlanResponse)
async def get_plan_endpoint(
    plan_id: UUID,
    context: TenantContext = Depends(get_tenant_context),
    uow=Depends(get_uow),
) -> PlanResponse:
    plan = await get_plan.execute(uow, context.tenant_id, plan_id)
    return PlanResponse.from_domain(plan)


@router.post("/{plan_id}/lock", response_model=LockResponse)
async def lock_plan_endpoint(
    plan_id: UUID,
    payload: LockRequest,
    context: TenantContext = Depends(get_tenant_context),
    biology: SpeciesBiologyTable = Depends(get_species_biology),
    uow=Depends(get_uow),
) -> LockResponse:
    output = await lock_plan_anchor.execute(
        uow,
        context.tenant_id,
        plan_id,
        lock_plan_anchor.LockPlanAnchorInput(
            anchor_mode=payload.anchor_mode,
            anchor_date=payload.anchor_date,
            confirmation_method=payload.confirmation_method,
            test_result_id=payload.test_result_id,
            notes=payload.notes,
        ),
        biology=biology,
    )
    return LockResponse.from_result(output.plan, output.result)


@router.post("/{plan_id}/upgrade-to-ovulation", response_model=UpgradeResponse)
async def upgrade_plan_endpoint(
    plan_id: UUID,
    payload: UpgradeRequest,
    context: TenantContext = Depends(get_tenant_context),
    biology: SpeciesBiologyTable = Depends(get_species_biology),
    uow=Depends(get_uow),
) -> UpgradeResponse:
    output = await upgrade_plan_anchor.execute(
        uow,
        context.tenant_id,
        plan_id,
        upgrade_plan_anchor.UpgradePlanAnchorInput(
            ovulation_date=payload.ovulation_date,
            confirmation_method=payload.confirmation_method,
            test_result_id=payload.test_result_id,
            notes=payload.notes,
        ),
        biology=biology,
    )
    return UpgradeResponse.from_result(output.plan, output.result)


@router.patch("/{plan_id}", response_model=PlanResponse)
async def update_plan_endpoint(
    plan_id: UUID,
    payload: PlanUpdate,
    context: TenantContext = Depends(get_tenant_context),
    biology: SpeciesBiologyTable = Depends(get_species_biology),
    settings: Settings = Depends(get_app_settings),
    uow=Depends(get_uow),
) -> PlanResponse:
    changes = payload.model_dump(exclude_unset=True)
    version = changes.pop("version", None)
    output = await update_plan.execute(
        uow,
        context.tenant_id,
        plan_id,
        update_plan.UpdatePlanInput(changes=changes, version=version),
        biology=biology,
        gestation_policy=settings.gestation_policy,
    )
    return PlanResponse.from_domain(output.plan, output.warnings)
