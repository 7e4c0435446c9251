from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import Field

from reprotrack.application.services.anchor_lock import LockResult
from reprotrack.application.services.anchor_upgrade import UpgradeResult
from reprotrack.domain.models.breeding_plan import BreedingPlan, CalculatedDates
from reprotrack.domain.value_objects.plan_status import PlanStatus
from reprotrack.domain.value_objects.reproduction import AnchorMode, ConfidenceLevel
from reprotrack.interfaces.http.schemas.common import CamelModel


class PlanCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    species: str
    dam_id: UUID | None = None
    sire_id: UUID | None = None


class PlanUpdate(CamelModel):
    """Partial update; keys left out are untouched and explicit nulls clear."""

    version: int | None = None
    name: str | None = Field(default=None, max_length=255)
    dam_id: UUID | None = None
    sire_id: UUID | None = None
    status: str | None = None
    repro_anchor_mode: str | None = None
    date_source_notes: str | None = None
    # Dates stay strings here so malformed values surface as invalid_date
    cycle_start_observed: str | None = None
    ovulation_confirmed: str | None = None
    cycle_start_date_actual: str | None = None
    breed_date_actual: str | None = None
    birth_date_actual: str | None = None
    weaned_date_actual: str | None = None
    placement_start_date_actual: str | None = None
    placement_completed_date_actual: str | None = None


class LockRequest(CamelModel):
    anchor_mode: str
    anchor_date: str
    confirmation_method: str | None = None
    test_result_id: str | None = None
    notes: str | None = None


class UpgradeRequest(CamelModel):
    ovulation_date: str
    confirmation_method: str | None = None
    test_result_id: str | None = None
    notes: str | None = None


class CalculatedDatesResponse(CamelModel):
    cycle_start: date | None = None
    ovulation: date | None = None
    due_date: date
    weaned_date: date
    placement_start: date
    placement_completed: date

    @classmethod
    def from_dates(cls, dates: CalculatedDates | None) -> CalculatedDatesResponse | None:
        if dates is None:
            return None
        return cls(
            cycle_start=dates.cycle_start,
            ovulation=dates.ovulation,
            due_date=dates.due_date,
            weaned_date=dates.weaned_date,
            placement_start=dates.placement_start,
            placement_completed=dates.placement_completed,
        )


class PlanResponse(CamelModel):
    id: UUID
    name: str
    species: str
    dam_id: UUID | None = None
    sire_id: UUID | None = None
    status: PlanStatus
    repro_anchor_mode: AnchorMode | None = None
    cycle_start_confidence: str | None = None
    ovulation_confidence: str | None = None
    cycle_start_observed: date | None = None
    locked_cycle_start: date | None = None
    ovulation_confirmed: date | None = None
    ovulation_confirmed_method: str | None = None
    ovulation_test_result_id: str | None = None
    cycle_start_date_actual: date | None = None
    breed_date_actual: date | None = None
    birth_date_actual: date | None = None
    weaned_date_actual: date | None = None
    placement_start_date_actual: date | None = None
    placement_completed_date_actual: date | None = None
    expected_ovulation_offset: int | None = None
    actual_ovulation_offset: int | None = None
    variance_from_expected: int | None = None
    calculated_dates: CalculatedDatesResponse | None = None
    date_source_notes: str | None = None
    committed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    version: int
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, plan: BreedingPlan, warnings: list[str] | None = None) -> PlanResponse:
        values = {
            name: getattr(plan, name)
            for name in cls.model_fields
            if name not in ("calculated_dates", "warnings")
        }
        return cls(
            **values,
            calculated_dates=CalculatedDatesResponse.from_dates(plan.calculated_dates()),
            warnings=list(warnings or []),
        )


class LockResponse(CamelModel):
    success: bool = True
    anchor_mode: AnchorMode
    confidence: ConfidenceLevel
    calculated_dates: CalculatedDatesResponse
    plan: PlanResponse

    @classmethod
    def from_result(cls, plan: BreedingPlan, result: LockResult) -> LockResponse:
        return cls(
            anchor_mode=result.anchor_mode,
            confidence=result.confidence,
            calculated_dates=CalculatedDatesResponse.from_dates(result.calculated_dates),
            plan=PlanResponse.from_domain(plan),
        )


class AnchorTransition(CamelModel):
    from_: AnchorMode = Field(alias="from")
    to: AnchorMode


class VarianceResponse(CamelModel):
    variance: int
    analysis: str
    actual_offset: int
    expected_offset: int


class UpgradeResponse(CamelModel):
    success: bool = True
    upgrade: AnchorTransition
    variance: VarianceResponse
    calculated_dates: CalculatedDatesResponse
    placement_shift: int
    plan: PlanResponse

    @classmethod
    def from_result(cls, plan: BreedingPlan, result: UpgradeResult) -> UpgradeResponse:
        return cls(
            upgrade=AnchorTransition(from_=result.from_mode, to=result.to_mode),
            variance=VarianceResponse(
                variance=result.variance.variance,
                analysis=result.variance.analysis,
                actual_offset=result.variance.actual_offset,
                expected_offset=result.variance.expected_offset,
            ),
            calculated_dates=CalculatedDatesResponse.from_dates(result.calculated_dates),
            placement_shift=result.placement_shift_days,
            plan=PlanResponse.from_domain(plan),
        )
