from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import Field

from reprotrack.application.use_cases.animals.get_cycle_analysis import CycleAnalysis
from reprotrack.domain.value_objects.reproduction import CycleLengthSource, ProjectionSource
from reprotrack.interfaces.http.schemas.common import CamelModel

MAX_CYCLE_OVERRIDE_DAYS = 730


class AnimalCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    species: str
    sex: str | None = None
    birth_date: date | None = None
    female_cycle_len_override_days: int | None = Field(
        default=None, gt=0, le=MAX_CYCLE_OVERRIDE_DAYS
    )
    cycle_start_dates: list[str] = Field(default_factory=list)


class AnimalUpdate(CamelModel):
    version: int | None = None
    name: str | None = Field(default=None, min_length=1, max_length=255)
    sex: str | None = None
    birth_date: date | None = None
    female_cycle_len_override_days: int | None = Field(
        default=None, gt=0, le=MAX_CYCLE_OVERRIDE_DAYS
    )


class CycleStartDatesUpdate(CamelModel):
    dates: list[str]


class AnimalResponse(CamelModel):
    id: UUID
    name: str
    species: str
    sex: str | None = None
    birth_date: date | None = None
    female_cycle_len_override_days: int | None = None
    cycle_start_dates: list[date] = Field(default_factory=list)
    last_cycle_start: date | None = None
    created_at: datetime
    updated_at: datetime
    version: int


class OvulationWindowResponse(CamelModel):
    earliest: date
    most_likely: date
    latest: date


class NextCycleProjectionResponse(CamelModel):
    projected_heat_start: date
    projected_ovulation_window: OvulationWindowResponse
    recommended_testing_start: date
    source: ProjectionSource


class UpcomingCycleStartResponse(CamelModel):
    cycle_start: date = Field(alias="date")
    source: ProjectionSource
    explain: dict = Field(default_factory=dict)


class CycleAnalysisResponse(CamelModel):
    animal_id: UUID
    species: str
    cycle_length_days: int
    cycle_length_source: CycleLengthSource
    gaps_used_days: list[int] = Field(default_factory=list)
    warning_conflict: bool = False
    next_cycle_projection: NextCycleProjectionResponse | None = None
    upcoming_cycle_starts: list[UpcomingCycleStartResponse] = Field(default_factory=list)

    @classmethod
    def from_analysis(cls, analysis: CycleAnalysis) -> CycleAnalysisResponse:
        estimate = analysis.estimate
        return cls(
            animal_id=analysis.animal_id,
            species=analysis.species,
            cycle_length_days=estimate.cycle_length_days,
            cycle_length_source=estimate.source,
            gaps_used_days=estimate.gaps_used_days,
            warning_conflict=estimate.warning_conflict,
            next_cycle_projection=(
                NextCycleProjectionResponse.model_validate(analysis.next_cycle)
                if analysis.next_cycle
                else None
            ),
            upcoming_cycle_starts=[
                UpcomingCycleStartResponse(
                    cycle_start=item.cycle_start, source=item.source, explain=item.explain
                )
                for item in analysis.upcoming_cycle_starts
            ],
        )
