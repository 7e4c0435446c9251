from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

from reprotrack.application.errors import NotFound
from reprotrack.application.interfaces.unit_of_work import UnitOfWork
from reprotrack.application.services.cycle_length import (
    DEFAULT_CONFLICT_RATIO,
    CycleLengthEstimate,
    estimate_cycle_length,
)
from reprotrack.application.services.cycle_projection import (
    DEFAULT_TESTING_LEAD_DAYS,
    DEFAULT_WINDOW_HALF_WIDTH_DAYS,
    NextCycleProjection,
    ProjectedCycleStart,
    project_next_cycle,
    project_upcoming_cycle_starts,
)
from reprotrack.application.services.species_biology import SpeciesBiologyTable
from reprotrack.config.settings import Settings
from reprotrack.domain.value_objects.reproduction import Sex


@dataclass(slots=True)
class CycleAnalysisOptions:
    window_half_width_days: int = DEFAULT_WINDOW_HALF_WIDTH_DAYS
    testing_lead_days: int = DEFAULT_TESTING_LEAD_DAYS
    conflict_ratio: float = DEFAULT_CONFLICT_RATIO
    horizon_months: int = 12
    max_upcoming: int = 6

    @classmethod
    def from_settings(cls, settings: Settings) -> CycleAnalysisOptions:
        return cls(
            window_half_width_days=settings.ovulation_window_half_width_days,
            testing_lead_days=settings.testing_lead_days,
            conflict_ratio=settings.cycle_override_conflict_ratio,
            horizon_months=settings.upcoming_cycles_horizon_months,
            max_upcoming=settings.upcoming_cycles_max_count,
        )


@dataclass(slots=True)
class CycleAnalysis:
    animal_id: UUID
    species: str
    estimate: CycleLengthEstimate
    next_cycle: NextCycleProjection | None = None
    upcoming_cycle_starts: list[ProjectedCycleStart] = field(default_factory=list)


async def execute(
    uow: UnitOfWork,
    tenant_id: UUID,
    animal_id: UUID,
    *,
    biology: SpeciesBiologyTable,
    today: date,
    options: CycleAnalysisOptions | None = None,
) -> CycleAnalysis:
    """Derive cycle length and upcoming heats for an animal; nothing is persisted."""
    options = options or CycleAnalysisOptions()
    animal = await uow.animals.get(tenant_id, animal_id)
    if not animal:
        raise NotFound("Animal not found", details={"field": "animalId"})
    profile = biology.get(animal.species)

    estimate = estimate_cycle_length(
        profile,
        animal.cycle_start_dates,
        animal.female_cycle_len_override_days,
        conflict_ratio=options.conflict_ratio,
    )
    analysis = CycleAnalysis(animal_id=animal.id, species=profile.code, estimate=estimate)
    # Males have no cycle to project
    if animal.sex == Sex.MALE.value:
        return analysis

    analysis.next_cycle = project_next_cycle(
        profile,
        animal.last_cycle_start,
        estimate.cycle_length_days,
        today,
        birth_date=animal.birth_date,
        window_half_width_days=options.window_half_width_days,
        testing_lead_days=options.testing_lead_days,
    )
    analysis.upcoming_cycle_starts = project_upcoming_cycle_starts(
        profile,
        analysis.next_cycle.projected_heat_start,
        estimate.cycle_length_days,
        today,
        analysis.next_cycle.source,
        horizon_months=options.horizon_months,
        max_count=options.max_upcoming,
    )
    return analysis
