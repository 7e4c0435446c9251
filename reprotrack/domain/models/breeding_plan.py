from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date, datetime, timezone
from uuid import UUID, uuid4

from reprotrack.domain.value_objects.plan_status import PlanStatus
from reprotrack.domain.value_objects.reproduction import AnchorMode

# Observed/actual date fields a plan carries, in biological order
ACTUAL_DATE_FIELDS: tuple[str, ...] = (
    "cycle_start_date_actual",
    "breed_date_actual",
    "birth_date_actual",
    "weaned_date_actual",
    "placement_start_date_actual",
    "placement_completed_date_actual",
)

ANCHOR_DATE_FIELDS: tuple[str, ...] = (
    "cycle_start_observed",
    "ovulation_confirmed",
)

DATE_FIELDS: tuple[str, ...] = ANCHOR_DATE_FIELDS + ACTUAL_DATE_FIELDS

# Which plan field holds the anchor date for each anchor mode
ANCHOR_FIELD_BY_MODE: dict[AnchorMode, str] = {
    AnchorMode.CYCLE_START: "cycle_start_observed",
    AnchorMode.OVULATION: "ovulation_confirmed",
    AnchorMode.BREEDING_DATE: "breed_date_actual",
}

# Tolerance-checked fields and the column holding the value first recorded for each
TOLERANCE_BASELINES: dict[str, str] = {
    "cycle_start_observed": "committed_cycle_start",
    "ovulation_confirmed": "committed_ovulation",
    "breed_date_actual": "committed_breed_date",
    "weaned_date_actual": "committed_weaned_date",
}

_BOOKKEEPING_FIELDS = frozenset(
    {"id", "tenant_id", "deleted_at", "created_at", "updated_at", "version"}
)


@dataclass(slots=True)
class CalculatedDates:
    cycle_start: date | None
    ovulation: date | None
    due_date: date
    weaned_date: date
    placement_start: date
    placement_completed: date


@dataclass(slots=True)
class BreedingPlan:
    id: UUID
    tenant_id: UUID
    name: str
    species: str
    dam_id: UUID | None = None
    sire_id: UUID | None = None
    status: PlanStatus = PlanStatus.PLANNING

    # Anchor, set once by the lock and changed only by the ovulation upgrade
    repro_anchor_mode: AnchorMode | None = None
    cycle_start_confidence: str | None = None
    ovulation_confidence: str | None = None

    cycle_start_observed: date | None = None
    ovulation_confirmed: date | None = None
    ovulation_confirmed_method: str | None = None
    ovulation_test_result_id: str | None = None

    cycle_start_date_actual: date | None = None
    breed_date_actual: date | None = None
    birth_date_actual: date | None = None
    weaned_date_actual: date | None = None
    placement_start_date_actual: date | None = None
    placement_completed_date_actual: date | None = None

    # Variance between expected and observed ovulation timing
    expected_ovulation_offset: int | None = None
    actual_ovulation_offset: int | None = None
    variance_from_expected: int | None = None

    # Tolerance windows are measured from these, not from the latest edit
    committed_cycle_start: date | None = None
    committed_ovulation: date | None = None
    committed_breed_date: date | None = None
    committed_weaned_date: date | None = None

    # Expected-date ladder computed from the anchor
    expected_cycle_start: date | None = None
    expected_ovulation: date | None = None
    expected_due_date: date | None = None
    expected_weaned: date | None = None
    expected_placement_start: date | None = None
    expected_placement_completed: date | None = None

    date_source_notes: str | None = None
    committed_at: datetime | None = None

    deleted_at: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 1

    @classmethod
    def create(
        cls,
        tenant_id: UUID,
        name: str,
        species: str,
        dam_id: UUID | None = None,
        sire_id: UUID | None = None,
    ) -> BreedingPlan:
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid4(),
            tenant_id=tenant_id,
            name=name,
            species=species,
            dam_id=dam_id,
            sire_id=sire_id,
            status=PlanStatus.PLANNING,
            created_at=now,
            updated_at=now,
            version=1,
        )

    @property
    def locked_cycle_start(self) -> date | None:
        """Legacy read-only alias of ``cycle_start_observed`` once anchored."""
        if self.repro_anchor_mode is None:
            return None
        return self.cycle_start_observed

    @property
    def anchor_field(self) -> str | None:
        if self.repro_anchor_mode is None:
            return None
        return ANCHOR_FIELD_BY_MODE[self.repro_anchor_mode]

    def calculated_dates(self) -> CalculatedDates | None:
        if self.expected_due_date is None:
            return None
        return CalculatedDates(
            cycle_start=self.expected_cycle_start,
            ovulation=self.expected_ovulation,
            due_date=self.expected_due_date,
            weaned_date=self.expected_weaned,
            placement_start=self.expected_placement_start,
            placement_completed=self.expected_placement_completed,
        )

    def apply_calculated_dates(self, dates: CalculatedDates) -> None:
        self.expected_cycle_start = dates.cycle_start
        self.expected_ovulation = dates.ovulation
        self.expected_due_date = dates.due_date
        self.expected_weaned = dates.weaned_date
        self.expected_placement_start = dates.placement_start
        self.expected_placement_completed = dates.placement_completed

    def changes_from(self, before: BreedingPlan) -> dict:
        """Column values that differ from an earlier snapshot of the same plan."""
        changes = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name not in _BOOKKEEPING_FIELDS
            and getattr(self, f.name) != getattr(before, f.name)
        }
        if self.locked_cycle_start != before.locked_cycle_start:
            changes["locked_cycle_start"] = self.locked_cycle_start
        return changes
