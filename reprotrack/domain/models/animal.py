from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from uuid import UUID, uuid4


@dataclass(slots=True)
class Animal:
    id: UUID
    tenant_id: UUID
    name: str
    species: str
    sex: str | None = None
    birth_date: date | None = None

    # Manual cycle length override, highest priority for the estimator
    female_cycle_len_override_days: int | None = None
    # Chronological, replaced as a whole through the dedicated endpoint
    cycle_start_dates: list[date] = field(default_factory=list)

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
        sex: str | None = None,
        birth_date: date | None = None,
        female_cycle_len_override_days: int | None = None,
    ) -> Animal:
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid4(),
            tenant_id=tenant_id,
            name=name,
            species=species,
            sex=sex,
            birth_date=birth_date,
            female_cycle_len_override_days=female_cycle_len_override_days,
            cycle_start_dates=[],
            created_at=now,
            updated_at=now,
            version=1,
        )

    @property
    def last_cycle_start(self) -> date | None:
        return self.cycle_start_dates[-1] if self.cycle_start_dates else None

    def replace_cycle_start_dates(self, dates: list[date]) -> None:
        self.cycle_start_dates = sorted(set(dates))
