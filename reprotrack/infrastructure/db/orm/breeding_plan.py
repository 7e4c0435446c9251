from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from reprotrack.infrastructure.db.base import Base


class BreedingPlanORM(Base):
    __tablename__ = "breeding_plans"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    tenant_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    species: Mapped[str] = mapped_column(String(16), nullable=False)
    dam_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("animals.id"), nullable=True, index=True
    )
    sire_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("animals.id"), nullable=True
    )
    status: Mapped[str] = mapped_column(String(16), nullable=False, server_default="PLANNING")

    # Anchor
    repro_anchor_mode: Mapped[str | None] = mapped_column(String(16), nullable=True)
    cycle_start_confidence: Mapped[str | None] = mapped_column(String(8), nullable=True)
    ovulation_confidence: Mapped[str | None] = mapped_column(String(8), nullable=True)
    cycle_start_observed: Mapped[date | None] = mapped_column(Date, nullable=True)
    ovulation_confirmed: Mapped[date | None] = mapped_column(Date, nullable=True)
    ovulation_confirmed_method: Mapped[str | None] = mapped_column(String(32), nullable=True)
    ovulation_test_result_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    # Legacy mirror of cycle_start_observed, written by the repository only
    locked_cycle_start: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Actual dates
    cycle_start_date_actual: Mapped[date | None] = mapped_column(Date, nullable=True)
    breed_date_actual: Mapped[date | None] = mapped_column(Date, nullable=True)
    birth_date_actual: Mapped[date | None] = mapped_column(Date, nullable=True)
    weaned_date_actual: Mapped[date | None] = mapped_column(Date, nullable=True)
    placement_start_date_actual: Mapped[date | None] = mapped_column(Date, nullable=True)
    placement_completed_date_actual: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Ovulation variance
    expected_ovulation_offset: Mapped[int | None] = mapped_column(Integer, nullable=True)
    actual_ovulation_offset: Mapped[int | None] = mapped_column(Integer, nullable=True)
    variance_from_expected: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Tolerance baselines
    committed_cycle_start: Mapped[date | None] = mapped_column(Date, nullable=True)
    committed_ovulation: Mapped[date | None] = mapped_column(Date, nullable=True)
    committed_breed_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    committed_weaned_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Expected ladder
    expected_cycle_start: Mapped[date | None] = mapped_column(Date, nullable=True)
    expected_ovulation: Mapped[date | None] = mapped_column(Date, nullable=True)
    expected_due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    expected_weaned: Mapped[date | None] = mapped_column(Date, nullable=True)
    expected_placement_start: Mapped[date | None] = mapped_column(Date, nullable=True)
    expected_placement_completed: Mapped[date | None] = mapped_column(Date, nullable=True)

    date_source_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    committed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
