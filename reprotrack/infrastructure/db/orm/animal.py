from __future__ import annotations

import json
from datetime import date, datetime
from uuid import UUID

from sqlalchemy import (
    Date,
    DateTime,
    Integer,
    String,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from reprotrack.infrastructure.db.base import Base


class DateList(TypeDecorator):
    """Stores a list of dates as ARRAY(DATE) in PostgreSQL, ISO strings in JSON elsewhere."""

    impl = Text
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(ARRAY(Date))
        return dialect.type_descriptor(Text)

    def process_bind_param(self, value, dialect):
        if value is None:
            value = []
        if dialect.name == "postgresql":
            return list(value)
        return json.dumps([d.isoformat() for d in value])

    def process_result_value(self, value, dialect):
        if dialect.name == "postgresql":
            return list(value) if value is not None else []
        if not value:
            return []
        return [date.fromisoformat(item) for item in json.loads(value)]


class AnimalORM(Base):
    __tablename__ = "animals"
    __table_args__ = (UniqueConstraint("tenant_id", "id", name="ux_animals_tenant_id"),)

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    tenant_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    species: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    sex: Mapped[str | None] = mapped_column(String(6), nullable=True)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Reproduction fields
    female_cycle_len_override_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cycle_start_dates: Mapped[list[date]] = mapped_column(
        DateList, nullable=False, default=list
    )

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
