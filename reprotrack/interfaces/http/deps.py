from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import date

from fastapi import Request

from reprotrack.application.errors import PermissionDenied
from reprotrack.application.services.species_biology import SpeciesBiologyTable
from reprotrack.config.settings import Settings, get_settings
from reprotrack.infrastructure.db.session import SQLAlchemyUnitOfWork
from reprotrack.interfaces.middleware.tenant_middleware import TenantContext
from reprotrack.utils.datetime_tz import local_today


async def get_tenant_context(request: Request) -> TenantContext:
    context = getattr(request.state, "tenant_context", None)
    if context is None:
        raise PermissionDenied("Tenant context required")
    return context


async def get_uow(request: Request) -> AsyncIterator[SQLAlchemyUnitOfWork]:
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        raise RuntimeError("Session factory not configured")
    uow = SQLAlchemyUnitOfWork(session_factory)
    async with uow:
        yield uow


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def get_species_biology(request: Request) -> SpeciesBiologyTable:
    biology = getattr(request.app.state, "species_biology", None)
    if biology is None:
        raise RuntimeError("Species biology table not configured")
    return biology


def get_today(request: Request) -> date:
    return local_today(get_app_settings(request).timezone)
