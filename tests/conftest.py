from __future__ import annotations

import os
import sys
from collections.abc import AsyncIterator
from pathlib import Path
from uuid import UUID, uuid4

import pytest
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///default.db")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(PROJECT_ROOT))

# ruff: noqa: E402
from reprotrack.config.settings import Settings
from reprotrack.infrastructure.db.base import Base
from reprotrack.infrastructure.db.orm import animal, breeding_plan  # noqa: F401
from reprotrack.interfaces.http.main import create_app


@pytest.fixture(scope="session")
def tenant_id() -> UUID:
    return uuid4()


@pytest.fixture()
def test_settings(tmp_path) -> Settings:
    db_path = tmp_path / "test.db"
    return Settings.model_validate(
        {
            "database_url": f"sqlite+aiosqlite:///{db_path}",
            "tenant_header": "X-Tenant-ID",
            "log_level": "INFO",
            "environment": "test",
        }
    )


@pytest.fixture()
def app(test_settings: Settings):
    return create_app(settings=test_settings)


@pytest.fixture()
async def client(app) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        engine = app.state.engine
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        yield client
    await app.state.engine.dispose()


@pytest.fixture()
def headers(tenant_id: UUID) -> dict[str, str]:
    return {"X-Tenant-ID": str(tenant_id)}
