from __future__ import annotations

import dataclasses
from types import SimpleNamespace

import pytest


class StubRepo:
    """In-memory repository keyed by id with optimistic versioning."""

    def __init__(self, *items) -> None:
        self.items = {item.id: item for item in items}
        self.updates: list[dict] = []
        self.add_called = False

    async def add(self, item):
        self.add_called = True
        self.items[item.id] = item
        return item

    async def get(self, tenant_id, item_id):
        item = self.items.get(item_id)
        if item is None or item.tenant_id != tenant_id:
            return None
        return dataclasses.replace(item)

    async def get_for_update(self, tenant_id, item_id):
        return await self.get(tenant_id, item_id)

    async def list(self, tenant_id, **filters):
        self.last_filters = filters
        return [item for item in self.items.values() if item.tenant_id == tenant_id]

    async def update(self, tenant_id, item_id, data, expected_version):
        self.updates.append(dict(data))
        item = self.items.get(item_id)
        if item is None or item.version != expected_version:
            return None
        values = {k: v for k, v in data.items() if k != "locked_cycle_start"}
        updated = dataclasses.replace(item, **values, version=expected_version + 1)
        self.items[item_id] = updated
        return dataclasses.replace(updated)


def make_uow(animals: StubRepo | None = None, plans: StubRepo | None = None):
    commits: list[bool] = []

    async def commit():
        commits.append(True)

    async def rollback():
        return None

    return SimpleNamespace(
        animals=animals or StubRepo(),
        breeding_plans=plans or StubRepo(),
        commit=commit,
        rollback=rollback,
        commits=commits,
    )


@pytest.fixture()
def stub_repo():
    return StubRepo


@pytest.fixture()
def uow_factory():
    return make_uow
