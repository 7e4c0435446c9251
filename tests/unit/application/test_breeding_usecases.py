from __future__ import annotations

import asyncio
from datetime import date
from uuid import uuid4

import pytest

from reprotrack.application.errors import (
    AnchorModeNotSupported,
    ConflictError,
    ImmutableField,
    NotFound,
    PlanAlreadyCommitted,
    ValidationError,
)
from reprotrack.application.services.anchor_lock import lock_anchor
from reprotrack.application.services.species_biology import default_biology_table
from reprotrack.application.use_cases.breeding import (
    create_plan,
    list_plans,
    lock_plan_anchor,
    update_plan,
    upgrade_plan_anchor,
)
from reprotrack.domain.models.animal import Animal
from reprotrack.domain.models.breeding_plan import BreedingPlan
from reprotrack.domain.value_objects.plan_status import PlanStatus
from reprotrack.domain.value_objects.reproduction import AnchorMode


def make_plan(tenant_id, species: str = "DOG") -> BreedingPlan:
    return BreedingPlan.create(
        tenant_id=tenant_id, name="Spring litter", species=species, dam_id=uuid4(), sire_id=uuid4()
    )


def committed_plan(tenant_id) -> BreedingPlan:
    plan = make_plan(tenant_id)
    lock_anchor(plan, default_biology_table.get("DOG"), "CYCLE_START", "2026-03-15")
    return plan


async def test_create_plan_checks_parties(stub_repo, uow_factory):
    tenant_id = uuid4()
    dam = Animal.create(tenant_id=tenant_id, name="Maple", species="DOG", sex="FEMALE")
    sire = Animal.create(tenant_id=tenant_id, name="Rex", species="DOG", sex="MALE")
    plans = stub_repo()
    uow = uow_factory(animals=stub_repo(dam, sire), plans=plans)

    plan = await create_plan.execute(
        uow,
        tenant_id,
        create_plan.CreatePlanInput(
            name="Spring litter", species="dog", dam_id=dam.id, sire_id=sire.id
        ),
        biology=default_biology_table,
    )
    assert plans.add_called
    assert plan.species == "DOG"
    assert plan.status is PlanStatus.PLANNING
    assert plan.calculated_dates() is None


async def test_create_plan_rejects_wrong_species_dam(stub_repo, uow_factory):
    tenant_id = uuid4()
    cat = Animal.create(tenant_id=tenant_id, name="Tabby", species="CAT", sex="FEMALE")
    with pytest.raises(ValidationError) as exc:
        await create_plan.execute(
            uow_factory(animals=stub_repo(cat)),
            tenant_id,
            create_plan.CreatePlanInput(name="Litter", species="DOG", dam_id=cat.id),
            biology=default_biology_table,
        )
    assert exc.value.details == {"field": "damId"}


async def test_create_plan_rejects_male_dam(stub_repo, uow_factory):
    tenant_id = uuid4()
    male = Animal.create(tenant_id=tenant_id, name="Rex", species="DOG", sex="MALE")
    with pytest.raises(ValidationError):
        await create_plan.execute(
            uow_factory(animals=stub_repo(male)),
            tenant_id,
            create_plan.CreatePlanInput(name="Litter", species="DOG", dam_id=male.id),
            biology=default_biology_table,
        )


async def test_create_plan_missing_sire(stub_repo, uow_factory):
    with pytest.raises(NotFound):
        await create_plan.execute(
            uow_factory(),
            uuid4(),
            create_plan.CreatePlanInput(name="Litter", species="DOG", sire_id=uuid4()),
            biology=default_biology_table,
        )


async def test_list_plans_rejects_unknown_status(stub_repo, uow_factory):
    with pytest.raises(ValidationError):
        await list_plans.execute(uow_factory(), uuid4(), status="hatched")


async def test_lock_persists_changed_fields(stub_repo, uow_factory):
    tenant_id = uuid4()
    plan = make_plan(tenant_id)
    plans = stub_repo(plan)
    uow = uow_factory(plans=plans)

    output = await lock_plan_anchor.execute(
        uow,
        tenant_id,
        plan.id,
        lock_plan_anchor.LockPlanAnchorInput(anchor_mode="CYCLE_START", anchor_date="2026-03-15"),
        biology=default_biology_table,
    )
    assert output.result.calculated_dates.due_date == date(2026, 5, 29)
    assert output.plan.status is PlanStatus.COMMITTED
    assert output.plan.version == 2
    written = plans.updates[0]
    assert written["status"] is PlanStatus.COMMITTED
    assert written["locked_cycle_start"] == date(2026, 3, 15)
    assert written["expected_due_date"] == date(2026, 5, 29)
    assert "version" not in written
    assert uow.commits == [True]


async def test_failed_lock_writes_nothing(stub_repo, uow_factory):
    tenant_id = uuid4()
    plan = make_plan(tenant_id, species="GOAT")
    plans = stub_repo(plan)
    uow = uow_factory(plans=plans)
    with pytest.raises(AnchorModeNotSupported):
        await lock_plan_anchor.execute(
            uow,
            tenant_id,
            plan.id,
            lock_plan_anchor.LockPlanAnchorInput(
                anchor_mode="OVULATION", anchor_date="2026-03-15", confirmation_method="LH_TEST"
            ),
            biology=default_biology_table,
        )
    assert plans.updates == []
    assert uow.commits == []


async def test_concurrent_locks_commit_once(stub_repo, uow_factory):
    tenant_id = uuid4()
    plan = make_plan(tenant_id)
    plans = stub_repo(plan)
    uow = uow_factory(plans=plans)

    def lock(anchor_date: str):
        return lock_plan_anchor.execute(
            uow,
            tenant_id,
            plan.id,
            lock_plan_anchor.LockPlanAnchorInput(anchor_mode="CYCLE_START", anchor_date=anchor_date),
            biology=default_biology_table,
        )

    first, second = await asyncio.gather(
        lock("2026-03-15"), lock("2026-03-20"), return_exceptions=True
    )
    assert isinstance(first, lock_plan_anchor.LockPlanAnchorOutput)
    assert isinstance(second, PlanAlreadyCommitted)
    assert len(plans.updates) == 1
    assert uow.commits == [True]
    stored = plans.items[plan.id]
    assert stored.cycle_start_observed == date(2026, 3, 15)
    assert stored.committed_cycle_start == date(2026, 3, 15)
    assert stored.version == 2


async def test_lock_missing_plan(stub_repo, uow_factory):
    with pytest.raises(NotFound):
        await lock_plan_anchor.execute(
            uow_factory(),
            uuid4(),
            uuid4(),
            lock_plan_anchor.LockPlanAnchorInput(
                anchor_mode="CYCLE_START", anchor_date="2026-03-15"
            ),
            biology=default_biology_table,
        )


async def test_upgrade_persists_new_anchor(stub_repo, uow_factory):
    tenant_id = uuid4()
    plan = committed_plan(tenant_id)
    plans = stub_repo(plan)
    output = await upgrade_plan_anchor.execute(
        uow_factory(plans=plans),
        tenant_id,
        plan.id,
        upgrade_plan_anchor.UpgradePlanAnchorInput(
            ovulation_date="2026-03-29", confirmation_method="PROGESTERONE_TEST"
        ),
        biology=default_biology_table,
    )
    assert output.result.variance.variance == 2
    assert output.result.placement_shift_days == 2
    assert output.plan.repro_anchor_mode is AnchorMode.OVULATION
    assert output.plan.expected_due_date == date(2026, 5, 31)
    assert "locked_cycle_start" not in plans.updates[0]


async def test_update_shifts_ladder_with_anchor(stub_repo, uow_factory):
    tenant_id = uuid4()
    plan = committed_plan(tenant_id)
    output = await update_plan.execute(
        uow_factory(plans=stub_repo(plan)),
        tenant_id,
        plan.id,
        update_plan.UpdatePlanInput(changes={"cycle_start_observed": "2026-03-17"}, version=1),
        biology=default_biology_table,
    )
    assert output.plan.cycle_start_observed == date(2026, 3, 17)
    assert output.plan.expected_due_date == date(2026, 5, 31)
    assert output.plan.locked_cycle_start == date(2026, 3, 17)
    assert output.warnings == []


async def test_update_outside_tolerance(stub_repo, uow_factory):
    tenant_id = uuid4()
    plan = committed_plan(tenant_id)
    plans = stub_repo(plan)
    with pytest.raises(ImmutableField):
        await update_plan.execute(
            uow_factory(plans=plans),
            tenant_id,
            plan.id,
            update_plan.UpdatePlanInput(changes={"cycle_start_observed": "2026-03-20"}),
            biology=default_biology_table,
        )
    assert plans.updates == []


async def test_sequential_edits_cannot_walk_past_tolerance(stub_repo, uow_factory):
    tenant_id = uuid4()
    plan = committed_plan(tenant_id)
    plans = stub_repo(plan)
    uow = uow_factory(plans=plans)

    first = await update_plan.execute(
        uow,
        tenant_id,
        plan.id,
        update_plan.UpdatePlanInput(changes={"cycle_start_observed": "2026-03-18"}, version=1),
        biology=default_biology_table,
    )
    assert first.plan.committed_cycle_start == date(2026, 3, 15)

    with pytest.raises(ImmutableField) as exc:
        await update_plan.execute(
            uow,
            tenant_id,
            plan.id,
            update_plan.UpdatePlanInput(changes={"cycle_start_observed": "2026-03-21"}, version=2),
            biology=default_biology_table,
        )
    assert exc.value.details["toleranceDays"] == 3
    assert plans.items[plan.id].cycle_start_observed == date(2026, 3, 18)

    # Moving back inside the original window is still allowed
    back = await update_plan.execute(
        uow,
        tenant_id,
        plan.id,
        update_plan.UpdatePlanInput(changes={"cycle_start_observed": "2026-03-13"}, version=2),
        biology=default_biology_table,
    )
    assert back.plan.cycle_start_observed == date(2026, 3, 13)


async def test_bred_transition_records_breed_baseline(stub_repo, uow_factory):
    tenant_id = uuid4()
    plan = committed_plan(tenant_id)
    plans = stub_repo(plan)
    uow = uow_factory(plans=plans)

    async def update(changes: dict, version: int):
        return await update_plan.execute(
            uow,
            tenant_id,
            plan.id,
            update_plan.UpdatePlanInput(changes=changes, version=version),
            biology=default_biology_table,
        )

    bred = await update({"status": "bred", "breed_date_actual": "2026-03-27"}, 1)
    assert bred.plan.committed_breed_date == date(2026, 3, 27)
    assert plans.updates[-1]["committed_breed_date"] == date(2026, 3, 27)

    await update({"breed_date_actual": "2026-03-29"}, 2)
    with pytest.raises(ImmutableField):
        await update({"breed_date_actual": "2026-03-31"}, 3)


async def test_update_stale_version(stub_repo, uow_factory):
    tenant_id = uuid4()
    plan = committed_plan(tenant_id)
    with pytest.raises(ConflictError):
        await update_plan.execute(
            uow_factory(plans=stub_repo(plan)),
            tenant_id,
            plan.id,
            update_plan.UpdatePlanInput(changes={"name": "Renamed"}, version=3),
            biology=default_biology_table,
        )


async def test_update_gestation_warning(stub_repo, uow_factory):
    tenant_id = uuid4()
    plan = committed_plan(tenant_id)
    plan.status = PlanStatus.BRED
    plan.breed_date_actual = date(2026, 3, 27)
    output = await update_plan.execute(
        uow_factory(plans=stub_repo(plan)),
        tenant_id,
        plan.id,
        update_plan.UpdatePlanInput(
            changes={"birth_date_actual": "2026-04-08", "status": "birthed"}
        ),
        biology=default_biology_table,
        gestation_policy="warn",
    )
    assert output.plan.status is PlanStatus.BIRTHED
    assert output.plan.birth_date_actual == date(2026, 4, 8)
    assert len(output.warnings) == 1


async def test_update_without_changes_returns_plan(stub_repo, uow_factory):
    tenant_id = uuid4()
    plan = make_plan(tenant_id)
    plans = stub_repo(plan)
    output = await update_plan.execute(
        uow_factory(plans=plans),
        tenant_id,
        plan.id,
        update_plan.UpdatePlanInput(),
        biology=default_biology_table,
    )
    assert output.plan.id == plan.id
    assert plans.updates == []


async def test_update_rejects_unknown_fields(stub_repo, uow_factory):
    with pytest.raises(ValidationError) as exc:
        await update_plan.execute(
            uow_factory(),
            uuid4(),
            uuid4(),
            update_plan.UpdatePlanInput(changes={"expected_due_date": "2026-06-01"}),
            biology=default_biology_table,
        )
    assert exc.value.details == {"fields": ["expectedDueDate"]}
