from __future__ import annotations

from datetime import date

import pytest

from reprotrack.interfaces.http.deps import get_today


@pytest.fixture()
def fixed_today(app):
    app.dependency_overrides[get_today] = lambda: date(2026, 3, 1)
    yield date(2026, 3, 1)
    app.dependency_overrides.pop(get_today, None)


async def create_female_dog(client, headers, **extra) -> dict:
    payload = {"name": "Maple", "species": "dog", "sex": "female", **extra}
    response = await client.post("/api/v1/animals/", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def test_cycle_analysis_flow(client, headers, fixed_today):
    animal = await create_female_dog(client, headers)
    assert animal["species"] == "DOG"
    assert animal["cycleStartDates"] == []
    animal_id = animal["id"]

    put_response = await client.put(
        f"/api/v1/animals/{animal_id}/cycle-start-dates",
        json={"dates": ["2025-12-27", "2025-01-01", "2025-06-30", "2025-06-30"]},
        headers=headers,
    )
    assert put_response.status_code == 200, put_response.text
    updated = put_response.json()
    assert updated["cycleStartDates"] == ["2025-01-01", "2025-06-30", "2025-12-27"]
    assert updated["lastCycleStart"] == "2025-12-27"

    analysis_response = await client.get(
        f"/api/v1/animals/{animal_id}/cycle-analysis", headers=headers
    )
    assert analysis_response.status_code == 200, analysis_response.text
    analysis = analysis_response.json()
    assert analysis["cycleLengthDays"] == 180
    assert analysis["cycleLengthSource"] == "HISTORY"
    assert analysis["gapsUsedDays"] == [180, 180]
    assert analysis["warningConflict"] is False
    projection = analysis["nextCycleProjection"]
    assert projection["projectedHeatStart"] == "2026-06-25"
    assert projection["projectedOvulationWindow"] == {
        "earliest": "2026-01-06",
        "mostLikely": "2026-01-08",
        "latest": "2026-01-10",
    }
    assert projection["recommendedTestingStart"] == "2026-01-03"
    assert projection["source"] == "HISTORY"
    upcoming = analysis["upcomingCycleStarts"]
    assert [item["date"] for item in upcoming] == ["2026-06-25", "2026-12-22"]
    assert upcoming[0]["source"] == "HISTORY"

    override_response = await client.patch(
        f"/api/v1/animals/{animal_id}",
        json={"femaleCycleLenOverrideDays": 200},
        headers=headers,
    )
    assert override_response.status_code == 200, override_response.text
    analysis = (
        await client.get(f"/api/v1/animals/{animal_id}/cycle-analysis", headers=headers)
    ).json()
    assert analysis["cycleLengthDays"] == 200
    assert analysis["cycleLengthSource"] == "OVERRIDE"

    cleared = await client.patch(
        f"/api/v1/animals/{animal_id}",
        json={"femaleCycleLenOverrideDays": None},
        headers=headers,
    )
    assert cleared.status_code == 200
    assert cleared.json()["femaleCycleLenOverrideDays"] is None
    analysis = (
        await client.get(f"/api/v1/animals/{animal_id}/cycle-analysis", headers=headers)
    ).json()
    assert analysis["cycleLengthSource"] == "HISTORY"


async def test_cycle_analysis_without_history(client, headers, fixed_today):
    animal = await create_female_dog(client, headers)
    response = await client.get(f"/api/v1/animals/{animal['id']}/cycle-analysis", headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["cycleLengthSource"] == "BIOLOGY"
    assert body["nextCycleProjection"]["source"] == "BIOLOGY"
    assert body["nextCycleProjection"]["projectedHeatStart"] == "2026-08-28"


async def test_cycle_analysis_for_male(client, headers, fixed_today):
    response = await client.post(
        "/api/v1/animals/",
        json={"name": "Rex", "species": "DOG", "sex": "MALE"},
        headers=headers,
    )
    male_id = response.json()["id"]
    analysis = await client.get(f"/api/v1/animals/{male_id}/cycle-analysis", headers=headers)
    assert analysis.status_code == 200
    assert analysis.json()["nextCycleProjection"] is None
    assert analysis.json()["upcomingCycleStarts"] == []


async def test_invalid_cycle_start_date(client, headers):
    animal = await create_female_dog(client, headers)
    response = await client.put(
        f"/api/v1/animals/{animal['id']}/cycle-start-dates",
        json={"dates": ["2025-02-30"]},
        headers=headers,
    )
    assert response.status_code == 422
    body = response.json()
    assert body["code"] == "invalid_date"
    assert body["details"]["field"] == "dates[0]"


async def test_unknown_species_rejected(client, headers):
    response = await client.post(
        "/api/v1/animals/", json={"name": "Nibbles", "species": "FERRET"}, headers=headers
    )
    assert response.status_code == 422
    assert response.json()["code"] == "unknown_species"


async def test_override_must_be_positive(client, headers):
    response = await client.post(
        "/api/v1/animals/",
        json={"name": "Maple", "species": "DOG", "femaleCycleLenOverrideDays": 0},
        headers=headers,
    )
    assert response.status_code == 422


async def test_animals_are_tenant_scoped(client, headers):
    animal = await create_female_dog(client, headers)
    other = {"X-Tenant-ID": "00000000-0000-0000-0000-000000000001"}
    response = await client.get(f"/api/v1/animals/{animal['id']}", headers=other)
    assert response.status_code == 404
    listed = await client.get("/api/v1/animals/", headers=other)
    assert listed.json() == []


async def test_tenant_header_required(client):
    response = await client.get("/api/v1/animals/")
    assert response.status_code == 403
    assert response.json()["code"] == "forbidden"

    invalid = await client.get("/api/v1/animals/", headers={"X-Tenant-ID": "not-a-uuid"})
    assert invalid.status_code == 403


async def test_health_is_public(client):
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
