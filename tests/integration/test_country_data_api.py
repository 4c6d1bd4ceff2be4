"""Integration tests for /api/country-data."""

import asyncio

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from conftest import country_row
from fintech_index.config import get_settings

BASE = "/api/country-data"


async def seed(client: AsyncClient, headers: dict, *rows: dict) -> list:
    created = []
    for row in rows:
        response = await client.post(BASE, json=row, headers=headers)
        assert response.status_code == 201, response.text
        created.append(response.json())
    return created


class TestWrites:
    async def test_create(self, client: AsyncClient, editor_headers):
        response = await client.post(BASE, json=country_row("NGA", 2024), headers=editor_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["countryId"] == "NGA"
        assert body["finalScore"] == 70.5
        assert body["createdBy"] == "editor@example.com"
        assert body["updatedBy"] == "editor@example.com"

    async def test_duplicate_key_is_409_and_original_kept(self, client: AsyncClient, editor_headers):
        await seed(client, editor_headers, country_row("NGA", 2024))

        response = await client.post(BASE, json=country_row("NGA", 2024, finalScore=1.0), headers=editor_headers)

        assert response.status_code == 409
        rows = (await client.get(BASE)).json()
        assert len(rows) == 1
        assert rows[0]["finalScore"] == 70.5

    async def test_viewer_cannot_write(self, client: AsyncClient, viewer_headers):
        response = await client.post(BASE, json=country_row(), headers=viewer_headers)

        assert response.status_code == 403

    async def test_anonymous_cannot_write(self, client: AsyncClient):
        assert (await client.post(BASE, json=country_row())).status_code == 401

    async def test_missing_score_is_400(self, client: AsyncClient, editor_headers):
        row = country_row()
        del row["finalScore"]

        response = await client.post(BASE, json=row, headers=editor_headers)

        assert response.status_code == 400


class TestBulk:
    async def test_clean_batch(self, client: AsyncClient, editor_headers, notifications):
        response = await client.post(
            f"{BASE}/bulk",
            json={"data": [country_row("NGA", 2024), country_row("KEN", 2024), country_row("NGA", 2023)]},
            headers=editor_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["insertedCount"] == 3
        assert body["failedCount"] == 0
        assert notifications.admin_subjects == ["Country Data Upload Completed"]
        assert "Years Covered: 2023, 2024" in notifications.admin[0].body

    async def test_in_batch_duplicates_reject_everything(self, client: AsyncClient, editor_headers):
        response = await client.post(
            f"{BASE}/bulk",
            json={"data": [country_row("NGA", 2024), country_row("NGA", 2024, finalScore=10.0)]},
            headers=editor_headers,
        )

        assert response.status_code == 400
        body = response.json()
        assert body["detail"] == "Duplicate data detected"
        assert [(c["countryId"], c["year"]) for c in body["conflicts"]] == [("NGA", 2024), ("NGA", 2024)]
        assert (await client.get(BASE)).json() == []

    async def test_collision_with_stored_row_rejects_everything(self, client: AsyncClient, editor_headers):
        await seed(client, editor_headers, country_row("GHA", 2023))

        response = await client.post(
            f"{BASE}/bulk",
            json={"data": [country_row("KEN", 2023), country_row("GHA", 2023)]},
            headers=editor_headers,
        )

        assert response.status_code == 400
        assert response.json()["conflicts"] == [
            {"countryId": "GHA", "year": 2023, "reason": "already_exists"}
        ]
        assert [r["countryId"] for r in (await client.get(BASE)).json()] == ["GHA"]

    async def test_empty_batch(self, client: AsyncClient, editor_headers):
        response = await client.post(f"{BASE}/bulk", json={"data": []}, headers=editor_headers)

        assert response.status_code == 400


class TestReads:
    async def test_default_order_and_filters(self, client: AsyncClient, editor_headers):
        await seed(
            client,
            editor_headers,
            country_row("NGA", 2023, finalScore=60.0),
            country_row("KEN", 2024, finalScore=90.0),
            country_row("NGA", 2024, finalScore=50.0),
        )

        rows = (await client.get(BASE)).json()
        assert [(r["year"], r["name"]) for r in rows] == [(2024, "Kenya"), (2024, "Nigeria"), (2023, "Nigeria")]

        by_score = (await client.get(BASE, params={"sort": "score"})).json()
        assert [r["finalScore"] for r in by_score] == [90.0, 60.0, 50.0]

        nigeria = (await client.get(BASE, params={"country": "nig"})).json()
        assert {r["countryId"] for r in nigeria} == {"NGA"}

        by_code = (await client.get(BASE, params={"country": "ken"})).json()
        assert [r["name"] for r in by_code] == ["Kenya"]

        only_2023 = (await client.get(BASE, params={"year": 2023})).json()
        assert len(only_2023) == 1

        limited = (await client.get(BASE, params={"limit": 2})).json()
        assert len(limited) == 2

    async def test_bad_year_parameter(self, client: AsyncClient):
        response = await client.get(BASE, params={"year": "abc"})

        assert response.status_code == 400

    async def test_name_sort_breaks_ties_by_newest_year(self, client: AsyncClient, editor_headers):
        await seed(
            client,
            editor_headers,
            country_row("NGA", 2022),
            country_row("NGA", 2024),
            country_row("KEN", 2023),
        )

        rows = (await client.get(BASE, params={"sort": "name"})).json()

        assert [(r["name"], r["year"]) for r in rows] == [("Kenya", 2023), ("Nigeria", 2024), ("Nigeria", 2022)]

    async def test_limit_is_capped(self, client: AsyncClient, editor_headers, monkeypatch):
        await seed(client, editor_headers, country_row("NGA", 2022), country_row("NGA", 2023), country_row("NGA", 2024))
        monkeypatch.setattr(get_settings(), "max_query_limit", 2)

        response = await client.get(BASE, params={"limit": 100000})

        assert response.status_code == 200
        assert len(response.json()) == 2

    async def test_slow_read_is_408(self, client: AsyncClient, monkeypatch):
        original = AsyncSession.execute

        async def slow_execute(self, *args, **kwargs):
            await asyncio.sleep(1)
            return await original(self, *args, **kwargs)

        monkeypatch.setattr(get_settings(), "query_timeout_seconds", 0.05)
        monkeypatch.setattr(AsyncSession, "execute", slow_execute)

        response = await client.get(BASE)

        assert response.status_code == 408

    async def test_stats_when_empty(self, client: AsyncClient):
        response = await client.get(f"{BASE}/stats")

        assert response.status_code == 200
        assert response.json() == {
            "totalRecords": 0,
            "uniqueCountries": 0,
            "years": [],
            "averageScore": None,
            "minScore": None,
            "maxScore": None,
        }

    async def test_stats_years_and_countries(self, client: AsyncClient, editor_headers):
        await seed(
            client,
            editor_headers,
            country_row("NGA", 2023, finalScore=60.0),
            country_row("NGA", 2024, finalScore=70.0),
            country_row("ZAF", 2024, finalScore=81.0),
        )

        stats = (await client.get(f"{BASE}/stats")).json()
        assert stats["totalRecords"] == 3
        assert stats["uniqueCountries"] == 2
        assert stats["years"] == [2024, 2023]
        assert stats["averageScore"] == 70.33
        assert stats["minScore"] == 60.0
        assert stats["maxScore"] == 81.0

        assert (await client.get(f"{BASE}/years")).json() == [2024, 2023]
        assert (await client.get(f"{BASE}/countries")).json() == ["Nigeria", "South Africa"]


class TestUpdate:
    async def test_admin_updates(self, client: AsyncClient, admin_headers):
        await seed(client, admin_headers, country_row("NGA", 2024))

        response = await client.put(f"{BASE}/NGA/2024", json={"finalScore": 75.0}, headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["finalScore"] == 75.0
        assert body["literacyRate"] == 62.0
        assert body["updatedBy"] == "admin@example.com"

    async def test_editor_cannot_update(self, client: AsyncClient, editor_headers):
        await seed(client, editor_headers, country_row("NGA", 2024))

        response = await client.put(f"{BASE}/NGA/2024", json={"finalScore": 75.0}, headers=editor_headers)

        assert response.status_code == 403

    async def test_update_missing_record(self, client: AsyncClient, admin_headers):
        response = await client.put(f"{BASE}/NGA/1999", json={"finalScore": 75.0}, headers=admin_headers)

        assert response.status_code == 404


class TestDeletes:
    async def test_delete_one(self, client: AsyncClient, editor_headers):
        await seed(client, editor_headers, country_row("NGA", 2024))

        response = await client.delete(f"{BASE}/NGA/2024", headers=editor_headers)
        again = await client.delete(f"{BASE}/NGA/2024", headers=editor_headers)

        assert response.status_code == 200
        assert response.json()["deletedData"]["countryId"] == "NGA"
        assert again.status_code == 404

    async def test_delete_by_year(self, client: AsyncClient, editor_headers, notifications):
        await seed(client, editor_headers, country_row("NGA", 2024), country_row("KEN", 2024), country_row("KEN", 2023))

        response = await client.delete(f"{BASE}/delete-by-year/2024", headers=editor_headers)

        assert response.status_code == 200
        assert response.json()["deletedCount"] == 2
        assert notifications.admin_subjects == ["Country Data Deleted (year 2024)"]
        assert len((await client.get(BASE)).json()) == 1

    async def test_delete_by_year_with_nothing_to_delete(self, client: AsyncClient, editor_headers, notifications):
        response = await client.delete(f"{BASE}/delete-by-year/2023", headers=editor_headers)

        assert response.status_code == 404
        assert notifications.admin == []

    async def test_delete_by_country(self, client: AsyncClient, editor_headers):
        await seed(client, editor_headers, country_row("NGA", 2024), country_row("KEN", 2024))

        response = await client.delete(f"{BASE}/delete-by-country/nigeria", headers=editor_headers)

        assert response.json()["deletedCount"] == 1
        assert [r["countryId"] for r in (await client.get(BASE)).json()] == ["KEN"]

    async def test_delete_selective(self, client: AsyncClient, editor_headers):
        created = await seed(client, editor_headers, country_row("NGA", 2024), country_row("KEN", 2024))

        response = await client.request(
            "DELETE", f"{BASE}/delete-selective", json={"ids": [created[0]["id"]]}, headers=editor_headers
        )

        assert response.status_code == 200
        assert response.json()["deletedCount"] == 1

    async def test_delete_selective_validation(self, client: AsyncClient, editor_headers):
        empty = await client.request("DELETE", f"{BASE}/delete-selective", json={"ids": []}, headers=editor_headers)
        unknown = await client.request(
            "DELETE",
            f"{BASE}/delete-selective",
            json={"ids": ["00000000-0000-0000-0000-000000000001"]},
            headers=editor_headers,
        )

        assert empty.status_code == 400
        assert unknown.status_code == 404

    async def test_delete_all(self, client: AsyncClient, editor_headers):
        await seed(client, editor_headers, country_row("NGA", 2024), country_row("KEN", 2024))

        response = await client.delete(f"{BASE}/delete-all", headers=editor_headers)

        assert response.status_code == 200
        assert response.json()["deletedCount"] == 2
        assert response.json()["beforeCount"] == 2
        assert response.json()["afterCount"] == 0

    async def test_delete_all_on_collection_path(self, client: AsyncClient, admin_headers):
        await seed(client, admin_headers, country_row("NGA", 2024))

        response = await client.delete(BASE, headers=admin_headers)

        assert response.json()["deletedCount"] == 1

    async def test_viewer_cannot_delete(self, client: AsyncClient, viewer_headers):
        assert (await client.delete(f"{BASE}/delete-all", headers=viewer_headers)).status_code == 403
