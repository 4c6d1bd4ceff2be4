"""Integration tests for /api/startups."""

from httpx import AsyncClient

BASE = "/api/startups"
UNKNOWN_ID = "00000000-0000-0000-0000-0000000000aa"


def startup(name: str = "Paystack", **overrides) -> dict:
    body = {
        "name": name,
        "country": "Nigeria",
        "sectors": ["Payments"],
        "foundedYear": 2015,
        "description": "Online payments",
        "website": "https://example.com",
    }
    body.update(overrides)
    return body


async def submit(client: AsyncClient, headers: dict = None, **overrides) -> dict:
    response = await client.post(BASE, json=startup(**overrides), headers=headers or {})
    assert response.status_code == 201, response.text
    return response.json()


class TestSubmission:
    async def test_public_submission_waits_for_review(self, client: AsyncClient, notifications):
        body = await submit(client, sector="Payments; Lending", sectors=None)

        assert body["verificationStatus"] == "pending"
        assert body["isVerified"] is False
        assert body["addedBy"] == "public"
        assert body["sectors"] == ["Payments", "Lending"]
        assert body["sector"] == "Payments, Lending"
        assert notifications.admin_subjects == ["New Startup Submitted - Requires Verification"]
        assert (await client.get(BASE)).json() == []

    async def test_admin_submission_is_approved(self, client: AsyncClient, admin_headers, notifications):
        body = await submit(client, admin_headers)

        assert body["verificationStatus"] == "approved"
        assert body["isVerified"] is True
        assert body["verifiedBy"] == "admin@example.com"
        assert notifications.admin == []
        assert [s["name"] for s in (await client.get(BASE)).json()] == ["Paystack"]

    async def test_editor_submission_is_pending(self, client: AsyncClient, editor_headers):
        body = await submit(client, editor_headers)

        assert body["verificationStatus"] == "pending"
        assert body["addedBy"] == "editor@example.com"

    async def test_invalid_token_is_treated_as_anonymous(self, client: AsyncClient):
        body = await submit(client, {"Authorization": "Bearer nonsense"})

        assert body["addedBy"] == "public"

    async def test_sector_is_required(self, client: AsyncClient):
        response = await client.post(BASE, json=startup(sectors=[]))

        assert response.status_code == 400

    async def test_sectors_must_fit_their_column(self, client: AsyncClient):
        response = await client.post(BASE, json=startup(sectors=["Payments"] * 60))

        assert response.status_code == 400


class TestVerification:
    async def test_verify_and_reverify(self, client: AsyncClient, admin_headers, notifications):
        created = await submit(client)
        url = f"{BASE}/{created['id']}/verify"

        first = await client.patch(url, json={"status": "approved", "adminNotes": "looks good"}, headers=admin_headers)
        assert first.status_code == 200
        approved = first.json()["startup"]
        assert approved["isVerified"] is True
        assert approved["verifiedBy"] == "admin@example.com"
        assert approved["adminNotes"] == "looks good"

        second = await client.patch(url, json={"status": "rejected"}, headers=admin_headers)
        rejected = second.json()["startup"]
        assert rejected["verificationStatus"] == "rejected"
        assert rejected["isVerified"] is False
        assert rejected["verifiedAt"] >= approved["verifiedAt"]
        assert "Startup Rejected: Paystack" in notifications.admin_subjects

    async def test_bad_status(self, client: AsyncClient, admin_headers):
        created = await submit(client)

        response = await client.patch(
            f"{BASE}/{created['id']}/verify", json={"status": "pending"}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid status. Must be 'approved' or 'rejected'"

    async def test_unknown_startup(self, client: AsyncClient, admin_headers):
        response = await client.patch(
            f"{BASE}/{UNKNOWN_ID}/verify", json={"status": "approved"}, headers=admin_headers
        )

        assert response.status_code == 404

    async def test_editor_cannot_verify(self, client: AsyncClient, editor_headers):
        created = await submit(client)

        response = await client.patch(
            f"{BASE}/{created['id']}/verify", json={"status": "approved"}, headers=editor_headers
        )

        assert response.status_code == 403

    async def test_pending_queue(self, client: AsyncClient, admin_headers):
        await submit(client, name="Kuda")
        await submit(client, admin_headers, name="Chipper")

        response = await client.get(f"{BASE}/pending", headers=admin_headers)

        assert response.json()["count"] == 1
        assert response.json()["startups"][0]["name"] == "Kuda"

    async def test_bulk_verify_counts_only_known_ids(self, client: AsyncClient, admin_headers):
        a = await submit(client, name="Kuda")
        b = await submit(client, name="Chipper")

        response = await client.patch(
            f"{BASE}/bulk-verify",
            json={"startupIds": [a["id"], b["id"], UNKNOWN_ID], "status": "approved"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["modifiedCount"] == 2
        listed = (await client.get(BASE)).json()
        assert {s["name"] for s in listed} == {"Kuda", "Chipper"}
        assert all(s["isVerified"] for s in listed)

    async def test_bulk_verify_requires_ids(self, client: AsyncClient, admin_headers):
        response = await client.patch(
            f"{BASE}/bulk-verify", json={"startupIds": [], "status": "approved"}, headers=admin_headers
        )

        assert response.status_code == 400


class TestListing:
    async def test_filters_and_counts(self, client: AsyncClient, admin_headers):
        await submit(client, admin_headers, name="Paystack")
        await submit(client, admin_headers, name="Flutterwave", foundedYear=2016, sectors=["Payments", "Remittance"])
        await submit(client, admin_headers, name="M-Pesa", country="Kenya", foundedYear=2007, sectors=["Mobile Money"])
        await submit(client, name="Pending Co", country="Kenya")

        kenya = (await client.get(BASE, params={"country": "ken"})).json()
        assert [s["name"] for s in kenya] == ["M-Pesa"]

        remittance = (await client.get(BASE, params={"sector": "remit"})).json()
        assert [s["name"] for s in remittance] == ["Flutterwave"]

        searched = (await client.get(BASE, params={"search": "online"})).json()
        assert len(searched) == 3

        founded_2016 = (await client.get(BASE, params={"year": 2016})).json()
        assert [s["name"] for s in founded_2016] == ["Flutterwave"]

        counts = (await client.get(f"{BASE}/counts")).json()
        assert counts == [{"country": "Nigeria", "count": 2}, {"country": "Kenya", "count": 1}]

        counts_2007 = (await client.get(f"{BASE}/counts", params={"year": 2007})).json()
        assert counts_2007 == [{"country": "Kenya", "count": 1}]


class TestBulkUpload:
    async def test_spreadsheet_rows(self, client: AsyncClient, notifications):
        rows = [
            {
                "Organization Name": "Paystack",
                "Headquarters Location": "Lagos, Lagos, Nigeria",
                "Industries": "Payments, FinTech",
                "Founded Date": "2015-01-01",
            },
            {"name": "M-Pesa", "country": "Kenya", "sector": "Mobile Money", "foundedYear": 42370},
            {"name": "No Year", "country": "Ghana", "sector": "Lending"},
        ]

        response = await client.post(f"{BASE}/bulk", json={"data": rows})

        assert response.status_code == 201
        body = response.json()
        assert body["insertedCount"] == 2
        assert body["skippedCount"] == 1
        paystack, mpesa = body["startups"]
        assert paystack["country"] == "Nigeria"
        assert paystack["sectors"] == ["Payments", "FinTech"]
        assert paystack["addedBy"] == "bulk_upload"
        assert paystack["verificationStatus"] == "pending"
        assert mpesa["foundedYear"] == 2016
        assert len(notifications.admin) == 1

    async def test_admin_bulk_rows_are_approved(self, client: AsyncClient, admin_headers, notifications):
        rows = [{"name": "Kuda", "country": "Nigeria", "sector": "Banking", "foundedYear": 2019}]

        response = await client.post(f"{BASE}/bulk", json={"data": rows}, headers=admin_headers)

        assert response.json()["startups"][0]["verificationStatus"] == "approved"
        assert notifications.admin == []

    async def test_no_usable_rows(self, client: AsyncClient):
        response = await client.post(f"{BASE}/bulk", json={"data": [{"name": "Only a name"}]})

        assert response.status_code == 400
        assert "details" in response.json()

    async def test_empty_upload(self, client: AsyncClient):
        assert (await client.post(f"{BASE}/bulk", json={"data": []})).status_code == 400

    async def test_non_finite_founded_year_is_skipped(self, client: AsyncClient):
        # json.loads accepts bare NaN; httpx refuses to encode it, so send raw bytes
        payload = (
            b'{"data": ['
            b'{"name": "A", "country": "Kenya", "sector": "Lending", "foundedYear": NaN},'
            b'{"name": "B", "country": "Kenya", "sector": "Lending", "foundedYear": 2020}]}'
        )

        response = await client.post(
            f"{BASE}/bulk", content=payload, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 201
        assert response.json()["insertedCount"] == 1
        assert response.json()["skippedCount"] == 1

    async def test_over_long_cells_are_skipped(self, client: AsyncClient):
        rows = [
            {"name": "N" * 300, "country": "Kenya", "sector": "Lending", "foundedYear": 2020},
            {"name": "Kuda", "country": "Nigeria", "sector": "Banking", "foundedYear": 2019},
        ]

        response = await client.post(f"{BASE}/bulk", json={"data": rows})

        assert response.status_code == 201
        assert [s["name"] for s in response.json()["startups"]] == ["Kuda"]
        assert response.json()["skippedCount"] == 1


class TestEditAndDelete:
    async def test_editor_updates_listing(self, client: AsyncClient, admin_headers, editor_headers):
        created = await submit(client, admin_headers)

        response = await client.put(
            f"{BASE}/{created['id']}",
            json={"description": "Payments for Africa", "sectors": ["Payments", "Checkout"]},
            headers=editor_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["description"] == "Payments for Africa"
        assert body["sectors"] == ["Payments", "Checkout"]
        assert body["verificationStatus"] == "approved"

    async def test_update_rejects_empty_sectors(self, client: AsyncClient, admin_headers):
        created = await submit(client, admin_headers)

        response = await client.put(f"{BASE}/{created['id']}", json={"sectors": []}, headers=admin_headers)

        assert response.status_code == 400

    async def test_viewer_cannot_update(self, client: AsyncClient, viewer_headers):
        created = await submit(client)

        response = await client.put(f"{BASE}/{created['id']}", json={"name": "X"}, headers=viewer_headers)

        assert response.status_code == 403

    async def test_delete(self, client: AsyncClient, editor_headers, notifications):
        created = await submit(client)

        response = await client.delete(f"{BASE}/{created['id']}", headers=editor_headers)
        again = await client.delete(f"{BASE}/{created['id']}", headers=editor_headers)

        assert response.status_code == 200
        assert response.json()["deletedStartup"]["name"] == "Paystack"
        assert response.json()["deletedBy"] == "editor@example.com"
        assert again.status_code == 404
        assert "Startup Deleted: Paystack" in notifications.admin_subjects

    async def test_bulk_delete(self, client: AsyncClient, editor_headers):
        a = await submit(client, name="Kuda")
        await submit(client, name="Chipper")

        response = await client.request(
            "DELETE", f"{BASE}/bulk-delete", json={"startupIds": [a["id"], UNKNOWN_ID]}, headers=editor_headers
        )
        nothing = await client.request(
            "DELETE", f"{BASE}/bulk-delete", json={"startupIds": [UNKNOWN_ID]}, headers=editor_headers
        )

        assert response.json()["deletedCount"] == 1
        assert nothing.status_code == 404
