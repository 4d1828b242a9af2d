"""
Backend API tests for the Community Grievance Portal.

Uses httpx AsyncClient + ASGITransport to test endpoints in-process against
the in-memory store from conftest.py.
"""

import pytest

pytestmark = pytest.mark.asyncio


# ═══════════════════════════════════════════════════════════════════════════════
# HEALTH CHECK
# ═══════════════════════════════════════════════════════════════════════════════

class TestHealthCheck:
    async def test_health_endpoint(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data


# ═══════════════════════════════════════════════════════════════════════════════
# SUBMISSION
# ═══════════════════════════════════════════════════════════════════════════════

class TestSubmission:
    async def test_minimal_urgent_submission(self, client, memory_store):
        resp = await client.post("/grievances", json={"description": "URGENT: no water"})
        assert resp.status_code == 200
        data = resp.json()
        g = data["grievance"]
        assert g["urgency"] == "high"
        assert g["submitter_name"] is None
        assert g["location_method"] is None
        assert g["category"] == "other"
        assert g["status"] == "new"
        assert data["message"] == f"Grievance submitted! Reference: {data['id']}"
        assert len(memory_store.insert_calls) == 1

    async def test_gps_submission(self, client):
        resp = await client.post("/grievances", json={
            "description": "Cracked walls from blasting",
            "latitude": -25.74610, "longitude": 28.18810,
            "category": "Environmental", "name": "Maria S.",
        })
        assert resp.status_code == 200
        g = resp.json()["grievance"]
        assert g["location_method"] == "browser_auto"
        assert g["location_text"] == "GPS: -25.7461, 28.1881"
        assert g["latitude"] == -25.7461
        assert g["category"] == "environmental"
        assert g["urgency"] == "low"

    async def test_manual_location_afrikaans(self, client):
        resp = await client.post("/grievances", json={
            "description": "Ernstige stof", "location_text": "Terrein 5", "language": "Afrikaans",
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["grievance"]["location_method"] == "manual"
        assert data["grievance"]["urgency"] == "medium"
        assert data["message"].startswith("Griewe ingedien! Verwysing:")

    async def test_blank_description_rejected(self, client, memory_store):
        resp = await client.post("/grievances", json={"description": "   ", "name": "Thabo"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Please enter a grievance description"
        assert memory_store.insert_calls == []

    async def test_long_description_accepted(self, client):
        resp = await client.post("/grievances", json={"description": "water " * 1000})
        assert resp.status_code == 200
        assert resp.json()["grievance"]["content"] == ("water " * 1000).strip()

    async def test_unknown_category_rejected(self, client):
        resp = await client.post("/grievances", json={"description": "x", "category": "weather"})
        assert resp.status_code == 422

    async def test_store_failure(self, failing_client):
        resp = await failing_client.post("/grievances", json={"description": "Danger at the dam"})
        assert resp.status_code == 500
        assert resp.json()["detail"] == "Error submitting grievance. Please try again."


# ═══════════════════════════════════════════════════════════════════════════════
# LISTING & DASHBOARD
# ═══════════════════════════════════════════════════════════════════════════════

class TestDashboardEndpoints:
    async def _load_samples(self, client):
        resp = await client.post("/grievances/samples")
        assert resp.status_code == 200
        assert resp.json() == {"message": "Sample data loaded!", "inserted": 12}

    async def test_samples_use_one_insert(self, client, memory_store):
        await self._load_samples(client)
        assert len(memory_store.insert_calls) == 1
        assert len(memory_store.insert_calls[0][1]) == 12

    async def test_list_newest_first(self, client):
        await self._load_samples(client)
        await client.post("/grievances", json={"description": "Brand new complaint"})
        resp = await client.get("/grievances")
        assert resp.status_code == 200
        data = resp.json()
        assert len(data) == 13
        assert data[0]["content"] == "Brand new complaint"

    async def test_list_with_filters(self, client):
        await self._load_samples(client)
        resp = await client.get("/grievances?urgency=high&category=land_dispute")
        assert resp.status_code == 200
        data = resp.json()
        assert len(data) == 2
        for g in data:
            assert g["urgency"] == "high"
            assert g["category"] == "land_dispute"

    async def test_invalid_filter(self, client):
        resp = await client.get("/grievances?date_from=yesterday")
        assert resp.status_code == 400

    async def test_summary_reflects_filter(self, client):
        await self._load_samples(client)
        resp = await client.get("/dashboard/summary?urgency=medium")
        assert resp.status_code == 200
        data = resp.json()
        assert data["has_active_filters"] is True
        assert data["filters"] == {"urgency": "medium"}
        summary = data["summary"]
        assert summary["total"] == 5
        assert summary["count_by_urgency"] == {"high": 0, "medium": 5, "low": 0}
        assert summary["count_by_category"]["environmental"] == 2
        assert summary["percentage_by_category"]["environmental"] == pytest.approx(40.0)
        assert len(data["grievances"]) == 5

    async def test_summary_empty_store(self, client):
        resp = await client.get("/dashboard/summary")
        data = resp.json()
        assert data["summary"]["total"] == 0
        assert set(data["summary"]["percentage_by_category"].values()) == {0.0}
        assert data["has_active_filters"] is False

    async def test_read_failure(self, failing_client):
        resp = await failing_client.get("/grievances")
        assert resp.status_code == 500

    async def test_sample_load_failure(self, failing_client):
        resp = await failing_client.post("/grievances/samples")
        assert resp.status_code == 500
        assert resp.json()["detail"] == "Error loading sample data"

    async def test_unreadable_row_skipped_in_listing(self, client, memory_store):
        await self._load_samples(client)
        memory_store.insert("grievances", [{"content": "Blasting at night", "category": "Mining",
                                            "urgency": "low"}])
        resp = await client.get("/grievances")
        assert resp.status_code == 200
        assert len(resp.json()) == 12
