"""
Frontend page and static asset tests for the Community Grievance Portal.

Verifies that the Jinja2-rendered pages respond with 200 and valid HTML,
that tile and bar links carry the toggled filter state, and that static
assets are served.
"""

import pytest

pytestmark = pytest.mark.asyncio

PAGE_ROUTES = ["/", "/?lang=Afrikaans", "/dashboard"]


# ═══════════════════════════════════════════════════════════════════════════════
# PAGE ROUTE TESTS
# ═══════════════════════════════════════════════════════════════════════════════

class TestPageRoutes:
    @pytest.mark.parametrize("route", PAGE_ROUTES)
    async def test_page_returns_200(self, client, route):
        resp = await client.get(route)
        assert resp.status_code == 200, f"Route {route} returned {resp.status_code}"
        assert "text/html" in resp.headers.get("content-type", "")

    @pytest.mark.parametrize("route", PAGE_ROUTES)
    async def test_page_contains_html_structure(self, client, route):
        text = (await client.get(route)).text.lower()
        assert "<!doctype html>" in text
        assert "</html>" in text

    async def test_form_page_english(self, client):
        resp = await client.get("/")
        assert "Submit Grievance" in resp.text
        assert "Use My Current Location" in resp.text
        assert "Land Dispute / Grondgeskil" in resp.text

    async def test_form_page_afrikaans(self, client):
        resp = await client.get("/?lang=Afrikaans")
        assert "Dien Griewe In" in resp.text
        assert "Gebruik My Huidige Ligging" in resp.text
        assert 'data-submit-error="Fout met indiening van griewe. Probeer asseblief weer."' in resp.text

    async def test_security_headers_allow_geolocation(self, client):
        resp = await client.get("/")
        assert "geolocation=(self)" in resp.headers["permissions-policy"]
        assert resp.headers["x-frame-options"] == "DENY"


# ═══════════════════════════════════════════════════════════════════════════════
# DASHBOARD PAGE
# ═══════════════════════════════════════════════════════════════════════════════

class TestDashboardPage:
    async def test_empty_dashboard(self, client):
        resp = await client.get("/dashboard")
        assert "No grievances found." in resp.text

    async def test_rows_and_display_values(self, client):
        await client.post("/grievances/samples")
        resp = await client.get("/dashboard?urgency=high")
        assert resp.status_code == 200
        assert "Thabo M." in resp.text
        assert "Anonymous" in resp.text
        assert "Sarah K." not in resp.text

    async def test_active_urgency_tile_links_to_clear(self, client):
        resp = await client.get("/dashboard?urgency=high&category=other")
        # Clicking the active High tile drops urgency but keeps category
        assert 'href="/dashboard?category=other"' in resp.text
        # Other tiles replace the selection
        assert 'href="/dashboard?category=other&amp;urgency=low"' in resp.text

    async def test_active_category_bar_links_to_clear(self, client):
        resp = await client.get("/dashboard?category=environmental")
        assert 'href="/dashboard"' in resp.text
        assert 'href="/dashboard?category=land_dispute"' in resp.text

    async def test_read_failure_shows_banner(self, failing_client):
        resp = await failing_client.get("/dashboard")
        assert resp.status_code == 200
        assert "Could not load grievances" in resp.text

    async def test_unreadable_row_does_not_break_page(self, client, memory_store):
        memory_store.insert("grievances", [{"content": "Blasting at night", "category": "Mining",
                                            "urgency": "low"}])
        resp = await client.get("/dashboard")
        assert resp.status_code == 200
        assert "No grievances found." in resp.text

    async def test_invalid_filter(self, client):
        resp = await client.get("/dashboard?category=weather")
        assert resp.status_code == 400


# ═══════════════════════════════════════════════════════════════════════════════
# STATIC ASSETS
# ═══════════════════════════════════════════════════════════════════════════════

class TestStaticAssets:
    @pytest.mark.parametrize("path", ["/static/portal.css", "/static/form.js", "/static/dashboard.js"])
    async def test_static_served(self, client, path):
        resp = await client.get(path)
        assert resp.status_code == 200
        assert len(resp.content) > 0
