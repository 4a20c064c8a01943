"""
Tests for pages, the public API, and system endpoints

Runs the real application against an in-memory store.
"""

import pytest
from fastapi.testclient import TestClient

from saln_tracker.core import DataIntegrityError, DataUnavailableError
from saln_tracker.db import CachedDataStore, DataStore, InMemoryDataStore, JsonDataStore
from saln_tracker.main import create_app
from saln_tracker.web.projector import Projector, chart_points, records_newest_first

from conftest import make_official, make_record


class UnavailableStore(DataStore):
    """A store whose backend is down."""

    def list_officials(self):
        raise DataUnavailableError("backend down")

    def list_resources(self):
        raise DataUnavailableError("backend down")


class CorruptStore(DataStore):
    """A store whose documents break the schema."""

    def list_officials(self):
        raise DataIntegrityError("unknown agency")

    def list_resources(self):
        return []


@pytest.fixture
def client(memory_store):
    with TestClient(create_app(store=memory_store)) as c:
        yield c


@pytest.fixture
def down_client():
    with TestClient(create_app(store=UnavailableStore())) as c:
        yield c


# ============================================================
# Pages
# ============================================================

class TestHomePage:

    def test_sections_and_cards(self, client):
        response = client.get("/")
        assert response.status_code == 200
        html = response.text
        assert "Current Officials" in html
        assert "Former Officials" in html
        assert "Constitutional Commission" in html
        assert "/official/maria-santos" in html
        assert "Pedro Dela Peña" in html

    def test_current_before_former(self, client):
        html = client.get("/").text
        assert html.index("Current Officials") < html.index("Former Officials")

    def test_latest_year_none_when_no_records(self, client):
        html = client.get("/").text
        start = html.index("Ana Cruz")
        assert "None" in html[start:html.index("/official/ana-cruz")]

    def test_sort_applies_within_bucket(self):
        store = InMemoryDataStore(officials=[
            make_official("Poor Senator", records=[make_record(2023, net_worth=1)]),
            make_official("Rich Senator", records=[make_record(2023, net_worth=9_000_000)]),
        ])
        with TestClient(create_app(store=store)) as c:
            default = c.get("/").text
            by_worth = c.get("/?sort=net_worth").text

        assert default.index("Poor Senator") < default.index("Rich Senator")
        assert by_worth.index("Rich Senator") < by_worth.index("Poor Senator")
        assert '<option value="net_worth" selected>' in by_worth

    def test_unknown_sort_falls_back(self, client):
        response = client.get("/?sort=shoe_size")
        assert response.status_code == 200
        assert '<option value="default" selected>' in response.text

    def test_store_down_renders_empty_state(self, down_client):
        response = down_client.get("/")
        assert response.status_code == 200
        assert "No officials to show yet" in response.text

    def test_undecodable_snapshot_renders_empty_state(self, tmp_path):
        path = tmp_path / "officials.json"
        path.write_bytes(b"\xff\xfe{}")
        store = CachedDataStore(JsonDataStore(str(path), str(path)))
        with TestClient(create_app(store=store)) as c:
            response = c.get("/")
        assert response.status_code == 200
        assert "No officials to show yet" in response.text

    def test_corrupt_data_renders_empty_state(self):
        with TestClient(create_app(store=CorruptStore())) as c:
            response = c.get("/")
        assert response.status_code == 200
        assert "No officials to show yet" in response.text


class TestOfficialPage:

    def test_records_newest_first(self, client):
        html = client.get("/official/maria-santos").text
        assert html.index("SALN 2023") < html.index("SALN 2022")

    def test_figures_and_line_items(self, client):
        html = client.get("/official/maria-santos").text
        assert "₱ 12,500,000" in html
        assert "₱ 13,500,000" in html
        assert "House and lot, Quezon City" in html
        assert "Landbank" in html
        assert "Housing loan" in html

    def test_status_badges(self, client):
        html = client.get("/official/maria-santos").text
        assert "Verified" in html
        assert "Submitted" in html

    def test_source_fallback_description(self, client):
        html = client.get("/official/maria-santos").text
        assert "Official Government Source" in html
        assert "https://example.org/saln/maria-santos-2023.pdf" in html

    def test_chart_with_two_records(self, client):
        html = client.get("/official/maria-santos").text
        assert "net-worth-chart" in html
        assert "12.5M" in html

    def test_no_chart_with_one_record(self, client):
        assert "net-worth-chart" not in client.get("/official/jose-reyes").text

    def test_empty_state(self, client):
        html = client.get("/official/ana-cruz").text
        assert "No SALN Data Yet" in html
        assert "net-worth-chart" not in html

    def test_former_official_badge(self, client):
        assert "Former Official" in client.get("/official/pedro-dela-pea").text
        assert "Former Official" not in client.get("/official/maria-santos").text

    def test_title_from_slug(self, client):
        html = client.get("/official/maria-santos").text
        assert "<title>Maria Santos - SALN Records | SALN Tracker Philippines</title>" in html

    def test_unknown_slug_is_not_found_page(self, client):
        response = client.get("/official/nobody")
        assert response.status_code == 404
        assert "Page Not Found" in response.text

    def test_store_down_is_not_found(self, down_client):
        assert down_client.get("/official/maria-santos").status_code == 404


class TestOtherPages:

    def test_resources_sorted_by_year(self, client):
        html = client.get("/resources").text
        assert html.index("Resource res-3") < html.index("Resource res-1") < html.index("Resource res-2")

    def test_resources_sorted_by_type(self, client):
        html = client.get("/resources?sort=type").text
        assert html.index("Resource res-3") < html.index("Resource res-2") < html.index("Resource res-1")

    def test_about(self, client):
        response = client.get("/about")
        assert response.status_code == 200
        assert "What is a SALN?" in response.text

    def test_ping(self, client):
        response = client.get("/ping")
        assert response.status_code == 200
        assert response.text == "pong"
        assert response.headers["content-type"].startswith("text/plain")
        assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"

    def test_unknown_path_is_not_found_page(self, client):
        response = client.get("/no/such/page")
        assert response.status_code == 404
        assert "text/html" in response.headers["content-type"]
        assert "Go to Home" in response.text

    def test_request_id_echoed(self, client):
        response = client.get("/about", headers={"X-Request-ID": "abc12345"})
        assert response.headers["X-Request-ID"] == "abc12345"


# ============================================================
# Public API
# ============================================================

class TestPublicAPI:

    def test_officials_list(self, client):
        response = client.get("/api/public/officials")
        assert response.status_code == 200
        assert response.headers["cache-control"] == "public, max-age=30"

        items = {item["slug"]: item for item in response.json()}
        maria = items["maria-santos"]
        assert maria["saln_count"] == 2
        assert maria["latest_saln_year"] == 2023
        assert maria["latest"]["net_worth"] == 12_500_000
        assert maria["latest"]["net_worth_display"] == "₱ 12,500,000"
        assert items["ana-cruz"]["latest"] is None

    def test_officials_sorted(self, client):
        slugs = [i["slug"] for i in client.get("/api/public/officials?sort=net_worth").json()]
        assert slugs == ["jose-reyes", "maria-santos", "pedro-dela-pea", "ana-cruz"]

    def test_grouped(self, client):
        groups = client.get("/api/public/officials/grouped").json()
        assert [g["status"] for g in groups] == ["active", "inactive"]
        active = groups[0]
        assert active["total"] == 3
        assert [a["agency"] for a in active["agencies"]] == [
            "EXECUTIVE", "LEGISLATIVE", "CONSTITUTIONAL_COMMISSION",
        ]
        assert active["agencies"][2]["label"] == "Constitutional Commission"

    def test_detail(self, client):
        response = client.get("/api/public/officials/maria-santos")
        assert response.status_code == 200
        body = response.json()
        assert [r["year"] for r in body["saln_records"]] == [2023, 2022]
        assert body["saln_records"][0]["status"] == "verified"
        assert body["saln_records"][0]["date_filed"] == "2023-12-31"
        assert body["latest_saln_year"] == 2023

    def test_detail_not_found_is_json(self, client):
        response = client.get("/api/public/officials/nobody")
        assert response.status_code == 404
        assert response.json() == {"detail": "No official with slug 'nobody'"}

    def test_resources(self, client):
        ids = [r["id"] for r in client.get("/api/public/resources?sort=source").json()]
        assert ids == ["res-3", "res-2", "res-1"]

    def test_store_down_gives_empty_lists(self, down_client):
        assert down_client.get("/api/public/officials").json() == []
        assert down_client.get("/api/public/resources").json() == []

    def test_unknown_api_path_is_json(self, client):
        response = client.get("/api/public/nothing-here")
        assert response.status_code == 404
        assert response.json() == {"detail": "Not Found"}


# ============================================================
# System endpoints
# ============================================================

class TestSystemEndpoints:

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy", "service": "saln-tracker"}

    def test_health_detailed(self, client):
        response = client.get("/health/detailed")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["checks"]["data_store"]["officials"] == 4

    def test_health_detailed_unhealthy(self, down_client):
        response = down_client.get("/health/detailed")
        assert response.status_code == 503
        assert response.json()["checks"]["data_store"]["status"] == "unhealthy"

    def test_metrics(self, client):
        client.get("/")
        summary = client.get("/metrics").json()
        assert summary["requests_total"] >= 1
        assert "cache_hits" in summary

    def test_api_index(self, client):
        body = client.get("/api").json()
        assert body["storage_backend"] == "InMemoryDataStore"
        assert body["stats"] == {"officials": 4, "officials_with_records": 3, "saln_records": 4}


# ============================================================
# Projector
# ============================================================

class TestProjector:

    def test_home_sections_skip_empty_buckets(self, memory_store):
        sections = Projector(memory_store).home_sections()
        assert [s.heading for s in sections] == ["Current Officials", "Former Officials"]
        assert [len(a.officials) for a in sections[1].agencies] == [1]

    def test_works_over_cached_store(self, memory_store):
        projector = Projector(CachedDataStore(memory_store))
        assert projector.official_detail("maria-santos").summary.saln_count == 2
        assert projector.official_detail("nobody") is None

    def test_chart_points_ascending_with_labels(self):
        records = [make_record(2023, net_worth=2_500_000), make_record(2021, net_worth=900)]
        points = chart_points(records)
        assert [p.year for p in points] == ["2021", "2023"]
        assert points[1].net_worth_label == "₱ 2.5M"
        assert points[0].net_worth_label == "₱ 900"

    def test_chart_needs_two_records(self):
        assert chart_points([make_record(2023)]) == []

    def test_records_newest_first(self):
        records = [make_record(2021), make_record(2023), make_record(2022)]
        assert [r.year for r in records_newest_first(records)] == [2023, 2022, 2021]
