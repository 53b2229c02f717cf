"""Tests for the bethyw HTTP API."""

import io

import pytest
from fastapi.testclient import TestClient

from bethyw.areas import AreaStore
from bethyw.datasets import SourceType
from bethyw.server import app, configure


@pytest.fixture
def client(areas_cols, areas_csv, json_cols, popden_json):
    store = AreaStore()
    store.populate(io.StringIO(areas_csv), SourceType.AUTHORITY_CODE_CSV, areas_cols)
    store.populate(io.StringIO(popden_json), SourceType.WELSH_STATS_JSON, json_cols)
    configure(store)
    yield TestClient(app)
    configure(AreaStore())


class TestAreaEndpoints:
    """Tests for /api/areas."""

    def test_list_areas(self, client: TestClient) -> None:
        """Test listing every area as JSON."""
        response = client.get("/api/areas")
        assert response.status_code == 200
        data = response.json()
        assert list(data) == ["W06000001", "W06000011", "W06000015"]
        assert data["W06000015"]["measures"]["pop"] == {"1991": 296000.0}

    def test_get_area(self, client: TestClient) -> None:
        """Test fetching one area."""
        response = client.get("/api/areas/W06000011")
        assert response.status_code == 200
        assert response.json()["names"] == {"eng": "Swansea", "cym": "Abertawe"}

    def test_unknown_area_is_404(self, client: TestClient) -> None:
        """Test that an unknown area code returns 404."""
        response = client.get("/api/areas/W06000099")
        assert response.status_code == 404
        assert "W06000099" in response.json()["detail"]


class TestMeasureEndpoint:
    """Tests for /api/areas/{code}/measures/{codename}."""

    def test_measure_summary(self, client: TestClient) -> None:
        """Test a measure's values and statistics."""
        response = client.get("/api/areas/W06000011/measures/POP")
        assert response.status_code == 200
        data = response.json()
        assert data["codename"] == "pop"
        assert data["label"] == "Population"
        assert data["values"] == {"1991": 230000.0, "1992": 231000.0}
        assert data["average"] == 230500.0
        assert data["diff"] == 1000.0
        assert data["diff_percent"] == pytest.approx(1000 / 230000 * 100)

    def test_unknown_measure_is_404(self, client: TestClient) -> None:
        """Test that an unknown codename returns 404."""
        assert client.get("/api/areas/W06000011/measures/gdp").status_code == 404


class TestTableEndpoint:
    """Tests for /api/table."""

    def test_table(self, client: TestClient) -> None:
        """Test the plain text table endpoint."""
        response = client.get("/api/table")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text.startswith("Isle of Anglesey / Ynys Môn (W06000001)")
