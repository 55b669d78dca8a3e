"""Tests for the analysis API routes."""

import pytest
from fastapi import HTTPException

from oddswatch.api.analysis import (
    AnalyseRequest,
    analyse,
    analyse_snapshot,
    export_snapshot,
    get_snapshots,
)
from oddswatch.config import settings
from oddswatch.main import app, health_check


@pytest.fixture
def data_dir(snapshot_dir, monkeypatch):
    monkeypatch.setattr(settings, "data_dir", snapshot_dir)
    return snapshot_dir


class TestApp:
    def test_routes_mounted(self):
        paths = set(app.openapi()["paths"])
        assert "/api/analysis" in paths
        assert "/api/analysis/{date}/{race_number}/snapshots" in paths
        assert "/api/analysis/{date}/{race_number}/{timestamp}/export" in paths

    @pytest.mark.asyncio
    async def test_health(self, data_dir):
        assert await health_check() == {"status": "ok", "data_dir": str(data_dir)}


class TestPostAnalysis:
    @pytest.mark.asyncio
    async def test_full_race(self, sample_race_payload):
        body = await analyse(AnalyseRequest(**sample_race_payload))
        assert body["highlights"]["win"] == ["1"]
        assert body["alerts"][0]["priority"] >= body["alerts"][-1]["priority"]
        assert len(body["summaries"]) == 8

    @pytest.mark.asyncio
    async def test_empty_body(self):
        body = await analyse(AnalyseRequest())
        assert [a["message"] for a in body["alerts"]] == ["No odds data"]


class TestStoredSnapshots:
    @pytest.mark.asyncio
    async def test_list(self, data_dir):
        body = await get_snapshots("2025-03-02", "5")
        assert body == {"date": "2025-03-02", "raceNumber": "5", "timestamps": ["1215"]}

    @pytest.mark.asyncio
    async def test_analyse(self, data_dir):
        body = await analyse_snapshot("2025-03-02", "5", "1215")
        assert body["highlights"]["quinella"] == ["2-1"]

    @pytest.mark.asyncio
    async def test_missing(self, data_dir):
        with pytest.raises(HTTPException) as exc_info:
            await analyse_snapshot("2025-03-02", "5", "0900")
        assert exc_info.value.status_code == 404
        assert "No odds snapshot" in exc_info.value.detail


class TestExport:
    @pytest.mark.asyncio
    async def test_threshold_param(self, data_dir):
        body = await export_snapshot("2025-03-02", "5", "1215", priority_threshold=150)
        assert body["metadata"]["priorityThreshold"] == 150
        assert body["findings"]
        assert all(f["priority"] >= 150 for f in body["findings"])

    @pytest.mark.asyncio
    async def test_default_threshold(self, data_dir, monkeypatch):
        monkeypatch.setattr(settings, "priority_threshold", 1000)
        body = await export_snapshot("2025-03-02", "5", "1215", priority_threshold=None)
        assert body["metadata"]["priorityThreshold"] == 1000
        assert body["findings"] == []

    @pytest.mark.asyncio
    async def test_missing(self, data_dir):
        with pytest.raises(HTTPException) as exc_info:
            await export_snapshot("2025-03-02", "5", "0900", priority_threshold=None)
        assert exc_info.value.status_code == 404
