"""API endpoints for race analysis."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from oddswatch.analysis.engine import run_analysis
from oddswatch.analysis.export import build_export
from oddswatch.config import settings
from oddswatch.errors import RaceDataNotFound
from oddswatch.loader import list_snapshots, load_race_data, load_race_payload

logger = logging.getLogger(__name__)

router = APIRouter()


class AnalyseRequest(BaseModel):
    """Race snapshot in the loader payload shape."""

    odds: list[dict[str, Any]] = Field(default_factory=list)
    quinella_odds: list[dict[str, Any]] = Field(default_factory=list)
    quinella_place_odds: list[dict[str, Any]] = Field(default_factory=list)
    horseInfo: Optional[dict[str, Any]] = None
    raceInfo: Optional[dict[str, Any]] = None
    paceData: Optional[dict[str, Any]] = None
    predictions: Optional[dict[str, Any]] = None


@router.post("")
async def analyse(request: AnalyseRequest):
    """Analyse a posted race snapshot."""
    return run_analysis(request.model_dump()).to_dict()


@router.get("/{date}/{race_number}/snapshots")
async def get_snapshots(date: str, race_number: str):
    """Odds snapshot timestamps available for a race."""
    return {"date": date, "raceNumber": race_number, "timestamps": list_snapshots(date, race_number)}


@router.get("/{date}/{race_number}/{timestamp}")
async def analyse_snapshot(date: str, race_number: str, timestamp: str):
    """Analyse a stored snapshot."""
    try:
        payload = load_race_payload(date, race_number, timestamp)
    except RaceDataNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return run_analysis(payload).to_dict()


@router.get("/{date}/{race_number}/{timestamp}/export")
async def export_snapshot(
    date: str,
    race_number: str,
    timestamp: str,
    priority_threshold: Optional[int] = Query(None, ge=0),
):
    """Export findings at or above the priority threshold."""
    try:
        race_data = load_race_data(date, race_number, timestamp)
    except RaceDataNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    threshold = settings.priority_threshold if priority_threshold is None else priority_threshold
    result = run_analysis(race_data)
    logger.info(f"Export {date} R{race_number} @ {timestamp}: threshold {threshold}")
    return build_export(race_data, result.alerts, threshold)
