"""Race analysis engine: preprocessing, detectors and the alert store."""

from oddswatch.analysis.engine import RaceAnalysis, analyse_race, run_analysis
from oddswatch.analysis.store import AlertStore

__all__ = ["AlertStore", "RaceAnalysis", "analyse_race", "run_analysis"]
