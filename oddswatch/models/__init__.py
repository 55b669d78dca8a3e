"""Domain records for race snapshots and analysis alerts."""

from oddswatch.models.alert import (
    ALL_HORSES,
    AlertMessage,
    AlertMetrics,
    Purpose,
    Target,
    create_alert,
)
from oddswatch.models.race import (
    HorseDetail,
    HorseInfo,
    PaceData,
    PacePosition,
    Predictions,
    QuinellaPair,
    RaceData,
    RaceHorse,
    RaceInfo,
)

__all__ = [
    "ALL_HORSES",
    "AlertMessage",
    "AlertMetrics",
    "HorseDetail",
    "HorseInfo",
    "PaceData",
    "PacePosition",
    "Predictions",
    "Purpose",
    "QuinellaPair",
    "RaceData",
    "RaceHorse",
    "RaceInfo",
    "Target",
    "create_alert",
]
