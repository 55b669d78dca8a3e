"""Load race snapshots from the local data directory.

Layout under ``settings.data_dir``::

    {date}-{race}-odds_{timestamp}.json          odds snapshot (required)
    other/{date}-{race}.json                     horse metadata
    pace/{date}-{race}-xy.json                   pace map
    predictions/{date}-{race}-{DBL|Q|QP}prediction_{timestamp}.json
    predictions/{date}-{race}-RTGprediction.json

Only the odds snapshot is required; every other file is optional and its
absence is logged at debug level.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from oddswatch.config import settings
from oddswatch.errors import RaceDataNotFound
from oddswatch.models.race import RaceData

logger = logging.getLogger(__name__)


def _fixed(value: Any, decimals: int = 1) -> float:
    """Round a loose numeric field; junk becomes 0."""
    try:
        return round(float(value), decimals)
    except (TypeError, ValueError):
        return 0.0


def _whole(value: Any) -> int:
    return int(_fixed(value or 0, 0))


def _read_json(path: Path) -> Optional[dict]:
    if not path.is_file():
        logger.debug(f"No file at {path}")
        return None
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def odds_path(data_dir: Path, date: str, race_number: str, timestamp: str) -> Path:
    return data_dir / f"{date}-{race_number}-odds_{timestamp}.json"


def list_snapshots(date: str, race_number: str, data_dir: Optional[Path] = None) -> list[str]:
    """Timestamps of all odds snapshots for a race, oldest first."""
    data_dir = Path(data_dir or settings.data_dir)
    prefix = f"{date}-{race_number}-odds_"
    if not data_dir.is_dir():
        return []
    return sorted(
        p.stem[len(prefix):]
        for p in data_dir.glob(f"{prefix}*.json")
    )


def _load_horse_info(data_dir: Path, date: str, race_number: str, odds: list[dict]) -> dict:
    loaded = _read_json(data_dir / "other" / f"{date}-{race_number}.json")
    win_lookup = {h["horseNumber"]: h for h in odds}

    if loaded is None:
        logger.info(f"No horse info for {date} R{race_number}, using defaults")
        return {
            "Race Date": date,
            "Race Number": str(race_number),
            "synthetic": True,
            "Horses": [
                {
                    "horseID": "",
                    "Horse Number": h["horseNumber"],
                    "Horse Name": " ",
                    "Weight": " ",
                    "Trainer": " ",
                    "Jockey": " ",
                    "Post": " ",
                    "First Win Index": 0,
                    "Race Day Win Index": 0,
                    "lastWin": 0,
                    "lastPosition": 0,
                    "Win": h["win"],
                    "Place": h["place"],
                }
                for h in odds
            ],
        }

    horses = []
    for horse in loaded.get("Horses") or []:
        number = str(horse.get("Horse Number", "")).strip()
        current = win_lookup.get(number, {})
        horses.append({
            **horse,
            "horseID": str(horse.get("horseID") or ""),
            "Horse Number": number,
            "Win": current.get("win", 0.0),
            "Place": current.get("place", 0.0),
            "First Win Index": _fixed(horse.get("First Win Index") or 0),
            "Race Day Win Index": _fixed(horse.get("Race Day Win Index") or 0),
            "lastWin": _whole(horse.get("lastWin")),
            "lastPosition": _whole(horse.get("lastPosition")),
        })
    return {"Race Date": date, "Race Number": str(race_number), "Horses": horses}


def _load_pace(data_dir: Path, date: str, race_number: str) -> Optional[dict]:
    raw = _read_json(data_dir / "pace" / f"{date}-{race_number}-xy.json")
    if raw is None:
        return None
    return {
        "course": raw.get("course"),
        "date": raw.get("date"),
        "race_number": raw.get("race_number"),
        "class": raw.get("class"),
        "track": raw.get("track"),
        "distance": raw.get("distance"),
        "pace": raw.get("pace"),
        "positions": [
            {
                "horse_number": str(item.get("horse_number")),
                "lead_position": _fixed(item.get("lead_position"), 2),
                "wide_position": _fixed(item.get("wide_position"), 2),
            }
            for item in raw.get("Array") or []
        ],
    }


def _slot(data: Optional[dict], key: str) -> str:
    if not data:
        return ""
    value = data.get(key)
    return str(value) if value not in (None, "", 0) else ""


def _load_predictions(data_dir: Path, date: str, race_number: str, timestamp: str) -> Optional[dict]:
    folder = data_dir / "predictions"
    dbl = _read_json(folder / f"{date}-{race_number}-DBLprediction_{timestamp}.json")
    q = _read_json(folder / f"{date}-{race_number}-Qprediction_{timestamp}.json")
    qp = _read_json(folder / f"{date}-{race_number}-QPprediction_{timestamp}.json")
    rtg = _read_json(folder / f"{date}-{race_number}-RTGprediction.json")
    if not any((dbl, q, qp, rtg)):
        return None
    return {
        "Race Date": date,
        "Race Number": str(race_number),
        "DBL1": _slot(dbl, "DBL1"),
        "DBL2": _slot(dbl, "DBL2"),
        "DBL3": _slot(dbl, "DBL3"),
        # The quinella files name their first pick "Q" / "QP"
        "Q1": _slot(q, "Q"),
        "Q2": _slot(q, "Q2"),
        "Q3": _slot(q, "Q3"),
        "Q4": _slot(q, "Q4"),
        "QP1": _slot(qp, "QP"),
        "QP2": _slot(qp, "QP2"),
        "QP3": _slot(qp, "QP3"),
        "QP4": _slot(qp, "QP4"),
        "RTG1": _slot(rtg, "RTG1"),
        "RTG2": _slot(rtg, "RTG2"),
        "RTG3": _slot(rtg, "RTG3"),
        "score1": _slot(rtg, "score1"),
        "score2": _slot(rtg, "score2"),
        "score3": _slot(rtg, "score3"),
    }


def load_race_payload(date: str, race_number: str, timestamp: str, data_dir: Optional[Path] = None) -> dict:
    """Raw race payload in the shape ``RaceData.from_dict`` accepts.

    Raises RaceDataNotFound when the odds snapshot does not exist.
    """
    data_dir = Path(data_dir or settings.data_dir)
    path = odds_path(data_dir, date, race_number, timestamp)
    snapshot = _read_json(path)
    if snapshot is None:
        raise RaceDataNotFound(f"No odds snapshot for {date} race {race_number} at {timestamp}")

    odds = [
        {
            "horseNumber": str(h.get("horse_number")),
            "win": _fixed(h.get("win")),
            "place": _fixed(h.get("place")),
        }
        for h in snapshot.get("odds") or []
    ]
    quinella = [
        {
            "horse_number_1": str(q.get("horse_number_1")),
            "horse_number_2": str(q.get("horse_number_2")),
            "odds": _fixed(q.get("quinella_odds"), 0),
        }
        for q in snapshot.get("quinella_odds") or []
    ]
    place_q = [
        {
            "horse_number_1": str(q.get("horse_number_1")),
            "horse_number_2": str(q.get("horse_number_2")),
            "odds": _fixed(q.get("quinella_place_odds"), 0),
        }
        for q in snapshot.get("quinella_place_odds") or []
    ]

    return {
        "odds": odds,
        "quinella_odds": quinella,
        "quinella_place_odds": place_q,
        "horseInfo": _load_horse_info(data_dir, date, race_number, odds),
        "raceInfo": {
            "date": date,
            "raceNumber": str(race_number),
            "timestamp": timestamp,
            "url": snapshot.get("url", ""),
        },
        "paceData": _load_pace(data_dir, date, race_number),
        "predictions": _load_predictions(data_dir, date, race_number, timestamp),
    }


def load_race_data(date: str, race_number: str, timestamp: str, data_dir: Optional[Path] = None) -> RaceData:
    return RaceData.from_dict(load_race_payload(date, race_number, timestamp, data_dir))
