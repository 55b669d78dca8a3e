"""Shared test fixtures for oddswatch."""

import json

import pytest


def _horse_entry(number, name, index, last_win, last_position):
    return {
        "horseID": f"HK_{number:0>3}",
        "Horse Number": str(number),
        "Horse Name": name,
        "Weight": "126",
        "Trainer": "T Trainer",
        "Jockey": "J Jockey",
        "Post": str(number),
        "First Win Index": index,
        "Race Day Win Index": index,
        "lastWin": last_win,
        "lastPosition": last_position,
    }


def build_race_payload(runners, quinella=None, place_quinella=None, predictions=None,
                       pace=None, date="2025-03-02", race_number="5"):
    """Build a loader-shaped payload.

    ``runners`` is a list of dicts with keys number, win, place and optional
    name, index, last_win, last_position. ``quinella`` / ``place_quinella``
    map (a, b) tuples to odds. A runner with ``detail=False`` gets no horse
    info entry.
    """
    odds = [
        {"horseNumber": str(r["number"]), "win": r["win"], "place": r["place"]}
        for r in runners
    ]
    horses = [
        _horse_entry(
            r["number"],
            r.get("name", f"HORSE {r['number']}"),
            r.get("index", 0),
            r.get("last_win", 5),
            r.get("last_position", 6),
        )
        for r in runners
        if r.get("detail", True)
    ]
    return {
        "odds": odds,
        "quinella_odds": [
            {"horse_number_1": str(a), "horse_number_2": str(b), "odds": o}
            for (a, b), o in (quinella or {}).items()
        ],
        "quinella_place_odds": [
            {"horse_number_1": str(a), "horse_number_2": str(b), "odds": o}
            for (a, b), o in (place_quinella or {}).items()
        ],
        "horseInfo": {"Race Date": date, "Race Number": race_number, "Horses": horses},
        "raceInfo": {"date": date, "raceNumber": race_number, "timestamp": "1215", "url": ""},
        "paceData": pace,
        "predictions": predictions,
    }


@pytest.fixture
def race_builder():
    """Factory for custom race payloads."""
    return build_race_payload


@pytest.fixture
def sample_runners() -> list[dict]:
    """Eight-runner field: one clear favourite, two contenders, a scratching."""
    return [
        {"number": 1, "win": 2.5, "place": 1.2, "name": "GOLDEN SIXTY", "index": 3.0, "last_win": 4.0, "last_position": 2},
        {"number": 2, "win": 6.0, "place": 2.0, "name": "LUCKY PATCH", "index": 8.0, "last_win": 10.0, "last_position": 3},
        {"number": 3, "win": 8.0, "place": 2.5, "name": "SILVER ARROW", "index": 7.0, "last_win": 8.0, "last_position": 5},
        {"number": 4, "win": 12.0, "place": 3.5, "name": "EASTERN EXPRESS", "index": 20.0, "last_win": 15.0, "last_position": 7},
        {"number": 5, "win": 18.0, "place": 4.5, "name": "HAPPY TIME", "index": 15.0, "last_win": 20.0, "last_position": 9},
        {"number": 6, "win": 25.0, "place": 6.0, "name": "ROMANTIC WARRIOR", "index": 30.0, "last_win": 30.0, "last_position": 4},
        {"number": 7, "win": 45.0, "place": 10.0, "name": "STORM FRONT", "index": 60.0, "last_win": 50.0, "last_position": 11},
        {"number": 8, "win": 0, "place": 0, "name": "SCRATCHED", "index": 0, "last_win": 0, "last_position": 0},
    ]


@pytest.fixture
def sample_quinella() -> dict:
    return {
        (1, 2): 9.0, (1, 3): 12.0, (1, 4): 20.0, (1, 5): 30.0, (1, 6): 45.0, (1, 7): 80.0,
        (2, 3): 25.0, (2, 4): 40.0, (2, 5): 55.0, (2, 6): 90.0, (2, 7): 150.0,
        (3, 4): 48.0, (3, 5): 60.0, (3, 6): 110.0, (3, 7): 180.0,
        (4, 5): 95.0, (4, 6): 150.0, (4, 7): 250.0,
        (5, 6): 200.0, (5, 7): 300.0,
        (6, 7): 400.0,
        (1, 8): 0, (2, 8): 0,
    }


@pytest.fixture
def sample_place_quinella() -> dict:
    return {
        (1, 2): 3.0, (1, 3): 3.5, (1, 4): 5.0, (1, 5): 7.0, (1, 6): 9.0, (1, 7): 15.0,
        (2, 3): 7.0, (2, 4): 10.0, (2, 5): 12.0, (2, 6): 18.0, (2, 7): 30.0,
        (3, 4): 11.0, (3, 5): 14.0, (3, 6): 20.0, (3, 7): 35.0,
        (4, 5): 20.0, (4, 6): 30.0, (4, 7): 50.0,
        (5, 6): 40.0, (5, 7): 60.0,
        (6, 7): 80.0,
    }


@pytest.fixture
def sample_race_payload(sample_runners, sample_quinella, sample_place_quinella) -> dict:
    """Complete race payload with quinella, PQ, predictions and a pace map."""
    return build_race_payload(
        sample_runners,
        quinella=sample_quinella,
        place_quinella=sample_place_quinella,
        predictions={
            "DBL1": "1", "DBL2": "2", "DBL3": "",
            "Q1": "1", "Q2": "3", "Q3": "", "Q4": "",
            "QP1": "2", "QP2": "", "QP3": "", "QP4": "",
            "RTG1": "1", "RTG2": "4", "RTG3": "",
            "score1": "82.5", "score2": "61", "score3": "",
        },
        pace={
            "course": "ST", "date": "2025-03-02", "race_number": 5, "class": "Class 3",
            "track": "Turf", "distance": 1200, "pace": "Fast",
            "positions": [
                {"horse_number": "1", "lead_position": 1, "wide_position": 2},
                {"horse_number": "2", "lead_position": 3, "wide_position": 1},
            ],
        },
    )


# ──────────────────────────────────────────────
# Snapshot files on disk
# ──────────────────────────────────────────────

def write_json(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")


@pytest.fixture
def json_file():
    """Writer for snapshot files: json_file(path, data)."""
    return write_json


@pytest.fixture
def snapshot_dir(tmp_path):
    """Data directory holding one odds snapshot (2025-03-02 race 5 @ 1215) and its horse info."""
    write_json(tmp_path / "2025-03-02-5-odds_1215.json", {
        "odds": [
            {"horse_number": 1, "win": "2.56", "place": 1.24},
            {"horse_number": 2, "win": 6, "place": "2"},
            {"horse_number": 3, "win": "8.0", "place": "2.5"},
        ],
        "quinella_odds": [
            {"horse_number_1": 1, "horse_number_2": 2, "quinella_odds": "9.6"},
            {"horse_number_1": 1, "horse_number_2": 3, "quinella_odds": 12},
            {"horse_number_1": 2, "horse_number_2": 3, "quinella_odds": 25},
        ],
        "quinella_place_odds": [
            {"horse_number_1": 1, "horse_number_2": 2, "quinella_place_odds": 3.2},
        ],
        "url": "https://racing.example/odds",
    })
    write_json(tmp_path / "other" / "2025-03-02-5.json", {
        "Race Date": "2025-03-02",
        "Race Number": "5",
        "Horses": [
            {"Horse Number": "1", "Horse Name": "GOLDEN SIXTY", "Race Day Win Index": "7.26",
             "First Win Index": "8", "lastWin": "12.0", "lastPosition": "3"},
            {"Horse Number": "2", "Horse Name": "LUCKY PATCH", "Race Day Win Index": 5,
             "First Win Index": 5, "lastWin": 7, "lastPosition": 1},
        ],
    })
    return tmp_path
