"""Race snapshot records: odds, combination odds, horse metadata, pace, predictions.

Shapes follow the loader payload (``oddswatch.loader``): horse numbers are
strings, numeric fields are already coerced, and optional sections may be
``None``. ``RaceData.from_dict`` still coerces defensively so hand-built
payloads (tests, API callers) behave the same as loaded snapshots.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from oddswatch.errors import InvalidInputError


def _num(value: Any, default: float = 0.0) -> float:
    """Coerce a loose numeric field; blanks and junk become ``default``."""
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


# ──────────────────────────────────────────────
# Odds
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class RaceHorse:
    """Current win/place odds for one runner. Zero odds = withdrawn."""

    horse_number: str
    win: float
    place: float

    @classmethod
    def from_dict(cls, raw: dict) -> "RaceHorse":
        number = raw.get("horseNumber", raw.get("horse_number"))
        return cls(horse_number=_str(number), win=_num(raw.get("win")), place=_num(raw.get("place")))


@dataclass(frozen=True)
class QuinellaPair:
    """Odds for an unordered two-horse combination (quinella or place quinella)."""

    horse_number_1: str
    horse_number_2: str
    odds: float

    @property
    def key(self) -> frozenset[str]:
        return frozenset((self.horse_number_1, self.horse_number_2))

    def other(self, horse_number: str) -> Optional[str]:
        """The partner of ``horse_number`` in this pair, or None if not a member."""
        if self.horse_number_1 == horse_number:
            return self.horse_number_2
        if self.horse_number_2 == horse_number:
            return self.horse_number_1
        return None

    @classmethod
    def from_dict(cls, raw: dict) -> "QuinellaPair":
        odds = raw.get("odds")
        if odds is None:
            odds = raw.get("quinella_odds", raw.get("quinella_place_odds"))
        return cls(
            horse_number_1=_str(raw.get("horse_number_1")),
            horse_number_2=_str(raw.get("horse_number_2")),
            odds=_num(odds),
        )


# ──────────────────────────────────────────────
# Horse metadata
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class HorseDetail:
    """Static/contextual metadata for one runner.

    Win indices are expected-odds equivalents (lower = stronger pre-race
    expectation). ``last_win == 0`` marks a debutant with no racing history.
    """

    horse_number: str
    horse_name: str = "Unknown"
    horse_id: str = ""
    weight: str = "0"
    trainer: str = "Unknown"
    jockey: str = "Unknown"
    post: str = ""
    first_day_index: float = 0.0
    race_day_index: float = 0.0
    last_win: float = 0.0
    last_position: int = 0

    @classmethod
    def from_dict(cls, raw: dict) -> "HorseDetail":
        # Source files use display labels as keys ("Horse Name", "Race Day Win Index")
        return cls(
            horse_number=_str(raw.get("Horse Number", raw.get("horse_number"))),
            horse_name=_str(raw.get("Horse Name")) or "Unknown",
            horse_id=_str(raw.get("horseID")),
            weight=_str(raw.get("Weight")) or "0",
            trainer=_str(raw.get("Trainer")) or "Unknown",
            jockey=_str(raw.get("Jockey")) or "Unknown",
            post=_str(raw.get("Post")),
            first_day_index=_num(raw.get("First Win Index", raw.get("First Day Index"))),
            race_day_index=_num(raw.get("Race Day Win Index")),
            last_win=_num(raw.get("lastWin")),
            last_position=int(_num(raw.get("lastPosition"))),
        )


@dataclass
class HorseInfo:
    """Horse metadata for one race, joined to odds by horse number."""

    race_date: str = ""
    race_number: str = ""
    horses: list[HorseDetail] = field(default_factory=list)
    # Placeholder entries built from the odds when no metadata file exists
    synthetic: bool = False
    raw: dict = field(default_factory=dict, repr=False, compare=False)

    def find(self, horse_number: str) -> Optional[HorseDetail]:
        for detail in self.horses:
            if detail.horse_number == horse_number:
                return detail
        return None

    def name_of(self, horse_number: str) -> str:
        detail = self.find(horse_number)
        return detail.horse_name if detail else "Unknown"

    @classmethod
    def from_dict(cls, raw: Optional[dict]) -> "HorseInfo":
        if not raw:
            return cls()
        return cls(
            race_date=_str(raw.get("Race Date")),
            race_number=_str(raw.get("Race Number")),
            horses=[HorseDetail.from_dict(h) for h in raw.get("Horses") or []],
            synthetic=bool(raw.get("synthetic", False)),
            raw=raw,
        )


@dataclass
class RaceInfo:
    date: str = ""
    race_number: str = ""
    timestamp: str = ""
    url: str = ""

    @classmethod
    def from_dict(cls, raw: Optional[dict]) -> "RaceInfo":
        raw = raw or {}
        return cls(
            date=_str(raw.get("date")),
            race_number=_str(raw.get("raceNumber", raw.get("race_number"))),
            timestamp=_str(raw.get("timestamp")),
            url=_str(raw.get("url")),
        )


# ──────────────────────────────────────────────
# Pace map
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class PacePosition:
    """Projected running position: lead_position = row, wide_position = column."""

    horse_number: str
    lead_position: float
    wide_position: float


@dataclass
class PaceData:
    course: str = ""
    date: str = ""
    race_number: int = 0
    race_class: str = ""
    track: str = ""
    distance: int = 0
    pace: str = ""
    positions: list[PacePosition] = field(default_factory=list)

    def position_of(self, horse_number: str) -> Optional[PacePosition]:
        for pos in self.positions:
            if pos.horse_number == horse_number:
                return pos
        return None

    @classmethod
    def from_dict(cls, raw: Optional[dict]) -> Optional["PaceData"]:
        if not raw:
            return None
        items = raw.get("positions")
        if items is None:
            items = raw.get("Array") or []
        return cls(
            course=_str(raw.get("course")),
            date=_str(raw.get("date")),
            race_number=int(_num(raw.get("race_number"))),
            race_class=_str(raw.get("class", raw.get("race_class"))),
            track=_str(raw.get("track")),
            distance=int(_num(raw.get("distance"))),
            pace=_str(raw.get("pace")),
            positions=[
                PacePosition(
                    horse_number=_str(p.get("horse_number")),
                    lead_position=_num(p.get("lead_position")),
                    wide_position=_num(p.get("wide_position")),
                )
                for p in items
            ],
        )


# ──────────────────────────────────────────────
# External predictions
# ──────────────────────────────────────────────

PREDICTION_SLOTS = (
    "DBL1", "DBL2", "DBL3",
    "Q1", "Q2", "Q3", "Q4",
    "QP1", "QP2", "QP3", "QP4",
    "RTG1", "RTG2", "RTG3",
)

RTG_SCORE_FIELDS = {"RTG1": "score1", "RTG2": "score2", "RTG3": "score3"}


@dataclass
class Predictions:
    """Externally supplied picks, keyed by slot name ("DBL1", "Q3", "RTG2", ...).

    Empty strings and "0" mean the slot is unused.
    """

    slots: dict[str, str] = field(default_factory=dict)
    scores: dict[str, float] = field(default_factory=dict)

    def horse_for(self, slot: str) -> Optional[str]:
        number = self.slots.get(slot, "")
        if not number or number == "0":
            return None
        return number

    def slots_for(self, horse_number: str) -> list[str]:
        return [slot for slot in PREDICTION_SLOTS if self.horse_for(slot) == horse_number]

    @classmethod
    def from_dict(cls, raw: Optional[dict]) -> Optional["Predictions"]:
        if not raw:
            return None
        slots = {slot: _str(raw.get(slot)) for slot in PREDICTION_SLOTS}
        scores = {
            slot: _num(raw.get(score_field))
            for slot, score_field in RTG_SCORE_FIELDS.items()
            if raw.get(score_field) not in (None, "")
        }
        return cls(slots=slots, scores=scores)


# ──────────────────────────────────────────────
# Aggregate
# ──────────────────────────────────────────────

@dataclass
class RaceData:
    """Everything known about one race snapshot."""

    odds: list[RaceHorse] = field(default_factory=list)
    quinella_odds: list[QuinellaPair] = field(default_factory=list)
    quinella_place_odds: list[QuinellaPair] = field(default_factory=list)
    horse_info: HorseInfo = field(default_factory=HorseInfo)
    race_info: RaceInfo = field(default_factory=RaceInfo)
    pace_data: Optional[PaceData] = None
    predictions: Optional[Predictions] = None

    @classmethod
    def from_dict(cls, raw: Any) -> "RaceData":
        """Build from the loader payload shape.

        Raises InvalidInputError if ``raw`` is not a mapping or a section has
        the wrong container type.
        """
        if isinstance(raw, RaceData):
            return raw
        if not isinstance(raw, dict):
            raise InvalidInputError(f"Race data must be a mapping, got {type(raw).__name__}")
        try:
            return cls(
                odds=[RaceHorse.from_dict(h) for h in raw.get("odds") or []],
                quinella_odds=[QuinellaPair.from_dict(q) for q in raw.get("quinella_odds") or []],
                quinella_place_odds=[
                    QuinellaPair.from_dict(q) for q in raw.get("quinella_place_odds") or []
                ],
                horse_info=HorseInfo.from_dict(raw.get("horseInfo")),
                race_info=RaceInfo.from_dict(raw.get("raceInfo")),
                pace_data=PaceData.from_dict(raw.get("paceData")),
                predictions=Predictions.from_dict(raw.get("predictions")),
            )
        except (AttributeError, TypeError) as e:
            raise InvalidInputError(f"Malformed race data: {e}") from e


def format_odds(value: float) -> str:
    """Odds as shown on the tote board: 4.5 -> "4.5", 12.0 -> "12"."""
    return f"{value:g}"
