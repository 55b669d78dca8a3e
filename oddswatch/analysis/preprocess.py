"""Join raw odds with horse metadata into one flat, annotated record set.

Every detector reads ``PreprocessedRaceData`` instead of the raw payload so
category, favourite flags and expected-odds residuals are computed once.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from oddswatch.analysis.favorites import (
    find_place_favorite_x,
    find_pq_favorite_x,
    find_quinella_favorite_x,
    find_win_favorite_x,
)
from oddswatch.analysis.groups import category_for_win_odds, is_same_range
from oddswatch.analysis.odds_models import (
    expected_place_odds,
    expected_quinella_odds,
    fair_pq_odds_hk,
    fair_quinella_odds_hk,
    standardised_residual,
)
from oddswatch.errors import InvalidInputError
from oddswatch.models.alert import is_combo, is_single_horse
from oddswatch.models.race import HorseDetail, QuinellaPair, RaceData

logger = logging.getLogger(__name__)

GOOD_LAST_POSITIONS = (1, 2, 3, 4)


@dataclass(frozen=True)
class PreprocessedHorse:
    """One runner with its metadata and derived flags."""

    horse_number: str
    win: float
    place: float
    horse_name: str = "Unknown"
    trainer: str = "Unknown"
    jockey: str = "Unknown"
    weight: str = "0"
    first_day_index: float = 0.0
    race_day_index: float = 0.0
    last_win: float = 0.0
    last_position: int = 0
    has_detail: bool = False
    # Derived
    category: Optional[str] = None
    expected_place: float = 0.0
    is_new_horse: bool = False
    is_beat_index: bool = False
    last_good_result: bool = False
    same_win_range: bool = False
    is_win_favourite: bool = False
    is_place_favourite: bool = False
    is_q_favourite: bool = False
    is_pq_favourite: bool = False

    @property
    def is_active(self) -> bool:
        return self.win > 0


@dataclass(frozen=True)
class PreprocessedPair:
    """A quinella or place-quinella pair with its model expectation.

    ``residual`` is expected minus actual: positive means the pair trades
    shorter than the model expects.
    """

    horse_number_1: str
    horse_number_2: str
    actual_odds: float
    expected_odds: Optional[float] = None
    residual: Optional[float] = None
    standardised_residual: Optional[float] = None
    fair_odds: Optional[float] = None

    @property
    def key(self) -> frozenset[str]:
        return frozenset((self.horse_number_1, self.horse_number_2))

    @property
    def combo(self) -> str:
        return f"{self.horse_number_1}-{self.horse_number_2}"

    def other(self, horse_number: str) -> Optional[str]:
        if self.horse_number_1 == horse_number:
            return self.horse_number_2
        if self.horse_number_2 == horse_number:
            return self.horse_number_1
        return None


@dataclass
class PreprocessedRaceData:
    horses: list[PreprocessedHorse]
    quinella_pairs: list[PreprocessedPair] = field(default_factory=list)
    place_q_pairs: list[PreprocessedPair] = field(default_factory=list)
    win_favourites: list[str] = field(default_factory=list)
    place_favourites: list[str] = field(default_factory=list)
    q_favourite_pairs: list[tuple[str, str]] = field(default_factory=list)
    pq_favourite_pairs: list[tuple[str, str]] = field(default_factory=list)
    # Well-formed source pairs, as passed to the favourite locators
    valid_quinella: list[QuinellaPair] = field(default_factory=list, repr=False)
    valid_place_q: list[QuinellaPair] = field(default_factory=list, repr=False)
    race_data: Optional[RaceData] = field(default=None, repr=False)

    @property
    def win_favourite(self) -> Optional[str]:
        return self.win_favourites[0] if self.win_favourites else None

    @property
    def place_favourite(self) -> Optional[str]:
        return self.place_favourites[0] if self.place_favourites else None

    @property
    def q_favourite_pair(self) -> tuple[str, ...]:
        return self.q_favourite_pairs[0] if self.q_favourite_pairs else ()

    @property
    def pq_favourite_pair(self) -> tuple[str, ...]:
        return self.pq_favourite_pairs[0] if self.pq_favourite_pairs else ()

    def horse(self, horse_number: str) -> Optional[PreprocessedHorse]:
        for h in self.horses:
            if h.horse_number == horse_number:
                return h
        return None

    def category_members(self, category: str) -> list[PreprocessedHorse]:
        return [h for h in self.horses if h.category == category]

    def quinella_odds(self) -> dict[frozenset, float]:
        """Actual quinella odds keyed by unordered pair."""
        return {p.key: p.actual_odds for p in self.quinella_pairs}

    def pq_odds(self) -> dict[frozenset, float]:
        return {p.key: p.actual_odds for p in self.place_q_pairs}


# ──────────────────────────────────────────────
# Per-record helpers
# ──────────────────────────────────────────────

def _is_beat_index(win: float, race_day_index: float) -> bool:
    # A missing index (0) never counts as beaten
    return win > 0 and race_day_index > 0 and win <= race_day_index


def _preprocess_horse(
    horse_number: str,
    win: float,
    place: float,
    detail: Optional[HorseDetail],
    favourites: dict[str, Any],
) -> PreprocessedHorse:
    d = detail or HorseDetail(horse_number=horse_number)
    return PreprocessedHorse(
        horse_number=horse_number,
        win=win,
        place=place,
        horse_name=d.horse_name,
        trainer=d.trainer,
        jockey=d.jockey,
        weight=d.weight,
        first_day_index=d.first_day_index,
        race_day_index=d.race_day_index,
        last_win=d.last_win,
        last_position=d.last_position,
        has_detail=detail is not None,
        category=category_for_win_odds(win),
        expected_place=expected_place_odds(win),
        is_new_horse=detail is not None and detail.last_win == 0,
        is_beat_index=_is_beat_index(win, d.race_day_index),
        last_good_result=d.last_position in GOOD_LAST_POSITIONS,
        same_win_range=is_same_range(win, d.last_win),
        is_win_favourite=horse_number in favourites["win"],
        is_place_favourite=horse_number in favourites["place"],
        is_q_favourite=any(horse_number in pair for pair in favourites["q"]),
        is_pq_favourite=any(horse_number in pair for pair in favourites["pq"]),
    )


def _detail_for(race_data: RaceData, horse_number: str) -> Optional[HorseDetail]:
    if race_data.horse_info.synthetic:
        return None
    return race_data.horse_info.find(horse_number)


def valid_pairs(pairs: list[QuinellaPair], market: str) -> list[QuinellaPair]:
    """Pairs addressable as a combo ("3-7"); malformed ones are dropped."""
    kept = []
    for pair in pairs:
        if is_combo(f"{pair.horse_number_1}-{pair.horse_number_2}"):
            kept.append(pair)
        else:
            logger.debug("Skipping malformed %s pair %r", market, pair)
    return kept


def _quinella_pair(pair: QuinellaPair, wins: dict[str, float]) -> PreprocessedPair:
    win_1 = wins.get(pair.horse_number_1, 0.0)
    win_2 = wins.get(pair.horse_number_2, 0.0)
    expected = expected_quinella_odds(win_1, win_2)
    residual = expected - pair.odds
    fair = fair_quinella_odds_hk(win_1, win_2) if win_1 > 0 and win_2 > 0 else None
    return PreprocessedPair(
        horse_number_1=pair.horse_number_1,
        horse_number_2=pair.horse_number_2,
        actual_odds=pair.odds,
        expected_odds=expected,
        residual=residual,
        standardised_residual=standardised_residual(residual),
        fair_odds=fair,
    )


def _pq_pair(pair: QuinellaPair, wins: dict[str, float]) -> PreprocessedPair:
    win_1 = wins.get(pair.horse_number_1, 0.0)
    win_2 = wins.get(pair.horse_number_2, 0.0)
    try:
        expected = fair_pq_odds_hk(win_1, win_2)
    except ValueError:
        # A withdrawn leg has no fair price
        return PreprocessedPair(pair.horse_number_1, pair.horse_number_2, pair.odds)
    return PreprocessedPair(
        horse_number_1=pair.horse_number_1,
        horse_number_2=pair.horse_number_2,
        actual_odds=pair.odds,
        expected_odds=expected,
        residual=expected - pair.odds,
    )


# ──────────────────────────────────────────────
# Entry point
# ──────────────────────────────────────────────

def preprocess_race_data(race_data: RaceData) -> PreprocessedRaceData:
    """Normalise one race snapshot.

    Raises InvalidInputError when there are no odds or a runner has a horse
    number outside 1-14. Missing metadata, quinella or PQ data is tolerated.
    """
    if race_data is None or not race_data.odds:
        raise InvalidInputError("Invalid race data: No odds available")
    for horse in race_data.odds:
        if not is_single_horse(horse.horse_number):
            raise InvalidInputError(f"Invalid horse number in odds: {horse.horse_number!r}")

    quinella = valid_pairs(race_data.quinella_odds, "quinella")
    place_q = valid_pairs(race_data.quinella_place_odds, "PQ")

    favourites = {
        "win": find_win_favorite_x(race_data.odds),
        "place": find_place_favorite_x(race_data.odds),
        "q": find_quinella_favorite_x(quinella),
        "pq": find_pq_favorite_x(place_q),
    }

    horses = [
        _preprocess_horse(
            h.horse_number, h.win, h.place, _detail_for(race_data, h.horse_number), favourites,
        )
        for h in race_data.odds
    ]
    missing = [h.horse_number for h in horses if not h.has_detail]
    if missing:
        logger.debug("No horse detail for %s, using defaults", ", ".join(missing))

    wins = {h.horse_number: h.win for h in horses}
    result = PreprocessedRaceData(
        horses=horses,
        quinella_pairs=[_quinella_pair(p, wins) for p in quinella],
        place_q_pairs=[_pq_pair(p, wins) for p in place_q],
        win_favourites=favourites["win"],
        place_favourites=favourites["place"],
        q_favourite_pairs=favourites["q"],
        pq_favourite_pairs=favourites["pq"],
        valid_quinella=quinella,
        valid_place_q=place_q,
        race_data=race_data,
    )
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(describe_preprocessed(result))
    return result


def describe_preprocessed(data: PreprocessedRaceData) -> str:
    """Multi-line dump of the normalised data, for debug logging."""
    lines = [
        "=== Preprocessed race data ===",
        f"Win favourite: {data.win_favourite or 'None'}",
        f"Place favourite: {data.place_favourite or 'None'}",
        f"Quinella favourite pair: {'-'.join(data.q_favourite_pair) or 'None'}",
        f"PQ favourite pair: {'-'.join(data.pq_favourite_pair) or 'None'}",
    ]
    for h in data.horses:
        lines.append(
            f"  #{h.horse_number} {h.horse_name} win={h.win} place={h.place} "
            f"expP={h.expected_place:.2f} idx={h.race_day_index} cat={h.category} "
            f"new={h.is_new_horse} beat={h.is_beat_index} good={h.last_good_result} "
            f"same={h.same_win_range}"
        )
    for p in data.quinella_pairs:
        lines.append(
            f"  Q {p.combo} actual={p.actual_odds} expected={p.expected_odds:.2f} "
            f"residual={p.residual:.2f} z={p.standardised_residual:.2f}"
        )
    for p in data.place_q_pairs:
        expected = f"{p.expected_odds:.2f}" if p.expected_odds is not None else "n/a"
        lines.append(f"  PQ {p.combo} actual={p.actual_odds} expected={expected}")
    return "\n".join(lines)
