"""Win odds vs combination (quinella / place-quinella) odds.

Within an odds group, the horse with shorter win odds should also have the
shorter combination odds against any third horse both are paired with. When
the longer-priced horse holds the better combination price, the combination
market is backing it.
"""

import logging
from dataclasses import dataclass
from itertools import combinations
from typing import Sequence

from oddswatch.analysis.preprocess import PreprocessedHorse, PreprocessedPair, PreprocessedRaceData
from oddswatch.analysis.store import AlertStore
from oddswatch.models.alert import Purpose, create_alert

logger = logging.getLogger(__name__)

REASONABLE_WIN_ODDS = 20
EXPECTED_Q_PRIORITY = 30
FAVOURABLE_LEGS_PRIORITY = 140


@dataclass(frozen=True)
class MarketMessages:
    """Wording and scores for one combination market."""

    only_horse: str
    only_horse_scores: tuple[float, float]
    better: str
    normal: str
    scores: tuple[float, float]


QUINELLA_MESSAGES = MarketMessages(
    only_horse="only horse in group with reasonable odds",
    only_horse_scores=(5, 10),
    better="Q better",
    normal="Q odds OK",
    scores=(2, 2),
)

PQ_MESSAGES = MarketMessages(
    only_horse="Only horse in group with reasonable PQ odds",
    only_horse_scores=(0, 10),
    better="PQ combination better",
    normal="PQ odds normal",
    scores=(0, 2),
)


def _partners(pairs: Sequence[PreprocessedPair], horse_number: str) -> dict[str, float]:
    """Second leg -> combination odds for every pair containing ``horse_number``."""
    legs = {}
    for pair in pairs:
        other = pair.other(horse_number)
        if other is not None:
            legs[other] = pair.actual_odds
    return legs


def _compare_group(
    group: Sequence[PreprocessedHorse],
    pairs: Sequence[PreprocessedPair],
    messages: MarketMessages,
    store: AlertStore,
) -> None:
    if len(group) == 1:
        horse = group[0]
        if 0 < horse.win <= REASONABLE_WIN_ODDS:
            store.add(create_alert(
                20, horse.horse_number, Purpose.ANALYZE, messages.only_horse, *messages.only_horse_scores,
            ))
        return

    for first, second in combinations(group, 2):
        a, b = (first, second) if first.win <= second.win else (second, first)
        legs_a = _partners(pairs, a.horse_number)
        legs_b = _partners(pairs, b.horse_number)
        for leg, odds_b in legs_b.items():
            odds_a = legs_a.get(leg)
            if odds_a is None or odds_a <= 0 or odds_b <= 0:
                continue
            if odds_a > odds_b:
                store.add(create_alert(20, b.horse_number, Purpose.ANALYZE, messages.better, *messages.scores))
            else:
                store.add(create_alert(20, a.horse_number, Purpose.ANALYZE, messages.normal, *messages.scores))


def analyse_win_quinella(data: PreprocessedRaceData, group: Sequence[PreprocessedHorse], store: AlertStore) -> None:
    if not data.quinella_pairs:
        return
    _compare_group(group, data.quinella_pairs, QUINELLA_MESSAGES, store)


def analyse_win_place_quinella(data: PreprocessedRaceData, group: Sequence[PreprocessedHorse],
                               store: AlertStore) -> None:
    if not data.place_q_pairs:
        return
    _compare_group(group, data.place_q_pairs, PQ_MESSAGES, store)


def analyse_expected_quinella(data: PreprocessedRaceData, store: AlertStore) -> None:
    """Model-vs-market report for every quinella pair.

    Adds one diagnostic per pair and, for each horse at 20 or shorter, one
    summary naming the partners whose quinella trades shorter than the model
    expects (positive residual).
    """
    wins = {h.horse_number: h.win for h in data.horses}
    favourable: dict[str, set[str]] = {
        h.horse_number: set() for h in data.horses if 0 < h.win <= REASONABLE_WIN_ODDS
    }

    for pair in data.quinella_pairs:
        if wins.get(pair.horse_number_1, 0) <= 0 or wins.get(pair.horse_number_2, 0) <= 0:
            logger.debug("Skipping expected Q for %s: withdrawn leg", pair.combo)
            continue
        store.add(create_alert(
            EXPECTED_Q_PRIORITY, pair.combo, Purpose.ANALYZE,
            f"Expected Q: {pair.expected_odds:.2f}, Actual Q: {pair.actual_odds:.2f}, "
            f"Residual: {pair.residual:.2f}, Z-score: {pair.standardised_residual:.2f}",
            fair_odds=pair.fair_odds,
        ))
        if pair.residual > 0:
            if pair.horse_number_1 in favourable:
                favourable[pair.horse_number_1].add(pair.horse_number_2)
            if pair.horse_number_2 in favourable:
                favourable[pair.horse_number_2].add(pair.horse_number_1)

    for horse_number, partners in favourable.items():
        if not partners:
            continue
        legs = " + ".join(sorted(partners, key=int))
        store.add(create_alert(
            FAVOURABLE_LEGS_PRIORITY, horse_number, Purpose.ANALYZE,
            f"Q - {len(partners)} 瓣 Q 拖 {legs} 有飛", 5, 5,
        ))
