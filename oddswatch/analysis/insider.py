"""Current win odds vs the race-day win index ("insider" money).

The race-day index is an expected-odds figure fixed before betting opens. A
horse trading well under it has been backed harder than its form suggests.
Two ordered rule tables decide the alert: ``BEAT_INDEX_RULES`` when the odds
are below the index and ``DRIFT_RULES`` otherwise. The first rule whose
predicate holds wins; no match means no alert.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from oddswatch.analysis.groups import is_same_range
from oddswatch.analysis.preprocess import PreprocessedHorse
from oddswatch.analysis.store import AlertStore
from oddswatch.models.alert import AlertMessage, Purpose, create_alert

logger = logging.getLogger(__name__)

# "Unexpected": short price despite a weak index
UNEXPECTED_MAX_WIN = 15
UNEXPECTED_MIN_INDEX = 40

NEW_HORSE_STRONG_WIN = 11
NEW_HORSE_WIN = 18
GOOD_LAST_MAX_WIN = 15
SUPPORTED_MAX_WIN = 25
LONG_SHOT_MIN_WIN = 29
LONG_SHOT_MAX_WIN = 61
LONG_SHOT_MIN_PCT = 30

# Drift: ln(win) - ln(index) above this is a real drift, not noise
DRIFT_LOG_RATIO = 0.3


@dataclass(frozen=True)
class IndexContext:
    """Everything the rule tables look at for one horse."""

    horse: PreprocessedHorse
    win: float
    index: float

    @property
    def beats_index(self) -> bool:
        return self.win < self.index

    @property
    def pct(self) -> float:
        """Improvement on the index, in percent."""
        return (self.index - self.win) / self.index * 100

    @property
    def log_ratio(self) -> float:
        return math.log(self.win) - math.log(self.index)

    @property
    def unexpected(self) -> bool:
        return self.win <= UNEXPECTED_MAX_WIN and self.index >= UNEXPECTED_MIN_INDEX

    @property
    def is_new(self) -> bool:
        return self.horse.is_new_horse

    @property
    def beat_last(self) -> bool:
        return self.horse.last_win > 0 and self.win < self.horse.last_win

    @property
    def good_last(self) -> bool:
        return self.horse.last_good_result

    @property
    def same_range(self) -> bool:
        return is_same_range(self.win, self.horse.last_win)


@dataclass(frozen=True)
class InsiderRule:
    name: str
    applies: Callable[[IndexContext], bool]
    priority: int
    win_score: float
    place_score: float
    template: str

    def message(self, ctx: IndexContext) -> str:
        return self.template.format(
            pct=f"{ctx.pct:.2f}%" if ctx.beats_index else "",
            ratio=ctx.log_ratio,
            win=ctx.win,
            index=ctx.index,
        )


BEAT_INDEX_RULES: tuple[InsiderRule, ...] = (
    InsiderRule("unexpected", lambda c: c.unexpected,
                150, 30, 40, "unexpected support - odds {win:g} vs index {index:g} ({pct})"),
    InsiderRule("new_horse_strong", lambda c: c.is_new and c.win <= NEW_HORSE_STRONG_WIN,
                140, 20, 30, "new horse with insider support {pct}"),
    InsiderRule("new_horse", lambda c: c.is_new and c.win <= NEW_HORSE_WIN,
                125, 10, 20, "new horse with some support {pct}"),
    InsiderRule("beat_last_good_result",
                lambda c: c.beat_last and c.good_last and c.win <= GOOD_LAST_MAX_WIN,
                135, 15, 30, "beat last race odds after a good run {pct}"),
    InsiderRule("beat_last_strong",
                lambda c: c.beat_last and c.pct >= 40 and c.win <= SUPPORTED_MAX_WIN,
                135, 15, 30, "beat last race odds with strong support {pct}"),
    InsiderRule("beat_last_same_range",
                lambda c: c.beat_last and c.same_range and c.win <= SUPPORTED_MAX_WIN,
                110, 5, 10, "beat last race odds in the same price range {pct}"),
    InsiderRule("suspicious_40", lambda c: c.win <= SUPPORTED_MAX_WIN and c.pct >= 40,
                130, 20, 40, "suspicious insider bets {pct}"),
    InsiderRule("suspicious_20", lambda c: c.win <= SUPPORTED_MAX_WIN and c.pct >= 20,
                130, 10, 20, "suspicious insider bets {pct}"),
    InsiderRule("suspicious_10", lambda c: c.win <= SUPPORTED_MAX_WIN and c.pct >= 10,
                120, 5, 10, "suspicious insider bets {pct}"),
    InsiderRule("normal", lambda c: c.win <= SUPPORTED_MAX_WIN,
                20, 0, 5, "normal ({pct})"),
    InsiderRule("long_shot",
                lambda c: LONG_SHOT_MIN_WIN <= c.win <= LONG_SHOT_MAX_WIN and c.pct >= LONG_SHOT_MIN_PCT,
                100, 5, 10, "long shot support {pct}"),
)

DRIFT_RULES: tuple[InsiderRule, ...] = (
    InsiderRule("favourite_flat", lambda c: c.win <= 5 and c.log_ratio <= DRIFT_LOG_RATIO,
                60, -5, 0, "odds worse than expected, favourite holding ({ratio:.2f})"),
    InsiderRule("favourite_drift", lambda c: c.win <= 5,
                90, -15, -10, "odds worse than expected, favourite drifting ({ratio:.2f})"),
    InsiderRule("contender_flat", lambda c: c.win <= 10 and c.log_ratio <= DRIFT_LOG_RATIO,
                40, -5, 0, "odds worse than expected ({ratio:.2f})"),
    InsiderRule("contender_drift", lambda c: c.win <= 10,
                70, -10, -5, "odds worse than expected, drifting ({ratio:.2f})"),
    InsiderRule("no_insider", lambda c: c.win <= 30 and c.log_ratio <= DRIFT_LOG_RATIO,
                20, -10, 0, "no insider bets"),
    InsiderRule("drift", lambda c: c.win <= 30,
                30, -10, -5, "no insider bets, drifting ({ratio:.2f})"),
)


def match_insider_rule(ctx: IndexContext) -> Optional[InsiderRule]:
    rules = BEAT_INDEX_RULES if ctx.beats_index else DRIFT_RULES
    for rule in rules:
        if rule.applies(ctx):
            return rule
    return None


def insider_alert(horse: PreprocessedHorse) -> Optional[AlertMessage]:
    """The alert for one horse, or None when it has no index or no price."""
    if horse.race_day_index <= 0 or horse.win <= 0:
        return None
    ctx = IndexContext(horse=horse, win=horse.win, index=horse.race_day_index)
    rule = match_insider_rule(ctx)
    if rule is None:
        return None
    logger.debug("Insider rule %s for horse %s", rule.name, horse.horse_number)
    return create_alert(
        rule.priority, horse.horse_number, Purpose.ANALYZE, rule.message(ctx),
        rule.win_score, rule.place_score,
    )


def analyse_win_race_day_index(group: Iterable[PreprocessedHorse], store: AlertStore) -> None:
    for horse in group:
        alert = insider_alert(horse)
        if alert is not None:
            store.add(alert)
