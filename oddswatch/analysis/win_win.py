"""Favourite-group reasoning: can a favourite carry a bet as banker?

First pass: per favourite, the boolean diagnostics, the quinella banker
contest and a combined summary. Second pass: one banker recommendation per
favourite from ``BANKER_RULES`` (first match wins; an unexpected price beats
a beaten index, which beats the plain-favourite fallbacks). Contender
analysis runs last with the favourite context computed here.
"""

import logging
import math
from dataclasses import dataclass
from itertools import combinations
from typing import Callable, Optional, Sequence

from oddswatch.analysis.contenders import analyse_contenders
from oddswatch.analysis.dominance import compare_quinella_dominance
from oddswatch.analysis.groups import FAVOURITES
from oddswatch.analysis.insider import UNEXPECTED_MAX_WIN, UNEXPECTED_MIN_INDEX
from oddswatch.analysis.preprocess import PreprocessedHorse, PreprocessedRaceData
from oddswatch.analysis.store import AlertStore
from oddswatch.models.alert import Purpose, create_alert

logger = logging.getLogger(__name__)

ACCEPTABLE_LOG_RATIO = 0.3
GOOD_RESULT_POSITIONS = (2, 3, 4)


@dataclass(frozen=True)
class FavouriteContext:
    horse: PreprocessedHorse
    is_only: bool
    multi_favourite: bool

    @property
    def is_beat_index(self) -> bool:
        return self.horse.is_beat_index

    @property
    def is_new(self) -> bool:
        return self.horse.is_new_horse

    @property
    def is_more_confidence(self) -> bool:
        return self.horse.win <= self.horse.last_win

    @property
    def is_good_result(self) -> bool:
        return self.is_more_confidence and self.horse.last_position in GOOD_RESULT_POSITIONS

    @property
    def is_unexpected(self) -> bool:
        return self.horse.win <= UNEXPECTED_MAX_WIN and self.horse.race_day_index >= UNEXPECTED_MIN_INDEX

    @property
    def acceptable_drift(self) -> bool:
        h = self.horse
        return h.win > 0 and h.race_day_index > 0 and math.log(h.win) - math.log(h.race_day_index) <= ACCEPTABLE_LOG_RATIO

    @property
    def label(self) -> str:
        return f"{self.horse.horse_number} {self.horse.horse_name}"

    @property
    def place_vs_expected(self) -> str:
        h = self.horse
        op = "<=" if h.place <= h.expected_place else ">"
        return f"(Place: {h.place:g} {op} Expected: {h.expected_place:.2f})"


@dataclass(frozen=True)
class BankerRule:
    name: str
    applies: Callable[[FavouriteContext], bool]
    priority: int
    win_score: float
    place_score: float
    template: str
    purpose: Purpose = Purpose.ANALYZE

    def message(self, ctx: FavouriteContext) -> str:
        return self.template.format(label=ctx.label, place=ctx.place_vs_expected)


BANKER_RULES: tuple[BankerRule, ...] = (
    BankerRule("only_unexpected", lambda c: c.is_only and c.is_unexpected,
               160, 60, 70, "異常落飛，可以做胆 - {label} {place}"),
    BankerRule("only_beat_index", lambda c: c.is_only and c.is_beat_index,
               170, 40, 50, "可以做胆 - {label} 唯一 5 倍下的有飛馬"),
    BankerRule("only_favourite", lambda c: c.is_only,
               165, -10, -5, "熱門腳 - {label}  唯一 5 倍下的馬"),
    BankerRule("unexpected", lambda c: c.is_unexpected,
               160, 50, 60, "異常落飛，優先考慮 - {label} {place}", Purpose.DISPLAY),
    BankerRule("beat_index_contested", lambda c: c.is_beat_index and c.multi_favourite,
               160, 30, 40, "有對手，做腳 - {label}"),
    BankerRule("beat_index", lambda c: c.is_beat_index,
               165, 30, 40, "雖有對手，仍然可做胆 - {label}"),
    BankerRule("acceptable", lambda c: c.acceptable_drift,
               165, -20, -10, "可接受 - {label} 約一半機會三甲"),
    BankerRule("no_confidence", lambda c: True,
               160, -20, -10, "缺乏信心 - {label} 可放棄"),
)


def match_banker_rule(ctx: FavouriteContext) -> BankerRule:
    for rule in BANKER_RULES:
        if rule.applies(ctx):
            return rule
    raise AssertionError("BANKER_RULES must end with a catch-all rule")


def second_lowest_win_horse(horses: Sequence[PreprocessedHorse],
                            exclude: Sequence[str] = ()) -> Optional[PreprocessedHorse]:
    """Runner-up in the win market among active horses not in ``exclude``."""
    active = sorted((h for h in horses if h.win > 0), key=lambda h: h.win)
    if len(active) < 2:
        return None
    candidate = active[1]
    return None if candidate.horse_number in exclude else candidate


def check_quinella_banker(group: Sequence[PreprocessedHorse], legs: Sequence[str], quinella_odds) -> Optional[str]:
    """Horse winning the most pairwise quinella contests, or None on a tie / no winner."""
    wins = {h.horse_number: 0 for h in group}
    for a, b in combinations(group, 2):
        winner = compare_quinella_dominance(a.horse_number, b.horse_number, legs, quinella_odds)
        if winner is not None:
            wins[winner] += 1
    best = max(wins.values(), default=0)
    if best <= 0:
        return None
    leaders = [number for number, count in wins.items() if count == best]
    return leaders[0] if len(leaders) == 1 else None


def _flag_alert(horse_number: str, metric: str, value: bool):
    return create_alert(20, horse_number, Purpose.ANALYZE, f"{metric}: {str(value).lower()}", 20, 0)


def _summary_scores(ctx: FavouriteContext, is_q_banker: bool) -> tuple[int, int]:
    if ctx.is_unexpected:
        return 50, 60
    if ctx.is_only and ctx.is_beat_index:
        return 40, 50
    if is_q_banker:
        return 30, 40
    return 20, 30


def analyse_win_win(data: PreprocessedRaceData, store: AlertStore) -> None:
    favourites = data.category_members(FAVOURITES)
    is_only = len(favourites) == 1
    multi_favourite = not is_only and sum(1 for h in favourites if h.is_beat_index) > 1
    any_beat_index = any(h.is_beat_index for h in favourites)
    favourite_numbers = [h.horse_number for h in favourites]

    # Quinella banker contest (same for every favourite)
    q_banker = None
    if favourites and data.quinella_pairs:
        comparison = list(favourites)
        if len(favourites) == 1:
            runner_up = second_lowest_win_horse(data.horses, exclude=favourite_numbers)
            if runner_up is not None:
                comparison.append(runner_up)
        q_horses = {n for p in data.quinella_pairs for n in (p.horse_number_1, p.horse_number_2)}
        legs = sorted((n for n in q_horses if n not in favourite_numbers), key=int)
        q_banker = check_quinella_banker(comparison, legs, data.quinella_odds())

    new_horse_alert_added = False
    contexts = [FavouriteContext(h, is_only, multi_favourite) for h in favourites]

    for ctx in contexts:
        number = ctx.horse.horse_number
        is_q_banker = q_banker == number
        for metric, value in (
            ("isOnlyFavourite", ctx.is_only),
            ("isBeatIndex", ctx.is_beat_index),
            ("isMoreConfidence", ctx.is_more_confidence),
            ("isGoodResult", ctx.is_good_result),
            ("isUnexpected", ctx.is_unexpected),
            ("isNewHorse", ctx.is_new),
            ("isQBanker", is_q_banker),
        ):
            store.add(_flag_alert(number, metric, value))

        win_score, place_score = _summary_scores(ctx, is_q_banker)
        parts = [
            f"Horse {ctx.label}",
            "Group: Favourites",
            f"OnlyFavourite: {ctx.is_only}",
            f"BeatIndex: {ctx.is_beat_index}",
            f"MoreConfidence: {ctx.is_more_confidence}",
            f"GoodResult: {ctx.is_good_result}",
            f"Unexpected: {ctx.is_unexpected}",
            f"NewHorse: {ctx.is_new}",
            f"QBanker: {is_q_banker}",
        ]
        store.add(create_alert(
            20, number, Purpose.DISPLAY if ctx.is_unexpected else Purpose.ANALYZE,
            " | ".join(parts), win_score, place_score,
        ))

        if ctx.is_new and (
            (ctx.is_only and (ctx.is_unexpected or ctx.is_beat_index))
            or (not ctx.is_only and ctx.is_unexpected)
        ):
            new_horse_alert_added = True
            store.add(create_alert(
                160, number, Purpose.ANALYZE, f"初出熱門馬 - {ctx.label} ，做腳",
                win_score + 10, place_score + 10,
            ))

    # Banker recommendations
    for ctx in contexts:
        if ctx.is_new and new_horse_alert_added:
            continue
        rule = match_banker_rule(ctx)
        logger.debug("Banker rule %s for horse %s", rule.name, ctx.horse.horse_number)
        store.add(create_alert(
            rule.priority, ctx.horse.horse_number, rule.purpose, rule.message(ctx),
            rule.win_score, rule.place_score,
        ))

    if len(data.horses) > 1:
        analyse_contenders(
            data, store,
            is_only_favourite=is_only,
            any_beat_index=any_beat_index,
            favourite_horse_number=favourite_numbers[0] if is_only else None,
        )
