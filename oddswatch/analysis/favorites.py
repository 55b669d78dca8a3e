"""Favourite locators for the win, place, quinella and place-quinella pools.

Two flavours per pool: ``find_*_favorite`` returns alerts (highlights plus an
info note, and a diagnostic when several entries tie), ``find_*_favorite_x``
returns the bare horse numbers or pairs. Zero odds mean withdrawn and never
count as a favourite.
"""

import logging
from typing import Callable, Optional, Sequence

from oddswatch.models.alert import (
    AlertMessage,
    Purpose,
    Target,
    create_alert,
    diagnostic,
    highlight,
)
from oddswatch.models.race import HorseInfo, QuinellaPair, RaceHorse, format_odds

logger = logging.getLogger(__name__)


def _lowest(items: Sequence, price: Callable) -> list:
    """All items sharing the lowest positive price, in input order."""
    active = [item for item in items if price(item) > 0]
    if not active:
        return []
    best = min(price(item) for item in active)
    return [item for item in active if price(item) == best]


def _name(horse_info: Optional[HorseInfo], horse_number: str) -> str:
    return horse_info.name_of(horse_number) if horse_info else "Unknown"


def _pair_id(pair: QuinellaPair) -> str:
    return f"{pair.horse_number_1}-{pair.horse_number_2}"


# ──────────────────────────────────────────────
# Alert-producing locators
# ──────────────────────────────────────────────

def find_win_favorite(odds: Sequence[RaceHorse], horse_info: Optional[HorseInfo] = None) -> list[AlertMessage]:
    if not odds:
        return [diagnostic("No horses in race")]
    favourites = _lowest(odds, lambda h: h.win)
    if not favourites:
        return [diagnostic("No active horses in race")]

    alerts = []
    for horse in favourites:
        name = _name(horse_info, horse.horse_number)
        alerts.append(highlight(50, horse.horse_number, Target.WIN, win_score=100, place_score=100))
        alerts.append(create_alert(
            150, horse.horse_number, Purpose.ANALYZE,
            f"Info - Win Favourite is {horse.horse_number} {name} {format_odds(horse.win)}",
        ))
    if len(favourites) > 1:
        logger.debug("Tied win favourites: %s", [h.horse_number for h in favourites])
        alerts.append(diagnostic("Info - Two win favourites!", favourites[0].horse_number, priority=100))
    return alerts


def find_place_favorite(odds: Sequence[RaceHorse], horse_info: Optional[HorseInfo] = None) -> list[AlertMessage]:
    if not odds:
        return [diagnostic("No horses in race")]
    favourites = _lowest(odds, lambda h: h.place)
    if not favourites:
        return [diagnostic("No active horses in race")]

    alerts = []
    for horse in favourites:
        name = _name(horse_info, horse.horse_number)
        alerts.append(highlight(50, horse.horse_number, Target.PLACE, place_score=100))
        alerts.append(create_alert(
            150, horse.horse_number, Purpose.ANALYZE,
            f"Info - Place Favourite is {horse.horse_number} {name} {format_odds(horse.place)}",
        ))
    if len(favourites) > 1:
        alerts.append(diagnostic("Multiple place favourites!", favourites[0].horse_number, priority=100))
    return alerts


def _pair_favorite(
    pairs: Sequence[QuinellaPair],
    target: Target,
    label: str,
    leg_scores: tuple[float, float],
) -> list[AlertMessage]:
    favourites = _lowest(pairs, lambda p: p.odds)
    if not favourites:
        return [diagnostic(f"No active {'quinella' if target is Target.Q else 'PQ'} combinations")]

    win_score, place_score = leg_scores
    alerts = []
    for pair in favourites:
        combo = _pair_id(pair)
        alerts.append(highlight(
            150, combo, target, f"Info - Favourite {label} is {combo} with odds {format_odds(pair.odds)}",
        ))
        for leg in (pair.horse_number_1, pair.horse_number_2):
            alerts.append(create_alert(
                20, leg, Purpose.ANALYZE, f"favourite {label} leg", win_score, place_score,
            ))
    if len(favourites) > 1:
        logger.debug("Tied %s favourites: %s", label, [_pair_id(p) for p in favourites])
        alerts.append(diagnostic(f"Info - Two {label} favourites!", _pair_id(favourites[0]), priority=100))
    return alerts


def find_quinella_favorite(pairs: Sequence[QuinellaPair]) -> list[AlertMessage]:
    if not pairs:
        return [diagnostic("No quinella odds available")]
    return _pair_favorite(pairs, Target.Q, "Q", (30, 30))


def find_pq_favorite(pairs: Sequence[QuinellaPair]) -> list[AlertMessage]:
    if not pairs:
        return [diagnostic("No PQ odds available")]
    return _pair_favorite(pairs, Target.PQ, "PQ", (10, 30))


# ──────────────────────────────────────────────
# Identifier-only locators
# ──────────────────────────────────────────────

def find_win_favorite_x(odds: Sequence[RaceHorse]) -> list[str]:
    return [h.horse_number for h in _lowest(odds or [], lambda h: h.win)]


def find_place_favorite_x(odds: Sequence[RaceHorse]) -> list[str]:
    return [h.horse_number for h in _lowest(odds or [], lambda h: h.place)]


def find_quinella_favorite_x(pairs: Sequence[QuinellaPair]) -> list[tuple[str, str]]:
    return [(p.horse_number_1, p.horse_number_2) for p in _lowest(pairs or [], lambda p: p.odds)]


def find_pq_favorite_x(pairs: Sequence[QuinellaPair]) -> list[tuple[str, str]]:
    return [(p.horse_number_1, p.horse_number_2) for p in _lowest(pairs or [], lambda p: p.odds)]
