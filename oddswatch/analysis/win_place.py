"""Win odds vs place odds consistency inside one odds group."""

import logging
from itertools import combinations
from typing import Sequence

from oddswatch.analysis.preprocess import PreprocessedHorse
from oddswatch.analysis.store import AlertStore
from oddswatch.models.alert import Purpose, create_alert

logger = logging.getLogger(__name__)

REASONABLE_WIN_ODDS = 20


def analyse_win_place(group: Sequence[PreprocessedHorse], store: AlertStore) -> None:
    """Flag horses whose place price disagrees with their win price.

    A horse shorter in the win market should also be shorter for a place.
    When it is not, the shorter-win horse gets a weak-place note and the
    other horse a strong-place note.
    """
    if len(group) == 1:
        horse = group[0]
        if 0 < horse.win <= REASONABLE_WIN_ODDS:
            store.add(create_alert(
                20, horse.horse_number, Purpose.ANALYZE,
                "Only horse in group with reasonable odds", 5, 10,
            ))
        return

    for first, second in combinations(group, 2):
        if first.win == second.win:
            logger.debug("Skipping %s/%s: same win odds", first.horse_number, second.horse_number)
            continue
        a, b = (first, second) if first.win < second.win else (second, first)
        if a.place >= b.place:
            store.add(create_alert(20, a.horse_number, Purpose.ANALYZE, "Weak place odds", -5, -5))
            store.add(create_alert(20, b.horse_number, Purpose.ANALYZE, "Strong place odds", 5, 5))
        else:
            store.add(create_alert(20, a.horse_number, Purpose.ANALYZE, "Place odds normal", 5, 10))
