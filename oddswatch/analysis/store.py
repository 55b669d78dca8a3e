"""Per-analysis accumulator for alerts and odds-cell highlights."""

import logging
from dataclasses import replace
from typing import Iterable, Optional

from oddswatch.errors import ValidationError
from oddswatch.models.alert import AlertMessage, Target, column_first_key

logger = logging.getLogger(__name__)

HIGHLIGHT_KEYS = {
    Target.WIN: "win",
    Target.PLACE: "place",
    Target.Q: "quinella",
    Target.PQ: "placeQuinella",
}


def _by_priority(alerts: Iterable[AlertMessage]) -> list[AlertMessage]:
    # sorted() is stable, so equal priorities keep insertion order
    return sorted(alerts, key=lambda a: -a.priority)


class AlertStore:
    """Alerts and highlight sets for one analysis run.

    Detectors receive the store explicitly; nothing here is shared between
    runs. Highlight sets keep insertion order and hold each key once.
    """

    def __init__(self):
        self._alerts: list[AlertMessage] = []
        self._highlights: dict[str, dict[str, None]] = {key: {} for key in HIGHLIGHT_KEYS.values()}

    def __len__(self) -> int:
        return len(self._alerts)

    def reset(self) -> None:
        self._alerts = []
        for cells in self._highlights.values():
            cells.clear()

    def add(self, alert: AlertMessage, auto_sort: bool = False) -> None:
        """Append one alert. Raises ValidationError for anything else."""
        if not isinstance(alert, AlertMessage):
            raise ValidationError(f"Invalid alert object: {alert!r}")
        self._alerts.append(alert)
        if auto_sort:
            self._alerts = _by_priority(self._alerts)

    def add_many(self, alerts: Iterable[AlertMessage], auto_sort: bool = False) -> None:
        for alert in alerts:
            self.add(alert)
        if auto_sort:
            self._alerts = _by_priority(self._alerts)

    def get_all(self, sorted: bool = True) -> list[AlertMessage]:
        """A copy of the accumulated alerts, by descending priority unless ``sorted=False``."""
        return _by_priority(self._alerts) if sorted else list(self._alerts)

    def update(self, index: int, **changes) -> bool:
        """Replace fields of the alert at ``index``.

        Returns False (and leaves the store untouched) for an out-of-range
        index or changes that fail validation.
        """
        if index < 0 or index >= len(self._alerts):
            return False
        try:
            self._alerts[index] = replace(self._alerts[index], **changes)
        except (ValidationError, TypeError) as e:
            logger.debug("Rejected alert update at %d: %s", index, e)
            return False
        return True

    def find_index(self, horse_number: str) -> int:
        """Index of the first alert addressed to ``horse_number``, or -1."""
        for i, alert in enumerate(self._alerts):
            if alert.horse_number == horse_number:
                return i
        return -1

    @staticmethod
    def dedupe(alerts: Iterable[AlertMessage]) -> list[AlertMessage]:
        """Drop exact duplicates, keeping the first occurrence and the order."""
        seen: set[AlertMessage] = set()
        unique = []
        for alert in alerts:
            if alert in seen:
                continue
            seen.add(alert)
            unique.append(alert)
        return unique

    def apply_highlight(self, alert: AlertMessage) -> Optional[str]:
        """Record the odds cell ``alert`` points at. Returns the key stored, if any."""
        store_key = HIGHLIGHT_KEYS.get(alert.target)
        if store_key is None:
            return None
        cell = column_first_key(alert.horse_number) if alert.is_combo else alert.horse_number
        self._highlights[store_key][cell] = None
        return cell

    def get_highlights(self) -> dict[str, list[str]]:
        return {key: list(cells) for key, cells in self._highlights.items()}
