"""Alert records produced by the detectors.

An alert is addressed to a single horse ("7"), a combination ("3-7") or, for
whole-run diagnostics only, "ALL". Its ``purpose`` says what the consumer
does with it and its ``target`` says which market it concerns.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from oddswatch.errors import ValidationError

MIN_HORSE_NUMBER = 1
MAX_HORSE_NUMBER = 14
ALL_HORSES = "ALL"

_SINGLE_RE = re.compile(r"^\d{1,2}$")
_COMBO_RE = re.compile(r"^(\d{1,2})-(\d{1,2})$")


class Purpose(str, Enum):
    DISPLAY = "Display"      # shown to the user
    HIGHLIGHT = "Highlight"  # colours an odds cell
    ANALYZE = "Analyze"      # feeds summaries / findings


class Target(str, Enum):
    WIN = "Win"
    PLACE = "Place"
    Q = "Q"
    PQ = "PQ"
    GENERIC = "Generic"


COMBO_TARGETS = frozenset({Target.Q, Target.PQ})


def _in_range(n: int) -> bool:
    return MIN_HORSE_NUMBER <= n <= MAX_HORSE_NUMBER


def is_single_horse(value: str) -> bool:
    """True for "1".."14"."""
    return isinstance(value, str) and bool(_SINGLE_RE.match(value)) and _in_range(int(value))


def is_combo(value: str) -> bool:
    """True for "N-M" with two distinct horse numbers in 1..14."""
    if not isinstance(value, str):
        return False
    m = _COMBO_RE.match(value)
    if not m:
        return False
    a, b = int(m.group(1)), int(m.group(2))
    return _in_range(a) and _in_range(b) and a != b


def validate_horse_number(value: str, target: "Target") -> bool:
    """Check ``value`` against the address format its target requires.

    Win/Place need a single horse, Q/PQ need a combo. Generic alerts may
    address either, or "ALL" for run-level diagnostics.
    """
    if target in COMBO_TARGETS:
        return is_combo(value)
    if target is Target.GENERIC:
        return value == ALL_HORSES or is_single_horse(value) or is_combo(value)
    return is_single_horse(value)


def combo_key(horse_a: str, horse_b: str) -> str:
    """Numerically ordered combo key, smaller first ("3-11")."""
    a, b = sorted((horse_a, horse_b), key=int)
    return f"{a}-{b}"


def column_first_key(combo: str) -> str:
    """Matrix highlight key for a combo: larger number first ("11-3")."""
    a, b = (int(n) for n in combo.split("-"))
    return f"{max(a, b)}-{min(a, b)}"


@dataclass(frozen=True)
class AlertMetrics:
    """Scores attached to an alert. Only win/place scores are always present."""

    win_score: float = 0.0
    place_score: float = 0.0
    strength: Optional[float] = None    # normalised 0-1
    confidence: Optional[float] = None  # 0-100
    fair_odds: Optional[float] = None

    def to_dict(self) -> dict[str, float]:
        out = {"winScore": self.win_score, "placeScore": self.place_score}
        if self.strength is not None:
            out["strength"] = self.strength
        if self.confidence is not None:
            out["confidence"] = self.confidence
        if self.fair_odds is not None:
            out["fairOdds"] = self.fair_odds
        return out


@dataclass(frozen=True)
class AlertMessage:
    priority: int
    horse_number: str
    purpose: Purpose
    target: Target = Target.GENERIC
    message: str = ""
    metrics: AlertMetrics = field(default_factory=AlertMetrics)

    def __post_init__(self):
        # Enum coercion first so string callers ("Analyze", "Q") are accepted
        try:
            object.__setattr__(self, "purpose", Purpose(self.purpose))
        except ValueError:
            raise ValidationError(f"Unknown alert purpose: {self.purpose!r}") from None
        try:
            object.__setattr__(self, "target", Target(self.target))
        except ValueError:
            raise ValidationError(f"Unknown alert target: {self.target!r}") from None

        if isinstance(self.priority, bool) or not isinstance(self.priority, int):
            raise ValidationError(f"Priority must be integer, got {self.priority!r}")
        if self.priority < 0:
            raise ValidationError(f"Priority must be >= 0, got {self.priority}")
        if not validate_horse_number(self.horse_number, self.target):
            raise ValidationError(
                f"Invalid horseNumber: {self.horse_number!r} for target {self.target.value}"
            )
        if not isinstance(self.metrics, AlertMetrics):
            raise ValidationError(f"Metrics must be AlertMetrics, got {type(self.metrics).__name__}")
        object.__setattr__(self, "message", str(self.message))

    @property
    def is_combo(self) -> bool:
        return is_combo(self.horse_number)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict using the export field names."""
        return {
            "priority": self.priority,
            "horseNumber": self.horse_number,
            "purpose": self.purpose.value,
            "target": self.target.value,
            "message": self.message,
            "metrics": self.metrics.to_dict(),
        }


def create_alert(
    priority: int,
    horse_number: str,
    purpose: Purpose,
    message: str = "",
    win_score: float = 0,
    place_score: float = 0,
    target: Target = Target.GENERIC,
    **extra_metrics: Optional[float],
) -> AlertMessage:
    """Build a validated alert. Raises ValidationError on malformed input.

    ``extra_metrics`` accepts the optional AlertMetrics fields
    (strength, confidence, fair_odds).
    """
    try:
        metrics = AlertMetrics(
            win_score=float(win_score),
            place_score=float(place_score),
            **extra_metrics,
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid alert metrics: {e}") from e
    return AlertMessage(
        priority=priority,
        horse_number=horse_number,
        purpose=purpose,
        target=target,
        message=message,
        metrics=metrics,
    )


def highlight(priority: int, horse_number: str, target: Target, message: str = " ",
              win_score: float = 0, place_score: float = 0) -> AlertMessage:
    """Shorthand for a Highlight alert on one market."""
    return create_alert(priority, horse_number, Purpose.HIGHLIGHT, message, win_score, place_score, target)


def diagnostic(message: str, horse_number: str = ALL_HORSES, priority: int = 0) -> AlertMessage:
    """Display alert for run-level problems ("No odds data", ties, ...)."""
    return create_alert(priority, horse_number, Purpose.DISPLAY, message)
