"""oddswatch - heuristic alerts for horse-race odds snapshots."""

__version__ = "0.1.0"
