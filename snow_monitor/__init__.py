"""Ski resort conditions aggregator."""

from .extraction import extract, extract_fields, parse_status_page
from .matching import NO_MATCH, MatchOutcome, match
from .models import ResortView, Snapshot, Unavailable
from .pipeline import run_snapshot
from .storage import SnapshotStore

__all__ = [
    "MatchOutcome",
    "NO_MATCH",
    "ResortView",
    "Snapshot",
    "SnapshotStore",
    "Unavailable",
    "extract",
    "extract_fields",
    "match",
    "parse_status_page",
    "run_snapshot",
]
