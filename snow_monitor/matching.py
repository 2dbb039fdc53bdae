"""Reconciles lift names between the live-map and the schedule source.

The two sources name the same lift differently (casing, abbreviations,
punctuation). Matching is a best-effort heuristic: exact, then containment,
then token overlap. Ambiguous candidates are reported as no match rather than
attributing hours to the wrong lift.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import FrozenSet, Mapping, Optional

from .models import LiftScheduleEntry

MIN_TOKEN_LENGTH = 3
MIN_SHARED_TOKENS = 2

_SPACE_RE = re.compile(r"\s+")
_TOKEN_SPLIT_RE = re.compile(r"[\s\-]+")


@dataclass(frozen=True)
class MatchOutcome:
    entry: Optional[LiftScheduleEntry] = None
    strategy: str = "none"

    @property
    def matched(self) -> bool:
        return self.entry is not None


NO_MATCH = MatchOutcome()


def normalize_name(name: str) -> str:
    return _SPACE_RE.sub(" ", name or "").strip().upper()


def tokens(name: str) -> FrozenSet[str]:
    return frozenset(
        token for token in _TOKEN_SPLIT_RE.split(normalize_name(name)) if len(token) >= MIN_TOKEN_LENGTH
    )


def match(status_name: str, schedule: Mapping[str, LiftScheduleEntry]) -> MatchOutcome:
    """Find the schedule entry for a live-map lift name."""
    wanted = normalize_name(status_name)
    if not wanted or not schedule:
        return NO_MATCH

    keyed = [(normalize_name(key), entry) for key, entry in schedule.items()]

    for key, entry in keyed:
        if key == wanted:
            return MatchOutcome(entry, "exact")

    for key, entry in keyed:
        if key and (key in wanted or wanted in key):
            return MatchOutcome(entry, "contains")

    wanted_tokens = tokens(wanted)
    best_entry: Optional[LiftScheduleEntry] = None
    best_count = 0
    tied = False
    for key, entry in keyed:
        shared = len(wanted_tokens & tokens(key))
        if shared > best_count:
            best_entry, best_count, tied = entry, shared, False
        elif shared == best_count and shared > 0:
            tied = True

    if best_entry is None or best_count < MIN_SHARED_TOKENS or tied:
        return NO_MATCH
    return MatchOutcome(best_entry, "tokens")
