from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

from snow_monitor.models import AvalancheAssessment

DANGER_LEVELS: Dict[str, int] = {
    "low": 1,
    "moderate": 2,
    "considerable": 3,
    "high": 4,
    "very_high": 5,
}

# level -> (label, color, emoji)
DANGER_SCALE: Dict[int, Tuple[str, str, str]] = {
    1: ("Low", "#4CAF50", "\U0001f7e2"),
    2: ("Moderate", "#FFEB3B", "\U0001f7e1"),
    3: ("Considerable", "#FF9800", "\U0001f7e0"),
    4: ("High", "#F44336", "\U0001f534"),
    5: ("Very High", "#000000", "⚫"),
}

MIN_LEVEL = 1
MAX_LEVEL = 5


def danger_level(rating: str) -> Optional[int]:
    """Map a categorical rating (``very_high``, ``Very High``...) to 1-5."""
    key = "_".join(str(rating or "").strip().lower().replace("-", " ").split())
    return DANGER_LEVELS.get(key)


def assessment_for_level(
    level: int,
    *,
    valid_from: Optional[str] = None,
    valid_until: Optional[str] = None,
    source: Optional[str] = None,
    ratings_count: int = 0,
) -> AvalancheAssessment:
    level = max(MIN_LEVEL, min(MAX_LEVEL, int(level)))
    label, color, emoji = DANGER_SCALE[level]
    return AvalancheAssessment(
        level=level,
        label=label,
        color=color,
        emoji=emoji,
        valid_from=valid_from,
        valid_until=valid_until,
        source=source,
        ratings_count=ratings_count,
    )


def aggregate_danger(
    ratings: Iterable[str],
    *,
    valid_from: Optional[str] = None,
    valid_until: Optional[str] = None,
    source: Optional[str] = None,
) -> AvalancheAssessment:
    """Reduce sub-region ratings to the regional maximum.

    Ratings outside the five-level scale (``no_rating``, ``no_snow``) are
    ignored. With no usable rating the level is 1 ("Low").
    """

    levels = [level for level in (danger_level(rating) for rating in ratings) if level is not None]
    return assessment_for_level(
        max(levels, default=MIN_LEVEL),
        valid_from=valid_from,
        valid_until=valid_until,
        source=source,
        ratings_count=len(levels),
    )
