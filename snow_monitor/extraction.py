"""Pattern-based extraction of typed facts from scraped pages.

Each :class:`FieldPattern` maps one named field to a regular expression and a
converter. A structural change in a source page is absorbed by editing the
pattern table, not the pipeline.
"""
from __future__ import annotations

import html
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Pattern, Tuple

from .models import StatusReport

Converter = Callable[[Tuple[str, ...]], Any]

CONDITION_LABELS: Tuple[str, ...] = (
    "Machine Groomed",
    "Powder",
    "Packed Powder",
    "Spring Conditions",
    "Hard Pack",
    "Icy",
    "Variable",
    "Frozen Granular",
)

_SCRIPT_RE = re.compile(r"<(script|style)\b.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")
_SPACE_RE = re.compile(r"\s+")


def normalize_text(raw: str) -> str:
    """Strip markup and collapse whitespace runs to a single space."""
    if not raw:
        return ""
    text = _SCRIPT_RE.sub(" ", raw)
    text = _COMMENT_RE.sub(" ", text)
    text = _TAG_RE.sub(" ", text)
    text = html.unescape(text)
    return _SPACE_RE.sub(" ", text).strip()


def _first_int(groups: Tuple[str, ...]) -> int:
    return int(groups[0])


def _int_pair(groups: Tuple[str, ...]) -> Tuple[int, int]:
    return int(groups[0]), int(groups[1])


def _label(groups: Tuple[str, ...]) -> str:
    matched = _SPACE_RE.sub(" ", groups[0]).lower()
    for label in CONDITION_LABELS:
        if label.lower() == matched:
            return label
    return groups[0]


@dataclass(frozen=True)
class FieldPattern:
    """Describes how to pull one typed field out of normalized page text."""

    name: str
    regex: str
    converter: Converter = _first_int

    @property
    def compiled(self) -> Pattern[str]:
        return re.compile(self.regex, re.IGNORECASE)


def _labels_alternation() -> str:
    # longest first so "Packed Powder" is never cut down to "Powder"
    ordered = sorted(CONDITION_LABELS, key=len, reverse=True)
    return "|".join(r"\s+".join(map(re.escape, label.split())) for label in ordered)


_CONDITION = _labels_alternation()

STATUS_PATTERNS: Tuple[FieldPattern, ...] = (
    FieldPattern("lifts", r"\blifts\s+open\s*(\d+)\s*/\s*(\d+)", _int_pair),
    FieldPattern("runs", r"\bruns\s+open\s*(\d+)\s*/\s*(\d+)", _int_pair),
    FieldPattern("km_open", r"(\d+)\s*km\s+open\b"),
    FieldPattern("base_depth", r"\bbase\s*(\d+)\s*cm\b"),
    FieldPattern("summit_depth", r"\bsummit\s*(\d+)\s*cm\b"),
    FieldPattern("base_condition", rf"\bbase\s*\d+\s*cm\s+({_CONDITION})\b", _label),
    FieldPattern("summit_condition", rf"\bsummit\s*\d+\s*cm\s+({_CONDITION})\b", _label),
)


def extract(raw_text: str, pattern: FieldPattern, *, normalized: bool = False) -> Optional[Tuple[str, ...]]:
    """Return the capture groups of ``pattern`` in ``raw_text``, or ``None``."""
    text = raw_text if normalized else normalize_text(raw_text)
    match = pattern.compiled.search(text)
    if not match:
        return None
    return match.groups()


def extract_fields(raw_text: str, patterns: Iterable[FieldPattern]) -> Dict[str, Any]:
    """Apply every pattern; a pattern that misses yields ``None`` for its field only."""
    text = normalize_text(raw_text)
    values: Dict[str, Any] = {}
    for pattern in patterns:
        groups = extract(text, pattern, normalized=True)
        values[pattern.name] = pattern.converter(groups) if groups is not None else None
    return values


def parse_status_page(raw_text: str, patterns: Iterable[FieldPattern] = STATUS_PATTERNS) -> StatusReport:
    values = extract_fields(raw_text, patterns)
    lifts = values.get("lifts") or (None, None)
    runs = values.get("runs") or (None, None)
    return StatusReport(
        lifts_open=lifts[0],
        lifts_total=lifts[1],
        runs_open=runs[0],
        runs_total=runs[1],
        km_open=values.get("km_open"),
        base_depth_cm=values.get("base_depth"),
        summit_depth_cm=values.get("summit_depth"),
        base_condition=values.get("base_condition"),
        summit_condition=values.get("summit_condition"),
    )
