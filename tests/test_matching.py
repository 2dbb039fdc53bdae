from __future__ import annotations

from snow_monitor.matching import NO_MATCH, match, normalize_name, tokens
from snow_monitor.models import LiftScheduleEntry


def _entry(name: str, opens: int = 8 * 60 + 30, closes: int = 16 * 60 + 30) -> LiftScheduleEntry:
    return LiftScheduleEntry(name=name, open_minute=opens, close_minute=closes)


def _schedule(*names: str) -> dict:
    return {name: _entry(name) for name in names}


def test_exact_match_ignores_case_and_spacing() -> None:
    schedule = _schedule("BELLA VISTA", "VALENA")

    outcome = match("  bella   vista ", schedule)

    assert outcome.matched
    assert outcome.strategy == "exact"
    assert outcome.entry.name == "BELLA VISTA"


def test_exact_match_beats_token_overlap() -> None:
    schedule = _schedule("PASSO PARADISO NORD", "PARADISO")

    outcome = match("Paradiso", schedule)

    assert outcome.strategy == "exact"
    assert outcome.entry.name == "PARADISO"


def test_containment_in_either_direction() -> None:
    schedule = _schedule("VALENA", "PARADISO PRESENA")

    assert match("Seggiovia Valena", schedule).entry.name == "VALENA"
    assert match("Presena", schedule).entry.name == "PARADISO PRESENA"


def test_token_overlap_needs_two_shared_tokens() -> None:
    schedule = _schedule("TONALE - PARADISO")

    outcome = match("Tonale-Paradiso", schedule)

    assert outcome.strategy == "tokens"
    assert outcome.entry.name == "TONALE - PARADISO"


def test_single_shared_token_is_no_match() -> None:
    schedule = _schedule("BELLA VISTA EXPRESS")

    assert match("Vista Point Chair", schedule) is NO_MATCH


def test_tied_candidates_are_no_match() -> None:
    schedule = _schedule("ALPHA BETA GAMMA", "ALPHA BETA DELTA")

    outcome = match("Beta Alpha Omega", schedule)

    assert not outcome.matched
    assert outcome is NO_MATCH


def test_empty_inputs() -> None:
    assert match("", _schedule("VALENA")) is NO_MATCH
    assert match("Valena", {}) is NO_MATCH


def test_tokens_drop_short_words() -> None:
    assert tokens("Ski Lift Nord-Est") == frozenset({"SKI", "LIFT", "NORD", "EST"})
    assert tokens("La Ra Bu") == frozenset()
    assert normalize_name(" a  b ") == "A B"
