from __future__ import annotations

from snow_monitor.extraction import (
    STATUS_PATTERNS,
    FieldPattern,
    extract,
    extract_fields,
    normalize_text,
    parse_status_page,
)

from .conftest import fixture_text


def test_status_page_fields() -> None:
    report = parse_status_page(fixture_text("status_page.html"))

    assert (report.lifts_open, report.lifts_total) == (7, 12)
    assert (report.runs_open, report.runs_total) == (18, 42)
    assert report.km_open == 62
    assert report.base_depth_cm == 85
    assert report.summit_depth_cm == 140
    assert report.base_condition == "Packed Powder"
    assert report.summit_condition == "Powder"


def test_script_and_comment_text_is_ignored() -> None:
    text = normalize_text(fixture_text("status_page.html"))

    assert "99/99" not in text
    assert "999" not in text


def test_extract_spans_tags_and_whitespace() -> None:
    pattern = FieldPattern("lifts", r"\blifts\s+open\s*(\d+)\s*/\s*(\d+)")

    assert extract("<h3>Lifts\n  Open</h3> <b>7</b> /<i>12</i>", pattern) == ("7", "12")


def test_extract_miss_returns_none() -> None:
    pattern = FieldPattern("km_open", r"(\d+)\s*km\s+open\b")

    assert extract("<p>Pistes closed today</p>", pattern) is None


def test_missing_fields_are_unknown_not_zero() -> None:
    report = parse_status_page("<div>Lifts Open 3/9</div>")

    assert report.lifts_open == 3
    assert report.lifts_total == 9
    assert report.runs_open is None
    assert report.km_open is None
    assert report.base_depth_cm is None
    assert report.base_condition is None


def test_field_order_in_page_does_not_matter() -> None:
    first = "<p>Summit 120 cm Icy</p><p>Base 40 cm Hard Pack</p><p>Runs Open 2/5</p>"
    second = "<p>Runs Open 2/5</p><p>Base 40 cm Hard Pack</p><p>Summit 120 cm Icy</p>"

    assert extract_fields(first, STATUS_PATTERNS) == extract_fields(second, STATUS_PATTERNS)
    assert parse_status_page(first).summit_condition == "Icy"
    assert parse_status_page(first).base_condition == "Hard Pack"


def test_unrecognised_condition_label_is_unknown() -> None:
    report = parse_status_page("<p>Base 40 cm Slushy</p>")

    assert report.base_depth_cm == 40
    assert report.base_condition is None


def test_empty_page() -> None:
    assert normalize_text("") == ""
    assert parse_status_page("") == parse_status_page("<html></html>")
