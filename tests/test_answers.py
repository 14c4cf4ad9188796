"""Unit tests for stored answer parsing."""

from __future__ import annotations

import pytest

from analysis.answers import (
    GridCell,
    encode_grid_cells,
    is_blank,
    is_empty_selection,
    parse_choices,
    parse_grid_cells,
    parse_numeric,
)

pytestmark = pytest.mark.unit


def test_parse_numeric_accepts_finite_numbers_only() -> None:
    """Numbers and numeric strings parse; blanks, text and non-finite values do not."""

    assert parse_numeric("4") == 4.0
    assert parse_numeric(" 3.5 ") == 3.5
    assert parse_numeric(7) == 7.0
    assert parse_numeric("abc") is None
    assert parse_numeric("") is None
    assert parse_numeric(None) is None
    assert parse_numeric("nan") is None
    assert parse_numeric("inf") is None
    assert parse_numeric(True) is None


def test_is_blank_keeps_bracket_text_as_content() -> None:
    """Only None and whitespace are blank; `[]` is ordinary text."""

    assert is_blank(None)
    assert is_blank("  ")
    assert not is_blank("[]")
    assert not is_blank("0")


def test_empty_json_list_is_an_empty_selection() -> None:
    """Checkbox and grid encodings treat `[]` as no selection."""

    assert is_empty_selection(" [] ")
    assert is_empty_selection("")
    assert not is_empty_selection('["Git"]')


def test_parse_choices_reads_json_lists_and_plain_strings() -> None:
    """Checkbox answers are JSON lists; single choices are plain strings."""

    assert parse_choices('["Git", "CI"]') == ("Git", "CI")
    assert parse_choices("Red") == ("Red",)
    assert parse_choices(["Git", " ", "Docs"]) == ("Git", "Docs")
    assert parse_choices("") == ()
    assert parse_choices("[]") == ()
    assert parse_choices("[broken") == ("[broken",)


def test_parse_grid_cells_reads_lists_and_single_objects() -> None:
    """Grid answers hold row selections as ints or lists of ints."""

    stored = '[{"rowIndex": 0, "selections": 1}, {"rowIndex": 1, "selections": [0, 2]}]'

    assert parse_grid_cells(stored) == (GridCell(0, 1), GridCell(1, 0), GridCell(1, 2))
    assert parse_grid_cells('{"rowIndex": 2, "selections": 0}') == (GridCell(2, 0),)


def test_parse_grid_cells_skips_malformed_input() -> None:
    """Invalid JSON and non-integer selections produce no cells."""

    assert parse_grid_cells("not json") == ()
    assert parse_grid_cells('{"rowIndex": 0, "selections": true}') == ()
    assert parse_grid_cells('[{"selections": 1}, "x"]') == ()
    assert parse_grid_cells("42") == ()


def test_encode_grid_cells_orders_rows() -> None:
    """Encoded grid answers list rows in ascending order."""

    encoded = encode_grid_cells({1: [0, 2], 0: 1})

    assert encoded == '[{"rowIndex": 0, "selections": 1}, {"rowIndex": 1, "selections": [0, 2]}]'
    assert parse_grid_cells(encoded) == (GridCell(0, 1), GridCell(1, 0), GridCell(1, 2))
