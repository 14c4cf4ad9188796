"""Parsing helpers for stored answer values.

Answers are persisted as text. Choice-style answers may hold a JSON list and
grid answers hold JSON cell selections. Parsing here is best-effort and never
raises; strict checks live in `analysis.validation`.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GridCell:
    """A single selected cell in a grid answer.

    Attributes:
        row: Zero-based row index.
        column: Zero-based column index.
    """

    row: int
    column: int


def is_blank(value: object) -> bool:
    """Return True when a raw answer carries no content."""

    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def is_empty_selection(value: object) -> bool:
    """Return True for a blank checkbox or grid answer.

    These answers are JSON lists, so an empty list `[]` is blank too.
    """

    if isinstance(value, str) and value.strip() == "[]":
        return True
    return is_blank(value)


def parse_numeric(value: object) -> float | None:
    """Parse a raw answer into a finite float.

    Args:
        value: Raw answer (string or number).

    Returns:
        The float value, or None for blanks, non-numeric text, NaN and
        infinities.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_choices(value: object) -> tuple[str, ...]:
    """Parse a checkbox answer into its selected options.

    Args:
        value: Raw answer; a JSON list of strings, a Python list, or a single
            option string.

    Returns:
        Selected option strings in stored order. Blank input yields ().
    """

    if is_empty_selection(value):
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(str(item).strip() for item in value if str(item).strip())
    text = str(value).strip()
    if text.startswith("["):
        try:
            decoded = json.loads(text)
        except json.JSONDecodeError:
            return (text,)
        if isinstance(decoded, list):
            return tuple(
                item.strip() for item in decoded if isinstance(item, str) and item.strip()
            )
    return (text,)


def parse_grid_cells(value: object) -> tuple[GridCell, ...]:
    """Parse a grid answer into selected cells.

    The stored shape is a JSON list of `{"rowIndex": r, "selections": c}`
    objects, where `selections` is an int (multiple-choice grid) or a list of
    ints (checkbox grid). A single bare object is accepted too.

    Args:
        value: Raw stored answer.

    Returns:
        Parsed cells in stored order. Invalid JSON or malformed entries are
        skipped.
    """

    if is_empty_selection(value):
        return ()
    if isinstance(value, (dict, list)):
        decoded: object = value
    else:
        try:
            decoded = json.loads(str(value))
        except json.JSONDecodeError:
            return ()

    entries = [decoded] if isinstance(decoded, dict) else decoded
    if not isinstance(entries, list):
        return ()

    cells: list[GridCell] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        row = entry.get("rowIndex")
        if not _is_int(row):
            continue
        selections = entry.get("selections")
        if _is_int(selections):
            cells.append(GridCell(row=row, column=selections))
        elif isinstance(selections, list):
            cells.extend(GridCell(row=row, column=col) for col in selections if _is_int(col))
    return tuple(cells)


def encode_grid_cells(cells: dict[int, int | list[int]]) -> str:
    """Encode row selections into the stored grid answer shape.

    Args:
        cells: Mapping of row index -> column index (multiple-choice grid) or
            list of column indexes (checkbox grid).

    Returns:
        JSON text suitable for `surveys.Answer.value`.
    """

    payload = [
        {"rowIndex": row, "selections": selections}
        for row, selections in sorted(cells.items())
    ]
    return json.dumps(payload)


def _is_int(value: object) -> bool:
    """Return True for ints that are not bools."""

    return isinstance(value, int) and not isinstance(value, bool)
