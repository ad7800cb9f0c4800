"""Best-effort projection of query rows into ``{name, value}`` chart points.

This is a heuristic, not a contract with the model: it does not read the
model's explanation or chart hint, and for arbitrary queries it may pick
semantically wrong columns. Fallback order:

- name column: first column whose name contains "name" (case-insensitive),
  else the first column.
- value column: first other column whose value in the first row is numeric,
  else the second column.
- point value: the value column, else a ``value``, ``total`` or ``revenue``
  field, else 0.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any

VALUE_FALLBACK_KEYS = ("value", "total", "revenue")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def pick_name_key(row: dict[str, Any]) -> str | None:
    keys = list(row.keys())
    if not keys:
        return None
    return next((k for k in keys if "name" in k.lower()), keys[0])


def pick_value_key(row: dict[str, Any], name_key: str | None) -> str | None:
    keys = list(row.keys())
    numeric = next((k for k in keys if k != name_key and _is_number(row.get(k))), None)
    if numeric is not None:
        return numeric
    return keys[1] if len(keys) > 1 else None


def _point_value(row: dict[str, Any], value_key: str | None) -> Any:
    if value_key is not None and row.get(value_key) is not None:
        return row[value_key]
    for key in VALUE_FALLBACK_KEYS:
        if row.get(key) is not None:
            return row[key]
    return 0


def shape_chart_data(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    if not rows:
        return rows

    first = rows[0]
    name_key = pick_name_key(first)
    value_key = pick_value_key(first, name_key)

    points = []
    for row in rows:
        name = row.get(name_key) if name_key is not None else None
        points.append(
            {
                "name": "" if name is None else str(name),
                "value": _point_value(row, value_key),
            }
        )
    return points
