"""Row Mapper — turns a database result (columns + rows) into ordered label→value dicts.

Invariants:
    - Output order == row order; key order == column order
    - No type coercion beyond what the driver already returned
    - Empty row set -> empty list
    - Row arity must equal column count (ValueError otherwise)
"""

from typing import Any, Iterable, Sequence

from sqlalchemy.engine import Result


def _column_label(column: object) -> str:
    if isinstance(column, str):
        return column
    label = getattr(column, "label", None)
    if isinstance(label, str):
        return label
    name = getattr(column, "name", None)
    if isinstance(name, str):
        return name
    raise TypeError(f"Column descriptor has no label: {column!r}")


def map_rows(
    columns: Sequence[object], rows: Iterable[Sequence[Any]],
) -> list[dict[str, Any]]:
    """Map each row tuple to a dict keyed by its column label."""
    labels = [_column_label(c) for c in columns]
    mapped = []
    for row in rows:
        values = tuple(row)
        if len(values) != len(labels):
            raise ValueError(
                f"Row has {len(values)} values for {len(labels)} columns",
            )
        mapped.append(dict(zip(labels, values)))
    return mapped


def map_result(result: Result) -> list[dict[str, Any]]:
    """Map every row of a SQLAlchemy result."""
    return map_rows(list(result.keys()), result.all())


def first_row(result: Result) -> dict[str, Any] | None:
    rows = map_result(result)
    return rows[0] if rows else None
