from __future__ import annotations

from decimal import Decimal
from functools import cmp_to_key
from typing import Any, Callable, Iterable, List, Literal, Optional

from signaldesk.table.fields import FieldPath

SortDirection = Literal["asc", "desc"]
Accessor = Callable[[Any], Any]

_NUMBER_TYPES = (int, float, Decimal)


def _is_number(value: Any) -> bool:
    return isinstance(value, _NUMBER_TYPES) and not isinstance(value, bool)


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def locale_compare(a: str, b: str) -> int:
    """Case-insensitive collation first, raw code points as the tie-breaker."""
    return _cmp(a.casefold(), b.casefold()) or _cmp(a, b)


def compare_values(a: Any, b: Any) -> int:
    """Ascending comparison of two non-null values."""
    if isinstance(a, str) and isinstance(b, str):
        return locale_compare(a, b)
    if _is_number(a) and _is_number(b):
        return _cmp(a, b)
    return locale_compare(str(a), str(b))


def sort_records(
    records: Iterable[Any],
    field: Optional[str | FieldPath],
    direction: SortDirection = "desc",
    accessor: Optional[Accessor] = None,
) -> List[Any]:
    """
    Stable sort by one field; ``None`` values always go last.

    With no field the input order is returned unchanged (as a new list).
    """
    items = list(records)
    if not field and accessor is None:
        return items

    if accessor is None:
        path = FieldPath.parse(field)  # type: ignore[arg-type]
        accessor = path.resolve

    keyed = [(accessor(item), item) for item in items]
    present = [pair for pair in keyed if pair[0] is not None]
    missing = [item for value, item in keyed if value is None]

    # reverse=True keeps equal elements in their original order
    present.sort(
        key=cmp_to_key(lambda x, y: compare_values(x[0], y[0])),
        reverse=direction == "desc",
    )
    return [item for _, item in present] + missing


__all__ = ["SortDirection", "compare_values", "locale_compare", "sort_records"]
