from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from loguru import logger

from signaldesk.core.exceptions import UnknownFilterError
from signaldesk.settings import get_table_settings
from signaldesk.table.fields import FieldPath, top_level_values

ALL = "all"

CRYPTO_TICKERS: Tuple[str, ...] = ("BTC", "ETH", "LTC", "ADA")
COMMODITY_TICKERS: Tuple[str, ...] = ("XAU", "XAG", "OIL")
# Forex is "everything that is not a known crypto or gold ticker".
FOREX_EXCLUDED: Tuple[str, ...] = ("BTC", "ETH", "LTC", "ADA", "XAU")


@dataclass(frozen=True)
class FilterContext:
    now: datetime
    recent_days: int

    @property
    def recent_cutoff(self) -> datetime:
        return self.now - timedelta(days=self.recent_days)


Predicate = Callable[[Any, FilterContext], bool]


@dataclass(frozen=True)
class CategorySet:
    """A closed set of named category predicates; ``all`` is always the identity."""

    name: str
    predicates: Mapping[str, Predicate] = field(default_factory=dict)

    def keys(self) -> List[str]:
        return [ALL, *self.predicates.keys()]

    def __contains__(self, key: object) -> bool:
        return key == ALL or key in self.predicates

    def predicate(self, key: str) -> Optional[Predicate]:
        if key == ALL:
            return None
        try:
            return self.predicates[key]
        except KeyError:
            raise UnknownFilterError(
                f"unknown {self.name} filter {key!r}; expected one of {self.keys()}"
            ) from None


# -------- Predicate factories --------
def _text(record: Any, path: FieldPath) -> str:
    value = path.resolve(record)
    return "" if value is None else str(value)


def status_is(status: str, path: str = "status") -> Predicate:
    fp = FieldPath.parse(path)

    def _pred(record: Any, _ctx: FilterContext) -> bool:
        return _text(record, fp).upper() == status

    return _pred


def symbol_includes_any(tickers: Sequence[str], path: str = "symbol") -> Predicate:
    fp = FieldPath.parse(path)

    def _pred(record: Any, _ctx: FilterContext) -> bool:
        symbol = _text(record, fp)
        return any(ticker in symbol for ticker in tickers)

    return _pred


def symbol_excludes_all(tickers: Sequence[str], path: str = "symbol") -> Predicate:
    fp = FieldPath.parse(path)

    def _pred(record: Any, _ctx: FilterContext) -> bool:
        symbol = _text(record, fp)
        return not any(ticker in symbol for ticker in tickers)

    return _pred


def created_recently(path: str = "created_at") -> Predicate:
    fp = FieldPath.parse(path)

    def _pred(record: Any, ctx: FilterContext) -> bool:
        value = fp.resolve(record)
        if isinstance(value, str):
            try:
                value = datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                return False
        if not isinstance(value, datetime):
            return False
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value >= ctx.recent_cutoff

    return _pred


def positive(path: str) -> Predicate:
    fp = FieldPath.parse(path)

    def _pred(record: Any, _ctx: FilterContext) -> bool:
        value = fp.resolve(record)
        return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0

    return _pred


PAIR_CATEGORIES = CategorySet(
    "pair",
    {
        "forex": symbol_excludes_all(FOREX_EXCLUDED),
        "crypto": symbol_includes_any(CRYPTO_TICKERS),
        "commodities": symbol_includes_any(COMMODITY_TICKERS),
        "profitable": positive("metrics.profit"),
        "recent": created_recently(),
    },
)

SUBSCRIPTION_CATEGORIES = CategorySet(
    "subscription",
    {
        "active": status_is("ACTIVE"),
        "pending": status_is("PENDING"),
        "expired": status_is("EXPIRED"),
        "forex": symbol_excludes_all(FOREX_EXCLUDED, "pair.symbol"),
        "crypto": symbol_includes_any(CRYPTO_TICKERS, "pair.symbol"),
        "commodities": symbol_includes_any(COMMODITY_TICKERS, "pair.symbol"),
    },
)

PAYMENT_CATEGORIES = CategorySet(
    "payment",
    {
        "paid": status_is("PAID"),
        "pending": status_is("PENDING"),
        "failed": status_is("FAILED"),
        "expired": status_is("EXPIRED"),
        "underpaid": status_is("UNDERPAID"),
        "recent": created_recently(),
    },
)


# -------- Search --------
def _matches(value: Any, needle: str) -> bool:
    return value is not None and needle in str(value).lower()


def matches_search(record: Any, query: str, search_fields: Sequence[FieldPath]) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True
    if search_fields:
        return any(_matches(fp.resolve(record), needle) for fp in search_fields)
    return any(_matches(value, needle) for value in top_level_values(record))


# -------- Public API --------
def filter_records(
    records: Iterable[Any],
    category: str,
    search_query: str,
    search_fields: Sequence[str | FieldPath],
    *,
    categories: CategorySet,
    now: Optional[datetime] = None,
    recent_days: Optional[int] = None,
) -> List[Any]:
    """
    Apply a category filter, then a free-text search, preserving input order.

    Raises UnknownFilterError when ``category`` is not part of ``categories``.
    """
    predicate = categories.predicate(category or ALL)
    fields = [FieldPath.parse(f) for f in search_fields]
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    ctx = FilterContext(
        now=now,
        recent_days=recent_days if recent_days is not None else get_table_settings().recent_days,
    )

    source = list(records)
    narrowed = [r for r in source if predicate(r, ctx)] if predicate else source
    query = search_query or ""
    result = [r for r in narrowed if matches_search(r, query, fields)]
    logger.debug(
        "[table] {} filter={} q={!r} {}->{}->{}",
        categories.name,
        category or ALL,
        query,
        len(source),
        len(narrowed),
        len(result),
    )
    return result


__all__ = [
    "ALL",
    "CategorySet",
    "FilterContext",
    "CRYPTO_TICKERS",
    "COMMODITY_TICKERS",
    "FOREX_EXCLUDED",
    "PAIR_CATEGORIES",
    "SUBSCRIPTION_CATEGORIES",
    "PAYMENT_CATEGORIES",
    "filter_records",
    "matches_search",
    "status_is",
    "symbol_includes_any",
    "symbol_excludes_all",
    "created_recently",
    "positive",
]
