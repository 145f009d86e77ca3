"""
Table pipeline: filter -> sort -> paginate, driven by a ViewState.

Each table the service exposes is described once by a ``TableSpec`` (its
columns, search fields, category set and default sort). ``run_table`` is the
only entry point the API and console use, so every table behaves the same way.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterable, List, Optional, Tuple

from loguru import logger

from signaldesk.table.fields import FieldPath
from signaldesk.table.filters import (
    PAIR_CATEGORIES,
    PAYMENT_CATEGORIES,
    SUBSCRIPTION_CATEGORIES,
    CategorySet,
    filter_records,
)
from signaldesk.table.pagination import Page, paginate
from signaldesk.table.sorting import SortDirection, sort_records
from signaldesk.table.view_state import ViewState


@dataclass(frozen=True)
class Column:
    key: str
    header: str
    sortable: bool = True
    accessor: Optional[Callable[[Any], Any]] = None

    def value(self, record: Any) -> Any:
        if self.accessor is not None:
            return self.accessor(record)
        return FieldPath.parse(self.key).resolve(record)


@dataclass(frozen=True)
class TableSpec:
    name: str
    columns: Tuple[Column, ...]
    search_fields: Tuple[str, ...]
    categories: CategorySet
    default_sort: Tuple[Optional[str], SortDirection] = (None, "desc")

    @property
    def sortable(self) -> List[str]:
        return [c.key for c in self.columns if c.sortable]

    def column(self, key: str) -> Optional[Column]:
        for c in self.columns:
            if c.key == key:
                return c
        return None

    def view_from_query(self, params: Any, *, default_limit: int) -> ViewState:
        """Parse URL params into a ViewState with this table's defaults applied."""
        sort_field, sort_dir = self.default_sort
        return ViewState.from_query_params(
            params,
            default_limit=default_limit,
            categories=self.categories.keys(),
            sortable=self.sortable,
            default_sort=sort_field,
            default_direction=sort_dir,
        )

    def view_to_query(self, state: ViewState, *, default_limit: int) -> dict:
        sort_field, sort_dir = self.default_sort
        return state.to_query_params(
            default_limit=default_limit,
            default_sort=sort_field,
            default_direction=sort_dir,
        )


@dataclass(frozen=True)
class TableResult:
    page: Page[Any]
    state: ViewState
    total_unfiltered: int = 0
    filtered: List[Any] = field(default_factory=list, repr=False)


def run_table(
    records: Iterable[Any],
    spec: TableSpec,
    state: ViewState,
    *,
    now: Optional[datetime] = None,
) -> TableResult:
    """
    Run one table view over a record collection.

    Raises UnknownFilterError for a category outside ``spec.categories`` and
    InvalidFieldPathError for an unusable sort field; the caller decides how
    to surface those. When the requested page no longer exists the state is
    reset to page 1 and the collection re-paginated.
    """
    source = list(records)
    filtered = filter_records(
        source,
        state.filter_category,
        state.search_query,
        spec.search_fields,
        categories=spec.categories,
        now=now,
    )

    sort_field = state.sort_field or spec.default_sort[0]
    direction = state.sort_direction if state.sort_field else spec.default_sort[1]
    column = spec.column(sort_field) if sort_field else None
    ordered = sort_records(
        filtered,
        sort_field,
        direction,
        accessor=column.accessor if column is not None else None,
    )

    page = paginate(ordered, state.page, state.items_per_page)
    reconciled = state.reconcile(page.total_pages)
    if reconciled.page != state.page:
        page = paginate(ordered, reconciled.page, reconciled.items_per_page)

    logger.debug(
        "[table] {} sort={} {} page={}/{} size={} rows={}",
        spec.name,
        sort_field,
        direction,
        page.page,
        page.total_pages,
        page.page_size,
        len(page.items),
    )
    return TableResult(
        page=page,
        state=reconciled,
        total_unfiltered=len(source),
        filtered=ordered,
    )


# -------- Table definitions --------
def _metric(name: str) -> Callable[[Any], Any]:
    path = FieldPath.parse(f"metrics.{name}")
    return path.resolve


PAIRS_TABLE = TableSpec(
    name="pairs",
    columns=(
        Column("name", "Pair"),
        Column("symbol", "Symbol"),
        Column("timeframe", "Timeframe"),
        Column("version", "Version"),
        Column("strategy", "Strategy", sortable=False),
        Column("roi", "ROI %", accessor=_metric("roi")),
        Column("risk_reward", "Risk/Reward", accessor=_metric("risk_reward")),
        Column("total_trades", "Trades", accessor=_metric("total_trades")),
        Column("win_rate", "Win Rate %", accessor=_metric("win_rate")),
        Column("max_drawdown", "Max Drawdown", accessor=_metric("max_drawdown")),
        Column("profit", "Net Profit", accessor=_metric("profit")),
        Column("created_at", "Created"),
    ),
    search_fields=("symbol", "name", "timeframe"),
    categories=PAIR_CATEGORIES,
    default_sort=("roi", "desc"),
)

SUBSCRIPTIONS_TABLE = TableSpec(
    name="subscriptions",
    columns=(
        Column("pair_symbol", "Pair", accessor=FieldPath.parse("pair.symbol").resolve),
        Column("pair_version", "Version", accessor=FieldPath.parse("pair.version").resolve),
        Column("period", "Period"),
        Column("status", "Status"),
        Column("final_price", "Price"),
        Column("expiry_date", "Expires"),
        Column("created_at", "Created"),
    ),
    search_fields=("pair.symbol", "pair.version", "period"),
    categories=SUBSCRIPTION_CATEGORIES,
    default_sort=("created_at", "desc"),
)

PAYMENTS_TABLE = TableSpec(
    name="payments",
    columns=(
        Column("order_id", "Order"),
        Column("user_email", "Email"),
        Column("user_name", "Name"),
        Column("network", "Network"),
        Column("status", "Status"),
        Column("total_amount", "Amount"),
        Column("tx_hash", "Tx", sortable=False),
        Column("created_at", "Created"),
    ),
    search_fields=("order_id", "user_email", "user_name", "network", "status"),
    categories=PAYMENT_CATEGORIES,
    default_sort=("created_at", "desc"),
)


__all__ = [
    "Column",
    "TableSpec",
    "TableResult",
    "run_table",
    "PAIRS_TABLE",
    "SUBSCRIPTIONS_TABLE",
    "PAYMENTS_TABLE",
]
