"""Positional layout of the spreadsheet-derived backtest sheets.

Every backtest upload stores each workbook sheet as a JSON array of rows, where
each row maps a column header (e.g. ``"All USDT"``) to a cell value. The pair
metrics are read from fixed row positions of those arrays; this module is the
only place those positions are written down.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Sequence, Tuple

DEFAULT_COLUMN = "All USDT"


@dataclass(frozen=True)
class Sheet:
    """A stored workbook sheet: its JSON key and its Python attribute name."""

    key: str
    attr: str
    title: str


PERFORMANCE = Sheet("performance", "performance", "Performance")
TRADES_ANALYSIS = Sheet("tradesAnalysis", "trades_analysis", "Trades analysis")
RISK_PERFORMANCE_RATIOS = Sheet(
    "riskPerformanceRatios", "risk_performance_ratios", "Risk performance ratios"
)
PROPERTIES = Sheet("properties", "properties", "Properties")
LIST_OF_TRADES = Sheet("listOfTrades", "list_of_trades", "List of trades")

SHEETS: Tuple[Sheet, ...] = (
    PERFORMANCE,
    TRADES_ANALYSIS,
    RISK_PERFORMANCE_RATIOS,
    PROPERTIES,
    LIST_OF_TRADES,
)


def to_number(value: Any) -> float:
    """Coerce a cell value to a finite float, 0.0 for anything else."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().replace(",", ""))
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


@dataclass(frozen=True)
class MetricCell:
    """One metric's fixed (sheet, row, column) coordinate."""

    sheet: Sheet
    row: int
    column: str = DEFAULT_COLUMN

    def read(self, rows: Sequence[Any], column: str | None = None) -> float:
        col = column or self.column
        if self.row >= len(rows):
            return 0.0
        row = rows[self.row]
        if not isinstance(row, Mapping):
            return 0.0
        return to_number(row.get(col))


NET_PROFIT = MetricCell(PERFORMANCE, 1)
MAX_DRAWDOWN = MetricCell(PERFORMANCE, 7)
TOTAL_TRADES = MetricCell(TRADES_ANALYSIS, 0)
WINNING_TRADES = MetricCell(TRADES_ANALYSIS, 2)
RISK_REWARD = MetricCell(TRADES_ANALYSIS, 9)

METRIC_CELLS: Mapping[str, MetricCell] = {
    "net_profit": NET_PROFIT,
    "max_drawdown": MAX_DRAWDOWN,
    "total_trades": TOTAL_TRADES,
    "winning_trades": WINNING_TRADES,
    "risk_reward": RISK_REWARD,
}

# Base the ROI figure is expressed against.
ROI_BASE = 10000.0

__all__ = [
    "DEFAULT_COLUMN",
    "Sheet",
    "SHEETS",
    "PERFORMANCE",
    "TRADES_ANALYSIS",
    "RISK_PERFORMANCE_RATIOS",
    "PROPERTIES",
    "LIST_OF_TRADES",
    "MetricCell",
    "METRIC_CELLS",
    "NET_PROFIT",
    "MAX_DRAWDOWN",
    "TOTAL_TRADES",
    "WINNING_TRADES",
    "RISK_REWARD",
    "ROI_BASE",
    "to_number",
]
