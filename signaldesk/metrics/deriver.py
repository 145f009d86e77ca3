from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from loguru import logger

from signaldesk.metrics import schema
from signaldesk.metrics.schema import Sheet


# -------- Data classes --------
@dataclass(frozen=True)
class DerivedMetrics:
    roi: float = 0.0
    risk_reward: float = 0.0
    total_trades: float = 0.0
    win_rate: float = 0.0
    max_drawdown: float = 0.0
    profit: float = 0.0

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class PairRow:
    """A backtest record flattened for table display."""

    id: str
    symbol: str
    name: str
    timeframe: Optional[str] = None
    version: Optional[str] = None
    strategy: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    metrics: DerivedMetrics = field(default_factory=DerivedMetrics)
    is_popular: bool = False


# -------- Internals --------
def _field(record: Any, *names: str) -> Any:
    for name in names:
        if isinstance(record, Mapping):
            if name in record:
                return record[name]
        elif hasattr(record, name):
            return getattr(record, name)
    return None


def _raw_sheet(record: Any, sheet: Sheet) -> Any:
    return _field(record, sheet.attr, sheet.key)


def parse_sheet(raw: Any, *, label: str = "sheet") -> List[Any]:
    """
    Parse one stored sheet blob into its list of rows.

    Accepts a JSON string or an already-decoded list. ``None``, empty strings,
    malformed JSON and non-array payloads all yield an empty list.
    """
    if raw is None:
        return []
    if isinstance(raw, list):
        return raw
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    if not isinstance(raw, str):
        logger.debug("[metrics] {} has unsupported type {}", label, type(raw).__name__)
        return []
    if not raw.strip():
        return []
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, ValueError) as exc:
        logger.debug("[metrics] {} is not valid JSON: {}", label, exc)
        return []
    if not isinstance(parsed, list):
        logger.debug("[metrics] {} decoded to {}, expected array", label, type(parsed).__name__)
        return []
    return parsed


def parse_sheets(record: Any) -> Dict[str, List[Any]]:
    """Parse every stored sheet of a record, keyed by the sheet's JSON name."""
    return {
        sheet.key: parse_sheet(_raw_sheet(record, sheet), label=sheet.key)
        for sheet in schema.SHEETS
    }


# -------- Public API --------
def derive(record: Any, *, column: str = schema.DEFAULT_COLUMN) -> DerivedMetrics:
    """
    Derive the flat pair metrics from a backtest record's stored sheets.

    Never raises for bad sheet content: a missing or malformed sheet contributes
    zeros for every metric read from it.
    """
    performance = parse_sheet(
        _raw_sheet(record, schema.PERFORMANCE), label=schema.PERFORMANCE.key
    )
    trades = parse_sheet(
        _raw_sheet(record, schema.TRADES_ANALYSIS), label=schema.TRADES_ANALYSIS.key
    )

    net_profit = schema.NET_PROFIT.read(performance, column)
    total_trades = schema.TOTAL_TRADES.read(trades, column)
    winning_trades = schema.WINNING_TRADES.read(trades, column)

    roi = (schema.ROI_BASE / net_profit) * 100 if net_profit else 0.0
    win_rate = (
        winning_trades / total_trades * 100 if total_trades and winning_trades else 0.0
    )

    return DerivedMetrics(
        roi=roi,
        risk_reward=schema.RISK_REWARD.read(trades, column),
        total_trades=total_trades,
        win_rate=win_rate,
        max_drawdown=schema.MAX_DRAWDOWN.read(performance, column),
        profit=net_profit,
    )


def display_name(symbol: str) -> str:
    return symbol.split("/")[0] or symbol


def derive_pair(record: Any, *, column: str = schema.DEFAULT_COLUMN) -> PairRow:
    symbol = str(_field(record, "symbol") or "")
    return PairRow(
        id=str(_field(record, "id") or ""),
        symbol=symbol,
        name=display_name(symbol),
        timeframe=_field(record, "timeframe"),
        version=_field(record, "version"),
        strategy=_field(record, "strategy"),
        created_at=_field(record, "created_at", "createdAt"),
        updated_at=_field(record, "updated_at", "updatedAt"),
        metrics=derive(record, column=column),
    )


def derive_many(
    records: Iterable[Any], *, column: str = schema.DEFAULT_COLUMN
) -> List[PairRow]:
    rows = [derive_pair(record, column=column) for record in records]
    logger.debug("[metrics] derived {} pair rows", len(rows))
    return rows


__all__ = [
    "DerivedMetrics",
    "PairRow",
    "parse_sheet",
    "parse_sheets",
    "derive",
    "derive_pair",
    "derive_many",
    "display_name",
]
