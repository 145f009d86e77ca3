from signaldesk.metrics.deriver import (
    DerivedMetrics,
    PairRow,
    derive,
    derive_many,
    derive_pair,
    parse_sheet,
    parse_sheets,
)
from signaldesk.metrics.stats import SummaryStats, aggregate

__all__ = [
    "DerivedMetrics",
    "PairRow",
    "SummaryStats",
    "aggregate",
    "derive",
    "derive_many",
    "derive_pair",
    "parse_sheet",
    "parse_sheets",
]
