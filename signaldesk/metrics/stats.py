from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Mapping, Optional

from loguru import logger

from signaldesk.metrics.schema import to_number


# -------- Data classes --------
@dataclass(frozen=True)
class BestPerformer:
    symbol: str = "N/A"
    roi: float = 0.0


@dataclass(frozen=True)
class SummaryStats:
    total_backtests: int = 0
    profitable_backtests: int = 0
    total_profit: float = 0.0
    best_performer: BestPerformer = field(default_factory=BestPerformer)
    average_roi: float = 0.0

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BillingStats:
    total_payments: int = 0
    paid_payments: int = 0
    total_revenue: float = 0.0
    pending_payments: int = 0


@dataclass(frozen=True)
class SubscriptionStats:
    total_subscriptions: int = 0
    active_subscriptions: int = 0
    total_revenue: float = 0.0
    expiring_this_month: int = 0


# -------- Internals --------
def _get(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _metric(item: Any, name: str) -> float:
    """Read a metric either nested under ``metrics`` or directly on the item."""
    metrics = _get(item, "metrics")
    if metrics is not None:
        return to_number(_get(metrics, name))
    return to_number(_get(item, name))


def _status(item: Any) -> str:
    return str(_get(item, "status") or "").upper()


def _aware(value: Any) -> Optional[datetime]:
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if not isinstance(value, datetime):
        return None
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _same_day_next_month(now: datetime) -> datetime:
    year = now.year + (1 if now.month == 12 else 0)
    month = 1 if now.month == 12 else now.month + 1
    day = now.day
    while True:
        try:
            return now.replace(year=year, month=month, day=day)
        except ValueError:
            day -= 1


# -------- Public API --------
def aggregate(items: Iterable[Any]) -> SummaryStats:
    """
    Reduce derived pair metrics into dashboard summary statistics.

    Items carry a ``symbol`` plus ``roi``/``profit`` either directly or under a
    nested ``metrics`` object. The best performer is the first item with the
    strictly greatest ROI.
    """
    total = 0
    profitable = 0
    total_profit = 0.0
    roi_sum = 0.0
    best: Optional[BestPerformer] = None

    for item in items:
        total += 1
        roi = _metric(item, "roi")
        profit = _metric(item, "profit")
        total_profit += profit
        roi_sum += roi
        if profit > 0:
            profitable += 1
        if best is None or roi > best.roi:
            best = BestPerformer(symbol=str(_get(item, "symbol") or "N/A"), roi=roi)

    stats = SummaryStats(
        total_backtests=total,
        profitable_backtests=profitable,
        total_profit=total_profit,
        best_performer=best or BestPerformer(),
        average_roi=roi_sum / total if total else 0.0,
    )
    logger.debug(
        "[stats] backtests={} profitable={} profit={:.2f} avg_roi={:.2f}",
        stats.total_backtests,
        stats.profitable_backtests,
        stats.total_profit,
        stats.average_roi,
    )
    return stats


def billing_stats(payments: Iterable[Any]) -> BillingStats:
    total = paid = pending = 0
    revenue = 0.0
    for payment in payments:
        total += 1
        status = _status(payment)
        if status == "PAID":
            paid += 1
            revenue += to_number(_get(payment, "total_amount"))
        elif status == "PENDING":
            pending += 1
    return BillingStats(
        total_payments=total,
        paid_payments=paid,
        total_revenue=revenue,
        pending_payments=pending,
    )


def final_price(base_price: Any, discount_rate: Any) -> float:
    """Price after applying a percentage discount."""
    return to_number(base_price) * (1 - to_number(discount_rate) / 100)


def subscription_stats(
    subscriptions: Iterable[Any], *, now: Optional[datetime] = None
) -> SubscriptionStats:
    now = _aware(now) or datetime.now(timezone.utc)
    horizon = _same_day_next_month(now)
    total = active = expiring = 0
    revenue = 0.0
    for sub in subscriptions:
        total += 1
        if _status(sub) == "ACTIVE":
            active += 1
        payment = _get(sub, "payment")
        if payment is not None:
            payment_status = _status(payment)
        else:
            payment_status = str(_get(sub, "payment_status") or "").upper()
        if payment_status == "PAID":
            revenue += final_price(_get(sub, "base_price"), _get(sub, "discount_rate"))
        expiry = _aware(_get(sub, "expiry_date"))
        if expiry is not None and now <= expiry <= horizon:
            expiring += 1
    return SubscriptionStats(
        total_subscriptions=total,
        active_subscriptions=active,
        total_revenue=revenue,
        expiring_this_month=expiring,
    )


__all__ = [
    "BestPerformer",
    "SummaryStats",
    "BillingStats",
    "SubscriptionStats",
    "aggregate",
    "billing_stats",
    "subscription_stats",
    "final_price",
]
