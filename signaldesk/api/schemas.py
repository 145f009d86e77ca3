"""Request/response models for the HTTP API (camelCase on the wire)."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from signaldesk.metrics.deriver import PairRow
from signaldesk.metrics.stats import final_price

T = TypeVar("T")

PriceInput = Union[float, str, None]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# -------- Pairs / backtests --------
class MetricsOut(CamelModel):
    roi: float = 0.0
    risk_reward: float = 0.0
    total_trades: float = 0.0
    win_rate: float = 0.0
    max_drawdown: float = 0.0
    profit: float = 0.0


class PairRowOut(CamelModel):
    id: str
    symbol: str
    name: str
    timeframe: Optional[str] = None
    version: Optional[str] = None
    strategy: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    metrics: MetricsOut = Field(default_factory=MetricsOut)
    is_popular: bool = False

    @classmethod
    def from_row(cls, row: PairRow) -> "PairRowOut":
        return cls(
            id=row.id,
            symbol=row.symbol,
            name=row.name,
            timeframe=row.timeframe,
            version=row.version,
            strategy=row.strategy,
            created_at=row.created_at,
            updated_at=row.updated_at,
            metrics=MetricsOut(**row.metrics.as_dict()),
            is_popular=row.is_popular,
        )


class PriceListOut(CamelModel):
    price_one_month: float = 0.0
    price_three_months: float = 0.0
    price_six_months: float = 0.0
    price_twelve_months: float = 0.0
    discount_one_month: float = 0.0
    discount_three_months: float = 0.0
    discount_six_months: float = 0.0
    discount_twelve_months: float = 0.0


class PairDetailOut(CamelModel):
    row: PairRowOut
    prices: PriceListOut
    sheets: Dict[str, List[Any]] = Field(default_factory=dict)


class PairLookupOut(CamelModel):
    found: bool
    pair: Optional[PairDetailOut] = None


class PairIn(CamelModel):
    """Create/update payload; sheets may arrive as JSON strings or decoded arrays."""

    symbol: Optional[str] = None
    timeframe: Optional[str] = None
    version: Optional[str] = None
    strategy: Optional[str] = None
    performance: Optional[Any] = None
    trades_analysis: Optional[Any] = None
    risk_performance_ratios: Optional[Any] = None
    properties: Optional[Any] = None
    list_of_trades: Optional[Any] = None
    price_one_month: PriceInput = None
    price_three_months: PriceInput = None
    price_six_months: PriceInput = None
    price_twelve_months: PriceInput = None
    discount_one_month: PriceInput = None
    discount_three_months: PriceInput = None
    discount_six_months: PriceInput = None
    discount_twelve_months: PriceInput = None

    @field_validator(
        "performance",
        "trades_analysis",
        "risk_performance_ratios",
        "properties",
        "list_of_trades",
        mode="before",
    )
    @classmethod
    def _encode_sheet(cls, value: Any) -> Any:
        if isinstance(value, (list, dict)):
            return json.dumps(value)
        return value

    def to_payload(self) -> Dict[str, Any]:
        """Snake-case payload with only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


# -------- Subscriptions / payments --------
class PairRefOut(CamelModel):
    id: str
    symbol: str
    timeframe: Optional[str] = None
    version: Optional[str] = None


class SubscriptionOut(CamelModel):
    id: str
    user_id: str
    pair: Optional[PairRefOut] = None
    period: str
    status: str
    base_price: float = 0.0
    discount_rate: float = 0.0
    final_price: float = 0.0
    expiry_date: Optional[datetime] = None
    payment_id: Optional[str] = None
    payment_status: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, sub: Any) -> "SubscriptionOut":
        pair = getattr(sub, "pair", None)
        payment = getattr(sub, "payment", None)
        return cls(
            id=sub.id,
            user_id=sub.user_id,
            pair=PairRefOut.model_validate(pair) if pair is not None else None,
            period=sub.period,
            status=sub.status,
            base_price=sub.base_price or 0.0,
            discount_rate=sub.discount_rate or 0.0,
            final_price=final_price(sub.base_price, sub.discount_rate),
            expiry_date=sub.expiry_date,
            payment_id=sub.payment_id,
            payment_status=payment.status if payment is not None else None,
            created_at=sub.created_at,
        )


class PaymentOut(CamelModel):
    id: str
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    order_id: str
    network: Optional[str] = None
    tx_hash: Optional[str] = None
    status: str
    total_amount: float = 0.0
    created_at: Optional[datetime] = None


# -------- Tables and stats --------
class TablePage(CamelModel, Generic[T]):
    items: List[T]
    page: int
    page_size: int
    total_items: int
    total_pages: int
    total_unfiltered: int
    start_index: int = 0
    end_index: int = 0
    view: Dict[str, str] = Field(default_factory=dict)


class BestPerformerOut(CamelModel):
    symbol: str = "N/A"
    roi: float = 0.0


class SummaryStatsOut(CamelModel):
    total_backtests: int = 0
    profitable_backtests: int = 0
    total_profit: float = 0.0
    best_performer: BestPerformerOut = Field(default_factory=BestPerformerOut)
    average_roi: float = 0.0


class BillingStatsOut(CamelModel):
    total_payments: int = 0
    paid_payments: int = 0
    total_revenue: float = 0.0
    pending_payments: int = 0


class SubscriptionStatsOut(CamelModel):
    total_subscriptions: int = 0
    active_subscriptions: int = 0
    total_revenue: float = 0.0
    expiring_this_month: int = 0
