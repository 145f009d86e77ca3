from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, Float, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from signaldesk.adapters.db.postgres import Base
from signaldesk.db.mixins import TimestampMixin

SUBSCRIPTION_PERIODS = ("ONE_MONTH", "THREE_MONTHS", "SIX_MONTHS", "TWELVE_MONTHS")
SUBSCRIPTION_STATUSES = ("ACTIVE", "PENDING", "EXPIRED")
PAYMENT_STATUSES = ("PAID", "PENDING", "FAILED", "EXPIRED", "UNDERPAID")

PRICE_FIELDS = (
    "price_one_month",
    "price_three_months",
    "price_six_months",
    "price_twelve_months",
    "discount_one_month",
    "discount_three_months",
    "discount_six_months",
    "discount_twelve_months",
)


def _uuid() -> str:
    return uuid4().hex


class Pair(Base, TimestampMixin):
    """A backtested trading pair with its stored workbook sheets and price list."""

    __tablename__ = "pairs"
    __table_args__ = (
        Index("ix_pairs_symbol_timeframe_version", "symbol", "timeframe", "version"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_uuid)
    symbol: Mapped[str] = mapped_column(String(32), nullable=False)
    timeframe: Mapped[str] = mapped_column(String(16), nullable=False)
    version: Mapped[str | None] = mapped_column(String(32))
    strategy: Mapped[str | None] = mapped_column(String(64))

    # JSON-encoded arrays of rows, one per workbook sheet
    performance: Mapped[str | None] = mapped_column(Text)
    trades_analysis: Mapped[str | None] = mapped_column(Text)
    risk_performance_ratios: Mapped[str | None] = mapped_column(Text)
    properties: Mapped[str | None] = mapped_column(Text)
    list_of_trades: Mapped[str | None] = mapped_column(Text)

    price_one_month: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    price_three_months: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    price_six_months: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    price_twelve_months: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    discount_one_month: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    discount_three_months: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    discount_six_months: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    discount_twelve_months: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)

    # never null out subscriptions.pair_id from the ORM side
    subscriptions: Mapped[list["Subscription"]] = relationship(
        back_populates="pair", passive_deletes="all"
    )


class Payment(Base, TimestampMixin):
    __tablename__ = "payments"
    __table_args__ = (Index("ix_payments_status_created_at", "status", "created_at"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_uuid)
    user_email: Mapped[str | None] = mapped_column(String(255))
    user_name: Mapped[str | None] = mapped_column(String(255))
    order_id: Mapped[str] = mapped_column(String(64), nullable=False)
    network: Mapped[str | None] = mapped_column(String(32))
    tx_hash: Mapped[str | None] = mapped_column(String(128))
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="PENDING")
    total_amount: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)

    subscriptions: Mapped[list["Subscription"]] = relationship(back_populates="payment")


class Subscription(Base, TimestampMixin):
    __tablename__ = "subscriptions"
    __table_args__ = (Index("ix_subscriptions_status", "status"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    pair_id: Mapped[str] = mapped_column(String(64), ForeignKey("pairs.id"), nullable=False)
    period: Mapped[str] = mapped_column(String(16), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="PENDING")
    base_price: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    discount_rate: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    expiry_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    payment_id: Mapped[str | None] = mapped_column(String(64), ForeignKey("payments.id"))

    pair: Mapped[Pair] = relationship(back_populates="subscriptions")
    payment: Mapped[Payment | None] = relationship(back_populates="subscriptions")
