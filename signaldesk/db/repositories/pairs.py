from __future__ import annotations

from typing import Any, Mapping

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from signaldesk.core.exceptions import (
    DataValidationError,
    RecordInUseError,
    RecordNotFoundError,
)
from signaldesk.db import models

# Columns a caller may set through create/update; id and timestamps are managed here.
WRITABLE_FIELDS = (
    "symbol",
    "timeframe",
    "version",
    "strategy",
    "performance",
    "trades_analysis",
    "risk_performance_ratios",
    "properties",
    "list_of_trades",
) + models.PRICE_FIELDS


def parse_num(value: Any) -> float:
    """Price/discount input: blank or missing means 0."""
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        raise DataValidationError(f"not a number: {value!r}") from None


def _normalize(payload: Mapping[str, Any]) -> dict:
    data = {k: v for k, v in payload.items() if k in WRITABLE_FIELDS}
    for name in models.PRICE_FIELDS:
        if name in payload or name in data:
            data[name] = parse_num(payload.get(name))
    return data


class PairRepository:
    """Persist and retrieve backtested pairs."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_pairs(self) -> list[models.Pair]:
        stmt = select(models.Pair).order_by(models.Pair.created_at.desc())
        return list(self.session.scalars(stmt))

    def get(self, pair_id: str) -> models.Pair | None:
        return self.session.get(models.Pair, pair_id)

    def find_by_key(
        self, symbol: str, timeframe: str, version: str | None = None
    ) -> models.Pair | None:
        stmt = select(models.Pair).where(
            models.Pair.symbol == symbol,
            models.Pair.timeframe == timeframe,
        )
        if version:
            stmt = stmt.where(models.Pair.version == version)
        else:
            stmt = stmt.where(models.Pair.version.is_(None))
        return self.session.scalar(stmt)

    def create(self, payload: Mapping[str, Any]) -> models.Pair:
        if not payload.get("symbol") or not payload.get("timeframe"):
            raise DataValidationError("symbol and timeframe are required")
        data = _normalize(payload)
        for name in models.PRICE_FIELDS:
            data.setdefault(name, 0.0)
        pair = models.Pair(**data)
        self.session.add(pair)
        logger.info("[pairs] created {} {} {}", pair.symbol, pair.timeframe, pair.version)
        return pair

    def update_by_key(self, payload: Mapping[str, Any]) -> models.Pair:
        """Update the pair matching symbol+timeframe+version with the payload."""
        symbol = payload.get("symbol")
        timeframe = payload.get("timeframe")
        if not symbol or not timeframe:
            raise DataValidationError("symbol and timeframe are required")
        pair = self.find_by_key(symbol, timeframe, payload.get("version"))
        if pair is None:
            raise RecordNotFoundError(
                f"no pair {symbol} {timeframe} version={payload.get('version')!r}"
            )
        for name, value in _normalize(payload).items():
            setattr(pair, name, value)
        logger.info("[pairs] updated {} ({} {})", pair.id, symbol, timeframe)
        return pair

    def subscription_count(self, pair_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(models.Subscription)
            .where(models.Subscription.pair_id == pair_id)
        )
        return int(self.session.scalar(stmt) or 0)

    def delete(self, pair_id: str) -> None:
        pair = self.get(pair_id)
        if pair is None:
            raise RecordNotFoundError(f"no pair with id {pair_id}")
        # subscriptions.pair_id is NOT NULL
        in_use = self.subscription_count(pair_id)
        if in_use:
            raise RecordInUseError(
                f"pair {pair_id} has {in_use} subscription(s); delete refused"
            )
        self.session.delete(pair)
        logger.info("[pairs] deleted {}", pair_id)
