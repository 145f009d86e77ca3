from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, Query, Request
from loguru import logger
from sqlalchemy.exc import IntegrityError

from signaldesk.adapters.db.postgres import get_session
from signaldesk.api.schemas import (
    PairDetailOut,
    PairIn,
    PairLookupOut,
    PairRowOut,
    PriceListOut,
    SummaryStatsOut,
    TablePage,
)
from signaldesk.api.tables import table_page
from signaldesk.core.exceptions import (
    DataValidationError,
    RecordInUseError,
    RecordNotFoundError,
)
from signaldesk.db.models import PRICE_FIELDS
from signaldesk.db.repositories.pairs import PairRepository
from signaldesk.metrics.deriver import PairRow, derive_many, derive_pair, parse_sheets
from signaldesk.metrics.stats import aggregate
from signaldesk.settings import get_table_settings
from signaldesk.table.pipeline import PAIRS_TABLE

router = APIRouter(prefix="/backtests", tags=["backtests"])


def _list_pair_rows() -> List[PairRow]:
    column = get_table_settings().metrics_column
    with get_session() as session:
        repo = PairRepository(session)
        return derive_many(repo.list_pairs(), column=column)


def _detail(pair: Any) -> PairDetailOut:
    column = get_table_settings().metrics_column
    return PairDetailOut(
        row=PairRowOut.from_row(derive_pair(pair, column=column)),
        prices=PriceListOut(**{name: getattr(pair, name, 0.0) or 0.0 for name in PRICE_FIELDS}),
        sheets=parse_sheets(pair),
    )


def _require_key(body: PairIn) -> Dict[str, Any]:
    payload = body.to_payload()
    if not body.symbol or not body.timeframe:
        raise HTTPException(status_code=400, detail="Missing symbol or timeframe")
    return payload


@router.get("", response_model=TablePage[PairRowOut])
def list_backtests(request: Request) -> TablePage:
    rows = _list_pair_rows()
    return table_page(rows, PAIRS_TABLE, request.query_params, serialize=PairRowOut.from_row)


@router.get("/stats", response_model=SummaryStatsOut)
def backtest_stats() -> SummaryStatsOut:
    stats = aggregate(_list_pair_rows())
    return SummaryStatsOut.model_validate(stats.as_dict())


@router.get("/lookup", response_model=PairLookupOut)
def lookup_backtest(
    symbol: str = Query(""),
    timeframe: str = Query(""),
    version: str | None = Query(None),
) -> PairLookupOut:
    """Report whether a pair with this symbol, timeframe and version is stored."""
    if not symbol or not timeframe:
        raise HTTPException(status_code=400, detail="Missing symbol or timeframe")
    with get_session() as session:
        pair = PairRepository(session).find_by_key(symbol, timeframe, version or None)
        if pair is None:
            return PairLookupOut(found=False)
        return PairLookupOut(found=True, pair=_detail(pair))


@router.get("/{pair_id}", response_model=PairDetailOut)
def get_backtest(pair_id: str) -> PairDetailOut:
    with get_session() as session:
        pair = PairRepository(session).get(pair_id)
        if pair is None:
            raise HTTPException(status_code=404, detail=f"Backtest {pair_id} not found")
        return _detail(pair)


@router.post("", response_model=PairDetailOut, status_code=201)
def create_backtest(body: PairIn) -> PairDetailOut:
    payload = _require_key(body)
    with get_session() as session:
        repo = PairRepository(session)
        try:
            pair = repo.create(payload)
        except DataValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        session.commit()
        return _detail(pair)


@router.patch("", response_model=PairDetailOut)
def update_backtest(body: PairIn) -> PairDetailOut:
    payload = _require_key(body)
    with get_session() as session:
        repo = PairRepository(session)
        try:
            pair = repo.update_by_key(payload)
        except RecordNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except DataValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        session.commit()
        return _detail(pair)


@router.delete("/{pair_id}")
def delete_backtest(pair_id: str) -> Dict[str, Any]:
    with get_session() as session:
        repo = PairRepository(session)
        try:
            repo.delete(pair_id)
            session.commit()
        except RecordNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except RecordInUseError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except IntegrityError as exc:
            session.rollback()
            logger.warning("[api] backtest {} delete rejected by database: {}", pair_id, exc.orig)
            raise HTTPException(
                status_code=409, detail=f"Backtest {pair_id} is still referenced"
            ) from exc
    logger.info("[api] backtest {} deleted", pair_id)
    return {"ok": True, "id": pair_id}
