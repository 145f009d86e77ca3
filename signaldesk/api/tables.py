"""Glue between query strings, the table pipeline and TablePage responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Optional

from fastapi import HTTPException
from loguru import logger

from signaldesk.api.schemas import TablePage
from signaldesk.core.exceptions import InvalidFieldPathError, UnknownFilterError
from signaldesk.settings import get_table_settings
from signaldesk.table.pipeline import TableSpec, run_table


def table_page(
    records: Iterable[Any],
    spec: TableSpec,
    params: Mapping[str, Any],
    *,
    serialize: Callable[[Any], Any] = lambda item: item,
    now: Optional[datetime] = None,
) -> TablePage:
    """Run ``spec`` over ``records`` with the view encoded in ``params``."""
    default_limit = get_table_settings().default_page_size
    state = spec.view_from_query(params, default_limit=default_limit)
    try:
        result = run_table(records, spec, state, now=now)
    except (InvalidFieldPathError, UnknownFilterError) as exc:
        logger.warning("[api] {} table rejected view {}: {}", spec.name, state, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    page = result.page
    return TablePage(
        items=[serialize(item) for item in page.items],
        page=page.page,
        page_size=page.page_size,
        total_items=page.total_items,
        total_pages=page.total_pages,
        total_unfiltered=result.total_unfiltered,
        start_index=page.start_index,
        end_index=page.end_index,
        view=spec.view_to_query(result.state, default_limit=default_limit),
    )
