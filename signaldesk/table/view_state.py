"""Immutable table view state and the reducer that updates it.

The view state is what the URL query string encodes for a table: search text
(``q``), filter category (``filter``), sort column and direction (``sort`` and
``dir``), current page (``page``) and page size (``limit``). Every change other
than page navigation sends the user back to page 1; ``reconcile`` resets a page
that no longer exists after the collection shrank.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Collection, Dict, Mapping, Optional, Union

from loguru import logger

from signaldesk.settings import PAGE_SIZE_CHOICES
from signaldesk.table.filters import ALL
from signaldesk.table.sorting import SortDirection

DIRECTIONS = ("asc", "desc")


@dataclass(frozen=True)
class ViewState:
    search_query: str = ""
    filter_category: str = ALL
    sort_field: Optional[str] = None
    sort_direction: SortDirection = "desc"
    page: int = 1
    items_per_page: int = 20

    # -------- URL round trip --------
    @classmethod
    def from_query_params(
        cls,
        params: Mapping[str, Any],
        *,
        default_limit: int = 20,
        categories: Optional[Collection[str]] = None,
        sortable: Optional[Collection[str]] = None,
        default_sort: Optional[str] = None,
        default_direction: SortDirection = "desc",
    ) -> "ViewState":
        """Read a view state from query params; bad values fall back to defaults."""
        category = _first(params, "filter") or ALL
        if categories is not None and category not in categories:
            logger.debug("[view] unknown filter {!r}; using {}", category, ALL)
            category = ALL

        sort_field = _first(params, "sort") or default_sort
        if sort_field and sortable is not None and sort_field not in sortable:
            logger.debug("[view] unsortable column {!r}; using {!r}", sort_field, default_sort)
            sort_field = default_sort

        direction = (_first(params, "dir") or default_direction).lower()
        if direction not in DIRECTIONS:
            direction = default_direction

        limit = _int(_first(params, "limit"), default_limit)
        if limit not in PAGE_SIZE_CHOICES:
            logger.debug("[view] page size {} not allowed; using {}", limit, default_limit)
            limit = default_limit

        return cls(
            search_query=(_first(params, "q") or "").strip(),
            filter_category=category,
            sort_field=sort_field or None,
            sort_direction=direction,  # type: ignore[arg-type]
            page=max(1, _int(_first(params, "page"), 1)),
            items_per_page=limit,
        )

    def to_query_params(
        self,
        *,
        default_limit: int = 20,
        default_sort: Optional[str] = None,
        default_direction: SortDirection = "desc",
    ) -> Dict[str, str]:
        """Query params for this state, omitting every value equal to its default."""
        params: Dict[str, str] = {}
        if self.search_query:
            params["q"] = self.search_query
        if self.filter_category and self.filter_category != ALL:
            params["filter"] = self.filter_category
        if self.sort_field and self.sort_field != default_sort:
            params["sort"] = self.sort_field
        if self.sort_field and self.sort_direction != default_direction:
            params["dir"] = self.sort_direction
        if self.page != 1:
            params["page"] = str(self.page)
        if self.items_per_page != default_limit:
            params["limit"] = str(self.items_per_page)
        return params

    # -------- Reducer shortcuts --------
    def with_search(self, query: str) -> "ViewState":
        return apply(self, SetSearch(query))

    def with_filter(self, category: str) -> "ViewState":
        return apply(self, SetFilter(category))

    def toggle_sort(self, field: str) -> "ViewState":
        return apply(self, ToggleSort(field))

    def with_page(self, page: int) -> "ViewState":
        return apply(self, SetPage(page))

    def with_page_size(self, size: int) -> "ViewState":
        return apply(self, SetPageSize(size))

    def reconcile(self, total_pages: int) -> "ViewState":
        """Back to page 1 when the current page is past the last one."""
        if self.page > max(total_pages, 1):
            logger.debug("[view] page {} > {} pages; resetting to 1", self.page, total_pages)
            return replace(self, page=1)
        return self


# -------- Actions --------
@dataclass(frozen=True)
class SetSearch:
    query: str


@dataclass(frozen=True)
class SetFilter:
    category: str


@dataclass(frozen=True)
class ToggleSort:
    field: str


@dataclass(frozen=True)
class SetPage:
    page: int


@dataclass(frozen=True)
class SetPageSize:
    size: int


Action = Union[SetSearch, SetFilter, ToggleSort, SetPage, SetPageSize]


def apply(state: ViewState, action: Action) -> ViewState:
    """Apply one user action; anything but page navigation returns to page 1."""
    if isinstance(action, SetPage):
        return replace(state, page=max(1, int(action.page)))
    if isinstance(action, SetSearch):
        return replace(state, search_query=action.query.strip(), page=1)
    if isinstance(action, SetFilter):
        return replace(state, filter_category=action.category or ALL, page=1)
    if isinstance(action, ToggleSort):
        if state.sort_field == action.field:
            direction = "asc" if state.sort_direction == "desc" else "desc"
        else:
            direction = "desc"
        return replace(state, sort_field=action.field, sort_direction=direction, page=1)
    if isinstance(action, SetPageSize):
        if action.size not in PAGE_SIZE_CHOICES:
            raise ValueError(
                f"page size {action.size} not in {PAGE_SIZE_CHOICES}"
            )
        return replace(state, items_per_page=action.size, page=1)
    raise TypeError(f"unsupported view action: {action!r}")


# -------- Internals --------
def _first(params: Mapping[str, Any], key: str) -> Optional[str]:
    value = params.get(key)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    return str(value)


def _int(raw: Optional[str], default: int) -> int:
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


__all__ = [
    "ViewState",
    "Action",
    "SetSearch",
    "SetFilter",
    "ToggleSort",
    "SetPage",
    "SetPageSize",
    "apply",
]
