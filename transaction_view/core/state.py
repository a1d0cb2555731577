# transaction_view/core/state.py
"""Named intents and the pure reducer applying them to a ``ViewState``.

Any change to the filter criteria, the sort or the page size sends the
view back to page 1. ``SetPage`` is clamped into the valid range when the
caller supplies the filtered row count.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import FrozenSet, Iterable, Optional, Union

from transaction_view.core.models import (
    ITEMS_PER_PAGE_OPTIONS,
    SortDirection,
    SortField,
    TransactionStatus,
    ViewState,
)
from transaction_view.core.pagination import clamp_page, total_pages


@dataclass(frozen=True)
class SetStatuses:
    statuses: FrozenSet[TransactionStatus]

    def __init__(self, statuses: Iterable[Union[TransactionStatus, str]] = ()):
        object.__setattr__(
            self, "statuses", frozenset(TransactionStatus(s) for s in statuses)
        )


@dataclass(frozen=True)
class ToggleStatus:
    status: TransactionStatus


@dataclass(frozen=True)
class SetDateFrom:
    value: Optional[date]


@dataclass(frozen=True)
class SetDateTo:
    value: Optional[date]


@dataclass(frozen=True)
class SetSearch:
    query: str


@dataclass(frozen=True)
class SetSort:
    field: SortField


@dataclass(frozen=True)
class SetPage:
    page: int


@dataclass(frozen=True)
class SetItemsPerPage:
    items_per_page: int


@dataclass(frozen=True)
class ClearAllFilters:
    pass


Intent = Union[
    SetStatuses,
    ToggleStatus,
    SetDateFrom,
    SetDateTo,
    SetSearch,
    SetSort,
    SetPage,
    SetItemsPerPage,
    ClearAllFilters,
]


def _first_page(state: ViewState, **changes) -> ViewState:
    return replace(state, current_page=1, **changes)


def reduce(state: ViewState, intent: Intent, total_count: Optional[int] = None) -> ViewState:
    """Return the state that results from applying ``intent`` to ``state``.

    ``total_count`` is the number of rows surviving the current filters and
    is only needed to clamp ``SetPage``.
    """
    if isinstance(intent, SetStatuses):
        return _first_page(state, selected_statuses=intent.statuses)

    if isinstance(intent, ToggleStatus):
        status = TransactionStatus(intent.status)
        selected = set(state.selected_statuses)
        selected.symmetric_difference_update({status})
        return _first_page(state, selected_statuses=frozenset(selected))

    if isinstance(intent, SetDateFrom):
        return _first_page(state, date_from=intent.value)

    if isinstance(intent, SetDateTo):
        return _first_page(state, date_to=intent.value)

    if isinstance(intent, SetSearch):
        return _first_page(state, search_query=intent.query or "")

    if isinstance(intent, SetSort):
        field = SortField(intent.field)
        if field is state.sort_field:
            return _first_page(state, sort_direction=state.sort_direction.reversed())
        return _first_page(state, sort_field=field, sort_direction=SortDirection.DESC)

    if isinstance(intent, SetPage):
        page = int(intent.page)
        if total_count is not None:
            page = clamp_page(page, total_pages(total_count, state.items_per_page))
        return replace(state, current_page=max(1, page))

    if isinstance(intent, SetItemsPerPage):
        per_page = int(intent.items_per_page)
        if per_page not in ITEMS_PER_PAGE_OPTIONS:
            raise ValueError(
                f"items_per_page must be one of {ITEMS_PER_PAGE_OPTIONS}, got {per_page}"
            )
        return _first_page(state, items_per_page=per_page)

    if isinstance(intent, ClearAllFilters):
        return _first_page(
            state,
            selected_statuses=frozenset(),
            date_from=None,
            date_to=None,
            search_query="",
        )

    raise TypeError(f"Unknown intent: {intent!r}")


def clamp_state(state: ViewState, total_count: int) -> ViewState:
    """Pull ``current_page`` back into range for ``total_count`` rows."""
    page = clamp_page(state.current_page, total_pages(total_count, state.items_per_page))
    if page == state.current_page:
        return state
    return replace(state, current_page=page)
