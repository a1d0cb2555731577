# transaction_view/controller.py
"""Page-level owner of the raw transactions and the view state.

Presentation code reads ``view()`` and calls the intent methods; it keeps
no state of its own. The view is recomputed synchronously from the
current snapshot on every call.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from transaction_view.core.filters import filter_transactions
from transaction_view.core.models import (
    SortField,
    Transaction,
    TransactionStatus,
    ViewState,
)
from transaction_view.core.pagination import Page, paginate
from transaction_view.core.sorting import sort_transactions
from transaction_view.core.state import (
    ClearAllFilters,
    Intent,
    SetDateFrom,
    SetDateTo,
    SetItemsPerPage,
    SetPage,
    SetSearch,
    SetSort,
    SetStatuses,
    ToggleStatus,
    clamp_state,
    reduce,
)
from transaction_view.debounce import DEFAULT_DELAY, SearchDebouncer
from transaction_view.errors import UpstreamFetchFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransactionView:
    """Everything the table and its pager render."""

    visible_rows: Tuple[Transaction, ...]
    total_count: int
    total_pages: int
    current_page: int
    page_window: Tuple[int, ...]
    summary: str
    has_previous: bool
    has_next: bool
    state: ViewState

    @classmethod
    def from_page(cls, page: Page, state: ViewState) -> "TransactionView":
        return cls(
            visible_rows=page.rows,
            total_count=page.total_count,
            total_pages=page.total_pages,
            current_page=page.current_page,
            page_window=page.page_window,
            summary=page.summary,
            has_previous=page.has_previous,
            has_next=page.has_next,
            state=state,
        )


def derive_view(transactions: Sequence[Transaction], state: ViewState) -> TransactionView:
    """Run filter, sort and paginate for one snapshot."""
    rows = sort_transactions(
        filter_transactions(transactions, state), state.sort_field, state.sort_direction
    )
    return TransactionView.from_page(
        paginate(rows, state.current_page, state.items_per_page), state
    )


class TransactionViewController:
    """Owns the raw collection and the view state.

    Intents may arrive from the debounce timer thread as well as the caller's
    thread; every read-modify-write of the state happens under ``_lock``.
    """

    def __init__(
        self,
        transactions: Iterable[Transaction] = (),
        state: Optional[ViewState] = None,
        source: Optional[Callable[[], List[Transaction]]] = None,
    ) -> None:
        self._lock = threading.RLock()
        self._transactions: Tuple[Transaction, ...] = tuple(transactions)
        state = state or ViewState()
        self._state = clamp_state(state, len(filter_transactions(self._transactions, state)))
        self._source = source
        self.error: Optional[str] = None
        self.loading = False

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return self._transactions

    @property
    def state(self) -> ViewState:
        return self._state

    def _snapshot(self) -> Tuple[Tuple[Transaction, ...], ViewState]:
        with self._lock:
            return self._transactions, self._state

    def filtered(self) -> List[Transaction]:
        """Filtered and sorted rows across every page."""
        transactions, state = self._snapshot()
        return sort_transactions(
            filter_transactions(transactions, state),
            state.sort_field,
            state.sort_direction,
        )

    def view(self) -> TransactionView:
        return derive_view(*self._snapshot())

    def dispatch(self, intent: Intent) -> ViewState:
        with self._lock:
            total = len(filter_transactions(self._transactions, self._state))
            self._state = reduce(self._state, intent, total_count=total)
            logger.debug("Applied %r -> %r", intent, self._state)
            return self._state

    # Intents

    def set_statuses(self, statuses: Iterable[TransactionStatus]) -> ViewState:
        return self.dispatch(SetStatuses(statuses))

    def toggle_status(self, status: TransactionStatus) -> ViewState:
        return self.dispatch(ToggleStatus(TransactionStatus(status)))

    def set_date_from(self, value: Optional[date]) -> ViewState:
        return self.dispatch(SetDateFrom(value))

    def set_date_to(self, value: Optional[date]) -> ViewState:
        return self.dispatch(SetDateTo(value))

    def set_search(self, query: str) -> ViewState:
        return self.dispatch(SetSearch(query))

    def set_sort(self, field: SortField) -> ViewState:
        return self.dispatch(SetSort(SortField(field)))

    def set_page(self, page: int) -> ViewState:
        return self.dispatch(SetPage(page))

    def next_page(self) -> ViewState:
        with self._lock:
            return self.set_page(self._state.current_page + 1)

    def previous_page(self) -> ViewState:
        with self._lock:
            return self.set_page(self._state.current_page - 1)

    def set_items_per_page(self, items_per_page: int) -> ViewState:
        return self.dispatch(SetItemsPerPage(items_per_page))

    def clear_all_filters(self) -> ViewState:
        return self.dispatch(ClearAllFilters())

    def search_debouncer(self, delay: float = DEFAULT_DELAY, **kwargs) -> SearchDebouncer:
        """A debouncer whose settled value feeds ``set_search``."""
        return SearchDebouncer(self.set_search, delay=delay, **kwargs)

    # Data

    def replace_transactions(self, transactions: Iterable[Transaction]) -> None:
        """Swap in a new snapshot of the raw collection.

        A change in size sends the view back to page 1; otherwise the current
        page is kept when it is still in range.
        """
        new = tuple(transactions)
        with self._lock:
            size_changed = len(new) != len(self._transactions)
            self._transactions = new
            if size_changed:
                self._state = reduce(self._state, SetPage(1))
            else:
                self._state = clamp_state(
                    self._state, len(filter_transactions(new, self._state))
                )

    def load(self, source: Optional[Callable[[], List[Transaction]]] = None) -> bool:
        """Fetch a fresh collection; failures are recorded, never raised.

        Returns ``True`` on success. On failure ``error`` holds the message
        and the previous collection is kept.
        """
        if source is not None:
            self._source = source
        if self._source is None:
            raise ValueError("No transaction source configured")
        self.loading = True
        self.error = None
        try:
            transactions = self._source()
        except UpstreamFetchFailure as exc:
            logger.error("Error loading transactions: %s", exc)
            self.error = str(exc) or "Failed to load transactions"
            return False
        finally:
            self.loading = False
        self.replace_transactions(transactions)
        return True

    def retry(self) -> bool:
        return self.load()

    def export(self, output, filename: Optional[str] = None):
        """Hand the filtered rows to ``output``; empty results write nothing."""
        rows = self.filtered()
        if not rows:
            logger.info("Nothing to export for the current filters")
            return None
        return output.append(rows, filename=filename)
