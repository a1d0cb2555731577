# transaction_view/core/filters.py
from __future__ import annotations

from datetime import date, datetime, time
from typing import Callable, Iterable, List, Optional

from transaction_view.core.models import Transaction, ViewState

Predicate = Callable[[Transaction], bool]

END_OF_DAY = time(23, 59, 59, 999000)


def start_of_day(day: date) -> datetime:
    """Local midnight at the start of ``day``, timezone aware."""
    return datetime.combine(day, time.min).astimezone()


def end_of_day(day: date) -> datetime:
    """``day`` at 23:59:59.999 local time, timezone aware."""
    return datetime.combine(day, END_OF_DAY).astimezone()


def status_predicate(statuses) -> Predicate:
    selected = frozenset(statuses or ())
    if not selected:
        return lambda tx: True
    return lambda tx: tx.status in selected


def date_range_predicate(date_from: Optional[date], date_to: Optional[date]) -> Predicate:
    """Inclusive day range over the effective time.

    A transaction without a parseable time fails whenever a bound is set.
    """
    if date_from is None and date_to is None:
        return lambda tx: True
    lower = start_of_day(date_from) if date_from is not None else None
    upper = end_of_day(date_to) if date_to is not None else None

    def predicate(tx: Transaction) -> bool:
        when = tx.effective_time
        if when is None:
            return False
        if lower is not None and when < lower:
            return False
        if upper is not None and when > upper:
            return False
        return True

    return predicate


def search_predicate(query: Optional[str]) -> Predicate:
    needle = (query or "").lower()
    if not needle:
        return lambda tx: True
    return lambda tx: (
        needle in (tx.hash or "").lower()
        or needle in (tx.from_address or "").lower()
        or needle in (tx.to_address or "").lower()
    )


def build_predicate(state: ViewState) -> Predicate:
    """AND together the status, date range and search criteria of ``state``."""
    checks = (
        status_predicate(state.selected_statuses),
        date_range_predicate(state.date_from, state.date_to),
        search_predicate(state.search_query),
    )
    return lambda tx: all(check(tx) for check in checks)


def filter_transactions(transactions: Iterable[Transaction], state: ViewState) -> List[Transaction]:
    predicate = build_predicate(state)
    return [tx for tx in transactions if predicate(tx)]
