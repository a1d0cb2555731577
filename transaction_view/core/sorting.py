# transaction_view/core/sorting.py
from __future__ import annotations

from typing import Callable, Dict, Iterable, List

from transaction_view.core.formatting import parse_amount, to_epoch_millis
from transaction_view.core.models import SortDirection, SortField, Transaction


def _timestamp_key(tx: Transaction) -> float:
    return to_epoch_millis(tx.effective_time_raw)


def _amount_key(tx: Transaction) -> float:
    return parse_amount(tx.amount)


def _status_key(tx: Transaction) -> str:
    # Plain string order of the status literal, not a severity rank.
    return tx.status.value


SORT_KEYS: Dict[SortField, Callable[[Transaction], object]] = {
    SortField.TIMESTAMP: _timestamp_key,
    SortField.AMOUNT: _amount_key,
    SortField.STATUS: _status_key,
}


def sort_key(field: SortField) -> Callable[[Transaction], object]:
    return SORT_KEYS[SortField(field)]


def make_comparator(
    field: SortField, direction: SortDirection
) -> Callable[[Transaction, Transaction], int]:
    """Return a ``cmp(a, b)`` ordering transactions by ``field``."""
    key = sort_key(field)
    sign = 1 if SortDirection(direction) is SortDirection.ASC else -1

    def compare(a: Transaction, b: Transaction) -> int:
        left, right = key(a), key(b)
        if left < right:
            return -sign
        if left > right:
            return sign
        return 0

    return compare


def sort_transactions(
    transactions: Iterable[Transaction],
    field: SortField = SortField.TIMESTAMP,
    direction: SortDirection = SortDirection.DESC,
) -> List[Transaction]:
    """Stable sort; equal keys keep their input order in either direction."""
    return sorted(
        transactions,
        key=sort_key(field),
        reverse=SortDirection(direction) is SortDirection.DESC,
    )
