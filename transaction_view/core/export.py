# transaction_view/core/export.py
from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Tuple

from transaction_view.core.formatting import (
    NOT_AVAILABLE,
    capitalize_status,
    format_full_date,
    parse_amount,
)
from transaction_view.core.models import Transaction

SHEET_NAME = "Transactions"

# (header, column width in characters)
EXPORT_COLUMNS: Tuple[Tuple[str, int], ...] = (
    ("Transaction Hash", 20),
    ("From Address", 42),
    ("To Address", 42),
    ("Amount (ETH)", 15),
    ("Status", 12),
    ("Gas Limit", 12),
    ("Gas Price (ETH)", 18),
    ("Transaction Fee (ETH)", 18),
    ("Timestamp", 20),
    ("Date", 25),
)

EXPORT_HEADERS = [header for header, _ in EXPORT_COLUMNS]


def _fee(tx: Transaction) -> str:
    if not tx.gas_limit or not tx.gas_price:
        return "0"
    try:
        fee = float(tx.gas_limit) * float(tx.gas_price)
    except ValueError:
        return "0"
    if fee != fee:
        return "0"
    return f"{fee:.8f}"


def export_row(tx: Transaction) -> List[str]:
    return [
        tx.hash,
        tx.from_address,
        tx.to_address,
        f"{parse_amount(tx.amount):.6f}",
        capitalize_status(tx.status),
        tx.gas_limit or NOT_AVAILABLE,
        tx.gas_price or NOT_AVAILABLE,
        _fee(tx),
        format_full_date(tx.effective_time_raw),
        tx.effective_time_raw or NOT_AVAILABLE,
    ]


def build_export_rows(transactions: Iterable[Transaction]) -> List[List[str]]:
    return [export_row(tx) for tx in transactions]


def default_export_filename(today: Optional[date] = None, extension: str = "xlsx") -> str:
    today = today or date.today()
    return f"transactions-{today.isoformat()}.{extension}"
