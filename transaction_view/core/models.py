# transaction_view/core/models.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from transaction_view.core.formatting import parse_timestamp

logger = logging.getLogger(__name__)


class TransactionStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


class SortField(str, Enum):
    TIMESTAMP = "timestamp"
    AMOUNT = "amount"
    STATUS = "status"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def reversed(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


ITEMS_PER_PAGE_OPTIONS = (10, 15, 20)
DEFAULT_ITEMS_PER_PAGE = 15


@dataclass(frozen=True)
class Transaction:
    hash: str
    from_address: str
    to_address: str
    amount: str
    status: TransactionStatus
    id: Optional[str] = None
    gas_limit: Optional[str] = None
    gas_price: Optional[str] = None
    timestamp: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def effective_time_raw(self) -> Optional[str]:
        """The raw ``timestamp`` value, or ``created_at`` when it is empty."""
        return self.timestamp or self.created_at

    @property
    def effective_time(self) -> Optional[datetime]:
        return parse_timestamp(self.effective_time_raw)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        """Build a transaction from the API's camelCase payload."""
        tx_id = data.get("id") or data.get("_id")
        return cls(
            hash=str(data.get("hash") or ""),
            from_address=str(data.get("fromAddress") or ""),
            to_address=str(data.get("toAddress") or ""),
            amount=_optional_str(data.get("amount")) or "0",
            status=TransactionStatus(str(data["status"]).lower()),
            id=_optional_str(tx_id),
            gas_limit=_optional_str(data.get("gasLimit")),
            gas_price=_optional_str(data.get("gasPrice")),
            timestamp=_optional_str(data.get("timestamp")),
            created_at=_optional_str(data.get("createdAt")),
            updated_at=_optional_str(data.get("updatedAt")),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            "id": self.id,
            "hash": self.hash,
            "fromAddress": self.from_address,
            "toAddress": self.to_address,
            "amount": self.amount,
            "status": self.status.value,
            "gasLimit": self.gas_limit,
            "gasPrice": self.gas_price,
            "timestamp": self.timestamp,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        return {key: value for key, value in payload.items() if value is not None}


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def transactions_from_dicts(items: Iterable[Any], source: str = "payload") -> List[Transaction]:
    """Build transactions from payload records, skipping malformed ones.

    A record that is not a mapping or carries a missing or unknown status is
    logged and dropped; the remaining records are kept.
    """
    transactions = []
    for index, item in enumerate(items):
        try:
            transactions.append(Transaction.from_dict(item))
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed transaction #%d in %s: %s", index, source, exc)
    return transactions


@dataclass(frozen=True)
class ViewState:
    """Everything the user controls about which rows are shown and how."""

    selected_statuses: FrozenSet[TransactionStatus] = field(default_factory=frozenset)
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    search_query: str = ""
    sort_field: SortField = SortField.TIMESTAMP
    sort_direction: SortDirection = SortDirection.DESC
    current_page: int = 1
    items_per_page: int = DEFAULT_ITEMS_PER_PAGE

    @property
    def has_active_filters(self) -> bool:
        return bool(
            self.selected_statuses
            or self.date_from is not None
            or self.date_to is not None
            or self.search_query
        )
