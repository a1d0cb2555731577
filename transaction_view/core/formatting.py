# transaction_view/core/formatting.py
"""Display helpers for raw transaction fields.

Values that cannot be parsed degrade to a sentinel (``0`` for numbers,
``"N/A"`` for dates) instead of raising.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Optional, Union

NOT_AVAILABLE = "N/A"
DEFAULT_SYMBOL = "ETH"
DEFAULT_EXPLORER_URL = "https://etherscan.io/tx/"

TimeValue = Union[str, datetime, None]


def parse_timestamp(value: TimeValue) -> Optional[datetime]:
    """Parse an ISO-8601 string into a timezone aware datetime.

    Naive values are interpreted as local time. Returns ``None`` when the
    value is missing or unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    try:
        return parsed.astimezone()
    except (OverflowError, OSError, ValueError):
        return None


def to_epoch_millis(value: TimeValue) -> float:
    """Epoch milliseconds for ``value``; unknown times count as epoch 0."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return 0.0
    return parsed.timestamp() * 1000


def parse_amount(value) -> float:
    """Parse a decimal amount, falling back to 0.0."""
    if value is None:
        return 0.0
    try:
        num = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(num):
        return 0.0
    return num


def _parse_float(value) -> Optional[float]:
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(num) else num


def format_amount(amount, symbol: str = DEFAULT_SYMBOL) -> str:
    """Format an amount with grouping and 2 to 6 decimal places."""
    num = _parse_float(amount)
    if num is None:
        return f"0 {symbol}"
    text = f"{num:,.6f}"
    whole, _, fraction = text.partition(".")
    fraction = fraction.rstrip("0").ljust(2, "0")
    return f"{whole}.{fraction} {symbol}"


def truncate_address(address: Optional[str]) -> Optional[str]:
    """Shorten a hex address or hash to ``0x1234...abcd``."""
    if not address or len(address) < 10:
        return address
    return f"{address[:6]}...{address[-4:]}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count > 1 else ''} ago"


def format_timestamp(value: TimeValue, now: Optional[datetime] = None) -> str:
    """Relative time under a week ("5 minutes ago"), else a short date."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return NOT_AVAILABLE
    now = parse_timestamp(now) if now is not None else datetime.now().astimezone()

    diff_seconds = (now - parsed).total_seconds()
    diff_mins = math.floor(diff_seconds / 60)
    diff_hours = math.floor(diff_seconds / 3600)
    diff_days = math.floor(diff_seconds / 86400)

    if diff_mins < 1:
        return "Just now"
    if diff_mins < 60:
        return _plural(diff_mins, "minute")
    if diff_hours < 24:
        return _plural(diff_hours, "hour")
    if diff_days < 7:
        return _plural(diff_days, "day")

    label = f"{parsed:%b} {parsed.day}"
    if parsed.year != now.year:
        label += f", {parsed.year}"
    return label


def format_full_date(value: TimeValue) -> str:
    """Full date and time, e.g. ``Jan 5, 2024, 02:30 PM``."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return NOT_AVAILABLE
    return f"{parsed:%b} {parsed.day}, {parsed.year}, {parsed:%I:%M %p}"


def calculate_fee(gas_limit, gas_price, symbol: str = DEFAULT_SYMBOL) -> str:
    """Formatted ``gas_limit * gas_price`` or ``0 <symbol>``."""
    if not gas_limit or not gas_price:
        return f"0 {symbol}"
    limit = _parse_float(gas_limit)
    price = _parse_float(gas_price)
    if limit is None or price is None:
        return f"0 {symbol}"
    return format_amount(limit * price, symbol)


def capitalize_status(status) -> str:
    text = getattr(status, "value", status) or ""
    return text[:1].upper() + text[1:]


def explorer_url(tx_hash: str, base_url: str = DEFAULT_EXPLORER_URL) -> str:
    """Link to the transaction on a block explorer."""
    if not base_url.endswith("/"):
        base_url += "/"
    return f"{base_url}{tx_hash}"
