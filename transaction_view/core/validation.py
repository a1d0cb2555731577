# transaction_view/core/validation.py
"""Field checks for new transaction requests.

Each ``get_*_error`` returns a message describing the first problem found,
or ``None`` when the value is acceptable.
"""

from __future__ import annotations

import math
import re
from typing import Dict, Mapping, Optional

_HEX_ADDRESS = re.compile(r"^0x[a-fA-F0-9]{40}$")
ADDRESS_LENGTH = 42


def get_ethereum_address_error(address) -> Optional[str]:
    if not address or not isinstance(address, str):
        return "Address is required"
    trimmed = address.strip()
    if not trimmed:
        return "Address is required"
    if not trimmed.startswith("0x"):
        return "Address must start with 0x"
    if len(trimmed) < ADDRESS_LENGTH:
        return "Address is too short. Must be 42 characters (0x + 40 hex characters)"
    if len(trimmed) > ADDRESS_LENGTH:
        return "Address is too long. Must be 42 characters (0x + 40 hex characters)"
    if not _HEX_ADDRESS.match(trimmed):
        return "Address contains invalid characters. Must be hexadecimal (0-9, a-f, A-F)"
    return None


def _positive(value) -> bool:
    try:
        num = float(value)
    except (TypeError, ValueError):
        return False
    return not math.isnan(num) and num > 0


def get_amount_error(value) -> Optional[str]:
    if value is None or str(value).strip() == "":
        return "Amount is required"
    if not _positive(value):
        return "Amount must be a positive number"
    return None


def get_optional_positive_error(value, label: str) -> Optional[str]:
    if value is None or str(value).strip() == "":
        return None
    if not _positive(value):
        return f"{label} must be a positive number"
    return None


def validate_create_request(request: Mapping) -> Dict[str, str]:
    """Return ``{field: message}`` for every invalid field of ``request``."""
    checks = {
        "toAddress": get_ethereum_address_error(request.get("toAddress")),
        "amount": get_amount_error(request.get("amount")),
        "gasLimit": get_optional_positive_error(request.get("gasLimit"), "Gas limit"),
        "gasPrice": get_optional_positive_error(request.get("gasPrice"), "Gas price"),
    }
    return {field: msg for field, msg in checks.items() if msg}
