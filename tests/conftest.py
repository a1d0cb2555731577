import itertools

import pytest

from transaction_view.core.models import Transaction, TransactionStatus


@pytest.fixture
def make_tx():
    """Factory for transactions with unique hashes and sensible defaults."""
    counter = itertools.count(1)

    def _make(**overrides):
        n = next(counter)
        fields = {
            "hash": f"0x{n:064x}",
            "from_address": f"0x{'a' * 39}{n % 10}",
            "to_address": f"0x{'b' * 39}{n % 10}",
            "amount": "1.0",
            "status": TransactionStatus.CONFIRMED,
            "timestamp": "2024-03-10T12:00:00",
        }
        fields.update(overrides)
        if isinstance(fields["status"], str):
            fields["status"] = TransactionStatus(fields["status"])
        return Transaction(**fields)

    return _make
