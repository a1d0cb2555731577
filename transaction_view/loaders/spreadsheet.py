# transaction_view/loaders/spreadsheet.py
import logging

import pandas as pd
from transaction_view.core.formatting import NOT_AVAILABLE
from transaction_view.core.models import Transaction, TransactionStatus
from transaction_view.errors import UpstreamFetchFailure
from transaction_view.loaders.base import BaseLoader

logger = logging.getLogger(__name__)


def _clean(value):
    if value is None or pd.isna(value):
        return None
    text = str(value).strip()
    if not text or text == NOT_AVAILABLE:
        return None
    return text


class SpreadsheetLoader(BaseLoader):
    """Re-import a previously exported ``.xlsx`` or ``.csv`` file."""

    def load(self, path=None):
        if not path:
            raise UpstreamFetchFailure("A spreadsheet path is required")

        # 1. Read every cell as text so amounts keep their decimals
        try:
            if str(path).lower().endswith('.csv'):
                df = pd.read_csv(path, dtype=str)
            else:
                df = pd.read_excel(path, dtype=str, engine='openpyxl')
        except (OSError, ValueError) as e:
            raise UpstreamFetchFailure(f"Could not read {path}: {e}") from e

        # 2. Column lookup
        cols = {str(c).lower(): c for c in df.columns}
        def find(frag):
            frag = frag.lower()
            if frag in cols:
                return cols[frag]
            return next((orig for low, orig in cols.items() if low.startswith(frag)), None)

        hash_col   = find('transaction hash')
        from_col   = find('from address')
        to_col     = find('to address')
        amt_col    = find('amount')
        status_col = find('status')
        limit_col  = find('gas limit')
        price_col  = find('gas price')
        date_col   = find('date')

        for name, col in (('Transaction Hash', hash_col), ('Amount', amt_col), ('Status', status_col)):
            if col is None:
                raise UpstreamFetchFailure(f"Missing required column '{name}' in {path}")

        def cell(row, col):
            return _clean(row[col]) if col is not None else None

        # 3. Build transactions, skipping rows without a hash or a known status
        txs = []
        for _, row in df.iterrows():
            tx_hash = cell(row, hash_col)
            if not tx_hash:
                continue
            status_raw = (cell(row, status_col) or '').lower()
            try:
                status = TransactionStatus(status_raw)
            except ValueError:
                logger.warning("Skipping %s in %s: unknown status '%s'", tx_hash, path, status_raw)
                continue
            txs.append(Transaction(
                hash=tx_hash,
                from_address=cell(row, from_col) or '',
                to_address=cell(row, to_col) or '',
                amount=cell(row, amt_col) or '0',
                status=status,
                gas_limit=cell(row, limit_col),
                gas_price=cell(row, price_col),
                timestamp=cell(row, date_col),
            ))
        return txs
