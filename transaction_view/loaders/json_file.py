# transaction_view/loaders/json_file.py
import json
from transaction_view.core.models import transactions_from_dicts
from transaction_view.errors import UpstreamFetchFailure
from transaction_view.loaders.base import BaseLoader


class JSONFileLoader(BaseLoader):
    """
    Read transactions saved from the API, either as a bare list or wrapped
    in the ``{"success": ..., "data": [...]}`` envelope.
    """

    def load(self, path=None):
        if not path:
            raise UpstreamFetchFailure("A JSON file path is required")
        try:
            with open(path, encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise UpstreamFetchFailure(f"Could not read {path}: {e}") from e

        if isinstance(data, dict):
            data = data.get('data', [])
        if not isinstance(data, list):
            raise UpstreamFetchFailure(f"No transaction list found in {path}")
        return transactions_from_dicts(data, source=str(path))
