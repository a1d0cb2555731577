# transaction_view/loaders/api.py
from transaction_view.api import api_from_config
from transaction_view.loaders.base import BaseLoader


class APILoader(BaseLoader):
    """Fetch every transaction from the remote API; ``path`` is ignored."""

    def __init__(self, config=None):
        super().__init__(config)
        self.client = api_from_config(self.config)

    def load(self, path=None):
        return self.client.fetch_all_transactions()
