# transaction_view/loaders/base.py
from abc import ABC, abstractmethod

class BaseLoader(ABC):
    def __init__(self, config=None):
        self.config = config or {}

    @abstractmethod
    def load(self, path=None):
        """
        Return the full list of Transaction instances from this source.
        Raise UpstreamFetchFailure when the source cannot be read.
        """
        pass
