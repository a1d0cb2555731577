# transaction_view/outputs/base.py
from abc import ABC, abstractmethod

class BaseOutput(ABC):
    @abstractmethod
    def append(self, transactions, filename=None):
        """Write transactions to the sink and return where they went."""
        pass
