# transaction_view/errors.py


class TransactionViewError(Exception):
    """Base class for errors raised by transaction_view."""


class UpstreamFetchFailure(TransactionViewError):
    """The remote transaction API could not be reached or returned garbage."""

    def __init__(self, message, status=None):
        super().__init__(message)
        self.status = status


class ValidationError(TransactionViewError):
    """A create request failed validation.

    ``errors`` maps the offending field name to a human readable message.
    """

    def __init__(self, errors):
        self.errors = dict(errors)
        detail = "; ".join(f"{field}: {msg}" for field, msg in self.errors.items())
        super().__init__(f"Invalid transaction request ({detail})")
