"""Error taxonomy for costbook.

Every failure the core reports to a collaborator is a CostbookError subclass.
Lower-level exceptions are chained as the cause.
"""


class CostbookError(Exception):
    """Base class for all costbook errors."""


class StorageUnavailable(CostbookError):
    """The ledger database could not be opened."""


class NotOpen(CostbookError):
    """A ledger operation was attempted before the store was opened."""


class InvalidInput(CostbookError):
    """A cost entry was rejected before any write."""


class RatesError(CostbookError):
    """Base class for rate table retrieval failures."""


class RatesFetchFailed(RatesError):
    """The rate endpoint could not be retrieved."""


class RatesParseFailed(RatesError):
    """The rate endpoint returned something other than a flat rate mapping."""


class UnsupportedCurrency(CostbookError):
    """A currency is missing from the rate table."""

    def __init__(self, currency: str) -> None:
        super().__init__(f"Unsupported currency in rates response: {currency}")
        self.currency = currency


class ConfigError(CostbookError):
    """The config file exists but could not be parsed."""
