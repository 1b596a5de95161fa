"""Error kinds raised by the price source and sample store collaborators."""


class PricewatchError(Exception):
    """Base class for all pricewatch errors."""


class FetchError(PricewatchError):
    """A price could not be fetched or the response could not be parsed."""


class StoreError(PricewatchError):
    """The sample store failed to read or write."""
