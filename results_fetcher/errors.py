"""Errors raised while fetching and aggregating test point results."""


class ResultsFetcherError(Exception):
    """Base class for all fatal errors of a fetch run."""


class ConfigurationError(ResultsFetcherError):
    """Raised when the settings file is missing, malformed or incomplete."""


class TransportError(ResultsFetcherError):
    """Raised when a page request fails, times out or returns a non-200 status."""


class ParseError(ResultsFetcherError):
    """Raised when a response body cannot be decoded into test points."""


class PageLimitExceededError(ResultsFetcherError):
    """Raised when a suite keeps returning continuation tokens past the page cap."""


class MissingDurationError(ResultsFetcherError):
    """Raised when a test point has no last run duration under the fail policy."""
