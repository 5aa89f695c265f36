"""Exporter exception hierarchy."""


class ExporterError(Exception):
    """Base class for all exporter errors."""


class CommandError(ExporterError):
    """Asterisk CLI command could not be executed or exited non-zero."""


class CommandTimeout(CommandError, TimeoutError):
    """Asterisk CLI command exceeded its timeout."""


class ParseError(ExporterError, ValueError):
    """Command output did not match the expected format."""


class DataSourceUnavailable(ExporterError):
    """
    Domain data could not be obtained for this scrape.

    Raised by data sources regardless of the underlying cause (process
    failure, timeout, parse failure). Collectors turn it into a health
    metric instead of failing the scrape.
    """


class LabelArityError(ExporterError, ValueError):
    """Label values do not match the descriptor's label names."""


class DuplicateCollectorError(ExporterError, ValueError):
    """Collector name or metric name is already registered."""
