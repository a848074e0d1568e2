from __future__ import annotations


class ReliabilityError(RuntimeError):
    """Base class for every fatal condition raised by sentry_metrics."""


class ConfigError(ReliabilityError):
    pass


class SentryApiError(ReliabilityError):
    pass


class MalformedResponseError(SentryApiError):
    pass


class PaginationError(SentryApiError):
    pass


class MetricUndefinedError(ReliabilityError):
    pass


class NoRepairsError(MetricUndefinedError):
    pass


class InsufficientEventsError(MetricUndefinedError):
    pass


class ReportWriteError(ReliabilityError):
    pass
