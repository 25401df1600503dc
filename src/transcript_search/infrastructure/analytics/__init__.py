"""Analytics Infrastructure - one-way event emission."""

from .emitter import AnalyticsEmitter, AnalyticsEvent, LoggingAnalyticsSink

__all__ = ["AnalyticsEmitter", "AnalyticsEvent", "LoggingAnalyticsSink"]
