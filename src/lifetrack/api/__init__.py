"""Remote service module for Lifetrack.

Provides the activity-monitoring API client, result cache, and the
dashboard data aggregator.
"""

from .aggregator import (
    AI_KEYS,
    STATUS_KEYS,
    DashboardAggregator,
    DataSource,
    ai_sources,
    dashboard_sources,
    settle_all,
)
from .cache import DEFAULT_TTL_SECONDS, ResultCache
from .client import ActivityApiClient
from .errors import (
    ApiConnectionError,
    ApiError,
    ApiTimeoutError,
    SourceFetchError,
    ValidationError,
)
from .snapshot import DashboardSnapshot, SourceFailure

__all__ = [
    "AI_KEYS",
    "DEFAULT_TTL_SECONDS",
    "STATUS_KEYS",
    "ActivityApiClient",
    "ApiConnectionError",
    "ApiError",
    "ApiTimeoutError",
    "DashboardAggregator",
    "DashboardSnapshot",
    "DataSource",
    "ResultCache",
    "SourceFailure",
    "SourceFetchError",
    "ValidationError",
    "ai_sources",
    "dashboard_sources",
    "settle_all",
]
