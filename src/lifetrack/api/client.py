"""Async HTTP client for the remote activity-monitoring service.

Thin wrappers over the service's read and write endpoints. Transport
failures are converted into ApiError subclasses so callers never deal
with httpx exceptions directly.
"""

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import httpx

from .errors import ApiConnectionError, ApiError, ApiTimeoutError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 10.0  # seconds
DATE_RANGE_SESSION_LIMIT = 100


def _parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp, returning None when malformed."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def _unwrap(payload: Any, key: str | None = None) -> Any:
    """Unwrap the ``{"data": ...}`` envelope used by the AI endpoints."""
    if isinstance(payload, Mapping) and "data" in payload:
        payload = payload["data"]
    if key is not None and isinstance(payload, Mapping):
        return payload.get(key)
    return payload


class ActivityApiClient:
    """Client for the activity-monitoring REST API.

    Use as an async context manager, or call aclose() when done.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize API client.

        Args:
            base_url: Root URL of the monitoring service
            timeout_seconds: Per-request timeout
            transport: Optional transport override (used by tests)
        """
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout_seconds,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )
        logger.debug(f"Activity API client created for {self._base_url}")

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def __aenter__(self) -> "ActivityApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """Send a request and decode the JSON response.

        Raises:
            ApiTimeoutError: If the request timed out
            ApiConnectionError: If the service could not be reached
            ApiError: For non-success responses or undecodable bodies
        """
        try:
            response = await self._client.request(method, path, params=params, json=json)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {path} timed out: {e}")
            raise ApiTimeoutError(f"{method} {path} timed out") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning(f"{method} {path} failed with HTTP {status}")
            raise ApiError(f"HTTP error {status} from {path}", status_code=status) from e
        except httpx.TransportError as e:
            logger.warning(f"{method} {path} connection error: {e}")
            raise ApiConnectionError(f"Cannot reach {self._base_url}: {e}") from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"Invalid JSON from {path}", status_code=response.status_code) from e

    # Reads

    async def get_health(self) -> Any:
        return await self._request("GET", "/api/health")

    async def get_system_status(self) -> Any:
        return await self._request("GET", "/api/status")

    async def get_monitor_status(self) -> Any:
        return await self._request("GET", "/api/monitor/status")

    async def get_current_session(self) -> Any:
        return await self._request("GET", "/api/current-session")

    async def get_today_summary(self) -> Any:
        return await self._request("GET", "/api/today-summary")

    async def get_time_of_day_analysis(self) -> Any:
        return await self._request("GET", "/api/time-of-day-analysis")

    async def get_recent_sessions(self, limit: int = 20) -> Any:
        return await self._request("GET", "/api/recent-sessions", params={"limit": limit})

    async def get_categories(self) -> Any:
        return await self._request("GET", "/api/categories")

    async def get_category_stats(self) -> Any:
        return await self._request("GET", "/api/categories/stats")

    async def get_database_health(self) -> Any:
        return await self._request("GET", "/api/database/health")

    async def get_database_stats(self) -> Any:
        return await self._request("GET", "/api/database/stats")

    async def get_today_monitor_sessions(self) -> Any:
        return await self._request("GET", "/api/monitor/sessions/today")

    async def get_productivity_stats(
        self,
        period: str = "today",
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> Any:
        """Get productivity statistics for a named period or custom range."""
        params: dict[str, Any] = {"period": period}
        if start is not None and end is not None:
            params["startDate"] = start.isoformat()
            params["endDate"] = end.isoformat()
        return await self._request("GET", "/api/productivity-stats", params=params)

    async def get_ai_status(self) -> Any:
        return _unwrap(await self._request("GET", "/api/ai/status"))

    async def get_ai_insights(self) -> list[Any]:
        insights = _unwrap(await self._request("GET", "/api/ai/insights"), "insights")
        return insights or []

    async def get_sessions_by_date_range(
        self, start: datetime | str, end: datetime | str
    ) -> list[dict[str, Any]]:
        """Get recent sessions whose start time lies within [start, end].

        The service has no range endpoint, so the most recent sessions
        are fetched and filtered locally. Entries that are not objects, or
        that have a missing or unparseable ``startTime``, are dropped.

        Raises:
            ValidationError: If either bound is not a valid timestamp
        """
        range_start = _parse_timestamp(start)
        range_end = _parse_timestamp(end)
        if range_start is None or range_end is None:
            raise ValidationError(f"Invalid date range: {start!r} to {end!r}")

        recent = await self.get_recent_sessions(DATE_RANGE_SESSION_LIMIT)
        sessions = recent.get("sessions") if isinstance(recent, Mapping) else None
        if not isinstance(sessions, list):
            sessions = []

        matched = []
        for session in sessions:
            if not isinstance(session, Mapping):
                logger.debug(f"Skipping malformed session entry: {session!r}")
                continue
            started = _parse_timestamp(session.get("startTime"))
            if started is None:
                logger.debug(f"Skipping session without valid startTime: {session.get('id')}")
                continue
            if range_start <= started <= range_end:
                matched.append(session)
        return matched

    # Writes

    async def start_monitor(self) -> Any:
        return await self._request("POST", "/api/monitor/start")

    async def stop_monitor(self) -> Any:
        return await self._request("POST", "/api/monitor/stop")

    async def update_monitor_config(self, **settings: Any) -> Any:
        return await self._request("PUT", "/api/monitor/config", json=settings)

    async def provide_category_feedback(
        self,
        app_name: str,
        expected_category: str,
        is_correct: bool,
        window_title: str | None = None,
    ) -> Any:
        """Tell the categorizer whether it labelled an application correctly."""
        return await self._request(
            "POST",
            "/api/categories/feedback",
            json={
                "appName": app_name,
                "windowTitle": window_title,
                "expectedCategory": expected_category,
                "isCorrect": is_correct,
            },
        )

    async def retrain_models(self) -> None:
        await self._request("POST", "/api/ai/retrain")

    async def export_ai_data(self) -> Any:
        return _unwrap(await self._request("POST", "/api/ai/export"))

    async def import_ai_data(self, data: Any) -> None:
        await self._request("POST", "/api/ai/import", json={"aiData": data})

    async def export_category_rules(self) -> Any:
        return await self._request("POST", "/api/categories/export", json={})

    async def import_category_rules(self, data: str) -> Any:
        return await self._request("POST", "/api/categories/import", json={"data": data})

    async def learn_from_session(self, session: Mapping[str, Any]) -> None:
        await self._request("POST", "/api/ai/learn-session", json=dict(session))


__all__ = ["ActivityApiClient", "DEFAULT_BASE_URL", "DEFAULT_TIMEOUT"]
