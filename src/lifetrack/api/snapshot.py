"""Immutable merged view of all dashboard data sources."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class SourceFailure:
    """Isolated failure marker for one data source.

    Attributes:
        source: Logical source name
        reason: Human-readable failure reason
        status_code: HTTP status code if the service answered
    """

    source: str
    reason: str
    status_code: int | None = None

    def to_dict(self) -> dict[str, str]:
        return {"error": self.reason}


class DashboardSnapshot(Mapping[str, Any]):
    """Read-only mapping of source name to payload or SourceFailure.

    A snapshot is built once per refresh and never modified afterwards.
    """

    def __init__(
        self, entries: Mapping[str, Any], created_at: datetime | None = None
    ) -> None:
        self._entries = MappingProxyType(dict(entries))
        self._created_at = created_at or datetime.now(UTC)

    def __getitem__(self, key: str) -> Any:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"DashboardSnapshot(ok={len(self.succeeded)}, failed={len(self.failures)})"

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def failures(self) -> dict[str, SourceFailure]:
        """Sources that failed, keyed by name."""
        return {k: v for k, v in self._entries.items() if isinstance(v, SourceFailure)}

    @property
    def succeeded(self) -> list[str]:
        """Names of sources fetched successfully."""
        return [k for k, v in self._entries.items() if not isinstance(v, SourceFailure)]

    def is_failure(self, key: str) -> bool:
        return isinstance(self._entries.get(key), SourceFailure)

    def to_dict(self) -> dict[str, Any]:
        """Plain dict with failures rendered as ``{"error": reason}``."""
        return {
            k: v.to_dict() if isinstance(v, SourceFailure) else v
            for k, v in self._entries.items()
        }


__all__ = ["DashboardSnapshot", "SourceFailure"]
