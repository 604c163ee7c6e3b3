from __future__ import annotations

from datetime import datetime, timezone


class SystemClock:
    """Wall clock in UTC. Rate-limit windows and cache ages are derived from it."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
