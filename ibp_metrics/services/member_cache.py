# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Member cache — per-member, time-boxed memoization of upstream data.

Each entry is replaced wholesale once older than the TTL. Entries age
independently, so an all-members pass never evicts a fresh single-member
entry and vice versa. Fills are serialized per member key through a fixed
set of striped locks, so unknown names never grow the lock table.
"""

import threading
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from ibp_metrics.core.config import DOWNTIME_LOOKBACK_DAYS, settings
from ibp_metrics.core.exceptions import MemberNotFoundError, UpstreamFetchError
from ibp_metrics.core.logging import get_logger
from ibp_metrics.metrics.prometheus import CACHE_DEGRADED_FILLS, CACHE_ENTRIES, CACHE_LOOKUPS
from ibp_metrics.models.domain import CachedMemberData, DowntimeEvent, Member, ServiceTierConfig
from ibp_metrics.services.ibp_client import IBPClient
from ibp_metrics.services.reconciler import get_required_services_by_level

logger = get_logger(__name__)

# Members sharing a stripe fill one after another; fills never nest.
LOCK_STRIPES = 32


def downtime_window(now: Optional[datetime] = None) -> tuple[str, str]:
    """Start and end dates (YYYY-MM-DD, UTC) of the trailing lookback window."""
    end = (now or datetime.now(timezone.utc)).date()
    start = end - timedelta(days=DOWNTIME_LOOKBACK_DAYS)
    return start.isoformat(), end.isoformat()


class MemberCache:
    """In-memory store of CachedMemberData keyed by member name."""

    def __init__(
        self,
        client: IBPClient,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self.ttl = settings.CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._entries: dict[str, CachedMemberData] = {}
        self._locks: tuple[threading.Lock, ...] = tuple(
            threading.Lock() for _ in range(LOCK_STRIPES)
        )
        self._guard = threading.Lock()

    # ── Read ──

    def get_or_fetch(
        self, member_name: str, member: Optional[Member] = None
    ) -> CachedMemberData:
        """
        Return the cached data for a member, refilling it once expired.

        ``member`` may carry a record already obtained from the upstream
        listing; it is only used when a refill is needed.
        Raises MemberNotFoundError if the upstream has no such member and
        UpstreamFetchError if the member record itself cannot be fetched.
        """
        with self._lock_for(member_name):
            entry = self._entries.get(member_name)
            if entry is not None and self._clock() - entry.fetched_at < self.ttl:
                CACHE_LOOKUPS.labels(result="hit").inc()
                return entry

            CACHE_LOOKUPS.labels(result="miss" if entry is None else "expired").inc()
            entry = self._fill(member_name, member)
            with self._guard:
                self._entries[member_name] = entry
                CACHE_ENTRIES.set(len(self._entries))
            return entry

    def size(self) -> int:
        with self._guard:
            return len(self._entries)

    # ── Write ──

    def invalidate(self, member_name: str) -> bool:
        """Drop one member's entry. Returns True if something was cached."""
        with self._guard:
            removed = self._entries.pop(member_name, None) is not None
            CACHE_ENTRIES.set(len(self._entries))
        return removed

    def clear(self) -> int:
        with self._guard:
            count = len(self._entries)
            self._entries.clear()
            CACHE_ENTRIES.set(0)
        return count

    # ── Internal ──

    def _lock_for(self, member_name: str) -> threading.Lock:
        return self._locks[hash(member_name) % LOCK_STRIPES]

    def _fill(self, member_name: str, member: Optional[Member]) -> CachedMemberData:
        if member is None:
            member = self._client.get_member(member_name)
        if member is None:
            raise MemberNotFoundError(member_name)

        events = self._fetch_events(member_name)
        services_config = self._fetch_services_config(member_name)
        required = get_required_services_by_level(member.level, services_config)

        logger.info(
            "Cache filled: member=%s, events=%d, required_services=%d",
            member_name, len(events), len(required),
        )
        return CachedMemberData(
            member=member,
            downtime_events=tuple(events),
            required_services=required,
            services_config=services_config,
            fetched_at=self._clock(),
        )

    def _fetch_events(self, member_name: str) -> list[DowntimeEvent]:
        start, end = downtime_window()
        try:
            return self._client.get_downtime_events(member_name, start, end)
        except UpstreamFetchError as exc:
            CACHE_DEGRADED_FILLS.labels(part="downtime_events").inc()
            logger.warning(
                "Downtime events unavailable for %s, assuming none: %s",
                member_name, exc,
            )
            return []

    def _fetch_services_config(self, member_name: str) -> ServiceTierConfig:
        try:
            return self._client.get_service_tier_config()
        except UpstreamFetchError as exc:
            CACHE_DEGRADED_FILLS.labels(part="services_config").inc()
            logger.warning(
                "Service tier config unavailable for %s, no required services: %s",
                member_name, exc,
            )
            return {}
