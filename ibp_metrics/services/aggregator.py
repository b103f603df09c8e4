# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Aggregation orchestrator — drives reconciliation passes.

A pass is reset -> fetch-or-cache -> reconcile -> populate. Passes hold the
orchestrator lock for their whole duration, and collect_* also render under
it, so a scrape never sees one pass's reset mixed with another's populate.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional

from ibp_metrics.core.config import settings
from ibp_metrics.core.exceptions import MemberNotFoundError
from ibp_metrics.core.logging import get_logger
from ibp_metrics.metrics.prometheus import MEMBERS_SKIPPED, REFRESH_DURATION, REFRESH_PASSES
from ibp_metrics.metrics.registry import MetricsRegistry
from ibp_metrics.models.domain import CachedMemberData, Member
from ibp_metrics.services.ibp_client import IBPClient
from ibp_metrics.services.member_cache import MemberCache
from ibp_metrics.services.reconciler import reconcile

logger = get_logger(__name__)


@dataclass
class RefreshSummary:
    reconciled: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


class MetricsAggregator:
    """Owns the metrics registry and coordinates cache, reconciler and resets."""

    def __init__(
        self,
        client: IBPClient,
        cache: MemberCache,
        registry: Optional[MetricsRegistry] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        self._client = client
        self._cache = cache
        self.registry = registry or MetricsRegistry()
        self._max_workers = max(1, max_workers or settings.REFRESH_MAX_WORKERS)
        self._lock = threading.RLock()

    # ── Passes ──

    def refresh_one(self, member_name: str) -> None:
        """Rebuild the series for a single member. Raises MemberNotFoundError."""
        with self._lock, REFRESH_DURATION.labels(scope="one").time():
            self.registry.reset_all()
            try:
                data = self._cache.get_or_fetch(member_name)
            except MemberNotFoundError:
                REFRESH_PASSES.labels(scope="one", result="not_found").inc()
                raise
            except Exception:
                REFRESH_PASSES.labels(scope="one", result="error").inc()
                raise
            self.registry.apply(reconcile(data))
            REFRESH_PASSES.labels(scope="one", result="ok").inc()

    def refresh_all(self) -> RefreshSummary:
        """
        Rebuild the series for every member in the upstream listing.
        A member whose data cannot be fetched is logged and left out;
        only a failing listing aborts the pass.
        """
        with self._lock, REFRESH_DURATION.labels(scope="all").time():
            self.registry.reset_all()
            try:
                members = self._client.list_members()
            except Exception:
                REFRESH_PASSES.labels(scope="all", result="error").inc()
                raise

            fetched = self._fetch_all(members)
            summary = RefreshSummary()
            done: set[str] = set()
            for member in members:
                if member.name in done:
                    continue
                done.add(member.name)
                data = fetched.get(member.name)
                if data is None:
                    summary.skipped.append(member.name)
                    continue
                self.registry.apply(reconcile(data))
                summary.reconciled.append(member.name)

            REFRESH_PASSES.labels(
                scope="all", result="partial" if summary.skipped else "ok"
            ).inc()
            logger.info(
                "All-members pass complete: reconciled=%d, skipped=%d",
                len(summary.reconciled), len(summary.skipped),
            )
            return summary

    # ── Exposition ──

    def render(self) -> str:
        with self._lock:
            return self.registry.render()

    def collect_one(self, member_name: str) -> str:
        with self._lock:
            self.refresh_one(member_name)
            return self.registry.render()

    def collect_all(self) -> str:
        with self._lock:
            self.refresh_all()
            return self.registry.render()

    # ── Internal ──

    def _fetch_all(self, members: list[Member]) -> dict[str, CachedMemberData]:
        """Fetch-or-cache every listed member on a bounded worker pool."""
        if not members:
            return {}
        unique: dict[str, Member] = {}
        for member in members:
            unique.setdefault(member.name, member)

        results: dict[str, CachedMemberData] = {}
        workers = min(self._max_workers, len(unique))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ibp-fetch") as pool:
            futures = {
                name: pool.submit(self._cache.get_or_fetch, name, member)
                for name, member in unique.items()
            }
            for name, future in futures.items():
                try:
                    results[name] = future.result()
                except Exception as exc:
                    MEMBERS_SKIPPED.inc()
                    logger.warning(
                        "Skipping member %s: %s", name, exc, extra={"member": name}
                    )
        return results
