# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection — wire the upstream client, cache and aggregator.
"""

from ibp_metrics.metrics.registry import MetricsRegistry
from ibp_metrics.services.aggregator import MetricsAggregator
from ibp_metrics.services.ibp_client import IBPClient
from ibp_metrics.services.member_cache import MemberCache

# ── Singleton instances ──
_ibp_client = IBPClient()
_member_cache = MemberCache(client=_ibp_client)
_metrics_registry = MetricsRegistry()

_aggregator = MetricsAggregator(
    client=_ibp_client,
    cache=_member_cache,
    registry=_metrics_registry,
)


# ── FastAPI dependency functions ──
def get_aggregator() -> MetricsAggregator:
    return _aggregator


def get_member_cache() -> MemberCache:
    return _member_cache


def get_ibp_client() -> IBPClient:
    return _ibp_client
