# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
IBP status series — member gauge, service gauge, downtime-event counter.

Each MetricsRegistry owns a private CollectorRegistry so the exposition
served to scrapers contains only IBP series, never process metrics.
"""

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Gauge, generate_latest

from ibp_metrics.services.reconciler import Reconciliation

CONTENT_TYPE = CONTENT_TYPE_LATEST

MEMBER_LABELS = ["member", "region", "level"]
SERVICE_LABELS = ["member", "service", "domain", "check_type", "check_name", "level"]
EVENT_LABELS = ["member", "service", "domain", "check_type", "check_name", "status"]


class MetricsRegistry:
    """The three exported IBP series, reset and repopulated on every pass."""

    def __init__(self) -> None:
        self.registry = CollectorRegistry(auto_describe=True)
        self.member_status = Gauge(
            "ibp_member_status",
            "IBP member status (1 = active/up, 0 = inactive/down)",
            MEMBER_LABELS,
            registry=self.registry,
        )
        self.service_status = Gauge(
            "ibp_service_status",
            "IBP service status (1 = up, 0 = down)",
            SERVICE_LABELS,
            registry=self.registry,
        )
        self.downtime_events = Counter(
            "ibp_downtime_events",
            "Total number of downtime events",
            EVENT_LABELS,
            registry=self.registry,
        )

    def reset_all(self) -> None:
        """Forget every label combination so no ghost series survive a pass."""
        self.member_status.clear()
        self.service_status.clear()
        self.downtime_events.clear()

    def apply(self, reconciliation: Reconciliation) -> None:
        for m in reconciliation.member_statuses:
            self.member_status.labels(
                member=m.member, region=m.region, level=m.level
            ).set(m.value)
        for s in reconciliation.service_statuses:
            self.service_status.labels(
                member=s.member,
                service=s.service,
                domain=s.domain,
                check_type=s.check_type,
                check_name=s.check_name,
                level=s.level,
            ).set(s.value)
        for e in reconciliation.event_increments:
            self.downtime_events.labels(
                member=e.member,
                service=e.service,
                domain=e.domain,
                check_type=e.check_type,
                check_name=e.check_name,
                status=e.status,
            ).inc()

    def render(self) -> str:
        return generate_latest(self.registry).decode("utf-8")
