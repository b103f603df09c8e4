# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Status reconciliation — pure functions, no I/O, no metric objects.

Turns one member's cached data into the label/value assignments for the
member gauge, the service gauge and the downtime-event counter.

Precedence per member:
    1. member gauge from ``active``
    2. one service entry per downtime event (ONGOING_STATUS -> 0, otherwise 1)
    3. required services without events -> 1, check ``required/no-stats``
    4. remaining declared services of an active member -> 1, ``default/default``
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from ibp_metrics.models.domain import CachedMemberData, ServiceGroup

DEFAULT_DOMAIN_SUFFIX = "ibp.network"

# Any other event status means the incident is resolved.
ONGOING_STATUS = "ongoing"

REQUIRED_CHECK = ("required", "no-stats")
DEFAULT_CHECK = ("default", "default")

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class MemberStatus:
    member: str
    region: str
    level: str
    value: int


@dataclass(frozen=True)
class ServiceStatus:
    member: str
    service: str
    domain: str
    check_type: str
    check_name: str
    level: str
    value: int


@dataclass(frozen=True)
class EventIncrement:
    member: str
    service: str
    domain: str
    check_type: str
    check_name: str
    status: str


@dataclass
class Reconciliation:
    """Assignments for one member, in the order they must be applied."""

    member_statuses: list[MemberStatus] = field(default_factory=list)
    service_statuses: list[ServiceStatus] = field(default_factory=list)
    event_increments: list[EventIncrement] = field(default_factory=list)


# ── Name helpers ──

def service_slug(service: str) -> str:
    """``"Asset Hub Polkadot"`` -> ``"asset-hub-polkadot"``."""
    return _WHITESPACE.sub("-", service.lower())


def title_hyphenated(name: str) -> str:
    """Upper-case the first letter of every hyphen segment, keep the rest."""
    return "-".join(word[:1].upper() + word[1:] for word in name.split("-"))


def create_default_domain(service: str) -> str:
    return f"{service_slug(service)}.{DEFAULT_DOMAIN_SUFFIX}"


def match_service_from_domain(domain: str, services: Iterable[str]) -> str:
    """
    Resolve which declared service a monitored domain belongs to.

    First service whose slug contains, or is contained in, the domain prefix
    wins. Failing that, the prefix is rebuilt as a title-cased name and
    compared case-insensitively. Failing that, the rebuilt name is returned.
    """
    services = list(services)
    prefix = domain.split(".")[0].lower()

    for service in services:
        slug = service_slug(service)
        if slug in prefix or prefix in slug:
            return service

    rebuilt = title_hyphenated(prefix)
    for service in services:
        if service.lower() == rebuilt.lower():
            return service

    return rebuilt


def get_required_services_by_level(
    level: int, services_config: Mapping[str, ServiceGroup]
) -> frozenset[str]:
    """Display names of every endpoint a member at ``level`` must provide."""
    required: set[str] = set()
    for group in services_config.values():
        if level >= group.level_required:
            required.update(title_hyphenated(endpoint) for endpoint in group.endpoints)
    return frozenset(required)


# ── Reconciliation ──

def reconcile(data: CachedMemberData) -> Reconciliation:
    """Derive every series assignment for one member."""
    member = data.member
    level = str(member.level)
    result = Reconciliation()

    result.member_statuses.append(
        MemberStatus(
            member=member.name,
            region=member.region,
            level=level,
            value=1 if member.active else 0,
        )
    )

    seen_combinations: set[tuple[str, str, str]] = set()
    services_with_events: set[str] = set()

    for event in data.downtime_events:
        # Upstream occasionally returns events for other members.
        if event.member_name != member.name:
            continue

        service = match_service_from_domain(event.domain_name, member.services)
        seen_combinations.add((event.domain_name, event.check_type, event.check_name))
        services_with_events.add(service)

        result.event_increments.append(
            EventIncrement(
                member=member.name,
                service=service,
                domain=event.domain_name,
                check_type=event.check_type,
                check_name=event.check_name,
                status=event.status,
            )
        )
        result.service_statuses.append(
            ServiceStatus(
                member=member.name,
                service=service,
                domain=event.domain_name,
                check_type=event.check_type,
                check_name=event.check_name,
                level=level,
                value=0 if event.status == ONGOING_STATUS else 1,
            )
        )

    required_slugs = {service_slug(s) for s in data.required_services}
    required = [s for s in member.services if service_slug(s) in required_slugs]

    for service in required:
        if service in services_with_events:
            continue
        _emit_fallback(result, seen_combinations, member.name, service, level, REQUIRED_CHECK)

    if member.active:
        for service in member.services:
            if service in services_with_events or service in required:
                continue
            _emit_fallback(result, seen_combinations, member.name, service, level, DEFAULT_CHECK)

    return result


def _emit_fallback(
    result: Reconciliation,
    seen_combinations: set[tuple[str, str, str]],
    member_name: str,
    service: str,
    level: str,
    check: tuple[str, str],
) -> None:
    """Presume a service without monitoring data is up, once per combination."""
    domain = create_default_domain(service)
    check_type, check_name = check
    combination = (domain, check_type, check_name)
    if combination in seen_combinations:
        return
    seen_combinations.add(combination)
    result.service_statuses.append(
        ServiceStatus(
            member=member_name,
            service=service,
            domain=domain,
            check_type=check_type,
            check_name=check_name,
            level=level,
            value=1,
        )
    )
