# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models — pure data structures, NO FastAPI dependency.
Upstream payloads are validated into these and never mutated afterwards.
Upstream sends ``null`` for unset fields; those fall back to the field default.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


def _null_to_default(cls: type[BaseModel], v: Any, info: ValidationInfo) -> Any:
    if v is not None:
        return v
    return cls.model_fields[info.field_name].get_default(call_default_factory=True)


class Member(BaseModel):
    """A participating IBP operator as reported by the member registry."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Unique member name")
    region: str = Field(default="", description="Geographic region")
    level: int = Field(default=0, description="Membership tier level")
    services: list[str] = Field(default_factory=list, description="Declared services")
    active: bool = False

    website: Optional[str] = None
    logo: Optional[str] = None
    joined_date: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    service_ipv4: Optional[str] = None
    service_ipv6: Optional[str] = None
    override: bool = False

    @field_validator("region", "level", "services", "active", "override", mode="before")
    @classmethod
    def null_means_default(cls, v: Any, info: ValidationInfo) -> Any:
        return _null_to_default(cls, v, info)


class DowntimeEvent(BaseModel):
    """A recorded incident against one monitored domain/check of one member."""

    model_config = ConfigDict(frozen=True)

    member_name: str
    domain_name: str
    check_type: str
    check_name: str
    status: str
    start_time: Optional[str] = None
    duration: Optional[str] = None

    id: Optional[int] = None
    endpoint: Optional[str] = None
    error: Optional[str] = None
    is_ipv6: bool = False

    @field_validator("is_ipv6", mode="before")
    @classmethod
    def null_means_default(cls, v: Any, info: ValidationInfo) -> Any:
        return _null_to_default(cls, v, info)


class ServiceGroup(BaseModel):
    """One service-tier group: the endpoints required from a minimum level up."""

    model_config = ConfigDict(frozen=True)

    level_required: int
    endpoints: frozenset[str] = Field(default_factory=frozenset)

    @field_validator("endpoints", mode="before")
    @classmethod
    def normalise_endpoints(cls, v: Any) -> Any:
        """Accept a list of names or an object keyed by endpoint name."""
        if v is None:
            return frozenset()
        if isinstance(v, dict):
            return frozenset(v.keys())
        return v


ServiceTierConfig = dict[str, ServiceGroup]


class CachedMemberData(BaseModel):
    """Everything the reconciler needs for one member, as of ``fetched_at``."""

    model_config = ConfigDict(frozen=True)

    member: Member
    downtime_events: tuple[DowntimeEvent, ...] = ()
    required_services: frozenset[str] = frozenset()
    services_config: dict[str, ServiceGroup] = Field(default_factory=dict)
    fetched_at: float
