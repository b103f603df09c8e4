# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: IBP upstream client — member registry, downtime events, service tiers.
Transport, status-code and payload-shape failures surface as UpstreamFetchError;
individual records that fail validation are dropped and counted instead.
Deciding whether to degrade or propagate is the caller's job.
"""

import json
import time
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ValidationError

from ibp_metrics.core.config import settings
from ibp_metrics.core.exceptions import UpstreamFetchError
from ibp_metrics.core.logging import get_logger
from ibp_metrics.metrics.prometheus import UPSTREAM_LATENCY, UPSTREAM_RECORDS_DROPPED, UPSTREAM_REQUESTS
from ibp_metrics.models.domain import DowntimeEvent, Member, ServiceGroup, ServiceTierConfig

logger = get_logger(__name__)


class IBPClient:
    """Synchronous HTTP client for the IBP dashboard API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        tiers_url: Optional[str] = None,
        tiers_file: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.IBP_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.IBP_API_TIMEOUT
        self.tiers_url = tiers_url or settings.SERVICE_TIERS_URL
        self.tiers_file = tiers_file if tiers_file is not None else settings.SERVICE_TIERS_FILE
        self._transport = transport

    # ── Members ──

    def list_members(self) -> list[Member]:
        """Every member that validates; malformed entries are dropped individually."""
        operation = "list_members"
        payload = self._get_json(operation, f"{self.base_url}/members")
        members = self._validate_records(operation, Member, payload)
        UPSTREAM_REQUESTS.labels(operation=operation, result="ok").inc()
        return members

    def get_member(self, name: str) -> Optional[Member]:
        """Look a member up by exact name. Returns None if the registry lacks it."""
        for member in self.list_members():
            if member.name == name:
                return member
        return None

    # ── Downtime ──

    def get_downtime_events(
        self, member_name: str, start_date: str, end_date: str
    ) -> list[DowntimeEvent]:
        operation = "get_downtime_events"
        payload = self._get_json(
            operation,
            f"{self.base_url}/downtime/events",
            params={"member": member_name, "start": start_date, "end": end_date},
        )
        events = self._validate_records(operation, DowntimeEvent, payload)
        UPSTREAM_REQUESTS.labels(operation=operation, result="ok").inc()
        return events

    # ── Service tiers ──

    def get_service_tier_config(self) -> ServiceTierConfig:
        """Load tier requirements from SERVICE_TIERS_FILE, else SERVICE_TIERS_URL."""
        operation = "get_service_tier_config"
        if self.tiers_file:
            payload = self._read_json_file(operation, self.tiers_file)
        else:
            payload = self._get_json(operation, self.tiers_url)
        if not isinstance(payload, dict):
            raise self._rejected(operation, f"expected an object, got {type(payload).__name__}")

        tiers: ServiceTierConfig = {}
        for key, group in payload.items():
            try:
                tiers[key] = ServiceGroup.model_validate(group)
            except ValidationError as exc:
                UPSTREAM_RECORDS_DROPPED.labels(operation=operation).inc()
                logger.warning("Dropping service group %s: %s", key, exc.errors()[0]["msg"])
        UPSTREAM_REQUESTS.labels(operation=operation, result="ok").inc()
        return tiers

    # ── Internal ──

    def _get_json(
        self, operation: str, url: str, params: Optional[dict[str, str]] = None
    ) -> Any:
        start = time.monotonic()
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                resp = client.get(url, params=params)
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPError as exc:
            UPSTREAM_REQUESTS.labels(operation=operation, result="error").inc()
            logger.warning("Upstream %s failed: %s", operation, exc)
            raise UpstreamFetchError(operation, str(exc)) from exc
        except ValueError as exc:
            raise self._rejected(operation, f"invalid JSON: {exc}") from exc
        finally:
            UPSTREAM_LATENCY.labels(operation=operation).observe(time.monotonic() - start)

    @staticmethod
    def _read_json_file(operation: str, path: str) -> Any:
        try:
            with open(path, encoding="utf-8") as fh:
                return json.load(fh)
        except (OSError, ValueError) as exc:
            UPSTREAM_REQUESTS.labels(operation=operation, result="error").inc()
            logger.warning("Could not read %s: %s", path, exc)
            raise UpstreamFetchError(operation, str(exc)) from exc

    @staticmethod
    def _rejected(operation: str, reason: str) -> UpstreamFetchError:
        UPSTREAM_REQUESTS.labels(operation=operation, result="invalid").inc()
        logger.warning("Upstream %s payload rejected: %s", operation, reason)
        return UpstreamFetchError(operation, reason)

    def _validate_records(
        self, operation: str, model: type[BaseModel], payload: Any
    ) -> list[Any]:
        """Validate a JSON array record by record, dropping only the bad ones."""
        if not isinstance(payload, list):
            raise self._rejected(operation, f"expected a list, got {type(payload).__name__}")

        records = []
        for index, item in enumerate(payload):
            try:
                records.append(model.model_validate(item))
            except ValidationError as exc:
                UPSTREAM_RECORDS_DROPPED.labels(operation=operation).inc()
                name = (item.get("name") or item.get("member_name")) if isinstance(item, dict) else None
                logger.warning(
                    "Dropping %s record %d (%s): %s",
                    operation, index, name or "unnamed", exc.errors()[0]["msg"],
                )
        return records
