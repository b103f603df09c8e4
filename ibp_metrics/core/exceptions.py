# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Exception taxonomy for the exporter.
Controllers map these to HTTP status codes; services never return error dicts.
"""


class ExporterError(Exception):
    """Base class for every error raised by the exporter."""


class MemberNotFoundError(ExporterError):
    """The upstream registry has no member with the requested name."""

    def __init__(self, member_name: str) -> None:
        self.member_name = member_name
        super().__init__(f"Member {member_name} not found")


class UpstreamFetchError(ExporterError):
    """An upstream call failed (transport, status code, or payload)."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"Upstream {operation} failed: {reason}")
