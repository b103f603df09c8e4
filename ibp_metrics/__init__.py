"""IBP member metrics exporter — Prometheus view of IBP member and service status."""

__version__ = "1.0.0"
