"""Prometheus exposition of the request telemetry."""
from __future__ import annotations

from typing import Iterator, Tuple

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)
from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily, Metric

from .telemetry import RequestTelemetry


class TelemetryCollector:
    """Reads one snapshot per scrape so all exported values agree."""

    def __init__(self, telemetry: RequestTelemetry, namespace: str = "osinfo") -> None:
        self.telemetry = telemetry
        self.namespace = namespace

    def _name(self, suffix: str) -> str:
        return f"{self.namespace}_{suffix}"

    def collect(self) -> Iterator[Metric]:
        snapshot = self.telemetry.snapshot()

        yield CounterMetricFamily(
            self._name("http_requests"),
            "Requests served since start-up.",
            value=snapshot.total_requests,
        )
        yield CounterMetricFamily(
            self._name("http_request_duration_milliseconds"),
            "Sum of request durations in milliseconds.",
            value=snapshot.total_elapsed_ms,
        )

        responses = CounterMetricFamily(
            self._name("http_responses"),
            "Responses served, by status code.",
            labels=["status_code"],
        )
        for code, count in sorted(snapshot.status_codes.items()):
            responses.add_metric([str(code)], count)
        yield responses

        yield GaugeMetricFamily(
            self._name("http_response_time_average_milliseconds"),
            "Mean request duration in milliseconds.",
            value=snapshot.average_ms,
        )
        yield GaugeMetricFamily(
            self._name("server_uptime_seconds"),
            "Seconds since the server started.",
            value=snapshot.uptime_seconds,
        )
        yield GaugeMetricFamily(
            self._name("server_start_time_seconds"),
            "Server start time as a unix timestamp.",
            value=snapshot.started_at.timestamp(),
        )


def build_registry(telemetry: RequestTelemetry, namespace: str = "osinfo") -> CollectorRegistry:
    registry = CollectorRegistry()
    registry.register(TelemetryCollector(telemetry, namespace=namespace))
    ProcessCollector(registry=registry)
    PlatformCollector(registry=registry)
    return registry


def render_latest(registry: CollectorRegistry) -> Tuple[bytes, str]:
    return generate_latest(registry), CONTENT_TYPE_LATEST
