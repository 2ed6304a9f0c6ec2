"""Formatting of telemetry snapshots for the JSON reporting routes."""
from __future__ import annotations

from typing import Any, Dict

from .telemetry import TelemetrySnapshot


def metrics_payload(snapshot: TelemetrySnapshot) -> Dict[str, Any]:
    return {
        "total_requests": snapshot.total_requests,
        "total_response_time_ms": snapshot.total_elapsed_ms,
        "avg_response_time_ms": snapshot.average_ms,
        # JSON object keys must be strings.
        "status_codes": {str(code): count for code, count in sorted(snapshot.status_codes.items())},
        "server_start_time": snapshot.started_at.isoformat(),
        "server_uptime_seconds": snapshot.uptime_seconds,
    }


def server_uptime_payload(snapshot: TelemetrySnapshot) -> Dict[str, Any]:
    return {
        "server_uptime_seconds": snapshot.uptime_seconds,
        "server_start_time": snapshot.started_at.isoformat(),
    }
