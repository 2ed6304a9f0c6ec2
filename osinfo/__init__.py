"""Host telemetry and request statistics service."""
from importlib.metadata import version

from .api import create_app
from .telemetry import RequestTelemetry, TelemetrySnapshot

__all__ = ["create_app", "RequestTelemetry", "TelemetrySnapshot", "__version__"]

try:
    __version__ = version("osinfo-service")
except Exception:  # pragma: no cover - fallback when package metadata missing
    __version__ = "0.1.0"
