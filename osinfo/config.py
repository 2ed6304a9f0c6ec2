"""Runtime configuration helpers."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "info"
    prefix: str = "/os"
    cpu_sample_seconds: float = 0.5
    all_partitions: bool = False
    expose_env: bool = True


def normalize_prefix(prefix: str) -> str:
    """``"os/"`` -> ``"/os"``; an empty prefix mounts routes at the root."""
    stripped = prefix.strip().strip("/")
    return f"/{stripped}" if stripped else ""


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    host = os.getenv("OSINFO_HOST", "0.0.0.0")
    port = int(os.getenv("OSINFO_PORT", "8080"))
    log_level = os.getenv("OSINFO_LOG_LEVEL", "info").lower()
    prefix = normalize_prefix(os.getenv("OSINFO_PREFIX", "/os"))
    cpu_sample_seconds = float(os.getenv("OSINFO_CPU_SAMPLE_SECONDS", "0.5"))
    return Settings(
        host=host,
        port=port,
        log_level=log_level,
        prefix=prefix,
        cpu_sample_seconds=cpu_sample_seconds,
        all_partitions=_env_flag("OSINFO_DISK_ALL_PARTITIONS", False),
        expose_env=_env_flag("OSINFO_EXPOSE_ENV", True),
    )
