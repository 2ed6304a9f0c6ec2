"""Helpers for reading host facts through psutil and the platform module."""
from __future__ import annotations

import logging
import os
import platform
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Tuple

import psutil

logger = logging.getLogger(__name__)


class HostInfoError(RuntimeError):
    """Raised when the operating system refuses to report a statistic."""


@contextmanager
def _host_errors(what: str) -> Iterator[None]:
    try:
        yield
    except (psutil.Error, OSError) as exc:
        raise HostInfoError(f"unable to read {what}: {exc}") from exc


def _platform_details(system_name: str) -> Tuple[str, str, str]:
    """Return (platform, family, version) in the loose sense used by distro tooling."""
    if system_name == "Linux":
        try:
            release = platform.freedesktop_os_release()
        except OSError:
            release = {}
        name = release.get("ID", "linux")
        family = (release.get("ID_LIKE") or name).split()[0]
        return name, family, release.get("VERSION_ID", "")
    if system_name == "Darwin":
        return "darwin", "darwin", platform.mac_ver()[0]
    if system_name == "Windows":
        return "windows", "windows", platform.version()
    lowered = system_name.lower()
    return lowered, lowered, platform.release()


def _uptime_seconds() -> int:
    return int(max(0, time.time() - psutil.boot_time()))


def host_info() -> Dict[str, Any]:
    uname = platform.uname()
    name, family, version = _platform_details(uname.system)
    with _host_errors("host uptime"):
        uptime = _uptime_seconds()
    return {
        "hostname": uname.node,
        "uptime": uptime,
        "platform": name,
        "platformFamily": family,
        "platformVersion": version,
        "kernelVersion": uname.release,
        "architecture": uname.machine,
    }


def host_uptime() -> Dict[str, Any]:
    with _host_errors("host uptime"):
        return {"uptime_seconds": _uptime_seconds()}


def memory_stats() -> Dict[str, Any]:
    with _host_errors("virtual memory"):
        memory = psutil.virtual_memory()
    return {
        "total": memory.total,
        "available": memory.available,
        "used": memory.used,
        "usedPercent": memory.percent,
    }


def cpu_percent(interval: float) -> Dict[str, Any]:
    """Overall CPU utilisation sampled over ``interval`` seconds."""
    with _host_errors("cpu utilisation"):
        percent = psutil.cpu_percent(interval=interval, percpu=False)
    return {"cpu_percent": [percent]}


def disk_usage(all_partitions: bool = False) -> List[Dict[str, Any]]:
    with _host_errors("disk partitions"):
        partitions = psutil.disk_partitions(all=all_partitions)

    out: List[Dict[str, Any]] = []
    for part in partitions:
        try:
            usage = psutil.disk_usage(part.mountpoint)
        except (psutil.Error, OSError) as exc:
            logger.debug("Skipping %s: %s", part.mountpoint, exc)
            continue
        out.append(
            {
                "device": part.device,
                "mountpoint": part.mountpoint,
                "fstype": part.fstype,
                "total": usage.total,
                "free": usage.free,
                "used": usage.used,
                "usedPercent": usage.percent,
            }
        )
    return out


def environment() -> Dict[str, List[str]]:
    return {"env": [f"{key}={value}" for key, value in os.environ.items()]}
