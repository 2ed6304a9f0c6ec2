"""Request telemetry aggregated across every served request."""
from __future__ import annotations

import datetime as dt
import threading
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional


@dataclass(frozen=True)
class Observation:
    status_code: int
    elapsed_ms: int


@dataclass(frozen=True)
class TelemetrySnapshot:
    """Point-in-time copy of the aggregate counters plus derived values."""

    total_requests: int
    total_elapsed_ms: int
    average_ms: float
    started_at: dt.datetime
    uptime_seconds: float
    status_codes: Dict[int, int] = field(default_factory=dict)


class RequestTelemetry:
    """Running request counters shared by all request-handling threads.

    ``record`` and ``snapshot`` go through the same lock, so a snapshot never
    sees a request counted without its status code.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Optional[Callable[[], dt.datetime]] = None,
    ) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._total_requests = 0
        self._total_elapsed_ms = 0
        self._status_codes: Counter[int] = Counter()
        self._start = clock()
        now = wall_clock() if wall_clock else dt.datetime.now(dt.timezone.utc)
        self._started_at = now

    @property
    def started_at(self) -> dt.datetime:
        return self._started_at

    def record(self, status_code: int, elapsed_ms: int) -> None:
        with self._lock:
            self._total_requests += 1
            self._total_elapsed_ms += elapsed_ms
            self._status_codes[status_code] += 1

    def record_observation(self, observation: Observation) -> None:
        self.record(observation.status_code, observation.elapsed_ms)

    def snapshot(self) -> TelemetrySnapshot:
        with self._lock:
            total = self._total_requests
            elapsed = self._total_elapsed_ms
            status_codes = dict(self._status_codes)
            now = self._clock()

        average = elapsed / total if total > 0 else 0.0
        return TelemetrySnapshot(
            total_requests=total,
            total_elapsed_ms=elapsed,
            average_ms=float(average),
            started_at=self._started_at,
            uptime_seconds=max(0.0, now - self._start),
            status_codes=status_codes,
        )
