"""Timing hook that feeds every finished request into the telemetry aggregator."""
from __future__ import annotations

import logging
import time
from typing import Any, Awaitable, Callable

from fastapi import Request
from starlette.responses import Response

from .telemetry import Observation, RequestTelemetry

access_logger = logging.getLogger("osinfo.access")

SERVER_ERROR_STATUS = 500


def elapsed_ms(start: float, end: float) -> int:
    """Whole milliseconds between two timer readings, never negative."""
    return max(0, int((end - start) * 1000))


def _status_of(result: Any) -> int:
    if isinstance(result, int):
        return result
    return int(getattr(result, "status_code"))


class RequestObserver:
    def __init__(
        self,
        telemetry: RequestTelemetry,
        timer: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.telemetry = telemetry
        self._timer = timer

    def _finish(self, start: float, status_code: int) -> Observation:
        observation = Observation(status_code=status_code, elapsed_ms=elapsed_ms(start, self._timer()))
        self.telemetry.record_observation(observation)
        return observation

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        start = self._timer()
        status_code = SERVER_ERROR_STATUS
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            observation = self._finish(start, status_code)
            access_logger.debug(
                "%s %s -> %d in %dms",
                request.method,
                request.url.path,
                observation.status_code,
                observation.elapsed_ms,
            )

    def observe(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Run ``func`` and record its status, or 500 if it raises."""
        start = self._timer()
        status_code = SERVER_ERROR_STATUS
        try:
            result = func(*args, **kwargs)
            status_code = _status_of(result)
            return result
        finally:
            self._finish(start, status_code)
