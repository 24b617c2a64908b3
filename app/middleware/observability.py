from __future__ import annotations

import time
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.logging import get_logger


def normalize_path(request: Request) -> str:
    """Route template (``/carts/{cart_id}``) instead of the raw path, when matched."""
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path or request.url.path


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Emit structured logs for failed requests."""

    def __init__(self, app) -> None:
        super().__init__(app)
        self.logger = get_logger("app.requests")

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            duration = time.perf_counter() - start
            self._log_error(
                request,
                status_code=500,
                duration=duration,
                message="Unhandled server error",
                level="error",
            )
            raise

        duration = time.perf_counter() - start
        status_code = response.status_code

        if status_code >= 500:
            self._log_error(request, status_code, duration, "Server error response", "error")
        elif status_code >= 400:
            self._log_error(request, status_code, duration, "Client error response", "warning")

        return response

    def _log_error(
        self,
        request: Request,
        status_code: int,
        duration: float,
        message: str,
        level: str,
    ) -> None:
        payload: dict[str, Any] = {
            "method": request.method,
            "path": normalize_path(request),
            "status_code": status_code,
            "duration_ms": round(duration * 1000, 3),
            "request_id": request.headers.get("x-request-id"),
        }
        log_func = getattr(self.logger, level, self.logger.error)
        log_func(message, extra=payload)
