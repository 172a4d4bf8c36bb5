"""
seo_analyzer/middleware/rate_limit.py: sliding-window per-IP rate limiter.
Only applies to the analysis POST routes. Limit configurable via .env RATE_LIMIT_PER_MINUTE.
"""
import time
from collections import defaultdict, deque
from typing import Callable
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from seo_analyzer.config import get_settings
from seo_analyzer.utils.clock import now_iso

_log: dict[str, deque] = defaultdict(deque)
WINDOW = 60
SWEEP_AT = 1024  # tracked IPs before idle ones are dropped
LIMITED = {"/api/analyze", "/api/analyze/local"}


def _ip(request: Request) -> str:
    if get_settings().trust_forwarded_for:
        fwd = request.headers.get("X-Forwarded-For")
        if fwd:
            return fwd.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _prune(q: deque, now: float) -> None:
    while q and now - q[0] > WINDOW:
        q.popleft()


def _sweep(now: float) -> None:
    for ip in list(_log):
        _prune(_log[ip], now)
        if not _log[ip]:
            del _log[ip]


def reset() -> None:
    _log.clear()


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method == "POST" and request.url.path in LIMITED:
            limit = get_settings().rate_limit_per_minute
            ip = _ip(request)
            now = time.monotonic()
            if len(_log) >= SWEEP_AT:
                _sweep(now)
            q = _log[ip]
            _prune(q, now)
            if len(q) >= limit:
                retry = int(WINDOW - (now - q[0])) + 1
                logger.warning("Rate limit hit for {} on {}", ip, request.url.path)
                return JSONResponse(
                    status_code=429,
                    content={
                        "error": "Too many analysis requests. Please wait a moment and try again.",
                        "details": f"Rate limit exceeded. Max {limit}/min per IP. Retry in {retry}s.",
                        "timestamp": now_iso(),
                    },
                    headers={"Retry-After": str(retry)},
                )
            q.append(now)
        return await call_next(request)
