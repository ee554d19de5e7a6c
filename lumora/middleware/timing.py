"""
Request timing middleware for API paths.

Features:
- Logs method, path, status code, total ms, response bytes
- DB query count + total DB time (guarded by LUMORA_LOG_DB_TIMING=1)
- Request storm detection: warns if a path exceeds >20/10s or >120/60s
- Response headers: X-Request-Time-Ms, X-Response-Bytes

Only logs paths starting with /api/ so /healthz probes stay quiet.

Usage:
    Add to MIDDLEWARE in settings.py:
    "lumora.middleware.timing.RequestTimingMiddleware"
"""

import logging
import os
import re
import time
from collections import defaultdict
from threading import Lock
from typing import Callable

from django.http import HttpRequest, HttpResponse

logger = logging.getLogger("lumora.timing")

STORM_THRESHOLD_10S = int(os.environ.get("LUMORA_STORM_THRESHOLD_10S", "20"))
STORM_THRESHOLD_60S = int(os.environ.get("LUMORA_STORM_THRESHOLD_60S", "120"))


class RollingCounter:
    """Thread-safe rolling counter for request rate tracking."""

    def __init__(self):
        self._timestamps: list[float] = []
        self._lock = Lock()

    def record(self, now: float) -> tuple[int, int]:
        """Record a request and return (count_10s, count_60s)."""
        with self._lock:
            self._timestamps.append(now)
            self._timestamps = [t for t in self._timestamps if t > now - 60]

            count_10s = sum(1 for t in self._timestamps if t > now - 10)
            return count_10s, len(self._timestamps)


def response_size(response: HttpResponse) -> int:
    """Body size in bytes; streamed bodies report Content-Length when known."""
    if getattr(response, "streaming", False):
        try:
            return int(response.get("Content-Length", 0))
        except ValueError:
            return 0
    return len(response.content)


class RequestTimingMiddleware:
    """
    Logs timing for /api/ requests and warns on request storms.

    Storm counters are kept per normalized path so that
    /api/brands/<uuid> and /api/brands/<other-uuid> share one bucket.
    """

    PATH_PATTERNS = [
        (re.compile(r"^/api/brands/[^/]+/content/by-status$"), "/api/brands/:id/content/by-status"),
        (re.compile(r"^/api/brands/[^/]+/content$"), "/api/brands/:id/content"),
        (re.compile(r"^/api/brands/[^/]+/cameos$"), "/api/brands/:id/cameos"),
        (re.compile(r"^/api/brands/[^/]+$"), "/api/brands/:id"),
        (re.compile(r"^/api/topics/[^/]+/variety$"), "/api/topics/:id/variety"),
        (re.compile(r"^/api/topics/[^/]+$"), "/api/topics/:id"),
        (re.compile(r"^/api/content/[^/]+/generations$"), "/api/content/:id/generations"),
        (re.compile(r"^/api/content/[^/]+$"), "/api/content/:id"),
        (re.compile(r"^/api/cameos/[^/]+$"), "/api/cameos/:id"),
    ]

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]):
        self.get_response = get_response
        self.log_db_timing = os.environ.get("LUMORA_LOG_DB_TIMING", "0") == "1"
        self._counters: dict[str, RollingCounter] = defaultdict(RollingCounter)

    def _normalize_path(self, path: str) -> str:
        for pattern, replacement in self.PATH_PATTERNS:
            if pattern.match(path):
                return replacement
        return path

    def __call__(self, request: HttpRequest) -> HttpResponse:
        if not request.path.startswith("/api/"):
            return self.get_response(request)

        start_time = time.perf_counter()
        now = time.time()

        db_queries_before = 0
        if self.log_db_timing:
            from django.db import connection
            db_queries_before = len(connection.queries)

        response = self.get_response(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        response_bytes = response_size(response)

        normalized_path = self._normalize_path(request.path)
        count_10s, count_60s = self._counters[normalized_path].record(now)

        log_parts = [
            f"{request.method} {request.path}",
            f"status={response.status_code}",
            f"ms={duration_ms:.1f}",
            f"bytes={response_bytes}",
        ]

        if self.log_db_timing:
            from django.db import connection
            queries = connection.queries[db_queries_before:]
            db_time_ms = 0.0
            for query in queries:
                try:
                    db_time_ms += float(query.get("time", 0)) * 1000
                except (ValueError, TypeError):
                    continue
            log_parts.append(f"queries={len(queries)}")
            log_parts.append(f"db_ms={db_time_ms:.1f}")

        logger.info(" | ".join(log_parts))

        if count_10s > STORM_THRESHOLD_10S:
            logger.warning(
                "STORM path=%s count_10s=%d threshold=%d",
                normalized_path, count_10s, STORM_THRESHOLD_10S
            )
        elif count_60s > STORM_THRESHOLD_60S:
            logger.warning(
                "STORM path=%s count_60s=%d threshold=%d",
                normalized_path, count_60s, STORM_THRESHOLD_60S
            )

        response["X-Response-Bytes"] = str(response_bytes)
        response["X-Request-Time-Ms"] = f"{duration_ms:.1f}"
        return response
