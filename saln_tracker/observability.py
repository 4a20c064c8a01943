"""
Logging, metrics and health checks for the SALN Tracker site.

Log records carry keyword fields (`logger.info("Cached collection",
collection="officials")`) and, inside a request, the request ID. Output
is JSON or a single text line depending on the environment:

- SALN_TRACKER_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- SALN_TRACKER_LOG_FORMAT: json or text (default: json when SALN_TRACKER_PRODUCTION is set)
"""

import json
import logging
import os
import sys
import time
import uuid
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, Iterator, Optional, Tuple

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Attributes every LogRecord carries; anything else came from a caller's kwargs
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message"}

# Latency samples kept per histogram
_SAMPLE_LIMIT = 1000


def _is_production() -> bool:
    return os.environ.get("SALN_TRACKER_PRODUCTION", "").lower() in ("1", "true", "yes")


def _get_log_level() -> int:
    name = os.environ.get("SALN_TRACKER_LOG_LEVEL", "INFO").upper()
    return getattr(logging, name) if name in _LOG_LEVELS else logging.INFO


def _use_json_logging() -> bool:
    fmt = os.environ.get("SALN_TRACKER_LOG_FORMAT", "").lower()
    if fmt in ("json", "text"):
        return fmt == "json"
    return _is_production()


def _extra_fields(record: logging.LogRecord) -> Iterator[Tuple[str, Any]]:
    for key, value in record.__dict__.items():
        if key not in _RESERVED_ATTRS and not key.startswith("_"):
            yield key, value


class StructuredFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message, request_id, fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = request_id_var.get()
        if request_id:
            entry["request_id"] = request_id
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        for key, value in _extra_fields(record):
            try:
                json.dumps(value)
            except (TypeError, ValueError):
                value = str(value)
            entry[key] = value

        return json.dumps(entry)


class TextFormatter(logging.Formatter):
    """Readable single-line output with fields in parentheses."""

    def format(self, record: logging.LogRecord) -> str:
        request_id = request_id_var.get()
        prefix = f"[{request_id[:8]}] " if request_id else ""
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

        line = f"{timestamp} {record.levelname:8} {prefix}{record.name}: {record.getMessage()}"
        extras = " ".join(f"{key}={value}" for key, value in _extra_fields(record))
        if extras:
            line += f" ({extras})"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class ContextLogger(logging.LoggerAdapter):
    """Moves keyword arguments other than logging's own into `extra`."""

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra = kwargs.get("extra", {})
        for key in list(kwargs):
            if key not in ("exc_info", "stack_info", "stacklevel", "extra"):
                extra[key] = kwargs.pop(key)
        kwargs["extra"] = extra
        return msg, kwargs


def get_logger(name: str) -> ContextLogger:
    return ContextLogger(logging.getLogger(name), {})


def setup_logging() -> None:
    """Replace the root logger's handlers with a single stdout handler."""
    level = _get_log_level()
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(StructuredFormatter() if _use_json_logging() else TextFormatter())
    root_logger.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Tags each request with an ID and logs its outcome.

    The ID is taken from X-Request-ID when present and echoed back in the
    response header. Responses of 400 and above log at WARNING.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])
        request_id_var.set(request_id)

        logger = get_logger("saln_tracker.request")
        route = f"{request.method} {request.url.path}"
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.exception(
                f"{route} -> 500",
                path=request.url.path,
                status_code=500,
                duration_ms=round(duration_ms, 2),
                error=str(e),
            )
            get_metrics().record_request(duration_ms, success=False)
            raise
        else:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.log(
                logging.INFO if response.status_code < 400 else logging.WARNING,
                f"{route} -> {response.status_code}",
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
            )
            get_metrics().record_request(duration_ms, success=response.status_code < 500)

            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            request_id_var.set("")


def _percentile(samples: list, p: float) -> Optional[float]:
    if not samples:
        return None
    ordered = sorted(samples)
    return ordered[min(int(len(ordered) * p), len(ordered) - 1)]


def _keep_recent(samples: list) -> list:
    return samples[-_SAMPLE_LIMIT:] if len(samples) > _SAMPLE_LIMIT else samples


@dataclass
class MetricsCollector:
    """Process-local counters for requests, store fetches and the snapshot cache."""

    requests_total: int = 0
    requests_failed: int = 0
    store_fetches: int = 0
    store_fetch_failures: int = 0
    cache_hits: int = 0
    cache_misses: int = 0

    fetch_latencies_ms: list = field(default_factory=list)
    request_latencies_ms: list = field(default_factory=list)

    _lock: Lock = field(default_factory=Lock, repr=False)

    def record_fetch(self, latency_ms: float) -> None:
        """A collection was loaded from the backing store."""
        with self._lock:
            self.store_fetches += 1
            self.fetch_latencies_ms.append(latency_ms)
            self.fetch_latencies_ms = _keep_recent(self.fetch_latencies_ms)

    def record_fetch_failure(self) -> None:
        with self._lock:
            self.store_fetch_failures += 1

    def record_cache(self, hit: bool) -> None:
        with self._lock:
            if hit:
                self.cache_hits += 1
            else:
                self.cache_misses += 1

    def record_request(self, latency_ms: float, success: bool) -> None:
        with self._lock:
            self.requests_total += 1
            if not success:
                self.requests_failed += 1
            self.request_latencies_ms.append(latency_ms)
            self.request_latencies_ms = _keep_recent(self.request_latencies_ms)

    def get_summary(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "requests_total": self.requests_total,
                "requests_failed": self.requests_failed,
                "store_fetches": self.store_fetches,
                "store_fetch_failures": self.store_fetch_failures,
                "cache_hits": self.cache_hits,
                "cache_misses": self.cache_misses,
                "fetch_latency_p50_ms": _percentile(self.fetch_latencies_ms, 0.5),
                "fetch_latency_p95_ms": _percentile(self.fetch_latencies_ms, 0.95),
                "request_latency_p50_ms": _percentile(self.request_latencies_ms, 0.5),
                "request_latency_p95_ms": _percentile(self.request_latencies_ms, 0.95),
            }


_metrics = MetricsCollector()


def get_metrics() -> MetricsCollector:
    return _metrics


@dataclass
class HealthStatus:
    healthy: bool
    checks: Dict[str, Dict[str, Any]]
    duration_ms: float


def check_health(store=None) -> HealthStatus:
    """
    Liveness plus, when a store is given, one read of its officials.

    A store that raises SALNTrackerError marks the result unhealthy.
    """
    from saln_tracker.core import SALNTrackerError

    start = time.perf_counter()
    checks: Dict[str, Dict[str, Any]] = {"liveness": {"status": "healthy"}}
    healthy = True

    if store is not None:
        try:
            officials = store.list_officials()
            checks["data_store"] = {
                "status": "healthy",
                "officials": len(officials),
                "store": store.describe(),
            }
        except SALNTrackerError as e:
            checks["data_store"] = {"status": "unhealthy", "error": str(e)}
            healthy = False

    return HealthStatus(
        healthy=healthy,
        checks=checks,
        duration_ms=round((time.perf_counter() - start) * 1000, 2),
    )
