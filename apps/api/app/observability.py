import json
import logging
import threading
import time
from collections import defaultdict
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field

from app.config import settings

EVENT_LOGGER = "jersey.orders"
EVENT_FIELDS = ("order_id", "notification_id", "provider")

_request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)


class JsonFormatter(logging.Formatter):
    """One JSON object per line; order-scoped fields are always present, possibly null."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None) or _request_id_ctx.get(),
        }
        for name in EVENT_FIELDS:
            payload[name] = getattr(record, name, None)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: str | None = None) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel((level or settings.log_level).upper())


@dataclass
class _Timing:
    count: int = 0
    total_s: float = 0.0
    max_s: float = 0.0

    def add(self, value_s: float) -> None:
        self.count += 1
        self.total_s += value_s
        self.max_s = max(self.max_s, value_s)


@dataclass
class MetricsSnapshot:
    counters: dict[str, int] = field(default_factory=dict)
    timings: dict[str, dict[str, float]] = field(default_factory=dict)


class MetricsStore:
    """Process-local counters and running timing aggregates.

    Background link shortening runs on the threadpool, so writes are serialised.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, int] = defaultdict(int)
        self._timings: dict[str, _Timing] = defaultdict(_Timing)

    def increment(self, name: str, amount: int = 1) -> None:
        with self._lock:
            self._counters[name] += amount

    def observe(self, name: str, value_s: float) -> None:
        with self._lock:
            self._timings[name].add(value_s)

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
            self._timings.clear()

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            timings = {
                name: {
                    "count": float(timing.count),
                    "avg_s": timing.total_s / timing.count,
                    "max_s": timing.max_s,
                }
                for name, timing in self._timings.items()
                if timing.count
            }
            return MetricsSnapshot(counters=dict(self._counters), timings=timings)


metrics_store = MetricsStore()


def set_request_id(request_id: str) -> None:
    _request_id_ctx.set(request_id)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


def log_event(message: str, *, level: int = logging.INFO, **fields: str | None) -> None:
    unknown = set(fields) - set(EVENT_FIELDS)
    if unknown:
        raise TypeError(f"Unknown log fields: {', '.join(sorted(unknown))}")
    extra = {name: fields.get(name) for name in EVENT_FIELDS}
    extra["request_id"] = get_request_id()
    logging.getLogger(EVENT_LOGGER).log(level, message, extra=extra)


@contextmanager
def observe_timing(metric_name: str) -> Iterator[None]:
    start = time.perf_counter()
    try:
        yield
    finally:
        metrics_store.observe(metric_name, time.perf_counter() - start)
