"""Per-client rate limiting and request body limits for WSGI applications."""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator

MAX_VISITORS = 10_000
CLEANUP_INTERVAL = 60.0
IDLE_TIMEOUT = 180.0

REJECT_STATUS = "429 Too Many Requests"
REJECT_BODY = (
    b'{"error":"rate_limit_exceeded",'
    b'"error_description":"Too many requests. Please retry later."}'
)

Clock = Callable[[], float]
WSGIApp = Callable[[dict, Callable[..., Any]], Iterable[bytes]]


class TokenBucket:
    """A token bucket that starts full and refills at ``rate`` tokens per second."""

    def __init__(self, rate: float, burst: int, clock: Clock = time.monotonic) -> None:
        self.rate = float(rate)
        self.burst = burst
        self._clock = clock
        self._tokens = float(burst)
        self._last = clock()
        self._lock = threading.Lock()

    def allow(self) -> bool:
        """Take one token if one is available; report whether it was taken."""
        with self._lock:
            if math.isinf(self.rate):
                return True
            now = self._clock()
            elapsed = max(0.0, now - self._last)
            self._last = now
            self._tokens = min(float(self.burst), self._tokens + elapsed * self.rate)
            if self._tokens >= 1.0:
                self._tokens -= 1.0
                return True
            return False


@dataclass
class _Visitor:
    bucket: TokenBucket
    last_seen: float


class RateLimiter:
    """Rate limits requests per client IP, each IP with its own token bucket.

    Idle clients are dropped after ``idle_timeout`` seconds; the sweep runs at
    most once every ``cleanup_interval`` seconds. New clients are refused once
    ``max_visitors`` are being tracked.
    """

    def __init__(
        self,
        rps: float,
        burst: int,
        *,
        max_visitors: int = MAX_VISITORS,
        clock: Clock = time.monotonic,
        cleanup_interval: float = CLEANUP_INTERVAL,
        idle_timeout: float = IDLE_TIMEOUT,
    ) -> None:
        self.rate = float(rps)
        self.burst = burst
        self.max_visitors = max_visitors
        self.cleanup_interval = cleanup_interval
        self.idle_timeout = idle_timeout
        self._clock = clock
        self._visitors: dict[str, _Visitor] = {}
        self._lock = threading.Lock()
        self._last_prune = clock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._visitors)

    def allow(self, ip: str) -> bool:
        """Report whether a request from ``ip`` may go ahead now."""
        with self._lock:
            now = self._clock()
            if now - self._last_prune >= self.cleanup_interval:
                self._prune_locked(now)
            visitor = self._visitors.get(ip)
            if visitor is None:
                if len(self._visitors) >= self.max_visitors:
                    return False
                visitor = _Visitor(TokenBucket(self.rate, self.burst, self._clock), now)
                self._visitors[ip] = visitor
            else:
                visitor.last_seen = now
            bucket = visitor.bucket
        return bucket.allow()

    def prune(self) -> int:
        """Forget clients idle for longer than the idle timeout; return how many."""
        with self._lock:
            return self._prune_locked(self._clock())

    def _prune_locked(self, now: float) -> int:
        stale = [
            ip for ip, v in self._visitors.items() if now - v.last_seen > self.idle_timeout
        ]
        for ip in stale:
            del self._visitors[ip]
        self._last_prune = now
        return len(stale)

    def middleware(self, app: WSGIApp) -> WSGIApp:
        """Wrap a WSGI application so over-limit clients get a 429 response."""

        def limited(environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
            if not self.allow(extract_client_ip(environ)):
                return _reject(start_response)
            return app(environ, start_response)

        return limited


def extract_client_ip(environ: dict) -> str:
    """Leftmost X-Forwarded-For address, falling back to REMOTE_ADDR."""
    forwarded = environ.get("HTTP_X_FORWARDED_FOR", "")
    if forwarded:
        return forwarded.split(",", 1)[0].strip()
    return environ.get("REMOTE_ADDR", "")


def _reject(start_response: Callable[..., Any]) -> list[bytes]:
    start_response(
        REJECT_STATUS,
        [
            ("Content-Type", "application/json"),
            ("Retry-After", "1"),
            ("Content-Length", str(len(REJECT_BODY))),
        ],
    )
    return [REJECT_BODY]


class _BodyTooLarge(ValueError):
    """Raised when a request body goes past its size limit."""


class _LimitedInput:
    """A wsgi.input wrapper that fails once more than ``limit`` bytes are read."""

    def __init__(self, stream: Any, limit: int) -> None:
        self._stream = stream
        self._remaining = limit

    def _take(self, data: bytes) -> bytes:
        if len(data) > self._remaining:
            self._remaining = 0
            raise _BodyTooLarge("request body too large")
        self._remaining -= len(data)
        return data

    def _size(self, size: int | None) -> int:
        if size is None or size < 0:
            return self._remaining + 1
        return min(size, self._remaining + 1)

    def read(self, size: int | None = -1) -> bytes:
        return self._take(self._stream.read(self._size(size)))

    def readline(self, size: int | None = -1) -> bytes:
        return self._take(self._stream.readline(self._size(size)))

    def readlines(self, hint: int | None = -1) -> list[bytes]:
        return list(self)

    def __iter__(self) -> Iterator[bytes]:
        while True:
            line = self.readline()
            if not line:
                return
            yield line


def max_bytes_middleware(max_bytes: int, app: WSGIApp) -> WSGIApp:
    """Wrap a WSGI application so reading more than ``max_bytes`` raises ValueError."""

    def limited(environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
        stream = environ.get("wsgi.input")
        if stream is not None:
            environ = dict(environ)
            environ["wsgi.input"] = _LimitedInput(stream, max_bytes)
        return app(environ, start_response)

    return limited