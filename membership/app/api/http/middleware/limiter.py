"""Rate limiting for the credential endpoints (login, forgot-password)."""

from __future__ import annotations

import asyncio
import time
from collections import deque
from collections.abc import Awaitable, Callable
from functools import lru_cache
from typing import Any

from fastapi import HTTPException, Request, Response
from loguru import logger

from membership.app.runtime.context import get_config

RateLimiterType = Callable[[Request, Response], Awaitable[Any]]

# (requests, window_ms, per_endpoint, per_method) -> limiter
RateLimiterFactory = Callable[[int, int, bool, bool], RateLimiterType]

_local_limiters: list[DefaultLocalRateLimiter] = []
_factory_counter: int = 0  # bumped on reconfigure so cached limiters are dropped

# Idle keys are pruned at most this often
_PRUNE_INTERVAL_SECONDS = 60.0


def client_identity(request: Request) -> str:
    """First X-Forwarded-For hop, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for") if request.headers else None
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "anonymous"


class DefaultLocalRateLimiter:
    """Sliding-window limiter held in process memory.

    Each key keeps the timestamps of its accepted requests inside the window.
    Keys are the client identity, optionally combined with the HTTP method and
    the route template.
    """

    def __init__(
        self, times: int, milliseconds: int, per_endpoint: bool, per_method: bool
    ) -> None:
        self._times = times
        self._window = milliseconds / 1000
        self._per_endpoint = per_endpoint
        self._per_method = per_method
        self._hits: dict[str, deque[float]] = {}
        self._lock = asyncio.Lock()
        self._next_prune = time.monotonic() + _PRUNE_INTERVAL_SECONDS

    async def __call__(self, request: Request, response: Response) -> Any:
        await self._throttle(self._key(request))

    def _key(self, request: Request) -> str:
        parts = [f"ip:{client_identity(request)}"]
        if self._per_method:
            parts.append(request.method)
        if self._per_endpoint:
            route = request.scope.get("route")
            parts.append((getattr(route, "path", None) or request.url.path).rstrip("/"))
        return ":".join(parts)

    def _prune(self, now: float) -> None:
        if now < self._next_prune:
            return
        self._next_prune = now + _PRUNE_INTERVAL_SECONDS
        cutoff = now - self._window
        for key in [k for k, hits in self._hits.items() if not hits or hits[-1] <= cutoff]:
            del self._hits[key]

    async def cleanup(self) -> None:
        async with self._lock:
            tracked = len(self._hits)
            self._hits.clear()
        logger.debug("Cleared local rate limiter ({} keys)", tracked)

    async def _throttle(self, key: str) -> None:
        async with self._lock:
            now = time.monotonic()
            self._prune(now)

            hits = self._hits.setdefault(key, deque())
            while hits and hits[0] <= now - self._window:
                hits.popleft()

            if len(hits) >= self._times:
                retry_after = max(1, int(self._window - (now - hits[0])))
                logger.bind(limiter_key=key, retry_after=retry_after).warning(
                    "Rate limit exceeded"
                )
                raise HTTPException(
                    status_code=429,
                    detail="Too Many Requests",
                    headers={"Retry-After": str(retry_after)},
                )
            hits.append(now)


def _local_rate_limiter_factory(
    times: int, milliseconds: int, per_endpoint: bool, per_method: bool
) -> RateLimiterType:
    limiter = DefaultLocalRateLimiter(times, milliseconds, per_endpoint, per_method)
    _local_limiters.append(limiter)  # Track for cleanup
    return limiter


_rate_limiter_factory: RateLimiterFactory = _local_rate_limiter_factory


def configure_rate_limiter(
    limiter_factory: RateLimiterFactory | None = None,
) -> None:
    """Configure which limiter implementation should be used."""

    global _rate_limiter_factory, _factory_counter

    # Clear cache when factory changes
    _create_rate_limiter.cache_clear()
    _factory_counter += 1

    _rate_limiter_factory = limiter_factory or _local_rate_limiter_factory
    logger.info("Rate limiter configured")


@lru_cache(maxsize=100)
def _create_rate_limiter(
    requests: int,
    window_ms: int,
    per_endpoint: bool,
    per_method: bool,
    factory_id: int,  # Use factory ID instead of factory itself
) -> RateLimiterType:
    """Create a rate limiter with specific configuration (cached)."""
    return _rate_limiter_factory(requests, window_ms, per_endpoint, per_method)


def get_rate_limiter(
    requests: int | None = None,
    window_ms: int | None = None,
) -> RateLimiterType:
    """Get a rate limiter instance for the given configuration."""
    config = get_config()
    final_requests = requests if requests is not None else config.rate_limiter.requests
    final_window_ms = (
        window_ms if window_ms is not None else config.rate_limiter.window_ms
    )

    return _create_rate_limiter(
        final_requests,
        final_window_ms,
        config.rate_limiter.per_endpoint,
        config.rate_limiter.per_method,
        _factory_counter,
    )


def rate_limit(
    requests: int | None = None,
    window_ms: int | None = None,
) -> RateLimiterType:
    """Return a dependency enforcing request quotas.

    Defaults come from the ``rate_limiter`` config section at request time.
    """

    async def dependency(request: Request, response: Response) -> Any:
        if not get_config().rate_limiter.enabled:
            return None
        limiter = get_rate_limiter(requests, window_ms)
        return await limiter(request, response)

    return dependency


async def close_rate_limiter() -> None:
    """Clean up rate limiter resources and clear caches."""
    _create_rate_limiter.cache_clear()
    logger.info("Cleared rate limiter cache")

    if _local_limiters:
        logger.info(f"Cleaning up {len(_local_limiters)} local rate limiter instances")
        for limiter in _local_limiters:
            await limiter.cleanup()
        _local_limiters.clear()

    logger.info("Rate limiter cleanup completed")
