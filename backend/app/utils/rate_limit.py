"""Per-IP throttling for the chat endpoint and client address helpers.

Chat requests are counted per client IP in a one-minute sliding window.
Counters live in process memory, so each worker enforces its own limit.
"""

import ipaddress
import logging
import time
from collections import deque
from threading import Lock
from typing import Iterable, Optional

from fastapi import Request

from app.core.config import get_settings

logger = logging.getLogger(__name__)

CHAT_WINDOW_SECONDS = 60
# Idle IPs are swept at most this often, or at once when the table grows past the cap.
_SWEEP_EVERY_SECONDS = 60
_MAX_TRACKED_IPS = 50_000


class ChatRateLimiter:
    def __init__(
        self,
        *,
        window_seconds: int = CHAT_WINDOW_SECONDS,
        sweep_every_seconds: int = _SWEEP_EVERY_SECONDS,
        max_tracked: int = _MAX_TRACKED_IPS,
    ) -> None:
        self.window_seconds = window_seconds
        self._sweep_every = max(1, sweep_every_seconds)
        self._max_tracked = max_tracked
        self._hits: dict[str, deque[float]] = {}
        self._lock = Lock()
        self._swept_at = 0.0

    def hit(self, ip: str, per_minute: int) -> bool:
        """Count a chat request from *ip*; False once *per_minute* is used up."""
        if per_minute <= 0:
            return True
        now = time.monotonic()
        oldest_allowed = now - self.window_seconds
        with self._lock:
            if now - self._swept_at >= self._sweep_every or len(self._hits) > self._max_tracked:
                self._sweep(oldest_allowed)
                self._swept_at = now

            hits = self._hits.get(ip)
            if hits is None:
                hits = self._hits[ip] = deque()
            while hits and hits[0] <= oldest_allowed:
                hits.popleft()
            if len(hits) >= per_minute:
                return False
            hits.append(now)
            return True

    def tracked_ips(self) -> list[str]:
        with self._lock:
            return list(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
            self._swept_at = 0.0

    def _sweep(self, oldest_allowed: float) -> None:
        # Caller holds the lock.
        idle = [ip for ip, hits in self._hits.items() if not hits or hits[-1] <= oldest_allowed]
        for ip in idle:
            del self._hits[ip]


chat_limiter = ChatRateLimiter()


def check_chat_rate(request: Request) -> tuple[bool, str]:
    """Apply ``RATE_LIMIT_CHAT_PER_MIN`` to *request*; returns ``(allowed, client_ip)``."""
    settings = get_settings()
    ip = get_client_ip(request) or "unknown"
    if not settings.rate_limit_chat_enabled:
        return True, ip
    allowed = chat_limiter.hit(ip, settings.rate_limit_chat_per_min)
    if not allowed:
        logger.warning("Chat rate limit hit ip=%s limit=%s/min", ip, settings.rate_limit_chat_per_min)
    return allowed, ip


def ip_in_allowlist(ip: str, allowlist: Iterable[str]) -> bool:
    """True when *ip* equals an entry or falls inside a CIDR entry; junk entries never match."""
    try:
        address = ipaddress.ip_address(ip)
    except ValueError:
        return False
    for entry in allowlist:
        try:
            network = ipaddress.ip_network(entry.strip(), strict=False)
        except ValueError:
            continue
        if address in network:
            return True
    return False


def get_client_ip(request: Request, trusted_proxy_cidrs: Optional[list[str]] = None) -> Optional[str]:
    """Client address of *request*.

    Forwarded headers are honoured only when the direct peer is one of
    ``TRUSTED_PROXY_CIDRS``; anyone else could spoof them.
    """
    peer = request.client.host if request.client else None
    if trusted_proxy_cidrs is None:
        trusted_proxy_cidrs = get_settings().trusted_proxy_cidrs
    if not peer or not trusted_proxy_cidrs or not ip_in_allowlist(peer, trusted_proxy_cidrs):
        return peer

    real_ip = (request.headers.get("x-real-ip") or "").strip()
    if real_ip:
        return real_ip
    hops = [hop.strip() for hop in (request.headers.get("x-forwarded-for") or "").split(",") if hop.strip()]
    # The last hop was appended by our own proxy.
    return hops[-1] if hops else peer
