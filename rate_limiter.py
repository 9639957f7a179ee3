import threading
import time
from collections import deque

UNKNOWN_CLIENT = 'unknown'


def client_identity(forwarded_for=None, remote_addr=None):
    """Pick the rate-limit key: first X-Forwarded-For hop, then the peer address."""
    if forwarded_for:
        first = forwarded_for.split(',')[0].strip()
        if first:
            return first
    return remote_addr or UNKNOWN_CLIENT


class SlidingWindowRateLimiter:
    """
    Per-client sliding-window limiter, process local.

    Every attempt is recorded, including rejected ones, so a client that
    keeps hammering stays blocked until it backs off for a full window.
    """

    def __init__(self, window_seconds=30.0, max_requests=15, clock=time.monotonic):
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self._clock = clock
        self._hits = {}  # {identity: deque of timestamps}
        self._last_sweep = None
        self._lock = threading.Lock()

    def allow(self, identity, now=None):
        """Record a request for identity and return True if it is admitted."""
        if now is None:
            now = self._clock()
        cutoff = now - self.window_seconds
        with self._lock:
            if self._last_sweep is None or now - self._last_sweep >= self.window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now
            hits = self._hits.setdefault(identity, deque())
            while hits and hits[0] <= cutoff:
                hits.popleft()
            hits.append(now)
            return len(hits) <= self.max_requests

    def _sweep(self, cutoff):
        # Drop clients whose newest hit has left the window
        stale = [k for k, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for k in stale:
            del self._hits[k]

    def tracked_identities(self):
        with self._lock:
            return list(self._hits)

    def reset(self):
        with self._lock:
            self._hits.clear()
