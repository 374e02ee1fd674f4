"""
Per-client fixed-window rate limiting.

Each client key gets a window that starts on its first request. Once more
than ``window`` seconds have passed since the window start, the window is
restarted by the next request. Bursts straddling a window edge can admit up
to twice the limit; that approximation is intentional.
"""

import math
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

UNKNOWN_CLIENT = "unknown"


@dataclass
class RateWindow:
    """Request count since ``window_start``."""
    window_start: float
    count: int = 0


@dataclass(frozen=True)
class RateDecision:
    allowed: bool
    retry_after: int = 0


def resolve_client_key(headers: Mapping[str, str], peer: Optional[str]) -> str:
    """
    Identify the caller for rate limiting.

    The first X-Forwarded-For entry wins, then the socket peer address. The
    value is only ever used as a map key, so it is not validated as an IP.

    Args:
        headers: Request headers (case-insensitive mapping)
        peer: Transport-level peer address, if known

    Returns:
        Client key string
    """
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if peer:
        return peer
    return UNKNOWN_CLIENT


class RateLimiter:
    """
    Fixed-window limiter keyed by client.

    The window table is capped at ``max_clients`` entries; the client seen
    least recently is dropped first, which restarts its window if it returns.
    """

    def __init__(
        self,
        max_requests: int,
        window: float,
        max_clients: int = 10000,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize limiter.

        Args:
            max_requests: Requests admitted per window
            window: Window length in seconds
            max_clients: Maximum number of tracked client windows
            clock: Time source returning seconds
        """
        self.max_requests = max_requests
        self.window = window
        self.max_clients = max_clients
        self._clock = clock
        self._windows: "OrderedDict[str, RateWindow]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._windows)

    def get_window(self, client_key: str) -> Optional[RateWindow]:
        return self._windows.get(client_key)

    def admit(self, client_key: str, now: Optional[float] = None) -> RateDecision:
        """
        Count a request from ``client_key`` and decide whether to admit it.

        The request is counted before the threshold check, so the request
        that crosses the limit is itself denied.

        Args:
            client_key: Caller identity from resolve_client_key
            now: Current time in seconds, defaults to the limiter clock

        Returns:
            RateDecision; retry_after is set only on denial
        """
        if now is None:
            now = self._clock()

        state = self._windows.get(client_key)
        if state is None:
            state = RateWindow(window_start=now)
            self._windows[client_key] = state
            while len(self._windows) > self.max_clients:
                self._windows.popitem(last=False)
        else:
            self._windows.move_to_end(client_key)

        if now - state.window_start > self.window:
            state.window_start = now
            state.count = 0

        state.count += 1

        if state.count > self.max_requests:
            retry_after = math.ceil(state.window_start + self.window - now)
            return RateDecision(allowed=False, retry_after=max(retry_after, 0))

        return RateDecision(allowed=True)
