"""Shared connection state for one APIC: endpoint, credentials, token cache and retry policy."""

import threading
import time
from dataclasses import dataclass, field

from acigate.backoff import (
    DEFAULT_DELAY_FACTOR,
    DEFAULT_MAX_DELAY,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MIN_DELAY,
)


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = DEFAULT_MAX_RETRIES
    min_delay: float = DEFAULT_MIN_DELAY
    max_delay: float = DEFAULT_MAX_DELAY
    delay_factor: float = DEFAULT_DELAY_FACTOR


@dataclass
class SessionState:
    """Mutable state shared by reference between the client, authenticator and executor.

    ``auth`` is the ``(token, last_refresh)`` pair as one tuple. It is replaced
    whole by ``store_token`` while ``lock`` is held, so readers get a consistent
    pair from a single attribute load without waiting on a login in progress.
    ``last_refresh`` is a ``time.monotonic()`` reading.
    """

    url: str
    username: str
    password: str = field(repr=False)
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    logging: bool = False
    auth: tuple[str, float] = field(default=("", 0.0), repr=False)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def __post_init__(self):
        self.url = self.url.rstrip("/")

    @property
    def token(self) -> str:
        return self.auth[0]

    @property
    def last_refresh(self) -> float:
        return self.auth[1]

    def store_token(self, token: str) -> None:
        """Record a freshly issued token. Caller must hold ``lock``."""
        self.auth = (token, time.monotonic())

    def snapshot(self) -> tuple[str, float]:
        """Read token and last-refresh as one consistent pair."""
        return self.auth

    def token_age(self) -> float | None:
        """Seconds since the last login/refresh, or None before the first login."""
        token, last_refresh = self.auth
        if not token:
            return None
        return time.monotonic() - last_refresh
