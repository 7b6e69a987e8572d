"""
Configuration — polling policy and API client settings.

    from storefront.config import PollingPolicy, ApiConfig

    policy = PollingPolicy().with_interval(seconds=2).with_max_attempts(30)
    api = ApiConfig.from_env()

Both are immutable; each `with_*` returns a new instance.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta


# ═══════════════════════════════════════════════════════════════════════════════
# Polling Policy
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PollingPolicy:
    """
    Cadence and budgets of the payment-confirmation poll.

    interval: Fixed time between two ticks.
    max_attempts: Tick budget. The tick that reaches it declares timeout
                  without looking the payment up.
    max_retries: Consecutive transport failures tolerated; one more fails
                 the session.

    Example:
        PollingPolicy()                       # 5s × 180 ticks, 3 retries
        PollingPolicy().with_interval(seconds=1).with_max_retries(5)
    """

    interval: timedelta = timedelta(seconds=5)
    max_attempts: int = 180
    max_retries: int = 3

    def __post_init__(self) -> None:
        if self.interval <= timedelta(0):
            raise ValueError(f"interval must be positive, got {self.interval}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")

    @property
    def interval_seconds(self) -> float:
        return self.interval.total_seconds()

    @property
    def budget(self) -> timedelta:
        """Total waiting time the buyer is promised (15 minutes by default)."""
        return self.interval * self.max_attempts

    def with_interval(
        self,
        *,
        seconds: float | None = None,
        delta: timedelta | None = None,
    ) -> PollingPolicy:
        if delta is None:
            delta = timedelta(seconds=seconds or 0)
        return PollingPolicy(
            interval=delta,
            max_attempts=self.max_attempts,
            max_retries=self.max_retries,
        )

    def with_max_attempts(self, attempts: int) -> PollingPolicy:
        return PollingPolicy(
            interval=self.interval,
            max_attempts=attempts,
            max_retries=self.max_retries,
        )

    def with_max_retries(self, retries: int) -> PollingPolicy:
        return PollingPolicy(
            interval=self.interval,
            max_attempts=self.max_attempts,
            max_retries=retries,
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> PollingPolicy:
        """
        Read overrides from the environment.

        STOREFRONT_POLL_INTERVAL      seconds between ticks
        STOREFRONT_POLL_MAX_ATTEMPTS  tick budget
        STOREFRONT_POLL_MAX_RETRIES   consecutive transport failures tolerated
        """
        env = os.environ if environ is None else environ
        policy = cls()
        if (raw := env.get("STOREFRONT_POLL_INTERVAL")) is not None:
            policy = policy.with_interval(seconds=float(raw))
        if (raw := env.get("STOREFRONT_POLL_MAX_ATTEMPTS")) is not None:
            policy = policy.with_max_attempts(int(raw))
        if (raw := env.get("STOREFRONT_POLL_MAX_RETRIES")) is not None:
            policy = policy.with_max_retries(int(raw))
        return policy


# ═══════════════════════════════════════════════════════════════════════════════
# API Client Settings
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ApiConfig:
    """Where the storefront backend lives and how to authenticate to it."""

    base_url: str = "http://localhost:3000"
    timeout: float = 10.0
    token: str | None = None

    def with_token(self, token: str | None) -> ApiConfig:
        return ApiConfig(base_url=self.base_url, timeout=self.timeout, token=token)

    @property
    def headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ApiConfig:
        """
        STOREFRONT_API_URL      backend base URL
        STOREFRONT_API_TIMEOUT  request timeout in seconds
        STOREFRONT_API_TOKEN    bearer token of the signed-in buyer
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            base_url=env.get("STOREFRONT_API_URL", defaults.base_url),
            timeout=float(env.get("STOREFRONT_API_TIMEOUT", defaults.timeout)),
            token=env.get("STOREFRONT_API_TOKEN") or None,
        )


__all__ = ("PollingPolicy", "ApiConfig")
