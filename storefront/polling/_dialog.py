"""
Dialog projection — what the "waiting for payment" dialog shows.

Everything is derived from the session's attempt count, never from a timer
of its own, so the countdown cannot drift from the real budget.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from storefront.config import PollingPolicy
from storefront.polling._types import PollingSession

if TYPE_CHECKING:
    from storefront.polling._engine import PaymentPollingEngine


@dataclass(frozen=True, slots=True)
class DialogState:
    is_waiting: bool
    remaining_seconds: int
    attempts_label: str
    progress_percent: float

    @property
    def remaining_label(self) -> str:
        """Countdown as MM:SS."""
        minutes, seconds = divmod(self.remaining_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"


def project(
    session: PollingSession | None,
    policy: PollingPolicy | None = None,
) -> DialogState:
    """
    remaining = max_attempts × interval − attempt_count × interval

    No session reads as "not waiting, full budget".
    """
    policy = policy or PollingPolicy()
    attempts = session.attempt_count if session is not None else 0
    interval = policy.interval_seconds
    budget = policy.max_attempts * interval
    remaining = max(0, round(budget - attempts * interval))
    return DialogState(
        is_waiting=session is not None and session.is_polling,
        remaining_seconds=remaining,
        attempts_label=f"{attempts}/{policy.max_attempts}",
        progress_percent=min(100.0, (budget - remaining) / budget * 100),
    )


class DialogStateSync:
    """Read-only view of an engine's current session."""

    def __init__(self, engine: PaymentPollingEngine) -> None:
        self._engine = engine

    @property
    def state(self) -> DialogState:
        return project(self._engine.session, self._engine.policy)


__all__ = ("DialogState", "project", "DialogStateSync")
