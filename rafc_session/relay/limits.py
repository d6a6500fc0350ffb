"""Per-connection frame budgets for the relay."""

from __future__ import annotations

import time
import logging
import collections
from collections.abc import Callable, Iterable

from rafc_session.errors import RateLimitError
from rafc_session.config.session import MSG_FORCE_LOGOUT

logger = logging.getLogger(__name__)

TimeFn = Callable[[], float]

DEFAULT_UNTHROTTLED = frozenset({MSG_FORCE_LOGOUT})


class RelayFrameBudget:
    """Rolling-window budget for the frames one connection relays on a channel.

    Every message kind (the frame body, e.g. ``activityPing``) gets its own
    window, so a chatty kind cannot starve the others. Kinds in `unthrottled`
    always pass: a logout must reach every tab. A non-positive limit or
    window disables the budget.
    """

    def __init__(
        self,
        channel: str,
        *,
        limit: int,
        window_seconds: float,
        unthrottled: Iterable[str] = DEFAULT_UNTHROTTLED,
        now_fn: TimeFn | None = None,
    ) -> None:
        self.channel = channel
        self.limit = max(0, int(limit))
        self.window_seconds = max(0.0, float(window_seconds))
        self.unthrottled = frozenset(unthrottled)
        self._now = now_fn or time.monotonic
        self._sent: dict[str, collections.deque[float]] = {}
        self._rejected: collections.Counter[str] = collections.Counter()

    @property
    def enabled(self) -> bool:
        return self.limit > 0 and self.window_seconds > 0

    def rejected(self, kind: str) -> int:
        return self._rejected[kind]

    def in_window(self, kind: str) -> int:
        sent = self._sent.get(kind)
        if not sent:
            return 0
        self._expire(sent, self._now())
        return len(sent)

    def _expire(self, sent: collections.deque[float], now: float) -> None:
        cutoff = now - self.window_seconds
        while sent and sent[0] <= cutoff:
            sent.popleft()

    def admit(self, kind: str) -> None:
        """Record one `kind` frame or raise RateLimitError if its window is full."""
        if not self.enabled or kind in self.unthrottled:
            return

        now = self._now()
        sent = self._sent.setdefault(kind, collections.deque())
        self._expire(sent, now)

        if len(sent) >= self.limit:
            self._rejected[kind] += 1
            if self._rejected[kind] == 1:
                logger.info("throttling %r frames on %s (%d per %.0fs)", kind, self.channel, self.limit, self.window_seconds)
            raise RateLimitError(
                retry_in=max(0.0, sent[0] + self.window_seconds - now),
                limit=self.limit,
                window_seconds=self.window_seconds,
                channel=self.channel,
                kind=kind,
            )

        sent.append(now)


__all__ = ["DEFAULT_UNTHROTTLED", "RelayFrameBudget"]
