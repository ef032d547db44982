"""Polled debouncer keyed by token.

There are no timer threads: the owner calls ``run_due()`` from its event
loop and uses ``next_due_in()`` as its input timeout. Each token keeps a
generation counter, so rescheduling (even from inside the callback being
run) supersedes the earlier request instead of stacking another one.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class _Pending:
    due: float
    generation: int
    fn: Callable[[], None]


class Debouncer:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._pending: dict[str, _Pending] = {}
        self._generations: dict[str, int] = {}

    def _bump(self, token: str) -> int:
        generation = self._generations.get(token, 0) + 1
        self._generations[token] = generation
        return generation

    def schedule(self, token: str, delay_ms: float, fn: Callable[[], None]) -> None:
        """Run ``fn`` once ``delay_ms`` after the latest call for ``token``."""
        generation = self._bump(token)
        self._pending[token] = _Pending(self._clock() + max(0.0, delay_ms) / 1000.0, generation, fn)

    def cancel(self, token: str) -> bool:
        self._bump(token)
        return self._pending.pop(token, None) is not None

    def cancel_all(self) -> None:
        for token in list(self._pending):
            self.cancel(token)

    def is_pending(self, token: str) -> bool:
        return token in self._pending

    def flush(self, token: str) -> bool:
        """Run the pending callback for ``token`` now; return whether one ran."""
        pending = self._pending.pop(token, None)
        if pending is None:
            return False
        self._run(token, pending)
        return True

    def run_due(self) -> int:
        """Run every callback whose deadline has passed; return how many ran."""
        now = self._clock()
        due = [(token, pending) for token, pending in self._pending.items() if pending.due <= now]
        ran = 0
        for token, pending in sorted(due, key=lambda item: item[1].due):
            current = self._pending.get(token)
            if current is not pending:
                continue
            del self._pending[token]
            self._run(token, pending)
            ran += 1
        return ran

    def _run(self, token: str, pending: _Pending) -> None:
        if pending.generation != self._generations.get(token):
            logger.debug("dropping stale debounced call for %s", token)
            return
        pending.fn()

    def next_due_in(self) -> int | None:
        """Milliseconds until the earliest pending callback, or ``None``."""
        if not self._pending:
            return None
        earliest = min(pending.due for pending in self._pending.values())
        return max(0, int((earliest - self._clock()) * 1000.0 + 0.999))
