"""
Deferred Action Queue

Holds cosmetic actions (phase flips after a glow, glow removal) that should
run after a fixed delay. Each action carries the generation token that was
current when it was queued; when it comes due it only runs if that token is
still current, so work queued for an earlier puzzle or phase is dropped.
"""

import heapq
import itertools
import time
from typing import Callable, Hashable, List, Optional, Tuple


class DeferredActionQueue:
    """Time-ordered queue of generation-keyed callbacks."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._heap: List[Tuple[float, int, Hashable, Callable[[], None]]] = []
        self._sequence = itertools.count()

    @property
    def pending(self) -> int:
        return len(self._heap)

    def schedule(self, delay: float, callback: Callable[[], None], token: Hashable) -> None:
        """Queue ``callback`` to run ``delay`` seconds from now."""
        due_at = self.clock() + max(delay, 0.0)
        heapq.heappush(self._heap, (due_at, next(self._sequence), token, callback))

    def next_due(self) -> Optional[float]:
        """Clock time of the earliest queued action, or None if empty."""
        return self._heap[0][0] if self._heap else None

    def run_due(self, is_current: Callable[[Hashable], bool], now: Optional[float] = None) -> int:
        """
        Run every action that is due.

        Args:
            is_current: Predicate telling whether a token still applies
            now: Clock reading to compare against (defaults to the clock)

        Returns:
            int: Number of actions that actually ran
        """
        if now is None:
            now = self.clock()

        fired = 0
        while self._heap and self._heap[0][0] <= now:
            _, _, token, callback = heapq.heappop(self._heap)
            if not is_current(token):
                continue
            callback()
            fired += 1
        return fired

    def clear(self) -> None:
        self._heap.clear()
