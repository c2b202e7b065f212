from __future__ import annotations

import logging
import random
from typing import List, Sequence, Set

from retrievle.core.state import HintError, HintOrder, HintResult

logger = logging.getLogger(__name__)


class HintDispenser:
    """
    Discloses a fixed list of hints one at a time.

    Behavior
    --------
    - SEQUENTIAL: hints come out in list order.
    - RANDOM: each call draws uniformly from the hints not disclosed yet, so
      every hint appears at most once.
    - Running out is reported as `HintError.NO_MORE_HINTS`; an empty list as
      `HintError.NO_HINTS_DEFINED`. Neither raises.
    """

    def __init__(
        self,
        hints: Sequence[str],
        order: HintOrder = HintOrder.SEQUENTIAL,
        seed: int | None = None,
    ) -> None:
        self.hints = tuple(hints)
        self.order = order
        self._rng = random.Random(seed)
        self._cursor = 0
        self._disclosed: Set[int] = set()
        self._shown: List[int] = []

    @property
    def remaining(self) -> int:
        if self.order is HintOrder.SEQUENTIAL:
            return len(self.hints) - self._cursor
        return len(self.hints) - len(self._disclosed)

    @property
    def disclosed(self) -> List[str]:
        """Hints given so far, in the order they were shown."""
        return [self.hints[i] for i in self._shown]

    def next(self) -> HintResult:
        if not self.hints:
            return HintResult(error=HintError.NO_HINTS_DEFINED)

        if self.order is HintOrder.SEQUENTIAL:
            if self._cursor >= len(self.hints):
                return HintResult(error=HintError.NO_MORE_HINTS)
            index = self._cursor
            self._cursor += 1
        else:
            if len(self._disclosed) >= len(self.hints):
                return HintResult(error=HintError.NO_MORE_HINTS)
            available = [i for i in range(len(self.hints)) if i not in self._disclosed]
            index = self._rng.choice(available)
            self._disclosed.add(index)

        self._shown.append(index)
        logger.debug("Disclosed hint %d (%s, %d left)", index, self.order.value, self.remaining)
        return HintResult(hint=self.hints[index])
